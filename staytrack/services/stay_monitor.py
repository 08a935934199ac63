"""Module G: Daily compliance check.

Evaluates every traveler's jurisdictions and appends a ComplianceAlert whenever the
warning level differs from the last one recorded. Delivering the alert is left to
whatever consumes the table; here transitions are only logged.
"""
import logging
from datetime import date

from sqlalchemy.orm import Session

from staytrack.config import get_settings
from staytrack.database import SessionLocal
from staytrack.domain import WarningLevel
from staytrack.models.compliance_alert import ComplianceAlert
from staytrack.models.traveler import Traveler
from staytrack.services.compliance import evaluate_all
from staytrack.services.ledger_store import load_ledger, load_registry
from staytrack.services.policy_registry import PolicyRegistry

settings = get_settings()
log = logging.getLogger("uvicorn.error")

ALERT_LEVELS = (WarningLevel.warning, WarningLevel.danger)


def _last_alert(db: Session, traveler_id: int, jurisdiction_code: str) -> ComplianceAlert | None:
    return (
        db.query(ComplianceAlert)
        .filter(
            ComplianceAlert.traveler_id == traveler_id,
            ComplianceAlert.jurisdiction_code == jurisdiction_code,
        )
        .order_by(ComplianceAlert.id.desc())
        .first()
    )


def check_traveler(
    db: Session,
    traveler: Traveler,
    registry: PolicyRegistry,
    reference_date: date,
) -> list[ComplianceAlert]:
    """Record level transitions for one traveler. The first check only records non-safe levels."""
    nationality = traveler.nationality or settings.default_nationality
    results = evaluate_all(load_ledger(db, traveler.id), nationality, reference_date, registry=registry)

    alerts = []
    for code, result in results.items():
        status = result.status
        last = _last_alert(db, traveler.id, code)
        previous = last.warning_level if last else None
        if previous == status.warning_level:
            continue
        if previous is None and status.warning_level == WarningLevel.safe:
            continue

        alert = ComplianceAlert(
            traveler_id=traveler.id,
            jurisdiction_code=code,
            warning_level=status.warning_level,
            previous_level=previous,
            days_used=status.days_used,
            days_remaining=status.days_remaining,
            reference_date=reference_date,
        )
        db.add(alert)
        alerts.append(alert)

        level = logging.WARNING if status.warning_level in ALERT_LEVELS else logging.INFO
        log.log(
            level,
            "Traveler %s in %s: %s -> %s (%d used, %d remaining)",
            traveler.id,
            code,
            previous.value if previous else "none",
            status.warning_level.value,
            status.days_used,
            status.days_remaining,
        )
    return alerts


def run_compliance_check(db: Session, registry: PolicyRegistry, reference_date: date | None = None) -> list[ComplianceAlert]:
    today = reference_date or date.today()
    alerts: list[ComplianceAlert] = []
    for traveler in db.query(Traveler).order_by(Traveler.id).all():
        alerts.extend(check_traveler(db, traveler, registry, today))
    db.commit()
    return alerts


def run_compliance_check_job() -> None:
    """Run once per day (or on demand) with its own session."""
    if not settings.compliance_check_enabled:
        return
    db = SessionLocal()
    try:
        alerts = run_compliance_check(db, load_registry(db))
        log.info("Compliance check finished: %d warning-level change(s).", len(alerts))
    finally:
        db.close()
