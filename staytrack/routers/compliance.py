"""Modules D & E: Compliance status, trip validation and the daily check trigger."""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from staytrack.config import get_settings
from staytrack.database import get_db
from staytrack.dependencies import get_policy_registry, get_traveler
from staytrack.models.traveler import Traveler
from staytrack.schemas.compliance import CountryResultResponse, TripValidationInput, TripValidationResponse
from staytrack.services.compliance import evaluate, evaluate_all
from staytrack.services.ledger_store import load_ledger
from staytrack.services.policy_registry import PolicyRegistry
from staytrack.services.stay_monitor import run_compliance_check
from staytrack.services.trip_validator import validate_trip

router = APIRouter(tags=["compliance"])
settings = get_settings()


def _nationality(traveler: Traveler) -> str:
    return traveler.nationality or settings.default_nationality


@router.get("/travelers/{traveler_id}/compliance", response_model=dict[str, CountryResultResponse])
def compliance_overview(
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    traveler: Traveler = Depends(get_traveler),
    registry: PolicyRegistry = Depends(get_policy_registry),
):
    results = evaluate_all(
        load_ledger(db, traveler.id),
        _nationality(traveler),
        reference_date or date.today(),
        registry=registry,
    )
    return {code: CountryResultResponse.from_result(r) for code, r in results.items()}


@router.get("/travelers/{traveler_id}/compliance/{jurisdiction_code}", response_model=CountryResultResponse)
def compliance_for_jurisdiction(
    jurisdiction_code: str,
    reference_date: date | None = Query(None, description="Defaults to today"),
    anchor_date: date | None = Query(None, description="Visa issuance date for visa_validity policies"),
    db: Session = Depends(get_db),
    traveler: Traveler = Depends(get_traveler),
    registry: PolicyRegistry = Depends(get_policy_registry),
):
    result = evaluate(
        load_ledger(db, traveler.id),
        jurisdiction_code,
        _nationality(traveler),
        reference_date or date.today(),
        registry=registry,
        anchor_date=anchor_date,
    )
    if not result:
        raise HTTPException(status_code=404, detail=f"No stay policy for {jurisdiction_code}")
    return CountryResultResponse.from_result(result)


@router.post("/travelers/{traveler_id}/trips/validate", response_model=TripValidationResponse)
def validate_planned_trip(
    data: TripValidationInput,
    db: Session = Depends(get_db),
    traveler: Traveler = Depends(get_traveler),
    registry: PolicyRegistry = Depends(get_policy_registry),
):
    validation = validate_trip(
        load_ledger(db, traveler.id),
        data.planned_entry,
        data.planned_exit,
        data.jurisdiction_code,
        _nationality(traveler),
        registry=registry,
        anchor_date=data.anchor_date,
    )
    if not validation:
        raise HTTPException(status_code=404, detail=f"No stay policy for {data.jurisdiction_code}")
    return TripValidationResponse.from_validation(validation)


@router.post("/compliance/run-check")
def trigger_compliance_check(
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    registry: PolicyRegistry = Depends(get_policy_registry),
):
    """Manually run the daily compliance check. Records warning-level changes."""
    alerts = run_compliance_check(db, registry, reference_date)
    return {
        "status": "ok",
        "alerts": [
            {
                "traveler_id": a.traveler_id,
                "jurisdiction_code": a.jurisdiction_code,
                "previous_level": a.previous_level.value if a.previous_level else None,
                "warning_level": a.warning_level.value,
                "days_used": a.days_used,
            }
            for a in alerts
        ],
    }
