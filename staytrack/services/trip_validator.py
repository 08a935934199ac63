"""Module E: Validate a planned trip against the recorded stays."""
from __future__ import annotations

import dataclasses
from datetime import date

from staytrack.domain import StayRecord, TripValidation
from staytrack.services.compliance import STRATEGIES, evaluate_policy
from staytrack.services.date_window import as_date, days_between_inclusive, shift_days
from staytrack.services.policy_registry import PolicyRegistry, default_registry
from staytrack.services.stay_ledger import StayLedger

PLANNED_TRIP_ID = "planned"
NEAR_LIMIT_RATIO = 0.8


def validate_trip(
    ledger: StayLedger,
    planned_entry: date,
    planned_exit: date,
    jurisdiction_code: str,
    nationality: str | None,
    *,
    registry: PolicyRegistry | None = None,
    anchor_date: date | None = None,
) -> TripValidation | None:
    """Projected usage if the trip were taken. The given ledger is left untouched."""
    registry = registry or default_registry()
    policy = registry.get_policy(jurisdiction_code, nationality)
    if policy is None:
        return None

    entry = as_date(planned_entry)
    exit_ = as_date(planned_exit)
    cap = policy.effective_cap
    code = policy.jurisdiction_code

    if exit_ < entry:
        return TripValidation(
            jurisdiction_code=code,
            is_valid=False,
            projected_days_used=0,
            max_allowed_days=cap,
            warnings=("The planned exit date is before the planned entry date.",),
        )

    warnings: list[str] = []
    existing = []
    for record in ledger:
        if record.is_open and record.jurisdiction_code == code and record.entry_date < entry:
            # The stay in progress is taken to end the day before the planned entry
            closed_on = shift_days(entry, -1)
            record = dataclasses.replace(record, exit_date=closed_on)
            warnings.append(f"The stay still open since {record.entry_date} is assumed to end on {closed_on}.")
        existing.append(record)

    planned = StayRecord(id=PLANNED_TRIP_ID, jurisdiction_code=code, entry_date=entry, exit_date=exit_)
    hypothetical = StayLedger(existing).with_record(planned)

    for issue in hypothetical.integrity_issues(code):
        if PLANNED_TRIP_ID in issue.record_ids:
            warnings.append("The planned trip overlaps a stay that is already recorded.")
            break

    result = evaluate_policy(policy, hypothetical, exit_, anchor_date)
    projected = result.status.days_used

    # The limit must hold on every day of the trip, not only on the last one
    peak = projected
    if policy.is_windowed:
        strategy = STRATEGIES[policy.calculation_method]
        records = hypothetical.as_of(exit_).records_for(code)
        for offset in range(days_between_inclusive(entry, exit_) - 1):
            day = shift_days(entry, offset)
            peak = max(peak, strategy.usage(policy, records, day, anchor_date).days_used)

    is_valid = projected <= cap and peak <= cap
    if projected > cap:
        warnings.append(
            f"After this trip you would have used {projected} of {cap} allowed days in {policy.jurisdiction_name}."
        )
    elif peak > cap:
        warnings.append(
            f"During this trip you would reach {peak} of {cap} allowed days in {policy.jurisdiction_name}."
        )
    elif projected > cap * NEAR_LIMIT_RATIO:
        warnings.append(f"This trip brings you close to the limit: {projected} of {cap} days.")

    return TripValidation(
        jurisdiction_code=code,
        is_valid=is_valid,
        projected_days_used=projected,
        max_allowed_days=cap,
        warnings=tuple(warnings),
        peak_days_used=peak,
        status=result.status,
    )
