"""Module D: Compliance calculator.

Each calculation method is a small strategy. All of them clip stay records to a
period and sum the inclusive day counts; they differ only in how the period is
placed, when the traveler may re-enter, and which violations apply.

Days are counted up to the reference date only: a stay that is logged with a
future exit date has not been used yet.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from staytrack.domain import (
    CalculationMethod,
    CountryResult,
    Severity,
    StayPolicy,
    StayRecord,
    StayStatus,
    StayViolation,
    ViolationType,
    WarningLevel,
)
from staytrack.services.date_window import (
    DateRange,
    as_date,
    calendar_year,
    days_between_inclusive,
    intersect,
    shift_days,
    trailing_window,
)
from staytrack.services.policy_registry import PolicyRegistry, default_registry
from staytrack.services.recommendations import generate_recommendations
from staytrack.services.stay_ledger import StayLedger, record_range

logger = logging.getLogger(__name__)

CRITICAL_OVERAGE_RATIO = 1.2

# (minimum usage percentage, level), checked top down
WARNING_THRESHOLDS = (
    (100, WarningLevel.danger),
    (80, WarningLevel.warning),
    (60, WarningLevel.caution),
)


def warning_level_for(days_used: int, cap: int) -> WarningLevel:
    if cap <= 0:
        return WarningLevel.danger if days_used > 0 else WarningLevel.safe
    percentage = days_used / cap * 100
    for minimum, level in WARNING_THRESHOLDS:
        if percentage >= minimum:
            return level
    return WarningLevel.safe


def severity_for(days_used: int, cap: int) -> Severity:
    return Severity.critical if days_used > cap * CRITICAL_OVERAGE_RATIO else Severity.major


@dataclass(frozen=True)
class Usage:
    days_used: int
    period: DateRange | None = None
    contributions: tuple[tuple[StayRecord, int], ...] = ()

    @property
    def records(self) -> tuple[StayRecord, ...]:
        return tuple(record for record, _ in self.contributions)


def clip_and_sum(records: Sequence[StayRecord], counted: DateRange) -> list[tuple[StayRecord, int]]:
    """Days each record spends inside the counted range; records outside it are left out."""
    contributions = []
    for record in records:
        rng = record_range(record)
        if rng is None:
            continue
        clipped = intersect(rng, counted)
        if clipped is not None:
            contributions.append((record, clipped.days))
    return contributions


def _usage_within(records: Sequence[StayRecord], period: DateRange, reference_date: date) -> Usage:
    """Usage over the period, counting no day after reference_date."""
    if reference_date < period.start:
        return Usage(0, period)
    counted = DateRange(period.start, min(period.end, reference_date))
    contributions = clip_and_sum(records, counted)
    return Usage(sum(days for _, days in contributions), period, tuple(contributions))


def _per_stay_violations(policy: StayPolicy, records: Sequence[StayRecord], reference_date: date) -> list[StayViolation]:
    cap = policy.max_days_per_stay
    if cap is None:
        return []
    violations = []
    for record in records:
        rng = record_range(record)
        if rng is None or rng.start > reference_date:
            continue
        duration = days_between_inclusive(rng.start, min(rng.end, reference_date))
        if duration > cap:
            violations.append(
                StayViolation(
                    type=ViolationType.overstay,
                    severity=severity_for(duration, cap),
                    occurred_at=shift_days(record.entry_date, cap),
                    days_over=duration - cap,
                    description=(
                        f"{policy.jurisdiction_name}: single stay of {duration} days exceeds "
                        f"the {cap}-day limit per entry"
                    ),
                    record_id=str(record.id),
                )
            )
    return violations


class MethodStrategy:
    """Period placement and re-entry rules for one calculation method."""

    def period(
        self, policy: StayPolicy, records: Sequence[StayRecord], reference_date: date, anchor_date: date | None
    ) -> DateRange | None:
        raise NotImplementedError

    def usage(
        self,
        policy: StayPolicy,
        records: Sequence[StayRecord],
        reference_date: date,
        anchor_date: date | None = None,
    ) -> Usage:
        period = self.period(policy, records, reference_date, anchor_date)
        if period is None:
            return Usage(0)
        return _usage_within(records, period, reference_date)

    def next_available(
        self, policy: StayPolicy, usage: Usage, reference_date: date
    ) -> date | None:
        return None

    def violations(
        self,
        policy: StayPolicy,
        records: Sequence[StayRecord],
        reference_date: date,
        anchor_date: date | None = None,
    ) -> list[StayViolation]:
        """Re-run the usage as of each stay's exit (or the reference date) and flag every point over the cap."""
        cap = policy.effective_cap
        violations = []
        for record in records:
            rng = record_range(record)
            if rng is None or rng.start > reference_date:
                continue
            used = self.usage(policy, records, min(rng.end, reference_date), anchor_date).days_used
            if used > cap:
                violations.append(
                    StayViolation(
                        type=ViolationType.exceeds_limit,
                        severity=severity_for(used, cap),
                        occurred_at=record.entry_date,
                        days_over=used - cap,
                        description=self._exceeds_description(policy, used, cap),
                        record_id=str(record.id),
                    )
                )
        return violations

    def _exceeds_description(self, policy: StayPolicy, used: int, cap: int) -> str:
        return f"{policy.jurisdiction_name}: {used} days used against a limit of {cap} days"


class RollingWindowStrategy(MethodStrategy):
    def period(self, policy, records, reference_date, anchor_date):
        return trailing_window(reference_date, policy.period_length_days)

    def next_available(self, policy, usage, reference_date):
        cap = policy.effective_cap
        freed = 0
        for record, days in usage.contributions:
            freed += days
            if usage.days_used - freed < cap:
                candidate = shift_days(record.entry_date, policy.period_length_days + 1)
                if candidate > reference_date:
                    return candidate
        return None

    def _exceeds_description(self, policy, used, cap):
        return (
            f"{policy.jurisdiction_name}: {used} days within {policy.period_length_days} days "
            f"exceeds the {cap}-day limit"
        )


class CalendarYearStrategy(MethodStrategy):
    def period(self, policy, records, reference_date, anchor_date):
        return calendar_year(reference_date)

    def next_available(self, policy, usage, reference_date):
        return date(reference_date.year + 1, 1, 1)

    def violations(self, policy, records, reference_date, anchor_date=None):
        annual = super().violations(policy, records, reference_date, anchor_date)
        return annual + _per_stay_violations(policy, records, reference_date)

    def _exceeds_description(self, policy, used, cap):
        return f"{policy.jurisdiction_name}: {used} days in one calendar year exceeds the {cap}-day annual limit"


class AnchoredPeriodStrategy(MethodStrategy):
    """Periods of period_length_days starting at an authorization date or at an entry.

    Without an authorization date the first stay opens a period, and a new one
    opens at the first entry after the previous period ended (or on the day after
    it ended, for a stay that runs across the boundary).
    """

    def period(self, policy, records, reference_date, anchor_date):
        length = policy.period_length_days
        if anchor_date is not None:
            start = as_date(anchor_date)
            return DateRange(start, shift_days(start, length - 1))

        period = None
        for record in records:
            rng = record_range(record)
            if rng is None or rng.start > reference_date:
                continue
            if period is None or rng.start > period.end:
                period = DateRange(rng.start, shift_days(rng.start, length - 1))
            while period.end < min(rng.end, reference_date):
                start = shift_days(period.end, 1)
                period = DateRange(start, shift_days(start, length - 1))
        if period is None or not period.contains(reference_date):
            return None
        return period

    def next_available(self, policy, usage, reference_date):
        if usage.period is None:
            return None
        candidate = shift_days(usage.period.end, 1)
        return candidate if candidate > reference_date else None

    def _exceeds_description(self, policy, used, cap):
        return (
            f"{policy.jurisdiction_name}: {used} days within the {policy.period_length_days}-day "
            f"authorization period exceeds the {cap}-day limit"
        )


class PerEntryStrategy(MethodStrategy):
    """Only the stay in progress counts; the allowance resets on every exit."""

    def period(self, policy, records, reference_date, anchor_date):
        return None

    def usage(self, policy, records, reference_date, anchor_date=None):
        current = _current_stay(records, reference_date)
        if current is None:
            return Usage(0)
        days = days_between_inclusive(current.entry_date, reference_date)
        return Usage(days, None, ((current, days),))

    def violations(self, policy, records, reference_date, anchor_date=None):
        return _per_stay_violations(policy, records, reference_date)


STRATEGIES: dict[CalculationMethod, MethodStrategy] = {
    CalculationMethod.rolling_window: RollingWindowStrategy(),
    CalculationMethod.calendar_year: CalendarYearStrategy(),
    CalculationMethod.per_entry: PerEntryStrategy(),
    CalculationMethod.entry_anchored_annual: AnchoredPeriodStrategy(),
    CalculationMethod.visa_validity: AnchoredPeriodStrategy(),
    CalculationMethod.custom: AnchoredPeriodStrategy(),
}


def _current_stay(records: Sequence[StayRecord], reference_date: date) -> StayRecord | None:
    """Latest-entered stay covering the reference date."""
    current = None
    for record in records:
        rng = record_range(record)
        if rng is not None and rng.contains(reference_date):
            current = record
    return current


def evaluate_policy(
    policy: StayPolicy,
    ledger: StayLedger,
    reference_date: date,
    anchor_date: date | None = None,
) -> CountryResult:
    """Status, violations and guidance for an already-resolved policy."""
    ref = as_date(reference_date)
    code = policy.jurisdiction_code

    issues = ledger.integrity_issues(code)
    for issue in issues:
        logger.warning("Stay data integrity problem (%s): %s", issue.problem.value, issue.message)

    records = ledger.as_of(ref).records_for(code)
    strategy = STRATEGIES[policy.calculation_method]
    usage = strategy.usage(policy, records, ref, anchor_date)
    cap = policy.effective_cap

    next_available = None
    if usage.days_used >= cap:
        next_available = strategy.next_available(policy, usage, ref)
        if next_available is not None and next_available <= ref:
            next_available = None

    current = _current_stay(records, ref)
    status = StayStatus(
        jurisdiction_code=code,
        calculation_method=policy.calculation_method,
        days_used=usage.days_used,
        days_remaining=max(0, cap - usage.days_used),
        max_allowed_days=cap,
        warning_level=warning_level_for(usage.days_used, cap),
        current_period_start=usage.period.start if usage.period else None,
        current_period_end=usage.period.end if usage.period else None,
        next_available_date=next_available,
        max_days_per_stay=policy.max_days_per_stay,
        max_days_per_period=policy.max_days_per_period,
        days_in_current_stay=days_between_inclusive(current.entry_date, ref) if current else 0,
    )
    violations = strategy.violations(policy, records, ref, anchor_date)

    return CountryResult(
        policy=policy,
        status=status,
        violations=tuple(violations),
        recent_stays=usage.records,
        integrity_issues=tuple(issues),
        recommendations=tuple(generate_recommendations(status, violations, policy, ref)),
    )


def evaluate(
    ledger: StayLedger,
    jurisdiction_code: str,
    nationality: str | None,
    reference_date: date,
    *,
    registry: PolicyRegistry | None = None,
    anchor_date: date | None = None,
) -> CountryResult | None:
    """Evaluate one jurisdiction. None when the registry has no policy for it."""
    registry = registry or default_registry()
    policy = registry.get_policy(jurisdiction_code, nationality)
    if policy is None:
        return None
    return evaluate_policy(policy, ledger, reference_date, anchor_date)


def evaluate_all(
    ledger: StayLedger,
    nationality: str | None,
    reference_date: date,
    *,
    registry: PolicyRegistry | None = None,
) -> dict[str, CountryResult]:
    """Evaluate every jurisdiction the ledger has stays in; unknown ones are skipped."""
    registry = registry or default_registry()
    results: dict[str, CountryResult] = {}
    for code in ledger.jurisdictions():
        result = evaluate(ledger, code, nationality, reference_date, registry=registry)
        if result is not None:
            results[code] = result
    return results
