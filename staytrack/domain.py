"""Core stay-tracking types: policies, stay records and computed results.

Everything here is immutable. Results are recomputed from
(policy, records, reference date) on every call and never stored by the core.
"""
from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping


class CalculationMethod(str, enum.Enum):
    rolling_window = "rolling_window"
    calendar_year = "calendar_year"
    per_entry = "per_entry"
    entry_anchored_annual = "entry_anchored_annual"
    visa_validity = "visa_validity"
    custom = "custom"


WINDOWED_METHODS = frozenset(
    {
        CalculationMethod.rolling_window,
        CalculationMethod.calendar_year,
        CalculationMethod.entry_anchored_annual,
        CalculationMethod.visa_validity,
        CalculationMethod.custom,
    }
)
ANCHORED_METHODS = frozenset(
    {
        CalculationMethod.entry_anchored_annual,
        CalculationMethod.visa_validity,
        CalculationMethod.custom,
    }
)


class PolicyType(str, enum.Enum):
    visa_free = "visa_free"
    visa_required = "visa_required"
    special = "special"


class WarningLevel(str, enum.Enum):
    safe = "safe"
    caution = "caution"
    warning = "warning"
    danger = "danger"


class ViolationType(str, enum.Enum):
    exceeds_limit = "exceeds_limit"
    too_frequent = "too_frequent"
    overstay = "overstay"


class Severity(str, enum.Enum):
    minor = "minor"
    major = "major"
    critical = "critical"


class IntegrityProblem(str, enum.Enum):
    inverted_dates = "inverted_dates"
    overlapping_stays = "overlapping_stays"


@dataclass(frozen=True)
class NationalityOverride:
    """Replacement rule shape for travelers of one nationality."""

    calculation_method: CalculationMethod
    max_days_per_stay: int | None = None
    max_days_per_period: int | None = None
    period_length_days: int | None = None
    description: str = ""
    restrictions: tuple[str, ...] | None = None  # None keeps the base restrictions


@dataclass(frozen=True)
class StayPolicy:
    jurisdiction_code: str
    jurisdiction_name: str
    calculation_method: CalculationMethod
    max_days_per_stay: int | None = None
    max_days_per_period: int | None = None
    period_length_days: int | None = None
    policy_type: PolicyType = PolicyType.visa_free
    description: str = ""
    restrictions: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()
    last_updated: date | None = None
    nationality_overrides: Mapping[str, NationalityOverride] = field(default_factory=dict)

    def __post_init__(self) -> None:
        method = CalculationMethod(self.calculation_method)
        object.__setattr__(self, "calculation_method", method)
        object.__setattr__(self, "jurisdiction_code", self.jurisdiction_code.upper())

        for name in ("max_days_per_stay", "max_days_per_period"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{self.jurisdiction_code}: {name} cannot be negative")
        if self.period_length_days is not None and self.period_length_days <= 0:
            raise ValueError(f"{self.jurisdiction_code}: period_length_days must be positive")

        if method in (CalculationMethod.rolling_window, CalculationMethod.calendar_year):
            if self.period_length_days is None or self.max_days_per_period is None:
                raise ValueError(
                    f"{self.jurisdiction_code}: {method.value} requires period_length_days and max_days_per_period"
                )
        elif method == CalculationMethod.per_entry:
            if self.max_days_per_stay is None:
                raise ValueError(f"{self.jurisdiction_code}: per_entry requires max_days_per_stay")
        else:
            if self.period_length_days is None:
                raise ValueError(f"{self.jurisdiction_code}: {method.value} requires period_length_days")
            if self.max_days_per_period is None and self.max_days_per_stay is None:
                raise ValueError(f"{self.jurisdiction_code}: {method.value} requires a day limit")

    @property
    def effective_cap(self) -> int:
        """Day limit that usage is measured against."""
        if self.calculation_method == CalculationMethod.per_entry:
            return self.max_days_per_stay or 0
        if self.max_days_per_period is not None:
            return self.max_days_per_period
        return self.max_days_per_stay or 0

    @property
    def is_windowed(self) -> bool:
        return self.calculation_method in WINDOWED_METHODS

    def with_override(self, override: NationalityOverride) -> StayPolicy:
        """Base policy with the override's rule shape merged over it."""
        restrictions = override.restrictions if override.restrictions is not None else self.restrictions
        return dataclasses.replace(
            self,
            calculation_method=override.calculation_method,
            max_days_per_stay=override.max_days_per_stay,
            max_days_per_period=override.max_days_per_period,
            period_length_days=override.period_length_days,
            description=override.description or self.description,
            restrictions=tuple(restrictions),
        )


@dataclass(frozen=True)
class StayRecord:
    """One visit. exit_date None means the traveler is still there."""

    id: str
    jurisdiction_code: str
    entry_date: date
    exit_date: date | None = None
    purpose: str | None = None
    notes: str | None = None

    @property
    def is_open(self) -> bool:
        return self.exit_date is None

    @property
    def is_inverted(self) -> bool:
        return self.exit_date is not None and self.exit_date < self.entry_date


@dataclass(frozen=True)
class StayStatus:
    jurisdiction_code: str
    calculation_method: CalculationMethod
    days_used: int
    days_remaining: int
    max_allowed_days: int
    warning_level: WarningLevel
    current_period_start: date | None = None
    current_period_end: date | None = None
    next_available_date: date | None = None
    max_days_per_stay: int | None = None
    max_days_per_period: int | None = None
    days_in_current_stay: int = 0


@dataclass(frozen=True)
class StayViolation:
    type: ViolationType
    severity: Severity
    occurred_at: date
    days_over: int
    description: str = ""
    record_id: str | None = None


@dataclass(frozen=True)
class IntegrityIssue:
    problem: IntegrityProblem
    record_ids: tuple[str, ...]
    message: str


@dataclass(frozen=True)
class CountryResult:
    policy: StayPolicy
    status: StayStatus
    violations: tuple[StayViolation, ...] = ()
    recent_stays: tuple[StayRecord, ...] = ()
    integrity_issues: tuple[IntegrityIssue, ...] = ()
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class TripValidation:
    jurisdiction_code: str
    is_valid: bool
    projected_days_used: int
    max_allowed_days: int
    warnings: tuple[str, ...] = ()
    peak_days_used: int = 0
    status: StayStatus | None = None
