"""Compliance result and trip validation schemas."""
from datetime import date
from pydantic import BaseModel, model_validator
from staytrack.domain import (
    CalculationMethod,
    CountryResult,
    IntegrityProblem,
    Severity,
    StayStatus,
    TripValidation,
    ViolationType,
    WarningLevel,
)
from staytrack.schemas.policy import StayPolicyResponse


class StayStatusResponse(BaseModel):
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

    class Config:
        from_attributes = True


class StayViolationResponse(BaseModel):
    type: ViolationType
    severity: Severity
    occurred_at: date
    days_over: int
    description: str
    record_id: str | None = None

    class Config:
        from_attributes = True


class IntegrityIssueResponse(BaseModel):
    problem: IntegrityProblem
    record_ids: list[str]
    message: str

    class Config:
        from_attributes = True


class RecentStay(BaseModel):
    id: str
    jurisdiction_code: str
    entry_date: date
    exit_date: date | None

    class Config:
        from_attributes = True


class CountryResultResponse(BaseModel):
    policy: StayPolicyResponse
    status: StayStatusResponse
    violations: list[StayViolationResponse]
    recent_stays: list[RecentStay]
    integrity_issues: list[IntegrityIssueResponse]
    recommendations: list[str]

    @classmethod
    def from_result(cls, result: CountryResult) -> "CountryResultResponse":
        return cls(
            policy=StayPolicyResponse.from_policy(result.policy),
            status=StayStatusResponse.model_validate(result.status),
            violations=[StayViolationResponse.model_validate(v) for v in result.violations],
            recent_stays=[RecentStay.model_validate(r) for r in result.recent_stays],
            integrity_issues=[IntegrityIssueResponse.model_validate(i) for i in result.integrity_issues],
            recommendations=list(result.recommendations),
        )


class TripValidationInput(BaseModel):
    jurisdiction_code: str
    planned_entry: date
    planned_exit: date
    anchor_date: date | None = None  # visa issuance date for visa_validity policies

    @model_validator(mode="after")
    def exit_after_entry(self):
        if self.planned_exit < self.planned_entry:
            raise ValueError("Planned exit cannot be before planned entry")
        return self


class TripValidationResponse(BaseModel):
    jurisdiction_code: str
    is_valid: bool
    projected_days_used: int
    peak_days_used: int
    max_allowed_days: int
    warnings: list[str]
    status: StayStatusResponse | None = None

    @classmethod
    def from_validation(cls, validation: TripValidation) -> "TripValidationResponse":
        status: StayStatus | None = validation.status
        return cls(
            jurisdiction_code=validation.jurisdiction_code,
            is_valid=validation.is_valid,
            projected_days_used=validation.projected_days_used,
            peak_days_used=validation.peak_days_used,
            max_allowed_days=validation.max_allowed_days,
            warnings=list(validation.warnings),
            status=StayStatusResponse.model_validate(status) if status else None,
        )
