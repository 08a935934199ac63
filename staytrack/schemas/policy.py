"""Stay policy schemas."""
from datetime import date
from pydantic import BaseModel
from staytrack.domain import CalculationMethod, PolicyType, StayPolicy


class StayPolicyResponse(BaseModel):
    jurisdiction_code: str
    jurisdiction_name: str
    policy_type: PolicyType
    calculation_method: CalculationMethod
    max_days_per_stay: int | None
    max_days_per_period: int | None
    period_length_days: int | None
    description: str
    restrictions: list[str]
    sources: list[str]
    last_updated: date | None
    nationalities_with_overrides: list[str] = []

    @classmethod
    def from_policy(cls, policy: StayPolicy) -> "StayPolicyResponse":
        return cls(
            jurisdiction_code=policy.jurisdiction_code,
            jurisdiction_name=policy.jurisdiction_name,
            policy_type=policy.policy_type,
            calculation_method=policy.calculation_method,
            max_days_per_stay=policy.max_days_per_stay,
            max_days_per_period=policy.max_days_per_period,
            period_length_days=policy.period_length_days,
            description=policy.description,
            restrictions=list(policy.restrictions),
            sources=list(policy.sources),
            last_updated=policy.last_updated,
            nationalities_with_overrides=sorted(policy.nationality_overrides),
        )
