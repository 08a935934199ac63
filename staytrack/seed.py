"""Seed the policy_rules table from the built-in catalogue."""
from sqlalchemy.orm import Session
from staytrack.domain import StayPolicy
from staytrack.models.policy_rule import PolicyRule
from staytrack.services.policy_catalogue import POLICY_CATALOGUE


def _rules_for(policy: StayPolicy) -> list[PolicyRule]:
    rules = [
        PolicyRule(
            jurisdiction_code=policy.jurisdiction_code,
            nationality=None,
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
        )
    ]
    for nationality, override in policy.nationality_overrides.items():
        rules.append(
            PolicyRule(
                jurisdiction_code=policy.jurisdiction_code,
                nationality=nationality,
                jurisdiction_name=policy.jurisdiction_name,
                policy_type=policy.policy_type,
                calculation_method=override.calculation_method,
                max_days_per_stay=override.max_days_per_stay,
                max_days_per_period=override.max_days_per_period,
                period_length_days=override.period_length_days,
                description=override.description,
                restrictions=list(override.restrictions) if override.restrictions is not None else None,
            )
        )
    return rules


def seed_policy_rules(db: Session) -> None:
    if db.query(PolicyRule).count() > 0:
        return
    for policy in POLICY_CATALOGUE:
        for rule in _rules_for(policy):
            db.add(rule)
    db.commit()
