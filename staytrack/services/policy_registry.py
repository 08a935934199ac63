"""Module A: Policy registry (per-jurisdiction stay rules with nationality overrides)."""
from __future__ import annotations

import dataclasses
import logging
from functools import lru_cache
from typing import Any, Iterable

from staytrack.domain import CalculationMethod, NationalityOverride, PolicyType, StayPolicy
from staytrack.services.policy_catalogue import POLICY_CATALOGUE

logger = logging.getLogger(__name__)


class PolicyRegistry:
    """Read-only catalogue keyed by upper-case jurisdiction code."""

    def __init__(self, policies: Iterable[StayPolicy]):
        self._policies: dict[str, StayPolicy] = {}
        for policy in policies:
            self._policies[policy.jurisdiction_code.upper()] = policy

    def __contains__(self, jurisdiction_code: str) -> bool:
        return jurisdiction_code.upper() in self._policies

    def __len__(self) -> int:
        return len(self._policies)

    def get_policy(self, jurisdiction_code: str, nationality: str | None = None) -> StayPolicy | None:
        """Base policy, with the nationality's override merged over it when one exists."""
        policy = self._policies.get((jurisdiction_code or "").upper())
        if policy is None:
            return None
        if nationality:
            override = policy.nationality_overrides.get(nationality.upper())
            if override is not None:
                return policy.with_override(override)
        return policy

    def supported_policies(self) -> list[StayPolicy]:
        return [self._policies[code] for code in sorted(self._policies)]

    @classmethod
    def from_rules(cls, rules: Iterable[Any]) -> PolicyRegistry:
        """Build from stored rule rows: rows without nationality are base policies, others overrides."""
        rules = list(rules)
        bases: dict[str, StayPolicy] = {}
        for rule in rules:
            if rule.nationality:
                continue
            bases[rule.jurisdiction_code.upper()] = StayPolicy(
                jurisdiction_code=rule.jurisdiction_code,
                jurisdiction_name=rule.jurisdiction_name,
                calculation_method=CalculationMethod(rule.calculation_method),
                max_days_per_stay=rule.max_days_per_stay,
                max_days_per_period=rule.max_days_per_period,
                period_length_days=rule.period_length_days,
                policy_type=PolicyType(rule.policy_type or PolicyType.visa_free),
                description=rule.description or "",
                restrictions=tuple(rule.restrictions or ()),
                sources=tuple(rule.sources or ()),
                last_updated=rule.last_updated,
            )

        overrides: dict[str, dict[str, NationalityOverride]] = {}
        for rule in rules:
            if not rule.nationality:
                continue
            code = rule.jurisdiction_code.upper()
            if code not in bases:
                logger.warning("Ignoring %s override for %s: no base policy", rule.nationality, code)
                continue
            overrides.setdefault(code, {})[rule.nationality.upper()] = NationalityOverride(
                calculation_method=CalculationMethod(rule.calculation_method),
                max_days_per_stay=rule.max_days_per_stay,
                max_days_per_period=rule.max_days_per_period,
                period_length_days=rule.period_length_days,
                description=rule.description or "",
                restrictions=tuple(rule.restrictions) if rule.restrictions is not None else None,
            )

        return cls(
            dataclasses.replace(policy, nationality_overrides=overrides.get(code, {}))
            for code, policy in bases.items()
        )


@lru_cache
def default_registry() -> PolicyRegistry:
    return PolicyRegistry(POLICY_CATALOGUE)
