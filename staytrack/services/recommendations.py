"""Module F: Guidance text from a computed status and its violations."""
from __future__ import annotations

from datetime import date
from typing import Sequence

from staytrack.domain import CalculationMethod, StayPolicy, StayStatus, StayViolation, WarningLevel


def generate_recommendations(
    status: StayStatus,
    violations: Sequence[StayViolation],
    policy: StayPolicy | None = None,
    reference_date: date | None = None,
) -> list[str]:
    recommendations: list[str] = []
    per_entry = status.calculation_method == CalculationMethod.per_entry

    if status.warning_level == WarningLevel.danger:
        if per_entry:
            recommendations.append("You have reached the limit for this stay. Leave the country now.")
        else:
            recommendations.append("You have reached the stay limit. Plan to leave immediately.")
    elif status.warning_level == WarningLevel.warning:
        recommendations.append(
            f"You are close to the stay limit: {status.days_remaining} day(s) left. Plan your departure."
        )
    elif status.warning_level == WarningLevel.caution:
        recommendations.append("Keep a close eye on your remaining days.")

    if status.next_available_date:
        line = f"Next possible entry: {status.next_available_date.isoformat()}"
        if reference_date is not None:
            line += f" (in {(status.next_available_date - reference_date).days} days)"
        recommendations.append(line + ".")
    elif status.warning_level == WarningLevel.danger and status.calculation_method == CalculationMethod.rolling_window:
        recommendations.append("The next possible entry date cannot be determined from the recorded stays.")

    if per_entry and status.warning_level in (WarningLevel.safe, WarningLevel.caution):
        recommendations.append(f"A new {status.max_allowed_days}-day allowance starts with each entry.")
    if status.calculation_method == CalculationMethod.calendar_year and status.current_period_end:
        recommendations.append(
            f"The annual allowance resets on {status.current_period_end.year + 1}-01-01."
        )

    for violation in violations:
        recommendations.append(f"Recorded {violation.severity.value} violation: {violation.description or violation.type.value}.")

    if not violations and status.warning_level == WarningLevel.safe:
        recommendations.append("Your current stay status is safe.")

    if policy is not None:
        for restriction in policy.restrictions:
            recommendations.append(f"Policy note: {restriction}")

    return recommendations
