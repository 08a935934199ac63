import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import pytest

from staytrack.domain import (
    CalculationMethod,
    IntegrityProblem,
    Severity,
    ViolationType,
    WarningLevel,
)
from staytrack.services.compliance import evaluate, evaluate_all, evaluate_policy, warning_level_for
from staytrack.services.policy_registry import PolicyRegistry, default_registry
from staytrack.services.stay_ledger import StayLedger


@pytest.mark.parametrize(
    "used,cap,expected",
    [
        (53, 90, WarningLevel.safe),
        (54, 90, WarningLevel.caution),
        (71, 90, WarningLevel.caution),
        (72, 90, WarningLevel.warning),
        (89, 90, WarningLevel.warning),
        (90, 90, WarningLevel.danger),
        (120, 90, WarningLevel.danger),
        (0, 0, WarningLevel.safe),
        (1, 0, WarningLevel.danger),
    ],
)
def test_warning_levels(used, cap, expected):
    assert warning_level_for(used, cap) == expected


# Rolling window


def test_rolling_window_scenario(rolling_policy, rec):
    ledger = StayLedger([
        rec("r1", "2024-01-01", "2024-01-15"),
        rec("r2", "2024-02-01", "2024-02-10"),
    ])
    result = evaluate_policy(rolling_policy, ledger, date(2024, 6, 1))
    status = result.status
    assert status.days_used == 25
    assert status.days_remaining == 65
    assert status.warning_level == WarningLevel.safe
    assert status.current_period_start == date(2023, 12, 5)
    assert status.current_period_end == date(2024, 6, 1)
    assert status.next_available_date is None
    assert result.violations == ()
    assert [r.id for r in result.recent_stays] == ["r1", "r2"]


def test_rolling_window_ages_records_out(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2024-01-01", "2024-01-01")])
    assert evaluate_policy(rolling_policy, ledger, date(2024, 1, 1) + timedelta(days=179)).status.days_used == 1
    assert evaluate_policy(rolling_policy, ledger, date(2024, 1, 1) + timedelta(days=180)).status.days_used == 0
    assert evaluate_policy(rolling_policy, ledger, date(2024, 1, 1) + timedelta(days=181)).status.days_used == 0


def test_rolling_window_clips_stay_partly_outside(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2023-11-01", "2023-12-10")])
    # window starts 2023-12-05
    assert evaluate_policy(rolling_policy, ledger, date(2024, 6, 1)).status.days_used == 6


def test_overstay_violation_is_major(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2024-01-02", "2024-04-15")])
    result = evaluate_policy(rolling_policy, ledger, date(2024, 4, 15))
    assert result.status.days_used == 105
    assert result.status.warning_level == WarningLevel.danger
    assert result.status.days_remaining == 0
    assert len(result.violations) == 1
    violation = result.violations[0]
    assert violation.type == ViolationType.exceeds_limit
    assert violation.days_over == 15
    assert violation.severity == Severity.major
    assert violation.occurred_at == date(2024, 1, 2)
    assert violation.record_id == "r1"


def test_violation_is_kept_after_the_stay(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2024-01-02", "2024-04-15")])
    result = evaluate_policy(rolling_policy, ledger, date(2025, 1, 1))
    assert result.status.days_used == 0
    assert [v.days_over for v in result.violations] == [15]


def test_future_exit_is_not_a_violation_yet(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2024-01-02", "2024-04-15")])

    before = evaluate_policy(rolling_policy, ledger, date(2024, 3, 1))
    assert before.status.days_used == 60
    assert before.status.warning_level == WarningLevel.caution
    assert before.violations == ()

    during = evaluate_policy(rolling_policy, ledger, date(2024, 4, 10))
    assert during.status.days_used == 100
    assert [v.days_over for v in during.violations] == [10]


def test_far_overstay_is_critical(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2024-01-01", "2024-04-30")])
    violation = evaluate_policy(rolling_policy, ledger, date(2024, 4, 30)).violations[0]
    assert violation.days_over == 31
    assert violation.severity == Severity.critical


def test_next_available_date_at_cap(rolling_policy, rec):
    ledger = StayLedger([
        rec("r1", "2024-01-01", "2024-01-30"),
        rec("r2", "2024-03-01", "2024-04-29"),
    ])
    at_cap = evaluate_policy(rolling_policy, ledger, date(2024, 5, 1)).status
    assert at_cap.days_used == 90
    assert at_cap.warning_level == WarningLevel.danger
    assert at_cap.next_available_date == date(2024, 1, 1) + timedelta(days=181)
    assert at_cap.next_available_date == date(2024, 6, 30)

    later = evaluate_policy(rolling_policy, ledger, at_cap.next_available_date).status
    assert later.days_remaining > 0
    assert later.days_used == 88


def test_next_available_date_indeterminate_for_stay_longer_than_window(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2023-06-01")])
    status = evaluate_policy(rolling_policy, ledger, date(2024, 6, 1)).status
    assert status.days_used == 180
    assert status.warning_level == WarningLevel.danger
    assert status.next_available_date is None


def test_days_used_non_decreasing_until_a_stay_ages_out(rolling_policy, rec):
    ledger = StayLedger([
        rec("r1", "2024-01-01", "2024-01-15"),
        rec("r2", "2024-02-01", "2024-02-10"),
    ])
    earliest = date(2024, 1, 1)
    previous = None
    day = date(2024, 2, 10)
    while day <= date(2024, 8, 31):
        used = evaluate_policy(rolling_policy, ledger, day).status.days_used
        if previous is not None and used < previous:
            assert day - timedelta(days=179) > earliest
        previous = used
        day += timedelta(days=1)
    assert previous == 0


def test_inverted_record_counts_zero_and_is_reported(rolling_policy, rec, caplog):
    ledger = StayLedger([
        rec("ok", "2024-03-01", "2024-03-10"),
        rec("bad", "2024-04-10", "2024-04-01"),
    ])
    with caplog.at_level(logging.WARNING, logger="staytrack.services.compliance"):
        result = evaluate_policy(rolling_policy, ledger, date(2024, 5, 1))
    assert result.status.days_used == 10
    assert [i.problem for i in result.integrity_issues] == [IntegrityProblem.inverted_dates]
    assert "bad" in caplog.text


def test_days_used_bounded_by_stay_durations(rolling_policy, rec):
    ledger = StayLedger([
        rec("r1", "2023-10-01", "2023-10-20"),
        rec("r2", "2024-01-01", "2024-01-15"),
        rec("r3", "2024-03-01"),
    ])
    for offset in range(0, 300, 7):
        ref = date(2024, 1, 1) + timedelta(days=offset)
        resolved = ledger.as_of(ref)
        total = sum(
            (min(r.exit_date, ref) - r.entry_date).days + 1
            for r in resolved
            if r.entry_date <= ref
        )
        used = evaluate_policy(rolling_policy, ledger, ref).status.days_used
        assert 0 <= used <= total


# Per entry


def test_per_entry_resets_on_exit(per_entry_policy, rec):
    first = rec("p1", "2024-01-01", "2024-02-10")
    second = rec("p2", "2024-03-01", "2024-04-14")

    during_first = evaluate_policy(per_entry_policy, StayLedger([first]), date(2024, 2, 10))
    assert during_first.status.days_used == 41
    assert during_first.violations == ()

    ledger = StayLedger([first, second])
    between = evaluate_policy(per_entry_policy, ledger, date(2024, 2, 20))
    assert between.status.days_used == 0
    assert between.status.warning_level == WarningLevel.safe

    during_second = evaluate_policy(per_entry_policy, ledger, date(2024, 4, 14))
    assert during_second.status.days_used == 45
    assert during_second.status.days_in_current_stay == 45
    assert during_second.status.current_period_start is None
    assert during_second.status.next_available_date is None
    assert during_second.violations == ()


def test_per_entry_overstay(per_entry_policy, rec):
    ledger = StayLedger([rec("p1", "2024-01-01", "2024-02-20")])
    result = evaluate_policy(per_entry_policy, ledger, date(2024, 3, 1))
    assert result.status.days_used == 0
    assert len(result.violations) == 1
    violation = result.violations[0]
    assert violation.type == ViolationType.overstay
    assert violation.days_over == 6
    assert violation.severity == Severity.major
    assert violation.occurred_at == date(2024, 2, 15)


# Calendar year


def test_calendar_year_reports_annual_and_per_stay_violations(calendar_policy, rec):
    ledger = StayLedger([
        rec("s1", "2024-01-01", "2024-02-29"),
        rec("s2", "2024-04-01", "2024-05-30"),
        rec("s3", "2024-07-01", "2024-08-30"),
    ])
    result = evaluate_policy(calendar_policy, ledger, date(2024, 9, 1))
    assert result.status.days_used == 181
    assert result.status.current_period_start == date(2024, 1, 1)
    assert result.status.current_period_end == date(2024, 12, 31)
    assert result.status.next_available_date == date(2025, 1, 1)

    by_type = {v.type: v for v in result.violations}
    assert set(by_type) == {ViolationType.exceeds_limit, ViolationType.overstay}
    assert by_type[ViolationType.exceeds_limit].days_over == 1
    assert by_type[ViolationType.exceeds_limit].occurred_at == date(2024, 7, 1)
    assert by_type[ViolationType.overstay].days_over == 1
    assert by_type[ViolationType.overstay].record_id == "s3"


def test_calendar_year_single_stay_violation_within_annual_total(calendar_policy, rec):
    ledger = StayLedger([rec("s1", "2024-03-01", "2024-04-30")])
    result = evaluate_policy(calendar_policy, ledger, date(2024, 5, 1))
    assert result.status.days_used == 61
    assert [v.type for v in result.violations] == [ViolationType.overstay]


def test_calendar_year_clips_at_new_year(calendar_policy, rec):
    ledger = StayLedger([rec("s1", "2023-12-20", "2024-01-10")])
    assert evaluate_policy(calendar_policy, ledger, date(2024, 1, 10)).status.days_used == 10


# Anchored periods


def test_entry_anchored_periods_chain(rec):
    policy = default_registry().get_policy("GB")
    ledger = StayLedger([
        rec("g1", "2024-01-10", "2024-03-09", code="GB"),
        rec("g2", "2024-06-01", "2024-07-30", code="GB"),
        rec("g3", "2025-02-01", "2025-02-10", code="GB"),
    ])
    first = evaluate_policy(policy, ledger, date(2024, 8, 1)).status
    assert first.days_used == 120
    assert (first.current_period_start, first.current_period_end) == (date(2024, 1, 10), date(2025, 1, 8))

    gap = evaluate_policy(policy, ledger, date(2025, 1, 20)).status
    assert gap.days_used == 0
    assert gap.current_period_start is None

    second = evaluate_policy(policy, ledger, date(2025, 2, 10)).status
    assert second.days_used == 10
    assert second.current_period_start == date(2025, 2, 1)


def test_visa_validity_anchored_at_issuance(rec):
    policy = default_registry().get_policy("AU")
    ledger = StayLedger([
        rec("a0", "2023-12-01", "2023-12-10", code="AU"),
        rec("a1", "2024-02-01", "2024-03-31", code="AU"),
        rec("a2", "2024-06-01", "2024-07-10", code="AU"),
    ])
    result = evaluate_policy(policy, ledger, date(2024, 7, 10), anchor_date=date(2024, 1, 1))
    assert result.status.days_used == 100
    assert result.status.warning_level == WarningLevel.danger
    assert result.status.next_available_date == date(2024, 12, 31)
    assert [(v.record_id, v.days_over, v.severity) for v in result.violations] == [("a2", 10, Severity.major)]


# Entry points


def test_evaluate_uses_registry_and_nationality(rec):
    ledger = StayLedger([rec("t1", "2024-01-01", "2024-01-20", code="TH")])
    korean = evaluate(ledger, "TH", "KR", date(2024, 1, 20))
    american = evaluate(ledger, "TH", "US", date(2024, 1, 20))
    assert korean.policy.calculation_method == CalculationMethod.calendar_year
    assert korean.status.max_allowed_days == 180
    assert american.policy.calculation_method == CalculationMethod.per_entry
    assert american.status.max_allowed_days == 30
    assert american.status.warning_level == WarningLevel.caution


def test_evaluate_unknown_jurisdiction(rec):
    ledger = StayLedger([rec("z1", "2024-01-01", "2024-01-20", code="ZZ")])
    assert evaluate(ledger, "ZZ", "KR", date(2024, 2, 1)) is None


def test_evaluate_all_skips_unknown(rec):
    ledger = StayLedger([
        rec("j1", "2024-01-01", "2024-01-10", code="JP"),
        rec("z1", "2024-02-01", "2024-02-10", code="ZZ"),
        rec("t1", "2024-03-01", "2024-03-10", code="TH"),
    ])
    results = evaluate_all(ledger, "KR", date(2024, 4, 1))
    assert set(results) == {"JP", "TH"}
    assert results["JP"].status.days_used == 10


def test_evaluate_with_custom_registry(rolling_policy, rec):
    registry = PolicyRegistry([rolling_policy])
    ledger = StayLedger([rec("r1", "2024-01-01", "2024-01-15")])
    assert evaluate(ledger, "xx", None, date(2024, 2, 1), registry=registry).status.days_used == 15
    assert evaluate(ledger, "JP", None, date(2024, 2, 1), registry=registry) is None


def test_evaluate_leaves_ledger_untouched(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2024-01-01")])
    evaluate_policy(rolling_policy, ledger, date(2024, 1, 31))
    assert ledger.records[0].exit_date is None


def test_concurrent_evaluations_agree(rec):
    ledger = StayLedger([
        rec("j1", "2024-01-01", "2024-02-15", code="JP"),
        rec("t1", "2024-03-01", "2024-04-15", code="TH"),
        rec("v1", "2024-05-01", code="VN"),
    ])
    ref = date(2024, 5, 20)
    expected = {code: evaluate(ledger, code, "KR", ref) for code in ("JP", "TH", "VN")}
    jobs = [code for code in ("JP", "TH", "VN") for _ in range(10)]
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda code: (code, evaluate(ledger, code, "KR", ref)), jobs))
    for code, result in results:
        assert result == expected[code]


def test_recommendations_attached(rolling_policy, rec):
    ledger = StayLedger([rec("r1", "2024-01-01", "2024-01-15")])
    result = evaluate_policy(rolling_policy, ledger, date(2024, 2, 1))
    assert "Your current stay status is safe." in result.recommendations
