"""Immutable, entry-ordered view over a traveler's stay records."""
from __future__ import annotations

import dataclasses
from datetime import date
from typing import Iterable, Iterator

from staytrack.domain import IntegrityIssue, IntegrityProblem, StayRecord
from staytrack.services.date_window import DateRange, as_date, intersect


def record_range(record: StayRecord, open_until: date | None = None) -> DateRange | None:
    """Range covered by a record. Inverted records and unresolved open records cover nothing."""
    end = record.exit_date if record.exit_date is not None else open_until
    if end is None or record.is_inverted:
        return None
    rng = DateRange(record.entry_date, end)
    return None if rng.is_empty else rng


class StayLedger:
    """Snapshot of stay records. Never mutated; derived ledgers are new objects."""

    def __init__(self, records: Iterable[StayRecord] = ()):
        normalized = (
            dataclasses.replace(r, jurisdiction_code=r.jurisdiction_code.upper())
            if r.jurisdiction_code != r.jurisdiction_code.upper()
            else r
            for r in records
        )
        self._records: tuple[StayRecord, ...] = tuple(
            sorted(normalized, key=lambda r: (r.entry_date, str(r.id)))
        )

    def __iter__(self) -> Iterator[StayRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"StayLedger({len(self._records)} records)"

    @property
    def records(self) -> tuple[StayRecord, ...]:
        return self._records

    def records_for(self, jurisdiction_code: str) -> list[StayRecord]:
        code = jurisdiction_code.upper()
        return [r for r in self._records if r.jurisdiction_code == code]

    def jurisdictions(self) -> list[str]:
        seen: list[str] = []
        for r in self._records:
            if r.jurisdiction_code not in seen:
                seen.append(r.jurisdiction_code)
        return seen

    def as_of(self, reference_date: date) -> StayLedger:
        """Close open records at reference_date. Open records starting later are left out."""
        ref = as_date(reference_date)
        resolved = []
        for r in self._records:
            if r.exit_date is not None:
                resolved.append(r)
            elif r.entry_date <= ref:
                resolved.append(dataclasses.replace(r, exit_date=ref))
        return StayLedger(resolved)

    def with_record(self, record: StayRecord) -> StayLedger:
        return StayLedger((*self._records, record))

    def integrity_issues(self, jurisdiction_code: str | None = None) -> list[IntegrityIssue]:
        """Inverted records, and records of one jurisdiction sharing at least one day."""
        records = self.records_for(jurisdiction_code) if jurisdiction_code else list(self._records)
        issues: list[IntegrityIssue] = []
        for r in records:
            if r.is_inverted:
                issues.append(
                    IntegrityIssue(
                        problem=IntegrityProblem.inverted_dates,
                        record_ids=(str(r.id),),
                        message=f"Stay {r.id} in {r.jurisdiction_code} exits ({r.exit_date}) before it enters ({r.entry_date}).",
                    )
                )

        # Open records are compared as running forever
        open_end = date.max
        valid = [r for r in records if not r.is_inverted]
        for i, first in enumerate(valid):
            first_range = record_range(first, open_end)
            for second in valid[i + 1:]:
                if second.jurisdiction_code != first.jurisdiction_code:
                    continue
                second_range = record_range(second, open_end)
                if first_range and second_range and intersect(first_range, second_range):
                    issues.append(
                        IntegrityIssue(
                            problem=IntegrityProblem.overlapping_stays,
                            record_ids=(str(first.id), str(second.id)),
                            message=f"Stays {first.id} and {second.id} in {first.jurisdiction_code} overlap.",
                        )
                    )
        return issues
