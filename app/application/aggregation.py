"""
Month aggregator: reduces raw activity entries to per-month totals.

Pure read: depends only on activity_entries and (year, month_index), never on
existing reports, so re-running it after edits always yields fresh totals.
"""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.domain.activity_entry import (
    ActivityRecord, KIND_BIBLE_COURSE, KIND_PREACHING, KIND_SACRED_SERVICE,
)
from app.domain.theocratic_year import month_range
from app.infrastructure.activities.repository import ActivityEntryRepository


@dataclass(frozen=True)
class MonthAggregate:
    total_minutes: int
    distinct_studies: int
    sacred_service_minutes: int
    sacred_service_count: int


def reduce_records(records: list[ActivityRecord]) -> MonthAggregate:
    """Sum preaching and sacred service separately; count distinct study persons."""
    total_minutes = 0
    sacred_minutes = 0
    sacred_count = 0
    study_person_ids: set[int] = set()

    for r in records:
        if r.kind == KIND_PREACHING:
            total_minutes += r.duration_minutes
        elif r.kind == KIND_SACRED_SERVICE:
            sacred_minutes += r.duration_minutes
            sacred_count += 1
        elif r.kind == KIND_BIBLE_COURSE and r.person_id is not None:
            study_person_ids.add(r.person_id)

    return MonthAggregate(
        total_minutes=total_minutes,
        distinct_studies=len(study_person_ids),
        sacred_service_minutes=sacred_minutes,
        sacred_service_count=sacred_count,
    )


class MonthAggregator:
    def __init__(self, db: Session):
        self.db = db
        self.entries = ActivityEntryRepository(db)

    def aggregate_month(self, account_id: int, year: int, month_index: int) -> MonthAggregate:
        start, end = month_range(year, month_index)
        return reduce_records(self.entries.list_in_range(account_id, start, end))

    def sacred_service_records(self, account_id: int, year: int, month_index: int) -> list[ActivityRecord]:
        """Individual sacred-service entries of a month (for the auto summary)."""
        start, end = month_range(year, month_index)
        return self.entries.list_in_range(account_id, start, end, kind=KIND_SACRED_SERVICE)
