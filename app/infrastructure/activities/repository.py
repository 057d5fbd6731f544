"""
Activity entry store - read access used by the aggregator and the lock check
"""
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from app.domain.activity_entry import ActivityRecord
from app.infrastructure.db.errors import store_errors
from app.infrastructure.db.models import ActivityEntryModel


class ActivityEntryRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_in_range(
        self,
        account_id: int,
        start: date,
        end: date,
        kind: Optional[str] = None,
    ) -> List[ActivityRecord]:
        """
        Entries with start <= activity_date < end, ordered by date then id

        Args:
            account_id: account ID
            start: first day (inclusive)
            end: upper bound (exclusive)
            kind: only this activity type (optional)
        """
        with store_errors():
            query = self.db.query(ActivityEntryModel).filter(
                ActivityEntryModel.account_id == account_id,
                ActivityEntryModel.activity_date >= start,
                ActivityEntryModel.activity_date < end,
            )
            if kind is not None:
                query = query.filter(ActivityEntryModel.type == kind)
            rows = query.order_by(ActivityEntryModel.activity_date, ActivityEntryModel.id).all()
        return [ActivityRecord.from_model(r) for r in rows]
