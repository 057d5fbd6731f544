"""
Event Log Repository - audit trail of ledger actions

Every generate / unlock / recalculate / comment edit is appended as an
immutable event so a year's closing history can be reviewed later.
"""
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from sqlalchemy.orm import Session

from app.infrastructure.db.models import EventLog


class EventLogRepository:
    """
    Repository for the event log
    """

    def __init__(self, db: Session):
        self.db = db

    def append_event(
        self,
        account_id: int,
        event_type: str,
        payload: Dict[str, Any],
        occurred_at: Optional[datetime] = None,
        actor_user_id: Optional[int] = None,
    ) -> int:
        """
        Append an event to the log

        Args:
            account_id: account ID
            event_type: event type (e.g. "report_generated")
            payload: event data (stored as JSONB)
            occurred_at: when it happened (default: now, UTC)
            actor_user_id: who did it (optional)

        Returns:
            event_id: ID of the new event

        Example:
            >>> repo = EventLogRepository(db)
            >>> event_id = repo.append_event(
            ...     account_id=1,
            ...     event_type="report_unlocked",
            ...     payload={"report_id": 12, "period_year": 2024, "month_index": 3},
            ... )
        """
        if occurred_at is None:
            occurred_at = datetime.now(timezone.utc)

        event = EventLog(
            account_id=account_id,
            actor_user_id=actor_user_id,
            event_type=event_type,
            payload_json=payload,
            occurred_at=occurred_at,
        )

        self.db.add(event)
        self.db.flush()  # get the ID without committing

        return event.id

    def list_events(
        self,
        account_id: int,
        event_types: Optional[List[str]] = None,
        limit: int = 200,
    ) -> List[EventLog]:
        """
        Latest events of an account, newest first

        Args:
            account_id: account ID
            event_types: filter by event type (optional)
            limit: max events returned (default: 200)
        """
        query = self.db.query(EventLog).filter(EventLog.account_id == account_id)

        if event_types:
            query = query.filter(EventLog.event_type.in_(event_types))

        return query.order_by(EventLog.id.desc()).limit(limit).all()
