"""
SQLAlchemy ORM models
"""
from datetime import date as date_type, time as time_type
from sqlalchemy import (
    String, DateTime, Integer, SmallInteger, Text, TIMESTAMP, Date, Time, func, Boolean,
    ForeignKey, UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB

from app.infrastructure.db.session import Base


class User(Base):
    """
    User model
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    last_seen_at: Mapped[DateTime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )


class EventLog(Base):
    """
    Audit log of ledger actions (append-only)
    """
    __tablename__ = "event_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    actor_user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    event_type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    payload_json: Mapped[dict] = mapped_column(JSONB, nullable=False)  # PostgreSQL JSONB

    occurred_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        index=True
    )
    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class PersonModel(Base):
    """People the user conducts bible courses with"""
    __tablename__ = "persons"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class ActivityEntryModel(Base):
    """
    Raw ministry activity: preaching, bible_course or sacred_service.

    Duration is either `minutes` or derived from start_time..end_time.
    """
    __tablename__ = "activity_entries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False)

    activity_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)  # preaching, bible_course, sacred_service
    minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    start_time: Mapped[time_type | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time_type | None] = mapped_column(Time, nullable=True)
    person_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("persons.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_activity_entries_account_date", "account_id", "activity_date"),
        CheckConstraint("minutes IS NULL OR minutes >= 0", name="ck_activity_entries_minutes"),
    )


class MonthlyReportModel(Base):
    """
    Closed month of the theocratic year (month_index 0 = September).

    Rows form a contiguous chain per (account_id, period_year); the leftover
    of month i is the carry-in of month i+1.
    """
    __tablename__ = "monthly_reports"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False)

    period_year: Mapped[int] = mapped_column(Integer, nullable=False)
    month_index: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    period_start: Mapped[date_type] = mapped_column(Date, nullable=False)
    period_end: Mapped[date_type] = mapped_column(Date, nullable=False)  # exclusive

    total_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    carried_in_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    carried_out_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    whole_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leftover_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    effective_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    distinct_studies: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sacred_service_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("account_id", "period_year", "month_index", name="uq_monthly_reports_period"),
        CheckConstraint("month_index >= 0 AND month_index <= 11", name="ck_monthly_reports_month_index"),
        CheckConstraint("whole_hours >= 0", name="ck_monthly_reports_whole_hours"),
        CheckConstraint(
            "leftover_minutes >= 0 AND leftover_minutes <= 59",
            name="ck_monthly_reports_leftover",
        ),
        CheckConstraint(
            "total_minutes >= 0 AND carried_in_minutes >= 0 AND sacred_service_minutes >= 0",
            name="ck_monthly_reports_minutes",
        ),
    )


class SchoolHoursModel(Base):
    """
    Whole hours spent at theocratic schools, recorded per month.

    school_date is the first day of the month. Counts toward the annual
    goal but not toward monthly reports.
    """
    __tablename__ = "school_hours"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False)

    school_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    hours: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_school_hours_account_date", "account_id", "school_date"),
        CheckConstraint("hours > 0", name="ck_school_hours_hours"),
    )
