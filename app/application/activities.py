"""
Activity entry use cases: CRUD with the month lock check.

Entries whose date falls in a month with a locked report cannot be created,
moved, edited or deleted until that report is unlocked.
"""
from datetime import date

from sqlalchemy.orm import Session

from app.application.report_summary import ReportsReadService
from app.domain.activity_entry import (
    ActivityValidationError, KIND_BIBLE_COURSE, KIND_PREACHING,
    find_overlap, parse_clock, validate_activity,
)
from app.domain.errors import MonthLockedError
from app.domain.theocratic_year import month_index_from_date, month_range, theocratic_year_base
from app.infrastructure.db.errors import store_errors
from app.infrastructure.db.models import ActivityEntryModel, PersonModel


def _check_unlocked(db: Session, account_id: int, day: date) -> None:
    if ReportsReadService(db).is_date_locked(account_id, day):
        base = theocratic_year_base(day)
        raise MonthLockedError(base, month_index_from_date(base, day))


def _check_person(db: Session, account_id: int, person_id: int | None) -> None:
    if person_id is None:
        return
    person = db.query(PersonModel).filter(
        PersonModel.id == person_id,
        PersonModel.account_id == account_id,
    ).first()
    if not person:
        raise ActivityValidationError("Persona no encontrada")


def _check_overlap(db: Session, entry: ActivityEntryModel) -> None:
    if entry.type != KIND_PREACHING or entry.start_time is None or entry.end_time is None:
        return
    query = db.query(ActivityEntryModel).filter(
        ActivityEntryModel.account_id == entry.account_id,
        ActivityEntryModel.activity_date == entry.activity_date,
        ActivityEntryModel.type == KIND_PREACHING,
    )
    if entry.id is not None:
        query = query.filter(ActivityEntryModel.id != entry.id)
    clash = find_overlap(
        entry.start_time, entry.end_time,
        ((o.start_time, o.end_time) for o in query.all()),
    )
    if clash:
        raise ActivityValidationError(
            f"Se solapa con otro registro de {clash[0]:%H:%M} a {clash[1]:%H:%M}"
        )


def _validate(db: Session, entry: ActivityEntryModel) -> None:
    validate_activity(entry.type, entry.minutes, entry.start_time, entry.end_time, entry.person_id)
    if entry.type != KIND_BIBLE_COURSE and entry.person_id is not None:
        raise ActivityValidationError("Solo los cursos bíblicos se asocian a una persona")
    _check_person(db, entry.account_id, entry.person_id)
    _check_overlap(db, entry)


class CreateActivityUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        activity_date: date,
        kind: str,
        minutes: int | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        person_id: int | None = None,
        title: str = "",
    ) -> int:
        _check_unlocked(self.db, account_id, activity_date)

        entry = ActivityEntryModel(
            account_id=account_id,
            activity_date=activity_date,
            type=kind,
            minutes=minutes,
            start_time=parse_clock(start_time),
            end_time=parse_clock(end_time),
            person_id=person_id,
            title=title.strip() or None,
        )
        _validate(self.db, entry)

        self.db.add(entry)
        with store_errors():
            self.db.flush()
            self.db.commit()
        return entry.id


class UpdateActivityUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, entry_id: int, account_id: int, **changes) -> None:
        entry = self.db.query(ActivityEntryModel).filter(
            ActivityEntryModel.id == entry_id,
            ActivityEntryModel.account_id == account_id,
        ).first()
        if not entry:
            raise ActivityValidationError("Registro no encontrado")

        _check_unlocked(self.db, account_id, entry.activity_date)
        if "activity_date" in changes and changes["activity_date"] != entry.activity_date:
            _check_unlocked(self.db, account_id, changes["activity_date"])

        with self.db.no_autoflush:
            if "activity_date" in changes:
                entry.activity_date = changes["activity_date"]
            if "minutes" in changes:
                entry.minutes = changes["minutes"]
            if "start_time" in changes:
                entry.start_time = parse_clock(changes["start_time"])
            if "end_time" in changes:
                entry.end_time = parse_clock(changes["end_time"])
            if "person_id" in changes:
                entry.person_id = changes["person_id"]
            if "title" in changes:
                entry.title = (changes["title"] or "").strip() or None

            try:
                _validate(self.db, entry)
            except ActivityValidationError:
                self.db.rollback()
                raise
        with store_errors():
            self.db.commit()


class DeleteActivityUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, entry_id: int, account_id: int) -> None:
        entry = self.db.query(ActivityEntryModel).filter(
            ActivityEntryModel.id == entry_id,
            ActivityEntryModel.account_id == account_id,
        ).first()
        if not entry:
            raise ActivityValidationError("Registro no encontrado")

        _check_unlocked(self.db, account_id, entry.activity_date)
        self.db.delete(entry)
        with store_errors():
            self.db.commit()


def list_month_activities(db: Session, account_id: int, period_year: int, month_index: int) -> list[ActivityEntryModel]:
    """Entries of one theocratic month ordered by date, then start time."""
    start, end = month_range(period_year, month_index)
    return (
        db.query(ActivityEntryModel)
        .filter(
            ActivityEntryModel.account_id == account_id,
            ActivityEntryModel.activity_date >= start,
            ActivityEntryModel.activity_date < end,
        )
        .order_by(ActivityEntryModel.activity_date, ActivityEntryModel.start_time, ActivityEntryModel.id)
        .all()
    )
