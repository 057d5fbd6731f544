"""
School hours use cases: whole hours spent at theocratic schools.

A record belongs to a theocratic month (stored as the month's first day).
School hours count toward the annual goal only; monthly reports never see them.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.theocratic_year import month_range
from app.infrastructure.db.errors import store_errors
from app.infrastructure.db.models import SchoolHoursModel


class SchoolHoursValidationError(ValueError):
    pass


def _validate_hours(hours) -> int:
    if isinstance(hours, bool) or not isinstance(hours, int) or hours <= 0:
        raise SchoolHoursValidationError("Horas debe ser entero > 0")
    return hours


def _validate_title(title: str | None) -> str:
    title = (title or "").strip()
    if not title:
        raise SchoolHoursValidationError("Título requerido")
    return title


class CreateSchoolHoursUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, period_year: int, month_index: int, hours: int, title: str) -> int:
        record = SchoolHoursModel(
            account_id=account_id,
            school_date=month_range(period_year, month_index)[0],
            hours=_validate_hours(hours),
            title=_validate_title(title),
        )
        self.db.add(record)
        with store_errors():
            self.db.flush()
            self.db.commit()
        return record.id


class UpdateSchoolHoursUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, record_id: int, account_id: int, **changes) -> None:
        """
        Change hours, title or month. Moving to another month needs both
        `period_year` and `month_index`.
        """
        record = _get_record(self.db, record_id, account_id)

        if "hours" in changes:
            record.hours = _validate_hours(changes["hours"])
        if "title" in changes:
            record.title = _validate_title(changes["title"])
        if "period_year" in changes or "month_index" in changes:
            if changes.get("period_year") is None or changes.get("month_index") is None:
                raise SchoolHoursValidationError("Indica año y mes")
            record.school_date = month_range(changes["period_year"], changes["month_index"])[0]

        with store_errors():
            self.db.commit()


class DeleteSchoolHoursUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, record_id: int, account_id: int) -> None:
        record = _get_record(self.db, record_id, account_id)
        self.db.delete(record)
        with store_errors():
            self.db.commit()


def list_school_hours(db: Session, account_id: int, period_year: int) -> list[SchoolHoursModel]:
    """Records of a theocratic year, newest month first."""
    start = month_range(period_year, 0)[0]
    end = month_range(period_year, 11)[1]
    return (
        db.query(SchoolHoursModel)
        .filter(
            SchoolHoursModel.account_id == account_id,
            SchoolHoursModel.school_date >= start,
            SchoolHoursModel.school_date < end,
        )
        .order_by(SchoolHoursModel.school_date.desc(), SchoolHoursModel.id.desc())
        .all()
    )


def total_school_hours(db: Session, account_id: int, period_year: int) -> int:
    start = month_range(period_year, 0)[0]
    end = month_range(period_year, 11)[1]
    with store_errors():
        total = (
            db.query(func.sum(SchoolHoursModel.hours))
            .filter(
                SchoolHoursModel.account_id == account_id,
                SchoolHoursModel.school_date >= start,
                SchoolHoursModel.school_date < end,
            )
            .scalar()
        )
    return total or 0


def _get_record(db: Session, record_id: int, account_id: int) -> SchoolHoursModel:
    record = db.query(SchoolHoursModel).filter(
        SchoolHoursModel.id == record_id,
        SchoolHoursModel.account_id == account_id,
    ).first()
    if not record:
        raise SchoolHoursValidationError("Registro no encontrado")
    return record
