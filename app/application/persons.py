"""
Persons use cases: CRUD of the people the user holds bible courses with.
"""
from sqlalchemy.orm import Session

from app.application.report_summary import ReportsReadService
from app.domain.errors import MonthLockedError
from app.domain.theocratic_year import month_index_from_date, theocratic_year_base
from app.infrastructure.db.errors import store_errors
from app.infrastructure.db.models import ActivityEntryModel, PersonModel


class PersonValidationError(ValueError):
    pass


class CreatePersonUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, name: str, notes: str = "") -> int:
        name = name.strip()
        if not name:
            raise PersonValidationError("El nombre no puede estar vacío")

        person = PersonModel(
            account_id=account_id,
            name=name,
            notes=notes.strip() or None,
        )
        self.db.add(person)
        with store_errors():
            self.db.flush()
            self.db.commit()
        return person.id


class UpdatePersonUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, person_id: int, account_id: int, **changes) -> None:
        person = _get_person(self.db, person_id, account_id)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise PersonValidationError("El nombre no puede estar vacío")
            person.name = name
        if "notes" in changes:
            person.notes = (changes["notes"] or "").strip() or None
        with store_errors():
            self.db.commit()


class DeletePersonUseCase:
    """
    Delete a person. Their bible-course entries stay, detached from the person
    (person_id -> NULL), so they no longer count as a distinct study.

    Refused with MonthLockedError while any of those entries falls in a
    month whose report is locked.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, person_id: int, account_id: int) -> None:
        person = _get_person(self.db, person_id, account_id)
        entries = self.db.query(ActivityEntryModel).filter(
            ActivityEntryModel.account_id == account_id,
            ActivityEntryModel.person_id == person.id,
        )

        read_service = ReportsReadService(self.db)
        for day in sorted({e.activity_date for e in entries}):
            if read_service.is_date_locked(account_id, day):
                base = theocratic_year_base(day)
                raise MonthLockedError(base, month_index_from_date(base, day))

        with store_errors():
            entries.update({ActivityEntryModel.person_id: None}, synchronize_session=False)
            self.db.delete(person)
            self.db.commit()


def list_persons(db: Session, account_id: int) -> list[PersonModel]:
    return (
        db.query(PersonModel)
        .filter(PersonModel.account_id == account_id)
        .order_by(PersonModel.created_at, PersonModel.id)
        .all()
    )


def _get_person(db: Session, person_id: int, account_id: int) -> PersonModel:
    person = db.query(PersonModel).filter(
        PersonModel.id == person_id,
        PersonModel.account_id == account_id,
    ).first()
    if not person:
        raise PersonValidationError("Persona no encontrada")
    return person
