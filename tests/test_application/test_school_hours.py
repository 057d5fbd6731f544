"""Tests for school hours use cases"""
import pytest
from datetime import date

from app.application.school_hours import (
    CreateSchoolHoursUseCase, UpdateSchoolHoursUseCase, DeleteSchoolHoursUseCase,
    SchoolHoursValidationError, list_school_hours, total_school_hours,
)
from app.domain.theocratic_year import InvalidMonthIndexError
from app.infrastructure.db.models import SchoolHoursModel

ACCOUNT = 1
YEAR = 2024


def _create(db, month_index: int = 0, hours: int = 8, title: str = "Escuela de precursores", account_id: int = ACCOUNT):
    return CreateSchoolHoursUseCase(db).execute(
        account_id=account_id, period_year=YEAR, month_index=month_index, hours=hours, title=title,
    )


class TestCreateSchoolHours:
    def test_stored_on_first_day_of_month(self, db_session):
        rid = _create(db_session, month_index=4)
        record = db_session.get(SchoolHoursModel, rid)
        assert record.school_date == date(2025, 1, 1)
        assert record.hours == 8
        assert record.title == "Escuela de precursores"

    @pytest.mark.parametrize("hours", [0, -3, 1.5, True])
    def test_hours_must_be_positive_integer(self, db_session, hours):
        with pytest.raises(SchoolHoursValidationError, match="entero"):
            _create(db_session, hours=hours)

    def test_title_required(self, db_session):
        with pytest.raises(SchoolHoursValidationError, match="Título"):
            _create(db_session, title="  ")

    def test_invalid_month(self, db_session):
        with pytest.raises(InvalidMonthIndexError):
            _create(db_session, month_index=12)


class TestUpdateSchoolHours:
    def test_change_hours_and_title(self, db_session):
        rid = _create(db_session)
        UpdateSchoolHoursUseCase(db_session).execute(rid, ACCOUNT, hours=10, title=" Asamblea ")
        record = db_session.get(SchoolHoursModel, rid)
        assert record.hours == 10
        assert record.title == "Asamblea"

    def test_move_to_other_month(self, db_session):
        rid = _create(db_session)
        UpdateSchoolHoursUseCase(db_session).execute(rid, ACCOUNT, period_year=YEAR, month_index=2)
        assert db_session.get(SchoolHoursModel, rid).school_date == date(2024, 11, 1)

    def test_move_needs_year_and_month(self, db_session):
        rid = _create(db_session)
        with pytest.raises(SchoolHoursValidationError):
            UpdateSchoolHoursUseCase(db_session).execute(rid, ACCOUNT, month_index=2)

    def test_invalid_hours(self, db_session):
        rid = _create(db_session)
        with pytest.raises(SchoolHoursValidationError):
            UpdateSchoolHoursUseCase(db_session).execute(rid, ACCOUNT, hours=0)

    def test_other_account_not_found(self, db_session):
        rid = _create(db_session)
        with pytest.raises(SchoolHoursValidationError, match="no encontrado"):
            UpdateSchoolHoursUseCase(db_session).execute(rid, 2, hours=3)


class TestDeleteSchoolHours:
    def test_delete(self, db_session):
        rid = _create(db_session)
        DeleteSchoolHoursUseCase(db_session).execute(rid, ACCOUNT)
        assert db_session.get(SchoolHoursModel, rid) is None


class TestListSchoolHours:
    def test_year_scoped_newest_first(self, db_session):
        _create(db_session, month_index=0, hours=2)
        _create(db_session, month_index=5, hours=3)
        _create(db_session, month_index=1, hours=4, account_id=2)
        CreateSchoolHoursUseCase(db_session).execute(
            account_id=ACCOUNT, period_year=YEAR + 1, month_index=0, hours=7, title="Otro año",
        )

        records = list_school_hours(db_session, ACCOUNT, YEAR)
        assert [r.hours for r in records] == [3, 2]
        assert total_school_hours(db_session, ACCOUNT, YEAR) == 5

    def test_total_empty(self, db_session):
        assert total_school_hours(db_session, ACCOUNT, YEAR) == 0
