"""Tests for activity entry use cases and the month lock check"""
import pytest
from datetime import date, time

from sqlalchemy.exc import OperationalError

from app.application.activities import (
    CreateActivityUseCase, UpdateActivityUseCase, DeleteActivityUseCase, list_month_activities,
)
from app.application.persons import CreatePersonUseCase
from app.application.reports import (
    GenerateMonthlyReportUseCase, RecalculateReportsUseCase, UnlockReportUseCase,
)
from app.domain.activity_entry import ActivityValidationError
from app.domain.errors import MonthLockedError, StoreError
from app.infrastructure.db.models import ActivityEntryModel

ACCOUNT = 1
YEAR = 2024


def _close_september(db):
    return GenerateMonthlyReportUseCase(db).execute(account_id=ACCOUNT, period_year=YEAR)


class TestCreateActivity:
    def test_create_preaching_span(self, db_session):
        eid = CreateActivityUseCase(db_session).execute(
            ACCOUNT, date(2024, 9, 5), "preaching", start_time="09:00", end_time="10:15",
        )
        entry = db_session.get(ActivityEntryModel, eid)
        assert entry.start_time == time(9, 0)
        assert entry.end_time == time(10, 15)
        assert entry.minutes is None

    def test_create_bible_course(self, db_session):
        pid = CreatePersonUseCase(db_session).execute(account_id=ACCOUNT, name="Ana")
        eid = CreateActivityUseCase(db_session).execute(
            ACCOUNT, date(2024, 9, 12), "bible_course", minutes=30, person_id=pid,
        )
        assert db_session.get(ActivityEntryModel, eid).person_id == pid

    def test_bible_course_unknown_person(self, db_session):
        with pytest.raises(ActivityValidationError, match="Persona no encontrada"):
            CreateActivityUseCase(db_session).execute(
                ACCOUNT, date(2024, 9, 12), "bible_course", minutes=30, person_id=999,
            )

    def test_person_only_for_bible_course(self, db_session):
        pid = CreatePersonUseCase(db_session).execute(account_id=ACCOUNT, name="Ana")
        with pytest.raises(ActivityValidationError, match="Solo los cursos"):
            CreateActivityUseCase(db_session).execute(
                ACCOUNT, date(2024, 9, 12), "preaching", minutes=30, person_id=pid,
            )

    def test_title_stripped(self, db_session):
        eid = CreateActivityUseCase(db_session).execute(
            ACCOUNT, date(2024, 9, 10), "sacred_service", minutes=30, title="  Limpieza ",
        )
        assert db_session.get(ActivityEntryModel, eid).title == "Limpieza"

    def test_overlapping_preaching_rejected(self, db_session):
        uc = CreateActivityUseCase(db_session)
        uc.execute(ACCOUNT, date(2024, 9, 5), "preaching", start_time="09:00", end_time="10:00")
        with pytest.raises(ActivityValidationError, match="solapa"):
            uc.execute(ACCOUNT, date(2024, 9, 5), "preaching", start_time="09:30", end_time="11:00")

    def test_adjacent_preaching_allowed(self, db_session):
        uc = CreateActivityUseCase(db_session)
        uc.execute(ACCOUNT, date(2024, 9, 5), "preaching", start_time="09:00", end_time="10:00")
        uc.execute(ACCOUNT, date(2024, 9, 5), "preaching", start_time="10:00", end_time="11:00")
        assert db_session.query(ActivityEntryModel).count() == 2

    def test_locked_month_rejected(self, db_session):
        _close_september(db_session)
        with pytest.raises(MonthLockedError):
            CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 30), "preaching", minutes=30)

    def test_next_month_still_open(self, db_session):
        _close_september(db_session)
        eid = CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 10, 1), "preaching", minutes=30)
        assert eid is not None

    def test_unlocked_month_editable_again(self, db_session):
        report = _close_september(db_session)
        UnlockReportUseCase(db_session).execute(ACCOUNT, report.id)
        CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 30), "preaching", minutes=65)

        reports = RecalculateReportsUseCase(db_session).execute(ACCOUNT, YEAR, 0)
        assert reports[0].total_minutes == 65
        assert reports[0].locked is True

        with pytest.raises(MonthLockedError):
            CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 29), "preaching", minutes=5)


class TestUpdateActivity:
    def test_update_minutes(self, db_session):
        eid = CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 5), "preaching", minutes=30)
        UpdateActivityUseCase(db_session).execute(eid, ACCOUNT, minutes=45, title="Casa en casa")
        entry = db_session.get(ActivityEntryModel, eid)
        assert entry.minutes == 45
        assert entry.title == "Casa en casa"

    def test_move_into_locked_month_rejected(self, db_session):
        _close_september(db_session)
        eid = CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 10, 5), "preaching", minutes=30)
        with pytest.raises(MonthLockedError):
            UpdateActivityUseCase(db_session).execute(eid, ACCOUNT, activity_date=date(2024, 9, 5))

    def test_edit_in_locked_month_rejected(self, db_session):
        eid = CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 5), "preaching", minutes=30)
        _close_september(db_session)
        with pytest.raises(MonthLockedError):
            UpdateActivityUseCase(db_session).execute(eid, ACCOUNT, minutes=90)
        assert db_session.get(ActivityEntryModel, eid).minutes == 30

    def test_invalid_update_rolled_back(self, db_session):
        eid = CreateActivityUseCase(db_session).execute(
            ACCOUNT, date(2024, 9, 5), "preaching", start_time="09:00", end_time="10:00",
        )
        with pytest.raises(ActivityValidationError):
            UpdateActivityUseCase(db_session).execute(eid, ACCOUNT, end_time="08:00")
        assert db_session.get(ActivityEntryModel, eid).end_time == time(10, 0)

    def test_not_found(self, db_session):
        with pytest.raises(ActivityValidationError, match="no encontrado"):
            UpdateActivityUseCase(db_session).execute(999, ACCOUNT, minutes=10)


class TestDeleteActivity:
    def test_delete(self, db_session):
        eid = CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 5), "preaching", minutes=30)
        DeleteActivityUseCase(db_session).execute(eid, ACCOUNT)
        assert db_session.get(ActivityEntryModel, eid) is None

    def test_delete_in_locked_month_rejected(self, db_session):
        eid = CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 5), "preaching", minutes=30)
        _close_september(db_session)
        with pytest.raises(MonthLockedError):
            DeleteActivityUseCase(db_session).execute(eid, ACCOUNT)


class TestListMonthActivities:
    def test_ordered_and_bounded(self, db_session):
        uc = CreateActivityUseCase(db_session)
        uc.execute(ACCOUNT, date(2024, 9, 20), "preaching", minutes=10)
        uc.execute(ACCOUNT, date(2024, 9, 2), "preaching", minutes=20)
        uc.execute(ACCOUNT, date(2024, 10, 1), "preaching", minutes=30)

        entries = list_month_activities(db_session, ACCOUNT, YEAR, 0)
        assert [e.activity_date for e in entries] == [date(2024, 9, 2), date(2024, 9, 20)]


class TestActivityStoreErrors:
    def test_create_commit_failure_translated(self, db_session, monkeypatch):
        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        with pytest.raises(StoreError, match="disk I/O error"):
            CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 5), "preaching", minutes=30)

    def test_delete_commit_failure_translated(self, db_session, monkeypatch):
        eid = CreateActivityUseCase(db_session).execute(ACCOUNT, date(2024, 9, 5), "preaching", minutes=30)

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        with pytest.raises(StoreError):
            DeleteActivityUseCase(db_session).execute(eid, ACCOUNT)
