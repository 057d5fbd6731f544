"""Tests for ReportsReadService: year summary and locked months"""
from datetime import date

from app.application.report_summary import ReportsReadService
from app.application.school_hours import CreateSchoolHoursUseCase
from app.application.reports import GenerateMonthlyReportUseCase, UnlockReportUseCase
from app.infrastructure.db.models import ActivityEntryModel

ACCOUNT = 1
YEAR = 2024


def _entry(db, day: date, kind: str, minutes: int):
    db.add(ActivityEntryModel(account_id=ACCOUNT, activity_date=day, type=kind, minutes=minutes))
    db.commit()


def _generate(db):
    return GenerateMonthlyReportUseCase(db).execute(account_id=ACCOUNT, period_year=YEAR)


class TestYearSummary:
    def test_empty_year(self, db_session):
        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR)
        assert summary["months_closed"] == 0
        assert summary["total_whole_hours"] == 0
        assert summary["final_leftover_minutes"] == 0
        assert summary["goal_progress_pct"] == 0.0
        assert summary["next_month_index"] == 0
        assert summary["next_month_name"] == "septiembre"
        assert summary["year_label"] == "2024-2025"
        assert summary["first_unlocked_month_index"] is None

    def test_totals(self, db_session):
        _entry(db_session, date(2024, 9, 5), "preaching", 135)
        _entry(db_session, date(2024, 9, 6), "sacred_service", 90)
        _entry(db_session, date(2024, 10, 5), "preaching", 50)
        _generate(db_session)
        _generate(db_session)

        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR)
        assert summary["months_closed"] == 2
        assert summary["total_whole_hours"] == 3
        assert summary["final_leftover_minutes"] == 5
        assert summary["total_sacred_service_minutes"] == 90
        assert summary["total_sacred_service_hours"] == 1.5
        assert summary["annual_goal_hours"] == 600
        assert summary["goal_progress_pct"] == 0.5
        assert summary["next_month_name"] == "noviembre"
        assert summary["is_complete"] is False

    def test_first_unlocked(self, db_session):
        _generate(db_session)
        last = _generate(db_session)
        UnlockReportUseCase(db_session).execute(ACCOUNT, last.id)

        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR)
        assert summary["first_unlocked_month_index"] == 1

    def test_complete_year(self, db_session):
        for _ in range(12):
            _generate(db_session)
        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR)
        assert summary["is_complete"] is True
        assert summary["next_month_index"] is None
        assert summary["next_month_name"] is None


class TestGoalTracking:
    def test_school_hours_count_toward_goal(self, db_session):
        _entry(db_session, date(2024, 9, 5), "preaching", 135)
        _entry(db_session, date(2024, 9, 6), "sacred_service", 90)
        _generate(db_session)
        CreateSchoolHoursUseCase(db_session).execute(
            account_id=ACCOUNT, period_year=YEAR, month_index=0, hours=10, title="Escuela",
        )

        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR, today=date(2024, 10, 15))
        assert summary["school_hours_total"] == 10
        assert summary["annual_countable_hours"] == 12
        assert summary["combined_hours"] == 13.5
        assert summary["goal_progress_pct"] == 2.0
        assert summary["hours_remaining_annual"] == 588

    def test_monthly_average_track(self, db_session):
        _entry(db_session, date(2024, 9, 5), "preaching", 40 * 60)
        _generate(db_session)
        CreateSchoolHoursUseCase(db_session).execute(
            account_id=ACCOUNT, period_year=YEAR, month_index=1, hours=20, title="Escuela",
        )

        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR, today=date(2024, 11, 3))
        assert summary["monthly_goal_avg"] == 50.0
        assert summary["months_elapsed"] == 3
        assert summary["expected_hours_so_far"] == 150.0
        assert summary["annual_countable_hours"] == 60
        assert summary["hours_behind_monthly_average"] == 90.0
        assert summary["monthly_average_current"] == 20.0
        assert summary["monthly_track_pct"] == 26.7

    def test_ahead_of_average(self, db_session):
        _entry(db_session, date(2024, 9, 5), "preaching", 60 * 60)
        _generate(db_session)

        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR, today=date(2024, 9, 20))
        assert summary["hours_behind_monthly_average"] == 0.0
        assert summary["monthly_track_pct"] == 100.0

    def test_year_not_started(self, db_session):
        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR, today=date(2024, 5, 1))
        assert summary["months_elapsed"] == 0
        assert summary["expected_hours_so_far"] == 0.0
        assert summary["monthly_average_current"] == 0.0
        assert summary["monthly_track_pct"] == 0.0

    def test_progress_capped(self, db_session):
        CreateSchoolHoursUseCase(db_session).execute(
            account_id=ACCOUNT, period_year=YEAR, month_index=0, hours=700, title="Escuela",
        )
        summary = ReportsReadService(db_session).get_year_summary(ACCOUNT, YEAR, today=date(2025, 9, 1))
        assert summary["goal_progress_pct"] == 100.0
        assert summary["hours_remaining_annual"] == 0


class TestLockedMonths:
    def test_locked_indexes(self, db_session):
        _generate(db_session)
        last = _generate(db_session)
        UnlockReportUseCase(db_session).execute(ACCOUNT, last.id)
        assert ReportsReadService(db_session).locked_month_indexes(ACCOUNT, YEAR) == [0]

    def test_is_date_locked(self, db_session):
        _generate(db_session)
        service = ReportsReadService(db_session)
        assert service.is_date_locked(ACCOUNT, date(2024, 9, 15)) is True
        assert service.is_date_locked(ACCOUNT, date(2024, 10, 1)) is False
        assert service.is_date_locked(2, date(2024, 9, 15)) is False

    def test_list_reports_ordered(self, db_session):
        for _ in range(3):
            _generate(db_session)
        reports = ReportsReadService(db_session).list_reports(ACCOUNT, YEAR)
        assert [r.month_index for r in reports] == [0, 1, 2]
