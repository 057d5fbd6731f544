"""Tests for MonthAggregator"""
from datetime import date, time

from app.application.aggregation import MonthAggregator
from app.infrastructure.db.models import ActivityEntryModel, PersonModel

ACCOUNT = 1
OTHER_ACCOUNT = 2


def _entry(db, day: date, kind: str, minutes: int | None = None, start=None, end=None,
           person_id: int | None = None, title: str | None = None, account_id: int = ACCOUNT):
    row = ActivityEntryModel(
        account_id=account_id, activity_date=day, type=kind, minutes=minutes,
        start_time=start, end_time=end, person_id=person_id, title=title,
    )
    db.add(row)
    db.flush()
    return row


def _person(db, name: str, account_id: int = ACCOUNT) -> int:
    p = PersonModel(account_id=account_id, name=name)
    db.add(p)
    db.flush()
    return p.id


class TestAggregateMonth:
    def test_fixture_month(self, db_session):
        contact_a = _person(db_session, "A")
        _entry(db_session, date(2024, 9, 5), "preaching", 90)
        _entry(db_session, date(2024, 9, 20), "preaching", 45)
        _entry(db_session, date(2024, 9, 10), "sacred_service", 30)
        _entry(db_session, date(2024, 9, 12), "bible_course", 30, person_id=contact_a)
        _entry(db_session, date(2024, 9, 15), "bible_course", 30, person_id=contact_a)
        db_session.commit()

        result = MonthAggregator(db_session).aggregate_month(ACCOUNT, 2024, 0)
        assert result.total_minutes == 135
        assert result.distinct_studies == 1
        assert result.sacred_service_minutes == 30
        assert result.sacred_service_count == 1

    def test_empty_month(self, db_session):
        result = MonthAggregator(db_session).aggregate_month(ACCOUNT, 2024, 5)
        assert result.total_minutes == 0
        assert result.distinct_studies == 0
        assert result.sacred_service_minutes == 0
        assert result.sacred_service_count == 0

    def test_span_derived_minutes(self, db_session):
        _entry(db_session, date(2024, 9, 5), "preaching", start=time(9, 0), end=time(10, 15))
        _entry(db_session, date(2024, 9, 6), "preaching", start=time(10, 15), end=time(9, 0))
        db_session.commit()

        result = MonthAggregator(db_session).aggregate_month(ACCOUNT, 2024, 0)
        assert result.total_minutes == 75

    def test_half_open_range(self, db_session):
        _entry(db_session, date(2024, 8, 31), "preaching", 10)
        _entry(db_session, date(2024, 9, 1), "preaching", 20)
        _entry(db_session, date(2024, 9, 30), "preaching", 30)
        _entry(db_session, date(2024, 10, 1), "preaching", 40)
        db_session.commit()

        result = MonthAggregator(db_session).aggregate_month(ACCOUNT, 2024, 0)
        assert result.total_minutes == 50

    def test_bible_course_minutes_not_counted(self, db_session):
        pid = _person(db_session, "B")
        _entry(db_session, date(2024, 9, 12), "bible_course", 60, person_id=pid)
        db_session.commit()

        result = MonthAggregator(db_session).aggregate_month(ACCOUNT, 2024, 0)
        assert result.total_minutes == 0
        assert result.distinct_studies == 1

    def test_distinct_persons_counted(self, db_session):
        a = _person(db_session, "A")
        b = _person(db_session, "B")
        _entry(db_session, date(2024, 9, 2), "bible_course", 30, person_id=a)
        _entry(db_session, date(2024, 9, 3), "bible_course", 30, person_id=b)
        _entry(db_session, date(2024, 9, 4), "bible_course", 30, person_id=a)
        db_session.commit()

        assert MonthAggregator(db_session).aggregate_month(ACCOUNT, 2024, 0).distinct_studies == 2

    def test_other_account_ignored(self, db_session):
        _entry(db_session, date(2024, 9, 5), "preaching", 90, account_id=OTHER_ACCOUNT)
        db_session.commit()

        assert MonthAggregator(db_session).aggregate_month(ACCOUNT, 2024, 0).total_minutes == 0

    def test_december_range(self, db_session):
        _entry(db_session, date(2024, 12, 31), "preaching", 25)
        _entry(db_session, date(2025, 1, 1), "preaching", 35)
        db_session.commit()

        agg = MonthAggregator(db_session)
        assert agg.aggregate_month(ACCOUNT, 2024, 3).total_minutes == 25
        assert agg.aggregate_month(ACCOUNT, 2024, 4).total_minutes == 35


class TestSacredServiceRecords:
    def test_only_sacred_service_in_month(self, db_session):
        _entry(db_session, date(2024, 9, 10), "sacred_service", 30, title="Limpieza")
        _entry(db_session, date(2024, 9, 11), "preaching", 30)
        _entry(db_session, date(2024, 10, 1), "sacred_service", 60)
        db_session.commit()

        records = MonthAggregator(db_session).sacred_service_records(ACCOUNT, 2024, 0)
        assert [r.title for r in records] == ["Limpieza"]
