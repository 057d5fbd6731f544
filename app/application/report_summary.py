"""
Reports read service: report list, year summary and locked months.
"""
from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.application.school_hours import total_school_hours
from app.config import get_settings
from app.domain.monthly_report import MonthlyReport, MINUTES_PER_HOUR
from app.domain.theocratic_year import (
    MONTHS_PER_YEAR, month_index_from_date, month_name, months_elapsed, theocratic_year_base, year_label,
)
from app.infrastructure.reports.repository import MonthlyReportRepository


class ReportsReadService:
    def __init__(self, db: Session):
        self.db = db
        self.reports = MonthlyReportRepository(db)

    def list_reports(self, account_id: int, period_year: int) -> list[MonthlyReport]:
        """Reports of the year as a stable sequence ordered by month_index."""
        return [MonthlyReport.from_model(r) for r in self.reports.list_for_year(account_id, period_year)]

    def locked_month_indexes(self, account_id: int, period_year: int) -> list[int]:
        return [r.month_index for r in self.reports.list_for_year(account_id, period_year) if r.locked]

    def is_date_locked(self, account_id: int, day: date) -> bool:
        """True when the report of the month containing `day` exists and is locked."""
        base = theocratic_year_base(day)
        report = self.reports.get_by_index(account_id, base, month_index_from_date(base, day))
        return bool(report and report.locked)

    def get_year_summary(self, account_id: int, period_year: int, today: date | None = None) -> dict:
        """
        Totals shown above the report table.

        - total_whole_hours: sum of whole_hours
        - final_leftover_minutes: leftover of the last closed month
        - annual_countable_hours: whole hours plus school hours (what the goal counts)
        - goal_progress_pct: annual_countable_hours against ANNUAL_GOAL_HOURS, capped at 100
        - expected_hours_so_far / hours_behind_monthly_average: the goal spread
          evenly over 12 months, up to and including the current month
        - first_unlocked_month_index: where a recalculation should start
        """
        settings = get_settings()
        if today is None:
            today = datetime.now(ZoneInfo(settings.TIMEZONE)).date()

        reports = self.list_reports(account_id, period_year)
        goal_hours = settings.ANNUAL_GOAL_HOURS

        total_whole_hours = sum(r.whole_hours for r in reports)
        total_sacred = sum(r.sacred_service_minutes for r in reports)
        school_hours = total_school_hours(self.db, account_id, period_year)
        countable = total_whole_hours + school_hours
        unlocked = [r.month_index for r in reports if not r.locked]
        next_index = len(reports)

        monthly_goal_avg = goal_hours / MONTHS_PER_YEAR
        elapsed = months_elapsed(period_year, today)
        expected = monthly_goal_avg * elapsed

        return {
            "period_year": period_year,
            "year_label": year_label(period_year),
            "months_closed": len(reports),
            "is_complete": len(reports) >= MONTHS_PER_YEAR,
            "next_month_index": next_index if next_index < MONTHS_PER_YEAR else None,
            "next_month_name": month_name(period_year, next_index) if next_index < MONTHS_PER_YEAR else None,
            "total_whole_hours": total_whole_hours,
            "final_leftover_minutes": reports[-1].leftover_minutes if reports else 0,
            "total_sacred_service_minutes": total_sacred,
            "total_sacred_service_hours": round(total_sacred / MINUTES_PER_HOUR, 2),
            "school_hours_total": school_hours,
            "annual_countable_hours": countable,
            "combined_hours": round(countable + total_sacred / MINUTES_PER_HOUR, 2),
            "annual_goal_hours": goal_hours,
            "goal_progress_pct": min(100.0, round(countable / goal_hours * 100, 1)) if goal_hours else 0.0,
            "hours_remaining_annual": max(0, goal_hours - countable),
            "monthly_goal_avg": round(monthly_goal_avg, 1),
            "months_elapsed": elapsed,
            "expected_hours_so_far": round(expected, 1),
            "hours_behind_monthly_average": round(max(0.0, expected - countable), 1),
            "monthly_average_current": round(countable / elapsed, 1) if elapsed else 0.0,
            "monthly_track_pct": min(100.0, round(total_whole_hours / expected * 100, 1)) if expected else 0.0,
            "first_unlocked_month_index": min(unlocked) if unlocked else None,
        }
