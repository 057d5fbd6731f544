"""
Monthly report ledger use cases.

The ledger is a sequential chain of at most 12 closed months per theocratic
year. Each month carries its leftover minutes (< 60) into the next one, so
reopening month k invalidates the carry-in of every month after it; the
recalculation walks forward from k to the end of the chain.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.application.aggregation import MonthAggregator
from app.config import get_settings
from app.domain.errors import (
    AlreadyCompleteError, AlreadyUnlockedError, NotAuthenticatedError,
    ReportNotFoundError, ReportNotLastError,
)
from app.domain.monthly_report import (
    MonthlyReport, build_comment, compute_rollover, format_sacred_service_line,
)
from app.domain.theocratic_year import MONTHS_PER_YEAR, month_range, validate_month_index
from app.infrastructure.db.models import MonthlyReportModel
from app.infrastructure.eventlog.repository import EventLogRepository
from app.infrastructure.reports.repository import MonthlyReportRepository

logger = logging.getLogger(__name__)


def _require_account(account_id: Optional[int]) -> int:
    if not account_id:
        raise NotAuthenticatedError()
    return account_id


class _LedgerUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.reports = MonthlyReportRepository(db)
        self.aggregator = MonthAggregator(db)
        self.event_repo = EventLogRepository(db)

    def _run_in_transaction(self, fn, *args, **kwargs):
        """Run fn and commit; roll back and re-raise on any failure."""
        try:
            result = fn(*args, **kwargs)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return result


class GenerateMonthlyReportUseCase(_LedgerUseCase):
    """
    Use case: close the next month of the year

    Steps:
    1. next_index = number of existing reports (no gaps, no arbitrary index)
    2. Aggregate activity of that month
    3. carried_in = leftover of the previous report (0 for September)
    4. Compute effective / whole hours / leftover
    5. Optionally append the sacred-service auto summary to the comment
    6. Insert the row locked
    """

    def execute(
        self,
        account_id: Optional[int],
        period_year: int,
        comment: Optional[str] = None,
        include_auto_summary: bool = True,
        actor_user_id: Optional[int] = None,
    ) -> MonthlyReport:
        """
        Generate the next report

        Args:
            account_id: current user (None -> NotAuthenticatedError)
            period_year: base year of the theocratic year
            comment: manual comment (optional)
            include_auto_summary: add one line per sacred-service entry
            actor_user_id: who generates (audit)

        Returns:
            The new locked report

        Raises:
            AlreadyCompleteError: the 12 months are already closed
        """
        account_id = _require_account(account_id)
        return self._run_in_transaction(
            self._generate, account_id, period_year, comment, include_auto_summary, actor_user_id,
        )

    def _generate(self, account_id, period_year, comment, include_auto_summary, actor_user_id):
        existing = self.reports.list_for_year(account_id, period_year)
        next_index = len(existing)
        if next_index >= MONTHS_PER_YEAR:
            raise AlreadyCompleteError(period_year)

        totals = self.aggregator.aggregate_month(account_id, period_year, next_index)
        carried_in = 0 if next_index == 0 else existing[-1].leftover_minutes
        rollover = compute_rollover(totals.total_minutes, carried_in)
        period_start, period_end = month_range(period_year, next_index)

        comments = comment.strip() if comment else None
        if include_auto_summary and totals.sacred_service_minutes > 0:
            comments = self._with_auto_summary(account_id, period_year, next_index, comment)

        row = self.reports.insert(MonthlyReportModel(
            account_id=account_id,
            period_year=period_year,
            month_index=next_index,
            period_start=period_start,
            period_end=period_end,
            total_minutes=rollover.total_minutes,
            carried_in_minutes=rollover.carried_in_minutes,
            carried_out_minutes=rollover.carried_out_minutes,
            whole_hours=rollover.whole_hours,
            leftover_minutes=rollover.leftover_minutes,
            effective_minutes=rollover.effective_minutes,
            distinct_studies=totals.distinct_studies,
            sacred_service_minutes=totals.sacred_service_minutes,
            comments=comments or None,
            locked=True,
        ))

        self.event_repo.append_event(
            account_id=account_id,
            event_type="report_generated",
            payload={
                "report_id": row.id,
                "period_year": period_year,
                "month_index": next_index,
                "effective_minutes": rollover.effective_minutes,
                "whole_hours": rollover.whole_hours,
                "leftover_minutes": rollover.leftover_minutes,
            },
            actor_user_id=actor_user_id,
        )
        logger.info(
            "Report generated: account=%d year=%d month_index=%d hours=%d leftover=%d",
            account_id, period_year, next_index, rollover.whole_hours, rollover.leftover_minutes,
        )
        return MonthlyReport.from_model(row)

    def _with_auto_summary(self, account_id, period_year, month_index, manual_comment):
        settings = get_settings()
        lines = [
            format_sacred_service_line(r.duration_minutes, r.title, settings.AUTO_SUMMARY_PLACEHOLDER)
            for r in self.aggregator.sacred_service_records(account_id, period_year, month_index)
        ]
        return build_comment(manual_comment, lines, settings.AUTO_SUMMARY_SEPARATOR)


class UnlockReportUseCase(_LedgerUseCase):
    """
    Use case: reopen the most recent report of its year so the month's
    activities can be edited. Any other report is rejected.
    """

    def execute(
        self,
        account_id: Optional[int],
        report_id: int,
        actor_user_id: Optional[int] = None,
    ) -> MonthlyReport:
        account_id = _require_account(account_id)
        return self._run_in_transaction(self._unlock, account_id, report_id, actor_user_id)

    def _unlock(self, account_id, report_id, actor_user_id):
        report = self.reports.get(account_id, report_id)
        if report is None:
            raise ReportNotFoundError(report_id)

        last = self.reports.get_last(account_id, report.period_year)
        if last.id != report.id:
            raise ReportNotLastError(report.id, report.month_index, last.month_index)
        if not report.locked:
            raise AlreadyUnlockedError(report.id)

        self.reports.unlock(report)
        self.event_repo.append_event(
            account_id=account_id,
            event_type="report_unlocked",
            payload={
                "report_id": report.id,
                "period_year": report.period_year,
                "month_index": report.month_index,
            },
            actor_user_id=actor_user_id,
        )
        logger.info(
            "Report unlocked: account=%d year=%d month_index=%d",
            account_id, report.period_year, report.month_index,
        )
        return MonthlyReport.from_model(self.reports.get(account_id, report_id))


class RecalculateReportsUseCase(_LedgerUseCase):
    """
    Use case: recompute and re-lock reports from a month to the end of the chain

    Months before `from_month_index` are not re-aggregated; only their stored
    leftover is read to seed the carry. Months from `from_month_index` on are
    re-aggregated and rewritten (numeric fields only, comments untouched) and
    locked again. All updates run in one transaction: a failure rolls the
    whole recalculation back.
    """

    def execute(
        self,
        account_id: Optional[int],
        period_year: int,
        from_month_index: int,
        actor_user_id: Optional[int] = None,
    ) -> List[MonthlyReport]:
        """
        Recalculate and lock

        Args:
            account_id: current user (None -> NotAuthenticatedError)
            period_year: base year of the theocratic year
            from_month_index: first month to recompute (0..11)

        Returns:
            All reports of the year ordered by month_index
        """
        account_id = _require_account(account_id)
        validate_month_index(from_month_index)
        return self._run_in_transaction(
            self._recalculate, account_id, period_year, from_month_index, actor_user_id,
        )

    def _recalculate(self, account_id, period_year, from_month_index, actor_user_id):
        chain = self.reports.list_for_year(account_id, period_year)

        prev_leftover = 0
        recomputed = []
        for report in chain:
            index = report.month_index
            if index < from_month_index:
                prev_leftover = report.leftover_minutes
                continue

            totals = self.aggregator.aggregate_month(account_id, period_year, index)
            carried_in = 0 if index == 0 else prev_leftover
            rollover = compute_rollover(totals.total_minutes, carried_in)
            self.reports.update_numbers(
                report,
                total_minutes=rollover.total_minutes,
                carried_in_minutes=rollover.carried_in_minutes,
                carried_out_minutes=rollover.carried_out_minutes,
                whole_hours=rollover.whole_hours,
                leftover_minutes=rollover.leftover_minutes,
                effective_minutes=rollover.effective_minutes,
                distinct_studies=totals.distinct_studies,
                sacred_service_minutes=totals.sacred_service_minutes,
            )
            prev_leftover = rollover.leftover_minutes
            recomputed.append(index)

        if recomputed:
            self.event_repo.append_event(
                account_id=account_id,
                event_type="reports_recalculated",
                payload={
                    "period_year": period_year,
                    "from_month_index": from_month_index,
                    "month_indexes": recomputed,
                },
                actor_user_id=actor_user_id,
            )
        logger.info(
            "Reports recalculated: account=%d year=%d from=%d months=%s",
            account_id, period_year, from_month_index, recomputed,
        )
        return [MonthlyReport.from_model(r) for r in self.reports.list_for_year(account_id, period_year)]


class UpdateReportCommentsUseCase(_LedgerUseCase):
    """Use case: edit comments (allowed on locked reports)"""

    def execute(
        self,
        account_id: Optional[int],
        report_id: int,
        comments: Optional[str],
        actor_user_id: Optional[int] = None,
    ) -> MonthlyReport:
        account_id = _require_account(account_id)
        return self._run_in_transaction(self._update, account_id, report_id, comments, actor_user_id)

    def _update(self, account_id, report_id, comments, actor_user_id):
        report = self.reports.get(account_id, report_id)
        if report is None:
            raise ReportNotFoundError(report_id)

        self.reports.set_comments(report, (comments or "").strip() or None)
        self.event_repo.append_event(
            account_id=account_id,
            event_type="report_comments_updated",
            payload={
                "report_id": report.id,
                "period_year": report.period_year,
                "month_index": report.month_index,
            },
            actor_user_id=actor_user_id,
        )
        return MonthlyReport.from_model(report)
