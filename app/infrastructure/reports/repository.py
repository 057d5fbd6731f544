"""
Monthly report store - persistence of the report chain

All database errors are re-raised as StoreError subclasses (see
app.infrastructure.db.errors).
"""
import logging
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.infrastructure.db.errors import SQLSTATE_UNDEFINED_FUNCTION, sqlstate_of, store_errors, translate
from app.infrastructure.db.models import MonthlyReportModel
from app.infrastructure.db.session import is_postgresql

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = (
    "total_minutes",
    "carried_in_minutes",
    "carried_out_minutes",
    "whole_hours",
    "leftover_minutes",
    "effective_minutes",
    "distinct_studies",
    "sacred_service_minutes",
)


class MonthlyReportRepository:
    """
    Repository for monthly_reports, always scoped to one account
    """

    def __init__(self, db: Session):
        self.db = db

    def list_for_year(self, account_id: int, period_year: int) -> List[MonthlyReportModel]:
        """Reports of a theocratic year ordered by month_index"""
        with store_errors():
            return (
                self.db.query(MonthlyReportModel)
                .filter(
                    MonthlyReportModel.account_id == account_id,
                    MonthlyReportModel.period_year == period_year,
                )
                .order_by(MonthlyReportModel.month_index)
                .all()
            )

    def get(self, account_id: int, report_id: int) -> Optional[MonthlyReportModel]:
        with store_errors():
            return (
                self.db.query(MonthlyReportModel)
                .filter(
                    MonthlyReportModel.id == report_id,
                    MonthlyReportModel.account_id == account_id,
                )
                .first()
            )

    def get_by_index(self, account_id: int, period_year: int, month_index: int) -> Optional[MonthlyReportModel]:
        with store_errors():
            return (
                self.db.query(MonthlyReportModel)
                .filter(
                    MonthlyReportModel.account_id == account_id,
                    MonthlyReportModel.period_year == period_year,
                    MonthlyReportModel.month_index == month_index,
                )
                .first()
            )

    def get_last(self, account_id: int, period_year: int) -> Optional[MonthlyReportModel]:
        """Report with the highest month_index of the year"""
        with store_errors():
            return (
                self.db.query(MonthlyReportModel)
                .filter(
                    MonthlyReportModel.account_id == account_id,
                    MonthlyReportModel.period_year == period_year,
                )
                .order_by(MonthlyReportModel.month_index.desc())
                .first()
            )

    def insert(self, report: MonthlyReportModel) -> MonthlyReportModel:
        """Add a row and flush so constraint violations surface here"""
        with store_errors():
            self.db.add(report)
            self.db.flush()
        return report

    def update_numbers(self, report: MonthlyReportModel, **values: int) -> None:
        """
        Overwrite the numeric fields of a report and lock it again

        Args:
            report: row to update
            **values: any of NUMERIC_FIELDS
        """
        unknown = set(values) - set(NUMERIC_FIELDS)
        if unknown:
            raise ValueError(f"Not numeric report fields: {sorted(unknown)}")
        for field, value in values.items():
            setattr(report, field, value)
        report.locked = True
        with store_errors():
            self.db.flush()

    def set_comments(self, report: MonthlyReportModel, comments: Optional[str]) -> None:
        report.comments = comments
        with store_errors():
            self.db.flush()

    def unlock(self, report: MonthlyReportModel) -> None:
        """
        Flip `locked` to false

        Tries the privileged unlock_last_report() function first (it checks
        on the server that the report is the last one); falls back to a direct
        update when the function is not available.
        """
        if self._unlock_via_procedure(report.id):
            self.db.expire(report)
            return
        report.locked = False
        with store_errors():
            self.db.flush()

    def _unlock_via_procedure(self, report_id: int) -> bool:
        if not get_settings().UNLOCK_PROCEDURE_ENABLED:
            return False
        if not is_postgresql(self.db):
            return False

        savepoint = self.db.begin_nested()
        try:
            self.db.execute(text("SELECT unlock_last_report(:report_id)"), {"report_id": report_id})
        except DBAPIError as exc:
            savepoint.rollback()
            if sqlstate_of(exc) == SQLSTATE_UNDEFINED_FUNCTION:
                logger.warning("unlock_last_report() not installed, falling back to direct update")
                return False
            raise translate(exc, report_id=report_id) from exc
        savepoint.commit()
        return True
