"""
Monthly report API endpoints
"""
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.report_summary import ReportsReadService
from app.application.reports import (
    GenerateMonthlyReportUseCase, RecalculateReportsUseCase,
    UnlockReportUseCase, UpdateReportCommentsUseCase,
)
from app.domain.monthly_report import MonthlyReport
from app.domain.theocratic_year import month_name
from app.infrastructure.db.models import User
from app.infrastructure.eventlog.repository import EventLogRepository


router = APIRouter(prefix="/api/v1/reports", tags=["reports"])

_LEDGER_EVENTS = ["report_generated", "report_unlocked", "reports_recalculated", "report_comments_updated"]


# === Request/Response models ===

class GenerateReportRequest(BaseModel):
    comment: Optional[str] = None
    include_auto_summary: bool = True


class RecalculateRequest(BaseModel):
    from_month_index: Optional[int] = None  # default: first unlocked month


class UpdateCommentsRequest(BaseModel):
    comments: Optional[str] = None


class ReportResponse(BaseModel):
    id: int
    period_year: int
    month_index: int
    month_name: str
    period_start: date
    period_end: date
    total_minutes: int
    carried_in_minutes: int
    carried_out_minutes: int
    whole_hours: int
    leftover_minutes: int
    effective_minutes: int
    distinct_studies: int
    sacred_service_minutes: int
    comments: Optional[str]
    locked: bool
    created_at: Optional[datetime]


class HistoryItemResponse(BaseModel):
    event_type: str
    payload: dict
    occurred_at: datetime


def _to_response(report: MonthlyReport) -> ReportResponse:
    return ReportResponse(
        **report.to_dict(),
        month_name=month_name(report.period_year, report.month_index),
    )


# === Endpoints ===

@router.get("/{year}", response_model=list[ReportResponse])
def list_reports(year: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Reports of a theocratic year ordered by month"""
    return [_to_response(r) for r in ReportsReadService(db).list_reports(user.id, year)]


@router.get("/{year}/summary")
def year_summary(year: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Totals: whole hours, final leftover, sacred service, annual goal progress"""
    return ReportsReadService(db).get_year_summary(user.id, year)


@router.get("/{year}/locked-months", response_model=list[int])
def locked_months(year: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Month indexes whose activities cannot be edited"""
    return ReportsReadService(db).locked_month_indexes(user.id, year)


@router.get("/{year}/history", response_model=list[HistoryItemResponse])
def report_history(year: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Ledger actions of the year, newest first"""
    events = EventLogRepository(db).list_events(user.id, event_types=_LEDGER_EVENTS)
    return [
        HistoryItemResponse(event_type=e.event_type, payload=e.payload_json, occurred_at=e.occurred_at)
        for e in events
        if e.payload_json.get("period_year") == year
    ]


@router.post("/{year}/generate", response_model=ReportResponse)
def generate_report(
    year: int,
    req: GenerateReportRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Close the next month of the year"""
    report = GenerateMonthlyReportUseCase(db).execute(
        account_id=user.id,
        period_year=year,
        comment=req.comment,
        include_auto_summary=req.include_auto_summary,
        actor_user_id=user.id,
    )
    return _to_response(report)


@router.post("/{year}/recalculate", response_model=list[ReportResponse])
def recalculate_reports(
    year: int,
    req: RecalculateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Recompute and lock from a month to the end of the chain"""
    from_index = req.from_month_index
    if from_index is None:
        from_index = ReportsReadService(db).get_year_summary(user.id, year)["first_unlocked_month_index"]
        if from_index is None:
            raise HTTPException(status_code=400, detail="No hay meses abiertos para recalcular")

    reports = RecalculateReportsUseCase(db).execute(
        account_id=user.id,
        period_year=year,
        from_month_index=from_index,
        actor_user_id=user.id,
    )
    return [_to_response(r) for r in reports]


@router.post("/{report_id}/unlock", response_model=ReportResponse)
def unlock_report(report_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Reopen the last report of its year"""
    report = UnlockReportUseCase(db).execute(
        account_id=user.id,
        report_id=report_id,
        actor_user_id=user.id,
    )
    return _to_response(report)


@router.patch("/{report_id}/comments", response_model=ReportResponse)
def update_comments(
    report_id: int,
    req: UpdateCommentsRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit comments (allowed while locked)"""
    report = UpdateReportCommentsUseCase(db).execute(
        account_id=user.id,
        report_id=report_id,
        comments=req.comments,
        actor_user_id=user.id,
    )
    return _to_response(report)
