"""
School hours API endpoints
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.school_hours import (
    CreateSchoolHoursUseCase, UpdateSchoolHoursUseCase, DeleteSchoolHoursUseCase,
    list_school_hours,
)
from app.domain.theocratic_year import month_index_from_date, theocratic_year_base
from app.infrastructure.db.models import SchoolHoursModel, User


router = APIRouter(prefix="/api/v1/school-hours", tags=["school-hours"])


class CreateSchoolHoursRequest(BaseModel):
    period_year: int
    month_index: int
    hours: int
    title: str


class UpdateSchoolHoursRequest(BaseModel):
    period_year: Optional[int] = None
    month_index: Optional[int] = None
    hours: Optional[int] = None
    title: Optional[str] = None


class SchoolHoursResponse(BaseModel):
    id: int
    school_date: date
    month_index: int
    hours: int
    title: str


def _to_response(r: SchoolHoursModel) -> SchoolHoursResponse:
    return SchoolHoursResponse(
        id=r.id,
        school_date=r.school_date,
        month_index=month_index_from_date(theocratic_year_base(r.school_date), r.school_date),
        hours=r.hours,
        title=r.title,
    )


@router.get("/{year}", response_model=list[SchoolHoursResponse])
def get_school_hours(year: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """School hours of a theocratic year, newest month first"""
    return [_to_response(r) for r in list_school_hours(db, user.id, year)]


@router.post("/", response_model=SchoolHoursResponse)
def create_school_hours(
    req: CreateSchoolHoursRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    record_id = CreateSchoolHoursUseCase(db).execute(
        account_id=user.id,
        period_year=req.period_year,
        month_index=req.month_index,
        hours=req.hours,
        title=req.title,
    )
    return _to_response(db.get(SchoolHoursModel, record_id))


@router.patch("/{record_id}", response_model=SchoolHoursResponse)
def update_school_hours(
    record_id: int,
    req: UpdateSchoolHoursRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UpdateSchoolHoursUseCase(db).execute(record_id, user.id, **req.model_dump(exclude_unset=True))
    return _to_response(db.get(SchoolHoursModel, record_id))


@router.delete("/{record_id}")
def delete_school_hours(record_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteSchoolHoursUseCase(db).execute(record_id, user.id)
    return {"status": "deleted"}
