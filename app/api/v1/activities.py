"""
Activity entry API endpoints
"""
from datetime import date, time
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.activities import (
    CreateActivityUseCase, UpdateActivityUseCase, DeleteActivityUseCase,
    list_month_activities,
)
from app.domain.activity_entry import entry_minutes
from app.infrastructure.db.models import ActivityEntryModel, User


router = APIRouter(prefix="/api/v1/activities", tags=["activities"])


# === Request/Response models ===

class CreateActivityRequest(BaseModel):
    activity_date: date
    kind: str  # preaching, bible_course, sacred_service
    minutes: Optional[int] = None
    start_time: Optional[str] = None  # HH:MM[:SS]
    end_time: Optional[str] = None
    person_id: Optional[int] = None
    title: str = ""


class UpdateActivityRequest(BaseModel):
    activity_date: Optional[date] = None
    minutes: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    person_id: Optional[int] = None
    title: Optional[str] = None


class ActivityResponse(BaseModel):
    id: int
    activity_date: date
    kind: str
    minutes: Optional[int]
    start_time: Optional[time]
    end_time: Optional[time]
    person_id: Optional[int]
    title: Optional[str]
    duration_minutes: int


def _to_response(e: ActivityEntryModel) -> ActivityResponse:
    return ActivityResponse(
        id=e.id,
        activity_date=e.activity_date,
        kind=e.type,
        minutes=e.minutes,
        start_time=e.start_time,
        end_time=e.end_time,
        person_id=e.person_id,
        title=e.title,
        duration_minutes=entry_minutes(e.minutes, e.start_time, e.end_time),
    )


# === Endpoints ===

@router.get("/{year}/{month_index}", response_model=list[ActivityResponse])
def list_activities(
    year: int,
    month_index: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Entries of a theocratic month"""
    return [_to_response(e) for e in list_month_activities(db, user.id, year, month_index)]


@router.post("/", response_model=ActivityResponse)
def create_activity(
    req: CreateActivityRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record an activity (rejected if its month is locked)"""
    entry_id = CreateActivityUseCase(db).execute(
        account_id=user.id,
        activity_date=req.activity_date,
        kind=req.kind,
        minutes=req.minutes,
        start_time=req.start_time,
        end_time=req.end_time,
        person_id=req.person_id,
        title=req.title,
    )
    return _to_response(db.get(ActivityEntryModel, entry_id))


@router.patch("/{entry_id}", response_model=ActivityResponse)
def update_activity(
    entry_id: int,
    req: UpdateActivityRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit an activity; only the fields sent are changed"""
    UpdateActivityUseCase(db).execute(entry_id, user.id, **req.model_dump(exclude_unset=True))
    return _to_response(db.get(ActivityEntryModel, entry_id))


@router.delete("/{entry_id}")
def delete_activity(entry_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete an activity (rejected if its month is locked)"""
    DeleteActivityUseCase(db).execute(entry_id, user.id)
    return {"status": "deleted"}
