"""
Persons API endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.persons import (
    CreatePersonUseCase, UpdatePersonUseCase, DeletePersonUseCase, list_persons,
)
from app.infrastructure.db.models import User


router = APIRouter(prefix="/api/v1/persons", tags=["persons"])


class CreatePersonRequest(BaseModel):
    name: str
    notes: str = ""


class UpdatePersonRequest(BaseModel):
    name: Optional[str] = None
    notes: Optional[str] = None


class PersonResponse(BaseModel):
    id: int
    name: str
    notes: Optional[str]


@router.get("/", response_model=list[PersonResponse])
def get_persons(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [PersonResponse(id=p.id, name=p.name, notes=p.notes) for p in list_persons(db, user.id)]


@router.post("/", response_model=PersonResponse)
def create_person(req: CreatePersonRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    person_id = CreatePersonUseCase(db).execute(account_id=user.id, name=req.name, notes=req.notes)
    return PersonResponse(id=person_id, name=req.name.strip(), notes=req.notes.strip() or None)


@router.patch("/{person_id}")
def update_person(
    person_id: int,
    req: UpdatePersonRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UpdatePersonUseCase(db).execute(person_id, user.id, **req.model_dump(exclude_unset=True))
    return {"status": "updated"}


@router.delete("/{person_id}")
def delete_person(person_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeletePersonUseCase(db).execute(person_id, user.id)
    return {"status": "deleted"}
