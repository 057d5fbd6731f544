"""
Authentication routes (login, logout)
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.auth import authenticate
from app.infrastructure.eventlog.repository import EventLogRepository


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/login")
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    """
    Log in and store user_id in the session
    """
    user = authenticate(db, req.email, req.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Email o contraseña incorrectos")

    request.session["user_id"] = user.id

    now = datetime.now(timezone.utc)
    user.last_seen_at = now
    EventLogRepository(db).append_event(
        account_id=user.id,
        event_type="user_logged_in",
        payload={"email": user.email},
        occurred_at=now,
        actor_user_id=user.id,
    )
    db.commit()

    return {"user_id": user.id, "email": user.email}


@router.post("/logout")
def logout(request: Request):
    """
    Log out
    """
    request.session.clear()
    return {"status": "logged_out"}
