"""
Exception handlers: ledger / validation errors -> JSON responses
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.application.persons import PersonValidationError
from app.application.school_hours import SchoolHoursValidationError
from app.domain.activity_entry import ActivityValidationError
from app.domain.errors import PermissionDeniedError, ReportError
from app.domain.theocratic_year import InvalidMonthIndexError

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    "NOT_AUTHENTICATED": 401,
    "PERMISSION_DENIED": 403,
    "REPORT_NOT_FOUND": 404,
    "ALREADY_COMPLETE": 409,
    "REPORT_NOT_LAST": 409,
    "ALREADY_UNLOCKED": 409,
    "MONTH_LOCKED": 409,
    "CONSTRAINT_VIOLATION": 422,
    "STORE_ERROR": 500,
}


def friendly_message(exc: ReportError) -> str:
    """Readable text for known access-control failures; the raw message otherwise."""
    if isinstance(exc, PermissionDeniedError):
        raw = exc.message
        if "row-level security" in raw:
            return "RLS impide la acción. Falta una policy UPDATE para monthly_reports."
        if "permission" in raw or "denied" in raw:
            return "Permiso denegado. Falta una policy UPDATE en monthly_reports."
    return exc.message


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ReportError)
    async def report_error_handler(request: Request, exc: ReportError):
        status_code = _STATUS_BY_CODE.get(exc.code, 400)
        if status_code >= 500:
            logger.error("Store error on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"detail": friendly_message(exc), "code": exc.code},
        )

    @app.exception_handler(ActivityValidationError)
    @app.exception_handler(PersonValidationError)
    @app.exception_handler(SchoolHoursValidationError)
    @app.exception_handler(InvalidMonthIndexError)
    async def validation_error_handler(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"detail": str(exc), "code": "VALIDATION_ERROR"})
