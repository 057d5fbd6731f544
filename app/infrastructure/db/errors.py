"""
Translate database exceptions into the report error hierarchy.

The raw driver message is kept so callers can still inspect it.
"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from app.domain.errors import (
    ConstraintViolationError, PermissionDeniedError, ReportError, ReportNotLastError, StoreError,
)

# SQLSTATE codes (PostgreSQL)
SQLSTATE_INSUFFICIENT_PRIVILEGE = "42501"
SQLSTATE_UNDEFINED_FUNCTION = "42883"
# Raised by unlock_last_report() for a report that is not the last of its year
SQLSTATE_REPORT_NOT_LAST = "MR001"

_PERMISSION_MARKERS = ("permission denied", "row-level security")


def sqlstate_of(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def raw_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def translate(exc: SQLAlchemyError, report_id: int | None = None) -> ReportError:
    message = raw_message(exc)
    if sqlstate_of(exc) == SQLSTATE_REPORT_NOT_LAST:
        return ReportNotLastError(report_id)
    if isinstance(exc, IntegrityError):
        return ConstraintViolationError(message)
    if isinstance(exc, DBAPIError):
        lowered = message.lower()
        if sqlstate_of(exc) == SQLSTATE_INSUFFICIENT_PRIVILEGE or any(
            marker in lowered for marker in _PERMISSION_MARKERS
        ):
            return PermissionDeniedError(message)
    return StoreError(message)


@contextmanager
def store_errors() -> Iterator[None]:
    """
    Usage:
        with store_errors():
            db.flush()
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise translate(exc) from exc
