"""
Monthly report domain: minute rollover arithmetic and the report record.

effective = total + carried_in
whole_hours = effective // 60
leftover = carried_out = effective % 60   (always 0..59)
"""
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Any, Iterable

MINUTES_PER_HOUR = 60


@dataclass(frozen=True)
class Rollover:
    total_minutes: int
    carried_in_minutes: int
    effective_minutes: int
    whole_hours: int
    leftover_minutes: int

    @property
    def carried_out_minutes(self) -> int:
        return self.leftover_minutes


def compute_rollover(total_minutes: int, carried_in_minutes: int) -> Rollover:
    """
    >>> compute_rollover(135, 0).whole_hours, compute_rollover(135, 0).leftover_minutes
    (2, 15)
    """
    if total_minutes < 0 or carried_in_minutes < 0:
        raise ValueError("Minutes cannot be negative")
    effective = total_minutes + carried_in_minutes
    whole_hours, leftover = divmod(effective, MINUTES_PER_HOUR)
    return Rollover(
        total_minutes=total_minutes,
        carried_in_minutes=carried_in_minutes,
        effective_minutes=effective,
        whole_hours=whole_hours,
        leftover_minutes=leftover,
    )


def format_sacred_service_line(minutes: int, title: str | None, placeholder: str) -> str:
    """One auto-summary line: "1.50h - Asamblea"."""
    label = (title or "").strip() or placeholder
    return f"{minutes / MINUTES_PER_HOUR:.2f}h - {label}"


def build_comment(
    manual_comment: str | None,
    sacred_lines: Iterable[str],
    separator: str,
    delimiter: str = "\n",
) -> str | None:
    """
    Combine the manual comment and the sacred-service summary lines.

    Manual text goes first; blank parts are dropped; None when nothing is left.
    """
    manual = (manual_comment or "").strip()
    summary = separator.join(sacred_lines)
    parts = [p for p in (manual, summary) if p]
    return delimiter.join(parts) or None


@dataclass(frozen=True)
class MonthlyReport:
    """Report row as returned by the ledger."""
    id: int
    period_year: int
    month_index: int
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
    comments: str | None
    locked: bool
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, row: Any) -> "MonthlyReport":
        return cls(
            id=row.id,
            period_year=row.period_year,
            month_index=row.month_index,
            period_start=row.period_start,
            period_end=row.period_end,
            total_minutes=row.total_minutes,
            carried_in_minutes=row.carried_in_minutes,
            carried_out_minutes=row.carried_out_minutes,
            whole_hours=row.whole_hours,
            leftover_minutes=row.leftover_minutes,
            effective_minutes=row.effective_minutes,
            distinct_studies=row.distinct_studies,
            sacred_service_minutes=row.sacred_service_minutes,
            comments=row.comments,
            locked=bool(row.locked),
            created_at=row.created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
