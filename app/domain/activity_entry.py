"""
Activity entry domain: kinds, duration derivation and validation.

An entry records either explicit `minutes` or a start_time..end_time span
("HH:MM" or "HH:MM:SS"). When minutes is absent the duration is
end - start in whole minutes, clamped to 0.
"""
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable

KIND_PREACHING = "preaching"
KIND_BIBLE_COURSE = "bible_course"
KIND_SACRED_SERVICE = "sacred_service"

ACTIVITY_KINDS = (KIND_PREACHING, KIND_BIBLE_COURSE, KIND_SACRED_SERVICE)


class ActivityValidationError(ValueError):
    pass


def parse_clock(value: str | time | None) -> time | None:
    """Parse "HH:MM[:SS]" into a time; None and time objects pass through."""
    if value is None or isinstance(value, time):
        return value
    text = value.strip()
    if not text:
        return None
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ActivityValidationError(f"Hora inválida: «{value}». Usa HH:MM")


def span_minutes(start: time, end: time) -> int:
    """Whole minutes between two clock times; non-positive spans give 0."""
    start_s = start.hour * 3600 + start.minute * 60 + start.second
    end_s = end.hour * 3600 + end.minute * 60 + end.second
    return max((end_s - start_s) // 60, 0)


def entry_minutes(
    minutes: int | None,
    start_time: str | time | None,
    end_time: str | time | None,
) -> int:
    """
    Minutes an entry counts for.

    >>> entry_minutes(None, "09:00:00", "10:15:00")
    75
    >>> entry_minutes(None, "10:00", "09:00")
    0
    """
    if minutes is not None:
        return minutes
    start = parse_clock(start_time)
    end = parse_clock(end_time)
    if start is None or end is None:
        return 0
    return span_minutes(start, end)


@dataclass(frozen=True)
class ActivityRecord:
    """Activity row as seen by the aggregator."""
    id: int
    activity_date: date
    kind: str
    minutes: int | None = None
    start_time: time | None = None
    end_time: time | None = None
    person_id: int | None = None
    title: str | None = None

    @property
    def duration_minutes(self) -> int:
        return entry_minutes(self.minutes, self.start_time, self.end_time)

    @classmethod
    def from_model(cls, row: Any) -> "ActivityRecord":
        if row.type not in ACTIVITY_KINDS:
            raise ActivityValidationError(f"Tipo de actividad desconocido: {row.type}")
        return cls(
            id=row.id,
            activity_date=row.activity_date,
            kind=row.type,
            minutes=row.minutes,
            start_time=parse_clock(row.start_time),
            end_time=parse_clock(row.end_time),
            person_id=row.person_id,
            title=row.title,
        )


def validate_activity(
    kind: str,
    minutes: int | None,
    start_time: time | None,
    end_time: time | None,
    person_id: int | None,
) -> None:
    """Validate entry fields for its kind. Raises ActivityValidationError."""
    if kind not in ACTIVITY_KINDS:
        raise ActivityValidationError(f"Tipo de actividad desconocido: {kind}")

    if minutes is not None and minutes <= 0:
        raise ActivityValidationError("Los minutos deben ser mayores que 0")

    if (start_time is None) != (end_time is None):
        raise ActivityValidationError("Indica hora de inicio y de fin")

    if start_time is not None and end_time is not None and end_time <= start_time:
        raise ActivityValidationError("La hora de fin debe ser posterior a la de inicio")

    if kind == KIND_BIBLE_COURSE:
        if minutes is None:
            raise ActivityValidationError("Minutos requeridos")
        if person_id is None:
            raise ActivityValidationError("Selecciona una persona para el curso bíblico")
    elif minutes is None and start_time is None:
        raise ActivityValidationError("Indica los minutos o el horario")


def find_overlap(
    start_time: time,
    end_time: time,
    others: Iterable[tuple[time | None, time | None]],
) -> tuple[time, time] | None:
    """Return the first (start, end) span in `others` that overlaps the given span."""
    for other_start, other_end in others:
        if other_start is None or other_end is None:
            continue
        if start_time < other_end and other_start < end_time:
            return other_start, other_end
    return None
