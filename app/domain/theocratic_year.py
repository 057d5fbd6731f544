"""
Theocratic year calendar.

The year runs September..August. A year is identified by its base year
(the calendar year of its September); month_index 0 = September of the base
year, month_index 11 = August of the following year.
"""
from datetime import date

THEOCRATIC_START_MONTH = 9  # September
MONTHS_PER_YEAR = 12

_MONTH_NAMES = {
    1: "enero", 2: "febrero", 3: "marzo", 4: "abril", 5: "mayo", 6: "junio",
    7: "julio", 8: "agosto", 9: "septiembre", 10: "octubre", 11: "noviembre", 12: "diciembre",
}


class InvalidMonthIndexError(ValueError):
    pass


def validate_month_index(month_index: int) -> None:
    if not 0 <= month_index < MONTHS_PER_YEAR:
        raise InvalidMonthIndexError(
            f"Índice de mes fuera de rango: {month_index} (0-{MONTHS_PER_YEAR - 1})"
        )


def theocratic_year_base(day: date) -> int:
    """Base year of the theocratic year containing `day`."""
    return day.year if day.month >= THEOCRATIC_START_MONTH else day.year - 1


def _calendar_month(base_year: int, month_index: int) -> tuple[int, int]:
    offset = THEOCRATIC_START_MONTH - 1 + month_index
    return base_year + offset // 12, offset % 12 + 1


def month_index_from_date(base_year: int, day: date) -> int:
    """
    Month index of `day` relative to September of `base_year`.

    Not clamped: dates outside the year give negative or >= 12 values.
    """
    return (day.year - base_year) * 12 + (day.month - THEOCRATIC_START_MONTH)


def month_range(base_year: int, month_index: int) -> tuple[date, date]:
    """
    Return (period_start, period_end) for a month; period_end is exclusive
    (first day of the next month).

    >>> month_range(2024, 0)
    (datetime.date(2024, 9, 1), datetime.date(2024, 10, 1))
    >>> month_range(2024, 3)
    (datetime.date(2024, 12, 1), datetime.date(2025, 1, 1))
    """
    validate_month_index(month_index)
    y, m = _calendar_month(base_year, month_index)
    ny, nm = _calendar_month(base_year, month_index + 1)
    return date(y, m, 1), date(ny, nm, 1)


def month_name(base_year: int, month_index: int) -> str:
    """Spanish month name, e.g. month_name(2024, 0) -> "septiembre"."""
    validate_month_index(month_index)
    _, m = _calendar_month(base_year, month_index)
    return _MONTH_NAMES[m]


def year_label(base_year: int) -> str:
    return f"{base_year}-{base_year + 1}"


def months_elapsed(base_year: int, today: date) -> int:
    """
    Months of the year started by `today`, current month included (0..12).

    >>> months_elapsed(2024, date(2024, 10, 15))
    2
    """
    index = month_index_from_date(base_year, today)
    return max(0, min(index + 1, MONTHS_PER_YEAR))
