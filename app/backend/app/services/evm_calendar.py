"""Month calendar, fiscal-year and holiday helpers for EVM reports."""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from app.models.entities import HolidayType

FISCAL_YEAR_START_MONTH = 4
FISCAL_YEAR_MONTHS = (4, 5, 6, 7, 8, 9, 10, 11, 12, 1, 2, 3)

_FISCAL_YEAR_PATTERN = re.compile(r"^FY(\d{2})$", re.IGNORECASE)


def day_key(value: date) -> str:
    return value.isoformat()


def fiscal_year_label(year: int, month: int) -> str:
    """Fiscal year label of a calendar month, e.g. 2025-03 -> "FY24"."""

    fiscal_year = year if month >= FISCAL_YEAR_START_MONTH else year - 1
    return f"FY{fiscal_year % 100:02d}"


def parse_fiscal_year(label: str) -> int:
    """Starting calendar year of a fiscal year label ("FY25" -> 2025).

    Raises ``ValueError`` for anything that is not ``FY`` plus two digits.
    """

    match = _FISCAL_YEAR_PATTERN.match(label.strip())
    if match is None:
        raise ValueError(f"Invalid fiscal year label: {label!r}")
    return 2000 + int(match.group(1))


def fiscal_year_months(label: str) -> list[tuple[int, int]]:
    """(year, month) pairs of a fiscal year, April through March."""

    start_year = parse_fiscal_year(label)
    return [
        (start_year if month >= FISCAL_YEAR_START_MONTH else start_year + 1, month)
        for month in FISCAL_YEAR_MONTHS
    ]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_day_keys(year: int, month: int) -> list[str]:
    start, end = month_bounds(year, month)
    return [day_key(start + timedelta(days=offset)) for offset in range((end - start).days + 1)]


def resolve_period(
    year: str | int | None,
    month: str | int | None,
    *,
    today: date | None = None,
) -> tuple[int, int]:
    """Parse report year/month, falling back to today's month on bad input.

    A report view never rejects its period: a missing or unparsable value, a
    month outside 1..12, or a year outside the supported date range silently
    selects the current month instead.
    """

    reference = today or date.today()
    parsed_year = _parse_int(year)
    parsed_month = _parse_int(month)

    if parsed_year is None or not date.min.year <= parsed_year <= date.max.year:
        parsed_year = reference.year
    if parsed_month is None or not 1 <= parsed_month <= 12:
        parsed_month = reference.month
    return parsed_year, parsed_month


def _parse_int(value: str | int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class MonthCalendar:
    """Resolved calendar of one month: day keys, fiscal year and non-working days."""

    year: int
    month: int
    start: date
    end: date
    days: tuple[str, ...]
    fiscal_year: str
    holiday_keys: frozenset[str]

    @property
    def total_days(self) -> int:
        return len(self.days)

    @property
    def working_day_count(self) -> int:
        return len(self.days) - len(self.holiday_keys)

    def is_working_day(self, key: str) -> bool:
        return key not in self.holiday_keys

    def index_of(self, value: date) -> int | None:
        """Position of a date in ``days`` or ``None`` when outside the month."""

        if value < self.start or value > self.end:
            return None
        return (value - self.start).days


def resolve_month_calendar(
    year: int,
    month: int,
    holiday_dates: Iterable[date] = (),
) -> MonthCalendar:
    """Build the calendar of a month; holiday dates outside it are ignored."""

    start, end = month_bounds(year, month)
    days = tuple(month_day_keys(year, month))
    holiday_keys = frozenset(day_key(value) for value in holiday_dates if start <= value <= end)
    return MonthCalendar(
        year=year,
        month=month,
        start=start,
        end=end,
        days=days,
        fiscal_year=fiscal_year_label(year, month),
        holiday_keys=holiday_keys,
    )


def working_days_by_month(fiscal_year: str, holiday_dates: Iterable[date]) -> dict[int, int]:
    """Working-day count of each month in a fiscal year, keyed by calendar month."""

    dates = list(holiday_dates)
    return {
        month: max(0, resolve_month_calendar(year, month, dates).working_day_count)
        for year, month in fiscal_year_months(fiscal_year)
    }


@dataclass(frozen=True, slots=True)
class HolidayStats:
    weekend_count: int
    public_holiday_count: int
    special_holiday_count: int
    paid_leave_count: int

    @property
    def annual_holiday_count(self) -> int:
        # Paid leave is personal time off, not a company holiday.
        return self.weekend_count + self.public_holiday_count + self.special_holiday_count


def summarize_holidays(holiday_types: Iterable[HolidayType]) -> HolidayStats:
    counts = {holiday_type: 0 for holiday_type in HolidayType}
    for holiday_type in holiday_types:
        counts[HolidayType(holiday_type)] += 1
    return HolidayStats(
        weekend_count=counts[HolidayType.WEEKEND],
        public_holiday_count=counts[HolidayType.PUBLIC_HOLIDAY],
        special_holiday_count=counts[HolidayType.SPECIAL_HOLIDAY],
        paid_leave_count=counts[HolidayType.PAID_LEAVE],
    )
