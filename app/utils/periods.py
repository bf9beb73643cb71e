from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Tuple


class Period(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    HALF_YEARLY = "half-yearly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class Window:
    """Inclusive calendar range plus the day count used for daily averages."""

    start: date
    end: date
    days: int

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_window(year: int, month: int) -> Window:
    days = calendar.monthrange(year, month)[1]
    return Window(date(year, month, 1), date(year, month, days), days)


def week_window(today: date, weeks_back: int = 0) -> Window:
    # Weeks run Sunday to Saturday.
    start = today - timedelta(days=(today.weekday() + 1) % 7) - timedelta(weeks=weeks_back)
    return Window(start, start + timedelta(days=6), 7)


def half_year_window(year: int, first_month: int) -> Window:
    start = date(year, first_month, 1)
    last_month = first_month + 5
    end = date(year, last_month, calendar.monthrange(year, last_month)[1])
    return Window(start, end, (end - start).days + 1)


def year_window(year: int) -> Window:
    days = 366 if year % 4 == 0 else 365
    return Window(date(year, 1, 1), date(year, 12, 31), days)


def current_window(period: Period, today: date) -> Window:
    period = Period(period)
    if period is Period.WEEKLY:
        return week_window(today)
    if period is Period.MONTHLY:
        return month_window(today.year, today.month)
    if period is Period.HALF_YEARLY:
        return half_year_window(today.year, 1 if today.month <= 6 else 7)
    return year_window(today.year)


def previous_window(period: Period, today: date) -> Window:
    """Window of the same kind immediately preceding the current one."""
    period = Period(period)
    if period is Period.WEEKLY:
        return week_window(today, weeks_back=1)
    if period is Period.MONTHLY:
        return month_window(*shift_month(today.year, today.month, -1))
    if period is Period.HALF_YEARLY:
        if today.month <= 6:
            return half_year_window(today.year - 1, 7)
        return half_year_window(today.year, 1)
    return year_window(today.year - 1)
