from datetime import date

import pytest

from app.utils.periods import (
    Period,
    current_window,
    month_window,
    previous_window,
    shift_month,
    week_window,
)


def test_shift_month_wraps_years():
    assert shift_month(2025, 1, -1) == (2024, 12)
    assert shift_month(2025, 11, -5) == (2025, 6)
    assert shift_month(2025, 12, 1) == (2026, 1)
    assert shift_month(2026, 2, -17) == (2024, 9)


def test_month_window_handles_february():
    window = month_window(2024, 2)
    assert (window.start, window.end, window.days) == (date(2024, 2, 1), date(2024, 2, 29), 29)
    assert month_window(2025, 2).days == 28


@pytest.mark.parametrize("today", [date(2025, 11, 9), date(2025, 11, 12), date(2025, 11, 15)])
def test_week_window_starts_on_sunday(today):
    window = week_window(today)
    assert window.start == date(2025, 11, 9)
    assert window.end == date(2025, 11, 15)
    assert window.days == 7


def test_previous_week_crosses_month():
    window = previous_window(Period.WEEKLY, date(2025, 11, 4))
    assert (window.start, window.end) == (date(2025, 10, 26), date(2025, 11, 1))


def test_previous_month_crosses_year():
    window = previous_window(Period.MONTHLY, date(2025, 1, 20))
    assert (window.start, window.end, window.days) == (date(2024, 12, 1), date(2024, 12, 31), 31)


def test_half_year_windows():
    first = current_window(Period.HALF_YEARLY, date(2025, 6, 30))
    second = current_window(Period.HALF_YEARLY, date(2025, 7, 1))

    assert (first.start, first.end, first.days) == (date(2025, 1, 1), date(2025, 6, 30), 181)
    assert (second.start, second.end, second.days) == (date(2025, 7, 1), date(2025, 12, 31), 184)


def test_previous_half_year():
    assert previous_window(Period.HALF_YEARLY, date(2025, 2, 1)).start == date(2024, 7, 1)
    assert previous_window(Period.HALF_YEARLY, date(2025, 9, 1)).start == date(2025, 1, 1)
    assert previous_window(Period.HALF_YEARLY, date(2025, 9, 1)).end == date(2025, 6, 30)


def test_year_windows_use_divisible_by_four_rule():
    assert current_window(Period.YEARLY, date(2024, 5, 5)).days == 366
    assert current_window(Period.YEARLY, date(2025, 5, 5)).days == 365
    previous = previous_window(Period.YEARLY, date(2025, 5, 5))
    assert (previous.start, previous.end, previous.days) == (date(2024, 1, 1), date(2024, 12, 31), 366)


def test_period_accepts_plain_strings():
    assert current_window("monthly", date(2025, 11, 12)) == month_window(2025, 11)
    with pytest.raises(ValueError):
        current_window("daily", date(2025, 11, 12))
