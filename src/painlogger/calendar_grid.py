"""Month navigation for the calendar view. Weeks start on Monday."""

from __future__ import annotations

import calendar
from datetime import date


def shift_month(today: date, offset: int) -> tuple[int, int]:
    idx = today.year * 12 + (today.month - 1) + offset
    return idx // 12, idx % 12 + 1


def month_cells(year: int, month: int) -> list[date | None]:
    first_weekday, num_days = calendar.monthrange(year, month)  # Monday == 0
    cells: list[date | None] = [None] * first_weekday
    cells.extend(date(year, month, d) for d in range(1, num_days + 1))
    return cells


def month_title(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


WEEKDAY_HEADERS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
