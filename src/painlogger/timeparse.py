from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from ._util import _today


def parse_day(value: str | None, today: date | None = None) -> date:
    """
    Parse flexible user input into a local calendar day.
    Accepts:
      - None / blank / "today" / "now" -> today
      - "yesterday"
      - relative: "1 day ago", "3 days ago"
      - "2025-04-18", "2025/04/18"
      - ISO 8601 datetimes (aware ones converted to local time first)
    Raises ValueError for anything else.
    """
    base = today or _today()
    if not value or not value.strip():
        return base

    s = value.strip().lower()

    if s in ("today", "now"):
        return base
    if s == "yesterday":
        return base - timedelta(days=1)

    # --- relative like "3 days ago" ---
    m = re.fullmatch(r"(\d+)\s*(day|days)\s*ago", s)
    if m:
        try:
            return base - timedelta(days=int(m.group(1)))
        except OverflowError as e:
            raise ValueError(
                f"Day {value!r} is too far back. Try 'yesterday', '3 days ago' or '2025-04-18'."
            ) from e

    # --- plain dates ---
    for fmt in ("%Y-%m-%d", "%Y/%m/%d"):
        try:
            return datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue

    # --- ISO datetime ---
    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError:
        pass
    else:
        if dt.tzinfo is not None:
            dt = dt.astimezone()
        return dt.date()

    raise ValueError(
        f"Could not parse day {value!r}. Try 'today', 'yesterday', '3 days ago' or '2025-04-18'."
    )
