from __future__ import annotations

import datetime as dt

WINDOW_DAYS = 180
ROW_LENGTH = 30

# Aggregation and rendering must key days identically.
DATE_FORMAT = "%d/%m/%Y"


def date_key(value: dt.date) -> str:
    return value.strftime(DATE_FORMAT)


def window_days(today: dt.date | None = None, days: int = WINDOW_DAYS) -> list[dt.date]:
    """The `days` calendar days ending at (and including) `today`, oldest first."""
    if today is None:
        today = dt.date.today()
    start = today - dt.timedelta(days=days - 1)
    return [start + dt.timedelta(days=i) for i in range(days)]


def empty_tally(today: dt.date | None = None, days: int = WINDOW_DAYS) -> dict[str, int]:
    return {date_key(d): 0 for d in window_days(today, days)}
