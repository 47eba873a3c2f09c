from __future__ import annotations

import datetime as dt
import sys
from typing import TextIO

from .window import ROW_LENGTH, date_key, window_days

BLACK = "\033[0;37;30m"
LIGHT = "\033[1;30;47m"
MEDIUM = "\033[1;30;43m"
DARK = "\033[1;30;42m"
RESET = "\033[0m"

EMPTY_CELL = "-"


def colour_for(count: int) -> str:
    if count >= 10:
        return DARK
    if count >= 5:
        return MEDIUM
    if count > 0:
        return LIGHT
    return BLACK


def format_cell(count: int) -> str:
    label = str(count) if count > 0 else EMPTY_CELL
    return f"{colour_for(count)} {label} {RESET}"


def render_tally(tally: dict[str, int], *, today: dt.date | None = None) -> str:
    days = window_days(today)
    lines: list[str] = []
    row: list[str] = []
    for d in days:
        row.append(format_cell(tally.get(date_key(d), 0)))
        if len(row) == ROW_LENGTH:
            lines.append("".join(row) + "\n")
            row = []
    if row:
        lines.append("".join(row) + "\n")
    return "".join(lines)


def print_tally(tally: dict[str, int], *, today: dt.date | None = None, stream: TextIO | None = None) -> None:
    out = stream if stream is not None else sys.stdout
    out.write(render_tally(tally, today=today))
    out.flush()
