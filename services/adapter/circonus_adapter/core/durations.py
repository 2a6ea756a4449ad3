"""Go-style duration strings ("5m", "1m30s", "250ms") to timedelta.

Only strings are parsed here. A plain number in a configuration document
never reaches this module: the pydantic ``timedelta`` field reads it as
seconds, unlike Go, where a bare integer duration is nanoseconds.
"""

from __future__ import annotations

import re
from datetime import timedelta

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``"1h15m"`` or ``"-1.5s"``.

    Raises ValueError for anything Go's ``time.ParseDuration`` would reject.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty duration")
    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if not text:
        raise ValueError(f"invalid duration {value!r}")
    if text == "0":
        return timedelta(0)

    seconds = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT_RE.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        number, unit = match.groups()
        seconds += float(number) * _UNITS[unit]
        pos = match.end()
    return timedelta(seconds=sign * seconds)
