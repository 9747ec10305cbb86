"""Go-style duration strings used by manifest time limits."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Union

_UNIT_MICROSECONDS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}

_PART_PATTERN = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: Union[str, int, float]) -> timedelta:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        # JSON numbers are nanoseconds, matching Go's encoding of time.Duration
        return timedelta(microseconds=value / 1000)

    text = value.strip()
    if text in {"", "0"}:
        return timedelta(0)

    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    total = 0.0
    pos = 0
    for match in _PART_PATTERN.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_MICROSECONDS[match.group(2)]
        pos = match.end()

    if pos == 0 or pos != len(text):
        raise ValueError(f"Invalid duration: {value!r}")
    return timedelta(microseconds=sign * total)


def format_duration(value: timedelta) -> str:
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000_000:
        if micros % 1_000 == 0:
            return f"{sign}{micros // 1_000}ms"
        return f"{sign}{micros}us"

    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds, fraction = divmod(rest, 1_000_000)

    second_text = str(seconds)
    if fraction:
        second_text += "." + f"{fraction:06d}".rstrip("0")

    if hours:
        return f"{sign}{hours}h{minutes}m{second_text}s"
    if minutes:
        return f"{sign}{minutes}m{second_text}s"
    return f"{sign}{second_text}s"
