# blueprints/classes/timecodec.py
from __future__ import annotations
import re

from .errors import InvalidTimeFormat, OutOfRange

MINUTES_PER_DAY = 24 * 60
_HHMM = re.compile(r"([0-9]{2}):([0-9]{2})")

def encode(value: str) -> int:
    """'HH:MM' (24h, zero-padded) -> minute of day."""
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"expected 'HH:MM', got {value!r}")
    m = _HHMM.fullmatch(value)
    if not m:
        raise InvalidTimeFormat(f"expected 'HH:MM', got {value!r}")
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeFormat(f"time out of range: {value!r}")
    return hour * 60 + minute

def decode(minutes: int) -> str:
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise OutOfRange(f"minute of day must be an integer, got {minutes!r}")
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise OutOfRange(f"minute of day out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
