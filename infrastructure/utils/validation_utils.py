import math
import os
import re
import time
from typing import Any, Optional, Union

# 24 hex characters, the same shape as a document-store object id
OBJECT_ID_REGEX = re.compile(r"[0-9a-fA-F]{24}")


def generate_object_id() -> str:
    """
    Returns a new 24-hex-character identifier: 4 bytes of epoch seconds
    followed by 8 random bytes, so ids created later sort later at second
    granularity.
    """
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{os.urandom(8).hex()}"


def is_object_id(value: Any) -> bool:
    return isinstance(value, str) and OBJECT_ID_REGEX.fullmatch(value) is not None


def parse_number(value: Any) -> Optional[float]:
    """Parses a form value into a finite float; returns None when that is not possible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


# Bounds of the signed 32-bit Integer columns
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def parse_int(value: Any, default: int = 0) -> int:
    """Truncates toward zero and clamps into the stored 32-bit integer range."""
    number = parse_number(value)
    if number is None:
        return default
    return min(max(int(number), INT32_MIN), INT32_MAX)


def parse_whole_number(value: Any) -> Optional[int]:
    """Like parse_int but only for integral values; ``"1.0"`` is 1, ``"1.5"`` is None."""
    number = parse_number(value)
    if number is None or not number.is_integer() or not INT32_MIN <= number <= INT32_MAX:
        return None
    return int(number)


def parse_float(value: Any, default: Union[int, float] = 0) -> float:
    number = parse_number(value)
    return float(default) if number is None else number
