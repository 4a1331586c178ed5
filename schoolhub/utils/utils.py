import math
import re
import secrets
import time
from pathlib import PurePath

GRADE_MIN = 0
GRADE_MAX = 100
GRADE_RANGE_MESSAGE = f"grade must be a number between {GRADE_MIN} and {GRADE_MAX}"

TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):[0-5]\d")


def check_grade_range(value) -> float:
    """Return ``value`` as a float, or raise ValueError naming the allowed range."""
    if isinstance(value, bool):
        raise ValueError(GRADE_RANGE_MESSAGE)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(GRADE_RANGE_MESSAGE)
    if not math.isfinite(number) or not GRADE_MIN <= number <= GRADE_MAX:
        raise ValueError(GRADE_RANGE_MESSAGE)
    return number


def is_valid_time(value: str) -> bool:
    return bool(value) and TIME_PATTERN.fullmatch(value) is not None


def make_attachment_filename(original_name: str | None) -> str:
    # keep only the last path component of whatever the client sent
    base = PurePath((original_name or "attachment").replace("\\", "/")).name or "attachment"
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}-{base}"
