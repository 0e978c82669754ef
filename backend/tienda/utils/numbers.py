import math
from typing import Any


def is_number(value: Any) -> bool:
    """JSON number check: ints and finite floats, never bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def is_whole(value: Any) -> bool:
    return is_number(value) and float(value).is_integer()
