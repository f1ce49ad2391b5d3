"""
Untyped JSON Values
===================
Explicit accessors for repaired completion data.

A repaired value is a JsonValue tree (None / bool / int / float / str /
list / dict). Post-processors never index into it blindly; they go through
these helpers, which answer "what is this, if anything" instead of raising
on a missing field or an unexpected type.
"""
import math
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]


def as_mapping(value: Any) -> Dict[str, Any]:
    """Return ``value`` as a dict, or an empty dict when it is not an object."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, dict):
        return value
    return {}


def as_list(value: Any) -> List[Any]:
    """Return ``value`` as a list, or an empty list when it is not an array."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def as_text(value: Any) -> Optional[str]:
    """Return the string value, or None for anything that is not a string."""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value
    return None


def as_number(value: Any) -> Optional[float]:
    """
    Interpret ``value`` as a finite number.

    Accepts ints, floats and numeric strings. Booleans, NaN, infinities,
    integers too large for a float and anything else yield None.
    """
    number = _to_float(value)
    if number is None or math.isnan(number) or math.isinf(number):
        return None
    return number


def as_clamped_int(value: Any, low: int, high: int) -> Optional[int]:
    """
    Interpret ``value`` as an integer in [low, high], rounding half up.

    Out-of-range values, infinities and oversized integers clamp by sign.
    None for NaN and anything that is not numeric.
    """
    number = _to_float(value)
    if number is None or math.isnan(number):
        return None
    if math.isinf(number):
        return high if number > 0 else low
    return max(low, min(high, round_half_up(number)))


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def as_int(value: Any) -> Optional[int]:
    """Interpret ``value`` as an integer, rounding half up. None if not numeric."""
    number = as_number(value)
    if number is None:
        return None
    return round_half_up(number)


def round_half_up(number: float) -> int:
    return int(math.floor(number + 0.5))


def is_blank(value: Any) -> bool:
    text = as_text(value)
    return text is None or not text.strip()
