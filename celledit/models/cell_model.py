"""
Cell values and the special markers stored in place of plain values.

Plain values are str, int, float, bool or None. Special values are lists
whose first element is a marker code, e.g. ["E", "ZeroDivisionError"] for
a formula that raised, or ["C"] for a value hidden by access rules.
"""

import math
from enum import Enum
from typing import Any, Optional


class CellMarker(str, Enum):
    CENSORED = "C"
    EXCEPTION = "E"
    LIST = "L"
    PENDING = "P"


def _has_marker(value: Any, marker: CellMarker) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0 and value[0] == marker.value


def is_censored(value: Any) -> bool:
    """True if the value was redacted by access control rules."""
    return _has_marker(value, CellMarker.CENSORED)


def is_raised_exception(value: Any) -> bool:
    """True if the value records an exception raised by a formula."""
    return _has_marker(value, CellMarker.EXCEPTION)


def make_exception(name: str, message: Optional[str] = None) -> list:
    value = [CellMarker.EXCEPTION.value, name]
    if message is not None:
        value.append(message)
    return value


def values_equal(a: Any, b: Any) -> bool:
    """Deep equality for cell values.

    Lists and tuples compare element-wise, so nested marker values are
    handled. Unlike ==, a bool never equals an int (True vs 1), since
    switching between them is a real change of the stored value.
    NaN equals NaN, so re-saving a NaN cell is not a change.
    """
    if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
        if not (isinstance(a, (list, tuple)) and isinstance(b, (list, tuple))):
            return False
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) or isinstance(b, dict):
        if not (isinstance(a, dict) and isinstance(b, dict)) or a.keys() != b.keys():
            return False
        return all(values_equal(a[k], b[k]) for k in a)
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b
