"""Document values: the JSON-like data stored under every key.

A document is one of None, bool, int, float, str, a list of documents,
or a dict mapping str to documents.
"""

import math
from typing import Any

from .exceptions import TypeMismatchError


class Missing:
    """Sentinel for an absent value, distinct from a stored None."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = Missing()


def is_number(value: Any) -> bool:
    """True for int and float values, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    return is_number(value)


def to_document(value: Any, key: str = "") -> Any:
    """Copy a Python value into a fresh document.

    Tuples become lists. Anything that has no JSON equivalent raises
    TypeMismatchError so the caller can reject it before mutating.

    Args:
        value: Value supplied by the caller
        key: Key the value is destined for (used in error messages)

    Returns:
        A new document structurally equal to value
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if is_number(value):
        if not is_finite_number(value):
            raise TypeMismatchError(key, "a finite number", value)
        return value
    if isinstance(value, (list, tuple)):
        return [to_document(v, key) for v in value]
    if isinstance(value, dict):
        result = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeMismatchError(key, "string map keys", k)
            result[k] = to_document(v, key)
        return result
    raise TypeMismatchError(key, "a JSON-compatible value", value)


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality over documents.

    Unlike ==, a bool never equals a number (True != 1).
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            values_equal(left[k], right[k]) for k in left
        )
    if isinstance(left, (list, dict)) or isinstance(right, (list, dict)):
        return False
    return left == right
