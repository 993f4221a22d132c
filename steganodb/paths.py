"""Dot-path traversal and mutation over nested documents.

Every function takes the root map and a dot-separated path such as
"user.profile.age". Reads never raise for missing or non-traversable
nodes; writes coerce intermediate nodes into maps.

Example:
    doc = {}
    set_path(doc, "user.name", "Alice")
    get_path(doc, "user.name")        # "Alice"
    get_path(doc, "user.name.first")  # MISSING
    add_path(doc, "user.age", 5)      # 5
"""

import logging
from typing import Any, Dict, List

from .document import MISSING, is_finite_number, is_number, values_equal
from .exceptions import NotANumberError, TypeMismatchError

logger = logging.getLogger(__name__)


def split_path(path: str) -> List[str]:
    """Split a dot-separated path into its segments."""
    return path.split(".")


def get_path(doc: Dict[str, Any], path: str) -> Any:
    """Return the value at path, or MISSING.

    Only maps are traversed. A missing segment, or an intermediate node
    that is not a map, yields MISSING.
    """
    node: Any = doc
    for segment in split_path(path):
        if not isinstance(node, dict) or segment not in node:
            return MISSING
        node = node[segment]
    return node


def set_path(doc: Dict[str, Any], path: str, value: Any) -> None:
    """Assign value at path, creating intermediate maps.

    Any intermediate node that is not a map is discarded and replaced
    with an empty one.
    """
    segments = split_path(path)
    node = doc
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value


def delete_path(doc: Dict[str, Any], path: str) -> bool:
    """Remove the value at path.

    Returns:
        True if something was removed, False if any segment was missing
    """
    segments = split_path(path)
    node: Any = doc
    for segment in segments[:-1]:
        if not isinstance(node, dict) or segment not in node:
            return False
        node = node[segment]
    if not isinstance(node, dict) or segments[-1] not in node:
        return False
    del node[segments[-1]]
    return True


def add_path(doc: Dict[str, Any], path: str, amount: Any, sign: int = 1) -> Any:
    """Add sign * amount to the number stored at path.

    The current value is re-read on every call. A missing value or None
    counts as 0.

    Returns:
        The new value

    Raises:
        TypeMismatchError: If the stored value exists and is not a number
        NotANumberError: If the sum is not finite; nothing is written
    """
    current = get_path(doc, path)
    if current is MISSING or current is None:
        current = 0
    elif not is_number(current):
        raise TypeMismatchError(path, "a number", current)

    try:
        result = current + sign * amount
    except OverflowError:
        result = float("inf")
    if not is_finite_number(result):
        raise NotANumberError("result", result)
    set_path(doc, path, result)
    return result


def push_path(doc: Dict[str, Any], path: str, element: Any) -> List[Any]:
    """Append element to the list stored at path.

    A missing value starts a new list. A value that is not a list is
    replaced by a new list holding only element.

    Returns:
        The list now stored at path
    """
    current = get_path(doc, path)
    if isinstance(current, list):
        current.append(element)
        return current

    if current is not MISSING:
        logger.warning(
            "Replacing %s at %r with a new list", type(current).__name__, path
        )
    values = [element]
    set_path(doc, path, values)
    return values


def pull_path(doc: Dict[str, Any], path: str, element: Any) -> int:
    """Remove every occurrence of element from the list stored at path.

    Survivors keep their relative order. Elements are compared by value,
    so maps and lists match when they are structurally equal.

    Returns:
        Number of elements removed

    Raises:
        TypeMismatchError: If no list is stored at path
    """
    current = get_path(doc, path)
    if not isinstance(current, list):
        raise TypeMismatchError(path, "a list", current)

    survivors = [v for v in current if not values_equal(v, element)]
    removed = len(current) - len(survivors)
    current[:] = survivors
    return removed
