"""TOML text driver."""

import logging
import tomllib
from typing import Any, Dict

import tomli_w

from ..exceptions import SerializationError
from .base import StorageDriver, write_atomic

logger = logging.getLogger(__name__)

# TOML has no null; None is written as this one-key table.
NULL_MARKER = "__null__"


def _to_toml_compatible(value: Any) -> Any:
    """Replace every None with the null marker table."""
    if value is None:
        return {NULL_MARKER: True}
    if isinstance(value, list):
        return [_to_toml_compatible(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_toml_compatible(v) for k, v in value.items()}
    return value


def _from_toml_compatible(value: Any) -> Any:
    """Turn null marker tables back into None."""
    if isinstance(value, list):
        return [_from_toml_compatible(v) for v in value]
    if isinstance(value, dict):
        if value == {NULL_MARKER: True}:
            return None
        return {k: _from_toml_compatible(v) for k, v in value.items()}
    return value


class TomlDriver(StorageDriver):
    """Stores the dataset as a TOML document.

    Each table becomes an array of {id, value} tables; tomli-w picks
    inline or header syntax, e.g.:

        json = [
            { id = "user", value = { age = 30 } },
        ]
    """

    name = "toml"
    suffix = ".toml"

    def initialize(self, path: str) -> None:
        """Write an empty dataset."""
        self._write(path, {})
        logger.info("Created TOML database at %s", path)

    def _read(self, path: str) -> Any:
        with open(path, "rb") as f:
            return _from_toml_compatible(tomllib.load(f))

    def _write(self, path: str, document: Dict[str, Any]) -> None:
        try:
            text = tomli_w.dumps(_to_toml_compatible(document))
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to encode dataset as TOML: {e}")
        write_atomic(path, text.encode("utf-8"))
