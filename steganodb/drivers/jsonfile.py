"""Plain JSON text driver."""

import json
import logging
from typing import Any, Dict

from ..exceptions import SerializationError
from .base import StorageDriver, write_atomic

logger = logging.getLogger(__name__)


def encode_json(document: Dict[str, Any], ensure_ascii: bool = False) -> str:
    """Serialize the dataset as indented JSON text."""
    try:
        return json.dumps(
            document, indent=2, ensure_ascii=ensure_ascii, allow_nan=False
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to encode dataset as JSON: {e}")


class JsonDriver(StorageDriver):
    """Stores the dataset as pretty-printed JSON.

    Example:
        driver = JsonDriver()
        driver.initialize("data.json")
        driver.save("data.json", {"json": [{"id": "user", "value": {"age": 30}}]})
        driver.load("data.json")
    """

    name = "json"
    suffix = ".json"

    def initialize(self, path: str) -> None:
        """Write an empty dataset."""
        self._write(path, {})
        logger.info("Created JSON database at %s", path)

    def _read(self, path: str) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, path: str, document: Dict[str, Any]) -> None:
        write_atomic(path, (encode_json(document) + "\n").encode("utf-8"))
