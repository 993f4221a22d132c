"""Configuration for opening a database.

A configuration names the driver, the backing file and the table that a
new handle starts on. It is fixed for the lifetime of the handle and of
every handle derived from it with table().
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_FILE_PATH = "./steganodb.png"
DEFAULT_TABLE = "json"


class DriverKind(Enum):
    """Supported backing file encodings."""

    STEGANOGRAPHIC = "steganographic"
    JSON = "json"
    TOML = "toml"

    @classmethod
    def parse(cls, value: Any) -> "DriverKind":
        if isinstance(value, cls):
            return value
        name = str(value).lower()
        if name == "stegano":
            return cls.STEGANOGRAPHIC
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(
                f"Unknown driver: {value!r} (expected one of {[k.value for k in cls]})"
            )


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration.

    Attributes:
        driver: Backing file encoding
        file_path: Path of the backing file
        initial_table: Table the handle starts on
    """

    driver: DriverKind = DriverKind.STEGANOGRAPHIC
    file_path: str = DEFAULT_FILE_PATH
    initial_table: str = DEFAULT_TABLE

    def __post_init__(self):
        object.__setattr__(self, "driver", DriverKind.parse(self.driver))
        if not self.file_path:
            raise ConfigurationError("file_path can't be empty")
        if not self.initial_table:
            raise ConfigurationError("initial_table can't be empty")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DatabaseConfig":
        """Build a configuration from a plain mapping.

        Accepts both snake_case keys and the camelCase keys used by
        JSON configuration files ("filePath", "initialTable").
        """
        known = {"driver", "file_path", "filePath", "initial_table", "initialTable"}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", sorted(unknown))

        return cls(
            driver=data.get("driver", DriverKind.STEGANOGRAPHIC),
            file_path=data.get("file_path", data.get("filePath", DEFAULT_FILE_PATH)),
            initial_table=data.get(
                "initial_table", data.get("initialTable", DEFAULT_TABLE)
            ),
        )

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Load configuration from environment variables.

        STEGANODB_DRIVER, STEGANODB_PATH and STEGANODB_TABLE override the
        defaults.
        """
        return cls(
            driver=os.getenv("STEGANODB_DRIVER", DriverKind.STEGANOGRAPHIC.value),
            file_path=os.getenv("STEGANODB_PATH", DEFAULT_FILE_PATH),
            initial_table=os.getenv("STEGANODB_TABLE", DEFAULT_TABLE),
        )
