"""Persistence drivers for steganodb."""

from typing import Dict, Type

from ..exceptions import ConfigurationError
from .base import StorageDriver
from .jsonfile import JsonDriver
from .steganographic import SteganographicDriver
from .tomlfile import TomlDriver

DRIVERS: Dict[str, Type[StorageDriver]] = {
    "steganographic": SteganographicDriver,
    "stegano": SteganographicDriver,
    "json": JsonDriver,
    "toml": TomlDriver,
}


def get_driver(name: str) -> StorageDriver:
    """Create the driver registered under name.

    Raises:
        ConfigurationError: If no driver has that name
    """
    cls = DRIVERS.get(str(name).lower())
    if cls is None:
        raise ConfigurationError(
            f"Unknown driver: {name!r} (expected one of {sorted(set(DRIVERS))})"
        )
    return cls()


__all__ = [
    "StorageDriver",
    "SteganographicDriver",
    "JsonDriver",
    "TomlDriver",
    "get_driver",
]
