"""Embedded path-addressed document store with steganographic persistence.

Values are read and written with dot-separated keys like "user.profile.age"
and the whole dataset is saved to one file after every write: hidden in the
pixels of a PNG image, or as plain JSON or TOML.

Quick Start:
    from steganodb import Database

    # Open (or create) a database hidden in an image
    db = Database("./avatar.png")

    # Nested values
    db.set("user.name", "Alice")
    db.add("user.age", 30)
    db.get("user.age")            # 30

    # Lists
    db.push("tasks", "t1")
    db.pull("tasks", "t1")

    # Tables share the same file
    db.table("scores").set("alice", 12)

    # Values that expire
    db.cache("session.token", "abc123", 60_000)

Supported drivers:
    - steganographic   JSON hidden in a PNG carrier image (default)
    - json             Pretty-printed JSON text
    - toml             TOML text

Key Classes:
    - Database: Handle bound to a file, a driver and a current table
    - connect(): Open a Database from a URL such as "json:///state.json"
    - DatabaseConfig: Driver, file path and starting table

Errors:
    - InvalidKeyError: Empty key or key containing whitespace
    - NotANumberError: Amount or TTL that isn't a number
    - TypeMismatchError: Arithmetic on a non-number, pull on a non-list
"""

from .config import DatabaseConfig, DriverKind
from .core import Database, connect
from .document import MISSING
from .drivers import JsonDriver, SteganographicDriver, StorageDriver, TomlDriver
from .exceptions import (
    StoreError,
    InvalidKeyError,
    NotFoundError,
    NotANumberError,
    TypeMismatchError,
    ConfigurationError,
    SerializationError,
)
from .table import Entry, RootData, Table

__all__ = [
    # Main API
    "Database",
    "connect",
    "DatabaseConfig",
    "DriverKind",
    "MISSING",
    # Data model
    "Entry",
    "Table",
    "RootData",
    # Drivers
    "StorageDriver",
    "SteganographicDriver",
    "JsonDriver",
    "TomlDriver",
    # Exceptions
    "StoreError",
    "InvalidKeyError",
    "NotFoundError",
    "NotANumberError",
    "TypeMismatchError",
    "ConfigurationError",
    "SerializationError",
]

__version__ = "0.1.0"
