"""Exceptions for the steganodb package."""

from typing import Any


class StoreError(Exception):
    """Base exception for all store errors."""

    pass


class InvalidKeyError(StoreError, ValueError):
    """Key is empty, contains whitespace, or has an empty segment."""

    def __init__(self, key: Any, reason: str = "Key can't be empty or contain whitespace"):
        self.key = key
        super().__init__(f"{reason}: {key!r}")


class NotFoundError(StoreError, KeyError):
    """No value stored at the specified key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No value at key: {key}")


class NotANumberError(StoreError, ValueError):
    """An amount or duration is not a usable number."""

    def __init__(self, name: str, value: Any):
        self.name = name
        self.value = value
        super().__init__(f"The {name} needs to be a number, got {value!r}")


class TypeMismatchError(StoreError, TypeError):
    """Stored value has the wrong type for the requested operation."""

    def __init__(self, key: str, expected: str, actual: Any):
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Key {key!r} expects {expected}, got {type(actual).__name__}"
        )


class ConfigurationError(StoreError, ValueError):
    """Unknown driver, URL scheme or malformed configuration."""

    pass


class SerializationError(StoreError):
    """Failed to encode the dataset for the backing file."""

    pass
