"""Database handle: tables and key paths over a single backing file."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, List, Union
from urllib.parse import parse_qs, urlparse

from .config import DEFAULT_FILE_PATH, DEFAULT_TABLE, DatabaseConfig, DriverKind
from .document import MISSING, is_finite_number, to_document
from .drivers import StorageDriver, get_driver
from .exceptions import ConfigurationError, NotANumberError, NotFoundError, StoreError
from .table import Entry, RootData, Table, check_table_name
from .ttl import TTLScheduler

logger = logging.getLogger(__name__)


@dataclass
class _Storage:
    """Everything shared by the handles opened on one backing file."""

    file_path: str
    driver: StorageDriver
    root: RootData
    lock: threading.RLock = field(default_factory=threading.RLock)
    scheduler: TTLScheduler = field(default_factory=TTLScheduler)


def _load_root(driver: StorageDriver, file_path: str) -> RootData:
    """Load the dataset, seeding the backing file if it doesn't exist."""
    if not driver.exists(file_path):
        driver.initialize(file_path)
        return RootData()

    try:
        return RootData.from_document(driver.load(file_path))
    except ValueError as e:
        logger.warning("Malformed dataset in %s, starting empty: %s", file_path, e)
        return RootData()


class Database:
    """Path-addressed document store persisted to a single file.

    Keys are dot paths: the first segment selects an entry in the current
    table, the rest addresses a location inside that entry's value. Every
    write rewrites the whole backing file through the driver.

    Example:
        from steganodb import Database

        db = Database("./bot.png")              # data hidden in a PNG
        db.set("user.name", "Alice")
        db.add("user.age", 30)
        db.get("user")                          # {"name": "Alice", "age": 30}

        scores = db.table("scores")             # same file, other table
        scores.push("alice", 12)
        scores.all()                            # [Entry(id="alice", value=[12])]

        db.cache("session.token", "abc", 1000)  # gone after one second
    """

    def __init__(
        self,
        file_path: str = DEFAULT_FILE_PATH,
        driver: Union[str, DriverKind, StorageDriver] = DriverKind.STEGANOGRAPHIC,
        table: str = DEFAULT_TABLE,
    ):
        """Open or create the database at file_path.

        Use from_config() or connect() to open from configuration.

        Args:
            file_path: Backing file path; created from the driver's seed
                if missing
            driver: "steganographic", "json", "toml", or a driver instance
            table: Table the handle starts on
        """
        if not isinstance(driver, StorageDriver):
            driver = get_driver(DriverKind.parse(driver).value)
        check_table_name(table)

        root = _load_root(driver, file_path)
        self._storage = _Storage(file_path=file_path, driver=driver, root=root)
        self._table_name = table
        root.table(table)
        logger.debug("Opened %s with %s driver", file_path, driver.name)

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "Database":
        return cls(
            file_path=config.file_path,
            driver=config.driver,
            table=config.initial_table,
        )

    @classmethod
    def _bind(cls, storage: _Storage, table_name: str) -> "Database":
        handle = cls.__new__(cls)
        handle._storage = storage
        handle._table_name = table_name
        storage.root.table(table_name)
        return handle

    # Properties

    @property
    def file_path(self) -> str:
        return self._storage.file_path

    @property
    def driver(self) -> StorageDriver:
        return self._storage.driver

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def root(self) -> RootData:
        """The dataset shared by every handle on this file."""
        return self._storage.root

    @property
    def _table(self) -> Table:
        return self._storage.root.table(self._table_name)

    def __repr__(self) -> str:
        return (
            f"Database({self.file_path!r}, driver={self.driver.name!r}, "
            f"table={self._table_name!r})"
        )

    # Tables

    def table(self, name: str) -> "Database":
        """Return a handle on another table of the same dataset.

        The new handle shares this one's data, driver, file and pending
        TTL deletions; writes through either are visible through both.
        """
        with self._storage.lock:
            return self._bind(self._storage, name)

    def tables(self) -> List[str]:
        with self._storage.lock:
            return self._storage.root.tables()

    # Reads

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at key, or default if nothing is stored there.

        Raises:
            InvalidKeyError: If key is empty or contains whitespace
        """
        with self._storage.lock:
            return self._table.get(key, default)

    def has(self, key: str) -> bool:
        """Whether key holds a truthy value.

        A stored 0, False, "", None or empty container counts as absent.
        Use `key in db` to test for presence.
        """
        with self._storage.lock:
            return self._table.has(key)

    def all(self) -> List[Entry]:
        """Return the current table's entries in insertion order."""
        with self._storage.lock:
            return self._table.all()

    # Writes

    def set(self, key: str, value: Any) -> None:
        """Store value at key, creating intermediate maps.

        Raises:
            InvalidKeyError: If key is empty or contains whitespace
            TypeMismatchError: If value has no JSON equivalent
        """
        Table.resolve(key)
        value = to_document(value, key)
        with self._storage.lock:
            self._table.set(key, value)
            self._flush()

    def delete(self, key: str) -> bool:
        """Remove the value at key.

        Returns:
            True if something was removed
        """
        with self._storage.lock:
            removed = self._table.delete(key)
            self._flush()
        return removed

    def add(self, key: str, amount: Union[int, float]) -> Union[int, float]:
        """Add amount to the number at key; a missing value counts as 0.

        Returns:
            The new value

        Raises:
            NotANumberError: If amount is not a finite number
            TypeMismatchError: If the stored value is not a number
        """
        return self._add(key, amount, "add")

    def sub(self, key: str, amount: Union[int, float]) -> Union[int, float]:
        """Subtract amount from the number at key; a missing value counts as 0."""
        return self._add(key, amount, "sub")

    def _add(self, key: str, amount: Any, operation: str) -> Union[int, float]:
        Table.resolve(key)
        if not is_finite_number(amount):
            raise NotANumberError("amount", amount)
        with self._storage.lock:
            result = getattr(self._table, operation)(key, amount)
            self._flush()
        return result

    def push(self, key: str, element: Any) -> List[Any]:
        """Append element to the list at key.

        A missing value starts a new list; a value that is not a list is
        replaced by one.

        Returns:
            The list now stored at key
        """
        Table.resolve(key)
        element = to_document(element, key)
        with self._storage.lock:
            values = self._table.push(key, element)
            self._flush()
        return values

    def pull(self, key: str, element: Any) -> int:
        """Remove every element equal to element from the list at key.

        Returns:
            Number of elements removed

        Raises:
            TypeMismatchError: If no list is stored at key
        """
        Table.resolve(key)
        element = to_document(element, key)
        with self._storage.lock:
            removed = self._table.pull(key, element)
            self._flush()
        return removed

    def clear(self) -> None:
        """Remove every entry from the current table."""
        with self._storage.lock:
            self._table.clear()
            self._flush()

    def cache(self, key: str, value: Any, ttl_ms: Union[int, float]) -> None:
        """Store value at key and delete it again after ttl_ms milliseconds.

        The deletion is kept in memory only: if the process exits first
        the value stays in the backing file. Caching the same key again
        schedules a second, independent deletion.

        Raises:
            InvalidKeyError: If key is empty or contains whitespace
            NotANumberError: If ttl_ms is not a positive number
            StoreError: If the database has been closed; nothing is stored
        """
        Table.resolve(key)
        if not is_finite_number(ttl_ms) or ttl_ms <= 0:
            raise NotANumberError("time (ms)", ttl_ms)
        value = to_document(value, key)

        with self._storage.lock:
            if self._storage.scheduler.closed:
                raise StoreError(f"Can't cache {key!r}: database is closed")
            self._table.set(key, value)
            self._flush()
            self._storage.scheduler.schedule(ttl_ms / 1000.0, lambda: self._expire(key))
        logger.debug("Cached %r in table %r for %sms", key, self._table_name, ttl_ms)

    def _expire(self, key: str) -> None:
        with self._storage.lock:
            self._table.delete(key)
            self._flush()
        logger.debug("Expired %r in table %r", key, self._table_name)

    # Dict-like interface

    def __getitem__(self, key: str) -> Any:
        value = self.get(key, MISSING)
        if value is MISSING:
            raise NotFoundError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.delete(key):
            raise NotFoundError(key)

    def __contains__(self, key: str) -> bool:
        return self.get(key, MISSING) is not MISSING

    # Persistence

    def _flush(self) -> None:
        storage = self._storage
        storage.driver.save(storage.file_path, storage.root.to_document())

    def reload(self) -> None:
        """Re-read the backing file, replacing the shared in-memory data."""
        with self._storage.lock:
            root = _load_root(self._storage.driver, self._storage.file_path)
            self._storage.root.replace(root)
            self._storage.root.table(self._table_name)

    # Lifecycle

    def close(self) -> None:
        """Drop pending TTL deletions for every handle on this file.

        Values cached with cache() and not yet expired stay stored, as
        they would if the process exited.
        """
        self._storage.scheduler.shutdown()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def connect(url: str) -> Database:
    """Open a database using a URL.

    Supported URL schemes:
        - stegano:///path.png   Data hidden in a PNG image
        - json:///path.json     Pretty-printed JSON
        - toml:///path.toml     TOML

    A "table" query parameter selects the starting table.

    Args:
        url: Connection URL

    Returns:
        Opened Database

    Example:
        db = connect("stegano:///avatar.png")
        db = connect("json:///state.json?table=players")
    """
    parsed = urlparse(url)
    scheme = parsed.scheme

    try:
        kind = DriverKind.parse(scheme)
    except ConfigurationError:
        raise ConfigurationError(f"Unknown storage scheme: {scheme}")

    path = parsed.netloc + parsed.path
    if path.startswith("/"):
        path = path[1:]  # Remove leading slash from file path
    if not path:
        raise ConfigurationError(f"No file path in URL: {url}")

    table = parse_qs(parsed.query).get("table", [DEFAULT_TABLE])[0]
    return Database.from_config(
        DatabaseConfig(driver=kind, file_path=path, initial_table=table)
    )
