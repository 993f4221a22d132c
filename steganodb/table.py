"""Tables of id-keyed entries and the root dataset that holds them."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .document import MISSING
from .exceptions import InvalidKeyError
from .paths import add_path, delete_path, get_path, pull_path, push_path, set_path

logger = logging.getLogger(__name__)


@dataclass
class Entry:
    """A document stored under an id within a table."""

    id: str
    value: Any = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.value}


class Table:
    """One named partition of the dataset.

    Keys are dot paths whose first segment selects an entry by id and
    whose remainder addresses a location inside that entry's value.
    Entries keep insertion order.

    Example:
        table = Table("users")
        table.set("alice.age", 30)
        table.add("alice.age", 5)
        table.get("alice")       # {"age": 35}
        table.all()              # [Entry(id="alice", value={"age": 35})]
    """

    def __init__(self, name: str, entries: Optional[List[Entry]] = None):
        self.name = name
        self.entries: List[Entry] = entries if entries is not None else []

    def __repr__(self) -> str:
        return f"Table({self.name!r}, entries={len(self.entries)})"

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    # Key handling

    @staticmethod
    def resolve(key: Any) -> Tuple[str, str]:
        """Split a key into its entry id and the path inside the entry.

        Args:
            key: Dot-separated key (e.g., "user.profile.age")

        Returns:
            (entry_id, remainder); remainder is "" for whole-entry keys

        Raises:
            InvalidKeyError: If key is not a non-empty string, contains
                whitespace, or has an empty segment
        """
        if not isinstance(key, str) or not key:
            raise InvalidKeyError(key)
        if any(ch.isspace() for ch in key):
            raise InvalidKeyError(key)
        if "" in key.split("."):
            raise InvalidKeyError(key, "Key can't have an empty segment")

        entry_id, _, remainder = key.partition(".")
        return entry_id, remainder

    def find(self, entry_id: str) -> Optional[Entry]:
        """Return the entry with the given id, or None."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def find_or_create(self, entry_id: str) -> Entry:
        """Return the entry with the given id, appending an empty one if absent."""
        entry = self.find(entry_id)
        if entry is None:
            entry = Entry(entry_id)
            self.entries.append(entry)
        return entry

    def _remove(self, entry: Entry) -> None:
        for index, candidate in enumerate(self.entries):
            if candidate is entry:
                del self.entries[index]
                return

    def _mutate(self, key: str, operation: Callable[..., Any], *args: Any) -> Any:
        """Run a path operation against the entry addressed by key.

        The entry's value is placed in a single-item map under its id so the
        path functions see the full key. An entry is only created once the
        operation succeeds, and removed if the operation deleted it.
        """
        entry_id, _ = self.resolve(key)
        entry = self.find(entry_id)
        box = {} if entry is None else {entry_id: entry.value}

        result = operation(box, key, *args)

        if entry_id in box:
            self.find_or_create(entry_id).value = box[entry_id]
        elif entry is not None:
            self._remove(entry)
        return result

    # Reads

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at key, or default if absent."""
        entry_id, _ = self.resolve(key)
        entry = self.find(entry_id)
        if entry is None:
            return default

        value = get_path({entry_id: entry.value}, key)
        return default if value is MISSING else value

    def has(self, key: str) -> bool:
        """Truthiness of the value at key.

        A stored 0, False, "", None or empty container reads as absent.
        """
        return bool(self.get(key))

    def all(self) -> List[Entry]:
        """Return the entries in stored order."""
        return self.entries

    # Writes

    def set(self, key: str, value: Any) -> None:
        self._mutate(key, set_path, value)

    def delete(self, key: str) -> bool:
        """Remove the value at key; a whole-entry key removes the entry."""
        return self._mutate(key, delete_path)

    def add(self, key: str, amount: Any) -> Any:
        return self._mutate(key, add_path, amount, 1)

    def sub(self, key: str, amount: Any) -> Any:
        return self._mutate(key, add_path, amount, -1)

    def push(self, key: str, element: Any) -> List[Any]:
        return self._mutate(key, push_path, element)

    def pull(self, key: str, element: Any) -> int:
        return self._mutate(key, pull_path, element)

    def clear(self) -> None:
        self.entries = []

    # Canonical representation

    def to_document(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries]

    @classmethod
    def from_document(cls, name: str, raw: Any) -> "Table":
        """Build a table from its stored form.

        Accepts the canonical list of {"id", "value"} maps, and the older
        map-of-values form ({id: value}).

        Raises:
            ValueError: If raw is neither form
        """
        if isinstance(raw, dict):
            return cls(name, [Entry(str(k), v) for k, v in raw.items()])
        if not isinstance(raw, list):
            raise ValueError(f"Table {name!r} must be a list of entries")

        table = cls(name)
        for item in raw:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                raise ValueError(f"Malformed entry in table {name!r}: {item!r}")
            if table.find(item["id"]) is not None:
                logger.warning(
                    "Duplicate entry %r in table %r, keeping the last one",
                    item["id"],
                    name,
                )
            table.find_or_create(item["id"]).value = item.get("value")
        return table


def check_table_name(name: Any) -> None:
    """Raise InvalidKeyError unless name is a non-empty string."""
    if not isinstance(name, str) or not name:
        raise InvalidKeyError(name, "Table name can't be empty")


class RootData:
    """The whole in-memory dataset: table name -> Table.

    A single instance is shared by every handle opened on the same backing
    file, so a change made through one handle is visible through all.
    """

    def __init__(self, tables: Optional[Dict[str, Table]] = None):
        self._tables: Dict[str, Table] = tables if tables is not None else {}

    def __contains__(self, name: str) -> bool:
        return name in self._tables

    def __repr__(self) -> str:
        return f"RootData(tables={list(self._tables)})"

    def table(self, name: str) -> Table:
        """Return the named table, creating it empty if absent."""
        check_table_name(name)
        table = self._tables.get(name)
        if table is None:
            table = Table(name)
            self._tables[name] = table
        return table

    def tables(self) -> List[str]:
        return list(self._tables)

    def replace(self, other: "RootData") -> None:
        """Take over other's tables, keeping this instance's identity."""
        self._tables = other._tables

    def to_document(self) -> Dict[str, List[Dict[str, Any]]]:
        return {name: table.to_document() for name, table in self._tables.items()}

    @classmethod
    def from_document(cls, raw: Any) -> "RootData":
        """Build the dataset from a decoded backing file.

        Raises:
            ValueError: If raw is not a map of tables
        """
        if not isinstance(raw, dict):
            raise ValueError("Dataset root must be a map of tables")
        return cls(
            {str(name): Table.from_document(str(name), value) for name, value in raw.items()}
        )
