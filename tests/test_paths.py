"""Tests for dot-path traversal and document helpers."""

import pytest

from steganodb.document import MISSING, is_finite_number, to_document, values_equal
from steganodb.exceptions import NotANumberError, TypeMismatchError
from steganodb.paths import (
    add_path,
    delete_path,
    get_path,
    pull_path,
    push_path,
    set_path,
    split_path,
)


class TestGetSet:
    """Tests for get_path and set_path."""

    def test_split(self):
        """Paths split on every dot."""
        assert split_path("a.b.c") == ["a", "b", "c"]
        assert split_path("a") == ["a"]

    def test_set_and_get_nested(self):
        """Intermediate maps are created on write."""
        doc = {}
        set_path(doc, "user.profile.name", "Alice")
        assert doc == {"user": {"profile": {"name": "Alice"}}}
        assert get_path(doc, "user.profile.name") == "Alice"

    def test_missing_is_not_an_error(self):
        """Missing or non-traversable segments yield MISSING."""
        doc = {"user": {"name": "Alice"}, "tags": ["a"]}
        assert get_path(doc, "nope") is MISSING
        assert get_path(doc, "user.age") is MISSING
        assert get_path(doc, "user.name.first") is MISSING
        assert get_path(doc, "tags.0") is MISSING

    def test_none_is_not_missing(self):
        """A stored None is a value, not an absence."""
        doc = {"a": None}
        assert get_path(doc, "a") is None
        assert get_path(doc, "b") is MISSING

    def test_set_coerces_non_map_intermediates(self):
        """A scalar in the way is replaced by a map."""
        doc = {"user": "Alice"}
        set_path(doc, "user.name", "Bob")
        assert doc == {"user": {"name": "Bob"}}

        doc = {"user": [1, 2]}
        set_path(doc, "user.name", "Bob")
        assert doc == {"user": {"name": "Bob"}}

    def test_set_overwrites_leaf(self):
        """The final segment is simply reassigned."""
        doc = {"a": {"b": {"c": 1}}}
        set_path(doc, "a.b", 2)
        assert doc == {"a": {"b": 2}}


class TestDelete:
    """Tests for delete_path."""

    def test_delete_leaf(self):
        """Deleting removes only the addressed key."""
        doc = {"user": {"name": "Alice", "age": 30}}
        assert delete_path(doc, "user.name") is True
        assert doc == {"user": {"age": 30}}

    def test_delete_missing_is_noop(self):
        """Deleting a missing path changes nothing."""
        doc = {"user": {"name": "Alice"}}
        assert delete_path(doc, "user.age") is False
        assert delete_path(doc, "other.age") is False
        assert delete_path(doc, "user.name.first") is False
        assert doc == {"user": {"name": "Alice"}}


class TestAdd:
    """Tests for add_path."""

    def test_missing_counts_as_zero(self):
        """Adding to a missing value starts at zero."""
        doc = {}
        assert add_path(doc, "counter", 5) == 5
        assert add_path(doc, "other", 5, -1) == -5

    def test_none_counts_as_zero(self):
        """A stored None is treated like a missing value."""
        doc = {"n": None}
        assert add_path(doc, "n", 3) == 3

    def test_add_and_subtract(self):
        """The current value is re-read on every call."""
        doc = {"user": {"age": 30}}
        add_path(doc, "user.age", 5)
        assert doc["user"]["age"] == 35
        doc["user"]["age"] = 100
        add_path(doc, "user.age", 40, -1)
        assert doc["user"]["age"] == 60

    def test_non_number_raises(self):
        """Strings, bools and containers are not numbers."""
        for value in ("Alice", True, [1], {"a": 1}):
            doc = {"v": value}
            with pytest.raises(TypeMismatchError):
                add_path(doc, "v", 1)
            assert doc == {"v": value}

    def test_overflow_raises(self):
        """A sum that is not finite is never written."""
        doc = {"big": 1e308, "huge": 10**400}
        with pytest.raises(NotANumberError):
            add_path(doc, "big", 1e308)
        with pytest.raises(NotANumberError):
            add_path(doc, "huge", 1.5)
        assert doc == {"big": 1e308, "huge": 10**400}

    def test_through_scalar_intermediate(self):
        """A scalar in the middle of the path is replaced by a map."""
        doc = {"user": {"name": "Alice"}}
        assert add_path(doc, "user.name.age", 5) == 5
        assert doc == {"user": {"name": {"age": 5}}}


class TestPushPull:
    """Tests for push_path and pull_path."""

    def test_push_creates_and_appends(self):
        """Push starts a list and keeps order."""
        doc = {}
        push_path(doc, "tasks", "t1")
        push_path(doc, "tasks", "t2")
        assert doc == {"tasks": ["t1", "t2"]}

    def test_push_replaces_non_list(self):
        """A value that isn't a list is discarded."""
        doc = {"tasks": "oops"}
        assert push_path(doc, "tasks", "t1") == ["t1"]
        assert doc == {"tasks": ["t1"]}

    def test_pull_removes_all_equal(self):
        """Every matching element goes, survivors keep order."""
        doc = {"a": [1, 2, 3, 2, 1]}
        assert pull_path(doc, "a", 2) == 2
        assert doc == {"a": [1, 3, 1]}
        assert pull_path(doc, "a", 10) == 0
        assert doc == {"a": [1, 3, 1]}

    def test_pull_composite_by_value(self):
        """Maps and lists match structurally."""
        doc = {"a": [{"id": 1}, {"id": 2}, [1, 2]]}
        pull_path(doc, "a", {"id": 1})
        pull_path(doc, "a", [1, 2])
        assert doc == {"a": [{"id": 2}]}

    def test_pull_keeps_list_identity(self):
        """The list is edited in place."""
        values = [1, 2, 3]
        doc = {"a": values}
        pull_path(doc, "a", 2)
        assert doc["a"] is values

    def test_pull_non_list_raises(self):
        """Pull needs a list."""
        with pytest.raises(TypeMismatchError):
            pull_path({"a": "abc"}, "a", "a")
        with pytest.raises(TypeMismatchError):
            pull_path({}, "a", 1)


class TestDocuments:
    """Tests for document helpers."""

    def test_values_equal_separates_bools(self):
        """True is not 1, but 1 is 1.0."""
        assert not values_equal(True, 1)
        assert not values_equal(0, False)
        assert values_equal(1, 1.0)
        assert values_equal({"a": [1, None]}, {"a": [1, None]})
        assert not values_equal({"a": 1}, {"a": 1, "b": 2})
        assert not values_equal([1], {"0": 1})

    def test_to_document_copies(self):
        """Tuples become lists and containers are copied."""
        original = {"a": (1, 2), "b": [{"c": None}]}
        copied = to_document(original)
        assert copied == {"a": [1, 2], "b": [{"c": None}]}
        assert copied["b"] is not original["b"]

    def test_to_document_rejects_non_json(self):
        """Sets, objects, non-string keys and NaN are refused."""
        for value in ({1, 2}, object(), {1: "a"}, float("nan"), float("inf")):
            with pytest.raises(TypeMismatchError):
                to_document(value, "k")

    def test_is_finite_number(self):
        assert is_finite_number(3)
        assert is_finite_number(-2.5)
        assert not is_finite_number(True)
        assert not is_finite_number("5")
        assert not is_finite_number(float("nan"))
        assert not is_finite_number(None)

    def test_missing_is_falsy(self):
        assert not MISSING
        assert repr(MISSING) == "MISSING"
