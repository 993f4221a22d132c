"""Shared fixtures for steganodb tests."""

import pytest

from steganodb import Database

SUFFIXES = {
    "steganographic": ".png",
    "json": ".json",
    "toml": ".toml",
}


@pytest.fixture(params=sorted(SUFFIXES))
def driver_name(request):
    """Every driver name in turn."""
    return request.param


@pytest.fixture
def db_path(tmp_path, driver_name):
    """Backing file path with the driver's usual suffix."""
    return str(tmp_path / f"store{SUFFIXES[driver_name]}")


@pytest.fixture
def db(db_path, driver_name):
    """A fresh database for each driver."""
    database = Database(db_path, driver=driver_name)
    yield database
    database.close()


@pytest.fixture
def json_db(tmp_path):
    """A fresh JSON-backed database, for tests that don't depend on the driver."""
    database = Database(str(tmp_path / "store.json"), driver="json")
    yield database
    database.close()
