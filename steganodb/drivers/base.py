"""Abstract base class for persistence drivers."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict

logger = logging.getLogger(__name__)


class StorageDriver(ABC):
    """Abstract base class for persistence drivers.

    Drivers convert the whole dataset to and from one backing file
    (steganographic PNG, JSON, TOML) while the Database class handles
    tables, key paths and the public API.

    The dataset is exchanged in its canonical form:
    {table_name: [{"id": ..., "value": ...}, ...], ...}
    """

    name: str = ""
    suffix: str = ""

    def exists(self, path: str) -> bool:
        """Check whether the backing file exists."""
        return os.path.exists(path)

    @abstractmethod
    def initialize(self, path: str) -> None:
        """Create a fresh backing file holding an empty dataset.

        Args:
            path: Backing file path
        """
        pass

    @abstractmethod
    def _read(self, path: str) -> Any:
        """Decode the backing file into a document.

        May raise anything; load() turns every failure into an empty
        dataset.
        """
        pass

    @abstractmethod
    def _write(self, path: str, document: Dict[str, Any]) -> None:
        """Encode the dataset and overwrite the backing file.

        Raises:
            SerializationError: If the dataset can't be encoded
        """
        pass

    def load(self, path: str) -> Dict[str, Any]:
        """Read the dataset from the backing file.

        Never raises. A missing file, a decode failure or a malformed
        document all yield an empty dataset, which the next save() writes
        over the original file.

        Args:
            path: Backing file path

        Returns:
            Decoded dataset, or {} on any failure
        """
        try:
            document = self._read(path)
        except Exception as e:
            logger.warning(
                "Could not load %s with %s driver, starting empty: %s",
                path,
                self.name,
                e,
            )
            return {}

        if not isinstance(document, dict):
            logger.warning(
                "Backing file %s does not hold a map of tables, starting empty",
                path,
            )
            return {}
        return document

    def save(self, path: str, document: Dict[str, Any]) -> None:
        """Serialize the whole dataset and overwrite the backing file.

        Args:
            path: Backing file path
            document: Dataset in canonical form
        """
        self._write(path, document)
        logger.debug("Flushed %d table(s) to %s", len(document), path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def write_atomic(path: str, data: bytes) -> None:
    """Replace the file at path with data.

    The bytes go to a temporary file in the same directory which is then
    renamed over the target, so readers never see a half-written file.
    """
    directory = os.path.dirname(os.path.abspath(path))
    with tempfile.NamedTemporaryFile(dir=directory, delete=False) as tmp_file:
        tmp_file.write(data)
        tmp_path = tmp_file.name

    try:
        os.replace(tmp_path, path)
    except OSError:
        os.unlink(tmp_path)
        raise
