"""Steganographic driver: the dataset lives inside a carrier PNG."""

import json
import logging
import os
import shutil
from typing import Any, Dict, Optional

from .. import codec
from ..exceptions import SerializationError
from .base import StorageDriver, write_atomic
from .jsonfile import encode_json

logger = logging.getLogger(__name__)

DEFAULT_CARRIER = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "picture",
    "default.png",
)


class SteganographicDriver(StorageDriver):
    """Hides the dataset's JSON encoding in the pixels of an image.

    The backing file stays a valid, viewable PNG. Every save re-reads the
    image currently on disk and embeds the fresh payload into it, so the
    carrier's pixels are reused and only their low bits change.

    Example:
        driver = SteganographicDriver()
        driver.initialize("photo.png")          # copies the bundled carrier
        driver.save("photo.png", {"json": []})
        driver.load("photo.png")                # {"json": []}

    This hides data, it does not encrypt it: anyone who knows to look can
    extract the payload.
    """

    name = "steganographic"
    suffix = ".png"

    def __init__(self, carrier: Optional[str] = None):
        """Create the driver.

        Args:
            carrier: Image copied as the seed of new backing files;
                defaults to the bundled picture/default.png
        """
        self.carrier = carrier or DEFAULT_CARRIER

    def initialize(self, path: str) -> None:
        """Seed the backing file with a copy of the carrier image."""
        shutil.copyfile(self.carrier, path)
        logger.info("Created steganographic database at %s from %s", path, self.carrier)

    def _read(self, path: str) -> Any:
        with open(path, "rb") as f:
            image = f.read()
        return json.loads(codec.reveal(image))

    def _write(self, path: str, document: Dict[str, Any]) -> None:
        # Payload must be ASCII: the codec counts characters, not bytes
        payload = encode_json(document, ensure_ascii=True)
        carrier = b""
        if os.path.exists(path):
            with open(path, "rb") as f:
                carrier = f.read()

        if not codec.is_image(carrier):
            logger.warning(
                "%s is not a readable image, re-seeding it from %s", path, self.carrier
            )
            with open(self.carrier, "rb") as f:
                carrier = f.read()

        try:
            concealed = codec.conceal(carrier, payload)
        except Exception as e:
            raise SerializationError(
                f"Failed to embed {len(payload.encode('utf-8'))} bytes in {path}: {e}"
            )
        write_atomic(path, concealed)

    def __repr__(self) -> str:
        return f"SteganographicDriver(carrier={self.carrier!r})"
