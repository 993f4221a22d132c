"""Conceal/reveal codec for hiding text in the pixels of a carrier image.

Thin wrapper over stegano's least-significant-bit encoder. Carriers go in
and come out as raw image bytes; the output is always PNG since any lossy
re-encoding would destroy the hidden bits.
"""

import io

from PIL import Image
from stegano import lsb


def conceal(carrier: bytes, payload: str) -> bytes:
    """Hide payload in carrier and return the new PNG bytes.

    Args:
        carrier: Bytes of the carrier image (any format Pillow can open)
        payload: Text to embed

    Returns:
        PNG bytes of the carrier with payload embedded

    Raises:
        Exception: Whatever stegano raises, e.g. when the payload exceeds
            the carrier's capacity
    """
    image = lsb.hide(io.BytesIO(carrier), payload, auto_convert_rgb=True)
    output = io.BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


def reveal(carrier: bytes) -> str:
    """Extract the text hidden in carrier.

    Raises:
        Exception: Whatever stegano raises when no payload can be found
    """
    message = lsb.reveal(io.BytesIO(carrier))
    if message is None:
        raise ValueError("No hidden payload in carrier image")
    return message


def is_image(data: bytes) -> bool:
    """Whether data can be opened as an image and so serve as a carrier."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
    except Exception:
        return False
    return True
