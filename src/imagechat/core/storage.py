"""Persistence of generated images as ``imagen-<n>.png`` files.

Files are numbered with a sequence that is local to a single call: it starts
at 1 and only advances after a successful write, so the written names never
contain gaps.  Nothing coordinates concurrent callers; two simultaneous
requests writing to the same directory overwrite each other's files.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

FILENAME_TEMPLATE = "imagen-{index}.png"


def image_filename(index: int) -> str:
    """Return the file name for the *index*-th written image (1-based)."""
    return FILENAME_TEMPLATE.format(index=index)


def decode_image(b64_data: str) -> bytes:
    """Decode base64 image text strictly.

    Raises:
        binascii.Error: If *b64_data* is not valid base64.
    """
    return base64.b64decode(b64_data, validate=True)


def write_images(b64_images: Iterable[str], output_dir: Path) -> list[Path]:
    """Decode and write each base64 image to ``output_dir``.

    Args:
        b64_images: Base64 strings in provider order.  Callers filter out
            entries without data beforehand.
        output_dir: Target directory.

    Returns:
        Paths of the written files, in order.

    Raises:
        binascii.Error: If any entry fails to decode.
        OSError: If a file cannot be written.
    """
    written: list[Path] = []
    sequence = 1

    for b64_data in b64_images:
        try:
            payload = decode_image(b64_data)
        except binascii.Error:
            logger.error(f"Could not decode image #{sequence} as base64")
            raise

        filepath = output_dir / image_filename(sequence)
        filepath.write_bytes(payload)
        logger.info(f"Wrote {filepath}")

        written.append(filepath)
        sequence += 1

    return written
