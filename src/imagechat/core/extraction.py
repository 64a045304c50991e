"""Response-shape tolerant lookups for image-generation provider responses.

Different versions of the provider SDKs place the same data under different
field names.  Rather than branching on SDK versions, each piece of data is
described by an ordered tuple of lookup paths.

The generated list stops at the first field that is present, even when it
holds an empty list.  Byte locations skip empty values and keep searching.

Generated image list::

    generatedImages -> generated_images -> generated

Base64 bytes within one entry::

    image.imageBytes -> image.b64_json -> b64_json -> base64

Lookups work on plain mappings (the usual case, since the provider adapter
dumps SDK responses to dicts) and fall back to attribute access so that SDK
objects can be inspected directly.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping, Sequence
from typing import Any

GENERATED_LIST_PATHS: tuple[tuple[str, ...], ...] = (
    ("generatedImages",),
    ("generated_images",),
    ("generated",),
)

IMAGE_BYTES_PATHS: tuple[tuple[str, ...], ...] = (
    ("image", "imageBytes"),
    ("image", "b64_json"),
    ("b64_json",),
    ("base64",),
)


def _get(obj: Any, key: str) -> Any:
    """Return ``obj[key]`` for mappings or ``obj.key`` otherwise, else ``None``."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def lookup_path(obj: Any, path: Sequence[str]) -> Any:
    """Follow *path* through nested mappings/attributes.

    Args:
        obj: Root object.
        path: Keys to follow in order.

    Returns:
        The value at the end of the path, or ``None`` if any step is missing.
    """
    current = obj
    for key in path:
        current = _get(current, key)
        if current is None:
            return None
    return current


def first_match(obj: Any, paths: Sequence[Sequence[str]], *, allow_empty: bool = False) -> Any:
    """Return the value of the first path in *paths* that yields a usable value.

    By default a value must be truthy.  With ``allow_empty`` any value other
    than ``None`` ends the search.
    """
    for path in paths:
        value = lookup_path(obj, path)
        if value is None:
            continue
        if allow_empty or value:
            return value
    return None


def find_generated_images(response: Any) -> list:
    """Locate the list of generated image entries in a provider response.

    Returns:
        The entries under the first present field name, or an empty list
        when no field is present or the first one is empty or not a list.
    """
    entries = first_match(response, GENERATED_LIST_PATHS, allow_empty=True)
    if not entries or isinstance(entries, (str, bytes, Mapping)):
        return []
    return list(entries)


def extract_image_b64(entry: Any) -> str | None:
    """Extract base64 image data from a single generated entry.

    Raw ``bytes`` found at a lookup path (SDK objects hold decoded bytes) are
    re-encoded so callers always receive base64 text.

    Returns:
        Base64 string, or ``None`` when no known location holds data.
    """
    value = first_match(entry, IMAGE_BYTES_PATHS)
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, str):
        return value
    return None
