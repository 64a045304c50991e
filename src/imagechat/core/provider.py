"""Google GenAI (Imagen) provider adapter.

:class:`GenAIImageProvider` is a thin wrapper around ``google.genai.Client``
that requests a batch of images and hands the response back as a plain
dictionary in the provider's camelCase wire shape, e.g.::

    {
        "generatedImages": [
            {"image": {"imageBytes": <raw PNG bytes>, "mimeType": "image/png"}},
            ...
        ]
    }

Dumping to a dictionary keeps :mod:`imagechat.core.extraction` independent of
the SDK's object model.  The dump stays in python mode so ``imageBytes`` holds
the raw ``bytes``; JSON mode would emit URL-safe base64, which neither
:func:`base64.b64decode` nor browsers accept.  The extraction chain re-encodes
raw bytes with the standard alphabet.

``google.genai`` is imported lazily inside the constructor so importing this
module stays cheap and tests can substitute a fake provider without the SDK
being touched.

No timeout and no retries are configured: a single attempt is made and any
exception propagates to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class ImageProvider(Protocol):
    """Anything that can turn a prompt into a provider response mapping."""

    def generate_images(self, prompt: str, *, model: str, number_of_images: int) -> Any:
        ...


class GenAIImageProvider:
    """Image provider backed by the ``google-genai`` SDK.

    Attributes:
        _client: The ``google.genai.Client`` instance.
    """

    def __init__(self, api_key: str) -> None:
        """Create the SDK client.

        Args:
            api_key: Google GenAI API key.
        """
        from google import genai

        self._client = genai.Client(api_key=api_key)

    def generate_images(self, prompt: str, *, model: str, number_of_images: int) -> Any:
        """Request ``number_of_images`` variants of *prompt* from *model*.

        Args:
            prompt: Text prompt.
            model: Imagen model identifier (e.g. ``"imagen-4.0-generate-001"``).
            number_of_images: How many variants to request.

        Returns:
            The response as a dictionary using camelCase field names, with
            image data left as raw ``bytes``.
        """
        from google.genai import types

        logger.info(f"Requesting {number_of_images} image(s) from {model}")
        response = self._client.models.generate_images(
            model=model,
            prompt=prompt,
            config=types.GenerateImagesConfig(number_of_images=number_of_images),
        )
        return to_mapping(response)


def to_mapping(response: Any) -> Any:
    """Convert an SDK response model to a dictionary with camelCase keys.

    Mappings and objects without ``model_dump`` are returned unchanged.
    """
    if isinstance(response, Mapping):
        return response
    dump = getattr(response, "model_dump", None)
    if dump is None:
        return response
    return dump(by_alias=True, exclude_none=True)
