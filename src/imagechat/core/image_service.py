"""Image generation flow with placeholder fallback.

:class:`ImageGenerationService` turns a prompt into a displayable image URL:

1. Validate the prompt (the only failure surfaced to callers).
2. Read the provider API key from configuration.
3. Ask the provider for ``number_of_images`` variants.
4. Locate the generated entries (:func:`~imagechat.core.extraction.find_generated_images`).
5. Extract base64 data from each entry, skipping entries without any.
6. Write the usable images as ``imagen-1.png``, ``imagen-2.png``, ...
7. Return a ``data:image/png;base64,...`` URL built from the first usable entry.

Every failure after validation degrades to a placeholder URL carrying the
prompt plus a short ``note``.  Error details are logged and never included
in the result.

Fallback notes
--------------
==================================================  ================================
Note                                                Cause
==================================================  ================================
``fallback - no API key``                           No key configured
``fallback - no images returned``                   Empty list / no usable entries
``fallback due to upstream error (check backend     Provider call, decode, or write
logs)``                                             raised
==================================================  ================================
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote

from imagechat.core.config import ImageChatConfig
from imagechat.core.errors import (
    ConfigurationMissing,
    InvalidRequest,
    UpstreamEmptyResult,
    UpstreamFailure,
)
from imagechat.core.extraction import extract_image_b64, find_generated_images
from imagechat.core.provider import GenAIImageProvider, ImageProvider
from imagechat.core.storage import write_images

logger = logging.getLogger(__name__)

NOTE_NO_API_KEY = "fallback - no API key"
NOTE_NO_IMAGES = "fallback - no images returned"
NOTE_UPSTREAM_ERROR = "fallback due to upstream error (check backend logs)"

# Characters JavaScript's encodeURIComponent leaves unescaped in addition to
# the ones urllib.parse.quote always keeps.
_URI_COMPONENT_SAFE = "!~*'()"


def placeholder_url(prompt: str, base_url: str = "https://placehold.co/800x500") -> str:
    """Build the placeholder image URL for *prompt*.

    Example:
        >>> placeholder_url("a red fox")
        'https://placehold.co/800x500?text=a%20red%20fox'
    """
    return f"{base_url}?text={quote(prompt, safe=_URI_COMPONENT_SAFE)}"


def data_url(b64_data: str) -> str:
    """Wrap base64 PNG data in a ``data:`` URL without re-encoding it."""
    return f"data:image/png;base64,{b64_data}"


@dataclass
class ImageResult:
    """Outcome of one generation request.

    Attributes:
        image_url: Data URL on success, placeholder URL on fallback.
        note: Fallback reason, or ``None`` on success.
        files: Paths written during this request.
    """

    image_url: str
    note: str | None = None
    files: list[Path] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.note is not None


class ImageGenerationService:
    """Generate images for prompts, degrading to placeholders on failure.

    The service holds no per-request state, so one instance is shared by all
    requests.  A provider is built per request from the configured key.
    """

    def __init__(
        self,
        config: ImageChatConfig,
        provider_factory: Callable[[str], ImageProvider] = GenAIImageProvider,
    ) -> None:
        """Initialise the service.

        Args:
            config: Application configuration.
            provider_factory: Callable taking an API key and returning an
                :class:`~imagechat.core.provider.ImageProvider`.
        """
        self._config = config
        self._provider_factory = provider_factory

    # -- Public interface ---------------------------------------------------

    def generate(self, prompt: str | None) -> ImageResult:
        """Generate images for *prompt*.

        Args:
            prompt: User prompt.

        Returns:
            :class:`ImageResult` with a data URL, or a placeholder URL and note.

        Raises:
            InvalidRequest: If the prompt is missing or empty.
        """
        if not prompt:
            raise InvalidRequest()

        try:
            return self._generate(prompt)
        except ConfigurationMissing as e:
            logger.warning(f"{e}; returning placeholder image")
            return self.fallback(prompt, NOTE_NO_API_KEY)
        except UpstreamEmptyResult as e:
            logger.error(f"{e}: {e.response!r}")
            return self.fallback(prompt, NOTE_NO_IMAGES)
        except Exception as e:
            logger.error(f"generate-image failed: {e}", exc_info=True)
            return self.fallback(prompt, NOTE_UPSTREAM_ERROR)

    def fallback(self, prompt: str, note: str) -> ImageResult:
        """Build a placeholder result for *prompt* with the given *note*."""
        return ImageResult(
            image_url=placeholder_url(prompt, self._config.placeholder_url),
            note=note,
        )

    # -- Internals ----------------------------------------------------------

    def _generate(self, prompt: str) -> ImageResult:
        api_key = self._config.provider_api_key()
        if not api_key:
            raise ConfigurationMissing(
                "No image provider API key configured (set GENERATIVE_API_KEY)"
            )

        provider = self._provider_factory(api_key)
        try:
            response = provider.generate_images(
                prompt,
                model=self._config.image_model,
                number_of_images=self._config.number_of_images,
            )
        except Exception as e:
            raise UpstreamFailure(f"Provider call failed: {e}") from e

        entries = find_generated_images(response)
        if not entries:
            raise UpstreamEmptyResult("No images returned", response=response)

        usable: list[str] = []
        for position, entry in enumerate(entries):
            b64_data = extract_image_b64(entry)
            if not b64_data:
                logger.warning(f"Skipping entry {position} without image bytes: {entry!r}")
                continue
            usable.append(b64_data)

        if not usable:
            raise UpstreamEmptyResult("No entries contained image bytes", response=response)

        try:
            files = write_images(usable, self._config.output_dir)
        except Exception as e:
            raise UpstreamFailure(f"Could not persist generated images: {e}") from e

        return ImageResult(image_url=data_url(usable[0]), files=files)
