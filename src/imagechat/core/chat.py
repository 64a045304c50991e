"""Relay for the local Ollama text-generation endpoint.

The chat front end asks a locally running model for short answers formatted
as HTML.  This module holds the server-side half of that contract:

- :func:`build_chat_prompt` wraps the user's text in a fixed instruction.
- :func:`build_chat_payload` assembles the non-streaming request body.
- :func:`strip_code_fences` removes the markdown fences models like to wrap
  HTML in, so the text can be rendered verbatim.
- :class:`OllamaChatClient` performs the HTTP round trip.

Request body::

    {
        "model": "gemma3:4b",
        "prompt": "You are a helpful AI assistant. ...",
        "stream": false,
        "options": {"temperature": 0.7, "num_ctx": 4096}
    }

Response body::

    {"response": "<h2>...</h2><p>...</p>", ...}
"""

from __future__ import annotations

import logging

import requests

from imagechat.core.config import ImageChatConfig
from imagechat.core.errors import ChatBackendError

logger = logging.getLogger(__name__)

_INSTRUCTION = (
    "You are a helpful AI assistant. Answer the following request concisely and "
    "use HTML formatting (<h2> for headers, <p> for paragraphs, <ul> for lists). "
    'Request: "{topic}"'
)


def build_chat_prompt(topic: str) -> str:
    """Wrap *topic* in the HTML-formatting instruction."""
    return _INSTRUCTION.format(topic=topic)


def build_chat_payload(
    prompt: str,
    *,
    model: str = "gemma3:4b",
    temperature: float = 0.7,
    num_ctx: int = 4096,
) -> dict:
    """Build a non-streaming ``/api/generate`` request body."""
    return {
        "model": model,
        "prompt": prompt,
        "stream": False,
        "options": {"temperature": temperature, "num_ctx": num_ctx},
    }


def strip_code_fences(text: str) -> str:
    """Remove every ```` ```html ```` and ```` ``` ```` marker from *text*.

    Only the markers are removed; surrounding whitespace and the HTML itself
    are left untouched.
    """
    return text.replace("```html", "").replace("```", "")


class OllamaChatClient:
    """Blocking client for an Ollama-compatible ``/api/generate`` endpoint."""

    def __init__(self, config: ImageChatConfig, session: requests.Session | None = None) -> None:
        self._config = config
        self._session = session or requests.Session()

    @property
    def model(self) -> str:
        return self._config.chat_model

    def ask(self, topic: str) -> str:
        """Send *topic* to the local model and return cleaned HTML.

        Args:
            topic: The user's request text.

        Returns:
            The model's reply with code-fence markers stripped.

        Raises:
            ChatBackendError: If the endpoint is unreachable, answers with a
                non-200 status, or the body has no string ``response`` field.
        """
        payload = build_chat_payload(
            build_chat_prompt(topic),
            model=self._config.chat_model,
            temperature=self._config.chat_temperature,
            num_ctx=self._config.chat_num_ctx,
        )

        try:
            response = self._session.post(
                self._config.chat_endpoint,
                json=payload,
                timeout=self._config.chat_timeout,
            )
        except requests.RequestException as e:
            raise ChatBackendError(f"Chat endpoint unreachable: {e}") from e

        if response.status_code != 200:
            raise ChatBackendError(
                f"Chat request failed with status {response.status_code}: {response.text}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ChatBackendError("Chat endpoint returned invalid JSON") from e

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise ChatBackendError("Chat endpoint response has no 'response' text")

        return strip_code_fences(text)

    def close(self) -> None:
        self._session.close()
