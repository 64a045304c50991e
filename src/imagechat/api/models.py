"""Pydantic request and response models for the imagechat API.

Models
------
ImageRequest
    Payload for ``POST /api/generate-image``.
ImageResponse
    Body returned by ``POST /api/generate-image`` (``imageUrl`` plus an
    optional fallback ``note``).
ChatRequest
    Payload for ``POST /api/chat``.
ChatResponse
    Body returned by ``POST /api/chat``.
ErrorResponse
    Body of every 4xx/5xx response.

Prompts are declared optional so that a missing prompt reaches the route
handler and is answered with the ``{"error": "Prompt is required"}`` body
instead of FastAPI's generic 422 validation payload.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ImageRequest(BaseModel):
    """Request body for ``POST /api/generate-image``.

    Attributes:
        prompt: Text describing the image to generate.
    """

    prompt: str | None = Field(
        default=None,
        description="Text prompt for the image (required, non-empty).",
    )


class ImageResponse(BaseModel):
    """Response body for ``POST /api/generate-image``.

    Attributes:
        image_url: ``data:image/png;base64,...`` on success, placeholder URL
            on fallback.  Serialised as ``imageUrl``.
        note: Fallback reason.  Omitted from the JSON on success.
    """

    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(
        ...,
        alias="imageUrl",
        description="Displayable image URL (data URL or placeholder).",
    )
    note: str | None = Field(
        default=None,
        description="Why a placeholder was returned, if it was.",
    )


class ChatRequest(BaseModel):
    """Request body for ``POST /api/chat``."""

    prompt: str | None = Field(
        default=None,
        description="The user's request text (required, non-empty).",
    )


class ChatResponse(BaseModel):
    """Response body for ``POST /api/chat``."""

    html: str = Field(..., description="Model reply with code fences stripped.")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
