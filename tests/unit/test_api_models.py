"""Tests for imagechat.api.models — Pydantic request/response models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from imagechat.api.models import ChatRequest, ChatResponse, ErrorResponse, ImageRequest, ImageResponse


class TestImageRequest:
    def test_prompt_is_optional_at_schema_level(self):
        """Missing prompts are rejected by the route, not by validation."""
        assert ImageRequest().prompt is None

    def test_prompt_value(self):
        assert ImageRequest(prompt="a red fox").prompt == "a red fox"

    def test_non_string_prompt_rejected(self):
        with pytest.raises(ValidationError):
            ImageRequest(prompt=123)


class TestImageResponse:
    def test_serialises_with_camel_case_alias(self):
        resp = ImageResponse(image_url="data:image/png;base64,AAAA")
        assert resp.model_dump(by_alias=True, exclude_none=True) == {
            "imageUrl": "data:image/png;base64,AAAA"
        }

    def test_note_included_when_set(self):
        resp = ImageResponse(imageUrl="https://placehold.co/800x500?text=x", note="fallback - no API key")
        assert resp.model_dump(by_alias=True, exclude_none=True) == {
            "imageUrl": "https://placehold.co/800x500?text=x",
            "note": "fallback - no API key",
        }

    def test_image_url_required(self):
        with pytest.raises(ValidationError):
            ImageResponse()


class TestChatModels:
    def test_chat_request_default(self):
        assert ChatRequest().prompt is None

    def test_chat_response(self):
        assert ChatResponse(html="<p>x</p>").html == "<p>x</p>"

    def test_error_response(self):
        assert ErrorResponse(error="Prompt is required").model_dump() == {"error": "Prompt is required"}
