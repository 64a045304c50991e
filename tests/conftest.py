"""Shared pytest fixtures for imagechat tests."""

import base64
import shutil
import tempfile
from pathlib import Path
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from imagechat.api.main import app, get_chat_client, get_image_service
from imagechat.core.chat import OllamaChatClient
from imagechat.core.config import ImageChatConfig
from imagechat.core.image_service import ImageGenerationService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR-test-image"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")

OTHER_PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"second-image"
OTHER_PNG_B64 = base64.b64encode(OTHER_PNG_BYTES).decode("ascii")


class FakeProvider:
    """Stand-in for GenAIImageProvider that never touches the network.

    Attributes:
        api_key: Key the provider was built with.
        calls: ``(prompt, model, number_of_images)`` for every request.
    """

    def __init__(self, api_key: str, response: Any = None, error: Exception | None = None):
        self.api_key = api_key
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str, int]] = []

    def generate_images(self, prompt: str, *, model: str, number_of_images: int) -> Any:
        self.calls.append((prompt, model, number_of_images))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    """Directory that receives generated images during a test."""
    return temp_dir / "generated"


@pytest.fixture
def clean_provider_env(monkeypatch):
    """Unset provider key and port variables so fixtures are deterministic."""
    for name in ("GENERATIVE_API_KEY", "IMAGECHAT_API_KEY", "PORT", "IMAGECHAT_SERVER_PORT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def test_config(output_dir: Path, clean_provider_env) -> ImageChatConfig:
    """Create a test configuration with an API key and a temporary output dir.

    Returns:
        ImageChatConfig instance for testing
    """
    return ImageChatConfig(
        _env_file=None,
        api_key="test-secret-key",
        output_dir=str(output_dir),
        chat_endpoint="http://ollama.test/api/generate",
    )


@pytest.fixture
def no_key_config(output_dir: Path, clean_provider_env) -> ImageChatConfig:
    """Configuration without a provider API key."""
    return ImageChatConfig(_env_file=None, api_key="", output_dir=str(output_dir))


@pytest.fixture
def make_service(test_config: ImageChatConfig):
    """Factory building an ImageGenerationService around a FakeProvider.

    Usage::

        service, providers = make_service(response={...})
        service.generate("a red fox")
        providers[0].calls

    Returns:
        Callable accepting ``response``/``error``/``config`` and returning
        ``(service, providers)`` where ``providers`` collects every provider
        the service built.
    """

    def _make(response: Any = None, error: Exception | None = None, config=None):
        providers: list[FakeProvider] = []

        def factory(api_key: str) -> FakeProvider:
            provider = FakeProvider(api_key, response=response, error=error)
            providers.append(provider)
            return provider

        return ImageGenerationService(config or test_config, provider_factory=factory), providers

    return _make


@pytest.fixture
def sample_response() -> dict:
    """Provider response with two usable entries in the SDK's camelCase shape."""
    return {
        "generatedImages": [
            {"image": {"imageBytes": PNG_B64, "mimeType": "image/png"}},
            {"image": {"imageBytes": OTHER_PNG_B64, "mimeType": "image/png"}},
        ]
    }


@pytest.fixture
def mock_chat_session() -> MagicMock:
    """A requests.Session mock answering with a fenced HTML reply."""
    session = MagicMock()
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {"response": "```html\n<h2>Foxes</h2><p>Red.</p>\n```"}
    session.post.return_value = response
    return session


@pytest.fixture
def test_client(make_service, sample_response, test_config, mock_chat_session):
    """FastAPI TestClient with the image service and chat client swapped for fakes.

    The fake image service is reachable as ``test_client.providers`` so tests
    can inspect the requests it received.  Set ``app.dependency_overrides``
    again inside a test to use a different service.
    """
    service, providers = make_service(response=sample_response)
    chat_client = OllamaChatClient(test_config, session=mock_chat_session)

    app.dependency_overrides[get_image_service] = lambda: service
    app.dependency_overrides[get_chat_client] = lambda: chat_client

    client = TestClient(app)
    client.providers = providers
    client.chat_session = mock_chat_session
    try:
        yield client
    finally:
        app.dependency_overrides.clear()
