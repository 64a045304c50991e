"""imagechat — FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the REST API routes, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
- **Configuration** comes from :data:`imagechat.core.config.config`
  (environment variables and ``.env``).
- **Image generation** is delegated to
  :class:`~imagechat.core.image_service.ImageGenerationService`, which never
  raises for upstream problems; it returns a placeholder URL and a ``note``
  instead.
- **Chat** requests are relayed to the local Ollama endpoint by
  :class:`~imagechat.core.chat.OllamaChatClient`.
- Service objects are created in the ``lifespan`` hook, stored on
  ``app.state``, and injected into routes via FastAPI dependencies so tests
  can swap them with ``app.dependency_overrides``.

Endpoints
---------
========  ===========================  =====================================
Method    Path                         Purpose
========  ===========================  =====================================
POST      ``/api/generate-image``      Generate images, or a placeholder
POST      ``/api/chat``                Relay a prompt to the local model
GET       ``/api/config``              Version and model information
========  ===========================  =====================================

Usage
-----
CLI (installed entry point)::

    imagechat

Direct invocation::

    python -m imagechat.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from imagechat import __version__
from imagechat.api.models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    ImageRequest,
    ImageResponse,
)
from imagechat.core.chat import OllamaChatClient
from imagechat.core.config import config
from imagechat.core.errors import ChatBackendError, InvalidRequest
from imagechat.core.image_service import ImageGenerationService

logger = logging.getLogger(__name__)

CHAT_UNAVAILABLE_MESSAGE = "Could not connect to local Ollama."

# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared service objects on startup and release them on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    # --- Startup -----------------------------------------------------------
    app.state.image_service = ImageGenerationService(config)
    app.state.chat_client = OllamaChatClient(config)
    if config.provider_api_key() is None:
        logger.warning("No image provider API key configured; image requests will use placeholders.")
    logger.info(f"Image output directory: {config.output_dir.resolve()}")

    yield  # Application runs here.

    # --- Shutdown ----------------------------------------------------------
    app.state.chat_client.close()


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="imagechat",
    description="Local chat relay and Imagen image-generation backend.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Dependencies.
# ---------------------------------------------------------------------------


def get_image_service(request: Request) -> ImageGenerationService:
    """Return the shared :class:`ImageGenerationService`."""
    return request.app.state.image_service


def get_chat_client(request: Request) -> OllamaChatClient:
    """Return the shared :class:`OllamaChatClient`."""
    return request.app.state.chat_client


# ---------------------------------------------------------------------------
# Error handlers.
# ---------------------------------------------------------------------------


@app.exception_handler(InvalidRequest)
async def invalid_request_handler(request: Request, exc: InvalidRequest) -> JSONResponse:
    """Answer missing prompts with ``400 {"error": ...}``."""
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(ChatBackendError)
async def chat_backend_error_handler(request: Request, exc: ChatBackendError) -> JSONResponse:
    """Log chat relay failures and answer with a fixed ``502`` message."""
    logger.error(f"Chat relay failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=502, content={"error": CHAT_UNAVAILABLE_MESSAGE})


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.post(
    "/api/generate-image",
    response_model=ImageResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
def generate_image(
    req: ImageRequest | None = None,
    service: ImageGenerationService = Depends(get_image_service),
) -> ImageResponse:
    """Generate images for a prompt and return a displayable URL.

    Always answers 200 once the prompt is present: provider problems
    produce a placeholder URL plus a ``note`` describing the fallback.

    Args:
        req: Validated :class:`ImageRequest` payload (``None`` when the body
            is absent).
        service: Injected image generation service.

    Returns:
        :class:`ImageResponse` with ``imageUrl`` and, on fallback, ``note``.

    Raises:
        InvalidRequest: If the prompt is missing or empty (mapped to 400).
    """
    result = service.generate(req.prompt if req else None)
    return ImageResponse(image_url=result.image_url, note=result.note)


@app.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def chat(
    req: ChatRequest | None = None,
    client: OllamaChatClient = Depends(get_chat_client),
) -> ChatResponse:
    """Relay a prompt to the local model and return its HTML reply.

    Raises:
        InvalidRequest: If the prompt is missing or empty (mapped to 400).
        ChatBackendError: If the local model fails (mapped to 502).
    """
    prompt = req.prompt if req else None
    if not prompt:
        raise InvalidRequest()
    return ChatResponse(html=client.ask(prompt))


@app.get("/api/config")
async def get_config() -> dict:
    """Return version and model information for the frontend.

    The API key itself is never included, only whether one is configured.
    """
    return {
        "version": __version__,
        "image_model": config.image_model,
        "number_of_images": config.number_of_images,
        "chat_model": config.chat_model,
        "image_generation_enabled": config.provider_api_key() is not None,
    }


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Configure logging and launch the uvicorn ASGI server.

    Reads host and port from :data:`~imagechat.core.config.config`
    (``IMAGECHAT_SERVER_HOST`` and ``PORT`` / ``IMAGECHAT_SERVER_PORT``).
    Defaults to ``0.0.0.0:3000``.

    This function is registered as the ``imagechat`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Backend server starting on http://{config.server_host}:{config.server_port}")

    uvicorn.run(
        "imagechat.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
