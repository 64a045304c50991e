"""Configuration management for imagechat.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the IMAGECHAT_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (IMAGECHAT_* prefix)
2. .env file in the working directory
3. Default values defined in ImageChatConfig

Two settings also accept the unprefixed names used by existing deployments
of the backend:

- ``GENERATIVE_API_KEY`` for :attr:`ImageChatConfig.api_key`
- ``PORT`` for :attr:`ImageChatConfig.server_port`

Example .env file:
    GENERATIVE_API_KEY=your-google-genai-key
    PORT=3000
    IMAGECHAT_OUTPUT_DIR=generated
    IMAGECHAT_CHAT_MODEL=gemma3:4b

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.

Usage Example
-------------
    from imagechat.core.config import config

    print(config.image_model)
    print(config.output_dir)

Secret Handling
---------------
The provider key is stored as a :class:`pydantic.SecretStr` so it is masked
in ``repr()`` output and log lines.  Call :meth:`ImageChatConfig.provider_api_key`
to obtain the raw value when building the provider client.
"""

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImageChatConfig(BaseSettings):
    """Main configuration for the imagechat backend.

    Attributes
    ----------
    Image Generation:
        api_key : SecretStr | None
            Google GenAI API key.  When unset, image requests degrade to a
            placeholder URL.
        image_model : str
            Imagen model identifier passed to the provider.
        number_of_images : int
            Number of image variants requested per prompt.
        output_dir : Path
            Directory that receives ``imagen-<n>.png`` files.
        placeholder_url : str
            Base URL of the placeholder image service used for fallbacks.

    Chat Relay:
        chat_endpoint : str
            URL of the local text-generation endpoint (Ollama ``/api/generate``).
        chat_model : str
            Model name sent with every chat request.
        chat_temperature : float
            Sampling temperature passed in ``options``.
        chat_num_ctx : int
            Context window size passed in ``options``.
        chat_timeout : float | None
            Seconds to wait for the chat endpoint; ``None`` waits forever.

    Server:
        server_host : str
            Bind address for uvicorn.
        server_port : int
            Listening port (1-65535).
        cors_allow_origins : list[str]
            Origins allowed by the CORS middleware.
        log_level : str
            Root logging level applied by the CLI entry point.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMAGECHAT_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Image generation settings
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("IMAGECHAT_API_KEY", "GENERATIVE_API_KEY"),
        description="Google GenAI API key (unset = placeholder fallback)",
    )
    image_model: str = Field(
        default="imagen-4.0-generate-001",
        description="Imagen model identifier",
    )
    number_of_images: int = Field(
        default=4,
        description="Image variants requested per prompt",
        ge=1,
        le=8,
    )
    output_dir: Path = Field(
        default=Path("."),
        description="Directory that receives imagen-<n>.png files",
    )
    placeholder_url: str = Field(
        default="https://placehold.co/800x500",
        description="Placeholder image service used for fallbacks",
    )

    # Chat relay settings
    chat_endpoint: str = Field(
        default="http://localhost:11434/api/generate",
        description="Local text-generation endpoint",
    )
    chat_model: str = Field(default="gemma3:4b")
    chat_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    chat_num_ctx: int = Field(default=4096, ge=1)
    chat_timeout: float | None = Field(
        default=None,
        description="Seconds to wait for the chat endpoint (None = no timeout)",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("IMAGECHAT_SERVER_PORT", "PORT"),
        description="Server port",
        ge=1,
        le=65535,
    )
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    def __init__(self, **kwargs):
        """Initialize configuration and create the image output directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.output_dir.mkdir(parents=True, exist_ok=True)

    def provider_api_key(self) -> str | None:
        """Return the raw provider key, or ``None`` when unset or blank."""
        if self.api_key is None:
            return None
        value = self.api_key.get_secret_value().strip()
        return value or None


# Global configuration instance
# Loads values from environment variables (IMAGECHAT_* prefix) and .env file.
config = ImageChatConfig()
