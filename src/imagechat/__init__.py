"""imagechat - local chat relay and Imagen image-generation backend."""

__version__ = "0.1.0"

from imagechat.core.config import ImageChatConfig, config

__all__ = [
    "ImageChatConfig",
    "config",
]
