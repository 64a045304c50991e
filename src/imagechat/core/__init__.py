"""Core functionality for the imagechat backend.

This package holds everything that is independent of the HTTP layer:

1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - Settings prefixed with IMAGECHAT_ (plus ``GENERATIVE_API_KEY`` and
     ``PORT`` for compatibility with existing deployments)

2. **Image Generation Layer**:
   - provider.py: Google GenAI (Imagen) client wrapper
   - extraction.py: Response-shape tolerant lookups for generated images
   - storage.py: ``imagen-<n>.png`` persistence
   - image_service.py: The generate/persist/fallback flow

3. **Chat Layer** (chat.py):
   - Prompt wrapping, payload construction, and code-fence cleanup for the
     local Ollama text-generation endpoint

4. **Errors** (errors.py):
   - Exception taxonomy shared by both layers

Usage Example
-------------
::

    from imagechat.core import ImageGenerationService, config

    service = ImageGenerationService(config)
    result = service.generate("a red fox")
    print(result.image_url, result.note)
"""

from imagechat.core.chat import OllamaChatClient
from imagechat.core.config import ImageChatConfig, config
from imagechat.core.image_service import ImageGenerationService, ImageResult

__all__ = [
    "ImageChatConfig",
    "ImageGenerationService",
    "ImageResult",
    "OllamaChatClient",
    "config",
]
