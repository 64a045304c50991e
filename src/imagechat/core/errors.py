"""Exception taxonomy for the imagechat backend.

Only :class:`InvalidRequest` and :class:`ChatBackendError` ever reach an HTTP
client as error statuses.  The image-generation kinds are raised inside
:class:`~imagechat.core.image_service.ImageGenerationService` and converted
to placeholder responses there.
"""


class ImageChatError(Exception):
    """Base class for all imagechat errors."""

    pass


class InvalidRequest(ImageChatError):
    """The request is missing its prompt.

    The message is returned to the client verbatim.
    """

    def __init__(self, message: str = "Prompt is required") -> None:
        super().__init__(message)


class ConfigurationMissing(ImageChatError):
    """No provider API key is configured."""

    pass


class UpstreamEmptyResult(ImageChatError):
    """The provider answered but returned no usable images."""

    def __init__(self, message: str, response=None) -> None:
        super().__init__(message)
        self.response = response


class UpstreamFailure(ImageChatError):
    """The provider call, decoding, or file write failed."""

    pass


class ChatBackendError(ImageChatError):
    """The local text-generation endpoint failed or answered malformed JSON."""

    pass
