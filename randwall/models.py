"""Result and error types shared by all wallpaper sources."""

from dataclasses import dataclass

__all__ = [
    "AdapterError",
    "ConfigurationError",
    "ImageRecord",
    "JSONPathError",
    "NetworkError",
    "ParseError",
    "RequestConstructionError",
    "RetrievalError",
    "SourceMetadata",
]


@dataclass(frozen=True, slots=True)
class SourceMetadata:
    """Attribution links for an image.

    Attributes:
        source_url: Landing page of the provider.
        author_url: Profile page of the author, if known.
        image_link_url: Page or raw asset link of the image, if known.
    """

    source_url: str
    author_url: str | None = None
    image_link_url: str | None = None


@dataclass(frozen=True, slots=True)
class ImageRecord:
    """A randomly selected image and its attribution.

    Attributes:
        author_name: Display name of the author, if the provider exposes one.
        source_name: Human readable provider name.
        image_download_url: Absolute URL of the image asset.
        source: Attribution links.
    """

    author_name: str | None
    source_name: str
    image_download_url: str
    source: SourceMetadata


class RetrievalError(Exception):
    """Base class for failures raised while retrieving an image."""

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Error description.
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(RetrievalError):
    """A required option is missing or has an invalid value."""


class RequestConstructionError(RetrievalError):
    """A request URL could not be built."""


class NetworkError(RetrievalError):
    """The transport failed or the server answered with an error status."""


class ParseError(RetrievalError):
    """A response body did not have the expected shape."""


class JSONPathError(ParseError):
    """A path query could not be evaluated against a document."""


class AdapterError(Exception):
    """The single failure type reported by every wallpaper source.

    Callers only distinguish success from failure; ``cause`` keeps the
    underlying exception for logging and debugging.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize the error.

        Args:
            message: Error description.
            cause: Underlying exception, if any.
        """
        self.message = message
        self.cause = cause
        super().__init__(message)
