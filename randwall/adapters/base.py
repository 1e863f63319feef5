"""Retrieval contract and helpers shared by the wallpaper adapters.

Adapters do not inherit from a common class: each one satisfies the
SourceAdapter protocol and composes the free functions below. Every
internal failure is a RetrievalError subclass; `guarded` turns it into the
single AdapterError seen by callers.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable
from urllib.parse import urlsplit

from randwall.constants import HTTP_ERROR_THRESHOLD
from randwall.httpclient import ClientError
from randwall.jsonpath import evaluate
from randwall.models import (
    AdapterError,
    ConfigurationError,
    ImageRecord,
    NetworkError,
    ParseError,
    RequestConstructionError,
    RetrievalError,
    SourceMetadata,
)
from randwall.validation import ConfigValidator

if TYPE_CHECKING:
    from randwall.config import ConfigurationProvider
    from randwall.httpclient import HttpGetter, HttpResponse
    from randwall.validation import ConfigItems

__all__ = [
    "CompletionHandler",
    "NullAdapter",
    "SourceAdapter",
    "check_config",
    "check_url",
    "deliver",
    "fetch",
    "guarded",
    "make_record",
    "parse_json",
    "string_at",
]


CompletionHandler = Callable[[ImageRecord | None, AdapterError | None], None]

_log = logging.getLogger(__name__)


@runtime_checkable
class SourceAdapter(Protocol):
    """A provider of random wallpapers.

    Class Attributes:
        name: Registry identifier, also the configuration section name.
        source_name: Human readable provider name put in the records.
        source_url: Landing page of the provider.
    """

    name: ClassVar[str]
    source_name: ClassVar[str]
    source_url: ClassVar[str]

    async def request_random_image(self) -> ImageRecord:
        """Retrieve a random image.

        Returns:
            The selected image and its attribution.

        Raises:
            AdapterError: On any failure. No other exception is raised for
                configuration, request, transport or parsing problems.
        """
        ...


class NullAdapter:
    """Adapter used when no source is selected: every request fails."""

    name: ClassVar[str] = "none"
    source_name: ClassVar[str] = ""
    source_url: ClassVar[str] = ""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or _log

    async def request_random_image(self) -> ImageRecord:
        """Fail, as there is nothing to retrieve from."""
        msg = "request_random_image not implemented"
        self.log.error(msg)
        raise AdapterError(msg)


async def guarded(name: str, log: logging.Logger, retrieval: Awaitable[ImageRecord]) -> ImageRecord:
    """Await a retrieval and convert its failures into AdapterError.

    Args:
        name: Adapter name, used as message prefix.
        log: Logger receiving one warning per failure.
        retrieval: The adapter's retrieval coroutine.

    Returns:
        The record produced by the retrieval.

    Raises:
        AdapterError: Wrapping any RetrievalError, or any unexpected exception.
    """
    try:
        return await retrieval
    except AdapterError:
        raise
    except RetrievalError as e:
        log.warning("%s failed: %s", name, e.message)
        raise AdapterError(f"{name}: {e.message}", cause=e) from e
    except Exception as e:  # pylint: disable=broad-exception-caught
        log.exception("%s failed unexpectedly", name)
        raise AdapterError(f"{name}: {type(e).__name__}: {e}", cause=e) from e


async def deliver(adapter: SourceAdapter, callback: CompletionHandler) -> None:
    """Run a retrieval and report it to a completion handler.

    The handler is called exactly once, with ``(record, None)`` on success
    or ``(None, error)`` on failure.

    Args:
        adapter: The adapter to query.
        callback: Completion handler.
    """
    try:
        record = await adapter.request_random_image()
    except AdapterError as e:
        callback(None, e)
    else:
        callback(record, None)


def check_config(config: ConfigurationProvider, schema: ConfigItems, section: str, log: logging.Logger) -> None:
    """Validate adapter settings before any request is built.

    Raises:
        ConfigurationError: Listing every problem found.
    """
    errors = ConfigValidator(config, section, log).validate(schema)  # type: ignore[arg-type]
    if errors:
        raise ConfigurationError("; ".join(errors))


def check_url(url: str) -> str:
    """Make sure a URL can be requested.

    Returns:
        The URL, unchanged.

    Raises:
        RequestConstructionError: If the URL is not an absolute http(s) URL.
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        msg = f"Could not create request for '{url}': {e}"
        raise RequestConstructionError(msg) from e
    if parts.scheme not in ("http", "https") or not parts.netloc:
        msg = f"Could not create request for '{url}'"
        raise RequestConstructionError(msg)
    return url


async def fetch(client: HttpGetter, url: str) -> HttpResponse:
    """GET a URL, turning transport failures and error statuses into NetworkError.

    Args:
        client: HTTP client.
        url: Encoded URL.

    Returns:
        The response.

    Raises:
        RequestConstructionError: If the URL is not requestable.
        NetworkError: On transport failures or HTTP status >= 400.
        ParseError: If the body cannot be decoded as text.
    """
    check_url(url)
    try:
        response = await client.get(url)
    except UnicodeDecodeError as e:
        msg = f"Undecodable response from {url}: {e}"
        raise ParseError(msg) from e
    except ClientError as e:
        msg = f"Request to {url} failed: {e}"
        raise NetworkError(msg) from e
    except asyncio.TimeoutError as e:
        msg = f"Request to {url} timed out"
        raise NetworkError(msg) from e
    if response.status >= HTTP_ERROR_THRESHOLD:
        msg = f"HTTP {response.status} from {url}"
        raise NetworkError(msg)
    return response


def parse_json(body: str) -> Any:  # noqa: ANN401
    """Decode a JSON body.

    Raises:
        ParseError: If the body is not valid JSON, or nested too deeply to decode.
    """
    try:
        return json.loads(body)
    except ValueError as e:
        msg = f"Unexpected response. ({e})"
        raise ParseError(msg) from e
    except RecursionError as e:
        msg = "Unexpected response. (JSON nested too deeply)"
        raise ParseError(msg) from e


def string_at(document: Any, path: str) -> str:  # noqa: ANN401
    """Return the non-empty string found at `path` in a decoded JSON document.

    Raises:
        ParseError: If the path is absent or does not hold a non-empty string.
    """
    value = evaluate(document, path)
    if not isinstance(value, str) or not value:
        msg = f"Unexpected response. ({path} is not a non-empty string)"
        raise ParseError(msg)
    return value


def _is_absolute(url: str | None) -> bool:
    if not url:
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def make_record(
    *,
    source_name: str,
    image_download_url: str,
    source_url: str,
    author_name: str | None = None,
    author_url: str | None = None,
    image_link_url: str | None = None,
) -> ImageRecord:
    """Build an ImageRecord, checking that its links are absolute URLs.

    Raises:
        ParseError: If the download URL or a set link is not absolute.
    """
    if not _is_absolute(image_download_url):
        msg = f"Image URL is not absolute: '{image_download_url}'"
        raise ParseError(msg)
    for link in (source_url, author_url, image_link_url):
        if link is not None and not _is_absolute(link):
            msg = f"Attribution link is not absolute: '{link}'"
            raise ParseError(msg)
    return ImageRecord(
        author_name=author_name,
        source_name=source_name,
        image_download_url=image_download_url,
        source=SourceMetadata(source_url=source_url, author_url=author_url, image_link_url=image_link_url),
    )
