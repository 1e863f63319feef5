"""URL helpers shared by the adapters: option serialization and encoding."""

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote, unquote

from .constants import MAX_DECODE_ITERATIONS
from .models import ParseError

__all__ = [
    "append_query",
    "build_query",
    "encode_uri",
    "file_name",
]

# Characters left untouched by encode_uri: URI delimiters and unreserved marks
_URI_SAFE = ";,/?:@&=+$!*'()#"


def _option_items(options: Mapping[str, Any] | Any) -> Iterable[tuple[str, Any]]:
    """Yield (key, value) pairs of a mapping or dataclass, in declaration order."""
    if dataclasses.is_dataclass(options) and not isinstance(options, type):
        return ((f.name, getattr(options, f.name)) for f in dataclasses.fields(options))
    return options.items()


def _format_value(value: Any) -> str:  # noqa: ANN401
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(options: Mapping[str, Any] | Any) -> str:
    """Serialize an options snapshot into a query string.

    Entries keep their declaration order. Lists are joined with "," and are
    always included, even when empty. Falsy scalars are left out.

    Args:
        options: A mapping or a dataclass instance.

    Returns:
        "key=value" pairs joined with "&", without a leading "?".

    Eg:
        build_query({"q": "", "sorting": "random", "res": ["a", "b"]}) == "sorting=random&res=a,b"
    """
    parts: list[str] = []
    for key, value in _option_items(options):
        if isinstance(value, (list, tuple)):
            parts.append(f"{key}={','.join(_format_value(v) for v in value)}")
        elif value:
            parts.append(f"{key}={_format_value(value)}")
    return "&".join(parts)


def append_query(url: str, query: str) -> str:
    """Append a query string to a URL that may already carry one.

    Args:
        url: Base URL.
        query: Query string without separator.

    Returns:
        The combined URL.
    """
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def encode_uri(url: str) -> str:
    """Percent-encode a whole URL, keeping its delimiters intact.

    Whitespace, non-ASCII and other unsafe characters are encoded, "%"
    included, so an already encoded URL gets encoded again.

    Args:
        url: URL to encode.

    Returns:
        The encoded URL.

    Raises:
        ParseError: If the URL holds characters that cannot be UTF-8 encoded,
            such as lone surrogates.
    """
    try:
        return quote(url, safe=_URI_SAFE)
    except UnicodeEncodeError as e:
        msg = f"URL cannot be encoded: {url!r}"
        raise ParseError(msg) from e


def _is_uri_encoded(uri: str) -> bool:
    """Tell whether decoding would change the string.

    Sequences that do not decode to valid UTF-8 count as not encoded.
    """
    try:
        return uri != unquote(uri, errors="strict")
    except UnicodeDecodeError:
        return False


def file_name(uri: str) -> str:
    """Return the file name part of a possibly multiply encoded URL.

    Args:
        uri: Image URL.

    Returns:
        The last path segment, decoded, without its query string.

    Raises:
        ParseError: If decoding does not settle within MAX_DECODE_ITERATIONS.
    """
    uri = uri or ""
    for _ in range(MAX_DECODE_ITERATIONS):
        if not _is_uri_encoded(uri):
            break
        uri = unquote(uri)
    else:
        if _is_uri_encoded(uri):
            msg = f"URL still encoded after {MAX_DECODE_ITERATIONS} decoding passes"
            raise ParseError(msg)

    base = uri[uri.rfind("/") + 1 :]
    return base.split("?", 1)[0]
