"""Adapter registry for wallpaper sources.

This module provides the registry of adapters and re-exports the contract
types for convenience.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from randwall.config import Configuration
from randwall.logging_setup import get_logger
from randwall.validation import ConfigValidator

from .base import CompletionHandler, NullAdapter, SourceAdapter, deliver

if TYPE_CHECKING:
    import logging

    from randwall.httpclient import HttpGetter

__all__ = [
    "ADAPTERS",
    "CompletionHandler",
    "NullAdapter",
    "SourceAdapter",
    "deliver",
    "get_adapter",
    "get_available_adapters",
    "register_adapter",
]

# Adapter registry - populated by imports below
ADAPTERS: dict[str, type] = {}


def register_adapter(cls: type) -> type:
    """Decorator to register an adapter class.

    Args:
        cls: Adapter class to register.

    Returns:
        The same class, unmodified.
    """
    ADAPTERS[cls.name] = cls  # type: ignore[attr-defined]
    return cls


def get_adapter(
    name: str,
    settings: Mapping[str, Any] | None = None,
    client: HttpGetter | None = None,
    *,
    log: logging.Logger | None = None,
) -> SourceAdapter:
    """Build an adapter by name.

    Args:
        name: Adapter identifier.
        settings: Raw settings of the adapter; schema defaults fill the gaps.
            Unknown keys are logged as warnings.
        client: HTTP client shared by the adapter's requests.
        log: Logger. Defaults to "randwall.<name>".

    Returns:
        A ready to use adapter.

    Raises:
        KeyError: If the adapter is not registered.
        ValueError: If no HTTP client is given.
    """
    if name not in ADAPTERS:
        available = ", ".join(ADAPTERS.keys())
        msg = f"Unknown adapter '{name}'. Available: {available}"
        raise KeyError(msg)
    if client is None:
        msg = f"Adapter '{name}' needs an HTTP client"
        raise ValueError(msg)
    cls = ADAPTERS[name]
    logger = log or get_logger(f"randwall.{name}")
    config = Configuration(dict(settings or {}), logger=logger, schema=cls.config_schema)
    ConfigValidator(config, name, logger).warn_unknown_keys(cls.config_schema)
    adapter: SourceAdapter = cls(config, client, log=logger)
    return adapter


def get_available_adapters() -> list[str]:
    """Get list of all registered adapter names.

    Returns:
        List of adapter names.
    """
    return list(ADAPTERS.keys())


# Import adapters to register them
# pylint: disable=wrong-import-position,cyclic-import
from . import desktoppr, generic_json, unsplash, wallhaven  # noqa: E402, F401
