"""Configuration file loading utilities.

Adapter settings live in TOML tables named after the adapter::

    [unsplash]
    unsplash-keyword = "mountains"
    image-width = 2560

    [genericjson]
    generic-json-request-url = "https://example.com/random.json"
    generic-json-response-path = "$.data[0].url"
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .models import ConfigurationError

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader", "merge"]


def merge(merged: dict[str, Any], obj2: dict[str, Any]) -> dict[str, Any]:
    """Merge the content of obj2 into merged.

    Nested tables are merged recursively, other values are replaced.

    Args:
        merged (dict): Dictionary to merge into
        obj2 (dict): Dictionary to merge from

    Returns:
        `merged` dictionary with the merged content
    """
    for key, value in obj2.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Loads adapter settings from a TOML file or a directory of TOML files."""

    def __init__(self, log: logging.Logger) -> None:
        """Initialize the config loader.

        Args:
            log: Logger instance for status and error messages
        """
        self.log = log
        self._config: dict[str, Any] = {}

    @property
    def config(self) -> dict[str, Any]:
        """Return the loaded configuration."""
        return self._config

    def load(self, config_filename: str | Path) -> dict[str, Any]:
        """Load configuration from file or directory.

        Args:
            config_filename: Path to a config file or a directory of .toml files

        Returns:
            The loaded and merged configuration dictionary.

        Raises:
            ConfigurationError: If the file is missing or has syntax errors.
        """
        fname = Path(os.path.expandvars(str(config_filename))).expanduser()
        if fname.is_dir():
            config = self._load_config_directory(fname)
        else:
            config = self._load_config_file(fname)
        merge(self._config, config)
        return self._config

    def section(self, name: str) -> dict[str, Any]:
        """Return the table for one adapter, empty if absent.

        Args:
            name: Adapter name

        Returns:
            The raw settings of that adapter
        """
        value = self._config.get(name, {})
        if not isinstance(value, dict):
            msg = f"[{name}] must be a table, got {type(value).__name__}"
            raise ConfigurationError(msg)
        return value

    def _load_config_directory(self, directory: Path) -> dict[str, Any]:
        """Load and merge all .toml files from a directory, in name order."""
        config: dict[str, Any] = {}
        for toml_file in sorted(f.name for f in directory.iterdir()):
            if not toml_file.endswith(".toml"):
                continue
            merge(config, self._load_config_file(directory / toml_file))
        return config

    def _load_config_file(self, fname: Path) -> dict[str, Any]:
        """Load a single TOML configuration file."""
        if not fname.exists():
            self.log.critical("Config file not found: %s", fname)
            msg = f"Config file not found: {fname}"
            raise ConfigurationError(msg)
        self.log.info("Loading %s", fname)
        with fname.open("rb") as f:
            try:
                return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                self.log.critical("Problem reading %s: %s", fname, e)
                msg = f"Problem reading {fname}: {e}"
                raise ConfigurationError(msg) from e
