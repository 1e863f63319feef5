"""Configuration validation with schema definitions.

Each adapter declares its options as a ConfigItems list. The same schema
provides the defaults used by Configuration and the checks run before
any request is built.
"""

import difflib
import logging
from dataclasses import dataclass
from typing import Any, cast

from .config import BOOL_STRINGS

__all__ = [
    "ConfigField",
    "ConfigItems",
    "ConfigValidator",
    "format_config_error",
]


@dataclass
class ConfigField:
    """Describes an expected configuration field for validation.

    Attributes:
        name: The configuration key name
        field_type: Expected type (str, int or bool)
        required: Whether the field must be set to a non-empty value
        default: Default value if not provided
        description: Human-readable description for error messages
    """

    name: str
    field_type: type = str
    required: bool = False
    default: Any = None
    description: str = ""


class ConfigItems(list):
    """The settings of one adapter, in declaration order."""

    def __init__(self, *args: ConfigField) -> None:
        super().__init__(args)

    @property
    def names(self) -> list[str]:
        """Return the declared setting names."""
        return [f.name for f in self]


def format_config_error(section: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a configuration error message.

    Args:
        section: Adapter (configuration section) name
        field: Field name that has the error
        message: Error description
        suggestion: Optional suggestion for fixing the error

    Returns:
        Formatted error message
    """
    msg = f"[{section}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class ConfigValidator:
    """Validates configuration against a schema."""

    def __init__(self, config: dict, section: str, logger: logging.Logger) -> None:
        """Initialize the validator.

        Args:
            config: The configuration dictionary to validate
            section: Name of the section for error messages
            logger: Logger instance for warnings
        """
        self.config = config
        self.section = section
        self.log = logger

    def validate(self, schema: ConfigItems) -> list[str]:
        """Validate configuration against schema.

        Args:
            schema: List of ConfigField definitions

        Returns:
            List of error messages (empty if validation passed)
        """
        errors = []

        for field_def in schema:
            value = self.config.get(field_def.name)

            if field_def.required and value in (None, ""):
                errors.append(
                    format_config_error(
                        self.section,
                        field_def.name,
                        "Missing required field",
                        self._get_required_suggestion(field_def),
                    )
                )
                continue

            if value is None:
                continue

            type_error = self._check_type(field_def, value)
            if type_error:
                errors.append(type_error)

        return errors

    def _check_type(self, field_def: ConfigField, value: Any) -> str | None:
        """Check if value matches expected type.

        Args:
            field_def: Field definition
            value: Value to check

        Returns:
            Error message if type mismatch, None otherwise
        """
        checkers = {
            bool: self._check_bool,
            int: self._check_numeric,
            str: self._check_str,
        }

        checker = checkers.get(field_def.field_type)
        if checker:
            return checker(field_def, value)
        return None

    def _check_bool(self, field_def: ConfigField, value: Any) -> str | None:
        """Check bool type (special handling since bool is subclass of int)."""
        if isinstance(value, bool):
            return None
        if isinstance(value, str) and value.lower() in BOOL_STRINGS:
            return None
        return format_config_error(
            self.section,
            field_def.name,
            f"Expected bool, got {type(value).__name__}",
            "Use true/false (without quotes)",
        )

    def _check_numeric(self, field_def: ConfigField, value: Any) -> str | None:
        """Check int type."""
        if isinstance(value, int) and not isinstance(value, bool):
            return None
        expected_type = cast("type[int]", field_def.field_type)
        try:
            expected_type(value)
        except (ValueError, TypeError):
            return format_config_error(
                self.section,
                field_def.name,
                f"Expected {expected_type.__name__}, got {type(value).__name__}",
                f"Use {field_def.name} = 42 (without quotes)",
            )

        return None

    def _check_str(self, field_def: ConfigField, value: Any) -> str | None:
        """Check str type."""
        if isinstance(value, str):
            return None
        return format_config_error(
            self.section,
            field_def.name,
            f"Expected str, got {type(value).__name__}",
            f'Use {field_def.name} = "value"',
        )

    def _get_required_suggestion(self, field_def: ConfigField) -> str:
        """Generate suggestion for a missing required field.

        Args:
            field_def: Field definition

        Returns:
            Suggestion string
        """
        if field_def.field_type is str:
            return f'Add {field_def.name} = "value" to [{self.section}]'
        if field_def.field_type is int:
            example = field_def.default if field_def.default is not None else 0
            return f"Add {field_def.name} = {example} to [{self.section}]"
        if field_def.field_type is bool:
            return f"Add {field_def.name} = true/false to [{self.section}]"
        return f"Add '{field_def.name}' to [{self.section}]"

    def warn_unknown_keys(self, schema: ConfigItems) -> list[str]:
        """Log warnings for unknown configuration keys.

        Args:
            schema: List of ConfigField definitions

        Returns:
            List of warning messages
        """
        warnings = []
        known_keys = schema.names

        for key in self.config:
            if key in known_keys:
                continue

            similar = difflib.get_close_matches(key, known_keys, n=1)
            if similar:
                msg = f"[{self.section}] Unknown option '{key}' (did you mean '{similar[0]}'?)"
            else:
                msg = f"[{self.section}] Unknown option '{key}' - will be ignored"

            self.log.warning(msg)
            warnings.append(msg)

        return warnings
