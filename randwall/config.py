"""Configuration wrapper providing typed access with schema defaults."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Protocol, overload

from .models import ConfigurationError

if TYPE_CHECKING:
    import logging

    from .validation import ConfigItems

__all__ = [
    "BOOL_FALSE_STRINGS",
    "BOOL_STRINGS",
    "BOOL_TRUE_STRINGS",
    "Configuration",
    "ConfigurationProvider",
    "SchemaAwareMixin",
    "coerce_to_bool",
]

# Type alias for config values
ConfigValueType = float | bool | str | list | dict

OptionKind = Literal["string", "integer", "boolean"]

# Boolean string constants (shared with validation module)
BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


class ConfigurationProvider(Protocol):
    """Typed option lookup consumed by the adapters."""

    def get_str(self, name: str, default: str = "") -> str: ...

    def get_int(self, name: str, default: int = 0) -> int: ...

    def get_bool(self, name: str, default: bool = False) -> bool: ...

    def get_typed(self, name: str, kind: OptionKind) -> str | int | bool: ...


class SchemaAwareMixin:
    """Mixin providing schema-aware defaults and typed config value accessors.

    Requires the implementing class to have:
    - self._get_raw(name) method that returns the raw value or raises KeyError
    - self.log (logging.Logger) attribute
    """

    _schema_defaults: dict[str, ConfigValueType]

    def __init_schema__(self) -> None:
        """Initialize schema defaults storage. Call from subclass __init__."""
        self._schema_defaults = {}

    def set_schema(self, schema: ConfigItems) -> None:
        """Set or update the schema for default value lookups.

        Args:
            schema: List of ConfigField definitions
        """
        self._schema_defaults = {field.name: field.default for field in schema if field.default is not None}

    def _get_raw(self, name: str) -> ConfigValueType:
        """Get raw value without defaults. Raises KeyError if not found.

        Override in subclasses to provide the actual lookup mechanism.
        """
        raise NotImplementedError

    @overload
    def get(self, name: str) -> ConfigValueType | None: ...

    @overload
    def get(self, name: str, default: None) -> ConfigValueType | None: ...

    @overload
    def get(self, name: str, default: ConfigValueType) -> ConfigValueType: ...

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:
        """Get a value with schema-aware defaults.

        Args:
            name: The configuration key
            default: Fallback if key is missing and not in schema defaults

        Returns:
            The value, schema default, or provided default
        """
        try:
            return self._get_raw(name)
        except KeyError:
            if name in self._schema_defaults:
                return self._schema_defaults[name]
            return default

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, handling loose typing.

        Args:
            name: The key name
            default: Default value if key is missing

        Returns:
            The boolean value
        """
        return coerce_to_bool(self.get(name), default)

    def get_int(self, name: str, default: int = 0) -> int:
        """Get an integer value.

        Args:
            name: The key name
            default: Default value if key is missing or invalid

        Returns:
            The integer value
        """
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid integer value for %s: %s", name, value)  # type: ignore[attr-defined]
            return default

    def get_str(self, name: str, default: str = "") -> str:
        """Get a string value.

        Args:
            name: The key name
            default: Default value if key is missing

        Returns:
            The string value
        """
        value = self.get(name)
        if value is None:
            return default
        return str(value)

    def get_typed(self, name: str, kind: OptionKind) -> str | int | bool:
        """Get a value converted to one of the option kinds.

        Args:
            name: The key name
            kind: One of "string", "integer" or "boolean"

        Returns:
            The converted value, or the schema default when unset

        Raises:
            ConfigurationError: If the kind is unknown
        """
        if kind == "string":
            return self.get_str(name)
        if kind == "integer":
            return self.get_int(name)
        if kind == "boolean":
            return self.get_bool(name)
        msg = f"Unknown option kind '{kind}' for {name}"
        raise ConfigurationError(msg)


class Configuration(SchemaAwareMixin, dict):
    """Configuration wrapper providing typed access.

    Optionally accepts a schema to provide default values automatically.
    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: ConfigItems | None = None,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            schema: Optional list of ConfigField definitions for automatic defaults
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.__init_schema__()
        self.log = logger
        if schema:
            self.set_schema(schema)

    def _get_raw(self, name: str) -> ConfigValueType:
        """Get raw value from dict. Raises KeyError if not found."""
        if name in self:
            return dict.get(self, name)  # type: ignore[return-value]
        raise KeyError(name)

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value with schema-aware defaults.

        Args:
            name: The configuration key
            default: Fallback if key is missing and not in schema defaults

        Returns:
            The value, schema default, or provided default
        """
        return SchemaAwareMixin.get(self, name, default)
