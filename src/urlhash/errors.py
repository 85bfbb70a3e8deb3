"""Exceptions raised by urlhash."""

from typing import Optional


class URLHashError(Exception):
    """Base class for all urlhash errors."""


class ConfigError(URLHashError):
    """A configuration value was rejected.

    Attributes:
        field: Name of the offending option
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        return self.args[0]


class InvalidConfigError(ConfigError, ValueError):
    """A grammar token or mode has a value of the wrong kind."""


class UnknownFieldError(ConfigError, KeyError):
    """A grammar token name is not one of separate/assign/true/false."""


class EncodeError(URLHashError):
    """An option map could not be written as a fragment string.

    Attributes:
        key: Option name whose value could not be encoded
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class UnsupportedValueError(EncodeError, ValueError):
    """A JSON object was found while object serialization is disabled."""


class InvalidValueTypeError(EncodeError, TypeError):
    """A value has a type the encoder does not know how to write."""
