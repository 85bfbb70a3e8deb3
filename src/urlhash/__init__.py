"""
urlhash - option maps in URL fragments

Reads and writes flat option sets as delimited fragment strings such as
``#mode=fast;debug;ids=1=2``, with configurable delimiters, boolean tokens
and optional embedded JSON values.
"""

from .decoder import decode
from .encoder import encode
from .errors import (
    ConfigError,
    EncodeError,
    InvalidConfigError,
    InvalidValueTypeError,
    UnknownFieldError,
    UnsupportedValueError,
    URLHashError,
)
from .hash import URLHash, get_options, merge_update, read_option, replace_all
from .location import CallableSink, CallableSource, FragmentSink, FragmentSource, MemoryLocation
from .types import (
    REMOVE,
    UNDEFINED,
    ArrayStrategy,
    DecodeOptions,
    EncodeOptions,
    GetterOptions,
    HashOptions,
    SetterOptions,
    StructuredMode,
)

__version__ = "0.1.0"
__all__ = [
    "URLHash",
    "encode",
    "decode",
    "get_options",
    "read_option",
    "replace_all",
    "merge_update",
    "REMOVE",
    "UNDEFINED",
    "StructuredMode",
    "ArrayStrategy",
    "HashOptions",
    "DecodeOptions",
    "EncodeOptions",
    "GetterOptions",
    "SetterOptions",
    "FragmentSource",
    "FragmentSink",
    "MemoryLocation",
    "CallableSource",
    "CallableSink",
    "URLHashError",
    "ConfigError",
    "InvalidConfigError",
    "UnknownFieldError",
    "EncodeError",
    "UnsupportedValueError",
    "InvalidValueTypeError",
]
