"""Core fragment encoding functionality."""

from typing import Any, Mapping, Optional, Union

from .constants import BOOLEAN_FIELDS, GRAMMAR_FIELDS, HASH_MARKER
from .encoders import encode_value
from .errors import InvalidConfigError, UnknownFieldError
from .types import UNDEFINED, EncodeGrammar, HashOptions, StructuredMode


def encode_options(
    options: Mapping[str, Any],
    grammar: EncodeGrammar,
    mode: StructuredMode = StructuredMode.DISABLED,
    auto_array: bool = True,
) -> str:
    """Encode an option map into a fragment string.

    The result always starts with '#'. An empty map gives just '#'.
    Options set to UNDEFINED are left out.

    Args:
        options: Option map, written in insertion order
        grammar: Encode-side grammar
        mode: Structured mode
        auto_array: Pick the array format per list

    Returns:
        Fragment string

    Raises:
        UnsupportedValueError: For a mapping value when JSON objects are disabled
        InvalidValueTypeError: For a value of an unsupported type
    """
    segments = []
    for key, value in options.items():
        if value is UNDEFINED:
            continue
        name = str(key)
        segments.append(name + encode_value(name, value, grammar, mode, auto_array))
    return HASH_MARKER + grammar.separate.join(segments)


def validate_setter(name: str, value: Any) -> Union[str, bool]:
    """Check an encode-side grammar token.

    Raises:
        UnknownFieldError: If name is not a grammar token
        InvalidConfigError: If value is not acceptable for that token
    """
    if name not in GRAMMAR_FIELDS:
        raise UnknownFieldError(f"Unknown setter name '{name}'", field=name)
    if name in BOOLEAN_FIELDS and value is False:
        return value
    if not isinstance(value, str):
        raise InvalidConfigError(f"Invalid '{name}' setter value: {value!r}", field=name)
    return value


def resolve_encode_grammar(setters: Optional[Mapping[str, Any]] = None) -> EncodeGrammar:
    """Build an encode grammar from user setters, with defaults applied.

    Raises:
        InvalidConfigError: If setters is not a mapping or holds a bad value
        UnknownFieldError: If setters names an unknown token
    """
    grammar = EncodeGrammar()
    if setters is None:
        return grammar
    if not isinstance(setters, Mapping):
        raise InvalidConfigError("Setters must be a mapping", field="setters")
    for name, value in setters.items():
        setattr(grammar, name, validate_setter(name, value))
    return grammar


def encode(options_map: Mapping[str, Any], options: Optional[HashOptions] = None) -> str:
    """Encode an option map without a URLHash instance.

    Args:
        options_map: Option map to encode
        options: Optional setters/json/autoArray options

    Returns:
        Fragment string
    """
    options = options or {}
    grammar = resolve_encode_grammar(options.get("setters"))
    mode = StructuredMode.from_option(options.get("json", False))
    return encode_options(options_map, grammar, mode, options.get("autoArray", True))
