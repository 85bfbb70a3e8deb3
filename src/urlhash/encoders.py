"""Encoders for different value types."""

import json
import logging
import math
from typing import Any, Mapping, Sequence

from .constants import JSON_SEPARATORS
from .errors import InvalidValueTypeError, UnsupportedValueError
from .types import ArrayStrategy, EncodeGrammar, StructuredMode

logger = logging.getLogger(__name__)


def is_flat_item(value: Any) -> bool:
    """Check if value can be written in the flat multi-assignment form.

    Only strings and numbers qualify. bool is an int subclass but is not a
    number here.
    """
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, int, float))


def format_flat_item(value: Any) -> str:
    """Write a string or number the way String() does in a browser.

    Integral floats lose their fraction (1.0 gives "1") and the special
    values are spelled NaN, Infinity and -Infinity.
    """
    if not isinstance(value, float):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def is_option_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_option_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def encode_json(key: str, value: Any) -> str:
    """Serialize a structured value as compact JSON.

    Raises:
        InvalidValueTypeError: If value holds something JSON cannot represent
    """
    try:
        return json.dumps(value, separators=JSON_SEPARATORS, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise InvalidValueTypeError(f"Cannot serialize option '{key}' as JSON: {exc}", key=key) from exc


def choose_array_strategy(elements: Sequence[Any], mode: StructuredMode, auto_array: bool) -> ArrayStrategy:
    """Decide how a list value is written.

    Args:
        elements: The list value
        mode: Structured mode
        auto_array: Pick per list instead of always using JSON

    Returns:
        FLAT when JSON arrays are disabled, or when auto_array is on and every
        element is a string or number. STRUCTURED otherwise.
    """
    if not mode.allows_arrays:
        return ArrayStrategy.FLAT
    if auto_array and all(is_flat_item(item) for item in elements):
        return ArrayStrategy.FLAT
    return ArrayStrategy.STRUCTURED


def encode_flat_array(elements: Sequence[Any], grammar: EncodeGrammar) -> str:
    """Encode a list as repeated assignments (=a=b=c).

    Elements that are not strings or numbers are dropped with a warning.
    """
    parts = []
    for item in elements:
        if is_flat_item(item):
            parts.append(grammar.assign + format_flat_item(item))
        else:
            logger.warning("Cannot serialize item into simple array: %r", item)
    return "".join(parts)


def encode_array(
    key: str, elements: Sequence[Any], grammar: EncodeGrammar, mode: StructuredMode, auto_array: bool
) -> str:
    strategy = choose_array_strategy(elements, mode, auto_array)
    if strategy is ArrayStrategy.STRUCTURED:
        return grammar.assign + encode_json(key, list(elements))
    return encode_flat_array(elements, grammar)


def encode_object(key: str, value: Mapping[str, Any], grammar: EncodeGrammar, mode: StructuredMode) -> str:
    if not mode.allows_objects:
        raise UnsupportedValueError(
            f"Cannot serialize object for option '{key}' when JSON objects are disabled", key=key
        )
    return grammar.assign + encode_json(key, dict(value))


def encode_value(key: str, value: Any, grammar: EncodeGrammar, mode: StructuredMode, auto_array: bool) -> str:
    """Encode the part of an option that follows its name.

    Args:
        key: Option name, used in error messages
        value: Option value
        grammar: Encode-side grammar
        mode: Structured mode
        auto_array: Pick the array format per list

    Returns:
        The assignment text, or an empty string for a bare flag

    Raises:
        UnsupportedValueError: For a mapping when JSON objects are disabled
        InvalidValueTypeError: For a value of any other type
    """
    if value is None:
        return ""
    if value is True:
        return grammar.assign + grammar.true if grammar.true is not False else ""
    if value is False:
        return grammar.assign + grammar.false if grammar.false is not False else ""
    if is_option_array(value):
        return encode_array(key, value, grammar, mode, auto_array)
    if is_option_object(value):
        return encode_object(key, value, grammar, mode)
    if is_flat_item(value):
        return grammar.assign + format_flat_item(value)
    raise InvalidValueTypeError(
        f"Invalid value type {type(value).__name__} for option '{key}'", key=key
    )
