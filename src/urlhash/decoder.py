"""Core fragment decoding functionality."""

import copy
import json
import logging
import re
from typing import Any, List, Mapping, Optional

from .constants import BOOLEAN_FIELDS, GRAMMAR_FIELDS, HASH_MARKER, SPLIT_FIELDS, URI_RESERVED
from .errors import InvalidConfigError, UnknownFieldError
from .matchers import Matcher, compile_matcher, compile_optional_matcher
from .types import UNDEFINED, DecodeGrammar, HashOptions, OptionMap, OptionValue, StructuredMode

logger = logging.getLogger(__name__)

_ESCAPE_RUN = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def is_empty_fragment(fragment: Optional[str]) -> bool:
    """True when there is nothing to parse (no string, '' or a bare '#')."""
    return not fragment or fragment == HASH_MARKER


def decode_uri(text: str) -> str:
    """Decode percent escapes the way decodeURI() does.

    Escapes of reserved characters (;/?:@&=+$,#) are left as they are.
    Escaped bytes must form valid UTF-8.

    Raises:
        ValueError: On a stray '%' or an escape run that is not valid UTF-8
            (UnicodeDecodeError is a ValueError)
    """
    if _BAD_ESCAPE.search(text):
        raise ValueError(f"Malformed URI escape in {text!r}")

    def replace(match: "re.Match[str]") -> str:
        run = match.group(0)
        out: List[str] = []
        pending = bytearray()
        for start in range(0, len(run), 3):
            escape = run[start:start + 3]
            byte = int(escape[1:], 16)
            if byte >= 0x80:
                pending.append(byte)
                continue
            if pending:
                out.append(pending.decode("utf-8"))
                pending.clear()
            char = chr(byte)
            out.append(escape if char in URI_RESERVED else char)
        if pending:
            out.append(pending.decode("utf-8"))
        return "".join(out)

    return _ESCAPE_RUN.sub(replace, text)


def resolve_value(raw: str, grammar: DecodeGrammar, mode: StructuredMode) -> OptionValue:
    """Turn a single assigned value into a Python value.

    Checks, in order: embedded JSON (when the structured mode accepts the
    value's shape), the true matcher, the false matcher. Anything else is
    returned as the literal string.

    Args:
        raw: Value text as found in the fragment
        grammar: Decode-side grammar
        mode: Structured mode

    Returns:
        The decoded value, or UNDEFINED if the JSON text was malformed
    """
    pattern = mode.pattern
    if pattern is not None and pattern.search(raw):
        try:
            return json.loads(decode_uri(raw))
        except ValueError:
            logger.error("Invalid JSON in URL hash: %r", raw)
            return UNDEFINED
    if grammar.true is not None and grammar.true.matches(raw):
        return True
    if grammar.false is not None and grammar.false.matches(raw):
        return False
    return raw


def decode_fragment(
    fragment: Optional[str],
    grammar: DecodeGrammar,
    mode: StructuredMode = StructuredMode.DISABLED,
    defaults: Optional[Mapping[str, Any]] = None,
) -> OptionMap:
    """Parse a fragment string into an option map.

    Options without an assignment are set to None. An option with a single
    assignment goes through resolve_value(). An option with several
    assignments becomes a list of the literal strings.

    Args:
        fragment: Fragment string, normally starting with '#'
        grammar: Decode-side grammar
        mode: Structured mode
        defaults: Values present unless the fragment overrides them

    Returns:
        A new dict seeded with a deep copy of defaults
    """
    options: OptionMap = copy.deepcopy(dict(defaults)) if defaults else {}

    if is_empty_fragment(fragment):
        return options

    if fragment.startswith(HASH_MARKER):
        fragment = fragment[len(HASH_MARKER):]
    else:
        logger.warning("Hash string did not start with %s character: %r", HASH_MARKER, fragment)

    for segment in grammar.separate.split(fragment):
        pieces = grammar.assign.split(segment)
        if len(pieces) == 1:
            options[segment] = None
        elif len(pieces) == 2:
            options[pieces[0]] = resolve_value(pieces[1], grammar, mode)
        else:
            # Multiple assignment, values are kept as literal strings
            options[pieces[0]] = pieces[1:]

    return options


def validate_getter(name: str, value: Any) -> Optional[Matcher]:
    """Check a decode-side grammar token and compile it.

    Raises:
        UnknownFieldError: If name is not a grammar token
        InvalidConfigError: If value is not acceptable for that token
    """
    if name not in GRAMMAR_FIELDS:
        raise UnknownFieldError(f"Unknown getter name '{name}'", field=name)

    if name in BOOLEAN_FIELDS and value is False:
        return None

    if name in SPLIT_FIELDS and value == "":
        raise InvalidConfigError(f"Getter '{name}' cannot be an empty string", field=name)

    try:
        return compile_optional_matcher(value) if name in BOOLEAN_FIELDS else compile_matcher(value)
    except TypeError as exc:
        raise InvalidConfigError(f"Invalid '{name}' getter value: {value!r}", field=name) from exc


def resolve_decode_grammar(getters: Optional[Mapping[str, Any]] = None) -> DecodeGrammar:
    """Build a decode grammar from user getters, with defaults applied.

    Raises:
        InvalidConfigError: If getters is not a mapping or holds a bad value
        UnknownFieldError: If getters names an unknown token
    """
    grammar = DecodeGrammar.default()
    if getters is None:
        return grammar
    if not isinstance(getters, Mapping):
        raise InvalidConfigError("Getters must be a mapping", field="getters")
    for name, value in getters.items():
        setattr(grammar, name, validate_getter(name, value))
    return grammar


def decode(
    fragment: Optional[str],
    options: Optional[HashOptions] = None,
    defaults: Optional[Mapping[str, Any]] = None,
) -> OptionMap:
    """Decode a fragment string without a URLHash instance.

    Args:
        fragment: Fragment string to parse
        options: Optional getters/json options
        defaults: Values present unless the fragment overrides them

    Returns:
        The decoded option map
    """
    options = options or {}
    grammar = resolve_decode_grammar(options.get("getters"))
    mode = StructuredMode.from_option(options.get("json", False))
    return decode_fragment(fragment, grammar, mode, defaults)
