"""URL hash management.

URLHash reads the current fragment string from a source, decodes it into an
option map, and writes re-encoded option maps to a sink. It keeps the last
decoded fragment so that repeated reads of an unchanged fragment do not
re-parse it.

Usage::

    from urlhash import URLHash, REMOVE

    url_hash = URLHash({"json": True, "shortOpt": True})
    url_hash.replace_all({"mode": "fast", "ids": [1, 2]})
    url_hash.read_option("mode")                   # 'fast'
    url_hash.merge_update({"ids": REMOVE, "debug": None})
    url_hash.location.fragment                     # '#mode=fast;debug'
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from .decoder import decode_fragment, is_empty_fragment, resolve_decode_grammar, validate_getter
from .encoder import encode_options, resolve_encode_grammar, validate_setter
from .errors import InvalidConfigError
from .location import CallableSink, CallableSource, FragmentSink, FragmentSource, MemoryLocation
from .types import (
    REMOVE,
    UNDEFINED,
    DecodeGrammar,
    DecodeOptions,
    EncodeGrammar,
    EncodeOptions,
    HashOptions,
    JsonOption,
    OptionMap,
    ResolvedHashOptions,
    StructuredMode,
)

logger = logging.getLogger(__name__)


def resolve_hash_options(options: Optional[HashOptions] = None) -> ResolvedHashOptions:
    """Resolve URLHash options with defaults.

    Non-bool shortOpt/autoArray values and non-callable getHash/setHash
    values are ignored in favour of the defaults.

    Args:
        options: Optional user-provided options

    Returns:
        Resolved options with defaults applied

    Raises:
        InvalidConfigError: If json, getters or setters hold a bad value
        UnknownFieldError: If getters or setters name an unknown token
    """
    options = options or {}

    location = options.get("location")
    if location is None:
        location = MemoryLocation()

    get_hash = options.get("getHash")
    set_hash = options.get("setHash")
    short_opt = options.get("shortOpt")
    auto_array = options.get("autoArray")

    return ResolvedHashOptions(
        source=CallableSource(get_hash) if callable(get_hash) else location,
        sink=CallableSink(set_hash) if callable(set_hash) else location,
        location=location,
        short_opt=short_opt if isinstance(short_opt, bool) else False,
        auto_array=auto_array if isinstance(auto_array, bool) else True,
        mode=StructuredMode.from_option(options.get("json", False)),
        getters=resolve_decode_grammar(options.get("getters")),
        setters=resolve_encode_grammar(options.get("setters")),
    )


class URLHash:
    """Decode, update and re-encode a fragment string.

    Attributes:
        short_opt: Allow the short option fallback in read_option()
        auto_array: Pick the array format per list in encode()
        location: Default source/sink when no getHash/setHash is given
    """

    def __init__(self, options: Optional[HashOptions] = None) -> None:
        resolved = resolve_hash_options(options)

        self.location = resolved.location
        self._source: FragmentSource = resolved.source
        self._sink: FragmentSink = resolved.sink
        self.short_opt = resolved.short_opt
        self.auto_array = resolved.auto_array
        self._mode = resolved.mode
        self._getters: DecodeGrammar = resolved.getters
        self._setters: EncodeGrammar = resolved.setters

        self._last_hash: Optional[str] = None
        self._last_opts: Optional[OptionMap] = None

    @property
    def structured_mode(self) -> StructuredMode:
        return self._mode

    @property
    def getters(self) -> DecodeGrammar:
        return self._getters

    @property
    def setters(self) -> EncodeGrammar:
        return self._setters

    def clear_cache(self) -> None:
        """Forget the last decoded fragment."""
        if self._last_opts is not None:
            logger.debug("Clearing cached options for URL hash: %r", self._last_hash)
        self._last_hash = None
        self._last_opts = None

    def decode(self, options: Optional[DecodeOptions] = None) -> OptionMap:
        """Parse the current fragment into an option map.

        If the fragment is the same string as the one parsed last time, the
        map from last time is returned (the same object). An empty fragment
        gives a copy of the defaults.

        Args:
            options: Optional defaults, and an explicit hash to decode instead
                of reading the source

        Returns:
            Option map
        """
        options = options or {}
        fragment = options["hash"] if "hash" in options else self._source.read()
        defaults = options.get("defaults")

        if is_empty_fragment(fragment):
            return decode_fragment(fragment, self._getters, self._mode, defaults)

        if self._last_opts is not None and fragment == self._last_hash:
            logger.debug("URL hash unchanged, using cached options: %r", fragment)
            return self._last_opts

        result = decode_fragment(fragment, self._getters, self._mode, defaults)
        self._last_hash = fragment
        self._last_opts = result
        return result

    def read_option(self, name: str, options: Optional[DecodeOptions] = None) -> Any:
        """Get a single option.

        If the option is missing and short options are enabled (per call via
        ``shortOpt`` or on the instance), a fragment holding a single bare
        flag is taken to be the value itself: ``#fast`` gives ``'fast'`` for
        any name.

        Args:
            name: Option name
            options: Decode options, plus ``shortOpt`` and ``default``

        Returns:
            The option value, or ``options['default']`` (None if not given)
        """
        options = options or {}
        short_opt = options.get("shortOpt", self.short_opt)

        opts = self.decode(options)
        value = opts.get(name, UNDEFINED)
        if value is not UNDEFINED:
            return value

        if short_opt and len(opts) == 1:
            ((key, only_value),) = opts.items()
            if only_value is None:
                return key

        return options.get("default")

    def encode(self, options_map: Mapping[str, Any], options: Optional[EncodeOptions] = None) -> str:
        """Encode an option map into a fragment string.

        Lists are written as ``name=a=b`` unless JSON arrays are enabled. With
        JSON arrays enabled and autoArray on, only lists holding something
        other than strings and numbers are written as JSON; with autoArray off
        every list is.

        Raises:
            UnsupportedValueError: For a mapping value when JSON objects are disabled
            InvalidValueTypeError: For a value of an unsupported type
        """
        options = options or {}
        auto_array = options.get("autoArray", self.auto_array)
        return encode_options(options_map, self._setters, self._mode, auto_array)

    def replace_all(self, options_map: Mapping[str, Any], options: Optional[EncodeOptions] = None) -> "URLHash":
        """Replace the fragment with the encoded option map.

        Options not in options_map are gone afterwards. Nothing is written if
        encoding fails.
        """
        fragment = self.encode(options_map, options)
        self._last_hash = fragment
        # UNDEFINED entries are not written, so they are not cached either
        self._last_opts = {key: value for key, value in options_map.items() if value is not UNDEFINED}
        self._sink.write(fragment)
        return self

    def merge_update(
        self,
        patch: Mapping[str, Any],
        encode_options: Optional[EncodeOptions] = None,
        decode_options: Optional[DecodeOptions] = None,
    ) -> "URLHash":
        """Apply changes to the current options and write them back.

        Options not named in patch are kept. A patch value of REMOVE deletes
        the option.
        """
        current = dict(self.decode(decode_options))
        for key, value in patch.items():
            if value is REMOVE:
                current.pop(key, None)
            else:
                current[key] = value
        return self.replace_all(current, encode_options)

    def delete_options(
        self,
        names: Iterable[str],
        encode_options: Optional[EncodeOptions] = None,
        decode_options: Optional[DecodeOptions] = None,
    ) -> "URLHash":
        """Remove the named options from the fragment."""
        patch = {name: REMOVE for name in names}
        return self.merge_update(patch, encode_options, decode_options)

    def set_getters(self, getters: Mapping[str, Any]) -> "URLHash":
        """Set several decode-side grammar tokens at once."""
        if not isinstance(getters, Mapping):
            raise InvalidConfigError("Invalid mapping passed to set_getters()", field="getters")
        for name, value in getters.items():
            self.set_getter(name, value)
        return self

    def set_setters(self, setters: Mapping[str, Any]) -> "URLHash":
        """Set several encode-side grammar tokens at once."""
        if not isinstance(setters, Mapping):
            raise InvalidConfigError("Invalid mapping passed to set_setters()", field="setters")
        for name, value in setters.items():
            self.set_setter(name, value)
        return self

    def set_getter(self, name: str, value: Any) -> "URLHash":
        """Set a decode-side grammar token.

        ``separate`` and ``assign`` take a string or compiled pattern;
        ``true`` and ``false`` also take False to disable them.
        """
        setattr(self._getters, name, validate_getter(name, value))
        # The cached map was parsed with the old grammar
        self.clear_cache()
        return self

    def set_setter(self, name: str, value: Any) -> "URLHash":
        """Set an encode-side grammar token.

        All tokens take a string; ``true`` and ``false`` also take False,
        which writes booleans as bare flags.
        """
        setattr(self._setters, name, validate_setter(name, value))
        return self

    def use_json(self, value: JsonOption) -> "URLHash":
        """Choose which JSON values are parsed and written.

        Args:
            value: True for arrays and objects, 'array', 'object', or False
        """
        self._mode = StructuredMode.from_option(value)
        self.clear_cache()
        return self

    def serialize_json_array(self) -> bool:
        """Can lists be written as JSON?"""
        return self._mode.allows_arrays

    def serialize_json_object(self) -> bool:
        """Can mappings be written as JSON?"""
        return self._mode.allows_objects


def get_options(
    decode_options: Optional[DecodeOptions] = None, hash_options: Optional[HashOptions] = None
) -> OptionMap:
    """Decode with a new URLHash built from hash_options."""
    return URLHash(hash_options).decode(decode_options)


def read_option(
    name: str, decode_options: Optional[DecodeOptions] = None, hash_options: Optional[HashOptions] = None
) -> Any:
    """Read one option with a new URLHash built from hash_options."""
    return URLHash(hash_options).read_option(name, decode_options)


def replace_all(
    options_map: Mapping[str, Any],
    encode_options: Optional[EncodeOptions] = None,
    hash_options: Optional[HashOptions] = None,
) -> URLHash:
    """Replace the fragment with a new URLHash built from hash_options."""
    return URLHash(hash_options).replace_all(options_map, encode_options)


def merge_update(
    patch: Mapping[str, Any],
    encode_options: Optional[EncodeOptions] = None,
    decode_options: Optional[DecodeOptions] = None,
    hash_options: Optional[HashOptions] = None,
) -> URLHash:
    """Update the fragment with a new URLHash built from hash_options."""
    return URLHash(hash_options).merge_update(patch, encode_options, decode_options)
