"""
tests/test_hash.py — Unit tests for the URLHash coordinator.

The fragment source and sink are a MemoryLocation or MagicMock callables, so
no test depends on any real navigation state.
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from urlhash import (
    REMOVE,
    CallableSource,
    InvalidConfigError,
    InvalidValueTypeError,
    MemoryLocation,
    StructuredMode,
    UnknownFieldError,
    UnsupportedValueError,
    URLHash,
    decode,
    get_options,
    merge_update,
    read_option,
    replace_all,
)
from urlhash.hash import resolve_hash_options


@pytest.fixture
def location() -> MemoryLocation:
    return MemoryLocation()


@pytest.fixture
def url_hash(location: MemoryLocation) -> URLHash:
    return URLHash({"location": location})


# ──────────────────────────────────────────────────────────────
# Construction
# ──────────────────────────────────────────────────────────────

def test_defaults():
    url_hash = URLHash()
    assert url_hash.short_opt is False
    assert url_hash.auto_array is True
    assert url_hash.structured_mode is StructuredMode.DISABLED
    assert isinstance(url_hash.location, MemoryLocation)
    assert url_hash.setters.separate == ";"
    assert url_hash.setters.true == "true"


def test_non_bool_flags_fall_back_to_defaults():
    url_hash = URLHash({"shortOpt": "yes", "autoArray": 0})
    assert url_hash.short_opt is False
    assert url_hash.auto_array is True


def test_hash_callables_override_location(location):
    sink = MagicMock()
    url_hash = URLHash({"location": location, "getHash": lambda: "#a=1", "setHash": sink})
    assert url_hash.decode() == {"a": "1"}
    url_hash.replace_all({"b": None})
    sink.assert_called_once_with("#b")
    assert location.history == []


def test_resolve_hash_options_defaults():
    resolved = resolve_hash_options()
    assert isinstance(resolved.location, MemoryLocation)
    assert resolved.source is resolved.location
    assert resolved.sink is resolved.location
    assert resolved.short_opt is False
    assert resolved.auto_array is True
    assert resolved.mode is StructuredMode.DISABLED
    assert resolved.getters.separate.split("a;b") == ["a", "b"]
    assert resolved.setters.assign == "="


def test_resolve_hash_options_overrides(location):
    get_hash = MagicMock(return_value="#a")
    resolved = resolve_hash_options(
        {
            "location": location,
            "getHash": get_hash,
            "shortOpt": True,
            "autoArray": False,
            "json": "array",
            "setters": {"separate": "&"},
        }
    )
    assert resolved.source.read() == "#a"
    assert resolved.sink is location
    assert resolved.short_opt is True
    assert resolved.auto_array is False
    assert resolved.mode is StructuredMode.ARRAYS
    assert resolved.setters.separate == "&"


def test_invalid_json_option_in_constructor():
    with pytest.raises(InvalidConfigError):
        URLHash({"json": "nope"})


# ──────────────────────────────────────────────────────────────
# decode() and the cache
# ──────────────────────────────────────────────────────────────

def test_decode_reads_location(location, url_hash):
    location.fragment = "#a=1;b"
    assert url_hash.decode() == {"a": "1", "b": None}


def test_same_fragment_returns_cached_object(location, url_hash):
    location.fragment = "#a=1"
    first = url_hash.decode()
    second = url_hash.decode()
    assert second is first


def test_changed_fragment_is_parsed_again(location, url_hash):
    location.fragment = "#a=1"
    first = url_hash.decode()
    location.fragment = "#a=2"
    second = url_hash.decode()
    assert second is not first
    assert second == {"a": "2"}


def test_source_is_read_on_every_decode():
    source = MagicMock(return_value="#a")
    url_hash = URLHash({"getHash": source})
    url_hash.decode()
    url_hash.decode()
    assert source.call_count == 2


def test_explicit_hash_skips_source():
    source = MagicMock(return_value="#from_source")
    url_hash = URLHash({"getHash": source})
    assert url_hash.decode({"hash": "#x=1"}) == {"x": "1"}
    source.assert_not_called()


@pytest.mark.parametrize("fragment", ["", "#"])
def test_empty_fragment_returns_copy_of_defaults(url_hash, fragment):
    defaults = {"a": 1, "nested": {"k": "v"}}
    first = url_hash.decode({"hash": fragment, "defaults": defaults})
    second = url_hash.decode({"hash": fragment, "defaults": defaults})
    assert first == defaults
    assert first is not defaults
    assert first["nested"] is not defaults["nested"]
    assert second is not first


def test_reconfiguring_getters_invalidates_cache(location, url_hash):
    location.fragment = "#a:1"
    assert url_hash.decode() == {"a:1": None}
    url_hash.set_getter("assign", ":")
    assert url_hash.decode() == {"a": "1"}


def test_cache_invalidation_is_logged(location, url_hash, caplog):
    location.fragment = "#a=1"
    url_hash.decode()
    with caplog.at_level(logging.DEBUG, logger="urlhash.hash"):
        url_hash.set_getter("assign", ":")
    assert "Clearing cached options" in caplog.text
    assert "#a=1" in caplog.text


def test_use_json_invalidates_cache(location, url_hash):
    location.fragment = "#list=[1,2]"
    assert url_hash.decode() == {"list": "[1,2]"}
    url_hash.use_json(True)
    assert url_hash.decode() == {"list": [1, 2]}


# ──────────────────────────────────────────────────────────────
# read_option()
# ──────────────────────────────────────────────────────────────

def test_read_option_present(location, url_hash):
    location.fragment = "#mode=fast;debug"
    assert url_hash.read_option("mode") == "fast"
    assert url_hash.read_option("debug", {"default": "unused"}) is None


def test_read_option_default(location, url_hash):
    location.fragment = "#a=1"
    assert url_hash.read_option("missing") is None
    assert url_hash.read_option("missing", {"default": "slow"}) == "slow"


def test_short_option_fallback(location, url_hash):
    location.fragment = "#fast"
    assert url_hash.read_option("mode", {"shortOpt": True}) == "fast"
    assert url_hash.read_option("mode", {"default": "slow"}) == "slow"


def test_short_option_needs_a_single_flag(location, url_hash):
    location.fragment = "#a;b"
    assert url_hash.read_option("mode", {"shortOpt": True, "default": "slow"}) == "slow"
    location.fragment = "#a=1"
    assert url_hash.read_option("mode", {"shortOpt": True, "default": "slow"}) == "slow"


def test_short_option_from_instance(location):
    location.fragment = "#fast"
    url_hash = URLHash({"location": location, "shortOpt": True})
    assert url_hash.read_option("mode") == "fast"
    assert url_hash.read_option("mode", {"shortOpt": False, "default": "slow"}) == "slow"


def test_malformed_json_option_reads_as_default(location):
    location.fragment = "#list=[1,]"
    url_hash = URLHash({"location": location, "json": True})
    assert url_hash.read_option("list", {"default": []}) == []


# ──────────────────────────────────────────────────────────────
# replace_all(), merge_update(), delete_options()
# ──────────────────────────────────────────────────────────────

def test_replace_all_writes_and_caches(location, url_hash):
    location.fragment = "#old=1"
    options = {"a": 1, "b": None}
    assert url_hash.replace_all(options) is url_hash
    assert location.fragment == "#a=1;b"
    assert url_hash.decode() == {"a": 1, "b": None}


def test_round_trip_through_cache(location, url_hash):
    options = {"n": 3, "f": 2.5, "s": "x", "t": True, "z": None}
    url_hash.replace_all(options)
    assert url_hash.decode() == options


def test_merge_update_after_malformed_json_drops_undefined(location):
    location.fragment = "#x=[1,]"
    url_hash = URLHash({"location": location, "json": True})
    url_hash.merge_update({"fast": None})
    assert location.fragment == "#fast"
    assert url_hash.decode() == {"fast": None}
    assert url_hash.read_option("mode", {"shortOpt": True}) == "fast"


def test_merge_update_keeps_untouched_keys(location, url_hash):
    location.fragment = "#a=1;b=2"
    url_hash.merge_update({"b": REMOVE, "c": 3})
    assert location.fragment == "#a=1;c=3"
    assert url_hash.decode() == {"a": "1", "c": 3}
    assert decode(location.fragment) == {"a": "1", "c": "3"}


def test_merge_update_does_not_mutate_returned_map(location, url_hash):
    location.fragment = "#a=1;b=2"
    before = url_hash.decode()
    url_hash.merge_update({"b": REMOVE})
    assert before == {"a": "1", "b": "2"}


def test_merge_update_removing_missing_key(location, url_hash):
    location.fragment = "#a"
    url_hash.merge_update({"nope": REMOVE})
    assert location.fragment == "#a"


def test_merge_update_with_decode_options(location, url_hash):
    url_hash.merge_update({"b": "2"}, decode_options={"defaults": {"a": "1"}})
    assert location.fragment == "#a=1;b=2"


def test_delete_options(location, url_hash):
    location.fragment = "#a=1;b;c=2"
    url_hash.delete_options(["b", "c"])
    assert location.fragment == "#a=1"


def test_unsupported_value_does_not_write():
    sink = MagicMock()
    url_hash = URLHash({"getHash": lambda: "#a=1", "setHash": sink})
    with pytest.raises(UnsupportedValueError):
        url_hash.replace_all({"x": {"k": 1}})
    with pytest.raises(UnsupportedValueError):
        url_hash.merge_update({"x": {"k": 1}})
    sink.assert_not_called()
    assert url_hash.decode() == {"a": "1"}


def test_invalid_value_does_not_write(location, url_hash):
    with pytest.raises(InvalidValueTypeError):
        url_hash.replace_all({"x": object()})
    assert location.history == []


def test_per_call_auto_array():
    url_hash = URLHash({"json": True})
    assert url_hash.encode({"l": [1, 2]}) == "#l=1=2"
    assert url_hash.encode({"l": [1, 2]}, {"autoArray": False}) == "#l=[1,2]"


def test_boolean_round_trip_with_custom_tokens(location):
    url_hash = URLHash(
        {
            "location": location,
            "getters": {"true": "on", "false": "off"},
            "setters": {"true": "on", "false": "off"},
        }
    )
    url_hash.replace_all({"a": True, "b": False})
    assert location.fragment == "#a=on;b=off"
    assert URLHash(
        {"getHash": location.read, "getters": {"true": "on", "false": "off"}}
    ).decode() == {"a": True, "b": False}


# ──────────────────────────────────────────────────────────────
# Configuration
# ──────────────────────────────────────────────────────────────

def test_setter_methods_chain(url_hash):
    result = url_hash.set_setters({"separate": "&"}).set_getters({"separate": "&"}).use_json("array")
    assert result is url_hash
    assert url_hash.encode({"a": 1, "b": 2}) == "#a=1&b=2"


def test_set_getter_unknown_name(url_hash):
    with pytest.raises(UnknownFieldError) as exc_info:
        url_hash.set_getter("bogus", ";")
    assert exc_info.value.field == "bogus"


def test_set_setter_invalid_value(url_hash):
    with pytest.raises(InvalidConfigError) as exc_info:
        url_hash.set_setter("assign", 1)
    assert exc_info.value.field == "assign"


def test_set_getters_requires_mapping(url_hash):
    with pytest.raises(InvalidConfigError):
        url_hash.set_getters("separate")
    with pytest.raises(InvalidConfigError):
        url_hash.set_setters(["separate"])


def test_use_json_invalid(url_hash):
    with pytest.raises(InvalidConfigError):
        url_hash.use_json("both")


@pytest.mark.parametrize(
    "json_option, arrays, objects",
    [
        (False, False, False),
        (True, True, True),
        ("array", True, False),
        ("object", False, True),
    ],
)
def test_serialize_json_flags(json_option, arrays, objects):
    url_hash = URLHash({"json": json_option})
    assert url_hash.serialize_json_array() is arrays
    assert url_hash.serialize_json_object() is objects


def test_object_mode_writes_objects_but_not_arrays():
    url_hash = URLHash({"json": "object", "autoArray": False})
    assert url_hash.encode({"list": [1, {"k": 2}], "o": {"k": 1}}) == '#list=1;o={"k":1}'


# ──────────────────────────────────────────────────────────────
# Module-level wrappers and locations
# ──────────────────────────────────────────────────────────────

def test_module_level_wrappers(location):
    assert get_options({"hash": "#a=1"}) == {"a": "1"}
    assert read_option("mode", {"hash": "#fast", "shortOpt": True}) == "fast"

    replace_all({"a": 1}, hash_options={"location": location})
    assert location.fragment == "#a=1"

    merge_update({"b": True}, hash_options={"location": location})
    assert location.fragment == "#a=1;b=true"
    assert location.history == ["#a=1", "#a=1;b=true"]


def test_callable_source_adapter():
    assert CallableSource(lambda: "#a").read() == "#a"
