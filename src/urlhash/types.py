"""Type definitions for urlhash."""

from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Pattern, TypedDict, Union

from .constants import (
    DEFAULT_GET_ASSIGN,
    DEFAULT_GET_FALSE,
    DEFAULT_GET_SEPARATE,
    DEFAULT_GET_TRUE,
    DEFAULT_SET_ASSIGN,
    DEFAULT_SET_FALSE,
    DEFAULT_SET_SEPARATE,
    DEFAULT_SET_TRUE,
    JSON_ALL,
    JSON_ARR,
    JSON_MODE_ARRAY,
    JSON_MODE_OBJECT,
    JSON_OBJ,
)
from .errors import InvalidConfigError
from .matchers import Matcher, MatcherSpec, compile_matcher, compile_optional_matcher


class _Undefined:
    """Singleton marking a field with no usable value."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self) -> str:
        return "UNDEFINED"


# Value of a field whose JSON text could not be parsed
UNDEFINED = _Undefined()
# Patch value that deletes an option in URLHash.merge_update()
REMOVE = UNDEFINED

# Option values
ScalarValue = Union[str, int, float, bool, None]
OptionValue = Union[ScalarValue, List[Any], Dict[str, Any]]
OptionMap = Dict[str, Any]

# Accepted values of the json option
JsonOption = Union[bool, Literal["array", "object"]]


class StructuredMode(Enum):
    """Which embedded JSON values are recognised and written."""

    DISABLED = "disabled"
    ARRAYS = "arrays"
    OBJECTS = "objects"
    BOTH = "both"

    @classmethod
    def from_option(cls, value: JsonOption) -> "StructuredMode":
        """Map the json option (False, True, 'array', 'object') to a mode."""
        if value is False:
            return cls.DISABLED
        if value is True:
            return cls.BOTH
        if value == JSON_MODE_ARRAY:
            return cls.ARRAYS
        if value == JSON_MODE_OBJECT:
            return cls.OBJECTS
        raise InvalidConfigError(f"Invalid json option: {value!r}", field="json")

    @property
    def pattern(self) -> Optional[Pattern[str]]:
        """Shape a raw value must have to be parsed as JSON."""
        return _MODE_PATTERNS[self]

    @property
    def allows_arrays(self) -> bool:
        return self in (StructuredMode.ARRAYS, StructuredMode.BOTH)

    @property
    def allows_objects(self) -> bool:
        return self in (StructuredMode.OBJECTS, StructuredMode.BOTH)


_MODE_PATTERNS = {
    StructuredMode.DISABLED: None,
    StructuredMode.ARRAYS: JSON_ARR,
    StructuredMode.OBJECTS: JSON_OBJ,
    StructuredMode.BOTH: JSON_ALL,
}


class ArrayStrategy(Enum):
    """How a list value is written to the fragment."""

    FLAT = "flat"  # name=a=b=c
    STRUCTURED = "structured"  # name=["a","b","c"]


class GetterOptions(TypedDict, total=False):
    """Decode-side grammar tokens.

    Attributes:
        separate: Splits the fragment into options (default: ';')
        assign: Splits an option into name and values (default: '=')
        true: Matches a true value, or False to disable (default: /^(true|yes)$/i)
        false: Matches a false value, or False to disable (default: /^(false|no)$/i)
    """

    separate: MatcherSpec
    assign: MatcherSpec
    true: Union[MatcherSpec, Literal[False]]
    false: Union[MatcherSpec, Literal[False]]


class SetterOptions(TypedDict, total=False):
    """Encode-side grammar tokens.

    Attributes:
        separate: Written between options (default: ';')
        assign: Written between a name and its value (default: '=')
        true: Written for True, or False to write a bare flag (default: 'true')
        false: Written for False, or False to write a bare flag (default: 'false')
    """

    separate: str
    assign: str
    true: Union[str, Literal[False]]
    false: Union[str, Literal[False]]


class HashOptions(TypedDict, total=False):
    """Options for a URLHash instance.

    Attributes:
        shortOpt: Allow the short option fallback in read_option (default: False)
        autoArray: Pick the array format per array (default: True)
        json: Embedded JSON, True/'array'/'object'/False (default: False)
        getters: Decode-side grammar tokens
        setters: Encode-side grammar tokens
        getHash: Returns the current fragment string
        setHash: Commits a new fragment string
        location: Object with read() and write() used when getHash/setHash are absent
    """

    shortOpt: bool
    autoArray: bool
    json: JsonOption
    getters: GetterOptions
    setters: SetterOptions
    getHash: Callable[[], str]
    setHash: Callable[[str], Any]
    location: Any


class DecodeOptions(TypedDict, total=False):
    """Per-call options for decoding.

    Attributes:
        defaults: Values present unless the fragment overrides them
        hash: Decode this string instead of reading the fragment source
        shortOpt: Override the instance's shortOpt (read_option only)
        default: Value returned by read_option when nothing matches
    """

    defaults: OptionMap
    hash: str
    shortOpt: bool
    default: Any


class EncodeOptions(TypedDict, total=False):
    """Per-call options for encoding.

    Attributes:
        autoArray: Override the instance's autoArray
    """

    autoArray: bool


class DecodeGrammar:
    """Resolved decode-side grammar."""

    def __init__(
        self,
        separate: Matcher,
        assign: Matcher,
        true: Optional[Matcher],
        false: Optional[Matcher],
    ) -> None:
        self.separate = separate
        self.assign = assign
        self.true = true
        self.false = false

    @classmethod
    def default(cls) -> "DecodeGrammar":
        return cls(
            separate=compile_matcher(DEFAULT_GET_SEPARATE),
            assign=compile_matcher(DEFAULT_GET_ASSIGN),
            true=compile_optional_matcher(DEFAULT_GET_TRUE),
            false=compile_optional_matcher(DEFAULT_GET_FALSE),
        )


class EncodeGrammar:
    """Resolved encode-side grammar."""

    def __init__(
        self,
        separate: str = DEFAULT_SET_SEPARATE,
        assign: str = DEFAULT_SET_ASSIGN,
        true: Union[str, Literal[False]] = DEFAULT_SET_TRUE,
        false: Union[str, Literal[False]] = DEFAULT_SET_FALSE,
    ) -> None:
        self.separate = separate
        self.assign = assign
        self.true = true
        self.false = false


class ResolvedHashOptions:
    """Resolved URLHash options with defaults applied."""

    def __init__(
        self,
        source: Any,
        sink: Any,
        location: Any,
        short_opt: bool = False,
        auto_array: bool = True,
        mode: StructuredMode = StructuredMode.DISABLED,
        getters: Optional[DecodeGrammar] = None,
        setters: Optional[EncodeGrammar] = None,
    ) -> None:
        self.source = source
        self.sink = sink
        self.location = location
        self.short_opt = short_opt
        self.auto_array = auto_array
        self.mode = mode
        self.getters = getters if getters is not None else DecodeGrammar.default()
        self.setters = setters if setters is not None else EncodeGrammar()
