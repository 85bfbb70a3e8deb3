"""String and pattern matchers used by the decoder.

A decode-side grammar token may be given either as a plain string or as a
compiled regular expression. Both are wrapped in a matcher exposing the same
two operations, so the decoder never has to inspect the token type itself.
"""

import re
from typing import List, Optional, Pattern, Protocol, Union

MatcherSpec = Union[str, Pattern[str]]


class Matcher(Protocol):
    """Common interface of literal and pattern matchers."""

    def matches(self, text: str) -> bool: ...

    def split(self, text: str) -> List[str]: ...


class LiteralMatcher:
    """Match or split on a plain string.

    ``matches`` looks for the token anywhere in the text, so a true token of
    'on' also matches 'onward'.
    """

    __slots__ = ("token",)

    def __init__(self, token: str) -> None:
        self.token = token

    def matches(self, text: str) -> bool:
        return self.token in text

    def split(self, text: str) -> List[str]:
        return text.split(self.token)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LiteralMatcher) and other.token == self.token

    def __hash__(self) -> int:
        return hash(self.token)

    def __repr__(self) -> str:
        return f"LiteralMatcher({self.token!r})"


class PatternMatcher:
    """Match or split on a regular expression.

    ``matches`` searches anywhere in the text, so anchors must be part of the
    pattern when a full match is wanted (the default true/false patterns are
    anchored).
    """

    __slots__ = ("pattern",)

    def __init__(self, pattern: Pattern[str]) -> None:
        self.pattern = pattern

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None

    def split(self, text: str) -> List[str]:
        # Groups that did not take part in the match split as None
        return [piece for piece in self.pattern.split(text) if piece is not None]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PatternMatcher) and other.pattern == self.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __repr__(self) -> str:
        return f"PatternMatcher({self.pattern.pattern!r})"


def compile_matcher(spec: MatcherSpec) -> Matcher:
    """Wrap a string or compiled pattern in the matching matcher.

    Args:
        spec: Literal token or compiled regular expression

    Returns:
        A LiteralMatcher or PatternMatcher

    Raises:
        TypeError: If spec is neither a string nor a compiled pattern
    """
    if isinstance(spec, str):
        return LiteralMatcher(spec)
    if isinstance(spec, re.Pattern):
        return PatternMatcher(spec)
    raise TypeError(f"expected str or compiled pattern, got {type(spec).__name__}")


def compile_optional_matcher(spec: Union[MatcherSpec, bool]) -> Optional[Matcher]:
    """Like compile_matcher, but ``False`` disables the token and yields None."""
    if spec is False:
        return None
    return compile_matcher(spec)  # type: ignore[arg-type]
