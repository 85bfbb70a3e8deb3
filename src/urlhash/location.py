"""Where fragment strings are read from and written to.

URLHash only talks to a FragmentSource and a FragmentSink. In a browser both
would be ``location.hash``; here the default is MemoryLocation, an in-process
holder that plays the same role. The getHash/setHash callables accepted by
URLHash are adapted with CallableSource and CallableSink.
"""

from typing import Any, Callable, List, Protocol


class FragmentSource(Protocol):
    def read(self) -> str: ...


class FragmentSink(Protocol):
    def write(self, fragment: str) -> None: ...


class MemoryLocation:
    """In-memory fragment holder, usable as both source and sink.

    Every written fragment is appended to ``history``.
    """

    def __init__(self, fragment: str = "") -> None:
        self.fragment = fragment
        self.history: List[str] = []

    def read(self) -> str:
        return self.fragment

    def write(self, fragment: str) -> None:
        self.fragment = fragment
        self.history.append(fragment)

    def __repr__(self) -> str:
        return f"MemoryLocation({self.fragment!r})"


class CallableSource:
    """Adapt a zero-argument function to FragmentSource."""

    def __init__(self, func: Callable[[], str]) -> None:
        self.func = func

    def read(self) -> str:
        return self.func()


class CallableSink:
    """Adapt a one-argument function to FragmentSink."""

    def __init__(self, func: Callable[[str], Any]) -> None:
        self.func = func

    def write(self, fragment: str) -> None:
        self.func(fragment)
