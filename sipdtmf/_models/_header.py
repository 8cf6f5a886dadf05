"""
SIP Headers implementation.

Provides a case-insensitive, order-preserving headers container.
"""

from __future__ import annotations

import typing
from collections.abc import Mapping

from .._utils import EOL, HEADERS, HEADERS_COMPACT

HeaderTypes = typing.Union["Headers", Mapping[str, str]]


class Headers(typing.MutableMapping[str, str]):
    """Case-insensitive SIP headers preserving insertion order.

    Indexing returns the first value of a header; ``add`` and ``get_all``
    handle headers that appear more than once (Route, Via).

    Examples:
        >>> h = Headers({"call-id": "abc", "Content-Type": "application/dtmf-relay"})
        >>> h["CALL-ID"]
        'abc'
        >>> list(h.keys())
        ['Call-ID', 'Content-Type']
    """

    __slots__ = ("_store",)

    @staticmethod
    def _canonical(name: str) -> str:
        """
        Convert header name to canonical form.

        - 'i' -> 'Call-ID' (compact form)
        - 'cseq' -> 'CSeq' (mapped header)
        - 'x-custom' -> 'X-Custom' (title-case fallback)
        """
        name = name.strip()
        lower = name.lower()

        if len(lower) == 1 and lower in HEADERS_COMPACT:
            lower = HEADERS_COMPACT[lower]
        if lower in HEADERS:
            return HEADERS[lower]
        return "-".join(part.capitalize() for part in lower.split("-"))

    def __init__(self, headers: HeaderTypes | None = None) -> None:
        # Dicts keep insertion order; keys are canonical names and each value
        # list keeps repeated occurrences in the order they were added
        self._store: dict[str, list[str]] = {}

        if isinstance(headers, Headers):
            self._store = {name: list(values) for name, values in headers._store.items()}
        elif isinstance(headers, Mapping):
            for key, value in headers.items():
                self[key] = value
        elif headers is not None:
            raise TypeError("headers must be Headers or Mapping")

    @classmethod
    def from_lines(cls, lines: typing.Iterable[str]) -> Headers:
        """
        Build headers from raw 'Name: Value' lines.

        Repeated names are kept, in order.

        Args:
            lines: Header lines, e.g. ["X-Foo: bar", "Content-Type: text/plain"]

        Returns:
            Headers instance

        Raises:
            ValueError: If a line has no ':' separator
        """
        headers = cls()
        for line in lines:
            name, sep, value = line.partition(":")
            if not sep or not name.strip():
                raise ValueError(f"Invalid header line: {line!r}")
            headers.add(name, value.strip())
        return headers

    def __getitem__(self, key: str) -> str:
        return self._store[self._canonical(key)][0]

    def __setitem__(self, key: str, value: str) -> None:
        self._store[self._canonical(key)] = [str(value)]

    def __delitem__(self, key: str) -> None:
        del self._store[self._canonical(key)]

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._canonical(key) in self._store

    def add(self, key: str, value: str) -> None:
        """Append a value, keeping earlier values of the same header."""
        self._store.setdefault(self._canonical(key), []).append(str(value))

    def get_all(self, key: str) -> list[str]:
        """Return every value of a header in order (empty if absent)."""
        return list(self._store.get(self._canonical(key), []))

    def merge(self, other: Headers) -> None:
        """
        Take over every header present in ``other``.

        A name present in both ends up with all of the values from ``other``;
        names only present here are left as they are.

        Args:
            other: Headers to merge in
        """
        for name, values in other._store.items():
            self._store[name] = list(values)

    def to_lines(self) -> list[str]:
        """Convert headers to list of 'Name: Value' strings."""
        return [f"{name}: {value}" for name, values in self._store.items() for value in values]

    def raw(self, encoding: str = "utf-8") -> bytes:
        """Serialize headers to wire format, one CRLF-terminated line each."""
        return "".join(line + EOL for line in self.to_lines()).encode(encoding)

    def __repr__(self) -> str:
        return f"Headers({self._store!r})"


__all__ = ["Headers", "HeaderTypes"]
