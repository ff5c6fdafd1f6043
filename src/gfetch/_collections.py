from __future__ import annotations

import typing
from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode

__all__ = ["URLSearchParams"]


_TYPE_PAIRS = typing.Iterable[typing.Tuple[str, str]]


class URLSearchParams:
    """
    An ordered collection of ``(name, value)`` string pairs, rendered as an
    ``application/x-www-form-urlencoded`` string.

    Names may repeat. :meth:`set` replaces every pair with that name by a
    single one, in the position of the first occurrence; :meth:`append`
    always adds a new pair at the end.

    >>> params = URLSearchParams([("a", "1")])
    >>> params.append("b", "x y")
    >>> params.set("a", "2")
    >>> str(params)
    'a=2&b=x+y'
    >>> params.getall("a")
    ['2']
    """

    def __init__(
        self, pairs: URLSearchParams | Mapping[str, str] | _TYPE_PAIRS | None = None
    ) -> None:
        self._pairs: list[tuple[str, str]] = []
        if pairs is None:
            return
        if isinstance(pairs, URLSearchParams):
            self._pairs = list(pairs._pairs)
        elif isinstance(pairs, Mapping):
            for name in pairs:
                self.append(name, pairs[name])
        else:
            for name, value in pairs:
                self.append(name, value)

    @classmethod
    def parse(cls, query: str | bytes) -> URLSearchParams:
        """Build a parameter set from an encoded query string or request body."""
        if isinstance(query, bytes):
            query = query.decode("utf-8")
        return cls(parse_qsl(query, keep_blank_values=True))

    def append(self, name: str, value: str) -> None:
        self._pairs.append((str(name), str(value)))

    def set(self, name: str, value: str) -> None:
        name, value = str(name), str(value)
        replaced = False
        pairs = []
        for pair in self._pairs:
            if pair[0] != name:
                pairs.append(pair)
            elif not replaced:
                pairs.append((name, value))
                replaced = True
        if not replaced:
            pairs.append((name, value))
        self._pairs = pairs

    def get(self, name: str, default: str | None = None) -> str | None:
        """Returns the first value for ``name``, or ``default``."""
        for key, value in self._pairs:
            if key == name:
                return value
        return default

    def getall(self, name: str) -> list[str]:
        """Returns every value for ``name``, in insertion order."""
        return [value for key, value in self._pairs if key == name]

    def delete(self, name: str) -> None:
        self._pairs = [pair for pair in self._pairs if pair[0] != name]

    def keys(self) -> list[str]:
        return [key for key, _ in self._pairs]

    def items(self) -> list[tuple[str, str]]:
        return list(self._pairs)

    def copy(self) -> URLSearchParams:
        return type(self)(self)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self._pairs)

    def __iter__(self) -> typing.Iterator[tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URLSearchParams):
            return NotImplemented
        return self._pairs == other._pairs

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return urlencode(self._pairs)

    def __bytes__(self) -> bytes:
        return str(self).encode("utf-8")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._pairs!r})"
