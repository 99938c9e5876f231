"""Read-only multi-valued mappings for request headers and query strings.

Both are lists of ``(name, value)`` pairs where a name may repeat.
Indexing returns the first value; ``get_list`` returns every value.
Header names are matched case-insensitively, query names exactly.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl


class Fields(Mapping[str, str]):
    """Ordered ``(name, value)`` pairs, looked up by name."""

    __slots__ = ("_fold", "_pairs")

    def __init__(self, pairs: Iterable[tuple[str, str]] = (), *, fold_case: bool = False) -> None:
        self._fold = fold_case
        self._pairs = tuple((self._key(name), value) for name, value in pairs)

    @classmethod
    def from_asgi_headers(cls, raw: Iterable[tuple[bytes, bytes]]) -> Fields:
        """Decode ASGI header byte pairs (latin-1, per HTTP/1.1)."""
        return cls(
            ((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw),
            fold_case=True,
        )

    @classmethod
    def from_query_string(cls, query_string: bytes) -> Fields:
        """Parse a raw query string, keeping blank values."""
        return cls(parse_qsl(query_string.decode("latin-1"), keep_blank_values=True))

    def _key(self, name: str) -> str:
        return name.lower() if self._fold else name

    def get_list(self, name: str) -> list[str]:
        """Every value given for *name*, in order."""
        key = self._key(name)
        return [value for n, value in self._pairs if n == key]

    def __getitem__(self, name: str) -> str:
        key = self._key(name)
        for n, value in self._pairs:
            if n == key:
                return value
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(n for n, _ in self._pairs))

    def __len__(self) -> int:
        return len(dict.fromkeys(n for n, _ in self._pairs))

    def __repr__(self) -> str:
        return f"Fields({list(self._pairs)!r})"
