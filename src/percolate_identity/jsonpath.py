"""Path queries over decoded JSON documents.

A small JSONPath subset used to pull identity fields out of provider
payloads:

- ``$``            root (every query starts with it)
- ``.name``        object field
- ``['name']``     object field (quoted, for names with dots, spaces or brackets)
- ``[0]``, ``[-1]`` array index
- ``[*]``, ``.*``  every array item / object value

A query can match several values (wildcards); ``get`` returns the first.
Missing paths and structural mismatches are reported as "not found", never
raised. Only a malformed query raises ``PathQueryError``.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from functools import lru_cache
from typing import Any

from percolate_identity.errors import PathQueryError

_NAME = re.compile(r"[^.\[\]]+")
_INDEX = re.compile(r"-?\d+")
# Quoted names run to the matching quote, so they may contain dots and brackets.
_QUOTED = re.compile(r"""\s*(['"])(.*?)\1\s*\]""", re.DOTALL)


class Segment(ABC):
    """One step of a path query."""

    @abstractmethod
    def children(self, node: Any) -> Iterator[Any]:
        """Yield the values this step selects from ``node``."""


class Field(Segment):
    def __init__(self, name: str):
        self.name = name

    def children(self, node: Any) -> Iterator[Any]:
        if isinstance(node, Mapping) and self.name in node:
            yield node[self.name]

    def __repr__(self) -> str:
        return f"Field({self.name!r})"


class Index(Segment):
    def __init__(self, position: int):
        self.position = position

    def children(self, node: Any) -> Iterator[Any]:
        if _is_array(node):
            try:
                yield node[self.position]
            except IndexError:
                return

    def __repr__(self) -> str:
        return f"Index({self.position})"


class Wildcard(Segment):
    def children(self, node: Any) -> Iterator[Any]:
        if isinstance(node, Mapping):
            yield from node.values()
        elif _is_array(node):
            yield from node

    def __repr__(self) -> str:
        return "Wildcard()"


def _is_array(node: Any) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray))


class JsonPath:
    """Compiled path query.

    Example:
        >>> path = JsonPath("$.emails[0].address")
        >>> path.get({"emails": [{"address": "ada@example.com"}]})
        ('ada@example.com', True)
        >>> path.get({"emails": []})
        (None, False)
    """

    def __init__(self, query: str):
        self.query = query
        self.segments = tuple(_parse(query))

    def find(self, document: Any) -> Iterator[Any]:
        """Yield every value the query matches, in document order."""
        yield from _match(document, self.segments)

    def get(self, document: Any) -> tuple[Any, bool]:
        """Return ``(value, True)`` for the first match or ``(None, False)``."""
        for value in self.find(document):
            return value, True
        return None, False

    def __repr__(self) -> str:
        return f"JsonPath({self.query!r})"


def _match(node: Any, segments: tuple[Segment, ...]) -> Iterator[Any]:
    if not segments:
        yield node
        return
    head, rest = segments[0], segments[1:]
    for child in head.children(node):
        yield from _match(child, rest)


def _parse(query: str) -> Iterator[Segment]:
    if not query or query[0] != "$":
        raise PathQueryError(query, "must start with '$'")

    pos = 1
    while pos < len(query):
        char = query[pos]

        if char == ".":
            pos += 1
            if query.startswith("*", pos):
                yield Wildcard()
                pos += 1
                continue
            match = _NAME.match(query, pos)
            if not match:
                raise PathQueryError(query, f"expected a field name at position {pos}")
            yield Field(match.group())
            pos = match.end()

        elif char == "[":
            quoted = _QUOTED.match(query, pos + 1)
            if quoted:
                yield Field(quoted.group(2))
                pos = quoted.end()
                continue
            end = query.find("]", pos)
            if end == -1:
                raise PathQueryError(query, f"unterminated '[' at position {pos}")
            yield _parse_bracket(query, query[pos + 1 : end].strip())
            pos = end + 1

        else:
            raise PathQueryError(query, f"unexpected {char!r} at position {pos}")


def _parse_bracket(query: str, body: str) -> Segment:
    if body == "*":
        return Wildcard()
    if _INDEX.fullmatch(body):
        return Index(int(body))
    raise PathQueryError(query, f"unsupported selector [{body}]")


@lru_cache(maxsize=256)
def compile_path(query: str) -> JsonPath:
    """Parse a query once and reuse it.

    Raises:
        PathQueryError: Query is malformed
    """
    return JsonPath(query)


def get(query: str, document: Any) -> tuple[Any, bool]:
    """Evaluate ``query`` against ``document``.

    Args:
        query: Path query, e.g. ``$.account[0].userPrincipalName``
        document: Decoded JSON (dicts, lists and scalars)

    Returns:
        ``(value, True)`` for the first match, ``(None, False)`` when the
        path does not exist in the document

    Raises:
        PathQueryError: Query is malformed
    """
    return compile_path(query).get(document)
