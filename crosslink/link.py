"""Declarative two-endpoint links that are set up on a router."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

from .channel import channel
from .errors import TypeMismatch
from .router import Router

_INT_SUFFIXES = frozenset(
    {"u8", "u16", "u32", "u64", "u128", "usize", "i8", "i16", "i32", "i64", "i128", "isize"}
)


def _snake_case(name: str) -> str:
    spaced = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", spaced)
    words = [word for word in re.split(r"[^0-9A-Za-z]+", spaced) if word]
    return "_".join(words).lower()


@dataclass(frozen=True)
class EndpointDef:
    """One end of a link: its handle name and the message types it sends and receives."""

    handle_name: str
    sends: type
    receives: type

    def __post_init__(self) -> None:
        if not isinstance(self.handle_name, str) or not self.handle_name.isidentifier():
            raise ValueError(f"invalid endpoint handle name: {self.handle_name!r}")


@dataclass(frozen=True)
class LinkDefinition:
    """A link between two endpoints, with the marker keys used on a router.

    ``markers`` maps ``<Handle>Send`` and ``<Handle>Recv`` for each endpoint to
    the key under which the corresponding channel end is registered.
    """

    link_id: str
    first: EndpointDef
    second: EndpointDef
    buffer_size: int
    name: str = field(init=False)
    setup_name: str = field(init=False)
    markers: dict[str, str] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.link_id, str):
            raise ValueError("link id must be a string")
        name = _snake_case(self.link_id)
        if not name:
            raise ValueError(f"link id {self.link_id!r} yields no usable name")
        size = self.buffer_size
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ValueError(
                f"Failed to parse usize from buffer_size value: {size!r}"
            )
        if self.first.sends != self.second.receives:
            raise TypeMismatch(
                f"'{self.first.handle_name}' sends {self.first.sends.__qualname__} but "
                f"'{self.second.handle_name}' receives {self.second.receives.__qualname__}"
            )
        if self.first.receives != self.second.sends:
            raise TypeMismatch(
                f"'{self.first.handle_name}' receives {self.first.receives.__qualname__} but "
                f"'{self.second.handle_name}' sends {self.second.sends.__qualname__}"
            )
        if self.first.handle_name == self.second.handle_name:
            raise ValueError(f"both endpoints are named '{self.first.handle_name}'")
        markers = {
            f"{endpoint.handle_name}{suffix}": f"{name}.marker.{endpoint.handle_name}{suffix}"
            for endpoint in (self.first, self.second)
            for suffix in ("Send", "Recv")
        }
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "setup_name", f"setup_{name}")
        object.__setattr__(self, "markers", markers)

    def setup(
        self, router: Router, buffer_size_override: int | None = None
    ) -> tuple[EndpointDef, EndpointDef]:
        """Create both channels of the link and register their ends on ``router``."""
        size = self.buffer_size if buffer_size_override is None else buffer_size_override
        first, second = self.first, self.second
        first_tx, second_rx = channel(size)
        second_tx, first_rx = channel(size)
        router.register_sender(self.markers[f"{first.handle_name}Send"], first.sends, first_tx)
        router.register_receiver(
            self.markers[f"{first.handle_name}Recv"], second.sends, first_rx
        )
        router.register_sender(
            self.markers[f"{second.handle_name}Send"], second.sends, second_tx
        )
        router.register_receiver(
            self.markers[f"{second.handle_name}Recv"], first.sends, second_rx
        )
        return first, second


def define_crosslink(
    link_id: str, first: EndpointDef, second: EndpointDef, buffer_size: int
) -> LinkDefinition:
    """Define a link between two endpoints whose message types mirror each other."""
    return LinkDefinition(link_id, first, second, buffer_size)


class _Lexeme(NamedTuple):
    kind: str
    value: str
    offset: int


_LEXEME_RE = re.compile(
    r"""
    (?P<ws>\s+|//[^\n]*)
    |(?P<str>"(?:[^"\\]|\\.)*")
    |(?P<int>\d[0-9A-Za-z_]*)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<path>::)
    |(?P<punct>[:,{}])
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}


def _lex(text: str) -> Iterator[_Lexeme]:
    offset = 0
    while offset < len(text):
        match = _LEXEME_RE.match(text, offset)
        if match is None:
            raise ValueError(f"unexpected character {text[offset]!r} at offset {offset}")
        kind = match.lastgroup
        if kind != "ws":
            yield _Lexeme(kind, match.group(), offset)
        offset = match.end()


class _Parser:
    def __init__(self, text: str, types: Mapping[str, type]) -> None:
        self._items = list(_lex(text))
        self._pos = 0
        self._types = types

    def _peek(self) -> _Lexeme | None:
        return self._items[self._pos] if self._pos < len(self._items) else None

    def _next(self, expected: str) -> _Lexeme:
        lexeme = self._peek()
        if lexeme is None:
            raise ValueError(f"unexpected end of input, expected {expected}")
        self._pos += 1
        return lexeme

    @staticmethod
    def _fail(message: str, at: _Lexeme) -> ValueError:
        return ValueError(f"{message} at offset {at.offset}")

    def _keyword(self, word: str, message: str) -> None:
        lexeme = self._next(f"'{word}'")
        if lexeme.kind != "ident" or lexeme.value != word:
            raise self._fail(message, lexeme)

    def _ident(self) -> str:
        lexeme = self._next("an identifier")
        if lexeme.kind != "ident":
            raise self._fail(f"expected an identifier, found {lexeme.value!r}", lexeme)
        return lexeme.value

    def _punct(self, char: str) -> None:
        lexeme = self._next(f"'{char}'")
        if lexeme.kind != "punct" or lexeme.value != char:
            raise self._fail(f"expected '{char}', found {lexeme.value!r}", lexeme)

    def _optional_punct(self, char: str) -> bool:
        lexeme = self._peek()
        if lexeme is not None and lexeme.kind == "punct" and lexeme.value == char:
            self._pos += 1
            return True
        return False

    def _string(self) -> str:
        lexeme = self._next("a string literal")
        if lexeme.kind != "str":
            raise self._fail(f"expected a string literal, found {lexeme.value!r}", lexeme)
        return re.sub(
            r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), lexeme.value[1:-1]
        )

    def _integer(self) -> int:
        lexeme = self._next("an integer literal")
        if lexeme.kind != "int":
            raise self._fail(f"expected an integer literal, found {lexeme.value!r}", lexeme)
        match = re.fullmatch(r"([0-9_]+?)_*([a-z][a-z0-9]*)?", lexeme.value)
        if match is None or (match.group(2) and match.group(2) not in _INT_SUFFIXES):
            raise self._fail(
                f"Failed to parse usize from buffer_size value: {lexeme.value!r}", lexeme
            )
        return int(match.group(1).replace("_", ""))

    def _type(self) -> type:
        start = self._peek()
        parts = [self._ident()]
        while (lexeme := self._peek()) is not None and lexeme.kind == "path":
            self._pos += 1
            parts.append(self._ident())
        key = "::".join(parts)
        if key not in self._types:
            raise self._fail(f"unknown message type '{key}'", start)
        return self._types[key]

    def _endpoint(self) -> EndpointDef:
        handle = self._ident()
        self._punct("{")
        self._keyword("sends", "Expected 'sends'")
        self._punct(":")
        sends = self._type()
        self._punct(",")
        self._keyword("receives", "Expected 'receives'")
        self._punct(":")
        receives = self._type()
        self._optional_punct(",")
        closing = self._next("'}'")
        if closing.kind != "punct" or closing.value != "}":
            raise self._fail("Unexpected tokens in endpoint def", closing)
        self._punct(",")
        return EndpointDef(handle, sends, receives)

    def parse(self) -> LinkDefinition:
        self._keyword("link_id", "Expected 'link_id' keyword")
        self._punct(":")
        link_id = self._string()
        self._punct(",")
        first = self._endpoint()
        second = self._endpoint()
        self._keyword("buffer_size", "Expected 'buffer_size'")
        self._punct(":")
        buffer_size = self._integer()
        self._optional_punct(",")
        leftover = self._peek()
        if leftover is not None:
            raise self._fail(f"unexpected token {leftover.value!r}", leftover)
        return define_crosslink(link_id, first, second, buffer_size)


def parse_link_spec(text: str, types: Mapping[str, type]) -> LinkDefinition:
    """Parse a link written as ``link_id: "...", A { sends: X, receives: Y }, ...``.

    Message type names are looked up in ``types``.
    """
    return _Parser(text, types).parse()