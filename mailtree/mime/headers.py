from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import overload

from mailtree.errors import HeaderSyntaxError, HeaderTextError
from mailtree.mime.charset import decode_latin1
from mailtree.mime.encoded_words import decode_folded_lines

_SP = 0x20
_TAB = 0x09
_CR = 0x0D
_LF = 0x0A
_COLON = 0x3A


def _as_bytes(raw: bytes | bytearray | memoryview) -> bytes:
    return raw if isinstance(raw, bytes) else bytes(raw)


def _unfolded_lines(text: str) -> list[str]:
    return [line.rstrip("\r").lstrip() for line in text.split("\n")]


@dataclass(frozen=True)
class MailHeader:
    """One header record as offsets into the message buffer.

    ``key`` and ``value`` are the raw, still-folded bytes. ``get_key`` and
    ``get_value`` unfold (and for values, decode RFC 2047 words) on demand.
    """

    data: bytes = field(repr=False)
    key_start: int
    key_end: int
    value_start: int
    value_end: int

    @property
    def key(self) -> bytes:
        return self.data[self.key_start : self.key_end]

    @property
    def value(self) -> bytes:
        return self.data[self.value_start : self.value_end]

    def get_key(self) -> str:
        try:
            text = self.key.decode("utf-8")
        except UnicodeDecodeError as e:
            raise HeaderTextError(f"header key is not valid UTF-8: {self.key!r}") from e
        return " ".join(_unfolded_lines(text))

    def get_value(self) -> str:
        raw = self.value
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            text = decode_latin1(raw)
        return decode_folded_lines(_unfolded_lines(text))

    def matches(self, name: str) -> bool:
        return self.key.decode("latin-1").strip().lower() == name.strip().lower()

    def __repr__(self) -> str:
        return f"MailHeader(key={self.key!r}, value={self.value!r})"


class HeaderList(Sequence[MailHeader]):
    """Headers in message order; name lookups are case-insensitive."""

    __slots__ = ("_headers",)

    def __init__(self, headers: Sequence[MailHeader] = ()) -> None:
        self._headers: tuple[MailHeader, ...] = tuple(headers)

    @overload
    def __getitem__(self, index: int) -> MailHeader: ...

    @overload
    def __getitem__(self, index: slice) -> HeaderList: ...

    def __getitem__(self, index: int | slice) -> MailHeader | HeaderList:
        if isinstance(index, slice):
            return HeaderList(self._headers[index])
        return self._headers[index]

    def __len__(self) -> int:
        return len(self._headers)

    def __iter__(self) -> Iterator[MailHeader]:
        return iter(self._headers)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderList):
            return self._headers == other._headers
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HeaderList({list(self._headers)!r})"

    def get_first_header(self, name: str) -> MailHeader | None:
        for header in self._headers:
            if header.matches(name):
                return header
        return None

    def get_all_headers(self, name: str) -> list[MailHeader]:
        return [h for h in self._headers if h.matches(name)]

    def get_first_value(self, name: str) -> str | None:
        header = self.get_first_header(name)
        return header.get_value() if header is not None else None

    def get_all_values(self, name: str) -> list[str]:
        return [h.get_value() for h in self.get_all_headers(name)]


def _scan_header(data: bytes, start: int, end: int) -> tuple[MailHeader, int]:
    if start >= end:
        raise HeaderSyntaxError("empty header")
    if data[start] in (_SP, _TAB):
        raise HeaderSyntaxError(
            "header cannot start with whitespace; it is likely a continuation of a missing header"
        )

    ix_colon = -1
    ix = start
    while ix < end:
        c = data[ix]
        if c == _COLON:
            ix_colon = ix
            break
        if c == _LF:
            raise HeaderSyntaxError("unexpected newline in header key")
        ix += 1
    if ix_colon < 0:
        raise HeaderSyntaxError("unable to find the end of the header key")

    ix = ix_colon + 1
    while ix < end and data[ix] == _SP:
        ix += 1
    value_start = value_end = ix

    while ix < end:
        c = data[ix]
        if c == _LF:
            if ix + 1 < end and data[ix + 1] in (_SP, _TAB):
                ix += 1
                continue
            ix += 1
            break
        if c != _CR:
            value_end = ix + 1
        ix += 1

    header = MailHeader(
        data=data,
        key_start=start,
        key_end=ix_colon,
        value_start=value_start,
        value_end=value_end,
    )
    return header, ix


def scan_headers(data: bytes, start: int, end: int) -> tuple[HeaderList, int]:
    """Read the header block of ``data[start:end]``; returns the body offset."""
    headers: list[MailHeader] = []
    ix = start
    while ix < end:
        c = data[ix]
        if c == _LF:
            ix += 1
            break
        if c == _CR:
            if ix + 1 < end and data[ix + 1] == _LF:
                ix += 2
                break
            raise HeaderSyntaxError("headers were followed by a lone CR character")
        header, ix = _scan_header(data, ix, end)
        headers.append(header)
    return HeaderList(headers), ix


def parse_header(raw: bytes | bytearray | memoryview) -> tuple[MailHeader, int]:
    data = _as_bytes(raw)
    return _scan_header(data, 0, len(data))


def parse_headers(raw: bytes | bytearray | memoryview) -> tuple[HeaderList, int]:
    data = _as_bytes(raw)
    return scan_headers(data, 0, len(data))
