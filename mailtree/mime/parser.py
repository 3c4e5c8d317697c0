from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from mailtree.core.metrics import observe_fallback, observe_parsed
from mailtree.mime.body import Body, make_body
from mailtree.mime.headers import HeaderList, scan_headers
from mailtree.mime.params import parse_content_disposition, parse_content_type
from mailtree.mime.types import ParsedContentDisposition, ParsedContentType

logger = logging.getLogger("mailtree")

DEFAULT_MAX_DEPTH = 64


@dataclass(frozen=True)
class ParsedMail:
    """A message or subpart, as views into the caller's buffer.

    For a multipart node ``body`` is the preamble before the first boundary;
    subpart content lives in ``subparts``.
    """

    headers: HeaderList
    ctype: ParsedContentType
    data: bytes = field(repr=False)
    body_start: int
    body_end: int
    subparts: list[ParsedMail] = field(default_factory=list)

    @property
    def body(self) -> bytes:
        return self.data[self.body_start : self.body_end]

    def get_body_encoded(self) -> Body:
        transfer_encoding = self.headers.get_first_value("Content-Transfer-Encoding")
        return make_body(
            data=self.data,
            start=self.body_start,
            end=self.body_end,
            charset=self.ctype.charset,
            transfer_encoding=transfer_encoding,
        )

    def get_body(self) -> str:
        return self.get_body_encoded().get_decoded_as_string()

    def get_body_raw(self) -> bytes:
        return self.get_body_encoded().get_decoded()

    def get_content_disposition(self) -> ParsedContentDisposition:
        value = self.headers.get_first_value("Content-Disposition")
        if value is None:
            return ParsedContentDisposition()
        return parse_content_disposition(value)

    def walk(self) -> Iterator[ParsedMail]:
        yield self
        for part in self.subparts:
            yield from part.walk()


def _content_type(headers: HeaderList) -> ParsedContentType:
    value = headers.get_first_value("Content-Type")
    if value is None:
        return ParsedContentType()
    return parse_content_type(value)


def _split_multipart(
    data: bytes, body_start: int, end: int, boundary: str, *, depth: int, max_depth: int
) -> tuple[int, list[ParsedMail]] | None:
    marker = b"--" + boundary.encode("utf-8")
    ix_preamble_end = data.find(marker, body_start, end)
    if ix_preamble_end < 0:
        logger.debug("boundary %r never occurs; treating multipart body as a leaf", boundary)
        observe_fallback("missing_opening_boundary")
        return None

    subparts: list[ParsedMail] = []
    ix_boundary_end = ix_preamble_end + len(marker)
    while True:
        ix_newline = data.find(b"\n", ix_boundary_end, end)
        if ix_newline < 0:
            break
        ix_part_start = ix_newline + 1

        ix_part_end = data.find(marker, ix_part_start, end)
        if ix_part_end < 0:
            logger.debug("no terminating boundary %r; last part runs to end of input", boundary)
            observe_fallback("missing_terminating_boundary")
            ix_part_end = end

        subparts.append(
            _parse(data, ix_part_start, ix_part_end, depth=depth + 1, max_depth=max_depth)
        )

        ix_boundary_end = ix_part_end + len(marker)
        if ix_boundary_end + 2 > end:
            break
        if data[ix_boundary_end : ix_boundary_end + 2] == b"--":
            break
    return ix_preamble_end, subparts


def _parse(data: bytes, start: int, end: int, *, depth: int, max_depth: int) -> ParsedMail:
    headers, body_start = scan_headers(data, start, end)
    ctype = _content_type(headers)
    body_end = end
    subparts: list[ParsedMail] = []

    boundary = ctype.boundary
    if ctype.is_multipart and boundary is not None and body_start < end:
        if depth >= max_depth:
            logger.warning("multipart nesting exceeds %d levels; keeping part unsplit", max_depth)
            observe_fallback("nesting_limit")
        else:
            split = _split_multipart(
                data, body_start, end, boundary, depth=depth, max_depth=max_depth
            )
            if split is not None:
                body_end, subparts = split

    observe_parsed(multipart=bool(subparts))
    return ParsedMail(
        headers=headers,
        ctype=ctype,
        data=data,
        body_start=body_start,
        body_end=body_end,
        subparts=subparts,
    )


def parse_mail(
    raw: bytes | bytearray | memoryview, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> ParsedMail:
    data = raw if isinstance(raw, bytes) else bytes(raw)
    return _parse(data, 0, len(data), depth=0, max_depth=max_depth)
