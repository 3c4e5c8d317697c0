from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar

from mailtree.core.metrics import observe_decode_failure
from mailtree.errors import BinaryBodyError, TransferDecodeError
from mailtree.mime.charset import decode_charset
from mailtree.mime.codec import decode_base64, decode_quoted_printable


class BodyEncoding(enum.StrEnum):
    seven_bit = "7bit"
    eight_bit = "8bit"
    binary = "binary"
    base64 = "base64"
    quoted_printable = "quoted-printable"

    @classmethod
    def from_header(cls, value: str | None) -> BodyEncoding:
        name = (value or "").strip().lower()
        try:
            return cls(name)
        except ValueError:
            return cls.seven_bit


@dataclass(frozen=True)
class Body:
    encoding: ClassVar[BodyEncoding]

    data: bytes = field(repr=False)
    start: int
    end: int

    def get_raw(self) -> bytes:
        return self.data[self.start : self.end]

    def get_decoded(self) -> bytes:
        return self.get_raw()

    def get_decoded_as_string(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class TextBody(Body):
    charset: str

    def get_as_string(self) -> str:
        return decode_charset(self.charset, self.get_raw())

    def get_decoded_as_string(self) -> str:
        return self.get_as_string()


@dataclass(frozen=True)
class SevenBitBody(TextBody):
    encoding: ClassVar[BodyEncoding] = BodyEncoding.seven_bit


@dataclass(frozen=True)
class EightBitBody(TextBody):
    encoding: ClassVar[BodyEncoding] = BodyEncoding.eight_bit


@dataclass(frozen=True)
class BinaryBody(Body):
    encoding: ClassVar[BodyEncoding] = BodyEncoding.binary

    def get_decoded_as_string(self) -> str:
        observe_decode_failure(self.encoding.value)
        raise BinaryBodyError("message body of type binary cannot be parsed into a string")


@dataclass(frozen=True)
class EncodedBody(Body):
    charset: str

    def get_decoded_as_string(self) -> str:
        return decode_charset(self.charset, self.get_decoded())


@dataclass(frozen=True)
class Base64Body(EncodedBody):
    encoding: ClassVar[BodyEncoding] = BodyEncoding.base64

    def get_decoded(self) -> bytes:
        try:
            return decode_base64(self.get_raw())
        except TransferDecodeError:
            observe_decode_failure(self.encoding.value)
            raise


@dataclass(frozen=True)
class QuotedPrintableBody(EncodedBody):
    encoding: ClassVar[BodyEncoding] = BodyEncoding.quoted_printable

    def get_decoded(self) -> bytes:
        return decode_quoted_printable(self.get_raw())


def make_body(
    *, data: bytes, start: int, end: int, charset: str, transfer_encoding: str | None
) -> Body:
    encoding = BodyEncoding.from_header(transfer_encoding)
    match encoding:
        case BodyEncoding.binary:
            return BinaryBody(data=data, start=start, end=end)
        case BodyEncoding.base64:
            return Base64Body(data=data, start=start, end=end, charset=charset)
        case BodyEncoding.quoted_printable:
            return QuotedPrintableBody(data=data, start=start, end=end, charset=charset)
        case BodyEncoding.eight_bit:
            return EightBitBody(data=data, start=start, end=end, charset=charset)
        case _:
            return SevenBitBody(data=data, start=start, end=end, charset=charset)
