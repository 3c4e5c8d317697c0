from __future__ import annotations

import pytest

from mailtree.errors import BinaryBodyError, TransferDecodeError
from mailtree.mime.body import (
    Base64Body,
    BinaryBody,
    BodyEncoding,
    EightBitBody,
    QuotedPrintableBody,
    SevenBitBody,
)
from mailtree.mime.parser import parse_mail


@pytest.mark.parametrize(
    "raw, body_type",
    [
        (b"Content-Type: text/plain\r\n\r\nhello", SevenBitBody),
        (b"Content-Transfer-Encoding: 7bit\r\n\r\nhello", SevenBitBody),
        (b"Content-Transfer-Encoding: 8BIT\r\n\r\nhello", EightBitBody),
        (b"Content-Transfer-Encoding: Quoted-Printable\r\n\r\nhello", QuotedPrintableBody),
        (b"Content-Transfer-Encoding: base64\r\n\r\naGVsbG8=", Base64Body),
        (b"Content-Transfer-Encoding: binary\r\n\r\nhello", BinaryBody),
        (b"Content-Transfer-Encoding: x-uuencode\r\n\r\nhello", SevenBitBody),
    ],
)
def test_transfer_encoding_selects_body_variant(raw: bytes, body_type: type) -> None:
    body = parse_mail(raw).get_body_encoded()
    assert isinstance(body, body_type)
    assert body.get_raw() == raw.split(b"\r\n\r\n", 1)[1]


def test_unknown_transfer_encoding_reads_as_7bit() -> None:
    assert BodyEncoding.from_header("x-uuencode") is BodyEncoding.seven_bit
    assert BodyEncoding.from_header(None) is BodyEncoding.seven_bit
    assert BodyEncoding.from_header(" BASE64 ") is BodyEncoding.base64


def test_base64_body_ignores_whitespace() -> None:
    mail = parse_mail(b"Content-Transfer-Encoding: base64\r\n\r\naGVsbG 8gd\r\n29ybGQ=")
    body = mail.get_body_encoded()
    assert body.get_raw() == b"aGVsbG 8gd\r\n29ybGQ="
    assert body.get_decoded() == b"hello world"
    assert mail.get_body() == "hello world"


def test_bad_base64_body_fails_decoding_only() -> None:
    mail = parse_mail(b"Content-Transfer-Encoding: base64\r\n\r\nnot*base64!")
    assert mail.get_body_encoded().get_raw() == b"not*base64!"
    with pytest.raises(TransferDecodeError) as excinfo:
        mail.get_body_raw()
    assert excinfo.value.encoding == "base64"
    with pytest.raises(TransferDecodeError):
        mail.get_body()


def test_quoted_printable_soft_breaks_and_escapes() -> None:
    mail = parse_mail(
        b"Content-Type: text/plain; charset=utf-8\r\n"
        b"Content-Transfer-Encoding: quoted-printable\r\n\r\n"
        b"caf=C3=A9 au=\r\n lait =3D good"
    )
    assert mail.get_body_raw() == "café au lait = good".encode()
    assert mail.get_body() == "café au lait = good"


def test_binary_body() -> None:
    mail = parse_mail(b"Content-Transfer-Encoding: binary\r\n\r\n######")
    body = mail.get_body_encoded()
    assert body.get_raw() == b"######"
    assert body.get_decoded() == b"######"
    with pytest.raises(BinaryBodyError):
        body.get_decoded_as_string()


def test_8bit_body_decodes_with_declared_charset() -> None:
    mail = parse_mail(
        b"Content-Type: text/plain; charset=iso-8859-1\r\n"
        b"Content-Transfer-Encoding: 8bit\r\n\r\n"
        b"caf\xe9"
    )
    assert mail.get_body() == "café"
    assert mail.get_body_raw() == b"caf\xe9"


def test_body_with_unknown_charset_decodes_as_latin1() -> None:
    mail = parse_mail(
        b"Content-Type: text/plain; charset=x-unknown\r\n\r\n"
        b"hello world \xa9"
    )
    assert mail.ctype.charset == "x-unknown"
    assert mail.get_body() == "hello world ©"


def test_utf7_body() -> None:
    mail = parse_mail(
        b"Content-Type: text/plain; charset=utf-7\r\n\r\n"
        b"Hi Mom +Jjo-"
    )
    assert mail.get_body() == "Hi Mom ☺"


def test_header_case_does_not_matter() -> None:
    mail = parse_mail(
        b"ConTENT-tyPE: text/html; CHARSET=UTF-8\r\n"
        b"content-transfer-ENCODING: BASE64\r\n\r\n"
        b"PGI+aGk8L2I+"
    )
    assert mail.ctype.mimetype == "text/html"
    assert mail.ctype.charset == "UTF-8"
    assert mail.get_body() == "<b>hi</b>"


def test_multipart_node_body_is_preamble() -> None:
    mail = parse_mail(b"Content-Type: multipart/mixed; boundary=x\n\nintro\n--x\n\na\n--x--\n")
    assert mail.get_body() == "intro\n"
    assert mail.subparts[0].get_body() == "a\n"


def test_quoted_printable_drops_line_end_padding_and_final_break() -> None:
    mail = parse_mail(
        b"Content-Transfer-Encoding: quoted-printable\r\n\r\n"
        b"line one   \r\nline two\t\r\nsoft= \r\nbreak\r\n"
    )
    assert mail.get_body_raw() == b"line one\r\nline two\r\nsoftbreak"

    mail = parse_mail(b"Content-Transfer-Encoding: quoted-printable\n\nline one   \nline two\t\n")
    assert mail.get_body() == "line one\nline two"


def test_quoted_printable_keeps_encoded_trailing_space() -> None:
    mail = parse_mail(b"Content-Transfer-Encoding: quoted-printable\n\nkeep=20\nthis=09\n")
    assert mail.get_body() == "keep \nthis\t"
