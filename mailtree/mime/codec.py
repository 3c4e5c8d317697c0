from __future__ import annotations

import base64
import binascii
import re

from mailtree.errors import TransferDecodeError

_BASE64_WHITESPACE = b" \t\r\n\x0b\x0c"
_QP_TRAILING_WHITESPACE_RE = re.compile(rb"[ \t]+(?=\r?\n|\Z)")


def decode_base64(data: bytes) -> bytes:
    compact = data.translate(None, _BASE64_WHITESPACE)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise TransferDecodeError("base64", str(e)) from e


def pad_base64(data: bytes) -> bytes:
    return data + b"=" * (-len(data) % 4)


def decode_quoted_printable(data: bytes, *, header: bool = False) -> bytes:
    if not header:
        # Whitespace at the end of an encoded line is transport padding (RFC 2045 6.7).
        data = _QP_TRAILING_WHITESPACE_RE.sub(b"", data)
        if data.endswith(b"\r\n"):
            data = data[:-2]
        elif data.endswith(b"\n"):
            data = data[:-1]
    # a2b_qp leaves malformed "=XY" escapes as literal text instead of failing.
    return binascii.a2b_qp(data, header=header)
