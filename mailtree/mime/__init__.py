from __future__ import annotations

from mailtree.mime.body import (  # noqa: F401
    Base64Body,
    BinaryBody,
    Body,
    BodyEncoding,
    EightBitBody,
    QuotedPrintableBody,
    SevenBitBody,
)
from mailtree.mime.charset import CharsetRegistry, decode_charset, lookup_charset  # noqa: F401
from mailtree.mime.encoded_words import decode_encoded_words  # noqa: F401
from mailtree.mime.headers import HeaderList, MailHeader, parse_header, parse_headers  # noqa: F401
from mailtree.mime.params import parse_content_disposition, parse_content_type  # noqa: F401
from mailtree.mime.parser import DEFAULT_MAX_DEPTH, ParsedMail, parse_mail  # noqa: F401
from mailtree.mime.types import (  # noqa: F401
    ATTACHMENT,
    FORM_DATA,
    INLINE,
    DispositionKind,
    DispositionType,
    ParsedContentDisposition,
    ParsedContentType,
)
