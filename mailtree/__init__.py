from __future__ import annotations

from mailtree.errors import (  # noqa: F401
    BinaryBodyError,
    HeaderSyntaxError,
    HeaderTextError,
    MailParseError,
    TransferDecodeError,
)
from mailtree.mime import (  # noqa: F401
    HeaderList,
    MailHeader,
    ParsedMail,
    parse_content_disposition,
    parse_content_type,
    parse_header,
    parse_headers,
    parse_mail,
)

__version__ = "0.1.0"
