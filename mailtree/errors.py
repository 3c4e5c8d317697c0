from __future__ import annotations


class MailParseError(ValueError):
    pass


class HeaderSyntaxError(MailParseError):
    pass


class HeaderTextError(MailParseError):
    pass


class TransferDecodeError(MailParseError):
    def __init__(self, encoding: str, message: str) -> None:
        super().__init__(f"{encoding}: {message}")
        self.encoding = encoding


class BinaryBodyError(MailParseError):
    pass
