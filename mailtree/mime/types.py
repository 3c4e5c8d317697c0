from __future__ import annotations

import enum
from dataclasses import dataclass, field

DEFAULT_MIMETYPE = "text/plain"
DEFAULT_CHARSET = "us-ascii"


@dataclass(frozen=True)
class ParsedContentType:
    mimetype: str = DEFAULT_MIMETYPE
    # Always populated; "us-ascii" when the header names no charset.
    charset: str = DEFAULT_CHARSET
    # Holds "charset" only when the header carried one explicitly.
    params: dict[str, str] = field(default_factory=dict)

    @property
    def is_multipart(self) -> bool:
        return self.mimetype.startswith("multipart/")

    @property
    def boundary(self) -> str | None:
        return self.params.get("boundary")


class DispositionKind(enum.StrEnum):
    inline = "inline"
    attachment = "attachment"
    form_data = "form-data"
    extension = "extension"


@dataclass(frozen=True)
class DispositionType:
    kind: DispositionKind = DispositionKind.inline
    extension: str | None = None

    @classmethod
    def from_token(cls, token: str) -> DispositionType:
        name = token.lower()
        if name == DispositionKind.inline.value:
            return INLINE
        if name == DispositionKind.attachment.value:
            return ATTACHMENT
        if name == DispositionKind.form_data.value:
            return FORM_DATA
        return cls(kind=DispositionKind.extension, extension=name)

    @property
    def name(self) -> str:
        if self.kind is DispositionKind.extension:
            return self.extension or ""
        return self.kind.value


INLINE = DispositionType(DispositionKind.inline)
ATTACHMENT = DispositionType(DispositionKind.attachment)
FORM_DATA = DispositionType(DispositionKind.form_data)


@dataclass(frozen=True)
class ParsedContentDisposition:
    disposition: DispositionType = INLINE
    params: dict[str, str] = field(default_factory=dict)

    @property
    def filename(self) -> str | None:
        return self.params.get("filename")
