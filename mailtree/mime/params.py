from __future__ import annotations

from dataclasses import dataclass, field

from mailtree.mime.types import (
    DEFAULT_CHARSET,
    DispositionType,
    ParsedContentDisposition,
    ParsedContentType,
)


@dataclass(frozen=True)
class ParamContent:
    value: str
    params: dict[str, str] = field(default_factory=dict)


def _unquote(value: str) -> str:
    if len(value) > 1 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def parse_param_content(content: str) -> ParamContent:
    # Known limitation: a ";" inside a quoted value ends the parameter early.
    primary, *pieces = content.split(";")
    params: dict[str, str] = {}
    for kv in pieces:
        idx = kv.find("=")
        if idx < 0:
            continue
        key = kv[:idx].strip().lower()
        params[key] = _unquote(kv[idx + 1 :].strip())
    return ParamContent(value=primary.strip(), params=params)


def parse_content_type(header: str) -> ParsedContentType:
    parsed = parse_param_content(header)
    return ParsedContentType(
        mimetype=parsed.value.lower(),
        charset=parsed.params.get("charset") or DEFAULT_CHARSET,
        params=parsed.params,
    )


def parse_content_disposition(header: str) -> ParsedContentDisposition:
    parsed = parse_param_content(header)
    return ParsedContentDisposition(
        disposition=DispositionType.from_token(parsed.value),
        params=parsed.params,
    )
