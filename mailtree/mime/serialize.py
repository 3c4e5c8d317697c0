from __future__ import annotations

from dataclasses import asdict
from typing import Any

import orjson

from mailtree.errors import HeaderTextError, MailParseError
from mailtree.mime.headers import MailHeader
from mailtree.mime.parser import ParsedMail
from mailtree.mime.summary import MessageSummary


def _header_to_dict(header: MailHeader) -> dict[str, str]:
    try:
        key = header.get_key()
    except HeaderTextError:
        key = header.key.decode("latin-1")
    return {"key": key, "value": header.get_value()}


def _body_preview(node: ParsedMail, limit: int) -> dict[str, Any]:
    body = node.get_body_encoded()
    try:
        text = body.get_decoded_as_string()
    except MailParseError as e:
        return {"error": str(e)}
    truncated = text.encode("utf-8")[:limit].decode("utf-8", errors="ignore")
    return {"text": truncated, "truncated": len(truncated) < len(text)}


def node_to_dict(node: ParsedMail, *, preview_bytes: int | None = None) -> dict[str, Any]:
    disposition = node.get_content_disposition()
    out: dict[str, Any] = {
        "headers": [_header_to_dict(h) for h in node.headers],
        "mimetype": node.ctype.mimetype,
        "charset": node.ctype.charset,
        "params": dict(node.ctype.params),
        "disposition": disposition.disposition.name,
        "disposition_params": dict(disposition.params),
        "transfer_encoding": node.get_body_encoded().encoding.value,
        "body_size": node.body_end - node.body_start,
        "subparts": [node_to_dict(p, preview_bytes=preview_bytes) for p in node.subparts],
    }
    if preview_bytes is not None and not node.subparts:
        out["body"] = _body_preview(node, preview_bytes)
    return out


def summary_to_dict(summary: MessageSummary) -> dict[str, Any]:
    out = asdict(summary)
    for attachment in out["attachments"]:
        attachment["size"] = len(attachment.pop("payload"))
    return out


def dumps(obj: Any, *, indent: bool = True) -> bytes:
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(obj, option=option | orjson.OPT_NON_STR_KEYS)
