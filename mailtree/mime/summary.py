from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from email.utils import getaddresses

from mailtree.errors import MailParseError
from mailtree.mime.dates import parse_date
from mailtree.mime.normalize import normalize_subject
from mailtree.mime.parser import ParsedMail
from mailtree.mime.types import DispositionKind

logger = logging.getLogger("mailtree")


@dataclass(frozen=True)
class AttachmentSummary:
    filename: str | None
    mimetype: str
    payload: bytes
    is_inline: bool
    content_id: str | None


@dataclass(frozen=True)
class MessageSummary:
    message_id: str | None
    date: datetime | None
    subject: str | None
    subject_norm: str | None
    from_email: str | None
    from_name: str | None
    to_emails: list[str]
    cc_emails: list[str]
    body_text: str | None
    body_html: str | None
    attachments: list[AttachmentSummary]


def _mailboxes(msg: ParsedMail, header_name: str) -> list[tuple[str | None, str]]:
    # Values are already RFC 2047 decoded, so display names come out readable.
    out: list[tuple[str | None, str]] = []
    for name, addr in getaddresses(msg.headers.get_all_values(header_name)):
        addr = addr.strip().lower()
        if addr:
            out.append((name.strip() or None, addr))
    return out


def _filename(part: ParsedMail) -> str | None:
    disposition = part.get_content_disposition()
    return disposition.filename or part.ctype.params.get("name")


def _is_attachment(part: ParsedMail) -> bool:
    kind = part.get_content_disposition().disposition.kind
    if kind is DispositionKind.attachment:
        return True
    return kind is DispositionKind.inline and _filename(part) is not None


def _collect(
    msg: ParsedMail,
) -> tuple[list[str], list[str], list[AttachmentSummary]]:
    text_parts: list[str] = []
    html_parts: list[str] = []
    attachments: list[AttachmentSummary] = []

    for part in msg.walk():
        if part.subparts:
            continue

        if _is_attachment(part):
            try:
                payload = part.get_body_raw()
            except MailParseError as e:
                logger.debug("skipping undecodable attachment: %s", e)
                continue
            disposition = part.get_content_disposition().disposition
            attachments.append(
                AttachmentSummary(
                    filename=_filename(part),
                    mimetype=part.ctype.mimetype,
                    payload=payload,
                    is_inline=disposition.kind is DispositionKind.inline,
                    content_id=(part.headers.get_first_value("Content-ID") or "").strip("<> ")
                    or None,
                )
            )
            continue

        if part.ctype.mimetype not in ("text/plain", "text/html"):
            continue
        try:
            text = part.get_body()
        except MailParseError as e:
            logger.debug("skipping undecodable %s part: %s", part.ctype.mimetype, e)
            continue
        if not text.strip():
            continue
        if part.ctype.mimetype == "text/plain":
            text_parts.append(text.strip())
        else:
            html_parts.append(text.strip())

    return text_parts, html_parts, attachments


def summarize(msg: ParsedMail) -> MessageSummary:
    subject = msg.headers.get_first_value("Subject")
    senders = _mailboxes(msg, "From")
    from_name, from_email = senders[0] if senders else (None, None)
    text_parts, html_parts, attachments = _collect(msg)

    return MessageSummary(
        message_id=(msg.headers.get_first_value("Message-ID") or "").strip() or None,
        date=parse_date(msg.headers.get_first_value("Date")),
        subject=subject,
        subject_norm=normalize_subject(subject),
        from_email=from_email,
        from_name=from_name,
        to_emails=[addr for _name, addr in _mailboxes(msg, "To")],
        cc_emails=[addr for _name, addr in _mailboxes(msg, "Cc")],
        body_text="\n\n".join(text_parts) or None,
        body_html="\n\n".join(html_parts) or None,
        attachments=attachments,
    )
