from __future__ import annotations

from datetime import UTC, datetime

from mailtree.mime.parser import parse_mail
from mailtree.mime.summary import summarize

MIXED = (
    b"Message-ID: <abc@example.com>\n"
    b"Date: Sun, 02 Oct 2016 07:06:22 -0700\n"
    b"Subject: =?utf-8?Q?Re:_caf=C3=A9?=\n"
    b"From: \"Alice Example\" <Alice@Example.com>\n"
    b"To: bob@example.com, Carol <CAROL@example.com>\n"
    b"Cc: dave@example.com\n"
    b"Content-Type: multipart/mixed; boundary=mix\n"
    b"\n"
    b"--mix\n"
    b"Content-Type: multipart/alternative; boundary=alt\n"
    b"\n"
    b"--alt\n"
    b"Content-Type: text/plain; charset=utf-8\n"
    b"\n"
    b"Hello there\n"
    b"--alt\n"
    b"Content-Type: text/html\n"
    b"\n"
    b"<p>Hello there</p>\n"
    b"--alt--\n"
    b"--mix\n"
    b"Content-Type: image/png; name=\"logo.png\"\n"
    b"Content-Disposition: inline\n"
    b"Content-ID: <logo@x>\n"
    b"Content-Transfer-Encoding: base64\n"
    b"\n"
    b"iVBORw==\n"
    b"--mix\n"
    b"Content-Type: application/pdf\n"
    b"Content-Disposition: attachment; filename=\"report.pdf\"\n"
    b"Content-Transfer-Encoding: base64\n"
    b"\n"
    b"JVBERi0=\n"
    b"--mix--\n"
)


def test_summarize_multipart_message() -> None:
    summary = summarize(parse_mail(MIXED))
    assert summary.message_id == "<abc@example.com>"
    assert summary.date == datetime(2016, 10, 2, 14, 6, 22, tzinfo=UTC)
    assert summary.subject == "Re: café"
    assert summary.subject_norm == "café"
    assert summary.from_email == "alice@example.com"
    assert summary.from_name == "Alice Example"
    assert summary.to_emails == ["bob@example.com", "carol@example.com"]
    assert summary.cc_emails == ["dave@example.com"]
    assert summary.body_text == "Hello there"
    assert summary.body_html == "<p>Hello there</p>"

    logo, report = summary.attachments
    assert logo.filename == "logo.png"
    assert logo.mimetype == "image/png"
    assert logo.is_inline
    assert logo.content_id == "logo@x"
    assert logo.payload == b"\x89PNG"
    assert report.filename == "report.pdf"
    assert not report.is_inline
    assert report.content_id is None
    assert report.payload == b"%PDF-"


def test_summarize_decodes_display_names() -> None:
    summary = summarize(
        parse_mail(
            b"From: =?utf-8?Q?Jos=C3=A9?= <JOSE@example.com>\n"
            b"To: undisclosed-recipients:;\n"
            b"\n"
            b"hi\n"
        )
    )
    assert summary.from_name == "José"
    assert summary.from_email == "jose@example.com"
    assert summary.to_emails == []


def test_summarize_plain_message() -> None:
    summary = summarize(parse_mail(b"Subject: hi\n\n  just text  \n"))
    assert summary.message_id is None
    assert summary.date is None
    assert summary.from_email is None
    assert summary.from_name is None
    assert summary.to_emails == []
    assert summary.body_text == "just text"
    assert summary.body_html is None
    assert summary.attachments == []


def test_summarize_skips_undecodable_parts() -> None:
    summary = summarize(
        parse_mail(
            b"Content-Type: multipart/mixed; boundary=b\n\n"
            b"--b\n"
            b"Content-Transfer-Encoding: base64\n\n"
            b"!!not base64!!\n"
            b"--b\n"
            b"Content-Disposition: attachment; filename=x.bin\n"
            b"Content-Transfer-Encoding: base64\n\n"
            b"***\n"
            b"--b--\n"
        )
    )
    assert summary.body_text is None
    assert summary.attachments == []
