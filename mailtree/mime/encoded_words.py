"""RFC 2047 encoded-word decoding for unfolded header values.

Decoding is lenient: a token that cannot be decoded for any reason is kept
verbatim, so no header text is ever dropped. Whitespace that only separates
two decoded words is removed (RFC 2047 section 6.2); all other whitespace is
kept.
"""

from __future__ import annotations

import base64
import binascii
import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from mailtree.mime.charset import lookup_charset
from mailtree.mime.codec import decode_quoted_printable, pad_base64

logger = logging.getLogger("mailtree")

_WORD_START = "=?"
_WORD_END = "?="
_DELIMITER_CHARS = frozenset("\"()<>")


class TokenKind(enum.StrEnum):
    text = "text"
    whitespace = "whitespace"
    word = "word"
    newline = "newline"


@dataclass(frozen=True)
class HeaderToken:
    kind: TokenKind
    text: str


def is_boundary(text: str, ix: int | None) -> bool:
    # Indexes address code points, so no position can split a character.
    if ix is None or ix < 0 or ix >= len(text):
        return True
    c = text[ix]
    return c.isspace() or c in _DELIMITER_CHARS


def decode_word(encoded: str) -> str | None:
    """Decode ``charset?enc?payload`` (an encoded word without its markers)."""
    ix_delim1 = encoded.find("?")
    if ix_delim1 < 0:
        return None
    ix_delim2 = encoded.find("?", ix_delim1 + 1)
    if ix_delim2 < 0:
        return None

    charset = encoded[:ix_delim1]
    transfer_coding = encoded[ix_delim1 + 1 : ix_delim2]
    payload = encoded[ix_delim2 + 1 :]

    decoder = lookup_charset(charset)
    if decoder is None:
        logger.debug("encoded word with unknown charset %r kept verbatim", charset)
        return None

    try:
        if transfer_coding in ("B", "b"):
            # Some mailers omit the trailing "=" padding.
            raw = base64.b64decode(pad_base64(payload.encode("ascii")), validate=True)
        elif transfer_coding in ("Q", "q"):
            raw = decode_quoted_printable(payload.encode("utf-8"), header=True)
        else:
            return None
    except (binascii.Error, ValueError):
        logger.debug("undecodable %s encoded word kept verbatim", transfer_coding)
        return None
    return decoder(raw)


def _text_or_whitespace(text: str) -> HeaderToken:
    if text.strip():
        return HeaderToken(TokenKind.text, text)
    return HeaderToken(TokenKind.whitespace, text)


def tokenize_line(line: str) -> list[HeaderToken]:
    tokens: list[HeaderToken] = []
    ix_search = 0
    while True:
        ix_start = line.find(_WORD_START, ix_search)
        if ix_start < 0:
            tokens.append(_text_or_whitespace(line[ix_search:]))
            return tokens

        ix_begin = ix_start + len(_WORD_START)
        if not is_boundary(line, ix_start - 1):
            tokens.append(HeaderToken(TokenKind.text, line[ix_search:ix_begin]))
            ix_search = ix_begin
            continue

        tokens.append(_text_or_whitespace(line[ix_search:ix_start]))

        ix_end = line.find(_WORD_END, ix_begin)
        # "?=" also appears inside Q payloads ("?Q?=E2"), so only a delimited one closes the word.
        while ix_end >= 0 and not is_boundary(line, ix_end + len(_WORD_END)):
            ix_end = line.find(_WORD_END, ix_end + len(_WORD_END))

        if ix_end < 0:
            tokens.append(HeaderToken(TokenKind.text, _WORD_START))
            ix_search = ix_begin
            continue

        decoded = decode_word(line[ix_begin:ix_end])
        if decoded is None:
            tokens.append(HeaderToken(TokenKind.text, line[ix_start : ix_end + len(_WORD_END)]))
        else:
            tokens.append(HeaderToken(TokenKind.word, decoded))
        ix_search = ix_end + len(_WORD_END)


def tokenize(lines: Iterable[str]) -> list[HeaderToken]:
    tokens: list[HeaderToken] = []
    for i, line in enumerate(lines):
        if i:
            tokens.append(HeaderToken(TokenKind.newline, " "))
        tokens.extend(tokenize_line(line))
    return tokens


def _render(tokens: list[HeaderToken]) -> str:
    out: list[str] = []
    pending: list[HeaderToken] = []
    after_word = False
    for tok in tokens:
        if tok.kind in (TokenKind.whitespace, TokenKind.newline):
            if after_word:
                pending.append(tok)
            else:
                out.append(tok.text)
            continue
        if tok.kind is TokenKind.word:
            # Whitespace between two decoded words is dropped.
            pending.clear()
            out.append(tok.text)
            after_word = True
            continue
        out.extend(p.text for p in pending)
        pending.clear()
        out.append(tok.text)
        after_word = False
    out.extend(p.text for p in pending)
    return "".join(out)


def decode_encoded_words(text: str) -> str:
    return _render(tokenize_line(text))


def decode_folded_lines(lines: Iterable[str]) -> str:
    return _render(tokenize(lines))
