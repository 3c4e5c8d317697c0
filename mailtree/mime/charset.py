from __future__ import annotations

import codecs
import logging
from collections.abc import Callable
from functools import lru_cache

logger = logging.getLogger("mailtree")

CharsetDecoder = Callable[[bytes], str]

_LATIN1_FALLBACK_ERRORS = "mailtree-latin1"

# Labels mail clients emit for what is really a superset encoding.
_SUPERSET_ALIASES: dict[str, str] = {
    "gb2312": "gbk",
    "x-gbk": "gbk",
    "csgb2312": "gbk",
    "ks_c_5601-1987": "cp949",
    "ks_c_5601-1989": "cp949",
    "euc-kr": "cp949",
    "x-windows-949": "cp949",
    "iso-8859-9": "cp1254",
    "iso8859-9": "cp1254",
    "latin5": "cp1254",
    "tis-620": "cp874",
    "iso-8859-11": "cp874",
    "shift_jis": "cp932",
    "x-sjis": "cp932",
    "ms_kanji": "cp932",
    "windows-31j": "cp932",
    "unicode-1-1-utf-8": "utf-8",
    "x-unicode20utf8": "utf-8",
}

_WINDOWS_1252_LABELS = (
    "us-ascii",
    "ascii",
    "ansi_x3.4-1968",
    "us",
    "iso-8859-1",
    "iso8859-1",
    "iso_8859-1",
    "iso-ir-100",
    "latin1",
    "latin-1",
    "l1",
    "cp819",
    "ibm819",
    "windows-1252",
    "cp1252",
    "x-cp1252",
)


def _latin1_fallback(exc: UnicodeError) -> tuple[str, int]:
    if not isinstance(exc, UnicodeDecodeError):
        raise exc
    return exc.object[exc.start : exc.end].decode("latin-1"), exc.end


codecs.register_error(_LATIN1_FALLBACK_ERRORS, _latin1_fallback)


def decode_latin1(data: bytes) -> str:
    return data.decode("latin-1")


def _decode_windows_1252(data: bytes) -> str:
    return data.decode("cp1252", errors=_LATIN1_FALLBACK_ERRORS)


def normalize_charset_name(name: str | None) -> str:
    key = (name or "").strip().strip("\"'").strip().lower()
    # RFC 2231 allows "charset*language"; the language tag does not affect decoding.
    return key.split("*", 1)[0]


@lru_cache(maxsize=256)
def _codec_decoder(name: str) -> CharsetDecoder | None:
    try:
        codec_name = codecs.lookup(name).name
        # bytes.decode rejects bytes-to-bytes codecs such as base64 or zlib.
        b"".decode(codec_name)
    except (LookupError, ValueError):
        return None

    def _decode(data: bytes) -> str:
        try:
            return data.decode(codec_name, errors="replace")
        except (UnicodeError, ValueError):
            logger.debug("codec %s cannot decode leniently, using latin-1", codec_name)
            return decode_latin1(data)

    return _decode


class CharsetRegistry:
    """Maps normalized charset labels to decoding callables.

    Labels without an explicit registration are resolved through the Python
    codec registry. ``decode`` is total: unknown labels fall back to Latin-1,
    which keeps ASCII content byte-identical.
    """

    def __init__(self) -> None:
        self._decoders: dict[str, CharsetDecoder] = {}

    def register(self, name: str, decoder: CharsetDecoder) -> None:
        key = normalize_charset_name(name)
        if not key:
            raise ValueError("charset name must not be empty")
        self._decoders[key] = decoder

    def lookup(self, name: str | None) -> CharsetDecoder | None:
        key = normalize_charset_name(name)
        if not key:
            return None
        decoder = self._decoders.get(key)
        if decoder is not None:
            return decoder
        return _codec_decoder(key)

    def is_known(self, name: str | None) -> bool:
        return self.lookup(name) is not None

    def decode(self, name: str | None, data: bytes) -> str:
        decoder = self.lookup(name)
        if decoder is None:
            logger.debug("unknown charset %r, decoding as latin-1", name)
            return decode_latin1(data)
        return decoder(data)


def _build_default_registry() -> CharsetRegistry:
    reg = CharsetRegistry()
    for label in _WINDOWS_1252_LABELS:
        reg.register(label, _decode_windows_1252)
    for label, target in _SUPERSET_ALIASES.items():
        decoder = _codec_decoder(target)
        if decoder is not None:
            reg.register(label, decoder)
    return reg


registry = _build_default_registry()


def lookup_charset(name: str | None) -> CharsetDecoder | None:
    return registry.lookup(name)


def decode_charset(name: str | None, data: bytes) -> str:
    return registry.decode(name, data)
