from __future__ import annotations

import re

# Reply/forward markers, including counted ("Re[2]:") and common localized forms.
_REPLY_PREFIX_RE = re.compile(r"^(?:re|fw|fwd|aw|wg|sv|vs)(?:\[\d+\])?\s*:\s*", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_subject(subject: str | None) -> str | None:
    if subject is None:
        return None
    s = _WHITESPACE_RE.sub(" ", subject).strip()
    while (stripped := _REPLY_PREFIX_RE.sub("", s, count=1)) != s:
        s = stripped.strip()
    return s or None
