from __future__ import annotations

from prometheus_client import Counter

_MESSAGES_PARSED_TOTAL = Counter(
    "mailtree_messages_parsed_total",
    "Total messages and subparts decomposed by the MIME parser.",
    labelnames=("kind",),
)
_PARSE_FALLBACKS_TOTAL = Counter(
    "mailtree_parse_fallbacks_total",
    "Lenient recovery decisions taken while decomposing messages.",
    labelnames=("kind",),
)
_BODY_DECODE_FAILURES_TOTAL = Counter(
    "mailtree_body_decode_failures_total",
    "Body accessor calls that failed to decode.",
    labelnames=("encoding",),
)

_enabled = True


def set_metrics_enabled(enabled: bool) -> None:
    global _enabled
    _enabled = enabled


def observe_parsed(*, multipart: bool) -> None:
    if not _enabled:
        return
    _MESSAGES_PARSED_TOTAL.labels(kind="multipart" if multipart else "leaf").inc()


def observe_fallback(kind: str) -> None:
    if not _enabled:
        return
    _PARSE_FALLBACKS_TOTAL.labels(kind=kind or "unknown").inc()


def observe_decode_failure(encoding: str) -> None:
    if not _enabled:
        return
    _BODY_DECODE_FAILURES_TOTAL.labels(encoding=encoding or "unknown").inc()
