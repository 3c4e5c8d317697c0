from __future__ import annotations

import argparse
import logging
import sys

from mailtree.core.config import get_settings
from mailtree.core.metrics import set_metrics_enabled
from mailtree.errors import MailParseError
from mailtree.mime.parser import parse_mail
from mailtree.mime.serialize import dumps, node_to_dict, summary_to_dict
from mailtree.mime.summary import summarize


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailtree", description="Decompose an RFC 5322 / MIME message into a JSON tree."
    )
    parser.add_argument("path", help="message file, or - for stdin")
    parser.add_argument("--bodies", action="store_true", help="include decoded body previews")
    parser.add_argument("--summary", action="store_true", help="print a message summary instead")
    parser.add_argument("--compact", action="store_true", help="emit single-line JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    set_metrics_enabled(settings.ENABLE_PROMETHEUS_METRICS)

    try:
        raw = _read_input(args.path)
    except OSError as e:
        print(f"mailtree: cannot read {args.path}: {e}", file=sys.stderr)
        return 1

    try:
        parsed = parse_mail(raw, max_depth=settings.MAX_NESTING_DEPTH)
    except MailParseError as e:
        print(f"mailtree: {e}", file=sys.stderr)
        return 1

    if args.summary:
        payload = summary_to_dict(summarize(parsed))
    else:
        preview = settings.MAX_BODY_PREVIEW_BYTES if args.bodies else None
        payload = node_to_dict(parsed, preview_bytes=preview)

    sys.stdout.buffer.write(dumps(payload, indent=not args.compact) + b"\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
