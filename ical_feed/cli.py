from __future__ import annotations

import argparse
import asyncio
from datetime import datetime, timezone
import json
import sys
from typing import Sequence

from .config import FeedSettings
from .constants import FEED_FORMAT
from .errors import FeedFetchError, FeedParseError
from .models import DateRange
from .source import IcsEventSource


def _parse_instant(raw: str) -> datetime:
    value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _parse_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME:VALUE, got {raw!r}")
    return name.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ical_feed",
        description="Fetch an ICS feed and print its events for a date range as JSON.",
    )
    p.add_argument("url")
    p.add_argument("--start", required=True, type=_parse_instant)
    p.add_argument("--end", required=True, type=_parse_instant)
    p.add_argument(
        "--header",
        action="append",
        default=[],
        type=_parse_header,
        help="extra request header as NAME:VALUE (repeatable)",
    )
    return p


async def _run(args: argparse.Namespace, settings: FeedSettings | None) -> list[dict]:
    source = IcsEventSource(settings)
    meta = source.parse_meta(
        {
            "url": args.url,
            "format": FEED_FORMAT,
            "extra_params": {"headers": dict(args.header)},
        }
    )
    if meta is None:
        raise FeedFetchError("Feed URL is required")
    result = await source.fetch_events(meta, DateRange(start=args.start, end=args.end))
    return [event.model_dump(mode="json", by_alias=True) for event in result.raw_events]


def main(argv: Sequence[str] | None = None, *, settings: FeedSettings | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.end <= args.start:
        print("--end must be after --start", file=sys.stderr)
        return 2
    try:
        events = asyncio.run(_run(args, settings))
    except (FeedFetchError, FeedParseError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    json.dump(events, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0
