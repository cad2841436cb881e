#!/usr/bin/env python3
"""
Fetch one EVE Online API feed and print the normalized result as JSON.

Examples:
    eveapi ref_types
    eveapi character_sheet --key-id 123 --vcode abc --character-id 90000001
    eveapi character_name --param ids=90000001,90000002
    eveapi sovereignty --parquet data/sovereignty.parquet
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .client import EveApi
from .config import DEFAULT_API_URL, ApiConfig
from .errors import EveApiError
from .feeds import FEEDS

logger = logging.getLogger(__name__)


def parse_params(pairs: List[str]) -> Dict[str, str]:
    """Turn ["ids=1,2", "row_count=50"] into a dict."""
    params = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Expected name=value, got {pair!r}")
        params[name.strip()] = value.strip()
    return params


def items_to_dataframe(items: Dict[str, Any]) -> pd.DataFrame:
    """
    One row per entity, with the entity key in an ``id`` column.

    Nested values (skills, contents, ...) are stored as JSON strings so the
    table stays flat for Parquet.
    """
    rows = []
    for key, value in items.items():
        row: Dict[str, Any] = {"id": key}
        if isinstance(value, dict):
            for field, field_value in value.items():
                if isinstance(field_value, (dict, list)):
                    field_value = json.dumps(field_value, sort_keys=True)
                row[field] = field_value
        else:
            row["value"] = value
        rows.append(row)
    return pd.DataFrame(rows)


def save_parquet(items: Dict[str, Any], parquet_path: Path) -> None:
    df = items_to_dataframe(items)
    parquet_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(parquet_path, index=False, engine="pyarrow")
    logger.info(f"Saved {len(df)} rows to {parquet_path}")


def list_feeds() -> None:
    for feed in FEEDS.values():
        auth = "auth" if feed.requires_auth else "anon"
        params = ", ".join(feed.params)
        print(f"{feed.name:24} {auth:5} {feed.path:40} {params}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Fetch an EVE Online XML API feed and print it as JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("feed", nargs="?", help="Feed name (see --list)")
    parser.add_argument("--list", action="store_true", help="List available feeds and exit")
    parser.add_argument("--api-url", default=DEFAULT_API_URL, help=f"API host (default: {DEFAULT_API_URL})")
    parser.add_argument("--key-id", type=int, help="API key ID")
    parser.add_argument("--vcode", help="API key verification code")
    parser.add_argument("--character-id", type=int, help="Default character ID")
    parser.add_argument("--corporation-id", type=int, help="Default corporation ID")
    parser.add_argument(
        "--param",
        "-p",
        action="append",
        default=[],
        help="Extra feed parameter as name=value, e.g. ids=1,2 (repeatable)",
    )
    parser.add_argument("--output", "-o", type=str, default="", help="Write JSON to this file")
    parser.add_argument("--parquet", type=str, default="", help="Also write the feed items as Parquet")
    parser.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds")
    parser.add_argument("--retries", type=int, default=3, help="Maximum request attempts")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Log debug output")
    args = parser.parse_args(argv)

    level = logging.WARNING if args.quiet else logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.list:
        list_feeds()
        return 0
    if not args.feed:
        parser.error("a feed name is required (see --list)")
    if args.feed not in FEEDS:
        parser.error(f"unknown feed {args.feed!r} (see --list)")

    try:
        params = parse_params(args.param)
    except ValueError as e:
        parser.error(str(e))

    config = ApiConfig(
        api_url=args.api_url,
        key_id=args.key_id,
        verification_code=args.vcode,
        character_id=args.character_id,
        corporation_id=args.corporation_id,
        timeout=args.timeout,
        max_retries=args.retries,
    )
    api = EveApi(config)

    start = time.time()
    try:
        result = api.fetch(args.feed, **params)
    except EveApiError as e:
        logger.error(f"Error fetching {args.feed}: {e}")
        return 1
    logger.info(f"Fetched {args.feed} in {time.time() - start:.2f}s")

    if result is None:
        logger.info(f"{args.feed}: nothing to report")
        payload: Any = None
    elif not result.ok:
        logger.error(str(result))
        payload = result.as_dict()
    else:
        payload = result.as_dict()
        if args.parquet:
            save_parquet(result.items, Path(args.parquet))

    text = json.dumps(payload, indent=2, sort_keys=True)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Saved JSON: {output_path}")
    else:
        sys.stdout.write(text + "\n")

    return 2 if result is not None and not result.ok else 0


if __name__ == "__main__":
    raise SystemExit(main())
