"""
Feed table: every supported endpoint with its parser and normalizer.

The parser is chosen here, per feed, so call sites never special-case the
DOM-walk feed.
"""

from typing import Dict

from . import account, char, corp, eve
from .base import Feed

FEEDS: Dict[str, Feed] = {
    feed.name: feed for module in (eve, account, char, corp) for feed in module.FEEDS
}


def get_feed(name: str) -> Feed:
    try:
        return FEEDS[name]
    except KeyError:
        raise KeyError(f"Unknown feed: {name}") from None


__all__ = ["FEEDS", "Feed", "get_feed"]
