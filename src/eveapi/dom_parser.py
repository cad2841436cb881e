"""
DOM-walk XML parser.

Some feeds nest rowsets several levels deep with the same ``row`` tag and
overlapping attribute names at every level, which the folding parser cannot
key reliably. For those the normalizer walks the tree itself with scoped
path queries relative to the current tag::

    doc = DomParser().parse(raw)
    for group in doc.select(doc.result, "rowset[name=skillGroups]/row"):
        for skill in doc.select(group, "rowset[name=skills]/row"):
            doc.text_at(skill, "requiredAttributes/primaryAttribute")

Each path step matches direct children only, by tag name and an optional
``[attribute=value]`` predicate.
"""

import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from .xml_parser import load_tree

_STEP_RE = re.compile(r"^(?P<tag>[\w.:-]+)(?:\[(?P<attr>[\w.:-]+)=(?P<value>[^\]]*)\])?$")


def _parse_path(path: str) -> List[Tuple[str, dict]]:
    steps = []
    for step in path.strip("/").split("/"):
        match = _STEP_RE.match(step)
        if not match:
            raise ValueError(f"Invalid path step {step!r} in {path!r}")
        attrs = {match.group("attr"): match.group("value")} if match.group("attr") else {}
        steps.append((match.group("tag"), attrs))
    return steps


class DomDocument:
    """A parsed ``<eveapi>`` document with path-based queries."""

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup
        self.root = soup.find(True, recursive=False)

    def select(self, tag: Optional[Tag], path: str) -> List[Tag]:
        """All tags reached from ``tag`` by following ``path``."""
        if tag is None:
            return []
        current = [tag]
        for name, attrs in _parse_path(path):
            current = [
                child
                for node in current
                for child in node.find_all(name, attrs=attrs, recursive=False)
            ]
        return current

    def select_one(self, tag: Optional[Tag], path: str) -> Optional[Tag]:
        found = self.select(tag, path)
        return found[0] if found else None

    def text_at(self, tag: Optional[Tag], path: str, default: Optional[str] = None) -> Optional[str]:
        """Text of the first tag at ``path``; blank text reads as ""."""
        found = self.select_one(tag, path)
        if found is None:
            return default
        text = found.get_text()
        return text if text.strip() else ""

    @property
    def tag(self) -> Optional[str]:
        return self.root.name if self.root is not None else None

    @property
    def version(self) -> Optional[str]:
        return self.root.get("version") if self.root is not None else None

    @property
    def cached_until(self) -> Optional[str]:
        return self.text_at(self.root, "cachedUntil")

    @property
    def error(self) -> Optional[Tuple[str, str]]:
        tag = self.select_one(self.root, "error")
        if tag is None:
            return None
        return tag.get("code", ""), tag.get_text().strip()

    @property
    def result(self) -> Optional[Tag]:
        return self.select_one(self.root, "result")

    @property
    def has_result(self) -> bool:
        return self.result is not None


class DomParser:
    """Parse raw bytes into a DomDocument; malformed input raises ParseError."""

    def parse(self, raw: bytes) -> DomDocument:
        load_tree(raw)
        return DomDocument(BeautifulSoup(raw, "xml"))
