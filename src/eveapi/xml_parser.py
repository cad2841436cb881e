"""
Attribute-folding XML parser.

Turns an EVE API document into plain dicts and lists:

* attributes become dict entries;
* child elements become entries named after their tag; tags listed in
  ``repeated_tag_names`` (``row`` and ``rowset`` by default) are always
  lists, even with a single occurrence;
* every list of elements is then folded into a dict keyed by the first
  attribute from ``key_attrs`` that all siblings carry. If none of them is
  present on every sibling the list is left as it is. Rowsets are always
  keyed by their ``name``.

So ``<rowset name="skills"><row typeID="3300" level="5"/></rowset>`` parsed
with ``key_attrs=("typeID",)`` gives::

    {"rowset": {"skills": {"name": "skills", "row": {"3300": {"typeID": "3300", "level": "5"}}}}}
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from lxml import etree

from .errors import ParseError

logger = logging.getLogger(__name__)

DEFAULT_REPEATED_TAGS = ("row", "rowset")

# Rowsets are always keyed by their name attribute
ROWSET_KEY = "name"

_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def load_tree(raw: bytes) -> etree._Element:
    """Parse raw bytes strictly, raising ParseError on malformed input."""
    if not raw or not raw.strip():
        raise ParseError("Empty response body")
    try:
        return etree.fromstring(raw, parser=_XML_PARSER)
    except etree.XMLSyntaxError as e:
        raise ParseError(f"Malformed XML: {e}") from e


@dataclass
class ParsedDocument:
    """Folded form of one ``<eveapi>`` document."""

    root: Dict[str, Any]
    tag: Optional[str] = None

    @property
    def version(self) -> Optional[str]:
        return self.root.get("version")

    @property
    def cached_until(self) -> Optional[str]:
        return self.root.get("cachedUntil")

    @property
    def error(self) -> Optional[Tuple[str, str]]:
        """(code, message) of the error envelope, if the document has one."""
        error = self.root.get("error")
        if error is None:
            return None
        if isinstance(error, dict):
            return error.get("code", ""), error.get("content", "").strip()
        return "", error.strip()

    @property
    def result(self) -> Dict[str, Any]:
        result = self.root.get("result")
        return result if isinstance(result, dict) else {}

    @property
    def has_result(self) -> bool:
        return "result" in self.root

    def rowset(self, name: str, node: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """The named rowset under ``node`` (the result by default), or {}."""
        node = self.result if node is None else node
        rowsets = node.get("rowset")
        if isinstance(rowsets, dict):
            rowset = rowsets.get(name)
            if isinstance(rowset, dict):
                return rowset
        elif isinstance(rowsets, list):
            for rowset in rowsets:
                if isinstance(rowset, dict) and rowset.get("name") == name:
                    return rowset
        return {}

    def rows(self, name: str, node: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Rows of the named rowset keyed by their key attribute, or {}."""
        rows = self.rowset(name, node).get("row", {})
        return rows if isinstance(rows, dict) else {}

    def row_list(self, name: str, node: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Rows of the named rowset in document order, folded or not."""
        rows = self.rowset(name, node).get("row", [])
        if isinstance(rows, dict):
            return list(rows.values())
        return list(rows)


class FoldingParser:
    """
    Parser configured for one feed.

    Args:
        key_attrs: Attribute names tried, in order, to key a sibling group.
        repeated_tag_names: Tags that are always represented as lists.
        rowset_keys: Per-rowset override of the key attribute for its rows,
            keyed by the rowset's name. A value of None keeps the rows as a
            list, for rowsets whose declared key is not unique.
    """

    def __init__(
        self,
        key_attrs: Sequence[str] = (),
        repeated_tag_names: Sequence[str] = DEFAULT_REPEATED_TAGS,
        rowset_keys: Optional[Mapping[str, Optional[str]]] = None,
    ):
        self.key_attrs = tuple(key_attrs)
        self.repeated_tag_names = frozenset(repeated_tag_names)
        self.rowset_keys = dict(rowset_keys or {})

    def parse(self, raw: bytes) -> ParsedDocument:
        tree = load_tree(raw)
        root = self._convert(tree)
        if not isinstance(root, dict):
            root = {"content": root}
        return ParsedDocument(root=root, tag=tree.tag)

    def _convert(self, element: etree._Element) -> Any:
        node: Dict[str, Any] = dict(element.attrib)

        groups: Dict[str, List[etree._Element]] = {}
        for child in element:
            # Skip comments and processing instructions
            if not isinstance(child.tag, str):
                continue
            groups.setdefault(child.tag, []).append(child)

        for tag, children in groups.items():
            values = [self._convert(child) for child in children]
            if len(values) == 1 and tag not in self.repeated_tag_names:
                node[tag] = values[0]
            else:
                node[tag] = self._fold(element, tag, values)

        text = element.text or ""
        if not text.strip():
            text = ""
        if not node:
            return text
        if text:
            node["content"] = text
        return node

    def _key_for(self, parent: etree._Element, tag: str, values: List[Any]) -> Optional[str]:
        if tag == "row" and parent.tag == "rowset" and parent.get("name") in self.rowset_keys:
            return self.rowset_keys[parent.get("name")]
        if not all(isinstance(v, dict) for v in values):
            return None
        candidates = self.key_attrs
        if tag == "rowset":
            candidates = (ROWSET_KEY,) + candidates
        for attr in candidates:
            if all(attr in v for v in values):
                return attr
        return None

    def _fold(self, parent: etree._Element, tag: str, values: List[Any]) -> Any:
        key = self._key_for(parent, tag, values)
        if key is None:
            return values

        folded: Dict[str, Any] = {}
        for value in values:
            item_key = value.get(key) if isinstance(value, dict) else None
            if item_key is None:
                # Override key missing on this row
                return values
            if item_key in folded:
                logger.warning(
                    f"Duplicate {key}={item_key} in <{parent.tag}> {tag} elements, keeping the last one"
                )
            folded[item_key] = value
        return folded


def parse(
    raw: bytes,
    repeated_tag_names: Sequence[str] = DEFAULT_REPEATED_TAGS,
    key_attrs: Sequence[str] = (),
    rowset_keys: Optional[Mapping[str, Optional[str]]] = None,
) -> ParsedDocument:
    """Parse ``raw`` with a one-off FoldingParser."""
    return FoldingParser(key_attrs, repeated_tag_names, rowset_keys).parse(raw)
