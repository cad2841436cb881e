"""Feed table entry and helpers shared by the normalizers."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from ..dom_parser import DomDocument, DomParser
from ..results import FeedResult
from ..xml_parser import FoldingParser, ParsedDocument

logger = logging.getLogger(__name__)

Document = Union[ParsedDocument, DomDocument]
Parser = Union[FoldingParser, DomParser]


@dataclass(frozen=True)
class Feed:
    """
    One API endpoint: where it lives, how it is parsed and normalized.

    ``identifiers`` are parameters the call cannot be made without;
    ``optional_params`` are passed through when given.
    """

    name: str
    path: str
    parser: Parser
    normalize: Callable[[Any], Optional[FeedResult]]
    requires_auth: bool = False
    identifiers: Tuple[str, ...] = ()
    optional_params: Tuple[str, ...] = ()

    @property
    def params(self) -> Tuple[str, ...]:
        return self.identifiers + self.optional_params


def feed_result(doc: Document, items: Dict[str, Any], **metadata: Any) -> FeedResult:
    """Wrap normalized items with the document's cached_until."""
    meta = {"cached_until": doc.cached_until}
    meta.update(metadata)
    return FeedResult(items=items, metadata=meta)


def rename(row: Mapping[str, Any], field_map: Mapping[str, str]) -> Dict[str, Any]:
    """Copy ``row`` through a wire name -> output key table; absent fields are None."""
    return {key: row.get(wire_name) for wire_name, key in field_map.items()}


def as_map(value: Any) -> Dict[str, Any]:
    """Elements with no attributes or children parse as text; treat them as empty."""
    return dict(value) if isinstance(value, dict) else {}


def split_ids(value: Optional[str]) -> list:
    """Split a comma separated ID list, dropping blanks."""
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def keep_last(target: Dict[str, Any], key: str, item_key: str, value: Any) -> None:
    """Store ``value`` under ``item_key``; a repeated key replaces the earlier entry with a warning."""
    if item_key in target:
        logger.warning(
            f"Duplicate {key}={item_key} in <rowset> row elements, keeping the last one"
        )
    target[item_key] = value
