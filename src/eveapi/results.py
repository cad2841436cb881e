"""
Result types returned by every feed operation.

A successful call returns a FeedResult. When the API answers with an error
envelope the call returns an UpstreamError instead; it is data, not an
exception, so batch callers can branch on ``result.ok``.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional


@dataclass
class FeedResult:
    """
    Normalized feed payload.

    ``items`` holds the entities keyed by their string ID (or the fields of a
    single record); ``metadata`` holds envelope values such as cached_until.
    The two are kept apart so an entity ID can never shadow a metadata key.
    """

    items: Dict[str, Any]
    metadata: Dict[str, Any] = field(default_factory=dict)

    ok: ClassVar[bool] = True

    @property
    def cached_until(self) -> Optional[str]:
        return self.metadata.get("cached_until")

    def as_dict(self) -> Dict[str, Any]:
        """Legacy flat mapping: entities and metadata side by side."""
        merged = dict(self.items)
        merged.update(self.metadata)
        return merged


@dataclass(frozen=True)
class UpstreamError:
    """Error envelope reported by the API (bad key, rate limit, bad params)."""

    code: str
    message: str

    ok: ClassVar[bool] = False

    def as_dict(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}

    def __str__(self) -> str:
        return f"EVE API error {self.code}: {self.message}"
