"""Client configuration."""

from dataclasses import dataclass
from typing import NamedTuple, Optional

DEFAULT_API_URL = "https://api.eveonline.com"


class Credentials(NamedTuple):
    """API key pair: the numeric key ID and its verification code."""

    key_id: int
    verification_code: str


@dataclass(frozen=True)
class ApiConfig:
    """Settings shared by every call made through one client."""

    api_url: str = DEFAULT_API_URL
    key_id: Optional[int] = None
    verification_code: Optional[str] = None
    character_id: Optional[int] = None  # default for character feeds
    corporation_id: Optional[int] = None  # default for corporation_sheet
    timeout: float = 30.0
    max_retries: int = 3

    @property
    def credentials(self) -> Optional[Credentials]:
        if not self.key_id or not self.verification_code:
            return None
        return Credentials(self.key_id, self.verification_code)

    def default_for(self, name: str) -> Optional[int]:
        """Configured fallback for an identifier parameter, if any."""
        if name == "character_id":
            return self.character_id
        if name == "corporation_id":
            return self.corporation_id
        return None
