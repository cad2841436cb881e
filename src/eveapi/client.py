"""
EVE Online XML API client.

Usage (anonymous feeds)::

    api = EveApi()
    ref_types = api.ref_types()

Usage (restricted feeds, key ID and vCode from the API key page)::

    api = EveApi(key_id=123456, verification_code="abc...", character_id=90000001)
    sheet = api.character_sheet()
    if not sheet.ok:
        print(sheet.code, sheet.message)

Each call fetches one document, checks its version and error envelope and
normalizes it. Nothing is cached; ``result.cached_until`` says how long the
API expects the data to stay fresh.
"""

import dataclasses
import logging
from typing import Any, Dict, Optional, Union

from .config import ApiConfig, Credentials
from .errors import MissingCredentials, MissingIdentifier, UnknownParameter
from .feeds import Feed, get_feed
from .gate import check
from .query import build_request, redact
from .results import FeedResult, UpstreamError
from .transport import HttpFetcher

logger = logging.getLogger(__name__)

Result = Union[FeedResult, UpstreamError, None]


class EveApi:
    """
    One method per feed; see ``eveapi.feeds`` for the output shapes.

    Args:
        config: Client settings. Keyword arguments override its fields, or
            build one from scratch when no config is given.
        fetcher: Object with ``fetch(url) -> bytes``; defaults to an
            HttpFetcher built from the config.
    """

    def __init__(self, config: Optional[ApiConfig] = None, fetcher: Any = None, **config_fields: Any):
        if config is None:
            config = ApiConfig(**config_fields)
        elif config_fields:
            config = dataclasses.replace(config, **config_fields)
        self.config = config
        self.fetcher = fetcher or HttpFetcher(timeout=config.timeout, max_retries=config.max_retries)

    def fetch(self, feed_name: str, **params: Any) -> Result:
        """
        Run the full pipeline for one feed.

        Returns:
            FeedResult on success, UpstreamError when the API reports an
            error, None for feeds whose payload is optional and absent.

        Raises:
            MissingIdentifier: Before any request, if a required ID is missing.
            UnknownParameter: Before any request, for a parameter the feed
                does not take.
            MissingCredentials: Before any request, for restricted feeds
                without a key ID / vCode.
            TransportError, ParseError, SchemaError: See eveapi.errors.
        """
        feed = get_feed(feed_name)
        query = self._resolve_params(feed, params)
        auth = self._auth_for(feed)

        url = build_request(self.config.api_url, feed.path, auth, query)
        logger.debug(f"Fetching {feed.name} from {redact(url)}")
        raw = self.fetcher.fetch(url)

        doc = feed.parser.parse(raw)
        error = check(doc)
        if error is not None:
            return error
        return feed.normalize(doc)

    def _resolve_params(self, feed: Feed, params: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(params) - set(feed.params)
        if unknown:
            raise UnknownParameter(feed.name, unknown)

        resolved: Dict[str, Any] = {}
        for name in feed.identifiers:
            value = params.get(name) or self.config.default_for(name)
            if not value:
                raise MissingIdentifier(name, feed.name)
            resolved[name] = value
        for name in feed.optional_params:
            if params.get(name) is not None:
                resolved[name] = params[name]
        return resolved

    def _auth_for(self, feed: Feed) -> Optional[Credentials]:
        if not feed.requires_auth:
            return None
        credentials = self.config.credentials
        if credentials is None:
            raise MissingCredentials(f"{feed.name} requires a key ID and verification code")
        return credentials

    # Anonymous feeds

    def skill_tree(self) -> Result:
        return self.fetch("skill_tree")

    def ref_types(self) -> Result:
        return self.fetch("ref_types")

    def sovereignty(self) -> Result:
        return self.fetch("sovereignty")

    def station_list(self) -> Result:
        return self.fetch("station_list")

    def character_name(self, ids=None) -> Result:
        """Names for a list of character IDs."""
        return self.fetch("character_name", ids=ids)

    def character_ids(self, names=None) -> Result:
        """Character IDs for a list of names."""
        return self.fetch("character_ids", names=names)

    def corporation_sheet(self, corporation_id: Optional[int] = None) -> Result:
        return self.fetch("corporation_sheet", corporation_id=corporation_id)

    # Account feeds

    def characters(self) -> Result:
        return self.fetch("characters")

    def api_key_info(self) -> Result:
        return self.fetch("api_key_info")

    def account_status(self) -> Result:
        return self.fetch("account_status")

    # Character feeds

    def character_info(self, character_id: Optional[int] = None) -> Result:
        return self.fetch("character_info", character_id=character_id)

    def character_sheet(self, character_id: Optional[int] = None) -> Result:
        return self.fetch("character_sheet", character_id=character_id)

    def skill_in_training(self, character_id: Optional[int] = None) -> Result:
        return self.fetch("skill_in_training", character_id=character_id)

    def asset_list(self, character_id: Optional[int] = None) -> Result:
        return self.fetch("asset_list", character_id=character_id)

    def contact_list(self, character_id: Optional[int] = None) -> Result:
        return self.fetch("contact_list", character_id=character_id)

    def wallet_transactions(
        self,
        character_id: Optional[int] = None,
        account_key: Optional[int] = None,
        row_count: Optional[int] = None,
        from_id: Optional[int] = None,
    ) -> Result:
        return self.fetch(
            "wallet_transactions",
            character_id=character_id,
            account_key=account_key,
            row_count=row_count,
            from_id=from_id,
        )

    def wallet_journal(
        self,
        character_id: Optional[int] = None,
        account_key: Optional[int] = None,
        row_count: Optional[int] = None,
        from_id: Optional[int] = None,
    ) -> Result:
        return self.fetch(
            "wallet_journal",
            character_id=character_id,
            account_key=account_key,
            row_count=row_count,
            from_id=from_id,
        )

    def mail_messages(self, character_id: Optional[int] = None) -> Result:
        return self.fetch("mail_messages", character_id=character_id)

    def mail_bodies(self, ids=None, character_id: Optional[int] = None) -> Result:
        return self.fetch("mail_bodies", ids=ids, character_id=character_id)

    def mail_lists(self, character_id: Optional[int] = None) -> Result:
        return self.fetch("mail_lists", character_id=character_id)

    def contracts(self, character_id: Optional[int] = None, contract_id: Optional[int] = None) -> Result:
        return self.fetch("contracts", character_id=character_id, contract_id=contract_id)

    def contract_items(self, contract_id: Optional[int] = None, character_id: Optional[int] = None) -> Result:
        return self.fetch("contract_items", contract_id=contract_id, character_id=character_id)

    def industry_jobs(self, character_id: Optional[int] = None, job_id: Optional[int] = None) -> Result:
        return self.fetch("industry_jobs", character_id=character_id, job_id=job_id)

    # Corporation feeds

    def corporation_asset_list(self) -> Result:
        return self.fetch("corporation_asset_list")

    def starbase_list(self) -> Result:
        return self.fetch("starbase_list")

    def starbase_detail(self, item_id: Optional[int] = None) -> Result:
        return self.fetch("starbase_detail", item_id=item_id)
