"""Tests for the EveApi client pipeline, with the transport replaced."""

from unittest.mock import MagicMock

import pytest

from conftest import FakeFetcher, load_expected, load_fixture
from eveapi import (
    ApiConfig,
    EveApi,
    MissingCredentials,
    MissingIdentifier,
    ParseError,
    SchemaError,
    UnknownParameter,
    UpstreamError,
)
from eveapi.feeds import FEEDS

# Values for identifiers the config has no default for
IDENTIFIER_VALUES = {
    "ids": [797400947, 1972081734],
    "names": ["CCP Garthagk"],
    "contract_id": 62159582,
    "item_id": 150354725,
}


def call_params(feed_name):
    feed = FEEDS[feed_name]
    return {name: IDENTIFIER_VALUES[name] for name in feed.identifiers if name in IDENTIFIER_VALUES}


@pytest.fixture
def api(credentials, fetcher):
    return EveApi(fetcher=fetcher, **credentials)


class TestPipeline:
    """Fetch, gate and normalize every feed."""

    @pytest.mark.parametrize("feed_name", sorted(FEEDS))
    def test_fixture_round_trip(self, api, fetcher, feed_name):
        fetcher.body = load_fixture(feed_name)

        result = api.fetch(feed_name, **call_params(feed_name))

        assert result.as_dict() == load_expected(feed_name)
        assert len(fetcher.calls) == 1
        assert FEEDS[feed_name].path in fetcher.calls[0]

    @pytest.mark.parametrize("feed_name", sorted(FEEDS))
    def test_unsupported_version_rejected(self, api, fetcher, feed_name):
        fetcher.body = load_fixture(feed_name).replace(b'version="2"', b'version="1"', 1)

        with pytest.raises(SchemaError):
            api.fetch(feed_name, **call_params(feed_name))

    @pytest.mark.parametrize("feed_name", sorted(FEEDS))
    def test_error_envelope_returned(self, api, fetcher, feed_name):
        fetcher.body = load_fixture("error")

        result = api.fetch(feed_name, **call_params(feed_name))

        assert isinstance(result, UpstreamError)
        assert not result.ok
        assert result.code == "203"
        assert result.message == "Authentication failure."

    def test_repeated_calls_give_equal_results(self, api, fetcher):
        fetcher.body = load_fixture("character_sheet")
        assert api.character_sheet().as_dict() == api.character_sheet().as_dict()

    def test_malformed_body_raises_parse_error(self, api, fetcher):
        fetcher.body = b"<html><body>502 Bad Gateway</body>"
        with pytest.raises(ParseError):
            api.ref_types()

    def test_well_formed_non_api_page_raises_schema_error(self, api, fetcher):
        fetcher.body = b"<html><body><h1>503 Service Unavailable</h1></body></html>"
        with pytest.raises(SchemaError, match="Not an EVE API document"):
            api.ref_types()

    def test_non_api_page_rejected_for_the_dom_feed(self, api, fetcher):
        fetcher.body = b"<html><body><h1>503 Service Unavailable</h1></body></html>"
        with pytest.raises(SchemaError, match="Not an EVE API document"):
            api.skill_tree()


class TestRefTypes:
    def test_anonymous_call_sends_no_credentials(self, api, fetcher):
        fetcher.body = load_fixture("ref_types")

        result = api.ref_types()

        assert result.as_dict() == {
            "1": "Bounty Prizes",
            "2": "Insurance",
            "cached_until": "2014-01-01 00:00:00",
        }
        assert fetcher.calls == ["https://api.eveonline.com/eve/RefTypes.xml.aspx"]


class TestApiKeyInfo:
    def test_request_path(self, api, fetcher):
        fetcher.body = load_fixture("api_key_info")
        api.api_key_info()
        assert fetcher.calls[0].startswith("https://api.eveonline.com/account/ApiKeyInfo.xml.aspx?")


class TestIdentifiers:
    """Identifier resolution happens before any request is made."""

    @pytest.mark.parametrize(
        "feed_name",
        sorted(name for name, feed in FEEDS.items() if feed.identifiers),
    )
    def test_missing_identifier_makes_no_request(self, fetcher, feed_name):
        api = EveApi(fetcher=fetcher, key_id=1, verification_code="v")

        with pytest.raises(MissingIdentifier) as exc_info:
            api.fetch(feed_name)

        assert exc_info.value.name == FEEDS[feed_name].identifiers[0]
        assert exc_info.value.feed == feed_name
        assert fetcher.calls == []

    def test_message_names_the_identifier(self, fetcher):
        api = EveApi(fetcher=fetcher, key_id=1, verification_code="v")
        with pytest.raises(MissingIdentifier, match="No character_id specified for character_sheet"):
            api.character_sheet()

    def test_configured_character_id_is_used(self, api, fetcher):
        fetcher.body = load_fixture("character_sheet")
        api.character_sheet()
        assert fetcher.calls == [
            "https://api.eveonline.com/char/CharacterSheet.xml.aspx"
            "?keyID=123456&vCode=secretvcode&characterID=150337897"
        ]

    def test_explicit_character_id_wins(self, api, fetcher):
        fetcher.body = load_fixture("character_sheet")
        api.character_sheet(character_id=42)
        assert fetcher.calls[0].endswith("characterID=42")

    def test_optional_params_are_passed_through(self, api, fetcher):
        fetcher.body = load_fixture("wallet_journal")
        api.wallet_journal(row_count=50, from_id=9465000002)
        assert fetcher.calls[0].endswith("characterID=150337897&rowCount=50&fromID=9465000002")

    def test_contract_items_sends_contract_id(self, api, fetcher):
        fetcher.body = load_fixture("contract_items")
        api.contract_items(contract_id=62159583)
        assert "contractID=62159583" in fetcher.calls[0]

    def test_unknown_param_raises(self, api, fetcher):
        with pytest.raises(UnknownParameter, match="row_count") as excinfo:
            api.fetch("ref_types", row_count=10)
        assert fetcher.calls == []
        assert isinstance(excinfo.value, ValueError)
        assert excinfo.value.names == ["row_count"]


class TestCredentials:
    """Restricted feeds need a key ID and verification code."""

    @pytest.mark.parametrize(
        "feed_name",
        sorted(name for name, feed in FEEDS.items() if feed.requires_auth),
    )
    def test_missing_credentials_make_no_request(self, fetcher, feed_name):
        api = EveApi(fetcher=fetcher, character_id=1, corporation_id=2)

        with pytest.raises(MissingCredentials):
            api.fetch(feed_name, **call_params(feed_name))

        assert fetcher.calls == []

    def test_half_a_key_is_not_enough(self, fetcher):
        api = EveApi(fetcher=fetcher, key_id=1, character_id=1)
        with pytest.raises(MissingCredentials):
            api.characters()


class TestConfig:
    def test_keyword_fields_override_config(self):
        base = ApiConfig(api_url="https://api.testeveonline.com", key_id=1, verification_code="v")
        api = EveApi(base, fetcher=FakeFetcher(), character_id=7)

        assert api.config.api_url == "https://api.testeveonline.com"
        assert api.config.character_id == 7
        assert base.character_id is None

    def test_custom_api_url(self):
        fetcher = FakeFetcher(load_fixture("ref_types"))
        EveApi(api_url="https://api.testeveonline.com/", fetcher=fetcher).ref_types()
        assert fetcher.calls == ["https://api.testeveonline.com/eve/RefTypes.xml.aspx"]

    def test_default_fetcher_uses_config(self):
        api = EveApi(timeout=5, max_retries=2)
        assert api.fetcher.timeout == 5
        assert api.fetcher.max_retries == 2

    def test_http_fetcher_end_to_end(self):
        from eveapi.transport import HttpFetcher

        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.content = load_fixture("ref_types")
        session = MagicMock()
        session.get.return_value = mock_response

        api = EveApi(fetcher=HttpFetcher(session=session, retry_delay=0))

        assert api.ref_types().items == {"1": "Bounty Prizes", "2": "Insurance"}


class TestLive:
    @pytest.mark.live
    def test_live_ref_types(self):
        """
        Smoke test against the real API.
        Run with: pytest -m live
        """
        result = EveApi().ref_types()

        assert result.ok, str(result)
        assert result.cached_until
        assert all(isinstance(name, str) for name in result.items.values())
