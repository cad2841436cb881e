"""Tests for URL building and vCode redaction."""

import pytest

from eveapi.config import Credentials
from eveapi.query import build_query, build_request, redact

BASE = "https://api.eveonline.com"


class TestBuildRequest:
    """Tests for build_request()."""

    def test_anonymous_feed_has_no_query_string(self):
        url = build_request(BASE, "eve/RefTypes.xml.aspx")
        assert url == "https://api.eveonline.com/eve/RefTypes.xml.aspx"

    def test_credentials_come_first(self):
        url = build_request(
            BASE,
            "char/CharacterSheet.xml.aspx",
            Credentials(123, "abc"),
            {"character_id": 456},
        )
        assert url == (
            "https://api.eveonline.com/char/CharacterSheet.xml.aspx"
            "?keyID=123&vCode=abc&characterID=456"
        )

    def test_list_values_are_comma_joined(self):
        url = build_request(BASE, "eve/CharacterName.xml.aspx", extra_params={"ids": [1, 2, 3]})
        assert url.endswith("?ids=1%2C2%2C3")

    def test_empty_params_are_omitted(self):
        url = build_request(
            BASE,
            "char/WalletJournal.xml.aspx",
            Credentials(1, "v"),
            {"character_id": 9, "row_count": None, "from_id": "", "account_key": 0},
        )
        assert "rowCount" not in url
        assert "fromID" not in url
        assert "accountKey" not in url
        assert url.endswith("?keyID=1&vCode=v&characterID=9")

    def test_slashes_are_normalized(self):
        url = build_request("https://api.testeveonline.com/", "/eve/RefTypes.xml.aspx")
        assert url == "https://api.testeveonline.com/eve/RefTypes.xml.aspx"

    def test_names_are_url_encoded(self):
        url = build_request(BASE, "eve/CharacterID.xml.aspx", extra_params={"names": "CCP Garthagk"})
        assert "names=CCP+Garthagk" in url


class TestBuildQuery:
    """Tests for build_query()."""

    def test_logical_names_map_to_wire_names(self):
        params = build_query(
            None,
            {"row_count": 50, "account_key": 1000, "from_id": 77, "contract_id": 5, "item_id": 6, "job_id": 7},
        )
        assert params == {
            "rowCount": "50",
            "accountKey": "1000",
            "fromID": "77",
            "contractID": "5",
            "itemID": "6",
            "jobID": "7",
        }

    def test_unknown_parameter_raises(self):
        with pytest.raises(ValueError, match="Unknown query parameter"):
            build_query(None, {"characterID": 1})


class TestRedact:
    """Tests for redact()."""

    def test_vcode_is_masked(self):
        url = "https://api.eveonline.com/x.xml.aspx?keyID=1&vCode=secret&characterID=2"
        assert redact(url) == "https://api.eveonline.com/x.xml.aspx?keyID=1&vCode=***&characterID=2"

    def test_url_without_query_is_unchanged(self):
        assert redact("https://api.eveonline.com/x.xml.aspx") == "https://api.eveonline.com/x.xml.aspx"
