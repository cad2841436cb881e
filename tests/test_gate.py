"""Tests for the version and error envelope checks."""

import logging

import pytest

from eveapi.dom_parser import DomParser
from eveapi.errors import SchemaError
from eveapi.gate import check
from eveapi.results import UpstreamError
from eveapi.xml_parser import FoldingParser

PARSERS = [FoldingParser(), DomParser()]


@pytest.mark.parametrize("parser", PARSERS, ids=["folding", "dom"])
class TestCheck:
    """check() behaves the same for both document types."""

    def test_version_2_passes(self, parser):
        doc = parser.parse(b'<eveapi version="2"><result/></eveapi>')
        assert check(doc) is None

    def test_other_version_raises(self, parser):
        doc = parser.parse(b'<eveapi version="1"><result/></eveapi>')
        with pytest.raises(SchemaError, match="version"):
            check(doc)

    def test_missing_version_passes(self, parser):
        doc = parser.parse(b"<eveapi><result/></eveapi>")
        assert check(doc) is None

    def test_error_envelope_becomes_upstream_error(self, parser, caplog):
        doc = parser.parse(b'<eveapi version="2"><error code="106">Must provide userID or keyID parameter for authentication.</error></eveapi>')
        with caplog.at_level(logging.INFO, logger="eveapi.gate"):
            error = check(doc)

        assert error == UpstreamError(code="106", message="Must provide userID or keyID parameter for authentication.")
        assert not error.ok
        assert "106" in caplog.text

    def test_version_is_checked_before_error(self, parser):
        doc = parser.parse(b'<eveapi version="3"><error code="1">x</error></eveapi>')
        with pytest.raises(SchemaError):
            check(doc)

    def test_non_api_page_raises(self, parser):
        """A proxy's HTML error page is well-formed XML but not an API document."""
        doc = parser.parse(b"<html><body><h1>503 Service Unavailable</h1></body></html>")
        with pytest.raises(SchemaError, match="<html>"):
            check(doc)

    def test_document_without_payload_raises(self, parser):
        doc = parser.parse(b'<eveapi version="2"><currentTime>2014-01-01 00:00:00</currentTime></eveapi>')
        with pytest.raises(SchemaError, match="neither a result nor a cachedUntil"):
            check(doc)

    def test_cached_until_alone_passes(self, parser):
        doc = parser.parse(b'<eveapi version="2"><cachedUntil>2014-01-01 01:00:00</cachedUntil></eveapi>')
        assert check(doc) is None
