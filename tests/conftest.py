"""Pytest configuration, path setup and shared fixtures for eveapi tests."""

import json
import sys
from pathlib import Path

import pytest

# Add src to path so tests can import eveapi without installing it
_src_path = Path(__file__).parent.parent / "src"
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> bytes:
    """Raw bytes of tests/fixtures/<name>.xml."""
    return (FIXTURES / f"{name}.xml").read_bytes()


def load_expected(name: str) -> dict:
    """Recorded legacy mapping for a feed, from tests/fixtures/expected/<name>.json."""
    return json.loads((FIXTURES / "expected" / f"{name}.json").read_text(encoding="utf-8"))


class FakeFetcher:
    """Stands in for HttpFetcher: records every URL and returns canned bytes."""

    def __init__(self, body: bytes = b""):
        self.body = body
        self.calls = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        return self.body


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def credentials():
    """Config fields for a client that can call every feed."""
    return {
        "key_id": 123456,
        "verification_code": "secretvcode",
        "character_id": 150337897,
        "corporation_id": 150212025,
    }
