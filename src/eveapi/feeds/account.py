"""Normalizers for the ``account/`` feeds."""

from typing import Optional

from ..results import FeedResult
from ..xml_parser import FoldingParser, ParsedDocument
from .base import Feed, as_map, feed_result, rename

CHARACTER_FIELDS = {
    "name": "name",
    "corporationName": "corporation_name",
    "corporationID": "corporation_id",
}


def characters(doc: ParsedDocument) -> FeedResult:
    """Characters on the account, keyed by character ID."""
    rows = doc.rows("characters")
    return feed_result(
        doc,
        {character_id: rename(row, CHARACTER_FIELDS) for character_id, row in rows.items()},
    )


KEY_CHARACTER_FIELDS = {
    "characterName": "character_name",
    "corporationID": "corporation_id",
    "corporationName": "corporation_name",
}

# Optional columns and the value used when they are blank or missing
KEY_CHARACTER_DEFAULTS = {
    "allianceID": ("alliance_id", "0"),
    "allianceName": ("alliance_name", ""),
    "factionID": ("faction_id", "0"),
    "factionName": ("faction_name", ""),
}


def api_key_info(doc: ParsedDocument) -> Optional[FeedResult]:
    """
    Type, expiry and access mask of the key in use.

    Characters are only listed for ``Account`` keys; corporation keys get
    the key fields alone.
    """
    key = as_map(doc.result.get("key"))
    if not key.get("type"):
        return None

    info = {
        "type": key.get("type"),
        "expires": key.get("expires"),
        "access_mask": key.get("accessMask"),
    }

    rows = doc.rows("characters", node=key)
    if rows and key["type"] == "Account":
        characters = {}
        for character_id, row in rows.items():
            character = rename(row, KEY_CHARACTER_FIELDS)
            for wire_name, (field, default) in KEY_CHARACTER_DEFAULTS.items():
                character[field] = row.get(wire_name) or default
            characters[character_id] = character
        info["characters"] = characters

    return feed_result(doc, info)


ACCOUNT_STATUS_FIELDS = {
    "paidUntil": "paid_until",
    "createDate": "create_date",
    "logonCount": "logon_count",
    "logonMinutes": "logon_minutes",
}


def account_status(doc: ParsedDocument) -> Optional[FeedResult]:
    result = doc.result
    if not result.get("createDate"):
        return None
    return feed_result(doc, rename(result, ACCOUNT_STATUS_FIELDS))


FEEDS = [
    Feed(
        "characters",
        "account/Characters.xml.aspx",
        FoldingParser(key_attrs=("characterID",)),
        characters,
        requires_auth=True,
    ),
    Feed(
        "api_key_info",
        "account/ApiKeyInfo.xml.aspx",
        FoldingParser(key_attrs=("characterID",)),
        api_key_info,
        requires_auth=True,
    ),
    Feed(
        "account_status",
        "account/AccountStatus.xml.aspx",
        FoldingParser(),
        account_status,
        requires_auth=True,
    ),
]
