"""Normalizers for the ``corp/`` feeds."""

from ..assets import flatten
from ..results import FeedResult
from ..xml_parser import FoldingParser, ParsedDocument
from .base import Feed, as_map, feed_result, rename

CORPORATION_FIELDS = {
    "corporationID": "corporation_id",
    "corporationName": "corporation_name",
    "ticker": "ticker",
    "ceoID": "ceo_id",
    "ceoName": "ceo_name",
    "stationID": "station_id",
    "stationName": "station_name",
    "description": "description",
    "url": "url",
    "allianceID": "alliance_id",
    "allianceName": "alliance_name",
    "factionID": "faction_id",
    "taxRate": "tax_rate",
    "memberCount": "member_count",
    "memberLimit": "member_limit",
    "shares": "shares",
}

LOGO_FIELDS = {
    "graphicID": "graphic_id",
    "shape1": "shape_1",
    "shape2": "shape_2",
    "shape3": "shape_3",
    "color1": "color_1",
    "color2": "color_2",
    "color3": "color_3",
}


def corporation_sheet(doc: ParsedDocument) -> FeedResult:
    result = doc.result
    sheet = rename(result, CORPORATION_FIELDS)
    sheet["divisions"] = {
        key: row.get("description") for key, row in doc.rows("divisions").items()
    }
    sheet["wallet_divisions"] = {
        key: row.get("description") for key, row in doc.rows("walletDivisions").items()
    }
    sheet["logo"] = rename(as_map(result.get("logo")), LOGO_FIELDS)
    return feed_result(doc, sheet)


STARBASE_FIELDS = {
    "itemID": "item_id",
    "typeID": "type_id",
    "locationID": "location_id",
    "moonID": "moon_id",
    "state": "state",
    "stateTimestamp": "state_timestamp",
    "onlineTimestamp": "online_timestamp",
    "standingOwnerID": "standing_owner_id",
}


def starbase_list(doc: ParsedDocument) -> FeedResult:
    """Control towers owned by the corporation, keyed by item ID."""
    rows = doc.rows("starbases")
    return feed_result(doc, {item_id: rename(row, STARBASE_FIELDS) for item_id, row in rows.items()})


GENERAL_SETTINGS_FIELDS = {
    "usageFlags": "usage_flags",
    "deployFlags": "deploy_flags",
    "allowCorporationMembers": "allow_corporation_members",
    "allowAllianceMembers": "allow_alliance_members",
}


def starbase_detail(doc: ParsedDocument) -> FeedResult:
    """
    Settings and fuel bay of one control tower.

    Combat settings are empty elements with the value in attributes, e.g.
    ``<onStatusDrop enabled="0" standing="0" />``.
    """
    result = doc.result
    combat = as_map(result.get("combatSettings"))
    status_drop = as_map(combat.get("onStatusDrop"))

    detail = {
        "state": result.get("state"),
        "state_timestamp": result.get("stateTimestamp"),
        "online_timestamp": result.get("onlineTimestamp"),
        "general_settings": rename(as_map(result.get("generalSettings")), GENERAL_SETTINGS_FIELDS),
        "combat_settings": {
            "use_standings_from": as_map(combat.get("useStandingsFrom")).get("ownerID"),
            "on_standing_drop": as_map(combat.get("onStandingDrop")).get("standing"),
            "on_status_drop": {
                "enabled": status_drop.get("enabled"),
                "standing": status_drop.get("standing"),
            },
            "on_aggression": as_map(combat.get("onAggression")).get("enabled"),
            "on_corporation_war": as_map(combat.get("onCorporationWar")).get("enabled"),
        },
        "fuel": {type_id: row.get("quantity") for type_id, row in doc.rows("fuel").items()},
    }
    return feed_result(doc, detail)


def corporation_asset_list(doc: ParsedDocument) -> FeedResult:
    return feed_result(doc, flatten(doc.rowset("assets").get("row")))


FEEDS = [
    Feed(
        "corporation_sheet",
        "corp/CorporationSheet.xml.aspx",
        FoldingParser(key_attrs=("accountKey",)),
        corporation_sheet,
        identifiers=("corporation_id",),
    ),
    Feed(
        "corporation_asset_list",
        "corp/AssetList.xml.aspx",
        FoldingParser(key_attrs=("itemID",)),
        corporation_asset_list,
        requires_auth=True,
    ),
    Feed(
        "starbase_list",
        "corp/StarbaseList.xml.aspx",
        FoldingParser(key_attrs=("itemID",)),
        starbase_list,
        requires_auth=True,
    ),
    Feed(
        "starbase_detail",
        "corp/StarbaseDetail.xml.aspx",
        FoldingParser(key_attrs=("typeID",)),
        starbase_detail,
        requires_auth=True,
        identifiers=("item_id",),
    ),
]
