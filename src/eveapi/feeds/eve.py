"""
Normalizers for the public ``eve/`` and ``map/`` feeds, plus CharacterInfo.
"""

from typing import Any, Dict, Optional

from ..dom_parser import DomDocument, DomParser
from ..results import FeedResult
from ..xml_parser import FoldingParser, ParsedDocument
from .base import Feed, feed_result, keep_last, rename


def skill_tree(doc: DomDocument) -> FeedResult:
    """
    Skill groups -> skills -> bonuses / required skills.

    Walks the DOM: rows appear at group, skill, bonus and requirement level
    and share attribute names (typeID is both a skill and a prerequisite).
    The feed has been known to repeat a group row; the skills of repeated
    groups are merged.
    """
    groups: Dict[str, Any] = {}
    for group_row in doc.select(doc.result, "rowset[name=skillGroups]/row"):
        group_id = group_row.get("groupID")
        if group_id is None:
            continue
        group = groups.setdefault(group_id, {"name": group_row.get("groupName"), "skills": {}})

        for skill_row in doc.select(group_row, "rowset[name=skills]/row"):
            skill_id = skill_row.get("typeID")
            if skill_id is None:
                continue
            bonuses: Dict[str, Any] = {}
            for row in doc.select(skill_row, "rowset[name=skillBonusCollection]/row"):
                keep_last(bonuses, "bonusType", row.get("bonusType"), row.get("bonusValue"))
            required_skills: Dict[str, Any] = {}
            for row in doc.select(skill_row, "rowset[name=requiredSkills]/row"):
                keep_last(required_skills, "typeID", row.get("typeID"), row.get("skillLevel"))

            skill = {
                "name": skill_row.get("typeName"),
                "description": doc.text_at(skill_row, "description"),
                "rank": doc.text_at(skill_row, "rank"),
                "primary_attribute": doc.text_at(skill_row, "requiredAttributes/primaryAttribute"),
                "secondary_attribute": doc.text_at(skill_row, "requiredAttributes/secondaryAttribute"),
                "bonuses": bonuses,
                "required_skills": required_skills,
            }
            keep_last(group["skills"], "typeID", skill_id, skill)
    return feed_result(doc, groups)


def ref_types(doc: ParsedDocument) -> FeedResult:
    """refTypeID -> name of the wallet journal entry type."""
    rows = doc.rows("refTypes")
    return feed_result(doc, {ref_type_id: row.get("refTypeName") for ref_type_id, row in rows.items()})


SOVEREIGNTY_FIELDS = {
    "solarSystemName": "name",
    "factionID": "faction_id",
    "sovereigntyLevel": "sovereignty_level",
    "constellationSovereignty": "constellation_sovereignty",
    "allianceID": "alliance_id",
    "corporationID": "corporation_id",
}


def sovereignty(doc: ParsedDocument) -> FeedResult:
    systems = {
        system_id: rename(row, SOVEREIGNTY_FIELDS)
        for system_id, row in doc.rows("solarSystems").items()
    }
    return feed_result(doc, systems, data_time=doc.result.get("dataTime"))


STATION_FIELDS = {
    "stationID": "station_id",
    "stationName": "station_name",
    "stationTypeID": "station_type_id",
    "solarSystemID": "solar_system_id",
    "corporationID": "corporation_id",
    "corporationName": "corporation_name",
}


def station_list(doc: ParsedDocument) -> FeedResult:
    """Conquerable (player owned) stations keyed by station ID."""
    stations = {
        station_id: rename(row, STATION_FIELDS)
        for station_id, row in doc.rows("outposts").items()
    }
    return feed_result(doc, stations)


def character_name(doc: ParsedDocument) -> FeedResult:
    """characterID -> character name."""
    rows = doc.rows("characters")
    return feed_result(doc, {character_id: row.get("name") for character_id, row in rows.items()})


def character_ids(doc: ParsedDocument) -> FeedResult:
    """Character name -> characterID (0 for names that don't exist)."""
    rows = doc.rows("characters")
    return feed_result(doc, {name: row.get("characterID") for name, row in rows.items()})


CHARACTER_INFO_FIELDS = {
    "characterID": "character_id",
    "characterName": "character_name",
    "race": "race",
    "bloodline": "bloodline",
    "accountBalance": "account_balance",
    "skillPoints": "skill_points",
    "shipName": "ship_name",
    "shipTypeID": "ship_type_id",
    "shipTypeName": "ship_type_name",
    "corporationID": "corporation_id",
    "corporation": "corporation",
    "corporationDate": "corporation_date",
    "allianceID": "alliance_id",
    "alliance": "alliance",
    "allianceDate": "alliance_date",
    "lastKnownLocation": "last_known_location",
    "securityStatus": "security_status",
}


def character_info(doc: ParsedDocument) -> Optional[FeedResult]:
    result = doc.result
    if not result.get("characterID"):
        return None

    info = rename(result, CHARACTER_INFO_FIELDS)
    history = doc.rows("employmentHistory")
    if history:
        info["employment_history"] = {
            record_id: {
                "record_id": record_id,
                "corporation_id": row.get("corporationID"),
                "start_date": row.get("startDate"),
            }
            for record_id, row in history.items()
        }
    return feed_result(doc, info)


FEEDS = [
    Feed("skill_tree", "eve/SkillTree.xml.aspx", DomParser(), skill_tree),
    Feed(
        "ref_types",
        "eve/RefTypes.xml.aspx",
        FoldingParser(key_attrs=("refTypeID",)),
        ref_types,
    ),
    Feed(
        "sovereignty",
        "map/Sovereignty.xml.aspx",
        FoldingParser(key_attrs=("solarSystemID",)),
        sovereignty,
    ),
    Feed(
        "station_list",
        "eve/ConquerableStationList.xml.aspx",
        FoldingParser(key_attrs=("stationID",)),
        station_list,
    ),
    Feed(
        "character_name",
        "eve/CharacterName.xml.aspx",
        FoldingParser(key_attrs=("characterID",)),
        character_name,
        identifiers=("ids",),
    ),
    Feed(
        "character_ids",
        "eve/CharacterID.xml.aspx",
        FoldingParser(key_attrs=("name",)),
        character_ids,
        identifiers=("names",),
    ),
    Feed(
        "character_info",
        "eve/CharacterInfo.xml.aspx",
        FoldingParser(key_attrs=("recordID",)),
        character_info,
        requires_auth=True,
        identifiers=("character_id",),
    ),
]
