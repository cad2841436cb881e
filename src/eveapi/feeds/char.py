"""Normalizers for the ``char/`` feeds (all require a character ID)."""

import re
from typing import Any, Dict, Optional

from ..assets import flatten
from ..errors import SchemaError
from ..results import FeedResult
from ..xml_parser import FoldingParser, ParsedDocument
from .base import Feed, as_map, feed_result, rename, split_ids

# "memoryBonus" -> "memory"
_ENHANCER_ATTRIBUTE_RE = re.compile(r"^([a-z]+)")

SHEET_FIELDS = {
    "characterID": "character_id",
    "name": "name",
    "race": "race",
    "bloodLine": "blood_line",
    "ancestry": "ancestry",
    "gender": "gender",
    "DoB": "date_of_birth",
    "corporationID": "corporation_id",
    "corporationName": "corporation_name",
    "allianceID": "alliance_id",
    "allianceName": "alliance_name",
    "balance": "balance",
}


def character_sheet(doc: ParsedDocument) -> FeedResult:
    """
    Merge the character sheet's scalar fields with its skills, implants
    and jump clones.

    Attribute enhancers are reported under wire names such as
    ``memoryBonus``; they are keyed by the attribute they boost.
    """
    result = doc.result
    sheet = rename(result, SHEET_FIELDS)
    sheet["attributes"] = as_map(result.get("attributes"))

    enhancers = {}
    for wire_name, enhancer in as_map(result.get("attributeEnhancers")).items():
        match = _ENHANCER_ATTRIBUTE_RE.match(wire_name)
        if not match or not isinstance(enhancer, dict):
            continue
        enhancers[match.group(1)] = {
            "name": enhancer.get("augmentatorName"),
            "value": enhancer.get("augmentatorValue"),
        }
    sheet["attribute_enhancers"] = enhancers

    sheet["skills"] = {
        skill_id: {"level": row.get("level"), "skill_points": row.get("skillpoints")}
        for skill_id, row in doc.rows("skills").items()
    }
    sheet["implants"] = {
        type_id: row.get("typeName") for type_id, row in doc.rows("implants").items()
    }

    clones: Dict[str, Any] = {}
    for clone_id, row in doc.rows("jumpClones").items():
        clones[clone_id] = {
            "type_id": row.get("typeID"),
            "location_id": row.get("locationID"),
            "clone_name": row.get("cloneName"),
            "implants": {},
        }
    for row in doc.row_list("jumpCloneImplants"):
        clone = clones.get(row.get("jumpCloneID"))
        if clone is not None:
            clone["implants"][row.get("typeID")] = row.get("typeName")
    sheet["jump_clones"] = clones

    return feed_result(doc, sheet)


def skill_in_training(doc: ParsedDocument) -> Optional[FeedResult]:
    """The skill currently training, or None if the queue is idle."""
    result = doc.result
    if result.get("skillInTraining") in (None, "", "0"):
        return None

    training = {
        "current_tq_time": result.get("currentTQTime"),
        "skill_id": result.get("trainingTypeID"),
        "to_level": result.get("trainingToLevel"),
        "start_time": result.get("trainingStartTime"),
        "end_time": result.get("trainingEndTime"),
        "start_sp": result.get("trainingStartSP"),
        "end_sp": result.get("trainingDestinationSP"),
    }
    return feed_result(doc, training)


def asset_list(doc: ParsedDocument) -> FeedResult:
    return feed_result(doc, flatten(doc.rowset("assets").get("row")))


# Contact rowset name -> output category
CONTACT_CATEGORIES = {
    "contactList": "contact_list",
    "corporateContactList": "corporate_contact_list",
    "allianceContactList": "alliance_contact_list",
}

# Rowsets that are known but not contacts
CONTACT_LABEL_ROWSETS = {"contactLabels", "corporateContactLabels", "allianceContactLabels"}


def contact_list(doc: ParsedDocument) -> FeedResult:
    """
    Personal, corporation and alliance contacts, one category each.

    Raises:
        SchemaError: On a contact rowset this client does not know.
    """
    contacts: Dict[str, Any] = {}
    for rowset_name, rowset in as_map(doc.result.get("rowset")).items():
        if rowset_name in CONTACT_LABEL_ROWSETS:
            continue
        category = CONTACT_CATEGORIES.get(rowset_name)
        if category is None:
            raise SchemaError(f"Unknown contact list rowset: {rowset_name!r}")

        rows = doc.rows(rowset_name)
        if not rows:
            continue
        entries = {}
        for contact_id, row in rows.items():
            entry = {
                "contact_id": contact_id,
                "standing": row.get("standing"),
                "contact_name": row.get("contactName"),
                "contact_type_id": row.get("contactTypeID"),
            }
            # Only personal contacts can be watched
            if rowset_name == "contactList":
                entry["in_watchlist"] = row.get("inWatchlist")
            entries[contact_id] = entry
        contacts[category] = entries
    return feed_result(doc, contacts)


TRANSACTION_FIELDS = {
    "transactionID": "transaction_id",
    "transactionDateTime": "transaction_date_time",
    "quantity": "quantity",
    "typeName": "type_name",
    "typeID": "type_id",
    "price": "price",
    "clientID": "client_id",
    "clientName": "client_name",
    "clientTypeID": "client_type_id",
    "stationID": "station_id",
    "stationName": "station_name",
    "transactionType": "transaction_type",
    "transactionFor": "transaction_for",
    "journalTransactionID": "journal_transaction_id",
}


def wallet_transactions(doc: ParsedDocument) -> FeedResult:
    rows = doc.rows("transactions")
    return feed_result(doc, {tid: rename(row, TRANSACTION_FIELDS) for tid, row in rows.items()})


JOURNAL_FIELDS = {
    "refID": "ref_id",
    "date": "date",
    "refTypeID": "ref_type_id",
    "ownerName1": "owner_name_1",
    "ownerID1": "owner_id_1",
    "owner1TypeID": "owner_1_type_id",
    "ownerName2": "owner_name_2",
    "ownerID2": "owner_id_2",
    "owner2TypeID": "owner_2_type_id",
    "argName1": "arg_name_1",
    "argID1": "arg_id_1",
    "amount": "amount",
    "balance": "balance",
    "reason": "reason",
    "taxReceiverID": "tax_receiver_id",
    "taxAmount": "tax_amount",
}


def wallet_journal(doc: ParsedDocument) -> FeedResult:
    rows = doc.rows("entries")
    return feed_result(doc, {ref_id: rename(row, JOURNAL_FIELDS) for ref_id, row in rows.items()})


MAIL_MESSAGE_FIELDS = {
    "messageID": "message_id",
    "senderID": "sender_id",
    "senderName": "sender_name",
    "sentDate": "sent_date",
    "title": "title",
    "toCorpOrAllianceID": "to_corp_or_alliance_id",
    "toListID": "to_list_id",
}


def mail_messages(doc: ParsedDocument) -> FeedResult:
    """Mail headers; recipients come as a comma separated list and are split."""
    messages = {}
    for message_id, row in doc.rows("messages").items():
        message = rename(row, MAIL_MESSAGE_FIELDS)
        message["to_character_ids"] = split_ids(row.get("toCharacterIDs"))
        messages[message_id] = message
    return feed_result(doc, messages)


def mail_bodies(doc: ParsedDocument) -> FeedResult:
    bodies = {message_id: row.get("content", "") for message_id, row in doc.rows("messages").items()}
    missing = doc.result.get("missingMessageIDs")
    return feed_result(
        doc,
        bodies,
        missing_message_ids=split_ids(missing if isinstance(missing, str) else None),
    )


def mail_lists(doc: ParsedDocument) -> FeedResult:
    """Mailing lists the character is subscribed to: listID -> name."""
    rows = doc.rows("mailingLists")
    return feed_result(doc, {list_id: row.get("displayName") for list_id, row in rows.items()})


CONTRACT_FIELDS = {
    "contractID": "contract_id",
    "issuerID": "issuer_id",
    "issuerCorpID": "issuer_corp_id",
    "assigneeID": "assignee_id",
    "acceptorID": "acceptor_id",
    "startStationID": "start_station_id",
    "endStationID": "end_station_id",
    "type": "type",
    "status": "status",
    "title": "title",
    "forCorp": "for_corp",
    "availability": "availability",
    "dateIssued": "date_issued",
    "dateExpired": "date_expired",
    "dateAccepted": "date_accepted",
    "numDays": "num_days",
    "dateCompleted": "date_completed",
    "price": "price",
    "reward": "reward",
    "collateral": "collateral",
    "buyout": "buyout",
    "volume": "volume",
}


def contracts(doc: ParsedDocument) -> FeedResult:
    rows = doc.rows("contractList")
    return feed_result(doc, {cid: rename(row, CONTRACT_FIELDS) for cid, row in rows.items()})


CONTRACT_ITEM_FIELDS = {
    "typeID": "type_id",
    "quantity": "quantity",
    "singleton": "singleton",
    "included": "included",
}


def contract_items(doc: ParsedDocument) -> FeedResult:
    """Items of one contract; rawQuantity is only sent for some items."""
    items = {}
    for record_id, row in doc.rows("itemList").items():
        item = {"record_id": record_id}
        item.update(rename(row, CONTRACT_ITEM_FIELDS))
        if "rawQuantity" in row:
            item["raw_quantity"] = row["rawQuantity"]
        items[record_id] = item
    return feed_result(doc, items)


INDUSTRY_JOB_FIELDS = {
    "jobID": "job_id",
    "installerID": "installer_id",
    "installerName": "installer_name",
    "facilityID": "facility_id",
    "solarSystemID": "solar_system_id",
    "solarSystemName": "solar_system_name",
    "stationID": "station_id",
    "activityID": "activity_id",
    "blueprintID": "blueprint_id",
    "blueprintTypeID": "blueprint_type_id",
    "blueprintTypeName": "blueprint_type_name",
    "blueprintLocationID": "blueprint_location_id",
    "outputLocationID": "output_location_id",
    "runs": "runs",
    "cost": "cost",
    "teamID": "team_id",
    "licensedRuns": "licensed_runs",
    "probability": "probability",
    "productTypeID": "product_type_id",
    "productTypeName": "product_type_name",
    "status": "status",
    "timeInSeconds": "time_in_seconds",
    "startDate": "start_date",
    "endDate": "end_date",
    "pauseDate": "pause_date",
    "completedDate": "completed_date",
    "completedCharacterID": "completed_character_id",
    "successfulRuns": "successful_runs",
}


def industry_jobs(doc: ParsedDocument) -> FeedResult:
    rows = doc.rows("jobs")
    return feed_result(doc, {job_id: rename(row, INDUSTRY_JOB_FIELDS) for job_id, row in rows.items()})


FEEDS = [
    Feed(
        "character_sheet",
        "char/CharacterSheet.xml.aspx",
        # jumpClones rows also carry a typeID; implant rows repeat their clone's ID
        FoldingParser(
            key_attrs=("typeID",),
            rowset_keys={"jumpClones": "jumpCloneID", "jumpCloneImplants": None},
        ),
        character_sheet,
        requires_auth=True,
        identifiers=("character_id",),
    ),
    Feed(
        "skill_in_training",
        "char/SkillInTraining.xml.aspx",
        FoldingParser(),
        skill_in_training,
        requires_auth=True,
        identifiers=("character_id",),
    ),
    Feed(
        "asset_list",
        "char/AssetList.xml.aspx",
        FoldingParser(key_attrs=("itemID",)),
        asset_list,
        requires_auth=True,
        identifiers=("character_id",),
    ),
    Feed(
        "contact_list",
        "char/ContactList.xml.aspx",
        FoldingParser(key_attrs=("contactID", "labelID")),
        contact_list,
        requires_auth=True,
        identifiers=("character_id",),
    ),
    Feed(
        "wallet_transactions",
        "char/WalletTransactions.xml.aspx",
        FoldingParser(key_attrs=("transactionID",)),
        wallet_transactions,
        requires_auth=True,
        identifiers=("character_id",),
        optional_params=("account_key", "row_count", "from_id"),
    ),
    Feed(
        "wallet_journal",
        "char/WalletJournal.xml.aspx",
        FoldingParser(key_attrs=("refID",)),
        wallet_journal,
        requires_auth=True,
        identifiers=("character_id",),
        optional_params=("account_key", "row_count", "from_id"),
    ),
    Feed(
        "mail_messages",
        "char/MailMessages.xml.aspx",
        FoldingParser(key_attrs=("messageID",)),
        mail_messages,
        requires_auth=True,
        identifiers=("character_id",),
    ),
    Feed(
        "mail_bodies",
        "char/MailBodies.xml.aspx",
        FoldingParser(key_attrs=("messageID",)),
        mail_bodies,
        requires_auth=True,
        identifiers=("character_id", "ids"),
    ),
    Feed(
        "mail_lists",
        "char/mailinglists.xml.aspx",
        FoldingParser(key_attrs=("listID",)),
        mail_lists,
        requires_auth=True,
        identifiers=("character_id",),
    ),
    Feed(
        "contracts",
        "char/Contracts.xml.aspx",
        FoldingParser(key_attrs=("contractID",)),
        contracts,
        requires_auth=True,
        identifiers=("character_id",),
        optional_params=("contract_id",),
    ),
    Feed(
        "contract_items",
        "char/ContractItems.xml.aspx",
        FoldingParser(key_attrs=("recordID",)),
        contract_items,
        requires_auth=True,
        identifiers=("character_id", "contract_id"),
    ),
    Feed(
        "industry_jobs",
        "char/IndustryJobs.xml.aspx",
        FoldingParser(key_attrs=("jobID",)),
        industry_jobs,
        requires_auth=True,
        identifiers=("character_id",),
        optional_params=("job_id",),
    ),
]
