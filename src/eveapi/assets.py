"""
Asset tree flattening shared by the character and corporation asset feeds.

Containers (ships, cans, hangars) list their contents in a nested rowset
named ``contents`` whose rows have the same shape as the outer rows, so the
result is a tree of dicts::

    {
        "100": {
            "item_id": "100", "location_id": "60003760", "type_id": "670",
            "quantity": "1", "raw_quantity": "-1", "flag": "4", "singleton": "1",
            "contents": {
                "200": {"item_id": "200", "type_id": "2454", ...},
            },
        },
    }
"""

from typing import Any, Dict, Mapping, Optional

from .errors import SchemaError

AssetNode = Dict[str, Any]

CONTENTS_ROWSET = "contents"

FIELD_MAP = {
    "typeID": "type_id",
    "quantity": "quantity",
    "rawQuantity": "raw_quantity",
    "flag": "flag",
    "singleton": "singleton",
}


def _keyed(rows: Any, where: str) -> Mapping[str, Mapping[str, Any]]:
    """Asset rows keyed by itemID; rows left as a list mean some row had no itemID."""
    if isinstance(rows, dict):
        return rows
    if rows in (None, ""):
        return {}
    raise SchemaError(f"Asset rows in {where} are not keyed by itemID")


def _contents_rows(row: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Rows of the nested ``contents`` rowset, or None if the row has none."""
    rowsets = row.get("rowset")
    if not isinstance(rowsets, dict) or CONTENTS_ROWSET not in rowsets:
        return None
    return _keyed(rowsets[CONTENTS_ROWSET].get("row"), f"the contents of item {row.get('itemID')}")


def flatten(rows: Any) -> Dict[str, AssetNode]:
    """
    Re-key asset rows (keyed by itemID) into AssetNodes, recursing into
    container contents.

    ``location_id`` is only set when the row carries a locationID; items
    inside containers usually don't, and the key is left out rather than
    set to None.

    Raises:
        SchemaError: If a rowset's rows could not be keyed by itemID.
    """
    parsed: Dict[str, AssetNode] = {}
    for item_id, row in _keyed(rows, "the assets rowset").items():
        node: AssetNode = {"item_id": item_id}
        if "locationID" in row:
            node["location_id"] = row["locationID"]
        for wire_name, key in FIELD_MAP.items():
            node[key] = row.get(wire_name)

        contents = _contents_rows(row)
        if contents is not None:
            node["contents"] = flatten(contents)
        parsed[item_id] = node
    return parsed
