"""
Best-effort decoding of loosely typed PubChem payloads.

Missing or oddly shaped fields are never errors here: they decode to
nothing. Deciding whether "nothing" is a failure is up to the caller.
"""

import logging
from typing import Any

from pubchem_gateway.schemas import XrefCategory, XrefRecord, XrefValue

logger = logging.getLogger(__name__)


def _information_entries(payload: Any) -> list[dict]:
    """InformationList.Information, or [] when absent."""
    if not isinstance(payload, dict):
        return []
    info_list = payload.get("InformationList")
    if not isinstance(info_list, dict):
        return []
    entries = info_list.get("Information")
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


def _is_xref_value(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def parse_xref_values(payload: Any, category: XrefCategory) -> list[XrefValue]:
    """
    Extract the values for one category from an xrefs response.

    Expected shape:
        {"InformationList": {"Information": [{"CID": 2244, "RN": ["50-78-2"]}]}}
    """
    values: list[XrefValue] = []
    for entry in _information_entries(payload):
        raw = entry.get(category.value)
        if not isinstance(raw, list):
            continue
        skipped = 0
        for value in raw:
            if _is_xref_value(value):
                values.append(value)
            else:
                skipped += 1
        if skipped:
            logger.debug(f"Skipped {skipped} non-scalar {category.value} values")
    return values


def parse_xref_records(payload: Any, category: XrefCategory) -> list[XrefRecord]:
    """Tag every value of one category response with its category."""
    return [XrefRecord(category=category, value=v) for v in parse_xref_values(payload, category)]


def parse_property_rows(payload: Any) -> list[dict[str, Any]]:
    """
    Extract property rows from a property table response.

    Expected shape:
        {"PropertyTable": {"Properties": [{"CID": 2244, "MolecularWeight": "180.16"}]}}
    """
    if not isinstance(payload, dict):
        return []
    table = payload.get("PropertyTable")
    if not isinstance(table, dict):
        return []
    rows = table.get("Properties")
    if not isinstance(rows, list):
        return []
    return [row for row in rows if isinstance(row, dict)]
