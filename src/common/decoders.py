"""
Decoders turning raw Instantly records into display-ready records.

Every coded field is replaced by the label from its lookup table, or by an
empty string when the code is unknown. Inputs are never mutated.
"""

from typing import Any, Dict

from common.constants import (
    CAMPAIGN_STATUS,
    LEAD_ENRICHMENT_STATUS,
    LEAD_ESP_CODE,
    LEAD_INTEREST_STATUS,
    LEAD_STATUS,
    LEAD_UPLOAD_METHOD,
    LEAD_VERIFICATION_STATUS,
)

# raw field -> (decoded field, table)
CAMPAIGN_CODED_FIELDS = {
    "status": ("status", CAMPAIGN_STATUS),
}

LEAD_CODED_FIELDS = {
    "status": ("status", LEAD_STATUS),
    "lt_interest_status": ("interest_status", LEAD_INTEREST_STATUS),
    "verification_status": ("verification_status", LEAD_VERIFICATION_STATUS),
    "enrichment_status": ("enrichment_status", LEAD_ENRICHMENT_STATUS),
    "esp_code": ("esp_provider", LEAD_ESP_CODE),
    "upload_method": ("upload_method", LEAD_UPLOAD_METHOD),
}


def decode_code(table: Dict[int, str], code: Any) -> str:
    """
    Look up a status code in its table.

    Codes may arrive as ints or numeric strings ("-1"). Anything that is not
    in the table, including None and booleans, decodes to "".
    """
    if code is None or isinstance(code, bool):
        return ""
    try:
        key = int(code)
    except (TypeError, ValueError):
        return ""
    if isinstance(code, float) and code != key:
        return ""
    return table.get(key, "")


def _decode(raw: dict, coded_fields: dict) -> dict:
    decoded = dict(raw)
    for raw_field, (target_field, table) in coded_fields.items():
        if raw_field in raw:
            if raw_field != target_field:
                decoded.pop(raw_field)
            decoded[target_field] = decode_code(table, raw[raw_field])
    return decoded


def decode_campaign(raw: dict) -> dict:
    """Return a copy of a raw campaign with its status decoded."""
    return _decode(raw, CAMPAIGN_CODED_FIELDS)


def decode_lead(raw: dict) -> dict:
    """Return a copy of a raw lead with every coded status field decoded."""
    return _decode(raw, LEAD_CODED_FIELDS)
