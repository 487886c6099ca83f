"""
Locates the record array inside an Instantly response body.

The API envelope has been observed in several shapes, so extraction is an
ordered list of named strategies; the first one that finds a list wins.
"""

import json
import logging
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _top_level_array(body: Any) -> Optional[list]:
    return body if isinstance(body, list) else None


def _property(name: str) -> Callable[[Any], Optional[list]]:
    def extract(body: Any) -> Optional[list]:
        if isinstance(body, dict) and isinstance(body.get(name), list):
            return body[name]
        return None

    return extract


def _first_array_property(body: Any) -> Optional[list]:
    if not isinstance(body, dict):
        return None
    empty = None
    for key, value in body.items():
        if isinstance(value, list):
            if value:
                logger.info("Found records in unexpected property: %s", key)
                return value
            empty = value
    return empty


EXTRACTION_STRATEGIES: List[Tuple[str, Callable[[Any], Optional[list]]]] = [
    ("top_level_array", _top_level_array),
    ("data", _property("data")),
    ("campaigns", _property("campaigns")),
    ("results", _property("results")),
    ("first_array_property", _first_array_property),
]


def extract_records(body: Any) -> list:
    """
    Return the record array of a response body, or [] when there is none.

    Strategies are tried in EXTRACTION_STRATEGIES order and the first
    non-empty list is returned.
    """
    found_empty = False
    for name, strategy in EXTRACTION_STRATEGIES:
        records = strategy(body)
        if records:
            logger.debug("Extracted %d records via %s", len(records), name)
            return records
        found_empty = found_empty or records is not None

    if not found_empty:
        logger.warning(
            "No record array found in response: %s", describe_shape(body)
        )
    return []


def extract_cursor(body: Any) -> Optional[str]:
    """Return the next_starting_after cursor of a response body, if any."""
    if not isinstance(body, dict):
        return None
    cursor = body.get("next_starting_after")
    if cursor is None and isinstance(body.get("pagination"), dict):
        cursor = body["pagination"].get("next_starting_after")
    return cursor or None


def describe_shape(body: Any, sample_length: int = 500) -> dict:
    """Summarize a response body for diagnostics."""
    try:
        sample = json.dumps(body, default=str)
    except (TypeError, ValueError):
        sample = repr(body)

    return {
        "hasData": body is not None,
        "dataType": type(body).__name__,
        "dataKeys": list(body.keys()) if isinstance(body, dict) else [],
        "isArray": isinstance(body, list),
        "dataSize": len(sample),
        "sampleData": sample[:sample_length],
    }
