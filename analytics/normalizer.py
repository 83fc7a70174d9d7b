"""
Search Console Response Normalizer.

Converts raw Search Console API responses into the JSON-serializable
shapes the dashboard expects.
"""

import logging
from typing import Any

from analytics.site_matcher import match_sites

logger = logging.getLogger(__name__)


def map_sites(site_entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Map raw site resources to site records.

    Example return value:
        [{"siteUrl": "https://example.com/", "permissionLevel": "siteOwner"}]
    """
    return [
        {
            "siteUrl": entry.get("siteUrl"),
            "permissionLevel": entry.get("permissionLevel"),
        }
        for entry in site_entries
    ]


def normalize_datapoint_response(
    method: str,
    datapoint: str,
    response: Any,
    reference_url: str = ""
) -> Any:
    """
    Normalize a raw response for the given datapoint.

    Args:
        method: Request method, "GET" or "POST".
        datapoint: Datapoint name.
        response: Raw response body.
        reference_url: Reference site URL, used for "matched-sites".

    Returns:
        - sites: list of site records
        - matched-sites: {"exactMatch": ..., "propertyMatches": [...]}
        - searchanalytics: the response rows
        - anything else: the response unchanged
    """
    if method.upper() == "GET":
        if datapoint == "sites":
            return map_sites((response or {}).get("siteEntry", []))

        if datapoint == "matched-sites":
            sites = map_sites((response or {}).get("siteEntry", []))
            return match_sites(sites, reference_url)

        if datapoint == "searchanalytics":
            rows = (response or {}).get("rows", [])
            logger.debug(f"Search analytics returned {len(rows)} rows")
            return rows

    return response
