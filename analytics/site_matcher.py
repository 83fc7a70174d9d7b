"""
Matching of Search Console properties against the site's reference URL.

A property matches when its host is a right-aligned part of the reference
host (so "blog.example.com" matches "www.blog.example.com"). Among those,
the exact match is the first property whose URL equals the reference URL
once both carry a trailing slash.
"""

import logging
from typing import Any, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

DOMAIN_PROPERTY_PREFIX = "sc-domain:"


def trailingslashit(url: str) -> str:
    """Return `url` with exactly one trailing slash."""
    return url.rstrip("/\\") + "/"


def get_host(url: str) -> str:
    """Lowercased host of a URL or domain property, empty if there is none."""
    if not url:
        return ""
    if url.startswith(DOMAIN_PROPERTY_PREFIX):
        return url[len(DOMAIN_PROPERTY_PREFIX):].strip("/").lower()
    return urlparse(url).hostname or ""


def is_host_match(reference_host: str, site_host: str) -> bool:
    """True when `site_host`, read from the right, is a prefix of `reference_host`."""
    if not reference_host or not site_host:
        return False
    return reference_host[::-1].startswith(site_host[::-1])


def match_sites(sites: list[dict[str, Any]], reference_url: str) -> dict[str, Any]:
    """
    Find the properties matching a reference URL.

    Args:
        sites: Site records with "siteUrl" and "permissionLevel".
        reference_url: The site's reference URL.

    Returns:
        {
            "exactMatch": site record or None,
            "propertyMatches": list of site records, in input order
        }
    """
    reference_host = get_host(reference_url)

    property_matches = [
        site for site in sites
        if is_host_match(reference_host, get_host(site.get("siteUrl", "")))
    ]

    exact_match: Optional[dict[str, Any]] = None
    normalized_reference = trailingslashit(reference_url)
    for site in property_matches:
        if trailingslashit(site.get("siteUrl", "")) == normalized_reference:
            exact_match = site
            break

    logger.debug(
        f"Matched {len(property_matches)} of {len(sites)} properties for {reference_url} "
        f"(exact match: {exact_match is not None})"
    )

    return {
        "exactMatch": exact_match,
        "propertyMatches": property_matches,
    }
