"""
Per-post Search Console data presence.

Answers whether a post had any clicks or impressions over the last week.
The answer is cached as 0/1 in the transient store for two hours and is
only refreshed once it expires.
"""

import logging
from typing import Any, Callable, Optional

from datapoints.base import DatapointError, DatapointRequest, SiteContext

logger = logging.getLogger(__name__)

TRANSIENT_PREFIX = "has_data_for_post_"
TRANSIENT_TTL = 2 * 3600


def build_presence_requests(post_url: str) -> dict[str, DatapointRequest]:
    """Batch of queries used to probe a post for search traffic."""
    return {
        "sc-site-analytics": DatapointRequest("GET", "searchanalytics", {
            "url": post_url,
            "dateRange": "last-7-days",
            "dimensions": "date",
            "compareDateRanges": True,
        }),
        "search-keywords": DatapointRequest("GET", "searchanalytics", {
            "url": post_url,
            "dateRange": "last-7-days",
            "dimensions": "query",
            "limit": 10,
        }),
    }


def _has_traffic(response: Any) -> bool:
    if isinstance(response, DatapointError):
        return False
    if not isinstance(response, list) or not response:
        return False
    row = response[0]
    if not isinstance(row, dict):
        return False
    return (row.get("clicks") or 0) > 0 or (row.get("impressions") or 0) > 0


class PostDataPresence:
    """
    Cached check for Search Console data on a post.

    Args:
        context: Site context resolving post permalinks.
        transients: Store with get(key) and set(key, value, ttl).
        batch_fetcher: Callable taking {key: DatapointRequest} and returning
            {key: normalized response or DatapointError}.
        ttl: Cache lifetime in seconds.
    """

    def __init__(
        self,
        context: SiteContext,
        transients: Any,
        batch_fetcher: Callable[[dict[str, DatapointRequest]], dict[str, Any]],
        ttl: int = TRANSIENT_TTL
    ) -> None:
        self.context = context
        self.transients = transients
        self.batch_fetcher = batch_fetcher
        self.ttl = ttl

    def has_data_for_post(self, post_id: Optional[int]) -> bool:
        if not post_id:
            return False

        transient_key = f"{TRANSIENT_PREFIX}{post_id}"
        has_data = self.transients.get(transient_key)
        if has_data is not None:
            logger.debug(f"Data presence for post {post_id} served from cache")
            return bool(has_data)

        post_url = self.context.get_reference_permalink(post_id)
        if not post_url:
            logger.debug(f"No permalink for post {post_id}")
            return False

        try:
            responses = self.batch_fetcher(build_presence_requests(post_url))
        except Exception as e:
            logger.warning(f"Data presence lookup failed for post {post_id}: {e}")
            responses = {}

        found = False
        for key, response in responses.items():
            if _has_traffic(response):
                logger.debug(f"Post {post_id} has data ({key})")
                found = True
                break

        self.transients.set(transient_key, int(found), self.ttl)
        return found
