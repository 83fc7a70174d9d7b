"""
Search Console Datapoint Router.

Maps (method, datapoint, params) to a call descriptor:
- GET sites / matched-sites: deferred sites listing
- GET searchanalytics: deferred search analytics query
- POST site: immediate call that registers and selects a property

Unknown combinations produce an `invalid_datapoint` failure. Failures
are returned as DatapointError values, never raised.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union

from analytics.date_range import parse_date_range
from analytics.site_matcher import trailingslashit
from clients.search_console import SearchConsoleClient
from datapoints.base import (
    PROPERTY_OPTION,
    CallDescriptor,
    DatapointError,
    DatapointRequest,
    DeferredQuery,
    ImmediateCall,
    SiteContext,
)

logger = logging.getLogger(__name__)

SEARCH_ANALYTICS_DEFAULTS = {
    "compareDateRanges": False,
    "dateRange": "last-28-days",
    "dimensions": "",
    "url": "",
}

DEFAULT_ROW_LIMIT = 500

# Days between today and the last day with complete Search Console data
DATE_OFFSET = 3


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class DatapointRouter:
    """
    Routes datapoint requests to Search Console calls.

    Usage:
        router = DatapointRouter(client, options, context)
        descriptor = router.route("GET", "searchanalytics", {"dateRange": "last-7-days"})
    """

    # datapoint => service identifier
    DATAPOINT_SERVICES = {
        # GET
        "sites": "webmasters",
        "matched-sites": "webmasters",
        "searchanalytics": "webmasters",
        # POST
        "site": "webmasters",
    }

    def __init__(
        self,
        client: SearchConsoleClient,
        options: Any,
        context: SiteContext,
        date_offset: int = DATE_OFFSET,
        today: Optional[Callable[[], date]] = None
    ) -> None:
        self.client = client
        self.options = options
        self.context = context
        self.date_offset = date_offset
        self._today = today or (lambda: datetime.now(timezone.utc).date())

    def route(
        self,
        method: str,
        name: str,
        params: Optional[Mapping[str, Any]] = None
    ) -> Union[CallDescriptor, DatapointError]:
        """Convenience wrapper building the DatapointRequest."""
        return self.create_data_request(DatapointRequest(method, name, params or {}))

    def create_data_request(
        self, request: DatapointRequest
    ) -> Union[CallDescriptor, DatapointError]:
        """
        Create the call descriptor for a datapoint request.

        Args:
            request: The incoming datapoint request.

        Returns:
            DeferredQuery or ImmediateCall on success, DatapointError otherwise.
        """
        logger.debug(f"Routing {request.method} {request.name}")

        if request.method == "GET":
            if request.name in ("sites", "matched-sites"):
                return DeferredQuery(self.client.list_sites())
            if request.name == "searchanalytics":
                return self._search_analytics_request(request.params)
        elif request.method == "POST":
            if request.name == "site":
                site_url = request.params.get("siteUrl")
                if not site_url:
                    return DatapointError.missing_parameter("siteUrl")
                return ImmediateCall(self._select_site_operation(trailingslashit(site_url)))

        logger.warning(f"Invalid datapoint requested: {request.method} {request.name}")
        return DatapointError.invalid_datapoint()

    def _search_analytics_request(
        self, params: Mapping[str, Any]
    ) -> Union[DeferredQuery, DatapointError]:
        data = {**SEARCH_ANALYTICS_DEFAULTS, **params}

        start_date, end_date = parse_date_range(
            data["dateRange"],
            multiplier=2 if _as_bool(data["compareDateRanges"]) else 1,
            offset=self.date_offset,
            today=self._today(),
        )

        dimensions = [
            dimension.strip()
            for dimension in str(data["dimensions"] or "").split(",")
            if dimension.strip()
        ]

        row_limit = DEFAULT_ROW_LIMIT
        if data.get("limit") not in (None, ""):
            try:
                row_limit = int(data["limit"])
            except (TypeError, ValueError):
                logger.warning(f"Invalid searchanalytics limit: {data['limit']!r}")
                return DatapointError.invalid_parameter("limit")

        return DeferredQuery(self.create_search_analytics_request(
            dimensions=dimensions,
            start_date=start_date,
            end_date=end_date,
            page=data["url"],
            row_limit=row_limit,
        ))

    def create_search_analytics_request(
        self,
        dimensions: Optional[list[str]] = None,
        start_date: str = "",
        end_date: str = "",
        page: str = "",
        row_limit: int = DEFAULT_ROW_LIMIT
    ) -> Any:
        """
        Build a search analytics query for the reference site.

        Args:
            dimensions: Dimensions to group rows by.
            start_date: Start date in YYYY-MM-DD format.
            end_date: End date in YYYY-MM-DD format.
            page: Page URL to filter rows by.
            row_limit: Maximum number of rows to return.

        Returns:
            Deferred request object.
        """
        body: dict[str, Any] = {}
        if dimensions:
            body["dimensions"] = list(dimensions)
        if start_date:
            body["startDate"] = start_date
        if end_date:
            body["endDate"] = end_date
        if page:
            body["dimensionFilterGroups"] = [{
                "filters": [{"dimension": "page", "expression": page}],
            }]
        if row_limit:
            body["rowLimit"] = row_limit

        return self.client.query_search_analytics(
            self.context.get_reference_site_url(), body
        )

    def _select_site_operation(self, site_url: str) -> Callable[[], Any]:
        """Build the operation that ensures `site_url` exists and selects it."""

        def select_site() -> Union[dict[str, Any], DatapointError]:
            with self.client.deferral(False):
                result = self.client.get_site(site_url)

                if result.not_found:
                    logger.info(f"Site {site_url} not in Search Console, adding it")
                    added = self.client.add_site(site_url)
                    if added.status != 204:
                        return DatapointError.failed_to_add_site()
                    result = self.client.get_site(site_url)

            if not result.ok:
                return DatapointError.remote_request_failed(result.status, result.error)

            self.options.set(PROPERTY_OPTION, site_url)
            logger.info(f"Search Console property set to {site_url}")

            site = result.value or {}
            return {
                "siteUrl": site.get("siteUrl"),
                "permissionLevel": site.get("permissionLevel"),
            }

        return select_site
