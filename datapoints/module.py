"""
Search Console module.

Composes the router, the response normalizer and the post data presence
cache behind the data API used by the HTTP layer:
- get_data: single datapoint request
- get_batch_data: several datapoint requests sent as one remote batch
- has_data_for_post: cached check used to decide on the admin bar menu
"""

import logging
from typing import Any, Callable, Optional, Union

from analytics.normalizer import normalize_datapoint_response
from analytics.presence import TRANSIENT_TTL, PostDataPresence
from clients.search_console import SearchConsoleClient, error_status
from config import Config
from datapoints.base import (
    PROPERTY_OPTION,
    DatapointError,
    DatapointRequest,
    DeferredQuery,
    ImmediateCall,
    SiteContext,
)
from datapoints.router import DATE_OFFSET, DatapointRouter
from memory.options_store import create_options_store
from memory.transient_store import create_transient_store

logger = logging.getLogger(__name__)


class SearchConsoleModule:
    """
    Search Console integration for a single site.

    Usage:
        module = SearchConsoleModule(client, options, transients, "https://example.com/")
        rows = module.get_data("GET", "searchanalytics", {"dimensions": "date"})
    """

    SLUG = "search-console"
    SCOPES = ["https://www.googleapis.com/auth/webmasters"]
    INFO = {
        "slug": SLUG,
        "name": "Search Console",
        "description": (
            "Google Search Console and helps you understand how Google views "
            "your site and optimize its performance in search results."
        ),
        "cta": "Connect your site to Google Search Console.",
        "order": 1,
        "homepage": "https://search.google.com/search-console",
        "learn_more": "https://www.google.com/webmasters/tools/home",
        "force_active": True,
    }

    def __init__(
        self,
        client: SearchConsoleClient,
        options: Any,
        transients: Any,
        site_url: str,
        permalink_resolver: Optional[Callable[[int], Optional[str]]] = None,
        date_offset: int = DATE_OFFSET,
        has_data_ttl: int = TRANSIENT_TTL,
        today: Optional[Callable[[], Any]] = None
    ) -> None:
        self.client = client
        self.options = options
        self.context = SiteContext(site_url, options, permalink_resolver)
        self.router = DatapointRouter(
            client, options, self.context, date_offset=date_offset, today=today
        )
        self.presence = PostDataPresence(
            self.context, transients, self.get_batch_data, ttl=has_data_ttl
        )

    @classmethod
    def from_config(cls, cfg: Config) -> "SearchConsoleModule":
        """Build a module wired to the configured client and storage backends."""
        sc = cfg.search_console
        site_url = sc.site_url

        def permalink(post_id: int) -> Optional[str]:
            if not site_url:
                return None
            return sc.permalink_template.format(
                site_url=site_url.rstrip("/") + "/", post_id=post_id
            )

        return cls(
            client=SearchConsoleClient(credentials_file=sc.credentials_file),
            options=create_options_store(cfg.storage),
            transients=create_transient_store(cfg.storage),
            site_url=site_url,
            permalink_resolver=permalink,
            date_offset=sc.date_offset,
            has_data_ttl=sc.has_data_ttl,
        )

    # =========================================================================
    # Module information
    # =========================================================================

    def get_scopes(self) -> list[str]:
        return list(self.SCOPES)

    def get_info(self) -> dict[str, Any]:
        return dict(self.INFO)

    def get_datapoints(self) -> list[str]:
        return list(DatapointRouter.DATAPOINT_SERVICES)

    def get_property(self) -> Optional[str]:
        return self.options.get(PROPERTY_OPTION)

    def get_reference_site_url(self) -> str:
        return self.context.get_reference_site_url()

    # =========================================================================
    # Data API
    # =========================================================================

    def create_data_request(
        self, method: str, datapoint: str, params: Optional[dict[str, Any]] = None
    ):
        return self.router.route(method, datapoint, params)

    def parse_data_response(self, method: str, datapoint: str, response: Any) -> Any:
        return normalize_datapoint_response(
            method, datapoint, response,
            reference_url=self.context.get_reference_site_url()
        )

    def _failure(self, request: DatapointRequest, error: Exception) -> DatapointError:
        logger.error(f"Search Console {request.method} {request.name} failed: {error}")
        return DatapointError.remote_request_failed(error_status(error), str(error))

    def _route(self, request: DatapointRequest) -> Any:
        try:
            return self.router.create_data_request(request)
        except Exception as e:
            return self._failure(request, e)

    def _execute(self, request: DatapointRequest, descriptor: Any) -> Any:
        try:
            if isinstance(descriptor, ImmediateCall):
                return descriptor.operation()
            return self.client.execute(descriptor.request)
        except Exception as e:
            return self._failure(request, e)

    def get_data(
        self, method: str, datapoint: str, params: Optional[dict[str, Any]] = None
    ) -> Union[Any, DatapointError]:
        """
        Run a single datapoint request.

        Returns:
            The normalized response, or a DatapointError. Failed requests
            are never passed to the normalizer.
        """
        request = DatapointRequest(method, datapoint, params or {})
        descriptor = self._route(request)
        if isinstance(descriptor, DatapointError):
            return descriptor

        response = self._execute(request, descriptor)
        if isinstance(response, DatapointError):
            return response

        return self.parse_data_response(request.method, request.name, response)

    def get_batch_data(
        self, requests: dict[str, DatapointRequest]
    ) -> dict[str, Union[Any, DatapointError]]:
        """
        Run several datapoint requests, sending deferred queries as one batch.

        Args:
            requests: Datapoint requests keyed by caller-chosen identifiers.

        Returns:
            Normalized response or DatapointError per key.
        """
        results: dict[str, Any] = {}
        deferred: dict[str, Any] = {}

        for key, request in requests.items():
            descriptor = self._route(request)
            if isinstance(descriptor, DatapointError):
                results[key] = descriptor
            elif isinstance(descriptor, DeferredQuery):
                deferred[key] = descriptor.request
            else:
                results[key] = self._execute(request, descriptor)

        try:
            remote_results = self.client.execute_batch(deferred)
        except Exception as e:
            logger.error(f"Search Console batch of {len(deferred)} requests failed: {e}")
            failure = DatapointError.remote_request_failed(error_status(e), str(e))
            remote_results = {}
            for key in deferred:
                results[key] = failure

        for key, remote in remote_results.items():
            if remote.ok:
                results[key] = remote.value
            else:
                results[key] = DatapointError.remote_request_failed(remote.status, remote.error)

        return {
            key: (
                results[key] if isinstance(results[key], DatapointError)
                else self.parse_data_response(request.method, request.name, results[key])
            )
            for key, request in requests.items()
        }

    # =========================================================================
    # Site state
    # =========================================================================

    def has_data_for_post(self, post_id: Optional[int]) -> bool:
        """Whether Search Console has clicks or impressions for the post (cached)."""
        return self.presence.has_data_for_post(post_id)

    def is_setup_complete(self, complete: bool = True) -> bool:
        """Setup only counts as complete once a property is selected."""
        if not complete:
            return complete
        return bool(self.get_property())

    def get_setup_data(self, data: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        data = dict(data or {})
        data["hasSearchConsoleProperty"] = bool(self.get_property())
        return data

    def show_admin_bar_menu(self, display: bool, post_id: Optional[int]) -> bool:
        if not self.get_property():
            return False
        if not self.has_data_for_post(post_id):
            return False
        return display
