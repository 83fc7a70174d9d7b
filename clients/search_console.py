"""
Google Search Console API Client.

Wraps the Webmasters v3 discovery service. Listing and search analytics
queries are returned as lazy request objects so they can be sent one at a
time or together in a single batch. Site lookups and registrations run
immediately and report their outcome as a RemoteResult instead of raising.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)


@dataclass
class RemoteResult:
    """Outcome of a single remote call."""

    status: int
    value: Optional[Any] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status < 300

    @property
    def not_found(self) -> bool:
        return self.status == 404


def error_status(error: Exception) -> int:
    """Extract the HTTP status from a googleapiclient error, 500 otherwise."""
    resp = getattr(error, "resp", None)
    status = getattr(resp, "status", None)
    try:
        return int(status)
    except (TypeError, ValueError):
        return 500


class SearchConsoleClient:
    """
    Search Console (Webmasters v3) client.

    Requests are deferred by default: building a request does not send it.
    Calls that have to run immediately (site lookup and registration) are
    only allowed inside a `deferral(False)` block.
    """

    API_SERVICE_NAME = "webmasters"
    API_VERSION = "v3"
    SCOPES = ["https://www.googleapis.com/auth/webmasters"]

    def __init__(
        self,
        credentials_file: Optional[str] = None,
        service: Optional[Any] = None,
        defer: bool = True
    ) -> None:
        """
        Initialize the Search Console client.

        Args:
            credentials_file: Path to a service account JSON key.
            service: Prebuilt discovery service (skips credential loading).
            defer: Initial request deferral mode.
        """
        self.credentials_file = credentials_file
        self.defer = defer
        self._service = service
        logger.info("SearchConsoleClient initialized")

    def _get_service(self) -> Any:
        """
        Get or create the Webmasters API service.

        Returns:
            Webmasters API service instance.
        """
        if self._service is None:
            if not self.credentials_file:
                raise RuntimeError(
                    "No Search Console credentials configured. "
                    "Set SEARCH_CONSOLE_CREDENTIALS_FILE."
                )
            credentials = service_account.Credentials.from_service_account_file(
                self.credentials_file, scopes=self.SCOPES
            )
            self._service = build(
                self.API_SERVICE_NAME,
                self.API_VERSION,
                credentials=credentials,
                cache_discovery=False
            )
            logger.debug("Webmasters API service built successfully")
        return self._service

    @contextmanager
    def deferral(self, enabled: bool) -> Iterator["SearchConsoleClient"]:
        """Temporarily switch deferral mode, restoring it on exit."""
        original = self.defer
        self.defer = enabled
        try:
            yield self
        finally:
            self.defer = original

    def _require_immediate(self, operation: str) -> None:
        if self.defer:
            raise RuntimeError(
                f"Cannot run '{operation}' while request deferral is enabled"
            )

    # =========================================================================
    # Deferred requests
    # =========================================================================

    def list_sites(self) -> Any:
        """Build a request listing every site registered for the account."""
        return self._get_service().sites().list()

    def query_search_analytics(self, site_url: str, body: dict[str, Any]) -> Any:
        """Build a search analytics query request for a site."""
        return self._get_service().searchanalytics().query(
            siteUrl=site_url, body=body
        )

    def execute(self, request: Any) -> Any:
        """Send a single deferred request and return its response body."""
        return request.execute()

    def execute_batch(self, requests: dict[str, Any]) -> dict[str, RemoteResult]:
        """
        Send deferred requests together as one batch.

        Args:
            requests: Deferred requests keyed by caller-chosen identifiers.

        Returns:
            A RemoteResult per key. Failures of individual requests do not
            affect the others.
        """
        results: dict[str, RemoteResult] = {}
        if not requests:
            return results

        def _collect(request_id: str, response: Any, exception: Optional[Exception]) -> None:
            if exception is not None:
                logger.warning(f"Batched request '{request_id}' failed: {exception}")
                results[request_id] = RemoteResult(
                    status=error_status(exception), error=str(exception)
                )
            else:
                results[request_id] = RemoteResult(status=200, value=response)

        batch = self._get_service().new_batch_http_request(callback=_collect)
        for key, request in requests.items():
            batch.add(request, request_id=key)

        logger.info(f"Sending batch of {len(requests)} Search Console requests")
        batch.execute()

        for key in requests:
            if key not in results:
                results[key] = RemoteResult(status=500, error="No response in batch")
        return results

    # =========================================================================
    # Immediate requests
    # =========================================================================

    def get_site(self, site_url: str) -> RemoteResult:
        """
        Look up a single site registered for the account.

        Returns:
            RemoteResult with the site resource, or the remote error status
            (404 when the site is not registered).
        """
        self._require_immediate("sites.get")
        try:
            site = self._get_service().sites().get(siteUrl=site_url).execute()
        except HttpError as e:
            status = error_status(e)
            logger.warning(f"Search Console sites.get failed for {site_url} ({status}): {e}")
            return RemoteResult(status=status, error=str(e))
        return RemoteResult(status=200, value=site)

    def add_site(self, site_url: str) -> RemoteResult:
        """
        Register a site with the account.

        Returns:
            RemoteResult with status 204 on success.
        """
        self._require_immediate("sites.add")
        try:
            self._get_service().sites().add(siteUrl=site_url).execute()
        except HttpError as e:
            status = error_status(e)
            logger.error(f"Search Console sites.add failed for {site_url} ({status}): {e}")
            return RemoteResult(status=status, error=str(e))
        logger.info(f"Site added to Search Console: {site_url}")
        return RemoteResult(status=204)
