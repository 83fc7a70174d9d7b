"""
Base classes for the Search Console datapoint layer.

Defines core data structures used across the router, module and server:
- DatapointRequest: Immutable incoming request
- DatapointError: Typed failure value (returned, never raised)
- DeferredQuery / ImmediateCall: Call descriptors produced by routing
- SiteContext: Reference URLs for the current site
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

logger = logging.getLogger(__name__)

PROPERTY_OPTION = "googlesitekit_search_console_property"


@dataclass(frozen=True)
class DatapointRequest:
    """A single datapoint request as received from the front end."""

    method: str
    name: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


@dataclass(frozen=True)
class DatapointError:
    """
    Failure produced while routing or executing a datapoint request.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        status: HTTP status the failure should be surfaced with
    """

    code: str
    message: str
    status: int = 500

    @classmethod
    def missing_parameter(cls, name: str) -> "DatapointError":
        return cls(
            code="missing_required_param",
            message=f"Request parameter is empty: {name}.",
            status=400,
        )

    @classmethod
    def invalid_parameter(cls, name: str) -> "DatapointError":
        return cls(
            code="invalid_param",
            message=f"Request parameter is invalid: {name}.",
            status=400,
        )

    @classmethod
    def failed_to_add_site(cls) -> "DatapointError":
        return cls(
            code="failed_to_add_site_to_search_console",
            message="Error adding the site to Search Console.",
            status=500,
        )

    @classmethod
    def invalid_datapoint(cls) -> "DatapointError":
        return cls(code="invalid_datapoint", message="Invalid datapoint.", status=400)

    @classmethod
    def remote_request_failed(cls, status: int, detail: Optional[str] = None) -> "DatapointError":
        return cls(
            code="remote_request_failed",
            message=detail or "Search Console request failed.",
            status=status,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "status": self.status}


@dataclass(frozen=True)
class DeferredQuery:
    """A remote request that has been built but not sent."""

    request: Any


@dataclass(frozen=True)
class ImmediateCall:
    """A zero-argument operation performing remote calls and local updates."""

    operation: Callable[[], Any]


CallDescriptor = Union[DeferredQuery, ImmediateCall]


class SiteContext:
    """
    Reference URLs for the current site.

    The reference site URL is the selected Search Console property when
    one is set, otherwise the configured home URL.
    """

    def __init__(
        self,
        site_url: str,
        options: Any,
        permalink_resolver: Optional[Callable[[int], Optional[str]]] = None
    ) -> None:
        self.site_url = site_url
        self.options = options
        self._permalink_resolver = permalink_resolver

    def get_reference_site_url(self) -> str:
        return self.options.get(PROPERTY_OPTION) or self.site_url

    def get_reference_permalink(self, post_id: int) -> Optional[str]:
        """Public URL of a post, or None when it cannot be resolved."""
        if self._permalink_resolver is None:
            return None
        return self._permalink_resolver(post_id) or None
