"""
Datapoint module initialization.

Contains the datapoint request/failure types and the Search Console router.
"""

from datapoints.base import (
    DatapointError,
    DatapointRequest,
    DeferredQuery,
    ImmediateCall,
    SiteContext,
)
from datapoints.router import DatapointRouter

__all__ = [
    "DatapointError",
    "DatapointRequest",
    "DeferredQuery",
    "ImmediateCall",
    "SiteContext",
    "DatapointRouter",
]
