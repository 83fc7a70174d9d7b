"""
Analytics module.

Provides date range resolution, property matching and response normalization.
"""

from .date_range import parse_date_range
from .normalizer import map_sites, normalize_datapoint_response
from .site_matcher import match_sites

__all__ = [
    "parse_date_range",
    "map_sites",
    "normalize_datapoint_response",
    "match_sites",
]
