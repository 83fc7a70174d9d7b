"""
Google API Clients.

Provides authenticated access to the Search Console API.
"""

from .search_console import RemoteResult, SearchConsoleClient

__all__ = ["RemoteResult", "SearchConsoleClient"]
