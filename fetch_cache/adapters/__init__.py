"""
Upstream fetcher adapters.
"""

from .http_fetcher import HttpFetcher

__all__ = ["HttpFetcher"]
