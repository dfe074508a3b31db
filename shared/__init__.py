"""
Shared utilities for fetch-cache.

This package aggregates the ambient building blocks used by the cache:

- config: Settings via pydantic-settings
- logging: Structured logging with cached-fetch context
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses

Do not import from fetch_cache into shared/.
"""
