"""
Tests for the shared config, errors, logging and metrics helpers.
"""

import pytest
from prometheus_client import CollectorRegistry

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from fetch_cache.decorator import caching_fetch
from fetch_cache.options import CacheOptions
from shared.config import BaseConfig
from shared.errors import DecodeError, ErrorResponse, NotFoundError, StoreError, URLError
from shared.logging import add_fetch_context, add_service_context, cache_key_var, fetch_context, namespace_var
from shared.metrics import MetricsCollector

from cache_fakes import FakeStore, FakeUpstream


class TestConfig:
    """Test cases for BaseConfig."""

    def test_defaults(self, monkeypatch):
        for name in ("FETCH_CACHE_STRATEGY", "FETCH_CACHE_DEFAULT_TTL", "FETCH_CACHE_HOST_TTLS"):
            monkeypatch.delenv(name, raising=False)
        config = BaseConfig()
        assert config.strategy == "readthrough"
        assert config.namespace == "TL"
        assert config.high_water == 1000
        assert config.ttl_config() == 300

    def test_environment(self, monkeypatch):
        """Settings are read from FETCH_CACHE_* variables."""
        monkeypatch.setenv("FETCH_CACHE_STRATEGY", "race")
        monkeypatch.setenv("FETCH_CACHE_DEFAULT_TTL", "90")
        monkeypatch.setenv("FETCH_CACHE_HOST_TTLS", '{"a.com": 60}')

        config = BaseConfig()

        assert config.strategy == "race"
        assert config.ttl_config() == {"a.com": 60, "default": 90}

    def test_explicit_default_in_host_ttls_wins(self):
        config = BaseConfig(default_ttl=90, host_ttls={"default": 30})
        assert config.ttl_config() == {"default": 30}


class TestErrors:
    """Test cases for the error taxonomy."""

    def test_to_response(self):
        error = StoreError("Redis get failed", details={"key": "TL-/x", "operation": "get"})
        response = error.to_response()

        assert isinstance(response, ErrorResponse)
        assert response.code == "STORE_ERROR"
        assert response.details == {"key": "TL-/x", "operation": "get"}

    def test_key_property(self):
        assert DecodeError(details={"key": "TL-/x"}).key == "TL-/x"
        assert DecodeError().key is None

    def test_url_error(self):
        error = URLError("http://[::1")
        assert error.code == "INVALID_URL"
        assert error.details["url"] == "http://[::1"

    def test_negative_outcomes(self):
        assert NotFoundError().status == 404
        assert NotFoundError().code == "NOT_FOUND"
        assert NotFoundError(cached=True).cached is True


class TestLogging:
    """Test cases for the logging processors."""

    def test_fetch_context_processor(self):
        with fetch_context("TL", "TL-/x", "race"):
            event = add_fetch_context(None, "info", {"event": "hit"})

        assert event["cache_namespace"] == "TL"
        assert event["cache_key"] == "TL-/x"
        assert event["cache_strategy"] == "race"
        assert "cache_key" not in add_fetch_context(None, "info", {"event": "idle"})

    def test_fetch_context_restores_outer_values(self):
        with fetch_context("TL", "TL-/outer"):
            with fetch_context(key="TL-/inner"):
                assert cache_key_var.get() == "TL-/inner"
            assert cache_key_var.get() == "TL-/outer"
        assert cache_key_var.get() is None
        assert namespace_var.get() is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("strategy", ["readthrough", "race"])
    async def test_context_is_cleared_after_a_call(self, upstream, strategy):
        """Callers do not inherit the key of the fetch they just made."""
        cached = caching_fetch(upstream, CacheOptions(store=FakeStore(), strategy=strategy))

        assert cache_key_var.get() is None
        await cached("/x")
        await cached.drain()

        assert cache_key_var.get() is None
        assert namespace_var.get() is None

    @pytest.mark.asyncio
    async def test_context_is_cleared_after_a_failed_call(self):
        cached = caching_fetch(FakeUpstream({"/gone": NotFoundError()}), CacheOptions(store=FakeStore()))

        with pytest.raises(NotFoundError):
            await cached("/gone")
        await cached.drain()

        assert cache_key_var.get() is None

    @pytest.mark.asyncio
    async def test_background_writes_keep_the_fetch_context(self, upstream):
        store = FakeStore()
        store.set_error = StoreError("Redis setex failed")
        seen = []
        store.add_error_listener(lambda error: seen.append(cache_key_var.get()))
        cached = caching_fetch(upstream, CacheOptions(store=store))

        await cached("/x")
        await cached.drain()

        assert seen == ["TL-/x"]
        assert cache_key_var.get() is None

    def test_service_context_processor(self):
        event = add_service_context(None, "info", {"logger": "fetch_cache.race"})
        assert event["service"] == "fetch_cache"


class TestMetrics:
    """Test cases for MetricsCollector."""

    @pytest.mark.asyncio
    async def test_requests_and_writes_are_counted(self, upstream):
        registry = CollectorRegistry()
        metrics = MetricsCollector("fetch_cache", registry)
        store = FakeStore()
        cached = caching_fetch(upstream, CacheOptions(store=store), metrics)

        await cached("/x")
        await cached.drain()
        await cached("/x")

        def sample(name, **labels):
            return registry.get_sample_value(name, labels)

        miss = {"namespace": "TL", "strategy": "readthrough", "outcome": "miss"}
        hit = {"namespace": "TL", "strategy": "readthrough", "outcome": "hit"}
        assert sample("fetch_cache_requests_total", **miss) == 1.0
        assert sample("fetch_cache_requests_total", **hit) == 1.0
        assert sample("fetch_cache_writes_total", namespace="TL", result="written") == 1.0
        assert sample("fetch_cache_upstream_duration_seconds_count", namespace="TL") == 1.0

    @pytest.mark.asyncio
    async def test_diagnostics_are_counted(self, upstream):
        registry = CollectorRegistry()
        metrics = MetricsCollector("fetch_cache", registry)
        cached = caching_fetch(upstream, CacheOptions(store=FakeStore(high_water=0)), metrics)

        await cached("/x")

        assert registry.get_sample_value(
            "fetch_cache_diagnostics_total", {"code": "STORE_SATURATED"}
        ) == 1.0
        assert registry.get_sample_value(
            "fetch_cache_requests_total",
            {"namespace": "TL", "strategy": "readthrough", "outcome": "bypass"}
        ) == 1.0
