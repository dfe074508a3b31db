"""
Shared metrics configuration for fetch-cache.
"""

from prometheus_client import Counter, Histogram, Info, CollectorRegistry
from typing import Dict, Any, Optional
import time
from contextlib import contextmanager


class MetricsCollector:
    """Centralized metrics collector for cached fetches."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up cache metrics."""

        self._metrics["service_info"] = Info(
            "fetch_cache_service",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        self._metrics["requests_total"] = Counter(
            "fetch_cache_requests_total",
            "Total cached fetches by outcome",
            ["namespace", "strategy", "outcome"],
            registry=self.registry
        )

        self._metrics["writes_total"] = Counter(
            "fetch_cache_writes_total",
            "Total store writes by result",
            ["namespace", "result"],
            registry=self.registry
        )

        self._metrics["diagnostics_total"] = Counter(
            "fetch_cache_diagnostics_total",
            "Total non-fatal cache diagnostics",
            ["code"],
            registry=self.registry
        )

        self._metrics["upstream_duration_seconds"] = Histogram(
            "fetch_cache_upstream_duration_seconds",
            "Upstream fetch duration in seconds",
            ["namespace"],
            registry=self.registry
        )

    def record_request(self, namespace: str, strategy: str, outcome: str):
        """Record how a cached fetch was answered."""
        self._metrics["requests_total"].labels(
            namespace=namespace,
            strategy=strategy,
            outcome=outcome
        ).inc()

    def record_write(self, namespace: str, result: str):
        """Record a store write attempt."""
        self._metrics["writes_total"].labels(namespace=namespace, result=result).inc()

    def record_diagnostic(self, code: str):
        """Record a non-fatal diagnostic."""
        self._metrics["diagnostics_total"].labels(code=code).inc()

    @contextmanager
    def time_operation(self, operation_name: str, **labels):
        """Context manager to time an operation."""
        start_time = time.time()
        try:
            yield
        finally:
            duration = time.time() - start_time
            if operation_name in self._metrics:
                self._metrics[operation_name].labels(**labels).observe(duration)
