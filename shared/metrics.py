"""
Shared metrics configuration for the Entitlements API.
"""

from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry, generate_latest
from typing import Dict, Any, Optional


class MetricsCollector:
    """Per-service Prometheus metrics, kept on a private registry."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )

        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )

        self._metrics["health_check_total"] = Counter(
            "health_check_total",
            "Total health check requests",
            ["status"],
            registry=self.registry
        )

        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type"],
            registry=self.registry
        )

        self._setup_entitlements_metrics()

    def _setup_entitlements_metrics(self):
        """Set up entitlements-specific metrics."""
        self._metrics["subscription_lookups_total"] = Counter(
            "subscription_lookups_total",
            "Total Subscriptions Service lookups",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["subscription_lookup_duration_seconds"] = Histogram(
            "subscription_lookup_duration_seconds",
            "Subscriptions Service lookup duration in seconds",
            registry=self.registry
        )

        self._metrics["entitlement_evaluations_total"] = Counter(
            "entitlement_evaluations_total",
            "Total entitlement evaluations",
            registry=self.registry
        )

        self._metrics["bundle_catalog_reloads_total"] = Counter(
            "bundle_catalog_reloads_total",
            "Total bundle catalog loads",
            ["status"],
            registry=self.registry
        )

        self._metrics["bundles_loaded"] = Gauge(
            "bundles_loaded",
            "Number of bundles in the published catalog",
            registry=self.registry
        )

    def render(self) -> bytes:
        """Render the registry in Prometheus text format."""
        return generate_latest(self.registry)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_health_check(self, status: str):
        """Record health check metrics."""
        self._metrics["health_check_total"].labels(status=status).inc()

    def record_error(self, error_type: str):
        """Record error metrics."""
        self._metrics["errors_total"].labels(error_type=error_type).inc()

    def record_subscription_lookup(self, outcome: str, duration: float):
        self._metrics["subscription_lookups_total"].labels(outcome=outcome).inc()
        self._metrics["subscription_lookup_duration_seconds"].observe(duration)

    def record_evaluation(self):
        self._metrics["entitlement_evaluations_total"].inc()

    def record_catalog_load(self, status: str, bundle_count: Optional[int] = None):
        """Record a catalog (re)load; the gauge only moves on success."""
        self._metrics["bundle_catalog_reloads_total"].labels(status=status).inc()
        if bundle_count is not None:
            self._metrics["bundles_loaded"].set(bundle_count)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
