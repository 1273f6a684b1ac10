"""
Shared utilities for the Entitlements API.

This package aggregates the cross-cutting building blocks used by the
service package:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- retry: Back-off helper (call_with_retry) for upstream calls
- base_service: FastAPI application skeleton (middleware, health, metrics)

Do not import from service_* packages into shared/.
"""
