"""
Shared utilities for the Steam Access Gateway.

This package aggregates common building blocks consumed by the gateway and
the client:

- config: Service and client configuration via pydantic-settings
- logging: Structured logging with trace and request correlation
- metrics: Prometheus metrics helpers
- errors: Error taxonomy and response bodies
- base_service: FastAPI service skeleton with health, metrics and error handlers

Do not import from service_gateway into shared/.
"""
