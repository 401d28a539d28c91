"""
API key and rate limit gate for the Gateway.

Runs ahead of every route: authenticate the caller, charge the caller's
rate windows, and only then let the request reach a handler. Rejections
stop the pipeline with a small JSON body.
"""

from typing import Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.errors import (
    AccessLayerException,
    InvalidCredentialError,
    MissingCredentialError,
    RateLimitExceededError,
)
from shared.logging import get_logger, set_api_key_context
from shared.metrics import MetricsCollector

from ..auth.api_key import ApiKeyAuthenticator, AuthOutcome
from ..ratelimit.sliding_window import SlidingWindowRateLimiter


def error_response(error: AccessLayerException, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_body(), headers=headers)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Authenticates callers and enforces per-key rate windows."""

    def __init__(
        self,
        app,
        authenticator: ApiKeyAuthenticator,
        rate_limiter: Optional[SlidingWindowRateLimiter] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        super().__init__(app)
        self.authenticator = authenticator
        self.rate_limiter = rate_limiter
        self.metrics = metrics
        self.logger = get_logger("gateway.api_key_middleware")

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        result = self.authenticator.authenticate(path, request.headers, request.query_params)

        if result.outcome is AuthOutcome.MISSING_KEY:
            self.logger.warning("API key missing", path=path)
            self._count_rejection(result.outcome)
            return error_response(MissingCredentialError())

        if result.outcome is AuthOutcome.INVALID_KEY:
            self.logger.warning("Invalid API key", path=path, api_key=result.masked_key)
            self._count_rejection(result.outcome)
            return error_response(InvalidCredentialError())

        request.state.api_key = result.masked_key
        set_api_key_context(result.masked_key)

        rate_headers: Dict[str, str] = {}
        if result.credential is not None and self.rate_limiter is not None:
            admitted = self.rate_limiter.admit(result.credential)
            status = self.rate_limiter.get_status(result.credential)
            if self.metrics:
                self.metrics.set_gauge("rate_limit_tracked_keys", self.rate_limiter.tracked_credentials)

            if not admitted:
                self.logger.warning(
                    "Rate limit exceeded",
                    path=path,
                    api_key=result.masked_key,
                    minute_count=status["minute_count"],
                    hour_count=status["hour_count"]
                )
                if self.metrics:
                    self.metrics.increment_counter("rate_limit_hits_total")
                return error_response(
                    RateLimitExceededError(),
                    headers={"Retry-After": str(status["reset_in_seconds"])}
                )

            rate_headers = {
                "X-RateLimit-Limit": str(self.rate_limiter.requests_per_minute),
                "X-RateLimit-Remaining": str(status["remaining"]),
            }

        self.logger.debug("API key authentication successful", path=path, api_key=result.masked_key)
        response = await call_next(request)
        for name, value in rate_headers.items():
            response.headers[name] = value
        return response

    def _count_rejection(self, outcome: AuthOutcome) -> None:
        if self.metrics:
            self.metrics.increment_counter("auth_rejections_total", outcome=outcome.value)
