"""
Steam Web API transport for the Gateway.
"""

import time
from typing import Any, Optional, Type, TypeVar

import httpx

from shared.config import SteamApiSettings
from shared.errors import DecodeError, UpstreamTransportError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from steam_models import decode

from .upstream_request import RequestTranslator, StoreRequest, UpstreamRequest, UpstreamTargets

T = TypeVar("T")


class SteamApiService:
    """Issues translated requests to Steam and decodes the replies.

    Calls are made once; retries, if wanted, belong to whoever owns the
    HTTP client.
    """

    def __init__(
        self,
        settings: SteamApiSettings,
        http_client: Optional[httpx.AsyncClient] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.settings = settings
        self.translator = RequestTranslator(
            UpstreamTargets(
                base_url=settings.base_url,
                store_base_url=settings.store_base_url,
                api_key=settings.api_key,
            )
        )
        self.metrics = metrics
        self.logger = get_logger("gateway.steam_api")
        self._client = http_client or httpx.AsyncClient(timeout=float(settings.timeout_seconds))

    async def close(self) -> None:
        await self._client.aclose()

    async def get_raw(self, request: UpstreamRequest) -> str:
        """Fetch the body of ``request`` as text."""
        url = self.translator.build(request)
        log_url = self.translator.redacted(request)

        if self.settings.enable_logging:
            self.logger.info("Making Steam API request", url=log_url, operation=request.operation)

        start_time = time.time()
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            self._record(request, "timeout", start_time)
            self.logger.error("Steam API request timed out", url=log_url, operation=request.operation)
            raise UpstreamTransportError(
                "Steam API request timed out",
                details={"operation": request.operation}
            ) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            self._record(request, str(status_code), start_time)
            self.logger.error(
                "Steam API returned an error status",
                url=log_url,
                operation=request.operation,
                status_code=status_code
            )
            raise UpstreamTransportError(
                f"Steam API request failed with status {status_code}",
                details={"operation": request.operation, "status_code": status_code}
            ) from exc
        except httpx.HTTPError as exc:
            self._record(request, "error", start_time)
            self.logger.error(
                "Steam API request failed",
                url=log_url,
                operation=request.operation,
                error=str(exc)
            )
            raise UpstreamTransportError(
                f"Steam API request failed: {exc}",
                details={"operation": request.operation}
            ) from exc

        self._record(request, str(response.status_code), start_time)
        if self.settings.enable_logging:
            self.logger.info(
                "Steam API response received",
                operation=request.operation,
                status_code=response.status_code,
                body_size=len(response.content)
            )
        return response.text

    async def get(self, request: UpstreamRequest, target: Type[T]) -> T:
        """Fetch ``request`` and decode the body into ``target``."""
        body = await self.get_raw(request)
        try:
            return decode(body, target)
        except DecodeError as exc:
            if self.metrics:
                self.metrics.increment_counter("decode_failures_total", surface=request.surface)
            self.logger.error(
                "Failed to decode Steam API response",
                operation=request.operation,
                body_size=len(body),
                reason=exc.message
            )
            raise

    async def get_store(self, endpoint: str, params: Any = None, target: Type[T] = dict) -> T:
        return await self.get(StoreRequest(endpoint, params), target)

    def _record(self, request: UpstreamRequest, status: str, start_time: float) -> None:
        if not self.metrics:
            return
        self.metrics.increment_counter("upstream_requests_total", surface=request.surface, status=status)
        self.metrics.observe_histogram(
            "upstream_request_duration_seconds",
            time.time() - start_time,
            surface=request.surface
        )
