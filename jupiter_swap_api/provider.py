from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional

from jupiter_swap_api.config import JupiterSettings
from jupiter_swap_api.core.exceptions import RequestFailedError, TransportError
from jupiter_swap_api.models.quote import QuoteRequest, QuoteResponse
from jupiter_swap_api.models.swap import SwapInstructionsResponse, SwapRequest, SwapResponse
from jupiter_swap_api.request_factory import JupiterRequestFactory
from jupiter_swap_api.transport.http_client import JupiterHttpClient
from jupiter_swap_api.transport.middleware import ApiKeyMiddleware, Middleware, MiddlewareChain

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay < 0:
            raise ValueError("delay must be >= 0")


class JupiterSwapApiClient:
    """Typed client for the quote, swap and swap-instructions endpoints.

    ``quote``, ``swap`` and ``swap_instructions`` make exactly one attempt.
    ``retry_quote`` repeats a quote on status and transport failures with a
    fixed delay; decode failures are raised immediately.

    When ``settings.api_key`` is set an ``ApiKeyMiddleware`` is registered
    ahead of any ``middlewares`` passed in. The client keeps its own chain,
    seeded from the borrowed ``http_client``, so clients sharing one pool do
    not see each other's middleware.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        settings: Optional[JupiterSettings] = None,
        http_client: Optional[JupiterHttpClient] = None,
        middlewares: Optional[Iterable[Middleware]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        cfg = settings or JupiterSettings()
        if base_url:
            cfg = replace(cfg, base_url=base_url.rstrip("/"))
        self.settings = cfg
        self.request_factory = JupiterRequestFactory(base_url=cfg.base_url)
        self.retry_policy = retry_policy or RetryPolicy(cfg.retry_attempts, cfg.retry_delay)
        self._sleep = sleep
        self._client = http_client or JupiterHttpClient(
            timeout=cfg.timeout,
            pool_idle_timeout=cfg.pool_idle_timeout,
        )
        self._owns_client = http_client is None
        self._middleware = MiddlewareChain(self._client.middleware)
        if cfg.api_key:
            self._middleware.add(ApiKeyMiddleware(cfg.api_key))
        for middleware in middlewares or []:
            self._middleware.add(middleware)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "JupiterSwapApiClient":
        return cls(settings=JupiterSettings.from_env(), **kwargs)

    @property
    def middleware(self) -> MiddlewareChain:
        return self._middleware

    async def __aenter__(self) -> "JupiterSwapApiClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def quote(self, request: QuoteRequest) -> QuoteResponse:
        spec = self.request_factory.build_quote_request(request)
        return await self._client.request(spec, QuoteResponse, "quote", self._middleware)

    async def retry_quote(self, request: QuoteRequest, policy: Optional[RetryPolicy] = None) -> QuoteResponse:
        policy = policy or self.retry_policy
        last_error: Optional[BaseException] = None
        for attempt in range(1, policy.max_attempts + 1):
            try:
                return await self.quote(request)
            except (RequestFailedError, TransportError) as exc:
                last_error = exc
                if attempt >= policy.max_attempts:
                    break
                logger.warning(
                    "Quote attempt %d/%d failed: %s; retrying in %.2fs",
                    attempt,
                    policy.max_attempts,
                    exc,
                    policy.delay,
                )
                await self._sleep(policy.delay)

        logger.warning("Quote failed after %d attempts", policy.max_attempts)
        raise last_error

    async def swap(self, request: SwapRequest, extra_args: Optional[Mapping[str, Any]] = None) -> SwapResponse:
        spec = self.request_factory.build_swap_request(request, extra_args)
        return await self._client.request(spec, SwapResponse, "swap", self._middleware)

    async def swap_instructions(self, request: SwapRequest) -> SwapInstructionsResponse:
        spec = self.request_factory.build_swap_instructions_request(request)
        return await self._client.request(spec, SwapInstructionsResponse, "swap-instructions", self._middleware)

    async def version(self) -> str:
        spec = self.request_factory.build_version_request()
        return await self._client.request_text(spec, self._middleware)


__all__ = ["JupiterSwapApiClient", "RetryPolicy"]
