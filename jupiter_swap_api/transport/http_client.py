from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from jupiter_swap_api.core.exceptions import (
    DecodingError,
    RequestFailedError,
    TransportError,
    decoding_error_from_validation,
)
from jupiter_swap_api.core.request_spec import RequestSpec
from jupiter_swap_api.transport.middleware import Middleware, MiddlewareChain

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def check_status(response: httpx.Response, spec: RequestSpec) -> httpx.Response:
    if not response.is_success:
        raise RequestFailedError(response.status_code, response.text, url=spec.url)
    return response


def parse_response(payload: Any, model: Type[T], context: str) -> T:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise decoding_error_from_validation(exc, f"{context} response") from exc


class JupiterHttpClient:
    """Sends ``RequestSpec``s through the middleware chain on one pooled client.

    The underlying ``httpx.AsyncClient`` is shared by every call; pass one in
    to control pooling yourself, otherwise it is created lazily and closed
    with this object. A caller may pass its own ``middleware`` chain per
    request in place of the chain held here.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        pool_idle_timeout: float = 60.0,
        max_connections: int = 100,
        middlewares: Optional[Iterable[Middleware]] = None,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.timeout = timeout
        self.pool_idle_timeout = pool_idle_timeout
        self.max_connections = max(1, max_connections)
        self.middleware = MiddlewareChain(middlewares)
        self._client = async_client
        self._owns_client = async_client is None

    async def __aenter__(self) -> "JupiterHttpClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            limits = httpx.Limits(max_connections=self.max_connections, keepalive_expiry=self.pool_idle_timeout)
            self._client = httpx.AsyncClient(timeout=self.timeout, limits=limits)
        return self._client

    async def send(self, spec: RequestSpec, middleware: Optional[MiddlewareChain] = None) -> httpx.Response:
        client = self._ensure_client()
        request = client.build_request(
            spec.method,
            spec.url,
            params=spec.normalized_query() or None,
            headers=spec.normalized_headers(),
            json=spec.json,
        )
        logger.debug("Sending %s", spec.to_curl())
        try:
            chain = self.middleware if middleware is None else middleware
            return await chain.dispatch(request, client.send)
        except httpx.HTTPError as exc:
            logger.debug("Transport failure for %s %s: %r", spec.method, spec.url, exc)
            raise TransportError(f"{spec.method} {spec.url} failed: {exc}") from exc

    async def request(
        self,
        spec: RequestSpec,
        model: Type[T],
        context: str,
        middleware: Optional[MiddlewareChain] = None,
    ) -> T:
        response = check_status(await self.send(spec, middleware), spec)
        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodingError(f"{context} response is not valid JSON", value=response.text) from exc
        return parse_response(payload, model, context)

    async def request_text(self, spec: RequestSpec, middleware: Optional[MiddlewareChain] = None) -> str:
        response = check_status(await self.send(spec, middleware), spec)
        return response.text


__all__ = ["JupiterHttpClient", "check_status", "parse_response"]
