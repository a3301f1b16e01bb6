"""Request/response interceptors wrapped around the core send.

A middleware is an async callable ``(request, call_next) -> response``.
Middlewares run in registration order on the way out and in reverse order on
the way back. One that returns without awaiting ``call_next`` short-circuits
the rest of the chain; its response is classified like any other.
"""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

CallNext = Callable[[httpx.Request], Awaitable[httpx.Response]]


class Middleware(Protocol):
    async def __call__(self, request: httpx.Request, call_next: CallNext) -> httpx.Response:
        ...


class MiddlewareChain:
    def __init__(self, middlewares: Optional[Iterable[Middleware]] = None) -> None:
        self._middlewares: List[Middleware] = list(middlewares or [])

    def __len__(self) -> int:
        return len(self._middlewares)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._middlewares)

    def add(self, middleware: Middleware) -> "MiddlewareChain":
        self._middlewares.append(middleware)
        return self

    async def dispatch(self, request: httpx.Request, send: CallNext) -> httpx.Response:
        middlewares = tuple(self._middlewares)

        async def call(index: int, current: httpx.Request) -> httpx.Response:
            if index == len(middlewares):
                return await send(current)

            async def call_next(next_request: httpx.Request) -> httpx.Response:
                return await call(index + 1, next_request)

            return await middlewares[index](current, call_next)

        return await call(0, request)


class HeadersMiddleware:
    def __init__(self, headers: Mapping[str, str]) -> None:
        self.headers: Dict[str, str] = dict(headers)

    async def __call__(self, request: httpx.Request, call_next: CallNext) -> httpx.Response:
        for key, value in self.headers.items():
            request.headers[key] = value
        return await call_next(request)


class ApiKeyMiddleware(HeadersMiddleware):
    def __init__(self, api_key: str, header: str = "x-api-key") -> None:
        if not api_key:
            raise ValueError("api_key must not be empty")
        super().__init__({header: api_key})


class LoggingMiddleware:
    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self.log = log or logger
        self.level = level

    async def __call__(self, request: httpx.Request, call_next: CallNext) -> httpx.Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except httpx.HTTPError as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            self.log.log(self.level, "%s %s failed after %.1fms: %s", request.method, request.url, elapsed_ms, exc)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        self.log.log(
            self.level, "%s %s -> %s in %.1fms", request.method, request.url, response.status_code, elapsed_ms
        )
        return response


__all__ = [
    "ApiKeyMiddleware",
    "CallNext",
    "HeadersMiddleware",
    "LoggingMiddleware",
    "Middleware",
    "MiddlewareChain",
]
