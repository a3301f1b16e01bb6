from jupiter_swap_api.transport.http_client import JupiterHttpClient, check_status, parse_response
from jupiter_swap_api.transport.middleware import (
    ApiKeyMiddleware,
    CallNext,
    HeadersMiddleware,
    LoggingMiddleware,
    Middleware,
    MiddlewareChain,
)

__all__ = [
    "ApiKeyMiddleware",
    "CallNext",
    "HeadersMiddleware",
    "JupiterHttpClient",
    "LoggingMiddleware",
    "Middleware",
    "MiddlewareChain",
    "check_status",
    "parse_response",
]
