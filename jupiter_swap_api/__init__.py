from jupiter_swap_api.config import JupiterSettings
from jupiter_swap_api.core.exceptions import (
    DecodingError,
    EncodingError,
    JupiterClientError,
    RequestFailedError,
    TransportError,
)
from jupiter_swap_api.provider import JupiterSwapApiClient, RetryPolicy
from jupiter_swap_api.request_factory import JupiterRequestError, JupiterRequestFactory

__all__ = [
    "DecodingError",
    "EncodingError",
    "JupiterClientError",
    "JupiterRequestError",
    "JupiterRequestFactory",
    "JupiterSettings",
    "JupiterSwapApiClient",
    "RequestFailedError",
    "RetryPolicy",
    "TransportError",
]
