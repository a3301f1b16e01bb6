from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from jupiter_swap_api.core.exceptions import JupiterClientError
from jupiter_swap_api.core.request_spec import RequestSpec
from jupiter_swap_api.models.quote import QuoteRequest
from jupiter_swap_api.models.swap import SwapRequest

logger = logging.getLogger(__name__)


class JupiterRequestError(JupiterClientError, ValueError):
    """The factory was handed something other than a request model."""


@dataclass(frozen=True)
class JupiterRequestFactory:
    base_url: str = "https://quote-api.jup.ag/v6"
    quote_path: str = "/quote"
    swap_path: str = "/swap"
    swap_instructions_path: str = "/swap-instructions"
    version_path: str = "/version"

    def build_quote_request(self, quote_request: QuoteRequest) -> RequestSpec:
        if not isinstance(quote_request, QuoteRequest):
            raise JupiterRequestError("quote_request must be a QuoteRequest")
        spec = RequestSpec(
            method="GET",
            base_url=self.base_url,
            path=self.quote_path,
            query=quote_request.to_query(),
        )
        logger.debug("Built quote request %s", spec.fingerprint())
        return spec

    def build_swap_request(
        self,
        swap_request: SwapRequest,
        extra_args: Optional[Mapping[str, Any]] = None,
    ) -> RequestSpec:
        return self._build_swap_post(self.swap_path, swap_request, extra_args)

    def build_swap_instructions_request(self, swap_request: SwapRequest) -> RequestSpec:
        return self._build_swap_post(self.swap_instructions_path, swap_request, None)

    def build_version_request(self) -> RequestSpec:
        return RequestSpec(
            method="GET",
            base_url=self.base_url,
            path=self.version_path,
        )

    def _build_swap_post(
        self,
        path: str,
        swap_request: SwapRequest,
        extra_args: Optional[Mapping[str, Any]],
    ) -> RequestSpec:
        if not isinstance(swap_request, SwapRequest):
            raise JupiterRequestError("swap_request must be a SwapRequest")
        spec = RequestSpec(
            method="POST",
            base_url=self.base_url,
            path=path,
            query=dict(extra_args or {}),
            json=swap_request.to_wire(),
        )
        logger.debug("Built swap request %s", spec.fingerprint())
        return spec


__all__ = ["JupiterRequestError", "JupiterRequestFactory"]
