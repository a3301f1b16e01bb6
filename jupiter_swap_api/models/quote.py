from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from jupiter_swap_api.codecs.scalars import Address, Amount, CommaList


class SwapMode(str, Enum):
    EXACT_IN = "ExactIn"
    EXACT_OUT = "ExactOut"


class QuoteRequest(BaseModel):
    """Parameters for ``GET /quote``.

    ``quote_args`` holds algorithm-specific extras; they are appended to the
    query string as-is and are not part of the model's wire fields.
    """

    input_mint: Address = Field(alias="inputMint")
    output_mint: Address = Field(alias="outputMint")
    amount: Amount
    swap_mode: Optional[SwapMode] = Field(default=None, alias="swapMode")
    # Allowed slippage in basis points
    slippage_bps: int = Field(default=0, alias="slippageBps", ge=0, le=65_535)
    platform_fee_bps: Optional[int] = Field(default=None, alias="platformFeeBps", ge=0, le=255)
    dexes: Optional[CommaList] = None
    excluded_dexes: Optional[CommaList] = Field(default=None, alias="excludedDexes")
    only_direct_routes: Optional[bool] = Field(default=None, alias="onlyDirectRoutes")
    as_legacy_transaction: Optional[bool] = Field(default=None, alias="asLegacyTransaction")
    # Estimated upper bound on accounts in the route; not an exact count
    max_accounts: Optional[int] = Field(default=None, alias="maxAccounts", ge=0)
    quote_type: Optional[str] = Field(default=None, alias="quoteType")
    quote_args: Optional[Dict[str, str]] = Field(default=None, exclude=True)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_query(self) -> Dict[str, Any]:
        query = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        # empty dex lists encode to None
        query = {key: value for key, value in query.items() if value is not None}
        for key, value in (self.quote_args or {}).items():
            query[key] = value
        return query


class PlatformFee(BaseModel):
    amount: Amount
    fee_bps: int = Field(alias="feeBps")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SwapInfo(BaseModel):
    amm_key: Address = Field(alias="ammKey")
    label: Optional[str] = None
    input_mint: Address = Field(alias="inputMint")
    output_mint: Address = Field(alias="outputMint")
    # Estimates of the amounts flowing into and out of this hop
    in_amount: Amount = Field(alias="inAmount")
    out_amount: Amount = Field(alias="outAmount")
    fee_amount: Optional[Amount] = Field(default=None, alias="feeAmount")
    fee_mint: Optional[Address] = Field(default=None, alias="feeMint")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")


class RoutePlanStep(BaseModel):
    swap_info: SwapInfo = Field(alias="swapInfo")
    percent: int

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")


class QuoteResponse(BaseModel):
    """Priced route returned by ``GET /quote``.

    Unknown fields are kept so the quote can be sent back inside a swap
    request exactly as the service produced it.
    """

    input_mint: Address = Field(alias="inputMint")
    in_amount: Amount = Field(alias="inAmount")
    output_mint: Address = Field(alias="outputMint")
    out_amount: Amount = Field(alias="outAmount")
    other_amount_threshold: Amount = Field(alias="otherAmountThreshold")
    swap_mode: SwapMode = Field(alias="swapMode")
    slippage_bps: int = Field(alias="slippageBps")
    platform_fee: Optional[PlatformFee] = Field(default=None, alias="platformFee")
    price_impact_pct: Decimal = Field(alias="priceImpactPct")
    route_plan: List[RoutePlanStep] = Field(alias="routePlan")
    context_slot: int = Field(default=0, alias="contextSlot")
    time_taken: float = Field(default=0.0, alias="timeTaken")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "PlatformFee",
    "QuoteRequest",
    "QuoteResponse",
    "RoutePlanStep",
    "SwapInfo",
    "SwapMode",
]
