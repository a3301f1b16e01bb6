"""Transaction-shaping options sent with ``/swap`` and ``/swap-instructions``.

The options are flattened into the top level of the swap request body. Their
defaults change what the built transaction does, so they are spelled out on
the model and captured once in ``DEFAULT_TRANSACTION_CONFIG``:

* ``wrap_and_unwrap_sol=True``: native SOL is wrapped before and unwrapped
  after the swap. Ignored by the service when ``destination_token_account``
  is set.
* ``use_shared_accounts=True``: route through the program's shared accounts so
  no intermediate token accounts are created. ``None`` lets the service pick.
* every other flag is off and every override is unset, so the service uses
  the owner's associated token accounts, a versioned transaction and its own
  fee policy.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from jupiter_swap_api.codecs.scalars import Address
from jupiter_swap_api.models.prioritization import ComputeUnitPriceMicroLamports, PrioritizationFeeLamports


class DynamicSlippageSettings(BaseModel):
    min_bps: Optional[int] = Field(default=None, alias="minBps", ge=0, le=65_535)
    max_bps: Optional[int] = Field(default=None, alias="maxBps", ge=0, le=65_535)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class KeyedUiAccount(BaseModel):
    """An account snapshot for an AMM missing from the service's market cache.

    The account fields (lamports, owner, data, ...) are carried through
    unchanged alongside ``pubkey``.
    """

    pubkey: str
    params: Optional[Any] = None

    model_config = ConfigDict(frozen=True, extra="allow")


class TransactionConfig(BaseModel):
    wrap_and_unwrap_sol: bool = Field(default=True, alias="wrapAndUnwrapSol")
    allow_optimized_wrapped_sol_token_account: bool = Field(
        default=False, alias="allowOptimizedWrappedSolTokenAccount"
    )
    # Referral fee token account for the output mint; only meaningful with a platform fee
    fee_account: Optional[Address] = Field(default=None, alias="feeAccount")
    # Must already be initialized when set
    destination_token_account: Optional[Address] = Field(default=None, alias="destinationTokenAccount")
    tracking_account: Optional[Address] = Field(default=None, alias="trackingAccount")
    # Mutually exclusive with prioritization_fee_lamports on the service side
    compute_unit_price_micro_lamports: Optional[ComputeUnitPriceMicroLamports] = Field(
        default=None, alias="computeUnitPriceMicroLamports"
    )
    prioritization_fee_lamports: Optional[PrioritizationFeeLamports] = Field(
        default=None, alias="prioritizationFeeLamports"
    )
    dynamic_compute_unit_limit: bool = Field(default=False, alias="dynamicComputeUnitLimit")
    as_legacy_transaction: bool = Field(default=False, alias="asLegacyTransaction")
    use_shared_accounts: Optional[bool] = Field(default=True, alias="useSharedAccounts")
    use_token_ledger: bool = Field(default=False, alias="useTokenLedger")
    skip_user_accounts_rpc_calls: bool = Field(default=False, alias="skipUserAccountsRpcCalls")
    keyed_ui_accounts: Optional[List[KeyedUiAccount]] = Field(default=None, alias="keyedUiAccounts")
    program_authority_id: Optional[int] = Field(default=None, alias="programAuthorityId", ge=0, le=255)
    dynamic_slippage: Optional[DynamicSlippageSettings] = Field(default=None, alias="dynamicSlippage")
    blockhash_slots_to_expiry: Optional[int] = Field(default=None, alias="blockhashSlotsToExpiry", ge=0, le=255)
    correct_last_valid_block_height: bool = Field(default=False, alias="correctLastValidBlockHeight")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def wire_keys(cls) -> List[str]:
        return [field.alias or name for name, field in cls.model_fields.items()]

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


DEFAULT_TRANSACTION_CONFIG = TransactionConfig()


__all__ = [
    "DEFAULT_TRANSACTION_CONFIG",
    "DynamicSlippageSettings",
    "KeyedUiAccount",
    "TransactionConfig",
]
