from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from solders.instruction import Instruction

from jupiter_swap_api.codecs import instructions as instruction_codec
from jupiter_swap_api.codecs.instructions import InstructionField
from jupiter_swap_api.codecs.scalars import Address, Blob
from jupiter_swap_api.core.exceptions import DecodingError
from jupiter_swap_api.models.prioritization import PrioritizationType
from jupiter_swap_api.models.quote import QuoteResponse
from jupiter_swap_api.models.transaction_config import DEFAULT_TRANSACTION_CONFIG, TransactionConfig

INSTRUCTION_SLOTS = (
    "tokenLedgerInstruction",
    "computeBudgetInstructions",
    "setupInstructions",
    "swapInstruction",
    "cleanupInstruction",
    "otherInstructions",
)
SINGLE_INSTRUCTION_SLOTS = frozenset({"tokenLedgerInstruction", "swapInstruction", "cleanupInstruction"})


class SwapRequest(BaseModel):
    """Body of ``POST /swap`` and ``POST /swap-instructions``.

    ``config`` is flattened into the top level of the JSON object on the way
    out and collected back from it on the way in.
    """

    user_public_key: Address = Field(alias="userPublicKey")
    quote_response: QuoteResponse = Field(alias="quoteResponse")
    config: TransactionConfig = DEFAULT_TRANSACTION_CONFIG

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _collect_config(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "config" in data:
            return data
        config_keys = set(TransactionConfig.wire_keys()) | set(TransactionConfig.model_fields)
        config = {key: value for key, value in data.items() if key in config_keys}
        if not config:
            return data
        remaining = {key: value for key, value in data.items() if key not in config_keys}
        remaining["config"] = config
        return remaining

    @model_serializer(mode="wrap")
    def _flatten_config(self, handler: Any) -> Dict[str, Any]:
        data = handler(self)
        config = data.pop("config", None)
        if isinstance(config, dict):
            data.update(config)
        return data

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DynamicSlippageReport(BaseModel):
    slippage_bps: int = Field(alias="slippageBps")
    other_amount: Optional[int] = Field(default=None, alias="otherAmount")
    # Signed: positive and negative slippage are both reported
    simulated_incurred_slippage_bps: Optional[int] = Field(default=None, alias="simulatedIncurredSlippageBps")
    amplification_ratio: Optional[Decimal] = Field(default=None, alias="amplificationRatio")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")


class UiSimulationError(BaseModel):
    error_code: str = Field(alias="errorCode")
    error: str

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")


class SwapResponse(BaseModel):
    """Unsigned transaction built by ``POST /swap``; signing happens elsewhere."""

    swap_transaction: Blob = Field(alias="swapTransaction")
    last_valid_block_height: int = Field(alias="lastValidBlockHeight")
    prioritization_fee_lamports: Optional[int] = Field(default=None, alias="prioritizationFeeLamports")
    compute_unit_limit: Optional[int] = Field(default=None, alias="computeUnitLimit")
    prioritization_type: Optional[PrioritizationType] = Field(default=None, alias="prioritizationType")
    dynamic_slippage_report: Optional[DynamicSlippageReport] = Field(default=None, alias="dynamicSlippageReport")
    simulation_error: Optional[UiSimulationError] = Field(default=None, alias="simulationError")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")


class SwapInstructionsResponse(BaseModel):
    """The swap from ``POST /swap-instructions`` split into instruction slots.

    Slots are filled from their field names only; nothing is inferred from
    the instructions themselves.
    """

    token_ledger_instruction: Optional[InstructionField] = Field(default=None, alias="tokenLedgerInstruction")
    compute_budget_instructions: List[InstructionField] = Field(
        default_factory=list, alias="computeBudgetInstructions"
    )
    setup_instructions: List[InstructionField] = Field(default_factory=list, alias="setupInstructions")
    swap_instruction: InstructionField = Field(alias="swapInstruction")
    cleanup_instruction: Optional[InstructionField] = Field(default=None, alias="cleanupInstruction")
    # Currently only the Jito tip instruction
    other_instructions: List[InstructionField] = Field(default_factory=list, alias="otherInstructions")
    address_lookup_table_addresses: List[Address] = Field(
        default_factory=list, alias="addressLookupTableAddresses"
    )
    prioritization_fee_lamports: Optional[int] = Field(default=None, alias="prioritizationFeeLamports")
    compute_unit_limit: Optional[int] = Field(default=None, alias="computeUnitLimit")
    prioritization_type: Optional[PrioritizationType] = Field(default=None, alias="prioritizationType")
    dynamic_slippage_report: Optional[DynamicSlippageReport] = Field(default=None, alias="dynamicSlippageReport")
    simulation_error: Optional[UiSimulationError] = Field(default=None, alias="simulationError")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _assemble_slots(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        present = [slot for slot in INSTRUCTION_SLOTS if slot in data]
        assembled = instruction_codec.assemble(data, present)
        merged = dict(data)
        for slot, items in assembled.items():
            if slot in SINGLE_INSTRUCTION_SLOTS:
                if len(items) > 1:
                    raise DecodingError(
                        f"expected a single instruction, got {len(items)}", field=slot, value=data[slot]
                    )
                merged[slot] = items[0] if items else None
            else:
                merged[slot] = items
        return merged

    def slots(self) -> Dict[str, List[Instruction]]:
        return {
            "token_ledger": [self.token_ledger_instruction] if self.token_ledger_instruction is not None else [],
            "compute_budget": list(self.compute_budget_instructions),
            "setup": list(self.setup_instructions),
            "swap": [self.swap_instruction],
            "cleanup": [self.cleanup_instruction] if self.cleanup_instruction is not None else [],
            "other": list(self.other_instructions),
        }

    def instructions(self) -> List[Instruction]:
        """All instructions in the order they belong in a transaction."""
        ordered: List[Instruction] = []
        for items in self.slots().values():
            ordered.extend(items)
        return ordered


__all__ = [
    "DynamicSlippageReport",
    "INSTRUCTION_SLOTS",
    "SwapInstructionsResponse",
    "SwapRequest",
    "SwapResponse",
    "UiSimulationError",
]
