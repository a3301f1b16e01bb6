"""Instruction assembly between the service's JSON form and solders objects.

On the wire an instruction is ``{"programId": <base58>, "accounts": [...],
"data": <base64>}`` and each account is ``{"pubkey", "isSigner",
"isWritable"}``. Missing signer/writable flags read as ``False``; a missing
account list or payload reads as empty.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from solders.instruction import AccountMeta, Instruction

from jupiter_swap_api.codecs.scalars import Address, Blob, FieldCodec
from jupiter_swap_api.core.exceptions import DecodingError, decoding_error_from_validation


class WireAccountMeta(BaseModel):
    pubkey: Address
    is_signer: bool = Field(default=False, alias="isSigner")
    is_writable: bool = Field(default=False, alias="isWritable")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("is_signer", "is_writable", mode="before")
    @classmethod
    def _missing_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class WireInstruction(BaseModel):
    program_id: Address = Field(alias="programId")
    accounts: List[WireAccountMeta] = Field(default_factory=list)
    data: Blob = b""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("accounts", mode="before")
    @classmethod
    def _missing_accounts(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("data", mode="before")
    @classmethod
    def _missing_data(cls, value: Any) -> Any:
        return b"" if value is None else value


def to_domain(wire: Any, field: Optional[str] = None) -> Instruction:
    if isinstance(wire, Instruction):
        return wire
    if not isinstance(wire, WireInstruction):
        try:
            wire = WireInstruction.model_validate(wire)
        except ValidationError as exc:
            raise decoding_error_from_validation(exc, "instruction", prefix=field) from exc
    accounts = [AccountMeta(meta.pubkey, meta.is_signer, meta.is_writable) for meta in wire.accounts]
    return Instruction(wire.program_id, wire.data, accounts)


def to_wire(instruction: Instruction) -> WireInstruction:
    return WireInstruction(
        program_id=instruction.program_id,
        accounts=[
            WireAccountMeta(pubkey=meta.pubkey, is_signer=meta.is_signer, is_writable=meta.is_writable)
            for meta in instruction.accounts
        ],
        data=bytes(instruction.data),
    )


def assemble(payload: Mapping[str, Any], slots: Sequence[str]) -> Dict[str, List[Instruction]]:
    """Group wire instructions by slot name, keeping their order within a slot.

    A slot may hold a single instruction object, a list of them, or null.
    """
    assembled: Dict[str, List[Instruction]] = {}
    for slot in slots:
        raw = payload.get(slot)
        if raw is None:
            assembled[slot] = []
        elif isinstance(raw, list):
            assembled[slot] = [to_domain(item, field=f"{slot}[{index}]") for index, item in enumerate(raw)]
        elif isinstance(raw, dict):
            assembled[slot] = [to_domain(raw, field=slot)]
        else:
            raise DecodingError("expected an instruction object or list", field=slot, value=raw)
    return assembled


def _encode_instruction(instruction: Instruction) -> Dict[str, Any]:
    return to_wire(instruction).model_dump(mode="json", by_alias=True)


InstructionField = Annotated[Instruction, FieldCodec(to_domain, _encode_instruction, json_type="object")]


__all__ = [
    "InstructionField",
    "WireAccountMeta",
    "WireInstruction",
    "assemble",
    "to_domain",
    "to_wire",
]
