from jupiter_swap_api.codecs import instructions
from jupiter_swap_api.codecs.instructions import InstructionField, WireAccountMeta, WireInstruction
from jupiter_swap_api.codecs.scalars import (
    Address,
    Amount,
    Blob,
    CommaList,
    FieldCodec,
    decode_address,
    decode_amount,
    decode_blob,
    decode_comma_list,
    encode_address,
    encode_amount,
    encode_blob,
    encode_comma_list,
)
from jupiter_swap_api.codecs.variants import KeyedCase, ScalarCase, SentinelCase, VariantCodec

__all__ = [
    "Address",
    "Amount",
    "Blob",
    "CommaList",
    "FieldCodec",
    "InstructionField",
    "KeyedCase",
    "ScalarCase",
    "SentinelCase",
    "VariantCodec",
    "WireAccountMeta",
    "WireInstruction",
    "decode_address",
    "decode_amount",
    "decode_blob",
    "decode_comma_list",
    "encode_address",
    "encode_amount",
    "encode_blob",
    "encode_comma_list",
    "instructions",
]
