"""Scalar wire codecs.

The service sends 64-bit integers as decimal strings, account addresses as
base-58 strings and binary payloads as standard padded base64. Each rule lives
here once and is attached to model fields through ``FieldCodec`` annotations,
so the models stay declarative.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Annotated, Any, Callable, List, Optional, Sequence, Union

import base58
from pydantic_core import core_schema
from solders.pubkey import Pubkey

from jupiter_swap_api.core.exceptions import (
    AddressFormatError,
    AmountParseError,
    Base64DecodeError,
    EncodingError,
)

U64_MAX = 2**64 - 1
ADDRESS_LENGTH = 32


def encode_amount(value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"amount must be an integer, got {type(value).__name__}", value=value)
    if value < 0 or value > U64_MAX:
        raise EncodingError(f"amount {value} does not fit in an unsigned 64-bit integer", value=value)
    return str(value)


def decode_amount(value: str, field: Optional[str] = None) -> int:
    if not isinstance(value, str):
        raise AmountParseError(f"expected a decimal string, got {type(value).__name__}", field=field, value=value)
    if not (value.isascii() and value.isdigit()):
        raise AmountParseError(f"{value!r} is not a decimal integer", field=field, value=value)
    amount = int(value)
    if amount > U64_MAX:
        raise AmountParseError(f"{value} does not fit in an unsigned 64-bit integer", field=field, value=value)
    return amount


def encode_address(value: Union[Pubkey, bytes]) -> str:
    if isinstance(value, Pubkey):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        if len(value) != ADDRESS_LENGTH:
            raise EncodingError(f"address must be {ADDRESS_LENGTH} bytes, got {len(value)}", value=value)
        return base58.b58encode(bytes(value)).decode("ascii")
    raise EncodingError(f"cannot encode {type(value).__name__} as an address", value=value)


def decode_address(value: str, field: Optional[str] = None) -> Pubkey:
    if not isinstance(value, str):
        raise AddressFormatError(f"expected a base-58 string, got {type(value).__name__}", field=field, value=value)
    try:
        raw = base58.b58decode(value)
    except ValueError as exc:
        raise AddressFormatError(f"{value!r} is not valid base-58", field=field, value=value) from exc
    if len(raw) != ADDRESS_LENGTH:
        raise AddressFormatError(
            f"{value!r} decodes to {len(raw)} bytes, expected {ADDRESS_LENGTH}", field=field, value=value
        )
    return Pubkey(raw)


def encode_blob(value: bytes) -> str:
    return base64.b64encode(bytes(value)).decode("ascii")


def decode_blob(value: str, field: Optional[str] = None) -> bytes:
    if not isinstance(value, str):
        raise Base64DecodeError(f"expected a base64 string, got {type(value).__name__}", field=field, value=value)
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise Base64DecodeError(f"invalid base64: {exc}", field=field, value=value) from exc


def encode_comma_list(values: Sequence[str]) -> Optional[str]:
    if not values:
        return None
    return ",".join(values)


def decode_comma_list(value: str) -> List[str]:
    return value.split(",")


def _coerce_amount(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0 or value > U64_MAX:
            raise AmountParseError(f"{value} does not fit in an unsigned 64-bit integer", value=value)
        return value
    return decode_amount(value)


def _coerce_address(value: Any) -> Pubkey:
    if isinstance(value, Pubkey):
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) != ADDRESS_LENGTH:
            raise AddressFormatError(f"expected {ADDRESS_LENGTH} bytes, got {len(value)}", value=value)
        return Pubkey(bytes(value))
    return decode_address(value)


def _coerce_blob(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return decode_blob(value)


def _coerce_comma_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return decode_comma_list(value)
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ValueError(f"expected a list of strings or a comma-separated string, got {value!r}")


@dataclass(frozen=True)
class FieldCodec:
    """Pydantic annotation binding a wire decode/encode pair to a field.

    ``decode`` receives whatever the caller or the wire supplied and returns
    the domain value. ``encode`` runs only for JSON-mode dumps, so
    ``model_dump()`` keeps domain objects and ``model_dump(mode="json")``
    yields the wire form.
    """

    decode: Callable[[Any], Any]
    encode: Callable[[Any], Any]
    json_type: str = "string"

    def __get_pydantic_core_schema__(self, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            self.decode,
            serialization=core_schema.plain_serializer_function_ser_schema(self.encode, when_used="json"),
        )

    def __get_pydantic_json_schema__(self, schema: Any, handler: Any) -> dict:
        return {"type": self.json_type}


Amount = Annotated[int, FieldCodec(_coerce_amount, encode_amount)]
Address = Annotated[Pubkey, FieldCodec(_coerce_address, encode_address)]
Blob = Annotated[bytes, FieldCodec(_coerce_blob, encode_blob)]
CommaList = Annotated[List[str], FieldCodec(_coerce_comma_list, encode_comma_list)]


__all__ = [
    "ADDRESS_LENGTH",
    "Address",
    "Amount",
    "Blob",
    "CommaList",
    "FieldCodec",
    "U64_MAX",
    "decode_address",
    "decode_amount",
    "decode_blob",
    "decode_comma_list",
    "encode_address",
    "encode_amount",
    "encode_blob",
    "encode_comma_list",
]
