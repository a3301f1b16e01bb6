"""Shape-discriminated variant codec.

Some fields carry no type tag on the wire; the variant is recognised from the
JSON shape alone. Decoding tries, in this order:

1. exact match against a sentinel string (``"auto"``, ``"disabled"``),
2. the bare-scalar case (a JSON number unless configured otherwise),
3. single-key objects, matched against the keyed cases in declaration order.

The first match wins. The order is fixed because a scalar recogniser may also
accept strings that are sentinels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from pydantic_core import core_schema

from jupiter_swap_api.core.exceptions import DecodingError, EncodingError, UnrecognizedVariantError


def is_json_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class SentinelCase:
    literal: str
    value: Any


@dataclass(frozen=True)
class ScalarCase:
    variant: type
    build: Callable[[Any], Any]
    unwrap: Callable[[Any], Any]
    accepts: Callable[[Any], bool] = is_json_number


@dataclass(frozen=True)
class KeyedCase:
    key: str
    variant: type
    build: Callable[[Any], Any]
    unwrap: Callable[[Any], Any]


class VariantCodec:
    def __init__(
        self,
        name: str,
        sentinels: Sequence[SentinelCase] = (),
        scalar: Optional[ScalarCase] = None,
        keyed: Sequence[KeyedCase] = (),
    ) -> None:
        keys = [case.key for case in keyed]
        if len(keys) != len(set(keys)):
            raise ValueError(f"{name}: keyed cases must use distinct keys")
        literals = [case.literal for case in sentinels]
        if len(literals) != len(set(literals)):
            raise ValueError(f"{name}: sentinel literals must be distinct")
        self.name = name
        self.sentinels: Tuple[SentinelCase, ...] = tuple(sentinels)
        self.scalar = scalar
        self.keyed: Tuple[KeyedCase, ...] = tuple(keyed)

    @property
    def variant_types(self) -> Tuple[type, ...]:
        types = [type(case.value) for case in self.sentinels]
        if self.scalar is not None:
            types.append(self.scalar.variant)
        types.extend(case.variant for case in self.keyed)
        return tuple(types)

    def decode(self, raw: Any, field: Optional[str] = None) -> Any:
        if isinstance(raw, str):
            for sentinel in self.sentinels:
                if raw == sentinel.literal:
                    return sentinel.value
        if self.scalar is not None and self.scalar.accepts(raw):
            return self._build(self.scalar.build, raw, field)
        if isinstance(raw, dict) and len(raw) == 1:
            ((key, inner),) = raw.items()
            for case in self.keyed:
                if case.key == key:
                    return self._build(case.build, inner, field)
        raise UnrecognizedVariantError(f"unrecognized {self.name} variant shape: {raw!r}", field=field, value=raw)

    def encode(self, value: Any) -> Any:
        for sentinel in self.sentinels:
            if type(value) is type(sentinel.value) and value == sentinel.value:
                return sentinel.literal
        if self.scalar is not None and isinstance(value, self.scalar.variant):
            return self._unwrap(self.scalar.unwrap, self.scalar.build, value)
        for case in self.keyed:
            if isinstance(value, case.variant):
                return {case.key: self._unwrap(case.unwrap, case.build, value)}
        raise EncodingError(f"{value!r} is not a declared {self.name} variant", value=value)

    def _unwrap(self, unwrap: Callable[[Any], Any], build: Callable[[Any], Any], value: Any) -> Any:
        # The wire form must decode back through the same case
        try:
            wire = unwrap(value)
            build(wire)
        except (KeyError, TypeError, ValueError) as exc:
            raise EncodingError(f"{value!r} has no {self.name} wire form: {exc}", value=value) from exc
        return wire

    def _build(self, build: Callable[[Any], Any], raw: Any, field: Optional[str]) -> Any:
        try:
            return build(raw)
        except (KeyError, TypeError, ValueError) as exc:
            if isinstance(exc, DecodingError):
                raise
            raise DecodingError(f"malformed {self.name} payload: {exc}", field=field, value=raw) from exc

    def _validate(self, value: Any) -> Any:
        if isinstance(value, self.variant_types):
            self.encode(value)
            return value
        return self.decode(value)

    def __get_pydantic_core_schema__(self, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            self._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(self.encode, when_used="json"),
        )

    def __get_pydantic_json_schema__(self, schema: Any, handler: Any) -> Dict[str, Any]:
        return {"anyOf": [{"type": "string"}, {"type": "integer"}, {"type": "object"}]}

    def __repr__(self) -> str:
        return f"VariantCodec({self.name!r})"


__all__ = [
    "KeyedCase",
    "ScalarCase",
    "SentinelCase",
    "VariantCodec",
    "is_json_number",
]
