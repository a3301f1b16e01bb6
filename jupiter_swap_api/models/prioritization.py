from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Dict, Optional, Union

from jupiter_swap_api.codecs.scalars import U64_MAX
from jupiter_swap_api.codecs.variants import KeyedCase, ScalarCase, SentinelCase, VariantCodec

U32_MAX = 2**32 - 1


def _unsigned(value: Any, limit: int = U64_MAX) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {value!r}")
    if value < 0 or value > limit:
        raise ValueError(f"{value} is out of range")
    return value


def _optional_unsigned(value: Any) -> Optional[int]:
    return None if value is None else _unsigned(value)


class PriorityLevel(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "veryHigh"


@dataclass(frozen=True)
class Auto:
    pass


@dataclass(frozen=True)
class Disabled:
    pass


AUTO = Auto()
DISABLED = Disabled()


@dataclass(frozen=True)
class Lamports:
    lamports: int


@dataclass(frozen=True)
class AutoMultiplier:
    multiplier: int


@dataclass(frozen=True)
class JitoTipLamports:
    lamports: int


@dataclass(frozen=True)
class PriorityLevelWithMaxLamports:
    priority_level: PriorityLevel
    max_lamports: int
    global_: bool = False


@dataclass(frozen=True)
class MicroLamports:
    micro_lamports: int


def _object(inner: Any) -> Dict[str, Any]:
    if not isinstance(inner, dict):
        raise TypeError(f"expected an object, got {inner!r}")
    return inner


def _priority_level_from_wire(inner: Any) -> PriorityLevelWithMaxLamports:
    inner = _object(inner)
    global_ = inner.get("global", False)
    if not isinstance(global_, bool):
        raise TypeError(f"global must be a boolean, got {global_!r}")
    return PriorityLevelWithMaxLamports(
        priority_level=PriorityLevel(inner["priorityLevel"]),
        max_lamports=_unsigned(inner["maxLamports"]),
        global_=global_,
    )


def _priority_level_to_wire(value: PriorityLevelWithMaxLamports) -> Dict[str, Any]:
    return {
        "priorityLevel": PriorityLevel(value.priority_level).value,
        "maxLamports": value.max_lamports,
        "global": value.global_,
    }


PRIORITIZATION_FEE_CODEC = VariantCodec(
    "prioritizationFeeLamports",
    sentinels=[SentinelCase("auto", AUTO), SentinelCase("disabled", DISABLED)],
    scalar=ScalarCase(Lamports, build=lambda raw: Lamports(_unsigned(raw)), unwrap=lambda value: value.lamports),
    keyed=[
        KeyedCase(
            "autoMultiplier",
            AutoMultiplier,
            build=lambda inner: AutoMultiplier(_unsigned(inner, U32_MAX)),
            unwrap=lambda value: value.multiplier,
        ),
        KeyedCase(
            "jitoTipLamports",
            JitoTipLamports,
            build=lambda inner: JitoTipLamports(_unsigned(inner)),
            unwrap=lambda value: value.lamports,
        ),
        KeyedCase(
            "priorityLevelWithMaxLamports",
            PriorityLevelWithMaxLamports,
            build=_priority_level_from_wire,
            unwrap=_priority_level_to_wire,
        ),
    ],
)

COMPUTE_UNIT_PRICE_CODEC = VariantCodec(
    "computeUnitPriceMicroLamports",
    sentinels=[SentinelCase("auto", AUTO)],
    scalar=ScalarCase(
        MicroLamports,
        build=lambda raw: MicroLamports(_unsigned(raw)),
        unwrap=lambda value: value.micro_lamports,
    ),
)

PrioritizationFeeLamports = Annotated[
    Union[Auto, Disabled, Lamports, AutoMultiplier, JitoTipLamports, PriorityLevelWithMaxLamports],
    PRIORITIZATION_FEE_CODEC,
]
ComputeUnitPriceMicroLamports = Annotated[Union[Auto, MicroLamports], COMPUTE_UNIT_PRICE_CODEC]


@dataclass(frozen=True)
class Jito:
    lamports: int


@dataclass(frozen=True)
class ComputeBudget:
    micro_lamports: int
    estimated_micro_lamports: Optional[int] = None


PRIORITIZATION_TYPE_CODEC = VariantCodec(
    "prioritizationType",
    keyed=[
        KeyedCase(
            "jito",
            Jito,
            build=lambda inner: Jito(_unsigned(_object(inner)["lamports"])),
            unwrap=lambda value: {"lamports": value.lamports},
        ),
        KeyedCase(
            "computeBudget",
            ComputeBudget,
            build=lambda inner: ComputeBudget(
                micro_lamports=_unsigned(_object(inner)["microLamports"]),
                estimated_micro_lamports=_optional_unsigned(inner.get("estimatedMicroLamports")),
            ),
            unwrap=lambda value: {
                "microLamports": value.micro_lamports,
                "estimatedMicroLamports": value.estimated_micro_lamports,
            },
        ),
    ],
)

PrioritizationType = Annotated[Union[Jito, ComputeBudget], PRIORITIZATION_TYPE_CODEC]


__all__ = [
    "AUTO",
    "Auto",
    "AutoMultiplier",
    "COMPUTE_UNIT_PRICE_CODEC",
    "ComputeBudget",
    "ComputeUnitPriceMicroLamports",
    "DISABLED",
    "Disabled",
    "Jito",
    "JitoTipLamports",
    "Lamports",
    "MicroLamports",
    "PRIORITIZATION_FEE_CODEC",
    "PRIORITIZATION_TYPE_CODEC",
    "PrioritizationFeeLamports",
    "PrioritizationType",
    "PriorityLevel",
    "PriorityLevelWithMaxLamports",
]
