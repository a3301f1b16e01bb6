from jupiter_swap_api.models.prioritization import (
    AUTO,
    DISABLED,
    Auto,
    AutoMultiplier,
    ComputeBudget,
    ComputeUnitPriceMicroLamports,
    Disabled,
    Jito,
    JitoTipLamports,
    Lamports,
    MicroLamports,
    PrioritizationFeeLamports,
    PrioritizationType,
    PriorityLevel,
    PriorityLevelWithMaxLamports,
)
from jupiter_swap_api.models.quote import PlatformFee, QuoteRequest, QuoteResponse, RoutePlanStep, SwapInfo, SwapMode
from jupiter_swap_api.models.swap import (
    DynamicSlippageReport,
    SwapInstructionsResponse,
    SwapRequest,
    SwapResponse,
    UiSimulationError,
)
from jupiter_swap_api.models.transaction_config import (
    DEFAULT_TRANSACTION_CONFIG,
    DynamicSlippageSettings,
    KeyedUiAccount,
    TransactionConfig,
)

__all__ = [
    "AUTO",
    "Auto",
    "AutoMultiplier",
    "ComputeBudget",
    "ComputeUnitPriceMicroLamports",
    "DEFAULT_TRANSACTION_CONFIG",
    "DISABLED",
    "Disabled",
    "DynamicSlippageReport",
    "DynamicSlippageSettings",
    "Jito",
    "JitoTipLamports",
    "KeyedUiAccount",
    "Lamports",
    "MicroLamports",
    "PlatformFee",
    "PrioritizationFeeLamports",
    "PrioritizationType",
    "PriorityLevel",
    "PriorityLevelWithMaxLamports",
    "QuoteRequest",
    "QuoteResponse",
    "RoutePlanStep",
    "SwapInfo",
    "SwapInstructionsResponse",
    "SwapMode",
    "SwapRequest",
    "SwapResponse",
    "TransactionConfig",
    "UiSimulationError",
]
