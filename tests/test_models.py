from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError
from solders.pubkey import Pubkey

from jupiter_swap_api.codecs.scalars import encode_address
from jupiter_swap_api.core.exceptions import Base64DecodeError, decoding_error_from_validation
from jupiter_swap_api.core.fixtures import FixtureVersionError, load_fixture
from jupiter_swap_api.models import (
    AUTO,
    DEFAULT_TRANSACTION_CONFIG,
    ComputeBudget,
    DynamicSlippageSettings,
    JitoTipLamports,
    QuoteRequest,
    QuoteResponse,
    SwapInstructionsResponse,
    SwapMode,
    SwapRequest,
    SwapResponse,
    TransactionConfig,
)

FIXTURES = Path(__file__).resolve().parents[1] / "mock_api" / "fixtures"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
SOL_MINT = "So11111111111111111111111111111111111111112"
JUPITER_PROGRAM = "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QUhvyTVvj"
USER = encode_address(bytes(range(32)))


def _quote_payload():
    return load_fixture(FIXTURES, "quote_ok.json", expected_version="1")


def test_default_transaction_config_is_explicit():
    config = DEFAULT_TRANSACTION_CONFIG
    assert config == TransactionConfig()
    assert config.wrap_and_unwrap_sol is True
    assert config.use_shared_accounts is True
    assert config.prioritization_fee_lamports is None
    assert config.compute_unit_price_micro_lamports is None
    assert config.dynamic_compute_unit_limit is False
    assert config.as_legacy_transaction is False
    assert config.use_token_ledger is False
    assert config.fee_account is None
    assert config.destination_token_account is None


def test_zero_amount_quote_is_syntactically_valid():
    request = QuoteRequest(input_mint=USDC_MINT, output_mint=SOL_MINT, amount=0, swap_mode=SwapMode.EXACT_IN)
    assert request.to_query()["amount"] == "0"


def test_quote_request_query_encoding():
    request = QuoteRequest(
        input_mint=USDC_MINT,
        output_mint=SOL_MINT,
        amount=1_000_000,
        slippage_bps=50,
        dexes=["Orca", "Raydium"],
        excluded_dexes=[],
        only_direct_routes=True,
        quote_args={"preferLiquidDexes": "true"},
    )
    assert request.to_query() == {
        "inputMint": USDC_MINT,
        "outputMint": SOL_MINT,
        "amount": "1000000",
        "slippageBps": 50,
        "dexes": "Orca,Raydium",
        "onlyDirectRoutes": True,
        "preferLiquidDexes": "true",
    }


def test_quote_request_field_bounds():
    with pytest.raises(ValidationError):
        QuoteRequest(input_mint=USDC_MINT, output_mint=SOL_MINT, amount=1, slippage_bps=70_000)
    with pytest.raises(ValidationError):
        QuoteRequest(input_mint="not-a-mint", output_mint=SOL_MINT, amount=1)


def test_quote_response_decodes_and_round_trips():
    payload = _quote_payload()
    payload["simplerRouteUsed"] = False
    quote = QuoteResponse.model_validate(payload)
    assert quote.in_amount == 1_000_000
    assert quote.out_amount == 50_000_000_000
    assert quote.swap_mode is SwapMode.EXACT_IN
    assert quote.price_impact_pct == Decimal("0.0001")
    assert str(quote.input_mint) == USDC_MINT
    assert quote.route_plan[0].swap_info.label == "Whirlpool"

    wire = quote.to_wire()
    assert wire == {key: value for key, value in payload.items() if value is not None}


def test_swap_request_flattens_config():
    quote = QuoteResponse.model_validate(_quote_payload())
    request = SwapRequest(user_public_key=USER, quote_response=quote)
    wire = request.to_wire()
    assert "config" not in wire
    assert wire["userPublicKey"] == USER
    assert wire["quoteResponse"]["inAmount"] == "1000000"
    assert wire["wrapAndUnwrapSol"] is True
    assert wire["useSharedAccounts"] is True
    assert wire["dynamicComputeUnitLimit"] is False
    assert "prioritizationFeeLamports" not in wire


def test_swap_request_variant_and_nested_options():
    quote = QuoteResponse.model_validate(_quote_payload())
    config = TransactionConfig(
        prioritization_fee_lamports=JitoTipLamports(1000),
        compute_unit_price_micro_lamports=AUTO,
        dynamic_slippage=DynamicSlippageSettings(min_bps=10, max_bps=300),
        destination_token_account=Pubkey.default(),
    )
    wire = SwapRequest(user_public_key=USER, quote_response=quote, config=config).to_wire()
    assert wire["prioritizationFeeLamports"] == {"jitoTipLamports": 1000}
    assert wire["computeUnitPriceMicroLamports"] == "auto"
    assert wire["dynamicSlippage"] == {"minBps": 10, "maxBps": 300}
    assert wire["destinationTokenAccount"] == "11111111111111111111111111111111"

    parsed = SwapRequest.model_validate(wire)
    assert parsed.config == config
    assert str(parsed.user_public_key) == USER


def test_swap_response_decodes_minimal_body():
    response = SwapResponse.model_validate({"swapTransaction": "QQ==", "lastValidBlockHeight": 100})
    assert response.swap_transaction == b"\x41"
    assert response.last_valid_block_height == 100
    assert response.prioritization_type is None


def test_swap_response_metadata():
    payload = load_fixture(FIXTURES, "swap_ok.json", expected_version="1")
    response = SwapResponse.model_validate(payload)
    assert response.prioritization_type == ComputeBudget(25000, 24000)
    assert response.compute_unit_limit == 200000


def test_swap_response_bad_base64_names_the_field():
    with pytest.raises(ValidationError) as exc_info:
        SwapResponse.model_validate({"swapTransaction": "QQ=", "lastValidBlockHeight": 100})
    error = decoding_error_from_validation(exc_info.value, "swap response")
    assert isinstance(error, Base64DecodeError)
    assert error.field == "swapTransaction"
    assert error.value == "QQ="


def test_swap_instructions_response_slots():
    payload = load_fixture(FIXTURES, "swap_instructions_ok.json", expected_version="1")
    response = SwapInstructionsResponse.model_validate(payload)
    assert response.token_ledger_instruction is None
    assert len(response.compute_budget_instructions) == 2
    assert len(response.setup_instructions) == 1
    assert str(response.swap_instruction.program_id) == JUPITER_PROGRAM
    assert response.cleanup_instruction.accounts[0].is_signer is False
    assert response.cleanup_instruction.accounts[0].is_writable is True
    assert [str(key) for key in response.address_lookup_table_addresses] == [
        "AddressLookupTab1e1111111111111111111111111"
    ]
    ordered = response.instructions()
    assert len(ordered) == 5
    assert ordered[3] == response.swap_instruction
    assert response.slots()["token_ledger"] == []


def test_swap_instructions_response_requires_swap_instruction():
    with pytest.raises(ValidationError):
        SwapInstructionsResponse.model_validate({"setupInstructions": []})


def test_single_instruction_slot_rejects_extra_instructions():
    first = {"programId": JUPITER_PROGRAM, "accounts": [], "data": "QQ=="}
    second = {"programId": JUPITER_PROGRAM, "accounts": [], "data": "Qg=="}

    single = SwapInstructionsResponse.model_validate({"swapInstruction": [first]})
    assert bytes(single.swap_instruction.data) == b"A"

    with pytest.raises(ValidationError) as exc_info:
        SwapInstructionsResponse.model_validate({"swapInstruction": [first, second]})
    error = decoding_error_from_validation(exc_info.value, "swap-instructions")
    assert error.field == "swapInstruction"
    assert error.value == [first, second]

    with pytest.raises(ValidationError):
        SwapInstructionsResponse.model_validate({"swapInstruction": first, "cleanupInstruction": [first, second]})


def test_swap_instructions_json_dump_uses_wire_form():
    payload = load_fixture(FIXTURES, "swap_instructions_ok.json", expected_version="1")
    dumped = SwapInstructionsResponse.model_validate(payload).model_dump(mode="json", by_alias=True)
    assert dumped["swapInstruction"] == payload["swapInstruction"]
    assert dumped["addressLookupTableAddresses"] == payload["addressLookupTableAddresses"]


def test_fixture_version_marker_is_checked_and_removed(tmp_path):
    path = tmp_path / "quote.json"
    path.write_text('{"_fixture_version": "2", "inAmount": "1"}', encoding="utf-8")
    assert load_fixture(tmp_path, "quote.json") == {"inAmount": "1"}
    with pytest.raises(FixtureVersionError):
        load_fixture(tmp_path, "quote.json", expected_version="1")
