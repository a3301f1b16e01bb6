import httpx
import pytest

from jupiter_swap_api.codecs.scalars import encode_address
from jupiter_swap_api.config import JupiterSettings
from jupiter_swap_api.core.exceptions import RequestFailedError
from jupiter_swap_api.models import AUTO, ComputeBudget, QuoteRequest, SwapMode, SwapRequest, TransactionConfig
from jupiter_swap_api.provider import JupiterSwapApiClient, RetryPolicy
from jupiter_swap_api.transport import JupiterHttpClient
from mock_api.server import app, fail_next, reset_metrics

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
SOL_MINT = "So11111111111111111111111111111111111111112"
JUPITER_PROGRAM = "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QUhvyTVvj"
USER = encode_address(bytes(range(32)))
QUOTE = QuoteRequest(input_mint=USDC_MINT, output_mint=SOL_MINT, amount=1_000_000, slippage_bps=50)


def _client(async_client: httpx.AsyncClient) -> JupiterSwapApiClient:
    return JupiterSwapApiClient(
        base_url="http://test",
        settings=JupiterSettings(api_key="test-key"),
        http_client=JupiterHttpClient(async_client=async_client),
    )


@pytest.mark.asyncio
async def test_e2e_mock_api():
    reset_metrics()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport) as async_client:
        client = _client(async_client)
        quote = await client.quote(QUOTE)
        assert quote.in_amount == 1_000_000
        assert quote.out_amount == 50_000_000_000
        assert quote.swap_mode is SwapMode.EXACT_IN
        assert str(quote.input_mint) == USDC_MINT
        assert quote.slippage_bps == 50

        request = SwapRequest(
            user_public_key=USER,
            quote_response=quote,
            config=TransactionConfig(prioritization_fee_lamports=AUTO, dynamic_compute_unit_limit=True),
        )
        swap = await client.swap(request)
        assert swap.swap_transaction
        assert swap.last_valid_block_height == 279632475
        assert swap.prioritization_type == ComputeBudget(25000, 24000)

        instructions = await client.swap_instructions(request)
        assert str(instructions.swap_instruction.program_id) == JUPITER_PROGRAM
        assert len(instructions.instructions()) == 5

        assert await client.version() == "jupiter-swap-api-mock 6.0.0"

    body = app.state.last_requests["swap"]
    assert body["userPublicKey"] == USER
    assert body["quoteResponse"]["inAmount"] == "1000000"
    assert body["quoteResponse"]["outAmount"] == "50000000000"
    assert body["wrapAndUnwrapSol"] is True
    assert body["prioritizationFeeLamports"] == "auto"
    assert body["dynamicComputeUnitLimit"] is True
    assert "config" not in body
    assert app.state.metrics == {"quote": 1, "swap": 1, "swap_instructions": 1, "version": 1}


@pytest.mark.asyncio
async def test_e2e_retry_quote_recovers_from_outage():
    reset_metrics()
    fail_next("quote", count=2)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport) as async_client:
        client = _client(async_client)
        quote = await client.retry_quote(QUOTE, RetryPolicy(max_attempts=3, delay=0.0))
    assert quote.out_amount == 50_000_000_000
    assert app.state.metrics["quote"] == 3


@pytest.mark.asyncio
async def test_e2e_swap_outage_is_not_retried():
    reset_metrics()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport) as async_client:
        client = _client(async_client)
        quote = await client.quote(QUOTE)
        fail_next("swap", count=1, status_code=500, body="simulation failed")
        with pytest.raises(RequestFailedError) as exc_info:
            await client.swap(SwapRequest(user_public_key=USER, quote_response=quote))
    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "simulation failed"
    assert app.state.metrics["swap"] == 1


@pytest.mark.asyncio
async def test_e2e_service_rejection_keeps_raw_body():
    reset_metrics()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport) as async_client:
        client = _client(async_client)
        with pytest.raises(RequestFailedError) as exc_info:
            await client.quote(QuoteRequest(input_mint=SOL_MINT, output_mint=SOL_MINT, amount=1))
    assert exc_info.value.status_code == 400
    assert "inputMint and outputMint must differ" in exc_info.value.body
