import time
from pathlib import Path

import httpx
import pytest

from jupiter_swap_api.config import JupiterSettings
from jupiter_swap_api.core.exceptions import DecodingError, RequestFailedError, TransportError
from jupiter_swap_api.core.fixtures import load_fixture
from jupiter_swap_api.models import QuoteRequest, QuoteResponse, SwapRequest
from jupiter_swap_api.provider import JupiterSwapApiClient, RetryPolicy
from jupiter_swap_api.transport import JupiterHttpClient

FIXTURES = Path(__file__).resolve().parents[1] / "mock_api" / "fixtures"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
SOL_MINT = "So11111111111111111111111111111111111111112"
QUOTE = QuoteRequest(input_mint=USDC_MINT, output_mint=SOL_MINT, amount=1_000_000, slippage_bps=50)


def _quote_payload():
    return load_fixture(FIXTURES, "quote_ok.json", expected_version="1")


def _client(handler, **kwargs) -> JupiterSwapApiClient:
    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JupiterSwapApiClient(
        base_url="https://quote-api.test/v6",
        http_client=JupiterHttpClient(async_client=async_client),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_retry_exhaustion_counts_attempts_and_waits():
    attempts = []

    def handler(request):
        attempts.append(request.url.path)
        return httpx.Response(503, text=f"attempt {len(attempts)}")

    client = _client(handler)
    started = time.monotonic()
    with pytest.raises(RequestFailedError) as exc_info:
        await client.retry_quote(QUOTE, RetryPolicy(max_attempts=3, delay=0.05))
    elapsed = time.monotonic() - started

    assert len(attempts) == 3
    assert elapsed >= 0.1
    assert exc_info.value.status_code == 503
    assert exc_info.value.body == "attempt 3"


@pytest.mark.asyncio
async def test_retry_on_transport_errors():
    attempts = []

    def handler(request):
        attempts.append(1)
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(TransportError):
        await client.retry_quote(QUOTE, RetryPolicy(max_attempts=4, delay=0))
    assert len(attempts) == 4


@pytest.mark.asyncio
async def test_success_short_circuits_the_retry_loop():
    attempts = []
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    def handler(request):
        attempts.append(1)
        if len(attempts) < 3:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(200, json=_quote_payload())

    client = _client(handler, sleep=fake_sleep, retry_policy=RetryPolicy(max_attempts=5, delay=0.25))
    quote = await client.retry_quote(QUOTE)
    assert isinstance(quote, QuoteResponse)
    assert len(attempts) == 3
    assert delays == [0.25, 0.25]


@pytest.mark.asyncio
async def test_decode_failures_are_not_retried():
    attempts = []

    def handler(request):
        attempts.append(1)
        return httpx.Response(200, text="garbage")

    client = _client(handler, sleep=_no_sleep)
    with pytest.raises(DecodingError):
        await client.retry_quote(QUOTE, RetryPolicy(max_attempts=3, delay=1.0))
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_swap_is_never_retried():
    attempts = []

    def handler(request):
        attempts.append(request.url.path)
        return httpx.Response(503, text="busy")

    client = _client(handler, sleep=_no_sleep)
    quote = QuoteResponse.model_validate(_quote_payload())
    request = SwapRequest(user_public_key="11111111111111111111111111111111", quote_response=quote)
    with pytest.raises(RequestFailedError):
        await client.swap(request)
    with pytest.raises(RequestFailedError):
        await client.swap_instructions(request)
    assert attempts == ["/v6/swap", "/v6/swap-instructions"]


def test_policy_defaults_come_from_settings():
    client = JupiterSwapApiClient(settings=JupiterSettings(retry_attempts=5, retry_delay=0.5))
    assert client.retry_policy == RetryPolicy(max_attempts=5, delay=0.5)
    assert RetryPolicy() == RetryPolicy(max_attempts=3, delay=1.0)


def test_policy_validation():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(delay=-1)


async def _no_sleep(delay):
    return None
