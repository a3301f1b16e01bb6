from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict

from jupiter_swap_api.core.fixtures import load_fixture_set

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"
FIXTURE_VERSION = "1"
MOCK_VERSION = "jupiter-swap-api-mock 6.0.0"
ENDPOINTS = ("quote", "swap", "swap_instructions", "version")

app = FastAPI()

app.state.fixtures = load_fixture_set(
    FIXTURE_DIR,
    {
        "quote": "quote_ok.json",
        "swap": "swap_ok.json",
        "swap_instructions": "swap_instructions_ok.json",
    },
    expected_version=FIXTURE_VERSION,
)


def _empty_metrics() -> Dict[str, int]:
    return {endpoint: 0 for endpoint in ENDPOINTS}


app.state.metrics = _empty_metrics()
app.state.failures = {}
app.state.last_requests = {}


def reset_metrics() -> None:
    app.state.metrics = _empty_metrics()
    app.state.failures = {}
    app.state.last_requests = {}


def fail_next(endpoint: str, count: int = 1, status_code: int = 503, body: str = "service unavailable") -> None:
    """Make the next ``count`` calls to ``endpoint`` answer ``status_code`` with a plain-text body."""
    if endpoint not in ENDPOINTS:
        raise KeyError(endpoint)
    app.state.failures[endpoint] = {"remaining": count, "status_code": status_code, "body": body}


def _injected_failure(endpoint: str) -> Optional[PlainTextResponse]:
    failure = app.state.failures.get(endpoint)
    if not failure or failure["remaining"] <= 0:
        return None
    failure["remaining"] -= 1
    return PlainTextResponse(failure["body"], status_code=failure["status_code"])


class SwapBody(BaseModel):
    userPublicKey: str
    quoteResponse: Dict[str, Any]

    model_config = ConfigDict(extra="allow")


@app.get("/quote")
async def quote(
    inputMint: str,
    outputMint: str,
    amount: str,
    slippageBps: int = 0,
    swapMode: str = "ExactIn",
) -> Any:
    app.state.metrics["quote"] += 1
    failure = _injected_failure("quote")
    if failure is not None:
        return failure
    if not amount.isdigit() or int(amount) == 0:
        raise HTTPException(status_code=400, detail="amount must be a positive integer string")
    if inputMint == outputMint:
        raise HTTPException(status_code=400, detail="inputMint and outputMint must differ")

    payload = copy.deepcopy(app.state.fixtures["quote"])
    payload["inputMint"] = inputMint
    payload["outputMint"] = outputMint
    payload["inAmount"] = amount
    payload["slippageBps"] = slippageBps
    payload["swapMode"] = swapMode
    return payload


@app.post("/swap")
async def swap(body: SwapBody) -> Any:
    app.state.metrics["swap"] += 1
    app.state.last_requests["swap"] = body.model_dump()
    failure = _injected_failure("swap")
    if failure is not None:
        return failure
    return copy.deepcopy(app.state.fixtures["swap"])


@app.post("/swap-instructions")
async def swap_instructions(body: SwapBody) -> Any:
    app.state.metrics["swap_instructions"] += 1
    app.state.last_requests["swap_instructions"] = body.model_dump()
    failure = _injected_failure("swap_instructions")
    if failure is not None:
        return failure
    return copy.deepcopy(app.state.fixtures["swap_instructions"])


@app.get("/version", response_class=PlainTextResponse)
async def version() -> Any:
    app.state.metrics["version"] += 1
    failure = _injected_failure("version")
    if failure is not None:
        return failure
    return MOCK_VERSION


__all__ = ["app", "fail_next", "reset_metrics"]
