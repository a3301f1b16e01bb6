from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, List, Optional

import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from jupiter_swap_api.config import JupiterSettings, get_config
from jupiter_swap_api.core.exceptions import JupiterClientError, ProviderMisconfigured
from jupiter_swap_api.models.prioritization import AUTO, DISABLED, Lamports
from jupiter_swap_api.models.quote import QuoteRequest, QuoteResponse, SwapMode
from jupiter_swap_api.models.swap import SwapInstructionsResponse, SwapRequest, SwapResponse
from jupiter_swap_api.models.transaction_config import TransactionConfig
from jupiter_swap_api.provider import JupiterSwapApiClient
from jupiter_swap_api.transport.middleware import LoggingMiddleware

logger = logging.getLogger(__name__)

COMMANDS = ["quote", "swap", "swap-instructions", "version", "serve-mock"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _positive_int(value: str) -> int:
    if not value.isdigit() or int(value) == 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return int(value)


def _bps(value: str) -> int:
    if not value.isdigit() or int(value) > 65_535:
        raise argparse.ArgumentTypeError(f"expected basis points between 0 and 65535, got {value!r}")
    return int(value)


def _prioritization_fee(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered == "auto":
        return AUTO
    if lowered == "disabled":
        return DISABLED
    if lowered.isdigit():
        return Lamports(int(lowered))
    raise argparse.ArgumentTypeError(f"expected auto, disabled or a lamport amount, got {value!r}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Jupiter swap API client")
    parser.add_argument("command", choices=COMMANDS, help="Command to run")
    parser.add_argument("--base-url", type=str, default=None, help="Override JUPITER_BASE_URL")
    parser.add_argument("--input-mint", type=str, default=None, help="Mint address to sell")
    parser.add_argument("--output-mint", type=str, default=None, help="Mint address to buy")
    parser.add_argument("--amount", type=_positive_int, default=None, help="Raw token amount")
    parser.add_argument("--slippage-bps", type=_bps, default=50, help="Allowed slippage in basis points")
    parser.add_argument(
        "--swap-mode", choices=[mode.value for mode in SwapMode], default=SwapMode.EXACT_IN.value
    )
    parser.add_argument("--user", type=str, default=None, help="User public key for swap commands")
    parser.add_argument(
        "--prioritization-fee",
        type=_prioritization_fee,
        default=None,
        help="auto, disabled or a lamport amount",
    )
    parser.add_argument("--dynamic-compute-unit-limit", action="store_true")
    parser.add_argument("--retry", action="store_true", help="Retry failed quotes using the configured policy")
    parser.add_argument("--json", action="store_true", help="Print wire JSON instead of tables")
    parser.add_argument("--host", type=str, default=None, help="Host for serve-mock")
    parser.add_argument("--port", type=int, default=None, help="Port for serve-mock")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.getenv("JUPITER_LOG_LEVEL", "WARNING").upper(),
    )
    return parser


def _validate_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.command in {"quote", "swap", "swap-instructions"}:
        missing = [
            flag
            for flag, value in (
                ("--input-mint", args.input_mint),
                ("--output-mint", args.output_mint),
                ("--amount", args.amount),
            )
            if value is None
        ]
        if missing:
            parser.error(f"{args.command} requires {', '.join(missing)}")
    if args.command in {"swap", "swap-instructions"} and not args.user:
        parser.error(f"{args.command} requires --user")


def render_quote(quote: QuoteResponse) -> Table:
    table = Table(title=f"Route {quote.input_mint} -> {quote.output_mint}")
    table.add_column("Label")
    table.add_column("AMM")
    table.add_column("In", justify="right")
    table.add_column("Out", justify="right")
    table.add_column("Percent", justify="right")
    for step in quote.route_plan:
        info = step.swap_info
        table.add_row(
            info.label or "-",
            str(info.amm_key),
            str(info.in_amount),
            str(info.out_amount),
            f"{step.percent}%",
        )
    table.caption = (
        f"in={quote.in_amount} out={quote.out_amount} "
        f"min_out={quote.other_amount_threshold} impact={quote.price_impact_pct}%"
    )
    return table


def render_swap_instructions(response: SwapInstructionsResponse) -> Table:
    table = Table(title="Swap instructions")
    table.add_column("Slot")
    table.add_column("Program")
    table.add_column("Accounts", justify="right")
    table.add_column("Data bytes", justify="right")
    for slot, items in response.slots().items():
        for instruction in items:
            table.add_row(slot, str(instruction.program_id), str(len(instruction.accounts)), str(len(instruction.data)))
    return table


def _quote_request(args: argparse.Namespace) -> QuoteRequest:
    return QuoteRequest(
        input_mint=args.input_mint,
        output_mint=args.output_mint,
        amount=args.amount,
        slippage_bps=args.slippage_bps,
        swap_mode=SwapMode(args.swap_mode),
    )


def _swap_request(args: argparse.Namespace, quote: QuoteResponse) -> SwapRequest:
    config = TransactionConfig(
        prioritization_fee_lamports=args.prioritization_fee,
        dynamic_compute_unit_limit=args.dynamic_compute_unit_limit,
    )
    return SwapRequest(user_public_key=args.user, quote_response=quote, config=config)


async def _run_client_command(args: argparse.Namespace, console: Console) -> None:
    settings = JupiterSettings.from_env()
    middlewares = [LoggingMiddleware(level=logging.DEBUG)]
    async with JupiterSwapApiClient(base_url=args.base_url, settings=settings, middlewares=middlewares) as client:
        if args.command == "version":
            console.print(await client.version())
            return

        request = _quote_request(args)
        quote = await (client.retry_quote(request) if args.retry else client.quote(request))
        if args.command == "quote":
            if args.json:
                console.print_json(json.dumps(quote.to_wire()))
            else:
                console.print(render_quote(quote))
            return

        swap_request = _swap_request(args, quote)
        if args.command == "swap":
            response: SwapResponse = await client.swap(swap_request)
            console.print_json(
                json.dumps(response.model_dump(mode="json", by_alias=True, exclude_none=True))
            )
            return

        instructions = await client.swap_instructions(swap_request)
        if args.json:
            console.print_json(
                json.dumps(instructions.model_dump(mode="json", by_alias=True, exclude_none=True))
            )
        else:
            console.print(render_swap_instructions(instructions))


def cmd_serve_mock(host: Optional[str], port: Optional[int]) -> None:
    cfg = get_config().get("mock_api") or {}
    uvicorn.run(
        "mock_api.server:app",
        host=host or cfg.get("host", "127.0.0.1"),
        port=port or int(cfg.get("port", 18080)),
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _validate_args(parser, args)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "serve-mock":
        cmd_serve_mock(args.host, args.port)
        return 0

    console = Console()
    try:
        asyncio.run(_run_client_command(args, console))
    except (JupiterClientError, ProviderMisconfigured, ValidationError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        Console(stderr=True).print(f"[red]error:[/red] {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
