#!/usr/bin/env python3
"""
Command-line interface for poolscope.

Usage:
    poolscope pools
    poolscope positions --owner 0xYourAddress
    poolscope quote --token-in 0xA --token-out 0xB --amount 1.5
    poolscope quote --token-in 0xA --token-out 0xB --amount 100 --exact-output
    poolscope faucet --to 0xYourAddress
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from web3 import Web3

from .amm.formatting import format_address, format_price_for_ui, format_units, parse_units
from .chain.base import Web3ChainReader
from .config import ConfigError, get_config
from .pools import PoolIndex, build_pool_summaries
from .positions import PositionBook, PositionResolver, build_faucet_mint_calls
from .quoting import QuoteEngine, QuoteRequest, SwapDirection
from .tokens import TokenMetadataCache

logger = logging.getLogger(__name__)


def build_reader(config, chain: Optional[str] = None) -> Web3ChainReader:
    """Create a web3-backed reader for the configured chain."""
    rpc_url = config.chains.get_rpc_url(chain)
    web3 = Web3(Web3.HTTPProvider(rpc_url))
    logger.debug(f"Using RPC {rpc_url}")
    return Web3ChainReader(web3, config.read_config())


async def show_pools(args, config, reader) -> bool:
    index = PoolIndex(reader, config.protocols.POOL_MANAGER_ADDRESS)
    tokens = TokenMetadataCache(reader, config.chains.get_native_symbol(args.chain))

    await index.refresh()
    rows = await build_pool_summaries(
        index,
        tokens,
        include_balances=not args.no_balances,
        decimals=config.protocols.DEFAULT_TOKEN_DECIMALS,
    )

    if not rows:
        print("No pools")
        return True

    for row in rows:
        print(
            f"{format_address(row.pool)}  {row.token}  {row.fee}  "
            f"{row.price_range}  {format_price_for_ui(row.current_price)}  {row.liquidity}"
        )
    return True


async def show_positions(args, config, reader) -> bool:
    index = PoolIndex(reader, config.protocols.POOL_MANAGER_ADDRESS)
    book = PositionBook(reader, config.protocols.POSITION_MANAGER_ADDRESS)
    tokens = TokenMetadataCache(reader, config.chains.get_native_symbol(args.chain))
    resolver = PositionResolver(index, tokens)

    await asyncio.gather(index.refresh(), book.refresh())
    views = await resolver.resolve_for_owner(book.positions, args.owner)

    if not views:
        print(f"No open positions for {args.owner}")
        return True

    for view in views:
        print(
            f"#{view.key}  {view.token}  {view.fee_tier}  {view.price_range}  "
            f"{view.current_price_display}  liquidity={view.position.liquidity}"
        )
    return True


async def run_quote(args, config, reader) -> bool:
    router = args.router or config.protocols.SWAP_ROUTER_ADDRESS
    if not router:
        raise ConfigError("SWAP_ROUTER_ADDRESS is not configured; pass --router")

    decimals = config.protocols.DEFAULT_TOKEN_DECIMALS
    index = PoolIndex(reader, config.protocols.POOL_MANAGER_ADDRESS)
    engine = QuoteEngine(reader, index, router)

    request = QuoteRequest(
        token_in=args.token_in,
        token_out=args.token_out,
        amount=args.amount,
        direction=SwapDirection.EXACT_OUTPUT if args.exact_output else SwapDirection.EXACT_INPUT,
        decimals_in=args.decimals_in if args.decimals_in is not None else decimals,
        decimals_out=args.decimals_out if args.decimals_out is not None else decimals,
    )
    result = await engine.quote(request)

    if not result.success:
        logger.error(f"Quote failed ({result.failure.value}): {result.message}")
        return False

    for candidate in result.candidates:
        status = "failed" if candidate.failed else format_units(candidate.amount, request.solved_decimals)
        print(f"  index {candidate.pool.index}  {format_address(candidate.pool.pool)}  {status}")

    best = result.best
    side = "out" if request.direction is SwapDirection.EXACT_INPUT else "in"
    print(
        f"Best: index {best.pool.index} ({format_address(best.pool.pool)}), "
        f"amount {side} {format_units(best.amount, request.solved_decimals)}"
    )
    return True


async def show_faucet(args, config, reader) -> bool:
    """Print the test token mints for a recipient; signing is left to the wallet."""
    protocols = config.protocols
    amount = parse_units(str(protocols.FAUCET_MINT_AMOUNT), protocols.DEFAULT_TOKEN_DECIMALS)
    calls = build_faucet_mint_calls(protocols.TEST_TOKEN_ADDRESSES, args.to, amount)
    if not calls:
        print("No test tokens configured")
        return True

    tokens = TokenMetadataCache(reader, config.chains.get_native_symbol(args.chain))
    symbols = await tokens.get_symbols(call.address for call in calls)
    for call in calls:
        recipient, units = call.args
        print(
            f"{symbols[call.address.lower()]}  {call.address}  "
            f"mint({recipient}, {units}) = {format_units(units, protocols.DEFAULT_TOKEN_DECIMALS)}"
        )
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poolscope",
        description="Inspect AMM pools and positions and quote swaps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List pools with their token balances
  poolscope pools

  # Open positions for an owner
  poolscope positions --owner 0x1234...

  # Quote selling 1.5 tokens of A for B across every A/B pool
  poolscope quote --token-in 0xA... --token-out 0xB... --amount 1.5

  # Test token mints to sign with a wallet
  poolscope faucet --to 0x1234...
        """,
    )
    parser.add_argument("--chain", help="Chain name (defaults to DEFAULT_CHAIN)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    pools = subparsers.add_parser("pools", help="List pools")
    pools.add_argument("--no-balances", action="store_true", help="Skip pool token balance reads")

    positions = subparsers.add_parser("positions", help="List open positions for an owner")
    positions.add_argument("--owner", required=True, help="Owner address")

    quote = subparsers.add_parser("quote", help="Quote a swap across all pools of a pair")
    quote.add_argument("--token-in", required=True, help="Address of the token sold")
    quote.add_argument("--token-out", required=True, help="Address of the token bought")
    quote.add_argument("--amount", required=True, help="Fixed amount in whole-token units")
    quote.add_argument(
        "--exact-output",
        action="store_true",
        help="Treat --amount as the output to receive instead of the input to sell",
    )
    quote.add_argument("--decimals-in", type=int, help="token_in decimals")
    quote.add_argument("--decimals-out", type=int, help="token_out decimals")
    quote.add_argument("--router", help="Swap router address (defaults to SWAP_ROUTER_ADDRESS)")

    faucet = subparsers.add_parser("faucet", help="Prepare test token mints for a recipient")
    faucet.add_argument("--to", required=True, help="Recipient address")

    return parser


COMMANDS = {
    "pools": show_pools,
    "positions": show_positions,
    "quote": run_quote,
    "faucet": show_faucet,
}


async def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
        reader = build_reader(config, args.chain)
        success = await COMMANDS[args.command](args, config, reader)
        return 0 if success else 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (ConfigError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 2
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
