#!/usr/bin/env python3
"""Simulate a pair lifecycle: add liquidity, swap, remove liquidity.

Usage:
    python scripts/simulate_pair.py --reserve0 5 --reserve1 10 --swap-in 1
    python scripts/simulate_pair.py --fee-on --swaps 20 -v
"""

import argparse
import sys

import structlog

from pairengine import Chain, ERC20Token, Factory
from pairengine.library import get_amount_out
from pairengine.log import configure_logging

logger = structlog.get_logger()

UNIT = 10**18

LP = "0x" + "11" * 20
TRADER = "0x" + "22" * 20
FEE_SETTER = "0x" + "33" * 20
FEE_RECIPIENT = "0x" + "44" * 20
FACTORY = "0x" + "f0" * 20
TOKEN_A = "0x" + "a0" * 20
TOKEN_B = "0x" + "b0" * 20


def print_reserves(label: str, reserves: tuple[int, int, int]) -> None:
    print(f"{label:<24} reserve0={reserves[0] / UNIT:>14.6f}  reserve1={reserves[1] / UNIT:>14.6f}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate a constant-product pair")
    parser.add_argument("--reserve0", type=int, default=5, help="Initial token0 deposit (units)")
    parser.add_argument("--reserve1", type=int, default=10, help="Initial token1 deposit (units)")
    parser.add_argument("--swap-in", type=int, default=1, help="token0 sold per swap (whole units)")
    parser.add_argument("--swaps", type=int, default=1, help="Number of swaps to run")
    parser.add_argument("--fee-on", action="store_true", help="Enable the protocol fee")
    parser.add_argument("--json", action="store_true", help="Emit logs as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else None, json=args.json)

    if args.reserve0 <= 0 or args.reserve1 <= 0 or args.swap_in <= 0:
        print("Error: reserves and swap size must be positive")
        return 1

    chain = Chain()
    token_a = ERC20Token(chain, TOKEN_A, "Token A", "TKA")
    token_b = ERC20Token(chain, TOKEN_B, "Token B", "TKB")
    factory = Factory(chain, FACTORY, fee_to_setter=FEE_SETTER)
    if args.fee_on:
        factory.set_fee_to(FEE_RECIPIENT, caller=FEE_SETTER)

    pair = factory.create_pair(token_a.address, token_b.address, caller=LP)
    token0 = token_a if pair.token0 == token_a.address else token_b
    token1 = token_b if token0 is token_a else token_a

    # Add liquidity
    token0.mint(LP, args.reserve0 * UNIT)
    token1.mint(LP, args.reserve1 * UNIT)
    token0.transfer(LP, pair.address, args.reserve0 * UNIT)
    token1.transfer(LP, pair.address, args.reserve1 * UNIT)
    liquidity = pair.mint(LP, caller=LP)
    print(f"Pair {pair.address}")
    print(f"Minted {liquidity} shares to LP")
    print_reserves("after mint", pair.get_reserves())

    # Swap token0 -> token1
    amount_in = args.swap_in * UNIT
    token0.mint(TRADER, amount_in * args.swaps)
    for i in range(args.swaps):
        reserve0, reserve1, _ = pair.get_reserves()
        amount_out = get_amount_out(amount_in, reserve0, reserve1, pair.config)
        token0.transfer(TRADER, pair.address, amount_in)
        pair.swap(0, amount_out, TRADER, caller=TRADER)
        logger.info("swap_done", index=i, amount_in=amount_in, amount_out=amount_out)
    print(f"Trader received {token1.balance_of(TRADER) / UNIT:.6f} token1")
    print_reserves("after swaps", pair.get_reserves())

    # Remove all LP liquidity
    pair.shares.transfer(LP, pair.address, pair.shares.balance_of(LP))
    amount0, amount1 = pair.burn(LP, caller=LP)
    print(f"LP withdrew {amount0 / UNIT:.6f} token0 and {amount1 / UNIT:.6f} token1")
    print_reserves("after burn", pair.get_reserves())
    if args.fee_on:
        print(f"Protocol fee shares: {pair.shares.balance_of(FEE_RECIPIENT)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
