"""Single-pair quoting helpers.

Formula: amount_out = (amount_in * fee * reserve_out) / (reserve_in * base + amount_in * fee)

With the default config, fee = 997 and base = 1000 (a 0.3% fee on input).
These helpers only read reserves; they never touch a pair's state.
"""

from __future__ import annotations

from pairengine.config import DEFAULT_PAIR_CONFIG, PairConfig
from pairengine.constants import ZERO_ADDRESS
from pairengine.errors import IdenticalAddresses, InsufficientLiquidity, ZeroAddress
from pairengine.models.types import normalize_address
from pairengine.safe_int import S


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order two addresses the way a pair stores them (numerically ascending).

    Raises:
        IdenticalAddresses: If both addresses are the same
        ZeroAddress: If the lower address is the zero address
    """
    a = normalize_address(token_a, validate=True)
    b = normalize_address(token_b, validate=True)
    if a == b:
        raise IdenticalAddresses(f"Both tokens are {a}")
    token0, token1 = (a, b) if int(a, 16) < int(b, 16) else (b, a)
    if token0 == ZERO_ADDRESS:
        raise ZeroAddress("Token cannot be the zero address")
    return token0, token1


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B equivalent to amount_a of A at the current reserve ratio.

    Raises:
        ValueError: If amount_a is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_a <= 0:
        raise ValueError(f"Quote amount must be positive: {amount_a}")
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity(f"Empty reserves ({reserve_a}, {reserve_b})")
    return (S(amount_a) * reserve_b // reserve_a).value


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    config: PairConfig = DEFAULT_PAIR_CONFIG,
) -> int:
    """Largest output a pair will release for `amount_in` of input.

    This is exactly the maximum that passes the pair's K check.

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pair
        reserve_out: Reserve of output token in pair
        config: Fee parameters (default 0.3%)

    Returns:
        Output token amount (0 for non-positive input or empty reserves)
    """
    if amount_in <= 0:
        return 0
    if reserve_in <= 0 or reserve_out <= 0:
        return 0

    amount_in_with_fee = S(amount_in) * config.fee_multiplier
    numerator = amount_in_with_fee * reserve_out
    denominator = S(reserve_in) * config.swap_fee_denominator + amount_in_with_fee

    return (numerator // denominator).value


def get_amount_in(
    amount_out: int,
    reserve_in: int,
    reserve_out: int,
    config: PairConfig = DEFAULT_PAIR_CONFIG,
) -> int:
    """Smallest input that buys `amount_out` of output.

    Formula: amount_in = (res_in * out * base) / ((res_out - out) * fee) + 1

    Raises:
        InsufficientLiquidity: If amount_out is not below reserve_out
    """
    if amount_out <= 0:
        return 0
    if reserve_in <= 0 or reserve_out <= 0 or amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Cannot buy {amount_out} from reserves ({reserve_in}, {reserve_out})"
        )

    # Ceiling division: (numerator // denominator) + 1
    numerator = S(reserve_in) * amount_out * config.swap_fee_denominator
    denominator = (S(reserve_out) - amount_out) * config.fee_multiplier

    return ((numerator // denominator) + 1).value
