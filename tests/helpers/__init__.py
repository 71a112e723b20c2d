"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Addresses and common amounts
- contracts: Swap callees and misbehaving assets
- factories: Pair setup and liquidity helpers
"""

from tests.helpers.constants import (
    CALLEE,
    FACTORY,
    FEE_RECIPIENT,
    FEE_SETTER,
    GENESIS_TIMESTAMP,
    OTHER,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    UNIT,
    WALLET,
)
from tests.helpers.factories import add_liquidity, deposit, make_pair, remove_liquidity

__all__ = [
    # Constants
    "UNIT",
    "GENESIS_TIMESTAMP",
    "WALLET",
    "OTHER",
    "FEE_SETTER",
    "FEE_RECIPIENT",
    "FACTORY",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "CALLEE",
    # Factories
    "make_pair",
    "deposit",
    "add_liquidity",
    "remove_liquidity",
]
