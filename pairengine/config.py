"""Pair configuration."""

import os
from dataclasses import dataclass

from pairengine.constants import MINIMUM_LIQUIDITY


@dataclass(frozen=True)
class PairConfig:
    """Centralized configuration for pair accounting.

    This dataclass holds the numeric parameters of the pair engine, making
    it easy to test with different configurations and ensuring every pair
    created by a factory agrees on them.

    Attributes:
        swap_fee_numerator: Fee charged on swap input, over swap_fee_denominator
            (default: 3, i.e. 0.3%)
        swap_fee_denominator: Integer scaling base for fee-adjusted balances
            (default: 1000). The K check compares against reserves scaled by
            its square.
        minimum_liquidity: Shares locked forever on the first deposit
            (default: 1000)
        protocol_fee_share: The protocol receives 1/protocol_fee_share of the
            liquidity growth from trading fees when fee_to is set (default: 6)
    """

    swap_fee_numerator: int = 3
    swap_fee_denominator: int = 1000
    minimum_liquidity: int = MINIMUM_LIQUIDITY
    protocol_fee_share: int = 6

    def __post_init__(self) -> None:
        if self.swap_fee_denominator <= 0:
            raise ValueError(f"swap_fee_denominator must be positive: {self.swap_fee_denominator}")
        if not 0 <= self.swap_fee_numerator < self.swap_fee_denominator:
            raise ValueError(
                f"swap_fee_numerator must be in [0, {self.swap_fee_denominator}): "
                f"{self.swap_fee_numerator}"
            )
        if self.minimum_liquidity < 0:
            raise ValueError(f"minimum_liquidity cannot be negative: {self.minimum_liquidity}")
        if self.protocol_fee_share < 2:
            raise ValueError(f"protocol_fee_share must be at least 2: {self.protocol_fee_share}")

    @property
    def fee_multiplier(self) -> int:
        """Share of input kept after the fee (997 for 0.3% over 1000)."""
        return self.swap_fee_denominator - self.swap_fee_numerator

    @property
    def root_k_multiplier(self) -> int:
        """Coefficient of rootK in the protocol fee denominator (5 for 1/6)."""
        return self.protocol_fee_share - 1

    @classmethod
    def from_env(cls) -> "PairConfig":
        """Build a config from environment variables with sensible defaults.

        Configuration via environment variables:
        - PAIRENGINE_SWAP_FEE_NUMERATOR (default: 3)
        - PAIRENGINE_SWAP_FEE_DENOMINATOR (default: 1000)
        - PAIRENGINE_MINIMUM_LIQUIDITY (default: 1000)
        - PAIRENGINE_PROTOCOL_FEE_SHARE (default: 6)
        """
        return cls(
            swap_fee_numerator=int(os.environ.get("PAIRENGINE_SWAP_FEE_NUMERATOR", "3")),
            swap_fee_denominator=int(os.environ.get("PAIRENGINE_SWAP_FEE_DENOMINATOR", "1000")),
            minimum_liquidity=int(
                os.environ.get("PAIRENGINE_MINIMUM_LIQUIDITY", str(MINIMUM_LIQUIDITY))
            ),
            protocol_fee_share=int(os.environ.get("PAIRENGINE_PROTOCOL_FEE_SHARE", "6")),
        )


# Default configuration instance
DEFAULT_PAIR_CONFIG = PairConfig()
