"""Constant-product AMM pair engine - Python Implementation."""

from pairengine.chain import Chain
from pairengine.config import DEFAULT_PAIR_CONFIG, PairConfig
from pairengine.factory import Factory
from pairengine.pair import Pair
from pairengine.tokens import ERC20Token

__version__ = "0.1.0"
__all__ = [
    "Chain",
    "DEFAULT_PAIR_CONFIG",
    "ERC20Token",
    "Factory",
    "Pair",
    "PairConfig",
    "__version__",
]
