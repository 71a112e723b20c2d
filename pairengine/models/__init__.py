"""Data models for the pair engine."""

from pairengine.models.events import (
    Approval,
    Burn,
    Event,
    Mint,
    PairCreated,
    Swap,
    Sync,
    Transfer,
)
from pairengine.models.state import Reserves
from pairengine.models.types import is_valid_address, normalize_address

__all__ = [
    "Approval",
    "Burn",
    "Event",
    "Mint",
    "PairCreated",
    "Reserves",
    "Swap",
    "Sync",
    "Transfer",
    "is_valid_address",
    "normalize_address",
]
