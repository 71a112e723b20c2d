"""Protocol constants for the pair engine.

Centralizes integer widths and well-known identities.
"""

from pairengine.models.types import is_valid_address
from pairengine.widths import TIMESTAMP_MODULUS, UINT112_MAX, UINT256_MAX

__all__ = [
    "MINIMUM_LIQUIDITY",
    "TIMESTAMP_MODULUS",
    "UINT112_MAX",
    "UINT256_MAX",
    "ZERO_ADDRESS",
]

# Shares permanently locked at ZERO_ADDRESS on the first deposit
MINIMUM_LIQUIDITY = 10**3


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# The null identity. Holds the locked minimum liquidity and means "fee off" in fee_to.
ZERO_ADDRESS = _validate_address("zero", "0x" + "00" * 20)
