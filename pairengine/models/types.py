"""Shared type definitions for pair engine models.

These types are used across events, tokens and the pair itself.
"""

from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, Field

from pairengine.widths import UINT112_MAX, UINT256_MAX


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with 0x prefix.

    Args:
        address: An address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid 20-byte hex address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def _coerce_address(value: Any) -> Any:
    if isinstance(value, str):
        return normalize_address(value)
    return value


def validate_amount(value: Any, *, name: str = "amount") -> int:
    """Validate that a value is a non-negative uint256 integer.

    Raises:
        TypeError: If value is not an int
        ValueError: If value is negative or exceeds 2^256-1
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"{name} overflow: {value} > 2^256-1")
    return value


# 20-byte address, normalized to lowercase
Address = Annotated[
    str,
    BeforeValidator(_coerce_address),
    Field(pattern=r"^0x[a-f0-9]{40}$"),
]

# Unsigned integers
Uint112 = Annotated[int, Field(ge=0, le=UINT112_MAX)]
Uint256 = Annotated[int, AfterValidator(validate_amount)]
