"""Fixed integer widths.

Imports nothing from the package, so models and constants can both use it.
"""

# Reserves are stored narrower than balances
UINT112_MAX = 2**112 - 1
UINT256_MAX = 2**256 - 1

# Block timestamps are truncated to 32 bits
TIMESTAMP_MODULUS = 2**32
