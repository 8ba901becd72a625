"""Protocol constants for the pool engine.

Centralizes the fee, price scale and sentinel addresses shared by the
pricing functions, the coordinators and the query API.
"""

# Zero address is the null token sentinel and never a valid pool token
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Trading fee in basis points (30 = 0.3%), retained in the pool
FEE_BPS = 30

# Basis point denominator used by all fee math
BPS_DENOMINATOR = 10_000

# Fixed-point scale for spot prices (1e18 = price of 1.0)
PRICE_SCALE = 10**18

# Share units minted per unit of raw deposit on the bootstrap deposit
BOOTSTRAP_UNIT = 1

# Maximum uint256 value; amounts above it are rejected
UINT256_MAX = 2**256 - 1
