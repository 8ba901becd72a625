"""Test helpers module for shared test utilities.

- constants: Token and account addresses, common amounts
- factories: Engine, custody and pool factory functions
"""

from tests.helpers.constants import (
    ACCOUNTS,
    ALICE,
    BOB,
    CAROL,
    DAI,
    ETHER,
    STARTING_BALANCE,
    TOKENS,
    USDC,
    WETH,
)
from tests.helpers.factories import make_custody, make_engine, seed_pool

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "TOKENS",
    "ALICE",
    "BOB",
    "CAROL",
    "ACCOUNTS",
    "ETHER",
    "STARTING_BALANCE",
    # Factories
    "make_custody",
    "make_engine",
    "seed_pool",
]
