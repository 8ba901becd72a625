"""Pytest configuration and fixtures."""

import pytest

from pool_engine import InMemoryCustody, PoolEngine
from tests.helpers import ALICE, ETHER, USDC, WETH, make_custody, seed_pool


@pytest.fixture
def custody() -> InMemoryCustody:
    """Custody where every test account holds every test token."""
    return make_custody()


@pytest.fixture
def engine(custody: InMemoryCustody) -> PoolEngine:
    """Engine with default configuration and no pools."""
    return PoolEngine(custody)


@pytest.fixture
def seeded_engine(engine: PoolEngine) -> PoolEngine:
    """Engine with a WETH/USDC pool seeded by ALICE at 1000 / 2000."""
    seed_pool(engine, WETH, USDC, 1000 * ETHER, 2000 * ETHER, provider=ALICE)
    return engine
