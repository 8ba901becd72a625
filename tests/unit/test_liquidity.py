"""Tests for liquidity coordination."""

import pytest

from pool_engine import BootstrapPolicy, EngineConfig, InMemoryCustody, PoolEngine
from pool_engine.errors import (
    InsufficientShares,
    InvalidAmount,
    PoolNotFound,
    TransferError,
)
from pool_engine.models.events import LiquidityAdded, LiquidityRemoved
from tests.helpers import ALICE, BOB, CAROL, DAI, ETHER, USDC, WETH, make_engine


class TestAddLiquidity:
    """Tests for LiquidityCoordinator.add_liquidity."""

    def test_bootstrap_mints_sum(self, engine):
        engine.create_pool(WETH, USDC)
        shares = engine.add_liquidity(WETH, USDC, 100, 200, ALICE)
        assert shares == 300
        assert engine.get_liquidity(WETH, USDC, ALICE) == 300
        assert engine.get_reserves(WETH, USDC) == (100, 200)

    def test_bootstrap_geometric_mean(self):
        engine, _ = make_engine(EngineConfig(bootstrap=BootstrapPolicy.GEOMETRIC_MEAN))
        engine.create_pool(WETH, USDC)
        assert engine.add_liquidity(WETH, USDC, 100, 400, ALICE) == 200

    def test_proportional_second_deposit(self, engine):
        engine.create_pool(WETH, USDC)
        engine.add_liquidity(WETH, USDC, 100, 200, ALICE)
        assert engine.add_liquidity(USDC, WETH, 100, 50, BOB) == 150
        assert engine.get_pool(WETH, USDC).total_shares == 450

    def test_unbalanced_deposit_keeps_excess_in_pool(self, engine):
        engine.create_pool(WETH, USDC)
        engine.add_liquidity(WETH, USDC, 100, 200, ALICE)

        shares = engine.add_liquidity(WETH, USDC, 50, 400, BOB)

        assert shares == 150
        assert engine.get_reserves(WETH, USDC) == (150, 600)

    def test_custody_receives_both_tokens(self, engine, custody):
        engine.create_pool(WETH, USDC)
        engine.add_liquidity(WETH, USDC, 100, 200, ALICE)
        assert custody.custody_balance(WETH) == 100
        assert custody.custody_balance(USDC) == 200

    def test_event_uses_canonical_order(self, engine):
        engine.create_pool(WETH, USDC)
        engine.add_liquidity(WETH, USDC, 100, 200, ALICE)
        (event,) = engine.bus.history(LiquidityAdded)
        # USDC sorts before WETH
        assert (event.amount0, event.amount1) == (200, 100)
        assert event.shares_minted == 300
        assert event.provider == ALICE

    def test_missing_pool(self, engine):
        with pytest.raises(PoolNotFound):
            engine.add_liquidity(WETH, DAI, 1, 1, ALICE)

    @pytest.mark.parametrize("amounts", [(0, 100), (100, 0)])
    def test_zero_amount(self, engine, amounts):
        engine.create_pool(WETH, USDC)
        with pytest.raises(InvalidAmount):
            engine.add_liquidity(WETH, USDC, *amounts, ALICE)

    def test_dust_deposit(self, engine):
        engine.create_pool(WETH, USDC)
        engine.add_liquidity(WETH, USDC, 1, 1, ALICE)
        # Excess USDC is donated, so one share is now worth ~250k USDC
        engine.add_liquidity(WETH, USDC, 1, 10**6, ALICE)
        with pytest.raises(InvalidAmount):
            engine.add_liquidity(WETH, USDC, 1, 1, BOB)

    def test_second_leg_failure_refunds_first(self, engine, custody):
        """No partial deposit: a failing second pull reverts the first."""
        engine.create_pool(WETH, USDC)
        custody.approve(WETH, CAROL, 0)
        usdc_before = custody.balance_of(USDC, CAROL)

        with pytest.raises(TransferError, match="allowance"):
            engine.add_liquidity(WETH, USDC, 100, 200, CAROL)

        assert custody.balance_of(USDC, CAROL) == usdc_before
        assert custody.custody_balance(USDC) == 0
        assert engine.get_pool(WETH, USDC).total_shares == 0
        assert engine.bus.history(LiquidityAdded) == []


class TestRemoveLiquidity:
    """Tests for LiquidityCoordinator.remove_liquidity."""

    @pytest.fixture
    def pooled(self, engine):
        engine.create_pool(WETH, USDC)
        engine.add_liquidity(WETH, USDC, 100, 200, ALICE)
        return engine

    def test_partial_withdrawal_caller_order(self, pooled):
        assert pooled.remove_liquidity(WETH, USDC, 150, ALICE) == (50, 100)
        assert pooled.remove_liquidity(USDC, WETH, 150, ALICE) == (100, 50)
        assert pooled.get_liquidity(WETH, USDC, ALICE) == 0

    def test_full_withdrawal_empties_pool(self, pooled, custody):
        pooled.remove_liquidity(WETH, USDC, 300, ALICE)
        pool = pooled.get_pool(WETH, USDC)
        assert (pool.reserve0, pool.reserve1, pool.total_shares) == (0, 0, 0)
        assert custody.custody_balance(WETH) == 0
        # Pool records are never removed
        assert pooled.pool_exists(WETH, USDC)

    def test_event(self, pooled):
        pooled.remove_liquidity(WETH, USDC, 30, ALICE)
        (event,) = pooled.bus.history(LiquidityRemoved)
        assert (event.amount0, event.amount1, event.shares_burned) == (20, 10, 30)

    def test_more_than_held(self, pooled):
        with pytest.raises(InsufficientShares, match="Insufficient liquidity"):
            pooled.remove_liquidity(WETH, USDC, 301, ALICE)

    def test_non_provider(self, pooled):
        with pytest.raises(InsufficientShares):
            pooled.remove_liquidity(WETH, USDC, 1, BOB)

    def test_zero_shares(self, pooled):
        with pytest.raises(InvalidAmount):
            pooled.remove_liquidity(WETH, USDC, 0, ALICE)

    def test_withdrawal_of_nothing(self, engine):
        engine.create_pool(WETH, USDC)
        engine.add_liquidity(WETH, USDC, 1, 1, ALICE)
        engine.add_liquidity(WETH, USDC, 1, 1, BOB)
        engine.add_liquidity(WETH, USDC, 1, 1, CAROL)
        # 3 of each token against 6 shares: 1 share is worth 0.5 of each
        with pytest.raises(InvalidAmount, match="withdraw nothing"):
            engine.remove_liquidity(WETH, USDC, 1, ALICE)

    def test_payout_failure_rolls_back(self, pooled, custody):
        before = pooled.get_pool(WETH, USDC)

        def hook(direction, token, account, amount):
            if direction == "out" and token == WETH:
                raise TransferError("WETH transfer reverted")

        custody.on_transfer = hook
        with pytest.raises(TransferError):
            pooled.remove_liquidity(WETH, USDC, 150, ALICE)

        assert pooled.get_pool(WETH, USDC) == before
        assert custody.custody_balance(USDC) == before.reserve0
        assert custody.custody_balance(WETH) == before.reserve1
        assert pooled.bus.history(LiquidityRemoved) == []

    def test_payout_failure_with_exact_approval(self):
        """Rollback of a paid-out leg works after the deposit used up the allowance."""
        custody = InMemoryCustody()
        custody.mint(WETH, ALICE, 100)
        custody.mint(USDC, ALICE, 200)
        custody.approve(WETH, ALICE, 100)
        custody.approve(USDC, ALICE, 200)
        engine = PoolEngine(custody)
        engine.create_pool(WETH, USDC)
        engine.add_liquidity(WETH, USDC, 100, 200, ALICE)
        before = engine.get_pool(WETH, USDC)

        def hook(direction, token, account, amount):
            if direction == "out" and token == WETH:
                raise TransferError("WETH transfer reverted")

        custody.on_transfer = hook
        with pytest.raises(TransferError):
            engine.remove_liquidity(WETH, USDC, 150, ALICE)

        assert engine.get_pool(WETH, USDC) == before
        assert custody.custody_balance(USDC) == 200
        assert custody.custody_balance(WETH) == 100
        assert custody.balance_of(USDC, ALICE) == 0
        assert custody.balance_of(WETH, ALICE) == 0
        assert engine.get_liquidity(WETH, USDC, ALICE) == 300


def test_get_liquidity_unknown_provider(seeded_engine):
    assert seeded_engine.get_liquidity(WETH, USDC, BOB) == 0


def test_get_liquidity_missing_pool(engine):
    with pytest.raises(PoolNotFound):
        engine.get_liquidity(WETH, USDC, ALICE)


def test_scaled_deposit_round_trip(engine, custody):
    engine.create_pool(WETH, USDC)
    engine.add_liquidity(WETH, USDC, 1000 * ETHER, 2000 * ETHER, ALICE)
    engine.add_liquidity(WETH, USDC, 10 * ETHER, 20 * ETHER, BOB)
    weth_before = custody.balance_of(WETH, BOB)

    shares = engine.get_liquidity(WETH, USDC, BOB)
    amount_weth, amount_usdc = engine.remove_liquidity(WETH, USDC, shares, BOB)

    assert (amount_weth, amount_usdc) == (10 * ETHER, 20 * ETHER)
    assert custody.balance_of(WETH, BOB) == weth_before + 10 * ETHER
