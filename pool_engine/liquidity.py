"""Liquidity coordination: deposits, withdrawals and share queries."""

from __future__ import annotations

import structlog

from pool_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from pool_engine.custody import TokenCustody
from pool_engine.errors import InsufficientShares, InvalidAmount
from pool_engine.events import EventBus
from pool_engine.guard import ReentrancyGuard
from pool_engine.models.events import LiquidityAdded, LiquidityRemoved
from pool_engine.models.types import normalize_address, short
from pool_engine.pools.registry import PoolRegistry
from pool_engine.pricing import amounts_for_withdrawal, shares_for_deposit, validate_amount
from pool_engine.settlement import Settlement

logger = structlog.get_logger()


class LiquidityCoordinator:
    """Mints and burns pool shares against token deposits and withdrawals.

    Both operations are transactional: custody legs and ledger updates
    either all commit, or the pool is restored from a snapshot and any
    completed legs are reversed before the error propagates.

    Args:
        registry: Pool registry shared with the swap coordinator
        custody: Token transfer capability
        bus: Event bus for LiquidityAdded / LiquidityRemoved events
        guard: Engine-wide reentrancy guard
        config: Engine configuration (bootstrap policy)
    """

    def __init__(
        self,
        registry: PoolRegistry,
        custody: TokenCustody,
        bus: EventBus,
        guard: ReentrancyGuard,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        self.registry = registry
        self.custody = custody
        self.bus = bus
        self.guard = guard
        self.config = config

    def add_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount_a: int,
        amount_b: int,
        caller: str,
    ) -> int:
        """Deposit amount_a of token_a and amount_b of token_b.

        Both amounts are taken in full. On a pool that already has shares,
        shares are minted for the side that is smaller relative to the
        current reserves; the excess of the other side stays in the pool.

        Returns:
            Shares minted to caller

        Raises:
            PoolNotFound: If no pool exists for the pair
            InvalidAmount: If either amount is not positive or nothing would be minted
            TransferError: If either deposit leg fails (no partial deposit)
            ReentrancyRejected: If called from inside an engine operation
        """
        with self.guard.hold("add_liquidity"):
            pool, pair = self.registry.lookup(token_a, token_b)
            account = normalize_address(caller, validate=True)
            amount0, amount1 = pair.orient(amount_a, amount_b)

            shares = shares_for_deposit(
                amount0,
                amount1,
                pool.reserve0,
                pool.reserve1,
                pool.total_shares,
                self.config.bootstrap,
            )

            snapshot = pool.snapshot()
            settlement = Settlement(self.custody, "add_liquidity")
            try:
                settlement.pull(pool.token0, account, amount0)
                settlement.pull(pool.token1, account, amount1)
                pool.credit(account, amount0, amount1, shares)
            except Exception as err:
                pool.restore(snapshot)
                settlement.unwind()
                logger.warning(
                    "add_liquidity_aborted",
                    pool=short(pool.pool_id),
                    provider=short(account),
                    error=str(err),
                )
                raise

            logger.info(
                "liquidity_added",
                pool=short(pool.pool_id),
                provider=short(account),
                amount0=amount0,
                amount1=amount1,
                shares_minted=shares,
                total_shares=pool.total_shares,
            )
            event = LiquidityAdded(
                pool_id=pool.pool_id,
                provider=account,
                amount0=amount0,
                amount1=amount1,
                shares_minted=shares,
            )

        self.bus.publish(event)
        return shares

    def remove_liquidity(
        self,
        token_a: str,
        token_b: str,
        shares: int,
        caller: str,
    ) -> tuple[int, int]:
        """Burn shares and pay out the proportional reserves.

        Returns:
            (amount_a, amount_b) paid to caller, in the caller's token order

        Raises:
            PoolNotFound: If no pool exists for the pair
            InvalidAmount: If shares is not positive or the withdrawal is empty
            InsufficientShares: If caller holds fewer than shares
            TransferError: If a payout leg fails (ledger is rolled back)
            ReentrancyRejected: If called from inside an engine operation
        """
        with self.guard.hold("remove_liquidity"):
            pool, pair = self.registry.lookup(token_a, token_b)
            validate_amount("shares", shares)
            account = normalize_address(caller, validate=True)

            held = pool.shares_of(account)
            if shares > held:
                logger.warning(
                    "remove_liquidity_rejected",
                    pool=short(pool.pool_id),
                    provider=short(account),
                    requested=shares,
                    held=held,
                )
                raise InsufficientShares(f"Insufficient liquidity: holds {held}, requested {shares}")

            amount0, amount1 = amounts_for_withdrawal(
                shares, pool.total_shares, pool.reserve0, pool.reserve1
            )
            if amount0 == 0 and amount1 == 0:
                raise InvalidAmount(f"Burning {shares} shares would withdraw nothing")

            snapshot = pool.snapshot()
            settlement = Settlement(self.custody, "remove_liquidity")
            try:
                pool.debit(account, amount0, amount1, shares)
                settlement.pay(pool.token0, account, amount0)
                settlement.pay(pool.token1, account, amount1)
            except Exception as err:
                pool.restore(snapshot)
                settlement.unwind()
                logger.warning(
                    "remove_liquidity_aborted",
                    pool=short(pool.pool_id),
                    provider=short(account),
                    error=str(err),
                )
                raise

            logger.info(
                "liquidity_removed",
                pool=short(pool.pool_id),
                provider=short(account),
                amount0=amount0,
                amount1=amount1,
                shares_burned=shares,
                total_shares=pool.total_shares,
            )
            event = LiquidityRemoved(
                pool_id=pool.pool_id,
                provider=account,
                amount0=amount0,
                amount1=amount1,
                shares_burned=shares,
            )

        self.bus.publish(event)
        return pair.orient(amount0, amount1)

    def get_liquidity(self, token_a: str, token_b: str, provider: str) -> int:
        """Shares held by provider in the pair's pool, 0 if none.

        Raises:
            PoolNotFound: If no pool exists for the pair
        """
        with self.guard.hold("get_liquidity"):
            pool = self.registry.get_pool(token_a, token_b)
            return pool.shares_of(normalize_address(provider))
