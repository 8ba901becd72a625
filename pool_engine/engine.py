"""Pool engine facade.

PoolEngine wires the registry, the coordinators, the reentrancy guard and
the event bus together and exposes the public surface: pool creation,
liquidity, swaps, and read-only queries.
"""

from __future__ import annotations

import structlog

from pool_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from pool_engine.custody import InMemoryCustody, TokenCustody
from pool_engine.events import EventBus
from pool_engine.guard import ReentrancyGuard
from pool_engine.liquidity import LiquidityCoordinator
from pool_engine.models.events import PoolCreated
from pool_engine.models.types import short
from pool_engine.pairs import pool_key
from pool_engine.pools.ledger import PoolSnapshot
from pool_engine.pools.registry import PoolRegistry
from pool_engine.pricing import quote_input, quote_output, spot_price
from pool_engine.swap import SwapCoordinator

logger = structlog.get_logger()


class PoolEngine:
    """Registry of constant product pools with swap and liquidity operations.

    Mutating operations (create_pool, add_liquidity, remove_liquidity, swap)
    run one at a time engine-wide. Queries take the same guard briefly, so
    they always see a committed state.

    Args:
        custody: Token transfer capability. Defaults to an empty InMemoryCustody.
        config: Engine configuration. Defaults to DEFAULT_ENGINE_CONFIG.
        bus: Event bus. Defaults to a fresh EventBus.
    """

    def __init__(
        self,
        custody: TokenCustody | None = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        bus: EventBus | None = None,
    ) -> None:
        self.custody = custody if custody is not None else InMemoryCustody()
        self.config = config
        self.bus = bus if bus is not None else EventBus()
        self.registry = PoolRegistry()
        self.guard = ReentrancyGuard()
        self.swaps = SwapCoordinator(self.registry, self.custody, self.bus, self.guard, config)
        self.liquidity = LiquidityCoordinator(
            self.registry, self.custody, self.bus, self.guard, config
        )

    # --- Mutations ---

    def create_pool(self, token_a: str, token_b: str) -> str:
        """Register an empty pool for a pair.

        Returns:
            The new pool id

        Raises:
            IdenticalTokens: If token_a == token_b
            InvalidToken: If either token is malformed or the zero address
            PoolAlreadyExists: If the pair already has a pool
        """
        with self.guard.hold("create_pool"):
            pool = self.registry.create_pool(token_a, token_b)
            event = PoolCreated(pool_id=pool.pool_id, token0=pool.token0, token1=pool.token1)

        logger.info(
            "pool_created",
            pool=short(pool.pool_id),
            token0=short(pool.token0),
            token1=short(pool.token1),
            pool_count=len(self.registry),
        )
        self.bus.publish(event)
        return event.pool_id

    def add_liquidity(
        self, token_a: str, token_b: str, amount_a: int, amount_b: int, caller: str
    ) -> int:
        """Deposit both tokens; see LiquidityCoordinator.add_liquidity."""
        return self.liquidity.add_liquidity(token_a, token_b, amount_a, amount_b, caller)

    def remove_liquidity(
        self, token_a: str, token_b: str, shares: int, caller: str
    ) -> tuple[int, int]:
        """Burn shares; see LiquidityCoordinator.remove_liquidity."""
        return self.liquidity.remove_liquidity(token_a, token_b, shares, caller)

    def swap(self, token_in: str, token_out: str, amount_in: int, caller: str) -> int:
        """Exact-input swap; see SwapCoordinator.swap."""
        return self.swaps.swap(token_in, token_out, amount_in, caller)

    # --- Queries ---

    @staticmethod
    def get_pool_id(token_a: str, token_b: str) -> str:
        """Order-independent pool id for a pair, whether or not it exists."""
        return pool_key(token_a, token_b)

    def pool_exists(self, token_a: str, token_b: str) -> bool:
        with self.guard.hold("pool_exists"):
            return self.registry.pool_exists(token_a, token_b)

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Reserves as (reserve_a, reserve_b) in the caller's order.

        Raises:
            PoolNotFound: If no pool exists for the pair
        """
        with self.guard.hold("get_reserves"):
            return self.registry.get_reserves(token_a, token_b)

    def get_price(self, token_a: str, token_b: str) -> int:
        """Spot price of token_a in token_b, scaled by config.price_scale.

        Raises:
            PoolNotFound: If no pool exists or it holds no token_a
        """
        reserve_a, reserve_b = self.get_reserves(token_a, token_b)
        return spot_price(reserve_a, reserve_b, self.config.price_scale)

    def get_amount_out(self, token_in: str, token_out: str, amount_in: int) -> int:
        """Quote the output of swapping amount_in of token_in.

        Raises:
            PoolNotFound: If no pool exists for the pair
            InvalidAmount: If amount_in is not positive
            InsufficientLiquidity: If the pool is empty
        """
        reserve_in, reserve_out = self.get_reserves(token_in, token_out)
        return quote_output(reserve_in, reserve_out, amount_in, self.config.fee_bps)

    def get_amount_in(self, token_in: str, token_out: str, amount_out: int) -> int:
        """Quote the input needed to receive at least amount_out of token_out.

        Raises:
            PoolNotFound: If no pool exists for the pair
            InvalidAmount: If amount_out is not positive
            InsufficientLiquidity: If amount_out would drain the reserve
        """
        reserve_in, reserve_out = self.get_reserves(token_in, token_out)
        return quote_input(reserve_in, reserve_out, amount_out, self.config.fee_bps)

    def get_liquidity(self, token_a: str, token_b: str, provider: str) -> int:
        """Shares held by provider, 0 if none; see LiquidityCoordinator."""
        return self.liquidity.get_liquidity(token_a, token_b, provider)

    def get_pool(self, token_a: str, token_b: str) -> PoolSnapshot:
        """Snapshot of the pair's pool.

        Raises:
            PoolNotFound: If no pool exists for the pair
        """
        with self.guard.hold("get_pool"):
            return self.registry.get_pool(token_a, token_b).snapshot()

    def snapshot(self) -> list[PoolSnapshot]:
        """Consistent snapshot of every pool, in creation order."""
        with self.guard.hold("snapshot"):
            return [pool.snapshot() for pool in self.registry.pools()]


_default_engine: PoolEngine | None = None


def get_default_engine() -> PoolEngine:
    """Return the process-wide engine, creating it from the environment on first use.

    Configuration is read by EngineConfig.from_env(); custody is an
    InMemoryCustody, suitable for local tooling and the demo API.
    """
    global _default_engine
    if _default_engine is None:
        config = EngineConfig.from_env()
        logger.info(
            "default_engine_created",
            fee_bps=config.fee_bps,
            price_scale=config.price_scale,
            bootstrap=config.bootstrap.value,
        )
        _default_engine = PoolEngine(config=config)
    return _default_engine
