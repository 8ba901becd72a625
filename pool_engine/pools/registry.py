"""Pool registry: the single owner of all pool ledgers.

Pools are stored in an arena keyed by pool id (see pool_engine.pairs).
There is exactly one pool per unordered token pair, and pools are never
removed once created, even when drained back to zero.

The registry does no locking of its own; PoolEngine serializes access.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from pool_engine.errors import InvalidToken, PoolAlreadyExists, PoolEngineError, PoolNotFound
from pool_engine.models.types import is_zero_address, short
from pool_engine.pairs import OrderedPair, order_pair, pool_key
from pool_engine.pools.ledger import Pool

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of constant product pools, one per unordered pair."""

    def __init__(self) -> None:
        self._pools: dict[str, Pool] = {}

    def __len__(self) -> int:
        return len(self._pools)

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools

    def pools(self) -> Iterator[Pool]:
        """Iterate pools in creation order."""
        return iter(list(self._pools.values()))

    def create_pool(self, token_a: str, token_b: str) -> Pool:
        """Register an empty pool for a pair.

        Args:
            token_a: First token address (any case, any order)
            token_b: Second token address

        Returns:
            The new Pool with zero reserves and zero shares

        Raises:
            IdenticalTokens: If token_a == token_b
            InvalidToken: If either token is malformed or the zero address
            PoolAlreadyExists: If a pool for this pair is already registered
        """
        pair = order_pair(token_a, token_b)
        if is_zero_address(pair.token0) or is_zero_address(pair.token1):
            raise InvalidToken("Invalid token address: zero address")

        pool_id = pool_key(pair.token0, pair.token1)
        if pool_id in self._pools:
            raise PoolAlreadyExists(f"Pool already exists: {pool_id}")

        pool = Pool(pool_id=pool_id, token0=pair.token0, token1=pair.token1)
        self._pools[pool_id] = pool
        logger.debug(
            "pool_registered",
            pool=short(pool_id),
            token0=short(pair.token0),
            token1=short(pair.token1),
        )
        return pool

    def lookup(self, token_a: str, token_b: str) -> tuple[Pool, OrderedPair]:
        """Get the pool for a pair together with the caller's orientation.

        Raises:
            PoolNotFound: If no pool is registered for this pair
        """
        pair = order_pair(token_a, token_b)
        pool = self._pools.get(pool_key(pair.token0, pair.token1))
        if pool is None:
            raise PoolNotFound(
                f"Pool does not exist: {pair.token0} / {pair.token1}"
            )
        return pool, pair

    def get_pool(self, token_a: str, token_b: str) -> Pool:
        """Get the pool for a pair (order independent).

        Raises:
            PoolNotFound: If no pool is registered for this pair
        """
        pool, _ = self.lookup(token_a, token_b)
        return pool

    def pool_exists(self, token_a: str, token_b: str) -> bool:
        """Check whether a pool is registered for a pair. Never raises."""
        try:
            self.lookup(token_a, token_b)
        except PoolEngineError:
            return False
        return True

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Get reserves as (reserve_a, reserve_b) in the caller's order.

        Raises:
            PoolNotFound: If no pool is registered for this pair
        """
        pool, pair = self.lookup(token_a, token_b)
        return pair.orient(pool.reserve0, pool.reserve1)
