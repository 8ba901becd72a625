"""Pool ledgers and the registry that owns them."""

from pool_engine.pools.ledger import Pool, PoolSnapshot
from pool_engine.pools.registry import PoolRegistry

__all__ = ["Pool", "PoolSnapshot", "PoolRegistry"]
