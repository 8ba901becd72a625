"""Per-pool reserve and share ledger.

A Pool record owns the two reserves, the outstanding share supply and the
provider -> shares map. Records live only inside the PoolRegistry and are
keyed by pool id, so there are no references between pools.

Mutations go through the credit/debit helpers, which keep two invariants:
- sum(shares.values()) == total_shares
- reserve0 == reserve1 == 0 exactly when total_shares == 0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from pool_engine.errors import InsufficientShares
from pool_engine.safe_int import S


@dataclass(frozen=True)
class PoolSnapshot:
    """Immutable point-in-time copy of a pool's state."""

    pool_id: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    total_shares: int
    shares: Mapping[str, int]

    @property
    def k(self) -> int:
        """Constant product reserve0 * reserve1."""
        return self.reserve0 * self.reserve1


@dataclass
class Pool:
    """Mutable ledger for a single token pair."""

    pool_id: str
    token0: str
    token1: str
    reserve0: int = 0
    reserve1: int = 0
    total_shares: int = 0
    shares: dict[str, int] = field(default_factory=dict)

    def reserves_for(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if token_in == self.token0:
            return self.reserve0, self.reserve1
        elif token_in == self.token1:
            return self.reserve1, self.reserve0
        else:
            raise ValueError(f"Token {token_in} not in pool")

    def shares_of(self, provider: str) -> int:
        """Shares held by provider, 0 if none recorded."""
        return self.shares.get(provider, 0)

    def apply_swap(self, token_in: str, amount_in: int, amount_out: int) -> None:
        """Credit amount_in to the input side and debit amount_out from the other."""
        if token_in == self.token0:
            self.reserve0 = (S(self.reserve0) + S(amount_in)).to_uint256()
            self.reserve1 = (S(self.reserve1) - S(amount_out)).to_uint256()
        elif token_in == self.token1:
            self.reserve1 = (S(self.reserve1) + S(amount_in)).to_uint256()
            self.reserve0 = (S(self.reserve0) - S(amount_out)).to_uint256()
        else:
            raise ValueError(f"Token {token_in} not in pool")

    def credit(self, provider: str, amount0: int, amount1: int, shares: int) -> None:
        """Add a deposit to the reserves and mint shares to provider."""
        self.reserve0 = (S(self.reserve0) + S(amount0)).to_uint256()
        self.reserve1 = (S(self.reserve1) + S(amount1)).to_uint256()
        self.total_shares = (S(self.total_shares) + S(shares)).to_uint256()
        self.shares[provider] = (S(self.shares_of(provider)) + S(shares)).to_uint256()

    def debit(self, provider: str, amount0: int, amount1: int, shares: int) -> None:
        """Remove a withdrawal from the reserves and burn provider's shares.

        Raises:
            InsufficientShares: If provider holds fewer than shares
        """
        held = self.shares_of(provider)
        if shares > held:
            raise InsufficientShares(f"Provider holds {held} shares, cannot burn {shares}")

        self.reserve0 = (S(self.reserve0) - S(amount0)).to_uint256()
        self.reserve1 = (S(self.reserve1) - S(amount1)).to_uint256()
        self.total_shares = (S(self.total_shares) - S(shares)).to_uint256()
        remaining = held - shares
        if remaining:
            self.shares[provider] = remaining
        else:
            del self.shares[provider]

    def snapshot(self) -> PoolSnapshot:
        """Copy the current state into an immutable snapshot."""
        return PoolSnapshot(
            pool_id=self.pool_id,
            token0=self.token0,
            token1=self.token1,
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            total_shares=self.total_shares,
            shares=MappingProxyType(dict(self.shares)),
        )

    def restore(self, snapshot: PoolSnapshot) -> None:
        """Roll this pool back to a snapshot taken from it."""
        if snapshot.pool_id != self.pool_id:
            raise ValueError(f"Snapshot of {snapshot.pool_id} cannot restore {self.pool_id}")
        self.reserve0 = snapshot.reserve0
        self.reserve1 = snapshot.reserve1
        self.total_shares = snapshot.total_shares
        self.shares = dict(snapshot.shares)
