"""Canonical token pair ordering and pool keys.

A pool is identified by its unordered token pair. Pairs are canonicalized
by sorting the two (lowercased) addresses so that token0 < token1, and the
pool key is keccak256 over the packed ordered pair, the same derivation an
on-chain factory uses for pair salts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from eth_abi.packed import encode_packed
from eth_utils import keccak

from pool_engine.errors import IdenticalTokens, InvalidToken
from pool_engine.models.types import is_valid_address, normalize_address

T = TypeVar("T")


@dataclass(frozen=True)
class OrderedPair:
    """A token pair in canonical order, remembering the caller's order.

    Attributes:
        token0: Lower address of the pair
        token1: Higher address of the pair
        swapped: True if the caller passed (token1, token0)
    """

    token0: str
    token1: str
    swapped: bool

    def orient(self, value0: T, value1: T) -> tuple[T, T]:
        """Re-orient a canonical (value0, value1) pair to the caller's order."""
        if self.swapped:
            return value1, value0
        return value0, value1

    @property
    def caller_order(self) -> tuple[str, str]:
        """The pair as the caller passed it."""
        return self.orient(self.token0, self.token1)


def _checked(token: str) -> str:
    if not isinstance(token, str):
        raise InvalidToken(f"Token must be an address string, got {type(token).__name__}")
    normalized = normalize_address(token)
    if not is_valid_address(normalized):
        raise InvalidToken(f"Invalid token address: {token}")
    return normalized


def order_pair(token_a: str, token_b: str) -> OrderedPair:
    """Canonicalize a pair, keeping track of whether it was reversed.

    Raises:
        InvalidToken: If either token is not a well-formed address
        IdenticalTokens: If both tokens are the same
    """
    a = _checked(token_a)
    b = _checked(token_b)
    if a == b:
        raise IdenticalTokens(f"Identical tokens: {a}")
    if a < b:
        return OrderedPair(token0=a, token1=b, swapped=False)
    return OrderedPair(token0=b, token1=a, swapped=True)


def canonicalize(token_a: str, token_b: str) -> tuple[str, str]:
    """Return the pair as (token0, token1) with token0 < token1."""
    pair = order_pair(token_a, token_b)
    return pair.token0, pair.token1


def pool_key(token_a: str, token_b: str) -> str:
    """Derive the order-independent pool key for a pair.

    Returns:
        0x-prefixed hex keccak256(abi.encodePacked(token0, token1))
    """
    token0, token1 = canonicalize(token_a, token_b)
    packed = encode_packed(
        ["address", "address"],
        [bytes.fromhex(token0[2:]), bytes.fromhex(token1[2:])],
    )
    return "0x" + keccak(packed).hex()


__all__ = ["OrderedPair", "order_pair", "canonicalize", "pool_key"]
