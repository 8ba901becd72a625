"""Pydantic models for engine events and shared types."""

from pool_engine.models.events import (
    EVENT_TYPES,
    AnyEvent,
    EngineEvent,
    LiquidityAdded,
    LiquidityRemoved,
    PoolCreated,
    Swapped,
)
from pool_engine.models.types import (
    Address,
    Amount,
    PoolId,
    Uint256,
    is_valid_address,
    is_zero_address,
    normalize_address,
)

__all__ = [
    # Events
    "EngineEvent",
    "PoolCreated",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swapped",
    "AnyEvent",
    "EVENT_TYPES",
    # Types
    "Address",
    "Amount",
    "PoolId",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "is_zero_address",
]
