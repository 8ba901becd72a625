"""Domain events emitted by the pool engine.

Events are published only after the operation that produced them has
committed. Field names follow the wire names indexers consume.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pool_engine.models.types import Address, Amount, PoolId


class EngineEvent(BaseModel):
    """Base class for engine events."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str
    pool_id: PoolId = Field(alias="poolKey")


class PoolCreated(EngineEvent):
    """A pool was registered for a token pair."""

    kind: Literal["PoolCreated"] = "PoolCreated"
    token0: Address
    token1: Address


class LiquidityAdded(EngineEvent):
    """A provider deposited both tokens and received shares.

    Amounts are in canonical (token0, token1) order.
    """

    kind: Literal["LiquidityAdded"] = "LiquidityAdded"
    provider: Address
    amount0: Amount
    amount1: Amount
    shares_minted: Amount = Field(alias="sharesMinted")


class LiquidityRemoved(EngineEvent):
    """A provider burned shares and received both tokens.

    Amounts are in canonical (token0, token1) order.
    """

    kind: Literal["LiquidityRemoved"] = "LiquidityRemoved"
    provider: Address
    amount0: Amount
    amount1: Amount
    shares_burned: Amount = Field(alias="sharesBurned")


class Swapped(EngineEvent):
    """A caller exchanged token_in for the pool's other token."""

    kind: Literal["Swapped"] = "Swapped"
    caller: Address
    token_in: Address = Field(alias="tokenIn")
    amount_in: Amount = Field(alias="amountIn")
    amount_out: Amount = Field(alias="amountOut")


AnyEvent = PoolCreated | LiquidityAdded | LiquidityRemoved | Swapped

EVENT_TYPES: dict[str, type[EngineEvent]] = {
    "PoolCreated": PoolCreated,
    "LiquidityAdded": LiquidityAdded,
    "LiquidityRemoved": LiquidityRemoved,
    "Swapped": Swapped,
}
