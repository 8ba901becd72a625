"""Pydantic request/response schemas for the query API.

Amounts cross the wire as uint256 decimal strings.
"""

from pydantic import BaseModel, ConfigDict, Field

from pool_engine.models.types import Address, PoolId, Uint256


class ApiModel(BaseModel):
    """Base for API schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True)


class CreatePoolRequest(ApiModel):
    """Request body for creating a pool."""

    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")


class PoolResponse(ApiModel):
    """A pool as seen from the caller's token order."""

    pool_id: PoolId = Field(alias="poolId")
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")


class PoolSummary(ApiModel):
    """A pool in canonical token order."""

    pool_id: PoolId = Field(alias="poolId")
    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256
    total_shares: Uint256 = Field(alias="totalShares")


class PriceResponse(ApiModel):
    """Spot price of base in quote, as a fixed-point integer."""

    base: Address
    quote: Address
    price: Uint256
    scale: Uint256


class QuoteResponse(ApiModel):
    """Exact-input swap quote."""

    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")


class LiquidityResponse(ApiModel):
    """Shares held by a provider."""

    pool_id: PoolId = Field(alias="poolId")
    provider: Address
    shares: Uint256


class ErrorResponse(ApiModel):
    """Error body returned for engine errors."""

    code: str
    detail: str
