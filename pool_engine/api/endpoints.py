"""API endpoints for the pool engine query surface."""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query

from pool_engine.engine import PoolEngine, get_default_engine
from pool_engine.models.api import (
    CreatePoolRequest,
    LiquidityResponse,
    PoolResponse,
    PoolSummary,
    PriceResponse,
    QuoteResponse,
)
from pool_engine.models.events import EVENT_TYPES
from pool_engine.models.types import normalize_address

logger = structlog.get_logger()

router = APIRouter()


def get_engine() -> PoolEngine:
    """Dependency provider for the engine instance.

    Override this in tests to inject a prepared engine:
        app.dependency_overrides[get_engine] = lambda: engine
    """
    return get_default_engine()


@router.get("/pools")
async def list_pools(engine: PoolEngine = Depends(get_engine)) -> list[PoolSummary]:
    """All pools in creation order, canonical token order."""
    return [
        PoolSummary(
            pool_id=snap.pool_id,
            token0=snap.token0,
            token1=snap.token1,
            reserve0=snap.reserve0,
            reserve1=snap.reserve1,
            total_shares=snap.total_shares,
        )
        for snap in engine.snapshot()
    ]


@router.post("/pools", status_code=201)
async def create_pool(
    request: CreatePoolRequest,
    engine: PoolEngine = Depends(get_engine),
) -> PoolResponse:
    """Register an empty pool for a pair."""
    pool_id = engine.create_pool(request.token_a, request.token_b)
    logger.info("api_pool_created", pool=pool_id[-8:])
    return PoolResponse(
        pool_id=pool_id,
        token_a=normalize_address(request.token_a),
        token_b=normalize_address(request.token_b),
        reserve_a=0,
        reserve_b=0,
    )


@router.get("/pools/{token_a}/{token_b}")
async def get_pool(
    token_a: str,
    token_b: str,
    engine: PoolEngine = Depends(get_engine),
) -> PoolResponse:
    """Pool id and reserves in the caller's token order."""
    reserve_a, reserve_b = engine.get_reserves(token_a, token_b)
    return PoolResponse(
        pool_id=engine.get_pool_id(token_a, token_b),
        token_a=normalize_address(token_a),
        token_b=normalize_address(token_b),
        reserve_a=reserve_a,
        reserve_b=reserve_b,
    )


@router.get("/pools/{token_a}/{token_b}/price")
async def get_price(
    token_a: str,
    token_b: str,
    engine: PoolEngine = Depends(get_engine),
) -> PriceResponse:
    """Spot price of token_a denominated in token_b."""
    price = engine.get_price(token_a, token_b)
    return PriceResponse(
        base=normalize_address(token_a),
        quote=normalize_address(token_b),
        price=price,
        scale=engine.config.price_scale,
    )


@router.get("/pools/{token_in}/{token_out}/amount-out")
async def get_amount_out(
    token_in: str,
    token_out: str,
    amount_in: str = Query(alias="amountIn", pattern=r"^[0-9]+$"),
    engine: PoolEngine = Depends(get_engine),
) -> QuoteResponse:
    """Quote an exact-input swap of amountIn token_in."""
    amount_out = engine.get_amount_out(token_in, token_out, int(amount_in))
    return QuoteResponse(
        token_in=normalize_address(token_in),
        token_out=normalize_address(token_out),
        amount_in=amount_in,
        amount_out=amount_out,
    )


@router.get("/pools/{token_a}/{token_b}/liquidity/{provider}")
async def get_liquidity(
    token_a: str,
    token_b: str,
    provider: str,
    engine: PoolEngine = Depends(get_engine),
) -> LiquidityResponse:
    """Shares held by provider in the pair's pool."""
    shares = engine.get_liquidity(token_a, token_b, provider)
    return LiquidityResponse(
        pool_id=engine.get_pool_id(token_a, token_b),
        provider=normalize_address(provider, validate=True),
        shares=shares,
    )


@router.get("/events")
async def list_events(
    kind: str | None = Query(default=None),
    engine: PoolEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """Committed events, oldest first, optionally filtered by kind.

    Integer amounts are rendered as decimal strings.
    """
    event_type = None
    if kind is not None:
        event_type = EVENT_TYPES.get(kind)
        if event_type is None:
            logger.warning("unknown_event_kind", kind=kind, valid_kinds=list(EVENT_TYPES))
            return []

    return [
        {
            key: str(value) if isinstance(value, int) else value
            for key, value in event.model_dump(by_alias=True).items()
        }
        for event in engine.bus.history(event_type)
    ]
