"""Tests for event and API schema models."""

import pytest
from pydantic import ValidationError

from pool_engine.models.api import PoolResponse
from pool_engine.models.events import EVENT_TYPES, LiquidityAdded, PoolCreated, Swapped
from pool_engine.pairs import pool_key
from tests.helpers import ALICE, USDC, WETH

POOL_ID = pool_key(WETH, USDC)


class TestEventModels:
    """Tests for engine event models."""

    def test_wire_names(self):
        event = Swapped(
            pool_id=POOL_ID, caller=ALICE, token_in=WETH, amount_in=1000, amount_out=1993
        )
        dumped = event.model_dump(by_alias=True)
        assert dumped == {
            "kind": "Swapped",
            "poolKey": POOL_ID,
            "caller": ALICE,
            "tokenIn": WETH,
            "amountIn": 1000,
            "amountOut": 1993,
        }

    def test_populate_by_alias(self):
        event = LiquidityAdded.model_validate(
            {
                "poolKey": POOL_ID,
                "provider": ALICE,
                "amount0": 1,
                "amount1": 2,
                "sharesMinted": 3,
            }
        )
        assert event.shares_minted == 3
        assert event.kind == "LiquidityAdded"

    def test_frozen(self):
        event = PoolCreated(pool_id=POOL_ID, token0=USDC, token1=WETH)
        with pytest.raises(ValidationError):
            event.token0 = WETH  # type: ignore[misc]

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            Swapped(pool_id=POOL_ID, caller=ALICE, token_in=WETH, amount_in=-1, amount_out=0)

    def test_bad_pool_id_rejected(self):
        with pytest.raises(ValidationError):
            PoolCreated(pool_id="0x1234", token0=USDC, token1=WETH)

    def test_event_types_registry(self):
        for kind, event_type in EVENT_TYPES.items():
            assert event_type.model_fields["kind"].default == kind


class TestApiModels:
    """Tests for API schemas."""

    def test_amounts_serialize_as_strings(self):
        response = PoolResponse(
            pool_id=POOL_ID, token_a=WETH, token_b=USDC, reserve_a=10**30, reserve_b=0
        )
        dumped = response.model_dump(by_alias=True)
        assert dumped["reserveA"] == str(10**30)
        assert dumped["reserveB"] == "0"

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            PoolResponse(pool_id=POOL_ID, token_a=WETH, token_b=USDC, reserve_a=-1, reserve_b=0)
