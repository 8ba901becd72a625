"""Swap coordination.

A swap moves through Idle -> Validating -> Pricing -> Transferring -> Settled
while holding the engine's reentrancy guard. Reserves are only written in
Transferring, after the inbound leg succeeds, and are restored from a
snapshot if the outbound leg fails. The Swapped event is published once
the guard is released.
"""

from __future__ import annotations

from enum import Enum

import structlog

from pool_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from pool_engine.constants import UINT256_MAX
from pool_engine.custody import TokenCustody
from pool_engine.errors import InsufficientLiquidity, InvalidAmount
from pool_engine.events import EventBus
from pool_engine.guard import ReentrancyGuard
from pool_engine.models.events import Swapped
from pool_engine.models.types import normalize_address, short
from pool_engine.pools.registry import PoolRegistry
from pool_engine.pricing import quote_output, validate_amount
from pool_engine.settlement import Settlement

logger = structlog.get_logger()


class SwapPhase(str, Enum):
    """Lifecycle of a single swap."""

    IDLE = "idle"
    VALIDATING = "validating"
    PRICING = "pricing"
    TRANSFERRING = "transferring"
    SETTLED = "settled"


class SwapCoordinator:
    """Executes exact-input swaps against registry pools.

    Args:
        registry: Pool registry shared with the liquidity coordinator
        custody: Token transfer capability
        bus: Event bus for Swapped events
        guard: Engine-wide reentrancy guard
        config: Engine configuration (fee)
    """

    def __init__(
        self,
        registry: PoolRegistry,
        custody: TokenCustody,
        bus: EventBus,
        guard: ReentrancyGuard,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        self.registry = registry
        self.custody = custody
        self.bus = bus
        self.guard = guard
        self.config = config
        self.phase = SwapPhase.IDLE

    def _enter(self, phase: SwapPhase) -> None:
        self.phase = phase
        logger.debug("swap_phase", phase=phase.value)

    def swap(self, token_in: str, token_out: str, amount_in: int, caller: str) -> int:
        """Swap exactly amount_in of token_in for token_out.

        Args:
            token_in: Token the caller pays
            token_out: Token the caller receives
            amount_in: Exact input amount
            caller: Account paying token_in and receiving token_out

        Returns:
            Amount of token_out paid to caller

        Raises:
            PoolNotFound: If no pool exists for the pair
            InvalidAmount: If amount_in is not positive or yields no output
            InsufficientLiquidity: If the output would exhaust the reserve
            TransferError: If either transfer leg fails
            ReentrancyRejected: If called from inside an engine operation
        """
        with self.guard.hold("swap"):
            try:
                event = self._swap(token_in, token_out, amount_in, caller)
            finally:
                self.phase = SwapPhase.IDLE

        self.bus.publish(event)
        return event.amount_out

    def _swap(self, token_in: str, token_out: str, amount_in: int, caller: str) -> Swapped:
        self._enter(SwapPhase.VALIDATING)
        pool, pair = self.registry.lookup(token_in, token_out)
        validate_amount("amount_in", amount_in)
        account = normalize_address(caller, validate=True)

        self._enter(SwapPhase.PRICING)
        token_in_norm, token_out_norm = pair.caller_order
        reserve_in, reserve_out = pool.reserves_for(token_in_norm)
        amount_out = quote_output(reserve_in, reserve_out, amount_in, self.config.fee_bps)
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Swap output {amount_out} would exhaust reserve {reserve_out}"
            )
        if amount_out == 0:
            raise InvalidAmount(f"Input {amount_in} is too small to produce any output")
        if reserve_in + amount_in > UINT256_MAX:
            raise InvalidAmount(f"Input {amount_in} would overflow reserve {reserve_in}")

        self._enter(SwapPhase.TRANSFERRING)
        snapshot = pool.snapshot()
        settlement = Settlement(self.custody, "swap")
        try:
            settlement.pull(token_in_norm, account, amount_in)
            pool.apply_swap(token_in_norm, amount_in, amount_out)
            settlement.pay(token_out_norm, account, amount_out)
        except Exception as err:
            pool.restore(snapshot)
            settlement.unwind()
            logger.warning(
                "swap_aborted",
                pool=short(pool.pool_id),
                caller=short(account),
                amount_in=amount_in,
                error=str(err),
            )
            raise

        self._enter(SwapPhase.SETTLED)
        logger.info(
            "swap_settled",
            pool=short(pool.pool_id),
            caller=short(account),
            token_in=short(token_in_norm),
            amount_in=amount_in,
            amount_out=amount_out,
            reserve0=pool.reserve0,
            reserve1=pool.reserve1,
        )
        return Swapped(
            pool_id=pool.pool_id,
            caller=account,
            token_in=token_in_norm,
            amount_in=amount_in,
            amount_out=amount_out,
        )
