"""Transfer journal for all-or-nothing operations.

A Settlement records every transfer leg completed during one engine
operation. If a later leg (or any other step) fails, ``unwind`` reverses
the completed legs newest-first so the operation leaves no partial
transfer behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from pool_engine.custody import TokenCustody
from pool_engine.errors import PoolEngineError
from pool_engine.models.types import short

logger = structlog.get_logger()


@dataclass(frozen=True)
class TransferLeg:
    """A completed transfer: 'in' pulled from account, 'out' paid to it."""

    direction: str
    token: str
    account: str
    amount: int


@dataclass
class Settlement:
    """Journal of transfer legs for a single operation."""

    custody: TokenCustody
    operation: str
    legs: list[TransferLeg] = field(default_factory=list)

    def pull(self, token: str, sender: str, amount: int) -> None:
        """Move amount of token from sender into custody and record the leg."""
        if amount == 0:
            return
        self.custody.transfer_in(token, sender, amount)
        self.legs.append(TransferLeg("in", token, sender, amount))

    def pay(self, token: str, recipient: str, amount: int) -> None:
        """Move amount of token from custody to recipient and record the leg."""
        if amount == 0:
            return
        self.custody.transfer_out(token, recipient, amount)
        self.legs.append(TransferLeg("out", token, recipient, amount))

    def unwind(self) -> None:
        """Reverse completed legs, newest first.

        Inbound legs are refunded with transfer_out; payouts are taken back
        with reclaim, which does not depend on the recipient's allowance.

        A reversal that itself fails is logged and skipped so the remaining
        legs are still reversed; the caller re-raises the original error.
        """
        while self.legs:
            leg = self.legs.pop()
            try:
                if leg.direction == "in":
                    self.custody.transfer_out(leg.token, leg.account, leg.amount)
                else:
                    self.custody.reclaim(leg.token, leg.account, leg.amount)
            except PoolEngineError as err:
                logger.error(
                    "settlement_unwind_failed",
                    operation=self.operation,
                    direction=leg.direction,
                    token=short(leg.token),
                    account=short(leg.account),
                    amount=leg.amount,
                    error=str(err),
                )
            else:
                logger.debug(
                    "settlement_leg_reversed",
                    operation=self.operation,
                    direction=leg.direction,
                    token=short(leg.token),
                    amount=leg.amount,
                )
