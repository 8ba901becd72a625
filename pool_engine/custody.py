"""Token custody capability consumed by the engine.

The engine never holds balances itself; it asks a custody collaborator to
pull funds from callers and to pay them out. Each transfer is
all-or-nothing and reports failure by raising TransferError.

InMemoryCustody is a reference collaborator with ERC20-like semantics
(balances plus allowances granted to the engine), used by tests, local
tooling and the demo API.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Protocol, runtime_checkable

import structlog

from pool_engine.errors import TransferError
from pool_engine.models.types import normalize_address, short

logger = structlog.get_logger()

# Account that holds every token transferred into engine custody
ENGINE_ACCOUNT = "0x00000000000000000000000000000000000e1e1e"

# Called before funds move, as (direction, token, account, amount); direction is
# "in", "out", or "reclaim" when a payout is taken back during rollback
TransferHook = Callable[[str, str, str, int], None]


@runtime_checkable
class TokenCustody(Protocol):
    """Protocol for moving tokens into and out of engine custody."""

    def transfer_in(self, token: str, sender: str, amount: int) -> None:
        """Move amount of token from sender into engine custody.

        Raises:
            TransferError: If the transfer cannot complete; nothing moves
        """
        ...

    def transfer_out(self, token: str, recipient: str, amount: int) -> None:
        """Move amount of token from engine custody to recipient.

        Raises:
            TransferError: If the transfer cannot complete; nothing moves
        """
        ...

    def reclaim(self, token: str, recipient: str, amount: int) -> None:
        """Take back amount of token paid to recipient earlier in the same operation.

        Needs no allowance: the engine is only undoing its own payout.

        Raises:
            TransferError: If recipient no longer holds amount; nothing moves
        """
        ...


class InMemoryCustody:
    """Token balances and engine allowances held in memory.

    Usage:
        custody = InMemoryCustody()
        custody.mint(TOKEN_A, alice, 1000)
        custody.approve(TOKEN_A, alice, 1000)
        engine = PoolEngine(custody)

    Args:
        on_transfer: Optional hook run before each transfer moves funds,
            simulating a token that calls back into its caller. If the
            hook raises, the transfer does not happen.
    """

    def __init__(self, on_transfer: TransferHook | None = None) -> None:
        self._balances: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self._allowances: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self.on_transfer = on_transfer

    def balance_of(self, token: str, holder: str) -> int:
        return self._balances[normalize_address(token)][normalize_address(holder)]

    def allowance(self, token: str, holder: str) -> int:
        """Amount of token the engine may still pull from holder."""
        return self._allowances[normalize_address(token)][normalize_address(holder)]

    def custody_balance(self, token: str) -> int:
        """Amount of token currently held by the engine."""
        return self.balance_of(token, ENGINE_ACCOUNT)

    def mint(self, token: str, holder: str, amount: int) -> None:
        """Create amount of token out of thin air for holder."""
        if amount < 0:
            raise ValueError(f"Cannot mint negative amount: {amount}")
        self._balances[normalize_address(token)][normalize_address(holder)] += amount

    def approve(self, token: str, holder: str, amount: int) -> None:
        """Set the engine's allowance over holder's token balance."""
        if amount < 0:
            raise ValueError(f"Cannot approve negative amount: {amount}")
        self._allowances[normalize_address(token)][normalize_address(holder)] = amount

    def transfer_in(self, token: str, sender: str, amount: int) -> None:
        token_norm = normalize_address(token)
        sender_norm = normalize_address(sender)
        balances = self._balances[token_norm]
        allowances = self._allowances[token_norm]

        if allowances[sender_norm] < amount:
            raise TransferError(
                f"Insufficient allowance: {sender_norm} approved "
                f"{allowances[sender_norm]} of {token_norm}, needs {amount}"
            )
        if balances[sender_norm] < amount:
            raise TransferError(
                f"Insufficient balance: {sender_norm} holds "
                f"{balances[sender_norm]} of {token_norm}, needs {amount}"
            )

        if self.on_transfer is not None:
            self.on_transfer("in", token_norm, sender_norm, amount)

        allowances[sender_norm] -= amount
        balances[sender_norm] -= amount
        balances[ENGINE_ACCOUNT] += amount
        logger.debug(
            "custody_transfer_in", token=short(token_norm), sender=short(sender_norm), amount=amount
        )

    def transfer_out(self, token: str, recipient: str, amount: int) -> None:
        token_norm = normalize_address(token)
        recipient_norm = normalize_address(recipient)
        balances = self._balances[token_norm]

        if balances[ENGINE_ACCOUNT] < amount:
            raise TransferError(
                f"Custody holds {balances[ENGINE_ACCOUNT]} of {token_norm}, cannot pay {amount}"
            )

        if self.on_transfer is not None:
            self.on_transfer("out", token_norm, recipient_norm, amount)

        balances[ENGINE_ACCOUNT] -= amount
        balances[recipient_norm] += amount
        logger.debug(
            "custody_transfer_out",
            token=short(token_norm),
            recipient=short(recipient_norm),
            amount=amount,
        )

    def reclaim(self, token: str, recipient: str, amount: int) -> None:
        token_norm = normalize_address(token)
        recipient_norm = normalize_address(recipient)
        balances = self._balances[token_norm]

        if balances[recipient_norm] < amount:
            raise TransferError(
                f"Cannot reclaim {amount} of {token_norm}: {recipient_norm} holds "
                f"{balances[recipient_norm]}"
            )

        if self.on_transfer is not None:
            self.on_transfer("reclaim", token_norm, recipient_norm, amount)

        balances[recipient_norm] -= amount
        balances[ENGINE_ACCOUNT] += amount
        logger.debug(
            "custody_reclaim",
            token=short(token_norm),
            recipient=short(recipient_norm),
            amount=amount,
        )
