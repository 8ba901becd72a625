"""Pool engine error classes.

Every error carries a stable ``code`` so outer layers (the HTTP API,
indexers) can map failures without matching on class names.
"""


class PoolEngineError(Exception):
    """Base error for pool engine operations."""

    code = "pool_engine_error"


class IdenticalTokens(PoolEngineError):
    """Both sides of a pair are the same token."""

    code = "identical_tokens"


class InvalidToken(PoolEngineError):
    """Token identifier is malformed or the zero address."""

    code = "invalid_token"


class PoolAlreadyExists(PoolEngineError):
    """A pool for this unordered pair is already registered."""

    code = "pool_already_exists"


class PoolNotFound(PoolEngineError):
    """No pool for this pair, or the pool is empty where reserves are required."""

    code = "pool_not_found"


class InvalidAmount(PoolEngineError):
    """Amount is zero, negative, not an integer, or mints nothing."""

    code = "invalid_amount"


class InsufficientLiquidity(PoolEngineError):
    """Operation would exhaust a reserve side."""

    code = "insufficient_liquidity"


class InsufficientShares(PoolEngineError):
    """Withdrawal exceeds the provider's shares."""

    code = "insufficient_shares"


class TransferError(PoolEngineError):
    """Custody collaborator failed to move tokens."""

    code = "transfer_error"


class ReentrancyRejected(PoolEngineError):
    """Engine was re-entered while an operation was in flight."""

    code = "reentrancy_rejected"


__all__ = [
    "PoolEngineError",
    "IdenticalTokens",
    "InvalidToken",
    "PoolAlreadyExists",
    "PoolNotFound",
    "InvalidAmount",
    "InsufficientLiquidity",
    "InsufficientShares",
    "TransferError",
    "ReentrancyRejected",
]
