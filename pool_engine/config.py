"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from pool_engine.constants import BPS_DENOMINATOR, FEE_BPS, PRICE_SCALE
from pool_engine.pricing import BootstrapPolicy


@dataclass(frozen=True)
class EngineConfig:
    """Centralized configuration for a pool engine instance.

    The fee is a protocol constant for the lifetime of an engine; it is not
    configurable per pool.

    Attributes:
        fee_bps: Trading fee in basis points (default: 30 = 0.3%)
        price_scale: Fixed-point scale for spot prices (default: 1e18)
        bootstrap: Share minting policy for a pool's first deposit
    """

    fee_bps: int = FEE_BPS
    price_scale: int = PRICE_SCALE
    bootstrap: BootstrapPolicy = BootstrapPolicy.SUM

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}): {self.fee_bps}")
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive: {self.price_scale}")

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a config from environment variables.

        - POOL_ENGINE_FEE_BPS: Trading fee in basis points (default: 30)
        - POOL_ENGINE_PRICE_SCALE: Price scale (default: 10**18)
        - POOL_ENGINE_BOOTSTRAP: "sum" or "geometric_mean" (default: sum)

        Raises:
            ValueError: If a variable is set to an invalid value
        """
        fee_bps = int(os.environ.get("POOL_ENGINE_FEE_BPS", str(FEE_BPS)))
        price_scale = int(os.environ.get("POOL_ENGINE_PRICE_SCALE", str(PRICE_SCALE)))
        bootstrap = BootstrapPolicy(
            os.environ.get("POOL_ENGINE_BOOTSTRAP", BootstrapPolicy.SUM.value).lower()
        )
        return cls(fee_bps=fee_bps, price_scale=price_scale, bootstrap=bootstrap)


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
