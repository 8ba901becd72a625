"""Constant product AMM pool engine."""

from pool_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from pool_engine.custody import InMemoryCustody, TokenCustody
from pool_engine.engine import PoolEngine, get_default_engine
from pool_engine.pricing import BootstrapPolicy

__version__ = "0.1.0"
__all__ = [
    "PoolEngine",
    "get_default_engine",
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "BootstrapPolicy",
    "TokenCustody",
    "InMemoryCustody",
    "__version__",
]
