"""
Host integration: adapters, authorization, configuration and the pool engine
"""

from .auth import BlsAuthorizer, TxSenderAuthorizer, sign_operation
from .config import ConfigError, EngineConfig, load_config
from .pool_engine import PoolEngine
from .ports import Authorizer, Clock, Ledger, ManualClock, SystemClock

__all__ = [
    "BlsAuthorizer",
    "TxSenderAuthorizer",
    "sign_operation",
    "ConfigError",
    "EngineConfig",
    "load_config",
    "PoolEngine",
    "Authorizer",
    "Clock",
    "Ledger",
    "ManualClock",
    "SystemClock",
]
