"""
State tables: balances, pool records, nonces
"""

from .ledger import InMemoryLedger
from .nonces import NonceTable
from .pools import PoolStore, compute_pool_id, derive

__all__ = [
    "InMemoryLedger",
    "NonceTable",
    "PoolStore",
    "compute_pool_id",
    "derive",
]
