"""
Pool record storage and deterministic addressing.

Sub-accounts of a pool (custody vault, PT and YT claim ids) are derived from the
pool id and a role tag; the core only ever sees the resulting opaque ids.
"""

from __future__ import annotations

from typing import Dict, Iterator

from ..core.errors import PoolAlreadyExists, PoolNotFound
from ..core.pool.types import PoolState
from .canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex

ROLE_VAULT = "vault"
ROLE_PT_MINT = "pt_mint"
ROLE_YT_MINT = "yt_mint"

_ROLES = (ROLE_VAULT, ROLE_PT_MINT, ROLE_YT_MINT)


def compute_pool_id(underlying_asset_id: str, maturity: int) -> str:
    """Deterministic pool id for an (underlying asset, maturity) pair."""
    if not isinstance(underlying_asset_id, str) or not underlying_asset_id:
        raise ValueError("underlying_asset_id must be a non-empty string")
    if not isinstance(maturity, int) or isinstance(maturity, bool) or maturity < 0:
        raise ValueError(f"maturity must be a non-negative int: {maturity!r}")
    payload = {"underlying_asset_id": underlying_asset_id, "maturity": maturity}
    return sha256_hex(domain_sep_bytes("pool_id") + canonical_json_bytes(payload))


def derive(pool_id: str, role: str) -> str:
    """Address of the `role` sub-account of `pool_id`."""
    if role not in _ROLES:
        raise ValueError(f"unknown role: {role!r}")
    return sha256_hex(domain_sep_bytes(f"derive:{role}") + pool_id.encode("utf-8"))


class PoolStore:
    """
    Keyed pool-record store (one fixed record per pool id).

    Records are immutable `PoolState`s; `put` replaces the whole record, which is
    how an operation's result is committed.
    """

    def __init__(self) -> None:
        self._pools: Dict[str, PoolState] = {}

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._pools))

    def __len__(self) -> int:
        return len(self._pools)

    def get(self, pool_id: str) -> PoolState:
        try:
            return self._pools[pool_id]
        except KeyError:
            raise PoolNotFound(f"unknown pool: {pool_id}") from None

    def create(self, state: PoolState) -> None:
        if state.pool_id in self._pools:
            raise PoolAlreadyExists(f"pool slot in use: {state.pool_id}")
        self._pools[state.pool_id] = state

    def put(self, state: PoolState) -> None:
        if state.pool_id not in self._pools:
            raise PoolNotFound(f"unknown pool: {state.pool_id}")
        self._pools[state.pool_id] = state
