"""Tests for yieldsplit/state/pools.py: pool addressing and record store."""

import pytest

from yieldsplit.core.errors import PoolAlreadyExists, PoolNotFound
from yieldsplit.core.pool import PoolState
from yieldsplit.state.pools import ROLE_PT_MINT, ROLE_VAULT, ROLE_YT_MINT, PoolStore, compute_pool_id, derive


def _state(pool_id: str = "pool", **kwargs) -> PoolState:
    return PoolState(
        pool_id=pool_id,
        authority="authority",
        underlying_asset_id="USDC",
        custody_id="vault",
        principal_claim_id="PT",
        yield_claim_id="YT",
        maturity=10_000,
        **kwargs,
    )


class TestComputePoolId:
    def test_deterministic(self):
        assert compute_pool_id("USDC", 10_000) == compute_pool_id("USDC", 10_000)

    def test_hex_digest(self):
        pid = compute_pool_id("USDC", 10_000)
        assert pid.startswith("0x")
        assert len(pid) == 66

    def test_maturity_distinguishes(self):
        assert compute_pool_id("USDC", 10_000) != compute_pool_id("USDC", 10_001)

    def test_asset_distinguishes(self):
        assert compute_pool_id("USDC", 10_000) != compute_pool_id("DAI", 10_000)

    def test_rejects_empty_asset(self):
        with pytest.raises(ValueError):
            compute_pool_id("", 10_000)

    def test_rejects_bool_maturity(self):
        with pytest.raises(ValueError):
            compute_pool_id("USDC", True)


class TestDerive:
    def test_roles_distinct(self):
        pid = compute_pool_id("USDC", 10_000)
        ids = {derive(pid, role) for role in (ROLE_VAULT, ROLE_PT_MINT, ROLE_YT_MINT)}
        assert len(ids) == 3

    def test_pool_distinguishes(self):
        assert derive("a", ROLE_VAULT) != derive("b", ROLE_VAULT)

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            derive("a", "treasury")


class TestPoolStore:
    def test_create_and_get(self):
        store = PoolStore()
        s = _state()
        store.create(s)
        assert store.get("pool") is s
        assert "pool" in store
        assert len(store) == 1

    def test_slot_in_use(self):
        store = PoolStore()
        store.create(_state())
        with pytest.raises(PoolAlreadyExists):
            store.create(_state(principal_reserve=1))

    def test_unknown(self):
        with pytest.raises(PoolNotFound):
            PoolStore().get("missing")

    def test_put_replaces(self):
        store = PoolStore()
        store.create(_state())
        store.put(_state(principal_reserve=9))
        assert store.get("pool").principal_reserve == 9

    def test_put_requires_existing(self):
        with pytest.raises(PoolNotFound):
            PoolStore().put(_state())

    def test_iter_sorted(self):
        store = PoolStore()
        store.create(_state("b"))
        store.create(_state("a"))
        assert list(store) == ["a", "b"]
