"""Tests for yieldsplit/state/ledger.py: in-memory ledger adapter."""

import pytest

from yieldsplit.core.errors import FixedPointOverflow, InsufficientBalance, InvalidAmount, LedgerError
from yieldsplit.integration.ports import Ledger
from yieldsplit.state.ledger import InMemoryLedger


def _ledger() -> InMemoryLedger:
    ledger = InMemoryLedger()
    ledger.mint("USDC", "alice", 1_000)
    return ledger


class TestBalances:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryLedger(), Ledger)

    def test_unknown_is_zero(self):
        assert InMemoryLedger().balance_of("USDC", "nobody") == 0

    def test_mint(self):
        ledger = _ledger()
        assert ledger.balance_of("USDC", "alice") == 1_000
        assert ledger.total_supply("USDC") == 1_000

    def test_burn(self):
        ledger = _ledger()
        ledger.burn("USDC", "alice", 400)
        assert ledger.balance_of("USDC", "alice") == 600
        assert ledger.total_supply("USDC") == 600

    def test_transfer(self):
        ledger = _ledger()
        ledger.transfer("USDC", "alice", "bob", 250)
        assert ledger.balance_of("USDC", "alice") == 750
        assert ledger.balance_of("USDC", "bob") == 250
        assert ledger.total_supply("USDC") == 1_000

    def test_zero_balances_dropped(self):
        ledger = _ledger()
        ledger.transfer("USDC", "alice", "bob", 1_000)
        assert ledger.get_balances_for_asset("USDC") == {"bob": 1_000}

    def test_assets_are_separate(self):
        ledger = _ledger()
        ledger.mint("PT", "alice", 5)
        assert ledger.get_balances_for_asset("PT") == {"alice": 5}


class TestFailures:
    def test_overdraw(self):
        ledger = _ledger()
        with pytest.raises(InsufficientBalance):
            ledger.transfer("USDC", "alice", "bob", 1_001)

    def test_insufficient_is_ledger_error(self):
        with pytest.raises(LedgerError):
            InMemoryLedger().burn("USDC", "alice", 1)

    def test_negative_amount(self):
        with pytest.raises(InvalidAmount):
            _ledger().mint("USDC", "alice", -1)

    def test_balance_overflow(self):
        ledger = InMemoryLedger()
        ledger.mint("USDC", "alice", 2**64 - 1)
        with pytest.raises(FixedPointOverflow):
            ledger.mint("USDC", "alice", 1)


class TestTransaction:
    def test_commits(self):
        ledger = _ledger()
        with ledger.transaction():
            ledger.transfer("USDC", "alice", "vault", 300)
            ledger.mint("PT", "alice", 300)
        assert ledger.balance_of("USDC", "vault") == 300
        assert ledger.balance_of("PT", "alice") == 300

    def test_rolls_back_all_ops(self):
        ledger = _ledger()
        with pytest.raises(InsufficientBalance):
            with ledger.transaction():
                ledger.transfer("USDC", "alice", "vault", 300)
                ledger.mint("PT", "alice", 300)
                ledger.transfer("USDC", "alice", "vault", 5_000)
        assert ledger.balance_of("USDC", "alice") == 1_000
        assert ledger.balance_of("USDC", "vault") == 0
        assert ledger.total_supply("PT") == 0

    def test_nested_joins_outer(self):
        ledger = _ledger()
        with pytest.raises(RuntimeError):
            with ledger.transaction():
                with ledger.transaction():
                    ledger.transfer("USDC", "alice", "bob", 10)
                raise RuntimeError("abort")
        assert ledger.balance_of("USDC", "bob") == 0

    def test_usable_after_rollback(self):
        ledger = _ledger()
        with pytest.raises(InsufficientBalance):
            with ledger.transaction():
                ledger.burn("USDC", "alice", 2_000)
        with ledger.transaction():
            ledger.burn("USDC", "alice", 1)
        assert ledger.balance_of("USDC", "alice") == 999
