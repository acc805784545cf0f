"""
Tests for allowance.py - Delegated transfer allowances

Tests:
- approve overwrites
- increase is overflow-checked
- decrease clamps at zero
- consume / require_covers
"""

import pytest

from tokenledger import AllowanceBook, UINT256_MAX, ExceedsAllowance, ArithmeticOverflow


@pytest.fixture
def book():
    return AllowanceBook()


class TestApprove:

    def test_default_is_zero(self, book):
        assert book.allowance("alice", "bob") == 0

    def test_approve_overwrites(self, book):
        book.approve("alice", "bob", 100)
        book.approve("alice", "bob", 40)
        assert book.allowance("alice", "bob") == 40

    def test_allowances_are_per_pair(self, book):
        book.approve("alice", "bob", 100)
        assert book.allowance("bob", "alice") == 0
        assert book.allowance("alice", "carol") == 0

    def test_approve_rejects_negative(self, book):
        with pytest.raises(ArithmeticOverflow):
            book.approve("alice", "bob", -1)


class TestIncreaseDecrease:

    def test_increase_adds(self, book):
        book.approve("alice", "bob", 100)
        assert book.increase("alice", "bob", 50) == 150
        assert book.allowance("alice", "bob") == 150

    def test_increase_overflow_rejected(self, book):
        book.approve("alice", "bob", UINT256_MAX)
        with pytest.raises(ArithmeticOverflow):
            book.increase("alice", "bob", 1)
        assert book.allowance("alice", "bob") == UINT256_MAX

    def test_decrease_subtracts(self, book):
        book.approve("alice", "bob", 100)
        assert book.decrease("alice", "bob", 30) == 70

    def test_decrease_clamps_at_zero(self, book):
        book.approve("alice", "bob", 100)
        assert book.decrease("alice", "bob", 101) == 0
        assert book.allowance("alice", "bob") == 0

    def test_decrease_exact_to_zero(self, book):
        book.approve("alice", "bob", 100)
        assert book.decrease("alice", "bob", 100) == 0


class TestConsume:

    def test_consume_spends(self, book):
        book.approve("alice", "bob", 100)
        assert book.consume("alice", "bob", 60) == 40

    def test_consume_more_than_allowed_rejected(self, book):
        book.approve("alice", "bob", 100)
        with pytest.raises(ExceedsAllowance):
            book.consume("alice", "bob", 101)
        assert book.allowance("alice", "bob") == 100

    def test_require_covers(self, book):
        book.approve("alice", "bob", 10)
        book.require_covers("alice", "bob", 10)
        with pytest.raises(ExceedsAllowance):
            book.require_covers("alice", "bob", 11)
