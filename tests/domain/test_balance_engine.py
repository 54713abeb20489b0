"""
Tests for the balance engine.

Scenarios cover single transfers, round trips, multi-unit moves and
positional reordering; boundary tests cover empty transactions, the end
of the transaction list and amount conversion.
"""

from decimal import Decimal

import pytest

from bookkeeping.domain import Balance, Book, Side, Sum
from bookkeeping.exceptions import (
    ConcurrentModificationError,
    IndexOutOfBoundsError,
    InvariantViolationError,
    UnknownAccountError,
)


def _amounts(balance):
    return dict(balance.amounts())


class TestScenarios:
    """End-to-end balance scenarios."""

    def test_single_transfer(self, chart):
        book = chart.book
        book.insert_transaction(0, "ATM withdrawal")
        book.insert_move(0, 0, chart.wallet, chart.bank, Sum.of(chart.thb, 50000))

        wallet = book.account_balance_at_transaction(chart.wallet, 0)
        bank = book.account_balance_at_transaction(chart.bank, 0)
        assert _amounts(wallet) == {chart.thb: 50000}
        assert _amounts(bank) == {chart.thb: -50000}
        assert _amounts(wallet + bank) == {chart.thb: 0}

    def test_round_trip(self, book):
        thb = book.insert_unit("THB")
        a, b = book.insert_account("a"), book.insert_account("b")
        book.insert_transaction(0)
        book.insert_move(0, 0, a, b, Sum.of(thb, 100))
        book.insert_transaction(1)
        book.insert_move(1, 0, b, a, Sum.of(thb, 40))

        assert _amounts(book.account_balance_at_transaction(a, 0)) == {thb: 100}
        assert _amounts(book.account_balance_at_transaction(a, 1)) == {thb: 60}
        assert _amounts(book.account_balance_at_transaction(b, 1)) == {thb: -60}

    def test_multi_unit_move(self, book):
        thb, ils = book.insert_unit("THB"), book.insert_unit("ILS")
        x, y = book.insert_account("x"), book.insert_account("y")
        book.insert_transaction(0)
        book.insert_move(0, 0, x, y, Sum.of(thb, 300).with_amount(ils, 20))

        x_balance = book.account_balance_at_transaction(x, 0)
        y_balance = book.account_balance_at_transaction(y, 0)
        assert list(x_balance.amounts()) == [(thb, 300), (ils, 20)]
        assert list(y_balance.amounts()) == [(thb, -300), (ils, -20)]

    def test_insertion_reordering(self, chart):
        book = chart.book
        book.insert_transaction(0, "T0")
        book.insert_move(0, 0, chart.bank, chart.store, Sum.of(chart.thb, 7))
        book.insert_transaction(1, "T1")
        book.insert_move(1, 0, chart.wallet, chart.bank, Sum.of(chart.thb, 3))

        book.insert_transaction(1, "Tnew")
        book.insert_move(1, 0, chart.bank, chart.store, Sum.of(chart.thb, 11))

        assert [t.metadata for _, t in book.transactions()] == ["T0", "Tnew", "T1"]
        assert _amounts(book.account_balance_at_transaction(chart.bank, 0)) == {chart.thb: 7}
        assert _amounts(book.account_balance_at_transaction(chart.bank, 1)) == {chart.thb: 18}
        assert _amounts(book.account_balance_at_transaction(chart.bank, 2)) == {chart.thb: 15}

    def test_mid_transaction_move_insertion(self, chart):
        book = chart.book
        book.insert_transaction(0)
        book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 1), "A")
        book.insert_move(0, 1, chart.bank, chart.wallet, Sum.of(chart.thb, 2), "B")
        book.insert_move(0, 1, chart.wallet, chart.bank, Sum.of(chart.thb, 4), "C")

        names = [move.metadata for _, move in book.get_transaction(0).moves()]
        assert names == ["A", "C", "B"]
        assert _amounts(book.account_balance_at_transaction(chart.bank, 0)) == {chart.thb: -1}

    def test_same_account_rejection(self, chart):
        book = chart.book
        book.insert_transaction(0)
        with pytest.raises(InvariantViolationError):
            book.insert_move(0, 0, chart.bank, chart.bank, Sum.of(chart.thb, 1))
        _, transaction = next(book.transactions())
        assert list(transaction.moves()) == []


class TestBoundaries:
    """Edge positions and failure modes of the engine."""

    def test_empty_transaction_gives_empty_balance(self, chart):
        chart.book.insert_transaction(0)
        assert chart.book.account_balance_at_transaction(chart.bank, 0) == Balance()

    def test_untouched_account_gives_empty_balance(self, chart):
        book = chart.book
        book.insert_transaction(0)
        book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 5))
        assert list(book.account_balance_at_transaction(chart.store, 0).amounts()) == []

    def test_append_position_and_one_past(self, book):
        book.insert_transaction(0)
        assert book.insert_transaction(book.transaction_count) == 1
        with pytest.raises(IndexOutOfBoundsError):
            book.insert_transaction(book.transaction_count + 1)

    def test_position_past_last_transaction(self, chart):
        chart.book.insert_transaction(0)
        with pytest.raises(IndexOutOfBoundsError):
            chart.book.account_balance_at_transaction(chart.bank, 1)

    def test_empty_book_has_no_positions(self, chart):
        with pytest.raises(IndexOutOfBoundsError):
            chart.book.account_balance_at_transaction(chart.bank, 0)

    def test_unknown_account(self, chart):
        chart.book.insert_transaction(0)
        with pytest.raises(UnknownAccountError):
            chart.book.account_balance_at_transaction(Book().insert_account(), 0)

    def test_unknown_account_checked_first(self, chart):
        with pytest.raises(UnknownAccountError):
            chart.book.account_balance_at_transaction(Book().insert_account(), 5)

    def test_move_into_missing_transaction_leaves_book_unchanged(self, chart):
        with pytest.raises(IndexOutOfBoundsError):
            chart.book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 1))
        assert chart.book.transaction_count == 0

    def test_set_move_side_equal_to_other_side(self, chart):
        book = chart.book
        book.insert_transaction(0)
        book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 1))
        with pytest.raises(InvariantViolationError):
            book.set_move_side(0, 0, Side.CREDIT, chart.bank)

    def test_balance_follows_side_change(self, chart):
        book = chart.book
        book.insert_transaction(0)
        book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 9))
        book.set_move_side(0, 0, Side.CREDIT, chart.store)
        assert _amounts(book.account_balance_at_transaction(chart.wallet, 0)) == {}
        assert _amounts(book.account_balance_at_transaction(chart.store, 0)) == {chart.thb: -9}

    def test_returned_balance_is_detached(self, chart):
        book = chart.book
        book.insert_transaction(0)
        book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 9))
        first = book.account_balance_at_transaction(chart.bank, 0)
        first += Sum.of(chart.thb, 1000)
        assert _amounts(book.account_balance_at_transaction(chart.bank, 0)) == {chart.thb: 9}


class TestAmountConversion:
    """Amounts pass through the balance amount type as they are applied."""

    @pytest.fixture
    def decimal_chart(self):
        book = Book()
        thb = book.insert_unit("THB")
        bank, wallet = book.insert_account("bank"), book.insert_account("wallet")
        book.insert_transaction(0)
        book.insert_move(0, 0, bank, wallet, Sum.of(thb, Decimal("10.75")))
        book.insert_move(0, 1, bank, wallet, Sum.of(thb, Decimal("0.50")))
        return book, thb, bank

    def test_int_default_truncates_per_amount(self, decimal_chart):
        book, thb, bank = decimal_chart
        assert _amounts(book.account_balance_at_transaction(bank, 0)) == {thb: 10}

    def test_explicit_decimal(self, decimal_chart):
        book, thb, bank = decimal_chart
        balance = book.account_balance_at_transaction(bank, 0, Decimal)
        assert _amounts(balance) == {thb: Decimal("11.25")}

    def test_book_level_amount_type(self):
        book = Book(balance_amount_type=Decimal)
        thb = book.insert_unit("THB")
        bank, wallet = book.insert_account("bank"), book.insert_account("wallet")
        book.insert_transaction(0)
        book.insert_move(0, 0, bank, wallet, Sum.of(thb, Decimal("0.01")))
        balance = book.account_balance_at_transaction(wallet, 0)
        assert _amounts(balance) == {thb: Decimal("-0.01")}
        assert balance.amount_type is Decimal

    def test_large_amounts(self, chart):
        book = chart.book
        big = 2**64 - 1
        book.insert_transaction(0)
        for position in range(3):
            book.insert_move(0, position, chart.bank, chart.wallet, Sum.of(chart.thb, big))
        assert _amounts(book.account_balance_at_transaction(chart.wallet, 0)) == {
            chart.thb: -3 * big
        }


class TestRunningBalance:
    """running_balance agrees with per-position queries."""

    def test_matches_point_queries(self, chart):
        book = chart.book
        for index, amount in enumerate((5, 8, 13)):
            book.insert_transaction(index)
            book.insert_move(index, 0, chart.bank, chart.wallet, Sum.of(chart.thb, amount))
        book.insert_transaction(1)

        running = list(book.running_balance(chart.bank))
        assert [index for index, _ in running] == [0, 1, 2, 3]
        for index, balance in running:
            assert balance == book.account_balance_at_transaction(chart.bank, index)

    def test_yielded_balances_are_independent(self, chart):
        book = chart.book
        book.insert_transaction(0)
        book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 1))
        book.insert_transaction(1)
        book.insert_move(1, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 1))
        (_, first), (_, second) = book.running_balance(chart.bank)
        assert _amounts(first) == {chart.thb: 1}
        assert _amounts(second) == {chart.thb: 2}

    def test_unknown_account_raises_immediately(self, chart):
        with pytest.raises(UnknownAccountError):
            chart.book.running_balance(Book().insert_account())

    def test_empty_book(self, chart):
        assert list(chart.book.running_balance(chart.bank)) == []

    def test_move_added_to_yielded_transaction_invalidates(self, chart):
        book = chart.book
        for index in range(2):
            book.insert_transaction(index)
            book.insert_move(index, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 1))
        running = book.running_balance(chart.bank)
        next(running)
        book.insert_move(0, 1, chart.bank, chart.wallet, Sum.of(chart.thb, 5))
        with pytest.raises(ConcurrentModificationError):
            next(running)

    def test_sum_change_after_last_yield_invalidates(self, chart):
        book = chart.book
        book.insert_transaction(0)
        book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 1))
        with pytest.raises(ConcurrentModificationError):
            for _, _ in book.running_balance(chart.bank):
                book.set_move_sum(0, 0, Sum.of(chart.thb, 2))

    def test_unguarded_book_keeps_walking(self):
        book = Book(guard_iteration=False)
        thb = book.insert_unit("THB")
        bank, wallet = book.insert_account("bank"), book.insert_account("wallet")
        book.insert_transaction(0)
        book.insert_move(0, 0, bank, wallet, Sum.of(thb, 1))
        yielded = []
        for index, _ in book.running_balance(bank):
            yielded.append(index)
            book.insert_move(0, 1, bank, wallet, Sum.of(thb, 1))
        assert yielded == [0]


class TestEngineLogging:
    def test_balance_computed_logged(self, captured_logs, chart):
        book = chart.book
        book.insert_transaction(0)
        book.insert_move(0, 0, chart.bank, chart.wallet, Sum.of(chart.thb, 1))
        book.insert_move(0, 1, chart.wallet, chart.store, Sum.of(chart.thb, 1))
        book.account_balance_at_transaction(chart.wallet, 0)
        record = next(r for r in captured_logs() if r["message"] == "balance_computed")
        assert record["moves_applied"] == 2
        assert record["transaction_index"] == 0
        assert record["operation"] == "account_balance_at_transaction"
