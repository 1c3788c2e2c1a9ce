"""
Conservation Conformance Tests

INVARIANT: For every account a, at all times:
    balance(a) = Σ deposits(a) - Σ amount(p) for p in payments(a)
                 + Σ amount(p) for each rejection of p

    and balance(a) >= 0.

Failed operations change nothing.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from wallet import (
    Ledger, PaymentStatus,
    AmountMustBePositive, InsufficientFunds,
)


# =============================================================================
# STRATEGIES FOR PROPERTY-BASED TESTING
# =============================================================================

amounts = st.integers(min_value=-1_000, max_value=2_000_000)

operation = st.one_of(
    st.tuples(st.just("deposit"), amounts),
    st.tuples(st.just("pay"), amounts),
    st.tuples(st.just("reject"), st.integers(min_value=0, max_value=50)),
)


class TestBalanceConservation:
    """Property-based balance tests."""

    @given(st.lists(operation, min_size=1, max_size=40))
    @settings(max_examples=100)
    def test_balance_matches_operation_log(self, operations):
        """
        PROPERTY: The balance equals the net of all successful operations.
        """
        ledger = Ledger("test", verbose=False)
        account = ledger.register_account("+992880806776")
        expected = 0
        payments = []

        for kind, value in operations:
            if kind == "deposit":
                if value <= 0:
                    with pytest.raises(AmountMustBePositive):
                        ledger.deposit(account.id, value)
                else:
                    ledger.deposit(account.id, value)
                    expected += value
            elif kind == "pay":
                if value <= 0:
                    with pytest.raises(AmountMustBePositive):
                        ledger.pay(account.id, value, "auto")
                elif value > expected:
                    with pytest.raises(InsufficientFunds):
                        ledger.pay(account.id, value, "auto")
                else:
                    payments.append(ledger.pay(account.id, value, "auto"))
                    expected -= value
            elif payments:
                payment = payments[value % len(payments)]
                ledger.reject(payment.id)
                expected += payment.amount

            assert account.balance == expected
            assert account.balance >= 0

        assert len(ledger.payments) == len(payments)

    @given(
        st.integers(min_value=0, max_value=1_000_000),
        st.integers(min_value=1, max_value=2_000_000),
    )
    @settings(max_examples=100)
    def test_pay_either_debits_or_changes_nothing(self, balance, amount):
        """
        PROPERTY: pay(amount) leaves B - amount if amount <= B, else B.
        """
        ledger = Ledger("test", verbose=False)
        account = ledger.register_account("+992880806776")
        if balance:
            ledger.deposit(account.id, balance)

        if amount <= balance:
            payment = ledger.pay(account.id, amount, "auto")
            assert account.balance == balance - amount
            assert payment.status == PaymentStatus.IN_PROGRESS
        else:
            with pytest.raises(InsufficientFunds):
                ledger.pay(account.id, amount, "auto")
            assert account.balance == balance
            assert ledger.list_payments() == []

    @given(st.integers(max_value=0))
    @settings(max_examples=50)
    def test_non_positive_deposit_changes_nothing(self, amount):
        """
        PROPERTY: deposit(amount <= 0) always fails and leaves the balance.
        """
        ledger = Ledger("test", verbose=False)
        account = ledger.register_account("+992880806776")
        ledger.deposit(account.id, 500)
        with pytest.raises(AmountMustBePositive):
            ledger.deposit(account.id, amount)
        assert account.balance == 500

    @given(st.lists(st.integers(min_value=1, max_value=10_000), min_size=1, max_size=20))
    @settings(max_examples=50)
    def test_reject_all_restores_deposit(self, payment_amounts):
        """
        PROPERTY: Rejecting every payment once restores the deposited total.
        """
        ledger = Ledger("test", verbose=False)
        account = ledger.register_account("+992880806776")
        total = sum(payment_amounts)
        ledger.deposit(account.id, total)

        payments = [ledger.pay(account.id, amount, "auto") for amount in payment_amounts]
        assert account.balance == 0

        for payment in payments:
            ledger.reject(payment.id)
        assert account.balance == total
        assert all(p.status == PaymentStatus.FAIL for p in ledger.list_payments())

    @given(st.integers(min_value=2, max_value=5))
    @settings(max_examples=20)
    def test_strict_reject_credits_once(self, times):
        """
        PROPERTY: With strict_reject, N rejections credit exactly once.
        """
        ledger = Ledger("test", verbose=False, strict_reject=True)
        account = ledger.register_account("+992880806776")
        ledger.deposit(account.id, 1_000)
        payment = ledger.pay(account.id, 300, "auto")
        for _ in range(times):
            ledger.reject(payment.id)
        assert account.balance == 1_000
