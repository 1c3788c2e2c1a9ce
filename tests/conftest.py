"""
conftest.py - Shared pytest fixtures for wallet tests

Provides common fixtures used across unit, conformance and functional tests:
- Basic ledgers (empty, funded)
- A populated ledger with payments in every state and a favorite
"""

import pytest

from wallet import Ledger, Account

from tests.ledger_helpers import DEFAULT_PHONE, SECOND_PHONE


@pytest.fixture
def ledger() -> Ledger:
    """Empty, quiet ledger."""
    return Ledger("test", verbose=False)


@pytest.fixture
def account(ledger) -> Account:
    """Account with phone DEFAULT_PHONE holding 1,000,000 minor units."""
    acc = ledger.register_account(DEFAULT_PHONE)
    ledger.deposit(acc.id, 1_000_000)
    return acc


@pytest.fixture
def populated_ledger() -> Ledger:
    """
    Ledger with two funded accounts, payments in every state and a favorite.

    Account 1: one payment of 100_000 (auto)
    Account 2: payments of 100_000 (auto) and 102_000 (auto), the first
               rejected, plus a favorite "Car" made from the second
    """
    ledger = Ledger("populated", verbose=False)
    first = ledger.register_account(DEFAULT_PHONE)
    second = ledger.register_account(SECOND_PHONE)
    ledger.deposit(first.id, 1_000_000)
    ledger.deposit(second.id, 1_000_000)

    ledger.pay(first.id, 100_000, "auto")
    rejected = ledger.pay(second.id, 100_000, "auto")
    kept = ledger.pay(second.id, 102_000, "auto")
    ledger.reject(rejected.id)
    ledger.favorite_payment(kept.id, "Car")
    return ledger
