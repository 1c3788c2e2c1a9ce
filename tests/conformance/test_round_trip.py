"""
Round-Trip Conformance Tests

INVARIANT: For any ledger L whose text fields contain no delimiters:
    import_dump(fresh, export_dump(L)) ≡ L

Account IDs, balances, payment amounts/categories/statuses and favorites
are all reproduced when the target ledger starts empty.
"""

import tempfile

from hypothesis import given, settings
from hypothesis import strategies as st

from wallet import (
    Ledger, PaymentStatus,
    export_dump, import_dump, export_to_file, import_from_file,
)

from tests.ledger_helpers import compare_ledger_states, ledger_state_equals


# Text fields must avoid ';', '|' and line breaks (unescaped format).
safe_text = st.text(alphabet="abcdefghijklmnopqrstuvwxyz+0123456789 ", max_size=12)


@st.composite
def populated_ledgers(draw):
    """Generate a ledger with accounts, payments in all states and favorites."""
    ledger = Ledger("source", verbose=False)
    phones = draw(st.lists(safe_text, min_size=1, max_size=6, unique=True))
    for phone in phones:
        account = ledger.register_account(phone)
        balance = draw(st.integers(min_value=0, max_value=10_000_000))
        if balance:
            ledger.deposit(account.id, balance)

    for _ in range(draw(st.integers(min_value=0, max_value=10))):
        account = ledger.find_account_by_id(draw(st.integers(1, len(phones))))
        if account.balance == 0:
            continue
        amount = draw(st.integers(min_value=1, max_value=account.balance))
        payment = ledger.pay(account.id, amount, draw(safe_text))
        action = draw(st.sampled_from(["keep", "reject", "done", "favorite"]))
        if action == "reject":
            ledger.reject(payment.id)
        elif action == "done":
            payment.status = PaymentStatus.DONE
        elif action == "favorite":
            ledger.favorite_payment(payment.id, draw(safe_text))
    return ledger


class TestDumpRoundTrip:
    """Property-based dump round-trip tests."""

    @given(populated_ledgers())
    @settings(max_examples=50, deadline=None)
    def test_export_import_reproduces_ledger(self, source):
        """
        PROPERTY: Exporting then importing into an empty ledger is lossless.
        """
        restored = Ledger("restored", verbose=False)
        with tempfile.TemporaryDirectory() as directory:
            export_dump(source, directory)
            import_dump(restored, directory)

        diff = compare_ledger_states(source, restored)
        assert diff["equal"], diff
        assert list(restored.accounts) == list(source.accounts)
        assert list(restored.payments) == list(source.payments)
        assert list(restored.favorites) == list(source.favorites)

    @given(populated_ledgers())
    @settings(max_examples=25, deadline=None)
    def test_reimport_into_same_ledger_is_idempotent(self, source):
        """
        PROPERTY: Importing a ledger's own dump changes nothing.
        """
        before = source.clone()
        with tempfile.TemporaryDirectory() as directory:
            export_dump(source, directory)
            import_dump(source, directory)
        assert ledger_state_equals(before, source)


class TestLegacyRoundTrip:
    """Property-based legacy flat-file round-trip tests."""

    @given(populated_ledgers())
    @settings(max_examples=25, deadline=None)
    def test_accounts_survive(self, source):
        restored = Ledger("restored", verbose=False)
        with tempfile.TemporaryDirectory() as directory:
            path = f"{directory}/accounts.txt"
            export_to_file(source, path)
            import_from_file(restored, path)

        assert [(a.id, a.phone, a.balance) for a in restored.list_accounts()] == \
            [(a.id, a.phone, a.balance) for a in source.list_accounts()]
