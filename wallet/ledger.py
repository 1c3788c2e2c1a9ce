"""
ledger.py - Stateful Wallet Ledger

The Ledger class is the central state manager for the wallet system.
It is the only module that mutates state, ensuring controlled and auditable changes.

Key responsibilities:
    - Registers accounts and keeps phone numbers unique
    - Executes deposits, payments, rejections and repeats
    - Stores favorites and re-issues payments from them
    - Provides restore hooks used by the serializer to rebuild state from files
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, List, Tuple
import uuid

from .core import (
    # Types
    Account, Payment, Favorite, PaymentStatus,
    Phone, Money, PaymentCategory,
    # Exceptions
    AmountMustBePositive, AccountNotFound, PaymentNotFound,
    FavoriteNotFound, InsufficientFunds, PhoneAlreadyRegistered,
)


class Ledger:
    """
    In-memory wallet ledger holding accounts, payments and favorites.

    Every collection is a dict keyed by ID. Dicts preserve insertion order,
    so iteration (and therefore export order) follows the order in which
    records were added.

    Thread Safety:
        Not thread-safe. Each thread should maintain its own Ledger instance.

    Example:
        ledger = Ledger("main")
        account = ledger.register_account("+992880806776")
        ledger.deposit(account.id, 1_000_000)
        payment = ledger.pay(account.id, 100_000, "auto")
        ledger.reject(payment.id)
    """

    def __init__(
        self,
        name: str = "wallet",
        verbose: bool = True,
        strict_reject: bool = False
    ):
        """
        Create a ledger.

        Args:
            name: Ledger identifier
            verbose: Print a line for every mutation (default: True)
            strict_reject: Make reject() a no-op for payments that already
                failed instead of crediting the amount again (default: False)
        """
        self.name = name
        self.verbose = verbose
        self.strict_reject = strict_reject
        self.accounts: Dict[int, Account] = {}
        self.payments: Dict[str, Payment] = {}
        self.favorites: Dict[str, Favorite] = {}
        # Reverse index phone -> account id for O(1) uniqueness checks
        self._accounts_by_phone: Dict[Phone, int] = {}
        self._next_account_id: int = 0

    def __repr__(self) -> str:
        return (
            f"Ledger({self.name!r}: {len(self.accounts)} accounts, "
            f"{len(self.payments)} payments, {len(self.favorites)} favorites)"
        )

    def log(self, icon: str, message: str) -> None:
        """Print a status line if verbose mode is enabled."""
        if self.verbose:
            print(f"{icon} [{self.name}] {message}")

    # ========================================================================
    # QUERIES (read-only)
    # ========================================================================

    def find_account_by_id(self, account_id: int) -> Account:
        """
        Look up an account.

        Raises:
            AccountNotFound: If no account has this ID
        """
        account = self.accounts.get(account_id)
        if account is None:
            raise AccountNotFound(f"Account {account_id} not found")
        return account

    def find_payment_by_id(self, payment_id: str) -> Payment:
        """
        Look up a payment.

        Raises:
            PaymentNotFound: If no payment has this ID
        """
        payment = self.payments.get(payment_id)
        if payment is None:
            raise PaymentNotFound(f"Payment {payment_id} not found")
        return payment

    def find_favorite_by_id(self, favorite_id: str) -> Favorite:
        """
        Look up a favorite.

        Raises:
            FavoriteNotFound: If no favorite has this ID
        """
        favorite = self.favorites.get(favorite_id)
        if favorite is None:
            raise FavoriteNotFound(f"Favorite {favorite_id} not found")
        return favorite

    def is_registered(self, phone: Phone) -> bool:
        """Check if a phone number belongs to an account."""
        return phone in self._accounts_by_phone

    def list_accounts(self) -> List[Account]:
        """List accounts in insertion order."""
        return list(self.accounts.values())

    def list_payments(self) -> List[Payment]:
        """List payments in insertion order."""
        return list(self.payments.values())

    def list_favorites(self) -> List[Favorite]:
        """List favorites in insertion order."""
        return list(self.favorites.values())

    def total_balance(self) -> Money:
        """Sum of all account balances."""
        return sum(account.balance for account in self.accounts.values())

    def export_account_history(self, account_id: int) -> List[Payment]:
        """
        Collect the payment history of one account.

        Payments are returned in storage order, which is insertion order
        (not necessarily chronological if an import reordered entries).
        The returned payments are copies; mutating them does not touch
        the ledger.

        Args:
            account_id: Account whose payments to collect

        Returns:
            List of payment copies, possibly empty

        Raises:
            AccountNotFound: If the account does not exist
        """
        self.find_account_by_id(account_id)
        return [
            payment.copy()
            for payment in self.payments.values()
            if payment.account_id == account_id
        ]

    # ========================================================================
    # ACCOUNTS (Mutating)
    # ========================================================================

    def register_account(self, phone: Phone) -> Account:
        """
        Register a new zero-balance account.

        Args:
            phone: Phone number for the account

        Returns:
            The new Account, with the next sequential ID

        Raises:
            PhoneAlreadyRegistered: If another account already uses this phone
        """
        if phone in self._accounts_by_phone:
            raise PhoneAlreadyRegistered(f"Phone {phone} already registered")
        self._next_account_id += 1
        account = Account(id=self._next_account_id, phone=phone, balance=0)
        self.accounts[account.id] = account
        self._accounts_by_phone[phone] = account.id
        self.log("📝", f"Registered account #{account.id} ({phone})")
        return account

    def deposit(self, account_id: int, amount: Money) -> None:
        """
        Credit an account.

        Raises:
            AmountMustBePositive: If amount <= 0
            AccountNotFound: If the account does not exist
        """
        if amount <= 0:
            raise AmountMustBePositive(f"Amount must be positive, got {amount}")
        account = self.find_account_by_id(account_id)
        account.balance += amount
        self.log("✓", f"Deposit {amount} to #{account_id}, balance {account.balance}")

    # ========================================================================
    # PAYMENTS (Mutating)
    # ========================================================================

    def pay(self, account_id: int, amount: Money, category: PaymentCategory) -> Payment:
        """
        Debit an account and record the payment.

        Validation order: amount first, then account, then balance. Nothing
        is changed unless all checks pass.

        Args:
            account_id: Account to debit
            amount: Amount in minor units
            category: Payment tag

        Returns:
            The new Payment with status IN_PROGRESS

        Raises:
            AmountMustBePositive: If amount <= 0
            AccountNotFound: If the account does not exist
            InsufficientFunds: If the balance is lower than amount
        """
        if amount <= 0:
            raise AmountMustBePositive(f"Amount must be positive, got {amount}")
        account = self.find_account_by_id(account_id)
        if account.balance < amount:
            self.log("✗", f"Payment of {amount} from #{account_id} rejected: balance {account.balance}")
            raise InsufficientFunds(
                f"Account {account_id} has {account.balance}, needs {amount}"
            )
        account.balance -= amount
        payment = Payment(
            id=str(uuid.uuid4()),
            account_id=account_id,
            amount=amount,
            category=category,
            status=PaymentStatus.IN_PROGRESS,
        )
        self.payments[payment.id] = payment
        self.log("✓", f"Payment {payment.id} of {amount} from #{account_id} [{category}]")
        return payment

    def reject(self, payment_id: str) -> None:
        """
        Fail a payment and credit its amount back to the account.

        Rejecting a payment that already failed credits the amount a second
        time unless the ledger was created with strict_reject=True, in which
        case the call does nothing.

        Raises:
            PaymentNotFound: If the payment does not exist
            AccountNotFound: If the payment's account does not exist
        """
        payment = self.find_payment_by_id(payment_id)
        account = self.find_account_by_id(payment.account_id)
        if self.strict_reject and payment.status == PaymentStatus.FAIL:
            self.log("⚠️", f"Payment {payment_id} already rejected")
            return
        payment.status = PaymentStatus.FAIL
        account.balance += payment.amount
        self.log("✓", f"Rejected payment {payment_id}, #{account.id} balance {account.balance}")

    def repeat(self, payment_id: str) -> Payment:
        """
        Issue a new payment with the same account, amount and category.

        The original's status is not copied; the new payment starts
        IN_PROGRESS like any other.

        Raises:
            PaymentNotFound: If the original payment does not exist
            AmountMustBePositive, AccountNotFound, InsufficientFunds: From pay()
        """
        original = self.find_payment_by_id(payment_id)
        return self.pay(original.account_id, original.amount, original.category)

    # ========================================================================
    # FAVORITES (Mutating)
    # ========================================================================

    def favorite_payment(self, payment_id: str, name: str) -> Favorite:
        """
        Save a payment as a named template.

        Raises:
            PaymentNotFound: If the payment does not exist
        """
        payment = self.find_payment_by_id(payment_id)
        favorite = Favorite(
            id=str(uuid.uuid4()),
            account_id=payment.account_id,
            name=name,
            amount=payment.amount,
            category=payment.category,
        )
        self.favorites[favorite.id] = favorite
        self.log("📝", f"Favorite {favorite.id} '{name}' from payment {payment_id}")
        return favorite

    def pay_from_favorite(self, favorite_id: str) -> Payment:
        """
        Issue a payment from a favorite template.

        Raises:
            FavoriteNotFound: If the favorite does not exist
            AmountMustBePositive, AccountNotFound, InsufficientFunds: From pay()
        """
        favorite = self.find_favorite_by_id(favorite_id)
        return self.pay(favorite.account_id, favorite.amount, favorite.category)

    # ========================================================================
    # RESTORE (Mutating, used by the serializer)
    # ========================================================================

    def restore_account(self, account_id: int, phone: Phone, balance: Money) -> Account:
        """
        Insert an account with a known ID, bypassing the duplicate phone check.

        An existing account with the same ID is replaced. The ID counter is
        moved forward so later registrations never reuse a restored ID.
        """
        previous = self.accounts.get(account_id)
        if previous is not None:
            self._unindex_phone(previous.phone, account_id)
        account = Account(id=account_id, phone=phone, balance=balance)
        self.accounts[account_id] = account
        self._accounts_by_phone[phone] = account_id
        self._next_account_id = max(self._next_account_id, account_id)
        return account

    def update_account(self, account_id: int, phone: Phone, balance: Money) -> Account:
        """
        Overwrite the phone and balance of an existing account in place.

        Raises:
            AccountNotFound: If the account does not exist
        """
        account = self.find_account_by_id(account_id)
        if account.phone != phone:
            old_phone = account.phone
            account.phone = phone
            self._unindex_phone(old_phone, account_id)
            self._accounts_by_phone[phone] = account_id
        account.balance = balance
        return account

    def merge_accounts(self, records: List[Tuple[int, Phone, Money]]) -> int:
        """
        Reconcile (id, phone, balance) records with the stored accounts.

        A record whose ID exists overwrites that account. Any other record is
        registered by phone and may receive a different ID than the one given.
        All records are checked before any is applied.

        Returns:
            Number of records applied

        Raises:
            PhoneAlreadyRegistered: If a record to be registered carries a
                phone already held by an account (stored or earlier in records)
        """
        holders: Dict[Phone, int] = {}
        phone_of: Dict[int, Phone] = {}
        for account in self.accounts.values():
            phone_of[account.id] = account.phone
            holders[account.phone] = holders.get(account.phone, 0) + 1
        next_id = self._next_account_id
        for account_id, phone, _ in records:
            if account_id in phone_of:
                holders[phone_of[account_id]] -= 1
            else:
                if holders.get(phone, 0) > 0:
                    raise PhoneAlreadyRegistered(f"Phone {phone} already registered")
                next_id += 1
                account_id = next_id
            phone_of[account_id] = phone
            holders[phone] = holders.get(phone, 0) + 1

        for account_id, phone, balance in records:
            if account_id not in self.accounts:
                account_id = self.register_account(phone).id
            self.update_account(account_id, phone, balance)
        return len(records)

    def restore_payment(self, payment: Payment) -> None:
        """Insert a payment as-is, replacing any payment with the same ID."""
        self.payments[payment.id] = payment

    def update_payment(self, payment: Payment) -> Payment:
        """
        Copy a payment's fields onto the stored payment with the same ID.

        The stored object is kept, so references to it see the new values.
        Balances are not adjusted.

        Raises:
            PaymentNotFound: If no payment has this ID
        """
        existing = self.find_payment_by_id(payment.id)
        existing.account_id = payment.account_id
        existing.amount = payment.amount
        existing.category = payment.category
        existing.status = payment.status
        return existing

    def restore_favorite(self, favorite: Favorite) -> None:
        """Insert a favorite as-is, replacing any favorite with the same ID."""
        self.favorites[favorite.id] = favorite

    def _unindex_phone(self, phone: Phone, account_id: int) -> None:
        # Several accounts may share a phone after a restore. Keep the phone
        # indexed while any other account still holds it.
        if self._accounts_by_phone.get(phone) != account_id:
            return
        del self._accounts_by_phone[phone]
        for other in self.accounts.values():
            if other.phone == phone and other.id != account_id:
                self._accounts_by_phone[phone] = other.id
                break

    # ========================================================================
    # LEDGER OPERATIONS
    # ========================================================================

    def clone(self) -> Ledger:
        """
        Create a deep copy of this ledger.

        All state is fully independent: modifications to the clone will not
        affect the original ledger, and vice versa. Favorites are immutable
        and are shared.

        Returns:
            A new Ledger instance with identical state
        """
        cloned = Ledger.__new__(Ledger)
        cloned.name = self.name
        cloned.verbose = self.verbose
        cloned.strict_reject = self.strict_reject
        cloned.accounts = {
            account_id: replace(a)
            for account_id, a in self.accounts.items()
        }
        cloned.payments = {
            payment_id: p.copy() for payment_id, p in self.payments.items()
        }
        cloned.favorites = dict(self.favorites)
        cloned._accounts_by_phone = dict(self._accounts_by_phone)
        cloned._next_account_id = self._next_account_id
        return cloned
