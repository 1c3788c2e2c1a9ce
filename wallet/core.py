"""
Core types for the wallet ledger.

This module provides the foundational data structures for the ledger:
1. Type aliases: Phone, Money, PaymentCategory
2. Enums: PaymentStatus
3. Entities: Account, Payment, Favorite
4. Exceptions: LedgerError and domain-specific error types
5. Constants: dump file names, delimiters, default chunk size

Money is always an int in minor currency units (e.g. cents).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum


# ============================================================================
# CONSTANTS
# ============================================================================

# File names used by the directory dump format.
ACCOUNTS_DUMP = "accounts.dump"
PAYMENTS_DUMP = "payments.dump"
FAVORITES_DUMP = "favorites.dump"

# Delimiters shared by every text format. Neither is escaped.
FIELD_SEPARATOR = ";"
RECORD_SEPARATOR = "|"

# Records per file used by history exports when the caller has no preference.
DEFAULT_CHUNK_SIZE = 100


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Phone number identifying an account, e.g. "+992880806776".
Phone = str

# Amount in minor currency units.
Money = int

# Free-form payment tag, e.g. "auto" or "food".
PaymentCategory = str


# ============================================================================
# ENUMS
# ============================================================================

class PaymentStatus(Enum):
    """
    Lifecycle state of a payment.

    IN_PROGRESS: Payment was debited and has not been settled or rejected.
    DONE: Payment completed.
    FAIL: Payment was rejected and its amount credited back.

    The values are the tokens written to dump files.
    """
    IN_PROGRESS = "INPROGRESS"
    DONE = "OK"
    FAIL = "FAIL"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class ValidationError(LedgerError, ValueError):
    """Raised when an argument fails validation."""
    pass


class AmountMustBePositive(ValidationError):
    """Raised when a deposit or payment amount is zero or negative."""
    pass


class NotFound(LedgerError, LookupError):
    """Raised when a lookup by ID finds nothing."""
    pass


class AccountNotFound(NotFound):
    """Raised when no account has the requested ID."""
    pass


class PaymentNotFound(NotFound):
    """Raised when no payment has the requested ID."""
    pass


class FavoriteNotFound(NotFound):
    """Raised when no favorite has the requested ID."""
    pass


class InsufficientFunds(LedgerError):
    """Raised when a payment exceeds the account balance."""
    pass


class PhoneAlreadyRegistered(LedgerError):
    """Raised when registering a phone that already belongs to an account."""
    pass


class DumpParseError(LedgerError, ValueError):
    """Raised when a persisted record cannot be decoded."""
    pass


class StorageError(LedgerError, OSError):
    """Raised when a ledger file cannot be read or written."""
    pass


# ============================================================================
# ENTITIES
# ============================================================================

@dataclass(slots=True)
class Account:
    """
    A balance-holding entity.

    Attributes:
        id: Sequential identifier assigned by the ledger (starts at 1).
        phone: Phone number, unique across the ledger.
        balance: Current balance in minor units.

    Accounts are mutable: the ledger updates balance in place, so an
    Account returned by register_account() always reflects current state.
    """
    id: int
    phone: Phone
    balance: Money = 0

    def __repr__(self) -> str:
        return f"Account(#{self.id} {self.phone}: {self.balance})"


@dataclass(slots=True)
class Payment:
    """
    A debit against an account.

    Attributes:
        id: Generated identifier (uuid4 string).
        account_id: Account debited by this payment.
        amount: Debited amount in minor units (always > 0).
        category: Free-form tag.
        status: Current PaymentStatus.
    """
    id: str
    account_id: int
    amount: Money
    category: PaymentCategory
    status: PaymentStatus = PaymentStatus.IN_PROGRESS

    def copy(self) -> Payment:
        """Return a detached copy of this payment."""
        return replace(self)

    def __repr__(self) -> str:
        return (
            f"Payment({self.id[:8]} #{self.account_id} {self.amount} "
            f"{self.category} [{self.status.value}])"
        )


@dataclass(frozen=True, slots=True)
class Favorite:
    """
    A named payment template.

    Attributes:
        id: Generated identifier (uuid4 string).
        account_id: Account to debit when the template is used.
        name: User-supplied label.
        amount: Amount in minor units.
        category: Free-form tag.
    """
    id: str
    account_id: int
    name: str
    amount: Money
    category: PaymentCategory
