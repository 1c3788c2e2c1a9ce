"""
wallet - In-memory Wallet Ledger

Accounts, payments and favorite payment templates, with text-file
persistence and chunked history export.

Usage:
    from wallet import Ledger, export_dump, import_dump, history_to_files

    ledger = Ledger("main")
    account = ledger.register_account("+992880806776")
    ledger.deposit(account.id, 1_000_000)

    payment = ledger.pay(account.id, 100_000, "auto")
    favorite = ledger.favorite_payment(payment.id, "Car loan")
    ledger.pay_from_favorite(favorite.id)

    # Persist and reload
    export_dump(ledger, "data")
    restored = Ledger("restored")
    import_dump(restored, "data")

    # Export one account's history, two payments per file
    history_to_files(ledger.export_account_history(account.id), "data", 2)
"""

# Core types
from .core import (
    Account,
    Payment,
    Favorite,
    PaymentStatus,
    Phone,
    Money,
    PaymentCategory,
    LedgerError,
    ValidationError,
    AmountMustBePositive,
    NotFound,
    AccountNotFound,
    PaymentNotFound,
    FavoriteNotFound,
    InsufficientFunds,
    PhoneAlreadyRegistered,
    DumpParseError,
    StorageError,
    ACCOUNTS_DUMP,
    PAYMENTS_DUMP,
    FAVORITES_DUMP,
    DEFAULT_CHUNK_SIZE,
)

# Ledger
from .ledger import Ledger

# Persistence
from .serializer import (
    export_to_file,
    import_from_file,
    export_dump,
    import_dump,
)

# History export
from .history import history_to_files, chunk_file_name


__all__ = [
    # Core
    'Account', 'Payment', 'Favorite', 'PaymentStatus',
    'Phone', 'Money', 'PaymentCategory',
    'LedgerError', 'ValidationError', 'AmountMustBePositive',
    'NotFound', 'AccountNotFound', 'PaymentNotFound', 'FavoriteNotFound',
    'InsufficientFunds', 'PhoneAlreadyRegistered',
    'DumpParseError', 'StorageError',
    'ACCOUNTS_DUMP', 'PAYMENTS_DUMP', 'FAVORITES_DUMP', 'DEFAULT_CHUNK_SIZE',
    # Ledger
    'Ledger',
    # Persistence
    'export_to_file', 'import_from_file', 'export_dump', 'import_dump',
    # History
    'history_to_files', 'chunk_file_name',
]
