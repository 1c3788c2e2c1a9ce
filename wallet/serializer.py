"""
serializer.py - Persist and reload ledger state

Two independent modes:
1. Legacy single file: every account in one '|'-separated string.
2. Directory dump: accounts.dump, payments.dump and favorites.dump.

Export writes whole files in a single write each. There is no rollback
across the files of one export: if a later write fails, earlier files stay.

Import decodes and checks a whole file before applying any of it, so a
malformed record or a phone clash leaves the ledger untouched for that file.
A missing file means there is nothing to import and is not an error.
"""

from __future__ import annotations
import os
from typing import List, Optional

from . import codec
from .core import (
    ACCOUNTS_DUMP, PAYMENTS_DUMP, FAVORITES_DUMP,
    StorageError,
)
from .ledger import Ledger


# ============================================================================
# FILE HELPERS
# ============================================================================

def write_file(path: str, data: str) -> None:
    """
    Write a whole file in one call, replacing any existing content.

    Raises:
        StorageError: If the file cannot be created or written
    """
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(data)
    except OSError as e:
        raise StorageError(f"Cannot write {path}: {e}") from e


def read_file(path: str) -> Optional[str]:
    """
    Read a whole file.

    Returns:
        The file content, or None if the file does not exist

    Raises:
        StorageError: If the file exists but cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError(f"Cannot read {path}: {e}") from e


# ============================================================================
# LEGACY SINGLE FILE
# ============================================================================

def export_to_file(ledger: Ledger, path: str) -> None:
    """
    Write all accounts to a legacy flat file.

    Raises:
        StorageError: If the file cannot be written
    """
    write_file(path, codec.encode_legacy_accounts(ledger.accounts.values()))
    ledger.log("💾", f"Exported {len(ledger.accounts)} accounts to {path}")


def import_from_file(ledger: Ledger, path: str) -> int:
    """
    Append accounts from a legacy flat file.

    Records are added as-is: duplicate IDs replace existing accounts and
    duplicate phones are not checked.

    Returns:
        Number of accounts imported (0 if the file does not exist)

    Raises:
        DumpParseError: If a record is malformed (nothing is imported)
        StorageError: If the file exists but cannot be read
    """
    text = read_file(path)
    if text is None:
        ledger.log("⚠️", f"{path} not found, nothing to import")
        return 0
    records = codec.decode_legacy_accounts(text)
    for account_id, phone, balance in records:
        ledger.restore_account(account_id, phone, balance)
    ledger.log("📂", f"Imported {len(records)} accounts from {path}")
    return len(records)


# ============================================================================
# DIRECTORY DUMP
# ============================================================================

def export_dump(ledger: Ledger, directory: str) -> List[str]:
    """
    Write the ledger's collections to a dump directory.

    A file is only written for a collection with at least one record.

    Args:
        ledger: Ledger to export
        directory: Existing directory to write into

    Returns:
        Paths of the files written

    Raises:
        StorageError: If a file cannot be written
    """
    sections = [
        (ACCOUNTS_DUMP, [codec.encode_account(a) for a in ledger.accounts.values()]),
        (PAYMENTS_DUMP, [codec.encode_payment(p) for p in ledger.payments.values()]),
        (FAVORITES_DUMP, [codec.encode_favorite(f) for f in ledger.favorites.values()]),
    ]
    written = []
    for file_name, lines in sections:
        if not lines:
            continue
        path = os.path.join(directory, file_name)
        write_file(path, codec.encode_lines(lines))
        written.append(path)
        ledger.log("💾", f"Exported {len(lines)} records to {path}")
    return written


def import_dump(ledger: Ledger, directory: str) -> None:
    """
    Load a dump directory into the ledger, reconciling by ID.

    Files are processed in order: accounts, payments, favorites. For each
    record, an entity with the same ID is overwritten in place; otherwise a
    new entity is added. An account that is not found by ID is registered
    by phone and may therefore receive a different ID than the dumped one.

    Raises:
        DumpParseError: If a record is malformed. The failing file is not
            applied; files processed before it stay applied.
        PhoneAlreadyRegistered: If an unknown account ID carries a phone
            that already belongs to another account. No account from the
            file is applied.
        StorageError: If a file exists but cannot be read
    """
    _import_accounts(ledger, os.path.join(directory, ACCOUNTS_DUMP))
    _import_payments(ledger, os.path.join(directory, PAYMENTS_DUMP))
    _import_favorites(ledger, os.path.join(directory, FAVORITES_DUMP))


def _read_lines(ledger: Ledger, path: str) -> Optional[List[str]]:
    text = read_file(path)
    if text is None:
        ledger.log("⚠️", f"{path} not found, nothing to import")
        return None
    return codec.split_lines(text)


def _import_accounts(ledger: Ledger, path: str) -> None:
    lines = _read_lines(ledger, path)
    if lines is None:
        return
    records = [codec.decode_account(line) for line in lines]
    ledger.merge_accounts(records)
    ledger.log("📂", f"Imported {len(records)} accounts from {path}")


def _import_payments(ledger: Ledger, path: str) -> None:
    lines = _read_lines(ledger, path)
    if lines is None:
        return
    payments = [codec.decode_payment(line) for line in lines]
    for payment in payments:
        if payment.id in ledger.payments:
            ledger.update_payment(payment)
        else:
            ledger.restore_payment(payment)
    ledger.log("📂", f"Imported {len(payments)} payments from {path}")


def _import_favorites(ledger: Ledger, path: str) -> None:
    lines = _read_lines(ledger, path)
    if lines is None:
        return
    favorites = [codec.decode_favorite(line) for line in lines]
    for favorite in favorites:
        # Favorites are frozen; overwriting means replacing the stored value
        ledger.restore_favorite(favorite)
    ledger.log("📂", f"Imported {len(favorites)} favorites from {path}")
