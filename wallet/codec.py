"""
codec.py - Text encoding for persisted ledger records

Pure functions converting entities to and from their delimited text form.
No function in this module touches the filesystem.

Formats:
    Legacy flat file (one string, no newlines):
        <id>;<phone>;<balance>|<id>;<phone>;<balance>|...

    Dump lines (one record per line, newline-terminated):
        accounts.dump   id;phone;balance
        payments.dump   id;account_id;amount;category;status
        favorites.dump  id;account_id;name;amount;category

FORMAT CONSTRAINT: field values are written verbatim. A phone, category or
favorite name containing ';', '|' or a newline produces a record that cannot
be read back. Escaping is deliberately absent so existing files stay
byte-compatible.

Decoders accept one trailing empty field (older dumps end each line with ';').
"""

from __future__ import annotations
from typing import Iterable, List, Tuple
import re

from .core import (
    Account, Payment, Favorite, PaymentStatus,
    FIELD_SEPARATOR, RECORD_SEPARATOR,
    DumpParseError,
)


# ============================================================================
# FIELD HELPERS
# ============================================================================

# Optional sign followed by ASCII digits. int() on its own is more permissive.
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_int(value: str, field_name: str, line: str) -> int:
    if _INTEGER.fullmatch(value) is None:
        raise DumpParseError(
            f"Cannot parse {field_name} {value!r} as integer in record {line!r}"
        )
    return int(value)


def _parse_status(value: str, line: str) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        raise DumpParseError(f"Unknown payment status {value!r} in record {line!r}") from None


def _split(line: str, expected: int) -> List[str]:
    """Split a record into exactly `expected` fields."""
    fields = line.split(FIELD_SEPARATOR)
    if len(fields) == expected + 1 and fields[-1] == "":
        fields.pop()
    if len(fields) != expected:
        raise DumpParseError(
            f"Expected {expected} fields, got {len(fields)} in record {line!r}"
        )
    return fields


def _join(*fields: object) -> str:
    return FIELD_SEPARATOR.join(str(f) for f in fields)


def split_lines(text: str) -> List[str]:
    """
    Split dump text into record lines.

    Reading stops at the first empty line, so a trailing newline (or
    anything after a blank line) is ignored.
    """
    lines = []
    for line in text.split("\n"):
        if not line:
            break
        lines.append(line)
    return lines


# ============================================================================
# LEGACY FLAT FILE
# ============================================================================

def encode_legacy_accounts(accounts: Iterable[Account]) -> str:
    """Encode accounts as '<id>;<phone>;<balance>|' records."""
    return "".join(
        _join(a.id, a.phone, a.balance) + RECORD_SEPARATOR for a in accounts
    )


def decode_legacy_accounts(text: str) -> List[Tuple[int, str, int]]:
    """
    Decode a legacy flat file into (id, phone, balance) tuples.

    Empty records (such as the one after the final '|') are skipped.

    Raises:
        DumpParseError: If a record is malformed
    """
    records = []
    for record in text.split(RECORD_SEPARATOR):
        if record == "":
            continue
        account_id, phone, balance = _split(record, 3)
        records.append((
            _parse_int(account_id, "id", record),
            phone,
            _parse_int(balance, "balance", record),
        ))
    return records


# ============================================================================
# DUMP LINES
# ============================================================================

def encode_account(account: Account) -> str:
    return _join(account.id, account.phone, account.balance)


def decode_account(line: str) -> Tuple[int, str, int]:
    """
    Decode an accounts.dump line into (id, phone, balance).

    Accounts are returned as a tuple rather than an Account because import
    may register them under a different ID.
    """
    account_id, phone, balance = _split(line, 3)
    return (
        _parse_int(account_id, "id", line),
        phone,
        _parse_int(balance, "balance", line),
    )


def encode_payment(payment: Payment) -> str:
    return _join(
        payment.id, payment.account_id, payment.amount,
        payment.category, payment.status.value,
    )


def decode_payment(line: str) -> Payment:
    payment_id, account_id, amount, category, status = _split(line, 5)
    return Payment(
        id=payment_id,
        account_id=_parse_int(account_id, "account_id", line),
        amount=_parse_int(amount, "amount", line),
        category=category,
        status=_parse_status(status, line),
    )


def encode_favorite(favorite: Favorite) -> str:
    return _join(
        favorite.id, favorite.account_id, favorite.name,
        favorite.amount, favorite.category,
    )


def decode_favorite(line: str) -> Favorite:
    favorite_id, account_id, name, amount, category = _split(line, 5)
    return Favorite(
        id=favorite_id,
        account_id=_parse_int(account_id, "account_id", line),
        name=name,
        amount=_parse_int(amount, "amount", line),
        category=category,
    )


def encode_lines(lines: Iterable[str]) -> str:
    """Join encoded records, terminating each with a newline."""
    return "".join(line + "\n" for line in lines)
