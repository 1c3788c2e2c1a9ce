"""
history.py - Chunked export of an account's payment history

Writes a sequence of payments (usually from Ledger.export_account_history)
to one or more files using the payments.dump line format:

    len(payments) == 0            no files
    len(payments) <= chunk_size    payments.dump
    otherwise                      payments1.dump, payments2.dump, ...

Chunks are cut by a running counter: a file is flushed when it holds exactly
chunk_size records, or at the last payment if fewer remain. When the last
payment lands exactly on a chunk boundary no empty trailing file is written.
"""

from __future__ import annotations
import os
from typing import List, Sequence

from . import codec
from .core import Payment, PAYMENTS_DUMP, ValidationError
from .serializer import write_file


def chunk_file_name(index: int) -> str:
    """Name of the index-th chunk file (1-based): payments1.dump, ..."""
    stem, ext = os.path.splitext(PAYMENTS_DUMP)
    return f"{stem}{index}{ext}"


def _export_payments(payments: Sequence[Payment], path: str) -> None:
    write_file(path, codec.encode_lines(codec.encode_payment(p) for p in payments))


def history_to_files(
    payments: Sequence[Payment],
    directory: str,
    chunk_size: int,
    verbose: bool = False
) -> List[str]:
    """
    Split payments across files of at most chunk_size records.

    Args:
        payments: Payments to export, written in the given order
        directory: Existing directory to write into
        chunk_size: Maximum number of records per file
        verbose: Print a line for every file written

    Returns:
        Paths of the files written, in order

    Raises:
        ValidationError: If chunk_size < 1
        StorageError: If a file cannot be written. Files written before
            the failure are left in place.
    """
    if chunk_size < 1:
        raise ValidationError(f"chunk_size must be at least 1, got {chunk_size}")

    written: List[str] = []
    if not payments:
        return written

    if len(payments) <= chunk_size:
        path = os.path.join(directory, PAYMENTS_DUMP)
        _export_payments(payments, path)
        written.append(path)
    else:
        total = len(payments)
        file_index = 1
        flushed = 0
        for processed in range(1, total + 1):
            path = os.path.join(directory, chunk_file_name(file_index))
            if processed == total and processed - flushed != chunk_size:
                _export_payments(payments[flushed:processed], path)
                written.append(path)
            if processed - flushed == chunk_size:
                _export_payments(payments[flushed:processed], path)
                written.append(path)
                flushed += chunk_size
                file_index += 1

    if verbose:
        for path in written:
            print(f"💾 Exported history chunk {path}")
    return written
