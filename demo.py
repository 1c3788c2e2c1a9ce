#!/usr/bin/env python3
"""
demo.py - Walkthrough: Wallet Ledger Step by Step

Registers two accounts, funds them, makes payments, and exports the second
account's history one payment per file. Every ledger mutation is printed.

Run:
    python demo.py                 # Writes history chunks to ./data
    python demo.py --dir /tmp/out  # Writes history chunks to /tmp/out
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import argparse
import os

from wallet import (
    Ledger, Account, Payment, LedgerError,
    export_dump, history_to_files,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoAccount:
    """An account to register, its opening deposit and payments to make."""
    phone: str
    balance: int
    payments: List[Tuple[int, str]] = field(default_factory=list)


@dataclass
class DemoConfig:
    """Configuration for the walkthrough. Modify these to experiment."""
    accounts: List[DemoAccount] = field(default_factory=lambda: [
        DemoAccount("+992880806776", 10_000_00, [(1000_00, "auto")]),
        DemoAccount("+992935444994", 10_000_00, [(1000_00, "auto"), (1020_00, "auto")]),
    ])
    history_account_id: int = 2
    records_per_file: int = 1


CONFIG = DemoConfig()


def add_account(ledger: Ledger, data: DemoAccount) -> Tuple[Account, List[Payment]]:
    """Register, fund and pay from one account."""
    account = ledger.register_account(data.phone)
    ledger.deposit(account.id, data.balance)
    payments = [ledger.pay(account.id, amount, category) for amount, category in data.payments]
    return account, payments


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--dir", default="data", help="output directory")
    args = parser.parse_args()
    os.makedirs(args.dir, exist_ok=True)

    ledger = Ledger("demo", verbose=True)
    try:
        for data in CONFIG.accounts:
            add_account(ledger, data)

        history = ledger.export_account_history(CONFIG.history_account_id)
        written = history_to_files(history, args.dir, CONFIG.records_per_file, verbose=True)
        export_dump(ledger, args.dir)
    except LedgerError as e:
        print(f"✗ {type(e).__name__}: {e}")
        return 1

    print(f"\n{ledger}")
    print(f"History of account #{CONFIG.history_account_id}: {len(history)} payments in {len(written)} files")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
