"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the wallet ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Balances only change by deposits, payments and rejections
2. uniqueness.py - Sequential account IDs, unique phones, unique payment IDs
3. round_trip.py - Dump export followed by import reproduces the ledger
4. chunking.py - History chunk files partition the input exactly

These tests use hypothesis for property-based testing.
"""
