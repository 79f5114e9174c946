"""
Kiwi Ledger - Source Package

A shared household-expense ledger backed by a Google Sheet.

DESIGN PRINCIPLES:
1. The spreadsheet is the database; nothing is persisted locally
2. Bad rows are reported, never fatal
3. Amounts are approximate display strings until aggregation
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Kiwi Ledger Team"
