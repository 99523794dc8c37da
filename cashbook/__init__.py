"""
Cashbook

A single-user personal ledger: income and expense transactions,
time-window views, running totals, and a small calculator for
working out amounts before they are recorded.

DESIGN PRINCIPLES:
1. The store is the only owner of transaction records
2. Fail early, fail visibly
3. No silent corrections
4. Every mutation is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Cashbook Team"
