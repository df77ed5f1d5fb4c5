"""
Personal Ledger - Source Package

A signed-transaction ledger with calendar aggregation and a
running-balance waterfall chart.

DESIGN PRINCIPLES:
1. The transaction history is append-only
2. Fail early, fail visibly (no silent defaults for bad modes or records)
3. Aggregation and balance folding are pure functions
4. Every load and save is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
