"""
Budget Tracker - Financial Core

Money, date ranges, categories, expense periods and transactions, plus
the spending reports computed from them.

DESIGN PRINCIPLES:
1. Values are immutable; updates return new values
2. Fail early, fail visibly, with a typed error code
3. No silent corrections or currency conversion
4. Reports are recomputed from stored data, never cached
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Tracker Team"
