"""
Balance Service - Source Package

Applies credit/debit transactions to a user's balance held in a single
base currency.

DESIGN PRINCIPLES:
1. Validate first, convert second, touch the balance last
2. A failed transaction leaves no trace in balance or history
3. Business failures are values, not surprises
4. Every collaborator is swappable
"""

__version__ = "1.0.0"
__author__ = "Balance Service Team"
