"""
Expense Manager - Source Package

A personal expense and savings tracker for a single user.

DESIGN PRINCIPLES:
1. State is an explicit value, never a hidden global
2. Transitions are pure; persistence is an explicit step after them
3. Fail early, fail visibly - nothing is written when validation fails
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Manager Team"
