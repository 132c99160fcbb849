"""Deterministic budget sheet import.

Turns a human-authored construction budget spreadsheet into normalized,
priced line items (labor, material, subcontractor, management).
"""

__version__ = "0.1.0"
