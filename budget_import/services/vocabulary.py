from __future__ import annotations

from types import MappingProxyType

"""Fixed lookup tables used by the extraction stages.

Built once at import time and read-only afterwards. Synonyms are stored in
normalized form (see excel.cells.normalize_header) and checked in the order
listed; concept order matters for tie-breaking in column mapping.
"""

# Label used as vendor for the estimator's own company
INTERNAL_VENDOR = "RCG"

HEADER_SYNONYMS = MappingProxyType({
    "item": ("item", "items", "scope", "description", "desc", "line item", "task", "work item"),
    "subcontractor": ("subcontractor", "sub contractor", "vendor", "trade", "company", "contractor"),
    "labor": ("labor", "labour", "labor cost", "labor $", "labor amt", "labor amount", "labor total"),
    "material": ("material", "materials", "mat", "material cost", "material $", "mat cost"),
    "sub": ("sub", "subs", "sub cost", "sub $", "sub amount", "subcontract", "subcontract cost", "sub total"),
    "markup": ("markup", "mark up", "mu", "margin %", "markup %", "mark-up"),
    "total": ("total", "cost total", "total cost", "ext", "extended"),
    "total_with_markup": (
        "total with mark up", "total w markup", "total w/ mark up", "sell", "price", "sell price", "total price",
    ),
    "profit": ("profit", "margin $", "gross profit", "gp"),
})

# Header-row scoring weight per concept; concepts not listed score 1
HEADER_WEIGHTS = MappingProxyType({
    "item": 5.0,
    "labor": 3.0,
    "material": 3.0,
    "sub": 3.0,
    "markup": 3.0,
    "total": 3.0,
    "subcontractor": 2.0,
})

# Concept -> BudgetColumns field. Concepts absent here are recognised but not mapped.
CONCEPT_FIELDS = MappingProxyType({
    "item": "item_col",
    "subcontractor": "subcontractor_col",
    "labor": "labor_col",
    "material": "material_col",
    "sub": "sub_col",
    "total": "total_col",
    "markup": "markup_col",
    "total_with_markup": "total_with_markup_col",
})

# Any of these in a row's joined text ends the data table at that row
STOP_MARKERS = (
    "expenses",
    "expense tracking",
    "expense log",
    "rcg labor",
    "labor tracking",
    "timecard",
    "payroll",
    "subcontractor expenses",
    "sub expenses",
    "reconciliation",
    "total cost",
    "total contract",
    "total job proposal",
    "construction contract",
    "terms and conditions",
    "signature",
    "hereby",
    "contingency",
)

SUMMARY_INDICATORS = ("total", "subtotal", "summary", "grand total")

MANAGEMENT_KEYWORDS = ("supervision", "management", "project manager")
