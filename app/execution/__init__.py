"""Execution statement template, roll-up totals and ingestion."""

from .template import generate_empty_financial_template
from .totals import apply_computed_lines, calculate_hierarchical_totals, normalize_facility_tree

__all__ = [
    "generate_empty_financial_template",
    "calculate_hierarchical_totals",
    "apply_computed_lines",
    "normalize_facility_tree",
]
