from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from fin_schemas import FinancialRow


def format_amount(value: Decimal | None, placeholder: str = "—", decimals: int = 2) -> str:
    """Render an amount for display; absent values become ``placeholder``, never ``0``."""
    if value is None:
        return placeholder
    return f"{value:,.{decimals}f}"


def format_comments(per_facility_values: Mapping[str, FinancialRow | None]) -> str:
    """Join the non-empty facility comments of one report row, labelled by facility."""
    parts = []
    for name, row in per_facility_values.items():
        if row is not None and row.comment and row.comment.strip():
            parts.append(f"{name}: {row.comment.strip()}")
    return "; ".join(parts)
