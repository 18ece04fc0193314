"""Public schema exports for facility execution reports."""

from .financial import (
    AMOUNT_FIELDS,
    CompiledReport,
    FacilityData,
    FinancialRow,
    RenderRow,
)

__all__ = [
    "AMOUNT_FIELDS",
    "FinancialRow",
    "FacilityData",
    "RenderRow",
    "CompiledReport",
]
