"""Cross-facility compiled report."""

from .compiler import compile_report, compute_total_row, find_row_by_id
from .service import CompiledReportService

__all__ = [
    "find_row_by_id",
    "compute_total_row",
    "compile_report",
    "CompiledReportService",
]
