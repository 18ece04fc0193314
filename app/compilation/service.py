"""Compiled report service: ingestion, normalization and compilation in one place."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from app.execution.ingest import parse_facilities, reconcile_with_template
from app.execution.template import generate_empty_financial_template
from app.execution.totals import COMPUTED_LINES, normalize_facility_tree
from config.settings import CompiledReportSettings, get_compiled_report_settings
from fin_schemas import CompiledReport, FacilityData, FinancialRow
from observability.logging_config import get_logger
from observability.metrics import get_metrics_client
from observability.timing import facility_tags, timed

from .compiler import compile_report, count_missing_cells

logger = get_logger(__name__)


class CompiledReportService:
    """Build the cross-facility compiled execution report.

    Stateless apart from its settings; every call builds a fresh template and
    fresh normalized trees, so one instance can serve concurrent callers.
    """

    def __init__(self, settings: CompiledReportSettings | None = None):
        self.settings = settings or get_compiled_report_settings()

    def _computed_ids(self) -> frozenset[str]:
        if not self.settings.apply_computed_lines:
            return frozenset()
        return frozenset(line.target for line in COMPUTED_LINES)

    def normalize(
        self,
        facility: FacilityData,
        template: Sequence[FinancialRow] | None = None,
    ) -> FacilityData:
        """Reconcile a facility tree with the template and recompute its totals."""
        if template is None:
            template = generate_empty_financial_template()
        rows = reconcile_with_template(
            template,
            facility.facility_name,
            facility.data,
            mode=self.settings.reconciliation_mode,
            keep_ids=self._computed_ids(),
        )
        rows = normalize_facility_tree(rows, computed_lines=self.settings.apply_computed_lines)
        return facility.model_copy(update={"data": rows})

    def build(self, facilities: Sequence[FacilityData]) -> CompiledReport:
        template = generate_empty_financial_template()

        tags = facility_tags([facility.facility_name for facility in facilities])

        # Facilities are independent; order of normalization does not matter.
        with timed("compiled_report.normalize", tags):
            normalized = [self.normalize(facility, template) for facility in facilities]

        with timed("compiled_report.compile", tags) as timing:
            rows = compile_report(template, normalized)

        missing = count_missing_cells(rows)
        if missing:
            get_metrics_client().incr("compiled_report.missing_rows", value=missing)

        logger.info(
            "Built compiled report",
            extra={
                "facilities": [facility.facility_name for facility in normalized],
                "rows": len(rows),
                "compile_ms": round(timing.elapsed_ms, 3),
            },
        )
        return CompiledReport(
            facility_names=[facility.facility_name for facility in normalized],
            rows=rows,
        )

    def build_from_payload(self, payload: Any) -> CompiledReport:
        return self.build(parse_facilities(payload))
