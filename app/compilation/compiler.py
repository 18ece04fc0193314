"""Cross-facility compilation of execution statements.

The compiler walks the statement template, looks every template row up in each
facility's tree and sums the matches into a synthetic total row. Facility trees
must already be normalized; nothing here recomputes per-facility totals.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from app.common.exceptions import DuplicateFacilityError
from app.execution.tree import index_tree, walk
from fin_schemas import AMOUNT_FIELDS, FacilityData, FinancialRow, RenderRow
from observability.logging_config import get_logger

logger = get_logger(__name__)


def find_row_by_id(tree: Sequence[FinancialRow], row_id: str) -> FinancialRow | None:
    """Depth-first (pre-order) search; ``None`` when the id is not in ``tree``."""
    for row in tree:
        if row.id == row_id:
            return row
        if row.children:
            found = find_row_by_id(row.children, row_id)
            if found is not None:
                return found
    return None


def _sum_matches(matches: Sequence[FinancialRow]) -> FinancialRow | None:
    if not matches:
        return None

    first = matches[0]
    totals: dict[str, Decimal | None] = {}
    for name in AMOUNT_FIELDS:
        values = [getattr(row, name) for row in matches if getattr(row, name) is not None]
        # A field nobody reported stays absent rather than becoming 0.
        totals[name] = sum(values, Decimal("0")) if values else None

    return FinancialRow(
        id=first.id,
        title=first.title,
        is_category=first.is_category,
        children=None,
        **totals,
    )


def compute_total_row(facilities: Sequence[FacilityData], row_id: str) -> FinancialRow | None:
    """Sum ``row_id`` across every facility that has it.

    Facilities lacking the id contribute nothing. Returns ``None`` when no
    facility has the id. Identity fields come from the first match.
    """
    matches = []
    for facility in facilities:
        row = find_row_by_id(facility.data, row_id)
        if row is not None:
            matches.append(row)
    return _sum_matches(matches)


def _check_unique_names(facilities: Sequence[FacilityData]) -> None:
    seen: set[str] = set()
    for facility in facilities:
        if facility.facility_name in seen:
            raise DuplicateFacilityError(facility.facility_name)
        seen.add(facility.facility_name)


def compile_report(
    template: Sequence[FinancialRow],
    facilities: Sequence[FacilityData],
) -> list[RenderRow]:
    """Flatten ``template`` into render rows with per-facility and total values.

    Exactly one row per template node, in template pre-order, whatever
    facilities are supplied.
    """
    _check_unique_names(facilities)

    # Index once per facility instead of a tree search per (row, facility).
    indexes = [(facility.facility_name, index_tree(facility.data)) for facility in facilities]

    rows: list[RenderRow] = []
    for node, depth in walk(template):
        per_facility = {name: index.get(node.id) for name, index in indexes}
        matches = [row for row in per_facility.values() if row is not None]
        if len(matches) < len(per_facility):
            logger.debug(
                "Row missing for some facilities",
                extra={
                    "row_id": node.id,
                    "facilities": [name for name, row in per_facility.items() if row is None],
                },
            )
        rows.append(
            RenderRow(
                id=node.id,
                title=node.title,
                is_category=node.is_category,
                depth=depth,
                per_facility_values=per_facility,
                total_row=_sum_matches(matches),
            )
        )

    logger.info(
        "Compiled report",
        extra={"facilities": len(facilities), "rows": len(rows), "missing_cells": count_missing_cells(rows)},
    )
    return rows


def count_missing_cells(rows: Sequence[RenderRow]) -> int:
    return sum(
        1 for row in rows for value in row.per_facility_values.values() if value is None
    )
