"""Ingestion boundary for facility statement data.

Raw payloads are validated into ``FinancialRow`` forests here and reconciled
against the statement template before any aggregation runs, so structural
problems surface at the edge instead of as blank cells in the report.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError

from app.common.exceptions import MalformedTreeError, StructuralMismatchError
from config.settings import ReconciliationMode
from fin_schemas import AMOUNT_FIELDS, FacilityData, FinancialRow
from observability.logging_config import get_logger

from .tree import index_tree, parent_map, sibling_order, walk

logger = get_logger(__name__)

_ROWS_ADAPTER = TypeAdapter(list[FinancialRow])
_FACILITIES_ADAPTER = TypeAdapter(list[FacilityData])


def parse_facility_tree(facility: str | None, payload: Any) -> list[FinancialRow]:
    """Validate a raw list of row mappings into a ``FinancialRow`` forest."""
    try:
        return _ROWS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise MalformedTreeError(facility, f"invalid financial rows: {exc}") from exc


def parse_facilities(payload: Any) -> list[FacilityData]:
    """Validate the ``[{facilityName, data}]`` envelope handed over by the data source."""
    try:
        return _FACILITIES_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise MalformedTreeError(None, f"invalid facility payload: {exc}") from exc


def find_structural_mismatches(
    template: Sequence[FinancialRow],
    rows: Sequence[FinancialRow],
) -> tuple[list[str], list[str]]:
    """Return ``(unknown_ids, misplaced_ids)`` of ``rows`` relative to ``template``.

    Ids missing from ``rows`` are not mismatches. A row is misplaced when its
    parent differs from the template's, or when it sits at a different position
    among the siblings both trees share.
    """
    template_parents = parent_map(template)
    template_order = sibling_order(template)
    facility_parents = parent_map(rows)
    facility_order = sibling_order(rows)

    unknown: list[str] = []
    misplaced: list[str] = []
    for row, _ in walk(rows):
        if row.id not in template_parents:
            unknown.append(row.id)
        elif facility_parents[row.id] != template_parents[row.id] and row.id not in misplaced:
            misplaced.append(row.id)

    for parent, ids in facility_order.items():
        known = [row_id for row_id in ids if template_parents.get(row_id, object()) == parent]
        present = set(known)
        expected = [row_id for row_id in template_order.get(parent, []) if row_id in present]
        for actual_id, expected_id in zip(known, expected):
            if actual_id != expected_id and actual_id not in misplaced:
                misplaced.append(actual_id)

    return unknown, misplaced


def _coerce(
    template: Sequence[FinancialRow],
    index: dict[str, FinancialRow],
    keep_ids: Collection[str],
) -> list[FinancialRow]:
    rows: list[FinancialRow] = []
    for node in template:
        children = None
        if node.children is not None:
            children = _coerce(node.children, index, keep_ids)
        source = index.get(node.id)
        if source is None and not children and node.id not in keep_ids:
            continue

        update: dict[str, Any] = {"children": children}
        if source is not None:
            update.update({name: getattr(source, name) for name in AMOUNT_FIELDS})
            update["comment"] = source.comment
        rows.append(node.model_copy(update=update))
    return rows


def reconcile_with_template(
    template: Sequence[FinancialRow],
    facility: str,
    rows: Sequence[FinancialRow],
    *,
    mode: ReconciliationMode = "coerce",
    keep_ids: Collection[str] = (),
) -> list[FinancialRow]:
    """Make a facility tree safe to aggregate against ``template``.

    ``strict`` raises ``StructuralMismatchError`` on unknown or misplaced rows
    and otherwise returns the rows untouched. ``coerce`` rebuilds the tree in
    template shape and order, taking titles from the template and amounts from
    the facility, and drops rows the template does not know. Rows listed in
    ``keep_ids`` are kept in ``coerce`` mode even when the facility does not
    report them (computed lines, which facilities never author).
    """
    unknown, misplaced = find_structural_mismatches(template, rows)

    if mode == "strict":
        if unknown or misplaced:
            raise StructuralMismatchError(facility, unknown_ids=unknown, misplaced_ids=misplaced)
        return list(rows)

    if unknown:
        logger.warning(
            "Dropping rows not present in the statement template",
            extra={"facility": facility, "unknown_ids": unknown},
        )
    if misplaced:
        logger.info(
            "Re-ordering facility rows to match the statement template",
            extra={"facility": facility, "misplaced_ids": misplaced},
        )
    return _coerce(template, index_tree(rows), keep_ids)
