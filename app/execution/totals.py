"""Roll-up totals for financial statement trees.

All functions here are pure: they build new rows with ``model_copy`` and never
touch the forest they were given.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from fin_schemas import AMOUNT_FIELDS, FinancialRow

from .tree import index_tree

ZERO = Decimal("0")


@dataclass(frozen=True)
class ComputedLine:
    """A statement line derived as ``plus - minus`` instead of a sum of children.

    With ``minus`` unset the line mirrors ``plus``.
    """

    target: str
    plus: str
    minus: str | None = None


COMPUTED_LINES: tuple[ComputedLine, ...] = (
    ComputedLine(target="C", plus="A", minus="B"),
    ComputedLine(target="F", plus="D", minus="E"),
    ComputedLine(target="G3", plus="C"),
)


def is_rollup_row(row: FinancialRow) -> bool:
    # A leaf sent with an empty children list keeps its own figures.
    return row.is_category or bool(row.children)


def sum_amounts(rows: Iterable[FinancialRow]) -> dict[str, Decimal]:
    """Sum every amount field; absent values count as zero."""
    totals = {name: ZERO for name in AMOUNT_FIELDS}
    for row in rows:
        for name in AMOUNT_FIELDS:
            value = getattr(row, name)
            if value is not None:
                totals[name] += value
    return totals


def _roll_up(row: FinancialRow, overrides: Mapping[str, Mapping[str, Decimal]]) -> FinancialRow:
    if row.id in overrides:
        return row.model_copy(update=dict(overrides[row.id]))
    if not is_rollup_row(row):
        return row

    children = None
    if row.children is not None:
        children = [_roll_up(child, overrides) for child in row.children]
    return row.model_copy(update={**sum_amounts(children or []), "children": children})


def calculate_hierarchical_totals(rows: Sequence[FinancialRow]) -> list[FinancialRow]:
    """Recompute every category row as the sum of its direct children.

    Children are resolved before their parent (post-order), so the result is
    consistent at every depth. Leaves are returned as-is, including absent
    amounts. Running this on its own output yields an equal forest.
    """
    return [_roll_up(row, {}) for row in rows]


def apply_computed_lines(
    rows: Sequence[FinancialRow],
    lines: Sequence[ComputedLine] = COMPUTED_LINES,
) -> list[FinancialRow]:
    """Fill derived statement lines and re-sum their ancestors.

    Expects a forest whose category totals are already up to date. Lines are
    evaluated in order, so a later line may read an earlier one (``G3`` reads
    ``C``). A line whose target is not in the forest is skipped; operands
    missing from the forest count as zero.
    """
    index = index_tree(rows)
    overrides: dict[str, dict[str, Decimal]] = {}

    def amount(row_id: str | None, name: str) -> Decimal:
        if row_id in overrides:
            return overrides[row_id][name]
        if row_id not in index:
            return ZERO
        return getattr(index[row_id], name) or ZERO

    for line in lines:
        if line.target not in index:
            continue
        overrides[line.target] = {
            name: amount(line.plus, name) - amount(line.minus, name)
            for name in AMOUNT_FIELDS
        }

    return [_roll_up(row, overrides) for row in rows]


def normalize_facility_tree(rows: Sequence[FinancialRow], *, computed_lines: bool = True) -> list[FinancialRow]:
    normalized = calculate_hierarchical_totals(rows)
    if computed_lines:
        normalized = apply_computed_lines(normalized)
    return normalized
