"""Traversal helpers over financial row forests."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from fin_schemas import FinancialRow


def walk(rows: Sequence[FinancialRow], depth: int = 0) -> Iterator[tuple[FinancialRow, int]]:
    """Yield ``(row, depth)`` in pre-order, parents before their children."""
    for row in rows:
        yield row, depth
        if row.children:
            yield from walk(row.children, depth + 1)


def count_nodes(rows: Sequence[FinancialRow]) -> int:
    return sum(1 for _ in walk(rows))


def index_tree(rows: Sequence[FinancialRow]) -> dict[str, FinancialRow]:
    """Map id -> row; on duplicate ids the first row in pre-order wins."""
    index: dict[str, FinancialRow] = {}
    for row, _ in walk(rows):
        index.setdefault(row.id, row)
    return index


def parent_map(rows: Sequence[FinancialRow], parent: str | None = None) -> dict[str, str | None]:
    parents: dict[str, str | None] = {}
    for row in rows:
        parents.setdefault(row.id, parent)
        if row.children:
            for child_id, child_parent in parent_map(row.children, row.id).items():
                parents.setdefault(child_id, child_parent)
    return parents


def sibling_order(rows: Sequence[FinancialRow], parent: str | None = None) -> dict[str | None, list[str]]:
    """Map parent id (``None`` for the top level) -> ordered child ids."""
    order: dict[str | None, list[str]] = {parent: [row.id for row in rows]}
    for row in rows:
        if row.children:
            for key, ids in sibling_order(row.children, row.id).items():
                order.setdefault(key, ids)
    return order
