from decimal import Decimal

from app.execution.template import generate_empty_financial_template
from app.execution.totals import (
    ComputedLine,
    apply_computed_lines,
    calculate_hierarchical_totals,
    normalize_facility_tree,
)
from app.execution.tree import index_tree, walk
from conftest import category, leaf, set_amounts
from fin_schemas import AMOUNT_FIELDS, FinancialRow


def _nested_forest() -> list[FinancialRow]:
    return [
        category(
            "B",
            [
                category("B01", [leaf("B01-1", q1="10", q2="1.5"), leaf("B01-2", q1="5", cumulative_balance="7")]),
                category("B02", [leaf("B02-1", q3="2.25"), leaf("B02-2")]),
                leaf("B9", q4="100"),
            ],
        ),
        leaf("X1", q1="3"),
    ]


def test_category_sums_children(revenue_template):
    rows = set_amounts(revenue_template, {"grant": {"q1": 100}, "fees": {"q1": 50}})

    totals = calculate_hierarchical_totals(rows)

    assert totals[0].q1 == Decimal("150")
    assert totals[0].q2 == Decimal("0")


def test_totals_hold_at_every_depth():
    totals = calculate_hierarchical_totals(_nested_forest())

    for row, _ in walk(totals):
        if not row.is_category:
            continue
        for name in AMOUNT_FIELDS:
            expected = sum((getattr(child, name) or Decimal("0") for child in row.children), Decimal("0"))
            assert getattr(row, name) == expected

    index = index_tree(totals)
    assert index["B"].q1 == Decimal("15")
    assert index["B"].q4 == Decimal("100")
    assert index["B"].cumulative_balance == Decimal("7")


def test_totals_are_idempotent():
    once = calculate_hierarchical_totals(_nested_forest())
    assert calculate_hierarchical_totals(once) == once


def test_stale_category_values_are_replaced():
    stale = [category("P", [leaf("c1", q1="4"), leaf("c2", q1="6")]).model_copy(update={"q1": Decimal("999")})]
    assert calculate_hierarchical_totals(stale)[0].q1 == Decimal("10")


def test_input_forest_is_not_mutated():
    forest = _nested_forest()
    before = [row.model_dump() for row in forest]

    calculate_hierarchical_totals(forest)

    assert [row.model_dump() for row in forest] == before
    assert forest[0].q1 is None


def test_absent_leaf_amounts_stay_absent():
    totals = calculate_hierarchical_totals(_nested_forest())
    index = index_tree(totals)

    assert index["B02-2"].q1 is None
    assert index["B01-1"].q3 is None
    assert index["B02"].q1 == Decimal("0")


def test_empty_children_total_zero():
    rows = [FinancialRow(id="C", title="C", is_category=True, children=[])]

    totals = calculate_hierarchical_totals(rows)

    assert totals[0].children == []
    assert all(getattr(totals[0], name) == Decimal("0") for name in AMOUNT_FIELDS)


def test_child_order_is_preserved():
    totals = calculate_hierarchical_totals(_nested_forest())
    assert [child.id for child in totals[0].children] == ["B01", "B02", "B9"]


def test_computed_lines_on_statement():
    rows = set_amounts(
        generate_empty_financial_template(),
        {
            "A1": {"q1": 100},
            "A2": {"q1": 50},
            "B01-1": {"q1": 30},
            "D1": {"q1": 80},
            "E2": {"q1": 20},
            "G1": {"q1": 5},
        },
    )

    normalized = normalize_facility_tree(rows)
    index = index_tree(normalized)

    assert index["A"].q1 == Decimal("150")
    assert index["B"].q1 == Decimal("30")
    assert index["C"].q1 == Decimal("120")
    assert index["F"].q1 == Decimal("60")
    assert index["G3"].q1 == Decimal("120")
    assert index["G"].q1 == Decimal("125")
    assert normalize_facility_tree(normalized) == normalized


def test_computed_lines_can_be_disabled():
    rows = set_amounts(generate_empty_financial_template(), {"A1": {"q1": 100}})

    index = index_tree(normalize_facility_tree(rows, computed_lines=False))

    assert index["C"].q1 == Decimal("0")
    assert index["G3"].q1 is None


def test_computed_line_without_target_is_skipped(revenue_template):
    totals = calculate_hierarchical_totals(set_amounts(revenue_template, {"fees": {"q1": 50}}))

    assert apply_computed_lines(totals) == totals
    assert apply_computed_lines(totals, [ComputedLine(target="nope", plus="fees")]) == totals


def test_computed_line_missing_operand_counts_as_zero(revenue_template):
    totals = calculate_hierarchical_totals(set_amounts(revenue_template, {"grant": {"q1": 100}, "fees": {"q1": 50}}))

    result = apply_computed_lines(totals, [ComputedLine(target="fees", plus="grant", minus="refunds")])

    assert index_tree(result)["fees"].q1 == Decimal("100")
    assert result[0].q1 == Decimal("200")


def test_leaf_with_empty_children_keeps_amounts():
    rows = [category("A", [FinancialRow(id="A1", title="A1", q1=Decimal("10"), children=[])])]

    totals = calculate_hierarchical_totals(rows)
    index = index_tree(totals)

    assert index["A1"].q1 == Decimal("10")
    assert index["A1"].q2 is None
    assert index["A1"].children == []
    assert index["A"].q1 == Decimal("10")


def test_totals_do_not_depend_on_child_order():
    forest = _nested_forest()
    permuted = [
        category(
            "B",
            [
                leaf("B9", q4="100"),
                category("B02", [leaf("B02-2"), leaf("B02-1", q3="2.25")]),
                category("B01", [leaf("B01-2", q1="5", cumulative_balance="7"), leaf("B01-1", q1="10", q2="1.5")]),
            ],
        ),
        leaf("X1", q1="3"),
    ]

    original = index_tree(calculate_hierarchical_totals(forest))
    reordered_totals = calculate_hierarchical_totals(permuted)
    reordered = index_tree(reordered_totals)

    for row_id in ("B", "B01", "B02"):
        assert original[row_id].amounts() == reordered[row_id].amounts()
    assert [child.id for child in reordered_totals[0].children] == ["B9", "B02", "B01"]
    assert [child.id for child in reordered["B02"].children] == ["B02-2", "B02-1"]
