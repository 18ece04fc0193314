"""Canonical execution statement template.

The statement layout is declared once in ``EXECUTION_STATEMENT`` and turned
into a fresh ``FinancialRow`` forest on every call. Row ids follow the
execution-data convention:

- activities directly under a category: ``<category><order>`` (``A1``, ``D3``)
- activities under a sub-category: ``<sub-category>-<order>`` (``B01-2``)

Categories without any lines (``C``, ``F``) are computed lines; see
``app.execution.totals.COMPUTED_LINES``.
"""

from __future__ import annotations

from dataclasses import dataclass

from fin_schemas import FinancialRow


@dataclass(frozen=True)
class StatementSubCategory:
    code: str
    name: str
    activities: tuple[str, ...] = ()


@dataclass(frozen=True)
class StatementCategory:
    code: str
    name: str
    activities: tuple[str, ...] = ()
    sub_categories: tuple[StatementSubCategory, ...] = ()


EXECUTION_STATEMENT: tuple[StatementCategory, ...] = (
    StatementCategory(
        code="A",
        name="Receipts",
        activities=(
            "Other Incomes",
            "Transfers from SPIU/RBC",
        ),
    ),
    StatementCategory(
        code="B",
        name="Expenditures",
        sub_categories=(
            StatementSubCategory(
                code="B01",
                name="Human Resources + BONUS",
                activities=(
                    "Laboratory Technician",
                    "Nurse",
                ),
            ),
            StatementSubCategory(
                code="B02",
                name="Monitoring & Evaluation",
                activities=(
                    "Supervision CHWs",
                    "Support group meetings",
                ),
            ),
            StatementSubCategory(
                code="B03",
                name="Living Support to Clients/Target Populations",
                activities=(
                    "Sample transport",
                    "Home visit lost to follow up",
                    "Transport and travel for survey/surveillance",
                ),
            ),
            StatementSubCategory(
                code="B04",
                name="Overheads (22 - Use of goods & services)",
                activities=(
                    "Infrastructure support",
                    "Office supplies",
                    "Transport and travel (Reporting)",
                    "Bank charges",
                ),
            ),
            StatementSubCategory(
                code="B05",
                name="Transfer to other reporting entities",
                activities=("Transfer to RBC",),
            ),
        ),
    ),
    StatementCategory(code="C", name="Surplus / Deficit"),
    StatementCategory(
        code="D",
        name="Financial Assets",
        activities=(
            "Cash at bank",
            "Petty cash",
            "Receivables (VAT refund)",
            "Other Receivables",
        ),
    ),
    StatementCategory(
        code="E",
        name="Financial Liabilities",
        activities=(
            "Salaries on borrowed funds (BONUS)",
            "Payable - Maintenance & Repairs",
            "Payable - Office suppliers",
            "Payable - Transport and travel (Reporting)",
            "Payable - Transport and travel (Supervision)",
        ),
    ),
    StatementCategory(code="F", name="Net Financial Assets"),
    StatementCategory(
        code="G",
        name="Closing Balance",
        activities=(
            "Accumulated Surplus/Deficit",
            "Prior Year Adjustment",
            "Surplus/Deficit of the Period",
        ),
    ),
)


def activity_row_id(category_code: str, sub_category_code: str | None, display_order: int) -> str:
    if sub_category_code:
        return f"{sub_category_code}-{display_order}"
    return f"{category_code}{display_order}"


def _activity_rows(category_code: str, sub_category_code: str | None, names: tuple[str, ...]) -> list[FinancialRow]:
    return [
        FinancialRow(
            id=activity_row_id(category_code, sub_category_code, order),
            title=name,
            is_category=False,
        )
        for order, name in enumerate(names, start=1)
    ]


def build_template(statement: tuple[StatementCategory, ...]) -> list[FinancialRow]:
    rows: list[FinancialRow] = []
    for category in statement:
        children = _activity_rows(category.code, None, category.activities)
        for sub in category.sub_categories:
            children.append(
                FinancialRow(
                    id=sub.code,
                    title=f"{sub.code}. {sub.name}",
                    is_category=True,
                    children=_activity_rows(category.code, sub.code, sub.activities),
                )
            )
        rows.append(
            FinancialRow(
                id=category.code,
                title=f"{category.code}. {category.name}",
                is_category=True,
                children=children,
            )
        )
    return rows


def generate_empty_financial_template() -> list[FinancialRow]:
    """Return a fresh, empty execution statement forest (all amounts absent)."""
    return build_template(EXECUTION_STATEMENT)
