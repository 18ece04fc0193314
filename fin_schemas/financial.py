"""Financial line-item models shared by the execution and compilation layers.

Amounts are kept as ``Decimal`` and ``None`` means "not reported". The two are
never conflated: ``None`` counts as zero when summing but stays ``None`` in the
model so the presentation layer can render a placeholder.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Order matches the report columns.
AMOUNT_FIELDS: tuple[str, ...] = ("q1", "q2", "q3", "q4", "cumulative_balance")


class FinancialRow(BaseModel):
    """One node of a financial statement tree (category, sub-category or activity)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Line-item id, the join key across facilities.")
    title: str = ""
    is_category: bool = Field(default=False, alias="isCategory")
    q1: Decimal | None = None
    q2: Decimal | None = None
    q3: Decimal | None = None
    q4: Decimal | None = None
    cumulative_balance: Decimal | None = Field(default=None, alias="cumulativeBalance")
    comment: str | None = None
    children: list[FinancialRow] | None = None

    @field_validator("q1", "q2", "q3", "q4", "cumulative_balance", mode="before")
    @classmethod
    def _blank_amount_is_absent(cls, value: Any) -> Any:
        # The execution-data API sends amounts as strings; "" means not entered.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def amounts(self) -> dict[str, Decimal | None]:
        return {name: getattr(self, name) for name in AMOUNT_FIELDS}


class FacilityData(BaseModel):
    """A facility's statement tree as handed over by the data source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    facility_name: str = Field(..., min_length=1, alias="facilityName")
    data: list[FinancialRow] = Field(default_factory=list)


class RenderRow(BaseModel):
    """One display row of the compiled report."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    is_category: bool = Field(default=False, alias="isCategory")
    depth: int = Field(..., ge=0)
    per_facility_values: dict[str, FinancialRow | None] = Field(
        default_factory=dict, alias="perFacilityValues"
    )
    total_row: FinancialRow | None = Field(default=None, alias="totalRow")


class CompiledReport(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    facility_names: list[str] = Field(default_factory=list, alias="facilityNames")
    rows: list[RenderRow] = Field(default_factory=list)
