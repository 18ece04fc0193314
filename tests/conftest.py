from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import pytest

from fin_schemas import FacilityData, FinancialRow
from observability.metrics import MetricsClient, get_metrics_client, set_metrics_client


def leaf(row_id: str, title: str | None = None, **amounts: Any) -> FinancialRow:
    return FinancialRow(id=row_id, title=title or row_id, is_category=False, **amounts)


def category(row_id: str, children: Sequence[FinancialRow], title: str | None = None) -> FinancialRow:
    return FinancialRow(id=row_id, title=title or row_id, is_category=True, children=list(children))


def set_amounts(rows: Sequence[FinancialRow], values: Mapping[str, Mapping[str, Any]]) -> list[FinancialRow]:
    """Copy ``rows`` with the given amounts set on the matching ids."""
    result = []
    for row in rows:
        update: dict[str, Any] = {
            name: Decimal(str(value)) for name, value in values.get(row.id, {}).items()
        }
        if row.children is not None:
            update["children"] = set_amounts(row.children, values)
        result.append(row.model_copy(update=update))
    return result


def facility(name: str, rows: Sequence[FinancialRow]) -> FacilityData:
    return FacilityData(facility_name=name, data=list(rows))


@pytest.fixture
def revenue_template() -> list[FinancialRow]:
    return [category("revenue", [leaf("grant"), leaf("fees")], title="Revenue")]


class RecordingMetricsClient(MetricsClient):
    def __init__(self) -> None:
        self.counters: list[tuple[str, int]] = []
        self.timings: list[str] = []
        self.timing_tags: dict[str, dict[str, str]] = {}

    def incr(self, name: str, tags: dict[str, str] | None = None, value: int = 1) -> None:
        self.counters.append((name, value))

    def timing(self, name: str, value_ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append(name)
        self.timing_tags[name] = dict(tags or {})


@pytest.fixture
def metrics() -> RecordingMetricsClient:
    previous = get_metrics_client()
    client = RecordingMetricsClient()
    set_metrics_client(client)
    yield client
    set_metrics_client(previous)
