"""
Declared reducers and chart builders for report summaries.

Aggregations are part of the template (``AggregationSpec``); this module
only knows how to apply a reducer to a sequence of rows.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, List, Mapping, Sequence

from core.enums import Reducer

from .catalog.base import AggregationSpec, ChartSpec

Row = Mapping[str, Any]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def round_half_up(value: float, digits: int = 0) -> int | float:
    """Round like a spreadsheet does (2.5 -> 3), returning int for 0 digits."""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits <= 0 else float(rounded)


def _matches(spec: AggregationSpec, row: Row) -> bool:
    value = row.get(spec.field) if spec.field else None
    if spec.equals is not None and value != spec.equals:
        return False
    if spec.at_least is not None and not (_is_number(value) and value >= spec.at_least):
        return False
    return True


def _numbers(spec: AggregationSpec, rows: Sequence[Row]) -> List[float]:
    return [row.get(spec.field) for row in rows if _is_number(row.get(spec.field))]


def _count(spec: AggregationSpec, rows: Sequence[Row]) -> float:
    if not spec.has_condition:
        return len(rows)
    return sum(1 for row in rows if _matches(spec, row))


def _sum(spec: AggregationSpec, rows: Sequence[Row]) -> float:
    return sum(_numbers(spec, rows))


def _average(spec: AggregationSpec, rows: Sequence[Row]) -> float:
    values = _numbers(spec, rows)
    return sum(values) / len(values) if values else 0


def _rate(spec: AggregationSpec, rows: Sequence[Row]) -> float:
    if not rows:
        return 0
    return sum(1 for row in rows if _matches(spec, row)) / len(rows) * 100


REDUCERS: Dict[Reducer, Callable[[AggregationSpec, Sequence[Row]], float]] = {
    Reducer.COUNT: _count,
    Reducer.SUM: _sum,
    Reducer.AVERAGE: _average,
    Reducer.RATE: _rate,
}


def apply_aggregation(spec: AggregationSpec, rows: Sequence[Row]) -> int | float:
    """Apply one declared reducer over all rows."""
    return round_half_up(REDUCERS[spec.reducer](spec, rows), spec.digits)


def compute_aggregations(
    specs: Sequence[AggregationSpec], rows: Sequence[Row]
) -> Dict[str, int | float]:
    """Compute every declared aggregation, keyed by name in declaration order."""
    return {spec.name: apply_aggregation(spec, rows) for spec in specs}


def build_chart_data(chart: ChartSpec, rows: Sequence[Row]) -> List[Dict[str, Any]]:
    """Build the data points of a chart descriptor."""
    if chart.group_by is not None:
        counts: Dict[Any, int] = {category: 0 for category in chart.categories}
        for row in rows:
            value = row.get(chart.group_by)
            if value is None:
                continue
            counts[value] = counts.get(value, 0) + 1
        return [{"name": name, "value": value} for name, value in counts.items()]

    return [{chart.x_key: row.get(chart.x_key), chart.y_key: row.get(chart.y_key)} for row in rows]
