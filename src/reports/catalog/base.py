"""
Base value types for report templates.

A template declares:
- fields: ordered output columns (key, label, semantic type)
- default_filters: selection applied unless the request overrides it
- aggregations: declared reducers computed over all rows
- charts: chart descriptors attached to the summary
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from core.enums import ChartType, FieldType, Reducer, ReportType, Role

from ..filters import ReportFilter, parse_filter


@dataclass(frozen=True, slots=True)
class ReportField:
    """Definition of a report column.

    Attributes:
        key: Row-lookup identifier, unique within a template
        label: Column header shown to the reader
        type: Semantic type, governs per-cell formatting
        sortable: Whether the UI may sort on this column
        filterable: Whether the UI may filter on this column
        width: Optional fixed display width (e.g. "150px")
    """

    key: str
    label: str
    type: FieldType = FieldType.TEXT
    sortable: bool = True
    filterable: bool = False
    width: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", FieldType(self.type))


@dataclass(frozen=True, slots=True)
class AggregationSpec:
    """A named summary statistic computed by a declared reducer.

    Attributes:
        name: Key under which the value appears in the summary
        reducer: count, sum, average or rate
        field: Row field the reducer reads (required except for plain count)
        equals: Only rows whose field equals this value (count, rate)
        at_least: Only rows whose field is >= this value (count, rate)
        digits: Rounding digits (half-up); 0 yields an int
    """

    name: str
    reducer: Reducer
    field: Optional[str] = None
    equals: Any = None
    at_least: Optional[float] = None
    digits: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "reducer", Reducer(self.reducer))
        if self.reducer is not Reducer.COUNT and self.field is None:
            raise ValueError(f"Aggregation '{self.name}' ({self.reducer}) requires a field")
        if self.reducer is Reducer.RATE and self.equals is None and self.at_least is None:
            raise ValueError(f"Rate aggregation '{self.name}' requires 'equals' or 'at_least'")

    @property
    def has_condition(self) -> bool:
        return self.equals is not None or self.at_least is not None


@dataclass(frozen=True, slots=True)
class ChartSpec:
    """A chart descriptor computed from the rows.

    With ``group_by`` the chart counts rows per distinct value (ordered by
    ``categories`` when given); otherwise it plots ``x_key`` against ``y_key``.
    """

    type: ChartType
    title: str
    x_key: Optional[str] = None
    y_key: Optional[str] = None
    group_by: Optional[str] = None
    categories: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ChartType(self.type))
        object.__setattr__(self, "categories", tuple(self.categories))
        if self.group_by is None and (self.x_key is None or self.y_key is None):
            raise ValueError(f"Chart '{self.title}' needs either group_by or both x_key and y_key")


@dataclass(frozen=True, slots=True)
class ReportTemplate:
    """Immutable, role-gated report definition."""

    id: str
    name: str
    type: ReportType
    description: str = ""
    icon: str = "FileText"
    available_for: FrozenSet[Role] = frozenset()
    default_filters: ReportFilter = field(default_factory=ReportFilter)
    fields: Tuple[ReportField, ...] = ()
    aggregations: Tuple[AggregationSpec, ...] = ()
    charts: Tuple[ChartSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ReportType(self.type))
        object.__setattr__(self, "available_for", frozenset(Role(r) for r in self.available_for))
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "aggregations", tuple(self.aggregations))
        object.__setattr__(self, "charts", tuple(self.charts))

        keys = [f.key for f in self.fields]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"Template '{self.id}' has duplicate field keys: {duplicates}")

        declared = set(keys)
        for spec in self.aggregations:
            if spec.field is not None and spec.field not in declared:
                raise ValueError(
                    f"Template '{self.id}': aggregation '{spec.name}' uses undeclared field '{spec.field}'"
                )
        for chart in self.charts:
            used = {k for k in (chart.x_key, chart.y_key, chart.group_by) if k is not None}
            missing = used - declared
            if missing:
                raise ValueError(
                    f"Template '{self.id}': chart '{chart.title}' uses undeclared fields {sorted(missing)}"
                )

    @property
    def field_keys(self) -> Tuple[str, ...]:
        return tuple(f.key for f in self.fields)

    def is_available_for(self, role: Role | str) -> bool:
        try:
            return Role(role) in self.available_for
        except ValueError:
            return False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReportTemplate":
        """Build a template from a catalog entry (UI wire names accepted)."""
        try:
            return cls(
                id=data["id"],
                name=data["name"],
                type=data["type"],
                description=data.get("description", ""),
                icon=data.get("icon", "FileText"),
                available_for=data.get("availableFor", data.get("available_for", ())),
                default_filters=parse_filter(data.get("defaultFilters", data.get("default_filters"))),
                fields=[ReportField(**_field_kwargs(f)) for f in data.get("fields", []) or []],
                aggregations=[AggregationSpec(**a) for a in data.get("aggregations", []) or []],
                charts=[ChartSpec(**_chart_kwargs(c)) for c in data.get("charts", []) or []],
            )
        except KeyError as exc:
            raise ValueError(f"Catalog entry is missing required key {exc}") from exc


def _field_kwargs(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "key": data["key"],
        "label": data["label"],
        "type": data.get("type", FieldType.TEXT),
        "sortable": data.get("sortable", True),
        "filterable": data.get("filterable", False),
        "width": data.get("width"),
    }


def _chart_kwargs(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "type": data["type"],
        "title": data["title"],
        "x_key": data.get("xKey", data.get("x_key")),
        "y_key": data.get("yKey", data.get("y_key")),
        "group_by": data.get("groupBy", data.get("group_by")),
        "categories": data.get("categories", ()),
    }
