"""Metrics core: row normalization, aggregation, derived metrics and budget rules."""
from roi.aggregate import aggregate, rollup
from roi.derive import derive
from roi.errors import MalformedRowError
from roi.models import AggregateTotals, BudgetAction, DerivedMetrics, MetricRecord, Recommendation
from roi.normalize import ENTITY_PATHS, normalize_row, normalize_rows
from roi.recommend import recommend

__all__ = [
    "AggregateTotals",
    "BudgetAction",
    "DerivedMetrics",
    "ENTITY_PATHS",
    "MalformedRowError",
    "MetricRecord",
    "Recommendation",
    "aggregate",
    "derive",
    "normalize_row",
    "normalize_rows",
    "recommend",
    "rollup",
]
