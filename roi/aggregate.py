"""Fold MetricRecords into totals."""
from typing import Dict, Iterable, List

from roi.models import AggregateTotals, MetricRecord


def aggregate(records: Iterable[MetricRecord]) -> AggregateTotals:
    """Sum each metric independently. An empty sequence yields all-zero totals."""
    cost = 0.0
    clicks = 0
    impressions = 0
    conversions = 0.0
    revenue = 0.0
    for record in records:
        cost += record.cost
        clicks += record.clicks
        impressions += record.impressions
        conversions += record.conversions
        revenue += record.revenue
    return AggregateTotals(
        total_cost=cost,
        total_clicks=clicks,
        total_impressions=impressions,
        total_conversions=conversions,
        total_revenue=revenue,
    )


def rollup(records: Iterable[MetricRecord]) -> List[MetricRecord]:
    """Merge records sharing an entity_id, keeping first-seen order.

    The merged record keeps the first name seen for the entity.
    """
    merged: Dict[str, MetricRecord] = {}
    for record in records:
        current = merged.get(record.entity_id)
        if current is None:
            merged[record.entity_id] = record
            continue
        merged[record.entity_id] = MetricRecord(
            entity_id=current.entity_id,
            entity_name=current.entity_name,
            cost=current.cost + record.cost,
            clicks=current.clicks + record.clicks,
            impressions=current.impressions + record.impressions,
            conversions=current.conversions + record.conversions,
            revenue=current.revenue + record.revenue,
            status=current.status,
        )
    return list(merged.values())
