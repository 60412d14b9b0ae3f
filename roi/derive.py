"""Ratios computed from aggregated totals."""
from roi.models import AggregateTotals, DerivedMetrics


def _ratio(numerator: float, denominator: float, scale: float = 1.0) -> float:
    # 0 stands in for "undefined"; callers cannot tell no data from break-even
    if denominator > 0:
        return numerator / denominator * scale
    return 0.0


def derive(totals: AggregateTotals) -> DerivedMetrics:
    """Compute ROAS, ROI, CPC, CTR and conversion rate without ever dividing by zero."""
    cost = totals.total_cost
    revenue = totals.total_revenue
    return DerivedMetrics(
        roas=_ratio(revenue, cost),
        roi=_ratio(revenue - cost, cost, 100),
        avg_cpc=_ratio(cost, totals.total_clicks),
        conversion_rate=_ratio(totals.total_conversions, totals.total_clicks, 100),
        avg_ctr=_ratio(totals.total_clicks, totals.total_impressions, 100),
        profit=revenue - cost,
        cost_per_conversion=_ratio(cost, totals.total_conversions),
    )
