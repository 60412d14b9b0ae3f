"""Cross-reference ad spend with store sales per product."""
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional

from roi.derive import derive
from roi.models import AggregateTotals, Recommendation
from roi.recommend import recommend
from roi.sales import SalesSummary


@dataclass(frozen=True)
class ProductRoi:
    product_id: str
    ad_spend: float
    revenue: float
    profit: float
    roi: float
    roas: float
    quantity: int
    order_count: int
    recommendation: Recommendation
    rank: Optional[int] = None

    def to_dict(self, digits: int = 2) -> Dict[str, Any]:
        data = {
            "product_id": self.product_id,
            "ad_spend": round(self.ad_spend, digits),
            "revenue": round(self.revenue, digits),
            "profit": round(self.profit, digits),
            "roi": round(self.roi, digits),
            "roas": round(self.roas, digits),
            "quantity": self.quantity,
            "order_count": self.order_count,
            "recommendation": self.recommendation.to_dict(),
        }
        if self.rank is not None:
            data["rank"] = self.rank
        return data


def product_roi(product_id, ad_totals: AggregateTotals, sales: SalesSummary) -> ProductRoi:
    """ROI of a product's ad spend measured against its store revenue.

    ``roas`` stays on the ad side (conversion value reported by Google Ads),
    while ``roi`` and ``profit`` use the store's own revenue.
    """
    ad_spend = ad_totals.total_cost
    roi = (sales.revenue - ad_spend) / ad_spend * 100 if ad_spend > 0 else 0.0
    return ProductRoi(
        product_id=str(product_id),
        ad_spend=ad_spend,
        revenue=sales.revenue,
        profit=sales.revenue - ad_spend,
        roi=roi,
        roas=derive(ad_totals).roas,
        quantity=sales.quantity,
        order_count=sales.order_count,
        recommendation=recommend(roi),
    )


def rank_products(items: Iterable[ProductRoi]) -> List[ProductRoi]:
    """Sort by ROI, best first, and number the result from 1. Ties keep input order."""
    ordered = sorted(items, key=lambda item: item.roi, reverse=True)
    return [replace(item, rank=index) for index, item in enumerate(ordered, start=1)]
