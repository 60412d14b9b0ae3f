"""Per-product sales totals from Shopify orders."""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Mapping


@dataclass(frozen=True)
class SalesSummary:
    product_id: str
    revenue: float = 0.0
    quantity: int = 0
    order_count: int = 0
    average_order_value: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize_product_sales(orders: Iterable[Mapping[str, Any]], product_id) -> SalesSummary:
    """Total revenue and quantity of one product across orders.

    ``order_count`` counts matching line items, so an order listing the
    product twice counts twice.
    """
    wanted = str(product_id)
    revenue = 0.0
    quantity = 0
    order_count = 0
    for order in orders:
        for item in order.get("line_items") or []:
            if str(item.get("product_id")) != wanted:
                continue
            item_quantity = int(item.get("quantity") or 0)
            revenue += float(item.get("price") or 0) * item_quantity
            quantity += item_quantity
            order_count += 1
    return SalesSummary(
        product_id=wanted,
        revenue=revenue,
        quantity=quantity,
        order_count=order_count,
        average_order_value=revenue / order_count if order_count > 0 else 0.0,
    )
