"""Product ROI tools: Google Ads spend cross-referenced with Shopify sales."""
import asyncio
import logging
from typing import Any, Dict

from fastmcp import Context
from mcp_instance import mcp
from oauth.google_auth import execute_gaql, GOOGLE_ADS_DEVELOPER_TOKEN
from roi.aggregate import aggregate
from roi.models import AggregateTotals
from roi.products import product_roi, rank_products
from roi.sales import summarize_product_sales
from stores import shopify
from tools.dates import resolve_date_range
from tools.queries import fetch_product_rows, records

logger = logging.getLogger(__name__)


def _ad_totals(customer_id: str, product_id: str, start_date: str, end_date: str, manager_id: str) -> AggregateTotals:
    rows = fetch_product_rows(
        execute_gaql, customer_id, start_date, end_date,
        limit=10000, product_id=product_id, manager_id=manager_id,
    )
    return aggregate(records(rows))


@mcp.tool
async def get_product_roi(
    product_id: str,
    start_date: str,
    end_date: str,
    customer_id: str = "",
    manager_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Get ROI for one product: Google Ads spend against Shopify sales, with a budget recommendation.

    Args:
        product_id: Shopify product ID (also the Merchant Center product item ID)
        start_date: Range start, YYYY-MM-DD
        end_date: Range end, YYYY-MM-DD
        customer_id: Google Ads customer ID (defaults to GOOGLE_ADS_CUSTOMER_ID)
        manager_id: Manager ID if the account is accessed through an MCC

    Returns:
        Product title, period and performance: ad spend, revenue, profit, ROI, ROAS,
        quantity, order count and recommendation
    """
    if not GOOGLE_ADS_DEVELOPER_TOKEN:
        raise ValueError("Google Ads Developer Token is not set in environment variables.")
    if not (start_date and end_date):
        raise ValueError("start_date and end_date are required (format: YYYY-MM-DD)")
    dates = resolve_date_range(start_date, end_date)
    product_id = str(product_id).strip()

    if ctx:
        await ctx.info(f"Fetching ad and sales data for product {product_id}...")

    try:
        # ad spend, store sales and product details are independent fetches
        ad_totals, sales, product = await asyncio.gather(
            asyncio.to_thread(_ad_totals, customer_id, product_id, dates["start_date"], dates["end_date"], manager_id),
            asyncio.to_thread(shopify.get_product_sales, product_id, dates["start_date"], dates["end_date"]),
            asyncio.to_thread(shopify.get_product, product_id),
        )

        performance = product_roi(product_id, ad_totals, sales)

        if ctx:
            await ctx.info(f"Product {product_id} ROI: {performance.roi:.2f}%")

        return {
            "product": {
                "id": str(product.get("id", product_id)),
                "title": product.get("title", ""),
            },
            "period": dates,
            "performance": performance.to_dict(),
        }

    except Exception as e:
        if ctx:
            await ctx.error(f"get_product_roi failed: {str(e)}")
        raise


@mcp.tool
async def compare_products(
    product_ids: str,
    start_date: str,
    end_date: str,
    customer_id: str = "",
    manager_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Compare ROI across products, ranked best first.

    Args:
        product_ids: Comma-separated Shopify product IDs
        start_date: Range start, YYYY-MM-DD
        end_date: Range end, YYYY-MM-DD
        customer_id: Google Ads customer ID (defaults to GOOGLE_ADS_CUSTOMER_ID)
        manager_id: Manager ID if the account is accessed through an MCC
    """
    if not GOOGLE_ADS_DEVELOPER_TOKEN:
        raise ValueError("Google Ads Developer Token is not set in environment variables.")
    ids = [pid.strip() for pid in str(product_ids).split(",") if pid.strip()]
    if not ids:
        raise ValueError("product_ids must contain at least one comma-separated product ID")
    if not (start_date and end_date):
        raise ValueError("start_date and end_date are required (format: YYYY-MM-DD)")
    dates = resolve_date_range(start_date, end_date)

    if ctx:
        await ctx.info(f"Comparing {len(ids)} products...")

    try:
        # one order fetch serves every product
        orders, *ad_totals = await asyncio.gather(
            asyncio.to_thread(shopify.get_orders, dates["start_date"], dates["end_date"]),
            *(
                asyncio.to_thread(_ad_totals, customer_id, pid, dates["start_date"], dates["end_date"], manager_id)
                for pid in ids
            ),
        )
        results = [
            product_roi(pid, totals, summarize_product_sales(orders, pid))
            for pid, totals in zip(ids, ad_totals)
        ]

        comparison = rank_products(results)

        if ctx:
            await ctx.info(f"Ranked {len(comparison)} products.")

        return {
            "period": dates,
            "count": len(comparison),
            "comparison": [item.to_dict() for item in comparison],
        }

    except Exception as e:
        if ctx:
            await ctx.error(f"compare_products failed: {str(e)}")
        raise
