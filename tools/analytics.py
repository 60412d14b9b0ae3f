"""Ad performance reporting tools: summary, campaigns, ad groups, keywords, products, daily trend."""
import asyncio
import logging
from typing import Any, Dict

from fastmcp import Context
from mcp_instance import mcp
from oauth.google_auth import execute_gaql, format_customer_id, GOOGLE_ADS_CUSTOMER_ID, GOOGLE_ADS_DEVELOPER_TOKEN
from roi.aggregate import aggregate
from roi.derive import derive
from roi.models import MetricRecord
from roi.normalize import resolve_path
from roi.recommend import recommend
from tools.dates import resolve_date_range
from tools.queries import (
    fetch_ad_group_rows,
    fetch_campaign_rows,
    fetch_daily_records,
    fetch_keyword_rows,
    fetch_product_rows,
    records,
)

logger = logging.getLogger(__name__)


def record_payload(record: MetricRecord) -> Dict[str, Any]:
    data = record.to_dict()
    data["cost"] = round(record.cost, 2)
    data["conversions"] = round(record.conversions, 2)
    data["revenue"] = round(record.revenue, 2)
    return data


def _text(raw, path: str) -> str:
    value = resolve_path(raw, path)
    return value if isinstance(value, str) else ""


def _account_id(customer_id: str) -> str:
    """Customer ID the query ran against, after the GOOGLE_ADS_CUSTOMER_ID fallback."""
    cid = customer_id or GOOGLE_ADS_CUSTOMER_ID
    return format_customer_id(cid) if cid else ""


def _require_token():
    if not GOOGLE_ADS_DEVELOPER_TOKEN:
        raise ValueError("Google Ads Developer Token is not set in environment variables.")


@mcp.tool
async def get_campaign_summary(
    customer_id: str = "",
    start_date: str = "",
    end_date: str = "",
    period: str = "",
    manager_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Get overall campaign performance: totals, ROAS, ROI, CPC, CTR, conversion rate and a budget recommendation.

    Args:
        customer_id: Google Ads customer ID (defaults to GOOGLE_ADS_CUSTOMER_ID)
        start_date: Range start, YYYY-MM-DD (use together with end_date)
        end_date: Range end, YYYY-MM-DD
        period: today, yesterday, 7days or 30days when no explicit dates are given (default 30days)
        manager_id: Manager ID if the account is accessed through an MCC
    """
    _require_token()
    dates = resolve_date_range(start_date, end_date, period)

    if ctx:
        await ctx.info(f"Building campaign summary for {dates['start_date']} to {dates['end_date']}...")

    try:
        rows = await asyncio.to_thread(
            fetch_campaign_rows, execute_gaql, customer_id, dates["start_date"], dates["end_date"], manager_id
        )
        campaign_records = records(rows)
        totals = aggregate(campaign_records)
        metrics = derive(totals)

        summary = {key: round(value, 2) for key, value in totals.to_dict().items()}
        summary.update(metrics.to_dict())
        summary["active_campaigns"] = sum(1 for r in campaign_records if r.status == "ENABLED")
        summary["total_campaigns"] = len(campaign_records)

        if ctx:
            await ctx.info(f"Summarized {len(campaign_records)} campaigns.")

        return {
            "period": dates,
            "customer_id": _account_id(customer_id),
            "summary": summary,
            "recommendation": recommend(metrics.roi).to_dict(),
        }

    except Exception as e:
        if ctx:
            await ctx.error(f"get_campaign_summary failed: {str(e)}")
        raise


@mcp.tool
async def get_campaigns(
    customer_id: str = "",
    start_date: str = "",
    end_date: str = "",
    period: str = "",
    manager_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """List campaigns with cost, clicks, impressions, conversions, revenue, average CPC and CTR."""
    _require_token()
    dates = resolve_date_range(start_date, end_date, period)

    if ctx:
        await ctx.info(f"Fetching campaigns for {dates['start_date']} to {dates['end_date']}...")

    try:
        rows = await asyncio.to_thread(
            fetch_campaign_rows, execute_gaql, customer_id, dates["start_date"], dates["end_date"], manager_id
        )

        campaigns = []
        for record, raw in rows:
            item = record_payload(record)
            item["type"] = _text(raw, "campaign.advertising_channel_type")
            ratios = derive(aggregate([record]))
            item["avg_cpc"] = round(ratios.avg_cpc, 2)
            item["ctr"] = round(ratios.avg_ctr, 2)
            campaigns.append(item)

        if ctx:
            await ctx.info(f"Retrieved {len(campaigns)} campaigns.")

        return {
            "period": dates,
            "customer_id": _account_id(customer_id),
            "count": len(campaigns),
            "campaigns": campaigns,
        }

    except Exception as e:
        if ctx:
            await ctx.error(f"get_campaigns failed: {str(e)}")
        raise


@mcp.tool
async def get_ad_groups(
    campaign_id: str,
    customer_id: str = "",
    start_date: str = "",
    end_date: str = "",
    period: str = "",
    manager_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Get ad group performance for one campaign."""
    _require_token()
    dates = resolve_date_range(start_date, end_date, period)

    if ctx:
        await ctx.info(f"Fetching ad groups for campaign {campaign_id}...")

    try:
        rows = await asyncio.to_thread(
            fetch_ad_group_rows, execute_gaql, customer_id, campaign_id, dates["start_date"], dates["end_date"], manager_id
        )

        ad_groups = []
        for record, raw in rows:
            item = record_payload(record)
            item["campaign_name"] = _text(raw, "campaign.name")
            ad_groups.append(item)

        if ctx:
            await ctx.info(f"Retrieved {len(ad_groups)} ad groups.")

        return {
            "period": dates,
            "customer_id": _account_id(customer_id),
            "campaign_id": campaign_id,
            "count": len(ad_groups),
            "ad_groups": ad_groups,
        }

    except Exception as e:
        if ctx:
            await ctx.error(f"get_ad_groups failed: {str(e)}")
        raise


@mcp.tool
async def get_keywords(
    customer_id: str = "",
    start_date: str = "",
    end_date: str = "",
    period: str = "",
    limit: int = 20,
    manager_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Get the top enabled keywords by spend."""
    _require_token()
    dates = resolve_date_range(start_date, end_date, period)

    if ctx:
        await ctx.info(f"Fetching top {limit} keywords...")

    try:
        rows = await asyncio.to_thread(
            fetch_keyword_rows, execute_gaql, customer_id, dates["start_date"], dates["end_date"], limit, manager_id
        )

        keywords = []
        for record, raw in rows:
            item = record_payload(record)
            item["match_type"] = _text(raw, "ad_group_criterion.keyword.match_type")
            item["ad_group_name"] = _text(raw, "ad_group.name")
            item["campaign_name"] = _text(raw, "campaign.name")
            item["avg_cpc"] = round(derive(aggregate([record])).avg_cpc, 2)
            keywords.append(item)

        if ctx:
            await ctx.info(f"Retrieved {len(keywords)} keywords.")

        return {
            "period": dates,
            "customer_id": _account_id(customer_id),
            "count": len(keywords),
            "keywords": keywords,
        }

    except Exception as e:
        if ctx:
            await ctx.error(f"get_keywords failed: {str(e)}")
        raise


@mcp.tool
async def get_product_performance(
    customer_id: str = "",
    start_date: str = "",
    end_date: str = "",
    period: str = "",
    limit: int = 50,
    manager_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Get Shopping product performance with per-product ROAS and ROI."""
    _require_token()
    dates = resolve_date_range(start_date, end_date, period)

    if ctx:
        await ctx.info(f"Fetching product performance (limit {limit})...")

    try:
        rows = await asyncio.to_thread(
            fetch_product_rows, execute_gaql, customer_id, dates["start_date"], dates["end_date"], limit, "", manager_id
        )

        products = []
        for record in records(rows):
            item = record_payload(record)
            ratios = derive(aggregate([record]))
            item["roas"] = round(ratios.roas, 2)
            item["roi"] = round(ratios.roi, 2)
            products.append(item)

        if ctx:
            await ctx.info(f"Retrieved {len(products)} products.")

        return {
            "period": dates,
            "customer_id": _account_id(customer_id),
            "count": len(products),
            "products": products,
        }

    except Exception as e:
        if ctx:
            await ctx.error(f"get_product_performance failed: {str(e)}")
        raise


@mcp.tool
async def get_daily_performance(
    customer_id: str = "",
    start_date: str = "",
    end_date: str = "",
    period: str = "",
    manager_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Get the daily spend, clicks, conversions and revenue trend across all campaigns."""
    _require_token()
    dates = resolve_date_range(start_date, end_date, period)

    if ctx:
        await ctx.info(f"Fetching daily performance for {dates['start_date']} to {dates['end_date']}...")

    try:
        days = await asyncio.to_thread(
            fetch_daily_records, execute_gaql, customer_id, dates["start_date"], dates["end_date"], manager_id
        )

        daily = []
        for record in days:
            item = record_payload(record)
            item["date"] = item.pop("entity_id")
            item.pop("entity_name")
            daily.append(item)

        if ctx:
            await ctx.info(f"Retrieved {len(daily)} days.")

        return {
            "period": dates,
            "customer_id": _account_id(customer_id),
            "count": len(daily),
            "daily": daily,
        }

    except Exception as e:
        if ctx:
            await ctx.error(f"get_daily_performance failed: {str(e)}")
        raise
