import re

import pytest

import tools.analytics as analytics
import tools.product_roi as product_tools
from helpers import FakeContext, FakeExecutor, call_tool, product_row
from stores import shopify


@pytest.fixture
def execute(monkeypatch, enable_google_ads, campaign_rows):
    fake = FakeExecutor(campaign_rows)
    monkeypatch.setattr(analytics, "execute_gaql", fake)
    return fake


def test_campaign_summary(execute):
    ctx = FakeContext()
    result = call_tool(
        analytics.get_campaign_summary,
        customer_id="1234567890",
        start_date="2026-01-01",
        end_date="2026-01-28",
        ctx=ctx,
    )
    summary = result["summary"]
    assert result["period"] == {"start_date": "2026-01-01", "end_date": "2026-01-28"}
    assert summary["total_cost"] == 245.67
    assert summary["total_clicks"] == 1234
    assert summary["total_impressions"] == 45678
    assert summary["roas"] == 6.38
    assert summary["roi"] == 538.21
    assert summary["avg_cpc"] == 0.2
    assert summary["conversion_rate"] == 7.21
    assert summary["avg_ctr"] == 2.7
    assert summary["active_campaigns"] == 2
    assert summary["total_campaigns"] == 3
    assert result["recommendation"]["action"] == "INCREASE_BUDGET"
    assert result["recommendation"]["suggested_budget_change"] == 0.25
    assert ctx.infos and not ctx.errors


def test_summary_of_empty_account(monkeypatch, enable_google_ads):
    monkeypatch.setattr(analytics, "execute_gaql", FakeExecutor([]))
    result = call_tool(analytics.get_campaign_summary, period="7days")
    assert result["summary"]["total_cost"] == 0
    assert result["summary"]["roi"] == 0
    assert result["summary"]["total_campaigns"] == 0
    assert result["recommendation"]["action"] == "DECREASE_BUDGET"


def test_campaign_listing(execute):
    result = call_tool(analytics.get_campaigns, start_date="2026-01-01", end_date="2026-01-28")
    assert result["count"] == 3
    brand = result["campaigns"][0]
    assert brand["entity_name"] == "Brand"
    assert brand["type"] == "SEARCH"
    assert brand["status"] == "ENABLED"
    assert result["campaigns"][1]["avg_cpc"] == 0.22
    assert brand["ctr"] == 4.0
    assert result["campaigns"][2]["avg_cpc"] == 0


def test_daily_performance(monkeypatch, enable_google_ads):
    monkeypatch.setattr(analytics, "execute_gaql", FakeExecutor([
        {"segments": {"date": "2026-01-01"}, "metrics": {"costMicros": "1000000", "clicks": "3"}},
        {"segments": {"date": "2026-01-01"}, "metrics": {"costMicros": "1500000", "clicks": "2"}},
    ]))
    result = call_tool(analytics.get_daily_performance, start_date="2026-01-01", end_date="2026-01-01")
    assert result["daily"] == [{
        "date": "2026-01-01", "cost": 2.5, "clicks": 5, "impressions": 0, "conversions": 0, "revenue": 0,
    }]


def test_product_performance_adds_ratios(monkeypatch, enable_google_ads):
    monkeypatch.setattr(analytics, "execute_gaql", FakeExecutor([
        product_row("123", "Headphones", 200_000_000, 100, 4000, 17, 850.0),
    ]))
    result = call_tool(analytics.get_product_performance, period="30days")
    product = result["products"][0]
    assert product["entity_id"] == "123"
    assert product["roas"] == 4.25
    assert product["roi"] == 325.0


def test_summary_reports_the_customer_id_it_queried(execute):
    result = call_tool(analytics.get_campaign_summary, customer_id="123-456-7890", period="7days")
    assert result["customer_id"] == "1234567890"
    assert result["summary"]["total_campaigns"] == 3


def test_default_customer_id_is_reported(monkeypatch, execute):
    monkeypatch.setattr(analytics, "GOOGLE_ADS_CUSTOMER_ID", "987-654-3210")
    result = call_tool(analytics.get_campaigns, period="7days")
    assert result["customer_id"] == "9876543210"
    assert execute.calls[0]["customer_id"] == ""


def test_tools_require_developer_token(monkeypatch):
    monkeypatch.setattr(analytics, "GOOGLE_ADS_DEVELOPER_TOKEN", None)
    with pytest.raises(ValueError, match="Developer Token"):
        call_tool(analytics.get_campaigns)


def test_failures_are_reported_and_reraised(monkeypatch, enable_google_ads):
    def broken(customer_id, query, manager_id=""):
        raise RuntimeError("quota exhausted")

    monkeypatch.setattr(analytics, "execute_gaql", broken)
    ctx = FakeContext()
    with pytest.raises(RuntimeError, match="quota exhausted"):
        call_tool(analytics.get_keywords, ctx=ctx)
    assert ctx.errors == ["get_keywords failed: quota exhausted"]


def _product_executor(spend_by_item):
    """Answer product queries by the product_item_id in the WHERE clause."""

    def execute(customer_id, query, manager_id=""):
        item = re.search(r"product_item_id = '([^']+)'", query).group(1)
        cost_micros, value = spend_by_item[item]
        return {"results": [product_row(item, f"Product {item}", cost_micros, 10, 100, 1, value)]}

    return execute


ORDERS = [
    {"line_items": [{"product_id": 1, "price": "100.00", "quantity": 3}]},
    {"line_items": [{"product_id": 2, "price": "20.00", "quantity": 1}, {"product_id": 3, "price": "50.00", "quantity": 1}]},
]


def test_product_roi(monkeypatch, enable_google_ads):
    monkeypatch.setattr(product_tools, "execute_gaql", _product_executor({"1": (100_000_000, 250.0)}))
    monkeypatch.setattr(shopify, "get_orders", lambda start, end: ORDERS)
    monkeypatch.setattr(shopify, "get_product", lambda pid: {"id": 1, "title": "Premium Wireless Headphones"})

    result = call_tool(product_tools.get_product_roi, product_id="1", start_date="2026-01-01", end_date="2026-01-28")
    assert result["product"] == {"id": "1", "title": "Premium Wireless Headphones"}
    performance = result["performance"]
    assert performance["ad_spend"] == 100.0
    assert performance["revenue"] == 300.0
    assert performance["profit"] == 200.0
    assert performance["roi"] == 200.0
    assert performance["roas"] == 2.5
    assert performance["quantity"] == 3
    assert performance["recommendation"]["action"] == "INCREASE_BUDGET"


def test_product_roi_requires_dates(enable_google_ads):
    with pytest.raises(ValueError, match="required"):
        call_tool(product_tools.get_product_roi, product_id="1", start_date="", end_date="")


def test_compare_products_ranks_by_roi(monkeypatch, enable_google_ads):
    monkeypatch.setattr(product_tools, "execute_gaql", _product_executor({
        "1": (100_000_000, 0.0),   # 300 revenue -> ROI 200%
        "2": (40_000_000, 0.0),    # 20 revenue -> ROI -50%
        "3": (40_000_000, 0.0),    # 50 revenue -> ROI 25%
    }))
    order_fetches = []

    def get_orders(start, end):
        order_fetches.append((start, end))
        return ORDERS

    monkeypatch.setattr(shopify, "get_orders", get_orders)

    result = call_tool(product_tools.compare_products, product_ids="2, 1,3", start_date="2026-01-01", end_date="2026-01-28")
    ranked = [(item["product_id"], item["rank"], item["recommendation"]["action"]) for item in result["comparison"]]
    assert ranked == [
        ("1", 1, "INCREASE_BUDGET"),
        ("3", 2, "OPTIMIZE"),
        ("2", 3, "DECREASE_BUDGET"),
    ]
    assert order_fetches == [("2026-01-01", "2026-01-28")]


def test_compare_products_needs_ids(enable_google_ads):
    with pytest.raises(ValueError, match="product_ids"):
        call_tool(product_tools.compare_products, product_ids=" , ", start_date="2026-01-01", end_date="2026-01-28")
