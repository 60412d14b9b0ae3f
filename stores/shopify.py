"""Shopify Admin REST access for orders and products."""
import logging
import os
from typing import Any, Dict, List, Optional

import requests

from roi.sales import SalesSummary, summarize_product_sales

logger = logging.getLogger(__name__)

SHOPIFY_SHOP_NAME = os.environ.get("SHOPIFY_SHOP_NAME", "")
SHOPIFY_ACCESS_TOKEN = os.environ.get("SHOPIFY_ACCESS_TOKEN", "")
SHOPIFY_API_VERSION = os.environ.get("SHOPIFY_API_VERSION", "2024-10")

REQUEST_TIMEOUT = 30
MAX_PAGE_SIZE = 250


class ShopifyApiError(Exception):
    """Non-2xx response from the Shopify Admin API."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def shop_domain(shop_name: str = "") -> str:
    """Accept ``my-store`` or ``my-store.myshopify.com`` (with or without scheme)."""
    name = (shop_name or SHOPIFY_SHOP_NAME).strip()
    if not name:
        raise ValueError("Shopify shop name is not set in environment variables.")
    name = name.replace("https://", "").replace("http://", "").rstrip("/")
    if not name.endswith(".myshopify.com"):
        name = f"{name}.myshopify.com"
    return name


def _base_url() -> str:
    return f"https://{shop_domain()}/admin/api/{SHOPIFY_API_VERSION}"


def _headers() -> Dict[str, str]:
    if not SHOPIFY_ACCESS_TOKEN:
        raise ValueError("Shopify access token is not set in environment variables.")
    return {
        "X-Shopify-Access-Token": SHOPIFY_ACCESS_TOKEN,
        "Accept": "application/json",
    }


def _get(url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
    resp = requests.get(url, headers=_headers(), params=params, timeout=REQUEST_TIMEOUT)
    if not resp.ok:
        raise ShopifyApiError(
            f"Shopify request failed: {resp.status_code} {resp.reason} - {resp.text}",
            status_code=resp.status_code,
            body=resp.text,
        )
    return resp


def get_orders(start_date: str, end_date: str, limit: int = MAX_PAGE_SIZE) -> List[Dict[str, Any]]:
    """Fetch every order created in the date range, following cursor pagination."""
    params: Optional[Dict[str, Any]] = {
        "status": "any",
        "created_at_min": start_date,
        "created_at_max": f"{end_date}T23:59:59",
        "limit": max(1, min(limit, MAX_PAGE_SIZE)),
    }
    url = f"{_base_url()}/orders.json"

    orders: List[Dict[str, Any]] = []
    while url:
        resp = _get(url, params)
        orders.extend(resp.json().get("orders", []))
        # the next-page URL already carries page_info; other filters are rejected alongside it
        url = resp.links.get("next", {}).get("url")
        params = None

    logger.info(f"Fetched {len(orders)} Shopify orders between {start_date} and {end_date}")
    return orders


def get_product(product_id) -> Dict[str, Any]:
    resp = _get(f"{_base_url()}/products/{product_id}.json")
    return resp.json().get("product", {})


def get_product_sales(product_id, start_date: str, end_date: str) -> SalesSummary:
    """Sales totals for one product over the date range."""
    orders = get_orders(start_date, end_date)
    return summarize_product_sales(orders, product_id)
