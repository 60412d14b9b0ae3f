"""GAQL report fetchers.

Every fetcher takes the query executor as its first argument, called as
``execute(customer_id, query, manager_id)`` and returning the search
response dict (``oauth.google_auth.execute_gaql`` in production).
"""
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional

from roi.aggregate import rollup
from roi.models import MetricRecord
from roi.normalize import ENTITY_PATHS, normalize_row

logger = logging.getLogger(__name__)

GaqlExecutor = Callable[[str, str, str], Dict[str, Any]]

_METRICS_SELECT = """
                metrics.cost_micros,
                metrics.clicks,
                metrics.impressions,
                metrics.conversions,
                metrics.conversions_value"""

_UNSAFE_LITERAL = re.compile(r"['\"\\\n]")


class ReportRow(NamedTuple):
    record: MetricRecord
    raw: Mapping[str, Any]


def _numeric_id(value, field: str) -> str:
    value = str(value).strip()
    if not value.isdigit():
        raise ValueError(f"{field} must be numeric, got '{value}'")
    return value


def _literal(value, field: str) -> str:
    value = str(value).strip()
    if not value or _UNSAFE_LITERAL.search(value):
        raise ValueError(f"{field} contains characters that cannot be used in a query: '{value}'")
    return value


def _between(start_date: str, end_date: str) -> str:
    return f"segments.date BETWEEN '{start_date}' AND '{end_date}'"


def _run(
    execute: GaqlExecutor,
    customer_id: str,
    query: str,
    manager_id: str,
    entity: str,
    status_path: Optional[str] = None,
) -> List[ReportRow]:
    id_path, name_path = ENTITY_PATHS[entity]
    rows = execute(customer_id, query, manager_id).get("results", [])
    logger.debug(f"{entity} report returned {len(rows)} rows")
    return [
        ReportRow(normalize_row(row, id_path, name_path, status_path=status_path), row)
        for row in rows
    ]


def records(rows: List[ReportRow]) -> List[MetricRecord]:
    return [row.record for row in rows]


def fetch_campaign_rows(
    execute: GaqlExecutor,
    customer_id: str,
    start_date: str,
    end_date: str,
    manager_id: str = "",
) -> List[ReportRow]:
    """Campaign metrics for the date range, all statuses, most expensive first."""
    query = f"""
            SELECT
                campaign.id,
                campaign.name,
                campaign.status,
                campaign.advertising_channel_type,{_METRICS_SELECT}
            FROM campaign
            WHERE {_between(start_date, end_date)}
            ORDER BY metrics.cost_micros DESC
        """
    return _run(execute, customer_id, query, manager_id, "campaign", status_path="campaign.status")


def fetch_ad_group_rows(
    execute: GaqlExecutor,
    customer_id: str,
    campaign_id: str,
    start_date: str,
    end_date: str,
    manager_id: str = "",
) -> List[ReportRow]:
    campaign_id = _numeric_id(campaign_id, "campaign_id")
    query = f"""
            SELECT
                ad_group.id,
                ad_group.name,
                ad_group.status,
                campaign.name,{_METRICS_SELECT}
            FROM ad_group
            WHERE campaign.id = {campaign_id}
              AND {_between(start_date, end_date)}
            ORDER BY metrics.cost_micros DESC
        """
    return _run(execute, customer_id, query, manager_id, "ad_group", status_path="ad_group.status")


def fetch_keyword_rows(
    execute: GaqlExecutor,
    customer_id: str,
    start_date: str,
    end_date: str,
    limit: int = 20,
    manager_id: str = "",
) -> List[ReportRow]:
    """Enabled keywords ordered by spend."""
    limit = max(1, min(int(limit), 10000))
    query = f"""
            SELECT
                ad_group_criterion.criterion_id,
                ad_group_criterion.keyword.text,
                ad_group_criterion.keyword.match_type,
                ad_group.name,
                campaign.name,{_METRICS_SELECT}
            FROM keyword_view
            WHERE {_between(start_date, end_date)}
              AND ad_group_criterion.status = 'ENABLED'
            ORDER BY metrics.cost_micros DESC
            LIMIT {limit}
        """
    return _run(execute, customer_id, query, manager_id, "keyword")


def fetch_product_rows(
    execute: GaqlExecutor,
    customer_id: str,
    start_date: str,
    end_date: str,
    limit: int = 50,
    product_id: str = "",
    manager_id: str = "",
) -> List[ReportRow]:
    """Shopping product metrics, optionally restricted to a single product item id."""
    limit = max(1, min(int(limit), 10000))
    where_clauses = [_between(start_date, end_date)]
    if product_id:
        where_clauses.append(f"segments.product_item_id = '{_literal(product_id, 'product_id')}'")
    query = f"""
            SELECT
                segments.product_item_id,
                segments.product_title,{_METRICS_SELECT}
            FROM shopping_performance_view
            WHERE {' AND '.join(where_clauses)}
            ORDER BY metrics.cost_micros DESC
            LIMIT {limit}
        """
    return _run(execute, customer_id, query, manager_id, "product")


def fetch_daily_records(
    execute: GaqlExecutor,
    customer_id: str,
    start_date: str,
    end_date: str,
    manager_id: str = "",
) -> List[MetricRecord]:
    """One record per date, summed over campaigns, in date order."""
    query = f"""
            SELECT
                segments.date,{_METRICS_SELECT}
            FROM campaign
            WHERE {_between(start_date, end_date)}
            ORDER BY segments.date ASC
        """
    rows = _run(execute, customer_id, query, manager_id, "date")
    return rollup(records(rows))
