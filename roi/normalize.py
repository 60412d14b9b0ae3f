"""Convert Google Ads search rows into flat MetricRecords."""
import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from roi.errors import MalformedRowError
from roi.models import MetricRecord

logger = logging.getLogger(__name__)

MICROS_PER_UNIT = 1_000_000

# (id path, name path) per report type, as GAQL field paths.
ENTITY_PATHS: Dict[str, Tuple[str, str]] = {
    "campaign": ("campaign.id", "campaign.name"),
    "ad_group": ("ad_group.id", "ad_group.name"),
    "keyword": ("ad_group_criterion.criterion_id", "ad_group_criterion.keyword.text"),
    "product": ("segments.product_item_id", "segments.product_title"),
    "date": ("segments.date", "segments.date"),
}

# record field -> (metrics field, is integer)
_METRIC_FIELDS = (
    ("cost", "cost_micros", True),
    ("clicks", "clicks", True),
    ("impressions", "impressions", True),
    ("conversions", "conversions", False),
    ("revenue", "conversions_value", False),
)

_MISSING = object()


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _lookup(node: Any, key: str) -> Any:
    if not isinstance(node, Mapping):
        return _MISSING
    for candidate in (key, _camel(key)):
        value = node.get(candidate)
        if value is not None:
            return value
    return _MISSING


def resolve_path(row: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted GAQL path through a row. Accepts snake_case or camelCase keys.

    Returns the module-level sentinel when any segment is absent.
    """
    node: Any = row
    for segment in path.split("."):
        node = _lookup(node, segment)
        if node is _MISSING:
            return _MISSING
    return node


def _coerce(value: Any, field: str, integer: bool, row: Mapping[str, Any]):
    # int64 metrics arrive as JSON strings from the REST endpoint
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedRowError(f"Metric '{field}' is not numeric: {value!r}", row) from None
    if math.isnan(number) or math.isinf(number):
        raise MalformedRowError(f"Metric '{field}' is not finite: {value!r}", row)
    if number < 0:
        raise MalformedRowError(f"Metric '{field}' is negative: {value!r}", row)
    return int(number) if integer else number


def normalize_row(
    row: Mapping[str, Any],
    id_path: str,
    name_path: str,
    strict: bool = False,
    status_path: Optional[str] = None,
) -> MetricRecord:
    """Build a MetricRecord from one search result row.

    Args:
        row: A result row, e.g. ``{"campaign": {...}, "metrics": {"costMicros": "1230000", ...}}``
        id_path: Dotted path of the entity identifier (``campaign.id``)
        name_path: Dotted path of the display name (``campaign.name``)
        strict: Also require every metric field. The REST API omits zero-valued
            metrics, so by default an absent metric reads as 0.
        status_path: Optional dotted path of a status field to carry through

    Raises:
        MalformedRowError: the entity id or the metrics block is absent, or a
            metric value is absent (strict), non-numeric or negative.
    """
    if not isinstance(row, Mapping):
        raise MalformedRowError(f"Row must be a mapping, got {type(row).__name__}", row)

    entity_id = resolve_path(row, id_path)
    if entity_id is _MISSING:
        raise MalformedRowError(f"Row is missing required field '{id_path}'", row)

    metrics = _lookup(row, "metrics")
    if metrics is _MISSING or not isinstance(metrics, Mapping):
        raise MalformedRowError("Row is missing required field 'metrics'", row)

    name = resolve_path(row, name_path)
    if name is _MISSING:
        name = ""

    values = {}
    for attr, field, integer in _METRIC_FIELDS:
        raw = _lookup(metrics, field)
        if raw is _MISSING:
            if strict:
                raise MalformedRowError(f"Row is missing required field 'metrics.{field}'", row)
            raw = 0
        values[attr] = _coerce(raw, field, integer, row)

    status = None
    if status_path:
        found = resolve_path(row, status_path)
        status = None if found is _MISSING else str(found)

    return MetricRecord(
        entity_id=str(entity_id),
        entity_name=str(name),
        cost=values["cost"] / MICROS_PER_UNIT,
        clicks=values["clicks"],
        impressions=values["impressions"],
        conversions=values["conversions"],
        revenue=values["revenue"],
        status=status,
    )


def normalize_rows(
    rows: Iterable[Mapping[str, Any]],
    id_path: str,
    name_path: str,
    strict: bool = False,
    status_path: Optional[str] = None,
) -> List[MetricRecord]:
    """Normalize every row; the first malformed row aborts the whole batch."""
    records = []
    for index, row in enumerate(rows):
        try:
            records.append(normalize_row(row, id_path, name_path, strict=strict, status_path=status_path))
        except MalformedRowError as e:
            logger.warning(f"Malformed row at index {index}: {e}")
            raise
    return records
