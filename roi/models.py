"""Value types passed between the normalizer, aggregator, calculator and rule engine."""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class MetricRecord:
    """Metrics for one entity (campaign, ad group, keyword, product or date) over a date range."""

    entity_id: str
    entity_name: str
    cost: float = 0.0
    clicks: int = 0
    impressions: int = 0
    conversions: float = 0.0
    revenue: float = 0.0
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.status is None:
            data.pop("status")
        return data


@dataclass(frozen=True)
class AggregateTotals:
    total_cost: float = 0.0
    total_clicks: int = 0
    total_impressions: int = 0
    total_conversions: float = 0.0
    total_revenue: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DerivedMetrics:
    """Ratios computed from AggregateTotals. A zero denominator yields 0."""

    roas: float = 0.0
    roi: float = 0.0
    avg_cpc: float = 0.0
    conversion_rate: float = 0.0
    avg_ctr: float = 0.0
    profit: float = 0.0
    cost_per_conversion: float = 0.0

    def to_dict(self, digits: Optional[int] = 2) -> Dict[str, float]:
        data = asdict(self)
        if digits is None:
            return data
        return {key: round(value, digits) for key, value in data.items()}


class BudgetAction(str, Enum):
    INCREASE_BUDGET = "INCREASE_BUDGET"
    MAINTAIN_BUDGET = "MAINTAIN_BUDGET"
    OPTIMIZE = "OPTIMIZE"
    DECREASE_BUDGET = "DECREASE_BUDGET"


@dataclass(frozen=True)
class Recommendation:
    action: BudgetAction
    message: str
    suggested_budget_change: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "message": self.message,
            "suggested_budget_change": self.suggested_budget_change,
        }
