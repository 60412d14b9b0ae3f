"""Budget recommendation rules keyed on ROI (percent)."""
from roi.models import BudgetAction, Recommendation


def recommend(roi: float) -> Recommendation:
    """Classify an ROI percentage into a budget action. Upper bounds are inclusive of the lower tier."""
    if roi > 100:
        return Recommendation(
            action=BudgetAction.INCREASE_BUDGET,
            message=f"Strong performance! ROI is {roi:.2f}%. Consider increasing ad spend by 20-30%.",
            suggested_budget_change=0.25,
        )
    if roi > 30:
        return Recommendation(
            action=BudgetAction.MAINTAIN_BUDGET,
            message=f"Good performance. ROI is {roi:.2f}%. Maintain current budget and monitor.",
            suggested_budget_change=0.0,
        )
    if roi > 0:
        return Recommendation(
            action=BudgetAction.OPTIMIZE,
            message=f"Low ROI ({roi:.2f}%). Review ad targeting and creative. Consider A/B testing.",
            suggested_budget_change=0.0,
        )
    return Recommendation(
        action=BudgetAction.DECREASE_BUDGET,
        message=f"Negative ROI ({roi:.2f}%). Consider reducing spend by 30-50% or pausing campaign.",
        suggested_budget_change=-0.4,
    )
