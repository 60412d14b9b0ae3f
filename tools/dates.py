"""Date range resolution for report tools."""
from datetime import date, datetime, timedelta
from typing import Dict, Optional

DATE_FORMAT = "%Y-%m-%d"

# period -> (days back for start, days back for end)
PERIODS = {
    "today": (0, 0),
    "yesterday": (1, 1),
    "7days": (7, 0),
    "30days": (30, 0),
}
DEFAULT_PERIOD = "30days"


def parse_date(value: str, field: str) -> date:
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"{field} must be a date in YYYY-MM-DD format, got '{value}'") from None


def resolve_date_range(
    start_date: str = "",
    end_date: str = "",
    period: str = "",
    today: Optional[date] = None,
) -> Dict[str, str]:
    """Return ``{"start_date": ..., "end_date": ...}``.

    An explicit start/end pair wins; otherwise the named period is counted
    back from today (default: last 30 days).
    """
    if start_date or end_date:
        if not (start_date and end_date):
            raise ValueError("start_date and end_date are required together (format: YYYY-MM-DD)")
        start = parse_date(start_date, "start_date")
        end = parse_date(end_date, "end_date")
        if start > end:
            raise ValueError(f"start_date {start} is after end_date {end}")
    else:
        key = (period or DEFAULT_PERIOD).strip().lower()
        if key not in PERIODS:
            raise ValueError(f"Invalid period '{period}'. Must be one of: {', '.join(PERIODS)}")
        today = today or date.today()
        start_back, end_back = PERIODS[key]
        start = today - timedelta(days=start_back)
        end = today - timedelta(days=end_back)

    return {"start_date": start.strftime(DATE_FORMAT), "end_date": end.strftime(DATE_FORMAT)}
