import logging

# Load environment variables FIRST
from dotenv import load_dotenv
load_dotenv()

# Collaborator modules read their settings at import time
from mcp_instance import mcp  # noqa: E402
import tools.analytics  # noqa: E402,F401
import tools.product_roi  # noqa: E402,F401

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger('google_ads_roi_server')

# Server startup
logger.info("Starting Google Ads ROI MCP Server...")


@mcp.resource("roi://metrics")
def metrics_reference() -> str:
    """Definitions of the reported metrics and the budget recommendation rules."""
    return """## Key Metrics

                - ROI (Return on Investment): (Revenue - Ad Spend) / Ad Spend x 100
                  Above 100%: strongly profitable. Below 0%: losing money.
                - ROAS (Return on Ad Spend): Revenue / Ad Spend
                  4.0 means 4 of revenue for every 1 spent. Typical minimum target: 2.0-3.0
                - CPC (Cost Per Click): Total Spend / Total Clicks
                - CTR (Click-Through Rate): Clicks / Impressions x 100
                - Conversion Rate: Conversions / Clicks x 100
                - Cost is reported by Google Ads in micros (1,000,000 micros = 1 currency unit)

                Any ratio whose denominator is zero is reported as 0, so a ROI of 0
                can mean either no spend or break-even.

                ## Budget Recommendations (by ROI)

                - ROI > 100%: INCREASE_BUDGET, suggested change +25%
                - 30% < ROI <= 100%: MAINTAIN_BUDGET
                - 0% < ROI <= 30%: OPTIMIZE (review targeting and creative)
                - ROI <= 0%: DECREASE_BUDGET, suggested change -40%

                ## Date Ranges

                Report tools accept start_date and end_date (YYYY-MM-DD) or a period:
                today, yesterday, 7days, 30days (default)."""


if __name__ == "__main__":
    import sys

    # Check command line arguments for transport mode
    if "--http" in sys.argv:
        logger.info("Starting with HTTP transport on http://127.0.0.1:8000/mcp")
        mcp.run(transport="streamable-http", host="127.0.0.1", port=8000, path="/mcp")
    else:
        # Default to STDIO for Claude Desktop compatibility
        logger.info("Starting with STDIO transport for Claude Desktop")
        mcp.run(transport="stdio")
