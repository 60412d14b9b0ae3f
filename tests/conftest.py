import pytest

from helpers import campaign_row


@pytest.fixture
def campaign_rows():
    # totals: cost 245.67, clicks 1234, impressions 45678, conversions 89, revenue 1567.89
    return [
        campaign_row(111, "Brand", 150_000_000, 800, 20000, 60, 1200.0),
        campaign_row(222, "Generic", 95_670_000, 434, 25678, 29, 367.89),
        campaign_row(333, "Paused Promo", 0, 0, 0, 0, 0, status="PAUSED"),
    ]


@pytest.fixture
def enable_google_ads(monkeypatch):
    """Pretend a developer token is configured for every tools module."""
    import tools.analytics
    import tools.product_roi

    monkeypatch.setattr(tools.analytics, "GOOGLE_ADS_DEVELOPER_TOKEN", "test-token")
    monkeypatch.setattr(tools.product_roi, "GOOGLE_ADS_DEVELOPER_TOKEN", "test-token")
