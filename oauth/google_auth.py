"""Google Ads REST access: credentials, headers and GAQL execution."""
import logging
import os
import time
from typing import Any, Callable, Dict, Optional

import requests
from google.auth.transport.requests import Request as GARequest
from google.oauth2.credentials import Credentials

logger = logging.getLogger(__name__)

API_VERSION = os.environ.get("GOOGLE_ADS_API_VERSION", "v20")
GOOGLE_ADS_DEVELOPER_TOKEN = os.environ.get("GOOGLE_ADS_DEVELOPER_TOKEN")
GOOGLE_ADS_CLIENT_ID = os.environ.get("GOOGLE_ADS_CLIENT_ID")
GOOGLE_ADS_CLIENT_SECRET = os.environ.get("GOOGLE_ADS_CLIENT_SECRET")
GOOGLE_ADS_REFRESH_TOKEN = os.environ.get("GOOGLE_ADS_REFRESH_TOKEN")
GOOGLE_ADS_CUSTOMER_ID = os.environ.get("GOOGLE_ADS_CUSTOMER_ID", "")
GOOGLE_ADS_LOGIN_CUSTOMER_ID = os.environ.get("GOOGLE_ADS_LOGIN_CUSTOMER_ID", "")

SCOPES = ["https://www.googleapis.com/auth/adwords"]
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
BASE_URL = "https://googleads.googleapis.com"

REQUEST_TIMEOUT = 60
MAX_RETRIES = 3
RETRY_STATUS_CODES = {429, 500, 502, 503, 504}

_credentials: Optional[Credentials] = None


class GoogleAdsApiError(Exception):
    """Non-2xx response from the Google Ads API."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def format_customer_id(customer_id) -> str:
    """Normalize a customer ID to 10 digits without dashes."""
    cid = "".join(ch for ch in str(customer_id) if ch.isdigit())
    return cid.zfill(10)


def get_credentials() -> Credentials:
    """Return OAuth credentials built from the stored refresh token, refreshing the access token if needed."""
    global _credentials

    if _credentials is None:
        missing = [
            name for name, value in (
                ("GOOGLE_ADS_CLIENT_ID", GOOGLE_ADS_CLIENT_ID),
                ("GOOGLE_ADS_CLIENT_SECRET", GOOGLE_ADS_CLIENT_SECRET),
                ("GOOGLE_ADS_REFRESH_TOKEN", GOOGLE_ADS_REFRESH_TOKEN),
            ) if not value
        ]
        if missing:
            raise ValueError(f"Missing Google Ads OAuth settings: {', '.join(missing)}")
        _credentials = Credentials(
            token=None,
            refresh_token=GOOGLE_ADS_REFRESH_TOKEN,
            client_id=GOOGLE_ADS_CLIENT_ID,
            client_secret=GOOGLE_ADS_CLIENT_SECRET,
            token_uri=GOOGLE_TOKEN_URL,
            scopes=SCOPES,
        )

    if not _credentials.valid:
        logger.info("Refreshing Google Ads access token...")
        _credentials.refresh(GARequest())

    return _credentials


def get_headers_with_auto_token(customer_id: str = "", manager_id: str = "") -> Dict[str, str]:
    """Build request headers with a fresh bearer token."""
    if not GOOGLE_ADS_DEVELOPER_TOKEN:
        raise ValueError("Google Ads Developer Token is not set in environment variables.")

    creds = get_credentials()
    headers = {
        "Authorization": f"Bearer {creds.token}",
        "developer-token": GOOGLE_ADS_DEVELOPER_TOKEN,
        "content-type": "application/json",
    }
    login_id = manager_id or GOOGLE_ADS_LOGIN_CUSTOMER_ID
    if login_id:
        headers["login-customer-id"] = format_customer_id(login_id)
    return headers


def _make_request(
    method: Callable[..., requests.Response],
    url: str,
    headers: Dict[str, str],
    payload: Optional[Dict[str, Any]] = None,
) -> requests.Response:
    """Send a request, retrying throttled and server-error responses with backoff."""
    for attempt in range(MAX_RETRIES + 1):
        if payload is None:
            resp = method(url, headers=headers, timeout=REQUEST_TIMEOUT)
        else:
            resp = method(url, headers=headers, json=payload, timeout=REQUEST_TIMEOUT)

        if resp.status_code not in RETRY_STATUS_CODES or attempt == MAX_RETRIES:
            return resp

        delay = 2 ** attempt
        logger.warning(f"Google Ads API returned {resp.status_code}, retrying in {delay}s ({attempt + 1}/{MAX_RETRIES})")
        time.sleep(delay)


def execute_gaql(customer_id: str, query: str, manager_id: str = "") -> Dict[str, Any]:
    """Run a GAQL query through the search endpoint, following every page.

    Returns:
        ``{"results": [...], "totalRows": n, "query": query}``
    """
    if not (customer_id or GOOGLE_ADS_CUSTOMER_ID):
        raise ValueError("No customer_id given and GOOGLE_ADS_CUSTOMER_ID is not set.")
    cid = format_customer_id(customer_id or GOOGLE_ADS_CUSTOMER_ID)
    mgr = format_customer_id(manager_id) if manager_id else ""
    headers = get_headers_with_auto_token(cid, mgr)
    url = f"{BASE_URL}/{API_VERSION}/customers/{cid}/googleAds:search"

    results = []
    payload: Dict[str, Any] = {"query": query}
    while True:
        resp = _make_request(requests.post, url, headers, payload)
        if not resp.ok:
            raise GoogleAdsApiError(
                f"Error executing GAQL query: {resp.status_code} {resp.reason} - {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )
        data = resp.json()
        results.extend(data.get("results", []))
        page_token = data.get("nextPageToken")
        if not page_token:
            break
        payload = {"query": query, "pageToken": page_token}

    logger.info(f"GAQL query for {cid} returned {len(results)} rows")
    return {"results": results, "totalRows": len(results), "query": query}
