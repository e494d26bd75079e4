"""Google Ads REST client for collecting campaign performance rows.

Uses the Google Ads REST API directly (OAuth refresh-token grant followed by a
single searchStream call) instead of the gRPC client library.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from config.settings import TOKEN_URL, GoogleAdsSettings
from utils.date_helpers import normalize_customer_id, normalize_date_range
from utils.log_sanitizer import sanitize

logger = logging.getLogger("adnova.collector")

# metrics.ctr and metrics.average_cpc are not selected: the API reports them as
# a ratio and in micros, so they are derived from the counters instead.
CAMPAIGN_PERFORMANCE_QUERY = """
SELECT
  campaign.id,
  campaign.name,
  campaign.status,
  metrics.impressions,
  metrics.clicks,
  metrics.conversions,
  metrics.conversions_value,
  metrics.cost_micros
FROM campaign
WHERE segments.date DURING {date_range}
"""


class GoogleAdsApiError(RuntimeError):
    """Non-2xx answer from the OAuth token endpoint or the Ads API."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _response_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text[:2000]


class GoogleAdsCollector:
    """Collects campaign performance rows for one audit run.

    A collector is built per audit, so every run exchanges the refresh token
    for a fresh access token. Only one searchStream response is read: if the
    upstream ever paginates past it, the extra rows are not fetched.
    """

    def __init__(
        self,
        settings: GoogleAdsSettings,
        refresh_token: str,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings
        self.refresh_token = refresh_token
        self.http = session or requests

    def get_access_token(self) -> str:
        """Exchange the refresh token for a short-lived access token."""
        resp = self.http.post(
            TOKEN_URL,
            data={
                "client_id": self.settings.client_id,
                "client_secret": self.settings.client_secret,
                "refresh_token": self.refresh_token,
                "grant_type": "refresh_token",
            },
        )
        if not resp.ok:
            body = _response_body(resp)
            logger.error(
                "OAuth token exchange failed %d: %s", resp.status_code, sanitize(body)
            )
            raise GoogleAdsApiError(
                f"OAuth token exchange failed with {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )
        return resp.json()["access_token"]

    def search_stream(
        self, customer_id: str, query: str, access_token: str
    ) -> List[Dict[str, Any]]:
        """Execute a GAQL query via searchStream and flatten the chunks."""
        cid = normalize_customer_id(customer_id)
        url = f"{self.settings.base_url}/customers/{cid}/googleAds:searchStream"
        headers = {
            "Authorization": f"Bearer {access_token}",
            "developer-token": self.settings.developer_token,
            "login-customer-id": self.settings.login_customer_id,
            "Content-Type": "application/json",
        }
        resp = self.http.post(url, headers=headers, json={"query": query.strip()})

        if not resp.ok:
            body = _response_body(resp)
            logger.error(
                "Google Ads API error %d: %s", resp.status_code, sanitize(body)
            )
            raise GoogleAdsApiError(
                f"Google Ads API {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )

        payload = resp.json()
        # searchStream answers with a list of chunks; a bare object is one chunk
        chunks = payload if isinstance(payload, list) else [payload]

        results = []
        for chunk in chunks:
            for row in chunk.get("results", []):
                results.append(row)
        return results

    def get_campaign_rows(
        self, customer_id: str, date_range: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Fetch one row per campaign for the given date range preset."""
        preset = normalize_date_range(date_range)
        query = CAMPAIGN_PERFORMANCE_QUERY.format(date_range=preset)
        access_token = self.get_access_token()
        rows = self.search_stream(customer_id, query, access_token)
        logger.info(
            "Collected %d campaign rows for customer %s (%s)",
            len(rows),
            normalize_customer_id(customer_id),
            preset,
        )
        return rows
