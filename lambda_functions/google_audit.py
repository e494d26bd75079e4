"""Lambda handler for on-demand Google Ads audits.

Invoked through API Gateway (or directly) with the merchant's refresh token,
the target customer id and an optional date range preset. Always answers 200:
failures come back as a report whose ``resumen`` explains what went wrong.
"""

import json
import logging
import sys
import os

# Add project root to path for Lambda packaging
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import load_google_ads_settings
from src.campaign_auditor import generate_audit

logger = logging.getLogger("adnova.lambda")

# Built once per container
SETTINGS = load_google_ads_settings()


def _parse_event(event) -> dict:
    """Merge a JSON API Gateway body over the top-level event fields."""
    params = dict(event or {})
    body = params.pop("body", None)
    if isinstance(body, str) and body:
        try:
            body = json.loads(body)
        except ValueError:
            logger.warning("Ignoring request body that is not valid JSON")
            body = None
    if isinstance(body, dict):
        params.update(body)
    return params


def lambda_handler(event, context):
    """Run the audit and return an API Gateway style response."""
    params = _parse_event(event)

    user = {"google": {"refresh_token": params.get("refresh_token", "")}}
    options = {
        "customerId": params.get("customerId") or params.get("customer_id"),
        "dateRange": params.get("dateRange") or params.get("date_range"),
    }

    logger.info("Google Ads audit requested for %s", options["customerId"])
    report = generate_audit(user, options, SETTINGS)
    logger.info("Google Ads audit finished: %s", report.status.value)

    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(report.to_dict(), ensure_ascii=False),
    }
