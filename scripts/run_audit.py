"""Run a Google Ads audit from the command line and print the JSON report.

Server-side secrets come from the environment (or .env / Parameter Store,
see config/settings.py). The refresh token defaults to
GOOGLE_ADS_REFRESH_TOKEN.

Usage:
    python scripts/run_audit.py --customer-id 123-456-7890 --date-range LAST_7_DAYS
"""

import argparse
import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import load_google_ads_settings
from config.thresholds import DATE_RANGES, DEFAULT_DATE_RANGE
from src.campaign_auditor import AuditStatus, generate_audit


def main(argv=None):
    parser = argparse.ArgumentParser(description="Heuristic Google Ads audit")
    parser.add_argument("--customer-id", required=True, help="Google Ads customer id")
    parser.add_argument(
        "--date-range",
        default=DEFAULT_DATE_RANGE,
        help=f"One of {', '.join(DATE_RANGES)}",
    )
    parser.add_argument(
        "--refresh-token",
        default=os.getenv("GOOGLE_ADS_REFRESH_TOKEN", ""),
        help="OAuth refresh token of the merchant",
    )
    args = parser.parse_args(argv)

    report = generate_audit(
        {"google": {"refresh_token": args.refresh_token}},
        {"customerId": args.customer_id, "dateRange": args.date_range},
        load_google_ads_settings(),
    )
    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    return 0 if report.status == AuditStatus.OK else 1


if __name__ == "__main__":
    sys.exit(main())
