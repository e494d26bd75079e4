"""Heuristic rule thresholds and date range presets for the Google Ads audit."""

from typing import List

MICROS_PER_UNIT = 1_000_000

# Low CTR: flagged when CTR (percent) is strictly below this value
LOW_CTR_THRESHOLD = 2.0

# High CPC: flagged when average CPC is strictly above this value
HIGH_CPC_THRESHOLD = 1.2

# Spend without conversions: clicks at or above this with zero conversions
MIN_CLICKS_WITHOUT_CONVERSION = 120

# Low ROAS: only judged once spend passes MIN_SPEND_FOR_ROAS
LOW_ROAS_THRESHOLD = 1.0
MIN_SPEND_FOR_ROAS = 100.0

DATE_RANGES: List[str] = [
    "TODAY",
    "YESTERDAY",
    "LAST_7_DAYS",
    "LAST_14_DAYS",
    "LAST_30_DAYS",
    "THIS_MONTH",
    "LAST_MONTH",
]

DEFAULT_DATE_RANGE = "LAST_30_DAYS"

# Shorthand presets sent by the dashboard
DATE_RANGE_ALIASES = {
    "LAST_7": "LAST_7_DAYS",
    "LAST_7D": "LAST_7_DAYS",
    "LAST7": "LAST_7_DAYS",
    "LAST7D": "LAST_7_DAYS",
    "LAST_14": "LAST_14_DAYS",
    "LAST_14D": "LAST_14_DAYS",
    "LAST14D": "LAST_14_DAYS",
    "LAST_30": "LAST_30_DAYS",
    "LAST_30D": "LAST_30_DAYS",
    "LAST30": "LAST_30_DAYS",
    "LAST30D": "LAST_30_DAYS",
}
