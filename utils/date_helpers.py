"""Date range preset and account id helpers."""

from typing import Optional

from config.thresholds import DATE_RANGE_ALIASES, DATE_RANGES, DEFAULT_DATE_RANGE


def normalize_date_range(value: Optional[str]) -> str:
    """Return a valid GAQL DURING preset, falling back to LAST_30_DAYS."""
    preset = str(value or "").strip().upper()
    if preset in DATE_RANGES:
        return preset
    return DATE_RANGE_ALIASES.get(preset, DEFAULT_DATE_RANGE)


def normalize_customer_id(value) -> str:
    """Strip hyphens and whitespace from a Google Ads customer id."""
    return str(value or "").replace("-", "").strip()
