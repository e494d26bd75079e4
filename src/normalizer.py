"""Normalize raw Google Ads rows into typed CampaignRow records."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from config.thresholds import MICROS_PER_UNIT


@dataclass(frozen=True)
class CampaignRow:
    campaign_id: str
    campaign_name: str
    status: str
    impressions: int
    clicks: int
    conversions: float
    conversions_value: float
    cost: float
    ctr: float
    average_cpc: float


def _pick(sources, *names) -> Optional[Any]:
    """First value present under any of *names* in any source dict."""
    for source in sources:
        for name in names:
            value = source.get(name)
            if value is not None and value != "":
                return value
    return None


def _as_int(value) -> int:
    return 0 if value is None else int(float(value))


def _as_float(value) -> float:
    return 0.0 if value is None else float(value)


def normalize_row(raw: Dict[str, Any]) -> CampaignRow:
    """Resolve the field fallbacks of a raw row once.

    Accepts the nested REST shape (``{"campaign": {...}, "metrics": {...}}``) or
    a flat dict, with camelCase or snake_case names. Cost comes from
    ``costMicros`` / ``cost_micros`` divided by one million, else from ``cost``.
    A provided CTR (percent) or average CPC wins over the derived value.

    Raises ValueError/TypeError for values that are not numeric.
    """
    if not isinstance(raw, dict):
        raise TypeError(f"Campaign row must be a dict, got {type(raw).__name__}")

    campaign = raw.get("campaign") or {}
    metrics = raw.get("metrics") or {}
    sources = (metrics, campaign, raw)

    campaign_id = _pick((campaign, raw), "id", "campaignId", "campaign_id")
    name = _pick((campaign, raw), "name", "campaignName", "campaign_name")
    status = _pick((campaign, raw), "status")

    impressions = _as_int(_pick(sources, "impressions"))
    clicks = _as_int(_pick(sources, "clicks"))
    conversions = _as_float(_pick(sources, "conversions"))
    conversions_value = _as_float(
        _pick(sources, "conversionsValue", "conversions_value")
    )

    cost_micros = _pick(sources, "costMicros", "cost_micros")
    if cost_micros is not None:
        cost = float(cost_micros) / MICROS_PER_UNIT
    else:
        cost = _as_float(_pick(sources, "cost"))

    provided_ctr = _pick(sources, "ctr")
    if provided_ctr is not None:
        ctr = float(provided_ctr)
    else:
        ctr = (clicks / impressions * 100) if impressions > 0 else 0.0

    provided_cpc = _pick(sources, "averageCpc", "average_cpc")
    if provided_cpc is not None:
        average_cpc = float(provided_cpc)
    else:
        average_cpc = (cost / clicks) if clicks > 0 else 0.0

    if campaign_id is None:
        campaign_id = ""
    if not name:
        name = f"Campaign {campaign_id}".strip()

    return CampaignRow(
        campaign_id=str(campaign_id),
        campaign_name=str(name),
        status=str(status or "UNKNOWN"),
        impressions=impressions,
        clicks=clicks,
        conversions=conversions,
        conversions_value=conversions_value,
        cost=cost,
        ctr=ctr,
        average_cpc=average_cpc,
    )
