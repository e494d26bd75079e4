"""Heuristic Google Ads audit.

Fetches campaign performance rows, evaluates threshold rules per campaign and
builds the report the dashboard renders: findings grouped by area, a single
GLOBAL product bucket and an action center with the high-severity findings.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from config.settings import GoogleAdsSettings
from config.thresholds import (
    HIGH_CPC_THRESHOLD,
    LOW_CTR_THRESHOLD,
    LOW_ROAS_THRESHOLD,
    MIN_CLICKS_WITHOUT_CONVERSION,
    MIN_SPEND_FOR_ROAS,
)
from src.data_collector import GoogleAdsApiError, GoogleAdsCollector
from src.normalizer import CampaignRow, normalize_row
from utils.date_helpers import normalize_customer_id, normalize_date_range

logger = logging.getLogger("adnova.auditor")

ISSUE_KEYS = ("ux", "seo", "performance", "media", "googleads")

GLOBAL_PRODUCT = "GLOBAL"
ACTION_BUTTON = "Ver pasos"

RESUMEN_NO_CREDENTIALS = "No hay refresh_token de Google Ads."
RESUMEN_MISCONFIGURED = (
    "Google Ads no está configurado: faltan GOOGLE_ADS_DEVELOPER_TOKEN "
    "o GOOGLE_ADS_LOGIN_CUSTOMER_ID."
)
RESUMEN_MISSING_PARAMETER = "client_customer_id requerido."
RESUMEN_UPSTREAM_ERROR = "Error al consultar Google Ads."


class AuditStatus(Enum):
    OK = "ok"
    NO_CREDENTIALS = "no_credentials"
    MISCONFIGURED = "misconfigured"
    MISSING_PARAMETER = "missing_parameter"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class Finding:
    area: str
    title: str
    description: str
    severity: str
    recommendation: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "area": self.area,
            "title": self.title,
            "description": self.description,
            "severity": self.severity,
            "recommendation": self.recommendation,
        }

    def to_action(self) -> Dict[str, str]:
        return {
            "title": f"[{self.title}]",
            "description": self.description,
            "severity": self.severity,
            "button": ACTION_BUTTON,
        }


@dataclass
class AuditReport:
    """Audit result. ``status`` tells how it was produced and is not serialized."""

    products_analyzed: int
    resumen: str
    status: AuditStatus = AuditStatus.OK
    findings: List[Finding] = field(default_factory=list)
    products: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def action_center(self) -> List[Dict[str, str]]:
        return [f.to_action() for f in self.findings if f.severity == "high"]

    def issues(self) -> Dict[str, Any]:
        issues: Dict[str, Any] = {"productos": self.products}
        for key in ISSUE_KEYS:
            issues[key] = []
        for finding in self.findings:
            issues[finding.area.lower()].append(finding.to_dict())
            issues["googleads"].append(finding.to_dict())
        return issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productsAnalizados": self.products_analyzed,
            "resumen": self.resumen,
            "actionCenter": self.action_center,
            "issues": self.issues(),
        }


def canned_report(status: AuditStatus, resumen: str) -> AuditReport:
    """Zero-result report shared by every precondition and failure path."""
    return AuditReport(products_analyzed=0, resumen=resumen, status=status)


class CampaignAuditor:
    """Evaluates the heuristic rules over a set of campaign rows."""

    def audit_rows(self, raw_rows: Iterable[Dict[str, Any]]) -> AuditReport:
        """Single linear pass: totals plus per-campaign rule findings."""
        spend = 0.0
        clicks = 0
        impressions = 0
        conversions = 0.0
        count = 0
        findings: List[Finding] = []

        for raw in raw_rows:
            row = normalize_row(raw)
            count += 1
            spend += row.cost
            clicks += row.clicks
            impressions += row.impressions
            conversions += row.conversions

            findings.extend(self._check_low_ctr(row))
            findings.extend(self._check_high_cpc(row))
            findings.extend(self._check_spend_without_conversions(row))
            findings.extend(self._check_low_roas(row))

        avg_ctr = (clicks / impressions * 100) if impressions > 0 else 0.0
        cpc = (spend / clicks) if clicks > 0 else None
        cpc_text = f"{cpc:.2f}" if cpc is not None else "N/A"
        resumen = (
            f"Analizadas {count} campañas. CTR medio {avg_ctr:.2f}%. "
            f"CPC promedio {cpc_text}."
        )

        logger.info(
            "Audited %d campaigns: %d findings, $%.2f spend, %d clicks, %d impr, %.2f conv",
            count, len(findings), spend, clicks, impressions, conversions,
        )

        return AuditReport(
            products_analyzed=count,
            resumen=resumen,
            findings=findings,
            products=[
                {"nombre": GLOBAL_PRODUCT, "hallazgos": [f.to_dict() for f in findings]}
            ],
        )

    # --- Rules ---

    def _check_low_ctr(self, row: CampaignRow) -> List[Finding]:
        if row.impressions > 0 and row.ctr < LOW_CTR_THRESHOLD:
            return [Finding(
                area="Performance",
                title=f"CTR bajo · {row.campaign_name}",
                description=(
                    f"CTR {row.ctr:.2f}% con {row.impressions} impresiones "
                    f"y {row.clicks} clics."
                ),
                severity="medium",
                recommendation=(
                    "Mejora RSA, extensiones y relevancia de keywords. "
                    "Testea creatividades."
                ),
            )]
        return []

    def _check_high_cpc(self, row: CampaignRow) -> List[Finding]:
        if row.average_cpc > HIGH_CPC_THRESHOLD:
            return [Finding(
                area="Performance",
                title=f"CPC alto · {row.campaign_name}",
                description=(
                    f"CPC promedio {row.average_cpc:.2f} con {row.clicks} clics "
                    f"y coste {row.cost:.2f}."
                ),
                severity="medium",
                recommendation=(
                    "Revisa pujas, Quality Score y concordancias. "
                    "Pausa keywords caras sin retorno."
                ),
            )]
        return []

    def _check_spend_without_conversions(self, row: CampaignRow) -> List[Finding]:
        if (
            row.cost > 0
            and row.conversions == 0
            and row.clicks >= MIN_CLICKS_WITHOUT_CONVERSION
        ):
            return [Finding(
                area="UX",
                title=f"Gasto sin conversiones · {row.campaign_name}",
                description=(
                    f"Clicks {row.clicks}, coste {row.cost:.2f} y 0 conversiones."
                ),
                severity="high",
                recommendation=(
                    "Revisa términos de búsqueda, negativas, concordancias y la landing."
                ),
            )]
        return []

    def _check_low_roas(self, row: CampaignRow) -> List[Finding]:
        if row.cost <= 0 or row.conversions_value <= 0:
            return []
        roas = row.conversions_value / row.cost
        if roas < LOW_ROAS_THRESHOLD and row.cost > MIN_SPEND_FOR_ROAS:
            return [Finding(
                area="Performance",
                title=f"ROAS bajo · {row.campaign_name}",
                description=f"ROAS {roas:.2f} con gasto {row.cost:.2f}.",
                severity="medium",
                recommendation=(
                    "Ajusta pujas, audiencias y creatividades. "
                    "Evalúa excluir ubicaciones pobres."
                ),
            )]
        return []


def _refresh_token(user: Optional[Dict[str, Any]]) -> str:
    google = user.get("google") if isinstance(user, dict) else None
    if not isinstance(google, dict):
        return ""
    return str(google.get("refresh_token") or "").strip()


def generate_audit(
    user: Optional[Dict[str, Any]],
    options: Optional[Dict[str, Any]],
    settings: GoogleAdsSettings,
    collector_factory: Callable[[GoogleAdsSettings, str], GoogleAdsCollector] = GoogleAdsCollector,
) -> AuditReport:
    """Run a Google Ads audit for one account. Never raises.

    ``user`` carries ``{"google": {"refresh_token": ...}}``; ``options`` carries
    ``customerId`` and an optional ``dateRange`` preset. Every precondition
    failure and every upstream error maps to a canned zero-result report.
    """
    if not isinstance(options, dict):
        options = {}

    refresh_token = _refresh_token(user)
    if not refresh_token:
        return canned_report(AuditStatus.NO_CREDENTIALS, RESUMEN_NO_CREDENTIALS)

    missing = settings.missing()
    if missing:
        logger.warning("Google Ads audit misconfigured, missing: %s", ", ".join(missing))
        return canned_report(AuditStatus.MISCONFIGURED, RESUMEN_MISCONFIGURED)

    customer_id = normalize_customer_id(
        options.get("customerId") or options.get("customer_id")
    )
    if not customer_id:
        return canned_report(AuditStatus.MISSING_PARAMETER, RESUMEN_MISSING_PARAMETER)

    date_range = normalize_date_range(
        options.get("dateRange") or options.get("date_range")
    )

    try:
        collector = collector_factory(settings, refresh_token)
        rows = collector.get_campaign_rows(customer_id, date_range)
        return CampaignAuditor().audit_rows(rows)
    except GoogleAdsApiError as e:
        logger.error("Google Ads audit failed for %s: %s", customer_id, e)
    except Exception as e:
        logger.error("Google Ads audit failed for %s: %s", customer_id, e, exc_info=True)
    return canned_report(AuditStatus.UPSTREAM_ERROR, RESUMEN_UPSTREAM_ERROR)
