"""Environment-aware configuration for the Adnova Google Ads audit."""

import os
import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

import boto3
from dotenv import load_dotenv

from utils.log_sanitizer import SanitizingFilter

load_dotenv()

# Environment
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
AWS_REGION = os.getenv("AWS_REGION") or os.getenv("DEPLOY_REGION", "us-east-2")

# Logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def install_log_filter(target: Optional[logging.Logger] = None) -> None:
    """Attach SanitizingFilter to every handler of *target* (root by default), once."""
    if target is None:
        target = logging.getLogger()
    for handler in target.handlers:
        if not any(isinstance(f, SanitizingFilter) for f in handler.filters):
            handler.addFilter(SanitizingFilter())


install_log_filter()
logger = logging.getLogger("adnova")

# Google endpoints
GOOGLE_ADS_API_VERSION = os.getenv("GOOGLE_ADS_API_VERSION", "v17")
TOKEN_URL = "https://oauth2.googleapis.com/token"

# Environment variable -> Parameter Store suffix
SETTINGS_PARAMETERS = {
    "GOOGLE_ADS_DEVELOPER_TOKEN": "DEVELOPER_TOKEN",
    "GOOGLE_ADS_LOGIN_CUSTOMER_ID": "LOGIN_CUSTOMER_ID",
    "GOOGLE_CLIENT_ID": "CLIENT_ID",
    "GOOGLE_CLIENT_SECRET": "CLIENT_SECRET",
}

_ssm_client = None


def get_ssm_client():
    global _ssm_client
    if _ssm_client is None:
        _ssm_client = boto3.client("ssm", region_name=AWS_REGION)
    return _ssm_client


def get_parameter(name: str, encrypted: bool = True) -> Optional[str]:
    """Fetch a parameter from AWS Parameter Store, None if it does not exist."""
    ssm = get_ssm_client()
    try:
        response = ssm.get_parameter(Name=name, WithDecryption=encrypted)
    except ssm.exceptions.ParameterNotFound:
        logger.warning("Parameter %s not found in Parameter Store", name)
        return None
    return response["Parameter"]["Value"]


@dataclass(frozen=True)
class GoogleAdsSettings:
    """Server-side Google Ads secrets, built once at process start."""

    developer_token: str = ""
    login_customer_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    api_version: str = GOOGLE_ADS_API_VERSION

    @property
    def base_url(self) -> str:
        return f"https://googleads.googleapis.com/{self.api_version}"

    def missing(self) -> List[str]:
        """Names of the required variables that are not configured."""
        required = [
            ("GOOGLE_ADS_DEVELOPER_TOKEN", self.developer_token),
            ("GOOGLE_ADS_LOGIN_CUSTOMER_ID", self.login_customer_id),
        ]
        return [name for name, value in required if not value]


def _clean(value) -> str:
    return str(value or "").strip()


def load_google_ads_settings(environ: Optional[Mapping[str, str]] = None) -> GoogleAdsSettings:
    """Build GoogleAdsSettings from the environment.

    When GOOGLE_ADS_SSM_PREFIX is set, values missing from the environment are
    read from Parameter Store as ``<prefix>/<NAME>``. Missing values are left
    empty and reported by ``GoogleAdsSettings.missing()``.
    """
    env = os.environ if environ is None else environ
    values = {name: _clean(env.get(name)) for name in SETTINGS_PARAMETERS}

    prefix = _clean(env.get("GOOGLE_ADS_SSM_PREFIX")).rstrip("/")
    if prefix:
        for name, suffix in SETTINGS_PARAMETERS.items():
            if not values[name]:
                values[name] = _clean(get_parameter(f"{prefix}/{suffix}"))

    return GoogleAdsSettings(
        developer_token=values["GOOGLE_ADS_DEVELOPER_TOKEN"],
        login_customer_id=values["GOOGLE_ADS_LOGIN_CUSTOMER_ID"].replace("-", ""),
        client_id=values["GOOGLE_CLIENT_ID"],
        client_secret=values["GOOGLE_CLIENT_SECRET"],
        api_version=_clean(env.get("GOOGLE_ADS_API_VERSION")) or GOOGLE_ADS_API_VERSION,
    )
