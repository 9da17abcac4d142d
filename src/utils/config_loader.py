"""
Configuration loader for the Pesapal gateway
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
import logging

logger = logging.getLogger(__name__)

LIVE_API_URL = "https://www.pesapal.com/api"
SANDBOX_API_URL = "https://cybqa.pesapal.com/pesapalv3"


class ConfigError(ValueError):
    """Raised when required gateway settings are missing or invalid"""


class PesapalConfig(BaseModel):
    """Gateway credentials and URLs. Read-only once built."""

    model_config = {"frozen": True}

    consumer_key: str = Field(min_length=1)
    consumer_secret: str = Field(min_length=1)
    api_url: str = LIVE_API_URL
    callback_url: str = ""
    ipn_url: str = ""
    use_sandbox: bool = False
    account_label: str = "Vertex Trading Account"
    timeout_seconds: Optional[float] = Field(default=None, gt=0)

    @property
    def base_url(self) -> str:
        return self.api_url.rstrip("/")

    def __repr__(self) -> str:
        return f"PesapalConfig(api_url={self.api_url!r}, use_sandbox={self.use_sandbox})"

    __str__ = __repr__


def _as_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def load_pesapal_config(env: Optional[Mapping[str, str]] = None) -> PesapalConfig:
    """
    Build and validate the gateway configuration from environment variables

    Args:
        env: Mapping to read from. Defaults to os.environ after loading .env

    Returns:
        Validated PesapalConfig object

    Raises:
        ConfigError: If credentials are missing or a value doesn't match the schema
    """
    if env is None:
        load_dotenv()
        env = os.environ

    use_sandbox = _as_bool(env.get("PESAPAL_USE_SANDBOX"))
    api_url = (env.get("PESAPAL_API_URL") or "").strip() or (SANDBOX_API_URL if use_sandbox else LIVE_API_URL)

    missing = [name for name in ("PESAPAL_CONSUMER_KEY", "PESAPAL_CONSUMER_SECRET") if not (env.get(name) or "").strip()]
    if missing:
        raise ConfigError(f"Missing required gateway settings: {', '.join(missing)}")

    raw = {
        "consumer_key": env["PESAPAL_CONSUMER_KEY"].strip(),
        "consumer_secret": env["PESAPAL_CONSUMER_SECRET"].strip(),
        "api_url": api_url,
        "callback_url": (env.get("PESAPAL_CALLBACK_URL") or "").strip(),
        "ipn_url": (env.get("PESAPAL_IPN_URL") or "").strip(),
        "use_sandbox": use_sandbox,
        "account_label": (env.get("PESAPAL_ACCOUNT_LABEL") or "").strip() or "Vertex Trading Account",
        "timeout_seconds": (env.get("PESAPAL_TIMEOUT_SECONDS") or "").strip() or None,
    }

    try:
        config = PesapalConfig(**raw)
    except ValidationError as e:
        logger.error(f"Gateway config validation failed: {e}")
        raise ConfigError(str(e)) from e

    logger.info(f"Loaded gateway config for {config.base_url} (sandbox={config.use_sandbox})")
    return config
