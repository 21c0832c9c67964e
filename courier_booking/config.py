"""
Centralized configuration with environment variable overrides.

Portal credentials, the sender profile, browser limits, retry policy and
webhook endpoints are all configurable here. Nothing is hardcoded in the
automation or tool logic; the root ``AppConfig`` is built once at process
start via ``load_config()`` and passed into the components that need it.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from courier_booking.logging_context import install_order_id_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: [%(order_id)s] %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag such as ``true``/``false``/``1``/``0``."""
    raw = os.getenv(env_var, default)
    normalized = str(raw).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class PortalConfig:
    """Courier portal location and login credentials."""

    url: str = os.getenv("JT_PORTAL_URL", "https://portal.jtexpress.ph")
    email: str = os.getenv("JT_EMAIL", "")
    password: str = os.getenv("JT_PASSWORD", "")


@dataclass(frozen=True)
class SenderProfile:
    """Business sender details reused for every booking."""

    name: str = os.getenv("SENDER_NAME", "Your Business Name")
    contact: str = os.getenv("SENDER_CONTACT", "09123456789")
    address: str = os.getenv(
        "SENDER_ADDRESS", "Your Business Address, City, Province, ZIP"
    )
    company: str = os.getenv("SENDER_COMPANY", "Your Company Name")


@dataclass(frozen=True)
class BrowserConfig:
    """Headless browser launch settings and bounded waits (milliseconds)."""

    headless: bool = _safe_bool("BROWSER_HEADLESS", "true")
    viewport_width: int = _safe_int("BROWSER_VIEWPORT_WIDTH", "1280")
    viewport_height: int = _safe_int("BROWSER_VIEWPORT_HEIGHT", "720")
    timeout_ms: int = _safe_int("BROWSER_TIMEOUT_MS", "30000")
    candidate_timeout_ms: int = _safe_int("CANDIDATE_TIMEOUT_MS", "5000")
    login_form_timeout_ms: int = _safe_int("LOGIN_FORM_TIMEOUT_MS", "10000")
    verify_timeout_ms: int = _safe_int("VERIFY_TIMEOUT_MS", "5000")
    visibility_timeout_ms: int = _safe_int("VISIBILITY_TIMEOUT_MS", "2000")
    settle_delay_ms: int = _safe_int("SETTLE_DELAY_MS", "3000")


@dataclass(frozen=True)
class RetryConfig:
    """Bounded retry policy for a single booking call."""

    max_retries: int = _safe_int("MAX_RETRIES", "3")
    retry_delay_sec: float = _safe_float("RETRY_DELAY_SEC", "2.0")


@dataclass(frozen=True)
class WebhookConfig:
    """Outbound order-status webhook; an empty URL disables it."""

    status_webhook_url: str = os.getenv("APPS_SCRIPT_WEBHOOK", "")
    timeout_sec: float = _safe_float("WEBHOOK_TIMEOUT_SEC", "10.0")


@dataclass(frozen=True)
class StoreConfig:
    """Spreadsheet-backed order store and storefront settings."""

    apps_script_url: str = os.getenv("APPS_SCRIPT_URL", "")
    storefront_url: str = os.getenv("STOREFRONT_URL", "")
    qr_api_base: str = os.getenv("QR_API_BASE", "https://chart.googleapis.com/chart")
    qr_size: str = os.getenv("QR_SIZE", "150x150")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    portal: PortalConfig = field(default_factory=PortalConfig)
    sender: SenderProfile = field(default_factory=SenderProfile)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    webhook: WebhookConfig = field(default_factory=WebhookConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    port: int = _safe_int("PORT", "3000")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.portal.url.startswith(("http://", "https://")):
        raise ValueError(
            f"JT_PORTAL_URL must be an http(s) URL, got {config.portal.url!r}"
        )
    if config.retry.max_retries < 1:
        raise ValueError(
            f"MAX_RETRIES must be >= 1, got {config.retry.max_retries}"
        )
    if config.retry.retry_delay_sec < 0:
        raise ValueError(
            f"RETRY_DELAY_SEC must be >= 0, got {config.retry.retry_delay_sec}"
        )
    if config.webhook.timeout_sec <= 0:
        raise ValueError(
            f"WEBHOOK_TIMEOUT_SEC must be > 0, got {config.webhook.timeout_sec}"
        )

    for dim_name, dim_value in [
        ("BROWSER_VIEWPORT_WIDTH", config.browser.viewport_width),
        ("BROWSER_VIEWPORT_HEIGHT", config.browser.viewport_height),
    ]:
        if dim_value < 1:
            raise ValueError(f"{dim_name} must be >= 1, got {dim_value}")

    for timeout_name, timeout_value in [
        ("BROWSER_TIMEOUT_MS", config.browser.timeout_ms),
        ("CANDIDATE_TIMEOUT_MS", config.browser.candidate_timeout_ms),
        ("LOGIN_FORM_TIMEOUT_MS", config.browser.login_form_timeout_ms),
        ("VERIFY_TIMEOUT_MS", config.browser.verify_timeout_ms),
        ("VISIBILITY_TIMEOUT_MS", config.browser.visibility_timeout_ms),
    ]:
        if timeout_value <= 0:
            raise ValueError(f"{timeout_name} must be > 0, got {timeout_value}")

    if config.browser.settle_delay_ms < 0:
        raise ValueError(
            f"SETTLE_DELAY_MS must be >= 0, got {config.browser.settle_delay_ms}"
        )
    if not 1 <= config.port <= 65535:
        raise ValueError(f"PORT must be between 1 and 65535, got {config.port}")


def load_config() -> AppConfig:
    """Load and validate application configuration, then set up logging."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_order_id_filter()
    if not config.portal.email or not config.portal.password:
        logger.warning("Portal credentials are not set (JT_EMAIL / JT_PASSWORD)")
    if not config.webhook.status_webhook_url:
        logger.info("Status webhook disabled: APPS_SCRIPT_WEBHOOK is empty")
    logger.info("Configuration loaded for portal '%s'", config.portal.url)
    return config
