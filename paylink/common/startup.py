"""Startup-time helpers for safe config logging."""

from paylink.common.config import CheckoutConfig, CommonSettings
from paylink.common.logging import logger


SECRET_MARKERS = ("key", "secret", "password", "token")


def redacted_settings(source: CommonSettings) -> dict[str, str]:
    """Return settings as strings with secret-like fields masked."""

    safe: dict[str, str] = {}
    for name, value in source.model_dump().items():
        if value is None:
            safe[name] = "<unset>"
        elif any(marker in name for marker in SECRET_MARKERS):
            safe[name] = "<redacted>"
        else:
            safe[name] = str(value)
    return safe


def log_startup_config(source: CommonSettings, config: CheckoutConfig) -> None:
    """Log the effective configuration once per process."""

    safe = redacted_settings(source)
    safe["provider_base_url"] = config.base_url
    logger.info("startup_config=%s", safe)
    if config.api_key is None:
        logger.error("ASAAS_API_KEY is not configured; every checkout will be rejected")
