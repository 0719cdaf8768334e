"""Central environment-driven settings for the checkout function.

The process loads this once at startup. Behavior is controlled by environment
variables (or a local `.env` file).
"""

from dataclasses import dataclass
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


CustomerStrategy = Literal["search_or_create", "direct"]

ASAAS_BASE_URLS: dict[str, str] = {
    "sandbox": "https://sandbox.asaas.com/api/v3",
    "production": "https://api.asaas.com/v3",
}


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "checkout-function"
    log_level: str = "INFO"
    asaas_api_key: str | None = None
    asaas_environment: str = "sandbox"
    asaas_api_url: str | None = None
    customer_strategy: CustomerStrategy = "search_or_create"
    placeholder_mobile_phone: str = "11999999999"
    external_reference_prefix: str = "SLAP-CHCKOUT"
    otel_exporter_otlp_endpoint: str | None = None
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = CommonSettings()


@dataclass(frozen=True)
class CheckoutConfig:
    """Explicit configuration handed to the orchestrator at construction.

    `api_key` may be `None`; the orchestrator answers every request with a
    configuration error in that case instead of failing at import time.
    """

    api_key: str | None
    base_url: str
    customer_strategy: CustomerStrategy = "search_or_create"
    placeholder_mobile_phone: str = "11999999999"
    external_reference_prefix: str = "SLAP-CHCKOUT"

    @classmethod
    def from_settings(cls, source: CommonSettings | None = None) -> "CheckoutConfig":
        source = source or settings
        base_url = source.asaas_api_url or ASAAS_BASE_URLS.get(
            source.asaas_environment.lower(), ASAAS_BASE_URLS["sandbox"]
        )
        return cls(
            api_key=source.asaas_api_key or None,
            base_url=base_url.rstrip("/"),
            customer_strategy=source.customer_strategy,
            placeholder_mobile_phone=source.placeholder_mobile_phone,
            external_reference_prefix=source.external_reference_prefix,
        )
