"""Shapes exchanged with the Asaas API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


SUCCESS_STATUSES = frozenset({200, 201})


class ProviderError(BaseModel):
    """One entry of the provider's `errors` list."""

    code: str | None = None
    description: str | None = None


class ProviderResponse(BaseModel):
    """Raw status + decoded JSON body of one provider call."""

    status_code: int
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def errors(self) -> list[ProviderError]:
        raw = self.data.get("errors") or []
        return [ProviderError.model_validate(item) for item in raw if isinstance(item, dict)]

    @property
    def descriptions(self) -> list[str]:
        return [err.description or err.code or "" for err in self.errors]

    @property
    def ok(self) -> bool:
        return self.status_code in SUCCESS_STATUSES and not self.errors


class ProviderCharge(BaseModel):
    """Subset of the provider payment object the checkout relays back."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    status: str | None = None
    billing_type: str | None = Field(default=None, alias="billingType")
    invoice_url: str | None = Field(default=None, alias="invoiceUrl")
    value: float | None = None
