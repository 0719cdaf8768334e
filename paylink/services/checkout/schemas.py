"""Request/response schemas for the checkout endpoint.

Every inbound field is optional: the storefront sends whatever it collected and
the provider is the one that rejects incomplete data.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CustomerInput(BaseModel):
    """Customer identity collected by the storefront."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: str | None = None
    email: str | None = None
    tax_id: str | None = Field(default=None, validation_alias=AliasChoices("taxId", "cpfCnpj", "tax_id"))
    date_of_birth: str | None = Field(
        default=None, validation_alias=AliasChoices("dateOfBirth", "date_of_birth")
    )
    mobile_phone: str | None = Field(
        default=None, validation_alias=AliasChoices("mobilePhone", "phone", "mobile_phone")
    )


class PaymentInput(BaseModel):
    """Charge parameters chosen at checkout."""

    model_config = ConfigDict(populate_by_name=True)

    billing_type: str | None = Field(default=None, validation_alias=AliasChoices("billingType", "billing_type"))
    value: float | None = None
    due_date: str | None = Field(default=None, validation_alias=AliasChoices("dueDate", "due_date"))
    description: str | None = None
    installment_count: int | None = Field(
        default=None, validation_alias=AliasChoices("installmentCount", "installment_count")
    )
    installment_value: float | None = Field(
        default=None,
        validation_alias=AliasChoices("installmentValue", "installment_value"),
        allow_inf_nan=False,
    )


class CheckoutRequest(BaseModel):
    """Body accepted by `POST /checkout`."""

    customer: CustomerInput = Field(default_factory=CustomerInput)
    payment: PaymentInput = Field(default_factory=PaymentInput)

    @field_validator("customer", "payment", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class OrchestratorResponse(BaseModel):
    """The single structured answer returned for every checkout request."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str | None = None
    payment_method: str | None = Field(default=None, serialization_alias="paymentMethod")
    invoice_url: str | None = Field(default=None, serialization_alias="invoiceUrl")
    amount: float | None = None
