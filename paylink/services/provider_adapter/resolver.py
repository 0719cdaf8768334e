"""Customer resolution policies.

Two mutually exclusive policies exist; the deployment picks one through
`CUSTOMER_STRATEGY`. A failure in one policy never falls back to the other.
"""

import re
from typing import Any, Protocol

from paylink.common.config import CheckoutConfig
from paylink.common.errors import ProviderRejectionError
from paylink.common.logging import logger
from paylink.services.checkout.schemas import CustomerInput
from paylink.services.provider_adapter.client import AsaasClient
from paylink.services.provider_adapter.schemas import ProviderResponse


UNKNOWN_PROVIDER_ERROR = "Erro desconhecido na API do Asaas."

_NON_DIGITS = re.compile(r"\D")


def normalize_tax_id(value: str | None) -> str:
    """Strip everything but digits; Asaas rejects formatted CPF/CNPJ."""

    return _NON_DIGITS.sub("", value or "")


def first_error_description(response: ProviderResponse) -> str:
    descriptions = [d for d in response.descriptions if d]
    return descriptions[0] if descriptions else UNKNOWN_PROVIDER_ERROR


class CustomerResolver(Protocol):
    contacts_provider: bool

    async def resolve(self, client: AsaasClient, customer: CustomerInput) -> str: ...

    def charge_fields(self, customer: CustomerInput) -> dict[str, Any]: ...


class SearchOrCreateResolver:
    """Reuse the first customer with the same tax id, otherwise create one."""

    contacts_provider = True

    def __init__(self, placeholder_mobile_phone: str) -> None:
        self.placeholder_mobile_phone = placeholder_mobile_phone

    async def resolve(self, client: AsaasClient, customer: CustomerInput) -> str:
        tax_id = normalize_tax_id(customer.tax_id)

        # An empty cpfCnpj filter would list every customer of the account.
        if tax_id:
            found = await client.search_customers(tax_id)
            if not found.ok:
                raise ProviderRejectionError(
                    f"Erro ao buscar cliente: {first_error_description(found)}",
                    descriptions=found.descriptions,
                )
            matches = [item for item in found.data.get("data") or [] if isinstance(item, dict) and item.get("id")]
            if matches:
                customer_id = matches[0]["id"]
                logger.info("customer reused customer_id=%s matches=%s", customer_id, len(matches))
                return customer_id

        created = await client.create_customer(self.creation_payload(customer, tax_id))
        customer_id = created.data.get("id")
        if not created.ok or not customer_id:
            logger.warning("customer creation rejected status=%s", created.status_code)
            raise ProviderRejectionError(
                f"Erro ao criar cliente: {first_error_description(created)}",
                descriptions=created.descriptions,
            )
        logger.info("customer created customer_id=%s", customer_id)
        return customer_id

    def creation_payload(self, customer: CustomerInput, tax_id: str) -> dict[str, Any]:
        return {
            "name": customer.name,
            "email": customer.email,
            "cpfCnpj": tax_id,
            "dateOfBirth": customer.date_of_birth,
            "mobilePhone": customer.mobile_phone or self.placeholder_mobile_phone,
        }

    def charge_fields(self, customer: CustomerInput) -> dict[str, Any]:
        return {}


class DirectNameResolver:
    """Send the display name as the charge's customer reference.

    The provider creates the customer implicitly from the identity fields that
    ride along in the charge payload.
    """

    contacts_provider = False

    async def resolve(self, client: AsaasClient, customer: CustomerInput) -> str:
        return customer.name or ""

    def charge_fields(self, customer: CustomerInput) -> dict[str, Any]:
        return {
            "name": customer.name,
            "email": customer.email,
            "cpfCnpj": normalize_tax_id(customer.tax_id),
            "dateOfBirth": customer.date_of_birth,
        }


def build_resolver(config: CheckoutConfig) -> CustomerResolver:
    if config.customer_strategy == "direct":
        return DirectNameResolver()
    return SearchOrCreateResolver(config.placeholder_mobile_phone)
