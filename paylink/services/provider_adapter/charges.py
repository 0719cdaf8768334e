"""Charge payload construction and submission."""

import hashlib
import math
from datetime import datetime, timezone
from typing import Any

from paylink.common.errors import ProviderRejectionError
from paylink.common.logging import logger
from paylink.services.checkout.schemas import CheckoutRequest, PaymentInput
from paylink.services.provider_adapter.client import AsaasClient
from paylink.services.provider_adapter.resolver import UNKNOWN_PROVIDER_ERROR, normalize_tax_id
from paylink.services.provider_adapter.schemas import SUCCESS_STATUSES, ProviderCharge


# Smallest charge Asaas accepts.
MIN_CHARGE_VALUE = 0.01
INSTALLMENT_BILLING_TYPES = frozenset({"CREDIT_CARD"})


def effective_value(value: float | None) -> float:
    if value is None or not math.isfinite(value) or value <= 0:
        return MIN_CHARGE_VALUE
    return value


def supports_installments(billing_type: str | None) -> bool:
    return billing_type in INSTALLMENT_BILLING_TYPES


def build_external_reference(prefix: str, request: CheckoutRequest, now: datetime) -> str:
    """Tag tying the provider charge back to the originating checkout.

    Layout: `<prefix>-<UTC timestamp with microseconds>-<10 hex digest>`, the
    digest covering tax id, value, due date and description. The same request
    at the same instant always yields the same tag.
    """

    payment = request.payment
    fingerprint = "|".join(
        [
            normalize_tax_id(request.customer.tax_id),
            f"{effective_value(payment.value):.2f}",
            payment.due_date or "",
            payment.description or "",
        ]
    )
    digest = hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()[:10]
    stamp = now.astimezone(timezone.utc).strftime("%Y%m%d%H%M%S%f")
    return f"{prefix}-{stamp}-{digest}"


def build_charge_payload(
    customer_ref: str,
    payment: PaymentInput,
    external_reference: str,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "customer": customer_ref,
        "billingType": payment.billing_type,
        "value": effective_value(payment.value),
        "dueDate": payment.due_date,
        "description": payment.description,
        "externalReference": external_reference,
    }
    if extra:
        payload.update(extra)
    if supports_installments(payment.billing_type):
        if payment.installment_count is not None:
            payload["installmentCount"] = payment.installment_count
        if payment.installment_value is not None:
            payload["installmentValue"] = payment.installment_value
    return payload


async def submit_charge(client: AsaasClient, payload: dict[str, Any]) -> ProviderCharge:
    """Create the charge; raise `ProviderRejectionError` on any non-success answer.

    A non-2xx provider status is kept so the caller sees the provider's own code.
    """

    response = await client.create_payment(payload)
    if not response.ok:
        descriptions = [d for d in response.descriptions if d]
        detail = " | ".join(descriptions) if descriptions else UNKNOWN_PROVIDER_ERROR
        status_code = response.status_code if response.status_code not in SUCCESS_STATUSES else 500
        logger.warning("charge rejected status=%s errors=%s", response.status_code, descriptions)
        raise ProviderRejectionError(
            f"Erro ao gerar cobrança: {detail}",
            status_code=status_code,
            descriptions=descriptions,
        )
    charge = ProviderCharge.model_validate(response.data)
    logger.info("charge created charge_id=%s status=%s", charge.id, charge.status)
    return charge
