"""Checkout orchestration.

Runs validation, customer resolution and charge submission in order for one
request and normalizes every outcome into an `OrchestratorResponse`.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from paylink.common.config import CheckoutConfig, settings
from paylink.common.errors import CheckoutError, TransportError
from paylink.common.logging import log_context, logger
from paylink.common.metrics import (
    checkout_failure_total,
    checkout_latency_seconds,
    checkout_requests_total,
    checkout_success_total,
)
from paylink.common.state_machine import RESOLVING_CUSTOMER, RESPONDING, SUBMITTING_CHARGE, CheckoutStage
from paylink.common.tracing import stage_span
from paylink.services.checkout.schemas import CheckoutRequest, OrchestratorResponse
from paylink.services.checkout.validator import validate_request
from paylink.services.provider_adapter.charges import (
    build_charge_payload,
    build_external_reference,
    submit_charge,
)
from paylink.services.provider_adapter.client import AsaasClient
from paylink.services.provider_adapter.resolver import build_resolver


SUCCESS_MESSAGE = "Cobrança criada com sucesso."


@dataclass
class CheckoutResult:
    """HTTP status plus response body for one checkout request."""

    status_code: int
    response: OrchestratorResponse
    stages: tuple[str, ...] = ()

    def body(self) -> dict[str, Any]:
        return self.response.model_dump(by_alias=True, exclude_none=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CheckoutOrchestrator:
    """Owns the per-request stage progression against the provider."""

    def __init__(
        self,
        config: CheckoutConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = _utcnow,
        service_name: str | None = None,
    ) -> None:
        self.config = config
        self.transport = transport
        self.clock = clock
        self.service_name = service_name or settings.service_name
        self.resolver = build_resolver(config)

    def _client(self) -> AsaasClient:
        return AsaasClient(self.config.base_url, self.config.api_key or "", transport=self.transport)

    async def handle(self, method: str | None, raw_body: str | bytes | None) -> CheckoutResult:
        """Process one request; never raises."""

        stage = CheckoutStage()
        checkout_requests_total.labels(service=self.service_name).inc()
        with checkout_latency_seconds.labels(service=self.service_name).time():
            try:
                request = validate_request(method, raw_body, self.config)
                return await self._run(request, stage)
            except CheckoutError as exc:
                return self._failure(stage, exc)
            except Exception as exc:
                logger.exception("unexpected checkout failure stage=%s", stage.current)
                return self._failure(stage, TransportError(str(exc) or exc.__class__.__name__))

    async def _run(self, request: CheckoutRequest, stage: CheckoutStage) -> CheckoutResult:
        reference = build_external_reference(self.config.external_reference_prefix, request, self.clock())
        with log_context(external_reference=reference):
            async with self._client() as client:
                if self.resolver.contacts_provider:
                    stage.advance(RESOLVING_CUSTOMER)
                with stage_span(RESOLVING_CUSTOMER, strategy=self.config.customer_strategy):
                    customer_ref = await self.resolver.resolve(client, request.customer)

                stage.advance(SUBMITTING_CHARGE)
                payload = build_charge_payload(
                    customer_ref,
                    request.payment,
                    reference,
                    extra=self.resolver.charge_fields(request.customer),
                )
                logger.info(
                    "submitting charge billing_type=%s value=%s installments=%s",
                    payload["billingType"],
                    payload["value"],
                    "installmentCount" in payload,
                )
                with stage_span(SUBMITTING_CHARGE, billing_type=payload["billingType"] or ""):
                    charge = await submit_charge(client, payload)

            stage.advance(RESPONDING)
            checkout_success_total.labels(service=self.service_name).inc()
            return CheckoutResult(
                status_code=200,
                response=OrchestratorResponse(
                    success=True,
                    message=SUCCESS_MESSAGE,
                    payment_method=charge.billing_type,
                    invoice_url=charge.invoice_url,
                    amount=charge.value,
                ),
                stages=tuple(stage.history),
            )

    def _failure(self, stage: CheckoutStage, exc: CheckoutError) -> CheckoutResult:
        failed_at = stage.current
        stage.fail()
        checkout_failure_total.labels(service=self.service_name, reason=exc.reason).inc()
        logger.warning(
            "checkout failed stage=%s reason=%s status=%s message=%s",
            failed_at,
            exc.reason,
            exc.status_code,
            exc.message,
        )
        return CheckoutResult(
            status_code=exc.status_code,
            response=OrchestratorResponse(success=False, message=exc.message),
            stages=tuple(stage.history),
        )
