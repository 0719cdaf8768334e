"""Shared fixtures: an in-memory Asaas double behind `httpx.MockTransport`."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest

from paylink.common.config import CheckoutConfig
from paylink.services.checkout.service import CheckoutOrchestrator


BASE_URL = "https://sandbox.asaas.test/api/v3"
FIXED_NOW = datetime(2024, 1, 5, 12, 30, 0, 123456, tzinfo=timezone.utc)


@dataclass
class Call:
    method: str
    path: str
    params: dict[str, str]
    body: dict[str, Any] | None
    access_token: str | None


class FakeAsaas:
    """Records every request and answers like the Asaas sandbox would."""

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self.existing_customers: list[dict[str, Any]] = []
        self.search_status = 200
        self.search_errors: list[dict[str, str]] = []
        self.create_customer_status = 200
        self.create_customer_body: dict[str, Any] = {"id": "cus_new"}
        self.payment_status = 200
        self.payment_body: dict[str, Any] | None = None
        self.fail_with: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append(
            Call(
                method=request.method,
                path=request.url.path,
                params=dict(request.url.params),
                body=body,
                access_token=request.headers.get("access_token"),
            )
        )
        if self.fail_with is not None:
            raise self.fail_with

        if request.method == "GET" and request.url.path.endswith("/customers"):
            if self.search_errors:
                return httpx.Response(self.search_status, json={"errors": self.search_errors})
            return httpx.Response(
                self.search_status,
                json={"object": "list", "totalCount": len(self.existing_customers), "data": self.existing_customers},
            )
        if request.method == "POST" and request.url.path.endswith("/customers"):
            return httpx.Response(self.create_customer_status, json=self.create_customer_body)
        if request.method == "POST" and request.url.path.endswith("/payments"):
            if self.payment_body is not None:
                return httpx.Response(self.payment_status, json=self.payment_body)
            return httpx.Response(
                self.payment_status,
                json={
                    "id": "pay_123",
                    "status": "PENDING",
                    "billingType": body["billingType"],
                    "invoiceUrl": "https://sandbox.asaas.com/i/pay_123",
                    "value": body["value"],
                },
            )
        return httpx.Response(404, json={"errors": [{"code": "not_found", "description": "Not found"}]})

    def calls_to(self, method: str, suffix: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and c.path.endswith(suffix)]


@pytest.fixture
def fake_asaas() -> FakeAsaas:
    return FakeAsaas()


@pytest.fixture
def config() -> CheckoutConfig:
    return CheckoutConfig(api_key="test-key", base_url=BASE_URL)


@pytest.fixture
def make_orchestrator(fake_asaas):
    """Factory so tests can tweak the config while sharing the fake provider."""

    def _make(config: CheckoutConfig) -> CheckoutOrchestrator:
        return CheckoutOrchestrator(
            config,
            transport=httpx.MockTransport(fake_asaas),
            clock=lambda: FIXED_NOW,
            service_name="test",
        )

    return _make


@pytest.fixture
def orchestrator(make_orchestrator, config) -> CheckoutOrchestrator:
    return make_orchestrator(config)


def checkout_body(**payment_overrides: Any) -> dict[str, Any]:
    payment = {
        "billingType": "PIX",
        "value": 50,
        "dueDate": "2024-01-10",
        "description": "order 1",
    }
    payment.update(payment_overrides)
    return {
        "customer": {
            "name": "Ana",
            "email": "a@x.com",
            "taxId": "123.456.789-00",
            "dateOfBirth": "1990-01-01",
        },
        "payment": payment,
    }


@pytest.fixture
def make_body():
    return checkout_body
