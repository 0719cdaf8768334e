"""HTTP surface (FastAPI app) and serverless handler wiring."""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from paylink.services.checkout.handler import build_handler
from paylink.services.checkout.main import app, get_orchestrator


@pytest.fixture
def client(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_post_checkout(client, fake_asaas, make_body):
    fake_asaas.existing_customers = [{"id": "cus_ana"}]

    resp = client.post("/checkout", json=make_body(), headers={"x-trace-id": "trace-1"})

    assert resp.status_code == 200
    assert resp.headers["x-trace-id"] == "trace-1"
    assert resp.json()["invoiceUrl"] == "https://sandbox.asaas.com/i/pay_123"


@pytest.mark.parametrize("method", ["GET", "OPTIONS", "PUT", "PATCH", "DELETE"])
def test_non_post_checkout_is_405_json(client, fake_asaas, method):
    resp = client.request(method, "/checkout")

    assert resp.status_code == 405
    assert resp.json() == {"success": False, "message": "Método não permitido."}
    assert fake_asaas.calls == []


def test_head_checkout_is_405_from_checkout_route(client, fake_asaas):
    resp = client.head("/checkout")

    assert resp.status_code == 405
    assert resp.headers["content-type"] == "application/json"
    assert "x-trace-id" in resp.headers
    assert fake_asaas.calls == []


def test_health_and_metrics(client):
    assert client.get("/health").json() == {"ok": True}
    assert "checkout_requests_total" in client.get("/metrics").text


def test_serverless_handler(orchestrator, fake_asaas, make_body):
    fake_asaas.existing_customers = [{"id": "cus_ana"}]
    handler = build_handler(orchestrator)

    encoded = base64.b64encode(json.dumps(make_body()).encode("utf-8")).decode("ascii")
    result = handler({"httpMethod": "POST", "body": encoded, "isBase64Encoded": True, "headers": {"X-Trace-Id": "t-9"}})

    assert result["statusCode"] == 200
    assert result["headers"]["x-trace-id"] == "t-9"
    assert json.loads(result["body"])["paymentMethod"] == "PIX"


def test_serverless_handler_method_check(orchestrator, fake_asaas):
    handler = build_handler(orchestrator)

    result = handler({"requestContext": {"http": {"method": "PUT"}}, "body": "{}"})

    assert result["statusCode"] == 405
    assert fake_asaas.calls == []


@pytest.mark.parametrize(
    "event",
    [
        {"requestContext": None, "body": "{}"},
        {"requestContext": {"http": None}, "body": "{}"},
        {"httpMethod": None, "headers": None},
    ],
)
def test_serverless_handler_tolerates_null_event_fields(orchestrator, fake_asaas, event):
    result = build_handler(orchestrator)(event)

    assert result["statusCode"] == 405
    assert json.loads(result["body"]) == {"success": False, "message": "Método não permitido."}
    assert fake_asaas.calls == []


def test_serverless_handler_bad_base64_is_malformed(orchestrator, fake_asaas):
    handler = build_handler(orchestrator)

    result = handler({"httpMethod": "POST", "body": "***", "isBase64Encoded": True})

    assert result["statusCode"] == 400
    assert fake_asaas.calls == []
