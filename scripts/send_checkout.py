"""Post one checkout to a running checkout function and print the answer.

Useful for smoke-testing a deployment against the Asaas sandbox.
"""

import argparse
import json
from datetime import date, timedelta
from pathlib import Path
from uuid import uuid4

import httpx


def sample_checkout(billing_type: str, value: float, installments: int | None) -> dict:
    """Build a storefront-like checkout body with a test CPF."""

    payment = {
        "billingType": billing_type,
        "value": value,
        "dueDate": (date.today() + timedelta(days=3)).isoformat(),
        "description": "Pedido de teste",
    }
    if installments:
        payment["installmentCount"] = installments
        payment["installmentValue"] = round(value / installments, 2)
    return {
        "customer": {
            "name": "Cliente Teste",
            "email": "cliente.teste@example.com",
            "taxId": "529.982.247-25",
            "dateOfBirth": "1990-01-01",
        },
        "payment": payment,
    }


def main() -> None:
    """Parse CLI args and send one checkout."""

    parser = argparse.ArgumentParser(description="Send a checkout request to the checkout function.")
    parser.add_argument("--url", default="http://localhost:8000/checkout")
    parser.add_argument("--billing-type", default="PIX")
    parser.add_argument("--value", type=float, default=50.0)
    parser.add_argument("--installments", type=int, default=None)
    parser.add_argument("--file", dest="json_file", default=None, help="Path to a JSON checkout body")
    args = parser.parse_args()

    if args.json_file:
        body = json.loads(Path(args.json_file).read_text())
    else:
        body = sample_checkout(args.billing_type, args.value, args.installments)

    resp = httpx.post(args.url, json=body, headers={"x-trace-id": str(uuid4())}, timeout=30.0)
    print(f"status={resp.status_code}")
    print(json.dumps(resp.json(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
