"""Thin async client for the three Asaas endpoints the checkout uses.

Calls are issued one at a time by the orchestrator. No timeout override and no
retries: a hung call waits for httpx's own default deadline.
"""

from time import perf_counter
from typing import Any

import httpx

from paylink.common.config import settings
from paylink.common.errors import TransportError
from paylink.common.logging import logger
from paylink.common.metrics import provider_request_duration_seconds
from paylink.services.provider_adapter.schemas import ProviderResponse


class AsaasClient:
    """Authenticated session against one Asaas base URL."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"access_token": api_key, "Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "AsaasClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> ProviderResponse:
        started = perf_counter()
        status_code = "error"
        try:
            resp = await self._client.request(method, path, params=params, json=json)
            status_code = str(resp.status_code)
        except httpx.HTTPError as exc:
            logger.error("provider call failed operation=%s error=%s", operation, exc)
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        finally:
            provider_request_duration_seconds.labels(
                service=settings.service_name,
                operation=operation,
                status_code=status_code,
            ).observe(max(0.0, perf_counter() - started))

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(f"resposta inválida do Asaas (HTTP {resp.status_code})") from exc
        if not isinstance(data, dict):
            raise TransportError(f"resposta inesperada do Asaas (HTTP {resp.status_code})")

        logger.info("provider call operation=%s status=%s", operation, resp.status_code)
        return ProviderResponse(status_code=resp.status_code, data=data)

    async def search_customers(self, tax_id: str) -> ProviderResponse:
        return await self._request("search_customers", "GET", "/customers", params={"cpfCnpj": tax_id})

    async def create_customer(self, payload: dict[str, Any]) -> ProviderResponse:
        return await self._request("create_customer", "POST", "/customers", json=payload)

    async def create_payment(self, payload: dict[str, Any]) -> ProviderResponse:
        return await self._request("create_payment", "POST", "/payments", json=payload)
