"""Serverless entry point (Netlify Functions / AWS Lambda proxy events).

The credential and orchestrator are built once per warm process; each
invocation runs one checkout on a fresh event loop.
"""

import asyncio
import base64
import binascii
import json
from typing import Any, Callable
from uuid import uuid4

from paylink.common.config import CheckoutConfig, settings
from paylink.common.logging import configure_logging, log_context
from paylink.common.startup import log_startup_config
from paylink.services.checkout.service import CheckoutOrchestrator


def _event_method(event: dict[str, Any]) -> str:
    request_context = event.get("requestContext") or {}
    return event.get("httpMethod") or (request_context.get("http") or {}).get("method") or ""


def _event_body(event: dict[str, Any]) -> str | bytes | None:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            # Undecodable bodies are rejected by the validator like any other malformed body.
            return None
    return body


def _trace_id(event: dict[str, Any]) -> str:
    headers = {str(k).lower(): v for k, v in (event.get("headers") or {}).items()}
    return headers.get("x-trace-id") or str(uuid4())


def build_handler(orchestrator: CheckoutOrchestrator) -> Callable[[dict[str, Any], Any], dict[str, Any]]:
    """Bind a serverless `handler(event, context)` to one orchestrator."""

    def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
        trace_id = _trace_id(event)
        with log_context(trace_id=trace_id):
            result = asyncio.run(orchestrator.handle(_event_method(event), _event_body(event)))
        return {
            "statusCode": result.status_code,
            "headers": {"Content-Type": "application/json", "x-trace-id": trace_id},
            "body": json.dumps(result.body()),
        }

    return handler


configure_logging()
_config = CheckoutConfig.from_settings(settings)
log_startup_config(settings, _config)
handler = build_handler(CheckoutOrchestrator(_config))
