"""Structured JSON logging with per-checkout context fields.

`trace_id` comes from the caller (or is generated at the entry point) and
`external_reference` is set once the charge tag is known, so every record of
one checkout can be joined with the provider's dashboard.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from pythonjsonlogger.json import JsonFormatter

from paylink.common.config import settings


trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")
external_reference_ctx: ContextVar[str] = ContextVar("external_reference", default="")

_CONTEXT_VARS: dict[str, ContextVar[str]] = {
    "trace_id": trace_id_ctx,
    "external_reference": external_reference_ctx,
}


@contextmanager
def log_context(**values: str) -> Iterator[None]:
    """Bind context fields for the duration of a block and restore them after."""

    unknown = set(values) - set(_CONTEXT_VARS)
    if unknown:
        raise KeyError(f"unknown log context fields: {sorted(unknown)}")
    tokens = [(_CONTEXT_VARS[name], _CONTEXT_VARS[name].set(value)) for name, value in values.items()]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


class CheckoutContextFilter(logging.Filter):
    """Stamp service name and the current checkout's identifiers on each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = settings.service_name
        for name, var in _CONTEXT_VARS.items():
            setattr(record, name, var.get())
        return True


def configure_logging(stream=None) -> None:
    """Send JSON records to stdout (or `stream`); safe to call more than once."""

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.addFilter(CheckoutContextFilter())
    fields = " ".join(f"%({name})s" for name in ("asctime", "levelname", "service_name", *_CONTEXT_VARS, "message"))
    handler.setFormatter(JsonFormatter(fields))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)


logger = logging.getLogger("paylink")
