"""OpenTelemetry wiring for the FastAPI surface and the checkout stages."""

from contextlib import contextmanager
from typing import Iterator

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from paylink.common.config import settings
from paylink.common.logging import external_reference_ctx


tracer = trace.get_tracer("paylink")


def setup_tracing(service_name: str) -> None:
    """Register a tracer provider; spans are exported only when an OTLP endpoint is set."""

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if settings.otel_exporter_otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint))
        )
    trace.set_tracer_provider(provider)


def instrument_app(app: FastAPI) -> None:
    FastAPIInstrumentor.instrument_app(app)


@contextmanager
def stage_span(stage: str, **attributes: str | int | bool) -> Iterator[trace.Span]:
    """Span for one checkout stage, tagged with the charge's external reference."""

    with tracer.start_as_current_span(f"checkout.{stage.lower()}") as span:
        span.set_attribute("checkout.stage", stage)
        reference = external_reference_ctx.get()
        if reference:
            span.set_attribute("checkout.external_reference", reference)
        for key, value in attributes.items():
            span.set_attribute(f"checkout.{key}", value)
        yield span
