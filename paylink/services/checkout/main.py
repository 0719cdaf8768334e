"""HTTP surface for the checkout function when run as a long-lived service."""

from time import perf_counter
from uuid import uuid4

from fastapi import Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse

from paylink.common.config import CheckoutConfig, settings
from paylink.common.logging import configure_logging, log_context
from paylink.common.metrics import http_request_duration_seconds, http_requests_total, metrics_response
from paylink.common.startup import log_startup_config
from paylink.common.tracing import instrument_app, setup_tracing
from paylink.services.checkout.service import CheckoutOrchestrator

configure_logging()
setup_tracing(settings.service_name)
config = CheckoutConfig.from_settings(settings)
log_startup_config(settings, config)
orchestrator = CheckoutOrchestrator(config)

app = FastAPI(title="Paylink Checkout")
instrument_app(app)


def get_orchestrator() -> CheckoutOrchestrator:
    return orchestrator


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Record request count and latency for every HTTP call."""

    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        return response
    finally:
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(max(0.0, perf_counter() - start))
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


# Every method is routed here so a wrong one still gets the JSON failure shape.
@app.api_route("/checkout", methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"])
async def checkout(
    request: Request,
    x_trace_id: str | None = Header(default=None),
    service: CheckoutOrchestrator = Depends(get_orchestrator),
):
    """Create a provider charge for the posted checkout and return its payment link."""

    trace_id = x_trace_id or str(uuid4())
    raw_body = await request.body() if request.method == "POST" else None
    with log_context(trace_id=trace_id):
        result = await service.handle(request.method, raw_body)
    return JSONResponse(status_code=result.status_code, content=result.body(), headers={"x-trace-id": trace_id})


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health check endpoint."""

    return {"ok": True}
