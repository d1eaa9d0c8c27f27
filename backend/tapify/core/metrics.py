# Prometheus metrics for request health and the payout engine.
# The middleware records timing and counts for every request; the
# engine modules record trigger outcomes and ledger build times.

from time import monotonic

from fastapi import Request
from prometheus_client import Counter, Gauge, Histogram
from starlette.middleware.base import BaseHTTPMiddleware


REQUEST_LATENCY = Histogram(
    "api_request_latency_seconds",
    "Latency of API requests in seconds",
    ["method", "endpoint"],
)
REQUEST_COUNT = Counter(
    "api_request_count_total",
    "Total API requests",
    ["method", "endpoint", "http_status"],
)

# One sample per settled trigger, labelled with the outcome code
# ("processed", "payout_not_found", "unknown_outcome", ...).
PAYOUT_TRIGGERS = Counter(
    "payout_triggers_total",
    "Payout triggers grouped by outcome",
    ["outcome"],
)
PAYOUT_TRIGGERS_IN_FLIGHT = Gauge(
    "payout_triggers_in_flight",
    "Payout triggers dispatched and not yet settled",
)
LEDGER_AGGREGATION_SECONDS = Histogram(
    "ledger_aggregation_seconds",
    "Time spent building the retailer payout ledger",
    ["status_filter"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5],
)


def record_payout_trigger(outcome: str) -> None:
    PAYOUT_TRIGGERS.labels(outcome=outcome).inc()


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = monotonic()
        response = await call_next(request)
        endpoint = _endpoint_label(request)
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(monotonic() - start)
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            http_status=str(response.status_code),
        ).inc()
        return response
