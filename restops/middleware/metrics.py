"""Prometheus metrics and request timing middleware."""
import logging
import time
import uuid

from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

progress_toggles_total = Counter(
    "restops_progress_toggles_total",
    "Checklist progress toggles",
    ["kind", "state"],
)

checklist_submissions_total = Counter(
    "restops_checklist_submissions_total",
    "Checklist submissions",
    ["email_sent"],
)

inventory_checks_total = Counter(
    "restops_inventory_checks_total",
    "Inventory stock checks recorded",
)

# High frequency, low value
_SKIP_LOG = frozenset({"/health", "/metrics"})


def _endpoint_label(request: Request) -> str:
    # Route template keeps label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def setup_metrics(app: FastAPI) -> None:
    """Setup Prometheus metrics endpoint and per-request timing."""

    @app.middleware("http")
    async def record_request(request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

        response = await call_next(request)

        duration = time.perf_counter() - start
        endpoint = _endpoint_label(request)
        http_requests_total.labels(request.method, endpoint, str(response.status_code)).inc()
        http_request_duration_seconds.labels(request.method, endpoint).observe(duration)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Request-Duration-Ms"] = f"{duration * 1000:.1f}"
        if request.url.path not in _SKIP_LOG:
            logger.info(
                "%s %s %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration * 1000, 1),
                    "request_id": request_id,
                },
            )
        return response

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
