"""Prometheus metric definitions for the submission service."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)
submissions_total = Counter(
    "submissions_total",
    "Form submissions by terminal outcome",
    ["service", "form", "outcome"],
)
payment_sessions_total = Counter(
    "payment_sessions_total",
    "Payment session creation attempts by outcome",
    ["service", "outcome"],
)
payment_verification_seconds = Histogram(
    "payment_verification_seconds",
    "Latency of payment status retrieval from the processor",
    ["service"],
)
notification_sends_total = Counter(
    "notification_sends_total",
    "Outbound email sends by recipient role and outcome",
    ["service", "recipient", "outcome"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
