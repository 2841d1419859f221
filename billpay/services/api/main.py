"""HTTP entrypoint: JSON form APIs plus the static bill-pay and signup pages.

`create_app` wires one immutable `Settings` into every service; nothing reads
configuration from module globals.
"""

from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from billpay.common.config import Settings, load_settings
from billpay.common.errors import InvalidAmount, SubmissionError
from billpay.common.logging import configure_logging, logger, trace_id_ctx
from billpay.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
)
from billpay.common.startup import log_startup_config
from billpay.common.tracing import instrument_app, setup_tracing
from billpay.services.api.routes import router
from billpay.services.intake.service import NewCustomerHandler
from billpay.services.notification.relay import MailRelay, SmtpRelay
from billpay.services.notification.service import NotificationDispatcher
from billpay.services.orchestrator.service import SubmissionOrchestrator
from billpay.services.payments.gateway import PaymentGateway, build_gateway

STARTUP_KEYS = [
    "host",
    "port",
    "stripe_secret_key",
    "stripe_publishable_key",
    "payment_currency",
    "smtp_host",
    "smtp_port",
    "smtp_secure",
    "smtp_user",
    "smtp_pass",
    "from_email",
    "operator_email",
    "otel_exporter_otlp_endpoint",
]


def _error_body(message: str) -> dict:
    return {"success": False, "message": message}


def create_app(
    settings: Settings,
    gateway: PaymentGateway | None = None,
    relay: MailRelay | None = None,
) -> FastAPI:
    """Build the application; a missing gateway is built from settings (None = payments off)."""

    if gateway is None:
        gateway = build_gateway(settings)
    dispatcher = NotificationDispatcher(relay or SmtpRelay(settings), settings.service_name)

    app = FastAPI(title="Bill Pay Submission Service")
    app.state.settings = settings
    app.state.orchestrator = SubmissionOrchestrator(settings, gateway, dispatcher)
    app.state.intake = NewCustomerHandler(settings, dispatcher)

    if settings.otel_exporter_otlp_endpoint:
        setup_tracing(settings.service_name, settings.otel_exporter_otlp_endpoint)
        instrument_app(app)

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind a correlation id and record request count and latency."""

        trace_id_ctx.set(request.headers.get("x-correlation-id") or str(uuid4()))
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
            elif not route.startswith("/api"):
                route = "static"
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=settings.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=settings.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()

    @app.exception_handler(SubmissionError)
    async def submission_error_handler(request: Request, exc: SubmissionError):
        logger.info(
            "submission rejected path=%s error=%s status=%s",
            request.url.path,
            type(exc).__name__,
            exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info("malformed request path=%s errors=%s", request.url.path, errors)
        if any("amount" in error.get("loc", ()) for error in errors):
            return JSONResponse(status_code=400, content=_error_body(InvalidAmount.default_message))
        return JSONResponse(
            status_code=400,
            content=_error_body("Invalid request. Please check the form and try again."),
        )

    app.include_router(router)

    @app.get("/health")
    def health():
        """Container health probe endpoint."""

        return {"ok": True}

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    # Registered last so the API routes above take precedence over file lookups.
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    return app


def main() -> None:
    settings = load_settings()
    configure_logging(settings.service_name, settings.log_level)
    log_startup_config(settings, STARTUP_KEYS)
    app = create_app(settings)
    logger.info("bill pay form: http://localhost:%s/bill-pay.html", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
