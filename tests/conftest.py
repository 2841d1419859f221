"""Shared fixtures: fake processor, recording relay, app client."""

import pytest
from fastapi.testclient import TestClient

from billpay.common.config import Settings
from billpay.common.errors import UpstreamError, UpstreamUnavailable
from billpay.services.api.main import create_app
from billpay.services.notification.service import NotificationDispatcher
from billpay.services.orchestrator.service import SubmissionOrchestrator
from billpay.services.payments.gateway import PaymentSession


class FakeGateway:
    """In-memory stand-in for Stripe PaymentIntents."""

    def __init__(self) -> None:
        self.created: list[tuple[int, str]] = []
        self.retrieved: list[str] = []
        self.statuses: dict[str, str] = {}
        self.create_error: Exception | None = None
        self.retrieve_error: Exception | None = None

    def create_session(self, amount_cents: int, currency: str) -> PaymentSession:
        if self.create_error is not None:
            raise self.create_error
        self.created.append((amount_cents, currency))
        reference_id = f"pi_test_{len(self.created)}"
        self.statuses.setdefault(reference_id, "requires_payment_method")
        return PaymentSession(reference_id=reference_id, client_secret=f"{reference_id}_secret_abc")

    def retrieve_status(self, reference_id: str) -> str:
        self.retrieved.append(reference_id)
        if self.retrieve_error is not None:
            raise self.retrieve_error
        if reference_id not in self.statuses:
            raise UpstreamError("stripe", f"No such payment_intent: '{reference_id}'")
        return self.statuses[reference_id]


class RecordingRelay:
    """Records delivered messages; recipients in `fail_for` raise instead."""

    def __init__(self) -> None:
        self.attempted = []
        self.delivered = []
        self.fail_for: set[str] = set()
        self.unavailable = False

    async def deliver(self, message) -> None:
        self.attempted.append(message)
        if self.unavailable:
            raise UpstreamUnavailable("smtp", "timed out")
        if message.to in self.fail_for:
            raise UpstreamError("smtp", f"550 mailbox unavailable: {message.to}")
        self.delivered.append(message)


@pytest.fixture()
def settings():
    return Settings(
        _env_file=None,
        service_name="billpay-test",
        stripe_secret_key="sk_test_123",
        stripe_publishable_key="pk_test_123",
        operator_email="office@example.com",
        company_name="Ouachita Spring Water Co.",
    )


@pytest.fixture()
def disabled_settings():
    return Settings(
        _env_file=None,
        service_name="billpay-test",
        stripe_secret_key=None,
        stripe_publishable_key=None,
        operator_email="office@example.com",
    )


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def relay():
    return RecordingRelay()


@pytest.fixture()
def dispatcher(relay):
    return NotificationDispatcher(relay, "billpay-test")


@pytest.fixture()
def orchestrator(settings, gateway, dispatcher):
    return SubmissionOrchestrator(settings, gateway, dispatcher)


@pytest.fixture()
def client(settings, gateway, relay):
    return TestClient(create_app(settings, gateway=gateway, relay=relay))


@pytest.fixture()
def bill_payload():
    return {
        "customerName": "Jane Doe",
        "street": "1 Main St",
        "city": "Hot Springs",
        "state": "AR",
        "zip": "71901",
        "amount": 125.5,
        "receiptEmail": "jane@example.com",
        "paymentIntentId": "pi_paid",
    }
