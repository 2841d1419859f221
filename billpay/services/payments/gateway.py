"""Payment processor adapter.

Only two processor calls are made: open a PaymentIntent for the bill amount,
and later read back its authoritative status. Card data never reaches this
service; the browser confirms the card directly with Stripe.
"""

from dataclasses import dataclass
from typing import Protocol

import stripe

from billpay.common.config import Settings
from billpay.common.errors import UpstreamError, UpstreamUnavailable

SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class PaymentSession:
    """Processor-owned charge attempt: reference id plus browser-only secret."""

    reference_id: str
    client_secret: str


class PaymentGateway(Protocol):
    def create_session(self, amount_cents: int, currency: str) -> PaymentSession: ...

    def retrieve_status(self, reference_id: str) -> str: ...


class StripeGateway:
    """PaymentIntent-backed gateway using the official SDK."""

    dependency = "stripe"

    def __init__(self, api_key: str, timeout_seconds: float, client: stripe.StripeClient | None = None) -> None:
        self.client = client or stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout_seconds),
            max_network_retries=0,
        )

    def create_session(self, amount_cents: int, currency: str) -> PaymentSession:
        try:
            intent = self.client.v1.payment_intents.create(
                params={
                    "amount": amount_cents,
                    "currency": currency,
                    "automatic_payment_methods": {"enabled": True},
                }
            )
        except stripe.APIConnectionError as exc:
            raise UpstreamUnavailable(self.dependency, str(exc)) from exc
        except stripe.StripeError as exc:
            raise UpstreamError(self.dependency, str(exc)) from exc
        return PaymentSession(reference_id=intent.id, client_secret=intent.client_secret)

    def retrieve_status(self, reference_id: str) -> str:
        try:
            intent = self.client.v1.payment_intents.retrieve(reference_id)
        except stripe.APIConnectionError as exc:
            raise UpstreamUnavailable(self.dependency, str(exc)) from exc
        except stripe.StripeError as exc:
            raise UpstreamError(self.dependency, str(exc)) from exc
        return intent.status


def build_gateway(settings: Settings) -> PaymentGateway | None:
    """Return a Stripe gateway, or None when payments are not configured."""

    if not settings.payments_enabled:
        return None
    return StripeGateway(settings.stripe_secret_key, settings.payment_timeout_seconds)
