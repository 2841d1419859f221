"""Bill-pay submission orchestration.

Opens payment sessions for the browser, and on final submission re-verifies
the charge with the processor before any email goes out. The browser's own
claim that the card was charged is never consulted.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from starlette.concurrency import run_in_threadpool

from billpay.common.config import Settings
from billpay.common.errors import (
    InvalidAmount,
    MissingFields,
    NotificationFailed,
    PaymentInvalid,
    PaymentNotCompleted,
    PaymentRequired,
    PaymentSessionCreateFailed,
    PaymentsUnavailable,
    UpstreamError,
)
from billpay.common.logging import logger, payment_intent_id_ctx
from billpay.common.metrics import (
    payment_sessions_total,
    payment_verification_seconds,
    submissions_total,
)
from billpay.common.state_machine import (
    NOTIFIED,
    PAYMENT_VERIFIED,
    RECEIVED,
    REJECTED_NOTIFICATION,
    REJECTED_PAYMENT,
    REJECTED_VALIDATION,
    VALIDATED,
    is_terminal,
    validate_transition,
)
from billpay.services.notification.messages import (
    bill_operator_message,
    bill_receipt_message,
    format_address,
    format_amount,
    timestamp,
)
from billpay.services.notification.service import NotificationDispatcher
from billpay.services.orchestrator.schemas import BillSubmission
from billpay.services.payments.gateway import SUCCEEDED, PaymentGateway, PaymentSession

MINIMUM_AMOUNT_CENTS = 50
SUCCESS_MESSAGE = "Submission sent. Check your email for a receipt."


def to_minor_units(amount) -> int:
    """Convert a major-unit amount to whole cents, rounding half up."""

    if amount is None or isinstance(amount, bool):
        raise InvalidAmount()
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmount() from exc
    if not value.is_finite():
        raise InvalidAmount()
    cents = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if cents < MINIMUM_AMOUNT_CENTS:
        raise InvalidAmount()
    return cents


@dataclass
class SubmissionLifecycle:
    """Tracks one bill submission through the state machine."""

    state: str = RECEIVED
    history: list[str] = field(default_factory=lambda: [RECEIVED])

    def advance(self, new_state: str, reason: str) -> None:
        validate_transition(self.state, new_state)
        logger.info("bill submission %s -> %s reason=%s", self.state, new_state, reason)
        self.state = new_state
        self.history.append(new_state)


class SubmissionOrchestrator:
    """Owns the bill-pay flow: validate, verify payment, notify."""

    def __init__(
        self,
        settings: Settings,
        gateway: PaymentGateway | None,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self.gateway = gateway
        self.dispatcher = dispatcher
        self.currency = settings.payment_currency.lower()
        self.operator_email = settings.operator_email
        self.company_name = settings.company_name
        self.service_name = settings.service_name

    async def create_payment_session(self, amount) -> PaymentSession:
        """Open a processor session for `amount` (major units) and return it."""

        if self.gateway is None:
            payment_sessions_total.labels(service=self.service_name, outcome="unavailable").inc()
            raise PaymentsUnavailable()
        try:
            amount_cents = to_minor_units(amount)
        except InvalidAmount:
            payment_sessions_total.labels(service=self.service_name, outcome="invalid_amount").inc()
            raise
        try:
            session = await run_in_threadpool(self.gateway.create_session, amount_cents, self.currency)
        except UpstreamError as exc:
            logger.exception("payment session create failed amount_cents=%s: %s", amount_cents, exc)
            payment_sessions_total.labels(service=self.service_name, outcome="failed").inc()
            raise PaymentSessionCreateFailed() from exc
        payment_intent_id_ctx.set(session.reference_id)
        logger.info("payment session created amount_cents=%s currency=%s", amount_cents, self.currency)
        payment_sessions_total.labels(service=self.service_name, outcome="created").inc()
        return session

    def _validate(self, submission: BillSubmission, lifecycle: SubmissionLifecycle) -> None:
        missing = submission.missing_fields()
        if missing:
            lifecycle.advance(REJECTED_VALIDATION, f"missing:{','.join(missing)}")
            raise MissingFields(missing)
        if not submission.payment_intent_id:
            lifecycle.advance(REJECTED_VALIDATION, "payment_reference_missing")
            raise PaymentRequired()
        lifecycle.advance(VALIDATED, "fields_present")

    async def _verify_payment(self, reference_id: str, lifecycle: SubmissionLifecycle) -> None:
        if self.gateway is None:
            logger.warning("payments not configured; skipping processor verification")
            lifecycle.advance(PAYMENT_VERIFIED, "verification_skipped")
            return
        try:
            with payment_verification_seconds.labels(service=self.service_name).time():
                status = await run_in_threadpool(self.gateway.retrieve_status, reference_id)
        except UpstreamError as exc:
            logger.exception("payment retrieval failed: %s", exc)
            lifecycle.advance(REJECTED_PAYMENT, "retrieval_failed")
            raise PaymentInvalid() from exc
        if status != SUCCEEDED:
            logger.warning("payment not completed processor_status=%s", status)
            lifecycle.advance(REJECTED_PAYMENT, f"processor_status:{status}")
            raise PaymentNotCompleted()
        lifecycle.advance(PAYMENT_VERIFIED, "processor_succeeded")

    async def submit_bill(
        self, submission: BillSubmission, lifecycle: SubmissionLifecycle | None = None
    ) -> str:
        """Run one bill submission to a terminal state; returns the client message.

        Raises a `SubmissionError` subclass for every rejection. Resubmitting the
        same payment reference verifies again and re-sends both emails.
        """

        lifecycle = lifecycle or SubmissionLifecycle()
        try:
            self._validate(submission, lifecycle)
            payment_intent_id_ctx.set(submission.payment_intent_id)
            await self._verify_payment(submission.payment_intent_id, lifecycle)
            await self._notify(submission, lifecycle)
        finally:
            outcome = lifecycle.state if is_terminal(lifecycle.state) else "ERROR"
            submissions_total.labels(service=self.service_name, form="bill", outcome=outcome).inc()
        return SUCCESS_MESSAGE

    async def _notify(self, submission: BillSubmission, lifecycle: SubmissionLifecycle) -> None:
        address = format_address(submission.street, submission.city, submission.state, submission.zip_code)
        amount = format_amount(submission.amount)
        operator_message = bill_operator_message(
            to=self.operator_email,
            customer_name=submission.customer_name,
            address=address,
            amount=amount,
            receipt_email=submission.receipt_email,
            submitted_at=timestamp(),
        )
        customer_message = bill_receipt_message(
            to=submission.receipt_email,
            company_name=self.company_name,
            customer_name=submission.customer_name,
            address=address,
            amount=amount,
        )
        try:
            await self.dispatcher.send(operator_message, customer_message)
        except NotificationFailed as exc:
            # The card is already charged at this point; the client must hear that.
            logger.error("bill notification failed after payment failed_recipients=%s", exc.failed_recipients)
            lifecycle.advance(REJECTED_NOTIFICATION, "dispatch_failed")
            raise NotificationFailed(
                "Your payment was received, but we could not send the confirmation emails. "
                "Your card was charged once and will not be charged again. "
                f"Please contact us at {self.operator_email} for your receipt.",
                failed_recipients=exc.failed_recipients,
            ) from exc
        lifecycle.advance(NOTIFIED, "emails_sent")
