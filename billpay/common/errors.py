"""Error taxonomy shared by the orchestrator, adapters and HTTP layer.

`SubmissionError` subclasses are client-facing: each carries the HTTP status
and a message that is safe to show a customer. `UpstreamError` subclasses are
raised by the processor and relay adapters and never leave the server; the
orchestrator translates them into the matching `SubmissionError`.
"""


class SubmissionError(Exception):
    """Base for failures reported back to the submitting client."""

    status_code = 400
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SubmissionError):
    status_code = 400


class MissingFields(ValidationError):
    def __init__(self, fields: list[str], message: str | None = None) -> None:
        self.fields = list(fields)
        super().__init__(message or f"Missing required fields: {', '.join(self.fields)}.")


class InvalidAmount(ValidationError):
    default_message = "Invalid amount. Minimum is $0.50."


class PaymentError(SubmissionError):
    status_code = 400


class PaymentsUnavailable(PaymentError):
    status_code = 503
    default_message = "Online payments are not available right now. Please contact us to pay your bill."


class PaymentSessionCreateFailed(PaymentError):
    status_code = 500
    default_message = "Failed to create payment session."


class PaymentRequired(PaymentError):
    default_message = (
        "Payment is required. Please enter your card and complete payment before submitting."
    )


class PaymentNotCompleted(PaymentError):
    default_message = "Payment was not completed. Please complete card payment and try again."


class PaymentInvalid(PaymentError):
    default_message = "Invalid payment. Please complete card payment and try again."


class NotificationError(SubmissionError):
    status_code = 500


class NotificationFailed(NotificationError):
    default_message = "Failed to send submission. Please try again or contact us directly."

    def __init__(self, message: str | None = None, failed_recipients: list[str] | None = None) -> None:
        self.failed_recipients = list(failed_recipients or [])
        super().__init__(message)


class UpstreamError(Exception):
    """Payment processor or mail relay rejected a call."""

    def __init__(self, dependency: str, detail: str) -> None:
        self.dependency = dependency
        self.detail = detail
        super().__init__(f"{dependency}: {detail}")


class UpstreamUnavailable(UpstreamError):
    """Network failure or timeout reaching the processor or relay."""
