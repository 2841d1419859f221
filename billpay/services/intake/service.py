"""New-customer signup handling: validate, then notify the operator."""

from billpay.common.config import Settings
from billpay.common.errors import MissingFields, NotificationFailed
from billpay.common.logging import logger
from billpay.common.metrics import submissions_total
from billpay.services.intake.schemas import NewCustomerSubmission
from billpay.services.notification.messages import new_customer_operator_message, timestamp
from billpay.services.notification.service import NotificationDispatcher

SUCCESS_MESSAGE = "Thanks! We'll be in touch."


class NewCustomerHandler:
    """Forwards signups to the operator address; the submitter gets no receipt."""

    def __init__(self, settings: Settings, dispatcher: NotificationDispatcher) -> None:
        self.dispatcher = dispatcher
        self.operator_email = settings.operator_email
        self.service_name = settings.service_name

    async def submit(self, submission: NewCustomerSubmission) -> str:
        missing = submission.missing_fields()
        if missing:
            submissions_total.labels(service=self.service_name, form="new_customer", outcome="rejected").inc()
            raise MissingFields(missing, message="Please enter your name and email.")

        message = new_customer_operator_message(
            to=self.operator_email,
            fields=submission.labelled_fields(),
            customer_name=submission.name,
            submitted_at=timestamp(),
        )
        try:
            await self.dispatcher.send_operator(message)
        except NotificationFailed as exc:
            logger.error("new customer notification failed name=%s", submission.name)
            submissions_total.labels(service=self.service_name, form="new_customer", outcome="failed").inc()
            raise NotificationFailed(
                f"Failed to send your information. Please try again or email {self.operator_email}."
            ) from exc
        logger.info("new customer signup forwarded")
        submissions_total.labels(service=self.service_name, form="new_customer", outcome="sent").inc()
        return SUCCESS_MESSAGE
