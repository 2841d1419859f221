"""Notification dispatcher: operator notices and customer receipts."""

from billpay.common.errors import NotificationFailed, UpstreamError
from billpay.common.logging import logger
from billpay.common.metrics import notification_sends_total
from billpay.services.notification.messages import OutboundMessage
from billpay.services.notification.relay import MailRelay


class NotificationDispatcher:
    """Sends every message of a submission; any failed send fails the whole dispatch."""

    def __init__(self, relay: MailRelay, service_name: str = "billpay") -> None:
        self.relay = relay
        self.service_name = service_name

    async def _deliver(self, role: str, message: OutboundMessage) -> bool:
        try:
            await self.relay.deliver(message)
        except UpstreamError as exc:
            logger.error("notification send failed recipient=%s role=%s detail=%s", message.to, role, exc)
            notification_sends_total.labels(service=self.service_name, recipient=role, outcome="failed").inc()
            return False
        logger.info("notification sent recipient=%s role=%s", message.to, role)
        notification_sends_total.labels(service=self.service_name, recipient=role, outcome="sent").inc()
        return True

    async def _dispatch(self, messages: list[tuple[str, OutboundMessage]]) -> None:
        # No short-circuit: a failed operator send still lets the receipt go out.
        failed = [message.to for role, message in messages if not await self._deliver(role, message)]
        if failed:
            raise NotificationFailed(failed_recipients=failed)

    async def send(self, operator_message: OutboundMessage, customer_message: OutboundMessage) -> None:
        """Send the operator notification and the customer receipt."""

        await self._dispatch([("operator", operator_message), ("customer", customer_message)])

    async def send_operator(self, operator_message: OutboundMessage) -> None:
        await self._dispatch([("operator", operator_message)])
