"""Email bodies for operator notifications and customer receipts.

Every message is rendered twice: a plain-text body with values verbatim and an
HTML body where every interpolated value is escaped.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

BLANK = "—"


@dataclass(frozen=True)
class OutboundMessage:
    to: str
    subject: str
    text: str
    html: str


def escape_html(value) -> str:
    if value is None:
        return ""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def format_address(*parts: str | None) -> str:
    """Join the non-empty address parts with ", "."""

    return ", ".join(part for part in parts if part)


def format_amount(amount: Decimal) -> str:
    return f"${Decimal(amount).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"


def timestamp(now: datetime | None = None) -> str:
    """UTC ISO-8601 with millisecond precision and a `Z` suffix."""

    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _html_fields(fields: list[tuple[str, str]]) -> list[str]:
    return [f"<p><strong>{label}:</strong> {escape_html(value)}</p>" for label, value in fields]


def bill_operator_message(
    to: str,
    customer_name: str,
    address: str,
    amount: str,
    receipt_email: str,
    submitted_at: str,
) -> OutboundMessage:
    fields = [
        ("Customer name", customer_name),
        ("Address", address),
        ("Payment amount", amount),
        ("Receipt email", receipt_email),
    ]
    text = "\n".join(
        ["Bill pay submission from website", ""]
        + [f"{label}: {value}" for label, value in fields]
        + ["", f"Submitted at: {submitted_at}"]
    )
    html = "".join(
        ["<h2>Bill pay submission</h2>"]
        + _html_fields(fields)
        + [f"<p><em>Submitted at: {escape_html(submitted_at)}</em></p>"]
    )
    return OutboundMessage(
        to=to,
        subject=f"Bill pay submission: {customer_name} – {amount}",
        text=text,
        html=html,
    )


def bill_receipt_message(
    to: str,
    company_name: str,
    customer_name: str,
    address: str,
    amount: str,
) -> OutboundMessage:
    fields = [("Customer", customer_name), ("Address", address), ("Amount", amount)]
    closing = "We will process this and contact you if we need anything else."
    text = "\n".join(
        [
            "Thank you for your payment submission.",
            "",
            f"{company_name} has received the following:",
            "",
        ]
        + [f"{label}: {value}" for label, value in fields]
        + ["", closing, "", f"— {company_name}"]
    )
    html = "".join(
        ["<h2>Payment receipt</h2>", "<p>Thank you for your payment submission.</p>"]
        + _html_fields(fields)
        + [f"<p>{closing}</p>", f"<p>— {escape_html(company_name)}</p>"]
    )
    return OutboundMessage(
        to=to,
        subject=f"{company_name} – Payment receipt for {amount}",
        text=text,
        html=html,
    )


def new_customer_operator_message(
    to: str,
    fields: list[tuple[str, str]],
    customer_name: str,
    submitted_at: str,
) -> OutboundMessage:
    """Operator notice listing every signup field; blank optional ones show as a dash."""

    shown = [(label, value or BLANK) for label, value in fields]
    text = "\n".join(
        ["New customer signup from website", ""]
        + [f"{label}: {value}" for label, value in shown]
        + ["", f"Submitted at: {submitted_at}"]
    )
    html = "".join(
        ["<h2>New customer signup</h2>"]
        + _html_fields(shown)
        + [f"<p><em>Submitted at: {escape_html(submitted_at)}</em></p>"]
    )
    return OutboundMessage(
        to=to,
        subject=f"New customer signup: {customer_name}",
        text=text,
        html=html,
    )
