"""API request/response schemas for the bill-pay endpoints."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class FormModel(BaseModel):
    """camelCase on the wire, snake_case in Python, surrounding whitespace stripped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class SubmissionResponse(FormModel):
    success: bool
    message: str


class ConfigResponse(FormModel):
    """Browser-safe configuration; the secret key never leaves the server."""

    stripe_publishable_key: str | None = None


class PaymentIntentRequest(FormModel):
    amount: Decimal | None = None


class PaymentIntentResponse(FormModel):
    client_secret: str


class BillSubmission(FormModel):
    """Bill-pay form plus the processor reference of the confirmed card payment.

    Every field is optional at the schema level so that absent fields are
    reported as one `MissingFields` error by the orchestrator.
    """

    customer_name: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = Field(default=None, alias="zip")
    amount: Decimal | None = None
    receipt_email: str | None = None
    payment_intent_id: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _blank_amount_as_missing(cls, value):
        # A cleared amount input arrives as "" and must report as a missing field.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def missing_fields(self) -> list[str]:
        """Wire names of required fields that are absent or blank, in form order."""

        required = {
            "customerName": self.customer_name,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip": self.zip_code,
            "amount": self.amount,
            "receiptEmail": self.receipt_email,
        }
        return [name for name, value in required.items() if value is None or value == ""]
