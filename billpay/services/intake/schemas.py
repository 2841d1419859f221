"""Request schema for the new-customer signup form."""

from pydantic import Field

from billpay.services.orchestrator.schemas import FormModel


class NewCustomerSubmission(FormModel):
    """Only name and email are required; the rest default to blank."""

    name: str | None = None
    email: str | None = None
    phone: str | None = ""
    street: str | None = ""
    city: str | None = ""
    state: str | None = ""
    zip_code: str | None = Field(default="", alias="zip")
    company: str | None = ""
    notes: str | None = ""

    def missing_fields(self) -> list[str]:
        return [name for name, value in (("name", self.name), ("email", self.email)) if not value]

    def labelled_fields(self) -> list[tuple[str, str]]:
        values = [
            ("Name", self.name),
            ("Email", self.email),
            ("Phone", self.phone),
            ("Street", self.street),
            ("City", self.city),
            ("State", self.state),
            ("ZIP", self.zip_code),
            ("Company", self.company),
            ("Notes", self.notes),
        ]
        return [(label, value or "") for label, value in values]
