"""Environment-driven settings for the submission service.

Built once at process start by `load_settings()` and handed to `create_app`,
which passes it into every service constructor (see `.env.example`).
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


class Settings(BaseSettings):
    """Typed, read-only view of runtime configuration from environment variables."""

    service_name: str = "billpay"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    static_dir: Path = STATIC_DIR
    otel_exporter_otlp_endpoint: str | None = None

    stripe_secret_key: str | None = None
    stripe_publishable_key: str | None = None
    payment_currency: str = Field(default="usd", min_length=3, max_length=3)
    payment_timeout_seconds: float = Field(default=10.0, gt=0)

    smtp_host: str = "smtp.ipa.net"
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_secure: bool = False
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_timeout_seconds: float = Field(default=10.0, gt=0)

    from_email: str = "OSWater@ipa.net"
    operator_email: str = "OSWater@ipa.net"
    company_name: str = "Ouachita Spring Water Co."

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @field_validator(
        "stripe_secret_key",
        "stripe_publishable_key",
        "smtp_user",
        "smtp_pass",
        "otel_exporter_otlp_endpoint",
        mode="before",
    )
    @classmethod
    def _blank_as_unset(cls, value):
        # `.env` templates ship these as `KEY=`; treat that as not configured.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def payments_enabled(self) -> bool:
        return self.stripe_secret_key is not None

    @property
    def smtp_credentials(self) -> tuple[str, str] | None:
        if self.smtp_user and self.smtp_pass:
            return self.smtp_user, self.smtp_pass
        return None


def load_settings() -> Settings:
    """Read settings from the environment; raises on structurally invalid values."""

    return Settings()
