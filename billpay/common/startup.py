"""Startup-time helpers for safe config logging."""

from billpay.common.config import Settings
from billpay.common.logging import logger

SECRET_MARKERS = ("KEY", "SECRET", "PASS", "TOKEN")


def _safe_value(name: str, value) -> str:
    """Return a printable value, redacting secret-like setting names."""

    if value is None:
        return "<unset>"
    if any(marker in name.upper() for marker in SECRET_MARKERS):
        return "<redacted>"
    return str(value)


def log_startup_config(settings: Settings, keys: list[str]) -> dict[str, str]:
    """Log selected settings for quick troubleshooting and return what was logged."""

    config = {"service": settings.service_name}
    for key in keys:
        config[key] = _safe_value(key, getattr(settings, key, None))
    logger.info("startup_config=%s", config)
    return config
