"""Security helpers for snapsql."""

from .redaction import REDACTED_VALUE, redact_params, redact_value

__all__ = ["REDACTED_VALUE", "redact_params", "redact_value"]
