"""Redaction helpers for statement parameters written to logs and errors."""

from __future__ import annotations

import re
from typing import Any, Iterable

REDACTED_VALUE = "***"

_SENSITIVE_KEY_TOKENS = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "private_key",
)

# bcrypt ($2a$/$2b$/$2y$), argon2 and sha-crypt style hashes
_HASH_PATTERN = re.compile(r"^\$(2[abxy]|argon2(i|d|id)?|5|6)\$")
# "Bearer abc", "token=abc", "password: abc"
_CREDENTIAL_PATTERN = re.compile(
    r"^bearer\s+\S+$|\b(password|passwd|pwd|secret|token|api_?key)\s*[=:]\s*\S",
    re.IGNORECASE,
)


def _compact(value: str) -> str:
    return "".join(ch for ch in value if ch.isalnum())


def is_sensitive_key(key: str) -> bool:
    normalized = key.lower()
    compact = _compact(normalized)
    return any(token in normalized or _compact(token) in compact for token in _SENSITIVE_KEY_TOKENS)


def is_sensitive_value(value: str) -> bool:
    if _HASH_PATTERN.match(value):
        return True
    return _CREDENTIAL_PATTERN.search(value) is not None


def redact_value(value: Any, *, key: str | None = None) -> Any:
    if key is not None and is_sensitive_key(str(key)):
        return REDACTED_VALUE
    if isinstance(value, dict):
        return {k: redact_value(v, key=str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(redact_value(item) for item in value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<{len(value)} bytes>"
    if isinstance(value, str) and is_sensitive_value(value):
        return REDACTED_VALUE
    return value


def redact_params(params: Iterable[Any]) -> list[Any]:
    return [redact_value(value) for value in params]
