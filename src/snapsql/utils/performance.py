"""
Slow-query threshold resolution.
"""

from __future__ import annotations

import os

from ..errors import AdapterConfigurationError

SLOW_QUERY_ENV = "SNAPSQL_SLOW_QUERY_MS"


def parse_slow_query_ms(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Invalid integer value for '{SLOW_QUERY_ENV}': {raw!r}") from exc
    if value < 0:
        raise AdapterConfigurationError(f"'{SLOW_QUERY_ENV}' must be non-negative, got {value}")
    return value


def resolve_slow_query_ms(*, default: int = 100, override: int | None = None) -> int:
    """
    Pick the slow-query threshold: explicit override, then environment, then default.

    An unparseable or negative environment value raises
    :class:`AdapterConfigurationError`, as :meth:`AdapterConfig.from_env` does.
    """

    if override is not None:
        return max(0, int(override))
    raw = os.getenv(SLOW_QUERY_ENV)
    if not raw:
        return default
    return parse_slow_query_ms(raw)
