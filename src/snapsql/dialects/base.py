"""
Dialect strategy interfaces describing how translated SQL is rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class DialectCapabilities:
    """
    Feature flags describing backend capabilities.
    """

    supports_returning: bool = False
    supports_ilike: bool = False
    supports_numbered_params: bool = False


class Dialect(Protocol):
    """
    Strategy interface consumed by the translator and the executor.
    """

    @property
    def name(self) -> str: ...

    @property
    def capabilities(self) -> DialectCapabilities: ...

    def quote_identifier(self, identifier: str) -> str: ...

    def parameter_placeholder(self, position: int | None = None) -> str: ...

    def case_insensitive_match(self) -> tuple[str, str]: ...

    def auto_increment_primary_key(self) -> str: ...

    def current_timestamp_default(self) -> str: ...

    def last_insert_id_sql(self) -> str: ...
