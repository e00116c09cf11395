"""
Expansion of numbered parameters into placeholder-occurrence order.

PostgreSQL lets one statement reference ``$1`` several times while passing the
value once; SQLite's ``?`` markers are consumed strictly left to right. The
binder bridges the two by repeating values in the order their placeholders
appear in the original text.
"""

from __future__ import annotations

from typing import Any, List, Sequence

from ..errors import BindingMismatchError
from .tokenizer import placeholder_numbers, tokenize


def bind_numbers(numbers: Sequence[int], params: Sequence[Any]) -> List[Any]:
    if not numbers:
        return list(params)
    expanded: List[Any] = []
    for number in numbers:
        if number < 1 or number > len(params):
            raise BindingMismatchError(
                f"Placeholder ${number} has no matching parameter "
                f"({len(params)} supplied)."
            )
        expanded.append(params[number - 1])
    return expanded


def expand_params(sql: str, params: Sequence[Any]) -> List[Any]:
    """
    Return ``params`` reordered and repeated to match each ``$n`` occurrence in ``sql``.

    When ``sql`` contains no numbered placeholders the caller's list is returned
    as-is, which supports callers that already pass qmark-ordered values.
    """

    return bind_numbers(placeholder_numbers(tokenize(sql)), params)
