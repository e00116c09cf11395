"""
PostgreSQL-to-SQLite statement translation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from ..dialects.base import Dialect
from ..dialects.sqlite import SQLiteDialect
from ..errors import TranslationError
from .binder import bind_numbers
from .tokenizer import (
    Token,
    TokenKind,
    leading_keyword,
    placeholder_numbers,
    render,
    tokenize,
)

_RETURNING_STATEMENTS = ("INSERT", "REPLACE")
_NAME_KINDS = (TokenKind.WORD, TokenKind.IDENTIFIER)


@dataclass(frozen=True)
class Rewrite:
    """
    Engine-native text plus the metadata gathered while rewriting it.
    """

    sql: str
    placeholder_numbers: tuple[int, ...] = ()
    returning: Optional[str] = None


@dataclass(frozen=True)
class TranslatedStatement:
    sql: str
    params: tuple[Any, ...]
    returning: Optional[str] = None
    placeholder_numbers: tuple[int, ...] = ()

    @property
    def requires_returning(self) -> bool:
        return self.returning is not None


class Translator:
    """
    Rewrites caller-dialect statements into text the target dialect executes.

    Only ``RETURNING <column>`` for columns listed in ``returning_columns`` is
    accepted; the column is later filled from the engine's last generated id.
    """

    def __init__(
        self,
        dialect: Dialect | None = None,
        *,
        returning_columns: Iterable[str] = ("id",),
    ) -> None:
        self.dialect: Dialect = dialect or SQLiteDialect()
        self.returning_columns = frozenset(column.lower() for column in returning_columns)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def translate(self, sql: str, params: Sequence[Any] = ()) -> TranslatedStatement:
        rewrite = self.rewrite(sql)
        expanded = bind_numbers(rewrite.placeholder_numbers, params)
        return TranslatedStatement(
            sql=rewrite.sql,
            params=tuple(expanded),
            returning=rewrite.returning,
            placeholder_numbers=rewrite.placeholder_numbers,
        )

    def rewrite(self, sql: str) -> Rewrite:
        tokens = tokenize(sql)
        numbers = placeholder_numbers(tokens)
        returning: Optional[str] = None
        if not self.dialect.capabilities.supports_returning:
            tokens, returning = self._strip_returning(tokens)
        tokens = self._rewrite_ilike(tokens)
        tokens = self._rewrite_placeholders(tokens)
        return Rewrite(sql=render(tokens), placeholder_numbers=numbers, returning=returning)

    def translate_schema(self, sql: str) -> str:
        """
        Rewrite column constructs in schema DDL; used once at bootstrap.
        """

        tokens = tokenize(sql)
        tokens = self._replace_sequence(
            tokens, ("SERIAL", "PRIMARY", "KEY"), self.dialect.auto_increment_primary_key()
        )
        tokens = self._replace_sequence(
            tokens, ("BIGSERIAL", "PRIMARY", "KEY"), self.dialect.auto_increment_primary_key()
        )
        tokens = self._replace_sequence(
            tokens, ("TIMESTAMP", "DEFAULT", "NOW", "(", ")"), self.dialect.current_timestamp_default()
        )
        return render(tokens)

    # ------------------------------------------------------------------ #
    # Rules
    # ------------------------------------------------------------------ #
    def _rewrite_ilike(self, tokens: List[Token]) -> List[Token]:
        if self.dialect.capabilities.supports_ilike:
            return tokens
        operator, suffix = self.dialect.case_insensitive_match()
        collate_after: set[int] = set()
        output: List[Token] = []
        for idx, token in enumerate(tokens):
            if token.is_word("ILIKE"):
                output.append(Token(TokenKind.WORD, operator))
                end = self._operand_end(tokens, idx + 1)
                if end is not None:
                    collate_after.add(end)
            else:
                output.append(token)
            if idx in collate_after:
                output.append(Token(TokenKind.WHITESPACE, " "))
                output.append(Token(TokenKind.WORD, suffix))
        return output

    def _rewrite_placeholders(self, tokens: List[Token]) -> List[Token]:
        if self.dialect.capabilities.supports_numbered_params:
            return tokens
        return [
            Token(TokenKind.PUNCT, self.dialect.parameter_placeholder(token.parameter_number))
            if token.kind is TokenKind.PARAMETER
            else token
            for token in tokens
        ]

    def _strip_returning(self, tokens: List[Token]) -> tuple[List[Token], Optional[str]]:
        depth = 0
        start: Optional[int] = None
        for idx, token in enumerate(tokens):
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth -= 1
            elif depth == 0 and token.is_word("RETURNING"):
                start = idx
                break
        if start is None:
            return tokens, None

        clause = render(tokens[start:]).strip()
        tail = [t for t in tokens[start + 1 :] if not t.is_trivia]
        while tail and tail[-1].is_punct(";"):
            tail.pop()
        if len(tail) != 1 or tail[0].kind not in (TokenKind.WORD, TokenKind.IDENTIFIER):
            raise TranslationError(
                f"Unsupported clause {clause!r}: only RETURNING <single column> is supported."
            )

        keyword = leading_keyword(tokens)
        if keyword not in _RETURNING_STATEMENTS:
            raise TranslationError(
                f"RETURNING is only supported on INSERT statements, not {keyword or 'this statement'}."
            )

        column = self._identifier_name(tail[0])
        if column.lower() not in self.returning_columns:
            allowed = ", ".join(sorted(self.returning_columns))
            raise TranslationError(
                f"RETURNING {column} cannot be emulated; only generated identifiers ({allowed}) are supported."
            )

        kept = list(tokens[:start])
        while kept and kept[-1].is_trivia:
            kept.pop()
        return kept, column

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _identifier_name(token: Token) -> str:
        if token.kind is TokenKind.IDENTIFIER:
            return token.text[1:-1].replace('""', '"')
        return token.text

    @staticmethod
    def _operand_end(tokens: Sequence[Token], start: int) -> Optional[int]:
        """
        Index of the last token of the operand beginning at or after ``start``.

        Operands are a single token, a parenthesized group, or a dotted name
        optionally followed by a call's argument list. ``None`` means no safe
        place for a suffix was found.
        """

        idx = Translator._next_significant(tokens, start)
        if idx is None or tokens[idx].is_punct(";"):
            return None
        if tokens[idx].is_punct("("):
            return Translator._group_end(tokens, idx)
        if tokens[idx].kind not in _NAME_KINDS:
            return idx
        if tokens[idx].is_word("CASE"):
            return None

        end = idx
        while True:
            dot = Translator._next_significant(tokens, end + 1)
            if dot is None or not tokens[dot].is_punct("."):
                break
            name = Translator._next_significant(tokens, dot + 1)
            if name is None or tokens[name].kind not in _NAME_KINDS:
                return None
            end = name
        call = Translator._next_significant(tokens, end + 1)
        if call is not None and tokens[call].is_punct("("):
            return Translator._group_end(tokens, call)
        return end

    @staticmethod
    def _next_significant(tokens: Sequence[Token], start: int) -> Optional[int]:
        for idx in range(start, len(tokens)):
            if not tokens[idx].is_trivia:
                return idx
        return None

    @staticmethod
    def _group_end(tokens: Sequence[Token], start: int) -> Optional[int]:
        depth = 0
        for pos in range(start, len(tokens)):
            if tokens[pos].is_punct("("):
                depth += 1
            elif tokens[pos].is_punct(")"):
                depth -= 1
                if depth == 0:
                    return pos
        return None

    @staticmethod
    def _replace_sequence(
        tokens: List[Token], words: Sequence[str], replacement: str
    ) -> List[Token]:
        output: List[Token] = []
        idx = 0
        while idx < len(tokens):
            end = Translator._match_sequence(tokens, idx, words)
            if end is None:
                output.append(tokens[idx])
                idx += 1
                continue
            output.append(Token(TokenKind.WORD, replacement))
            idx = end
        return output

    @staticmethod
    def _match_sequence(tokens: Sequence[Token], start: int, words: Sequence[str]) -> Optional[int]:
        """Return the index past the match when ``words`` occur at ``start``, trivia allowed between."""
        idx = start
        for position, word in enumerate(words):
            if position:
                while idx < len(tokens) and tokens[idx].is_trivia:
                    idx += 1
            if idx >= len(tokens):
                return None
            token = tokens[idx]
            if token.kind not in (TokenKind.WORD, TokenKind.PUNCT) or token.upper != word:
                return None
            idx += 1
        return idx
