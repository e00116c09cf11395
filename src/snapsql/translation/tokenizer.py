"""
Lexical scanner for PostgreSQL-flavoured SQL text.

The scanner is lossless: joining the ``text`` of every token reproduces the
input exactly, so rewriting passes only ever touch the tokens they target.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List

from ..errors import TranslationError


class TokenKind(Enum):
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    STRING = "string"
    IDENTIFIER = "identifier"  # double-quoted
    PARAMETER = "parameter"  # $1, $2, ...
    WORD = "word"
    NUMBER = "number"
    PUNCT = "punct"


_TRIVIA = (TokenKind.WHITESPACE, TokenKind.COMMENT)


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str

    @property
    def upper(self) -> str:
        return self.text.upper()

    @property
    def is_trivia(self) -> bool:
        return self.kind in _TRIVIA

    @property
    def parameter_number(self) -> int:
        if self.kind is not TokenKind.PARAMETER:
            raise ValueError(f"{self.text!r} is not a numbered placeholder")
        return int(self.text[1:])

    def is_word(self, *words: str) -> bool:
        return self.kind is TokenKind.WORD and self.upper in words

    def is_punct(self, char: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == char


def _scan_quoted(sql: str, start: int, quote: str, what: str) -> int:
    """Return the index just past the closing quote; doubled quotes are escapes."""
    idx = start + 1
    length = len(sql)
    while idx < length:
        if sql[idx] == quote:
            if idx + 1 < length and sql[idx + 1] == quote:
                idx += 2
                continue
            return idx + 1
        idx += 1
    raise TranslationError(f"Unterminated {what} starting at offset {start}")


def _iter_tokens(sql: str) -> Iterator[Token]:
    idx = 0
    length = len(sql)
    while idx < length:
        ch = sql[idx]
        nxt = sql[idx + 1] if idx + 1 < length else ""

        if ch.isspace():
            end = idx + 1
            while end < length and sql[end].isspace():
                end += 1
            yield Token(TokenKind.WHITESPACE, sql[idx:end])
        elif ch == "-" and nxt == "-":
            end = sql.find("\n", idx)
            end = length if end == -1 else end
            yield Token(TokenKind.COMMENT, sql[idx:end])
        elif ch == "/" and nxt == "*":
            close = sql.find("*/", idx + 2)
            if close == -1:
                raise TranslationError(f"Unterminated block comment starting at offset {idx}")
            end = close + 2
            yield Token(TokenKind.COMMENT, sql[idx:end])
        elif ch == "'":
            end = _scan_quoted(sql, idx, "'", "string literal")
            yield Token(TokenKind.STRING, sql[idx:end])
        elif ch == '"':
            end = _scan_quoted(sql, idx, '"', "quoted identifier")
            yield Token(TokenKind.IDENTIFIER, sql[idx:end])
        elif ch == "$" and nxt.isdigit():
            end = idx + 1
            while end < length and sql[end].isdigit():
                end += 1
            yield Token(TokenKind.PARAMETER, sql[idx:end])
        elif ch.isalpha() or ch == "_":
            end = idx + 1
            while end < length and (sql[end].isalnum() or sql[end] == "_"):
                end += 1
            yield Token(TokenKind.WORD, sql[idx:end])
        elif ch.isdigit() or (ch == "." and nxt.isdigit()):
            end = idx + 1
            while end < length and (sql[end].isdigit() or sql[end] == "."):
                end += 1
            if end < length and sql[end] in "eE":
                exp = end + 1
                if exp < length and sql[exp] in "+-":
                    exp += 1
                if exp < length and sql[exp].isdigit():
                    end = exp
                    while end < length and sql[end].isdigit():
                        end += 1
            yield Token(TokenKind.NUMBER, sql[idx:end])
        else:
            end = idx + 1
            yield Token(TokenKind.PUNCT, ch)
        idx = end


def tokenize(sql: str) -> List[Token]:
    return list(_iter_tokens(sql))


def render(tokens: Iterable[Token]) -> str:
    return "".join(token.text for token in tokens)


def significant(tokens: Iterable[Token]) -> List[Token]:
    return [token for token in tokens if not token.is_trivia]


def leading_keyword(tokens: Iterable[Token]) -> str:
    """Uppercased first word of the statement, or an empty string."""
    for token in tokens:
        if token.is_trivia:
            continue
        return token.upper if token.kind is TokenKind.WORD else ""
    return ""


def placeholder_numbers(tokens: Iterable[Token]) -> tuple[int, ...]:
    return tuple(token.parameter_number for token in tokens if token.kind is TokenKind.PARAMETER)


def split_statements(tokens: List[Token]) -> List[List[Token]]:
    """
    Split a token stream at top-level semicolons.

    Semicolons inside a ``CREATE TRIGGER ... BEGIN ... END`` body do not end the
    statement. Statements consisting only of trivia are dropped.
    """

    statements: List[List[Token]] = []
    current: List[Token] = []
    in_trigger = False
    block_depth = 0

    def finish() -> None:
        if significant(current):
            statements.append(list(current))
        current.clear()

    for token in tokens:
        if token.kind is TokenKind.WORD:
            if token.upper == "TRIGGER" and leading_keyword(current) == "CREATE":
                in_trigger = True
            elif in_trigger and token.upper in ("BEGIN", "CASE"):
                block_depth += 1
            elif in_trigger and token.upper == "END":
                block_depth = max(0, block_depth - 1)
        if token.is_punct(";") and block_depth == 0:
            finish()
            in_trigger = False
            continue
        current.append(token)
    finish()
    return statements
