"""
Dialect translation: tokenizer, placeholder binder, and statement translator.
"""

from .binder import bind_numbers, expand_params
from .tokenizer import Token, TokenKind, split_statements, tokenize
from .translator import Rewrite, TranslatedStatement, Translator

__all__ = [
    "Rewrite",
    "Token",
    "TokenKind",
    "TranslatedStatement",
    "Translator",
    "bind_numbers",
    "expand_params",
    "split_statements",
    "tokenize",
]
