import pytest

from snapsql.errors import TranslationError
from snapsql.translation.tokenizer import (
    TokenKind,
    leading_keyword,
    placeholder_numbers,
    render,
    split_statements,
    tokenize,
)


def test_tokenize_is_lossless():
    sql = "SELECT \"we\"\"ird\", 'it''s $1' /* $2 */ FROM t -- $3\nWHERE a = $4 AND b >= 1.5e3;"
    assert render(tokenize(sql)) == sql


def test_tokenize_classifies_tokens():
    tokens = [t for t in tokenize("SELECT 'x', \"Col\", $12, 42 FROM t") if not t.is_trivia]
    kinds = [t.kind for t in tokens]
    assert kinds == [
        TokenKind.WORD,
        TokenKind.STRING,
        TokenKind.PUNCT,
        TokenKind.IDENTIFIER,
        TokenKind.PUNCT,
        TokenKind.PARAMETER,
        TokenKind.PUNCT,
        TokenKind.NUMBER,
        TokenKind.WORD,
        TokenKind.WORD,
    ]
    assert tokens[5].parameter_number == 12


def test_placeholders_inside_literals_and_comments_are_ignored():
    tokens = tokenize("SELECT '$1', \"$2\" /* $3 */ -- $4\n FROM t WHERE a = $5")
    assert placeholder_numbers(tokens) == (5,)


def test_bare_dollar_is_punctuation():
    tokens = tokenize("SELECT $ FROM t")
    assert placeholder_numbers(tokens) == ()
    assert any(t.is_punct("$") for t in tokens)


def test_unterminated_string_raises():
    with pytest.raises(TranslationError):
        tokenize("SELECT 'oops")


def test_unterminated_block_comment_raises():
    with pytest.raises(TranslationError):
        tokenize("SELECT 1 /* never closed")


def test_leading_keyword_skips_comments():
    assert leading_keyword(tokenize("  -- note\n/* x */ select 1")) == "SELECT"
    assert leading_keyword(tokenize("(SELECT 1)")) == ""
    assert leading_keyword(tokenize("   ")) == ""


def test_split_statements_on_top_level_semicolons():
    sql = "CREATE TABLE a (v TEXT DEFAULT ';');\n\nINSERT INTO a VALUES ('x;y');\n-- trailing comment\n"
    statements = [render(s).strip() for s in split_statements(tokenize(sql))]
    assert statements == [
        "CREATE TABLE a (v TEXT DEFAULT ';')",
        "INSERT INTO a VALUES ('x;y')",
    ]


def test_split_statements_keeps_trigger_bodies_whole():
    sql = (
        "CREATE TABLE a (id INTEGER);\n"
        "CREATE TRIGGER t AFTER INSERT ON a BEGIN INSERT INTO a VALUES (1); END;\n"
        "SELECT 1;"
    )
    statements = [render(s).strip() for s in split_statements(tokenize(sql))]
    assert len(statements) == 3
    assert statements[1] == "CREATE TRIGGER t AFTER INSERT ON a BEGIN INSERT INTO a VALUES (1); END"
