"""Tests for the TypeQL schema lexer."""

import pytest

from tqlgen.errors import SchemaSyntaxError
from tqlgen.schema.lexer import SchemaLexer, TokenType, tokenize


def kinds(text: str) -> list[TokenType]:
    return [t.type for t in tokenize(text)]


def values(text: str) -> list[str]:
    return [t.value for t in tokenize(text)][:-1]


class TestLexerBasics:
    """Test basic tokenization."""

    def test_empty_input(self):
        """Empty input gives only EOF."""
        tokens = SchemaLexer("").tokenize()
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_attribute_definition(self):
        assert kinds("attribute name, value string;") == [
            TokenType.KEYWORD,
            TokenType.IDENT,
            TokenType.PUNCT,
            TokenType.KEYWORD,
            TokenType.IDENT,
            TokenType.PUNCT,
            TokenType.EOF,
        ]

    def test_keywords_need_whole_identifier(self):
        """Reserved words inside longer identifiers stay identifiers."""
        tokens = tokenize("sub sub-task owner relates_to")
        assert tokens[0].type == TokenType.KEYWORD
        assert [(t.type, t.value) for t in tokens[1:4]] == [
            (TokenType.IDENT, "sub-task"),
            (TokenType.IDENT, "owner"),
            (TokenType.IDENT, "relates_to"),
        ]

    def test_fun_has_its_own_kind(self):
        assert kinds("fun") == [TokenType.FUN, TokenType.EOF]

    def test_comments_and_whitespace_are_dropped(self):
        text = "# leading comment\nentity person; # trailing\n\n"
        assert values(text) == ["entity", "person", ";"]


class TestLexerLiterals:
    """Test annotations, strings, variables and cardinalities."""

    def test_annotations(self):
        tokens = tokenize("@key @unique @abstract @card @regex @values @range")
        assert all(t.type == TokenType.ANNOTATION for t in tokens[:-1])
        assert tokens[0].value == "@key"

    def test_unknown_annotation_is_an_error(self):
        with pytest.raises(SchemaSyntaxError, match="Unknown annotation '@indexed'"):
            tokenize("owns name @indexed;")

    def test_string_keeps_quotes_and_escapes(self):
        tokens = tokenize(r'@regex("a\"b\\d")')
        string = tokens[2]
        assert string.type == TokenType.STRING
        assert string.value == r'"a\"b\\d"'

    def test_unterminated_string(self):
        with pytest.raises(SchemaSyntaxError) as exc_info:
            tokenize('attribute x value string @regex("abc')
        assert "Unterminated string" in str(exc_info.value)
        assert exc_info.value.line == 1
        assert exc_info.value.column == 33

    def test_variable(self):
        tokens = tokenize("$name")
        assert tokens[0].type == TokenType.VAR
        assert tokens[0].value == "$name"

    def test_arrow_is_not_two_operators(self):
        assert kinds("-> -") == [TokenType.ARROW, TokenType.OPERATOR, TokenType.EOF]

    @pytest.mark.parametrize("text", ["1", "0..1", "1..", "10..20"])
    def test_cardinality(self, text):
        tokens = tokenize(text)
        assert tokens[0].type == TokenType.CARD
        assert tokens[0].value == text

    def test_operators_and_punctuation(self):
        tokens = tokenize("== != >= <= < > ; , : ? ( ) [ ] { }")
        assert [t.type for t in tokens[:6]] == [TokenType.OPERATOR] * 6
        assert [t.type for t in tokens[6:-1]] == [TokenType.PUNCT] * 10


class TestLexerPositions:
    """Test line and column tracking."""

    def test_positions_across_lines(self):
        tokens = tokenize("define\n  entity person;")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (2, 3)
        assert (tokens[2].line, tokens[2].column) == (2, 10)

    def test_unexpected_character(self):
        with pytest.raises(SchemaSyntaxError) as exc_info:
            tokenize("entity person;\n  owns ~")
        error = exc_info.value
        assert (error.line, error.column) == (2, 8)
        assert str(error).endswith("at line 2, column 8")
