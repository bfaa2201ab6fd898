"""
Lexical analyzer (tokenizer) for TypeQL schema definitions.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from tqlgen.errors import SchemaSyntaxError


class TokenType(Enum):
    """Token types for TypeQL schemas."""

    IDENT = auto()
    KEYWORD = auto()  # define, entity, owns, ...
    FUN = auto()  # fun, kept apart so function bodies can stop at the next one
    ANNOTATION = auto()  # @key, @card, ...
    STRING = auto()  # raw quoted literal, quotes included
    VAR = auto()  # $name
    ARROW = auto()  # ->
    CARD = auto()  # 1, 0..1, 1..
    OPERATOR = auto()
    PUNCT = auto()
    EOF = auto()


@dataclass
class Token:
    """A token in a TypeQL schema."""

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class SchemaLexer:
    """Tokenizer for TypeQL schema definitions.

    Comments (``# ...``) and whitespace never reach the token stream.
    """

    KEYWORDS = frozenset(
        {
            "define",
            "attribute",
            "entity",
            "relation",
            "sub",
            "value",
            "owns",
            "plays",
            "relates",
            "as",
            "struct",
            "match",
            "return",
            "isa",
            "has",
            "not",
            "or",
            "in",
            "is",
            "count",
            "sum",
            "max",
            "min",
            "mean",
            "median",
            "std",
            "group",
        }
    )

    ANNOTATIONS = frozenset({"key", "unique", "abstract", "card", "regex", "values", "range"})

    CARD_PATTERN = re.compile(r"[0-9]+(?:\.\.[0-9]*)?")
    IDENT_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")
    OPERATOR_PATTERN = re.compile(r"==|!=|>=|<=|\.\.|[+\-*/^%.<>=!]")
    PUNCTUATION = frozenset(";,:?()[]{}")

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the entire input."""
        while self.pos < len(self.text):
            self._skip_whitespace()
            if self.pos >= len(self.text):
                break

            if not self._try_tokenize_one():
                raise SchemaSyntaxError(
                    f"Unexpected character {self.text[self.pos]!r}", self.line, self.column
                )

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))
        return self.tokens

    def _try_tokenize_one(self) -> bool:
        """Try to tokenize one token. Returns True if successful."""
        if self._match_comment():
            return True

        if self._match_string():
            return True

        if self._match_annotation():
            return True

        if self._match_variable():
            return True

        # Arrow must come before operators so "->" is not read as "-" ">"
        if self._match_arrow():
            return True

        if self._match_card():
            return True

        if self._match_identifier():
            return True

        if self._match_operator():
            return True

        if self._match_punctuation():
            return True

        return False

    def _emit(self, token_type: TokenType, value: str) -> None:
        """Append a single-line token at the current position and move past it."""
        self.tokens.append(Token(token_type, value, self.line, self.column))
        self.pos += len(value)
        self.column += len(value)

    def _skip_whitespace(self):
        """Skip whitespace but track newlines."""
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _match_comment(self) -> bool:
        """Match a # comment running to the end of the line."""
        if self.text[self.pos] != "#":
            return False
        while self.pos < len(self.text) and self.text[self.pos] != "\n":
            self.pos += 1
            self.column += 1
        return True

    def _match_string(self) -> bool:
        """Match a double-quoted string literal, keeping quotes and escapes verbatim."""
        if self.text[self.pos] != '"':
            return False

        start_pos = self.pos
        start_line = self.line
        start_col = self.column
        self.pos += 1
        self.column += 1

        while self.pos < len(self.text) and self.text[self.pos] != '"':
            step = 2 if self.text[self.pos] == "\\" else 1
            for char in self.text[self.pos : self.pos + step]:
                if char == "\n":
                    self.line += 1
                    self.column = 1
                else:
                    self.column += 1
            self.pos += step

        if self.pos >= len(self.text):
            raise SchemaSyntaxError("Unterminated string", start_line, start_col)

        self.pos += 1  # Skip closing quote
        self.column += 1

        self.tokens.append(
            Token(TokenType.STRING, self.text[start_pos : self.pos], start_line, start_col)
        )
        return True

    def _match_annotation(self) -> bool:
        """Match annotation keywords such as @key or @card."""
        if self.text[self.pos] != "@":
            return False

        match = self.IDENT_PATTERN.match(self.text, self.pos + 1)
        if not match or match.group() not in self.ANNOTATIONS:
            name = match.group() if match else ""
            raise SchemaSyntaxError(f"Unknown annotation '@{name}'", self.line, self.column)

        self._emit(TokenType.ANNOTATION, "@" + match.group())
        return True

    def _match_variable(self) -> bool:
        """Match $variables used inside function bodies."""
        if self.text[self.pos] != "$":
            return False

        match = self.IDENT_PATTERN.match(self.text, self.pos + 1)
        if not match:
            return False

        self._emit(TokenType.VAR, "$" + match.group())
        return True

    def _match_arrow(self) -> bool:
        if not self.text.startswith("->", self.pos):
            return False
        self._emit(TokenType.ARROW, "->")
        return True

    def _match_card(self) -> bool:
        """Match cardinality and range literals: 1, 0..1, 1.."""
        match = self.CARD_PATTERN.match(self.text, self.pos)
        if not match:
            return False
        self._emit(TokenType.CARD, match.group())
        return True

    def _match_identifier(self) -> bool:
        """Match identifiers and keywords."""
        match = self.IDENT_PATTERN.match(self.text, self.pos)
        if not match:
            return False

        value = match.group()
        if value == "fun":
            token_type = TokenType.FUN
        elif value in self.KEYWORDS:
            token_type = TokenType.KEYWORD
        else:
            token_type = TokenType.IDENT

        self._emit(token_type, value)
        return True

    def _match_operator(self) -> bool:
        match = self.OPERATOR_PATTERN.match(self.text, self.pos)
        if not match:
            return False
        self._emit(TokenType.OPERATOR, match.group())
        return True

    def _match_punctuation(self) -> bool:
        if self.text[self.pos] not in self.PUNCTUATION:
            return False
        self._emit(TokenType.PUNCT, self.text[self.pos])
        return True


def tokenize(text: str) -> list[Token]:
    """Tokenize schema text, returning the token list terminated by EOF."""
    return SchemaLexer(text).tokenize()
