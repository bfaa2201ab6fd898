"""
Parser for TypeQL schema definitions.

Converts tokens into a concrete parse tree (see ``tqlgen.schema.ast``).
"""

from tqlgen.errors import SchemaSyntaxError
from tqlgen.schema.ast import (
    Annotation,
    AnnotationKind,
    AttributeDef,
    Definition,
    EntityClause,
    EntityDef,
    FunctionDef,
    OwnsClause,
    PlaysClause,
    RelatesClause,
    RelationClause,
    RelationDef,
    SchemaFile,
    StructDef,
    StructFieldDef,
)
from tqlgen.schema.lexer import SchemaLexer, Token, TokenType


class SchemaParser:
    """Parser for TypeQL schema definitions."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    @classmethod
    def parse(cls, schema_text: str) -> SchemaFile:
        """Parse schema text into a parse tree."""
        lexer = SchemaLexer(schema_text)
        tokens = lexer.tokenize()
        parser = cls(tokens)
        return parser.parse_file()

    def parse_file(self) -> SchemaFile:
        """Parse the complete file: an optional `define` followed by definitions."""
        if self._check_keyword("define"):
            self._advance()

        definitions: list[Definition] = []
        while not self._is_at_end():
            definitions.append(self._parse_definition())

        return SchemaFile(definitions=definitions)

    def _parse_definition(self) -> Definition:
        if self._check_keyword("attribute"):
            return self._parse_attribute()
        if self._check_keyword("entity"):
            return self._parse_entity()
        if self._check_keyword("relation"):
            return self._parse_relation()
        if self._check_keyword("struct"):
            return self._parse_struct()
        if self._check(TokenType.FUN):
            return self._parse_function()

        raise self._error(
            "Expected definition (attribute, entity, relation, struct, fun), "
            f"got {self._describe(self._current())}"
        )

    # --- attribute ---

    def _parse_attribute(self) -> AttributeDef:
        """attribute name [,] value type [annotations] ;"""
        self._expect_keyword("attribute")
        name = self._expect(TokenType.IDENT, "attribute name").value
        self._match_punct(",")
        self._expect_keyword("value")
        value_type = self._expect(TokenType.IDENT, "value type").value
        annotations = self._parse_annotations()
        self._expect_punct(";")
        return AttributeDef(name=name, value_type=value_type, annotations=annotations)

    # --- entity / relation ---

    def _parse_entity(self) -> EntityDef:
        """entity name [sub parent] [@abstract] [,] [clause (, clause)*] ;"""
        self._expect_keyword("entity")
        name = self._expect(TokenType.IDENT, "entity name").value
        parent, abstract = self._parse_type_header()
        clauses: list[EntityClause] = []

        for _ in self._clause_list():
            if self._check_keyword("owns"):
                clauses.append(self._parse_owns())
            elif self._check_keyword("plays"):
                clauses.append(self._parse_plays())
            else:
                raise self._error(
                    f"Expected 'owns' or 'plays' in entity '{name}', "
                    f"got {self._describe(self._current())}"
                )

        return EntityDef(name=name, parent=parent, abstract=abstract, clauses=clauses)

    def _parse_relation(self) -> RelationDef:
        """relation name [sub parent] [@abstract] [,] [clause (, clause)*] ;"""
        self._expect_keyword("relation")
        name = self._expect(TokenType.IDENT, "relation name").value
        parent, abstract = self._parse_type_header()
        clauses: list[RelationClause] = []

        for _ in self._clause_list():
            if self._check_keyword("relates"):
                clauses.append(self._parse_relates())
            elif self._check_keyword("owns"):
                clauses.append(self._parse_owns())
            elif self._check_keyword("plays"):
                clauses.append(self._parse_plays())
            else:
                raise self._error(
                    f"Expected 'relates', 'owns' or 'plays' in relation '{name}', "
                    f"got {self._describe(self._current())}"
                )

        return RelationDef(name=name, parent=parent, abstract=abstract, clauses=clauses)

    def _parse_type_header(self) -> tuple[str | None, bool]:
        """Parse [sub parent] [@abstract]* [,] after a type name."""
        parent = None
        if self._check_keyword("sub"):
            self._advance()
            parent = self._expect(TokenType.IDENT, "parent type name").value

        abstract = False
        while self._check_annotation("abstract"):
            self._advance()
            abstract = True

        self._match_punct(",")
        return parent, abstract

    def _clause_list(self):
        """Yield once per clause of a comma separated list ending in ';'.

        The caller parses one clause per iteration; separators and the
        terminator are consumed here.
        """
        if self._match_punct(";"):
            return

        while True:
            yield
            if self._match_punct(","):
                continue
            self._expect_punct(";")
            return

    def _parse_owns(self) -> OwnsClause:
        self._expect_keyword("owns")
        attribute = self._expect(TokenType.IDENT, "attribute name after 'owns'").value
        return OwnsClause(attribute=attribute, annotations=self._parse_annotations())

    def _parse_plays(self) -> PlaysClause:
        self._expect_keyword("plays")
        relation = self._expect(TokenType.IDENT, "relation name after 'plays'").value
        self._expect_punct(":")
        role = self._expect(TokenType.IDENT, "role name").value
        return PlaysClause(relation=relation, role=role)

    def _parse_relates(self) -> RelatesClause:
        self._expect_keyword("relates")
        role = self._expect(TokenType.IDENT, "role name after 'relates'").value
        as_parent = None
        if self._check_keyword("as"):
            self._advance()
            as_parent = self._expect(TokenType.IDENT, "parent role name after 'as'").value
        return RelatesClause(role=role, as_parent=as_parent, annotations=self._parse_annotations())

    # --- annotations ---

    def _parse_annotations(self) -> list[Annotation]:
        annotations = []
        while self._check(TokenType.ANNOTATION):
            annotations.append(self._parse_annotation())
        return annotations

    def _parse_annotation(self) -> Annotation:
        token = self._advance()
        kind = AnnotationKind(token.value[1:])
        annotation = Annotation(kind=kind, line=token.line, column=token.column)

        if kind in (AnnotationKind.CARD, AnnotationKind.RANGE):
            self._expect_punct("(")
            annotation.expr = self._expect(TokenType.CARD, f"expression in {token.value}").value
            self._expect_punct(")")
        elif kind == AnnotationKind.REGEX:
            self._expect_punct("(")
            annotation.expr = self._expect(TokenType.STRING, "pattern string in @regex").value
            self._expect_punct(")")
        elif kind == AnnotationKind.VALUES:
            self._expect_punct("(")
            annotation.values.append(self._expect(TokenType.STRING, "string in @values").value)
            while self._match_punct(","):
                annotation.values.append(
                    self._expect(TokenType.STRING, "string in @values").value
                )
            self._expect_punct(")")

        return annotation

    # --- struct ---

    def _parse_struct(self) -> StructDef:
        """struct name (: name value type | , value name type) [, ...] [,] ;

        The separator after the struct name picks the field order: ':' means
        `field-name value type`, ',' means `value field-name type`.
        """
        self._expect_keyword("struct")
        name = self._expect(TokenType.IDENT, "struct name").value

        if self._match_punct(":"):
            parse_field = self._parse_named_field
        elif self._match_punct(","):
            parse_field = self._parse_value_first_field
        else:
            raise self._error(
                f"Expected ':' or ',' after struct name, got {self._describe(self._current())}"
            )

        fields = [parse_field()]
        while self._match_punct(","):
            if self._check_punct(";"):
                break
            fields.append(parse_field())
        self._expect_punct(";")

        return StructDef(name=name, fields=fields)

    def _parse_named_field(self) -> StructFieldDef:
        field_name = self._expect(TokenType.IDENT, "struct field name").value
        self._expect_keyword("value")
        value_type = self._expect(TokenType.IDENT, "struct field value type").value
        return StructFieldDef(field_name, value_type, optional=self._match_punct("?"))

    def _parse_value_first_field(self) -> StructFieldDef:
        self._expect_keyword("value")
        field_name = self._expect(TokenType.IDENT, "struct field name").value
        value_type = self._expect(TokenType.IDENT, "struct field value type").value
        return StructFieldDef(field_name, value_type, optional=self._match_punct("?"))

    # --- function ---

    def _parse_function(self) -> FunctionDef:
        """fun name <every token up to the next fun or end of input>"""
        self._expect(TokenType.FUN, "'fun'")
        name = self._expect(TokenType.IDENT, "function name").value
        body = []
        while not self._is_at_end() and not self._check(TokenType.FUN):
            body.append(self._advance().value)
        return FunctionDef(name=name, body=body)

    # Helper methods

    def _current(self) -> Token:
        """Get the current token."""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # Return EOF

    def _advance(self) -> Token:
        """Advance to the next token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches the given type."""
        if self._is_at_end():
            return False
        return self._current().type == token_type

    def _check_value(self, token_type: TokenType, value: str) -> bool:
        return self._check(token_type) and self._current().value == value

    def _check_keyword(self, keyword: str) -> bool:
        return self._check_value(TokenType.KEYWORD, keyword)

    def _check_punct(self, char: str) -> bool:
        return self._check_value(TokenType.PUNCT, char)

    def _check_annotation(self, name: str) -> bool:
        return self._check_value(TokenType.ANNOTATION, "@" + name)

    def _match_punct(self, char: str) -> bool:
        """Consume the punctuation token if present."""
        if self._check_punct(char):
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType, what: str) -> Token:
        if not self._check(token_type):
            raise self._error(f"Expected {what}, got {self._describe(self._current())}")
        return self._advance()

    def _expect_keyword(self, keyword: str) -> Token:
        if not self._check_keyword(keyword):
            raise self._error(f"Expected '{keyword}', got {self._describe(self._current())}")
        return self._advance()

    def _expect_punct(self, char: str) -> Token:
        if not self._check_punct(char):
            raise self._error(f"Expected '{char}', got {self._describe(self._current())}")
        return self._advance()

    def _is_at_end(self) -> bool:
        """Check if we're at the end of tokens."""
        return self._current().type == TokenType.EOF

    def _error(self, message: str) -> SchemaSyntaxError:
        token = self._current()
        return SchemaSyntaxError(message, token.line, token.column)

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return "end of input"
        return repr(token.value)


def parse(schema_text: str) -> SchemaFile:
    """Parse schema text into a parse tree."""
    return SchemaParser.parse(schema_text)
