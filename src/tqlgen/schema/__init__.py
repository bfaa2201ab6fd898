"""Schema front end for tqlgen.

Turns TypeQL schema text into the domain model read by the code generators:
tokenizer, parser, converter, inheritance accumulation and comment annotations.
"""

from tqlgen.schema.annotations import extract_annotations
from tqlgen.schema.converter import convert_schema, parse_schema, parse_schema_file
from tqlgen.schema.inheritance import accumulate_inheritance
from tqlgen.schema.lexer import SchemaLexer, Token, TokenType, tokenize
from tqlgen.schema.model import (
    AttributeSpec,
    EntitySpec,
    FunctionSpec,
    OwnsSpec,
    ParameterSpec,
    ParsedSchema,
    PlaysSpec,
    RelatesSpec,
    RelationSpec,
    StructFieldSpec,
    StructSpec,
)
from tqlgen.schema.parser import SchemaParser
from tqlgen.schema.signature import extract_signature

__all__ = [
    # Lexer / parser
    "SchemaLexer",
    "Token",
    "TokenType",
    "tokenize",
    "SchemaParser",
    "extract_signature",
    # Model
    "AttributeSpec",
    "EntitySpec",
    "FunctionSpec",
    "OwnsSpec",
    "ParameterSpec",
    "ParsedSchema",
    "PlaysSpec",
    "RelatesSpec",
    "RelationSpec",
    "StructFieldSpec",
    "StructSpec",
    # Conversion
    "convert_schema",
    "parse_schema",
    "parse_schema_file",
    "accumulate_inheritance",
    "extract_annotations",
]
