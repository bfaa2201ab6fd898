"""Conversion from the parse tree to the domain model."""

from pathlib import Path

from loguru import logger

from tqlgen.schema.ast import (
    Annotation,
    AnnotationKind,
    AttributeDef,
    EntityDef,
    FunctionDef,
    OwnsClause,
    PlaysClause,
    RelatesClause,
    RelationDef,
    SchemaFile,
    StructDef,
)
from tqlgen.schema.model import (
    AttributeSpec,
    EntitySpec,
    FunctionSpec,
    OwnsSpec,
    ParsedSchema,
    PlaysSpec,
    RelatesSpec,
    RelationSpec,
    StructFieldSpec,
    StructSpec,
)
from tqlgen.schema.parser import SchemaParser
from tqlgen.schema.signature import extract_signature


def parse_schema(schema_text: str) -> ParsedSchema:
    """Parse TypeQL schema text into the domain model.

    Raises:
        SchemaSyntaxError: If the text cannot be tokenized or parsed
    """
    return convert_schema(SchemaParser.parse(schema_text))


def parse_schema_file(path: Path | str) -> ParsedSchema:
    """Read a UTF-8 schema file and parse it. OSError propagates unchanged."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_schema(text)


def convert_schema(tree: SchemaFile) -> ParsedSchema:
    """Walk the parse tree once, in declaration order, building the domain model."""
    schema = ParsedSchema()

    for definition in tree.definitions:
        match definition:
            case AttributeDef():
                schema.attributes.append(_convert_attribute(definition))
            case EntityDef():
                schema.entities.append(_convert_entity(definition))
            case RelationDef():
                schema.relations.append(_convert_relation(definition))
            case StructDef():
                schema.structs.append(_convert_struct(definition))
            case FunctionDef():
                schema.functions.append(_convert_function(definition))

    logger.debug(
        f"Converted schema: {len(schema.attributes)} attributes, "
        f"{len(schema.entities)} entities, {len(schema.relations)} relations, "
        f"{len(schema.structs)} structs, {len(schema.functions)} functions"
    )
    return schema


def unquote(literal: str) -> str:
    """Strip surrounding quotes and unescape \\" and \\\\.

    Other backslash sequences are kept as written so regex patterns survive.
    """
    if len(literal) >= 2 and literal[0] == '"' and literal[-1] == '"':
        literal = literal[1:-1]

    result = []
    i = 0
    while i < len(literal):
        char = literal[i]
        if char == "\\" and i + 1 < len(literal) and literal[i + 1] in ('"', "\\"):
            result.append(literal[i + 1])
            i += 2
            continue
        result.append(char)
        i += 1
    return "".join(result)


def _convert_attribute(definition: AttributeDef) -> AttributeSpec:
    spec = AttributeSpec(name=definition.name, value_type=definition.value_type)
    for annotation in definition.annotations:
        if annotation.kind == AnnotationKind.REGEX and annotation.expr is not None:
            spec.regex = unquote(annotation.expr)
        elif annotation.kind == AnnotationKind.VALUES:
            spec.values.extend(unquote(value) for value in annotation.values)
        elif annotation.kind == AnnotationKind.RANGE:
            spec.range_expr = annotation.expr
    return spec


def _convert_entity(definition: EntityDef) -> EntitySpec:
    spec = EntitySpec(
        name=definition.name, parent=definition.parent, abstract=definition.abstract
    )
    for clause in definition.clauses:
        match clause:
            case OwnsClause():
                spec.owns.append(_convert_owns(clause))
            case PlaysClause():
                spec.plays.append(PlaysSpec(relation=clause.relation, role=clause.role))
    return spec


def _convert_relation(definition: RelationDef) -> RelationSpec:
    spec = RelationSpec(
        name=definition.name, parent=definition.parent, abstract=definition.abstract
    )
    for clause in definition.clauses:
        match clause:
            case RelatesClause():
                spec.relates.append(
                    RelatesSpec(
                        role=clause.role,
                        as_parent=clause.as_parent,
                        card=_card(clause.annotations),
                    )
                )
            case OwnsClause():
                spec.owns.append(_convert_owns(clause))
            case PlaysClause():
                spec.plays.append(PlaysSpec(relation=clause.relation, role=clause.role))
    return spec


def _convert_owns(clause: OwnsClause) -> OwnsSpec:
    spec = OwnsSpec(attribute=clause.attribute, card=_card(clause.annotations))
    for annotation in clause.annotations:
        if annotation.kind == AnnotationKind.KEY:
            spec.key = True
        elif annotation.kind == AnnotationKind.UNIQUE:
            spec.unique = True
    return spec


def _card(annotations: list[Annotation]) -> str | None:
    """The first @card expression, if any."""
    for annotation in annotations:
        if annotation.kind == AnnotationKind.CARD:
            return annotation.expr
    return None


def _convert_struct(definition: StructDef) -> StructSpec:
    return StructSpec(
        name=definition.name,
        fields=[
            StructFieldSpec(name=f.name, value_type=f.value_type, optional=f.optional)
            for f in definition.fields
        ],
    )


def _convert_function(definition: FunctionDef) -> FunctionSpec:
    parameters, return_type = extract_signature(definition.body)
    return FunctionSpec(name=definition.name, parameters=parameters, return_type=return_type)
