"""
Concrete parse tree for TypeQL schema definitions.

Clause and definition alternatives are tagged unions: every node carries a
literal ``kind`` discriminant so consumers can dispatch without probing for
optional fields.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal


class AnnotationKind(Enum):
    """Annotation markers accepted after attributes, owns and relates clauses."""

    KEY = "key"
    UNIQUE = "unique"
    ABSTRACT = "abstract"
    CARD = "card"
    REGEX = "regex"
    VALUES = "values"
    RANGE = "range"


@dataclass
class Annotation:
    """A single annotation, e.g. ``@card(0..1)`` or ``@values("a", "b")``."""

    kind: AnnotationKind
    expr: str | None = None  # @card / @range expression, raw @regex literal
    values: list[str] = field(default_factory=list)  # raw @values literals
    line: int = 0
    column: int = 0


@dataclass
class OwnsClause:
    """owns attr-name [annotations]"""

    attribute: str
    annotations: list[Annotation] = field(default_factory=list)
    kind: Literal["owns"] = "owns"


@dataclass
class PlaysClause:
    """plays relation:role"""

    relation: str
    role: str
    kind: Literal["plays"] = "plays"


@dataclass
class RelatesClause:
    """relates role [as parent-role] [annotations]"""

    role: str
    as_parent: str | None = None
    annotations: list[Annotation] = field(default_factory=list)
    kind: Literal["relates"] = "relates"


type EntityClause = OwnsClause | PlaysClause
type RelationClause = RelatesClause | OwnsClause | PlaysClause


@dataclass
class AttributeDef:
    name: str
    value_type: str
    annotations: list[Annotation] = field(default_factory=list)
    kind: Literal["attribute"] = "attribute"


@dataclass
class EntityDef:
    name: str
    parent: str | None = None
    abstract: bool = False
    clauses: list[EntityClause] = field(default_factory=list)
    kind: Literal["entity"] = "entity"


@dataclass
class RelationDef:
    name: str
    parent: str | None = None
    abstract: bool = False
    clauses: list[RelationClause] = field(default_factory=list)
    kind: Literal["relation"] = "relation"


@dataclass
class StructFieldDef:
    name: str
    value_type: str
    optional: bool = False


@dataclass
class StructDef:
    name: str
    fields: list[StructFieldDef] = field(default_factory=list)
    kind: Literal["struct"] = "struct"


@dataclass
class FunctionDef:
    """A function whose body is kept as the flat list of token values."""

    name: str
    body: list[str] = field(default_factory=list)
    kind: Literal["function"] = "function"


type Definition = AttributeDef | EntityDef | RelationDef | StructDef | FunctionDef


@dataclass
class SchemaFile:
    """Complete parse tree of one schema source."""

    definitions: list[Definition] = field(default_factory=list)

    def __repr__(self) -> str:
        counts: dict[str, int] = {}
        for definition in self.definitions:
            counts[definition.kind] = counts.get(definition.kind, 0) + 1
        parts = [f"{kind}={count}" for kind, count in sorted(counts.items())]
        return f"SchemaFile({', '.join(parts)})"
