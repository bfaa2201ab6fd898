"""Domain model for parsed TypeQL schemas.

These are the records every code generator reads. They are built once by
``tqlgen.schema.converter``, optionally rewritten in place by
``tqlgen.schema.inheritance``, and treated as read-only afterwards.
"""

from dataclasses import dataclass, field


# --- Attributes ---


@dataclass
class AttributeSpec:
    """An attribute type with its value kind and value constraints."""

    name: str
    value_type: str  # string, integer, double, boolean, datetime, ...
    regex: str | None = None  # Unquoted @regex pattern
    values: list[str] = field(default_factory=list)  # @values entries, in order
    range_expr: str | None = None  # Raw @range expression, e.g. "1..5"

    @property
    def range_bounds(self) -> tuple[str | None, str | None]:
        """Split the range expression into (min, max); open ends are None."""
        if not self.range_expr:
            return None, None
        low, sep, high = self.range_expr.partition("..")
        if not sep:
            return low or None, low or None
        return low or None, high or None


# --- Ownership and roles ---


@dataclass
class OwnsSpec:
    attribute: str
    key: bool = False
    unique: bool = False
    card: str | None = None  # Raw @card expression, e.g. "0..1"


@dataclass
class PlaysSpec:
    relation: str
    role: str


@dataclass
class RelatesSpec:
    role: str
    as_parent: str | None = None  # Overridden parent role (relates x as y)
    card: str | None = None


# --- Types ---


@dataclass
class EntitySpec:
    name: str
    parent: str | None = None
    abstract: bool = False
    owns: list[OwnsSpec] = field(default_factory=list)
    plays: list[PlaysSpec] = field(default_factory=list)


@dataclass
class RelationSpec:
    name: str
    parent: str | None = None
    abstract: bool = False
    relates: list[RelatesSpec] = field(default_factory=list)
    owns: list[OwnsSpec] = field(default_factory=list)
    plays: list[PlaysSpec] = field(default_factory=list)


@dataclass
class StructFieldSpec:
    name: str
    value_type: str
    optional: bool = False


@dataclass
class StructSpec:
    name: str
    fields: list[StructFieldSpec] = field(default_factory=list)


@dataclass
class ParameterSpec:
    name: str  # Without the leading $
    type_name: str


@dataclass
class FunctionSpec:
    name: str
    parameters: list[ParameterSpec] = field(default_factory=list)
    return_type: str | None = None  # Space-joined, e.g. "{ string }"


# --- Schema ---


@dataclass
class ParsedSchema:
    """All declarations of one schema file, in declaration order."""

    attributes: list[AttributeSpec] = field(default_factory=list)
    entities: list[EntitySpec] = field(default_factory=list)
    relations: list[RelationSpec] = field(default_factory=list)
    structs: list[StructSpec] = field(default_factory=list)
    functions: list[FunctionSpec] = field(default_factory=list)

    def attribute(self, name: str) -> AttributeSpec | None:
        return next((a for a in self.attributes if a.name == name), None)

    def entity(self, name: str) -> EntitySpec | None:
        return next((e for e in self.entities if e.name == name), None)

    def relation(self, name: str) -> RelationSpec | None:
        return next((r for r in self.relations if r.name == name), None)

    def struct(self, name: str) -> StructSpec | None:
        return next((s for s in self.structs if s.name == name), None)

    def function(self, name: str) -> FunctionSpec | None:
        return next((f for f in self.functions if f.name == name), None)

    def parent_of(self, name: str) -> str | None:
        """Parent of an entity or relation type, None for roots and unknown names."""
        spec = self.entity(name) or self.relation(name)
        return spec.parent if spec else None

    def ancestors(self, name: str) -> list[str]:
        """Ancestors of an entity or relation type, nearest first.

        Stops at unknown parents and at the first name seen twice.
        """
        result: list[str] = []
        seen = {name}
        parent = self.parent_of(name)
        while parent and parent not in seen:
            result.append(parent)
            seen.add(parent)
            parent = self.parent_of(parent)
        return result
