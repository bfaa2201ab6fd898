"""View model for the dataclass model generator.

One dataclass per concrete entity and relation, one per struct, and module
level constants for every @values attribute.
"""

from dataclasses import dataclass, field

from loguru import logger

from tqlgen.codegen.naming import Namer, dedupe
from tqlgen.codegen.resolve import (
    attribute_value_type,
    datetime_imports,
    is_required,
    python_type,
    role_players,
)
from tqlgen.config import ModelConfig
from tqlgen.schema.model import AttributeSpec, OwnsSpec, ParsedSchema

# Names defined on the generated base classes or used in generated class bodies
RESERVED_FIELDS = ("iid", "dataclasses")


@dataclass
class EnumMember:
    name: str  # Constant name, e.g. STATUS_ACTIVE
    value: str


@dataclass
class EnumView:
    attribute: str
    members: list[EnumMember] = field(default_factory=list)


@dataclass
class FieldView:
    name: str  # Python field name
    attribute: str  # Schema attribute name
    annotation: str  # Full annotation, " | None" included when optional
    optional: bool
    tag: str  # typedb metadata, e.g. "name,key"


@dataclass
class RoleView:
    name: str
    role: str
    annotation: str
    players: list[str] = field(default_factory=list)


@dataclass
class TypeView:
    class_name: str
    type_name: str
    base: str  # TypeDBEntity or TypeDBRelation
    parent: str | None = None
    abstract: bool = False
    fields: list[FieldView] = field(default_factory=list)
    roles: list[RoleView] = field(default_factory=list)


@dataclass
class StructFieldView:
    name: str
    field_name: str  # Schema field name
    annotation: str
    optional: bool


@dataclass
class StructView:
    class_name: str
    type_name: str
    fields: list[StructFieldView] = field(default_factory=list)


@dataclass
class ModelData:
    module_name: str
    schema_version: str | None = None
    datetime_imports: list[str] = field(default_factory=list)
    needs_any: bool = False
    enums: list[EnumView] = field(default_factory=list)
    entities: list[TypeView] = field(default_factory=list)
    relations: list[TypeView] = field(default_factory=list)
    structs: list[StructView] = field(default_factory=list)


def build_enum_view(attribute: AttributeSpec, namer: Namer) -> EnumView:
    """Constants for an attribute's @values, in declaration order."""
    names = dedupe([namer.constant_name(attribute.name, value) for value in attribute.values])
    return EnumView(
        attribute=attribute.name,
        members=[EnumMember(name, value) for name, value in zip(names, attribute.values)],
    )


def owns_tag(owns: OwnsSpec) -> str:
    """name[,key][,unique][,card=EXPR]"""
    parts = [owns.attribute]
    if owns.key:
        parts.append("key")
    if owns.unique:
        parts.append("unique")
    if owns.card:
        parts.append(f"card={owns.card}")
    return ",".join(parts)


def build_model_data(schema: ParsedSchema, cfg: ModelConfig | None = None) -> ModelData:
    """Build the dataclass model view from a (normally accumulated) schema."""
    cfg = cfg or ModelConfig()
    namer = Namer(cfg.use_acronyms, cfg.acronyms)

    data = ModelData(module_name=cfg.module_name, schema_version=cfg.schema_version)
    value_types: list[str] = []

    if cfg.enums:
        for attribute in sorted(schema.attributes, key=lambda a: a.name):
            if attribute.values:
                data.enums.append(build_enum_view(attribute, namer))

    entities = sorted(
        (e for e in schema.entities if not (cfg.skip_abstract and e.abstract)),
        key=lambda e: e.name,
    )
    relations = sorted(
        (r for r in schema.relations if not (cfg.skip_abstract and r.abstract)),
        key=lambda r: r.name,
    )
    # Role annotations may only name classes this module defines
    class_names = {t.name: namer.type_name(t.name) for t in [*entities, *relations]}

    for entity in entities:
        view = TypeView(
            class_name=class_names[entity.name],
            type_name=entity.name,
            base="TypeDBEntity",
            parent=entity.parent,
            abstract=entity.abstract,
        )
        view.fields = _build_fields(schema, entity.owns, namer, value_types)
        data.entities.append(view)

    for relation in relations:
        view = TypeView(
            class_name=class_names[relation.name],
            type_name=relation.name,
            base="TypeDBRelation",
            parent=relation.parent,
            abstract=relation.abstract,
        )
        view.fields = _build_fields(schema, relation.owns, namer, value_types)

        taken = set(RESERVED_FIELDS) | {f.name for f in view.fields}
        for relates in sorted(relation.relates, key=lambda r: r.role):
            players = role_players(schema, relation.name, relates.role)
            known = [class_names[p] for p in players if p in class_names]
            annotation = " | ".join(known) if known else "Any"
            name = namer.field_name(relates.role)
            while name in taken:
                name += "_"
            taken.add(name)
            view.roles.append(
                RoleView(name=name, role=relates.role, annotation=annotation, players=players)
            )
            if not known:
                data.needs_any = True
        data.relations.append(view)

    for struct in sorted(schema.structs, key=lambda s: s.name):
        names = dedupe([namer.field_name(f.name) for f in struct.fields])
        view = StructView(class_name=namer.type_name(struct.name), type_name=struct.name)
        for name, struct_field in zip(names, struct.fields):
            annotation = python_type(struct_field.value_type)
            if struct_field.optional:
                annotation += " | None"
            value_types.append(struct_field.value_type)
            view.fields.append(
                StructFieldView(name, struct_field.name, annotation, struct_field.optional)
            )
        data.structs.append(view)

    data.datetime_imports = datetime_imports(value_types)
    logger.debug(
        f"Model data: {len(data.entities)} entities, {len(data.relations)} relations, "
        f"{len(data.structs)} structs, {len(data.enums)} enums"
    )
    return data


def _build_fields(
    schema: ParsedSchema, owns: list[OwnsSpec], namer: Namer, value_types: list[str]
) -> list[FieldView]:
    ordered = sorted(owns, key=lambda o: o.attribute)
    names = dedupe([*RESERVED_FIELDS, *(namer.field_name(o.attribute) for o in ordered)])
    fields = []
    for name, o in zip(names[len(RESERVED_FIELDS) :], ordered):
        value_type = attribute_value_type(schema, o.attribute)
        if value_type:
            value_types.append(value_type)
        optional = not is_required(o)
        annotation = python_type(value_type)
        if optional:
            annotation += " | None"
        fields.append(FieldView(name, o.attribute, annotation, optional, owns_tag(o)))
    return fields
