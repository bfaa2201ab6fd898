"""View models for the schema registry and leaf constants generators.

The registry exposes the compiled schema at runtime: type name constants,
ownership and role maps, enum values, function signatures and optional JSON
schema fragments. The leaf constants module is the dependency-free subset
(type, relation and enum constants plus attribute names).
"""

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from tqlgen.codegen.naming import Namer, constant_name, dedupe
from tqlgen.codegen.resolve import card_min, is_required, json_schema_type, role_players
from tqlgen.config import ConstantsConfig, RegistryConfig
from tqlgen.file_utils import schema_fingerprint
from tqlgen.schema.annotations import extract_annotations
from tqlgen.schema.model import AttributeSpec, OwnsSpec, ParsedSchema

# Classes and imports defined by the registry module itself
RESERVED_CLASS_NAMES = frozenset(
    {"AttributeType", "EntityType", "RelationType", "RoleInfo", "FunctionSignature", "StrEnum", "Any"}
)


@dataclass
class ConstView:
    name: str
    value: str


@dataclass
class EnumClassView:
    attribute: str
    class_name: str  # Used when constants are typed
    members: list[ConstView] = field(default_factory=list)


@dataclass
class RoleView:
    role: str
    players: list[str]
    min_card: int


@dataclass
class FunctionView:
    name: str
    parameters: list[tuple[str, str]]
    return_type: str | None


@dataclass
class RegistryData:
    module_name: str
    schema_version: str | None = None
    schema_hash: str | None = None
    typed_constants: bool = False
    entity_constants: list[ConstView] = field(default_factory=list)
    relation_constants: list[ConstView] = field(default_factory=list)
    attribute_constants: list[ConstView] = field(default_factory=list)
    enums: list[EnumClassView] = field(default_factory=list)
    entity_parents: dict[str, str] = field(default_factory=dict)
    entity_keys: dict[str, list[str]] = field(default_factory=dict)
    entity_abstract: list[str] = field(default_factory=list)
    relation_abstract: list[str] = field(default_factory=list)
    entity_attributes: dict[str, list[str]] = field(default_factory=dict)
    attribute_value_types: dict[str, str] = field(default_factory=dict)
    attribute_enum_values: dict[str, list[str]] = field(default_factory=dict)
    relation_schema: dict[str, list[RoleView]] = field(default_factory=dict)
    relation_parents: dict[str, str] = field(default_factory=dict)
    relation_attributes: dict[str, list[str]] = field(default_factory=dict)
    all_entity_types: list[str] = field(default_factory=list)
    all_relation_types: list[str] = field(default_factory=list)
    all_attribute_types: list[str] = field(default_factory=list)
    functions: list[FunctionView] = field(default_factory=list)
    entity_annotations: dict[str, dict[str, str]] = field(default_factory=dict)
    attribute_annotations: dict[str, dict[str, str]] = field(default_factory=dict)
    relation_annotations: dict[str, dict[str, str]] = field(default_factory=dict)
    json_schema: bool = False
    entity_json_schema: dict[str, dict[str, Any]] = field(default_factory=dict)
    relation_json_schema: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass
class ConstantsData:
    module_name: str
    entity_constants: list[ConstView] = field(default_factory=list)
    relation_constants: list[ConstView] = field(default_factory=list)
    enums: list[EnumClassView] = field(default_factory=list)
    all_attribute_types: list[str] = field(default_factory=list)


def type_constants(names: list[str], prefix: str, namer: Namer, typed: bool) -> list[ConstView]:
    """TYPE_PERSON = "person", or PERSON when the constants are StrEnum members."""
    if typed:
        const_names = dedupe([constant_name(name) for name in names])
    else:
        const_names = dedupe([namer.constant_name(prefix, name) for name in names])
    return [ConstView(const, name) for const, name in zip(const_names, names)]


def enum_class(attribute: AttributeSpec, namer: Namer, typed: bool) -> EnumClassView:
    if typed:
        names = dedupe([constant_name(value) for value in attribute.values])
    else:
        names = dedupe([namer.constant_name(attribute.name, value) for value in attribute.values])
    class_name = namer.type_name(attribute.name)
    if class_name in RESERVED_CLASS_NAMES:
        class_name += "Values"
    return EnumClassView(
        attribute=attribute.name,
        class_name=class_name,
        members=[ConstView(name, value) for name, value in zip(names, attribute.values)],
    )


def property_schema(attribute: AttributeSpec | None) -> dict[str, Any]:
    """JSON schema property for an attribute, with its value constraints."""
    if attribute is None:
        return {"type": "string"}

    prop: dict[str, Any] = json_schema_type(attribute.value_type)
    if attribute.values:
        prop["enum"] = list(attribute.values)
    if attribute.regex:
        prop["pattern"] = attribute.regex
    if prop["type"] in ("integer", "number"):
        low, high = attribute.range_bounds
        for key, bound in (("minimum", low), ("maximum", high)):
            number = _number(bound)
            if number is not None:
                prop[key] = number
    return prop


def _number(text: str | None) -> int | float | None:
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def object_schema(schema: ParsedSchema, owns: list[OwnsSpec]) -> dict[str, Any]:
    """JSON schema object for a type's ownerships; required follows the field rules."""
    ordered = sorted(owns, key=lambda o: o.attribute)
    fragment: dict[str, Any] = {
        "type": "object",
        "properties": {o.attribute: property_schema(schema.attribute(o.attribute)) for o in ordered},
    }
    required = [o.attribute for o in ordered if is_required(o)]
    if required:
        fragment["required"] = required
    return fragment


def build_registry_data(schema: ParsedSchema, cfg: RegistryConfig | None = None) -> RegistryData:
    """Build the registry view from a (normally accumulated) schema."""
    cfg = cfg or RegistryConfig()
    namer = Namer(cfg.use_acronyms, cfg.acronyms)
    data = RegistryData(
        module_name=cfg.module_name,
        schema_version=cfg.schema_version,
        typed_constants=cfg.typed_constants,
        json_schema=cfg.json_schema,
    )

    if cfg.schema_text is not None:
        if cfg.fingerprint:
            data.schema_hash = schema_fingerprint(cfg.schema_text)
            logger.debug(f"Schema fingerprint: {data.schema_hash}")
        if cfg.annotations:
            _split_annotations(data, schema, extract_annotations(cfg.schema_text))

    # --- Attributes ---
    attributes = sorted(schema.attributes, key=lambda a: a.name)
    data.all_attribute_types = [a.name for a in attributes]
    data.attribute_constants = type_constants(
        data.all_attribute_types, cfg.attr_prefix, namer, cfg.typed_constants
    )
    for attribute in attributes:
        data.attribute_value_types[attribute.name] = attribute.value_type
        if attribute.values:
            data.attribute_enum_values[attribute.name] = list(attribute.values)
            if cfg.enums:
                data.enums.append(enum_class(attribute, namer, cfg.typed_constants))
    for enum, class_name in zip(data.enums, dedupe([e.class_name for e in data.enums])):
        enum.class_name = class_name

    # --- Entities ---
    entities = sorted(schema.entities, key=lambda e: e.name)
    concrete_entities = [e for e in entities if not (cfg.skip_abstract and e.abstract)]
    data.all_entity_types = [e.name for e in entities]
    data.entity_constants = type_constants(
        [e.name for e in concrete_entities], cfg.type_prefix, namer, cfg.typed_constants
    )
    data.entity_parents = {e.name: e.parent for e in entities if e.parent}
    data.entity_abstract = [e.name for e in entities if e.abstract]
    for entity in concrete_entities:
        keys = sorted(o.attribute for o in entity.owns if o.key)
        if keys:
            data.entity_keys[entity.name] = keys
        data.entity_attributes[entity.name] = sorted(o.attribute for o in entity.owns)
        if cfg.json_schema:
            data.entity_json_schema[entity.name] = object_schema(schema, entity.owns)

    # --- Relations ---
    relations = sorted(schema.relations, key=lambda r: r.name)
    concrete_relations = [r for r in relations if not (cfg.skip_abstract and r.abstract)]
    data.all_relation_types = [r.name for r in relations]
    data.relation_constants = type_constants(
        [r.name for r in concrete_relations], cfg.rel_prefix, namer, cfg.typed_constants
    )
    data.relation_parents = {r.name: r.parent for r in relations if r.parent}
    data.relation_abstract = [r.name for r in relations if r.abstract]
    for relation in relations:
        if relation.relates:
            data.relation_schema[relation.name] = [
                RoleView(
                    role=relates.role,
                    players=role_players(schema, relation.name, relates.role),
                    min_card=card_min(relates.card),
                )
                for relates in sorted(relation.relates, key=lambda r: r.role)
            ]
        if relation.owns:
            data.relation_attributes[relation.name] = sorted(o.attribute for o in relation.owns)
    if cfg.json_schema:
        for relation in concrete_relations:
            data.relation_json_schema[relation.name] = object_schema(schema, relation.owns)

    # --- Functions ---
    for function in sorted(schema.functions, key=lambda f: f.name):
        data.functions.append(
            FunctionView(
                name=function.name,
                parameters=[(p.name, p.type_name) for p in function.parameters],
                return_type=function.return_type,
            )
        )

    logger.debug(
        f"Registry data: {len(data.entity_constants)} entity constants, "
        f"{len(data.relation_constants)} relation constants, {len(data.enums)} enums"
    )
    return data


def _split_annotations(
    data: RegistryData, schema: ParsedSchema, annotations: dict[str, dict[str, str]]
) -> None:
    """Sort comment annotations into entity, attribute and relation maps."""
    for name in sorted(annotations):
        values = dict(sorted(annotations[name].items()))
        if schema.entity(name) is not None:
            data.entity_annotations[name] = values
        elif schema.attribute(name) is not None:
            data.attribute_annotations[name] = values
        elif schema.relation(name) is not None:
            data.relation_annotations[name] = values


def build_constants_data(
    schema: ParsedSchema, cfg: ConstantsConfig | None = None
) -> ConstantsData:
    """Build the leaf constants view: type, relation and enum constants only."""
    cfg = cfg or ConstantsConfig()
    registry = build_registry_data(
        schema,
        RegistryConfig(
            module_name=cfg.module_name,
            use_acronyms=cfg.use_acronyms,
            acronyms=cfg.acronyms,
            skip_abstract=cfg.skip_abstract,
            enums=cfg.enums,
            type_prefix=cfg.type_prefix,
            rel_prefix=cfg.rel_prefix,
        ),
    )
    return ConstantsData(
        module_name=cfg.module_name,
        entity_constants=registry.entity_constants,
        relation_constants=registry.relation_constants,
        enums=registry.enums,
        all_attribute_types=registry.all_attribute_types,
    )
