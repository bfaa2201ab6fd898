"""View model for the pydantic DTO generator.

Every concrete entity gets Out/Create/Patch models, every concrete relation
Out/Create models. Descendants of a configured base entity subclass shared
``<Base>Out/Create/Patch`` models instead of repeating the inherited fields.
"""

from dataclasses import dataclass, field

from loguru import logger

from tqlgen.codegen.naming import Namer, dedupe
from tqlgen.codegen.resolve import (
    attribute_value_type,
    datetime_imports,
    is_required,
    python_type,
)
from tqlgen.config import BaseStructConfig, CompositeEntityConfig, DTOConfig
from tqlgen.schema.model import EntitySpec, OwnsSpec, ParsedSchema, RelationSpec

BASE_MODEL = "DTOModel"


@dataclass
class DTOFieldView:
    name: str
    annotation: str
    value: str | None = None  # Right-hand side, None for a required field without alias


@dataclass
class BaseStructView:
    base_name: str
    out_fields: list[DTOFieldView] = field(default_factory=list)
    create_fields: list[DTOFieldView] = field(default_factory=list)
    patch_fields: list[DTOFieldView] = field(default_factory=list)


@dataclass
class EntityDTOView:
    class_name: str
    type_name: str
    out_base: str = BASE_MODEL
    create_base: str = BASE_MODEL
    patch_base: str = BASE_MODEL
    out_fields: list[DTOFieldView] = field(default_factory=list)
    create_fields: list[DTOFieldView] = field(default_factory=list)
    patch_fields: list[DTOFieldView] = field(default_factory=list)


@dataclass
class RelationDTOView:
    class_name: str
    type_name: str
    create_base: str = BASE_MODEL
    out_fields: list[DTOFieldView] = field(default_factory=list)
    create_fields: list[DTOFieldView] = field(default_factory=list)


@dataclass
class CompositeDTOView:
    class_name: str
    fields: list[DTOFieldView] = field(default_factory=list)


@dataclass
class UnionView:
    name: str
    members: list[str]
    discriminated: bool


@dataclass
class DTOData:
    module_name: str
    datetime_imports: list[str] = field(default_factory=list)
    extra_imports: list[str] = field(default_factory=list)  # "from x import Y" lines
    base_structs: list[BaseStructView] = field(default_factory=list)
    entities: list[EntityDTOView] = field(default_factory=list)
    relations: list[RelationDTOView] = field(default_factory=list)
    skip_relation_out: bool = False
    composites: list[CompositeDTOView] = field(default_factory=list)
    unions: list[UnionView] = field(default_factory=list)


def dto_field(name: str, json_name: str, annotation: str, optional: bool) -> DTOFieldView:
    """A DTO field; an alias is added when the Python name differs from the JSON name."""
    if optional:
        annotation = f"{annotation} | None"
    if name != json_name:
        default = "default=None, " if optional else ""
        return DTOFieldView(name, annotation, f'Field({default}alias="{json_name}")')
    return DTOFieldView(name, annotation, "None" if optional else None)


def literal_field(name: str, value: str) -> DTOFieldView:
    return DTOFieldView(name, f'Literal["{value}"]', f'"{value}"')


class _DTOBuilder:
    """Builds DTOData for one schema and config."""

    def __init__(self, schema: ParsedSchema, cfg: DTOConfig):
        self.schema = schema
        self.cfg = cfg
        self.namer = Namer(cfg.use_acronyms, cfg.acronyms)
        self.id_name = self.namer.field_name(cfg.id_field_name)
        self.value_types: list[str] = []
        self.overrides: dict[tuple[str, str, str], bool] = {}
        for override in cfg.entity_field_overrides:
            if override.required is not None:
                self.overrides[(override.entity, override.field, override.variant)] = (
                    override.required
                )
        self.base_structs = {bs.source_entity: bs for bs in cfg.base_structs}

    def build(self) -> DTOData:
        cfg = self.cfg
        data = DTOData(module_name=cfg.module_name, skip_relation_out=cfg.skip_relation_out)

        for base in cfg.base_structs:
            view = self._base_struct(base)
            if view is not None:
                data.base_structs.append(view)

        excluded_entities = set(cfg.exclude_entities)
        for entity in sorted(self.schema.entities, key=lambda e: e.name):
            if entity.abstract or entity.name in excluded_entities:
                continue
            data.entities.append(self._entity(entity))

        excluded_relations = set(cfg.exclude_relations)
        for relation in sorted(self.schema.relations, key=lambda r: r.name):
            if relation.abstract or relation.name in excluded_relations:
                continue
            data.relations.append(self._relation(relation))

        for composite in cfg.composite_entities:
            data.composites.append(self._composite(composite))

        if cfg.relation_create_embed and "." in cfg.relation_create_embed:
            module, _, name = cfg.relation_create_embed.rpartition(".")
            data.extra_imports.append(f"from {module} import {name}")

        data.unions = self._unions(data)
        data.datetime_imports = datetime_imports(self.value_types)

        logger.debug(
            f"DTO data: {len(data.entities)} entities, {len(data.relations)} relations, "
            f"{len(data.base_structs)} base structs, {len(data.composites)} composites"
        )
        return data

    # --- Fields ---

    def _attribute_field(self, name: str, owns: OwnsSpec, optional: bool) -> DTOFieldView:
        value_type = attribute_value_type(self.schema, owns.attribute)
        if value_type:
            self.value_types.append(value_type)
        return dto_field(name, owns.attribute, python_type(value_type), optional)

    def _attribute_fields(
        self, owner: str, owns: list[OwnsSpec], skip: set[str], reserved: list[str]
    ) -> tuple[list[DTOFieldView], list[DTOFieldView], list[DTOFieldView]]:
        """Out, Create and Patch fields for the given ownerships, sorted by attribute."""
        ordered = sorted((o for o in owns if o.attribute not in skip), key=lambda o: o.attribute)
        names = dedupe([*reserved, *(self.namer.field_name(o.attribute) for o in ordered)])
        names = names[len(reserved) :]

        out_fields, create_fields, patch_fields = [], [], []
        for name, o in zip(names, ordered):
            required = is_required(o)
            out_required = self.overrides.get((owner, o.attribute, "out"), required)
            create_required = self.overrides.get((owner, o.attribute, "create"), required)
            patch_required = self.overrides.get((owner, o.attribute, "patch"), False)

            strict = self.cfg.strict_out and out_required
            out_fields.append(self._attribute_field(name, o, optional=not strict))
            create_fields.append(self._attribute_field(name, o, optional=not create_required))
            patch_fields.append(self._attribute_field(name, o, optional=not patch_required))
        return out_fields, create_fields, patch_fields

    def _id_field(self) -> DTOFieldView:
        return dto_field(self.id_name, self.cfg.id_field_name, "str", optional=False)

    # --- Base structs ---

    def _base_struct(self, base: BaseStructConfig) -> BaseStructView | None:
        entity = self.schema.entity(base.source_entity)
        if entity is None:
            logger.warning(f"Base struct {base.base_name}: unknown entity '{base.source_entity}'")
            return None

        inherited = set(base.inherited_attrs)
        owns = [o for o in entity.owns if o.attribute in inherited]
        out_fields, create_fields, patch_fields = self._attribute_fields(
            entity.name, owns, set(), [self.id_name, "type"]
        )

        view = BaseStructView(base.base_name, out_fields, create_fields, patch_fields)
        for name, annotation in sorted(base.extra_fields.items()):
            field_name = self.namer.field_name(name)
            view.out_fields.append(dto_field(field_name, name, annotation, optional=False))
            view.create_fields.append(dto_field(field_name, name, annotation, optional=False))
            view.patch_fields.append(dto_field(field_name, name, annotation, optional=True))
        return view

    def _find_base_struct(self, entity: EntitySpec) -> BaseStructConfig | None:
        """The base struct configured for the entity or its nearest ancestor."""
        for name in [entity.name, *self.schema.ancestors(entity.name)]:
            if name in self.base_structs:
                return self.base_structs[name]
        return None

    # --- Entities and relations ---

    def _entity(self, entity: EntitySpec) -> EntityDTOView:
        view = EntityDTOView(class_name=self.namer.type_name(entity.name), type_name=entity.name)

        skip: set[str] = set()
        base = self._find_base_struct(entity)
        if base is not None and base.source_entity != entity.name:
            view.out_base = f"{base.base_name}Out"
            view.create_base = f"{base.base_name}Create"
            view.patch_base = f"{base.base_name}Patch"
            skip = set(base.inherited_attrs)

        out_fields, create_fields, patch_fields = self._attribute_fields(
            entity.name, entity.owns, skip, [self.id_name, "type"]
        )
        view.out_fields = [self._id_field(), literal_field("type", entity.name), *out_fields]
        view.create_fields = [literal_field("type", entity.name), *create_fields]
        view.patch_fields = patch_fields
        return view

    def _relation(self, relation: RelationSpec) -> RelationDTOView:
        view = RelationDTOView(
            class_name=self.namer.type_name(relation.name), type_name=relation.name
        )
        embed = self.cfg.relation_create_embed
        if embed:
            view.create_base = embed.rpartition(".")[2]

        roles = sorted(relation.relates, key=lambda r: r.role)
        out_role_json = [f"{r.role}_{self.cfg.id_field_name.lower()}" for r in roles]
        create_role_json = [f"{r.role}_id" for r in roles]
        out_role_names = dedupe(
            [self.id_name, "type", *(self.namer.field_name(n) for n in out_role_json)]
        )[2:]
        create_role_names = dedupe(
            ["type", *(self.namer.field_name(n) for n in create_role_json)]
        )[1:]

        out_fields, create_fields, _ = self._attribute_fields(
            relation.name,
            relation.owns,
            set(),
            [self.id_name, "type", *out_role_names, *create_role_names],
        )

        view.out_fields = [
            self._id_field(),
            literal_field("type", relation.name),
            *(
                dto_field(name, json_name, "str", optional=True)
                for name, json_name in zip(out_role_names, out_role_json)
            ),
            *out_fields,
        ]
        view.create_fields = [
            literal_field("type", relation.name),
            *(
                dto_field(name, json_name, "str", optional=False)
                for name, json_name in zip(create_role_names, create_role_json)
            ),
            *create_fields,
        ]
        return view

    def _composite(self, composite: CompositeEntityConfig) -> CompositeDTOView:
        """Attributes of all listed entities, deduplicated and always optional."""
        class_name = composite.name
        owns: dict[str, OwnsSpec] = {}
        for entity_name in composite.entities:
            entity = self.schema.entity(entity_name)
            if entity is None:
                logger.warning(f"Composite {class_name}: unknown entity '{entity_name}'")
                continue
            for o in entity.owns:
                owns.setdefault(o.attribute, o)

        ordered = sorted(owns)
        names = dedupe([self.id_name, "type", *(self.namer.field_name(a) for a in ordered)])[2:]
        fields = [
            self._id_field(),
            literal_field("type", composite.type_name),
            *(self._attribute_field(name, owns[a], optional=True) for name, a in zip(names, ordered)),
        ]
        return CompositeDTOView(class_name=f"{class_name}Out", fields=fields)

    # --- Unions ---

    def _unions(self, data: DTOData) -> list[UnionView]:
        cfg = self.cfg
        candidates = [
            (cfg.entity_out_name, [f"{e.class_name}Out" for e in data.entities], True),
            (cfg.entity_create_name, [f"{e.class_name}Create" for e in data.entities], True),
            (cfg.entity_patch_name, [f"{e.class_name}Patch" for e in data.entities], False),
            (cfg.relation_create_name, [f"{r.class_name}Create" for r in data.relations], True),
        ]
        if not cfg.skip_relation_out:
            candidates.insert(
                3, (cfg.relation_out_name, [f"{r.class_name}Out" for r in data.relations], True)
            )

        unions = []
        for name, members, has_type in candidates:
            if members:
                unions.append(UnionView(name, members, discriminated=has_type and len(members) > 1))
        return unions


def build_dto_data(schema: ParsedSchema, cfg: DTOConfig | None = None) -> DTOData:
    """Build the DTO view from a (normally accumulated) schema."""
    return _DTOBuilder(schema, cfg or DTOConfig()).build()
