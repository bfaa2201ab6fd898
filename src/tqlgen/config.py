"""Configuration for tqlgen code generators."""

import os
import sys
from pathlib import Path
from typing import Literal, TypeVar

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tqlgen.codegen.naming import DEFAULT_ACRONYMS
from tqlgen.errors import ConfigError

LOG_LEVEL_ENV = "TQLGEN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


class GeneratorConfig(BaseModel):
    """Settings shared by every generator."""

    model_config = ConfigDict(extra="forbid")

    module_name: str = Field(default="models", description="Name used in the generated module docstring")
    use_acronyms: bool = Field(default=True, description="Upper-case known acronyms in class names")
    acronyms: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ACRONYMS),
        description="Lower-cased word -> rendering used for acronyms",
    )
    skip_abstract: bool = Field(default=True, description="Leave abstract types out of the output")
    inherit: bool = Field(default=True, description="Merge ancestor declarations into subtypes")
    enums: bool = Field(default=True, description="Generate constants from @values")
    schema_version: str | None = Field(default=None, description="Version string emitted as a constant")

    @field_validator("acronyms", mode="before")
    @classmethod
    def acronym_list(cls, value):
        """Accept a plain list of words as well as an explicit mapping."""
        if isinstance(value, list):
            return {str(word).lower(): str(word).upper() for word in value}
        return value


class ModelConfig(GeneratorConfig):
    """Settings for the dataclass model generator."""


class BaseStructConfig(BaseModel):
    """Shared base classes for all DTOs of an entity hierarchy."""

    model_config = ConfigDict(extra="forbid")

    source_entity: str = Field(..., description="Entity whose descendants use the base classes")
    base_name: str = Field(..., description="Class name prefix, e.g. BaseArtifact")
    inherited_attrs: list[str] = Field(default_factory=list, description="Attributes held by the base")
    extra_fields: dict[str, str] = Field(
        default_factory=dict, description="Additional field name -> Python annotation"
    )


class EntityFieldOverride(BaseModel):
    """Per entity, per DTO variant override of a field's required flag."""

    model_config = ConfigDict(extra="forbid")

    entity: str
    field: str
    variant: Literal["out", "create", "patch"]
    required: bool | None = None  # None keeps the schema default


class CompositeEntityConfig(BaseModel):
    """A flat Out DTO merging the attributes of several entity types."""

    model_config = ConfigDict(extra="forbid")

    name: str
    entities: list[str] = Field(default_factory=list)
    type_name: str


class DTOConfig(GeneratorConfig):
    """Settings for the pydantic DTO generator."""

    module_name: str = "dto"
    id_field_name: str = Field(default="id", description="Identifier field on Out DTOs")
    strict_out: bool = Field(default=False, description="Keep required fields required on Out DTOs")
    exclude_entities: list[str] = Field(default_factory=list)
    exclude_relations: list[str] = Field(default_factory=list)
    skip_relation_out: bool = False
    base_structs: list[BaseStructConfig] = Field(default_factory=list)
    entity_field_overrides: list[EntityFieldOverride] = Field(default_factory=list)
    composite_entities: list[CompositeEntityConfig] = Field(default_factory=list)
    entity_out_name: str = "EntityOut"
    entity_create_name: str = "EntityCreate"
    entity_patch_name: str = "EntityPatch"
    relation_out_name: str = "RelationOut"
    relation_create_name: str = "RelationCreate"
    relation_create_embed: str | None = Field(
        default=None, description="Class every relation Create DTO subclasses"
    )


class RegistryConfig(GeneratorConfig):
    """Settings for the schema registry generator."""

    module_name: str = "registry"
    type_prefix: str = "TYPE"
    rel_prefix: str = "REL"
    attr_prefix: str = "ATTR"
    typed_constants: bool = Field(default=False, description="Use StrEnum classes for names")
    json_schema: bool = Field(default=False, description="Emit JSON schema fragments")
    schema_text: str | None = Field(default=None, description="Raw schema source")
    fingerprint: bool = Field(default=True, description="Emit a hash of the schema source")
    annotations: bool = Field(default=True, description="Emit comment annotations")


class ConstantsConfig(GeneratorConfig):
    """Settings for the leaf constants generator."""

    module_name: str = "constants"
    type_prefix: str = "TYPE"
    rel_prefix: str = "REL"


ConfigT = TypeVar("ConfigT", bound=GeneratorConfig)


def load_config(path: Path | str, config_cls: type[ConfigT]) -> ConfigT:
    """Load a YAML config file into the given config model.

    An empty file gives the defaults.

    Raises:
        ConfigError: If the file cannot be read, is not YAML, or fails validation
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        config = config_cls.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    logger.debug(f"Loaded {config_cls.__name__} from {path}")
    return config


def setup_logging(level: str | None = None) -> None:
    """Send loguru records to stderr at the given level.

    The level defaults to $TQLGEN_LOG_LEVEL, then WARNING.
    """
    level = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {name}: {message}")
