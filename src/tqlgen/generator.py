"""Single-shot generation pipeline.

parse -> (accumulate inheritance) -> build view model -> render
"""

from enum import Enum

from loguru import logger

from tqlgen.codegen.dto import build_dto_data
from tqlgen.codegen.models import build_model_data
from tqlgen.codegen.registry import build_constants_data, build_registry_data
from tqlgen.codegen.render import TemplateRenderer
from tqlgen.config import (
    ConstantsConfig,
    DTOConfig,
    GeneratorConfig,
    ModelConfig,
    RegistryConfig,
)
from tqlgen.schema.converter import parse_schema
from tqlgen.schema.inheritance import accumulate_inheritance
from tqlgen.schema.model import ParsedSchema


class Target(str, Enum):
    """Kinds of generated module."""

    MODELS = "models"
    DTO = "dto"
    REGISTRY = "registry"
    CONSTANTS = "constants"


CONFIG_TYPES: dict[Target, type[GeneratorConfig]] = {
    Target.MODELS: ModelConfig,
    Target.DTO: DTOConfig,
    Target.REGISTRY: RegistryConfig,
    Target.CONSTANTS: ConstantsConfig,
}


def prepare_schema(schema_text: str, inherit: bool = True) -> ParsedSchema:
    """Parse schema text and, if requested, merge inherited declarations."""
    schema = parse_schema(schema_text)
    if inherit:
        accumulate_inheritance(schema)
    return schema


def generate(
    schema_text: str,
    target: Target,
    config: GeneratorConfig | None = None,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Compile schema text into one generated Python module.

    Args:
        schema_text: TypeQL schema source
        target: Kind of module to generate
        config: Config matching the target; defaults are used when omitted
        renderer: Renderer to reuse; a fresh one is built when omitted

    Raises:
        SchemaSyntaxError: If the schema cannot be parsed
        CyclicInheritanceError: If inheritance is on and parents form a cycle
    """
    config = config or CONFIG_TYPES[target]()
    if not isinstance(config, CONFIG_TYPES[target]):
        raise TypeError(f"{target.value} generation needs a {CONFIG_TYPES[target].__name__}")

    schema = prepare_schema(schema_text, inherit=config.inherit)
    renderer = renderer or TemplateRenderer()
    logger.info(f"Generating {target.value} module '{config.module_name}'")

    match target:
        case Target.MODELS:
            return renderer.render_models(build_model_data(schema, config))
        case Target.DTO:
            return renderer.render_dto(build_dto_data(schema, config))
        case Target.REGISTRY:
            if config.schema_text is None:
                config = config.model_copy(update={"schema_text": schema_text})
            return renderer.render_registry(build_registry_data(schema, config))
        case Target.CONSTANTS:
            return renderer.render_constants(build_constants_data(schema, config))
