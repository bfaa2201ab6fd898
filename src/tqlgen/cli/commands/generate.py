"""Code generation commands: `tqlgen models`, `tqlgen dto`, `tqlgen registry`, `tqlgen constants`."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from tqlgen.cli.app import app
from tqlgen.cli.commands.command_utils import build_config, exit_on_error, write_output
from tqlgen.config import ConstantsConfig, DTOConfig, ModelConfig, RegistryConfig
from tqlgen.file_utils import read_schema_file
from tqlgen.generator import Target, generate

# --- Shared options ---

SchemaArg = Annotated[Path, typer.Argument(help="TypeQL schema file")]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Write to this file instead of stdout"),
]
ModuleOption = Annotated[
    Optional[str], typer.Option("--module", help="Module name used in the generated docstring")
]
AcronymsOption = Annotated[
    Optional[bool],
    typer.Option("--acronyms/--no-acronyms", help="Upper-case acronyms such as ID and URL"),
]
SkipAbstractOption = Annotated[
    Optional[bool],
    typer.Option("--skip-abstract/--no-skip-abstract", help="Leave abstract types out"),
]
InheritOption = Annotated[
    Optional[bool],
    typer.Option("--inherit/--no-inherit", help="Merge ancestor declarations into subtypes"),
]
EnumsOption = Annotated[
    Optional[bool],
    typer.Option("--enums/--no-enums", help="Generate constants from @values"),
]
SchemaVersionOption = Annotated[
    Optional[str], typer.Option("--schema-version", help="Version string to embed")
]
ConfigOption = Annotated[
    Optional[Path], typer.Option("--config", "-c", help="YAML generator config file")
]


def _run(schema: Path, target: Target, config, output: Optional[Path]) -> None:
    text = read_schema_file(schema)
    write_output(generate(text, target, config), output)


@app.command()
def models(
    schema: SchemaArg,
    output: OutputOption = None,
    module: ModuleOption = None,
    acronyms: AcronymsOption = None,
    skip_abstract: SkipAbstractOption = None,
    inherit: InheritOption = None,
    enums: EnumsOption = None,
    schema_version: SchemaVersionOption = None,
    config: ConfigOption = None,
):
    """Generate dataclass models from a TypeQL schema."""
    with exit_on_error():
        cfg = build_config(
            ModelConfig,
            config,
            module_name=module,
            use_acronyms=acronyms,
            skip_abstract=skip_abstract,
            inherit=inherit,
            enums=enums,
            schema_version=schema_version,
        )
        _run(schema, Target.MODELS, cfg, output)


@app.command()
def dto(
    schema: SchemaArg,
    output: OutputOption = None,
    module: ModuleOption = None,
    acronyms: AcronymsOption = None,
    skip_abstract: SkipAbstractOption = None,
    inherit: InheritOption = None,
    enums: EnumsOption = None,
    schema_version: SchemaVersionOption = None,
    id_field: Annotated[
        Optional[str], typer.Option("--id-field", help="Identifier field on Out DTOs")
    ] = None,
    strict_out: Annotated[
        Optional[bool],
        typer.Option("--strict-out/--no-strict-out", help="Keep required fields required on Out"),
    ] = None,
    config: ConfigOption = None,
):
    """Generate pydantic Out/Create/Patch DTOs from a TypeQL schema.

    Base classes, field overrides, composites and union names come from the
    YAML config file.
    """
    with exit_on_error():
        cfg = build_config(
            DTOConfig,
            config,
            module_name=module,
            use_acronyms=acronyms,
            skip_abstract=skip_abstract,
            inherit=inherit,
            enums=enums,
            schema_version=schema_version,
            id_field_name=id_field,
            strict_out=strict_out,
        )
        _run(schema, Target.DTO, cfg, output)


@app.command()
def registry(
    schema: SchemaArg,
    output: OutputOption = None,
    module: ModuleOption = None,
    acronyms: AcronymsOption = None,
    skip_abstract: SkipAbstractOption = None,
    inherit: InheritOption = None,
    enums: EnumsOption = None,
    schema_version: SchemaVersionOption = None,
    typed_constants: Annotated[
        Optional[bool],
        typer.Option("--typed-constants/--plain-constants", help="Use StrEnum classes for names"),
    ] = None,
    json_schema: Annotated[
        Optional[bool],
        typer.Option("--json-schema/--no-json-schema", help="Emit JSON schema fragments"),
    ] = None,
    fingerprint: Annotated[
        Optional[bool],
        typer.Option("--fingerprint/--no-fingerprint", help="Emit a hash of the schema source"),
    ] = None,
    config: ConfigOption = None,
):
    """Generate a runtime schema registry from a TypeQL schema."""
    with exit_on_error():
        cfg = build_config(
            RegistryConfig,
            config,
            module_name=module,
            use_acronyms=acronyms,
            skip_abstract=skip_abstract,
            inherit=inherit,
            enums=enums,
            schema_version=schema_version,
            typed_constants=typed_constants,
            json_schema=json_schema,
            fingerprint=fingerprint,
        )
        _run(schema, Target.REGISTRY, cfg, output)


@app.command()
def constants(
    schema: SchemaArg,
    output: OutputOption = None,
    module: ModuleOption = None,
    acronyms: AcronymsOption = None,
    skip_abstract: SkipAbstractOption = None,
    inherit: InheritOption = None,
    enums: EnumsOption = None,
    config: ConfigOption = None,
):
    """Generate a dependency-free module of type, relation and enum constants."""
    with exit_on_error():
        cfg = build_config(
            ConstantsConfig,
            config,
            module_name=module,
            use_acronyms=acronyms,
            skip_abstract=skip_abstract,
            inherit=inherit,
            enums=enums,
        )
        _run(schema, Target.CONSTANTS, cfg, output)
