"""Inspect command: summarize what tqlgen parsed from a schema."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from tqlgen.cli.app import app
from tqlgen.cli.commands.command_utils import exit_on_error
from tqlgen.file_utils import read_schema_file
from tqlgen.generator import prepare_schema
from tqlgen.schema.model import ParsedSchema


def _flags(abstract: bool, parent: str | None) -> str:
    parts = []
    if abstract:
        parts.append("abstract")
    if parent:
        parts.append(f"sub {parent}")
    return ", ".join(parts)


def build_table(schema: ParsedSchema) -> Table:
    """One row per declaration, grouped by kind in declaration order."""
    table = Table(title="TypeQL Schema")
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Flags", style="magenta")
    table.add_column("Details")

    for attr in schema.attributes:
        details = attr.value_type
        if attr.values:
            details += f" values={len(attr.values)}"
        table.add_row("attribute", attr.name, "", details)
    for entity in schema.entities:
        details = f"owns={len(entity.owns)} plays={len(entity.plays)}"
        table.add_row("entity", entity.name, _flags(entity.abstract, entity.parent), details)
    for relation in schema.relations:
        roles = ", ".join(r.role for r in relation.relates)
        table.add_row(
            "relation",
            relation.name,
            _flags(relation.abstract, relation.parent),
            f"roles=[{roles}] owns={len(relation.owns)}",
        )
    for struct in schema.structs:
        table.add_row("struct", struct.name, "", f"fields={len(struct.fields)}")
    for function in schema.functions:
        params = ", ".join(f"${p.name}: {p.type_name}" for p in function.parameters)
        returns = f" -> {function.return_type}" if function.return_type else ""
        table.add_row("function", function.name, "", f"({params}){returns}")
    return table


@app.command()
def inspect(
    schema: Annotated[Path, typer.Argument(help="TypeQL schema file")],
    inherit: Annotated[
        bool,
        typer.Option("--inherit/--no-inherit", help="Show owns after inheritance merging"),
    ] = False,
):
    """Print a summary table of the declarations in a TypeQL schema."""
    with exit_on_error():
        parsed = prepare_schema(read_schema_file(schema), inherit=inherit)
        Console().print(build_table(parsed))
