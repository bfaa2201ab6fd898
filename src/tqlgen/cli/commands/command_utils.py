"""utility functions for commands"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, TypeVar

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from tqlgen.config import GeneratorConfig, load_config
from tqlgen.errors import TQLGenError
from tqlgen.file_utils import write_file_atomic

# Generated code goes to stdout, so diagnostics use stderr
console = Console(stderr=True)

ConfigT = TypeVar("ConfigT", bound=GeneratorConfig)


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report tqlgen and I/O failures on stderr and exit with status 1."""
    try:
        yield
    except (TQLGenError, OSError) as e:
        logger.debug(f"Command failed: {e!r}")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def build_config(
    config_cls: type[ConfigT], config_path: Optional[Path], **overrides: Any
) -> ConfigT:
    """Load the YAML config if given, then apply CLI flags that were set.

    Flags left at None keep the file (or default) value.
    """
    config = load_config(config_path, config_cls) if config_path else config_cls()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config
    return config_cls.model_validate({**config.model_dump(), **updates})


def write_output(content: str, output: Optional[Path]) -> None:
    """Write generated code to a file atomically, or to stdout."""
    if output is None:
        typer.echo(content, nl=False)
        return
    write_file_atomic(output, content)
    console.print(f"[green]Wrote {escape(str(output))}[/green]")
