from typing import Optional

import typer

from tqlgen.config import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        import tqlgen

        typer.echo(f"tqlgen version: {tqlgen.__version__}")
        raise typer.Exit()


app = typer.Typer(name="tqlgen", no_args_is_help=True)


@app.callback()
def app_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log debug output to stderr.",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """tqlgen - Python code generation from TypeQL schemas."""
    setup_logging("DEBUG" if verbose else None)
