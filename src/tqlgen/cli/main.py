"""Main CLI entry point for tqlgen."""  # pragma: no cover

from tqlgen.cli.app import app  # pragma: no cover

# Register commands
from tqlgen.cli.commands import (  # noqa: F401  # pragma: no cover
    generate,
    inspect,
)

if __name__ == "__main__":  # pragma: no cover
    # start the app
    app()
