"""CLI commands for tqlgen."""

from . import generate, inspect

__all__ = [
    "generate",
    "inspect",
]
