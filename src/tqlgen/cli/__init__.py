"""Command-line interface for tqlgen."""
