"""
Custom exceptions for schema parsing and code generation.
"""


class TQLGenError(Exception):
    """Base exception for all tqlgen errors."""

    pass


class SchemaSyntaxError(TQLGenError):
    """Raised when schema text cannot be tokenized or parsed."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        location = ""
        if line is not None:
            location = f" at line {line}"
            if column is not None:
                location += f", column {column}"
        super().__init__(f"{message}{location}")


class CyclicInheritanceError(TQLGenError):
    """Raised when a chain of `sub` declarations loops back on itself."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__(f"Cyclic inheritance: {' -> '.join(chain)}")


class ConfigError(TQLGenError):
    """Raised when a generator config file cannot be loaded."""

    pass
