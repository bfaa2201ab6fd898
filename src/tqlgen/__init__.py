"""tqlgen - generate Python models, DTOs and registries from TypeQL schemas."""

__version__ = "0.3.0"
