"""Common test fixtures for tqlgen."""

import sys
import types
from pathlib import Path

import pytest
from loguru import logger

from tqlgen.generator import prepare_schema
from tqlgen.schema.model import ParsedSchema

SAMPLE_SCHEMA = """define

attribute name, value string;
attribute age, value integer;
attribute email, value string @regex("^[^@]+@[^@]+$");
attribute status value string @values("active", "inactive");
attribute priority, value integer @range(1..5);
attribute start_date, value datetime;

entity person,
    owns name @key,
    owns email @unique,
    owns age @card(0..1),
    plays employment:employee;

entity artifact @abstract,
    owns name @key,
    owns status @card(0..1);

entity task sub artifact,
    owns priority @card(0..1),
    plays assignment:task;

entity company,
    owns name @key,
    plays employment:employer;

relation employment,
    relates employee @card(1),
    relates employer @card(1),
    owns start_date @card(0..1);

relation assignment,
    relates task @card(1..),
    relates assignee @card(1);
"""


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks added during a test; they may point at captured streams."""
    yield
    logger.remove()


@pytest.fixture
def sample_schema_text() -> str:
    return SAMPLE_SCHEMA


@pytest.fixture
def sample_schema() -> ParsedSchema:
    """The sample schema, parsed and with inheritance accumulated."""
    return prepare_schema(SAMPLE_SCHEMA)


@pytest.fixture
def raw_sample_schema() -> ParsedSchema:
    """The sample schema as parsed, before inheritance accumulation."""
    return prepare_schema(SAMPLE_SCHEMA, inherit=False)


@pytest.fixture
def schema_file(tmp_path) -> Path:
    path = tmp_path / "schema.tql"
    path.write_text(SAMPLE_SCHEMA, encoding="utf-8")
    return path


@pytest.fixture
def load_module():
    """Execute generated source as a real module.

    The module is registered in sys.modules while the test runs so that
    dataclasses and pydantic can resolve its annotations.
    """
    loaded: list[str] = []

    def _load(source: str, name: str = "generated") -> types.ModuleType:
        module_name = f"tqlgen_generated_{name}_{len(loaded)}"
        module = types.ModuleType(module_name)
        sys.modules[module_name] = module
        loaded.append(module_name)
        exec(compile(source, f"<{module_name}>", "exec"), module.__dict__)
        return module

    yield _load

    for module_name in loaded:
        sys.modules.pop(module_name, None)
