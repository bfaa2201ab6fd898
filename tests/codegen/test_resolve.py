"""Tests for shared field resolution."""

import pytest

from tqlgen.codegen.resolve import (
    card_min,
    datetime_imports,
    filter_most_specific,
    is_required,
    json_schema_type,
    python_type,
    role_players,
)
from tqlgen.generator import prepare_schema
from tqlgen.schema.model import OwnsSpec


class TestValueTypes:
    @pytest.mark.parametrize(
        "value_type, expected",
        [
            ("string", "str"),
            ("integer", "int"),
            ("long", "int"),
            ("double", "float"),
            ("decimal", "float"),
            ("boolean", "bool"),
            ("datetime", "datetime"),
            ("datetime-tz", "datetime"),
            ("date", "date"),
            ("duration", "str"),
            (None, "str"),
        ],
    )
    def test_python_type(self, value_type, expected):
        assert python_type(value_type) == expected

    def test_json_schema_type(self):
        assert json_schema_type("double") == {"type": "number"}
        assert json_schema_type("datetime-tz") == {"type": "string", "format": "date-time"}
        assert json_schema_type("date") == {"type": "string", "format": "date"}
        assert json_schema_type("unknown") == {"type": "string"}

    def test_json_schema_type_returns_copy(self):
        json_schema_type("string")["enum"] = ["x"]
        assert json_schema_type("string") == {"type": "string"}

    def test_datetime_imports(self):
        assert datetime_imports(["string", "datetime-tz", "date", "datetime"]) == ["date", "datetime"]
        assert datetime_imports(["string"]) == []


class TestRequired:
    @pytest.mark.parametrize(
        "card, expected",
        [(None, 0), ("0..1", 0), ("1", 1), ("1..", 1), ("2..5", 2), ("junk", 0)],
    )
    def test_card_min(self, card, expected):
        assert card_min(card) == expected

    def test_key_and_unique_are_required(self):
        assert is_required(OwnsSpec("a", key=True))
        assert is_required(OwnsSpec("a", unique=True, card="0..1"))

    def test_card_decides_otherwise(self):
        assert not is_required(OwnsSpec("a"))
        assert not is_required(OwnsSpec("a", card="0..1"))
        assert is_required(OwnsSpec("a", card="1"))
        assert is_required(OwnsSpec("a", card="1.."))


class TestRolePlayers:
    def test_sample_roles(self, sample_schema):
        assert role_players(sample_schema, "employment", "employee") == ["person"]
        assert role_players(sample_schema, "assignment", "task") == ["task"]

    def test_unresolved_role_is_empty(self, sample_schema):
        assert role_players(sample_schema, "assignment", "assignee") == []

    def test_most_specific_player_only(self):
        schema = prepare_schema(
            """
            entity party, plays contract:signer;
            entity person sub party, plays contract:signer;
            entity company sub party;
            entity robot, plays contract:signer;
            """
        )
        assert role_players(schema, "contract", "signer") == ["person", "robot"]

    def test_relations_can_play_roles(self):
        schema = prepare_schema(
            """
            relation approval, relates approver, plays audit:subject;
            entity document, plays audit:subject;
            relation audit, relates subject;
            """
        )
        assert role_players(schema, "audit", "subject") == ["approval", "document"]

    def test_filter_most_specific(self):
        schema = prepare_schema("entity a; entity b sub a; entity c sub b; entity d;")
        assert filter_most_specific(["a", "c", "d"], schema) == ["c", "d"]
        assert filter_most_specific(["a"], schema) == ["a"]
