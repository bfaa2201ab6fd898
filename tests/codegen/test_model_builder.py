"""Tests for the dataclass model view builder."""

from tqlgen.codegen.models import build_model_data, owns_tag
from tqlgen.config import ModelConfig
from tqlgen.generator import prepare_schema
from tqlgen.schema.model import OwnsSpec


def by_name(views, type_name):
    return next(v for v in views if v.type_name == type_name)


class TestBuildModelData:
    """Test the view model built from the sample schema."""

    def test_concrete_types_sorted(self, sample_schema):
        data = build_model_data(sample_schema)
        assert [e.class_name for e in data.entities] == ["Company", "Person", "Task"]
        assert [r.class_name for r in data.relations] == ["Assignment", "Employment"]

    def test_abstract_included_when_not_skipped(self, sample_schema):
        data = build_model_data(sample_schema, ModelConfig(skip_abstract=False))
        artifact = by_name(data.entities, "artifact")
        assert artifact.abstract is True

    def test_fields_sorted_and_classified(self, sample_schema):
        person = by_name(build_model_data(sample_schema).entities, "person")
        assert [(f.name, f.annotation, f.optional) for f in person.fields] == [
            ("age", "int | None", True),
            ("email", "str", False),
            ("name", "str", False),
        ]
        assert [f.tag for f in person.fields] == ["age,card=0..1", "email,unique", "name,key"]

    def test_subtype_includes_parent_owns(self, sample_schema):
        task = by_name(build_model_data(sample_schema).entities, "task")
        assert [f.name for f in task.fields] == ["name", "priority", "status"]
        assert task.parent == "artifact"

    def test_roles(self, sample_schema):
        data = build_model_data(sample_schema)
        employment = by_name(data.relations, "employment")
        assert [(r.name, r.annotation) for r in employment.roles] == [
            ("employee", "Person"),
            ("employer", "Company"),
        ]
        assert [f.name for f in employment.fields] == ["start_date"]

    def test_unresolved_role_falls_back_to_any(self, sample_schema):
        data = build_model_data(sample_schema)
        assignment = by_name(data.relations, "assignment")
        assignee = next(r for r in assignment.roles if r.role == "assignee")
        assert assignee.annotation == "Any"
        assert assignee.players == []
        assert data.needs_any is True

    def test_enums(self, sample_schema):
        data = build_model_data(sample_schema)
        assert [(m.name, m.value) for m in data.enums[0].members] == [
            ("STATUS_ACTIVE", "active"),
            ("STATUS_INACTIVE", "inactive"),
        ]
        assert build_model_data(sample_schema, ModelConfig(enums=False)).enums == []

    def test_datetime_imports(self, sample_schema):
        assert build_model_data(sample_schema).datetime_imports == ["datetime"]

    def test_schema_version_and_module_name(self, sample_schema):
        data = build_model_data(sample_schema, ModelConfig(module_name="people", schema_version="2.1"))
        assert data.module_name == "people"
        assert data.schema_version == "2.1"


class TestModelNaming:
    def test_reserved_and_keyword_names(self):
        schema = prepare_schema(
            """
            attribute iid value string;
            attribute class value string;
            attribute start-date value date;
            entity thing, owns iid, owns class, owns start-date;
            """
        )
        thing = build_model_data(schema).entities[0]
        assert [(f.name, f.attribute) for f in thing.fields] == [
            ("class_", "class"),
            ("iid_2", "iid"),
            ("start_date", "start-date"),
        ]

    def test_role_name_clash_with_field(self):
        schema = prepare_schema(
            """
            attribute owner value string;
            entity person, plays ownership:owner;
            relation ownership, relates owner, owns owner;
            """
        )
        ownership = build_model_data(schema).relations[0]
        assert [f.name for f in ownership.fields] == ["owner"]
        assert [r.name for r in ownership.roles] == ["owner_"]

    def test_acronym_toggle(self):
        schema = prepare_schema("entity api-key;")
        assert build_model_data(schema).entities[0].class_name == "APIKey"
        assert (
            build_model_data(schema, ModelConfig(use_acronyms=False)).entities[0].class_name
            == "ApiKey"
        )

    def test_structs_keep_declaration_order(self):
        schema = prepare_schema("struct point: y value double, x value double?, at value datetime;")
        data = build_model_data(schema)
        point = data.structs[0]
        assert point.class_name == "Point"
        assert [(f.name, f.annotation) for f in point.fields] == [
            ("y", "float"),
            ("x", "float | None"),
            ("at", "datetime"),
        ]
        assert data.datetime_imports == ["datetime"]


class TestOwnsTag:
    def test_all_parts(self):
        assert owns_tag(OwnsSpec("code", key=True, unique=True, card="1")) == "code,key,unique,card=1"

    def test_plain(self):
        assert owns_tag(OwnsSpec("note")) == "note"
