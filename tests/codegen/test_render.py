"""Tests for rendering generated modules."""

import dataclasses
from datetime import datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from tqlgen.codegen.dto import build_dto_data
from tqlgen.codegen.models import build_model_data
from tqlgen.codegen.registry import build_constants_data, build_registry_data
from tqlgen.codegen.render import TemplateRenderer, py_literal, py_str, render_models
from tqlgen.config import DTOConfig, ModelConfig, RegistryConfig
from tqlgen.generator import Target, generate, prepare_schema

HEADER = "# Code generated by tqlgen. DO NOT EDIT."


@pytest.fixture
def renderer():
    return TemplateRenderer()


class TestFilters:
    def test_py_str(self):
        assert py_str('say "hi"') == '"say \\"hi\\""'
        assert py_str("café") == '"café"'

    def test_py_literal(self):
        assert py_literal(("a",)) == '("a",)'
        assert py_literal(()) == "()"
        assert py_literal(["a", 1, None, True]) == '["a", 1, None, True]'
        assert py_literal({"k": ("x", "y")}) == '{"k": ("x", "y")}'

    def test_py_literal_rejects_objects(self):
        with pytest.raises(TypeError):
            py_literal(object())


class TestRenderModels:
    """Test the dataclass model module."""

    def test_header_and_compiles(self, sample_schema, renderer):
        source = renderer.render_models(build_model_data(sample_schema))
        assert source.startswith(HEADER)
        compile(source, "models.py", "exec")

    def test_executes(self, sample_schema, renderer, load_module):
        module = load_module(renderer.render_models(build_model_data(sample_schema)), "models")

        person = module.Person(name="Ada", email="ada@example.com")
        assert person.age is None
        assert person.iid is None
        assert module.Person.TYPE_NAME == "person"
        assert isinstance(person, module.TypeDBEntity)
        assert module.STATUS_ACTIVE == "active"
        assert not hasattr(module, "Artifact")

        tags = {f.name: f.metadata["typedb"] for f in dataclasses.fields(module.Person)}
        assert tags["name"] == "name,key"

        employment = module.Employment(employee=person, start_date=datetime(2024, 1, 1))
        assert employment.employer is None
        assert isinstance(employment, module.TypeDBRelation)

    def test_required_fields_enforced(self, sample_schema, renderer, load_module):
        module = load_module(renderer.render_models(build_model_data(sample_schema)), "models")
        with pytest.raises(TypeError):
            module.Person(name="Ada")

    def test_structs(self, renderer, load_module):
        schema = prepare_schema("struct point: x value double, label value string?;")
        module = load_module(renderer.render_models(build_model_data(schema)), "structs")
        point = module.Point(x=1.5)
        assert point.label is None

    def test_schema_version(self, sample_schema, renderer):
        source = renderer.render_models(
            build_model_data(sample_schema, ModelConfig(schema_version="3.0"))
        )
        assert 'SCHEMA_VERSION = "3.0"' in source

    def test_empty_schema(self, renderer, load_module):
        module = load_module(renderer.render_models(build_model_data(prepare_schema(""))), "empty")
        assert module.TypeDBEntity.TYPE_NAME == ""


class TestEndToEnd:
    """Whole-pipeline checks through generate()."""

    def test_key_and_optional_fields(self, load_module):
        schema = """
        attribute name, value string;
        attribute age, value integer;
        entity person, owns name @key, owns age @card(0..1);
        """
        source = generate(schema, Target.MODELS)
        assert "    age: int | None = dataclasses.field(default=None," in source
        assert "    name: str = dataclasses.field(metadata=" in source

        module = load_module(source, "e2e_fields")
        fields = {f.name: f for f in dataclasses.fields(module.Person)}
        assert fields["name"].default is dataclasses.MISSING
        assert fields["age"].default is None

    def test_attribute_named_field(self, load_module):
        schema = """
        attribute field, value string;
        attribute name, value string;
        attribute dataclasses, value string;
        entity form, owns field, owns name @key, owns dataclasses;
        """
        module = load_module(generate(schema, Target.MODELS), "field_names")
        form = module.Form(name="contact", field="email")
        assert form.field == "email"
        names = [f.name for f in dataclasses.fields(module.Form)]
        assert names == ["iid", "dataclasses_2", "field", "name"]

    def test_abstract_supertype_skipped(self):
        schema = """
        attribute name, value string;
        attribute priority, value integer;
        entity artifact @abstract, owns name @key;
        entity task sub artifact, owns priority @card(0..1);
        """
        source = generate(schema, Target.MODELS)
        assert "class Artifact(" not in source
        assert "class Task(TypeDBEntity):" in source
        assert "    name: str = dataclasses.field(" in source
        assert "    priority: int | None = dataclasses.field(" in source


class TestRenderDTO:
    def test_compiles_and_validates(self, sample_schema, renderer, load_module):
        source = renderer.render_dto(build_dto_data(sample_schema))
        assert source.startswith(HEADER)
        module = load_module(source, "dto")

        created = module.PersonCreate(name="Ada", email="ada@example.com")
        assert created.type == "person"
        with pytest.raises(ValidationError):
            module.PersonCreate(name="Ada")

        out = TypeAdapter(module.EntityOut).validate_python(
            {"id": "p1", "type": "company", "name": "Acme"}
        )
        assert isinstance(out, module.CompanyOut)

        patch = module.TaskPatch(priority=2)
        assert patch.model_dump(exclude_none=True) == {"priority": 2}

    def test_aliases_and_base_structs(self, renderer, load_module):
        schema = prepare_schema(
            """
            attribute display-id, value string;
            attribute title, value string;
            entity artifact @abstract, owns display-id @key, owns title;
            entity story sub artifact;
            """
        )
        cfg = DTOConfig(
            base_structs=[
                {
                    "source_entity": "artifact",
                    "base_name": "BaseArtifact",
                    "inherited_attrs": ["display-id", "title"],
                }
            ]
        )
        source = renderer.render_dto(build_dto_data(schema, cfg))
        assert "class StoryOut(BaseArtifactOut):" in source
        module = load_module(source, "dto_base")

        story = module.StoryCreate.model_validate({"display-id": "S-1"})
        assert story.display_id == "S-1"
        assert module.StoryCreate(display_id="S-2").model_dump(by_alias=True)["display-id"] == "S-2"

    def test_skip_relation_out(self, sample_schema, renderer):
        source = renderer.render_dto(build_dto_data(sample_schema, DTOConfig(skip_relation_out=True)))
        assert "class EmploymentOut" not in source
        assert "class EmploymentCreate(DTOModel):" in source
        assert "RelationOut =" not in source

    def test_composite(self, sample_schema, renderer, load_module):
        cfg = DTOConfig(
            composite_entities=[{"name": "Party", "entities": ["person", "company"], "type_name": "party"}]
        )
        module = load_module(renderer.render_dto(build_dto_data(sample_schema, cfg)), "dto_comp")
        party = module.PartyOut(id="x")
        assert party.type == "party"
        assert party.email is None
        with pytest.raises(ValidationError):
            module.PartyOut(id="x", type="person")

    def test_entity_without_fields_renders_pass(self, renderer, load_module):
        source = renderer.render_dto(build_dto_data(prepare_schema("entity marker;")))
        assert "class MarkerPatch(DTOModel):\n    \"\"\"Partial update DTO for marker.\"\"\"\n\n    pass\n" in source
        load_module(source, "dto_pass")


class TestRenderRegistry:
    def test_executes(self, sample_schema, sample_schema_text, renderer, load_module):
        cfg = RegistryConfig(schema_text=sample_schema_text, schema_version="1.0")
        source = renderer.render_registry(build_registry_data(sample_schema, cfg))
        module = load_module(source, "registry")

        assert module.TYPE_PERSON == "person"
        assert module.REL_EMPLOYMENT == "employment"
        assert module.ATTR_START_DATE == "start_date"
        assert module.SCHEMA_VERSION == "1.0"
        assert module.SCHEMA_HASH.startswith("sha256:")
        assert module.get_entity_keys("person") == ("name",)
        assert module.get_entity_keys("nobody") == ()
        assert module.is_abstract_entity("artifact")
        assert not module.is_abstract_relation("employment")
        assert module.get_entity_attributes("task") == ("name", "priority", "status")
        assert module.get_relation_attributes("employment") == ("start_date",)
        assert module.ENTITY_PARENTS == {"task": "artifact"}
        assert module.ALL_ENTITY_TYPES == ("artifact", "company", "person", "task")

        info = module.get_role_info("employment", "employee")
        assert info == module.RoleInfo("employee", ("person",), 1)
        assert module.get_role_info("employment", "nobody") is None
        assert module.get_role_info("assignment", "assignee").player_types == ()
        assert len(module.get_role_players("assignment")) == 2

    def test_typed_constants_and_json_schema(self, sample_schema, renderer, load_module):
        cfg = RegistryConfig(typed_constants=True, json_schema=True)
        module = load_module(
            renderer.render_registry(build_registry_data(sample_schema, cfg)), "registry_typed"
        )
        assert module.EntityType.PERSON == "person"
        assert module.RelationType.EMPLOYMENT == "employment"
        assert module.AttributeType.START_DATE == "start_date"
        assert module.Status.ACTIVE == "active"
        assert module.ENTITY_JSON_SCHEMA["person"]["required"] == ["email", "name"]
        assert not hasattr(module, "SCHEMA_HASH")

    def test_enum_named_like_registry_class(self, renderer, load_module):
        schema = prepare_schema(
            """
            attribute entity-type, value string @values("human", "bot");
            entity user, owns entity-type;
            """
        )
        cfg = RegistryConfig(typed_constants=True)
        module = load_module(
            renderer.render_registry(build_registry_data(schema, cfg)), "registry_reserved"
        )
        assert module.EntityType.USER == "user"
        assert module.EntityTypeValues.BOT == "bot"

    def test_functions_and_annotations(self, renderer, load_module):
        text = """
# @description Someone
entity person, owns name;
attribute name value string;
fun by_name($n: string) -> { person }: match $p isa person, has name $n;
"""
        cfg = RegistryConfig(schema_text=text)
        module = load_module(
            renderer.render_registry(build_registry_data(prepare_schema(text), cfg)), "registry_fun"
        )
        signature = module.FUNCTION_SIGNATURES["by_name"]
        assert signature.parameters == (("n", "string"),)
        assert signature.return_type == "{ person }"
        assert module.ENTITY_ANNOTATIONS == {"person": {"description": "Someone"}}

    def test_empty_schema(self, renderer, load_module):
        module = load_module(
            renderer.render_registry(build_registry_data(prepare_schema(""))), "registry_empty"
        )
        assert module.RELATION_SCHEMA == {}
        assert module.ALL_ENTITY_TYPES == ()


class TestRenderConstants:
    def test_executes(self, sample_schema, renderer, load_module):
        source = renderer.render_constants(build_constants_data(sample_schema))
        assert "\nimport " not in source and "\nfrom " not in source
        module = load_module(source, "constants")
        assert module.TYPE_TASK == "task"
        assert module.STATUS_INACTIVE == "inactive"
        assert "age" in module.ALL_ATTRIBUTE_TYPES


class TestDeterminism:
    @pytest.mark.parametrize("target", list(Target))
    def test_same_input_same_output(self, sample_schema_text, target):
        assert generate(sample_schema_text, target) == generate(sample_schema_text, target)

    def test_same_view_model_same_output(self, sample_schema):
        data = build_model_data(sample_schema)
        assert render_models(data) == render_models(data, TemplateRenderer())

    def test_declaration_order_does_not_matter(self):
        first = "attribute b value string; attribute a value string; entity y, owns b, owns a; entity x;"
        second = "entity x; attribute a value string; entity y, owns a, owns b; attribute b value string;"
        assert generate(first, Target.REGISTRY, RegistryConfig(fingerprint=False)) == generate(
            second, Target.REGISTRY, RegistryConfig(fingerprint=False)
        )
        assert generate(first, Target.MODELS) == generate(second, Target.MODELS)
