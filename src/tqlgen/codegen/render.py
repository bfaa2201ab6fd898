"""Rendering of view models into Python source with Jinja2."""

import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from loguru import logger

from tqlgen.codegen.dto import DTOData
from tqlgen.codegen.models import ModelData
from tqlgen.codegen.registry import ConstantsData, RegistryData

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def py_str(value: str) -> str:
    """Double-quoted Python string literal."""
    return json.dumps(value, ensure_ascii=False)


def py_literal(value: Any) -> str:
    """Python literal for strings, numbers, bools, None, lists, tuples and dicts.

    Dict keys keep their insertion order; builders sort them beforehand.
    """
    if value is None or isinstance(value, bool):
        return repr(value)
    if isinstance(value, str):
        return py_str(value)
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, tuple):
        items = [py_literal(v) for v in value]
        if len(items) == 1:
            return f"({items[0]},)"
        return "(" + ", ".join(items) + ")"
    if isinstance(value, list):
        return "[" + ", ".join(py_literal(v) for v in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{py_literal(k)}: {py_literal(v)}" for k, v in value.items()) + "}"
    raise TypeError(f"Cannot render {type(value).__name__} as a Python literal")


class TemplateRenderer:
    """Owns a Jinja2 environment over the package templates.

    Build one and reuse it for several renders, or let the module level
    render_* helpers create one per call.
    """

    def __init__(self, templates_dir: Path | None = None):
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(enabled_extensions=()),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["py_str"] = py_str
        self.env.filters["py_literal"] = py_literal
        self.env.filters["tuple"] = tuple

    def render(self, template_name: str, **context: Any) -> str:
        template = self.env.get_template(template_name)
        output = template.render(**context)
        logger.debug(f"Rendered {template_name}: {len(output)} characters")
        return output

    def render_models(self, data: ModelData) -> str:
        return self.render("models.py.j2", data=data)

    def render_dto(self, data: DTOData) -> str:
        return self.render("dto.py.j2", data=data)

    def render_registry(self, data: RegistryData) -> str:
        return self.render("registry.py.j2", data=data)

    def render_constants(self, data: ConstantsData) -> str:
        return self.render("constants.py.j2", data=data)


def render_models(data: ModelData, renderer: TemplateRenderer | None = None) -> str:
    return (renderer or TemplateRenderer()).render_models(data)


def render_dto(data: DTOData, renderer: TemplateRenderer | None = None) -> str:
    return (renderer or TemplateRenderer()).render_dto(data)


def render_registry(data: RegistryData, renderer: TemplateRenderer | None = None) -> str:
    return (renderer or TemplateRenderer()).render_registry(data)


def render_constants(data: ConstantsData, renderer: TemplateRenderer | None = None) -> str:
    return (renderer or TemplateRenderer()).render_constants(data)
