"""Model code generator — renders Swagger/OpenAPI models as pydantic classes."""

import keyword
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from swagger_mcp_gen.errors import ConfigurationError, ModelNotFoundError
from swagger_mcp_gen.parser.base import Document
from swagger_mcp_gen.schema.nodes import ArrayNode, CompositionNode, ObjectNode, PrimitiveNode, RefNode, classify
from swagger_mcp_gen.schema.resolver import find_model, model_table, ref_name
from .render import render

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES: dict[str, str] = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "file": "bytes",
}


class RenderedModel(BaseModel):
    """One class declaration plus the classes generated for its inline objects."""

    name: str
    declaration: str
    nested: list["RenderedModel"] = []

    def declarations(self) -> list[str]:
        """Nested declarations first (depth-first), then this one."""
        result = []
        for child in self.nested:
            result.extend(child.declarations())
        result.append(self.declaration)
        return result


@dataclass
class _Field:
    line: str
    comment: str = ""
    aliased: bool = False


@dataclass
class _Imports:
    typing: set[str] = field(default_factory=set)
    pydantic: set[str] = field(default_factory=lambda: {"BaseModel"})


def format_class_name(name: str) -> str:
    """Turn a model name into a valid class name: 'pet.Owner' -> 'PetOwner'."""
    cleaned = re.sub(r"[^\w]", "", name)
    if not cleaned:
        return "Model"
    if cleaned[0].isdigit():
        cleaned = "Model" + cleaned
    return cleaned[0].upper() + cleaned[1:]


def _pascal(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[^A-Za-z0-9]+", name) if part)


def _attribute_name(prop_name: str) -> str:
    """A Python attribute for a property; the original name goes in the alias when they differ."""
    attr = re.sub(r"\W", "_", prop_name).lstrip("_")
    if not attr:
        attr = "field"
    if attr[0].isdigit():
        attr = "field_" + attr
    if keyword.iskeyword(attr):
        attr += "_"
    return attr


def _docstring(text: str) -> str:
    return text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


class _ModelRenderer:
    """Renders one model and its nested inline types, tracking used names and imports."""

    def __init__(self, doc: Document):
        self.doc = doc
        self.imports = _Imports()
        self.taken = {format_class_name(name) for name in model_table(doc)}

    def _nested_name(self, base: str) -> str:
        name = base
        counter = 2
        while name in self.taken:
            name = f"{base}{counter}"
            counter += 1
        self.taken.add(name)
        return name

    def annotation(self, schema: dict[str, Any] | None, hint: str, nested: list[RenderedModel]) -> str:
        """Python type expression for a schema; inline objects become nested classes named after hint."""
        node = classify(schema)
        expr = self._annotation(node, hint, nested)
        if node.nullable and expr != "Any" and not expr.endswith("| None"):
            expr += " | None"
        return expr

    def _annotation(self, node, hint: str, nested: list[RenderedModel]) -> str:
        if isinstance(node, RefNode):
            return format_class_name(node.name)

        if isinstance(node, CompositionNode):
            if node.kind == "allOf" and len(node.members) == 1:
                return self.annotation(node.members[0], hint, nested)
            if node.kind == "allOf":
                return self._nested(hint, node.raw, nested)
            members = []
            for index, member in enumerate(node.members, start=1):
                expr = self.annotation(member, f"{hint}Option{index}", nested)
                if expr not in members:
                    members.append(expr)
            return " | ".join(members) if members else self._any()

        if isinstance(node, ArrayNode):
            if node.items:
                return f"list[{self.annotation(node.items, hint + 'Item', nested)}]"
            return f"list[{self._any()}]"

        if isinstance(node, ObjectNode):
            if node.properties or node.all_of:
                return self._nested(hint, node.raw, nested)
            extra = node.additional_properties
            if isinstance(extra, dict) and extra:
                return f"dict[str, {self.annotation(extra, hint + 'Value', nested)}]"
            return f"dict[str, {self._any()}]"

        return self._primitive(node)

    def _primitive(self, node: PrimitiveNode) -> str:
        if node.enum:
            self.imports.typing.add("Literal")
            return "Literal[" + ", ".join(repr(value) for value in node.enum) + "]"
        if node.type in _PRIMITIVE_TYPES:
            return _PRIMITIVE_TYPES[node.type]
        return self._any()

    def _any(self) -> str:
        self.imports.typing.add("Any")
        return "Any"

    def _nested(self, hint: str, schema: dict[str, Any], nested: list[RenderedModel]) -> str:
        name = self._nested_name(hint)
        nested.append(self.render(name, schema))
        return name

    def _field(
        self, owner: str, prop_name: str, prop_schema: dict[str, Any], required: bool, nested, used: set[str]
    ) -> _Field:
        base_attr = attr = _attribute_name(prop_name)
        counter = 2
        # 'user-id' and 'user_id' sanitize to the same attribute
        while attr in used:
            attr = f"{base_attr}_{counter}"
            counter += 1
        used.add(attr)
        annotation = self.annotation(prop_schema, owner + _pascal(prop_name), nested)
        if not required and annotation != "Any" and not annotation.endswith("| None"):
            annotation += " | None"

        args = []
        if not required:
            args.append("default=None")
        if attr != prop_name:
            args.append(f"alias={prop_name!r}")
        description = (prop_schema or {}).get("description")
        if description:
            args.append(f"description={description!r}")

        if attr != prop_name or description:
            self.imports.pydantic.add("Field")
            return _Field(line=f"{attr}: {annotation} = Field({', '.join(args)})", aliased=attr != prop_name)
        if not required:
            return _Field(line=f"{attr}: {annotation} = None")
        return _Field(line=f"{attr}: {annotation}")

    def render(self, name: str, schema: dict[str, Any]) -> RenderedModel:
        nested: list[RenderedModel] = []
        fields: list[_Field] = []
        used: set[str] = set()
        base = "BaseModel"

        required = set(schema.get("required") or [])
        for prop_name, prop_schema in (schema.get("properties") or {}).items():
            fields.append(self._field(name, prop_name, prop_schema, prop_name in required, nested, used))

        for member in schema.get("allOf") or []:
            if "$ref" in member:
                # Single inheritance only: the last allOf ref becomes the base.
                base = format_class_name(ref_name(member["$ref"]))
            elif member.get("properties"):
                member_required = set(member.get("required") or [])
                for prop_name, prop_schema in member["properties"].items():
                    fields.append(
                        self._field(name, prop_name, prop_schema, prop_name in member_required, nested, used)
                    )

        for key in ("anyOf", "oneOf"):
            members = schema.get(key)
            if not isinstance(members, list):
                continue
            union = []
            for member in members:
                expr = format_class_name(ref_name(member["$ref"])) if "$ref" in member else self._any()
                if expr not in union:
                    union.append(expr)
            attr = "value"
            while attr in used:
                attr += "_"
            used.add(attr)
            fields.append(_Field(line=f"{attr}: {' | '.join(union) or self._any()}", comment=f"{key} union type"))

        needs_config = any(f.aliased for f in fields)
        if needs_config:
            self.imports.pydantic.add("ConfigDict")

        declaration = render(
            "model_class.py.j2",
            name=name,
            base=base,
            docstring=_docstring(schema.get("description") or ""),
            fields=fields,
            needs_config=needs_config,
        )
        return RenderedModel(name=name, declaration=declaration, nested=nested)


def render_model(name: str, schema: dict[str, Any], doc: Document) -> RenderedModel:
    """Render a model schema as a pydantic class declaration plus nested declarations."""
    return _ModelRenderer(doc).render(format_class_name(name), schema)


class ModelCodeGenerator:
    """Generates pydantic model code for named models in a document."""

    def __init__(self, doc: Document):
        self.doc = doc

    def generate(self, model_name: str) -> str:
        """Return a module fragment (imports + classes) for one model."""
        if not model_name:
            raise ConfigurationError("Model name is required")

        schema = find_model(self.doc, model_name)
        if schema is None:
            raise ModelNotFoundError(model_name)

        renderer = _ModelRenderer(self.doc)
        rendered = renderer.render(format_class_name(model_name), schema)
        logger.info("Rendered %s with %d nested type(s)", rendered.name, len(rendered.nested))

        return render(
            "model_module.py.j2",
            title=f"Model {rendered.name}.",
            typing_imports=sorted(renderer.imports.typing),
            pydantic_imports=sorted(renderer.imports.pydantic),
            declarations=rendered.declarations(),
        )
