"""Endpoint tool generator — turns one Swagger operation into MCP tool code.

The generated code is a manifest dict (name, description, inputSchema)
followed by an async handler stub. The input schema is fully inlined:
request bodies carry the complete model shape, never a $ref.
"""

import logging
from typing import Any

from pydantic import BaseModel

from swagger_mcp_gen.parser.base import Document, GenerationOptions, ToolManifest, ValidationResult
from swagger_mcp_gen.parser.document import find_operation, operation_parameters
from swagger_mcp_gen.schema.mapper import map_schema, map_type
from .naming import build_tool_name
from .render import render
from .validator import format_validation_errors, validate_tool_code

logger = logging.getLogger(__name__)

_SKIPPED_LOCATIONS = {"header", "formData"}
_SCALAR_TYPES = (str, int, float, bool, type(None))


class ToolCode(BaseModel):
    """Generated tool code together with its validation outcome."""

    manifest: ToolManifest
    code: str
    validation: ValidationResult

    @property
    def text(self) -> str:
        """The code when it validated, otherwise the validation report."""
        if self.validation.is_valid:
            return self.code
        return format_validation_errors(self.validation.errors)


def python_literal(value: Any, level: int = 1) -> str:
    """Render JSON-like data as an indented Python literal nested `level` deep."""
    pad = "    " * level
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [f"{pad}    {str(k)!r}: {python_literal(v, level + 1)}," for k, v in value.items()]
        return "{\n" + "\n".join(items) + f"\n{pad}}}"
    if isinstance(value, list):
        if all(isinstance(v, _SCALAR_TYPES) for v in value):
            return "[" + ", ".join(python_literal(v, level + 1) for v in value) + "]"
        items = [f"{pad}    {python_literal(v, level + 1)}," for v in value]
        return "[\n" + "\n".join(items) + f"\n{pad}]"
    if isinstance(value, _SCALAR_TYPES):
        return repr(value)
    # YAML can yield dates and other non-literal scalars
    return repr(str(value))


def _parameter_property(param: dict[str, Any], doc: Document) -> dict[str, Any]:
    """Schema for a path/query parameter, from inline Swagger 2 fields or an OpenAPI 3 schema."""
    schema = param.get("schema")
    if isinstance(schema, dict) and schema:
        source = schema
        prop = map_schema(schema, doc)
    else:
        source = param
        prop = {"type": map_type(param.get("type"))}
        if prop["type"] == "array":
            prop["items"] = map_schema(param.get("items") or {"type": "string"}, doc)
        if param.get("format"):
            prop["format"] = param["format"]

    location = param.get("in")
    label = "Path parameter" if location == "path" else "Query parameter"
    prop["description"] = param.get("description") or f"{label}: {param['name']}"

    # Only query parameters advertise their allowed values
    prop.pop("enum", None)
    enum = param.get("enum") or source.get("enum")
    if location == "query" and enum:
        prop["enum"] = list(enum)
    return prop


def _body_property(schema: dict[str, Any], description: str, doc: Document) -> dict[str, Any]:
    prop = map_schema(schema, doc)
    prop["description"] = description
    return prop


def build_input_schema(operation: dict[str, Any], doc: Document) -> dict[str, Any]:
    """The tool's inputSchema: path/query params plus the fully inlined request body."""
    input_schema: dict[str, Any] = {"type": "object", "properties": {}, "required": []}
    properties = input_schema["properties"]
    required = input_schema["required"]

    for param in operation_parameters(operation, doc):
        location = param.get("in")
        if location in _SKIPPED_LOCATIONS or "name" not in param:
            continue

        if location in ("path", "query"):
            name = param["name"]
            properties[name] = _parameter_property(param, doc)
        elif location == "body":
            name = param["name"].replace(".", "")
            schema = param.get("schema")
            if not schema:
                continue
            properties[name] = _body_property(
                schema, param.get("description") or f"Request body: {name}", doc
            )
        else:
            continue

        if param.get("required") and name not in required:
            required.append(name)

    request_body = operation.get("requestBody")
    if isinstance(request_body, dict):
        json_content = (request_body.get("content") or {}).get("application/json") or {}
        schema = json_content.get("schema")
        if schema:
            properties["requestBody"] = _body_property(
                schema, request_body.get("description") or "Request body", doc
            )
            if request_body.get("required"):
                required.append("requestBody")

    return input_schema


def build_description(operation: dict[str, Any], method: str, doc: Document) -> str:
    """User-facing summary/description plus usage hints for the model calling the tool."""
    description = ". ".join(part for part in (operation.get("summary"), operation.get("description")) if part)

    action = operation.get("operationId") or method
    hint = f"AI INSTRUCTIONS: This endpoint allows you to {action.lower()} resources. "

    required_params = [
        p["name"] for p in operation_parameters(operation, doc) if p.get("required") and p.get("name")
    ]
    if required_params:
        hint += f"It requires the following parameters: {', '.join(required_params)}. "

    responses = operation.get("responses") or {}
    for status in ("200", "201"):
        # YAML loads unquoted status codes as ints
        success = responses.get(status) or responses.get(int(status))
        if isinstance(success, dict):
            hint += f"On success, it returns a {success.get('description') or status + ' response'}."
            break

    return f"{description} {hint}".strip() if description else hint.strip()


def _header_lines(operation: dict[str, Any]) -> list[str]:
    lines = []
    for text in (operation.get("summary"), operation.get("description")):
        if text:
            lines.extend(line.rstrip() for line in str(text).strip().splitlines())
    return lines


class EndpointToolGenerator:
    """Generates MCP tool code for endpoints of one document."""

    def __init__(self, doc: Document, options: GenerationOptions | None = None):
        self.doc = doc
        self.options = options or GenerationOptions()

    def generate(self, path: str, method: str) -> ToolCode:
        """Generate manifest + handler code for an endpoint.

        Raises NotFoundError for an unknown path or method. A manifest that
        fails validation is not raised: ToolCode.text carries the report.
        """
        operation = find_operation(self.doc, path, method)

        name = build_tool_name(method, path, operation.get("operationId"), self.options)
        input_schema = build_input_schema(operation, self.doc)
        description = build_description(operation, method, self.doc)

        manifest_code = render(
            "tool_manifest.py.j2",
            header=_header_lines(operation),
            name=name,
            description=description,
            input_schema=python_literal(input_schema),
        )
        handler_code = render("tool_handler.py.j2", name=name, method=method.upper(), path=path)
        code = f"{manifest_code}\n\n{handler_code}"

        validation = validate_tool_code(code)
        if not validation.is_valid:
            logger.warning("Generated tool %s failed validation: %s", name, "; ".join(validation.errors))

        manifest = ToolManifest(
            name=name,
            description=description,
            input_schema=input_schema,
            handler_stub=handler_code,
        )
        logger.info("Generated tool %s for %s %s", name, method.upper(), path)
        return ToolCode(manifest=manifest, code=code, validation=validation)
