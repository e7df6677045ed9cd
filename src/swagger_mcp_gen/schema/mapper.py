"""Map OpenAPI schemas to fully inlined JSON Schema for MCP tool inputs.

Handles:
- $ref resolution, with a degraded node when the target is missing
- Wrapper models (Go-style custom unmarshalers, Nullable*/Slice* types)
  collapsed to the primitive or array they carry
- Arrays, objects, additionalProperties
- allOf merging, anyOf/oneOf pass-through
- Primitive type normalization (file -> string, unknown -> string)
"""

import logging
from typing import Any

from swagger_mcp_gen.parser.base import Document
from .nodes import ArrayNode, CompositionNode, ObjectNode, PrimitiveNode, RefNode, classify
from .resolver import find_model, resolve_ref

logger = logging.getLogger(__name__)

_TYPE_MAP: dict[str, str] = {
    "integer": "integer",
    "number": "number",
    "string": "string",
    "boolean": "boolean",
    "array": "array",
    "object": "object",
    "file": "string",
}

# Name fragments that mark a missing model as a wrapper around a scalar or list
_SPECIAL_TYPE_NAMES = (
    "Date", "DateTime", "Time", "Duration", "Timestamp",
    "Nullable", "Optional", "Slice", "Array", "List",
    "Int64", "Float64", "Bool", "String",
)

_DATE_TIME_NAMES = ("Date", "DateTime", "Time", "Duration", "Timestamp")


def map_type(schema_type: str | None) -> str:
    """Normalize a Swagger type name to a JSON Schema type."""
    return _TYPE_MAP.get(schema_type or "", "string")


def is_wrapper_model(doc: Document, model_name: str) -> bool:
    """Guess whether a named model stands in for a single value rather than a real object."""
    model = find_model(doc, model_name)

    if model is None:
        return any(name in model_name for name in _SPECIAL_TYPE_NAMES)

    if any(name in model_name for name in _DATE_TIME_NAMES):
        return True

    description = (model.get("description") or "").lower()
    if "unmarshal" in description:
        return True

    properties = model.get("properties") or {}
    return model.get("type") == "object" and list(properties) == ["value"]


def _infer_missing_wrapper(model_name: str) -> dict[str, Any]:
    """Guess a schema for a wrapper model that is absent from the document."""
    description = f"Model '{model_name}' not found"

    if "Date" in model_name or "Time" in model_name:
        with_time = "Time" in model_name
        return {
            "type": "string",
            "format": "date-time" if with_time else "date",
            "description": f"{description} - Inferred as a date{'-time' if with_time else ''} value",
        }

    if "Int" in model_name or "Float" in model_name or "Number" in model_name:
        return {
            "type": "number" if "Float" in model_name else "integer",
            "description": f"{description} - Inferred as a numeric value",
        }

    if "Bool" in model_name:
        return {"type": "boolean", "description": f"{description} - Inferred as a boolean value"}

    if "Slice" in model_name or "Array" in model_name or "List" in model_name:
        item_type = "string"
        if "Int64Slice" in model_name or "IntArray" in model_name:
            item_type = "integer"
        elif "Float64Slice" in model_name or "FloatArray" in model_name:
            item_type = "number"
        elif "BoolSlice" in model_name or "BoolArray" in model_name:
            item_type = "boolean"
        return {
            "type": "array",
            "items": {"type": item_type},
            "description": f"{description} - Inferred as an array",
        }

    return {"type": "string", "description": description}


def map_wrapper_model(doc: Document, model_name: str) -> dict[str, Any]:
    """Collapse a wrapper model to the value it carries."""
    model = find_model(doc, model_name)
    model_description = (model or {}).get("description")

    if "NullableDate" in model_name:
        return {
            "type": "string",
            "format": "date",
            "description": model_description or "A nullable date value (format: YYYY-MM-DD)",
        }

    if "NullableInt64Slice" in model_name or "NullableIntSlice" in model_name:
        return {
            "type": "array",
            "items": {"type": "integer"},
            "description": model_description or "A nullable array of integers",
        }

    if "NullableTaskPriority" in model_name:
        return {
            "type": "string",
            "enum": ["low", "normal", "high"],
            "description": model_description or "A nullable task priority value",
        }

    if model is None:
        return _infer_missing_wrapper(model_name)

    value = (model.get("properties") or {}).get("value")
    if model.get("type") == "object" and isinstance(value, dict):
        result: dict[str, Any] = {"type": map_type(value.get("type") or "string")}
        if model_description:
            result["description"] = model_description
        if value.get("format"):
            result["format"] = value["format"]
        if value.get("description"):
            result["description"] = (
                f"{result['description']} ({value['description']})"
                if "description" in result
                else value["description"]
            )
        return result

    return {
        "type": model.get("type") or "object",
        "description": model_description or f"Model '{model_name}'",
    }


def _map_ref(node: RefNode, doc: Document, chain: frozenset) -> dict[str, Any]:
    name = node.name

    if is_wrapper_model(doc, name):
        logger.debug("Treating %s as a wrapper type", name)
        return map_wrapper_model(doc, name)

    if node.ref in chain:
        logger.debug("Circular reference to %s, not expanding", node.ref)
        return {"type": "object", "description": f"Circular reference to '{name}'"}

    target = resolve_ref(node.ref, doc)
    if target is None:
        logger.debug("Could not resolve %s", node.ref)
        return {"type": "object", "description": f"Model '{name}' not found"}

    return map_schema(target, doc, chain | {node.ref})


def _merge_all_of(members, doc: Document, chain: frozenset, into: dict[str, Any]) -> None:
    """Fold mapped allOf members into an object node's properties and required list."""
    for member in members:
        mapped = map_schema(member, doc, chain)
        into["properties"].update(mapped.get("properties") or {})
        for name in mapped.get("required") or []:
            if name not in into["required"]:
                into["required"].append(name)
        if "description" not in into and mapped.get("description"):
            into["description"] = mapped["description"]


def _map_object(node: ObjectNode, doc: Document, chain: frozenset) -> dict[str, Any]:
    result: dict[str, Any] = {
        "type": "object",
        "properties": {},
        "required": node.required,
    }
    if node.description:
        result["description"] = node.description

    for prop_name, prop_schema in node.properties.items():
        result["properties"][prop_name] = map_schema(prop_schema, doc, chain)

    if node.all_of:
        _merge_all_of(node.all_of, doc, chain, result)

    extra = node.additional_properties
    if isinstance(extra, dict):
        result["additionalProperties"] = map_schema(extra, doc, chain)
    elif isinstance(extra, bool):
        result["additionalProperties"] = extra

    return result


def _map_composition(node: CompositionNode, doc: Document, chain: frozenset) -> dict[str, Any]:
    if node.kind == "allOf":
        result: dict[str, Any] = {"type": "object", "properties": {}, "required": []}
        if node.description:
            result["description"] = node.description
        _merge_all_of(node.members, doc, chain, result)
        return result

    members = [map_schema(member, doc, chain) for member in node.members]
    member_types = {member.get("type") for member in members}
    result = {
        "type": member_types.pop() if len(member_types) == 1 else "object",
        node.kind: members,
    }
    if node.description:
        result["description"] = node.description
    return result


def _map_primitive(node: PrimitiveNode) -> dict[str, Any]:
    result: dict[str, Any] = {"type": map_type(node.type)}
    if node.description:
        result["description"] = node.description
    if node.enum:
        result["enum"] = list(node.enum)
    if node.format:
        result["format"] = node.format
    return result


def map_schema(schema: dict[str, Any] | None, doc: Document, chain: frozenset = frozenset()) -> dict[str, Any]:
    """Map an OpenAPI schema to an inlined JSON Schema node.

    chain holds the refs being expanded on the current path, so a model
    that (directly or through others) contains itself stops after one level.
    """
    if not schema:
        return {"type": "object"}

    node = classify(schema)

    if isinstance(node, RefNode):
        return _map_ref(node, doc, chain)

    if isinstance(node, CompositionNode):
        return _map_composition(node, doc, chain)

    if isinstance(node, ArrayNode):
        result: dict[str, Any] = {"type": "array"}
        if node.items:
            result["items"] = map_schema(node.items, doc, chain)
        if node.description:
            result["description"] = node.description
        return result

    if isinstance(node, ObjectNode):
        return _map_object(node, doc, chain)

    return _map_primitive(node)


def extract_model_schema(doc: Document, model_name: str) -> dict[str, Any]:
    """Inline the named model, or a 'not found' object if it is absent."""
    model = find_model(doc, model_name)
    if model is None:
        logger.debug("Model %s not found", model_name)
        return {"type": "object", "description": f"Model '{model_name}' not found"}
    return map_schema(model, doc)
