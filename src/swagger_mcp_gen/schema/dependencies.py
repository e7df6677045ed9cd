"""Collect every model an operation references, transitively."""

import logging
from typing import Any

from swagger_mcp_gen.parser.base import Document, ResolvedModel
from swagger_mcp_gen.parser.document import find_operation, operation_parameters
from .nodes import COMPOSITION_KEYS
from .resolver import ref_name, resolve_ref

logger = logging.getLogger(__name__)


def _content_schemas(container: dict[str, Any]) -> list[dict[str, Any]]:
    """Schemas under an OpenAPI 3 'content' map, one per media type."""
    schemas = []
    for media_type in (container.get("content") or {}).values():
        if isinstance(media_type, dict) and media_type.get("schema"):
            schemas.append(media_type["schema"])
    return schemas


def _walk(
    schema: Any,
    doc: Document,
    models: list[ResolvedModel],
    seen_refs: set[str],
) -> None:
    if not isinstance(schema, dict):
        return

    ref = schema.get("$ref")
    if ref and ref not in seen_refs:
        # Marked before resolving so a missing ref is only tried once and
        # self-referencing models terminate.
        seen_refs.add(ref)
        target = resolve_ref(ref, doc)
        if target is None:
            logger.debug("Skipping unresolvable reference %s", ref)
        else:
            models.append(ResolvedModel(name=ref_name(ref), definition=target))
            _walk(target, doc, models, seen_refs)

    if schema.get("type") == "array" and schema.get("items"):
        _walk(schema["items"], doc, models, seen_refs)

    for prop_schema in (schema.get("properties") or {}).values():
        _walk(prop_schema, doc, models, seen_refs)

    if isinstance(schema.get("additionalProperties"), dict):
        _walk(schema["additionalProperties"], doc, models, seen_refs)

    for key in COMPOSITION_KEYS:
        for member in schema.get(key) or []:
            _walk(member, doc, models, seen_refs)


def extract_models(operation: dict[str, Any], doc: Document) -> list[ResolvedModel]:
    """Models referenced by an operation, in discovery order, each ref at most once."""
    models: list[ResolvedModel] = []
    seen_refs: set[str] = set()

    request_body = operation.get("requestBody")
    if isinstance(request_body, dict):
        for schema in _content_schemas(request_body):
            _walk(schema, doc, models, seen_refs)

    for parameter in operation_parameters(operation, doc):
        if parameter.get("schema"):
            _walk(parameter["schema"], doc, models, seen_refs)

    for response in (operation.get("responses") or {}).values():
        if not isinstance(response, dict):
            continue
        for schema in _content_schemas(response):
            _walk(schema, doc, models, seen_refs)
        # Swagger 2.0 puts the schema directly on the response
        if response.get("schema"):
            _walk(response["schema"], doc, models, seen_refs)

    return models


def list_endpoint_models(doc: Document, path: str, method: str) -> list[ResolvedModel]:
    operation = find_operation(doc, path, method)
    models = extract_models(operation, doc)
    logger.info("%s %s uses %d model(s)", method.upper(), path, len(models))
    return models
