"""OpenAPI / Swagger document loader.

Reads OpenAPI 3.x and Swagger 2.0 documents (JSON or YAML) and lists
their operations as Endpoint models.
"""

import logging
from pathlib import Path

import yaml

from swagger_mcp_gen.errors import (
    ConfigurationError,
    DocumentNotFoundError,
    EndpointNotFoundError,
    InvalidDocumentError,
    MethodNotFoundError,
)
from swagger_mcp_gen.schema.resolver import resolve_ref
from .base import Document, Endpoint

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head")


def load_document(file_path: Path | str | None) -> Document:
    """Read and parse a Swagger/OpenAPI file. YAML is a superset of JSON, so one parser serves both."""
    if not file_path:
        raise ConfigurationError("Swagger file path is required")

    path = Path(file_path)
    if not path.is_file():
        raise DocumentNotFoundError(str(path))

    text = path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidDocumentError(f"Could not parse {path}: {e}") from e

    if not isinstance(doc, dict):
        raise InvalidDocumentError(f"{path} does not contain a Swagger/OpenAPI object")

    logger.debug("Loaded %s (%s)", path, detect_spec_version(doc) or "unknown version")
    return doc


def detect_spec_version(doc: Document) -> str | None:
    """Return 'openapi', 'swagger', or None when the document declares neither."""
    if str(doc.get("openapi", "")).startswith("3."):
        return "openapi"
    if str(doc.get("swagger", "")).startswith("2."):
        return "swagger"
    return None


def list_endpoints(doc: Document) -> list[Endpoint]:
    """List every operation in the document, in document order."""
    endpoints = []
    for path, path_item in (doc.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            endpoints.append(
                Endpoint(
                    path=path,
                    method=method.upper(),
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    operation_id=operation.get("operationId"),
                    tags=operation.get("tags", []),
                )
            )
    return endpoints


def find_operation(doc: Document, path: str, method: str) -> dict:
    """Look up the operation for a path and (case-insensitive) method."""
    if not path:
        raise ConfigurationError("Endpoint path is required")
    if not method:
        raise ConfigurationError("HTTP method is required")

    path_item = (doc.get("paths") or {}).get(path)
    if not path_item:
        raise EndpointNotFoundError(path)

    operation = path_item.get(method.lower())
    if not operation:
        raise MethodNotFoundError(method, path)
    return operation


def operation_parameters(operation: dict, doc: Document) -> list[dict]:
    """The operation's parameters with '#/parameters/...' style references resolved."""
    params = []
    for param in operation.get("parameters") or []:
        if isinstance(param, dict) and "$ref" in param:
            param = resolve_ref(param["$ref"], doc)
        if isinstance(param, dict):
            params.append(param)
    return params
