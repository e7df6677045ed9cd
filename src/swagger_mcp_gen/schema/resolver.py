"""$ref lookup inside a parsed document.

Pure lookups: nothing here guards against cycles. Each traversal that
follows references keeps its own visited set.
"""

from typing import Any

from swagger_mcp_gen.parser.base import Document


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def ref_name(ref: str) -> str:
    """Last path segment of a ref: '#/components/schemas/Pet' -> 'Pet'."""
    return _unescape(ref.rsplit("/", 1)[-1])


def resolve_ref(ref: str, doc: Document) -> dict[str, Any] | None:
    """Walk '#/a/b/c' into the document. Returns None if any segment is missing."""
    if not ref or not ref.startswith("#"):
        return None

    node: Any = doc
    for part in ref[1:].split("/"):
        if not part:
            continue
        if not isinstance(node, dict):
            return None
        node = node.get(_unescape(part))
        if node is None:
            return None
    return node if isinstance(node, dict) else None


def model_table(doc: Document) -> dict[str, Any]:
    """The document's named models: components.schemas (OpenAPI 3) or definitions (Swagger 2)."""
    if "openapi" in doc:
        return (doc.get("components") or {}).get("schemas") or {}
    if "swagger" in doc:
        return doc.get("definitions") or {}
    return {**(doc.get("definitions") or {}), **((doc.get("components") or {}).get("schemas") or {})}


def find_model(doc: Document, name: str) -> dict[str, Any] | None:
    model = model_table(doc).get(name)
    return model if isinstance(model, dict) else None
