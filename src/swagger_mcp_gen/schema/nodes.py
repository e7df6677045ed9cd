"""Closed set of schema node shapes.

classify() looks at a raw schema dict once and returns one of the node
classes below, so callers dispatch on the class instead of probing keys.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from .resolver import ref_name

COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")


@dataclass(frozen=True)
class _Node:
    raw: dict[str, Any] = field(repr=False)

    @property
    def description(self) -> str | None:
        return self.raw.get("description")

    @property
    def nullable(self) -> bool:
        return bool(self.raw.get("nullable"))


@dataclass(frozen=True)
class RefNode(_Node):
    ref: str = ""

    @property
    def name(self) -> str:
        return ref_name(self.ref)


@dataclass(frozen=True)
class PrimitiveNode(_Node):
    type: str | None = None

    @property
    def enum(self) -> list | None:
        return self.raw.get("enum")

    @property
    def format(self) -> str | None:
        return self.raw.get("format")


@dataclass(frozen=True)
class ArrayNode(_Node):
    @property
    def items(self) -> dict[str, Any] | None:
        return self.raw.get("items") or None


@dataclass(frozen=True)
class ObjectNode(_Node):
    @property
    def properties(self) -> dict[str, Any]:
        return self.raw.get("properties") or {}

    @property
    def required(self) -> list[str]:
        return list(self.raw.get("required") or [])

    @property
    def additional_properties(self) -> dict[str, Any] | bool | None:
        return self.raw.get("additionalProperties")

    @property
    def all_of(self) -> list[dict[str, Any]]:
        return self.raw.get("allOf") or []


@dataclass(frozen=True)
class CompositionNode(_Node):
    kind: str = "allOf"  # allOf / anyOf / oneOf
    members: tuple = ()


SchemaNode = Union[RefNode, PrimitiveNode, ArrayNode, ObjectNode, CompositionNode]


def classify(raw: dict[str, Any] | None) -> SchemaNode:
    """Decide the shape of a raw schema. A $ref always wins over sibling keys."""
    raw = raw or {}

    if "$ref" in raw:
        return RefNode(raw, ref=raw["$ref"])

    schema_type = raw.get("type")
    if "properties" not in raw and schema_type in (None, "object"):
        for key in COMPOSITION_KEYS:
            if isinstance(raw.get(key), list):
                return CompositionNode(raw, kind=key, members=tuple(raw[key]))

    if schema_type == "array":
        return ArrayNode(raw)
    if schema_type == "object" or "properties" in raw:
        return ObjectNode(raw)
    return PrimitiveNode(raw, type=schema_type)
