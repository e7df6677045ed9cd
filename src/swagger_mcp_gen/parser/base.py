"""Data models shared by the loaders and generators.

Documents themselves stay plain dicts; these models describe what the
generators hand back to callers.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Document = dict[str, Any]

MAX_TOOL_NAME_LENGTH = 64


class Endpoint(BaseModel):
    """One operation listed from the document's paths."""

    model_config = ConfigDict(populate_by_name=True)

    path: str  # /pets/{petId}
    method: str  # GET / POST / PUT / DELETE / PATCH / OPTIONS / HEAD
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = Field(default=None, alias="operationId")
    tags: list[str] = []


class ResolvedModel(BaseModel):
    """A $ref target found while walking an operation, with its name."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    definition: dict = Field(alias="schema")


class GenerationOptions(BaseModel):
    """Knobs for tool name synthesis."""

    include_api_in_name: bool = False
    include_version_in_name: bool = False
    singularize_resource_names: bool = True


class ToolManifest(BaseModel):
    """The MCP tool description generated for one endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(max_length=MAX_TOOL_NAME_LENGTH, pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    description: str
    input_schema: dict = Field(alias="inputSchema")
    handler_stub: str = Field(alias="handlerStub")


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = []


class SavedDocument(BaseModel):
    """Where a fetched definition was written."""

    file_path: str
    url: str
    type: str  # openapi / swagger
