"""Convert HTTP method + path to MCP tool names.

Pattern: {verb}{Segment}{Segment}...  (camelCase, at most 64 characters)
  - GET    -> get
  - POST   -> create
  - PUT    -> update
  - PATCH  -> update
  - DELETE -> delete

A simple operationId (no '_' or '.', not a Python keyword) is used as-is.

Examples:
  GET    /v3/organizations               -> getOrg
  GET    /api/pets/{petId}               -> getPetsPetId
  POST   /api/v1/users/{userId}/messages -> createUsersUserIdMsg
  DELETE /categories                     -> deleteCat
"""

import keyword
import re

from swagger_mcp_gen.parser.base import MAX_TOOL_NAME_LENGTH, GenerationOptions

_METHOD_PREFIXES: dict[str, str] = {
    "GET": "get",
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}

# Used when the full name would exceed the length limit
_METHOD_PREFIXES_SHORT: dict[str, str] = {
    "GET": "get",
    "POST": "crt",
    "PUT": "upd",
    "PATCH": "upd",
    "DELETE": "del",
}

_ABBREVIATIONS: dict[str, str] = {
    "organization": "org",
    "organizations": "orgs",
    "generate": "gen",
    "information": "info",
    "application": "app",
    "applications": "apps",
    "identification": "id",
    "parameter": "param",
    "parameters": "params",
    "report": "rpt",
    "configuration": "config",
    "administrator": "admin",
    "authentication": "auth",
    "authorization": "authz",
    "notification": "notice",
    "notifications": "notices",
    "document": "doc",
    "documents": "docs",
    "category": "cat",
    "categories": "cats",
    "subscription": "sub",
    "subscriptions": "subs",
    "preference": "pref",
    "preferences": "prefs",
    "message": "msg",
    "messages": "msgs",
    "profile": "prof",
    "profiles": "profs",
    "setting": "set",
    "settings": "sets",
}

_VERSION_SEGMENT = re.compile(r"^v\d+$")
_SIMPLE_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9]*$")


def _capitalize(word: str) -> str:
    """Upper-case the first letter only; 'petId' -> 'PetId'."""
    return word[:1].upper() + word[1:]


def _to_identifier_part(word: str) -> str:
    """Camel-join the alphanumeric runs of a segment: 'user-profile' -> 'UserProfile'."""
    return "".join(_capitalize(part) for part in re.split(r"[^A-Za-z0-9]+", word) if part)


def _singularize(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"
    return word[:-1]


def _method_prefix(method: str, table: dict[str, str]) -> str:
    return table.get(method.upper()) or re.sub(r"[^a-z0-9]", "", method.lower())


def _clean_path(path: str) -> str:
    """Drop the query string and a trailing file extension."""
    path = path.split("?")[0]
    return re.sub(r"\.[^/.]+$", "", path)


def _process_segments(path: str, options: GenerationOptions) -> list[str]:
    segments = [s for s in _clean_path(path).split("/") if s]
    processed = []

    for index, segment in enumerate(segments):
        if segment.lower() == "api" and not options.include_api_in_name:
            continue
        if _VERSION_SEGMENT.match(segment) and not options.include_version_in_name:
            continue

        if segment.startswith("{") and segment.endswith("}"):
            processed.append(_to_identifier_part(segment[1:-1]))
            continue

        word = segment
        # Only the last segment names the resource being acted on
        if options.singularize_resource_names and index == len(segments) - 1 and word.endswith("s"):
            word = _singularize(word)

        word = _ABBREVIATIONS.get(word.lower(), word)
        part = _to_identifier_part(word)
        if part:
            processed.append(part)

    return processed


def build_tool_name(
    method: str,
    path: str,
    operation_id: str | None = None,
    options: GenerationOptions | None = None,
) -> str:
    """Build a tool name from HTTP method and path.

    Returns a name like 'getOrg' or 'createUsersUserIdMsg', never longer
    than 64 characters.
    """
    options = options or GenerationOptions()

    if operation_id and "_" not in operation_id and "." not in operation_id:
        if _SIMPLE_IDENTIFIER.match(operation_id) and not keyword.iskeyword(operation_id):
            return operation_id[:MAX_TOOL_NAME_LENGTH]

    segments = _process_segments(path, options)
    name = _method_prefix(method, _METHOD_PREFIXES) + "".join(segments)
    if len(name) <= MAX_TOOL_NAME_LENGTH:
        return name

    # Too long: shorter verb, then whole segments while they fit
    reduced = _method_prefix(method, _METHOD_PREFIXES_SHORT)
    for segment in segments:
        if len(reduced) + len(segment) > MAX_TOOL_NAME_LENGTH:
            break
        reduced += segment
    return reduced
