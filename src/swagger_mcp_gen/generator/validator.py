"""Validates generated tool code for MCP manifest structure.

Checked: a "name" key, an "inputSchema" dict, inputSchema "type" == "object",
and a handle_* function. "description", "properties" and "required" are
optional and never reported.
"""

import ast
import re

from swagger_mcp_gen.parser.base import ValidationResult

MISSING_NAME = 'Missing "name" property in tool definition'
MISSING_INPUT_SCHEMA = 'Missing "inputSchema" property in tool definition'
BAD_SCHEMA_TYPE = 'Missing or incorrect "type" property in inputSchema (must be "object")'
MISSING_HANDLER = "Missing handler function in tool definition"

_NAME_PATTERN = re.compile(r"""["']name["']\s*:\s*["']([^"']+)["']""")
_INPUT_SCHEMA_PATTERN = re.compile(r"""["']inputSchema["']\s*:\s*\{""")
_OBJECT_TYPE_PATTERN = re.compile(r"""["']type["']\s*:\s*["']object["']""")
_HANDLER_PATTERN = re.compile(r"def\s+handle_\w+\s*\(")


def _dict_entry(node: ast.Dict, key: str) -> ast.expr | None:
    for k, v in zip(node.keys, node.values):
        if isinstance(k, ast.Constant) and k.value == key:
            return v
    return None


def _find_manifest(tree: ast.Module) -> ast.Dict | None:
    """The first module-level dict literal carrying a "name" or "inputSchema" key."""
    for stmt in tree.body:
        value = None
        if isinstance(stmt, ast.Assign):
            value = stmt.value
        elif isinstance(stmt, ast.AnnAssign):
            value = stmt.value
        if isinstance(value, ast.Dict) and (
            _dict_entry(value, "name") is not None or _dict_entry(value, "inputSchema") is not None
        ):
            return value
    return None


def _validate_tree(tree: ast.Module) -> list[str]:
    errors = []
    manifest = _find_manifest(tree)

    name = _dict_entry(manifest, "name") if manifest else None
    if not (isinstance(name, ast.Constant) and isinstance(name.value, str) and name.value):
        errors.append(MISSING_NAME)

    schema = _dict_entry(manifest, "inputSchema") if manifest else None
    if not isinstance(schema, ast.Dict):
        errors.append(MISSING_INPUT_SCHEMA)
        errors.append(BAD_SCHEMA_TYPE)
    else:
        schema_type = _dict_entry(schema, "type")
        if not (isinstance(schema_type, ast.Constant) and schema_type.value == "object"):
            errors.append(BAD_SCHEMA_TYPE)

    has_handler = any(
        isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)) and stmt.name.startswith("handle_")
        for stmt in tree.body
    )
    if not has_handler:
        errors.append(MISSING_HANDLER)

    return errors


def _validate_text(code: str) -> list[str]:
    """Pattern checks for code that does not parse."""
    errors = []
    if not _NAME_PATTERN.search(code):
        errors.append(MISSING_NAME)
    if not _INPUT_SCHEMA_PATTERN.search(code):
        errors.append(MISSING_INPUT_SCHEMA)
    if not _OBJECT_TYPE_PATTERN.search(code):
        errors.append(BAD_SCHEMA_TYPE)
    if not _HANDLER_PATTERN.search(code):
        errors.append(MISSING_HANDLER)
    return errors


def validate_tool_code(code: str) -> ValidationResult:
    """Check generated tool code for the parts an MCP server needs."""
    try:
        tree = ast.parse(code)
    except SyntaxError as e:
        errors = [f"SyntaxError: {e.msg} (line {e.lineno})"] + _validate_text(code)
    else:
        errors = _validate_tree(tree)
    return ValidationResult(is_valid=not errors, errors=errors)


def format_validation_errors(errors: list[str]) -> str:
    """Render validation errors as a report a human can act on."""
    lines = "\n".join(f"- {error}" for error in errors)
    return (
        "MCP Schema Validation Failed\n"
        "============================\n"
        "\n"
        "The generated tool definition does not comply with the MCP schema.\n"
        "Please fix the following issues:\n"
        "\n"
        f"{lines}\n"
        "\n"
        "For more information about the MCP schema, see:\n"
        "https://modelcontextprotocol.io/specification\n"
    )
