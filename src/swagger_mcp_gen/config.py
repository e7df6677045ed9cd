"""Locate the Swagger document a command should work on.

Order: explicit --doc (or the SWAGGER_FILEPATH env var, which click feeds
into the same option), then SWAGGER_FILEPATH= in a .swagger-mcp file in
the working directory.
"""

from pathlib import Path

from swagger_mcp_gen.errors import ConfigurationError

CONFIG_FILENAME = ".swagger-mcp"
ENV_VAR = "SWAGGER_FILEPATH"


def read_config_file(directory: Path) -> dict[str, str]:
    """Parse KEY=VALUE lines from .swagger-mcp. Blank lines and # comments are skipped."""
    config_path = directory / CONFIG_FILENAME
    if not config_path.is_file():
        return {}

    values = {}
    for line in config_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip("\"'")
    return values


def write_config_file(directory: Path, file_path: str) -> Path:
    config_path = directory / CONFIG_FILENAME
    config_path.write_text(f"{ENV_VAR}={file_path}\n", encoding="utf-8")
    return config_path


def resolve_document_path(explicit: Path | None, cwd: Path | None = None) -> Path:
    if explicit:
        return explicit

    configured = read_config_file(cwd or Path.cwd()).get(ENV_VAR)
    if configured:
        return Path(configured)

    raise ConfigurationError(
        f"Swagger file path is required (pass --doc, set {ENV_VAR}, "
        f"or add {ENV_VAR}=... to {CONFIG_FILENAME})"
    )
