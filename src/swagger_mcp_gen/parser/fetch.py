"""Download a Swagger/OpenAPI definition and store it locally."""

import hashlib
import json
import logging
from pathlib import Path

import httpx

from swagger_mcp_gen.errors import ConfigurationError, FetchError, InvalidDocumentError
from .base import SavedDocument

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def fetch_document(url: str, save_location: Path | str, timeout: float = DEFAULT_TIMEOUT) -> SavedDocument:
    """Fetch a definition and save it as <save_location>/<sha256(url)>.json."""
    if not url:
        raise ConfigurationError("URL is required")
    if not save_location:
        raise ConfigurationError("Save location is required")

    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch Swagger definition: {e}") from e
    except ValueError as e:
        raise InvalidDocumentError(f"Response from {url} is not JSON") from e

    if not isinstance(data, dict) or not (data.get("openapi") or data.get("swagger")):
        raise InvalidDocumentError("Invalid Swagger definition")

    filename = hashlib.sha256(url.encode("utf-8")).hexdigest() + ".json"
    directory = Path(save_location)
    directory.mkdir(parents=True, exist_ok=True)
    file_path = directory / filename
    file_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.info("Saved %s to %s", url, file_path)

    return SavedDocument(
        file_path=str(file_path),
        url=url,
        type="openapi" if data.get("openapi") else "swagger",
    )
