"""Errors raised by the generators and loaders.

ConfigurationError and NotFoundError abort the current call. A reference
that fails to resolve is not an error: the mapper substitutes a degraded
node and logs the gap.
"""


class GeneratorError(Exception):
    """Base class for all swagger-mcp-gen failures."""


class ConfigurationError(GeneratorError):
    """A required input (document path, endpoint path, method, model name) is missing."""


class InvalidDocumentError(GeneratorError):
    """The document could not be parsed as a Swagger/OpenAPI definition."""


class FetchError(GeneratorError):
    """Downloading a definition failed."""


class NotFoundError(GeneratorError):
    """Something named by the caller is absent from the document."""

    def __init__(self, message: str, identifier: str):
        super().__init__(message)
        self.identifier = identifier


class DocumentNotFoundError(NotFoundError):
    def __init__(self, path: str):
        super().__init__(f"Swagger file not found at {path}", path)


class EndpointNotFoundError(NotFoundError):
    def __init__(self, path: str):
        super().__init__(f"Endpoint path '{path}' not found in Swagger definition", path)


class MethodNotFoundError(NotFoundError):
    def __init__(self, method: str, path: str):
        super().__init__(f"Method '{method}' not found for endpoint path '{path}'", method)
        self.path = path


class ModelNotFoundError(NotFoundError):
    def __init__(self, name: str):
        super().__init__(f"Model '{name}' not found in Swagger definition", name)
