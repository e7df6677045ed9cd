"""swagger-mcp-gen — generate pydantic models and MCP tool code from Swagger/OpenAPI documents."""

__version__ = "0.1.0"
