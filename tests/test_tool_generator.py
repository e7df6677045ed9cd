import ast
from pathlib import Path

import pytest

from swagger_mcp_gen.errors import EndpointNotFoundError, MethodNotFoundError, NotFoundError
from swagger_mcp_gen.generator.tool import EndpointToolGenerator, build_description, python_literal
from swagger_mcp_gen.generator.validator import MISSING_HANDLER
from swagger_mcp_gen.parser.base import GenerationOptions, ValidationResult
from swagger_mcp_gen.parser.document import load_document

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def petstore():
    return load_document(FIXTURES / "petstore.yaml")


@pytest.fixture
def swagger():
    return load_document(FIXTURES / "swagger.json")


class TestPythonLiteral:
    def test_evaluates_back_to_value(self):
        value = {"type": "object", "properties": {"a": {"enum": [1, "x", None]}}, "required": [], "ok": True}
        assert ast.literal_eval(python_literal(value)) == value

    def test_list_of_dicts(self):
        value = [{"type": "string"}, {"type": "integer"}]
        assert ast.literal_eval(python_literal(value)) == value


class TestQueryAndPathParameters:
    def test_list_pets(self, petstore):
        tool = EndpointToolGenerator(petstore).generate("/pets", "GET")
        schema = tool.manifest.input_schema
        assert tool.manifest.name == "listPets"
        assert schema["type"] == "object"
        assert schema["properties"]["limit"] == {
            "type": "integer",
            "format": "int32",
            "description": "How many items to return at one time",
        }
        assert schema["properties"]["status"] == {
            "type": "string",
            "description": "Query parameter: status",
            "enum": ["available", "pending", "sold"],
        }
        assert "X-Request-Id" not in schema["properties"]
        assert schema["required"] == []

    def test_path_parameter_required(self, petstore):
        tool = EndpointToolGenerator(petstore).generate("/pets/{petId}", "GET")
        assert tool.manifest.name == "getPetsPetId"
        assert tool.manifest.input_schema["properties"]["petId"] == {
            "type": "string",
            "description": "The id of the pet to retrieve",
        }
        assert tool.manifest.input_schema["required"] == ["petId"]

    def test_swagger_inline_parameters(self, swagger):
        tool = EndpointToolGenerator(swagger).generate("/api/v1/users", "GET")
        props = tool.manifest.input_schema["properties"]
        assert tool.manifest.name == "getUser"
        assert props["ids"] == {"type": "array", "items": {"type": "integer"}, "description": "Query parameter: ids"}
        assert props["role"]["enum"] == ["admin", "member"]


class TestRequestBodies:
    def test_openapi_request_body_inlined(self, petstore):
        tool = EndpointToolGenerator(petstore).generate("/pets", "POST")
        body = tool.manifest.input_schema["properties"]["requestBody"]
        assert tool.manifest.name == "createPet"
        assert body["description"] == "Pet to add to the store"
        assert body["required"] == ["name"]
        assert body["properties"]["owner"]["type"] == "object"
        assert tool.manifest.input_schema["required"] == ["requestBody"]
        assert "$ref" not in tool.code

    def test_swagger_body_parameter(self, swagger):
        tool = EndpointToolGenerator(swagger).generate("/api/v1/users/{userId}/messages", "POST")
        schema = tool.manifest.input_schema
        assert tool.manifest.name == "createUsersUserIdMsg"
        assert set(schema["properties"]) == {"userId", "messagebody"}
        assert schema["properties"]["userId"] == {"type": "integer", "description": "Path parameter: userId"}
        body = schema["properties"]["messagebody"]
        assert body["description"] == "The message to send"
        assert body["properties"]["sentAt"]["format"] == "date-time"
        assert body["properties"]["price"]["type"] == "number"
        assert schema["required"] == ["userId", "messagebody"]


class TestDescription:
    def test_with_operation_id(self, petstore):
        tool = EndpointToolGenerator(petstore).generate("/pets", "GET")
        assert tool.manifest.description == (
            "List all pets AI INSTRUCTIONS: This endpoint allows you to listpets resources. "
            "On success, it returns a A paged array of pets."
        )

    def test_summary_and_description_joined(self, petstore):
        tool = EndpointToolGenerator(petstore).generate("/pets/{petId}", "GET")
        assert tool.manifest.description.startswith("Info for a specific pet. Looks up one pet by id AI INSTRUCTIONS:")
        assert "It requires the following parameters: petId." in tool.manifest.description

    def test_required_parameters_listed_by_original_name(self, swagger):
        tool = EndpointToolGenerator(swagger).generate("/api/v1/users/{userId}/messages", "POST")
        assert tool.manifest.description == (
            "Send a message AI INSTRUCTIONS: This endpoint allows you to post resources. "
            "It requires the following parameters: userId, message.body, Authorization. "
            "On success, it returns a Created message."
        )

    def test_without_summary_or_success_response(self):
        operation = {"responses": {"404": {"description": "missing"}}}
        assert build_description(operation, "DELETE", {}) == (
            "AI INSTRUCTIONS: This endpoint allows you to delete resources."
        )


class TestGeneratedCode:
    def test_code_is_valid(self, petstore):
        tool = EndpointToolGenerator(petstore).generate("/pets", "GET")
        assert tool.validation.is_valid
        assert tool.text == tool.code
        ast.parse(tool.code)

    def test_code_layout(self, petstore):
        tool = EndpointToolGenerator(petstore).generate("/pets/{petId}", "GET")
        assert tool.code.startswith("# Info for a specific pet\n# Looks up one pet by id\n")
        assert "getPetsPetId = {" in tool.code
        assert "async def handle_getPetsPetId(arguments: dict) -> list[dict]:" in tool.code
        assert "Not implemented yet" in tool.code

    def test_manifest_round_trips_through_code(self, swagger):
        tool = EndpointToolGenerator(swagger).generate("/api/v1/users/{userId}/messages", "POST")
        namespace = {}
        exec(compile(tool.code, "<tool>", "exec"), namespace)
        manifest = namespace["createUsersUserIdMsg"]
        assert manifest["name"] == "createUsersUserIdMsg"
        assert manifest["inputSchema"] == tool.manifest.input_schema

    def test_invalid_code_returns_report(self, petstore, monkeypatch):
        monkeypatch.setattr(
            "swagger_mcp_gen.generator.tool.validate_tool_code",
            lambda code: ValidationResult(is_valid=False, errors=[MISSING_HANDLER]),
        )
        tool = EndpointToolGenerator(petstore).generate("/pets", "GET")
        assert not tool.validation.is_valid
        assert tool.text.startswith("MCP Schema Validation Failed")
        assert f"- {MISSING_HANDLER}" in tool.text


class TestLookupErrors:
    def test_unknown_path(self, petstore):
        with pytest.raises(EndpointNotFoundError) as exc:
            EndpointToolGenerator(petstore).generate("/widgets", "GET")
        assert isinstance(exc.value, NotFoundError)
        assert "/widgets" in str(exc.value)

    def test_unknown_method(self, petstore):
        with pytest.raises(MethodNotFoundError):
            EndpointToolGenerator(petstore).generate("/pets", "DELETE")

    def test_lowercase_method(self, petstore):
        assert EndpointToolGenerator(petstore).generate("/pets", "get").manifest.name == "listPets"


class TestOptions:
    def test_version_in_name(self, petstore):
        options = GenerationOptions(include_version_in_name=True)
        tool = EndpointToolGenerator(petstore, options).generate("/v3/organizations", "GET")
        assert tool.manifest.name == "getV3Org"

    def test_default_name(self, petstore):
        assert EndpointToolGenerator(petstore).generate("/v3/organizations", "GET").manifest.name == "getOrg"


class TestEdgeCaseDocuments:
    def test_keyword_operation_id_still_valid(self):
        doc = {
            "openapi": "3.0.0",
            "paths": {"/items": {"post": {"operationId": "import", "responses": {"201": {"description": "ok"}}}}},
        }
        tool = EndpointToolGenerator(doc).generate("/items", "POST")
        assert tool.manifest.name == "createItem"
        assert tool.validation.is_valid
        ast.parse(tool.code)

    def test_shared_body_parameter(self):
        doc = {
            "swagger": "2.0",
            "parameters": {"Body": {"name": "body", "in": "body", "schema": {"$ref": "#/definitions/Pet"}}},
            "definitions": {"Pet": {"type": "object", "properties": {"name": {"type": "string"}}}},
            "paths": {"/pets": {"post": {"parameters": [{"$ref": "#/parameters/Body"}], "responses": {}}}},
        }
        tool = EndpointToolGenerator(doc).generate("/pets", "POST")
        assert tool.manifest.input_schema["properties"]["body"]["properties"]["name"] == {"type": "string"}

    def test_inline_object_query_parameter(self):
        doc = {
            "openapi": "3.0.0",
            "paths": {
                "/search": {
                    "get": {
                        "operationId": "search",
                        "parameters": [
                            {
                                "name": "filter",
                                "in": "query",
                                "schema": {"type": "object", "properties": {"status": {"type": "string"}}},
                            },
                            {"name": "kind", "in": "path", "required": True, "schema": {"type": "string", "enum": ["a"]}},
                        ],
                        "responses": {},
                    }
                }
            },
        }
        props = EndpointToolGenerator(doc).generate("/search", "GET").manifest.input_schema["properties"]
        assert props["filter"]["type"] == "object"
        assert props["filter"]["properties"] == {"status": {"type": "string"}}
        assert props["filter"]["description"] == "Query parameter: filter"
        assert props["kind"] == {"type": "string", "description": "Path parameter: kind"}
