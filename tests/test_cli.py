import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from swagger_mcp_gen.cli import main
from swagger_mcp_gen.parser.base import SavedDocument

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = str(FIXTURES / "petstore.yaml")
SWAGGER = str(FIXTURES / "swagger.json")


class TestListEndpoints:
    def test_with_doc_option(self):
        result = CliRunner().invoke(main, ["list-endpoints", "--doc", PETSTORE])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert len(data) == 4
        assert data[0] == {
            "path": "/pets",
            "method": "GET",
            "summary": "List all pets",
            "operationId": "listPets",
            "tags": ["pets"],
        }

    def test_env_var(self):
        result = CliRunner().invoke(main, ["list-endpoints"], env={"SWAGGER_FILEPATH": SWAGGER})
        assert result.exit_code == 0, result.output
        assert "/api/v1/users/{userId}/messages" in result.output

    def test_config_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path(".swagger-mcp").write_text(f"SWAGGER_FILEPATH={PETSTORE}\n")
            result = runner.invoke(main, ["list-endpoints"], env={"SWAGGER_FILEPATH": None})
        assert result.exit_code == 0, result.output
        assert "listPets" in result.output

    def test_no_document_configured(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["list-endpoints"], env={"SWAGGER_FILEPATH": None})
        assert result.exit_code == 1
        assert "Swagger file path is required" in result.output

    def test_missing_file(self, tmp_path):
        result = CliRunner().invoke(main, ["list-endpoints", "--doc", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Swagger file not found" in result.output


class TestListModels:
    def test_models_for_endpoint(self):
        result = CliRunner().invoke(main, ["list-models", "/pets", "POST", "--doc", PETSTORE])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [m["name"] for m in data] == ["NewPet", "Owner", "Pet"]
        assert data[0]["schema"]["required"] == ["name"]


class TestGenModel:
    def test_prints_code(self):
        result = CliRunner().invoke(main, ["gen-model", "Pet", "--doc", PETSTORE])
        assert result.exit_code == 0, result.output
        assert "class Pet(NewPet):" in result.output

    def test_writes_output_file(self, tmp_path):
        out = tmp_path / "models" / "user.py"
        result = CliRunner().invoke(main, ["gen-model", "User", "--doc", SWAGGER, "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "class User(BaseModel):" in out.read_text()

    def test_unknown_model(self):
        result = CliRunner().invoke(main, ["gen-model", "Nope", "--doc", PETSTORE])
        assert result.exit_code == 1
        assert "Model 'Nope' not found" in result.output


class TestGenTool:
    def test_prints_code(self):
        result = CliRunner().invoke(main, ["gen-tool", "/pets", "GET", "--doc", PETSTORE])
        assert result.exit_code == 0, result.output
        assert "async def handle_listPets" in result.output

    def test_unknown_path(self):
        result = CliRunner().invoke(main, ["gen-tool", "/widgets", "GET", "--doc", PETSTORE])
        assert result.exit_code == 1
        assert "/widgets" in result.output

    def test_naming_flags(self):
        result = CliRunner().invoke(
            main, ["gen-tool", "/v3/organizations", "GET", "--doc", PETSTORE, "--include-version-in-name"]
        )
        assert result.exit_code == 0, result.output
        assert "getV3Org = {" in result.output

    def test_no_singularize(self):
        result = CliRunner().invoke(
            main, ["gen-tool", "/api/v1/users", "GET", "--doc", SWAGGER, "--no-singularize"]
        )
        assert result.exit_code == 0, result.output
        assert "getUsers = {" in result.output

    def test_writes_output_file(self, tmp_path):
        out = tmp_path / "tool.py"
        result = CliRunner().invoke(main, ["gen-tool", "/pets", "POST", "--doc", PETSTORE, "--output", str(out)])
        assert result.exit_code == 0, result.output
        assert "createPet = {" in out.read_text()


class TestFetch:
    @patch("swagger_mcp_gen.cli.fetch_document")
    def test_prints_saved_document(self, mock_fetch, tmp_path):
        mock_fetch.return_value = SavedDocument(
            file_path=str(tmp_path / "abc.json"), url="https://x.test/openapi.json", type="openapi"
        )
        result = CliRunner().invoke(main, ["fetch", "https://x.test/openapi.json", "-s", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert '"type": "openapi"' in result.output
        mock_fetch.assert_called_once_with("https://x.test/openapi.json", tmp_path)

    @patch("swagger_mcp_gen.cli.fetch_document")
    def test_write_config(self, mock_fetch):
        mock_fetch.return_value = SavedDocument(file_path="/data/abc.json", url="https://x.test/a", type="swagger")
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["fetch", "https://x.test/a", "-s", "specs", "--write-config"])
            config = Path(".swagger-mcp").read_text()
        assert result.exit_code == 0, result.output
        assert config == "SWAGGER_FILEPATH=/data/abc.json\n"
