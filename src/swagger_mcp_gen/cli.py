"""CLI entry point for swagger-mcp-gen."""

import functools
import json
import logging
from pathlib import Path

import click

from swagger_mcp_gen.config import ENV_VAR, resolve_document_path, write_config_file
from swagger_mcp_gen.errors import GeneratorError
from swagger_mcp_gen.generator.model import ModelCodeGenerator
from swagger_mcp_gen.generator.tool import EndpointToolGenerator
from swagger_mcp_gen.parser.base import Document, GenerationOptions
from swagger_mcp_gen.parser.document import list_endpoints, load_document
from swagger_mcp_gen.parser.fetch import fetch_document
from swagger_mcp_gen.schema.dependencies import list_endpoint_models

doc_option = click.option(
    "--doc",
    "doc_path",
    envvar=ENV_VAR,
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Swagger/OpenAPI file (JSON or YAML). Defaults to ${ENV_VAR} or the .swagger-mcp file.",
)


def _reports_errors(command):
    """Turn library errors into click errors: message on stderr, exit code 1."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except GeneratorError as e:
            raise click.ClickException(str(e)) from e

    return wrapper


def _load(doc_path: Path | None) -> Document:
    return load_document(resolve_document_path(doc_path))


def _write_output(text: str, output: Path | None) -> None:
    if output is None:
        click.echo(text, nl=not text.endswith("\n"))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Saved to {output}", err=True)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log resolution details to stderr.")
def main(verbose: bool):
    """swagger-mcp-gen — generate pydantic models and MCP tool code from Swagger/OpenAPI docs."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


@main.command()
@click.argument("url")
@click.option("-s", "--save-location", required=True, type=click.Path(file_okay=False, path_type=Path), help="Directory to save the definition in.")
@click.option("--write-config", is_flag=True, help="Record the saved path in ./.swagger-mcp.")
@_reports_errors
def fetch(url: str, save_location: Path, write_config: bool):
    """Download a Swagger/OpenAPI definition and save it locally."""
    click.echo(f"Fetching {url}...", err=True)
    saved = fetch_document(url, save_location)
    click.echo(json.dumps(saved.model_dump(), indent=2))

    if write_config:
        config_path = write_config_file(Path.cwd(), saved.file_path)
        click.echo(f"Wrote {config_path}", err=True)


@main.command("list-endpoints")
@doc_option
@_reports_errors
def list_endpoints_cmd(doc_path: Path | None):
    """List every endpoint with its method and description."""
    endpoints = list_endpoints(_load(doc_path))
    data = [ep.model_dump(by_alias=True, exclude_none=True) for ep in endpoints]
    click.echo(json.dumps(data, indent=2))


@main.command("list-models")
@click.argument("path")
@click.argument("method")
@doc_option
@_reports_errors
def list_models_cmd(path: str, method: str, doc_path: Path | None):
    """List the models (schemas) an endpoint uses, transitively."""
    models = list_endpoint_models(_load(doc_path), path, method)
    data = [model.model_dump(by_alias=True) for model in models]
    click.echo(json.dumps(data, indent=2, default=str))


@main.command("gen-model")
@click.argument("model_name")
@doc_option
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write the code to this file instead of stdout.")
@_reports_errors
def gen_model(model_name: str, doc_path: Path | None, output: Path | None):
    """Generate a pydantic model for a schema in the definition."""
    code = ModelCodeGenerator(_load(doc_path)).generate(model_name)
    _write_output(code, output)


@main.command("gen-tool")
@click.argument("path")
@click.argument("method")
@doc_option
@click.option("--include-api-in-name", is_flag=True, help="Keep 'api' path segments in the tool name.")
@click.option("--include-version-in-name", is_flag=True, help="Keep version segments (e.g. 'v3') in the tool name.")
@click.option("--singularize/--no-singularize", default=True, help="Singularize the last resource name.")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write the code to this file instead of stdout.")
@_reports_errors
def gen_tool(
    path: str,
    method: str,
    doc_path: Path | None,
    include_api_in_name: bool,
    include_version_in_name: bool,
    singularize: bool,
    output: Path | None,
):
    """Generate MCP tool code (manifest + handler stub) for one endpoint."""
    options = GenerationOptions(
        include_api_in_name=include_api_in_name,
        include_version_in_name=include_version_in_name,
        singularize_resource_names=singularize,
    )
    tool_code = EndpointToolGenerator(_load(doc_path), options).generate(path, method)
    if not tool_code.validation.is_valid:
        click.echo("Generated tool failed validation.", err=True)
    _write_output(tool_code.text, output)
