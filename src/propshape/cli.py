"""
Command line interface.

    propshape propType    prompt for a name and example data, write the schema module
    propshape serve       run the HTTP service

Every prompt of `propType` can be answered up front with an option, which
makes the command scriptable.
"""

from pathlib import Path
from typing import Any, Optional

import click
import typer
from jinja2 import TemplateError

from .common import InvalidJsonError, PropshapeError, logger
from .config import Settings, load_settings
from .generator import generate
from .sources import SOURCE_JSON, SOURCE_URL, SOURCES, fetch_json, parse_json, select, validate_json

app = typer.Typer(add_completion=False, help="Generate prop-types shapes from example JSON data.")

EDITOR_HINT = "// Paste the JSON data you want propTypes for, then save and close the editor.\n"


def _settings(ctx: typer.Context, **overrides) -> Settings:
    options = ctx.obj or {}
    settings = load_settings(
        options.get('config'),
        log_level=options.get('log_level'),
        log_format=options.get('log_format'),
        **overrides,
    )
    # Recreate the handlers so they write to this invocation's stderr
    logger(level=settings.log_level, format_type=settings.log_format, reset=True)
    return settings


def _prompt_name() -> str:
    while True:
        name = typer.prompt("Name of the file").strip()
        if name:
            return name
        typer.echo("Please enter a name")


def _prompt_source() -> str:
    # click types go through click.prompt
    return click.prompt(
        "Source for the JSON data",
        type=click.Choice(SOURCES, case_sensitive=False),
        default=SOURCE_JSON,
    ).upper()


def _edit_json() -> Any:
    """Open the user's editor until the text saved parses as JSON"""
    text = EDITOR_HINT
    while True:
        edited = click.edit(text, extension=".json")
        if edited is not None:
            text = edited
        message = validate_json(text)
        if message is True:
            return parse_json(text)
        typer.echo(message)
        if not click.confirm("Edit again?", default=True):
            raise InvalidJsonError("Invalid JSON: no valid data entered")


@app.callback()
def main_options(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file (default: ./propshape.yaml)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="color, simple or structured"),
):
    ctx.obj = {
        'config': str(config) if config else None,
        'log_level': log_level,
        'log_format': log_format,
    }


@app.command("propType")
def prop_type(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Declaration name, also the file name"),
    source: Optional[str] = typer.Option(None, "--source", help="URL or JSON"),
    data: Optional[str] = typer.Option(None, "--data", help="Example JSON text"),
    url: Optional[str] = typer.Option(None, "--url", help="GET url of the raw data"),
    query: Optional[str] = typer.Option(None, "--query", help="jq expression selecting the part to describe"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Directory for the generated file"),
):
    """Infer a PropTypes shape from example JSON and write it to <output-dir>/<name>.js"""
    try:
        settings = _settings(ctx, output_dir=str(output_dir) if output_dir else None)

        if name is None or not name.strip():
            name = _prompt_name()
        name = name.strip()

        if source is None:
            if data is not None:
                source = SOURCE_JSON
            elif url is not None:
                source = SOURCE_URL
            else:
                source = _prompt_source()
        source = source.upper()
        if source not in SOURCES:
            raise typer.BadParameter(f"must be one of {', '.join(SOURCES)}", param_hint="--source")

        if source == SOURCE_JSON:
            value = parse_json(data) if data is not None else _edit_json()
        else:
            if url is None:
                url = typer.prompt("GET url of the raw data")
            value = fetch_json(url, timeout=settings.timeout)

        value = select(value, query)
        path = generate(value, name, settings.output_dir, settings.template_path())
    except (PropshapeError, TemplateError) as e:
        logger().error(str(e))
        raise typer.Exit(code=1)

    typer.echo(str(path))


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Serve schema generation over HTTP"""
    from .server import start_server

    try:
        settings = _settings(ctx)
    except PropshapeError as e:
        logger().error(str(e))
        raise typer.Exit(code=1)
    start_server(host=host, port=port, settings=settings)


def main():
    app()


if __name__ == '__main__':
    main()
