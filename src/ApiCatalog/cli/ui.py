"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands to their
respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from ApiCatalog.cli.commands import (
    ListApisCommand,
    OperationUrlCommand,
    ShowDefinitionsCommand,
    ShowDeploymentsCommand,
    ShowSpecificationCommand,
    ShowVersionsCommand,
)
from ApiCatalog.cli.runner import CommandRunner
from ApiCatalog.config import DEFAULT_CONFIG_PATH, load_config_with_defaults, parse_sort_spec
from ApiCatalog.core.models import ApiDefinitionId
from ApiCatalog.core.query import FilterClause, SearchIntent, SearchMode
from ApiCatalog.renderers import create_output_writer


def _split_pairs(values: tuple[str, ...], option: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected NAME=VALUE, got {raw!r}", param_hint=option)
        pairs.append((key.strip(), value))
    return pairs


@click.group(help="ApiCatalog: browse and search an API catalog.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help=f"Override YAML merged onto {DEFAULT_CONFIG_PATH}.",
)
@click.option(
    "--defaults",
    "default_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to the default YAML config.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, default_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    load_dotenv()
    ctx.obj = CommandRunner(load_config_with_defaults(config_path, default_path))


@cli.command("list")
@click.option("--search", "search_text", default="", help="Search text.")
@click.option("--filter", "filters", multiple=True, help="Facet filter TYPE=VALUE; repeatable.")
@click.option("--semantic/--lexical", "semantic", default=None, help="Search mode (default from config).")
@click.option("--sort", "sort_spec", default=None, help="Client-side sort FIELD[:asc|desc].")
@click.option("--pages", type=click.IntRange(min=1), default=1, show_default=True, help="Pages to load.")
@click.pass_context
def list_cmd(
    ctx: click.Context,
    search_text: str,
    filters: tuple[str, ...],
    semantic: bool | None,
    sort_spec: str | None,
    pages: int,
) -> None:
    """List APIs matching search text and filters."""
    runner: CommandRunner = ctx.obj
    config = runner.config
    if semantic is None:
        mode = config.search.mode
    else:
        mode = SearchMode.SEMANTIC if semantic else SearchMode.LEXICAL
    intent = SearchIntent(
        text=search_text.strip(),
        filters=[FilterClause(facet_type=k, value=v) for k, v in _split_pairs(filters, "--filter")],
        mode=mode,
    )

    session = runner.create_session()
    if sort_spec:
        try:
            session.set_sort(parse_sort_spec(sort_spec))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--sort") from e
    output_writer = create_output_writer(config)

    async def _run(service):
        command = ListApisCommand(
            service=service,
            session=session,
            output_writer=output_writer,
            max_pages=pages,
            autocomplete=config.search.autocomplete,
        )
        return await command.execute(intent)

    runner.run(ctx.command.name, _run)
    output_writer.finalize(ctx.command.name)


@cli.command("versions")
@click.argument("api_name")
@click.pass_context
def versions_cmd(ctx: click.Context, api_name: str) -> None:
    """List versions of an API."""
    ctx.obj.run(ctx.command.name, lambda service: ShowVersionsCommand(service).execute(api_name))


@cli.command("deployments")
@click.argument("api_name")
@click.pass_context
def deployments_cmd(ctx: click.Context, api_name: str) -> None:
    """List deployments of an API."""
    ctx.obj.run(ctx.command.name, lambda service: ShowDeploymentsCommand(service).execute(api_name))


@cli.command("definitions")
@click.argument("api_name")
@click.argument("version_name")
@click.pass_context
def definitions_cmd(ctx: click.Context, api_name: str, version_name: str) -> None:
    """List definitions of an API version."""
    ctx.obj.run(
        ctx.command.name,
        lambda service: ShowDefinitionsCommand(service).execute(api_name, version_name),
    )


@cli.command("spec")
@click.argument("api_name")
@click.argument("version_name")
@click.argument("definition_name")
@click.pass_context
def spec_cmd(ctx: click.Context, api_name: str, version_name: str, definition_name: str) -> None:
    """Print the specification document of a definition."""
    definition_id = ApiDefinitionId(api_name, version_name, definition_name)
    text = ctx.obj.run(ctx.command.name, lambda service: ShowSpecificationCommand(service).execute(definition_id))
    click.echo(text)


@cli.command("op-url")
@click.argument("url_template")
@click.option("--host", default=None, help="Deployment runtime host.")
@click.option("--version", "version_name", default=None, help="Version path segment.")
@click.option("--param", "params", multiple=True, help="Template value NAME=VALUE; repeatable.")
@click.pass_context
def op_url_cmd(
    ctx: click.Context,
    url_template: str,
    host: str | None,
    version_name: str | None,
    params: tuple[str, ...],
) -> None:
    """Resolve an operation URL template into a callable URL."""
    runner: CommandRunner = ctx.obj
    runner.configure_logging(ctx.command.name)
    command = OperationUrlCommand(host=host, version_name=version_name, params=dict(_split_pairs(params, "--param")))
    click.echo(command.execute(url_template))
