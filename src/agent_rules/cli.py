"""Agent Rules CLI entry point."""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import anyio
import click

from agent_rules import __version__
from agent_rules.config import load_config

if TYPE_CHECKING:
    from agent_rules.config import ServerConfig

logger = logging.getLogger(__name__)

_LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"


def _configure_logging(level: int) -> None:
    """Send log records to stderr; stdout carries the MCP transport."""
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)


@click.group()
@click.version_option(version=__version__, prog_name="agent-rules")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Agent Rules - serve Cursor rules and AGENTS.md to AI agents."""
    level: int | None = None
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR

    config = load_config(log_level=level)
    _configure_logging(config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config"] = config


_project_option = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)


def _config_for(ctx: click.Context, project: Path | None) -> ServerConfig:
    config: ServerConfig = ctx.obj["config"]
    if project is None:
        return config
    return dataclasses.replace(config, project_root=str(project))


def _emit(message: str, *, failed: bool) -> None:
    if failed:
        click.echo(message, err=True)
        sys.exit(1)
    click.echo(message)


@main.command("mcp-serve")
@_project_option
@click.pass_context
def mcp_serve(ctx: click.Context, *, project: Path | None) -> None:
    """Run the agent-rules MCP server (stdio transport)."""
    from agent_rules.services.mcp_server import create_server

    config = _config_for(ctx, project)
    server = create_server(config)
    logger.info("Agent Rules MCP server running on stdio")

    async def _run() -> None:
        from mcp import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )

    anyio.run(_run)


@main.command()
@_project_option
@click.pass_context
def rules(ctx: click.Context, *, project: Path | None) -> None:
    """Load and summarize the project's Cursor rules."""
    from agent_rules.services.cursor_rules import CursorRulesService

    service = CursorRulesService(_config_for(ctx, project))
    result = anyio.run(service.load_rules)
    _emit(result.message, failed=result.error)


@main.command()
@click.argument("file_path", metavar="FILE")
@_project_option
@click.pass_context
def match(ctx: click.Context, *, file_path: str, project: Path | None) -> None:
    """Show the Cursor rules that apply to FILE."""
    from agent_rules.services.cursor_rules import CursorRulesService

    service = CursorRulesService(_config_for(ctx, project))
    result = anyio.run(service.get_rules_for_file, file_path)
    _emit(result.message, failed=result.error)


@main.command()
@_project_option
@click.pass_context
def agents(ctx: click.Context, *, project: Path | None) -> None:
    """Print the project's AGENTS.md guidance."""
    from agent_rules.services.agents import AgentsService

    service = AgentsService(_config_for(ctx, project))
    result = anyio.run(service.get_agents)
    _emit(result.message, failed=result.error)
