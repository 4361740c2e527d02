"""MCP server: stdio-based tool server exposing Cursor rules and AGENTS.md."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import mcp
from mcp.server import Server
from mcp.types import TextContent

from agent_rules import __version__
from agent_rules.config import ServerConfig
from agent_rules.models import RulesResult
from agent_rules.services.agents import AgentsService
from agent_rules.services.cursor_rules import CursorRulesService, format_rule_listing

if TYPE_CHECKING:
    from agent_rules.models import AgentResult

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """A tool finished with a failure result; the message goes to the client."""


# --- Tool handler functions (testable without transport) ---


async def handle_load_cursor_rules(
    rules: CursorRulesService,
    project_root: str | None = None,
) -> RulesResult:
    """Load and cache all rules for a project."""
    return await rules.load_rules(project_root)


async def handle_get_cursor_rules(
    rules: CursorRulesService,
    *,
    file_path: str | None,
    project_root: str | None = None,
) -> RulesResult:
    """Get the rules applicable to a file."""
    if not file_path:
        return RulesResult(rules=(), message="Error: filePath is required", error=True)
    return await rules.get_rules_for_file(file_path, project_root)


def handle_list_cursor_rules(
    rules: CursorRulesService,
    project_root: str | None = None,
) -> str:
    """Render the rules already cached for a project."""
    return format_rule_listing(rules.get_cached_rules(project_root))


async def handle_load_agents(
    agents: AgentsService,
    project_root: str | None = None,
) -> AgentResult:
    return await agents.load_agents(project_root)


async def handle_get_agents(
    agents: AgentsService,
    project_root: str | None = None,
) -> AgentResult:
    return await agents.get_agents(project_root)


# --- MCP Server creation ---

_PROJECT_ROOT_PROPERTY: dict[str, str] = {
    "type": "string",
    "description": "Root directory of the project (optional, defaults to current directory)",
}

_TOOLS = [
    mcp.Tool(
        name="get_cursor_rules",
        description="Get applicable Cursor rules for a specific file or directory",
        inputSchema={
            "type": "object",
            "properties": {
                "filePath": {
                    "type": "string",
                    "description": "Path to the file to get rules for",
                },
                "projectRoot": _PROJECT_ROOT_PROPERTY,
            },
            "required": ["filePath"],
        },
    ),
    mcp.Tool(
        name="load_cursor_rules",
        description="Load and cache all Cursor rules from .cursor/rules directory",
        inputSchema={
            "type": "object",
            "properties": {"projectRoot": _PROJECT_ROOT_PROPERTY},
        },
    ),
    mcp.Tool(
        name="list_cursor_rules",
        description="List all available Cursor rules files",
        inputSchema={
            "type": "object",
            "properties": {"projectRoot": _PROJECT_ROOT_PROPERTY},
        },
    ),
    mcp.Tool(
        name="get_agents",
        description="Get AGENTS.md content for the current project",
        inputSchema={
            "type": "object",
            "properties": {"projectRoot": _PROJECT_ROOT_PROPERTY},
        },
    ),
    mcp.Tool(
        name="load_agents",
        description="Load and cache AGENTS.md file from project root",
        inputSchema={
            "type": "object",
            "properties": {"projectRoot": _PROJECT_ROOT_PROPERTY},
        },
    ),
    mcp.Tool(
        name="clear_cursor_rules_cache",
        description=(
            "Forget cached Cursor rules for a project. "
            "Omit projectRoot to clear every project."
        ),
        inputSchema={
            "type": "object",
            "properties": {"projectRoot": _PROJECT_ROOT_PROPERTY},
        },
    ),
    mcp.Tool(
        name="clear_agents_cache",
        description=(
            "Forget the cached AGENTS.md for a project. "
            "Omit projectRoot to clear every project."
        ),
        inputSchema={
            "type": "object",
            "properties": {"projectRoot": _PROJECT_ROOT_PROPERTY},
        },
    ),
]


def create_server(
    config: ServerConfig | None = None,
    *,
    rules: CursorRulesService | None = None,
    agents: AgentsService | None = None,
) -> Server:
    """Create and configure the MCP server."""
    config = config or ServerConfig()
    rules = rules or CursorRulesService(config)
    agents = agents or AgentsService(config)

    server = Server(
        name="agent-rules",
        version=__version__,
        instructions="Agent Rules: Cursor rules and AGENTS.md guidance for the files you edit.",
    )

    @server.list_tools()  # type: ignore[no-untyped-call,untyped-decorator]
    async def _list_tools() -> list[mcp.Tool]:
        return _TOOLS

    @server.call_tool()  # type: ignore[untyped-decorator]
    async def _call_tool(
        name: str,
        arguments: dict[str, Any] | None,
    ) -> list[TextContent]:
        logger.debug("Tool call %s(%s)", name, arguments)
        text, failed = await _dispatch_tool(name, arguments or {}, rules=rules, agents=agents)
        if failed:
            # The SDK reports a raised exception as an ``isError`` result.
            raise ToolError(text)
        return [TextContent(type="text", text=text)]

    return server


async def _dispatch_tool(
    name: str,
    args: dict[str, Any],
    *,
    rules: CursorRulesService,
    agents: AgentsService,
) -> tuple[str, bool]:
    """Route tool call to the appropriate handler.

    Returns the text to show and whether the call failed.
    """
    project_root = args.get("projectRoot")

    if name == "load_cursor_rules":
        result = await handle_load_cursor_rules(rules, project_root)
        return result.message, result.error
    if name == "get_cursor_rules":
        result = await handle_get_cursor_rules(
            rules,
            file_path=args.get("filePath"),
            project_root=project_root,
        )
        return result.message, result.error
    if name == "list_cursor_rules":
        return handle_list_cursor_rules(rules, project_root), False

    if name == "load_agents":
        agent_result = await handle_load_agents(agents, project_root)
        return agent_result.message, agent_result.error
    if name == "get_agents":
        agent_result = await handle_get_agents(agents, project_root)
        return agent_result.message, agent_result.error

    if name == "clear_cursor_rules_cache":
        rules.clear_cache(project_root)
        return _cleared_message("Cursor rules", project_root), False
    if name == "clear_agents_cache":
        agents.clear_cache(project_root)
        return _cleared_message("AGENTS.md", project_root), False

    msg = f"Unknown tool: {name}"
    raise ValueError(msg)


def _cleared_message(what: str, project_root: str | None) -> str:
    if project_root:
        return f"Cleared cached {what} for {project_root}"
    return f"Cleared cached {what} for all projects"
