"""Tests for agent_rules.services.mcp_server — MCP tool handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from mcp.types import CallToolRequest, CallToolRequestParams, CallToolResult

from agent_rules.config import ServerConfig
from agent_rules.services.agents import AgentsService
from agent_rules.services.cursor_rules import CursorRulesService
from agent_rules.services.mcp_server import (
    _TOOLS,
    _dispatch_tool,
    create_server,
    handle_get_cursor_rules,
    handle_list_cursor_rules,
)

if TYPE_CHECKING:
    from pathlib import Path

    from mcp.server import Server

pytestmark = pytest.mark.anyio


@pytest.fixture()
def services() -> dict[str, object]:
    return {"rules": CursorRulesService(), "agents": AgentsService()}


class TestMcpToolHandlers:
    """Test MCP tool handler functions directly (without transport)."""

    async def test_get_cursor_rules_requires_file_path(self) -> None:
        result = await handle_get_cursor_rules(CursorRulesService(), file_path=None)
        assert result.error is True
        assert result.message == "Error: filePath is required"

    async def test_list_before_load(self, tmp_path: Path) -> None:
        text = handle_list_cursor_rules(CursorRulesService(), str(tmp_path))
        assert text == "No Cursor rules found. Run load_cursor_rules first."

    async def test_list_after_load(self, tmp_project: Path) -> None:
        rules = CursorRulesService()
        await rules.load_rules(str(tmp_project))
        text = handle_list_cursor_rules(rules, str(tmp_project))
        assert text.startswith("Available Cursor Rules:")
        assert "**typescript.mdc**" in text


class TestDispatchTool:
    async def test_load_then_get(self, tmp_project: Path, services: dict) -> None:
        args = {"projectRoot": str(tmp_project)}
        text, failed = await _dispatch_tool("load_cursor_rules", args, **services)
        assert failed is False
        assert text.startswith("Loaded 3 rule files")

        text, failed = await _dispatch_tool(
            "get_cursor_rules",
            {**args, "filePath": str(tmp_project / "src" / "styles.css")},
            **services,
        )
        assert failed is False
        assert "Global rules (global.mdc)" in text
        assert "TypeScript rules" not in text

    async def test_load_missing_directory_fails(self, tmp_path: Path, services: dict) -> None:
        _, failed = await _dispatch_tool(
            "load_cursor_rules", {"projectRoot": str(tmp_path)}, **services
        )
        assert failed is True

    async def test_get_without_file_path_fails(self, services: dict) -> None:
        text, failed = await _dispatch_tool("get_cursor_rules", {}, **services)
        assert failed is True
        assert text == "Error: filePath is required"

    async def test_list_is_never_an_error(self, tmp_path: Path, services: dict) -> None:
        _, failed = await _dispatch_tool(
            "list_cursor_rules", {"projectRoot": str(tmp_path)}, **services
        )
        assert failed is False

    async def test_agents_tools(self, tmp_path: Path, services: dict) -> None:
        (tmp_path / "AGENTS.md").write_text("Be nice.", encoding="utf-8")
        args = {"projectRoot": str(tmp_path)}

        text, failed = await _dispatch_tool("load_agents", args, **services)
        assert failed is False
        assert "Agent rules and guidelines" in text

        text, failed = await _dispatch_tool("get_agents", args, **services)
        assert failed is False
        assert text.endswith("Be nice.")

    async def test_clear_caches(self, tmp_project: Path, services: dict) -> None:
        root = str(tmp_project)
        await _dispatch_tool("load_cursor_rules", {"projectRoot": root}, **services)

        text, failed = await _dispatch_tool(
            "clear_cursor_rules_cache", {"projectRoot": root}, **services
        )
        assert failed is False
        assert text == f"Cleared cached Cursor rules for {root}"
        assert services["rules"].get_cached_rules(root) == ()

        text, _ = await _dispatch_tool("clear_agents_cache", {}, **services)
        assert text == "Cleared cached AGENTS.md for all projects"

    async def test_unknown_tool(self, services: dict) -> None:
        with pytest.raises(ValueError, match="Unknown tool"):
            await _dispatch_tool("nonexistent", {}, **services)


class TestCreateServer:
    def test_tool_names(self) -> None:
        names = {tool.name for tool in _TOOLS}
        assert names == {
            "get_cursor_rules",
            "load_cursor_rules",
            "list_cursor_rules",
            "get_agents",
            "load_agents",
            "clear_cursor_rules_cache",
            "clear_agents_cache",
        }

    def test_get_cursor_rules_requires_file_path(self) -> None:
        tool = next(t for t in _TOOLS if t.name == "get_cursor_rules")
        assert tool.inputSchema["required"] == ["filePath"]

    def test_create_server(self, tmp_path: Path) -> None:
        server = create_server(ServerConfig(project_root=str(tmp_path)))
        assert server.name == "agent-rules"


class TestCallToolHandler:
    """Run tool calls through the registered MCP request handler."""

    async def _call(self, server: Server, name: str, arguments: dict) -> CallToolResult:
        handler = server.request_handlers[CallToolRequest]
        request = CallToolRequest(
            method="tools/call",
            params=CallToolRequestParams(name=name, arguments=arguments),
        )
        response = await handler(request)
        return response.root

    async def test_failure_is_reported_as_error(self, tmp_path: Path) -> None:
        server = create_server()
        result = await self._call(server, "load_cursor_rules", {"projectRoot": str(tmp_path)})
        assert result.isError is True
        expected_dir = tmp_path / ".cursor" / "rules"
        assert result.content[0].text == f"No .cursor/rules directory found at {expected_dir}"

    async def test_success_returns_text(self, tmp_project: Path) -> None:
        server = create_server()
        result = await self._call(server, "load_cursor_rules", {"projectRoot": str(tmp_project)})
        assert not result.isError
        assert result.content[0].text.startswith("Loaded 3 rule files")
