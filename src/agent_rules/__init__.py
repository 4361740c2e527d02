"""Agent Rules - MCP server for Cursor rules and AGENTS.md guidance."""

__version__ = "1.0.0"
