"""Services: rule and agent document loading, MCP server."""
