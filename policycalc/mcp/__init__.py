"""Policy Calc MCP server."""
