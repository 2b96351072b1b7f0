"""MCP tools and HTTP routes exposed by the server."""
