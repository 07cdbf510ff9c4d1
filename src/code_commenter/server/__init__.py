"""MCP server for code-commenter."""
