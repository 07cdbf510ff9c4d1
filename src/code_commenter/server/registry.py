"""Central tool registration for MCP server."""

from mcp.server.fastmcp import FastMCP

from code_commenter.features.commenting.tools import register_commenting_tools


def register_all_tools(mcp: FastMCP) -> None:
    """Register all MCP tools.

    Tools:
    1. comment_functions - comment undocumented functions in project files
    2. document_code - comment undocumented functions in a snippet
    """
    register_commenting_tools(mcp)
