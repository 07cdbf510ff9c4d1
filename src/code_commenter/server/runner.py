"""MCP server entry point."""

import sys

from mcp.server.fastmcp import FastMCP

from code_commenter.core.config import parse_server_args
from code_commenter.core.exceptions import ConfigurationError
from code_commenter.core.sentry import init_sentry
from code_commenter.server.registry import register_all_tools

# Create FastMCP instance
mcp = FastMCP("code-commenter")


def run_mcp_server() -> None:
    """Run the MCP server.

    This function:
    1. Parses command-line arguments and loads configuration
    2. Initializes Sentry error tracking (if configured)
    3. Registers all MCP tools
    4. Starts the MCP server with stdio transport
    """
    try:
        parse_server_args()
    except ConfigurationError:
        sys.exit(1)
    init_sentry()
    register_all_tools(mcp)
    mcp.run(transport="stdio")
