"""Shared pytest fixtures for unit tests.

Provides a MockFastMCP stand-in so tool registration can be exercised
without starting an MCP server, plus direct access to registered tools.
"""

from typing import Any, Dict
from unittest.mock import patch

import pytest

from code_commenter.core import config as config_module


class MockFastMCP:
    """Mock FastMCP class for testing."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.tools: Dict[str, Any] = {}

    def tool(self, **kwargs: Any) -> Any:
        def decorator(func: Any) -> Any:
            self.tools[func.__name__] = func
            return func
        return decorator

    def run(self, **kwargs: Any) -> None:
        pass


def mock_field(*args: Any, **kwargs: Any) -> Any:
    """Mock pydantic Field function - accepts both positional and keyword args."""
    if args:
        return args[0]
    return kwargs.get("default")


@pytest.fixture
def mcp_server() -> MockFastMCP:
    """Register every tool on a MockFastMCP instance."""
    from code_commenter.server.registry import register_all_tools

    server = MockFastMCP("code-commenter-test")
    with patch("code_commenter.features.commenting.tools.Field", mock_field):
        register_all_tools(server)
    return server


@pytest.fixture
def reset_server_config():
    """Restore the global server configuration after a test."""
    original = config_module.SERVER_CONFIG
    yield
    config_module.SERVER_CONFIG = original
