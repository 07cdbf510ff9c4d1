"""Core infrastructure for code-commenter."""

from code_commenter.core.config import (
    get_server_config,
    load_config,
    parse_server_args,
    validate_config_file,
)
from code_commenter.core.exceptions import (
    CodeCommenterError,
    ConfigurationError,
    FileProcessingError,
    SourceParseError,
)
from code_commenter.core.logging import configure_logging, get_logger, get_null_logger
from code_commenter.core.sentry import init_sentry

__all__ = [
    # config
    "get_server_config",
    "load_config",
    "parse_server_args",
    "validate_config_file",
    # exceptions
    "CodeCommenterError",
    "ConfigurationError",
    "FileProcessingError",
    "SourceParseError",
    # logging
    "configure_logging",
    "get_logger",
    "get_null_logger",
    # sentry
    "init_sentry",
]
