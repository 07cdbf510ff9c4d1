"""Configuration management for code-commenter."""

import argparse
import os
from typing import Any, Dict, Optional

import yaml

from code_commenter.constants import FilePatterns, LoggingDefaults
from code_commenter.core.exceptions import ConfigurationError
from code_commenter.core.logging import configure_logging, get_logger
from code_commenter.models.config import CommenterConfig

CONFIG_ENV_VAR = "CODE_COMMENTER_CONFIG"

# Effective server configuration (set by parse_server_args)
SERVER_CONFIG: Optional[CommenterConfig] = None


def validate_config_file(config_path: str) -> CommenterConfig:
    """Validate a code-commenter config file.

    JSON files are read with the YAML loader, which accepts them as-is.

    Args:
        config_path: Path to a ``code-commenter.config.{json,yaml,yml}`` file

    Returns:
        Validated CommenterConfig model

    Raises:
        ConfigurationError: If config file is invalid
    """
    if not os.path.exists(config_path):
        raise ConfigurationError(config_path, "File does not exist")

    if not os.path.isfile(config_path):
        raise ConfigurationError(config_path, "Path is not a file")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(config_path, f"Parsing failed: {e}") from e
    except OSError as e:
        raise ConfigurationError(config_path, f"Failed to read file: {e}") from e

    if config_data is None:
        raise ConfigurationError(config_path, "Config file is empty")

    if not isinstance(config_data, dict):
        raise ConfigurationError(config_path, "Config must be a mapping")

    try:
        return CommenterConfig.model_validate(config_data)
    except Exception as e:
        raise ConfigurationError(config_path, f"Validation failed: {e}") from e


def find_config_file(search_dir: Optional[str] = None) -> Optional[str]:
    """Find a config file in a directory.

    Args:
        search_dir: Directory to search (current directory by default)

    Returns:
        Path of the first config file found, or None
    """
    directory = search_dir or os.getcwd()
    for name in FilePatterns.CONFIG_FILE_NAMES:
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            return candidate
    return None


def resolve_config_path(explicit_path: Optional[str] = None, search_dir: Optional[str] = None) -> Optional[str]:
    """Resolve which config file to use.

    Precedence: explicit path > CODE_COMMENTER_CONFIG env > discovered file > None
    """
    if explicit_path:
        return explicit_path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path
    return find_config_file(search_dir)


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    search_dir: Optional[str] = None,
) -> CommenterConfig:
    """Build the effective configuration.

    Precedence: overrides (CLI flags) > config file > defaults. Overrides
    whose value is None are ignored.

    Args:
        config_path: Explicit config file path
        overrides: Field values keyed by snake_case name
        search_dir: Directory searched for a config file

    Returns:
        Effective CommenterConfig

    Raises:
        ConfigurationError: If the config file or an override is invalid
    """
    logger = get_logger("config")
    path = resolve_config_path(config_path, search_dir)
    config = validate_config_file(path) if path else CommenterConfig()
    if path:
        logger.info("config_loaded", config_path=path)

    if overrides:
        try:
            config = config.merged_with(overrides)
        except Exception as e:
            raise ConfigurationError(path or "<command line>", f"Validation failed: {e}") from e
    return config


def configure_logging_from_args(args: argparse.Namespace) -> None:
    """Configure logging based on command-line arguments and environment.

    Precedence: --debug > --log-level/--log-file flags > env vars > defaults

    Args:
        args: Parsed command-line arguments.
    """
    if getattr(args, "debug", False):
        log_level = LoggingDefaults.DEBUG_LEVEL
    else:
        log_level = getattr(args, "log_level", None) or os.environ.get("LOG_LEVEL", LoggingDefaults.DEFAULT_LEVEL)

    log_file = getattr(args, "log_file", None) or os.environ.get("LOG_FILE")

    configure_logging(log_level=log_level, log_file=log_file)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the --config, --log-level and --log-file options to a parser."""
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help=f"Path to a code-commenter config file. Can also be set via {CONFIG_ENV_VAR} env var.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=LoggingDefaults.LEVELS,
        default=None,
        metavar="LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Can also be set via LOG_LEVEL env var. Default: INFO",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        default=None,
        help="Path to log file (logs to stderr by default). Can also be set via LOG_FILE env var.",
    )


def _create_server_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the MCP server."""
    parser = argparse.ArgumentParser(
        prog="code-commenter-mcp",
        description="code-commenter MCP Server - Generates JSDoc comments via Model Context Protocol",
        epilog=f"""
environment variables:
  {CONFIG_ENV_VAR}  Path to a config file (overridden by --config flag)
  LOG_LEVEL              Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)
  LOG_FILE               Path to log file (logs to stderr by default)
  SENTRY_DSN             Enables error tracking when set
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_common_arguments(parser)
    return parser


def parse_server_args(argv: Optional[list] = None) -> CommenterConfig:
    """Parse MCP server arguments, configure logging and load the config.

    Args:
        argv: Argument list (sys.argv[1:] when None)

    Returns:
        Effective CommenterConfig

    Raises:
        ConfigurationError: If the config file is invalid
    """
    global SERVER_CONFIG

    args = _create_server_argument_parser().parse_args(argv)
    configure_logging_from_args(args)
    try:
        SERVER_CONFIG = load_config(args.config)
        return SERVER_CONFIG
    except ConfigurationError as e:
        logger = get_logger("config")
        logger.error("config_validation_failed", config_path=e.config_path, error=str(e))
        raise


def get_server_config() -> CommenterConfig:
    """Return the server configuration, or defaults before parse_server_args runs."""
    return SERVER_CONFIG if SERVER_CONFIG is not None else CommenterConfig()
