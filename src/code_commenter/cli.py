"""Command-line entry point: ``code-commenter [options] <files...>``."""

import argparse
import sys
from typing import Any, Dict, List, Optional

from code_commenter import __version__
from code_commenter.core.config import CONFIG_ENV_VAR, add_common_arguments, configure_logging_from_args, load_config
from code_commenter.core.exceptions import ConfigurationError
from code_commenter.core.logging import get_logger
from code_commenter.core.sentry import init_sentry
from code_commenter.features.commenting.processor import process_files
from code_commenter.models.documentation import BatchProcessingResult


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="code-commenter",
        description="Add JSDoc comments to undocumented JavaScript and TypeScript functions",
        epilog=f"""
examples:
  code-commenter "src/**/*.js"
  code-commenter --dry-run --example lib/util.ts
  code-commenter -o commented/ "src/**/*.{{js,ts}}"

environment variables:
  {CONFIG_ENV_VAR}  Path to a config file (overridden by --config flag)
  LOG_LEVEL              Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)
  LOG_FILE               Path to log file (logs to stderr by default)
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("files", nargs="+", metavar="files", help="Files or glob patterns to process")
    parser.add_argument("-o", "--output", metavar="DIR", default=None, help="Write results to DIR instead of in place")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--no-todo", dest="todo", action="store_const", const=False, default=None, help="Omit TODO lines")
    parser.add_argument(
        "--dry-run", dest="dry_run", action="store_const", const=True, default=None, help="Preview changes without writing"
    )
    parser.add_argument(
        "--example", dest="example", action="store_const", const=True, default=None, help="Add an @example line"
    )
    parser.add_argument(
        "--strict",
        dest="strict",
        action="store_const",
        const=True,
        default=None,
        help="Treat files with syntax errors as failures",
    )
    parser.add_argument(
        "--stop-on-error",
        dest="continue_on_error",
        action="store_const",
        const=False,
        default=None,
        help="Stop at the first file that fails",
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        default=None,
        help="Number of files processed concurrently (0 = auto, default: 1)",
    )
    add_common_arguments(parser)
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "output": args.output,
        "todo": args.todo,
        "dry_run": args.dry_run,
        "example": args.example,
        "strict": args.strict,
        "continue_on_error": args.continue_on_error,
        "workers": args.workers,
    }


def _report(batch: BatchProcessingResult, dry_run: bool) -> None:
    for message in batch.messages:
        print(f"Error: {message}", file=sys.stderr)

    for result in batch.results:
        if result.error:
            print(f"Error: {result.error}", file=sys.stderr)
        elif result.skipped:
            if dry_run:
                print("(no changes needed)")
        elif dry_run:
            print("(dry run)", result.file_path)
            print(result.preview)
        else:
            print(f"Added {result.comments_added} comment(s) to {result.output_path}")

    print(f"Processed: {batch.processed}, Skipped: {batch.skipped}, Errors: {batch.errors}")


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI.

    Args:
        argv: Argument list (sys.argv[1:] when None)

    Returns:
        Exit status: 0 on success, 1 on any error
    """
    parser = _create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging_from_args(args)
    init_sentry()
    logger = get_logger("cli")

    try:
        config = load_config(args.config, overrides=_overrides_from_args(args))
    except ConfigurationError as e:
        logger.error("config_validation_failed", config_path=e.config_path, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug("cli_config", config=config.model_dump())
    batch = process_files(args.files, config, logger)
    _report(batch, config.dry_run)
    return batch.exit_code


if __name__ == "__main__":
    sys.exit(main())
