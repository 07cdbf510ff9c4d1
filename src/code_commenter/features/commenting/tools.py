"""MCP tool definitions for comment generation.

This module registers MCP tools for:
- comment_functions: Add JSDoc comments to undocumented functions in project files
- document_code: Add JSDoc comments to a code snippet
"""

import os
import time
from typing import Any, Dict

import sentry_sdk
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from code_commenter.core.config import get_server_config
from code_commenter.core.logging import get_logger
from code_commenter.features.commenting.processor import document_source, process_files
from code_commenter.models.syntax import SourceLanguage

# =============================================================================
# Tool Implementations
# =============================================================================


def comment_functions_tool(
    project_folder: str,
    file_pattern: str,
    dry_run: bool = True,
    include_example: bool = False,
    include_todo: bool = True,
) -> Dict[str, Any]:
    """
    Add JSDoc comments to undocumented JavaScript/TypeScript functions.

    Functions that already have a comment on the line directly above them
    are left alone. Settings from the server's config file (templates,
    large-file thresholds, workers) apply; the arguments below override them.

    Args:
        project_folder: Root folder of the project (absolute path)
        file_pattern: Glob pattern for files to process (e.g., "src/**/*.ts")
        dry_run: If True, only preview changes without writing files
        include_example: If True, add an @example line to each comment
        include_todo: If True, add a TODO line to each comment

    Returns:
        Dictionary containing:
        - summary: processed / skipped / errors counts
        - files: per-file results with generated comments
        - previews: new file contents keyed by path (dry run only)
    """
    logger = get_logger("tool.comment_functions")
    start_time = time.time()

    logger.info(
        "tool_invoked",
        tool="comment_functions",
        project_folder=project_folder,
        file_pattern=file_pattern,
        dry_run=dry_run,
    )

    try:
        config = get_server_config().merged_with(
            {"dry_run": dry_run, "example": include_example, "todo": include_todo}
        )
        batch = process_files([os.path.join(project_folder, file_pattern)], config, logger)

        execution_time = time.time() - start_time
        logger.info(
            "tool_completed",
            tool="comment_functions",
            execution_time_seconds=round(execution_time, 3),
            processed=batch.processed,
            errors=batch.errors,
        )

        return {
            "summary": {
                "processed": batch.processed,
                "skipped": batch.skipped,
                "errors": batch.errors,
                "dry_run": dry_run,
            },
            "messages": batch.messages,
            "files": [
                {
                    "file_path": r.file_path,
                    "comments_added": r.comments_added,
                    "skipped": r.skipped,
                    "error": r.error,
                    "comments": [
                        {
                            "function_name": c.function_name,
                            "line_number": c.line_number,
                            "comment": c.comment,
                            "fallback": c.fallback,
                        }
                        for c in r.comments
                    ],
                }
                for r in batch.results
            ],
            "previews": {r.file_path: r.preview for r in batch.results if r.preview is not None},
        }

    except Exception as e:
        execution_time = time.time() - start_time
        logger.error(
            "tool_failed",
            tool="comment_functions",
            execution_time_seconds=round(execution_time, 3),
            error=str(e)[:200],
        )
        sentry_sdk.capture_exception(e)
        raise


def document_code_tool(
    code: str,
    language: str = "javascript",
    include_example: bool = False,
    include_todo: bool = False,
) -> Dict[str, Any]:
    """
    Add JSDoc comments to every undocumented function in a code snippet.

    Args:
        code: JavaScript or TypeScript source
        language: javascript, typescript or tsx
        include_example: If True, add an @example line to each comment
        include_todo: If True, add a TODO line to each comment

    Returns:
        Dictionary containing the commented code, the generated comments
        and any syntax errors found
    """
    logger = get_logger("tool.document_code")
    start_time = time.time()

    logger.info("tool_invoked", tool="document_code", language=language, code_length=len(code))

    try:
        source_language = SourceLanguage.from_name(language)
        config = get_server_config().merged_with({"example": include_example, "todo": include_todo, "strict": False})
        result = document_source(code, source_language, config, logger)

        execution_time = time.time() - start_time
        logger.info(
            "tool_completed",
            tool="document_code",
            execution_time_seconds=round(execution_time, 3),
            comments_added=result.comments_added,
        )

        return {
            "code": result.source,
            "comments_added": result.comments_added,
            "comments": [
                {"function_name": c.function_name, "line_number": c.line_number, "comment": c.comment}
                for c in result.comments
            ],
            "syntax_errors": [
                {"line": issue.line, "column": issue.column, "message": issue.message} for issue in result.syntax_errors
            ],
        }

    except Exception as e:
        execution_time = time.time() - start_time
        logger.error(
            "tool_failed",
            tool="document_code",
            execution_time_seconds=round(execution_time, 3),
            error=str(e)[:200],
        )
        sentry_sdk.capture_exception(e)
        raise


# =============================================================================
# MCP Registration
# =============================================================================


def _create_mcp_field_definitions() -> Dict[str, Dict[str, Any]]:
    """Create field definitions for MCP tool registration."""
    return {
        "comment_functions": {
            "project_folder": Field(description="Root folder of the project (absolute path)"),
            "file_pattern": Field(description="Glob pattern for files to process (e.g., 'src/**/*.js')"),
            "dry_run": Field(default=True, description="If True, only preview changes without writing files"),
            "include_example": Field(default=False, description="If True, add an @example line to each comment"),
            "include_todo": Field(default=True, description="If True, add a TODO line to each comment"),
        },
        "document_code": {
            "code": Field(description="JavaScript or TypeScript source code"),
            "language": Field(default="javascript", description="Source language (javascript, typescript, tsx)"),
            "include_example": Field(default=False, description="If True, add an @example line to each comment"),
            "include_todo": Field(default=False, description="If True, add a TODO line to each comment"),
        },
    }


def register_commenting_tools(mcp: FastMCP) -> None:
    """Register comment generation tools with MCP server.

    Args:
        mcp: FastMCP server instance
    """
    fields = _create_mcp_field_definitions()

    @mcp.tool()
    def comment_functions(
        project_folder: str = fields["comment_functions"]["project_folder"],
        file_pattern: str = fields["comment_functions"]["file_pattern"],
        dry_run: bool = fields["comment_functions"]["dry_run"],
        include_example: bool = fields["comment_functions"]["include_example"],
        include_todo: bool = fields["comment_functions"]["include_todo"],
    ) -> Dict[str, Any]:
        """Add JSDoc comments to undocumented functions in project files."""
        return comment_functions_tool(
            project_folder=project_folder,
            file_pattern=file_pattern,
            dry_run=dry_run,
            include_example=include_example,
            include_todo=include_todo,
        )

    @mcp.tool()
    def document_code(
        code: str = fields["document_code"]["code"],
        language: str = fields["document_code"]["language"],
        include_example: bool = fields["document_code"]["include_example"],
        include_todo: bool = fields["document_code"]["include_todo"],
    ) -> Dict[str, Any]:
        """Add JSDoc comments to a JavaScript or TypeScript snippet."""
        return document_code_tool(
            code=code,
            language=language,
            include_example=include_example,
            include_todo=include_todo,
        )
