"""Shared constants across the code-commenter codebase.

This module centralizes thresholds, file patterns and fixed comment
text so the processor, CLI and MCP tools agree on them.
"""
import os


class ParallelProcessing:
    """Parallel processing configuration."""

    DEFAULT_WORKERS = 1
    MAX_WORKERS = 16

    @staticmethod
    def get_optimal_workers(max_threads: int = 0) -> int:
        """Calculate optimal worker count based on CPU cores.

        Args:
            max_threads: Maximum threads to use (0 = auto-detect)

        Returns:
            Optimal number of worker threads (1 to MAX_WORKERS)
        """
        if max_threads > 0:
            return min(max_threads, ParallelProcessing.MAX_WORKERS)

        cpu_count = os.cpu_count() or 4
        # Reserve 1 core for system, cap at MAX_WORKERS
        return max(1, min(cpu_count - 1, ParallelProcessing.MAX_WORKERS))


class FilePatterns:
    """File discovery patterns."""

    EXCLUDED_DIRS = frozenset({"node_modules", ".git"})

    JAVASCRIPT_EXTENSIONS = (".js", ".mjs", ".cjs", ".jsx")
    TYPESCRIPT_EXTENSIONS = (".ts", ".mts", ".cts")
    TSX_EXTENSIONS = (".tsx",)

    CONFIG_FILE_NAMES = (
        "code-commenter.config.json",
        "code-commenter.config.yaml",
        "code-commenter.config.yml",
    )


class LargeFileDefaults:
    """Thresholds above which a source file is considered large."""

    LINE_THRESHOLD = 5000
    BYTE_THRESHOLD = 500 * 1024  # 500 KB

    WARNING_COMMENT = (
        "// WARNING: This file is very large. Generated documentation may be incomplete; please review it manually.\n"
    )


class CommentTemplates:
    """Fixed text used when rendering documentation blocks."""

    DEFAULT_TODO = "TODO: Document what {name} does"
    PLACEHOLDER_SUMMARY = "Auto-generated description. Please review and document this function manually."
    PARSE_FAILURE = "Parsing failed for this function. Please check manually."
    FALLBACK_COMMENT = "/**\n * " + PARSE_FAILURE + "\n */"
    UNKNOWN_TYPE_SUFFIX = " (Type could not be inferred)"
    RETURN_DESCRIPTION = "The return value"
    ANONYMOUS_CALLEE = "anonymous"


class LoggingDefaults:
    """Logging configuration defaults."""

    DEFAULT_LEVEL = "INFO"
    DEBUG_LEVEL = "DEBUG"
    LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
