"""File processing for comment generation.

Parses each file once, documents every function that lacks a leading
comment and writes the result in place, to an output directory, or
nowhere at all in dry-run mode.
"""
import glob
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import sentry_sdk

from code_commenter.constants import CommentTemplates, FilePatterns, LargeFileDefaults, ParallelProcessing
from code_commenter.core.exceptions import CodeCommenterError, FileProcessingError, SourceParseError
from code_commenter.core.logging import get_logger, get_null_logger
from code_commenter.features.commenting.comment_detection import has_leading_doc_comment
from code_commenter.features.commenting.renderer import generate_function_doc
from code_commenter.features.commenting.syntax_tree import parse_source
from code_commenter.models.config import CommenterConfig
from code_commenter.models.documentation import (
    BatchProcessingResult,
    FileProcessingResult,
    FunctionDocRequest,
    GeneratedComment,
    SourceDocumentationResult,
)
from code_commenter.models.syntax import SourceLanguage, SourceLocation, detect_language
from code_commenter.utils.text import get_indentation, indent_lines, is_line_start

# =============================================================================
# Source documentation
# =============================================================================


def document_source(
    source: str,
    language: SourceLanguage = SourceLanguage.JAVASCRIPT,
    config: Optional[CommenterConfig] = None,
    logger: Any = None,
    file_path: str = "<string>",
) -> SourceDocumentationResult:
    """Insert generated comments before every undocumented function.

    Args:
        source: Source text
        language: Source language
        config: Settings (defaults when None)
        logger: Optional structlog logger
        file_path: Name used in error messages

    Returns:
        SourceDocumentationResult with the new source text

    Raises:
        SourceParseError: If the source has syntax errors and ``strict`` is set
    """
    log = logger or get_null_logger()
    config = config or CommenterConfig()
    parsed = parse_source(source, language, log)

    if parsed.syntax_errors:
        first = parsed.syntax_errors[0]
        log.warning(
            "syntax_errors_found",
            file_path=file_path,
            count=len(parsed.syntax_errors),
            line=first.line,
            column=first.column,
        )
        if config.strict:
            raise SourceParseError(file_path, first.line, first.column, first.message)

    options = config.to_doc_options(language.is_typed)
    insertions: List[Tuple[SourceLocation, str]] = []
    comments: List[GeneratedComment] = []
    seen_offsets = set()

    for site in parsed.functions:
        if site.anchor.start_offset in seen_offsets:
            continue
        seen_offsets.add(site.anchor.start_offset)

        if has_leading_doc_comment(site, source):
            log.debug("function_already_documented", function=site.name, line=site.anchor.start_line)
            continue

        comment = ""
        if not site.function.has_syntax_error:
            request = FunctionDocRequest(node=site.function, source_text=source, function_name=site.name, options=options)
            comment = generate_function_doc(request, log)
        fallback = not comment
        if fallback:
            comment = CommentTemplates.FALLBACK_COMMENT

        insertions.append((site.anchor, comment))
        comments.append(
            GeneratedComment(function_name=site.name, line_number=site.anchor.start_line, comment=comment, fallback=fallback)
        )
        log.debug("function_documented", function=site.name, line=site.anchor.start_line, fallback=fallback)

    new_source = insert_comments(source, insertions)
    warned = False
    if comments and _is_large(source, config) and not _has_large_file_warning(source):
        new_source = _prepend_warning(new_source)
        warned = True
        log.warning("large_file_warning_added", file_path=file_path, lines=source.count("\n") + 1)

    return SourceDocumentationResult(
        source=new_source,
        comments=comments,
        syntax_errors=parsed.syntax_errors,
        large_file_warning=warned,
    )


def insert_comments(source: str, insertions: Sequence[Tuple[SourceLocation, str]]) -> str:
    """Insert comments before their anchors, matching the anchor line's indentation.

    Insertions are applied from the end of the text backwards so earlier
    offsets stay valid.

    Args:
        source: Original source text
        insertions: (anchor location, comment text) pairs

    Returns:
        Source text with comments inserted
    """
    result = source
    for anchor, comment in sorted(insertions, key=lambda item: item[0].start_offset, reverse=True):
        offset = anchor.start_offset
        indent = get_indentation(source, anchor.start_line)
        if is_line_start(source, offset):
            line_start = source.rfind("\n", 0, offset) + 1
            block = indent_lines(comment, indent) + "\n"
            result = result[:line_start] + block + result[line_start:]
        else:
            block = "\n" + indent_lines(comment, indent) + "\n" + indent
            result = result[:offset] + block + result[offset:]
    return result


def _is_large(source: str, config: CommenterConfig) -> bool:
    line_count = source.count("\n") + 1
    return (
        line_count > config.large_file_line_threshold
        or len(source.encode("utf-8")) > config.large_file_byte_threshold
    )


def _has_large_file_warning(source: str) -> bool:
    return LargeFileDefaults.WARNING_COMMENT.strip() in source.split("\n", 2)[:2]


def _prepend_warning(source: str) -> str:
    if source.startswith("#!"):
        first_line, _, rest = source.partition("\n")
        return first_line + "\n" + LargeFileDefaults.WARNING_COMMENT + rest
    return LargeFileDefaults.WARNING_COMMENT + source


# =============================================================================
# Files
# =============================================================================


def process_file(file_path: str, config: Optional[CommenterConfig] = None, logger: Any = None) -> FileProcessingResult:
    """Document one file.

    Args:
        file_path: Path to a JavaScript or TypeScript file
        config: Settings (defaults when None)
        logger: Optional structlog logger

    Returns:
        FileProcessingResult; failures are reported through ``error``
    """
    log = logger or get_logger("processor")
    config = config or CommenterConfig()
    log.info("file_processing_started", file_path=file_path, dry_run=config.dry_run)

    try:
        source = _read_source(file_path)
        if not source.strip():
            log.info("file_skipped", file_path=file_path, reason="empty")
            return FileProcessingResult(file_path=file_path, skipped=True, dry_run=config.dry_run)

        result = document_source(source, detect_language(file_path), config, log, file_path=file_path)
        if not result.comments:
            log.info("file_skipped", file_path=file_path, reason="no_changes_needed")
            return FileProcessingResult(file_path=file_path, skipped=True, dry_run=config.dry_run)

        output_path = _output_path(file_path, config)
        if config.dry_run:
            preview: Optional[str] = result.source
        else:
            preview = None
            _write_output(output_path, result.source)
    except CodeCommenterError as e:
        log.error("file_processing_failed", file_path=file_path, error=str(e))
        return FileProcessingResult(file_path=file_path, error=str(e), dry_run=config.dry_run)

    log.info(
        "file_processing_completed",
        file_path=file_path,
        output_path=output_path,
        comments_added=result.comments_added,
    )
    return FileProcessingResult(
        file_path=file_path,
        output_path=output_path,
        comments_added=result.comments_added,
        dry_run=config.dry_run,
        preview=preview,
        comments=result.comments,
    )


def process_files(patterns: Sequence[str], config: Optional[CommenterConfig] = None, logger: Any = None) -> BatchProcessingResult:
    """Document every file matching the given glob patterns.

    Args:
        patterns: File paths or glob patterns (``**`` is recursive)
        config: Settings (defaults when None)
        logger: Optional structlog logger

    Returns:
        BatchProcessingResult with per-file results in discovery order
    """
    log = logger or get_logger("processor")
    config = config or CommenterConfig()
    files = discover_files(patterns)
    batch = BatchProcessingResult()

    if not files:
        log.error("no_files_found", patterns=list(patterns))
        batch.errors = 1
        batch.messages.append("No files found matching the patterns")
        return batch

    workers = config.workers if config.workers > 0 else ParallelProcessing.get_optimal_workers(0)
    log.info("batch_processing_started", files=len(files), workers=workers)

    def _process(path: str) -> FileProcessingResult:
        try:
            return process_file(path, config, log)
        except Exception as e:
            log.error("file_processing_crashed", file_path=path, error=str(e))
            sentry_sdk.capture_exception(e)
            return FileProcessingResult(file_path=path, error=f"Error processing {path}: {e}")

    if workers == 1 or not config.continue_on_error:
        for path in files:
            result = _process(path)
            _tally(batch, result)
            if result.error and not config.continue_on_error:
                log.warning("batch_processing_stopped", file_path=path)
                break
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            for result in executor.map(_process, files):
                _tally(batch, result)

    log.info(
        "batch_processing_completed",
        processed=batch.processed,
        skipped=batch.skipped,
        errors=batch.errors,
    )
    return batch


def discover_files(patterns: Sequence[str]) -> List[str]:
    """Expand paths and glob patterns into a de-duplicated file list.

    Files inside ``node_modules`` or ``.git`` directories are ignored.
    Order follows the patterns; matches of one pattern are sorted.
    """
    found: List[str] = []
    seen = set()
    for pattern in patterns:
        matches = [pattern] if os.path.isfile(pattern) else sorted(glob.glob(pattern, recursive=True))
        for match in matches:
            if not os.path.isfile(match) or _is_excluded(match):
                continue
            key = os.path.normpath(os.path.abspath(match))
            if key in seen:
                continue
            seen.add(key)
            found.append(match)
    return found


def _is_excluded(path: str) -> bool:
    parts = Path(path).parts
    return any(part in FilePatterns.EXCLUDED_DIRS for part in parts)


def _tally(batch: BatchProcessingResult, result: FileProcessingResult) -> None:
    batch.results.append(result)
    if result.error:
        batch.errors += 1
    elif result.skipped:
        batch.skipped += 1
    else:
        batch.processed += 1


def _read_source(file_path: str) -> str:
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileProcessingError(file_path, "File not found", e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise FileProcessingError(file_path, f"Failed to read file: {e}", e) from e


def _output_path(file_path: str, config: CommenterConfig) -> str:
    if config.output:
        return os.path.join(config.output, os.path.basename(file_path))
    return file_path


def _write_output(output_path: str, text: str) -> None:
    try:
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        Path(output_path).write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileProcessingError(output_path, f"Failed to write file: {e}", e) from e
