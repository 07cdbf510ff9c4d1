"""Custom exception classes for code-commenter."""

from typing import Optional


class CodeCommenterError(Exception):
    """Base exception for all code-commenter errors."""

    pass


class ConfigurationError(CodeCommenterError):
    """Raised when a code-commenter configuration file is invalid."""

    def __init__(self, config_path: str, message: str):
        self.config_path = config_path
        self.message = message
        super().__init__(f"Configuration error in '{config_path}': {message}")


class SourceParseError(CodeCommenterError):
    """Raised when a source file contains syntax errors and strict mode is on."""

    def __init__(self, file_path: str, line: int, column: int, message: str):
        self.file_path = file_path
        self.line = line
        self.column = column
        self.message = message
        super().__init__(f"Parsing failed for file: {file_path}\n{message} ({line}:{column})")


class FileProcessingError(CodeCommenterError):
    """Raised when a source file cannot be read or written."""

    def __init__(self, file_path: str, message: str, cause: Optional[Exception] = None):
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Error processing {file_path}: {message}")
