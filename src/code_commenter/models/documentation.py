"""Data models for documentation generation."""

from dataclasses import dataclass, field
from typing import List, Optional

from code_commenter.models.syntax import FunctionNode, SyntaxIssue


@dataclass
class Parameter:
    """Normalized description of one function parameter.

    Attributes:
        name: Local binding name, or a synthetic ``param<N>`` for destructuring
        type: Display type (``string``, ``Array<T>``, ``Object``, ``any``, ...)
        is_rest: Bound through a rest element
        has_default: A default value expression exists
        default_value: Re-serialized default expression
        optional: Declared with ``?`` in a typed language
        is_param_property: Constructor parameter that also declares a field
        properties: Nested parameters of an object destructuring
        elements: Positional parameters of an array destructuring (None for holes)
        synthetic: The name was generated rather than taken from source
    """

    name: str
    type: str = "any"
    is_rest: bool = False
    has_default: bool = False
    default_value: Optional[str] = None
    optional: bool = False
    is_param_property: bool = False
    properties: Optional[List["Parameter"]] = None
    elements: Optional[List[Optional["Parameter"]]] = None
    synthetic: bool = False


@dataclass
class DocOptions:
    """Rendering options.

    Attributes:
        is_typed_language: Source is TypeScript
        include_example: Emit an ``@example`` call line
        include_todo_placeholder: Emit a TODO line inside the block
        todo_template: TODO text; ``{name}`` is replaced with the function name
        custom_summary_template: Summary text with ``{name}``, ``{params}`` and ``{count}``
        custom_param_section: Body template with ``{params}`` and ``{returns}``
    """

    is_typed_language: bool = False
    include_example: bool = False
    include_todo_placeholder: bool = False
    todo_template: Optional[str] = None
    custom_summary_template: Optional[str] = None
    custom_param_section: Optional[str] = None


@dataclass
class FunctionDocRequest:
    """Everything needed to document one function.

    Attributes:
        node: The function node
        source_text: Full source text of the enclosing file
        function_name: Display name, or None for anonymous functions
        options: Rendering options
    """

    node: FunctionNode
    source_text: str
    function_name: Optional[str] = None
    options: DocOptions = field(default_factory=DocOptions)


@dataclass
class GeneratedComment:
    """A comment produced for one function.

    Attributes:
        function_name: Display name of the documented function
        line_number: 1-indexed line the comment was inserted before
        comment: Rendered comment text (without indentation)
        fallback: True when the parse-failure comment was used
    """

    function_name: Optional[str]
    line_number: int
    comment: str
    fallback: bool = False


@dataclass
class SourceDocumentationResult:
    """Outcome of documenting one source text.

    Attributes:
        source: Source text with comments inserted
        comments: Comments that were generated
        syntax_errors: Parse errors found in the source
        large_file_warning: True when the large-file warning was prepended
    """

    source: str
    comments: List[GeneratedComment] = field(default_factory=list)
    syntax_errors: List[SyntaxIssue] = field(default_factory=list)
    large_file_warning: bool = False

    @property
    def comments_added(self) -> int:
        return len(self.comments)


@dataclass
class FileProcessingResult:
    """Outcome of processing one file.

    Attributes:
        file_path: Input file path
        output_path: Path written to (None when nothing was written)
        comments_added: Number of comments inserted
        skipped: File was empty or needed no changes
        error: Error message when processing failed
        dry_run: Changes were previewed rather than written
        preview: New source text in dry-run mode
        comments: Generated comments
    """

    file_path: str
    output_path: Optional[str] = None
    comments_added: int = 0
    skipped: bool = False
    error: Optional[str] = None
    dry_run: bool = False
    preview: Optional[str] = None
    comments: List[GeneratedComment] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 1 if self.error else 0


@dataclass
class BatchProcessingResult:
    """Aggregate outcome of processing many files.

    Attributes:
        processed: Files that received comments
        skipped: Files that were empty or needed no changes
        errors: Files that failed
        results: Per-file results in discovery order
        messages: Batch-level error messages (e.g. no files matched)
    """

    processed: int = 0
    skipped: int = 0
    errors: int = 0
    results: List[FileProcessingResult] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 1 if self.errors > 0 else 0
