"""JSDoc comment generation for JavaScript and TypeScript functions."""

from code_commenter.features.commenting.comment_detection import has_leading_doc_comment
from code_commenter.features.commenting.param_extractor import (
    ExtractionContext,
    extract_param,
    extract_params,
    serialize_default,
)
from code_commenter.features.commenting.processor import (
    discover_files,
    document_source,
    insert_comments,
    process_file,
    process_files,
)
from code_commenter.features.commenting.renderer import generate_function_doc, render
from code_commenter.features.commenting.return_inference import infer_return
from code_commenter.features.commenting.syntax_tree import parse_source
from code_commenter.features.commenting.type_inference import infer_type

__all__ = [
    "ExtractionContext",
    "discover_files",
    "document_source",
    "extract_param",
    "extract_params",
    "generate_function_doc",
    "has_leading_doc_comment",
    "infer_return",
    "infer_type",
    "insert_comments",
    "parse_source",
    "process_file",
    "process_files",
    "render",
    "serialize_default",
]
