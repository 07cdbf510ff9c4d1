"""Data models for code-commenter."""

from code_commenter.models.config import CommenterConfig
from code_commenter.models.documentation import (
    BatchProcessingResult,
    DocOptions,
    FileProcessingResult,
    FunctionDocRequest,
    GeneratedComment,
    Parameter,
    SourceDocumentationResult,
)
from code_commenter.models.syntax import (
    ArrayPattern,
    ArrayType,
    AssignmentPattern,
    BlockBody,
    Expression,
    ExpressionKind,
    FunctionNode,
    FunctionSite,
    FunctionType,
    Identifier,
    IntersectionType,
    KeywordType,
    LiteralType,
    ObjectMember,
    ObjectPattern,
    OpaqueType,
    ParameterProperty,
    ParsedSource,
    PatternProperty,
    RestElement,
    SourceLanguage,
    SourceLocation,
    SyntaxIssue,
    TypeReference,
    UnionType,
    UnsupportedPattern,
    detect_language,
)

__all__ = [
    # config
    "CommenterConfig",
    # documentation
    "BatchProcessingResult",
    "DocOptions",
    "FileProcessingResult",
    "FunctionDocRequest",
    "GeneratedComment",
    "Parameter",
    "SourceDocumentationResult",
    # syntax
    "ArrayPattern",
    "ArrayType",
    "AssignmentPattern",
    "BlockBody",
    "Expression",
    "ExpressionKind",
    "FunctionNode",
    "FunctionSite",
    "FunctionType",
    "Identifier",
    "IntersectionType",
    "KeywordType",
    "LiteralType",
    "ObjectMember",
    "ObjectPattern",
    "OpaqueType",
    "ParameterProperty",
    "ParsedSource",
    "PatternProperty",
    "RestElement",
    "SourceLanguage",
    "SourceLocation",
    "SyntaxIssue",
    "TypeReference",
    "UnionType",
    "UnsupportedPattern",
    "detect_language",
]
