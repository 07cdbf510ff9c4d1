"""Syntax node models produced by the tree-sitter provider.

The provider converts tree-sitter's concrete syntax tree into this closed
set of dataclasses. Extraction, type inference and return inference
dispatch on these classes with ``isinstance`` instead of node-type strings.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

from code_commenter.constants import FilePatterns


class SourceLanguage(Enum):
    """Source languages understood by the provider."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    TSX = "tsx"

    @property
    def is_typed(self) -> bool:
        return self is not SourceLanguage.JAVASCRIPT

    @classmethod
    def from_name(cls, name: str) -> "SourceLanguage":
        """Resolve a language name such as ``"ts"`` or ``"javascript"``.

        Raises:
            ValueError: If the name is not a supported language
        """
        aliases = {
            "js": cls.JAVASCRIPT,
            "jsx": cls.JAVASCRIPT,
            "javascript": cls.JAVASCRIPT,
            "ts": cls.TYPESCRIPT,
            "typescript": cls.TYPESCRIPT,
            "tsx": cls.TSX,
        }
        try:
            return aliases[name.strip().lower()]
        except KeyError:
            raise ValueError(f"Unsupported language: {name}") from None


def detect_language(file_path: str) -> SourceLanguage:
    """Pick the source language from a file extension.

    Unknown extensions are treated as JavaScript.
    """
    lowered = file_path.lower()
    if lowered.endswith(FilePatterns.TSX_EXTENSIONS):
        return SourceLanguage.TSX
    if lowered.endswith(FilePatterns.TYPESCRIPT_EXTENSIONS):
        return SourceLanguage.TYPESCRIPT
    return SourceLanguage.JAVASCRIPT


@dataclass
class SourceLocation:
    """Start position of a node.

    Attributes:
        start_line: 1-indexed line number
        start_column: 0-indexed column (characters)
        start_offset: Character offset into the source text
        end_offset: Character offset just past the node
    """

    start_line: int
    start_column: int = 0
    start_offset: int = 0
    end_offset: int = 0


# =============================================================================
# Type nodes
# =============================================================================


@dataclass
class KeywordType:
    """A predefined type keyword such as ``string`` or ``void``."""

    keyword: str


@dataclass
class ArrayType:
    """``T[]`` array type."""

    element: "TypeNode"


@dataclass
class TypeReference:
    """A named type, possibly qualified (``ns.Name``) or generic."""

    name: str
    type_arguments: List["TypeNode"] = field(default_factory=list)


@dataclass
class UnionType:
    members: List["TypeNode"]


@dataclass
class IntersectionType:
    members: List["TypeNode"]


@dataclass
class LiteralType:
    """A literal type such as ``'a'`` or ``42``.

    Attributes:
        value_type: Runtime type of the literal (string, number, boolean, ...)
    """

    value_type: str


@dataclass
class OpaqueType:
    """Any type syntax the provider does not model."""

    text: str


TypeNode = Union[KeywordType, ArrayType, TypeReference, UnionType, IntersectionType, LiteralType, OpaqueType]


# =============================================================================
# Expressions
# =============================================================================


class ExpressionKind(Enum):
    """Syntactic shape of an expression."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"
    UNDEFINED = "undefined"
    REGEX = "regex"
    TEMPLATE = "template"
    ARRAY = "array"
    OBJECT = "object"
    IDENTIFIER = "identifier"
    OTHER = "other"


@dataclass
class ObjectMember:
    """One member of an object literal.

    Attributes:
        key: Property key text (None for spreads and computed keys)
        value: Property value (None for methods)
        shorthand: True for ``{ a }`` style members
        spread: True for ``{ ...rest }`` members
    """

    key: Optional[str]
    value: Optional["Expression"]
    shorthand: bool = False
    spread: bool = False


@dataclass
class Expression:
    """An expression with its literal value and nested members when known.

    Attributes:
        kind: Syntactic shape
        text: Original source text
        value: Decoded literal value for numbers, strings and booleans
        elements: Array literal elements (None for holes)
        properties: Object literal members
    """

    kind: ExpressionKind
    text: str
    value: Any = None
    elements: List[Optional["Expression"]] = field(default_factory=list)
    properties: List[ObjectMember] = field(default_factory=list)

    @property
    def is_literal(self) -> bool:
        return self.kind in (
            ExpressionKind.NUMBER,
            ExpressionKind.STRING,
            ExpressionKind.BOOLEAN,
            ExpressionKind.NULL,
            ExpressionKind.REGEX,
        )


# =============================================================================
# Patterns
# =============================================================================


@dataclass
class Identifier:
    """A plain binding name, optionally annotated."""

    name: str
    type_annotation: Optional[TypeNode] = None
    optional: bool = False


@dataclass
class AssignmentPattern:
    """``left = right`` default value binding."""

    left: "Pattern"
    right: Expression


@dataclass
class PatternProperty:
    """One ``key: value`` entry of an object pattern.

    Attributes:
        key: Property name
        value: Bound pattern
        shorthand: True for ``{ a }`` and ``{ a = 1 }`` entries
    """

    key: str
    value: "Pattern"
    shorthand: bool = False


@dataclass
class RestElement:
    """``...argument`` binding."""

    argument: "Pattern"
    type_annotation: Optional[TypeNode] = None


@dataclass
class ObjectPattern:
    properties: List[Union[PatternProperty, RestElement]] = field(default_factory=list)
    type_annotation: Optional[TypeNode] = None
    optional: bool = False


@dataclass
class ArrayPattern:
    """Array destructuring; holes are ``None`` entries."""

    elements: List[Optional["Pattern"]] = field(default_factory=list)
    type_annotation: Optional[TypeNode] = None
    optional: bool = False


@dataclass
class ParameterProperty:
    """Constructor parameter declared with an access modifier or ``readonly``."""

    parameter: "Pattern"
    accessibility: Optional[str] = None
    readonly: bool = False


@dataclass
class UnsupportedPattern:
    """Pattern syntax the provider does not model."""

    text: str


Pattern = Union[
    Identifier,
    AssignmentPattern,
    ObjectPattern,
    ArrayPattern,
    RestElement,
    ParameterProperty,
    UnsupportedPattern,
]


# =============================================================================
# Functions
# =============================================================================


class FunctionType(Enum):
    """Kinds of function-like nodes."""

    DECLARATION = "FunctionDeclaration"
    EXPRESSION = "FunctionExpression"
    ARROW = "ArrowFunctionExpression"
    METHOD = "MethodDefinition"


@dataclass
class BlockBody:
    """A ``{ ... }`` function body.

    Attributes:
        return_values: Values of ``return`` statements that carry one, in
            source order, excluding nested functions and classes
    """

    return_values: List[Expression] = field(default_factory=list)


@dataclass
class FunctionNode:
    """A function-like node.

    Attributes:
        type: Kind of function
        params: Formal parameter patterns in order
        body: Block body, or the expression of a concise arrow body
        id: Own name, if the syntax carries one
        is_async: Declared ``async``
        is_generator: Declared with ``*``
        return_type: Return type annotation (typed languages)
        method_kind: ``method``, ``constructor``, ``get`` or ``set`` for methods
        loc: Start location of the function itself
        has_syntax_error: True when the function's subtree contains a parse error
    """

    type: FunctionType
    params: List[Pattern] = field(default_factory=list)
    body: Union[BlockBody, Expression, None] = None
    id: Optional[str] = None
    is_async: bool = False
    is_generator: bool = False
    return_type: Optional[TypeNode] = None
    method_kind: Optional[str] = None
    loc: Optional[SourceLocation] = None
    has_syntax_error: bool = False


@dataclass
class FunctionSite:
    """A function together with the place its comment belongs.

    Attributes:
        function: The function node
        name: Display name ("get value", "handler", ...) or None when anonymous
        anchor: Location of the enclosing statement, export or property
    """

    function: FunctionNode
    name: Optional[str]
    anchor: SourceLocation

    @property
    def loc(self) -> SourceLocation:
        return self.anchor


@dataclass
class SyntaxIssue:
    """A parse error reported by tree-sitter.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        message: Short description
    """

    line: int
    column: int
    message: str


@dataclass
class ParsedSource:
    """Result of parsing one source text."""

    language: SourceLanguage
    functions: List[FunctionSite] = field(default_factory=list)
    syntax_errors: List[SyntaxIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.syntax_errors)
