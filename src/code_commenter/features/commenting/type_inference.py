"""Display type names for type annotations and literal values."""

from typing import Any, Optional

from code_commenter.models.syntax import (
    ArrayPattern,
    ArrayType,
    Expression,
    ExpressionKind,
    Identifier,
    IntersectionType,
    KeywordType,
    LiteralType,
    ObjectPattern,
    RestElement,
    TypeReference,
    UnionType,
)

KEYWORD_TYPES = frozenset({"string", "number", "boolean", "void", "any", "unknown"})

# Runtime types a default value can refine a parameter's type to
_DEFAULT_LITERAL_TYPES = {
    ExpressionKind.NUMBER: "number",
    ExpressionKind.STRING: "string",
    ExpressionKind.BOOLEAN: "boolean",
    ExpressionKind.ARRAY: "Array",
    ExpressionKind.OBJECT: "Object",
}


def infer_type(type_node: Any, fallback: str = "any") -> str:
    """Translate a type node into a display type string.

    Handles keywords, ``T[]`` arrays, named references (generic arguments
    included), unions, intersections, literal types and destructuring
    patterns. Anything else, including ``None``, yields ``fallback``.

    Args:
        type_node: Type node, pattern, or None
        fallback: Value returned for unknown shapes

    Returns:
        Display type such as ``string``, ``Array<number>`` or ``User``
    """
    try:
        return _infer(type_node, fallback)
    except (AttributeError, TypeError, ValueError, RecursionError):
        return fallback


def _infer(node: Any, fallback: str) -> str:
    if node is None:
        return fallback
    if isinstance(node, KeywordType):
        return node.keyword if node.keyword in KEYWORD_TYPES else fallback
    if isinstance(node, ArrayType):
        return f"Array<{_infer(node.element, 'any')}>"
    if isinstance(node, TypeReference):
        if not node.name:
            return fallback
        if node.type_arguments:
            return f"{node.name}<{', '.join(_infer(arg, 'any') for arg in node.type_arguments)}>"
        return node.name
    if isinstance(node, UnionType):
        return " | ".join(_infer(member, "any") for member in node.members) or fallback
    if isinstance(node, IntersectionType):
        return " & ".join(_infer(member, "any") for member in node.members) or fallback
    if isinstance(node, LiteralType):
        return node.value_type
    if isinstance(node, ObjectPattern):
        return _infer(node.type_annotation, "Object") if node.type_annotation is not None else "Object"
    if isinstance(node, ArrayPattern):
        return _infer(node.type_annotation, "Array") if node.type_annotation is not None else "Array"
    if isinstance(node, (Identifier, RestElement)):
        return _infer(node.type_annotation, fallback)
    return fallback


def type_from_default(expression: Expression) -> Optional[str]:
    """Return the type a default value implies, or None when it implies nothing."""
    return _DEFAULT_LITERAL_TYPES.get(expression.kind)


def runtime_type(expression: Expression) -> str:
    """Classify an expression the way a returned value is classified.

    Array literals are ``Array``, object literals ``Object``, literals
    (template strings included) their runtime type, everything else ``any``.
    ``null`` and regular expressions are objects at runtime. ``undefined``
    is an identifier, so it falls through to ``any``.
    """
    kind = expression.kind
    if kind in _DEFAULT_LITERAL_TYPES:
        return _DEFAULT_LITERAL_TYPES[kind]
    if kind is ExpressionKind.TEMPLATE:
        return "string"
    if kind in (ExpressionKind.NULL, ExpressionKind.REGEX):
        return "Object"
    return "any"
