"""Parameter pattern extraction.

Turns the formal parameter patterns of a function into ``Parameter``
values: simple names, defaults, object and array destructuring at any
depth, rest elements and constructor parameter properties.
"""

import json
import re
from dataclasses import dataclass
from typing import List, Optional

from code_commenter.features.commenting.type_inference import infer_type, type_from_default
from code_commenter.models.documentation import Parameter
from code_commenter.models.syntax import (
    ArrayPattern,
    AssignmentPattern,
    Expression,
    ExpressionKind,
    FunctionNode,
    Identifier,
    ObjectPattern,
    ParameterProperty,
    Pattern,
    PatternProperty,
    RestElement,
)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


@dataclass(frozen=True)
class ExtractionContext:
    """Per-parameter extraction settings.

    Attributes:
        is_typed_language: Type annotations are honoured
        position_index: Number used for the next synthetic ``param<N>`` name
    """

    is_typed_language: bool = False
    position_index: int = 1


def extract_params(function_node: FunctionNode, is_typed_language: bool = False) -> List[Parameter]:
    """Extract every parameter of a function.

    The synthetic-name counter starts at 1 and advances once for each
    top-level parameter that received a synthetic name.

    Args:
        function_node: Function whose parameters to extract
        is_typed_language: Source is TypeScript

    Returns:
        Parameters in declaration order; unrecognized patterns are omitted
    """
    params: List[Parameter] = []
    counter = 1
    for pattern in function_node.params:
        param = extract_param(pattern, ExtractionContext(is_typed_language=is_typed_language, position_index=counter))
        if param is None:
            continue
        params.append(param)
        if param.synthetic:
            counter += 1
    return params


def extract_param(node: Optional[Pattern], context: ExtractionContext) -> Optional[Parameter]:
    """Extract one parameter pattern.

    Args:
        node: Pattern node
        context: Extraction settings

    Returns:
        Parameter, or None for unrecognized pattern shapes
    """
    if isinstance(node, Identifier):
        return Parameter(
            name=node.name,
            type=_annotated_type(node, context),
            optional=node.optional and context.is_typed_language,
        )
    if isinstance(node, AssignmentPattern):
        param = extract_param(node.left, context)
        if param is None:
            return None
        _apply_default(param, node, context)
        return param
    if isinstance(node, ObjectPattern):
        return Parameter(
            name=f"param{context.position_index}",
            type=_annotated_type(node, context, "Object"),
            optional=node.optional and context.is_typed_language,
            properties=_extract_properties(node, context),
            synthetic=True,
        )
    if isinstance(node, ArrayPattern):
        return Parameter(
            name=f"param{context.position_index}",
            type="Array",
            optional=node.optional and context.is_typed_language,
            elements=_extract_elements(node, context),
            synthetic=True,
        )
    if isinstance(node, RestElement):
        return _extract_rest(node, context)
    if isinstance(node, ParameterProperty):
        param = extract_param(node.parameter, context)
        if param is None:
            return None
        param.is_param_property = True
        inner = node.parameter.left if isinstance(node.parameter, AssignmentPattern) else node.parameter
        if _has_annotation(inner, context):
            param.type = infer_type(inner)
        return param
    return None


def serialize_default(expression: Expression) -> str:
    """Re-serialize a default value expression.

    Strings are emitted double-quoted, array and object literals compactly,
    anything else as its source text with whitespace collapsed.

    Args:
        expression: Default value expression

    Returns:
        Source-faithful text; never raises
    """
    try:
        return _serialize(expression)
    except (TypeError, ValueError, AttributeError, RecursionError):
        return _normalize_whitespace(getattr(expression, "text", ""))


# =============================================================================
# Helpers
# =============================================================================


def _annotated_type(node: Pattern, context: ExtractionContext, fallback: str = "any") -> str:
    if not context.is_typed_language:
        return fallback
    return infer_type(getattr(node, "type_annotation", None), fallback)


def _has_annotation(node: Pattern, context: ExtractionContext) -> bool:
    return context.is_typed_language and getattr(node, "type_annotation", None) is not None


def _apply_default(param: Parameter, node: AssignmentPattern, context: ExtractionContext) -> None:
    param.has_default = True
    param.default_value = serialize_default(node.right)
    if not _has_annotation(node.left, context):
        hinted = type_from_default(node.right)
        if hinted is not None:
            param.type = hinted


def _extract_rest(node: RestElement, context: ExtractionContext) -> Parameter:
    if isinstance(node.argument, Identifier):
        name, synthetic = node.argument.name, False
    else:
        name, synthetic = f"param{context.position_index}", True

    rest_type = "Array<any>"
    if context.is_typed_language and node.type_annotation is not None:
        annotated = infer_type(node.type_annotation)
        rest_type = annotated if annotated.startswith("Array") else f"Array<{annotated}>"
    return Parameter(name=name, type=rest_type, is_rest=True, synthetic=synthetic)


def _extract_elements(node: ArrayPattern, context: ExtractionContext) -> List[Optional[Parameter]]:
    elements: List[Optional[Parameter]] = []
    for index, element in enumerate(node.elements):
        if element is None:
            elements.append(None)
            continue
        param = extract_param(element, context)
        if param is not None and param.synthetic and not param.is_rest:
            param.name = f"element{index}"
        elements.append(param)
    return elements


def _extract_properties(node: ObjectPattern, context: ExtractionContext) -> List[Parameter]:
    properties: List[Parameter] = []
    for prop in node.properties:
        if isinstance(prop, RestElement):
            name = prop.argument.name if isinstance(prop.argument, Identifier) else "rest"
            properties.append(Parameter(name=name, type="Object", is_rest=True))
            continue
        if isinstance(prop, PatternProperty):
            param = _extract_property(prop.key, prop.value, context)
            if param is not None:
                properties.append(param)
    return properties


def _extract_property(key: str, value: Pattern, context: ExtractionContext) -> Optional[Parameter]:
    if isinstance(value, Identifier):
        return Parameter(name=key, type=_annotated_type(value, context))
    if isinstance(value, ObjectPattern):
        return Parameter(
            name=key,
            type=_annotated_type(value, context, "Object"),
            properties=_extract_properties(value, context),
        )
    if isinstance(value, ArrayPattern):
        return Parameter(name=key, type="Array", elements=_extract_elements(value, context))
    if isinstance(value, AssignmentPattern):
        param = _extract_property(key, value.left, context)
        if param is None:
            return None
        _apply_default(param, value, context)
        if value.right.kind is ExpressionKind.OBJECT and isinstance(value.left, Identifier):
            param.properties = _properties_from_literal(value.right)
        return param
    return None


def _properties_from_literal(expression: Expression) -> List[Parameter]:
    properties: List[Parameter] = []
    for member in expression.properties:
        if member.spread or member.key is None or member.value is None:
            continue
        param = Parameter(
            name=member.key,
            type=type_from_default(member.value) or "any",
            has_default=True,
            default_value=serialize_default(member.value),
        )
        if member.value.kind is ExpressionKind.OBJECT:
            param.properties = _properties_from_literal(member.value)
        properties.append(param)
    return properties


def _serialize(expression: Expression) -> str:
    kind = expression.kind
    if kind is ExpressionKind.STRING and expression.value is not None:
        return json.dumps(expression.value, ensure_ascii=False)
    if kind is ExpressionKind.ARRAY:
        return "[" + ", ".join(_serialize(e) if e is not None else "" for e in expression.elements) + "]"
    if kind is ExpressionKind.OBJECT:
        return _serialize_object(expression)
    return _normalize_whitespace(expression.text)


def _serialize_object(expression: Expression) -> str:
    parts: List[str] = []
    for member in expression.properties:
        if member.spread and member.value is not None:
            parts.append("..." + _serialize(member.value))
        elif member.shorthand and member.key is not None:
            parts.append(member.key)
        elif member.key is not None and member.value is not None:
            key = member.key if _IDENTIFIER_RE.match(member.key) else json.dumps(member.key, ensure_ascii=False)
            parts.append(f"{key}: {_serialize(member.value)}")
        else:
            # methods and computed keys have no compact form
            return _normalize_whitespace(expression.text)
    if not parts:
        return "{}"
    return "{ " + ", ".join(parts) + " }"


def _normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
