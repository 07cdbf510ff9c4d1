"""Return type inference for function nodes."""

from typing import Optional

from code_commenter.features.commenting.type_inference import infer_type, runtime_type
from code_commenter.models.syntax import BlockBody, Expression, FunctionNode, FunctionType


def infer_return(function_node: FunctionNode, is_typed_language: bool = False) -> Optional[str]:
    """Infer the display return type of a function.

    Precedence: an explicit return annotation (typed languages only), then
    the first ``return`` statement that carries a value, then the body of
    a concise arrow function. ``async`` functions wrap the result in
    ``Promise<...>``; generators wrap it in ``Iterator<...>``.

    Args:
        function_node: Function to inspect
        is_typed_language: Source is TypeScript

    Returns:
        Display type, or None when the function returns nothing
    """
    if is_typed_language and function_node.return_type is not None:
        return infer_type(function_node.return_type)

    body = function_node.body
    value: Optional[Expression] = None
    if isinstance(body, BlockBody):
        if body.return_values:
            value = body.return_values[0]
    elif isinstance(body, Expression) and function_node.type is FunctionType.ARROW:
        value = body

    if value is None:
        return None
    return _wrap(runtime_type(value), function_node)


def _wrap(inferred: str, function_node: FunctionNode) -> str:
    if function_node.is_async:
        return f"Promise<{inferred}>"
    if function_node.is_generator:
        return f"Iterator<{inferred}>"
    return inferred
