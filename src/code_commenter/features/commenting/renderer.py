"""JSDoc rendering for extracted parameters.

Produces a ``/** ... */`` block with a summary line, an optional TODO and
``@example`` line, column-aligned ``@param`` lines for every leaf
parameter (nested destructured properties included) and a ``@returns``
line.

Rendering conventions:
- Only leaves get a line. Containers with children are replaced by
  their leaves.
- Synthetic containers (``param1``, ``element0``) add nothing to the
  labels of their leaves. Named containers prefix them with their path
  (``options.retry``). Array elements use their own name.
- A named container without children is rendered as a leaf.
- Rest parameters are labelled with their bare name and typed
  ``{...T}``; rest properties keep ``{Object}``.
- Type and name columns are padded after brackets and defaults are
  applied, so every ``-`` separator lines up.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from code_commenter.constants import CommentTemplates
from code_commenter.core.logging import get_null_logger
from code_commenter.features.commenting.param_extractor import extract_params
from code_commenter.features.commenting.return_inference import infer_return
from code_commenter.models.documentation import DocOptions, FunctionDocRequest, Parameter

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


@dataclass
class _DocLine:
    type_token: str
    label: str
    description: str

    def format(self, type_width: int, label_width: int) -> str:
        return f"@param {self.type_token.ljust(type_width)} {self.label.ljust(label_width)} - {self.description}"


def generate_function_doc(request: FunctionDocRequest, logger: Any = None) -> str:
    """Generate the documentation block for one function.

    Args:
        request: Function node, source text, display name and options
        logger: Optional structlog logger

    Returns:
        Rendered comment block, or "" when nothing could be produced
    """
    log = logger or get_null_logger()
    try:
        options = request.options
        params = extract_params(request.node, options.is_typed_language)
        return_type = infer_return(request.node, options.is_typed_language)
        log.debug(
            "function_params_extracted",
            function=request.function_name,
            params=[p.name for p in params],
            return_type=return_type,
        )
        return render(params, request.function_name, options, return_type=return_type, logger=log)
    except Exception as e:
        log.warning("function_doc_failed", function=request.function_name, error=str(e))
        return ""


def render(
    parameters: List[Parameter],
    function_name: Optional[str],
    options: Optional[DocOptions] = None,
    return_type: Optional[str] = None,
    logger: Any = None,
) -> str:
    """Render parameters into a JSDoc comment block.

    Args:
        parameters: Top-level parameters
        function_name: Display name, or None for anonymous functions
        options: Rendering options
        return_type: Inferred return type, or None to omit ``@returns``
        logger: Optional structlog logger

    Returns:
        Comment block, or "" on unexpected failure
    """
    log = logger or get_null_logger()
    options = options or DocOptions()
    try:
        doc_lines = [line for param in parameters for line in _flatten(param, "", "param")]
        type_width = max((len(line.type_token) for line in doc_lines), default=0)
        label_width = max((len(line.label) for line in doc_lines), default=0)
        param_lines = [line.format(type_width, label_width) for line in doc_lines]

        returns_line = None
        if return_type:
            returns_line = f"@returns {{{return_type}}} - {CommentTemplates.RETURN_DESCRIPTION}"

        body = [_summary(parameters, function_name, options)]
        if options.include_todo_placeholder:
            template = options.todo_template or CommentTemplates.DEFAULT_TODO
            body.append(template.replace("{name}", function_name or "Function"))
        if options.include_example:
            arguments = ", ".join("null" for _ in parameters)
            body.append(f"@example {_callee(function_name)}({arguments})")

        if options.custom_param_section:
            section = options.custom_param_section.replace("{params}", "\n".join(param_lines))
            section = section.replace("{returns}", returns_line or "")
            section_lines = section.split("\n")
            while section_lines and not section_lines[-1].strip():
                section_lines.pop()
            if section_lines:
                body.append("")
                body.extend(section_lines)
        else:
            if param_lines:
                body.append("")
                body.extend(param_lines)
            if returns_line:
                body.append("")
                body.append(returns_line)

        return "/**\n" + "\n".join(f" * {line}" if line else " *" for line in body) + "\n */"
    except Exception as e:
        log.warning("render_failed", function=function_name, error=str(e))
        return ""


# =============================================================================
# Parameter lines
# =============================================================================


def _flatten(param: Parameter, parent_path: str, kind: str) -> Iterator[_DocLine]:
    if kind == "element":
        path = param.name
    else:
        path = f"{parent_path}.{param.name}" if parent_path else param.name

    properties = [p for p in param.properties or [] if p is not None]
    elements = [e for e in param.elements or [] if e is not None]
    if not properties and not elements:
        is_container = param.properties is not None or param.elements is not None
        if not (param.synthetic and is_container):
            yield _doc_line(param, path, kind)
        return

    child_path = "" if param.synthetic else path
    for prop in properties:
        yield from _flatten(prop, child_path, "property")
    for element in elements:
        yield from _flatten(element, child_path, "element")


def _doc_line(param: Parameter, path: str, kind: str) -> _DocLine:
    if param.is_rest:
        if kind == "property" or not param.type.startswith("Array"):
            return _DocLine(f"{{{param.type}}}", path, "Rest properties")
        return _DocLine(f"{{...{_element_type(param.type)}}}", path, "Rest parameter")

    if kind == "param":
        label = path
        if param.has_default:
            label = f"[{path}={param.default_value}]"
        elif param.optional:
            label = f"[{path}]"
        noun = "Class property parameter" if param.is_param_property else "Parameter"
        description = f"{noun} '{param.name}'"
    else:
        noun = "Property" if kind == "property" else "Array element"
        label = path
        description = f"{noun} '{param.name}'"
        if param.has_default:
            description = f"Default value: `{param.default_value}`. {description}"

    if param.type == "any":
        description += CommentTemplates.UNKNOWN_TYPE_SUFFIX
    return _DocLine(f"{{{param.type}}}", label, description)


def _element_type(rest_type: str) -> str:
    if rest_type.startswith("Array<") and rest_type.endswith(">"):
        return rest_type[len("Array<"):-1]
    return "any"


# =============================================================================
# Summary and example
# =============================================================================


def _summary(parameters: List[Parameter], function_name: Optional[str], options: DocOptions) -> str:
    names = [p.name for p in parameters]
    if any(p.synthetic or not _IDENTIFIER_RE.match(p.name) or p.name == "undefined" for p in parameters):
        return CommentTemplates.PLACEHOLDER_SUMMARY

    quoted = ", ".join(f"'{name}'" for name in names)
    if options.custom_summary_template:
        return (
            options.custom_summary_template.replace("{name}", function_name or "Function")
            .replace("{params}", quoted)
            .replace("{count}", str(len(names)))
        )

    subject = f"Function {function_name}" if function_name else "Function"
    if not names:
        return subject
    noun = "parameter" if len(names) == 1 else "parameters"
    return f"{subject} with {noun} {quoted}"


def _callee(function_name: Optional[str]) -> str:
    if not function_name:
        return CommentTemplates.ANONYMOUS_CALLEE
    candidate = re.split(r"[.\s]", function_name.strip())[-1]
    return candidate if _IDENTIFIER_RE.match(candidate) else CommentTemplates.ANONYMOUS_CALLEE
