"""Syntax tree provider built on tree-sitter.

Parses JavaScript, TypeScript and TSX source into the dataclass node
variants of ``code_commenter.models.syntax`` and locates every
function-like construct that can carry a documentation comment.
"""

import re
from typing import Any, Iterator, List, Optional

import tree_sitter
import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts

from code_commenter.core.logging import get_null_logger
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
    Pattern,
    PatternProperty,
    RestElement,
    SourceLanguage,
    SourceLocation,
    SyntaxIssue,
    TypeNode,
    TypeReference,
    UnionType,
    UnsupportedPattern,
)

_LANGUAGES = {
    SourceLanguage.JAVASCRIPT: tree_sitter.Language(tsjs.language()),
    SourceLanguage.TYPESCRIPT: tree_sitter.Language(tsts.language_typescript()),
    SourceLanguage.TSX: tree_sitter.Language(tsts.language_tsx()),
}

_FUNCTION_TYPES = {
    "function_declaration": FunctionType.DECLARATION,
    "generator_function_declaration": FunctionType.DECLARATION,
    "function_expression": FunctionType.EXPRESSION,
    "function": FunctionType.EXPRESSION,
    "generator_function": FunctionType.EXPRESSION,
    "arrow_function": FunctionType.ARROW,
    "method_definition": FunctionType.METHOD,
}

# Scopes whose return statements belong to someone else
_NESTED_SCOPES = set(_FUNCTION_TYPES) | {"class", "class_declaration", "abstract_class_declaration"}

_TYPE_WRAPPERS = {"type_annotation", "parenthesized_type", "readonly_type", "opting_type_annotation", "omitting_type_annotation"}

_STRING_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|.)", re.DOTALL)


def parse_source(source: str, language: SourceLanguage = SourceLanguage.JAVASCRIPT, logger: Any = None) -> ParsedSource:
    """Parse source text and collect its function sites and syntax errors.

    Args:
        source: Source text
        language: Grammar to parse with
        logger: Optional structlog logger

    Returns:
        ParsedSource with functions in source order
    """
    log = logger or get_null_logger()
    source_bytes = source.encode("utf-8")
    parser = tree_sitter.Parser(_LANGUAGES[language])
    tree = parser.parse(source_bytes)

    converter = _TreeConverter(source, source_bytes)
    parsed = ParsedSource(language=language)
    parsed.syntax_errors = converter.collect_syntax_issues(tree.root_node)
    parsed.functions = list(converter.iter_function_sites(tree.root_node))

    log.debug(
        "source_parsed",
        language=language.value,
        functions=len(parsed.functions),
        syntax_errors=len(parsed.syntax_errors),
    )
    return parsed


def decode_js_string(literal: str) -> str:
    """Decode the body of a quoted JavaScript string literal.

    Args:
        literal: Literal text including its quotes

    Returns:
        The string value
    """
    body = literal[1:-1] if len(literal) >= 2 else ""

    def _replace(match: "re.Match[str]") -> str:
        escape = match.group(1)
        if escape in ("\n", "\r\n", "\r"):
            return ""
        if escape.startswith("u{"):
            return chr(int(escape[2:-1], 16))
        if escape.startswith("u") and len(escape) == 5:
            return chr(int(escape[1:], 16))
        if escape.startswith("x") and len(escape) == 3:
            return chr(int(escape[1:], 16))
        return _STRING_ESCAPES.get(escape, escape)

    return _ESCAPE_RE.sub(_replace, body)


def parse_js_number(text: str) -> Optional[float]:
    """Return the numeric value of a JavaScript number literal, or None."""
    cleaned = text.replace("_", "")
    if cleaned.endswith("n"):
        cleaned = cleaned[:-1]
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return None


class _TreeConverter:
    """Converts tree-sitter nodes of one source text into model nodes."""

    def __init__(self, source: str, source_bytes: bytes):
        self.source_bytes = source_bytes
        self.lines = source.split("\n")
        self.line_bytes = [line.encode("utf-8") for line in self.lines]
        self.line_starts: List[int] = []
        offset = 0
        for line in self.lines:
            self.line_starts.append(offset)
            offset += len(line) + 1
        self.ascii = len(source) == len(source_bytes)

    # =========================================================================
    # Positions and text
    # =========================================================================

    def text(self, node: Any) -> str:
        return self.source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def _char_column(self, row: int, byte_column: int) -> int:
        if self.ascii or row >= len(self.line_bytes):
            return byte_column
        return len(self.line_bytes[row][:byte_column].decode("utf-8", errors="ignore"))

    def _char_offset(self, point: Any) -> int:
        row, column = min(point[0], len(self.line_starts) - 1), point[1]
        return self.line_starts[row] + self._char_column(row, column)

    def location(self, node: Any) -> SourceLocation:
        row, column = node.start_point[0], node.start_point[1]
        return SourceLocation(
            start_line=row + 1,
            start_column=self._char_column(row, column),
            start_offset=self._char_offset(node.start_point),
            end_offset=self._char_offset(node.end_point),
        )

    # =========================================================================
    # Syntax errors
    # =========================================================================

    def collect_syntax_issues(self, root: Any) -> List[SyntaxIssue]:
        issues: List[SyntaxIssue] = []
        if not root.has_error:
            return issues
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                loc = self.location(node)
                if node.is_missing:
                    message = f"Missing '{node.type}'"
                else:
                    snippet = self.text(node).strip().split("\n")[0][:20]
                    message = f"Unexpected token '{snippet}'" if snippet else "Unexpected token"
                issues.append(SyntaxIssue(line=loc.start_line, column=loc.start_column + 1, message=message))
                continue
            if node.has_error:
                stack.extend(reversed(node.children))
        return issues

    # =========================================================================
    # Function discovery
    # =========================================================================

    def iter_function_sites(self, root: Any) -> Iterator[FunctionSite]:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in _FUNCTION_TYPES and node.child_by_field_name("body") is not None:
                site = self._site_for(node)
                if site is not None:
                    yield site
            stack.extend(reversed(node.children))

    def _site_for(self, node: Any) -> Optional[FunctionSite]:
        parent = node.parent
        own_name = self._field_text(node, "name")

        if node.type == "method_definition":
            function = self.function_node(node)
            name = own_name
            if function.method_kind in ("get", "set"):
                name = f"{function.method_kind} {own_name}"
            return FunctionSite(function=function, name=name, anchor=self.location(self._decorated_anchor(node)))

        if parent is None:
            return None

        if node.type in ("function_declaration", "generator_function_declaration"):
            anchor = parent if parent.type == "export_statement" else node
            return FunctionSite(function=self.function_node(node), name=own_name, anchor=self.location(anchor))

        if parent.type == "export_statement":
            return FunctionSite(function=self.function_node(node), name=own_name, anchor=self.location(parent))

        if parent.type == "variable_declarator" and self._is_field(parent, "value", node):
            target = parent.child_by_field_name("name")
            if target is None or target.type != "identifier":
                return None
            return FunctionSite(
                function=self.function_node(node),
                name=self.text(target),
                anchor=self.location(self._declarator_anchor(parent)),
            )

        if parent.type == "pair" and self._is_field(parent, "value", node):
            key = parent.child_by_field_name("key")
            return FunctionSite(function=self.function_node(node), name=self._key_name(key), anchor=self.location(parent))

        if parent.type in ("field_definition", "public_field_definition") and self._is_field(parent, "value", node):
            key = parent.child_by_field_name("property") or parent.child_by_field_name("name")
            anchor = self._decorated_anchor(parent)
            return FunctionSite(function=self.function_node(node), name=self._key_name(key), anchor=self.location(anchor))

        if parent.type == "assignment_expression" and self._is_field(parent, "right", node):
            left = parent.child_by_field_name("left")
            if left is None:
                return None
            anchor = parent.parent if parent.parent is not None and parent.parent.type == "expression_statement" else parent
            name = re.sub(r"\s+", "", self.text(left))
            return FunctionSite(function=self.function_node(node), name=name, anchor=self.location(anchor))

        return None

    @staticmethod
    def _decorated_anchor(member: Any) -> Any:
        # TypeScript keeps class member decorators as siblings in the class body.
        anchor = member
        sibling = member.prev_named_sibling
        while sibling is not None and sibling.type == "decorator":
            anchor = sibling
            sibling = sibling.prev_named_sibling
        return anchor

    def _declarator_anchor(self, declarator: Any) -> Any:
        declaration = declarator.parent
        if declaration is None or declaration.type not in ("lexical_declaration", "variable_declaration"):
            return declarator
        declarators = [c for c in declaration.named_children if c.type == "variable_declarator"]
        if len(declarators) != 1:
            return declarator
        if declaration.parent is not None and declaration.parent.type == "export_statement":
            return declaration.parent
        return declaration

    @staticmethod
    def _is_field(parent: Any, field_name: str, node: Any) -> bool:
        child = parent.child_by_field_name(field_name)
        return child is not None and child.start_byte == node.start_byte and child.end_byte == node.end_byte

    def _field_text(self, node: Any, field_name: str) -> Optional[str]:
        child = node.child_by_field_name(field_name)
        return self.text(child) if child is not None else None

    def _key_name(self, key: Any) -> Optional[str]:
        if key is None:
            return None
        if key.type == "string":
            return decode_js_string(self.text(key))
        return self.text(key)

    # =========================================================================
    # Functions
    # =========================================================================

    def function_node(self, node: Any) -> FunctionNode:
        tokens = {child.type for child in node.children if not child.is_named}
        function_type = _FUNCTION_TYPES[node.type]

        method_kind = None
        if function_type is FunctionType.METHOD:
            name = self._field_text(node, "name")
            if "get" in tokens:
                method_kind = "get"
            elif "set" in tokens:
                method_kind = "set"
            elif name == "constructor":
                method_kind = "constructor"
            else:
                method_kind = "method"

        single = node.child_by_field_name("parameter")
        if single is not None:
            params: List[Pattern] = [Identifier(name=self.text(single))]
        else:
            params = self.parameters(node.child_by_field_name("parameters"))

        body_node = node.child_by_field_name("body")
        body: Any = None
        if body_node is not None:
            if body_node.type == "statement_block":
                body = BlockBody(return_values=self._return_values(body_node))
            else:
                body = self.expression(body_node)

        return_type_node = node.child_by_field_name("return_type")
        return FunctionNode(
            type=function_type,
            params=params,
            body=body,
            id=self._field_text(node, "name"),
            is_async="async" in tokens,
            is_generator="*" in tokens or "generator" in node.type,
            return_type=self.type_node(return_type_node) if return_type_node is not None else None,
            method_kind=method_kind,
            loc=self.location(node),
            has_syntax_error=node.has_error,
        )

    def _return_values(self, block: Any) -> List[Expression]:
        values: List[Expression] = []
        stack = list(reversed(block.children))
        while stack:
            node = stack.pop()
            if node.type in _NESTED_SCOPES:
                continue
            if node.type == "return_statement":
                argument = next((c for c in node.named_children if c.type != "comment"), None)
                if argument is not None:
                    values.append(self.expression(argument))
                continue
            stack.extend(reversed(node.children))
        return values

    # =========================================================================
    # Patterns
    # =========================================================================

    def parameters(self, node: Any) -> List[Pattern]:
        if node is None:
            return []
        params: List[Pattern] = []
        for child in node.named_children:
            if child.type in ("comment", "decorator"):
                continue
            pattern = self.pattern(child)
            if pattern is not None:
                params.append(pattern)
        return params

    def pattern(self, node: Any) -> Optional[Pattern]:
        kind = node.type
        if kind in ("identifier", "shorthand_property_identifier_pattern", "undefined"):
            return Identifier(name=self.text(node))
        if kind == "assignment_pattern":
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            left_pattern = self.pattern(left) if left is not None else None
            if left_pattern is None or right is None:
                return UnsupportedPattern(text=self.text(node))
            return AssignmentPattern(left=left_pattern, right=self.expression(right))
        if kind == "object_pattern":
            return ObjectPattern(properties=self._object_pattern_properties(node))
        if kind == "array_pattern":
            return ArrayPattern(elements=self._positional(node, self.pattern))
        if kind == "rest_pattern":
            argument = next((c for c in node.named_children if c.type != "comment"), None)
            inner = self.pattern(argument) if argument is not None else None
            return RestElement(argument=inner if inner is not None else UnsupportedPattern(text=self.text(node)))
        if kind in ("required_parameter", "optional_parameter"):
            return self._typed_parameter(node)
        if kind == "this":
            return None
        return UnsupportedPattern(text=self.text(node))

    def _typed_parameter(self, node: Any) -> Optional[Pattern]:
        pattern_node = node.child_by_field_name("pattern")
        if pattern_node is None or pattern_node.type == "this":
            return None
        base = self.pattern(pattern_node)
        if base is None:
            return None

        type_node = node.child_by_field_name("type")
        annotation = self.type_node(type_node) if type_node is not None else None
        optional = node.type == "optional_parameter"
        if isinstance(base, (Identifier, ObjectPattern, ArrayPattern)):
            base.type_annotation = annotation
            base.optional = optional
        elif isinstance(base, RestElement):
            base.type_annotation = annotation

        value = node.child_by_field_name("value")
        result: Pattern = base
        if value is not None:
            result = AssignmentPattern(left=base, right=self.expression(value))

        accessibility = None
        readonly = False
        for child in node.children:
            if child.type == "accessibility_modifier":
                accessibility = self.text(child)
            elif child.type == "readonly":
                readonly = True
            elif child.type == "override_modifier" and accessibility is None:
                accessibility = "override"
        if accessibility is not None or readonly:
            return ParameterProperty(parameter=result, accessibility=accessibility, readonly=readonly)
        return result

    def _object_pattern_properties(self, node: Any) -> List[Any]:
        properties: List[Any] = []
        for child in node.named_children:
            kind = child.type
            if kind == "shorthand_property_identifier_pattern":
                name = self.text(child)
                properties.append(PatternProperty(key=name, value=Identifier(name=name), shorthand=True))
            elif kind == "pair_pattern":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                value_pattern = self.pattern(value) if value is not None else None
                if value_pattern is not None:
                    properties.append(PatternProperty(key=self._key_name(key) or self.text(child), value=value_pattern))
            elif kind == "object_assignment_pattern":
                left = child.child_by_field_name("left")
                right = child.child_by_field_name("right")
                if left is None or right is None:
                    continue
                left_pattern = self.pattern(left)
                if left_pattern is None:
                    continue
                key = self.text(left) if left.type == "shorthand_property_identifier_pattern" else self.text(child)
                properties.append(
                    PatternProperty(
                        key=key,
                        value=AssignmentPattern(left=left_pattern, right=self.expression(right)),
                        shorthand=True,
                    )
                )
            elif kind == "rest_pattern":
                rest = self.pattern(child)
                if isinstance(rest, RestElement):
                    properties.append(rest)
        return properties

    def _positional(self, node: Any, convert: Any) -> List[Any]:
        """Convert bracketed children, keeping holes as None entries."""
        items: List[Any] = []
        pending: Any = None
        filled = False
        for child in node.children:
            if child.type == ",":
                items.append(pending if filled else None)
                pending, filled = None, False
            elif child.type == "]":
                if filled:
                    items.append(pending)
            elif child.is_named and child.type != "comment":
                pending, filled = convert(child), True
        return items

    # =========================================================================
    # Types
    # =========================================================================

    def type_node(self, node: Any) -> TypeNode:
        while node.type in _TYPE_WRAPPERS:
            inner = next((c for c in node.named_children if c.type != "comment"), None)
            if inner is None:
                return OpaqueType(text=self.text(node))
            node = inner

        kind = node.type
        if kind == "predefined_type":
            return KeywordType(keyword=self.text(node))
        if kind in ("type_identifier", "nested_type_identifier", "identifier"):
            return TypeReference(name=re.sub(r"\s+", "", self.text(node)))
        if kind == "generic_type":
            name = node.child_by_field_name("name")
            arguments = node.child_by_field_name("type_arguments")
            type_arguments = [self.type_node(c) for c in arguments.named_children] if arguments is not None else []
            return TypeReference(
                name=re.sub(r"\s+", "", self.text(name)) if name is not None else self.text(node),
                type_arguments=type_arguments,
            )
        if kind == "array_type":
            element = next((c for c in node.named_children if c.type != "comment"), None)
            return ArrayType(element=self.type_node(element) if element is not None else OpaqueType(text=""))
        if kind in ("union_type", "intersection_type"):
            members = self._flatten_type_members(node, kind)
            return UnionType(members=members) if kind == "union_type" else IntersectionType(members=members)
        if kind == "literal_type":
            return LiteralType(value_type=self._literal_type_name(node))
        if kind == "type_predicate_annotation" or kind == "type_predicate":
            return KeywordType(keyword="boolean")
        return OpaqueType(text=self.text(node))

    def _flatten_type_members(self, node: Any, kind: str) -> List[TypeNode]:
        members: List[TypeNode] = []
        for child in node.named_children:
            if child.type == kind:
                members.extend(self._flatten_type_members(child, kind))
            elif child.type != "comment":
                members.append(self.type_node(child))
        return members

    def _literal_type_name(self, node: Any) -> str:
        literal = next((c for c in node.named_children), None)
        kind = literal.type if literal is not None else self.text(node)
        mapping = {
            "string": "string",
            "template_string": "string",
            "number": "number",
            "unary_expression": "number",
            "true": "boolean",
            "false": "boolean",
            "null": "null",
            "undefined": "undefined",
        }
        return mapping.get(kind, "any")

    # =========================================================================
    # Expressions
    # =========================================================================

    def expression(self, node: Any) -> Expression:
        text = self.text(node)
        kind = node.type

        if kind == "parenthesized_expression":
            inner = next((c for c in node.named_children if c.type != "comment"), None)
            if inner is not None:
                return self.expression(inner)
        if kind == "number":
            return Expression(kind=ExpressionKind.NUMBER, text=text, value=parse_js_number(text))
        if kind == "string":
            return Expression(kind=ExpressionKind.STRING, text=text, value=decode_js_string(text))
        if kind == "template_string":
            return Expression(kind=ExpressionKind.TEMPLATE, text=text)
        if kind in ("true", "false"):
            return Expression(kind=ExpressionKind.BOOLEAN, text=text, value=kind == "true")
        if kind == "null":
            return Expression(kind=ExpressionKind.NULL, text=text)
        if kind == "undefined":
            return Expression(kind=ExpressionKind.UNDEFINED, text=text)
        if kind == "regex":
            return Expression(kind=ExpressionKind.REGEX, text=text)
        if kind == "identifier":
            if text == "undefined":
                return Expression(kind=ExpressionKind.UNDEFINED, text=text)
            return Expression(kind=ExpressionKind.IDENTIFIER, text=text)
        if kind == "unary_expression":
            return self._unary(node, text)
        if kind == "array":
            return Expression(kind=ExpressionKind.ARRAY, text=text, elements=self._positional(node, self.expression))
        if kind == "object":
            return Expression(kind=ExpressionKind.OBJECT, text=text, properties=self._object_members(node))
        return Expression(kind=ExpressionKind.OTHER, text=text)

    def _unary(self, node: Any, text: str) -> Expression:
        operator = node.child_by_field_name("operator")
        argument = node.child_by_field_name("argument")
        if operator is not None and argument is not None:
            op = self.text(operator)
            inner = self.expression(argument)
            if op in ("-", "+") and inner.kind is ExpressionKind.NUMBER:
                value = inner.value
                if value is not None and op == "-":
                    value = -value
                return Expression(kind=ExpressionKind.NUMBER, text=text, value=value)
        return Expression(kind=ExpressionKind.OTHER, text=text)

    def _object_members(self, node: Any) -> List[ObjectMember]:
        members: List[ObjectMember] = []
        for child in node.named_children:
            kind = child.type
            if kind == "pair":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                computed = key is not None and key.type == "computed_property_name"
                members.append(
                    ObjectMember(
                        key=None if computed else self._key_name(key),
                        value=self.expression(value) if value is not None else None,
                    )
                )
            elif kind == "shorthand_property_identifier":
                name = self.text(child)
                members.append(
                    ObjectMember(key=name, value=Expression(kind=ExpressionKind.IDENTIFIER, text=name), shorthand=True)
                )
            elif kind == "spread_element":
                argument = next((c for c in child.named_children if c.type != "comment"), None)
                members.append(
                    ObjectMember(
                        key=None,
                        value=self.expression(argument) if argument is not None else None,
                        spread=True,
                    )
                )
            elif kind == "method_definition":
                members.append(ObjectMember(key=self._field_text(child, "name"), value=None))
        return members

