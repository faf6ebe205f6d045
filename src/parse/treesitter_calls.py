"""Tree-sitter based call-site extraction for Python files."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from tree_sitter import Language, Node, Parser
from tree_sitter_python import language as get_python_language

from diagnostics.models import SourceSpan
from parse.callsite import CallSite, CompilationUnit
from parse.expressions import (
    Concatenation,
    Identifier,
    Literal,
    MessageExpr,
    Opaque,
)
from parse.name_resolution import (
    NameTable,
    ScopedNames,
    build_scoped_names,
    resolve_name,
)

logger = logging.getLogger(__name__)

_QUOTES = ('"""', "'''", '"', "'")

# Tree-sitter parsers must not be shared between threads.
_LOCAL = threading.local()


def _get_parser() -> Parser:
    """Return this thread's Tree-sitter parser for Python."""
    parser = getattr(_LOCAL, "parser", None)
    if parser is None:
        parser = Parser(Language(get_python_language()))
        _LOCAL.parser = parser
    return parser


def _decode_node_text(source_bytes: bytes, node: Node) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf8", errors="replace")


def _make_src_span(relative_path: str, node: Node) -> SourceSpan:
    return SourceSpan(
        path=relative_path,
        start_line=node.start_point[0] + 1,
        start_col=node.start_point[1] + 1,
        end_line=node.end_point[0] + 1,
        end_col=node.end_point[1] + 1,
    )


def _unwrap_parentheses(node: Node) -> Node:
    while node.type == "parenthesized_expression":
        inner = [child for child in node.named_children if child.type != "comment"]
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def split_string_literal(raw: str) -> tuple[str, str, str] | None:
    """Split a quoted literal into ``(prefix, quote, content)``.

    Examples:
        >>> split_string_literal('"abc"')
        ('', '"', 'abc')
        >>> split_string_literal("r'''x'''")
        ('r', "'''", 'x')
    """
    prefix_len = 0
    while prefix_len < len(raw) and raw[prefix_len] not in "\"'":
        prefix_len += 1
    prefix, rest = raw[:prefix_len], raw[prefix_len:]

    for quote in _QUOTES:
        if rest.startswith(quote) and rest.endswith(quote):
            if len(rest) >= 2 * len(quote):
                return prefix, quote, rest[len(quote) : len(rest) - len(quote)]
    return None


def _convert_string(source_bytes: bytes, relative_path: str, node: Node) -> MessageExpr:
    span = _make_src_span(relative_path, node)
    if any(child.type == "interpolation" for child in node.children):
        return Opaque(span=span)

    # A fix must reproduce the literal byte for byte; undecodable text cannot.
    try:
        raw = source_bytes[node.start_byte : node.end_byte].decode("utf8")
    except UnicodeDecodeError:
        return Opaque(span=span)

    parts = split_string_literal(raw)
    if parts is None:
        return Opaque(span=span)

    prefix, quote, content = parts
    # f-strings carry runtime data; bytes are not text messages.
    if set(prefix.lower()) & {"f", "b", "t"}:
        return Opaque(span=span)

    return Literal(raw=raw, content=content, prefix=prefix, quote=quote, span=span)


def _concatenation_operands(node: Node) -> tuple[Node, Node] | None:
    if node.type != "binary_operator":
        return None
    operator = node.child_by_field_name("operator")
    left = node.child_by_field_name("left")
    right = node.child_by_field_name("right")
    if operator is None or operator.type != "+" or left is None or right is None:
        return None
    return left, right


def _convert_operand(source_bytes: bytes, relative_path: str, node: Node) -> MessageExpr:
    if node.type == "string":
        return _convert_string(source_bytes, relative_path, node)
    if node.type == "identifier":
        return Identifier(
            name=_decode_node_text(source_bytes, node),
            span=_make_src_span(relative_path, node),
        )
    return Opaque(span=_make_src_span(relative_path, node))


def convert_expression(
    source_bytes: bytes, relative_path: str, node: Node
) -> MessageExpr:
    """Convert a Tree-sitter expression node into a message expression.

    ``+`` chains are folded with an explicit stack, so a message made of
    thousands of operands converts without hitting the recursion limit.
    """
    converted: list[MessageExpr] = []
    # (node, operands_converted)
    stack: list[tuple[Node, bool]] = [(node, False)]
    while stack:
        current, operands_converted = stack.pop()
        current = _unwrap_parentheses(current)
        if operands_converted:
            right = converted.pop()
            left = converted.pop()
            converted.append(
                Concatenation(
                    left=left, right=right, span=_make_src_span(relative_path, current)
                )
            )
            continue

        operands = _concatenation_operands(current)
        if operands is None:
            converted.append(_convert_operand(source_bytes, relative_path, current))
        else:
            stack.append((current, True))
            stack.append((operands[1], False))
            stack.append((operands[0], False))

    return converted[0]


def _convert_arguments(
    source_bytes: bytes, relative_path: str, arguments: Node | None
) -> tuple[MessageExpr, ...]:
    if arguments is None:
        return ()
    if arguments.type != "argument_list":
        # f(x for x in y)
        return (Opaque(span=_make_src_span(relative_path, arguments)),)

    args: list[MessageExpr] = []
    for child in arguments.named_children:
        if child.type == "comment":
            continue
        if child.type == "keyword_argument":
            value = child.child_by_field_name("value")
            if value is not None:
                args.append(convert_expression(source_bytes, relative_path, value))
                continue
        args.append(convert_expression(source_bytes, relative_path, child))
    return tuple(args)


def resolve_receiver(
    source_bytes: bytes, node: Node | None, name_table: NameTable
) -> str | None:
    """Resolve a receiver expression to a package identity.

    Identifiers are looked up in the name table; attribute chains and calls
    resolve through their leftmost name. Anything else is unresolved.
    """
    while node is not None:
        node = _unwrap_parentheses(node)
        if node.type == "identifier":
            return resolve_name(name_table, _decode_node_text(source_bytes, node))
        if node.type == "attribute":
            node = node.child_by_field_name("object")
        elif node.type == "call":
            node = node.child_by_field_name("function")
        else:
            return None
    return None


def _build_call_site(
    source_bytes: bytes, relative_path: str, node: Node, names: ScopedNames
) -> CallSite:
    row, col = node.start_point
    name_table = names.table_at(row + 1, col)
    callee = node.child_by_field_name("function")
    args = _convert_arguments(
        source_bytes, relative_path, node.child_by_field_name("arguments")
    )
    span = _make_src_span(relative_path, node)

    if callee is None or callee.type != "attribute":
        return CallSite(receiver=None, method=None, package=None, args=args, span=span)

    receiver_node = callee.child_by_field_name("object")
    attribute_node = callee.child_by_field_name("attribute")
    method = (
        _decode_node_text(source_bytes, attribute_node).strip()
        if attribute_node is not None and attribute_node.type == "identifier"
        else None
    )
    receiver = (
        _decode_node_text(source_bytes, receiver_node).strip()
        if receiver_node is not None
        else None
    )
    return CallSite(
        receiver=receiver,
        method=method,
        package=resolve_receiver(source_bytes, receiver_node, name_table),
        args=args,
        span=span,
    )


def _traverse_calls(
    root: Node,
    *,
    source_bytes: bytes,
    relative_path: str,
    names: ScopedNames,
    out_calls: list[CallSite],
) -> None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "call":
            out_calls.append(
                _build_call_site(source_bytes, relative_path, node, names)
            )
        stack.extend(reversed(node.children))


def parse_source(source_bytes: bytes, relative_path: str) -> CompilationUnit:
    """Build the compilation unit of an in-memory Python source."""
    tree = _get_parser().parse(source_bytes)
    names = build_scoped_names(source_bytes, relative_path)

    unit = CompilationUnit(path=relative_path)
    _traverse_calls(
        tree.root_node,
        source_bytes=source_bytes,
        relative_path=relative_path,
        names=names,
        out_calls=unit.calls,
    )
    return unit


def parse_unit(file_path: str | Path, repo_root: str | Path) -> CompilationUnit:
    """Extract all call sites of a Python file using Tree-sitter.

    Files outside ``repo_root`` or that cannot be read yield an empty unit.
    Span paths are relative to ``repo_root`` in POSIX form.
    """
    file_obj = Path(file_path)
    root_obj = Path(repo_root)

    try:
        root_resolved = root_obj.resolve()
        file_resolved = file_obj.resolve(strict=False)
        relative_path = file_resolved.relative_to(root_resolved).as_posix()
    except (OSError, ValueError):
        return CompilationUnit(path=file_obj.as_posix())

    try:
        source_bytes = file_resolved.read_bytes()
    except OSError as exc:
        logger.warning("Skipping unreadable file %s: %s", relative_path, exc)
        return CompilationUnit(path=relative_path)

    return parse_source(source_bytes, relative_path)


__all__ = [
    "convert_expression",
    "parse_source",
    "parse_unit",
    "resolve_receiver",
    "split_string_literal",
]
