"""Scope-aware name resolution of call receivers to package identities."""

from __future__ import annotations

import ast
from dataclasses import dataclass

from parse.ast_imports import SCOPE_NODES, extract_binding_events, iter_scope_nodes

# local name -> top-level package identity
NameTable = dict[str, str]

# (line, col) with 1-based lines and 0-based byte columns, as in ``ast``
Position = tuple[int, int]


@dataclass(frozen=True)
class ScopeTable:
    """Names visible inside the body of one function or class."""

    start: Position
    end: Position
    table: NameTable

    def contains(self, position: Position) -> bool:
        return self.start <= position < self.end


@dataclass(frozen=True)
class ScopedNames:
    """Module-level names plus one table per nested function or class body.

    ``scopes`` is in pre-order, so the last scope containing a position is
    the innermost one.
    """

    module: NameTable
    scopes: tuple[ScopeTable, ...] = ()

    def table_at(self, line: int, col: int) -> NameTable:
        table = self.module
        for scope in self.scopes:
            if scope.contains((line, col)):
                table = scope.table
        return table


def _parse(source: bytes | str, filename: str) -> ast.Module | None:
    try:
        return ast.parse(source, filename)
    except (SyntaxError, ValueError, UnicodeDecodeError, RecursionError, MemoryError):
        return None


def _replay(scope: ast.AST, table: NameTable) -> NameTable:
    for event in extract_binding_events(scope):
        if event.kind == "import":
            package = event.target
        else:
            package = table.get(event.target) if event.target is not None else None

        if package is None:
            table.pop(event.local_name, None)
        else:
            table[event.local_name] = package
    return table


def _parameter_names(node: ast.FunctionDef | ast.AsyncFunctionDef) -> list[str]:
    arguments = node.args
    names = [
        arg.arg for arg in (*arguments.posonlyargs, *arguments.args, *arguments.kwonlyargs)
    ]
    if arguments.vararg is not None:
        names.append(arguments.vararg.arg)
    if arguments.kwarg is not None:
        names.append(arguments.kwarg.arg)
    return names


def _nested_scopes(
    scope: ast.AST,
) -> list[ast.FunctionDef | ast.AsyncFunctionDef | ast.ClassDef]:
    return [node for node in iter_scope_nodes(scope) if isinstance(node, SCOPE_NODES)]


def build_name_table(source: bytes | str, filename: str = "<unknown>") -> NameTable:
    """Map the module-level names of a source to the packages they are bound to.

    Bindings are replayed in source order:

    - ``import logging`` / ``import logging.handlers as h`` bind to ``logging``
    - ``from loguru import logger`` binds ``logger`` to ``loguru``
    - ``log = logging.getLogger(__name__)`` inherits the binding of the
      value's root name; re-binding a name to anything unresolved drops it.

    Bindings inside functions and classes do not affect the module table.
    Sources that fail to parse resolve nothing.
    """
    tree = _parse(source, filename)
    if tree is None:
        return {}
    return _replay(tree, {})


def build_scoped_names(source: bytes | str, filename: str = "<unknown>") -> ScopedNames:
    """Build the module table and a table for every function and class body.

    A function body starts from the names of its enclosing function (or the
    module), minus its parameters, then replays its own bindings. Class
    bodies are not visible from the methods defined in them.
    """
    tree = _parse(source, filename)
    if tree is None:
        return ScopedNames(module={})

    module = _replay(tree, {})
    scopes: list[ScopeTable] = []
    stack = [(node, module) for node in reversed(_nested_scopes(tree))]
    while stack:
        node, enclosing = stack.pop()
        table = dict(enclosing)
        if not isinstance(node, ast.ClassDef):
            for name in _parameter_names(node):
                table.pop(name, None)
        table = _replay(node, table)

        first = node.body[0]
        if node.end_lineno is not None and node.end_col_offset is not None:
            scopes.append(
                ScopeTable(
                    start=(first.lineno, first.col_offset),
                    end=(node.end_lineno, node.end_col_offset),
                    table=table,
                )
            )

        inner = enclosing if isinstance(node, ast.ClassDef) else table
        stack.extend((child, inner) for child in reversed(_nested_scopes(node)))

    return ScopedNames(module=module, scopes=tuple(scopes))


def resolve_name(table: NameTable, name: str) -> str | None:
    return table.get(name)


__all__ = [
    "NameTable",
    "ScopeTable",
    "ScopedNames",
    "build_name_table",
    "build_scoped_names",
    "resolve_name",
]
