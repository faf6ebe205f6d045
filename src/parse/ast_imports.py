"""AST-based import and alias bindings for receiver resolution."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True)
class BindingEvent:
    """A name being bound in source order.

    For ``kind == "import"`` the target is the imported top-level package;
    for ``kind == "alias"`` it is the root name of the assigned value, or
    None when the value has no name root (literals, comprehensions, ...).
    """

    line: int
    col: int
    local_name: str
    kind: Literal["import", "alias"]
    target: str | None


def _top_level_package(module: str) -> str:
    return module.split(".", 1)[0]


def _process_import_node(node: ast.Import, events: list[BindingEvent]) -> None:
    """Process a standard import node (import x, import x.y as z)."""
    for name in node.names:
        package = _top_level_package(name.name)
        events.append(
            BindingEvent(
                node.lineno, node.col_offset, name.asname or package, "import", package
            )
        )


def _process_import_from_node(
    node: ast.ImportFrom, events: list[BindingEvent]
) -> None:
    """Process an absolute from-import node (from x import y as z).

    Relative imports refer to the analyzed project itself and never bind a
    third-party package.
    """
    if node.level > 0 or not node.module:
        return

    package = _top_level_package(node.module)
    for name in node.names:
        if name.name == "*":
            continue
        events.append(
            BindingEvent(
                node.lineno,
                node.col_offset,
                name.asname or name.name,
                "import",
                package,
            )
        )


def root_name(expr: ast.expr) -> str | None:
    """Return the leftmost name of an attribute/call chain like ``a.b().c``."""
    while True:
        if isinstance(expr, ast.Name):
            return expr.id
        if isinstance(expr, ast.Attribute):
            expr = expr.value
        elif isinstance(expr, ast.Call):
            expr = expr.func
        else:
            return None


def _process_assignment(
    node: ast.Assign | ast.AnnAssign, events: list[BindingEvent]
) -> None:
    if node.value is None:
        return
    targets = node.targets if isinstance(node, ast.Assign) else [node.target]
    source_name = root_name(node.value)
    for target in targets:
        if isinstance(target, ast.Name):
            events.append(
                BindingEvent(
                    node.lineno, node.col_offset, target.id, "alias", source_name
                )
            )


SCOPE_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)


def iter_scope_nodes(scope: ast.AST) -> Iterator[ast.AST]:
    """Yield the nodes belonging to ``scope`` in pre-order.

    Nested function and class definitions are yielded but not entered;
    their bodies bind names in scopes of their own.
    """
    stack = list(reversed(list(ast.iter_child_nodes(scope))))
    while stack:
        node = stack.pop()
        yield node
        if not isinstance(node, SCOPE_NODES):
            stack.extend(reversed(list(ast.iter_child_nodes(node))))


def extract_binding_events(scope: ast.AST) -> list[BindingEvent]:
    """Collect the import and assignment bindings of one scope in source order.

    ``scope`` is a module, function or class node; bindings made inside
    nested definitions are not included.
    """
    events: list[BindingEvent] = []

    for node in iter_scope_nodes(scope):
        if isinstance(node, ast.Import):
            _process_import_node(node, events)
        elif isinstance(node, ast.ImportFrom):
            _process_import_from_node(node, events)
        elif isinstance(node, (ast.Assign, ast.AnnAssign)):
            _process_assignment(node, events)

    events.sort(key=lambda event: (event.line, event.col))
    return events


__all__ = [
    "SCOPE_NODES",
    "BindingEvent",
    "extract_binding_events",
    "iter_scope_nodes",
    "root_name",
]
