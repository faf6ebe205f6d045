"""Message expression variant and the two extraction folds over it.

A log message argument is modelled as a small closed grammar:

- ``Literal``: a plain string literal
- ``Identifier``: a bare variable reference
- ``Concatenation``: ``left + right``
- ``Opaque``: anything else (calls, f-strings, ``%`` formatting, ...)

Only literals and ``+`` chains are decomposable. Every fold below walks the
chain left to right so fragment ordinals follow source order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from diagnostics.models import SourceSpan


@dataclass(frozen=True)
class Literal:
    """A plain string literal.

    ``raw`` is the quoted source text, ``content`` the text between the
    quote delimiters (escape sequences are kept as written).
    """

    raw: str
    content: str
    prefix: str
    quote: str
    span: SourceSpan

    def requote(self, text: str) -> str:
        """Wrap ``text`` in this literal's own prefix and quote delimiter."""
        return f"{self.prefix}{self.quote}{text}{self.quote}"


@dataclass(frozen=True)
class Identifier:
    name: str
    span: SourceSpan


@dataclass(frozen=True)
class Concatenation:
    left: MessageExpr
    right: MessageExpr
    span: SourceSpan


@dataclass(frozen=True)
class Opaque:
    span: SourceSpan


MessageExpr = Literal | Identifier | Concatenation | Opaque


@dataclass(frozen=True)
class Fragment:
    """A literal of a message together with its in-order position."""

    literal: Literal
    ordinal: int


def _iter_operands(expr: MessageExpr) -> Iterator[MessageExpr]:
    """Yield the operands of a ``+`` chain left to right.

    Chains are walked with an explicit stack so that messages built from
    thousands of ``+`` operands stay within the recursion limit.
    """
    stack = [expr]
    while stack:
        current = stack.pop()
        if isinstance(current, Concatenation):
            stack.append(current.right)
            stack.append(current.left)
        else:
            yield current


def extract_fragments(expr: MessageExpr) -> list[Fragment]:
    """Return the string literals of a message in left-to-right order.

    Non-literal operands of a ``+`` chain are skipped; the ordinal of each
    fragment is its index in the resulting sequence, not its nesting depth.
    """
    literals = [op for op in _iter_operands(expr) if isinstance(op, Literal)]
    return [
        Fragment(literal=literal, ordinal=index) for index, literal in enumerate(literals)
    ]


def extract_terms(expr: MessageExpr) -> list[str]:
    """Return literal contents and identifier names of a message in order."""
    terms: list[str] = []
    for operand in _iter_operands(expr):
        if isinstance(operand, Literal):
            terms.append(operand.content)
        elif isinstance(operand, Identifier):
            terms.append(operand.name)
    return terms


def join_terms(terms: list[str]) -> str:
    return " ".join(terms)


__all__ = [
    "Concatenation",
    "Fragment",
    "Identifier",
    "Literal",
    "MessageExpr",
    "Opaque",
    "extract_fragments",
    "extract_terms",
    "join_terms",
]
