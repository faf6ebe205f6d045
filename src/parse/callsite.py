"""Host-neutral call-site model consumed by the rule engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diagnostics.models import SourceSpan
    from parse.expressions import MessageExpr


@dataclass(frozen=True)
class CallSite:
    """A call expression with its resolved receiver.

    ``method`` is ``None`` when the callee is not a ``receiver.method``
    selection; ``package`` is ``None`` when the receiver could not be
    resolved to a package.
    """

    receiver: str | None
    method: str | None
    package: str | None
    args: tuple[MessageExpr, ...]
    span: SourceSpan

    @property
    def message(self) -> MessageExpr | None:
        return self.args[0] if self.args else None


@dataclass
class CompilationUnit:
    """All call sites of one source file, in traversal order."""

    path: str
    calls: list[CallSite] = field(default_factory=list)


__all__ = ["CallSite", "CompilationUnit"]
