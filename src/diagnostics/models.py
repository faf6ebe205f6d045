"""Diagnostic models reported by the log message rules."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel


class SourceSpan(BaseModel):
    """Source span of an expression (1-based lines and byte columns)."""

    path: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int


class TextEdit(BaseModel):
    """Replacement of the text covered by ``span`` with ``new_text``."""

    span: SourceSpan
    new_text: str


class SuggestedFix(BaseModel):
    """A proposed, never auto-applied, single-range edit."""

    message: str
    edit: TextEdit


class Diagnostic(BaseModel):
    """Schema for a single rule violation."""

    code: str
    span: SourceSpan
    message: str
    fix: SuggestedFix | None = None

    def location(self) -> str:
        return f"{self.span.path}:{self.span.start_line}:{self.span.start_col}"


class Reporter(Protocol):
    """Reporting channel the rules emit diagnostics into."""

    def report(self, diagnostic: Diagnostic) -> None: ...


class DiagnosticCollector:
    """List-backed reporter used for one compilation unit."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)


__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "Reporter",
    "SourceSpan",
    "SuggestedFix",
    "TextEdit",
]
