"""Diagnostic models and reporting channel."""

from diagnostics.models import (
    Diagnostic,
    DiagnosticCollector,
    Reporter,
    SourceSpan,
    SuggestedFix,
    TextEdit,
)

__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "Reporter",
    "SourceSpan",
    "SuggestedFix",
    "TextEdit",
]
