"""Diagnostic construction for the formatting and security rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from diagnostics.models import Diagnostic, SuggestedFix, TextEdit

if TYPE_CHECKING:
    import re

    from parse.callsite import CallSite
    from diagnostics.models import Reporter
    from parse.expressions import Literal
    from rules.formatting import FragmentScan

LOWERCASE_START = "LOG001"
SPECIAL_CHARACTERS = "LOG002"
ENGLISH_ONLY = "LOG003"
SENSITIVE_DATA = "LOG004"
SENSITIVE_PATTERN = "LOG005"

FORMAT_FIX_MESSAGE = "Format log message (lowercase and remove special chars)"


def report_non_english(reporter: Reporter, literal: Literal) -> None:
    reporter.report(
        Diagnostic(
            code=ENGLISH_ONLY,
            span=literal.span,
            message="log message must be in English only",
        )
    )


def _formatting_fix(literal: Literal, scan: FragmentScan) -> SuggestedFix:
    return SuggestedFix(
        message=FORMAT_FIX_MESSAGE,
        edit=TextEdit(span=literal.span, new_text=literal.requote(scan.corrected_text)),
    )


def report_formatting_issues(
    reporter: Reporter, literal: Literal, scan: FragmentScan
) -> None:
    """Report casing and character-set issues of one fragment.

    A single fix is built per fragment and handed to the first diagnostic
    that is reported; any later diagnostic for the fragment carries none.
    """
    fix: SuggestedFix | None = None
    if scan.has_capital or scan.has_special:
        fix = _formatting_fix(literal, scan)

    if scan.has_capital:
        reporter.report(
            Diagnostic(
                code=LOWERCASE_START,
                span=literal.span,
                message="log message must start with a lowercase letter",
                fix=fix,
            )
        )
        fix = None

    if scan.has_special:
        reporter.report(
            Diagnostic(
                code=SPECIAL_CHARACTERS,
                span=literal.span,
                message="log message must not contain special characters or emojis",
                fix=fix,
            )
        )


def report_sensitive_term(reporter: Reporter, call: CallSite, term: str) -> None:
    reporter.report(
        Diagnostic(
            code=SENSITIVE_DATA,
            span=call.span,
            message=f"log message contains potentially sensitive data ('{term}')",
        )
    )


def report_pattern_match(
    reporter: Reporter, call: CallSite, pattern: re.Pattern[str]
) -> None:
    reporter.report(
        Diagnostic(
            code=SENSITIVE_PATTERN,
            span=call.span,
            message=f"log message matches sensitive data pattern: {pattern.pattern}",
        )
    )


__all__ = [
    "ENGLISH_ONLY",
    "LOWERCASE_START",
    "SENSITIVE_DATA",
    "SENSITIVE_PATTERN",
    "SPECIAL_CHARACTERS",
    "report_formatting_issues",
    "report_non_english",
    "report_pattern_match",
    "report_sensitive_term",
]
