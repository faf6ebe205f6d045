"""Security rules: sensitive terms and sensitive data patterns."""

from __future__ import annotations

from typing import TYPE_CHECKING

from diagnostics.emitter import report_pattern_match, report_sensitive_term
from parse.expressions import Concatenation, extract_terms, join_terms

if TYPE_CHECKING:
    from parse.callsite import CallSite
    from diagnostics.models import Reporter
    from rules.config import LintSettings


def has_dynamic_data(call: CallSite) -> bool:
    """Return True when the message carries runtime data.

    Any argument beyond the message counts, whatever its kind, as does a
    message that is itself a ``+`` concatenation.
    """
    if len(call.args) > 1:
        return True
    return isinstance(call.message, Concatenation)


def find_sensitive_term(text: str, sensitive_words: tuple[str, ...]) -> str | None:
    lowered = text.lower()
    for word in sensitive_words:
        if word in lowered:
            return word
    return None


def check_security(call: CallSite, settings: LintSettings, reporter: Reporter) -> None:
    """Report at most one sensitive-term and at most one pattern diagnostic."""
    message = call.message
    if message is None:
        return

    full_text = join_terms(extract_terms(message))

    if has_dynamic_data(call):
        term = find_sensitive_term(full_text, settings.sensitive_words)
        if term is not None:
            report_sensitive_term(reporter, call, term)

    for pattern in settings.patterns:
        if pattern.search(full_text):
            report_pattern_match(reporter, call, pattern)
            break


__all__ = ["check_security", "find_sensitive_term", "has_dynamic_data"]
