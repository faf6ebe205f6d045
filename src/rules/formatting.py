"""Formatting rules for log message literals."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING

from diagnostics.emitter import report_formatting_issues, report_non_english

if TYPE_CHECKING:
    from collections.abc import Iterable

    from diagnostics.models import Reporter
    from parse.expressions import Fragment

_MAX_ASCII = 0x7F


@dataclass(frozen=True)
class FragmentScan:
    """Result of scanning the content of one message fragment."""

    corrected_text: str
    has_capital: bool
    has_special: bool
    is_non_ascii: bool


def _is_letter(ch: str) -> bool:
    return ch.isalpha()


def _is_lower(ch: str) -> bool:
    return unicodedata.category(ch) == "Ll"


def _is_allowed(ch: str) -> bool:
    return ch.isalpha() or ch.isdecimal() or ch.isspace()


def scan_fragment(content: str, ordinal: int) -> FragmentScan:
    """Scan fragment content and build its corrected text.

    Only the first character of the first fragment (``ordinal == 0``) is
    subject to the lowercase rule. Characters that are neither letters,
    digits nor whitespace are dropped from the corrected text.
    """
    corrected: list[str] = []
    has_capital = False
    has_special = False
    is_non_ascii = False

    for index, ch in enumerate(content):
        if ord(ch) > _MAX_ASCII:
            is_non_ascii = True
        if ordinal == 0 and index == 0 and _is_letter(ch) and not _is_lower(ch):
            has_capital = True
            corrected.append(ch.lower())
            continue
        if _is_allowed(ch):
            corrected.append(ch)
        else:
            has_special = True

    return FragmentScan(
        corrected_text="".join(corrected),
        has_capital=has_capital,
        has_special=has_special,
        is_non_ascii=is_non_ascii,
    )


def check_formatting(fragments: Iterable[Fragment], reporter: Reporter) -> None:
    """Apply the casing, character-set and language rules to each fragment."""
    for fragment in fragments:
        literal = fragment.literal
        if len(literal.raw) < 2:
            continue

        scan = scan_fragment(literal.content, fragment.ordinal)
        if scan.is_non_ascii:
            report_non_english(reporter, literal)
        report_formatting_issues(reporter, literal, scan)


__all__ = ["FragmentScan", "check_formatting", "scan_fragment"]
