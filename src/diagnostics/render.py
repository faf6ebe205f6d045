"""Text and JSONL rendering of diagnostics."""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterable

    from diagnostics.models import Diagnostic


def format_text(diagnostic: Diagnostic, *, show_fixes: bool = False) -> str:
    line = f"{diagnostic.location()}: {diagnostic.code} {diagnostic.message}"
    if show_fixes and diagnostic.fix is not None:
        edit = diagnostic.fix.edit
        line += f"\n    fix: replace with {edit.new_text}"
    return line


def write_jsonl(stream: BinaryIO, diagnostics: Iterable[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        stream.write(orjson.dumps(diagnostic.model_dump(), option=orjson.OPT_SORT_KEYS))
        stream.write(b"\n")


__all__ = ["format_text", "write_jsonl"]
