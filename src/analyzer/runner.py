"""Lint Python files under a root directory on a worker pool."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from analyzer.engine import LogLinter
from parse.treesitter_calls import parse_unit
from rules.config import ConfigStore
from scan.files import iter_lint_targets

if TYPE_CHECKING:
    from collections.abc import Sequence

    from diagnostics.models import Diagnostic
    from rules.config import LintSettings

logger = logging.getLogger(__name__)


@dataclass
class FileReport:
    """Diagnostics found in one file."""

    path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class LintResult:
    reports: list[FileReport] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for report in self.reports for d in report.diagnostics]

    @property
    def ok(self) -> bool:
        return not any(report.diagnostics for report in self.reports)


def _sort_key(diagnostic: Diagnostic) -> tuple[int, int, str]:
    return (diagnostic.span.start_line, diagnostic.span.start_col, diagnostic.code)


def lint_file(linter: LogLinter, file_path: Path, root: Path) -> FileReport:
    unit = parse_unit(file_path, root)
    diagnostics = linter.lint(unit)
    diagnostics.sort(key=_sort_key)
    logger.debug(
        "%s: %d call sites, %d diagnostics",
        unit.path,
        len(unit.calls),
        len(diagnostics),
    )
    return FileReport(path=unit.path, diagnostics=diagnostics)


def lint_paths(
    root: Path,
    paths: Sequence[Path] = (),
    *,
    settings: LintSettings | None = None,
    jobs: int = 1,
) -> LintResult:
    """Lint the Python files under ``root`` (or the given ``paths``).

    Args:
        root: Analysis root; configuration is read from here when
            ``settings`` is not given and reported paths are relative to it
        paths: Optional files or directories restricting the scan
        settings: Optional pre-loaded settings
        jobs: Number of worker threads

    Returns:
        LintResult with one report per file, sorted by path.
    """
    root = Path(root).resolve()
    if settings is None:
        settings = ConfigStore(root).get()

    linter = LogLinter(settings=settings)
    targets = list(
        iter_lint_targets(
            root,
            paths,
            include_patterns=settings.include,
            exclude_patterns=settings.exclude,
            nested_gitignore=settings.nested_gitignore,
        )
    )
    logger.debug("%s: linting %d files with %d jobs", linter.name, len(targets), jobs)

    if jobs <= 1:
        reports = [lint_file(linter, target, root) for target in targets]
    else:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            reports = list(
                executor.map(lambda target: lint_file(linter, target, root), targets)
            )

    reports.sort(key=lambda report: report.path)
    return LintResult(reports=reports)


__all__ = ["FileReport", "LintResult", "lint_file", "lint_paths"]
