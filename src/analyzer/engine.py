"""Rule engine: classify each call site and apply the message rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from analyzer.classifier import DEFAULT_SURFACE, LoggingSurface, is_logger_call
from diagnostics.models import DiagnosticCollector
from parse.expressions import extract_fragments
from rules.config import get_settings
from rules.formatting import check_formatting
from rules.security import check_security

if TYPE_CHECKING:
    from parse.callsite import CallSite, CompilationUnit
    from diagnostics.models import Diagnostic, Reporter
    from rules.config import LintSettings


class LogLinter:
    """Checks logging call sites against the formatting and security rules.

    Settings are injected at construction; when omitted, the process-wide
    settings are loaded once on first use.
    """

    def __init__(
        self,
        settings: LintSettings | None = None,
        surface: LoggingSurface = DEFAULT_SURFACE,
    ) -> None:
        self._settings = settings
        self._surface = surface
        self._effective_surface: LoggingSurface | None = None

    @property
    def name(self) -> str:
        return "loglint"

    @property
    def settings(self) -> LintSettings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def surface(self) -> LoggingSurface:
        if self._effective_surface is None:
            settings = self.settings
            self._effective_surface = self._surface.extended(
                methods=settings.extra_methods, packages=settings.extra_packages
            )
        return self._effective_surface

    def check_call(self, call: CallSite, reporter: Reporter) -> None:
        surface = self.surface
        if not is_logger_call(call, surface):
            return

        message = call.message
        if message is None:
            return

        check_formatting(extract_fragments(message), reporter)
        check_security(call, self.settings, reporter)

    def run(self, unit: CompilationUnit, reporter: Reporter) -> None:
        """Check every call site of a compilation unit."""
        for call in unit.calls:
            self.check_call(call, reporter)

    def lint(self, unit: CompilationUnit) -> list[Diagnostic]:
        collector = DiagnosticCollector()
        self.run(unit, collector)
        return collector.diagnostics


__all__ = ["LogLinter"]
