"""Logging surface and call-site classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from parse.callsite import CallSite


@dataclass(frozen=True)
class LoggingSurface:
    """Recognized logging method names and logging package identities."""

    methods: frozenset[str]
    packages: frozenset[str]

    def extended(
        self,
        *,
        methods: Iterable[str] = (),
        packages: Iterable[str] = (),
    ) -> LoggingSurface:
        """Return a surface that also recognizes ``methods`` and ``packages``."""
        return LoggingSurface(
            methods=self.methods | frozenset(methods),
            packages=self.packages | frozenset(packages),
        )


DEFAULT_SURFACE = LoggingSurface(
    methods=frozenset({"info", "error", "warn", "debug", "fatal", "panic", "print"}),
    packages=frozenset({"logging", "structlog", "loguru"}),
)


def is_logger_call(call: CallSite, surface: LoggingSurface = DEFAULT_SURFACE) -> bool:
    """Return True when ``call`` is a logging invocation worth checking.

    Package identity is compared exactly; an unresolved receiver is never a
    logging call.
    """
    if call.method is None or call.method not in surface.methods:
        return False
    if not call.args:
        return False
    if call.package is None:
        return False
    return call.package in surface.packages


__all__ = ["DEFAULT_SURFACE", "LoggingSurface", "is_logger_call"]
