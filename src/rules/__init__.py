"""Rule definitions for log messages."""

from rules.config import (
    ConfigError,
    ConfigStore,
    LintSettings,
    LogLintConfig,
    load_settings,
)
from rules.formatting import FragmentScan, check_formatting, scan_fragment
from rules.security import check_security, has_dynamic_data

__all__ = [
    "ConfigError",
    "ConfigStore",
    "FragmentScan",
    "LintSettings",
    "LogLintConfig",
    "check_formatting",
    "check_security",
    "has_dynamic_data",
    "load_settings",
    "scan_fragment",
]
