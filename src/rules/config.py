from __future__ import annotations

import logging
import re
import threading
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "loglint.toml"
PYPROJECT_FILENAME = "pyproject.toml"

DEFAULT_SENSITIVE_WORDS: tuple[str, ...] = (
    "password",
    "token",
    "secret",
    "api_key",
    "apikey",
    "credential",
)


class LogLintConfig(BaseModel):
    """Configuration document for loglint."""

    model_config = ConfigDict(extra="forbid")

    sensitive_words: list[str] = Field(
        default_factory=list,
        description="Terms reported when they appear in a dynamic log message",
    )
    patterns: list[str] = Field(
        default_factory=list,
        description="Regular expressions matched against every log message",
    )
    extra_methods: list[str] = Field(
        default_factory=list,
        description="Logging method names recognized in addition to the defaults",
    )
    extra_packages: list[str] = Field(
        default_factory=list,
        description="Logging package identities recognized in addition to the defaults",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Python files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )

    @field_validator("sensitive_words", mode="after")
    @classmethod
    def normalize_sensitive_words(cls, v: list[str]) -> list[str]:
        """Lowercase terms and drop blank entries, keeping configured order."""
        words: list[str] = []
        for word in v:
            normalized = word.strip().lower()
            if normalized and normalized not in words:
                words.append(normalized)
        return words


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


@dataclass(frozen=True)
class LintSettings:
    """Compiled, read-only configuration used by the rules."""

    sensitive_words: tuple[str, ...] = DEFAULT_SENSITIVE_WORDS
    patterns: tuple[re.Pattern[str], ...] = ()
    extra_methods: tuple[str, ...] = ()
    extra_packages: tuple[str, ...] = ()
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    nested_gitignore: bool = False


def compile_patterns(patterns: list[str]) -> tuple[re.Pattern[str], ...]:
    """Compile patterns one by one, dropping those that fail to compile."""
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            logger.warning("Ignoring invalid pattern %r: %s", pattern, exc)
    return tuple(compiled)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read {path}: {e}"
        raise ConfigError(msg) from e


def _tool_section(data: dict[str, Any], path: Path) -> dict[str, Any] | None:
    """Return the [tool.loglint] table of a pyproject document, if any."""
    tool = data.get("tool")
    if not isinstance(tool, dict) or "loglint" not in tool:
        return None
    section = tool["loglint"]
    if not isinstance(section, dict):
        msg = f"[tool.loglint] in {path} must be a table"
        raise ConfigError(msg)
    return section


def find_config_file(root: Path) -> Path | None:
    """Locate the configuration document under ``root``.

    ``loglint.toml`` wins; otherwise a ``pyproject.toml`` is used when it
    carries a ``[tool.loglint]`` table.
    """
    config_path = root / CONFIG_FILENAME
    if config_path.is_file():
        return config_path

    pyproject_path = root / PYPROJECT_FILENAME
    if pyproject_path.is_file():
        return pyproject_path

    return None


def read_config(root: Path) -> LogLintConfig | None:
    """Strictly parse the configuration under ``root``.

    Returns None when no configuration document exists.

    Raises:
        ConfigError: the document exists but cannot be read or validated.
    """
    config_path = find_config_file(Path(root))
    if config_path is None:
        return None

    data = _read_toml(config_path)
    if config_path.name == PYPROJECT_FILENAME:
        section = _tool_section(data, config_path)
        if section is None:
            return None
        data = section

    try:
        return LogLintConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e


def settings_from_config(config: LogLintConfig | None) -> LintSettings:
    """Compile a parsed configuration, applying the default-term fallback."""
    if config is None:
        return LintSettings()

    sensitive_words = tuple(config.sensitive_words) or DEFAULT_SENSITIVE_WORDS
    return LintSettings(
        sensitive_words=sensitive_words,
        patterns=compile_patterns(config.patterns),
        extra_methods=tuple(config.extra_methods),
        extra_packages=tuple(config.extra_packages),
        include=tuple(config.include),
        exclude=tuple(config.exclude),
        nested_gitignore=config.nested_gitignore,
    )


def load_settings(root: Path) -> LintSettings:
    """Load settings from the configuration under ``root``; never raises.

    A missing or malformed document yields the built-in defaults.
    """
    try:
        config = read_config(root)
    except ConfigError as exc:
        logger.warning("%s; using default configuration", exc)
        return LintSettings()
    return settings_from_config(config)


class ConfigStore:
    """Compute-once holder for the settings of one analysis root.

    The first ``get()`` loads the settings; concurrent first callers block
    until that single load finishes and all observe the same instance.
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root = root
        self._settings: LintSettings | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._settings is not None

    def get(self) -> LintSettings:
        settings = self._settings
        if settings is not None:
            return settings
        with self._lock:
            if self._settings is None:
                root = self._root if self._root is not None else Path.cwd()
                self._settings = load_settings(root)
            return self._settings


_DEFAULT_STORE = ConfigStore()


def get_settings() -> LintSettings:
    """Return the process-wide settings loaded from the working directory."""
    return _DEFAULT_STORE.get()
