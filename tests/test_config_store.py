from __future__ import annotations

import logging
import threading
import time
from pathlib import Path

import pytest

import rules.config as config_module
from rules.config import (
    DEFAULT_SENSITIVE_WORDS,
    ConfigError,
    ConfigStore,
    LintSettings,
    load_settings,
    read_config,
)


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "loglint.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)

    assert settings.sensitive_words == DEFAULT_SENSITIVE_WORDS
    assert settings.patterns == ()


def test_default_sensitive_words() -> None:
    assert DEFAULT_SENSITIVE_WORDS == (
        "password",
        "token",
        "secret",
        "api_key",
        "apikey",
        "credential",
    )


def test_configured_words_are_lowercased_in_order(tmp_path: Path) -> None:
    _write_config(tmp_path, 'sensitive_words = ["SSN", "Pin", "ssn", " "]')

    settings = load_settings(tmp_path)

    assert settings.sensitive_words == ("ssn", "pin")


def test_empty_word_list_falls_back_but_keeps_patterns(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        r"""
sensitive_words = []
patterns = ['\d{3}-\d{2}-\d{4}']
""".strip(),
    )

    settings = load_settings(tmp_path)

    assert settings.sensitive_words == DEFAULT_SENSITIVE_WORDS
    assert [p.pattern for p in settings.patterns] == [r"\d{3}-\d{2}-\d{4}"]


def test_invalid_pattern_is_dropped_individually(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write_config(tmp_path, r"""patterns = ['(', 'secret\d+', '[a-']""")

    with caplog.at_level(logging.WARNING, logger="rules.config"):
        settings = load_settings(tmp_path)

    assert [p.pattern for p in settings.patterns] == [r"secret\d+"]
    assert "Ignoring invalid pattern" in caplog.text


def test_invalid_toml_falls_back_to_defaults(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write_config(tmp_path, "sensitive_words = [")

    with caplog.at_level(logging.WARNING, logger="rules.config"):
        settings = load_settings(tmp_path)

    assert settings == LintSettings()
    assert "Invalid TOML" in caplog.text


def test_invalid_toml_raises_in_strict_reader(tmp_path: Path) -> None:
    _write_config(tmp_path, "sensitive_words = [")

    with pytest.raises(ConfigError):
        read_config(tmp_path)


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        read_config(tmp_path)
    assert load_settings(tmp_path) == LintSettings()


def test_wrong_value_type_falls_back_to_defaults(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
sensitive_words = "password"
patterns = ["internal"]
""".strip(),
    )

    settings = load_settings(tmp_path)

    assert settings.sensitive_words == DEFAULT_SENSITIVE_WORDS
    assert settings.patterns == ()


def test_surface_and_scan_options_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
extra_methods = ["warning", "critical"]
extra_packages = ["applog"]
exclude = ["tests/**"]
nested_gitignore = true
""".strip(),
    )

    settings = load_settings(tmp_path)

    assert settings.extra_methods == ("warning", "critical")
    assert settings.extra_packages == ("applog",)
    assert settings.exclude == ("tests/**",)
    assert settings.nested_gitignore is True


def test_pyproject_tool_section_is_used(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
[project]
name = "demo"

[tool.loglint]
sensitive_words = ["session"]
""".strip(),
        encoding="utf-8",
    )

    assert load_settings(tmp_path).sensitive_words == ("session",)


def test_pyproject_without_tool_section_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n', encoding="utf-8"
    )

    assert read_config(tmp_path) is None
    assert load_settings(tmp_path) == LintSettings()


def test_loglint_toml_wins_over_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.loglint]\nsensitive_words = ["session"]\n', encoding="utf-8"
    )
    _write_config(tmp_path, 'sensitive_words = ["cookie"]')

    assert load_settings(tmp_path).sensitive_words == ("cookie",)


def test_store_loads_once_and_ignores_later_changes(tmp_path: Path) -> None:
    _write_config(tmp_path, 'sensitive_words = ["cookie"]')
    store = ConfigStore(tmp_path)

    first = store.get()
    _write_config(tmp_path, 'sensitive_words = ["session"]')
    second = store.get()

    assert store.loaded is True
    assert first is second
    assert second.sensitive_words == ("cookie",)


def test_store_defaults_to_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_config(tmp_path, 'sensitive_words = ["cookie"]')
    monkeypatch.chdir(tmp_path)

    assert ConfigStore().get().sensitive_words == ("cookie",)


def test_store_initializes_once_under_concurrent_first_use(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[Path] = []

    def slow_load(root: Path) -> LintSettings:
        calls.append(root)
        time.sleep(0.05)
        return LintSettings(sensitive_words=("cookie",))

    monkeypatch.setattr(config_module, "load_settings", slow_load)
    store = ConfigStore(tmp_path)
    barrier = threading.Barrier(8)
    results: list[LintSettings] = []
    results_lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        settings = store.get()
        with results_lock:
            results.append(settings)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls == [tmp_path]
    assert len(results) == 8
    assert all(settings is results[0] for settings in results)
