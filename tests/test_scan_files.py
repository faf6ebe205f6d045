from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import TargetFilter, iter_lint_targets, load_gitignore

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_scan_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "pkg").mkdir()
    (repo_root / "pkg" / "module.py").write_text("print('ok')\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "leak.py").write_text("print('leak')\n", encoding="utf-8")

    symlink_dir = repo_root / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = [
        path.relative_to(repo_root).as_posix()
        for path in TargetFilter.for_root(repo_root).scan()
    ]

    assert "pkg/module.py" in results
    assert "linked/leak.py" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "pkg").mkdir()
    (repo_root / "pkg" / "module.py").write_text("print('ok')\n", encoding="utf-8")
    (repo_root / ".gitignore").write_text("*.bin\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text(
        "pkg/module.py\n", encoding="utf-8"
    )

    symlink_gitignore = repo_root / "linked.gitignore"
    symlink_gitignore.symlink_to(external_root / "outside.gitignore")

    matchers = load_gitignore(repo_root, nested=True)

    assert len(matchers) == 1
    assert TargetFilter(root=repo_root, gitignore=tuple(matchers)).is_ignored(
        repo_root / "pkg" / "module.py"
    ) is False


def test_iter_lint_targets_explicit_paths(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    (repo_root / "pkg").mkdir(parents=True)
    (repo_root / "pkg" / "a.py").write_text("print('a')\n", encoding="utf-8")
    (repo_root / "pkg" / "b.py").write_text("print('b')\n", encoding="utf-8")
    (repo_root / "top.py").write_text("print('top')\n", encoding="utf-8")
    outside = tmp_path / "outside.py"
    outside.write_text("print('outside')\n", encoding="utf-8")

    results = [
        path.relative_to(repo_root).as_posix()
        for path in iter_lint_targets(
            repo_root,
            [repo_root / "top.py", repo_root / "pkg", repo_root / "pkg" / "a.py", outside],
        )
    ]

    assert results == ["top.py", "pkg/a.py", "pkg/b.py"]


def test_scan_exclude_patterns(tmp_path: Path) -> None:
    (tmp_path / "tests").mkdir()
    (tmp_path / "tests" / "test_x.py").write_text("", encoding="utf-8")
    (tmp_path / "app.py").write_text("", encoding="utf-8")

    results = [
        path.relative_to(tmp_path).as_posix()
        for path in TargetFilter.for_root(
            tmp_path, exclude_patterns=["tests/*"]
        ).scan()
    ]

    assert results == ["app.py"]


def test_directory_path_keeps_root_relative_filters(tmp_path: Path) -> None:
    (tmp_path / "tests").mkdir()
    (tmp_path / "tests" / "test_x.py").write_text("", encoding="utf-8")
    (tmp_path / "app").mkdir()
    (tmp_path / "app" / "main.py").write_text("", encoding="utf-8")

    results = list(
        iter_lint_targets(
            tmp_path,
            [tmp_path / "tests", tmp_path / "app"],
            exclude_patterns=["tests/*"],
        )
    )

    assert [path.relative_to(tmp_path).as_posix() for path in results] == [
        "app/main.py"
    ]


def test_directory_path_honors_root_gitignore(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("src/generated/\n", encoding="utf-8")
    (tmp_path / "src" / "generated").mkdir(parents=True)
    (tmp_path / "src" / "generated" / "models.py").write_text("", encoding="utf-8")
    (tmp_path / "src" / "app.py").write_text("", encoding="utf-8")

    results = list(iter_lint_targets(tmp_path, [tmp_path / "src"]))

    assert [path.relative_to(tmp_path).as_posix() for path in results] == [
        "src/app.py"
    ]


def test_include_patterns_match_root_relative_paths(tmp_path: Path) -> None:
    (tmp_path / "pkg" / "sub").mkdir(parents=True)
    (tmp_path / "pkg" / "sub" / "a.py").write_text("", encoding="utf-8")
    (tmp_path / "pkg" / "b.py").write_text("", encoding="utf-8")

    target_filter = TargetFilter.for_root(tmp_path, include_patterns=["pkg/sub/*"])

    assert [
        path.relative_to(tmp_path).as_posix()
        for path in target_filter.scan(tmp_path / "pkg")
    ] == ["pkg/sub/a.py"]
