"""Discovery of the Python files a lint run covers."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path


def _is_within_root(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _gitignore_files(root: Path, *, nested: bool) -> list[Path]:
    """Return the .gitignore files that apply under ``root``, outermost first."""
    candidates = root.rglob(".gitignore") if nested else [root / ".gitignore"]
    found = {
        path
        for path in candidates
        if path.is_file() and not path.is_symlink() and _is_within_root(path, root)
    }
    return sorted(found, key=lambda p: (len(p.relative_to(root).parts), p.as_posix()))


def load_gitignore(root: Path, *, nested: bool = False) -> list[Callable[[str], bool]]:
    """Parse the root .gitignore, and with ``nested`` every one below it."""
    return [
        cast("Callable[[str], bool]", parse_gitignore(path))
        for path in _gitignore_files(root, nested=nested)
    ]


@dataclass(frozen=True)
class TargetFilter:
    """Decides which Python files under an analysis root are lint targets.

    Include/exclude globs and .gitignore rules are always evaluated against
    the analysis root, whichever of its subdirectories is being scanned.
    """

    root: Path
    include_patterns: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    gitignore: tuple[Callable[[str], bool], ...] = ()

    @classmethod
    def for_root(
        cls,
        root: Path,
        *,
        include_patterns: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
        nested_gitignore: bool = False,
    ) -> TargetFilter:
        return cls(
            root=root,
            include_patterns=tuple(include_patterns or ()),
            exclude_patterns=tuple(exclude_patterns or ()),
            gitignore=tuple(load_gitignore(root, nested=nested_gitignore)),
        )

    def relative_path(self, path: Path) -> str | None:
        """Return ``path`` relative to the root in POSIX form, or None."""
        if not _is_within_root(path, self.root):
            return None
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return None

    def is_ignored(self, path: Path) -> bool:
        for matches in self.gitignore:
            try:
                if matches(str(path)):
                    return True
            except ValueError:
                # outside the directory of that .gitignore
                continue
        return False

    def accepts(self, path: Path) -> bool:
        if not path.is_file() or path.is_symlink():
            return False

        relative = self.relative_path(path)
        if relative is None or self.is_ignored(path):
            return False

        if self.include_patterns and not any(
            fnmatch(relative, pattern) for pattern in self.include_patterns
        ):
            return False
        return not any(fnmatch(relative, pattern) for pattern in self.exclude_patterns)

    def scan(self, directory: Path | None = None) -> list[Path]:
        """Return the accepted ``*.py`` files below ``directory``.

        ``directory`` defaults to the root. Results are sorted by their
        root-relative path.
        """
        start = self.root if directory is None else directory
        found = [path for path in start.rglob("*.py") if self.accepts(path)]
        return sorted(found, key=lambda p: p.relative_to(self.root).as_posix())


def iter_lint_targets(
    root: Path,
    paths: Sequence[Path] = (),
    *,
    include_patterns: Sequence[str] | None = None,
    exclude_patterns: Sequence[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Yield the Python files to lint under ``root``.

    Explicit ``paths`` may name files or directories inside the root.
    Files given explicitly are linted even when ignored; directories are
    scanned with the root's filters. Without paths the whole root is
    scanned.
    """
    target_filter = TargetFilter.for_root(
        root,
        include_patterns=include_patterns,
        exclude_patterns=exclude_patterns,
        nested_gitignore=nested_gitignore,
    )
    if not paths:
        yield from target_filter.scan()
        return

    seen: set[Path] = set()
    for path in paths:
        if target_filter.relative_path(path) is None:
            continue
        if path.is_dir():
            candidates = target_filter.scan(path)
        elif path.is_file():
            candidates = [path]
        else:
            continue

        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved not in seen:
                seen.add(resolved)
                yield candidate


__all__ = ["TargetFilter", "iter_lint_targets", "load_gitignore"]
