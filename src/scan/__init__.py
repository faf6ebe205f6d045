"""Discovery of Python files to lint."""

from scan.files import TargetFilter, iter_lint_targets, load_gitignore

__all__ = ["TargetFilter", "iter_lint_targets", "load_gitignore"]
