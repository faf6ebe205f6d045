"""Command-line interface for loglint."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from analyzer.runner import lint_paths
from diagnostics.render import format_text, write_jsonl
from rules.config import ConfigStore


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Repository root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="loglint")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Check log messages")
    _add_common_paths(check_parser)
    check_parser.add_argument(
        "--path",
        dest="paths",
        action="append",
        default=[],
        help="File or directory to check instead of the whole root (repeatable)",
    )
    check_parser.add_argument(
        "--format",
        choices=("text", "jsonl"),
        default="text",
        help="Output format (default: text)",
    )
    check_parser.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Number of worker threads (default: 1)",
    )
    check_parser.add_argument(
        "--show-fixes",
        action="store_true",
        help="Print the suggested replacement under each fixable diagnostic",
    )

    config_parser = subparsers.add_parser(
        "show-config", help="Print the effective configuration"
    )
    _add_common_paths(config_parser)

    return parser


def _handle_check(
    root: Path,
    paths: list[str],
    output_format: str,
    jobs: int,
    show_fixes: bool,
) -> int:
    if jobs < 1:
        sys.stderr.write("error: --jobs must be at least 1\n")
        return 2

    resolved_paths = [Path(path).expanduser().resolve() for path in paths]
    result = lint_paths(root, resolved_paths, jobs=jobs)

    if output_format == "jsonl":
        write_jsonl(sys.stdout.buffer, result.diagnostics)
        sys.stdout.flush()
    else:
        for diagnostic in result.diagnostics:
            sys.stdout.write(format_text(diagnostic, show_fixes=show_fixes) + "\n")

    return 0 if result.ok else 1


def _handle_show_config(root: Path) -> int:
    settings = ConfigStore(root).get()
    payload = {
        "sensitive_words": list(settings.sensitive_words),
        "patterns": [pattern.pattern for pattern in settings.patterns],
        "extra_methods": list(settings.extra_methods),
        "extra_packages": list(settings.extra_packages),
        "include": list(settings.include),
        "exclude": list(settings.exclude),
        "nested_gitignore": settings.nested_gitignore,
    }
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    sys.stdout.write(orjson.dumps(payload, option=opts).decode("utf-8") + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root).expanduser().resolve()

    if args.command == "check":
        return _handle_check(
            root, args.paths, args.format, args.jobs, args.show_fixes
        )

    if args.command == "show-config":
        return _handle_show_config(root)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
