"""Command-line interface for layercycle."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from engine.runner import analyze_project
from report.render import render_json, render_text, write_report
from rules.config import ConfigError, load_config
from rules.layers import BUILTIN_PROFILES, CUSTOM_PROFILE


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Repository root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="layercycle")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Report module and layer dependency cycles"
    )
    _add_common_paths(check_parser)
    check_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    check_parser.add_argument(
        "--profile",
        choices=sorted([*BUILTIN_PROFILES, CUSTOM_PROFILE]),
        default=None,
        help="Layer profile (default: config profile)",
    )
    check_parser.add_argument(
        "--out",
        default=None,
        help="Write the report to this file instead of stdout",
    )

    subparsers.add_parser("profiles", help="List built-in layer profiles")

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _handle_check(root: Path, fmt: str, profile: str | None, out: str | None) -> int:
    try:
        config = load_config(root)
        if profile is not None:
            config = config.with_profile(profile)
        report = analyze_project(root, config)
    except ConfigError as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return 2

    if out is not None:
        write_report(Path(out).expanduser().resolve(), report, fmt)
    elif fmt == "json":
        sys.stdout.write(render_json(report).decode("utf-8") + "\n")
    else:
        sys.stdout.write(render_text(report))

    return 0 if report.ok else 1


def _handle_profiles() -> int:
    for name, rules in sorted(BUILTIN_PROFILES.items()):
        layers = ", ".join(dict.fromkeys(rule.layer for rule in rules))
        sys.stdout.write(f"{name}: {layers}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "check":
        root = Path(args.root).expanduser().resolve()
        return _handle_check(root, args.format, args.profile, args.out)

    if args.command == "profiles":
        return _handle_profiles()

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
