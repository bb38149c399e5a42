"""Text and JSON rendering of project reports."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from pathlib import Path

    from diagnostics.models import Diagnostic
    from engine.runner import ProjectReport


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return obj


def format_diagnostic(diagnostic: Diagnostic) -> str:
    location = diagnostic.location
    return (
        f"{location.path}:{location.line}:{location.column}: "
        f"{diagnostic.severity}: {diagnostic.message} "
        f"[{diagnostic.cycle_kind.value}]\n"
        f"    suggestion: {diagnostic.suggestion}"
    )


def render_text(report: ProjectReport) -> str:
    lines = [format_diagnostic(d) for d in report.diagnostics]
    summary = report.summary
    cycles = len(summary.cycles) if summary is not None else 0
    lines.append(
        f"{report.module_count} modules, {len(report.diagnostics)} diagnostics, "
        f"{cycles} cyclic components"
    )
    return "\n".join(lines) + "\n"


def report_payload(report: ProjectReport) -> dict[str, object]:
    summary = report.summary
    return {
        "root": report.root,
        "codebase_root": report.codebase_root,
        "package_name": report.package_name,
        "module_count": report.module_count,
        "skipped": list(report.skipped),
        "diagnostics": [_to_dict(d) for d in report.diagnostics],
        "summary": _to_dict(summary) if summary is not None else None,
    }


def render_json(report: ProjectReport) -> bytes:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(report_payload(report), option=opts)


def write_report(path: Path, report: ProjectReport, fmt: str) -> None:
    if fmt == "json":
        path.write_bytes(render_json(report))
    else:
        path.write_text(render_text(report), encoding="utf-8")


__all__ = [
    "format_diagnostic",
    "render_json",
    "render_text",
    "report_payload",
    "write_report",
]
