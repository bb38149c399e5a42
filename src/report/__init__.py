"""Report rendering for layercycle."""

from report.render import (
    format_diagnostic,
    render_json,
    render_text,
    write_report,
)

__all__ = [
    "format_diagnostic",
    "render_json",
    "render_text",
    "write_report",
]
