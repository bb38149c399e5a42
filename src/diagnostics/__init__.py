"""Diagnostics for layercycle."""

from diagnostics.emitter import (
    DiagnosticEmitter,
    ResolvedImport,
    describe_cycle,
    suggest_fix,
)
from diagnostics.models import CycleKind, Diagnostic, ImportReference, SourceLocation

__all__ = [
    "CycleKind",
    "Diagnostic",
    "DiagnosticEmitter",
    "ImportReference",
    "ResolvedImport",
    "SourceLocation",
    "describe_cycle",
    "suggest_fix",
]
