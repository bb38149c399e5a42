"""Diagnostic models produced by the cycle checks.

This module contains the source-location, import-reference and diagnostic
records shared by the front end, the engine and the reporters.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RULE_NAME = "circular_dependency"


class CycleKind(str, Enum):
    """Granularity at which a cycle was found."""

    MODULE_CYCLE = "module_cycle"
    LAYER_CYCLE = "layer_cycle"


class SourceLocation(BaseModel):
    """A span in a source file; lines are 1-based, columns 0-based."""

    model_config = ConfigDict(frozen=True)

    path: str
    line: int = Field(ge=1)
    column: int = Field(default=0, ge=0)
    end_line: int | None = None
    end_column: int | None = None


class ImportReference(BaseModel):
    """One raw import reference found in a module, with its location."""

    model_config = ConfigDict(frozen=True)

    text: str
    location: SourceLocation


class Diagnostic(BaseModel):
    """A reported circular dependency anchored to an import statement."""

    location: SourceLocation
    message: str
    suggestion: str
    cycle_kind: CycleKind
    cycle: list[str] = Field(default_factory=list)
    severity: Literal["info", "warning", "error"] = "warning"
    rule: str = RULE_NAME

    def sort_key(self) -> tuple[str, int, int, str]:
        return (
            self.location.path,
            self.location.line,
            self.location.column,
            self.cycle_kind.value,
        )


__all__ = [
    "RULE_NAME",
    "CycleKind",
    "Diagnostic",
    "ImportReference",
    "SourceLocation",
]
