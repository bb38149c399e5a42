from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rules.layers import BUILTIN_PROFILES, CUSTOM_PROFILE, DEFAULT_PROFILE

CONFIG_FILENAME = "layercycle.toml"

Severity = Literal["info", "warning", "error"]


class LayerDef(BaseModel):
    """Definition of a single architectural layer in a custom profile."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="Layer name (e.g., 'domain', 'infrastructure')")
    patterns: list[str] = Field(
        description="Path substrings identifying modules of this layer"
    )

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        if not v or any(not pattern for pattern in v):
            msg = "patterns must be a non-empty list of non-empty strings"
            raise ValueError(msg)
        return v


class LayersConfig(BaseModel):
    """Configuration for architectural layer classification."""

    model_config = ConfigDict(extra="forbid")

    profile: str = Field(
        default=DEFAULT_PROFILE,
        description="Built-in profile name, or 'custom' to use [[layers.layer]]",
    )
    layer: list[LayerDef] = Field(
        default_factory=list,
        description="Custom layer definitions (first match wins)",
    )

    @model_validator(mode="after")
    def validate_profile(self) -> LayersConfig:
        if self.profile == CUSTOM_PROFILE:
            if not self.layer:
                msg = "profile 'custom' requires at least one [[layers.layer]] entry"
                raise ValueError(msg)
            return self

        if self.profile not in BUILTIN_PROFILES:
            known = ", ".join(sorted([*BUILTIN_PROFILES, CUSTOM_PROFILE]))
            msg = f"Unknown layer profile '{self.profile}'. Known profiles: {known}"
            raise ValueError(msg)
        if self.layer:
            msg = "[[layers.layer]] entries are only allowed with profile 'custom'"
            raise ValueError(msg)
        return self


class RulesConfig(BaseModel):
    """Toggles for the cycle checks."""

    model_config = ConfigDict(extra="forbid")

    module_cycles: bool = Field(default=True, description="Report module cycles")
    layer_cycles: bool = Field(default=True, description="Report layer cycles")
    min_layer_cycle_layers: int = Field(
        default=3,
        ge=2,
        description="Minimum number of distinct layers for a reported layer cycle",
    )


class LayerCycleConfig(BaseModel):
    """Configuration for a layercycle analysis session."""

    model_config = ConfigDict(extra="forbid")

    source_root: str = Field(
        default=".",
        description="Codebase root, relative to the repository root",
    )
    package_name: str | None = Field(
        default=None,
        description="Own package name (default: source_root directory name)",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Python files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    severity: Severity = Field(
        default="warning",
        description="Severity attached to every diagnostic",
    )
    rules: RulesConfig = Field(default_factory=RulesConfig)
    layers: LayersConfig = Field(
        default_factory=LayersConfig,
        description="Architectural layer classification",
    )

    def with_profile(self, profile: str) -> LayerCycleConfig:
        """Return a copy whose layer profile is overridden by ``profile``."""
        data: dict[str, Any] = self.model_dump()
        data["layers"]["profile"] = profile
        if profile != CUSTOM_PROFILE:
            data["layers"]["layer"] = []
        try:
            return LayerCycleConfig.model_validate(data)
        except Exception as e:
            raise ConfigError(str(e)) from e


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_source_root(root: Path, source_root: str) -> Path:
    """Resolve a config-provided source_root safely within the repo root."""
    if source_root.startswith("~") or Path(source_root).is_absolute():
        msg = "source_root must be a relative path within the repo root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_source = (resolved_root / source_root).resolve()
    except OSError as exc:
        msg = f"Failed to resolve source_root '{source_root}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_source.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"source_root '{source_root}' escapes the repository root"
        raise ConfigError(msg) from exc

    return resolved_source


def package_name_for(config: LayerCycleConfig, source_dir: Path) -> str:
    """Return the configured package name, defaulting to the source dir name."""
    return config.package_name or source_dir.name


def load_config(root: Path) -> LayerCycleConfig:
    """Load configuration from layercycle.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return LayerCycleConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return LayerCycleConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
