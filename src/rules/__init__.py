"""Configuration and layer rules for layercycle."""

from rules.config import (
    ConfigError,
    LayerCycleConfig,
    LayersConfig,
    load_config,
)
from rules.layers import (
    BUILTIN_PROFILES,
    LayerClassifier,
    LayerRule,
    classify_layer,
    profile_rules,
)

__all__ = [
    "BUILTIN_PROFILES",
    "ConfigError",
    "LayerClassifier",
    "LayerCycleConfig",
    "LayerRule",
    "LayersConfig",
    "classify_layer",
    "load_config",
    "profile_rules",
]
