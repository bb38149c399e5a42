"""Layer classification profiles and the path-pattern classifier."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from utils import to_posix

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from rules.config import LayersConfig

CUSTOM_PROFILE = "custom"
DEFAULT_PROFILE = "traditional"


class LayerRule(NamedTuple):
    """A single ``pattern -> layer`` rule; ``pattern`` is a path substring."""

    pattern: str
    layer: str


def _rules(*groups: tuple[str, Iterable[str]]) -> tuple[LayerRule, ...]:
    return tuple(
        LayerRule(pattern, layer) for layer, patterns in groups for pattern in patterns
    )


BUILTIN_PROFILES: dict[str, tuple[LayerRule, ...]] = {
    "traditional": _rules(
        ("domain", ["/domain/"]),
        ("data", ["/data/"]),
        ("presentation", ["/presentation/", "/ui/", "/widgets/", "/screens/", "/pages/"]),
        ("infrastructure", ["/infrastructure/"]),
        ("application", ["/application/", "/use_cases/", "/usecases/"]),
    ),
    "layered": _rules(
        ("domain", ["/domain/", "/entities/", "/business/", "/policies/"]),
        ("application", ["/application/", "/use_cases/", "/usecases/", "/services/"]),
        ("adapter", ["/adapters/", "/controllers/", "/presenters/", "/gateways/"]),
        (
            "infrastructure",
            ["/infrastructure/", "/persistence/", "/database/", "/network/", "/external/"],
        ),
    ),
    "hexagonal": _rules(
        ("ports", ["/ports/"]),
        ("primary_adapters", ["/adapters/primary/"]),
        ("secondary_adapters", ["/adapters/secondary/"]),
        ("application_core", ["/application/core", "/hexagon/"]),
        ("domain", ["/domain/"]),
    ),
    "onion": _rules(
        ("domain_model", ["/domain/entities", "/core/entities"]),
        ("domain_services", ["/domain/services", "/core/services"]),
        ("application_services", ["/application/services"]),
        ("infrastructure", ["/infrastructure/"]),
    ),
    "clean": _rules(
        ("entities", ["/entities/"]),
        ("use_cases", ["/use_cases/", "/usecases/"]),
        ("interface_adapters", ["/interface_adapters/"]),
        ("frameworks", ["/frameworks/", "/drivers/"]),
    ),
}


class UnknownProfileError(ValueError):
    """Raised when a layer profile name is not registered."""


def profile_rules(layers_config: LayersConfig) -> tuple[LayerRule, ...]:
    """Return the ordered rules of the profile selected by ``layers_config``."""
    if layers_config.profile == CUSTOM_PROFILE:
        return tuple(
            LayerRule(pattern, layer_def.name)
            for layer_def in layers_config.layer
            for pattern in layer_def.patterns
        )
    try:
        return BUILTIN_PROFILES[layers_config.profile]
    except KeyError:
        known = ", ".join(sorted([*BUILTIN_PROFILES, CUSTOM_PROFILE]))
        msg = f"Unknown layer profile '{layers_config.profile}'. Known profiles: {known}"
        raise UnknownProfileError(msg) from None


def classify_layer(path: str, rules: Sequence[LayerRule]) -> str | None:
    """Classify a module path into an architectural layer.

    Uses first-match-wins semantics over case-insensitive substring patterns.
    """
    normalized = to_posix(path).lower()
    for rule in rules:
        if to_posix(rule.pattern).lower() in normalized:
            return rule.layer
    return None


class LayerClassifier:
    """Cached classifier for one active profile."""

    def __init__(self, rules: Sequence[LayerRule]) -> None:
        self.rules = tuple(rules)
        self._cache: dict[str, str | None] = {}

    @classmethod
    def from_config(cls, layers_config: LayersConfig) -> LayerClassifier:
        return cls(profile_rules(layers_config))

    @classmethod
    def from_profile(cls, name: str) -> LayerClassifier:
        if name not in BUILTIN_PROFILES:
            known = ", ".join(sorted(BUILTIN_PROFILES))
            msg = f"Unknown layer profile '{name}'. Known profiles: {known}"
            raise UnknownProfileError(msg)
        return cls(BUILTIN_PROFILES[name])

    @property
    def layers(self) -> list[str]:
        """Layer labels in rule order, without duplicates."""
        return list(dict.fromkeys(rule.layer for rule in self.rules))

    def classify(self, module_id: str) -> str | None:
        if module_id not in self._cache:
            self._cache[module_id] = classify_layer(module_id, self.rules)
        return self._cache[module_id]


__all__ = [
    "BUILTIN_PROFILES",
    "CUSTOM_PROFILE",
    "DEFAULT_PROFILE",
    "LayerClassifier",
    "LayerRule",
    "UnknownProfileError",
    "classify_layer",
    "profile_rules",
]
