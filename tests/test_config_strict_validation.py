from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import ConfigError, LayerCycleConfig, load_config, resolve_source_root


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "layercycle.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_file_yields_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == LayerCycleConfig()
    assert config.layers.profile == "traditional"
    assert config.rules.min_layer_cycle_layers == 3
    assert config.severity == "warning"


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "source_root = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_profile_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[layers]
profile = "pyramid"
""".strip(),
    )

    with pytest.raises(ConfigError, match="Unknown layer profile"):
        load_config(tmp_path)


def test_custom_profile_requires_layers(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[layers]
profile = "custom"
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_layer_entries_rejected_for_builtin_profile(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[layers]
profile = "onion"

[[layers.layer]]
name = "domain"
patterns = ["/domain/"]
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_nested_layer_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[layers]
profile = "custom"

[[layers.layer]]
name = "domain"
patterns = ["/domain/"]
bogus = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_severity_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'severity = "fatal"')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_valid_custom_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
source_root = "src/shop"
package_name = "shop"
exclude = ["**/migrations/**"]
severity = "error"

[rules]
layer_cycles = false

[layers]
profile = "custom"

[[layers.layer]]
name = "domain"
patterns = ["/domain/"]

[[layers.layer]]
name = "infrastructure"
patterns = ["/infra/", "/db/"]
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.source_root == "src/shop"
    assert config.package_name == "shop"
    assert config.severity == "error"
    assert config.rules.layer_cycles is False
    assert config.rules.module_cycles is True
    assert [layer.name for layer in config.layers.layer] == [
        "domain",
        "infrastructure",
    ]


def test_with_profile_overrides_builtin_profile() -> None:
    config = LayerCycleConfig().with_profile("hexagonal")

    assert config.layers.profile == "hexagonal"


def test_with_profile_custom_without_layers_raises_config_error() -> None:
    with pytest.raises(ConfigError):
        LayerCycleConfig().with_profile("custom")


def test_resolve_source_root_rejects_escape(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()

    with pytest.raises(ConfigError, match="escapes the repository root"):
        resolve_source_root(repo_root, "../outside")


def test_resolve_source_root_rejects_absolute_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="relative path"):
        resolve_source_root(tmp_path, str(tmp_path))
