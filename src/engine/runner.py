"""Whole-project analysis on top of AnalysisSession."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from engine.session import AnalysisSession, GraphSummary
from parse.ast_imports import extract_import_references, path_to_module_id
from rules.config import load_config, package_name_for, resolve_source_root
from scan.files import find_source_files, find_top_level_packages

if TYPE_CHECKING:
    from pathlib import Path

    from diagnostics.models import Diagnostic, ImportReference
    from rules.config import LayerCycleConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectReport:
    root: str
    codebase_root: str
    package_name: str
    module_count: int
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)
    summary: GraphSummary | None = None
    skipped: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def analyze_project(
    root: Path,
    config: LayerCycleConfig | None = None,
) -> ProjectReport:
    """Detect module and layer cycles across every Python file of a project.

    All modules are ingested before any is checked, so every check runs on
    the complete graph and no cycle is missed because of visit order.

    Args:
        root: Repository root; ``layercycle.toml`` is read from here when
            ``config`` is not given.
        config: Optional explicit configuration.

    Returns:
        ProjectReport with sorted diagnostics and a graph summary.
    """
    if config is None:
        config = load_config(root)

    source_dir = resolve_source_root(root, config.source_root)
    package_name = package_name_for(config, source_dir)
    local_packages = find_top_level_packages(source_dir)
    if (
        config.package_name is None
        and not local_packages
        and not (source_dir / "__init__.py").is_file()
    ):
        logger.warning(
            "No package found under %s; absolute imports other than %r are "
            "treated as external",
            source_dir,
            package_name,
        )
    codebase_root = path_to_module_id(source_dir)

    session = AnalysisSession.from_config(
        config, codebase_root=codebase_root, package_name=package_name
    )

    modules: list[tuple[str, list[ImportReference]]] = []
    skipped: list[str] = []
    for file_path in find_source_files(
        source_dir,
        include_patterns=config.include or None,
        exclude_patterns=config.exclude or None,
        nested_gitignore=config.nested_gitignore,
    ):
        module_id = path_to_module_id(file_path)
        try:
            imports = extract_import_references(
                file_path, source_dir, package_name, local_packages
            )
        except OSError as exc:
            logger.warning("Cannot read %s: %s", file_path, exc)
            skipped.append(module_id)
            continue
        modules.append((module_id, imports))

    for module_id, imports in modules:
        session.ingest(module_id, imports)

    diagnostics: list[Diagnostic] = []
    for module_id, imports in modules:
        diagnostics.extend(session.check(module_id, imports))

    diagnostics.sort(key=lambda d: d.sort_key())
    logger.info(
        "Analyzed %d modules under %s: %d diagnostics",
        len(modules),
        codebase_root,
        len(diagnostics),
    )

    return ProjectReport(
        root=str(root),
        codebase_root=codebase_root,
        package_name=package_name,
        module_count=len(modules),
        diagnostics=tuple(diagnostics),
        summary=session.summary(),
        skipped=tuple(skipped),
    )


__all__ = ["ProjectReport", "analyze_project"]
