"""Parsing utilities for layercycle."""

from parse.ast_imports import extract_import_references, path_to_module_id

__all__ = [
    "extract_import_references",
    "path_to_module_id",
]
