from __future__ import annotations

import pytest

from resolve.references import (
    External,
    ReferenceResolver,
    ResolvedModule,
    Unresolvable,
)


@pytest.fixture
def resolver() -> ReferenceResolver:
    return ReferenceResolver("/proj", "app")


def test_relative_parent_reference_resolves_against_module_directory(
    resolver: ReferenceResolver,
) -> None:
    result = resolver.resolve("../c.src", "/proj/lib/a/b.src")

    assert result == ResolvedModule("/proj/lib/c.src")


def test_relative_sibling_reference_ignores_dot_and_empty_segments(
    resolver: ReferenceResolver,
) -> None:
    result = resolver.resolve(".//./d.src", "/proj/lib/a/b.src")

    assert result == ResolvedModule("/proj/lib/a/d.src")


def test_resolution_is_idempotent(resolver: ReferenceResolver) -> None:
    first = resolver.resolve("../../x/y.src", "/proj/lib/a/b.src")
    second = resolver.resolve("../../x/y.src", "/proj/lib/a/b.src")

    assert first == second == ResolvedModule("/proj/x/y.src")


def test_deep_ascent_past_filesystem_root_is_permissive_and_external(
    resolver: ReferenceResolver,
) -> None:
    result = resolver.resolve("../../../../../../etc/passwd", "/proj/lib/a/b.src")

    assert result == External("../../../../../../etc/passwd")


def test_relative_reference_collapsing_to_root_is_unresolvable(
    resolver: ReferenceResolver,
) -> None:
    result = resolver.resolve("../../..", "/proj/lib/b.src")

    assert isinstance(result, Unresolvable)


def test_own_package_reference_rewrites_to_codebase_root(
    resolver: ReferenceResolver,
) -> None:
    result = resolver.resolve("package:app/domain/user.src", "/proj/ui/page.src")

    assert result == ResolvedModule("/proj/domain/user.src")


def test_bare_package_qualified_reference_is_treated_like_package_scheme(
    resolver: ReferenceResolver,
) -> None:
    assert resolver.resolve("app/domain/user.src", "/proj/ui/page.src") == (
        ResolvedModule("/proj/domain/user.src")
    )


def test_foreign_package_and_platform_references_are_external(
    resolver: ReferenceResolver,
) -> None:
    assert resolver.resolve("package:vendor/widgets.py", "/proj/a.src") == (
        External("package:vendor/widgets.py")
    )
    assert resolver.resolve("std:async", "/proj/a.src") == External("std:async")
    assert resolver.resolve("requests", "/proj/a.src") == External("requests")


def test_absolute_path_reference_inside_and_outside_root(
    resolver: ReferenceResolver,
) -> None:
    assert resolver.resolve("/proj/lib/x.src", "/proj/a.src") == (
        ResolvedModule("/proj/lib/x.src")
    )
    assert resolver.resolve("/other/x.src", "/proj/a.src") == External("/other/x.src")


def test_prefix_sibling_directory_is_not_inside_root(
    resolver: ReferenceResolver,
) -> None:
    assert resolver.resolve("/project2/x.src", "/proj/a.src") == (
        External("/project2/x.src")
    )


def test_backslash_separators_are_normalized(resolver: ReferenceResolver) -> None:
    result = resolver.resolve("..\\c.src", "/proj/lib/a/b.src")

    assert result == ResolvedModule("/proj/lib/c.src")


@pytest.mark.parametrize(
    "reference",
    ["", "   ", "package:", "package:/x.src", "package:app", "package:app/", "a\x00b"],
)
def test_malformed_references_are_unresolvable(
    resolver: ReferenceResolver, reference: str
) -> None:
    assert isinstance(resolver.resolve(reference, "/proj/a.src"), Unresolvable)


def test_empty_codebase_root_is_rejected() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        ReferenceResolver("", "app")
