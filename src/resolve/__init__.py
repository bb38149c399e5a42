"""Reference resolution for layercycle."""

from resolve.references import (
    External,
    ReferenceResolver,
    Resolution,
    ResolvedModule,
    Unresolvable,
)

__all__ = [
    "External",
    "ReferenceResolver",
    "Resolution",
    "ResolvedModule",
    "Unresolvable",
]
