"""
Dependency normalization and validation.

A dependency spec is None, a sequence of required field names, or a mapping
with "requires" (field names) and/or "dependsOn" (computations that must
already have run for the request).
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterable, List

from .exceptions import DependencyUnmetError, DependsOnUnmetError


def expand_dependencies(dependencies: Any) -> Dict[str, Any]:
    """Normalize a dependency spec into {"requires"?: [...], "dependsOn"?: [...]}."""
    if not dependencies:
        return {}

    if isinstance(dependencies, (list, tuple)):
        return {"requires": list(dependencies)}

    if isinstance(dependencies, Mapping) and (
        "dependsOn" in dependencies or "requires" in dependencies
    ):
        return dependencies

    return {}


def freeze_dependencies(dependencies: Any) -> Mapping:
    """Normalized read-only copy of a dependency spec, taken once at stage build time."""
    expanded = expand_dependencies(dependencies)
    return MappingProxyType(
        {key: tuple(expanded[key] or ()) for key in ("requires", "dependsOn") if key in expanded}
    )


def filter_missing_requires(data: Mapping, requires: Iterable[str]) -> List[str]:
    # Only absent or None count as missing; 0, "", [] and False are present.
    return [field for field in requires if data.get(field) is None]


def filter_missing_dependencies(data: Mapping, depends_on: Iterable[Any] = ()) -> List[Any]:
    return [dependency for dependency in depends_on if not data.get(dependency)]


def validate_dependencies(name: str, data: Mapping, dependencies: Any) -> None:
    """
    Raise the first unmet dependency of stage `name` against merged view `data`.

    dependsOn is checked first; when it fails, requires is not evaluated.

    Raises:
        DependsOnUnmetError: a dependsOn computation has not run (500)
        DependencyUnmetError: a required field is absent or None (400)
    """
    expanded = expand_dependencies(dependencies)

    depends_on = expanded.get("dependsOn")
    if depends_on:
        missing = filter_missing_dependencies(data, depends_on)
        if missing:
            raise DependsOnUnmetError(name, missing[0], data.get("url"), data.get("method"))

    requires = expanded.get("requires")
    if requires:
        missing = filter_missing_requires(data, requires)
        if missing:
            raise DependencyUnmetError(name, missing[0], data.get("url"), data.get("method"))
