"""Compiler-config path alias matching."""

import os

from ..models.registry_models import PathMapping


def match_alias(module_specifier: str, alias: str) -> str | None:
    """
    Match a specifier against an alias pattern with at most one ``*``.

    Returns:
        The substring captured by ``*`` ("" for an exact non-wildcard match),
        or None when the alias does not apply
    """
    if "*" not in alias:
        return "" if module_specifier == alias else None

    prefix, _, suffix = alias.partition("*")
    if not module_specifier.startswith(prefix):
        return None
    if suffix and not module_specifier.endswith(suffix):
        return None
    if len(module_specifier) < len(prefix) + len(suffix):
        return None

    return module_specifier[len(prefix) : len(module_specifier) - len(suffix)]


def resolve_path_alias(
    module_specifier: str,
    path_mappings: list[PathMapping],
    package_root: str | None = None,
) -> tuple[str, list[str]] | None:
    """
    Expand a specifier through the first matching path mapping.

    Args:
        module_specifier: Literal import specifier
        path_mappings: Mappings in discovery order
        package_root: When given, targets are returned relative to it

    Returns:
        ``(alias, resolved_paths)`` or None when no alias matches
    """
    for mapping in path_mappings:
        captured = match_alias(module_specifier, mapping.alias)
        if captured is None:
            continue

        resolved = [target.replace("*", captured) for target in mapping.targets]
        if package_root:
            resolved = [os.path.relpath(target, package_root).replace(os.sep, "/") for target in resolved]

        return mapping.alias, resolved

    return None
