"""
Import classification.

Turns raw import occurrences into typed ``ImportEntry`` edges. The relative
file, package, alias and registry classifications are computed independently;
one statement can carry several of them.
"""

from ..models.registry_models import (
    ImportEntry,
    KnownRegistryEntry,
    PackageInfo,
    PackageReference,
    RawImport,
    ScanOptions,
)
from .path_aliases import resolve_path_alias


class ImportType:
    """Package reference types taken from the package manifest."""

    DEPENDENCY = "dependency"
    DEV_DEPENDENCY = "devDependency"


def is_relative_module(module_specifier: str) -> bool:
    return module_specifier.startswith("./") or module_specifier.startswith("../")


def get_package_name(module_specifier: str) -> str | None:
    """Leading package segment; scoped packages keep ``@scope/name``."""
    if not module_specifier:
        return None

    segments = module_specifier.split("/")
    if module_specifier.startswith("@"):
        if len(segments) >= 2:
            return f"{segments[0]}/{segments[1]}"
        return None

    return segments[0] or None


def resolve_package_match(
    module_specifier: str, package_info: PackageInfo | None
) -> tuple[PackageReference | None, PackageReference | None]:
    """
    Match a specifier against the manifest's dependencies, then devDependencies.

    Returns:
        ``(dependency, dev_dependency)``; at most one of them is set
    """
    if package_info is None:
        return None, None

    package_name = get_package_name(module_specifier)
    if not package_name:
        return None, None

    if package_name in package_info.dependencies:
        return (
            PackageReference(
                name=package_name,
                version=package_info.dependencies[package_name],
                type=ImportType.DEPENDENCY,
            ),
            None,
        )

    if package_name in package_info.dev_dependencies:
        return None, PackageReference(
            name=package_name,
            version=package_info.dev_dependencies[package_name],
            type=ImportType.DEV_DEPENDENCY,
        )

    return None, None


def find_registry_dependency(
    resolved_paths: list[str], known_registries: list[KnownRegistryEntry]
) -> PackageReference | None:
    """Classify the first resolved path that falls under a known registry prefix."""
    if not resolved_paths or not known_registries:
        return None

    for resolved_path in resolved_paths:
        normalized_path = normalize_relative_path(resolved_path)
        for registry in known_registries:
            if not normalized_path.startswith(registry.normalized_prefix):
                continue

            remainder = normalized_path[len(registry.normalized_prefix) :].lstrip("/")
            if not remainder:
                continue

            return PackageReference(name=fold_registry_name(remainder), type=registry.type)

    return None


def fold_registry_name(remainder: str) -> str:
    """Keep registry names flat: ``forms/input`` becomes ``forms-input``."""
    segments = [segment for segment in remainder.split("/") if segment]
    return "-".join(segments)


def normalize_relative_path(value: str) -> str:
    normalized = value.replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def classify_import(raw_import: RawImport, options: ScanOptions) -> ImportEntry:
    """Build a typed edge from one raw import occurrence."""
    entry = ImportEntry(
        line=raw_import.line,
        statement=raw_import.raw_text,
        module_specifier=raw_import.module_specifier,
    )

    specifier = raw_import.module_specifier
    if not specifier:
        return entry

    if is_relative_module(specifier):
        entry.file_dependency = specifier

    entry.dependency, entry.dev_dependency = resolve_package_match(specifier, options.package_info)

    alias_match = resolve_path_alias(specifier, options.path_mappings, options.package_root)
    if alias_match is not None:
        entry.path_alias, entry.resolved_paths = alias_match
        if entry.resolved_paths:
            entry.registry_dependency = find_registry_dependency(entry.resolved_paths, options.known_registries)

    return entry


def classify_imports(raw_imports: list[RawImport], options: ScanOptions) -> list[ImportEntry]:
    return [classify_import(raw_import, options) for raw_import in raw_imports]
