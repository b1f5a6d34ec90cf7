"""MCP tool implementations for the registry scanner."""

from typing import Any

from .._security import get_project_root, resolve_within_root, validate_candidate_path
from .dependency_report import render_dependency_report
from .registry_info import create_registry_info
from .registry_json import generate_registry_json
from .scan_project import ProjectScan, scan_project


async def _scan(path: str | None) -> ProjectScan:
    target = resolve_within_root(path, get_project_root(None))
    return await scan_project(str(target))


async def scan_component_tree_impl(path: str | None = None) -> dict[str, Any]:
    """Scan a directory and return its annotated tree with component candidates.

    Args:
        path: Directory to scan, relative to the project root (default: root)

    Returns:
        Dictionary with the scan root, tree, candidates and content dependencies
    """
    try:
        scan = await _scan(path)
        return {
            "root": scan.root_path,
            "tree": scan.tree.to_dict(),
            "candidates": scan.candidates,
            "contentDependencies": {
                owner: [{"path": dep.path, "approximate": dep.approximate} for dep in deps]
                for owner, deps in sorted(scan.options.content_dependency_map.items())
            },
        }
    except Exception as e:
        raise ValueError(f"Failed to scan component tree: {str(e)}") from e


async def list_component_candidates_impl(path: str | None = None) -> dict[str, Any]:
    try:
        scan = await _scan(path)
        return {"root": scan.root_path, "candidates": scan.candidates, "total": len(scan.candidates)}
    except Exception as e:
        raise ValueError(f"Failed to list component candidates: {str(e)}") from e


async def summarize_component_impl(candidate: str, path: str | None = None) -> dict[str, Any]:
    """Compute the transitive closure of one component.

    Args:
        candidate: Component path relative to the scanned directory
        path: Directory to scan, relative to the project root (default: root)

    Returns:
        Closure dictionary with dependencies, registry dependencies and files
    """
    try:
        scan = await _scan(path)
        candidate_path = validate_candidate_path(candidate, scan.root_path)
        summary = scan.summarize(candidate_path)
        if summary is None:
            raise ValueError(f"Unable to locate component: {candidate}")
        return summary.to_dict()
    except Exception as e:
        raise ValueError(f"Failed to summarize component: {str(e)}") from e


async def component_dependency_report_impl(candidate: str, path: str | None = None) -> dict[str, Any]:
    try:
        scan = await _scan(path)
        candidate_path = validate_candidate_path(candidate, scan.root_path)
        return {"candidate": candidate_path, "report": render_dependency_report(scan, candidate_path)}
    except Exception as e:
        raise ValueError(f"Failed to build dependency report: {str(e)}") from e


async def generate_registry_impl(path: str | None = None) -> dict[str, Any]:
    """Write registry.json for every component under ``path``.

    Returns:
        Dictionary with ``registryPath`` (None when nothing was written)
    """
    try:
        scan = await _scan(path)
        return {"registryPath": generate_registry_json(scan)}
    except Exception as e:
        raise ValueError(f"Failed to generate registry: {str(e)}") from e


async def write_registry_info_impl(
    path: str | None = None,
    items: list[str] | None = None,
    name_prefix: str | None = None,
    homepage: str = "",
    author: str = "",
) -> dict[str, Any]:
    """Write a registry.info skeleton, one item per component.

    Args:
        path: Directory that receives registry.info (default: project root)
        items: Component paths; the scanned candidates when omitted
        name_prefix: Prefix for the registry name
        homepage: Registry homepage
        author: Registry author

    Returns:
        Dictionary with the written path and the item list used
    """
    try:
        if items is None:
            scan = await _scan(path)
            target = scan.root_path
            items = scan.candidates
        else:
            target = str(resolve_within_root(path, get_project_root(None)))
            items = [validate_candidate_path(item, target) for item in items]

        registry_path = create_registry_info(
            target, items, name_prefix=name_prefix, homepage=homepage, author=author
        )
        return {"registryInfoPath": registry_path, "items": items}
    except Exception as e:
        raise ValueError(f"Failed to write registry info: {str(e)}") from e
