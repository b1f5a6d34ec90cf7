"""Registry server tools implementations."""

from typing import Any

from ...utils.json_parameter_middleware import json_convert
from .project_tools import (
    component_dependency_report_impl,
    generate_registry_impl,
    list_component_candidates_impl,
    scan_component_tree_impl,
    summarize_component_impl,
    write_registry_info_impl,
)


def register_registry_tools(mcp):
    """Register registry scanner tools with the MCP server."""

    @mcp.tool
    @json_convert
    async def scan_component_tree(path: str | None = None) -> dict[str, Any]:
        """
        Scan a TS/JS directory tree and annotate every file with its typed imports.

        Use this tool when:
        - Inspecting how files import each other before publishing components
        - Checking which imports resolve to packages, aliases or registries

        Args:
            path: Directory to scan, relative to the project root (default: root)

        Example:
            scan_component_tree("src/components")
            → {"root": ..., "tree": {...}, "candidates": ["button.tsx"], ...}
        """
        return await scan_component_tree_impl(path=path)

    @mcp.tool
    @json_convert
    async def list_component_candidates(path: str | None = None) -> dict[str, Any]:
        """
        List files that no other scanned file imports.

        Args:
            path: Directory to scan, relative to the project root (default: root)
        """
        return await list_component_candidates_impl(path=path)

    @mcp.tool
    @json_convert
    async def summarize_component(candidate: str, path: str | None = None) -> dict[str, Any]:
        """
        Compute the transitive dependencies of one component.

        Returns package dependencies as name@version, registry dependencies,
        every reachable file, and the registry "files" entries.

        Args:
            candidate: Component path relative to the scanned directory
            path: Directory to scan, relative to the project root (default: root)

        Example:
            summarize_component("a.ts")
            → {"dependencies": ["left-pad@1.0.0"], "fileDependencies": ["a.ts", "b.ts"], ...}
        """
        return await summarize_component_impl(candidate=candidate, path=path)

    @mcp.tool
    @json_convert
    async def component_dependency_report(candidate: str, path: str | None = None) -> dict[str, Any]:
        """
        Render an indented dependency tree for one component.

        Args:
            candidate: Component path relative to the scanned directory
            path: Directory to scan, relative to the project root (default: root)
        """
        return await component_dependency_report_impl(candidate=candidate, path=path)

    @mcp.tool
    @json_convert
    async def generate_registry(path: str | None = None) -> dict[str, Any]:
        """
        Write registry.json from registry.json/registry.info metadata and the scanned closures.

        Args:
            path: Directory to scan, relative to the project root (default: root)

        Note: Run write_registry_info first when no metadata file exists yet
        """
        return await generate_registry_impl(path=path)

    @mcp.tool
    @json_convert
    async def write_registry_info(
        path: str | None = None,
        items: list[str] | None = None,
        name_prefix: str | None = None,
        homepage: str = "",
        author: str = "",
    ) -> dict[str, Any]:
        """
        Write a registry.info metadata skeleton with one item per component.

        Existing registry.info values are kept over generated ones.

        Args:
            path: Target directory, relative to the project root (default: root)
            items: Component paths; defaults to the scanned candidates
            name_prefix: Prefix joined to the folder name for the registry name
            homepage: Registry homepage
            author: Registry author
        """
        return await write_registry_info_impl(
            path=path, items=items, name_prefix=name_prefix, homepage=homepage, author=author
        )
