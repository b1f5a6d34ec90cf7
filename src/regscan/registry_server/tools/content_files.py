"""
Content-file dependency matching.

Content files (``*.content.ts`` and friends) are loaded by convention rather
than imported, so the static graph cannot reach them. This module links each
one to the code file(s) that own it:

1. Exact sibling: ``widget.content.ts`` belongs to ``widget.ts``/``widget.tsx``.
2. Fallback: zero-import files in subdirectories of the content file's base
   path or directory. This is approximate; every match is recorded and tagged
   ``approximate=True``.

Edges go into ``ScanOptions.content_dependency_map``, never into ``imports``.
"""

import logging
import posixpath
import re

from ..models.registry_models import (
    ContentDependency,
    ContentFileInfo,
    DirectoryNode,
    FileNode,
    ScanOptions,
)
from .file_graph import collect_file_nodes, strip_extension

logger = logging.getLogger(__name__)

CONTENT_FILE_PATTERN = re.compile(r"\.content\.(?:ts|tsx|js|jsx)$", re.IGNORECASE)


def is_content_file_path(file_path: str) -> bool:
    return CONTENT_FILE_PATTERN.search(file_path) is not None


def build_content_file_info(relative_path: str) -> ContentFileInfo:
    normalized = relative_path.replace("\\", "/")
    directory = posixpath.dirname(normalized)
    return ContentFileInfo(
        path=normalized,
        base_path=CONTENT_FILE_PATTERN.sub("", normalized),
        directory=directory or ".",
    )


def attach_content_dependencies(
    root: DirectoryNode,
    options: ScanOptions,
    log: logging.Logger | None = None,
) -> dict[str, list[ContentDependency]]:
    """
    Build the content dependency side map and store it on ``options``.

    Must run after import counts are annotated; the fallback pass relies on
    ``meta.import_count``.
    """
    log = log or logger
    dependency_map: dict[str, list[ContentDependency]] = {}
    options.content_dependency_map = dependency_map

    if not options.content_files:
        return dependency_map

    file_nodes = collect_file_nodes(root)
    base_lookup = _build_base_lookup(file_nodes)
    unmatched: list[ContentFileInfo] = []

    for content in options.content_files:
        matches = base_lookup.get(content.base_path, [])
        if matches:
            for node in matches:
                _add_dependency(dependency_map, ContentDependency(owner=node.path, path=content.path))
        else:
            unmatched.append(content)

    if unmatched:
        zero_import_nodes = [
            node for node in file_nodes if node.meta.import_count == 0 and not is_content_file_path(node.path)
        ]

        for content in unmatched:
            owners = _find_zero_import_owners(content, zero_import_nodes)
            if not owners:
                log.debug("No owner found for content file %s", content.path)
                continue

            for node in owners:
                log.warning(
                    "Content file %s attached to %s by directory heuristic (approximate)",
                    content.path,
                    node.path,
                )
                _add_dependency(
                    dependency_map,
                    ContentDependency(owner=node.path, path=content.path, approximate=True),
                )

    return dependency_map


def _build_base_lookup(file_nodes: list[FileNode]) -> dict[str, list[FileNode]]:
    lookup: dict[str, list[FileNode]] = {}
    for node in file_nodes:
        lookup.setdefault(strip_extension(node.path), []).append(node)
    return lookup


def _add_dependency(dependency_map: dict[str, list[ContentDependency]], dependency: ContentDependency) -> None:
    existing = dependency_map.setdefault(dependency.owner, [])
    if any(item.path == dependency.path for item in existing):
        return
    existing.append(dependency)


def _find_zero_import_owners(content: ContentFileInfo, zero_import_nodes: list[FileNode]) -> list[FileNode]:
    prefixes = _build_descendant_prefixes(content)
    matches = []

    for node in zero_import_nodes:
        for prefix in prefixes:
            if prefix == "":
                if "/" in node.path:
                    matches.append(node)
                    break
                continue

            remainder = node.path[len(prefix) :]
            if node.path.startswith(prefix) and "/" in remainder:
                matches.append(node)
                break

    return matches


def _build_descendant_prefixes(content: ContentFileInfo) -> list[str]:
    prefixes: list[str] = []

    def add(prefix: str) -> None:
        if prefix not in prefixes:
            prefixes.append(prefix)

    if content.base_path and content.base_path != ".":
        add(f"{content.base_path}/")
        if content.base_path.endswith("/index"):
            add(f"{content.base_path[: -len('/index')]}/")

    if content.directory and content.directory != ".":
        add(f"{content.directory}/")
    else:
        add("")

    return prefixes
