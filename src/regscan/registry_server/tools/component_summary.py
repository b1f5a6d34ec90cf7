"""
Transitive closure of a component candidate.

Walks resolved file edges plus content dependencies depth-first and collects
package, registry and file dependencies. The visited set lives in each call,
so closures for different candidates never share traversal state and cyclic
graphs terminate.
"""

import logging
import os
import posixpath
from dataclasses import dataclass, field

from ..config import DEFAULT_REGISTRY_TYPE
from ..models.registry_models import (
    ComponentSummary,
    FileMeta,
    FileNode,
    PackageReference,
    RegistryFileEntry,
    ScanOptions,
)
from .content_files import is_content_file_path
from .file_graph import find_file_node, resolve_edge_nodes

logger = logging.getLogger(__name__)


class RegistryFileType:
    """Registry file entry types."""

    COMPONENT = "registry:component"
    LIB = "registry:lib"
    FILE = "registry:file"


COMPONENT_EXTENSIONS = {".tsx", ".jsx"}
LIB_EXTENSIONS = {".ts", ".js"}


@dataclass
class DependencyClosure:
    """Raw sets accumulated while walking one candidate."""

    dependencies: set[str] = field(default_factory=set)
    registry_dependencies: set[str] = field(default_factory=set)
    file_dependencies: set[str] = field(default_factory=set)


def summarize_component(
    candidate_path: str,
    file_index: dict[str, FileNode],
    root_path: str,
    options: ScanOptions,
    default_registry_type: str = DEFAULT_REGISTRY_TYPE,
    log: logging.Logger | None = None,
) -> ComponentSummary | None:
    """
    Compute the registry summary for one candidate.

    Args:
        candidate_path: Root-relative path of the component file
        file_index: Lookup built by ``build_file_index``
        root_path: Scan root
        options: Scan options carrying aliases and content dependencies
        default_registry_type: Registry tag whose items display by bare name

    Returns:
        ComponentSummary, or None when the candidate is not in the index
    """
    log = log or logger
    node = find_file_node(file_index, candidate_path)
    if node is None:
        log.warning("Unable to locate component: %s", candidate_path)
        return None

    closure = build_dependency_closure(node, file_index, root_path, options, default_registry_type)
    verified = build_dependency_closure(
        node, file_index, root_path, options, default_registry_type, include_approximate=False
    )

    file_dependencies = sorted(closure.file_dependencies)
    heuristic = sorted(closure.file_dependencies - verified.file_dependencies)
    if heuristic:
        log.info("%s: %d file(s) linked by approximate content matching", node.path, len(heuristic))

    package_root = options.package_root or os.path.abspath(root_path)
    display_paths = sorted(
        format_file_dependency_path(os.path.join(os.path.abspath(root_path), path), root_path, package_root)
        for path in file_dependencies
    )

    return ComponentSummary(
        candidate_path=candidate_path,
        component_path=format_file_dependency_path(
            os.path.join(os.path.abspath(root_path), node.path), root_path, package_root
        ),
        dependencies=sorted(closure.dependencies),
        registry_dependencies=sorted(closure.registry_dependencies),
        file_dependencies=file_dependencies,
        heuristic_dependencies=heuristic,
        files=build_file_entries(display_paths),
    )


def build_dependency_closure(
    node: FileNode,
    file_index: dict[str, FileNode],
    root_path: str,
    options: ScanOptions,
    default_registry_type: str = DEFAULT_REGISTRY_TYPE,
    include_approximate: bool = True,
) -> DependencyClosure:
    """Depth-first closure from ``node``; the candidate's own path is always included."""
    closure = DependencyClosure()
    visited: set[str] = set()
    stack = [node]

    while stack:
        current = stack.pop()
        if current.path in visited:
            continue
        visited.add(current.path)
        closure.file_dependencies.add(current.path)

        for entry in current.imports:
            if entry.dependency is not None:
                closure.dependencies.add(format_package_reference(entry.dependency))
            if entry.dev_dependency is not None:
                closure.dependencies.add(format_package_reference(entry.dev_dependency))
            if entry.registry_dependency is not None:
                closure.registry_dependencies.add(
                    format_registry_reference(entry.registry_dependency, default_registry_type)
                )

        children = collect_file_dependencies(current, file_index, root_path, options, include_approximate)
        stack.extend(child for child in reversed(children) if child.path not in visited)

    return closure


def collect_file_dependencies(
    file_node: FileNode,
    file_index: dict[str, FileNode],
    root_path: str,
    options: ScanOptions,
    include_approximate: bool = True,
) -> list[FileNode]:
    """Direct file dependencies: resolved import edges plus content edges, sorted by path."""
    nodes: dict[str, FileNode] = {}

    for entry in file_node.imports:
        for target in resolve_edge_nodes(file_node, entry, file_index, root_path, options):
            nodes[target.path] = target

    for content in options.content_dependency_map.get(file_node.path, []):
        if content.approximate and not include_approximate:
            continue
        if content.path not in nodes:
            nodes[content.path] = find_file_node(file_index, content.path) or _content_placeholder(content.path)

    return [nodes[path] for path in sorted(nodes)]


def format_package_reference(reference: PackageReference) -> str:
    return f"{reference.name}@{reference.version}" if reference.version else reference.name


def format_registry_reference(reference: PackageReference, default_registry_type: str = DEFAULT_REGISTRY_TYPE) -> str:
    """
    Display string for a registry dependency.

    Items of the default registry are shown by bare name, others as
    ``type/name``; a result with more than one ``/`` has its first ``/``
    replaced with ``-``.
    """
    name = reference.name.rsplit("/", 1)[-1]
    display = name if reference.type == default_registry_type else f"{reference.type}/{name}"
    if display.count("/") > 1:
        display = display.replace("/", "-", 1)
    return display


def format_file_dependency_path(absolute_path: str, root_path: str, package_root: str | None = None) -> str:
    """Registry display path: ``./src/...`` inside a ``src`` tree, else root-relative."""
    base = package_root or root_path
    package_relative = "/" + os.path.relpath(absolute_path, base).replace(os.sep, "/")
    marker_index = package_relative.find("/src/")
    if marker_index != -1:
        return f".{package_relative[marker_index:]}"

    relative = os.path.relpath(absolute_path, root_path).replace(os.sep, "/")
    return relative or "."


def classify_registry_file(path: str) -> str:
    if is_content_file_path(path):
        return RegistryFileType.FILE

    extension = posixpath.splitext(path)[1].lower()
    if extension in COMPONENT_EXTENSIONS:
        return RegistryFileType.COMPONENT
    if extension in LIB_EXTENSIONS:
        return RegistryFileType.LIB
    return RegistryFileType.FILE


def build_file_entries(paths: list[str]) -> list[RegistryFileEntry]:
    entries = []
    for path in paths:
        target = "~" + path[1:] if path.startswith(".") else path
        entries.append(RegistryFileEntry(path=path, type=classify_registry_file(path), target=target))
    return entries


def _content_placeholder(relative_path: str) -> FileNode:
    return FileNode(
        name=posixpath.basename(relative_path),
        path=relative_path,
        imports=[],
        meta=FileMeta(size=0, modified_at="", import_count=0),
    )
