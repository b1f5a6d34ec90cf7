"""
File index, edge resolution and import counting over a scanned tree.

The index registers every file under up to three keys (exact path,
extension-stripped, ``/index``-stripped) so that ``./foo``, ``./foo.ts`` and
``./foo/index.ts`` resolve to the same node.
"""

import logging
import os
import posixpath

from ..models.registry_models import DirectoryNode, FileNode, ImportEntry, ScanOptions, TreeNode
from .import_classifier import is_relative_module

logger = logging.getLogger(__name__)


def collect_file_nodes(root: TreeNode) -> list[FileNode]:
    """Flatten the tree into its file nodes, in tree order."""
    files: list[FileNode] = []
    stack: list[TreeNode] = [root]

    while stack:
        node = stack.pop()
        if isinstance(node, FileNode):
            files.append(node)
        else:
            stack.extend(reversed(node.children))

    return files


def build_file_index(root: DirectoryNode) -> dict[str, FileNode]:
    lookup: dict[str, FileNode] = {}
    for file_node in collect_file_nodes(root):
        _register_path_variants(lookup, normalize_lookup_path(file_node.path), file_node)
    return lookup


def find_file_node(lookup: dict[str, FileNode], relative_path: str) -> FileNode | None:
    """Find a file by exact, extension-stripped or index-stripped path."""
    normalized = normalize_lookup_path(relative_path)
    for key in (normalized, strip_extension(normalized), strip_index(normalized)):
        node = lookup.get(key)
        if node is not None:
            return node
    return None


def resolve_import_targets(file_node: FileNode, entry: ImportEntry, root_path: str, options: ScanOptions) -> list[str]:
    """
    Candidate root-relative target paths for one import edge.

    Alias expansions are resolved against the package root; relative
    specifiers against the importing file's directory.
    """
    absolute_root = os.path.abspath(root_path)
    package_root = options.package_root or absolute_root
    targets: list[str] = []

    for resolved in entry.resolved_paths or []:
        candidate = os.path.normpath(os.path.join(package_root, resolved))
        _append_unique(targets, _relative_to(candidate, absolute_root))

    if entry.module_specifier and is_relative_module(entry.module_specifier):
        importer_dir = os.path.dirname(os.path.join(absolute_root, file_node.path))
        candidate = os.path.normpath(os.path.join(importer_dir, entry.module_specifier))
        _append_unique(targets, _relative_to(candidate, absolute_root))

    return targets


def resolve_edge_nodes(
    file_node: FileNode,
    entry: ImportEntry,
    lookup: dict[str, FileNode],
    root_path: str,
    options: ScanOptions,
) -> list[FileNode]:
    """Indexed files an edge points at; each node appears at most once."""
    nodes: dict[str, FileNode] = {}
    for target in resolve_import_targets(file_node, entry, root_path, options):
        node = find_file_node(lookup, target)
        if node is not None:
            nodes.setdefault(node.path, node)
    return list(nodes.values())


def annotate_import_counts(
    root: DirectoryNode,
    root_path: str,
    options: ScanOptions,
    log: logging.Logger | None = None,
) -> None:
    """
    Recompute ``meta.import_count`` for every file from scratch.

    The whole tree must be materialized before this pass runs.
    """
    log = log or logger
    file_nodes = collect_file_nodes(root)
    lookup = build_file_index(root)

    for file_node in file_nodes:
        file_node.meta.import_count = 0

    for file_node in file_nodes:
        for entry in file_node.imports:
            targets = resolve_edge_nodes(file_node, entry, lookup, root_path, options)
            if not targets and entry.module_specifier:
                log.debug("Unresolved import %r in %s", entry.module_specifier, file_node.path)
            for target in targets:
                target.meta.import_count += 1


def get_component_candidates(root: DirectoryNode) -> list[str]:
    """Paths of files no other scanned file imports."""
    return [file_node.path for file_node in collect_file_nodes(root) if file_node.meta.import_count == 0]


def normalize_lookup_path(value: str) -> str:
    normalized = value.replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def strip_extension(value: str) -> str:
    stem, _ = posixpath.splitext(value)
    return stem


def strip_index(value: str) -> str:
    if value.endswith("/index"):
        return value[: -len("/index")]
    return value


def _register_path_variants(lookup: dict[str, FileNode], normalized_path: str, file_node: FileNode) -> None:
    lookup[normalized_path] = file_node

    without_ext = strip_extension(normalized_path)
    if without_ext != normalized_path:
        lookup[without_ext] = file_node

    without_index = strip_index(without_ext)
    if without_index and without_index != without_ext:
        lookup[without_index] = file_node


def _relative_to(path: str, root: str) -> str:
    return os.path.relpath(path, root).replace(os.sep, "/")


def _append_unique(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)
