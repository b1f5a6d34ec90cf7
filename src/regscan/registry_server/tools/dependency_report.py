"""Indented text report of a component's dependency tree."""

from ..models.registry_models import FileNode, PackageReference
from .component_summary import collect_file_dependencies, format_package_reference
from .file_graph import find_file_node


def render_dependency_report(scan, candidate_path: str) -> str:
    """
    Render the dependency tree of one candidate as indented text.

    A file already on the current path is printed once more with an
    ``(already visited)`` marker. A file expanded earlier in the report
    through another branch is printed with an ``(already listed)`` marker
    instead of being expanded again.

    Args:
        scan: ProjectScan produced by ``scan_project``
        candidate_path: Root-relative path of the component

    Returns:
        The report text, one line per entry
    """
    node = find_file_node(scan.file_index, candidate_path)
    if node is None:
        return f"Unable to locate component: {candidate_path}"

    lines = [f"Component Candidates Report: {node.path}"]
    _render_node(scan, node, set(), set(), "", lines)
    return "\n".join(lines)


def _render_node(
    scan, node: FileNode, visited: set[str], expanded: set[str], indent: str, lines: list[str]
) -> None:
    lines.append(f"{indent}{node.path}")
    if node.path in visited:
        lines.append(f"{indent}  (already visited)")
        return
    visited.add(node.path)
    expanded.add(node.path)

    section_indent = f"{indent}  "
    _render_section("Dependencies", _collect_references(node, "dependency"), section_indent, lines)
    _render_section("DevDependencies", _collect_references(node, "dev_dependency"), section_indent, lines)
    _render_section("RegistryDependencies", _collect_references(node, "registry_dependency"), section_indent, lines)

    children = collect_file_dependencies(node, scan.file_index, scan.root_path, scan.options)
    if children:
        lines.append(f"{section_indent}FileDependencies:")
        for child in children:
            if child.path in visited:
                lines.append(f"{section_indent}  - {child.path} (already visited)")
            elif child.path in expanded:
                lines.append(f"{section_indent}  - {child.path} (already listed)")
            else:
                _render_node(scan, child, visited, expanded, f"{section_indent}  ", lines)
    else:
        lines.append(f"{section_indent}FileDependencies: (none)")

    visited.discard(node.path)


def _render_section(title: str, items: list[str], indent: str, lines: list[str]) -> None:
    if not items:
        lines.append(f"{indent}{title}: (none)")
        return

    lines.append(f"{indent}{title}:")
    lines.extend(f"{indent}  - {item}" for item in items)


def _collect_references(node: FileNode, attribute: str) -> list[str]:
    references: dict[str, str] = {}
    for entry in node.imports:
        reference: PackageReference | None = getattr(entry, attribute)
        if reference is None:
            continue
        key = reference.name + (reference.version or reference.type or "")
        references[key] = _format_reference(reference, attribute)
    return sorted(references.values())


def _format_reference(reference: PackageReference, attribute: str) -> str:
    if attribute == "registry_dependency":
        return f"{reference.name} [{reference.type or 'registry'}]"
    return format_package_reference(reference)
