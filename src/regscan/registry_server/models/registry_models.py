"""
Registry scanner models.

These dataclasses describe the scanned directory tree, the typed import edges
extracted from each file, the parsing context handed to the scanner, and the
per-component closure results consumed by the registry writers and MCP tools.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PackageReference:
    """A package matched from the nearest package manifest or a registry prefix."""

    name: str
    type: str  # "dependency", "devDependency" or a registry tag like "@shadcn/ui"
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.version is not None:
            data["version"] = self.version
        return data


@dataclass
class RawImport:
    """Single import occurrence produced by the source parser."""

    line: int  # 1-based
    raw_text: str
    module_specifier: str | None = None


@dataclass
class ImportEntry:
    """Typed import edge attached to a scanned file."""

    line: int
    statement: str
    module_specifier: str | None = None
    file_dependency: str | None = None
    dependency: PackageReference | None = None
    dev_dependency: PackageReference | None = None
    path_alias: str | None = None
    resolved_paths: list[str] | None = None
    registry_dependency: PackageReference | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"line": self.line, "statement": self.statement}
        if self.module_specifier is not None:
            data["moduleSpecifier"] = self.module_specifier
        if self.file_dependency is not None:
            data["fileDependency"] = self.file_dependency
        if self.dependency is not None:
            data["dependency"] = self.dependency.to_dict()
        if self.dev_dependency is not None:
            data["devDependency"] = self.dev_dependency.to_dict()
        if self.path_alias is not None:
            data["pathAlias"] = self.path_alias
        if self.resolved_paths is not None:
            data["resolvedPaths"] = list(self.resolved_paths)
        if self.registry_dependency is not None:
            data["registryDependency"] = self.registry_dependency.to_dict()
        return data


@dataclass
class FileMeta:
    """Stat metadata plus the incoming-edge counter."""

    size: int
    modified_at: str  # ISO-8601, UTC
    import_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"size": self.size, "modifiedAt": self.modified_at, "importCount": self.import_count}


@dataclass
class FileNode:
    """Scanned source file."""

    name: str
    path: str  # root-relative, forward slashes
    imports: list[ImportEntry] = field(default_factory=list)
    meta: FileMeta = field(default_factory=lambda: FileMeta(size=0, modified_at=""))

    @property
    def type(self) -> str:
        return "file"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "path": self.path,
            "imports": [entry.to_dict() for entry in self.imports],
            "meta": self.meta.to_dict(),
        }


@dataclass
class DirectoryNode:
    """Scanned directory; children are sorted by name."""

    name: str
    path: str  # "." for the scan root
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def type(self) -> str:
        return "directory"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "path": self.path,
            "children": [child.to_dict() for child in self.children],
        }


TreeNode = FileNode | DirectoryNode


@dataclass
class PathMapping:
    """Compiler-config path alias with absolute target paths."""

    alias: str  # at most one "*"
    targets: list[str]
    source_file: str


@dataclass
class KnownRegistryEntry:
    """External registry location configured by prefix."""

    prefix: str
    normalized_prefix: str  # trailing "/", no leading "./"
    type: str


@dataclass
class PackageInfo:
    """Parsed package.json nearest to the scanned directory."""

    path: str
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    name: str | None = None
    version: str | None = None


@dataclass
class TsconfigInfo:
    """Compiler config files located above the scan root and their aliases."""

    files: list[str] = field(default_factory=list)
    path_mappings: list[PathMapping] = field(default_factory=list)


@dataclass
class ContentFileInfo:
    """A file following the content naming convention."""

    path: str
    base_path: str  # path without the content suffix
    directory: str  # "." for the scan root


@dataclass
class ContentDependency:
    """Synthetic edge from an owning code file to a content file."""

    owner: str
    path: str
    approximate: bool = False  # True when found by the directory fallback


@dataclass
class ScanOptions:
    """Parsing context shared by the scanner, classifier and graph passes."""

    package_info: PackageInfo | None = None
    path_mappings: list[PathMapping] = field(default_factory=list)
    package_root: str | None = None
    known_registries: list[KnownRegistryEntry] = field(default_factory=list)
    content_files: list[ContentFileInfo] = field(default_factory=list)
    content_dependency_map: dict[str, list[ContentDependency]] = field(default_factory=dict)


@dataclass
class RegistryFileEntry:
    """File entry of a registry item."""

    path: str
    type: str  # "registry:component", "registry:lib" or "registry:file"
    target: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "type": self.type, "target": self.target}


@dataclass
class ComponentSummary:
    """Transitive closure computed for one component candidate."""

    candidate_path: str
    component_path: str
    dependencies: list[str] = field(default_factory=list)
    registry_dependencies: list[str] = field(default_factory=list)
    file_dependencies: list[str] = field(default_factory=list)
    heuristic_dependencies: list[str] = field(default_factory=list)
    files: list[RegistryFileEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidatePath": self.candidate_path,
            "componentPath": self.component_path,
            "dependencies": list(self.dependencies),
            "registryDependencies": list(self.registry_dependencies),
            "fileDependencies": list(self.file_dependencies),
            "heuristicDependencies": list(self.heuristic_dependencies),
            "files": [entry.to_dict() for entry in self.files],
        }
