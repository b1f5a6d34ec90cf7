"""Registry server models."""

from .registry_models import (
    ComponentSummary,
    ContentDependency,
    ContentFileInfo,
    DirectoryNode,
    FileMeta,
    FileNode,
    ImportEntry,
    KnownRegistryEntry,
    PackageInfo,
    PackageReference,
    PathMapping,
    RawImport,
    RegistryFileEntry,
    ScanOptions,
    TreeNode,
    TsconfigInfo,
)

__all__ = [
    "ComponentSummary",
    "ContentDependency",
    "ContentFileInfo",
    "DirectoryNode",
    "FileMeta",
    "FileNode",
    "ImportEntry",
    "KnownRegistryEntry",
    "PackageInfo",
    "PackageReference",
    "PathMapping",
    "RawImport",
    "RegistryFileEntry",
    "ScanOptions",
    "TreeNode",
    "TsconfigInfo",
]
