"""Project root discovery and path containment checks."""

import os
from pathlib import Path


def get_project_root(project_root: str | None = None) -> str:
    """Get project root from environment or default.

    Args:
        project_root: Provided project root, if None or "." will use environment

    Returns:
        Project root directory path from MCP_FILE_ROOT environment variable,
        or current directory as fallback
    """
    if project_root is None or project_root == ".":
        return os.getenv("MCP_FILE_ROOT", ".")
    return project_root


def resolve_within_root(path: str | None, project_root: str) -> Path:
    """Resolve ``path`` against the project root and reject anything outside it.

    Args:
        path: Absolute or root-relative path; None or "." means the root itself
        project_root: Root directory of the project

    Returns:
        Resolved absolute path

    Raises:
        ValueError: If the path escapes the project root
    """
    root = Path(project_root).resolve()
    if path is None or path == ".":
        return root

    candidate = Path(path).expanduser()
    abs_path = candidate.resolve() if candidate.is_absolute() else (root / candidate).resolve()

    try:
        abs_path.relative_to(root)
    except ValueError:
        raise ValueError(f"Path outside project root: {path}") from None

    return abs_path


def validate_candidate_path(candidate: str, scan_root: str) -> str:
    """Normalize a component path to root-relative form, rejecting traversal.

    Raises:
        ValueError: If the candidate resolves outside ``scan_root``
    """
    abs_path = resolve_within_root(candidate, scan_root)
    return abs_path.relative_to(Path(scan_root).resolve()).as_posix()
