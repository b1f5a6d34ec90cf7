"""
tsconfig path alias discovery.

For each known tsconfig file name the nearest file above the start directory
is located, and its ``compilerOptions.paths`` are turned into PathMapping
entries with absolute targets.
"""

import json
import logging
import os
import re
from pathlib import Path

from ..errors import ManifestError
from ..models.registry_models import PathMapping, TsconfigInfo

logger = logging.getLogger(__name__)

TSCONFIG_CANDIDATES = ("tsconfig.json", "tsconfig.app.json", "tsconfig.node.json")

# String literals are matched first so comment markers inside them survive
_COMMENT_PATTERN = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA_PATTERN = re.compile(r'("(?:\\.|[^"\\])*")|,(\s*[}\]])')


def load_tsconfig_info(start_dir: str) -> TsconfigInfo:
    files = find_tsconfig_files(start_dir)
    path_mappings = []
    for config_path in files:
        path_mappings.extend(extract_path_mappings(config_path))
    return TsconfigInfo(files=files, path_mappings=path_mappings)


def find_tsconfig_files(start_dir: str) -> list[str]:
    matches: list[str] = []
    for file_name in TSCONFIG_CANDIDATES:
        found = _find_nearest_file(start_dir, file_name)
        if found and found not in matches:
            matches.append(found)
    return matches


def extract_path_mappings(config_path: str) -> list[PathMapping]:
    """
    Read ``compilerOptions.paths`` and resolve targets against ``baseUrl``.

    Raises:
        ManifestError: If the file cannot be read or parsed
    """
    parsed = read_jsonc(config_path)
    compiler_options = parsed.get("compilerOptions") or {}
    raw_paths = compiler_options.get("paths") or {}
    base_dir = os.path.normpath(os.path.join(os.path.dirname(config_path), compiler_options.get("baseUrl", ".")))

    mappings = []
    for alias, targets in raw_paths.items():
        if not isinstance(targets, list) or not targets:
            continue

        mappings.append(
            PathMapping(
                alias=alias,
                targets=[os.path.normpath(os.path.join(base_dir, target)) for target in targets],
                source_file=config_path,
            )
        )

    return mappings


def read_jsonc(path: str) -> dict:
    """Parse a JSON file that may contain comments and trailing commas."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(path, str(e)) from e

    text = _COMMENT_PATTERN.sub(lambda m: m.group(1) or "", text)
    text = _TRAILING_COMMA_PATTERN.sub(lambda m: m.group(1) or m.group(2), text)

    try:
        parsed = json.loads(text) if text.strip() else {}
    except json.JSONDecodeError as e:
        raise ManifestError(path, str(e)) from e

    if not isinstance(parsed, dict):
        raise ManifestError(path, "expected a JSON object")
    return parsed


def log_tsconfig_info(info: TsconfigInfo, package_root: str, log: logging.Logger | None = None) -> None:
    log = log or logger
    if not info.files:
        log.info("No tsconfig files found above target directory.")
        return

    log.info("Using tsconfig files: %s", ", ".join(os.path.relpath(file, package_root) for file in info.files))

    if not info.path_mappings:
        log.info("No path aliases defined in located tsconfig files.")
        return

    for mapping in info.path_mappings:
        targets = ", ".join(os.path.relpath(target, package_root) for target in mapping.targets)
        log.info("Path alias %s -> %s", mapping.alias, targets)


def _find_nearest_file(start_dir: str, file_name: str) -> str | None:
    current = Path(start_dir).resolve()
    for directory in (current, *current.parents):
        candidate = directory / file_name
        if candidate.is_file():
            return str(candidate)
    return None
