"""
registry.json generation.

Item metadata (names, titles, descriptions, categories) is maintained by hand
in ``registry.json`` or ``registry.info`` at the scan root. Every component
candidate becomes one registry item whose dependencies and files come from
its transitive closure.
"""

import json
import logging
import os
import posixpath
from typing import Any

from ..models.registry_models import ComponentSummary

logger = logging.getLogger(__name__)

REGISTRY_SCHEMA_URL = "https://ui.shadcn.com/schema/registry.json"
REGISTRY_JSON = "registry.json"
REGISTRY_INFO = "registry.info"
METADATA_SOURCES = (REGISTRY_JSON, REGISTRY_INFO)
DEFAULT_ITEM_TYPE = "registry:component"


def generate_registry_json(scan, log: logging.Logger | None = None) -> str | None:
    """
    Write ``registry.json`` for every component candidate of ``scan``.

    Args:
        scan: ProjectScan produced by ``scan_project``
        log: Logger for diagnostics

    Returns:
        Path of the written file, or None when no metadata is available or
        there are no components
    """
    log = log or logger
    loaded = load_registry_metadata(scan.root_path, log)
    if loaded is None:
        return None

    registry_data, source_path = loaded
    summaries = scan.summarize_all(log=log)
    if not summaries:
        log.warning("No components available to generate registry.json.")
        return None

    metadata_by_name = {item["name"]: item for item in registry_data.get("items") or [] if item.get("name")}
    top_categories = registry_data.get("categories") or []

    items = []
    for summary in summaries:
        fallback_name = build_item_name(summary.candidate_path)
        metadata = metadata_by_name.get(fallback_name) or metadata_by_name.get(summary.candidate_path)
        items.append(build_registry_item(summary, fallback_name, metadata, top_categories))

    output = {key: value for key, value in registry_data.items() if key != "categories"}
    output["$schema"] = REGISTRY_SCHEMA_URL
    output["items"] = items

    registry_path = os.path.join(scan.root_path, REGISTRY_JSON)
    with open(registry_path, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2)

    log.info(
        "Generated registry.json with %d items at %s (metadata source: %s)",
        len(items),
        registry_path,
        os.path.basename(source_path),
    )
    return registry_path


def load_registry_metadata(root_path: str, log: logging.Logger | None = None) -> tuple[dict, str] | None:
    """Read the first metadata file present at ``root_path``."""
    log = log or logger
    for file_name in METADATA_SOURCES:
        candidate = os.path.join(root_path, file_name)
        if not os.path.isfile(candidate):
            continue

        try:
            with open(candidate, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.error("Failed to read or parse %s at %s: %s", file_name, candidate, e)
            return None

        if not isinstance(data, dict):
            log.error("Failed to read or parse %s at %s: expected a JSON object", file_name, candidate)
            return None
        return data, candidate

    log.error("Unable to locate registry metadata in %s. Looked for registry.json and registry.info.", root_path)
    return None


def build_registry_item(
    summary: ComponentSummary,
    fallback_name: str,
    metadata: dict[str, Any] | None,
    top_categories: list[str],
) -> dict[str, Any]:
    metadata = metadata or {}
    dependencies = merge_unique(metadata.get("dependencies") or [], summary.dependencies)
    registry_dependencies = merge_unique(metadata.get("registryDependencies") or [], summary.registry_dependencies)
    categories = merge_unique(top_categories, metadata.get("categories") or [])

    item: dict[str, Any] = {
        "name": metadata.get("name") or fallback_name,
        "title": metadata.get("title"),
        "description": metadata.get("description"),
        "type": metadata.get("type") or DEFAULT_ITEM_TYPE,
        "categories": categories or None,
        "dependencies": dependencies or None,
        "registryDependencies": registry_dependencies or None,
        "files": [entry.to_dict() for entry in summary.files],
    }
    return {key: value for key, value in item.items() if value is not None}


def merge_unique(base: list[str], additional: list[str]) -> list[str]:
    return sorted(set(base) | set(additional), key=lambda value: (value.casefold(), value))


def build_item_name(item: str) -> str:
    """Last path segment without its extension; ``x/index.tsx`` names ``x``."""
    normalized = item.replace("\\", "/").removeprefix("./")
    without_extension = posixpath.splitext(normalized)[0]
    return posixpath.basename(without_extension.removesuffix("/index"))
