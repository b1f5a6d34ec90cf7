"""
registry.info scaffolding.

Writes a metadata skeleton with one item per component candidate. Values
already present in an existing registry.info win over the generated ones, so
the file can be regenerated after hand edits.
"""

import json
import logging
import os
from typing import Any

from .registry_json import REGISTRY_INFO, REGISTRY_SCHEMA_URL, build_item_name

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("title", "description", "type", "path", "categories")


def create_registry_info(
    target_path: str,
    items: list[str],
    name_prefix: str | None = None,
    homepage: str = "",
    author: str = "",
    log: logging.Logger | None = None,
) -> str:
    """
    Write ``registry.info`` into ``target_path``.

    Args:
        target_path: Directory that receives the file
        items: Root-relative component paths, one item each
        name_prefix: Prefix joined to the folder name with "-" for the registry name
        homepage: Registry homepage
        author: Registry author

    Returns:
        Path of the written file
    """
    log = log or logger
    folder_name = os.path.basename(os.path.abspath(target_path))
    registry_path = os.path.join(target_path, REGISTRY_INFO)
    backup_path = f"{registry_path}.old"

    previous = None
    if os.path.exists(registry_path):
        if os.path.exists(backup_path):
            os.unlink(backup_path)
        os.rename(registry_path, backup_path)
        previous = _load_previous(backup_path, log)

    base = {
        "$schema": REGISTRY_SCHEMA_URL,
        "name": f"{name_prefix}-{folder_name}" if name_prefix else folder_name,
        "homepage": homepage,
        "author": author,
        "categories": [folder_name],
        "items": [build_info_item(item) for item in items],
    }

    merged = merge_registry_info(base, previous)
    with open(registry_path, "w", encoding="utf-8") as f:
        json.dump(merged, f, indent=2)

    if os.path.exists(backup_path):
        os.unlink(backup_path)

    log.info("registry.info written to %s", registry_path)
    return registry_path


def build_info_item(item: str) -> dict[str, Any]:
    name = build_item_name(item)
    return {
        "name": name,
        "title": name,
        "description": "",
        "type": "registry:component",
        "path": format_item_path(item),
        "categories": [name],
    }


def format_item_path(item: str) -> str:
    normalized = item.replace("\\", "/")
    if "/" not in normalized:
        return "."
    return f"./{normalized.rsplit('/', 1)[0]}"


def merge_registry_info(base: dict[str, Any], previous: dict[str, Any] | None) -> dict[str, Any]:
    if not previous:
        return base

    # Older files used the misspelled "categorie" key
    previous_categories = previous.get("categories", previous.get("categorie"))

    merged = dict(base)
    for key in ("$schema", "name", "homepage", "author"):
        if previous.get(key) is not None:
            merged[key] = previous[key]
    if previous_categories is not None:
        merged["categories"] = previous_categories

    previous_items = {item.get("name"): item for item in previous.get("items") or [] if isinstance(item, dict)}
    merged["items"] = [_merge_item(item, previous_items.get(item["name"])) for item in base["items"]]
    return merged


def _merge_item(item: dict[str, Any], previous: dict[str, Any] | None) -> dict[str, Any]:
    if not previous:
        return item

    merged = dict(item)
    for key in ITEM_FIELDS:
        if previous.get(key) is not None:
            merged[key] = previous[key]
    return merged


def _load_previous(path: str, log: logging.Logger) -> dict[str, Any] | None:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.error("Failed to parse registry info at %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None
