"""Nearest package.json discovery."""

import json
import logging
from pathlib import Path

from ..errors import ManifestError
from ..models.registry_models import PackageInfo

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"


def find_nearest_package_json(start_dir: str) -> PackageInfo | None:
    """
    Walk up from ``start_dir`` and parse the first package.json found.

    Raises:
        ManifestError: If a package.json exists but is not valid JSON
    """
    current = Path(start_dir).resolve()

    for directory in (current, *current.parents):
        package_path = directory / PACKAGE_JSON
        if not package_path.is_file():
            continue

        try:
            parsed = json.loads(package_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ManifestError(str(package_path), str(e)) from e

        if not isinstance(parsed, dict):
            raise ManifestError(str(package_path), "expected a JSON object")

        return PackageInfo(
            path=str(package_path),
            name=parsed.get("name"),
            version=parsed.get("version"),
            dependencies=dict(parsed.get("dependencies") or {}),
            dev_dependencies=dict(parsed.get("devDependencies") or {}),
        )

    return None


def log_package_info(package_info: PackageInfo | None, log: logging.Logger | None = None) -> None:
    log = log or logger
    if package_info is None:
        log.info("No package.json found above target directory.")
        return

    log.info("Using package.json at %s", package_info.path)
    log.info("Dependencies: %s", ", ".join(sorted(package_info.dependencies)) or "(none)")
    log.info("DevDependencies: %s", ", ".join(sorted(package_info.dev_dependencies)) or "(none)")
