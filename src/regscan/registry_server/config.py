"""Configuration management for the registry scanner."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .models.registry_models import KnownRegistryEntry

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "shadcn-registry-builder.json"
DEFAULT_ALLOWED_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")
DEFAULT_SKIP_DIRECTORIES = ("node_modules", ".git", "dist", ".dist")
DEFAULT_REGISTRY_TYPE = "@shadcn/ui"


@dataclass
class ScannerConfig:
    """Configuration class for the directory scanner and registry writers."""

    allowed_extensions: set[str] = field(default_factory=lambda: set(DEFAULT_ALLOWED_EXTENSIONS))
    skip_directories: set[str] = field(default_factory=lambda: set(DEFAULT_SKIP_DIRECTORIES))
    known_registries: list[KnownRegistryEntry] = field(default_factory=list)

    # Registry items of this type are displayed by bare name
    default_registry_type: str = DEFAULT_REGISTRY_TYPE

    log_level: str = "INFO"

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "ScannerConfig":
        """Normalize the raw JSON config file contents."""
        return cls(
            allowed_extensions=set(normalize_extensions(raw.get("allowed_extensions", DEFAULT_ALLOWED_EXTENSIONS))),
            skip_directories={name.lower() for name in raw.get("skip_directories", DEFAULT_SKIP_DIRECTORIES)},
            known_registries=normalize_known_registries(raw.get("knownRegistries", [])),
            default_registry_type=raw.get("defaultRegistryType", DEFAULT_REGISTRY_TYPE),
        )

    @classmethod
    def from_environment(cls, base: "ScannerConfig | None" = None) -> "ScannerConfig":
        """Create configuration from environment variables, overlaying ``base``."""
        config = base or cls()

        extensions = os.getenv("REGSCAN_ALLOWED_EXTENSIONS")
        skip_dirs = os.getenv("REGSCAN_SKIP_DIRECTORIES")

        return cls(
            allowed_extensions=(
                set(normalize_extensions(_split_list(extensions))) if extensions else set(config.allowed_extensions)
            ),
            skip_directories=(
                {name.lower() for name in _split_list(skip_dirs)} if skip_dirs else set(config.skip_directories)
            ),
            known_registries=list(config.known_registries),
            default_registry_type=os.getenv("REGSCAN_DEFAULT_REGISTRY_TYPE", config.default_registry_type),
            log_level=os.getenv("REGSCAN_LOG_LEVEL", config.log_level).upper(),
        )

    def validate(self) -> tuple[bool, list[str]]:
        """Validate configuration settings."""
        errors = []

        if not self.allowed_extensions:
            errors.append("allowed_extensions must not be empty")

        for extension in self.allowed_extensions:
            if not extension.startswith(".") or extension != extension.lower():
                errors.append(f"invalid extension: {extension}")

        if self.log_level not in logging.getLevelNamesMapping():
            errors.append(f"invalid log_level: {self.log_level}")

        return len(errors) == 0, errors


def load_config(root_path: str, fallback_path: str | None = None) -> ScannerConfig:
    """Load the scanner config from ``root_path``, then ``fallback_path``, else defaults.

    Raises:
        ConfigurationError: If a config file exists but cannot be parsed
    """
    config = _read_config_at(root_path)
    if config is not None:
        return config

    if fallback_path and Path(fallback_path).resolve() != Path(root_path).resolve():
        config = _read_config_at(fallback_path)
        if config is not None:
            return config

    logger.debug("No %s found, using defaults", CONFIG_FILE_NAME)
    return ScannerConfig()


def resolve_target_path(input_path: str | None) -> str:
    """Resolve and validate the directory to scan.

    Raises:
        ConfigurationError: If the path is missing or not a directory
    """
    if not input_path:
        raise ConfigurationError("Path argument is required")

    target = Path(input_path).expanduser().resolve()
    if not target.exists():
        raise ConfigurationError(f"Path does not exist: {target}")
    if not target.is_dir():
        raise ConfigurationError(f"Provided path is not a directory: {target}")

    return str(target)


def normalize_extensions(values: list[str] | tuple[str, ...]) -> list[str]:
    normalized = []
    for value in values:
        trimmed = value.strip().lower()
        normalized.append(trimmed if trimmed.startswith(".") else f".{trimmed}")
    return normalized


def normalize_known_registries(entries: list[dict[str, str]]) -> list[KnownRegistryEntry]:
    """Flatten ``[{prefix: type}, ...]`` into registry entries, skipping blanks."""
    normalized = []

    for entry in entries:
        for prefix, registry_type in entry.items():
            trimmed_prefix = prefix.strip()
            trimmed_type = registry_type.strip()
            if not trimmed_prefix or not trimmed_type:
                continue

            normalized.append(
                KnownRegistryEntry(
                    prefix=trimmed_prefix,
                    normalized_prefix=_ensure_trailing_slash(normalize_path_for_comparison(trimmed_prefix)),
                    type=trimmed_type,
                )
            )

    return normalized


def normalize_path_for_comparison(value: str) -> str:
    normalized = value.replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def _ensure_trailing_slash(value: str) -> str:
    return value if value.endswith("/") else f"{value}/"


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _read_config_at(directory: str) -> ScannerConfig | None:
    config_path = Path(directory) / CONFIG_FILE_NAME
    if not config_path.is_file():
        return None

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read configuration at {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration at {config_path} must be a JSON object")

    logger.info("Using configuration at %s", config_path)
    return ScannerConfig.from_raw(raw)
