"""
Project scan orchestration.

Runs the passes in their required order: scan the whole tree, annotate
import counts, index files, derive candidates, then attach content
dependencies (which depend on the counts).
"""

import logging
import os
from dataclasses import dataclass, field

from ..config import ScannerConfig, load_config, resolve_target_path
from ..errors import ConfigurationError
from ..models.registry_models import DirectoryNode, FileNode, PackageInfo, ScanOptions, TsconfigInfo
from .component_summary import summarize_component
from .content_files import attach_content_dependencies
from .directory_scanner import DirectoryScanner
from .file_graph import annotate_import_counts, build_file_index, get_component_candidates
from .package_info import find_nearest_package_json, log_package_info
from .source_parser import SourceParser
from .tsconfig_info import load_tsconfig_info, log_tsconfig_info

logger = logging.getLogger(__name__)


@dataclass
class ProjectScan:
    """Everything derived from one scan of a project directory."""

    root_path: str
    tree: DirectoryNode
    file_index: dict[str, FileNode]
    candidates: list[str]
    options: ScanOptions
    config: ScannerConfig
    package_info: PackageInfo | None = None
    tsconfig_info: TsconfigInfo = field(default_factory=TsconfigInfo)

    def summarize(self, candidate_path: str, log: logging.Logger | None = None):
        """Closure for one candidate; see ``summarize_component``."""
        return summarize_component(
            candidate_path,
            self.file_index,
            self.root_path,
            self.options,
            default_registry_type=self.config.default_registry_type,
            log=log,
        )

    def summarize_all(self, log: logging.Logger | None = None) -> list:
        summaries = []
        for candidate in self.candidates:
            summary = self.summarize(candidate, log=log)
            if summary is not None:
                summaries.append(summary)
        return summaries


async def scan_project(
    path: str,
    config: ScannerConfig | None = None,
    config_fallback: str | None = None,
    parser: SourceParser | None = None,
    log: logging.Logger | None = None,
) -> ProjectScan:
    """
    Scan a project directory and build its dependency graph.

    Args:
        path: Directory to scan
        config: Scanner config; when omitted it is loaded from the target (then
            ``config_fallback`` or the working directory) with REGSCAN_* overrides
        config_fallback: Alternative directory for the config file
        parser: Source parser override
        log: Logger for diagnostics

    Returns:
        ProjectScan with tree, index, candidates and scan options

    Raises:
        ConfigurationError: If the path is not a directory or config is malformed
        ManifestError: If package.json or tsconfig cannot be parsed
        OSError: If any file or directory cannot be read
    """
    log = log or logger
    target = resolve_target_path(path)
    if config is None:
        config = ScannerConfig.from_environment(load_config(target, config_fallback or os.getcwd()))

    is_valid, errors = config.validate()
    if not is_valid:
        raise ConfigurationError(f"Invalid configuration: {', '.join(errors)}")

    package_info = find_nearest_package_json(target)
    log_package_info(package_info, log)
    package_root = os.path.dirname(package_info.path) if package_info else target

    tsconfig_info = load_tsconfig_info(target)
    log_tsconfig_info(tsconfig_info, package_root, log)

    options = ScanOptions(
        package_info=package_info,
        path_mappings=tsconfig_info.path_mappings,
        package_root=package_root,
        known_registries=list(config.known_registries),
    )

    scanner = DirectoryScanner(config, options, parser=parser, log=log)
    tree = await scanner.scan(target)

    annotate_import_counts(tree, target, options, log=log)
    file_index = build_file_index(tree)
    candidates = get_component_candidates(tree)
    attach_content_dependencies(tree, options, log=log)

    log.info("Scanned %s: %d component candidate(s)", target, len(candidates))

    return ProjectScan(
        root_path=target,
        tree=tree,
        file_index=file_index,
        candidates=candidates,
        options=options,
        config=config,
        package_info=package_info,
        tsconfig_info=tsconfig_info,
    )
