"""
Asynchronous directory tree scanner.

Sibling entries are processed concurrently (file read and parse, or a
recursive sub-scan) and a directory node is assembled once all of its
children complete. Any filesystem error propagates and aborts the scan.
"""

import asyncio
import logging
import os
from datetime import UTC, datetime

import chardet

from ..config import ScannerConfig
from ..models.registry_models import DirectoryNode, FileMeta, FileNode, ScanOptions, TreeNode
from .content_files import build_content_file_info, is_content_file_path
from .import_classifier import classify_imports
from .source_parser import SourceParser, get_source_parser

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """
    Walks a root directory and builds the file/directory tree.

    Directories whose lower-cased name is in ``config.skip_directories`` are
    pruned; files are kept when their lower-cased extension is in
    ``config.allowed_extensions``. Symbolic links are ignored.
    """

    def __init__(
        self,
        config: ScannerConfig,
        options: ScanOptions,
        parser: SourceParser | None = None,
        log: logging.Logger | None = None,
    ):
        self.config = config
        self.options = options
        self.parser = parser or get_source_parser()
        self.log = log or logger

    async def scan(self, root_path: str) -> DirectoryNode:
        """Scan ``root_path`` and record its content files on ``options``."""
        absolute_root = os.path.abspath(root_path)
        tree = await self.scan_directory(absolute_root, absolute_root)
        self.options.content_files.sort(key=lambda info: info.path)
        return tree

    async def scan_directory(self, current_path: str, root_path: str) -> DirectoryNode:
        entries = await asyncio.to_thread(_list_entries, current_path)

        tasks = []
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                if entry.name.lower() in self.config.skip_directories:
                    self.log.debug("Skipping directory %s", entry.path)
                    continue
                tasks.append(self.scan_directory(entry.path, root_path))
            elif entry.is_file(follow_symlinks=False):
                tasks.append(self.inspect_file(entry.path, root_path))

        results = await asyncio.gather(*tasks)
        children = sorted((node for node in results if node is not None), key=_sort_key)

        return DirectoryNode(
            name=os.path.basename(current_path),
            path=relative_path(current_path, root_path),
            children=children,
        )

    async def inspect_file(self, file_path: str, root_path: str) -> FileNode | None:
        extension = os.path.splitext(file_path)[1].lower()
        if extension not in self.config.allowed_extensions:
            return None

        raw_content, file_stat = await asyncio.to_thread(_read_file, file_path)
        content = decode_source(raw_content)
        raw_imports = await asyncio.to_thread(self.parser.parse, content, extension)

        node_path = relative_path(file_path, root_path)
        if is_content_file_path(node_path):
            self.options.content_files.append(build_content_file_info(node_path))

        self.log.debug("Scanned %s (%d imports)", node_path, len(raw_imports))

        return FileNode(
            name=os.path.basename(file_path),
            path=node_path,
            imports=classify_imports(raw_imports, self.options),
            meta=FileMeta(
                size=file_stat.st_size,
                modified_at=_format_timestamp(file_stat.st_mtime),
            ),
        )


async def scan_directory(
    root_path: str,
    config: ScannerConfig,
    options: ScanOptions,
    parser: SourceParser | None = None,
    log: logging.Logger | None = None,
) -> DirectoryNode:
    """Convenience wrapper around ``DirectoryScanner.scan``."""
    scanner = DirectoryScanner(config, options, parser=parser, log=log)
    return await scanner.scan(root_path)


def decode_source(raw_content: bytes) -> str:
    """Decode file bytes as UTF-8, falling back to the chardet guess."""
    try:
        return raw_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    detected = chardet.detect(raw_content)
    encoding = detected.get("encoding") or "utf-8"
    try:
        return raw_content.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return raw_content.decode("utf-8", errors="replace")


def relative_path(target_path: str, root_path: str) -> str:
    rel_path = os.path.relpath(target_path, root_path).replace(os.sep, "/")
    return "." if rel_path in ("", ".") else rel_path


def _list_entries(path: str) -> list[os.DirEntry]:
    with os.scandir(path) as iterator:
        return list(iterator)


def _read_file(path: str) -> tuple[bytes, os.stat_result]:
    with open(path, "rb") as f:
        content = f.read()
    return content, os.stat(path)


def _format_timestamp(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _sort_key(node: TreeNode) -> tuple[str, str]:
    return node.name.casefold(), node.name
