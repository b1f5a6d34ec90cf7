"""Tests for the asynchronous directory scanner."""

import os
from pathlib import Path

import pytest

from regscan.registry_server.config import ScannerConfig
from regscan.registry_server.models import DirectoryNode, FileNode, ScanOptions
from regscan.registry_server.tools import directory_scanner
from regscan.registry_server.tools.directory_scanner import (
    DirectoryScanner,
    decode_source,
    relative_path,
    scan_directory,
)


def _write(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


class TestDirectoryScanner:
    """Test tree construction."""

    @pytest.mark.asyncio
    async def test_tree_shape_and_sorting(self, tmp_path):
        """Children are sorted by name, directories and files together."""
        _write(
            tmp_path,
            {
                "b.ts": "",
                "A.tsx": "",
                "components/button.tsx": 'import { cn } from "../lib/utils";\n',
                "lib/utils.ts": "",
            },
        )

        tree = await scan_directory(str(tmp_path), ScannerConfig(), ScanOptions())

        assert isinstance(tree, DirectoryNode)
        assert tree.path == "."
        assert [child.name for child in tree.children] == ["A.tsx", "b.ts", "components", "lib"]
        button = tree.children[2].children[0]
        assert isinstance(button, FileNode)
        assert button.path == "components/button.tsx"
        assert button.imports[0].module_specifier == "../lib/utils"
        assert button.imports[0].file_dependency == "../lib/utils"

    @pytest.mark.asyncio
    async def test_skip_directories_and_extension_filter(self, tmp_path):
        _write(
            tmp_path,
            {
                "index.ts": "",
                "README.md": "# readme",
                "styles.css": "",
                "UPPER.TSX": "",
                "node_modules/react/index.js": "",
                "Dist/out.js": "",
                "src/keep.jsx": "",
            },
        )

        tree = await scan_directory(str(tmp_path), ScannerConfig(), ScanOptions())

        assert [child.name for child in tree.children] == ["index.ts", "src", "UPPER.TSX"]

    @pytest.mark.asyncio
    async def test_custom_extensions(self, tmp_path):
        _write(tmp_path, {"a.ts": "", "b.mjs": ""})
        config = ScannerConfig(allowed_extensions={".mjs"})

        tree = await scan_directory(str(tmp_path), config, ScanOptions())

        assert [child.name for child in tree.children] == ["b.mjs"]

    @pytest.mark.asyncio
    async def test_file_meta(self, tmp_path):
        _write(tmp_path, {"a.ts": "export const a = 1;\n"})

        tree = await scan_directory(str(tmp_path), ScannerConfig(), ScanOptions())

        meta = tree.children[0].meta
        assert meta.size == len("export const a = 1;\n")
        assert meta.modified_at.endswith("Z")
        assert meta.import_count == 0

    @pytest.mark.asyncio
    async def test_content_files_recorded(self, tmp_path):
        _write(tmp_path, {"z/w.content.ts": "", "a.content.tsx": "", "w.ts": ""})
        options = ScanOptions()

        await DirectoryScanner(ScannerConfig(), options).scan(str(tmp_path))

        assert [info.path for info in options.content_files] == ["a.content.tsx", "z/w.content.ts"]

    @pytest.mark.asyncio
    async def test_symlinks_ignored(self, tmp_path):
        _write(tmp_path, {"real/a.ts": ""})
        os.symlink(tmp_path / "real", tmp_path / "linked")
        os.symlink(tmp_path / "real" / "a.ts", tmp_path / "b.ts")

        tree = await scan_directory(str(tmp_path), ScannerConfig(), ScanOptions())

        assert [child.name for child in tree.children] == ["real"]

    @pytest.mark.asyncio
    async def test_missing_root_propagates(self, tmp_path):
        with pytest.raises(OSError):
            await scan_directory(str(tmp_path / "missing"), ScannerConfig(), ScanOptions())

    @pytest.mark.asyncio
    async def test_unreadable_deep_file_aborts_scan(self, tmp_path, monkeypatch):
        _write(tmp_path, {"a.ts": "", "a/b/c/deep.ts": "", "z/ok.ts": ""})
        read_file = directory_scanner._read_file

        def failing_read(path):
            if path.endswith("deep.ts"):
                raise PermissionError(13, "Permission denied", path)
            return read_file(path)

        monkeypatch.setattr(directory_scanner, "_read_file", failing_read)
        tree = None

        with pytest.raises(PermissionError, match="Permission denied"):
            tree = await scan_directory(str(tmp_path), ScannerConfig(), ScanOptions())

        assert tree is None

    @pytest.mark.asyncio
    async def test_unreadable_subdirectory_aborts_scan(self, tmp_path, monkeypatch):
        _write(tmp_path, {"a.ts": "", "a/b/locked/x.ts": ""})
        list_entries = directory_scanner._list_entries

        def failing_list(path):
            if os.path.basename(path) == "locked":
                raise PermissionError(13, "Permission denied", path)
            return list_entries(path)

        monkeypatch.setattr(directory_scanner, "_list_entries", failing_list)
        options = ScanOptions()

        with pytest.raises(OSError):
            await DirectoryScanner(ScannerConfig(), options).scan(str(tmp_path))


class TestHelpers:
    """Test decoding and path helpers."""

    def test_decode_utf8_with_bom(self):
        assert decode_source("\ufeffimport x".encode()) == "import x"

    def test_decode_non_utf8(self):
        text = decode_source("const s = 'café';".encode("latin-1"))

        assert text.startswith("const s = '")

    def test_relative_path(self):
        assert relative_path("/a/b", "/a/b") == "."
        assert relative_path("/a/b/c/d.ts", "/a/b") == "c/d.ts"
