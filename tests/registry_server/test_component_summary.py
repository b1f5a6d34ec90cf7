"""Tests for component closures and the scan orchestration."""

import json
from pathlib import Path

import pytest

from regscan.registry_server.models import PackageReference
from regscan.registry_server.tools.component_summary import (
    build_file_entries,
    classify_registry_file,
    format_file_dependency_path,
    format_package_reference,
    format_registry_reference,
)
from regscan.registry_server.tools.file_graph import annotate_import_counts
from regscan.registry_server.tools.scan_project import scan_project


def _write(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def _package_json(dependencies: dict | None = None, dev_dependencies: dict | None = None) -> str:
    return json.dumps(
        {"name": "fixture", "dependencies": dependencies or {}, "devDependencies": dev_dependencies or {}}
    )


class TestEndToEnd:
    """Test closures computed from a scanned project."""

    @pytest.mark.asyncio
    async def test_relative_import_with_package(self, tmp_path):
        """a.ts -> ./b -> left-pad yields a single candidate with both files."""
        _write(
            tmp_path,
            {
                "package.json": _package_json({"left-pad": "1.0.0"}),
                "a.ts": "import { pad } from './b';\n",
                "b.ts": "import leftPad from 'left-pad';\n",
            },
        )

        scan = await scan_project(str(tmp_path))

        assert scan.file_index["a.ts"].meta.import_count == 0
        assert scan.file_index["b.ts"].meta.import_count == 1
        assert scan.candidates == ["a.ts"]

        summary = scan.summarize("a.ts")
        assert summary.file_dependencies == ["a.ts", "b.ts"]
        assert summary.dependencies == ["left-pad@1.0.0"]
        assert summary.registry_dependencies == []
        assert summary.heuristic_dependencies == []
        assert [entry.to_dict() for entry in summary.files] == [
            {"path": "a.ts", "type": "registry:lib", "target": "a.ts"},
            {"path": "b.ts", "type": "registry:lib", "target": "b.ts"},
        ]

    @pytest.mark.asyncio
    async def test_content_file_sibling(self, tmp_path):
        """widget.content.ts is pulled into widget.ts as a registry:file."""
        _write(
            tmp_path,
            {
                "package.json": _package_json(),
                "widget.ts": "export const widget = 1;\n",
                "widget.content.ts": "export default {};\n",
            },
        )

        scan = await scan_project(str(tmp_path))
        summary = scan.summarize("widget.ts")

        assert summary.file_dependencies == ["widget.content.ts", "widget.ts"]
        assert {"path": "widget.content.ts", "type": "registry:file", "target": "widget.content.ts"} in [
            entry.to_dict() for entry in summary.files
        ]
        assert summary.heuristic_dependencies == []

    @pytest.mark.asyncio
    async def test_heuristic_content_reported_separately(self, tmp_path):
        _write(
            tmp_path,
            {
                "package.json": _package_json(),
                "docs/page.content.ts": "export default {};\n",
                "docs/views/view.tsx": "export const View = () => null;\n",
            },
        )

        scan = await scan_project(str(tmp_path))
        summary = scan.summarize("docs/views/view.tsx")

        assert summary.file_dependencies == ["docs/page.content.ts", "docs/views/view.tsx"]
        assert summary.heuristic_dependencies == ["docs/page.content.ts"]

    @pytest.mark.asyncio
    async def test_cycle_terminates(self, tmp_path):
        _write(
            tmp_path,
            {
                "package.json": _package_json(),
                "a.ts": "import './b';\n",
                "b.ts": "import './a';\n",
            },
        )

        scan = await scan_project(str(tmp_path))

        assert scan.candidates == []
        assert scan.summarize("a.ts").file_dependencies == ["a.ts", "b.ts"]

    @pytest.mark.asyncio
    async def test_repeat_computation_is_stable(self, tmp_path):
        _write(
            tmp_path,
            {
                "package.json": _package_json({"react": "18.2.0"}),
                "src/button.tsx": "import React from 'react';\nimport { cn } from './utils';\n",
                "src/utils.ts": "",
            },
        )

        scan = await scan_project(str(tmp_path))
        first = scan.summarize("src/button.tsx").to_dict()
        annotate_import_counts(scan.tree, scan.root_path, scan.options)

        assert scan.summarize("src/button.tsx").to_dict() == first
        assert scan.file_index["src/utils.ts"].meta.import_count == 1

    @pytest.mark.asyncio
    async def test_alias_into_known_registry(self, tmp_path):
        _write(
            tmp_path,
            {
                "package.json": _package_json({"clsx": "2.0.0"}, {"typescript": "5.4.0"}),
                "tsconfig.json": json.dumps({"compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["./src/*"]}}}),
                "shadcn-registry-builder.json": json.dumps({"knownRegistries": [{"src/registry/": "@acme/ui"}]}),
                "src/card.tsx": (
                    "import clsx from 'clsx';\n"
                    "import type { Config } from 'typescript';\n"
                    "import { Badge } from '@/registry/ui/badge';\n"
                    "import { cn } from '@/lib/utils';\n"
                ),
                "src/lib/utils.ts": "",
                "src/registry/ui/badge.tsx": "",
            },
        )

        scan = await scan_project(str(tmp_path))
        summary = scan.summarize("src/card.tsx")

        assert summary.dependencies == ["clsx@2.0.0", "typescript@5.4.0"]
        assert summary.registry_dependencies == ["@acme-ui/ui-badge"]
        assert summary.component_path == "./src/card.tsx"
        assert summary.file_dependencies == ["src/card.tsx", "src/lib/utils.ts", "src/registry/ui/badge.tsx"]
        assert summary.files[0].to_dict() == {
            "path": "./src/card.tsx",
            "type": "registry:component",
            "target": "~/src/card.tsx",
        }

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, tmp_path):
        _write(tmp_path, {"package.json": _package_json(), "a.ts": ""})

        scan = await scan_project(str(tmp_path))

        assert scan.summarize("missing.ts") is None


class TestFormatting:
    """Test display helpers."""

    def test_package_reference(self):
        assert format_package_reference(PackageReference("react", "dependency", "18.2.0")) == "react@18.2.0"
        assert format_package_reference(PackageReference("react", "dependency")) == "react"

    def test_registry_reference(self):
        assert format_registry_reference(PackageReference("button", "@shadcn/ui")) == "button"
        assert format_registry_reference(PackageReference("input", "acme")) == "acme/input"
        assert format_registry_reference(PackageReference("input", "@acme/ui")) == "@acme-ui/input"

    def test_file_dependency_path(self):
        assert format_file_dependency_path("/repo/app/src/ui/a.tsx", "/repo/app", "/repo") == "./src/ui/a.tsx"
        assert format_file_dependency_path("/repo/app/lib/a.ts", "/repo/app", "/repo") == "lib/a.ts"

    def test_registry_file_types(self):
        assert classify_registry_file("a.tsx") == "registry:component"
        assert classify_registry_file("a.jsx") == "registry:component"
        assert classify_registry_file("a.ts") == "registry:lib"
        assert classify_registry_file("a.content.tsx") == "registry:file"
        assert classify_registry_file("a.mjs") == "registry:file"

    def test_file_entry_targets(self):
        entries = build_file_entries(["./src/a.tsx", "b.ts"])

        assert [entry.target for entry in entries] == ["~/src/a.tsx", "b.ts"]
