"""Tests for registry.json and registry.info writers."""

import json
import logging
from pathlib import Path

import pytest

from regscan.registry_server.tools.registry_info import create_registry_info, format_item_path
from regscan.registry_server.tools.registry_json import (
    REGISTRY_SCHEMA_URL,
    build_item_name,
    generate_registry_json,
    merge_unique,
)
from regscan.registry_server.tools.scan_project import scan_project


def _write(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


class TestGenerateRegistryJson:
    """Test registry.json generation."""

    @pytest.mark.asyncio
    async def test_missing_metadata(self, tmp_path, caplog):
        _write(tmp_path, {"package.json": "{}", "a.tsx": ""})
        scan = await scan_project(str(tmp_path))

        with caplog.at_level(logging.ERROR):
            assert generate_registry_json(scan) is None

        assert "Unable to locate registry metadata" in caplog.text
        assert not (tmp_path / "registry.json").exists()

    @pytest.mark.asyncio
    async def test_malformed_metadata(self, tmp_path):
        _write(tmp_path, {"package.json": "{}", "a.tsx": "", "registry.info": "{"})
        scan = await scan_project(str(tmp_path))

        assert generate_registry_json(scan) is None

    @pytest.mark.asyncio
    async def test_items_merge_metadata_and_closure(self, tmp_path):
        _write(
            tmp_path,
            {
                "package.json": json.dumps({"dependencies": {"clsx": "2.0.0"}}),
                "registry.info": json.dumps(
                    {
                        "name": "acme",
                        "categories": ["ui"],
                        "items": [
                            {
                                "name": "button",
                                "title": "Button",
                                "description": "A button",
                                "categories": ["forms"],
                                "dependencies": ["react@18.2.0"],
                            }
                        ],
                    }
                ),
                "button/button.tsx": "import clsx from 'clsx';\n",
                "card.tsx": "",
            },
        )
        scan = await scan_project(str(tmp_path))

        registry_path = generate_registry_json(scan)

        assert registry_path == str(tmp_path.resolve() / "registry.json")
        output = json.loads(Path(registry_path).read_text())
        assert output["$schema"] == REGISTRY_SCHEMA_URL
        assert output["name"] == "acme"
        assert "categories" not in output

        items = {item["name"]: item for item in output["items"]}
        assert items["button"] == {
            "name": "button",
            "title": "Button",
            "description": "A button",
            "type": "registry:component",
            "categories": ["forms", "ui"],
            "dependencies": ["clsx@2.0.0", "react@18.2.0"],
            "files": [{"path": "button/button.tsx", "type": "registry:component", "target": "button/button.tsx"}],
        }
        assert items["card"] == {
            "name": "card",
            "type": "registry:component",
            "categories": ["ui"],
            "files": [{"path": "card.tsx", "type": "registry:component", "target": "card.tsx"}],
        }

    @pytest.mark.asyncio
    async def test_index_components_keep_scaffolded_metadata(self, tmp_path):
        """Items written to registry.info are found again for x/index.tsx components."""
        _write(tmp_path, {"package.json": "{}", "button/index.tsx": "", "card/index.tsx": ""})
        scan = await scan_project(str(tmp_path))

        info_path = create_registry_info(str(tmp_path), scan.candidates)
        info = json.loads(Path(info_path).read_text())
        for item in info["items"]:
            item["title"] = item["name"].capitalize()
        Path(info_path).write_text(json.dumps(info))

        registry_path = generate_registry_json(scan)

        output = json.loads(Path(registry_path).read_text())
        assert [item["name"] for item in info["items"]] == ["button", "card"]
        assert [item["name"] for item in output["items"]] == ["button", "card"]
        assert [item["title"] for item in output["items"]] == ["Button", "Card"]

    @pytest.mark.asyncio
    async def test_no_components(self, tmp_path):
        _write(tmp_path, {"package.json": "{}", "registry.json": "{}"})
        scan = await scan_project(str(tmp_path))

        assert generate_registry_json(scan) is None

    def test_helpers(self):
        assert build_item_name("./ui/button.tsx") == "button"
        assert build_item_name("ui\\card\\index.ts") == "card"
        assert build_item_name("index.mjs") == "index"
        assert merge_unique(["b", "A"], ["a", "b"]) == ["A", "a", "b"]


class TestCreateRegistryInfo:
    """Test registry.info scaffolding."""

    def test_fresh_file(self, tmp_path):
        target = tmp_path / "widgets"
        target.mkdir()

        path = create_registry_info(
            str(target),
            ["button/index.tsx", "card.tsx"],
            name_prefix="acme",
            homepage="https://example.com",
            author="Docs Team",
        )

        data = json.loads(Path(path).read_text())
        assert data["$schema"] == REGISTRY_SCHEMA_URL
        assert data["name"] == "acme-widgets"
        assert data["homepage"] == "https://example.com"
        assert data["author"] == "Docs Team"
        assert data["categories"] == ["widgets"]
        assert data["items"] == [
            {
                "name": "button",
                "title": "button",
                "description": "",
                "type": "registry:component",
                "path": "./button",
                "categories": ["button"],
            },
            {
                "name": "card",
                "title": "card",
                "description": "",
                "type": "registry:component",
                "path": ".",
                "categories": ["card"],
            },
        ]

    def test_previous_values_win(self, tmp_path):
        (tmp_path / "registry.info").write_text(
            json.dumps(
                {
                    "name": "kept-name",
                    "author": "Original Author",
                    "categorie": ["legacy"],
                    "items": [{"name": "card", "title": "Fancy Card", "description": "Edited"}],
                }
            )
        )

        create_registry_info(str(tmp_path), ["card.tsx", "new.tsx"], author="Someone Else")

        data = json.loads((tmp_path / "registry.info").read_text())
        assert data["name"] == "kept-name"
        assert data["author"] == "Original Author"
        assert data["categories"] == ["legacy"]
        assert data["items"][0]["title"] == "Fancy Card"
        assert data["items"][0]["description"] == "Edited"
        assert data["items"][0]["path"] == "."
        assert data["items"][1]["title"] == "new"
        assert not (tmp_path / "registry.info.old").exists()

    def test_unreadable_previous_file_is_replaced(self, tmp_path):
        (tmp_path / "registry.info").write_text("not json")

        create_registry_info(str(tmp_path), ["a.ts"])

        data = json.loads((tmp_path / "registry.info").read_text())
        assert data["items"][0]["name"] == "a"

    def test_item_helpers(self):
        assert build_item_name("ui/dialog/index.tsx") == "dialog"
        assert build_item_name("ui/Sheet.JSX") == "Sheet"
        assert format_item_path("ui/dialog/index.tsx") == "./ui/dialog"
        assert format_item_path("a.ts") == "."
