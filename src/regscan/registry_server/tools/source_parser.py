"""
Source parser for TypeScript and JavaScript files built on tree-sitter.

Only top-level import statements are reported. The rest of the scanner works
with the ``RawImport`` records and never touches tree-sitter nodes.
"""

from typing import Any

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Parser

from ..models.registry_models import RawImport

# Plain .ts sources use the TypeScript grammar; everything else may contain JSX
TYPESCRIPT_EXTENSIONS = {".ts", ".mts", ".cts"}

IMPORT_STATEMENT = "import_statement"
IMPORT_ALIAS = "import_alias"
IMPORT_REQUIRE_CLAUSE = "import_require_clause"


class SourceParser:
    """
    Extracts ordered import occurrences from source text.

    Features:
    - Separate grammars for TypeScript and TSX/JSX sources
    - Conventional imports, ``import x = require("y")`` and ``import x = A.B``
    - Literal specifiers only; no identifier resolution
    """

    def __init__(self):
        self._ts_language = Language(ts_typescript.language_typescript())
        self._tsx_language = Language(ts_typescript.language_tsx())

    def language_for(self, extension: str) -> Language:
        return self._ts_language if extension.lower() in TYPESCRIPT_EXTENSIONS else self._tsx_language

    def parse(self, content: str, extension: str) -> list[RawImport]:
        """
        Parse source text and return its top-level imports in source order.

        Args:
            content: Decoded file content
            extension: File extension used to pick the grammar (e.g. ".tsx")

        Returns:
            List of RawImport records with 1-based line numbers
        """
        # Parser instances are not shared so scans can parse from worker threads
        parser = Parser(self.language_for(extension))
        tree = parser.parse(content.encode("utf-8"))

        imports = []
        for node in tree.root_node.named_children:
            if node.type not in (IMPORT_STATEMENT, IMPORT_ALIAS):
                continue

            imports.append(
                RawImport(
                    line=node.start_point[0] + 1,
                    raw_text=_node_text(node).strip(),
                    module_specifier=_module_specifier(node),
                )
            )

        return imports


def _module_specifier(node: Any) -> str | None:
    if node.type == IMPORT_ALIAS:
        return None

    source = node.child_by_field_name("source")
    if source is None:
        for child in node.named_children:
            if child.type == IMPORT_REQUIRE_CLAUSE:
                source = child.child_by_field_name("source")
                break

    if source is None or source.type != "string":
        return None

    return _string_literal_value(source)


def _string_literal_value(node: Any) -> str:
    text = _node_text(node)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


def _node_text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


_default_parser: SourceParser | None = None


def get_source_parser() -> SourceParser:
    """Shared parser with grammars loaded once per process."""
    global _default_parser
    if _default_parser is None:
        _default_parser = SourceParser()
    return _default_parser
