"""Registry MCP Server - component discovery and shadcn registry generation."""

import logging

from fastmcp import FastMCP

from .config import ScannerConfig
from .tools import register_registry_tools

__version__ = "0.1.0"

# Initialize the Registry MCP server
mcp = FastMCP(
    name="Regscan Registry Server",
    version=__version__,
    instructions="""
        Registry server scans TS/JS source trees and builds shadcn registry metadata:

        Core Tools:
        - scan_component_tree: Annotated directory tree with typed imports
        - list_component_candidates: Files no other file imports
        - summarize_component: Transitive dependencies and registry files of a component
        - component_dependency_report: Indented dependency tree of a component
        - write_registry_info: Scaffold registry.info metadata
        - generate_registry: Write registry.json from metadata and closures

        Paths are relative to MCP_FILE_ROOT. Package versions come from the
        nearest package.json, path aliases from tsconfig compilerOptions.paths.
    """,
)

# Register all registry tools
register_registry_tools(mcp)

if __name__ == "__main__":
    logging.basicConfig(level=ScannerConfig.from_environment().log_level)
    mcp.run()
