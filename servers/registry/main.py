"""Entry point for the Regscan Registry Server."""

import logging
import sys
from pathlib import Path

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from regscan.registry_server.config import ScannerConfig
from regscan.registry_server.server import mcp

if __name__ == "__main__":
    logging.basicConfig(level=ScannerConfig.from_environment().log_level)
    mcp.run()
