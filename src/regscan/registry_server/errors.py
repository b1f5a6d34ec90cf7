"""Error types for the registry scanner.

Filesystem failures during a scan are not wrapped: the OSError raised while
listing, reading or stat-ing an entry propagates and aborts the scan.
"""


class RegistryScanError(Exception):
    """Base class for fatal scanner errors."""


class ConfigurationError(RegistryScanError):
    """Scan root is missing or is not a directory, or config JSON is malformed."""


class ManifestError(RegistryScanError):
    """package.json or tsconfig file exists but cannot be parsed."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Failed to read {path}: {message}")
