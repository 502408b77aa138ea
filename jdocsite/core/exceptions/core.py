"""Core exceptions for jdocsite.

The build distinguishes failures that abort the run (unreadable sources,
broken configuration, a missing grammar) from lookups that simply miss.
Misses are represented as empty results and never raise.
"""

from pathlib import Path


class JDocSiteError(Exception):
    """Base exception for all jdocsite errors."""

    pass


class ConfigurationError(JDocSiteError):
    """Raised for invalid build configuration.

    This occurs when:
    - No source directory is configured
    - A configured source or sample directory does not exist
    """

    pass


class SourceReadError(JDocSiteError):
    """Raised when a backing source file cannot be read.

    Fatal for the record being processed; propagates and aborts the build.
    """

    def __init__(self, path: Path | str, original_error: Exception | None = None):
        self.path = Path(path)
        self.original_error = original_error
        detail = f": {original_error}" if original_error else ""
        super().__init__(f"Cannot read source file {self.path}{detail}")


class ExternalDocFetchError(JDocSiteError):
    """Raised for a bad response from an external documentation site.

    Only used inside the fetch retry loop; never escapes the index.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class SetupError(JDocSiteError):
    """Raised when a parser dependency is not installed."""

    def __init__(
        self,
        parser: str,
        missing_dependency: str,
        install_command: str,
        original_error: str = "",
    ):
        self.parser = parser
        self.missing_dependency = missing_dependency
        self.install_command = install_command
        self.original_error = original_error
        super().__init__(
            f"{parser} parser requires {missing_dependency} "
            f"(install with: {install_command}). {original_error}".strip()
        )


class BuildError(JDocSiteError):
    """Raised when a documentation build aborts.

    No partial output is guaranteed consistent after this error.
    """

    def __init__(self, phase: str, message: str):
        self.phase = phase
        super().__init__(f"Build failed during {phase}: {message}")
