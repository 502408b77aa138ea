"""Exception taxonomy for jdocsite."""

from .core import (
    BuildError,
    ConfigurationError,
    ExternalDocFetchError,
    JDocSiteError,
    SetupError,
    SourceReadError,
)

__all__ = [
    "BuildError",
    "ConfigurationError",
    "ExternalDocFetchError",
    "JDocSiteError",
    "SetupError",
    "SourceReadError",
]
