"""jdocsite: static documentation sites from Java doc comments."""

from jdocsite.version import __version__

__all__ = ["__version__"]
