"""Version information for jdocsite."""

__version__ = "0.1.0"
