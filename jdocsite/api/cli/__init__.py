"""Command line interface for jdocsite."""
