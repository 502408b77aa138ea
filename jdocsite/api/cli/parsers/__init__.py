"""Argument parser utilities for jdocsite CLI commands."""

from .build_parser import add_build_subparser
from .main_parser import create_main_parser, setup_subparsers

__all__ = [
    "add_build_subparser",
    "create_main_parser",
    "setup_subparsers",
]
