"""Top-level argument parser for the jdocsite CLI."""

import argparse
from typing import Any

from jdocsite.version import __version__

from .build_parser import add_build_subparser


def create_main_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jdocsite",
        description="Static documentation sites from Java doc comments",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"jdocsite {__version__}",
    )
    return parser


def setup_subparsers(parser: argparse.ArgumentParser) -> Any:
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    add_build_subparser(subparsers)
    return subparsers
