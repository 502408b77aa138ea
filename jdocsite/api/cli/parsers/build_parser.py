"""Documentation build command argument parser."""

import argparse
from typing import Any, cast

from .common_arguments import add_common_arguments, add_config_arguments


def add_build_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add the documentation build subparser to the main parser."""
    build_parser = subparsers.add_parser(
        "build",
        help="Generate a static API documentation site from Java sources",
        description=(
            "Extract doc comments and declarations from Java source directories, "
            "resolve cross-references against the sources and external API "
            "documentation, and write a static site."
        ),
    )

    add_config_arguments(build_parser, ["build"])
    add_common_arguments(build_parser)

    return cast(argparse.ArgumentParser, build_parser)


__all__: list[str] = ["add_build_subparser"]
