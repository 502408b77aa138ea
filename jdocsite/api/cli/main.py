"""Entry point for the jdocsite command line."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from loguru import logger

from jdocsite.core.config.logging_config import LoggingConfig

from .parsers import create_main_parser, setup_subparsers


def setup_logging(verbose: bool = False, config: Any | None = None) -> None:
    """Configure loguru sinks.

    Args:
        verbose: Show DEBUG output on the console
        config: A `LoggingConfig`, or an object carrying one as ``.logging``
    """
    logger.remove()

    logging_config: LoggingConfig | None = getattr(config, "logging", config)
    file_enabled = logging_config is not None and logging_config.is_enabled()

    if verbose:
        console_level = "DEBUG"
    elif file_enabled:
        console_level = "WARNING"
    else:
        console_level = logging_config.console_level if logging_config else "INFO"

    logger.add(
        sys.stderr,
        level=console_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )

    if file_enabled and logging_config is not None:
        file_config = logging_config.file
        logger.add(
            file_config.path,
            level=file_config.level,
            rotation=file_config.rotation,
            retention=file_config.retention,
            format=file_config.format,
        )


def _dispatch(args: argparse.Namespace) -> None:
    if args.command == "build":
        from .commands.build import build_command

        build_command(args)


def main(argv: list[str] | None = None) -> None:
    parser = create_main_parser()
    setup_subparsers(parser)
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(getattr(args, "verbose", False), LoggingConfig.from_args(args))

    from .commands.build_errors import BuildCLIExit
    from .utils.rich_output import RichOutputFormatter

    try:
        _dispatch(args)
    except BuildCLIExit as exit_info:
        formatter = RichOutputFormatter(verbose=getattr(args, "verbose", False))
        for message in exit_info.infos:
            formatter.info(message)
        for message in exit_info.warnings:
            formatter.warning(message)
        for message in exit_info.errors:
            formatter.error(message)
        sys.exit(exit_info.exit_code)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
