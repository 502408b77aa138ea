"""Documentation build command module."""

from __future__ import annotations

import argparse

from loguru import logger
from pydantic import ValidationError

from jdocsite.api.cli.utils.rich_output import RichOutputFormatter
from jdocsite.core.config.build_config import BuildConfig
from jdocsite.core.exceptions import ConfigurationError, JDocSiteError
from jdocsite.javadoc import JavadocModel

from .build_errors import BuildCLIExit


def _load_config(args: argparse.Namespace) -> BuildConfig:
    try:
        config = BuildConfig.from_args(args)
    except ValidationError as exc:
        raise BuildCLIExit(2, errors=(f"Invalid build configuration: {exc}",)) from exc
    except ConfigurationError as exc:
        raise BuildCLIExit(2, errors=(str(exc),)) from exc

    try:
        config.validate_paths()
    except ConfigurationError as exc:
        raise BuildCLIExit(2, errors=(str(exc),)) from exc

    if config.output is None:
        raise BuildCLIExit(
            2, errors=("Missing output directory: pass --out-dir or set JDOCSITE_OUTPUT.",)
        )
    return config


def build_command(args: argparse.Namespace) -> None:
    """Build the documentation site described by the CLI arguments."""
    formatter = RichOutputFormatter(verbose=getattr(args, "verbose", False))
    config = _load_config(args)

    formatter.section_header("jdocsite build")
    formatter.verbose_info(f"Sources: {', '.join(str(s) for s in config.sources)}")
    if config.sample is not None:
        formatter.verbose_info(f"Samples: {config.sample}")
    for url in config.external_doc_urls():
        formatter.verbose_info(f"External documentation: {url}")

    model = JavadocModel(config)
    try:
        data = model.build()
    except JDocSiteError as exc:
        logger.exception("Documentation build failed")
        raise BuildCLIExit(1, errors=(str(exc),)) from exc
    finally:
        model.close()

    formatter.box_section(
        "Build summary",
        [
            ("Types", str(len(data.types))),
            ("Packages", str(len(data.packages))),
            ("Samples", str(len(model.context.samples) if model.context else 0)),
            ("Output", str(config.output)),
        ],
    )
    formatter.success("Documentation site written.")
