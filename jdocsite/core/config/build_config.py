"""Build configuration for jdocsite.

This module provides the settings for one documentation build: where the
sources and samples live, where the site is written, and which external
documentation sites take part in cross-reference resolution.
"""

import argparse
import json
import os
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, field_validator

from jdocsite.core.constants import (
    DEFAULT_FETCH_RETRY_ATTEMPTS,
    DEFAULT_FETCH_RETRY_DELAY,
    DEFAULT_SAMPLE_SUFFIX,
    JDK_API_URL,
)
from jdocsite.core.exceptions import ConfigurationError

ENV_PREFIX = "JDOCSITE_"


class BuildConfig(BaseModel):
    """Documentation build configuration.

    Configuration can be provided via:
    - CLI arguments
    - Environment variables (JDOCSITE_*)
    - A JSON configuration file
    - Default values
    """

    # Source locations
    sources: list[Path] = Field(default_factory=list, description="Source directories")
    sample: Path | None = Field(default=None, description="Sample source directory")
    classpath: list[Path] = Field(
        default_factory=list,
        description="Class path entries (accepted for compatibility, not analyzed)",
    )
    sample_suffix: str = Field(
        default=DEFAULT_SAMPLE_SUFFIX,
        description="File name suffix selecting sample sources",
    )

    # Output
    output: Path | None = Field(default=None, description="Site output directory")
    product: str = Field(default="", description="Product name shown in page titles")
    project: str = Field(default="", description="Project name")
    version: str = Field(default="", description="Product version")
    repository: str | None = Field(
        default=None, description="Repository URL used to build edit links"
    )

    # External documentation
    external_docs: list[str] = Field(
        default_factory=list, description="Base URLs of external API documentation"
    )
    use_jdk_doc: bool = Field(
        default=False, description="Register the JDK API documentation"
    )
    fetch_retry_attempts: int = Field(
        default=DEFAULT_FETCH_RETRY_ATTEMPTS,
        ge=1,
        description="Maximum fetch attempts per external site",
    )
    fetch_retry_delay: float = Field(
        default=DEFAULT_FETCH_RETRY_DELAY,
        ge=0.0,
        description="Fixed delay between fetch attempts (seconds)",
    )
    fetch_timeout: float | None = Field(
        default=60.0,
        gt=0.0,
        description="Upper bound on waiting for all external fetches (seconds)",
    )
    http_timeout: float = Field(
        default=10.0, gt=0.0, description="Timeout of a single HTTP request"
    )

    @field_validator("external_docs")
    @classmethod
    def validate_external_docs(cls, v: list[str]) -> list[str]:
        """Keep only API documentation roots (http... ending with /api/)."""
        accepted: list[str] = []
        for url in v:
            if url and url.startswith("http") and url.endswith("/api/"):
                if url not in accepted:
                    accepted.append(url)
            else:
                logger.warning(f"Ignoring external documentation URL: {url!r}")
        return accepted

    def external_doc_urls(self) -> list[str]:
        """All external documentation roots, JDK first when enabled."""
        urls = [JDK_API_URL] if self.use_jdk_doc else []
        for url in self.external_docs:
            if url not in urls:
                urls.append(url)
        return urls

    def validate_paths(self) -> None:
        """Check that configured directories exist.

        Raises:
            ConfigurationError: If a source or sample directory is missing
        """
        if not self.sources:
            raise ConfigurationError("At least one source directory is required")
        for source in self.sources:
            if not source.is_dir():
                raise ConfigurationError(f"Source directory not found: {source}")
        if self.sample is not None and not self.sample.is_dir():
            raise ConfigurationError(f"Sample directory not found: {self.sample}")

    @classmethod
    def load_file(cls, path: Path) -> dict[str, Any]:
        """Read a JSON configuration file."""
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Cannot load config file {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        return payload

    @classmethod
    def load_env(cls) -> dict[str, Any]:
        """Collect overrides from JDOCSITE_* environment variables."""
        values: dict[str, Any] = {}
        if sources := os.getenv(f"{ENV_PREFIX}SOURCES"):
            values["sources"] = [Path(p) for p in sources.split(os.pathsep) if p]
        if sample := os.getenv(f"{ENV_PREFIX}SAMPLE"):
            values["sample"] = Path(sample)
        if output := os.getenv(f"{ENV_PREFIX}OUTPUT"):
            values["output"] = Path(output)
        if external := os.getenv(f"{ENV_PREFIX}EXTERNAL_DOCS"):
            values["external_docs"] = [u for u in external.split(",") if u.strip()]
        if repository := os.getenv(f"{ENV_PREFIX}REPOSITORY"):
            values["repository"] = repository
        if timeout := os.getenv(f"{ENV_PREFIX}FETCH_TIMEOUT"):
            try:
                values["fetch_timeout"] = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid {ENV_PREFIX}FETCH_TIMEOUT: {timeout}")
        return values

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "BuildConfig":
        """Build configuration from CLI arguments, environment and config file.

        Precedence: CLI arguments > environment > config file > defaults.
        """
        values: dict[str, Any] = {}
        config_path = getattr(args, "config", None)
        if config_path is not None:
            values.update(cls.load_file(Path(config_path)))
        values.update(cls.load_env())

        cli_values = {
            "sources": getattr(args, "sources", None) or None,
            "sample": getattr(args, "sample", None),
            "output": getattr(args, "out_dir", None),
            "external_docs": getattr(args, "external_docs", None),
            "product": getattr(args, "product", None),
            "project": getattr(args, "project", None),
            "version": getattr(args, "product_version", None),
            "repository": getattr(args, "repository", None),
            "fetch_timeout": getattr(args, "fetch_timeout", None),
        }
        values.update({k: v for k, v in cli_values.items() if v is not None})
        if getattr(args, "use_jdk_doc", False):
            values["use_jdk_doc"] = True

        return cls(**values)

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add build-related CLI arguments."""
        parser.add_argument(
            "sources",
            metavar="SOURCE",
            nargs="*",
            type=Path,
            help="Source directories to document",
        )

        parser.add_argument(
            "--out-dir",
            type=Path,
            help="Output directory for the generated site",
        )

        parser.add_argument(
            "--sample",
            type=Path,
            help="Directory of sample sources referenced from doc comments",
        )

        parser.add_argument(
            "--external-doc",
            action="append",
            dest="external_docs",
            metavar="URL",
            help=(
                "Base URL of external API documentation (must end with /api/). "
                "Can be provided multiple times."
            ),
        )

        parser.add_argument(
            "--use-jdk-doc",
            action="store_true",
            help="Link JDK types to the official API documentation",
        )

        parser.add_argument("--product", type=str, help="Product name")
        parser.add_argument("--project", type=str, help="Project name")
        parser.add_argument(
            "--product-version", type=str, help="Product version"
        )

        parser.add_argument(
            "--repository",
            type=str,
            help="Repository URL used to build 'edit this page' links",
        )

        parser.add_argument(
            "--fetch-timeout",
            type=float,
            help="Seconds to wait for external documentation fetches (default: 60)",
        )
