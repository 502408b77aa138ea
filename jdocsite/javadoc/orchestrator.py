"""Build orchestration for the documentation site.

# FILE_CONTEXT: Drives sample pass, main pass, finalization and rendering
# CONSTRAINT: One build at a time per model (lock owned by the instance)
# CONSTRAINT: The sample pass always completes before the main pass starts
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from enum import Enum, auto
from pathlib import Path

from loguru import logger

from jdocsite.core.config.build_config import BuildConfig
from jdocsite.core.constants import JAVA_SOURCE_SUFFIX
from jdocsite.core.exceptions import BuildError, JDocSiteError
from jdocsite.javadoc.analyzer import BuildContext, SymbolGraphBuilder
from jdocsite.javadoc.comments import CommentRenderer
from jdocsite.javadoc.editor import EditorResolver, github_editor
from jdocsite.javadoc.external_index import ExternalDocIndex
from jdocsite.javadoc.models import Data
from jdocsite.javadoc.pages import SiteInfo
from jdocsite.javadoc.samples import SampleExtractor
from jdocsite.javadoc.site_writer import write_site
from jdocsite.javadoc.type_resolver import TypeResolver
from jdocsite.parsers.driver import DocumentationDriver


class BuildState(Enum):
    """Phase of the documentation build."""

    IDLE = auto()
    SAMPLE_PASS = auto()
    MAIN_PASS = auto()
    FINALIZING = auto()
    RENDERED = auto()


def java_files(root: Path, suffix: str = JAVA_SOURCE_SUFFIX) -> list[Path]:
    """Java sources under ``root`` ending with ``suffix``, in path order."""
    return sorted(p for p in root.rglob(f"*{suffix}") if p.is_file())


def find_source_packages(sources: Iterable[Path]) -> set[str]:
    """Dotted names of every sub-directory of every source root."""
    packages: set[str] = set()
    for root in sources:
        for directory in root.rglob("*"):
            if directory.is_dir():
                packages.add(".".join(directory.relative_to(root).parts))
    return packages


class JavadocModel:
    """Documentation build for one configuration.

    Key invariants:
    - Builds are serialized by the instance lock; a second caller waits
    - External fetches overlap both passes and are joined before finalizing
    - Finalizing sorts the graph before connecting subtypes
    """

    def __init__(
        self,
        config: BuildConfig,
        *,
        lock: threading.Lock | None = None,
        externals: ExternalDocIndex | None = None,
        driver: DocumentationDriver | None = None,
        editor: EditorResolver | None = None,
    ) -> None:
        self.config = config
        self._lock = lock if lock is not None else threading.Lock()
        self._state = BuildState.IDLE
        self._state_lock = threading.Lock()
        self.history: list[BuildState] = []
        if externals is None:
            externals = ExternalDocIndex(
                retry_attempts=config.fetch_retry_attempts,
                retry_delay=config.fetch_retry_delay,
                http_timeout=config.http_timeout,
            )
        self.externals = externals
        self.driver = driver if driver is not None else DocumentationDriver()
        self.editor = editor if editor is not None else github_editor(config.repository)
        self.context: BuildContext | None = None

    @property
    def state(self) -> BuildState:
        with self._state_lock:
            return self._state

    @property
    def data(self) -> Data:
        return self.context.data if self.context is not None else Data()

    def _transition(self, state: BuildState) -> None:
        with self._state_lock:
            self._state = state
        self.history.append(state)
        logger.info(f"Build phase: {state.name}")

    def use_external_docs(self, *urls: str) -> None:
        """Start fetching external documentation indexes ahead of a build."""
        self.externals.register(*urls)

    def build(self) -> Data:
        """Run the whole build and return the finished symbol graph.

        Raises:
            SourceReadError: If a source file cannot be read
            BuildError: If any other failure aborts a pass
        """
        with self._lock:
            self.history = []
            phase = BuildState.IDLE
            try:
                context = BuildContext(
                    externals=self.externals,
                    internals=find_source_packages(self.config.sources),
                )
                self.context = context
                self.use_external_docs(*self.config.external_doc_urls())

                sources = [f for root in self.config.sources for f in java_files(root)]

                if self.config.sample is not None:
                    phase = BuildState.SAMPLE_PASS
                    self._transition(phase)
                    self._sample_pass(context, sources)

                phase = BuildState.MAIN_PASS
                self._transition(phase)
                context.collecting_samples = False
                self.driver.run(sources, SymbolGraphBuilder(context))

                phase = BuildState.FINALIZING
                self._transition(phase)
                self._finalize(context)

                if self.config.output is not None:
                    self._render(context, self.config.output)
                phase = BuildState.RENDERED
                self._transition(phase)
                return context.data
            except JDocSiteError:
                raise
            except Exception as e:
                raise BuildError(phase.name.lower(), str(e)) from e
            finally:
                self._transition(BuildState.IDLE)

    def _sample_pass(self, context: BuildContext, sources: list[Path]) -> None:
        if self.config.sample is None:
            raise BuildError("sample_pass", "No sample directory is configured")
        samples = java_files(self.config.sample, self.config.sample_suffix)
        context.collecting_samples = True
        try:
            # main sources take part in name resolution but are not visited
            files = list(dict.fromkeys([*samples, *sources]))
            self.driver.run(files, SymbolGraphBuilder(context), specified=samples)
        finally:
            context.collecting_samples = False
            context.samples.seal()
        logger.info(f"Collected {len(context.samples)} samples from {len(samples)} files")

    def _finalize(self, context: BuildContext) -> None:
        if not self.externals.wait(self.config.fetch_timeout):
            logger.warning("Continuing without the unfinished external documentation")
        context.data.sort()
        context.data.connect_sub_types()

    def renderer(self, context: BuildContext | None = None, root: str = "../") -> CommentRenderer:
        if context is None:
            context = self.context
        if context is None:
            context = BuildContext(externals=self.externals)
        roots = ([self.config.sample] if self.config.sample else []) + list(self.config.sources)
        resolver = TypeResolver(context.index, context.internals, context.externals)
        return CommentRenderer(resolver, SampleExtractor(roots), root=root)

    def _render(self, context: BuildContext, output: Path) -> None:
        write_site(
            output_dir=output,
            data=context.data,
            renderer=self.renderer(context),
            site=SiteInfo(self.config.product, self.config.project, self.config.version),
            samples=context.samples,
            editor=self.editor,
        )

    def close(self) -> None:
        self.externals.close()
