"""Documentation driver: the callback lifecycle around the declaration model.

The driver parses every given file once, builds the element index, then
calls back into a doclet: ``initialize(env)``, ``process(element)`` for each
specified module, package and top-level type, and finally ``complete()``.
Visitation follows file order; doclets must not rely on it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from loguru import logger

from jdocsite.parsers.declarations import DeclarationExtractor
from jdocsite.parsers.elements import (
    Element,
    ElementIndex,
    ElementKind,
    SourceFile,
    Span,
)

PACKAGE_INFO = "package-info.java"
MODULE_INFO = "module-info.java"


@dataclass
class DocletEnvironment:
    """What a doclet may see: the element index and every compilation unit."""

    index: ElementIndex
    source_files: list[SourceFile] = field(default_factory=list)
    specified: list[Element] = field(default_factory=list)

    @property
    def packages(self) -> set[str]:
        declared = {s.package for s in self.source_files}
        return declared | self.index.packages


class Doclet(Protocol):
    """Callback interface driven by `DocumentationDriver`."""

    def initialize(self, env: DocletEnvironment) -> None: ...

    def process(self, element: Element) -> None: ...

    def complete(self) -> None: ...


class DocumentationDriver:
    """Single-use parse-and-visit run over a set of Java files."""

    def __init__(self, extractor: DeclarationExtractor | None = None):
        self.extractor = extractor if extractor is not None else DeclarationExtractor()

    def run(
        self,
        files: Sequence[Path],
        doclet: Doclet,
        specified: Iterable[Path] | None = None,
    ) -> DocletEnvironment:
        """Parse ``files`` and drive ``doclet`` over the specified ones.

        Args:
            files: Every compilation unit taking part in name resolution
            doclet: Receiver of the callbacks
            specified: Files whose declarations are visited; defaults to all

        Returns:
            The environment handed to the doclet
        """
        wanted = set(files) if specified is None else set(specified)
        env = DocletEnvironment(index=ElementIndex())
        visit: list[Element] = []

        for path in files:
            source, types, module_name = self.extractor.extract_file(path)
            env.source_files.append(source)
            for element in types:
                env.index.add(element)
            if path not in wanted:
                continue

            if path.name == MODULE_INFO and module_name:
                visit.append(
                    Element(
                        kind=ElementKind.MODULE,
                        name=module_name,
                        source=source,
                        span=Span(0, 0),
                        qualified_name=module_name,
                    )
                )
            elif path.name == PACKAGE_INFO:
                visit.append(
                    Element(
                        kind=ElementKind.PACKAGE,
                        name=source.package,
                        source=source,
                        span=Span(0, 0),
                        qualified_name=source.package,
                    )
                )
            visit.extend(types)

        env.specified = visit
        logger.debug(
            f"Driver parsed {len(files)} files, {len(env.index)} types, "
            f"{len(visit)} specified elements"
        )

        doclet.initialize(env)
        for element in visit:
            doclet.process(element)
        doclet.complete()
        return env
