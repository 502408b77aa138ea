"""Symbol graph builder: the doclet that turns visited elements into records."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from jdocsite.core.exceptions import BuildError
from jdocsite.javadoc.external_index import ExternalDocIndex
from jdocsite.javadoc.models import ClassInfo, Data
from jdocsite.javadoc.positions import source_code
from jdocsite.javadoc.samples import SampleCache, strip_header_whitespace
from jdocsite.parsers.driver import DocletEnvironment
from jdocsite.parsers.elements import Element, ElementIndex, ElementKind


@dataclass
class BuildContext:
    """Everything one build shares between its passes."""

    data: Data = field(default_factory=Data)
    samples: SampleCache = field(default_factory=SampleCache)
    internals: set[str] = field(default_factory=set)
    externals: ExternalDocIndex | None = None
    index: ElementIndex = field(default_factory=ElementIndex)
    collecting_samples: bool = False


class SymbolGraphBuilder:
    """Doclet building the symbol graph, or priming the sample cache.

    In sample mode nothing is added to the graph: every ``@see`` target
    named by a sample method gets that method's source as its sample.
    """

    def __init__(self, context: BuildContext):
        self.context = context
        self.env: DocletEnvironment | None = None

    def initialize(self, env: DocletEnvironment) -> None:
        self.env = env
        if not self.context.collecting_samples:
            self.context.index = env.index
            self.context.internals |= {p for p in env.packages if p}

    def process(self, element: Element) -> None:
        if element.kind is ElementKind.MODULE:
            self.process_module(element)
        elif element.kind is ElementKind.PACKAGE:
            self.process_package(element)
        else:
            self.visit(element)

    def process_module(self, element: Element) -> None:
        pass

    def process_package(self, element: Element) -> None:
        pass

    def visit(self, element: Element) -> None:
        """Build the record for one top-level type and its nested types."""
        if self.env is None:
            raise BuildError("visit", "initialize() must run before visit()")
        content = element.source.char_content()
        info = ClassInfo(element, self.env.index, content)

        if not self.context.collecting_samples:
            for record in info.all_types():
                self.context.data.add(record)
            return

        for record in info.all_types():
            for method in record.methods:
                references = method.reference_by_see()
                if not references:
                    continue
                code = strip_header_whitespace(source_code(method.element, content))
                origin = (str(element.source.path), method.declaration_line[0])
                for reference in references:
                    self.context.samples.put(reference.key, code, origin)

    def complete(self) -> None:
        if self.context.collecting_samples:
            logger.debug(f"Sample pass collected {len(self.context.samples)} samples")
        else:
            logger.debug(f"Main pass collected {len(self.context.data.types)} types")
