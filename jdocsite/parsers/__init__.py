"""Declaration-level Java model built with tree-sitter."""

from jdocsite.parsers.declarations import DeclarationExtractor, erase_type, normalize_signature
from jdocsite.parsers.driver import Doclet, DocletEnvironment, DocumentationDriver
from jdocsite.parsers.elements import (
    Element,
    ElementIndex,
    ElementKind,
    Parameter,
    SourceFile,
    Span,
)
from jdocsite.parsers.java_engine import JavaSourceEngine

__all__ = [
    "DeclarationExtractor",
    "Doclet",
    "DocletEnvironment",
    "DocumentationDriver",
    "Element",
    "ElementIndex",
    "ElementKind",
    "JavaSourceEngine",
    "Parameter",
    "SourceFile",
    "Span",
    "erase_type",
    "normalize_signature",
]
