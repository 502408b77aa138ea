"""Line numbers and verbatim text for declarations and doc comments."""

from __future__ import annotations

from jdocsite.parsers.elements import Element, ElementKind


def line_range(content: bytes, start: int, end: int) -> tuple[int, int]:
    """Convert a byte span into 1-based (first, last) line numbers.

    The content is scanned once, up to ``end``: newlines before ``start``
    give the first line, newlines inside the span add to it.
    """
    first = content.count(b"\n", 0, start) + 1
    return first, first + content.count(b"\n", start, end)


def document_lines(element: Element, content: bytes | None = None) -> tuple[int, int] | None:
    """Line range of the element's doc comment, or None when it has none."""
    if element.doc_span is None:
        return None
    if content is None:
        content = element.source.char_content()
    return line_range(content, element.doc_span.start, element.doc_span.end)


def declaration_lines(element: Element, content: bytes | None = None) -> tuple[int, int]:
    """Line range of the declaration itself.

    Fields start one line earlier so a single-line comment or annotation
    sitting above them is part of the range.
    """
    if content is None:
        content = element.source.char_content()
    first, last = line_range(content, element.span.start, element.span.end)
    if element.kind is ElementKind.FIELD:
        first = max(1, first - 1)
    return first, last


def text_lines(content: bytes, first: int, last: int) -> list[str]:
    """Lines ``first``..``last`` (1-based, inclusive) of ``content``."""
    lines = content.decode("utf-8", errors="replace").splitlines()
    return lines[first - 1 : last]


def source_code(element: Element, content: bytes | None = None) -> str:
    """Raw source text of the lines covered by the declaration.

    Raises:
        SourceReadError: If the backing file cannot be read
    """
    if content is None:
        content = element.source.char_content()
    first, last = declaration_lines(element, content)
    return "\n".join(text_lines(content, first, last))
