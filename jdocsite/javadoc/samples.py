"""Source sample extraction.

Samples are looked up by dotted name across registered sample roots
(``a.b.C`` maps to ``a/b/C.java``), cleaned of comments and noise
annotations, and de-indented for display.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path

from loguru import logger
from tree_sitter import Node

from jdocsite.core.constants import JAVA_SOURCE_SUFFIX, NOISE_ANNOTATIONS
from jdocsite.core.exceptions import BuildError
from jdocsite.parsers.declarations import DeclarationExtractor, normalize_signature
from jdocsite.parsers.elements import Element, ElementKind
from jdocsite.parsers.java_engine import JavaSourceEngine, node_text, walk
from jdocsite.javadoc.positions import declaration_lines, text_lines

COMMENT_NODES = {"line_comment", "block_comment"}
ANNOTATION_NODES = {"marker_annotation", "annotation"}
ANNOTATED_MEMBER_NODES = {"method_declaration", "constructor_declaration"}

# Stands in for removed text until lines emptied by the removal are dropped
_REMOVED = b"\x00"


def strip_header_whitespace(text: str, noise: Sequence[str] = NOISE_ANNOTATIONS) -> str:
    """Normalize a code listing for display.

    Drops leading and trailing blank lines, standalone noise annotation lines,
    and the smallest indent shared by all non-blank lines. Applying it twice
    gives the same result as applying it once.
    """
    lines = text.splitlines()
    if len(lines) <= 1:
        return text.strip()

    lines = [line for line in lines if not _is_noise_line(line, noise)]

    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return ""

    indent = min(_leading_whitespace(line) for line in lines if line.strip())
    return "\n".join(line[indent:] if line.strip() else line.strip() for line in lines)


def _is_noise_line(line: str, noise: Sequence[str]) -> bool:
    stripped = line.strip()
    for name in noise:
        marker = f"@{name}"
        if stripped == marker or stripped.startswith(marker + "("):
            return True
    return False


def _leading_whitespace(line: str) -> int:
    return len(line) - len(line.lstrip())


class SampleExtractor:
    """Resolve dotted names to cleaned source listings from sample roots."""

    def __init__(
        self,
        roots: Sequence[Path],
        engine: JavaSourceEngine | None = None,
        noise: Sequence[str] = NOISE_ANNOTATIONS,
    ):
        self.roots = list(roots)
        self.engine = engine if engine is not None else JavaSourceEngine()
        self.extractor = DeclarationExtractor(self.engine)
        self.noise = tuple(noise)

    def resolve(self, qualified_name: str, member_descriptor: str | None = None) -> str:
        """Return the cleaned source for a type or one of its members.

        The dotted name is shortened from the right until a file exists under
        a root; trailing segments then name a member or nested type. The
        shortest existing prefix is not preferred over a longer one, but a
        missing deeper file lets an enclosing type's file match.

        Returns:
            The normalized listing, or "" when nothing matches
        """
        segments = [s for s in qualified_name.split(".") if s]
        if member_descriptor is not None:
            member_descriptor = member_descriptor.lstrip("#") or None

        for root in self.roots:
            for length in range(len(segments), 0, -1):
                path = root.joinpath(*segments[:length]).with_suffix(JAVA_SOURCE_SUFFIX)
                if not path.is_file():
                    continue
                trailing = segments[length:]
                listing = self._resolve_in_file(path, trailing, member_descriptor)
                if listing is not None:
                    return listing
        return ""

    def _resolve_in_file(
        self, path: Path, trailing: list[str], member_descriptor: str | None
    ) -> str | None:
        tree, content = self.engine.parse_file(path)
        cleaned = self.clean_unit(tree.root_node, content)

        if not trailing and member_descriptor is None:
            return strip_header_whitespace(cleaned.decode("utf-8", errors="replace"), self.noise)

        _, types, _ = self.extractor.extract(self.engine.parse(cleaned).root_node, cleaned, path)
        candidates = list(_flatten(types))

        if trailing and member_descriptor is not None:
            scope = _find_type(candidates, trailing[-1])
            if scope is None:
                return None
            candidates = list(_flatten(scope.enclosed))
            descriptor = member_descriptor
        else:
            descriptor = member_descriptor if member_descriptor is not None else trailing[-1]

        element = _locate(candidates, descriptor)
        if element is None:
            logger.debug(f"No declaration matching {descriptor!r} in {path}")
            return None
        return self._listing(element, cleaned)

    def clean_unit(self, root: Node, content: bytes) -> bytes:
        """Remove every comment, and noise annotations on every method.

        Lines left empty by a removal are dropped; all other lines keep
        their layout.
        """
        removals = sorted(self._removals(root, content))
        out = bytearray()
        position = 0
        for start, end in removals:
            if start < position:
                continue
            out += content[position:start]
            out += _REMOVED
            position = end
        out += content[position:]

        lines: list[bytes] = []
        for line in bytes(out).split(b"\n"):
            if _REMOVED in line:
                line = line.replace(_REMOVED, b"")
                if not line.strip():
                    continue
            lines.append(line)
        return b"\n".join(lines)

    def _removals(self, root: Node, content: bytes) -> Iterator[tuple[int, int]]:
        for node in walk(root):
            if node.type in COMMENT_NODES:
                yield node.start_byte, node.end_byte
            elif node.type in ANNOTATED_MEMBER_NODES:
                modifiers = next((c for c in node.children if c.type == "modifiers"), None)
                if modifiers is None:
                    continue
                for child in modifiers.children:
                    if child.type not in ANNOTATION_NODES:
                        continue
                    name = node_text(child.child_by_field_name("name"), content)
                    if name.rsplit(".", 1)[-1] in self.noise:
                        end = child.end_byte
                        while end < len(content) and content[end : end + 1] in (b" ", b"\t"):
                            end += 1
                        yield child.start_byte, end

    def _listing(self, element: Element, content: bytes) -> str:
        first, last = declaration_lines(element, content)
        lines = text_lines(content, first, last)
        if element.kind is ElementKind.FIELD and first < _own_first_line(element, content):
            # the extra line belongs to the field only if it is an annotation or comment
            extra = lines[0].strip() if lines else ""
            if extra and not extra.startswith(("@", "//", "/*", "*")):
                lines = lines[1:]
        return strip_header_whitespace("\n".join(lines), self.noise)


def _own_first_line(element: Element, content: bytes) -> int:
    return content.count(b"\n", 0, element.span.start) + 1


def _flatten(elements: Sequence[Element]) -> Iterator[Element]:
    for element in elements:
        yield element
        yield from _flatten(element.enclosed)


def _find_type(candidates: Sequence[Element], name: str) -> Element | None:
    return next((e for e in candidates if e.kind.is_type and e.name == name), None)


def _locate(candidates: Sequence[Element], descriptor: str) -> Element | None:
    """Method signature first, then type name, then field variable name."""
    signature = normalize_signature(descriptor)
    for element in candidates:
        if element.kind is ElementKind.METHOD and element.signature == signature:
            return element
    found = _find_type(candidates, descriptor)
    if found is not None:
        return found
    for element in candidates:
        if element.kind is ElementKind.FIELD and descriptor in element.variables:
            return element
    return None


class SampleCache:
    """Reference key to sample listing, filled by the sample pass.

    When several sample members reference the same key, the one whose
    origin (file path, line) sorts first is kept, so the content does not
    depend on visitation order.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[tuple[str, int], str]] = {}
        self._sealed = False

    def put(self, key: str, code: str, origin: tuple[str, int]) -> None:
        if self._sealed:
            raise BuildError("sample pass", "sample cache is read-only after the sample pass")
        current = self._entries.get(key)
        if current is not None:
            if current[0] <= origin:
                logger.debug(f"Sample for {key} kept from {current[0]}, ignoring {origin}")
                return
            logger.debug(f"Sample for {key} replaced by {origin}")
        self._entries[key] = (origin, code)

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        return entry[1] if entry else None

    def seal(self) -> None:
        self._sealed = True

    def clear(self) -> None:
        self._entries.clear()
        self._sealed = False

    def samples_for(self, type_name: str, member: Element) -> list[str]:
        """Samples for a member: signature key first, then bare-name key."""
        found: list[str] = []
        for key in (f"{type_name}#{member.signature}", f"{type_name}#{member.name}"):
            code = self.get(key)
            if code is not None and code not in found:
                found.append(code)
        return found

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        return sorted(self._entries)
