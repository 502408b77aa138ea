"""Symbol graph records: modules, packages, types and members.

Records are built once per declaration. The only later mutation is the
subtype back-reference filled in by `Data.connect_sub_types`, which runs
after every type has been added.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Any

from loguru import logger

from jdocsite.javadoc.comments import (
    CommentRenderer,
    DocComment,
    parse_doc_comment,
    see_references,
    split_heading,
)
from jdocsite.javadoc.positions import declaration_lines, document_lines
from jdocsite.javadoc.type_resolver import all_supertypes_and_interfaces
from jdocsite.parsers.elements import Element, ElementIndex, ElementKind

THROWABLE_TYPES = frozenset(
    {"java.lang.Throwable", "java.lang.Exception", "java.lang.RuntimeException", "java.lang.Error"}
)


@dataclass(frozen=True)
class CrossReference:
    """A ``@see`` target, kept unresolved until render time.

    ``member`` is "" or a normalized ``#signature``; ``qualified`` is the
    type name as attributed in the declaring compilation unit.
    """

    type_name: str
    member: str
    qualified: str

    @property
    def key(self) -> str:
        return f"{self.qualified}{self.member}"


class MemberInfo:
    """A documented member of a type."""

    def __init__(self, element: Element, owner: ClassInfo, content: bytes):
        self.element = element
        self.owner = owner
        self.name = element.name
        self.signature = element.signature
        self.kind = element.kind
        self.modifiers = element.modifiers
        self.comment = element.doc_comment
        self.doc: DocComment = parse_doc_comment(element.doc_comment)
        self.document_line = document_lines(element, content)
        self.declaration_line = declaration_lines(element, content)
        self.references = [
            CrossReference(
                type_name,
                member,
                owner.index.qualify(type_name, element) if type_name else owner.qualified_name,
            )
            for type_name, member in see_references(self.doc)
        ]

    @property
    def id(self) -> str:
        return self.signature

    @property
    def has_document(self) -> bool:
        return not self.doc.is_empty

    @property
    def is_visible(self) -> bool:
        return bool(self.modifiers & {"public", "protected"})

    def reference_by_see(self) -> list[CrossReference]:
        return list(self.references)


class MethodInfo(MemberInfo):
    def __init__(self, element: Element, owner: ClassInfo, content: bytes):
        super().__init__(element, owner, content)
        self.parameters = element.parameters
        self.return_type = element.return_type
        self.throws = element.throws

    @property
    def is_constructor(self) -> bool:
        return self.kind is ElementKind.CONSTRUCTOR


class FieldInfo(MemberInfo):
    def __init__(self, element: Element, owner: ClassInfo, content: bytes):
        super().__init__(element, owner, content)
        self.type = element.return_type
        self.variables = element.variables


@total_ordering
class ClassInfo:
    """One declared type, ordered by qualified name."""

    def __init__(self, element: Element, index: ElementIndex, content: bytes | None = None):
        if content is None:
            content = element.source.char_content()
        self.element = element
        self.index = index
        self.qualified_name = element.qualified_name
        self.package_name = element.package_name
        prefix = f"{self.package_name}." if self.package_name else ""
        self.name = self.qualified_name[len(prefix) :]
        self.nest_level = element.nest_level
        self.modifiers = element.modifiers
        self.comment = element.doc_comment
        self.doc: DocComment = parse_doc_comment(element.doc_comment)
        self.file_path = element.source.path
        self.document_line = document_lines(element, content)
        self.declaration_line = declaration_lines(element, content)

        self.methods: list[MethodInfo] = []
        self.constructors: list[MethodInfo] = []
        self.fields: list[FieldInfo] = []
        self.children: list[ClassInfo] = []
        for enclosed in element.enclosed:
            if enclosed.kind is ElementKind.METHOD:
                self.methods.append(MethodInfo(enclosed, self, content))
            elif enclosed.kind is ElementKind.CONSTRUCTOR:
                self.constructors.append(MethodInfo(enclosed, self, content))
            elif enclosed.kind in (ElementKind.FIELD, ElementKind.ENUM_CONSTANT):
                self.fields.append(FieldInfo(enclosed, self, content))
            elif enclosed.kind.is_type and "private" not in enclosed.modifiers:
                self.children.append(ClassInfo(enclosed, index, content))

        self.supertypes, self.interfaces = all_supertypes_and_interfaces(element, index)
        # Filled by Data.connect_sub_types
        self.subtypes: list[str] = []

    @property
    def id(self) -> str:
        return self.qualified_name

    @property
    def has_document(self) -> bool:
        return not self.doc.is_empty

    @property
    def kind(self) -> str:
        """Navigation label for the type."""
        element = self.element
        if element.kind is ElementKind.ANNOTATION_TYPE:
            return "Annotation"
        if element.kind is ElementKind.INTERFACE:
            if "FunctionalInterface" in element.annotations:
                return "FunctionalInterface"
            return "Interface"
        if element.kind is ElementKind.ENUM:
            return "Enum"
        if element.kind is ElementKind.RECORD:
            return "Record"
        if THROWABLE_TYPES & set(self.supertypes):
            return "Exception"
        if "abstract" in element.modifiers:
            return "AbstractClass"
        return "Class"

    def members(self) -> list[MemberInfo]:
        return [*self.fields, *self.constructors, *self.methods]

    def visible_members(self) -> list[MemberInfo]:
        if self.element.kind.is_interface:
            return self.members()
        return [m for m in self.members() if m.is_visible]

    def all_types(self) -> list[ClassInfo]:
        """This type followed by its nested types, depth first."""
        found = [self]
        for child in self.children:
            found.extend(child.all_types())
        return found

    def create_comment(self, renderer: CommentRenderer) -> tuple[str, str]:
        """Rendered (heading, body) for this type.

        The heading is the first heading of the comment, or a synthesized one
        whose level follows the nesting level.
        """
        rendered = renderer.render(self.doc, self.element)
        heading, body = split_heading(rendered)
        if heading is None:
            level = min(self.nest_level, 6)
            heading = f"<h{level}>{self.name}</h{level}>"
        return heading, body

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassInfo):
            return NotImplemented
        return self.qualified_name == other.qualified_name

    def __lt__(self, other: ClassInfo) -> bool:
        return self.qualified_name < other.qualified_name

    def __hash__(self) -> int:
        return hash(self.qualified_name)

    def __repr__(self) -> str:
        return f"ClassInfo({self.qualified_name})"


@dataclass
class Data:
    """The symbol graph of one build."""

    docs: list[str] = field(default_factory=list)
    modules: list[str] = field(default_factory=list)
    packages: list[str] = field(default_factory=list)
    types: list[ClassInfo] = field(default_factory=list)
    _by_name: dict[str, ClassInfo] = field(default_factory=dict, repr=False, compare=False)

    def add(self, info: ClassInfo) -> bool:
        """Add a type record. Duplicates by qualified name are skipped."""
        if info.qualified_name in self._by_name:
            logger.warning(f"Duplicate type record ignored: {info.qualified_name}")
            return False
        self.types.append(info)
        self._by_name[info.qualified_name] = info
        if info.package_name and info.package_name not in self.packages:
            self.packages.append(info.package_name)
        return True

    def find(self, qualified_name: str) -> ClassInfo | None:
        return self._by_name.get(qualified_name)

    def sort(self) -> None:
        self.modules.sort()
        self.packages.sort()
        self.types.sort()

    def connect_sub_types(self) -> None:
        """Record each type as a known subtype of every ancestor in the graph.

        Ancestors outside the graph are skipped. Running it again adds nothing.
        """
        by_name = {info.qualified_name: info for info in self.types}
        for info in self.types:
            for name in [*info.supertypes, *info.interfaces]:
                ancestor = by_name.get(name)
                if ancestor is not None and info.qualified_name not in ancestor.subtypes:
                    ancestor.subtypes.append(info.qualified_name)

    def to_json(self) -> dict[str, Any]:
        return {
            "docs": list(self.docs),
            "modules": list(self.modules),
            "packages": list(self.packages),
            "types": [
                {
                    "name": info.name,
                    "packageName": info.package_name,
                    "type": info.kind,
                    "modifiers": sorted(info.modifiers),
                }
                for info in self.types
            ],
        }

    def render_root_js(self) -> str:
        return f"const root = {json.dumps(self.to_json(), ensure_ascii=True, indent=2)};\n"

    def clear(self) -> None:
        self.docs.clear()
        self.modules.clear()
        self.packages.clear()
        self.types.clear()
        self._by_name.clear()

