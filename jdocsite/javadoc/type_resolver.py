"""Classification of referenced type names and supertype closures."""

from __future__ import annotations

import re
from collections.abc import Set
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from jdocsite.core.constants import ROOT_OBJECT_TYPE
from jdocsite.parsers.declarations import erase_type
from jdocsite.parsers.elements import Element, ElementIndex, ElementKind

PRIMITIVE_TYPES = frozenset(
    {"boolean", "byte", "char", "double", "float", "int", "long", "short", "void", "var"}
)

_ARRAY_SUFFIX = re.compile(r"(\[\]|\.\.\.)+$")


class ExternalLookup(Protocol):
    def lookup(self, name: str) -> str | None: ...


class ReferenceKind(Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    UNRESOLVED = "unresolved"


def split_qualified(name: str) -> tuple[str, str]:
    """Split ``java.util.Map.Entry`` into (``java.util``, ``Map.Entry``).

    Package segments are the leading lower-case segments.
    """
    segments = name.split(".")
    index = 0
    while index < len(segments) - 1 and segments[index][:1].islower():
        index += 1
    return ".".join(segments[:index]), ".".join(segments[index:])


@dataclass(frozen=True)
class ReferenceClassification:
    """How one referenced type name resolves. Computed on demand, never stored."""

    kind: ReferenceKind
    name: str
    base_url: str | None = None

    @property
    def is_internal(self) -> bool:
        return self.kind is ReferenceKind.INTERNAL

    @property
    def is_external(self) -> bool:
        return self.kind is ReferenceKind.EXTERNAL

    @property
    def simple_name(self) -> str:
        return split_qualified(self.name)[1]

    def href(self, member: str | None = None, root: str = "") -> str | None:
        """Link target, or None when the name must render as plain text."""
        anchor = f"#{member}" if member else ""
        if self.kind is ReferenceKind.INTERNAL:
            return f"{root}types/{self.name}.html{anchor}"
        if self.kind is ReferenceKind.EXTERNAL and self.base_url:
            package, simple = split_qualified(self.name)
            if not package:
                return self.base_url
            return f"{self.base_url}{package.replace('.', '/')}/{simple}.html{anchor}"
        return None


class TypeResolver:
    """Classify type names as written in one type's compilation unit."""

    def __init__(
        self,
        index: ElementIndex,
        internals: Set[str],
        externals: ExternalLookup | None = None,
        context: Element | None = None,
    ):
        self.index = index
        self.internals = internals
        self.externals = externals
        self.context = context

    def qualify(self, name: str, context: Element | None = None) -> str:
        name = _ARRAY_SUFFIX.sub("", erase_type(name))
        return self.index.qualify(name, context or self.context)

    def classify(self, name: str, context: Element | None = None) -> ReferenceClassification:
        """Internal, External(base URL) or Unresolved."""
        qualified = self.qualify(name, context)
        if not qualified or qualified in PRIMITIVE_TYPES:
            return ReferenceClassification(ReferenceKind.UNRESOLVED, qualified)

        if qualified in self.index:
            return ReferenceClassification(ReferenceKind.INTERNAL, qualified)

        package, simple = split_qualified(qualified)
        if package and package in self.internals:
            return ReferenceClassification(ReferenceKind.INTERNAL, qualified)

        if self.externals is not None:
            base = self.externals.lookup(package) if package else None
            if base is None:
                base = self.externals.lookup(simple.split(".")[0])
            if base is not None:
                return ReferenceClassification(ReferenceKind.EXTERNAL, qualified, base)

        return ReferenceClassification(ReferenceKind.UNRESOLVED, qualified)


def _direct_supertypes(element: Element, index: ElementIndex) -> list[tuple[str, bool]]:
    """(qualified name, is interface) for each declared or implied supertype."""
    direct: list[tuple[str, bool]] = []
    if element.superclass:
        direct.append((index.qualify(element.superclass, element), False))
    elif element.kind is ElementKind.ENUM:
        direct.append(("java.lang.Enum", False))
    elif element.kind is ElementKind.RECORD:
        direct.append(("java.lang.Record", False))
    for name in element.interfaces:
        direct.append((index.qualify(name, element), True))
    return direct


def all_supertypes_and_interfaces(
    element: Element, index: ElementIndex
) -> tuple[list[str], list[str]]:
    """Collect every ancestor of a type.

    Returns:
        Class supertypes in discovery order (nearest first) and interfaces
        ordered by simple name. ``java.lang.Object`` is skipped and each
        ancestor is visited at most once.
    """
    supers: list[str] = []
    interfaces: list[str] = []
    visited: set[str] = {element.qualified_name}

    def collect(current: Element) -> None:
        for name, declared_interface in _direct_supertypes(current, index):
            if name == ROOT_OBJECT_TYPE or name in visited:
                continue
            visited.add(name)
            ancestor = index.get(name)
            is_interface = ancestor.kind.is_interface if ancestor else declared_interface
            (interfaces if is_interface else supers).append(name)
            if ancestor is not None:
                collect(ancestor)

    collect(element)
    interfaces.sort(key=lambda name: split_qualified(name)[1].rsplit(".", 1)[-1])
    return supers, interfaces
