"""Declaration-level symbol model handed to the documentation doclet.

Elements are immutable once the driver has built them. They carry what
documentation needs and nothing else: kind, names, modifiers, doc comment
and declaration spans, enclosed elements, and declared supertypes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from jdocsite.core.exceptions import SourceReadError

# java.lang types that resolve without an import
JAVA_LANG_TYPES = frozenset(
    {
        "AutoCloseable",
        "Boolean",
        "Byte",
        "CharSequence",
        "Character",
        "Class",
        "ClassLoader",
        "Cloneable",
        "Comparable",
        "Deprecated",
        "Double",
        "Enum",
        "Error",
        "Exception",
        "Float",
        "FunctionalInterface",
        "IllegalArgumentException",
        "IllegalStateException",
        "IndexOutOfBoundsException",
        "Integer",
        "Iterable",
        "Long",
        "Math",
        "NullPointerException",
        "Number",
        "Object",
        "Override",
        "Record",
        "Runnable",
        "RuntimeException",
        "SafeVarargs",
        "Short",
        "String",
        "StringBuilder",
        "SuppressWarnings",
        "System",
        "Thread",
        "Throwable",
        "UnsupportedOperationException",
        "Void",
    }
)


class ElementKind(Enum):
    """Kinds of elements in the declaration model."""

    MODULE = "module"
    PACKAGE = "package"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    ANNOTATION_TYPE = "annotation"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    FIELD = "field"
    ENUM_CONSTANT = "enum_constant"

    @property
    def is_type(self) -> bool:
        return self in TYPE_KINDS

    @property
    def is_interface(self) -> bool:
        return self in (ElementKind.INTERFACE, ElementKind.ANNOTATION_TYPE)


TYPE_KINDS = frozenset(
    {
        ElementKind.CLASS,
        ElementKind.INTERFACE,
        ElementKind.ENUM,
        ElementKind.RECORD,
        ElementKind.ANNOTATION_TYPE,
    }
)


@dataclass(frozen=True)
class Span:
    """Byte range inside a source file."""

    start: int
    end: int


@dataclass
class SourceFile:
    """One compilation unit: its path, package and imports."""

    path: Path
    package: str = ""
    imports: tuple[str, ...] = ()
    static_imports: tuple[str, ...] = ()

    def char_content(self) -> bytes:
        """Read the backing file.

        Raises:
            SourceReadError: If the file cannot be read
        """
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise SourceReadError(self.path, exc) from exc

    @property
    def single_type_imports(self) -> list[str]:
        return [name for name in self.imports if not name.endswith(".*")]

    @property
    def on_demand_imports(self) -> list[str]:
        return [name[:-2] for name in self.imports if name.endswith(".*")]


@dataclass(frozen=True)
class Parameter:
    """A method or constructor parameter."""

    name: str
    type: str


@dataclass(eq=False)
class Element:
    """A declaration in the source model."""

    kind: ElementKind
    name: str
    source: SourceFile
    span: Span
    qualified_name: str = ""
    modifiers: frozenset[str] = frozenset()
    annotations: tuple[str, ...] = ()
    doc_comment: str | None = None
    doc_span: Span | None = None
    enclosing: Element | None = field(default=None, repr=False)
    enclosed: list[Element] = field(default_factory=list, repr=False)
    # Declared supertypes exactly as written (generic arguments erased)
    superclass: str | None = None
    interfaces: tuple[str, ...] = ()
    type_parameters: str = ""
    # Members
    return_type: str = ""
    parameters: tuple[Parameter, ...] = ()
    throws: tuple[str, ...] = ()
    variables: tuple[str, ...] = ()

    @property
    def package_name(self) -> str:
        return self.source.package

    @property
    def signature(self) -> str:
        """Erased member signature such as ``foo(int,String)``."""
        if self.kind in (ElementKind.METHOD, ElementKind.CONSTRUCTOR):
            return f"{self.name}({','.join(p.type for p in self.parameters)})"
        return self.name

    @property
    def top_level(self) -> Element:
        """The top-level type enclosing this element."""
        current = self
        while current.enclosing is not None:
            current = current.enclosing
        return current

    @property
    def nest_level(self) -> int:
        """1 for top-level types, +1 for each enclosing type."""
        level = 1
        current = self.enclosing
        while current is not None:
            if current.kind.is_type:
                level += 1
            current = current.enclosing
        return level

    @property
    def enclosed_types(self) -> list[Element]:
        return [e for e in self.enclosed if e.kind.is_type]

    def __str__(self) -> str:
        return self.signature


class ElementIndex:
    """Lookup of every type element by qualified name."""

    def __init__(self) -> None:
        self._types: dict[str, Element] = {}
        self._packages: set[str] = set()

    def add(self, element: Element) -> None:
        if element.kind.is_type:
            self._types.setdefault(element.qualified_name, element)
            self._packages.add(element.package_name)
            for child in element.enclosed_types:
                self.add(child)

    def get(self, qualified_name: str) -> Element | None:
        return self._types.get(qualified_name)

    def __contains__(self, qualified_name: str) -> bool:
        return qualified_name in self._types

    def __len__(self) -> int:
        return len(self._types)

    @property
    def packages(self) -> set[str]:
        return set(self._packages)

    def qualify(self, name: str, context: Element | None) -> str:
        """Resolve a type name as written in ``context``'s compilation unit.

        Order: member types of enclosing types, single-type imports, the
        same package, on-demand imports, java.lang. Unresolvable names are
        returned unchanged.
        """
        name = name.strip()
        if not name:
            return name
        if context is None:
            return name

        head, _, rest = name.partition(".")
        suffix = f".{rest}" if rest else ""

        # member types visible from the enclosing chain
        current: Element | None = context
        while current is not None:
            if current.kind.is_type:
                if current.name == head and current.qualified_name + suffix in self:
                    return current.qualified_name + suffix
                candidate = f"{current.qualified_name}.{head}{suffix}"
                if candidate in self:
                    return candidate
            current = current.enclosing

        source = context.source
        for imported in source.single_type_imports:
            if imported == head or imported.endswith(f".{head}"):
                return imported + suffix

        if source.package:
            candidate = f"{source.package}.{name}"
            if candidate in self:
                return candidate
        elif name in self:
            return name

        for package in source.on_demand_imports:
            candidate = f"{package}.{name}"
            if candidate in self:
                return candidate

        if name in self:
            return name

        if not rest and head in JAVA_LANG_TYPES:
            return f"java.lang.{head}"

        return name
