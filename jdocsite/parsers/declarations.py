"""Java declaration extraction for the documentation model.

This module maps tree-sitter Java nodes to `Element` records. Only
declaration-level structure is extracted: types, members, modifiers, doc
comments and positions. Statement bodies are never inspected.
"""

import re
from pathlib import Path

from tree_sitter import Node

from jdocsite.parsers.elements import (
    Element,
    ElementKind,
    Parameter,
    SourceFile,
    Span,
)
from jdocsite.parsers.java_engine import JavaSourceEngine, find_child_by_type, node_text

TYPE_NODE_KINDS = {
    "class_declaration": ElementKind.CLASS,
    "interface_declaration": ElementKind.INTERFACE,
    "enum_declaration": ElementKind.ENUM,
    "record_declaration": ElementKind.RECORD,
    "annotation_type_declaration": ElementKind.ANNOTATION_TYPE,
}

METHOD_NODES = {"method_declaration", "annotation_type_element_declaration"}
CONSTRUCTOR_NODES = {"constructor_declaration", "compact_constructor_declaration"}
FIELD_NODES = {"field_declaration", "constant_declaration"}

_ANNOTATION_IN_TYPE = re.compile(r"@[\w.]+(\([^)]*\))?\s*")
_WHITESPACE = re.compile(r"\s+")


def erase_type(text: str) -> str:
    """Strip generic arguments, type annotations and whitespace from a type."""
    text = _ANNOTATION_IN_TYPE.sub("", text)
    depth = 0
    erased: list[str] = []
    for char in text:
        if char == "<":
            depth += 1
        elif char == ">":
            depth = max(0, depth - 1)
        elif depth == 0:
            erased.append(char)
    return _WHITESPACE.sub("", "".join(erased))


def normalize_signature(descriptor: str) -> str:
    """Normalize a member descriptor such as ``foo(List<String>, int)``."""
    descriptor = descriptor.strip().lstrip("#")
    if "(" not in descriptor:
        return _WHITESPACE.sub("", descriptor)
    name, _, params = descriptor.partition("(")
    params = params.rsplit(")", 1)[0]
    erased = [erase_type(p) for p in _split_params(params)]
    return f"{name.strip()}({','.join(p for p in erased if p)})"


def _split_params(params: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in params:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    if current:
        parts.append("".join(current))
    return parts


def doc_comment_node(node: Node) -> Node | None:
    """Return the ``/** ... */`` comment attached to a declaration, if any."""
    previous = node.prev_named_sibling
    if previous is None or previous.type != "block_comment":
        return None
    text = previous.text or b""
    if not text.startswith(b"/**") or text.startswith(b"/**/"):
        return None
    return previous


class DeclarationExtractor:
    """Build `Element` trees from parsed Java compilation units."""

    def __init__(self, engine: JavaSourceEngine | None = None):
        self.engine = engine if engine is not None else JavaSourceEngine()

    def extract_file(self, path: Path) -> tuple[SourceFile, list[Element], str | None]:
        """Parse one file.

        Returns:
            The compilation unit, its top-level type elements, and the module
            name when the file is a module declaration
        """
        tree, content = self.engine.parse_file(path)
        return self.extract(tree.root_node, content, path)

    def extract(
        self, root: Node, content: bytes, path: Path
    ) -> tuple[SourceFile, list[Element], str | None]:
        package = ""
        imports: list[str] = []
        static_imports: list[str] = []
        module_name: str | None = None

        for child in root.named_children:
            if child.type == "package_declaration":
                name_node = find_child_by_type(
                    child, "scoped_identifier"
                ) or find_child_by_type(child, "identifier")
                package = node_text(name_node, content)
            elif child.type == "import_declaration":
                name, is_static = self._import_name(child, content)
                (static_imports if is_static else imports).append(name)
            elif child.type == "module_declaration":
                module_name = node_text(child.child_by_field_name("name"), content)

        source = SourceFile(
            path=path,
            package=package,
            imports=tuple(imports),
            static_imports=tuple(static_imports),
        )

        types: list[Element] = []
        for child in root.named_children:
            kind = TYPE_NODE_KINDS.get(child.type)
            if kind is not None:
                types.append(self._type_element(child, kind, source, content, None))
        return source, types, module_name

    def _import_name(self, node: Node, content: bytes) -> tuple[str, bool]:
        is_static = any(c.type == "static" for c in node.children)
        name_node = find_child_by_type(node, "scoped_identifier") or find_child_by_type(
            node, "identifier"
        )
        name = node_text(name_node, content)
        if find_child_by_type(node, "asterisk") is not None:
            name += ".*"
        return name, is_static

    def _modifiers(self, node: Node, content: bytes) -> tuple[set[str], list[str]]:
        modifiers_node = find_child_by_type(node, "modifiers")
        keywords: set[str] = set()
        annotations: list[str] = []
        if modifiers_node is None:
            return keywords, annotations
        for child in modifiers_node.children:
            if child.type in ("marker_annotation", "annotation"):
                name = node_text(child.child_by_field_name("name"), content)
                annotations.append(name.rsplit(".", 1)[-1])
            elif not child.is_named:
                keywords.add(child.type)
        return keywords, annotations

    def _doc(self, node: Node, content: bytes) -> tuple[str | None, Span | None]:
        comment = doc_comment_node(node)
        if comment is None:
            return None, None
        return node_text(comment, content), Span(comment.start_byte, comment.end_byte)

    def _type_list(self, node: Node | None, content: bytes) -> tuple[str, ...]:
        if node is None:
            return ()
        type_list = find_child_by_type(node, "type_list")
        if type_list is None:
            return ()
        return tuple(erase_type(node_text(t, content)) for t in type_list.named_children)

    def _type_element(
        self,
        node: Node,
        kind: ElementKind,
        source: SourceFile,
        content: bytes,
        enclosing: Element | None,
    ) -> Element:
        name = node_text(node.child_by_field_name("name"), content)
        if enclosing is not None:
            qualified = f"{enclosing.qualified_name}.{name}"
        elif source.package:
            qualified = f"{source.package}.{name}"
        else:
            qualified = name

        keywords, annotations = self._modifiers(node, content)
        if enclosing is not None and enclosing.kind.is_interface:
            keywords |= {"public", "static"}
        if kind is ElementKind.INTERFACE or kind is ElementKind.ANNOTATION_TYPE:
            keywords.add("abstract")

        superclass: str | None = None
        if kind is ElementKind.CLASS:
            superclass_node = node.child_by_field_name("superclass")
            if superclass_node is not None and superclass_node.named_children:
                superclass = erase_type(node_text(superclass_node.named_children[0], content))

        if kind is ElementKind.INTERFACE:
            interfaces = self._type_list(find_child_by_type(node, "extends_interfaces"), content)
        else:
            interfaces = self._type_list(node.child_by_field_name("interfaces"), content)

        type_parameters = node_text(node.child_by_field_name("type_parameters"), content)
        doc, doc_span = self._doc(node, content)

        element = Element(
            kind=kind,
            name=name,
            source=source,
            span=Span(node.start_byte, node.end_byte),
            qualified_name=qualified,
            modifiers=frozenset(keywords),
            annotations=tuple(annotations),
            doc_comment=doc,
            doc_span=doc_span,
            enclosing=enclosing,
            superclass=superclass,
            interfaces=interfaces,
            type_parameters=type_parameters,
        )

        if kind is ElementKind.RECORD:
            params_node = node.child_by_field_name("parameters")
            element.parameters = self._parameters(params_node, content)

        body = node.child_by_field_name("body")
        if body is not None:
            self._members(body, element, source, content)
        return element

    def _members(self, body: Node, owner: Element, source: SourceFile, content: bytes) -> None:
        for child in body.named_children:
            if child.type == "enum_body_declarations":
                self._members(child, owner, source, content)
                continue

            nested_kind = TYPE_NODE_KINDS.get(child.type)
            if nested_kind is not None:
                owner.enclosed.append(
                    self._type_element(child, nested_kind, source, content, owner)
                )
            elif child.type in METHOD_NODES:
                owner.enclosed.append(self._method(child, owner, source, content))
            elif child.type in CONSTRUCTOR_NODES:
                owner.enclosed.append(self._constructor(child, owner, source, content))
            elif child.type in FIELD_NODES:
                owner.enclosed.append(self._field(child, owner, source, content))
            elif child.type == "enum_constant":
                owner.enclosed.append(self._enum_constant(child, owner, source, content))

    def _member(
        self,
        node: Node,
        kind: ElementKind,
        name: str,
        owner: Element,
        source: SourceFile,
        content: bytes,
        keywords: set[str],
        annotations: list[str],
    ) -> Element:
        doc, doc_span = self._doc(node, content)
        return Element(
            kind=kind,
            name=name,
            source=source,
            span=Span(node.start_byte, node.end_byte),
            qualified_name=f"{owner.qualified_name}#{name}",
            modifiers=frozenset(keywords),
            annotations=tuple(annotations),
            doc_comment=doc,
            doc_span=doc_span,
            enclosing=owner,
        )

    def _method(self, node: Node, owner: Element, source: SourceFile, content: bytes) -> Element:
        keywords, annotations = self._modifiers(node, content)
        if owner.kind.is_interface:
            if "private" not in keywords:
                keywords.add("public")
            if node.child_by_field_name("body") is None and not keywords & {"default", "static", "private"}:
                keywords.add("abstract")

        name = node_text(node.child_by_field_name("name"), content)
        element = self._member(
            node, ElementKind.METHOD, name, owner, source, content, keywords, annotations
        )
        element.return_type = erase_type(node_text(node.child_by_field_name("type"), content))
        element.type_parameters = node_text(find_child_by_type(node, "type_parameters"), content)
        element.parameters = self._parameters(node.child_by_field_name("parameters"), content)
        element.throws = self._throws(node, content)
        return element

    def _constructor(self, node: Node, owner: Element, source: SourceFile, content: bytes) -> Element:
        keywords, annotations = self._modifiers(node, content)
        name = node_text(node.child_by_field_name("name"), content) or owner.name
        element = self._member(
            node, ElementKind.CONSTRUCTOR, name, owner, source, content, keywords, annotations
        )
        params = node.child_by_field_name("parameters")
        element.parameters = (
            self._parameters(params, content) if params is not None else owner.parameters
        )
        element.throws = self._throws(node, content)
        return element

    def _field(self, node: Node, owner: Element, source: SourceFile, content: bytes) -> Element:
        keywords, annotations = self._modifiers(node, content)
        if owner.kind.is_interface:
            keywords |= {"public", "static", "final"}
        variables = tuple(
            node_text(declarator.child_by_field_name("name"), content)
            for declarator in node.children_by_field_name("declarator")
        )
        element = self._member(
            node,
            ElementKind.FIELD,
            variables[0] if variables else "",
            owner,
            source,
            content,
            keywords,
            annotations,
        )
        element.return_type = erase_type(node_text(node.child_by_field_name("type"), content))
        element.variables = variables
        return element

    def _enum_constant(self, node: Node, owner: Element, source: SourceFile, content: bytes) -> Element:
        _, annotations = self._modifiers(node, content)
        name = node_text(node.child_by_field_name("name"), content)
        element = self._member(
            node,
            ElementKind.ENUM_CONSTANT,
            name,
            owner,
            source,
            content,
            {"public", "static", "final"},
            annotations,
        )
        element.return_type = owner.name
        element.variables = (name,)
        return element

    def _parameters(self, node: Node | None, content: bytes) -> tuple[Parameter, ...]:
        if node is None:
            return ()
        parameters: list[Parameter] = []
        for child in node.named_children:
            if child.type == "formal_parameter":
                parameters.append(
                    Parameter(
                        name=node_text(child.child_by_field_name("name"), content),
                        type=erase_type(node_text(child.child_by_field_name("type"), content))
                        + erase_type(node_text(child.child_by_field_name("dimensions"), content)),
                    )
                )
            elif child.type == "spread_parameter":
                type_node = next(
                    (c for c in child.named_children if c.type not in ("modifiers", "variable_declarator")),
                    None,
                )
                declarator = find_child_by_type(child, "variable_declarator")
                name_node = declarator.child_by_field_name("name") if declarator else None
                parameters.append(
                    Parameter(
                        name=node_text(name_node, content),
                        type=erase_type(node_text(type_node, content)) + "...",
                    )
                )
        return tuple(parameters)

    def _throws(self, node: Node, content: bytes) -> tuple[str, ...]:
        throws = find_child_by_type(node, "throws")
        if throws is None:
            return ()
        return tuple(erase_type(node_text(t, content)) for t in throws.named_children)
