"""Javadoc site public API.

This module is intentionally small: it exposes a stable import surface for
the CLI and tests, while implementation details live in smaller modules.
"""

from __future__ import annotations

from jdocsite.javadoc.analyzer import BuildContext, SymbolGraphBuilder
from jdocsite.javadoc.comments import (
    BlockTag,
    CommentRenderer,
    DocComment,
    parse_doc_comment,
    see_references,
)
from jdocsite.javadoc.editor import EditorResolver, github_editor, no_editor
from jdocsite.javadoc.external_index import ExternalDocIndex, parse_overview_names
from jdocsite.javadoc.models import (
    ClassInfo,
    CrossReference,
    Data,
    FieldInfo,
    MemberInfo,
    MethodInfo,
)
from jdocsite.javadoc.orchestrator import BuildState, JavadocModel, find_source_packages
from jdocsite.javadoc.pages import SiteInfo, render_index_page, render_type_page
from jdocsite.javadoc.positions import (
    declaration_lines,
    document_lines,
    line_range,
    source_code,
)
from jdocsite.javadoc.samples import SampleCache, SampleExtractor, strip_header_whitespace
from jdocsite.javadoc.site_writer import write_assets_only, write_site
from jdocsite.javadoc.type_resolver import (
    ReferenceClassification,
    ReferenceKind,
    TypeResolver,
    all_supertypes_and_interfaces,
)

__all__: list[str] = [
    "BlockTag",
    "BuildContext",
    "BuildState",
    "ClassInfo",
    "CommentRenderer",
    "CrossReference",
    "Data",
    "DocComment",
    "EditorResolver",
    "ExternalDocIndex",
    "FieldInfo",
    "JavadocModel",
    "MemberInfo",
    "MethodInfo",
    "ReferenceClassification",
    "ReferenceKind",
    "SampleCache",
    "SampleExtractor",
    "SiteInfo",
    "SymbolGraphBuilder",
    "TypeResolver",
    "all_supertypes_and_interfaces",
    "declaration_lines",
    "document_lines",
    "find_source_packages",
    "github_editor",
    "line_range",
    "no_editor",
    "parse_doc_comment",
    "parse_overview_names",
    "render_index_page",
    "render_type_page",
    "see_references",
    "source_code",
    "strip_header_whitespace",
    "write_assets_only",
    "write_site",
]
