"""HTML pages for the finished symbol graph."""

from __future__ import annotations

import html
from dataclasses import dataclass

from jdocsite.javadoc.comments import CommentRenderer
from jdocsite.javadoc.editor import EditorResolver, no_editor
from jdocsite.javadoc.models import ClassInfo, Data, FieldInfo, MemberInfo, MethodInfo
from jdocsite.javadoc.samples import SampleCache

MODIFIER_ORDER = (
    "public",
    "protected",
    "private",
    "abstract",
    "default",
    "static",
    "final",
    "sealed",
    "non-sealed",
    "transient",
    "volatile",
    "synchronized",
    "native",
    "strictfp",
)


@dataclass
class SiteInfo:
    product: str = ""
    project: str = ""
    version: str = ""

    @property
    def title(self) -> str:
        name = self.product or self.project or "API"
        return f"{name} {self.version}".strip()


def ordered_modifiers(modifiers: frozenset[str] | set[str]) -> list[str]:
    return [m for m in MODIFIER_ORDER if m in modifiers]


def member_signature(member: MemberInfo) -> str:
    modifiers = " ".join(ordered_modifiers(member.modifiers))
    if isinstance(member, MethodInfo):
        params = ", ".join(f"{p.type} {p.name}" for p in member.parameters)
        head = member.name if member.is_constructor else f"{member.return_type} {member.name}"
        text = f"{head}({params})"
        if member.throws:
            text += f" throws {', '.join(member.throws)}"
    elif isinstance(member, FieldInfo):
        text = f"{member.type} {', '.join(member.variables)}"
    else:
        text = member.name
    return f"{modifiers} {text}".strip()


def _layout(site: SiteInfo, base: str, article: str, aside: str = "") -> str:
    title = html.escape(site.title)
    return "\n".join(
        [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="UTF-8">',
            f"<title>{title}</title>",
            f'<link rel="stylesheet" href="{base}main.css">',
            "</head>",
            "<body>",
            f'<header class="site"><h1><a href="{base}index.html">{title}</a></h1></header>',
            "<main>",
            f'<nav class="types" data-base="{base}"></nav>',
            f"<article>{article}</article>",
            f'<aside class="members">{aside}</aside>',
            "</main>",
            f'<script src="{base}root.js"></script>',
            f'<script src="{base}main.js"></script>',
            "</body>",
            "</html>",
            "",
        ]
    )


def _edit_link(editor: EditorResolver, info: ClassInfo, lines: tuple[int, int] | None) -> str:
    url = editor(info.file_path, lines)
    if url is None:
        return ""
    return f'<a class="edit" href="{html.escape(url)}">Edit</a>'


def _type_links(names: list[str], renderer: CommentRenderer) -> str:
    return ", ".join(renderer.link(name, None) for name in names)


def render_type_page(
    info: ClassInfo,
    renderer: CommentRenderer,
    site: SiteInfo,
    samples: SampleCache | None = None,
    editor: EditorResolver = no_editor,
) -> str:
    """One page for one type record."""
    heading, body = info.create_comment(renderer)
    lines = info.document_line or info.declaration_line

    parts: list[str] = [
        "<section>",
        f"<header>{heading}{_edit_link(editor, info, lines)}</header>",
        f'<p class="signature">{html.escape(" ".join(ordered_modifiers(info.modifiers)))} '
        f"{info.kind} {html.escape(info.name)}</p>",
        body,
    ]

    hierarchy: list[str] = []
    for label, names in (
        ("Supertypes", info.supertypes),
        ("Interfaces", info.interfaces),
        ("Known subtypes", info.subtypes),
    ):
        if names:
            hierarchy.append(f"<dt>{label}</dt><dd>{_type_links(names, renderer)}</dd>")
    if info.children:
        nested = [child.qualified_name for child in info.children]
        hierarchy.append(f"<dt>Nested types</dt><dd>{_type_links(nested, renderer)}</dd>")
    if hierarchy:
        parts.append(f'<dl class="hierarchy">{"".join(hierarchy)}</dl>')
    parts.append("</section>")

    aside: list[str] = []
    for member in info.visible_members():
        anchor = html.escape(member.id)
        parts.append(f'<section id="{anchor}">')
        parts.append(
            f'<header><h3 class="signature">{html.escape(member_signature(member))}</h3>'
            f"{_edit_link(editor, info, member.document_line or member.declaration_line)}</header>"
        )
        parts.append(renderer.render(member.doc, member.element))
        if samples is not None:
            for code in samples.samples_for(info.qualified_name, member.element):
                parts.append(
                    f'<pre class="sample"><code class="language-java">{html.escape(code)}</code></pre>'
                )
        parts.append("</section>")
        aside.append(f'<div><a href="#{anchor}">{html.escape(member.signature)}</a></div>')

    return _layout(site, "../", "\n".join(parts), "\n".join(aside))


def render_index_page(data: Data, site: SiteInfo) -> str:
    """The entry page listing packages and their types."""
    parts: list[str] = [f"<section><h1>{html.escape(site.title)}</h1>"]
    for package in [*data.packages, ""]:
        types = [info for info in data.types if info.package_name == package]
        if not types:
            continue
        items = "".join(
            f'<li><a href="types/{html.escape(info.qualified_name)}.html">{html.escape(info.name)}</a>'
            f' <span class="kind">{info.kind}</span></li>'
            for info in types
        )
        parts.append(f"<h2>{html.escape(package or '(default package)')}</h2><ul>{items}</ul>")
    parts.append("</section>")
    return _layout(site, "", "\n".join(parts))
