"""Doc comment parsing and rendering.

A doc comment is split into its HTML description and block tags. Inline
tags are rendered at page time, when cross-references can be classified
against the finished model and the external index has settled.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field

from jdocsite.javadoc.samples import SampleExtractor
from jdocsite.javadoc.type_resolver import TypeResolver
from jdocsite.parsers.declarations import normalize_signature
from jdocsite.parsers.elements import Element

_LEADING_STAR = re.compile(r"^\s*\*( ?)")
_BLOCK_TAG = re.compile(r"^@(\w+)\s*(.*)$", re.DOTALL)
_HEADING = re.compile(r"<(h[1-7]?)\b[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)

# Block tags whose first word is an argument (parameter or exception name)
ARGUMENT_TAGS = {"param", "throws", "exception"}


@dataclass
class BlockTag:
    name: str
    text: str
    argument: str = ""


@dataclass
class DocComment:
    description: str = ""
    tags: list[BlockTag] = field(default_factory=list)

    def tags_named(self, *names: str) -> list[BlockTag]:
        return [tag for tag in self.tags if tag.name in names]

    @property
    def is_empty(self) -> bool:
        return not self.description.strip() and not self.tags


def parse_doc_comment(raw: str | None) -> DocComment:
    """Parse ``/** ... */`` text. Returns an empty comment for None."""
    if not raw:
        return DocComment()

    body = raw.strip()
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    lines = [_LEADING_STAR.sub("", line, count=1) for line in body.splitlines()]

    description: list[str] = []
    tags: list[BlockTag] = []
    current: list[str] | None = None
    current_name = ""

    def flush() -> None:
        if current is None:
            return
        text = "\n".join(current).strip()
        argument = ""
        if current_name in ARGUMENT_TAGS:
            argument, _, text = text.partition(" ")
            text = text.strip()
        tags.append(BlockTag(current_name, text, argument))

    brace_depth = 0
    for line in lines:
        stripped = line.strip()
        match = _BLOCK_TAG.match(stripped) if brace_depth == 0 else None
        if match:
            flush()
            current_name = match.group(1)
            current = [match.group(2)]
        elif current is not None:
            current.append(line)
        else:
            description.append(line)
        brace_depth = max(0, brace_depth + line.count("{") - line.count("}"))
    flush()

    return DocComment("\n".join(description).strip(), tags)


def see_references(doc: DocComment) -> list[tuple[str, str]]:
    """(type, member) pairs named by ``@see`` tags.

    Member is "" or starts with ``#``. Quoted strings and HTML links are not
    references.
    """
    references: list[tuple[str, str]] = []
    for tag in doc.tags_named("see"):
        target = _reference_target(tag.text)
        if not target or target.startswith(("\"", "<")):
            continue
        type_name, hash_, member = target.partition("#")
        references.append((type_name, f"#{normalize_signature(member)}" if hash_ else ""))
    return references


def _reference_target(text: str) -> str:
    """Leading reference of a tag body; parentheses may contain spaces."""
    text = text.strip()
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char.isspace() and depth == 0:
            return text[:index]
    return text


def split_heading(rendered: str) -> tuple[str | None, str]:
    """Remove and return the first heading element of rendered HTML."""
    match = _HEADING.search(rendered)
    if match is None:
        return None, rendered
    return match.group(0), (rendered[: match.start()] + rendered[match.end() :]).strip()


class CommentRenderer:
    """Render doc comments to HTML against one build's resolver."""

    def __init__(
        self,
        resolver: TypeResolver,
        samples: SampleExtractor | None = None,
        root: str = "",
    ):
        self.resolver = resolver
        self.samples = samples
        self.root = root

    def render(self, doc: DocComment, context: Element | None = None) -> str:
        parts: list[str] = []
        if doc.description:
            parts.append(self.render_inline(doc.description, context))

        params = doc.tags_named("param")
        if params:
            items = "".join(
                f"<li><code>{html.escape(tag.argument)}</code> {self.render_inline(tag.text, context)}</li>"
                for tag in params
            )
            parts.append(f'<ul class="params">{items}</ul>')

        for tag in doc.tags_named("return"):
            parts.append(f'<p class="return">{self.render_inline(tag.text, context)}</p>')

        throws = doc.tags_named("throws", "exception")
        if throws:
            items = "".join(
                f"<li>{self.link(tag.argument, context)} {self.render_inline(tag.text, context)}</li>"
                for tag in throws
            )
            parts.append(f'<ul class="throws">{items}</ul>')

        see = doc.tags_named("see")
        if see:
            items = "".join(f"<li>{self._render_see(tag.text, context)}</li>" for tag in see)
            parts.append(f'<ul class="see">{items}</ul>')

        for tag in doc.tags_named("deprecated"):
            parts.append(f'<p class="deprecated">{self.render_inline(tag.text, context)}</p>')
        for name in ("since", "version", "author"):
            for tag in doc.tags_named(name):
                parts.append(f'<p class="{name}">{html.escape(tag.text)}</p>')
        return "\n".join(parts)

    def _render_see(self, text: str, context: Element | None) -> str:
        text = text.strip()
        if text.startswith("\""):
            return html.escape(text.strip("\""))
        if text.startswith("<"):
            return text
        target = _reference_target(text)
        label = text[len(target) :].strip() or None
        return self.link(target, context, label)

    def render_inline(self, text: str, context: Element | None = None) -> str:
        """Expand inline ``{@tag ...}`` constructs; other text passes through."""
        out: list[str] = []
        index = 0
        while True:
            start = text.find("{@", index)
            if start < 0:
                out.append(text[index:])
                break
            end = _matching_brace(text, start)
            if end < 0:
                out.append(text[index:])
                break
            out.append(text[index:start])
            out.append(self._inline_tag(text[start + 2 : end], context))
            index = end + 1
        return "".join(out)

    def _inline_tag(self, body: str, context: Element | None) -> str:
        name, _, rest = body.partition(" ")
        name = name.strip()
        rest = rest.strip()
        if name == "code":
            return f"<code>{html.escape(rest)}</code>"
        if name == "literal":
            return html.escape(rest)
        if name in ("link", "linkplain"):
            target = _reference_target(rest)
            label = rest[len(target) :].strip() or None
            return self.link(target, context, label, code=name == "link")
        if name == "inheritDoc":
            return ""
        if name == "value":
            return f"<code>{html.escape(rest.replace('#', '.').lstrip('.'))}</code>"
        if name == "sample":
            return self._sample(rest, context)
        return html.escape(body)

    def _sample(self, target: str, context: Element | None) -> str:
        if self.samples is None:
            return ""
        type_name, _, member = target.partition("#")
        if not type_name and context is not None:
            type_name = context.top_level.qualified_name
        code = self.samples.resolve(type_name, member or None)
        if not code:
            return ""
        return f'<pre class="sample"><code class="language-java">{html.escape(code)}</code></pre>'

    def link(
        self,
        target: str,
        context: Element | None,
        label: str | None = None,
        code: bool = True,
    ) -> str:
        """Render a ``Type#member`` reference as a link, or plain text."""
        type_name, hash_, member = target.partition("#")
        member = normalize_signature(member) if hash_ else ""

        if type_name:
            classification = self.resolver.classify(type_name, context)
        elif context is not None:
            owner = context if context.kind.is_type else context.enclosing
            classification = self.resolver.classify(owner.qualified_name if owner else "", context)
        else:
            classification = None

        if label is None:
            simple = classification.simple_name if classification and type_name else type_name
            label = f"{simple}.{member}" if simple and member else (simple or member)
        text = f"<code>{html.escape(label)}</code>" if code else html.escape(label)

        href = classification.href(member or None, self.root) if classification else None
        if href is None:
            return f"<code>{html.escape(label)}</code>"
        return f'<a href="{html.escape(href)}">{text}</a>'


def _matching_brace(text: str, start: int) -> int:
    depth = 0
    for index in range(start, len(text)):
        if text[index] == "{":
            depth += 1
        elif text[index] == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1
