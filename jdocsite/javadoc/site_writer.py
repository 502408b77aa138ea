"""Write the static site: index page, one page per type, root.js and assets."""

from __future__ import annotations

from pathlib import Path
from shutil import rmtree

from loguru import logger

from jdocsite.javadoc.comments import CommentRenderer
from jdocsite.javadoc.editor import EditorResolver, no_editor
from jdocsite.javadoc.models import Data
from jdocsite.javadoc.pages import SiteInfo, render_index_page, render_type_page
from jdocsite.javadoc.samples import SampleCache
from jdocsite.javadoc.template_loader import load_text


def write_assets_only(*, output_dir: Path) -> None:
    """Refresh the stylesheet and script without touching pages."""
    output_dir.mkdir(parents=True, exist_ok=True)
    _write_text(output_dir / "main.css", _render_main_css())
    _write_text(output_dir / "main.js", _render_main_js())


def write_site(
    *,
    output_dir: Path,
    data: Data,
    renderer: CommentRenderer,
    site: SiteInfo,
    samples: SampleCache | None = None,
    editor: EditorResolver = no_editor,
) -> list[Path]:
    """Write the index page, one page per type, assets and ``root.js``.

    Pages left over from earlier builds under ``types/`` are removed first.

    Returns:
        The written type pages, in graph order
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    types_dir = output_dir / "types"
    if types_dir.exists():
        rmtree(types_dir)
    types_dir.mkdir(parents=True, exist_ok=True)

    write_assets_only(output_dir=output_dir)
    _write_text(output_dir / "root.js", data.render_root_js())
    _write_text(output_dir / "index.html", render_index_page(data, site))

    written: list[Path] = []
    for info in data.types:
        path = types_dir / f"{info.qualified_name}.html"
        _write_text(
            path,
            render_type_page(info, renderer, site, samples=samples, editor=editor),
        )
        written.append(path)

    logger.info(f"Wrote {len(written)} type pages to {output_dir}")
    return written


def _write_text(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


def _render_main_css() -> str:
    return load_text("main.css")


def _render_main_js() -> str:
    return load_text("main.js")
