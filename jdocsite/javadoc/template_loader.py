"""Access to the static site assets shipped with the package."""

from __future__ import annotations

from importlib import resources
from pathlib import PurePosixPath

TEMPLATE_PACKAGE = "jdocsite.javadoc.templates"


def _resource(relative: str):
    path = PurePosixPath(relative)
    if path.is_absolute() or ".." in path.parts:
        raise ValueError(f"Invalid template path: {relative}")
    node = resources.files(TEMPLATE_PACKAGE)
    for part in path.parts:
        node = node.joinpath(part)
    return node


def load_text(relative: str) -> str:
    return _resource(relative).read_text(encoding="utf-8")
