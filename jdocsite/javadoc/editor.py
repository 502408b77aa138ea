"""Edit links from declarations back to the hosted repository."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from urllib.parse import urlparse

# (file path, (first line, last line)) -> URL or None
EditorResolver = Callable[[Path, "tuple[int, int] | None"], "str | None"]


def no_editor(path: Path, lines: tuple[int, int] | None) -> str | None:
    return None


def github_editor(repository: str | None, base: Path | None = None) -> EditorResolver:
    """Edit-link resolver for a github.com repository.

    Paths are made relative to ``base`` (the working directory by default).
    Any other host yields a resolver that always returns None.
    """
    if not repository or urlparse(repository).hostname != "github.com":
        return no_editor

    repo = repository.rstrip("/")
    if repo.endswith(".git"):
        repo = repo[:-4]
    root = (base or Path.cwd()).resolve()

    def resolve(path: Path, lines: tuple[int, int] | None) -> str | None:
        try:
            relative = path.resolve().relative_to(root).as_posix()
        except ValueError:
            relative = path.as_posix().lstrip("/")
        url = f"{repo}/edit/master/{relative}"
        if lines is not None:
            url += f"#L{lines[0]}-L{lines[1]}"
        return url

    return resolve
