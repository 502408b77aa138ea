from __future__ import annotations

from pathlib import Path

from jdocsite.javadoc.editor import github_editor, no_editor


def test_github_editor_builds_edit_link(tmp_path: Path) -> None:
    resolve = github_editor("https://github.com/acme/widgets.git", base=tmp_path)
    path = tmp_path / "src" / "main" / "java" / "Widget.java"

    assert resolve(path, (12, 20)) == (
        "https://github.com/acme/widgets/edit/master/src/main/java/Widget.java#L12-L20"
    )
    assert resolve(path, None) == "https://github.com/acme/widgets/edit/master/src/main/java/Widget.java"


def test_trailing_slash_is_ignored(tmp_path: Path) -> None:
    resolve = github_editor("https://github.com/acme/widgets/", base=tmp_path)
    assert resolve(tmp_path / "A.java", (1, 1)) == "https://github.com/acme/widgets/edit/master/A.java#L1-L1"


def test_other_hosts_have_no_edit_links(tmp_path: Path) -> None:
    assert github_editor("https://gitlab.com/acme/widgets") is no_editor
    assert github_editor(None) is no_editor
    assert no_editor(tmp_path / "A.java", (1, 2)) is None
