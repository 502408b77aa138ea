from __future__ import annotations

from pathlib import Path

import pytest

from jdocsite.core.exceptions import SourceReadError
from jdocsite.parsers.declarations import DeclarationExtractor
from jdocsite.parsers.driver import DocletEnvironment, DocumentationDriver
from jdocsite.parsers.elements import Element, ElementKind


class RecordingDoclet:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.env: DocletEnvironment | None = None
        self.processed: list[Element] = []

    def initialize(self, env: DocletEnvironment) -> None:
        self.calls.append("initialize")
        self.env = env

    def process(self, element: Element) -> None:
        self.calls.append("process")
        self.processed.append(element)

    def complete(self) -> None:
        self.calls.append("complete")


def test_driver_lifecycle_visits_top_level_types(java_project) -> None:
    root = java_project(
        {
            "zoo/Animal.java": """
                package zoo;

                public class Animal {
                    public static class Tag {}
                }
            """,
            "zoo/Dog.java": """
                package zoo;

                public class Dog extends Animal {}
            """,
        }
    )
    files = sorted(root.rglob("*.java"))
    doclet = RecordingDoclet()

    env = DocumentationDriver().run(files, doclet)

    assert doclet.calls == ["initialize", "process", "process", "complete"]
    assert [e.qualified_name for e in doclet.processed] == ["zoo.Animal", "zoo.Dog"]
    assert doclet.env is env
    assert "zoo.Animal.Tag" in env.index
    assert env.packages == {"zoo"}


def test_unspecified_files_only_take_part_in_resolution(java_project) -> None:
    root = java_project(
        {
            "lib/Base.java": "package lib;\n\npublic class Base {}\n",
            "app/Main.java": "package app;\n\nimport lib.Base;\n\npublic class Main extends Base {}\n",
        }
    )
    base = root / "lib" / "Base.java"
    main = root / "app" / "Main.java"
    doclet = RecordingDoclet()

    env = DocumentationDriver().run([main, base], doclet, specified=[main])

    assert [e.qualified_name for e in doclet.processed] == ["app.Main"]
    assert "lib.Base" in env.index
    assert [e.qualified_name for e in env.specified] == ["app.Main"]


def test_package_and_module_elements(java_project) -> None:
    root = java_project(
        {
            "module-info.java": "module com.example {\n}\n",
            "com/example/package-info.java": "/** Example package. */\npackage com.example;\n",
            "com/example/Thing.java": "package com.example;\n\npublic class Thing {}\n",
        }
    )
    files = [
        root / "module-info.java",
        root / "com" / "example" / "package-info.java",
        root / "com" / "example" / "Thing.java",
    ]
    doclet = RecordingDoclet()

    DocumentationDriver().run(files, doclet)

    kinds = [(e.kind, e.qualified_name) for e in doclet.processed]
    assert kinds == [
        (ElementKind.MODULE, "com.example"),
        (ElementKind.PACKAGE, "com.example"),
        (ElementKind.CLASS, "com.example.Thing"),
    ]


def test_missing_file_raises_source_read_error(tmp_path: Path) -> None:
    with pytest.raises(SourceReadError):
        DocumentationDriver().run([tmp_path / "Missing.java"], RecordingDoclet())


def test_injected_extractor_is_used() -> None:
    extractor = DeclarationExtractor()
    driver = DocumentationDriver(extractor)
    assert driver.extractor is extractor
