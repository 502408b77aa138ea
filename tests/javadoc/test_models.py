from __future__ import annotations

import json

import pytest

from jdocsite.javadoc.comments import CommentRenderer
from jdocsite.javadoc.models import ClassInfo, Data
from jdocsite.javadoc.type_resolver import TypeResolver
from jdocsite.parsers.declarations import DeclarationExtractor
from jdocsite.parsers.elements import ElementIndex

SOURCES = {
    "zoo/Animal.java": """
        package zoo;

        /**
         * <h2>Animals</h2>
         * Base of everything.
         */
        public abstract class Animal {
            /** Name. */
            protected String name;
            int hidden;

            public Animal() {}

            /**
             * Make a sound.
             * @see Dog#bark()
             */
            public abstract void speak();

            private void secret() {}
        }
    """,
    "zoo/Dog.java": """
        package zoo;

        public class Dog extends Animal implements Pet {
            public void speak() {}

            public void bark() {}

            public static class Collar {
                public static class Tag {}
            }

            private static class Hidden {}
        }
    """,
    "zoo/Puppy.java": "package zoo;\n\npublic class Puppy extends Dog {}\n",
    "zoo/Pet.java": "package zoo;\n\n@FunctionalInterface\npublic interface Pet {\n    void pat();\n}\n",
    "zoo/Kind.java": "package zoo;\n\npublic enum Kind { WILD, TAME }\n",
    "zoo/Spot.java": "package zoo;\n\npublic record Spot(int x, int y) {}\n",
    "zoo/Tagged.java": "package zoo;\n\npublic @interface Tagged {}\n",
    "zoo/ZooError.java": "package zoo;\n\npublic class ZooError extends RuntimeException {}\n",
    "Loose.java": "public class Loose {}\n",
}


@pytest.fixture
def infos(java_project):
    root = java_project(SOURCES)
    extractor = DeclarationExtractor()
    index = ElementIndex()
    elements = []
    for path in sorted(root.rglob("*.java")):
        _, types, _ = extractor.extract_file(path)
        for element in types:
            index.add(element)
            elements.append(element)
    return {element.name: ClassInfo(element, index) for element in elements}, index


def test_class_record_fields(infos) -> None:
    by_name, _ = infos
    animal = by_name["Animal"]
    assert animal.qualified_name == "zoo.Animal"
    assert animal.package_name == "zoo"
    assert animal.name == "Animal"
    assert animal.nest_level == 1
    assert animal.has_document
    assert animal.document_line == (3, 6)
    assert animal.declaration_line[0] == 7
    assert animal.file_path.name == "Animal.java"
    assert [f.name for f in animal.fields] == ["name", "hidden"]
    assert [c.signature for c in animal.constructors] == ["Animal()"]
    assert [m.signature for m in animal.methods] == ["speak()", "secret()"]


def test_visible_members(infos) -> None:
    by_name, _ = infos
    visible = [m.id for m in by_name["Animal"].visible_members()]
    assert visible == ["name", "Animal()", "speak()"]
    assert [m.id for m in by_name["Pet"].visible_members()] == ["pat()"]


def test_member_cross_references(infos) -> None:
    by_name, _ = infos
    speak = next(m for m in by_name["Animal"].methods if m.name == "speak")
    (reference,) = speak.reference_by_see()
    assert reference.type_name == "Dog"
    assert reference.member == "#bark()"
    assert reference.qualified == "zoo.Dog"
    assert reference.key == "zoo.Dog#bark()"


def test_nested_types_become_records(infos) -> None:
    by_name, _ = infos
    dog = by_name["Dog"]
    assert [c.qualified_name for c in dog.all_types()] == [
        "zoo.Dog",
        "zoo.Dog.Collar",
        "zoo.Dog.Collar.Tag",
    ]
    tag = dog.all_types()[-1]
    assert tag.name == "Dog.Collar.Tag"
    assert tag.nest_level == 3


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("Animal", "AbstractClass"),
        ("Dog", "Class"),
        ("Pet", "FunctionalInterface"),
        ("Kind", "Enum"),
        ("Spot", "Record"),
        ("Tagged", "Annotation"),
        ("ZooError", "Exception"),
    ],
)
def test_kind_labels(infos, name, kind) -> None:
    by_name, _ = infos
    assert by_name[name].kind == kind


def test_total_ordering(infos) -> None:
    by_name, _ = infos
    assert by_name["Animal"] < by_name["Dog"]
    assert sorted([by_name["Dog"], by_name["Loose"], by_name["Animal"]]) == [
        by_name["Loose"],
        by_name["Animal"],
        by_name["Dog"],
    ]
    assert by_name["Dog"] == ClassInfo(by_name["Dog"].element, by_name["Dog"].index)


def test_connect_sub_types_after_out_of_order_visit(infos) -> None:
    by_name, _ = infos
    data = Data()
    for name in ["Puppy", "Dog", "Animal", "Pet"]:
        data.add(by_name[name])

    data.sort()
    data.connect_sub_types()
    data.connect_sub_types()

    assert by_name["Animal"].subtypes == ["zoo.Dog", "zoo.Puppy"]
    assert by_name["Dog"].subtypes == ["zoo.Puppy"]
    assert by_name["Pet"].subtypes == ["zoo.Dog", "zoo.Puppy"]
    assert by_name["Puppy"].subtypes == []


def test_sort_is_idempotent(infos) -> None:
    by_name, _ = infos
    data = Data()
    for name in ["Loose", "ZooError", "Dog", "Animal"]:
        data.add(by_name[name])

    data.sort()
    first = [info.qualified_name for info in data.types]
    data.sort()

    assert [info.qualified_name for info in data.types] == first
    assert first == ["Loose", "zoo.Animal", "zoo.Dog", "zoo.ZooError"]


def test_duplicates_are_ignored(infos) -> None:
    by_name, _ = infos
    data = Data()
    assert data.add(by_name["Dog"]) is True
    assert data.add(by_name["Dog"]) is False
    assert len(data.types) == 1
    assert data.find("zoo.Dog") is by_name["Dog"]
    assert data.find("zoo.Cat") is None


def test_root_js(infos) -> None:
    by_name, _ = infos
    data = Data()
    data.add(by_name["Dog"])
    data.add(by_name["Loose"])
    data.modules.append("zoo.app")
    data.sort()

    script = data.render_root_js()

    assert script.startswith("const root = ")
    assert script.rstrip().endswith(";")
    payload = json.loads(script[len("const root = ") :].rstrip().rstrip(";"))
    assert payload["modules"] == ["zoo.app"]
    assert payload["packages"] == ["zoo"]
    assert payload["types"] == [
        {"name": "Loose", "packageName": "", "type": "Class", "modifiers": ["public"]},
        {"name": "Dog", "packageName": "zoo", "type": "Class", "modifiers": ["public"]},
    ]

    data.clear()
    assert data.to_json() == {"docs": [], "modules": [], "packages": [], "types": []}


def test_create_comment_heading(infos) -> None:
    by_name, index = infos
    renderer = CommentRenderer(TypeResolver(index, {"zoo"}))

    heading, body = by_name["Animal"].create_comment(renderer)
    assert heading == "<h2>Animals</h2>"
    assert body == "Base of everything."

    tag = by_name["Dog"].all_types()[-1]
    heading, body = tag.create_comment(renderer)
    assert heading == "<h3>Dog.Collar.Tag</h3>"
    assert body == ""


def test_find_tracks_add_and_clear(infos) -> None:
    by_name, _ = infos
    data = Data()
    for name in ["Dog", "Animal", "Loose"]:
        data.add(by_name[name])

    data.sort()
    assert data.find("zoo.Animal") is by_name["Animal"]
    assert data.find("Loose") is by_name["Loose"]

    data.clear()
    assert data.find("zoo.Dog") is None
    assert data.add(by_name["Dog"]) is True
