"""Tests for source sample extraction and the sample cache."""

from types import SimpleNamespace

import pytest

from jdocsite.core.exceptions import BuildError
from jdocsite.javadoc.samples import SampleCache, SampleExtractor, strip_header_whitespace

SAMPLE = """
package a.b;

/** Sample. */
public class C extends Base {
    // helper state
    private int total;
    private String label = "x", other;

    /** Adds. */
    @Override
    public void foo(int x) {
        // accumulate
        total += x;
    }

    public void foo(String s) {
        total = s.length(); /* count */
    }

    public static class Inner {
        @SuppressWarnings("unchecked")
        public void bar() {
            total();
        }
    }
}
"""


@pytest.fixture
def sample_root(java_project):
    return java_project({"a/b/C.java": SAMPLE}, root="samples")


@pytest.fixture
def extractor(sample_root):
    return SampleExtractor([sample_root])


class TestStripHeaderWhitespace:
    def test_trims_blank_lines_noise_and_common_indent(self):
        text = "\n\n    @Override\n    void f() {\n        x();\n    }\n\n"
        assert strip_header_whitespace(text) == "void f() {\n    x();\n}"

    def test_is_idempotent(self):
        text = "\n      @Test\n      void g() {\n\n          y();\n      }\n"
        once = strip_header_whitespace(text)
        assert strip_header_whitespace(once) == once

    def test_keeps_inner_blank_lines(self):
        assert strip_header_whitespace("  a\n\n  b") == "a\n\nb"

    def test_annotation_with_arguments_is_noise(self):
        text = '  @SuppressWarnings("unchecked")\n  int x;\n  int y;'
        assert strip_header_whitespace(text) == "int x;\nint y;"

    def test_other_annotations_are_kept(self):
        text = "  @Deprecated\n  int x;\n  int y;"
        assert strip_header_whitespace(text) == "@Deprecated\nint x;\nint y;"

    def test_single_line(self):
        assert strip_header_whitespace("   int x;  ") == "int x;"


class TestResolve:
    def test_method_by_signature_without_override(self, extractor):
        assert extractor.resolve("a.b.C", "foo(int)") == (
            "public void foo(int x) {\n"
            "    total += x;\n"
            "}"
        )

    def test_descriptor_may_start_with_hash(self, extractor):
        assert extractor.resolve("a.b.C", "#foo(int)") == extractor.resolve("a.b.C", "foo(int)")

    def test_overload_is_selected_by_parameter_types(self, extractor):
        listing = extractor.resolve("a.b.C", "foo(String)")
        assert listing.startswith("public void foo(String s) {")
        assert "/* count */" not in listing

    def test_field_by_any_variable_name(self, extractor):
        assert extractor.resolve("a.b.C", "other") == 'private String label = "x", other;'

    def test_nested_type_member(self, extractor):
        assert extractor.resolve("a.b.C.Inner", "bar()") == (
            "public void bar() {\n"
            "    total();\n"
            "}"
        )

    def test_whole_type(self, extractor):
        listing = extractor.resolve("a.b.C")
        assert listing.startswith("package a.b;")
        assert "public class C extends Base {" in listing
        assert "@Override" not in listing
        assert "// accumulate" not in listing
        assert "/** Sample. */" not in listing

    def test_trailing_segment_names_member(self, extractor):
        assert extractor.resolve("a.b.C.other") == 'private String label = "x", other;'

    def test_enclosing_file_matches_when_nested_file_missing(self, extractor, sample_root):
        # Known ambiguity: with no a/b/C/Inner.java the dotted name falls back
        # to the enclosing type's file and its nested declaration.
        assert not (sample_root / "a" / "b" / "C" / "Inner.java").exists()
        assert extractor.resolve("a.b.C.Inner").startswith("public static class Inner {")

    def test_deeper_file_wins_over_enclosing_file(self, extractor, java_project):
        java_project(
            {"a/b/C/Inner.java": "package a.b.C;\n\npublic class Inner {\n    int own;\n}\n"},
            root="samples",
        )
        assert extractor.resolve("a.b.C.Inner") == "package a.b.C;\n\npublic class Inner {\n    int own;\n}"

    def test_misses_return_empty_string(self, extractor):
        assert extractor.resolve("a.b.Missing") == ""
        assert extractor.resolve("a.b.C", "nope()") == ""
        assert extractor.resolve("a.b.C.Gone") == ""
        assert extractor.resolve("") == ""

    def test_first_root_wins(self, java_project, sample_root):
        other = java_project(
            {"a/b/C.java": "package a.b;\n\nclass C {\n    void foo(int y) {}\n}\n"},
            root="other",
        )
        assert SampleExtractor([other, sample_root]).resolve("a.b.C", "foo(int)") == "void foo(int y) {}"
        assert SampleExtractor([sample_root, other]).resolve("a.b.C", "foo(int)").startswith(
            "public void foo(int x)"
        )

    def test_later_root_is_searched_when_first_misses(self, java_project, sample_root):
        empty = java_project({}, root="empty")
        assert SampleExtractor([empty, sample_root]).resolve("a.b.C", "foo(int)") != ""


class TestSampleCache:
    def test_smallest_origin_wins_regardless_of_order(self):
        first = SampleCache()
        first.put("a.b.C#foo(int)", "late", ("b/Test.java", 3))
        first.put("a.b.C#foo(int)", "early", ("a/Test.java", 10))

        second = SampleCache()
        second.put("a.b.C#foo(int)", "early", ("a/Test.java", 10))
        second.put("a.b.C#foo(int)", "late", ("b/Test.java", 3))

        assert first.get("a.b.C#foo(int)") == "early"
        assert second.get("a.b.C#foo(int)") == "early"

    def test_same_file_lower_line_wins(self):
        cache = SampleCache()
        cache.put("k", "second", ("T.java", 20))
        cache.put("k", "first", ("T.java", 5))
        assert cache.get("k") == "first"

    def test_sealed_cache_rejects_writes(self):
        cache = SampleCache()
        cache.put("k", "code", ("T.java", 1))
        cache.seal()
        with pytest.raises(BuildError):
            cache.put("other", "code", ("T.java", 2))
        assert cache.get("k") == "code"

    def test_clear_unseals(self):
        cache = SampleCache()
        cache.put("k", "code", ("T.java", 1))
        cache.seal()
        cache.clear()
        assert len(cache) == 0
        cache.put("k", "again", ("T.java", 1))
        assert "k" in cache

    def test_samples_for_signature_then_name(self):
        cache = SampleCache()
        cache.put("p.T#run", "by name", ("T.java", 1))
        cache.put("p.T#run(int)", "by signature", ("T.java", 2))
        member = SimpleNamespace(name="run", signature="run(int)")

        assert cache.samples_for("p.T", member) == ["by signature", "by name"]
        assert cache.samples_for("p.Other", member) == []
        assert cache.keys() == ["p.T#run", "p.T#run(int)"]
