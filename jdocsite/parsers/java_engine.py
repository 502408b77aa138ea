"""Tree-sitter engine for Java sources.

Wraps the tree-sitter Java grammar behind a tiny parse API shared by the
declaration model and the sample extractor.
"""

from pathlib import Path

from tree_sitter import Language, Node, Parser, Tree

from jdocsite.core.exceptions import SetupError, SourceReadError


class JavaSourceEngine:
    """Parse Java source bytes into tree-sitter trees."""

    def __init__(self) -> None:
        self.language_name = "java"
        self._language = self._load_language()
        self._parser = Parser(self._language)

    def _load_language(self) -> Language:
        try:
            import tree_sitter_java as ts_java

            # Handle tree-sitter API - language() returns PyCapsule that needs wrapping
            lang_result = ts_java.language()
            if isinstance(lang_result, Language):
                return lang_result
            return Language(lang_result)
        except ImportError as exc:
            raise SetupError(
                parser="java",
                missing_dependency="tree-sitter-java",
                install_command="pip install tree-sitter-java",
                original_error=str(exc),
            ) from exc

    def parse(self, content: bytes) -> Tree:
        """Parse source bytes."""
        return self._parser.parse(content)

    def parse_file(self, path: Path) -> tuple[Tree, bytes]:
        """Read and parse a source file.

        Raises:
            SourceReadError: If the file cannot be read
        """
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise SourceReadError(path, exc) from exc
        return self.parse(content), content


def node_text(node: Node | None, content: bytes) -> str:
    """Return the source text covered by a node."""
    if node is None:
        return ""
    return content[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def find_child_by_type(node: Node, node_type: str) -> Node | None:
    """Find the first direct child with the given type."""
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def walk(node: Node):
    """Yield a node and all of its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
