"""Rust source parser using tree-sitter."""

from dataclasses import dataclass
from pathlib import Path

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from lera_bindgen.errors import ParserError

RUST_LANGUAGE = Language(tree_sitter_rust.language())

# Constants
_DEFAULT_ENCODING = "utf-8"
_SNIPPET_LENGTH = 40


@dataclass(frozen=True)
class ParsedSource:
    """A parsed source file together with the text it was parsed from."""

    path: Path
    source: str
    root: Node


class SourceCodeParser:
    """Parser for Rust source code using tree-sitter.

    Instances are cheap but not thread-safe; create one per worker.
    """

    def __init__(self) -> None:
        """Initialise the parser with the Rust grammar."""
        self.parser = Parser(RUST_LANGUAGE)

    def parse(self, source_code: str) -> Node:
        """Parse source code string without validating it.

        Args:
            source_code: Source code to parse

        Returns:
            AST root node

        """
        tree = self.parser.parse(bytes(source_code, _DEFAULT_ENCODING))
        return tree.root_node

    def parse_checked(self, source_code: str, origin: str) -> Node:
        """Parse source code and reject any syntax error.

        Args:
            source_code: Source code to parse
            origin: Label used in error messages, usually the file path

        Returns:
            AST root node

        Raises:
            ParserError: If tree-sitter reports an error or missing node

        """
        root = self.parse(source_code)
        if root.has_error:
            error_node = find_first_error(root)
            if error_node is None:
                raise ParserError(f"{origin}: syntax error")
            row, column = error_node.start_point
            snippet = _error_snippet(error_node, source_code)
            raise ParserError(
                f"{origin}:{row + 1}:{column + 1}: syntax error near {snippet!r}"
            )
        return root

    def parse_file(self, file_path: Path) -> ParsedSource:
        """Read and parse a source file.

        Args:
            file_path: Path to the source file

        Returns:
            ParsedSource holding path, text and root node

        Raises:
            ParserError: If the file cannot be read or contains a syntax error

        """
        try:
            source_code = file_path.read_text(encoding=_DEFAULT_ENCODING)
        except (OSError, UnicodeDecodeError) as e:
            raise ParserError(f"Failed to read {file_path}: {e}") from e

        root = self.parse_checked(source_code, str(file_path))
        return ParsedSource(path=file_path, source=source_code, root=root)


def find_first_error(node: Node) -> Node | None:
    """Find the first ERROR or MISSING node in document order.

    Args:
        node: Root node to search from

    Returns:
        The first offending node or None

    """
    if node.is_error or node.is_missing:
        return node

    for child in node.children:
        if child.has_error or child.is_missing:
            found = find_first_error(child)
            if found is not None:
                return found
    return None


def _error_snippet(node: Node, source_code: str) -> str:
    source_bytes = source_code.encode(_DEFAULT_ENCODING)
    text = source_bytes[node.start_byte : node.end_byte].decode(
        _DEFAULT_ENCODING, errors="replace"
    )
    if not text:
        line_start = source_bytes.rfind(b"\n", 0, node.start_byte) + 1
        line_end = source_bytes.find(b"\n", node.start_byte)
        if line_end == -1:
            line_end = len(source_bytes)
        text = source_bytes[line_start:line_end].decode(
            _DEFAULT_ENCODING, errors="replace"
        )
    text = " ".join(text.split())
    return text[:_SNIPPET_LENGTH]
