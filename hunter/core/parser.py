"""
Hunter — Rust source parser using tree-sitter.
"""

from __future__ import annotations

import tree_sitter_rust as tsrust
from tree_sitter import Language, Parser, Tree


RUST_LANGUAGE = Language(tsrust.language())


class RustParser:
    """Thin wrapper around tree-sitter for Rust source code."""

    def __init__(self) -> None:
        self._parser = Parser(RUST_LANGUAGE)

    def parse(self, code: str) -> tuple[Tree, bytes]:
        """Parse Rust source and return (tree, source_bytes).

        tree-sitter recovers from syntax errors, so this never raises for bad
        input; callers check ``tree.root_node.has_error``.
        """
        source_bytes = code.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        return tree, source_bytes
