"""
Source Model Builder — Deterministic structure extraction for Rust files.

Parses Rust source with tree-sitter and extracts the structured facts every
rule reads: line table, binding sites, function spans, the per-line nesting
timeline, `use` declarations, comments and commented-out code, plus the
calls, macros, closures, matches, loops, literals, types, lifetimes, unsafe
and FFI sites the Rust-specific rules need.

tree-sitter recovers from syntax errors, so a broken file still yields every
fact outside the damaged region; the damage is reported in `parse_errors`.
"""

from __future__ import annotations

import re
from typing import Any, Iterator

from tree_sitter import Node

from hunter.config import AnalysisConfig
from hunter.core.parser import RustParser
from hunter.models.source_models import (
    AsyncSite,
    Attribute,
    Closure,
    CommentedCodeBlock,
    CommentKind,
    CommentSpan,
    DestructuringPattern,
    ExternBlock,
    ForLoop,
    FunctionSpan,
    GenericList,
    Identifier,
    IdentifierKind,
    ImportStmt,
    IntLiteral,
    Lifetime,
    MacroCall,
    MatchExpr,
    MethodCall,
    ModuleDecl,
    PathCall,
    SourceFile,
    SourceModel,
    TraitDef,
    TypeUse,
    TypeUseKind,
    UnsafeSite,
)

_DESTRUCTURING_PATTERNS = {"tuple_pattern": "tuple", "slice_pattern": "slice"}

_CONTROL_FLOW_NODES = {
    "if_expression",
    "if_let_expression",
    "match_expression",
    "for_expression",
    "while_expression",
    "while_let_expression",
    "loop_expression",
}

# Tokens that are masked in code_lines, including inside macro arguments.
_LEXICAL_NODES = {"string_literal", "raw_string_literal", "char_literal", "line_comment", "block_comment"}

_SIDE_EFFECT_NODES = {"call_expression", "macro_invocation", "assignment_expression", "compound_assignment_expr"}

# Declaration nodes whose type_identifier child names the item, not a use of a type.
_TYPE_DECLARATION_PARENTS = {
    "generic_type",
    "scoped_type_identifier",
    "struct_item",
    "enum_item",
    "union_item",
    "trait_item",
    "type_item",
    "type_parameters",
    "type_parameter",
    "constrained_type_parameter",
    "optional_type_parameter",
    "associated_type",
}

_TEST_FN_ATTR = re.compile(r"^#\[(\w+::)*test(\(.*\))?\]$")
_INT_PREFIX = re.compile(r"^(0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*)")

_CODE_START = re.compile(
    r"^(let|fn|pub|use|mod|impl|struct|enum|trait|if|else|for|while|loop|match|"
    r"return|const|static|unsafe|async|break|continue)\b"
)
_CODE_TOKENS = ("::", "->", "=>", "==", "!=", "&&", "||", "();", ".unwrap()", "&mut ")
_BRACE_ONLY = {"{", "}", "};", "})", "});", "},"}


def _compact(text: str) -> str:
    return re.sub(r"\s+", "", text)


def _normalize_use_path(text: str) -> str:
    """`std::io::{ Read,\n Write as W }` -> `std::io::{Read,Write as W}`."""
    text = re.sub(r"\s+", " ", text.strip())
    return re.sub(r"\s*([:{},])\s*", r"\1", text)


def _split_lines(text: str) -> list[str]:
    """Split on '\\n' only so rows match tree-sitter's row numbering."""
    if not text:
        return []
    lines = [line.rstrip("\r") for line in text.split("\n")]
    if text.endswith("\n"):
        lines.pop()
    return lines


def parse_int_literal(text: str) -> int | None:
    """Value of a Rust integer literal such as `0xFF_u8` or `1_000usize`."""
    match = _INT_PREFIX.match(text)
    if not match:
        return None
    digits = match.group(1).replace("_", "")
    try:
        if digits[:2] == "0x":
            return int(digits[2:], 16)
        if digits[:2] == "0o":
            return int(digits[2:], 8)
        if digits[:2] == "0b":
            return int(digits[2:], 2)
        return int(digits, 10)
    except ValueError:
        return None


def looks_like_code(content: str) -> bool:
    """Heuristic: does the text of a `//` comment read like Rust code?"""
    content = content.strip()
    if not content:
        return False
    if content in _BRACE_ONLY:
        return True
    score = 0
    if _CODE_START.match(content):
        score += 1
    if re.search(r"[;{}]\s*$", content) or content.startswith("}"):
        score += 1
    score += sum(1 for token in _CODE_TOKENS if token in content)
    if re.search(r"\w!?\(.*\)", content):
        score += 1
    if " = " in content:
        score += 1
    return score >= 2


class _RustVisitor:
    """Walks a tree-sitter Rust syntax tree and collects structured facts."""

    def __init__(self, source: bytes) -> None:
        self.source = source
        self._line_bytes = source.split(b"\n")

        self.identifiers: list[Identifier] = []
        self.raw_functions: list[dict[str, Any]] = []
        self.imports: list[ImportStmt] = []
        self.comments: list[CommentSpan] = []
        self.method_calls: list[MethodCall] = []
        self.path_calls: list[PathCall] = []
        self.macros: list[MacroCall] = []
        self.closures: list[Closure] = []
        self.matches: list[MatchExpr] = []
        self.for_loops: list[ForLoop] = []
        self.int_literals: list[IntLiteral] = []
        self.type_uses: list[TypeUse] = []
        self.lifetimes: list[Lifetime] = []
        self.unsafe_sites: list[UnsafeSite] = []
        self.extern_blocks: list[ExternBlock] = []
        self.traits: list[TraitDef] = []
        self.generics: list[GenericList] = []
        self.modules: list[ModuleDecl] = []
        self.patterns: list[DestructuringPattern] = []
        self.async_sites: list[AsyncSite] = []
        self.attributes: list[Attribute] = []
        self.test_ranges: list[tuple[int, int]] = []

        self.block_ranges: list[tuple[int, int]] = []
        self.masked_ranges: list[tuple[int, int]] = []

        # Traversal state
        self._fn_body_lines: list[int] = []
        self._closure_depth = 0
        self._module_depth = 0
        self._test_depth = 0
        self._const_depth = 0
        self._signature_depth = 0
        self._parameter_types: set[tuple[int, int]] = set()

    # ── Dispatch ──

    def visit(self, node: Node) -> None:
        method = getattr(self, f"visit_{node.type}", None)
        if method is not None:
            method(node)
        else:
            self.generic_visit(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.children:
            self.visit(child)

    # ── Helpers ──

    def _text(self, node: Node | None) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def _position(self, node: Node) -> tuple[int, int]:
        """1-based (line, character column) of a node's start."""
        row, byte_col = node.start_point[0], node.start_point[1]
        prefix = self._line_bytes[row][:byte_col] if row < len(self._line_bytes) else b""
        return row + 1, len(prefix.decode("utf-8", errors="replace")) + 1

    @staticmethod
    def _span_lines(node: Node | None) -> int:
        if node is None:
            return 0
        return node.end_point[0] - node.start_point[0] + 1

    @staticmethod
    def _same(a: Node | None, b: Node | None) -> bool:
        if a is None or b is None:
            return False
        return (a.start_byte, a.end_byte, a.type) == (b.start_byte, b.end_byte, b.type)

    @property
    def _in_test(self) -> bool:
        return self._test_depth > 0

    def _attributes_of(self, node: Node) -> list[str]:
        """Outer attributes written directly above an item."""
        attrs: list[str] = []
        sibling = node.prev_named_sibling
        while sibling is not None and sibling.type in ("attribute_item", "line_comment", "block_comment"):
            if sibling.type == "attribute_item":
                attrs.append(_compact(self._text(sibling)))
            sibling = sibling.prev_named_sibling
        return attrs

    def _pattern_bindings(self, pattern: Node | None) -> list[Node]:
        """Identifier nodes bound by a pattern, skipping constructor paths."""
        found: list[Node] = []
        stack = [pattern] if pattern is not None else []
        while stack:
            node = stack.pop()
            if node.type in ("identifier", "shorthand_field_identifier"):
                found.append(node)
                continue
            if node.type in ("tuple_struct_pattern", "struct_pattern"):
                ctor = node.child_by_field_name("type")
                stack.extend(c for c in reversed(node.named_children) if not self._same(c, ctor))
                continue
            if node.type == "field_pattern":
                inner = node.child_by_field_name("pattern")
                if inner is not None:
                    stack.append(inner)
                else:
                    name = node.child_by_field_name("name")
                    if name is not None:
                        found.append(name)
                continue
            if node.type in ("scoped_identifier", "range_pattern", "macro_invocation"):
                continue
            stack.extend(reversed(node.named_children))
        found.sort(key=lambda n: n.start_byte)
        return found

    def _add_bindings(self, pattern: Node | None, kind: IdentifierKind, scope_lines: int) -> None:
        for ident in self._pattern_bindings(pattern):
            line, column = self._position(ident)
            self.identifiers.append(
                Identifier(
                    name=self._text(ident),
                    line=line,
                    column=column,
                    kind=kind,
                    scope_lines=scope_lines,
                    in_test=self._in_test,
                )
            )

    def _add_name(self, node: Node | None, kind: IdentifierKind) -> None:
        if node is None:
            return
        line, column = self._position(node)
        self.identifiers.append(
            Identifier(name=self._text(node), line=line, column=column, kind=kind, in_test=self._in_test)
        )

    def _generic_params(self, type_parameters: Node | None) -> tuple[list[str], list[str], list[str]]:
        types: list[str] = []
        lifetimes: list[str] = []
        consts: list[str] = []
        if type_parameters is None:
            return types, lifetimes, consts
        for child in type_parameters.named_children:
            if child.type in ("attribute_item", "metavariable"):
                continue
            if child.type == "lifetime":
                lifetimes.append(self._text(child))
            elif child.type == "const_parameter":
                consts.append(self._text(child.child_by_field_name("name")))
            elif child.type == "type_identifier":
                types.append(self._text(child))
            else:
                name = child
                while name is not None and name.type not in ("type_identifier", "lifetime"):
                    name = (
                        name.child_by_field_name("name")
                        or name.child_by_field_name("left")
                        or (name.named_children[0] if name.named_children else None)
                    )
                if name is None:
                    continue
                if name.type == "lifetime":
                    lifetimes.append(self._text(name))
                else:
                    types.append(self._text(name))
        return types, lifetimes, consts

    def _record_generics(self, owner: str, node: Node) -> list[str]:
        types, lifetimes, consts = self._generic_params(node.child_by_field_name("type_parameters"))
        if types or lifetimes or consts:
            self.generics.append(
                GenericList(
                    owner=owner,
                    line=node.start_point[0] + 1,
                    type_params=types,
                    lifetime_params=lifetimes,
                    const_params=consts,
                )
            )
        return types + lifetimes + consts

    @staticmethod
    def _count_descendants(node: Node | None, types: set[str]) -> int:
        if node is None:
            return 0
        count = 0
        stack = list(node.children)
        while stack:
            current = stack.pop()
            if current.type in types:
                count += 1
            stack.extend(current.children)
        return count

    @staticmethod
    def _contains_type(node: Node, types: set[str]) -> bool:
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type in types:
                return True
            stack.extend(current.children)
        return False

    def _side_effect_groups(self, body: Node | None) -> int:
        """Blank-line separated statement groups that contain a side effect."""
        if body is None:
            return 0
        statements = [c for c in body.named_children if c.type not in ("line_comment", "block_comment")]
        groups = 0
        group_has_effect = False
        previous_end: int | None = None
        for stmt in statements:
            if previous_end is not None and stmt.start_point[0] - previous_end > 1:
                groups += int(group_has_effect)
                group_has_effect = False
            if stmt.type in ("expression_statement", "macro_invocation") and self._contains_type(
                stmt, _SIDE_EFFECT_NODES
            ):
                group_has_effect = True
            previous_end = stmt.end_point[0]
        return groups + int(group_has_effect)

    def _token_tree_facts(self, token_tree: Node | None) -> None:
        """Recover method calls and nested macros from unparsed macro arguments.

        Punctuation inside a token tree is not reliably exposed as nodes, so
        the source text between named tokens decides what an identifier is.
        """
        if token_tree is None:
            return
        stack = [token_tree]
        while stack:
            tree = stack.pop()
            named = [c for c in tree.children if c.is_named]
            for index, child in enumerate(named):
                if child.type == "token_tree":
                    stack.append(child)
                    continue
                if child.type in _LEXICAL_NODES:
                    self.visit(child)
                    continue
                if child.type != "identifier" or index + 1 >= len(named):
                    continue
                nxt = named[index + 1]
                if nxt.type != "token_tree":
                    continue
                between = self.source[child.end_byte:nxt.start_byte].strip()
                line, column = self._position(child)
                if between == b"!":
                    self.macros.append(
                        MacroCall(name=self._text(child), line=line, column=column, in_test=self._in_test)
                    )
                    continue
                if between or index == 0 or not self._text(nxt).startswith("("):
                    continue
                prev = named[index - 1]
                if self.source[prev.end_byte:child.start_byte].strip() != b".":
                    continue
                self.method_calls.append(
                    MethodCall(
                        name=self._text(child),
                        receiver=_compact(self._text(prev)),
                        line=line,
                        column=column,
                        args=self._text(nxt)[1:-1],
                        in_macro=True,
                        in_test=self._in_test,
                    )
                )

    # ── Masked tokens ──

    def visit_string_literal(self, node: Node) -> None:
        self.masked_ranges.append((node.start_byte, node.end_byte))

    visit_raw_string_literal = visit_string_literal
    visit_char_literal = visit_string_literal

    def visit_line_comment(self, node: Node) -> None:
        self.masked_ranges.append((node.start_byte, node.end_byte))
        text = self._text(node).rstrip("\r\n")
        is_doc = text.startswith(("///", "//!")) and not text.startswith("////")
        row = node.start_point[0] + 1
        self.comments.append(
            CommentSpan(
                start_line=row,
                end_line=row,
                kind=CommentKind.DOC if is_doc else CommentKind.LINE,
                text=text,
            )
        )

    def visit_block_comment(self, node: Node) -> None:
        self.masked_ranges.append((node.start_byte, node.end_byte))
        text = self._text(node)
        is_doc = text.startswith(("/**", "/*!")) and not text.startswith("/**/")
        self.comments.append(
            CommentSpan(
                start_line=node.start_point[0] + 1,
                end_line=node.end_point[0] + 1,
                kind=CommentKind.DOC if is_doc else CommentKind.BLOCK,
                text=text,
            )
        )

    # ── Blocks ──

    def visit_block(self, node: Node) -> None:
        self.block_ranges.append((node.start_point[0], node.end_point[0]))
        self.generic_visit(node)

    visit_match_block = visit_block

    # ── Items ──

    def visit_attribute_item(self, node: Node) -> None:
        self.attributes.append(Attribute(text=_compact(self._text(node)), line=node.start_point[0] + 1))

    def visit_inner_attribute_item(self, node: Node) -> None:
        text = _compact(self._text(node))
        self.attributes.append(Attribute(text=text, line=node.start_point[0] + 1))
        if text == "#![cfg(test)]":
            self.test_ranges.append((1, len(self._line_bytes)))
            self._test_depth += 1

    def visit_function_item(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        name = self._text(name_node)
        is_test = any(_TEST_FN_ATTR.match(attr) for attr in self._attributes_of(node))

        modifiers = next((c for c in node.children if c.type == "function_modifiers"), None)
        modifier_text = self._text(modifiers)
        is_async = re.search(r"\basync\b", modifier_text) is not None
        is_unsafe = re.search(r"\bunsafe\b", modifier_text) is not None
        abi: str | None = None
        extern = next((c for c in modifiers.children if c.type == "extern_modifier"), None) if modifiers else None
        if extern is not None:
            literal = next((c for c in extern.named_children if c.type == "string_literal"), None)
            abi = self._text(literal).strip('"') if literal is not None else "C"

        parameters = node.child_by_field_name("parameters")
        param_count = 0
        if parameters is not None:
            param_count = sum(
                1 for c in parameters.named_children
                if c.type in ("parameter", "self_parameter", "variadic_parameter")
            )
        body = node.child_by_field_name("body")
        line, column = self._position(node)

        if is_test:
            self.test_ranges.append((line, node.end_point[0] + 1))
        if is_unsafe:
            self.unsafe_sites.append(UnsafeSite(kind="fn", line=line, column=column))
        if is_async:
            self.async_sites.append(AsyncSite(kind="async_fn", line=line, column=column))

        self._test_depth += int(is_test)
        self._add_name(name_node, IdentifierKind.FUNCTION)
        generic_params = self._record_generics(name, node)

        self.raw_functions.append({
            "name": name,
            "start_line": line,
            "end_line": node.end_point[0] + 1,
            "body_rows": (body.start_point[0], body.end_point[0]) if body is not None else None,
            "parameter_count": param_count,
            "is_async": is_async,
            "is_unsafe": is_unsafe,
            "is_test": is_test or self._in_test,
            "abi": abi,
            "returns": _compact(self._text(node.child_by_field_name("return_type"))),
            "generic_params": generic_params,
            "control_flow_count": self._count_descendants(body, _CONTROL_FLOW_NODES),
            "side_effect_groups": self._side_effect_groups(body),
        })

        self._fn_body_lines.append(self._span_lines(body))
        for child in node.children:
            if not self._same(child, name_node):
                self.visit(child)
        self._fn_body_lines.pop()
        self._test_depth -= int(is_test)

    def visit_function_signature_item(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        self._add_name(name_node, IdentifierKind.FUNCTION)
        self._record_generics(self._text(name_node), node)
        self._signature_depth += 1
        self.visit_children_except(node, name_node)
        self._signature_depth -= 1

    def visit_parameter(self, node: Node) -> None:
        pattern = node.child_by_field_name("pattern")
        if not self._signature_depth:
            scope = self._fn_body_lines[-1] if self._fn_body_lines else 0
            self._add_bindings(pattern, IdentifierKind.PARAMETER, scope)

        # Only the declared type itself, or what a shared reference points to, is "the parameter type".
        param_type = node.child_by_field_name("type")
        targets: set[tuple[int, int]] = set()
        if param_type is not None:
            targets.add((param_type.start_byte, param_type.end_byte))
            if param_type.type == "reference_type" and not any(
                c.type == "mutable_specifier" for c in param_type.children
            ):
                inner = param_type.child_by_field_name("type")
                if inner is not None:
                    targets.add((inner.start_byte, inner.end_byte))
        previous, self._parameter_types = self._parameter_types, targets
        self.visit_children_except(node, pattern)
        self._parameter_types = previous

    def collect_patterns(self, root: Node) -> None:
        """Record tuple and slice patterns wherever they occur, including let and parameter patterns."""
        stack = [root]
        while stack:
            current = stack.pop()
            kind = _DESTRUCTURING_PATTERNS.get(current.type)
            if kind is not None:
                line, column = self._position(current)
                self.patterns.append(DestructuringPattern(kind=kind, line=line, column=column))
            stack.extend(reversed(current.children))

    def visit_children_except(self, node: Node, skip: Node | None) -> None:
        for child in node.children:
            if not self._same(child, skip):
                self.visit(child)

    def visit_let_declaration(self, node: Node) -> None:
        parent = node.parent
        scope = 1
        if parent is not None and parent.type == "block":
            scope = parent.end_point[0] - node.start_point[0] + 1
        pattern = node.child_by_field_name("pattern")
        self._add_bindings(pattern, IdentifierKind.LET, scope)
        self.visit_children_except(node, pattern)

    def visit_field_declaration(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        self._add_name(name_node, IdentifierKind.FIELD)
        self.visit_children_except(node, name_node)

    def visit_const_item(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        self._add_name(name_node, IdentifierKind.CONST)
        self._const_depth += 1
        self.visit_children_except(node, name_node)
        self._const_depth -= 1

    visit_static_item = visit_const_item

    def visit_enum_variant(self, node: Node) -> None:
        self._const_depth += 1
        self.generic_visit(node)
        self._const_depth -= 1

    def visit_struct_item(self, node: Node) -> None:
        self._record_generics(self._text(node.child_by_field_name("name")), node)
        self.generic_visit(node)

    visit_enum_item = visit_struct_item
    visit_union_item = visit_struct_item

    def visit_impl_item(self, node: Node) -> None:
        line, column = self._position(node)
        if any(c.type == "unsafe" for c in node.children):
            self.unsafe_sites.append(UnsafeSite(kind="impl", line=line, column=column))
        self._record_generics(_compact(self._text(node.child_by_field_name("type"))), node)
        self.generic_visit(node)

    def visit_trait_item(self, node: Node) -> None:
        line, column = self._position(node)
        name = self._text(node.child_by_field_name("name"))
        if any(c.type == "unsafe" for c in node.children):
            self.unsafe_sites.append(UnsafeSite(kind="trait", line=line, column=column))
        body = node.child_by_field_name("body")
        items = 0
        if body is not None:
            items = sum(
                1 for c in body.named_children
                if c.type not in ("line_comment", "block_comment", "attribute_item")
            )
        generic_params = self._record_generics(name, node)
        self.traits.append(TraitDef(name=name, line=line, item_count=items, generic_count=len(generic_params)))
        self.generic_visit(node)

    def visit_mod_item(self, node: Node) -> None:
        line, _ = self._position(node)
        body = node.child_by_field_name("body")
        is_test = "#[cfg(test)]" in self._attributes_of(node)
        self._module_depth += 1
        self.modules.append(
            ModuleDecl(
                name=self._text(node.child_by_field_name("name")),
                line=line,
                depth=self._module_depth,
                inline=body is not None,
            )
        )
        if is_test:
            self.test_ranges.append((line, node.end_point[0] + 1))
        self._test_depth += int(is_test)
        self.generic_visit(node)
        self._test_depth -= int(is_test)
        self._module_depth -= 1

    def visit_foreign_mod_item(self, node: Node) -> None:
        extern = next((c for c in node.children if c.type == "extern_modifier"), None)
        literal = None
        if extern is not None:
            literal = next((c for c in extern.named_children if c.type == "string_literal"), None)
        body = node.child_by_field_name("body")
        fn_count = 0
        if body is not None:
            fn_count = sum(1 for c in body.named_children if c.type == "function_signature_item")
        self.extern_blocks.append(
            ExternBlock(
                line=node.start_point[0] + 1,
                abi=self._text(literal).strip('"') if literal is not None else "C",
                fn_count=fn_count,
            )
        )
        self.generic_visit(node)

    def visit_use_declaration(self, node: Node) -> None:
        argument = node.child_by_field_name("argument")
        line, column = self._position(node)
        self.imports.append(
            ImportStmt(
                path=_normalize_use_path(self._text(argument)),
                line=line,
                end_line=node.end_point[0] + 1,
                column=column,
                symbols=list(self._use_symbols(argument, "")),
            )
        )

    def _use_symbols(self, node: Node | None, prefix: str) -> Iterator[str]:
        if node is None:
            return
        if node.type == "identifier":
            yield self._text(node)
        elif node.type == "self":
            if prefix:
                yield prefix.split("::")[-1]
        elif node.type == "scoped_identifier":
            name = self._text(node.child_by_field_name("name"))
            if name == "self":
                yield _compact(self._text(node.child_by_field_name("path"))).split("::")[-1]
            else:
                yield name
        elif node.type == "use_as_clause":
            alias = self._text(node.child_by_field_name("alias"))
            if alias != "_":
                yield alias
        elif node.type == "scoped_use_list":
            path = _compact(self._text(node.child_by_field_name("path")))
            yield from self._use_symbols(node.child_by_field_name("list"), path)
        elif node.type == "use_list":
            for child in node.named_children:
                yield from self._use_symbols(child, prefix)

    # ── Expressions ──

    def visit_call_expression(self, node: Node) -> None:
        function = node.child_by_field_name("function")
        if function is not None and function.type == "generic_function":
            function = function.child_by_field_name("function")
        line, column = self._position(node)

        if function is not None and function.type == "field_expression":
            field = function.child_by_field_name("field")
            parent = node.parent
            chained_next = ""
            if (
                parent is not None
                and parent.type == "field_expression"
                and self._same(parent.child_by_field_name("value"), node)
            ):
                chained_next = self._text(parent.child_by_field_name("field"))
            args = self._text(node.child_by_field_name("arguments"))
            line, column = self._position(field) if field is not None else (line, column)
            self.method_calls.append(
                MethodCall(
                    name=self._text(field),
                    receiver=_compact(self._text(function.child_by_field_name("value"))),
                    line=line,
                    column=column,
                    args=args[1:-1] if args.startswith("(") else args,
                    chained_next=chained_next,
                    borrowed=parent is not None and parent.type == "reference_expression",
                    in_test=self._in_test,
                )
            )
        elif function is not None and function.type in ("scoped_identifier", "identifier"):
            self.path_calls.append(
                PathCall(path=_compact(self._text(function)), line=line, column=column, in_test=self._in_test)
            )
        self.generic_visit(node)

    def visit_macro_invocation(self, node: Node) -> None:
        name = _compact(self._text(node.child_by_field_name("macro"))).split("::")[-1]
        line, column = self._position(node)
        self.macros.append(MacroCall(name=name, line=line, column=column, in_test=self._in_test))
        self._token_tree_facts(next((c for c in node.children if c.type == "token_tree"), None))

    def visit_macro_definition(self, node: Node) -> None:
        line, column = self._position(node)
        self.macros.append(MacroCall(name="macro_rules", line=line, column=column, in_test=self._in_test))

    def visit_closure_expression(self, node: Node) -> None:
        params = node.child_by_field_name("parameters")
        body = node.child_by_field_name("body")
        body_lines = self._span_lines(body)
        self._closure_depth += 1
        line, column = self._position(node)
        param_nodes = params.named_children if params is not None else []
        for param in param_nodes:
            pattern = param.child_by_field_name("pattern") if param.type == "parameter" else param
            self._add_bindings(pattern, IdentifierKind.CLOSURE, body_lines)
        self.closures.append(
            Closure(
                line=line,
                column=column,
                param_count=len(param_nodes),
                depth=self._closure_depth,
                body_lines=body_lines,
            )
        )
        if body is not None:
            self.visit(body)
        self._closure_depth -= 1

    def visit_for_expression(self, node: Node) -> None:
        pattern = node.child_by_field_name("pattern")
        body = node.child_by_field_name("body")
        body_lines = self._span_lines(body)
        line, column = self._position(node)
        self._add_bindings(pattern, IdentifierKind.LOOP, body_lines)
        statements = []
        if body is not None:
            statements = [
                self._text(c).strip() for c in body.named_children
                if c.type not in ("line_comment", "block_comment")
            ]
        self.for_loops.append(
            ForLoop(
                line=line,
                column=column,
                pattern=self._text(pattern),
                iterable=_compact(self._text(node.child_by_field_name("value"))),
                body_lines=body_lines,
                statements=statements,
            )
        )
        self.visit_children_except(node, pattern)

    def visit_match_expression(self, node: Node) -> None:
        body = node.child_by_field_name("body")
        arms = [c for c in body.named_children if c.type == "match_arm"] if body is not None else []
        line, column = self._position(node)
        self.matches.append(
            MatchExpr(
                line=line,
                column=column,
                arm_patterns=[_compact(self._text(a.child_by_field_name("pattern"))) for a in arms],
                arm_values=[_compact(self._text(a.child_by_field_name("value"))) for a in arms],
            )
        )
        self.generic_visit(node)

    def visit_integer_literal(self, node: Node) -> None:
        text = self._text(node)
        value = parse_int_literal(text)
        if value is None:
            return
        parent = node.parent
        target = node
        if parent is not None and parent.type in ("unary_expression", "negative_literal"):
            if parent.children and parent.children[0].type == "-":
                value, target = -value, parent
        line, column = self._position(target)
        self.int_literals.append(
            IntLiteral(
                value=value,
                text=self._text(target),
                line=line,
                column=column,
                in_const=self._const_depth > 0,
            )
        )

    def visit_unsafe_block(self, node: Node) -> None:
        line, column = self._position(node)
        self.unsafe_sites.append(UnsafeSite(kind="block", line=line, column=column))
        self.generic_visit(node)

    def visit_async_block(self, node: Node) -> None:
        line, column = self._position(node)
        self.async_sites.append(AsyncSite(kind="async_block", line=line, column=column))
        self.generic_visit(node)

    def visit_await_expression(self, node: Node) -> None:
        line, column = self._position(node)
        self.async_sites.append(AsyncSite(kind="await", line=line, column=column))
        self.generic_visit(node)

    def visit_lifetime(self, node: Node) -> None:
        line, column = self._position(node)
        self.lifetimes.append(Lifetime(name=_compact(self._text(node)), line=line, column=column))

    # ── Types ──

    def _add_type(self, node: Node, kind: TypeUseKind, name: str = "") -> None:
        line, column = self._position(node)
        self.type_uses.append(
            TypeUse(
                kind=kind,
                name=name,
                line=line,
                column=column,
                in_parameter=(node.start_byte, node.end_byte) in self._parameter_types,
            )
        )

    def visit_reference_type(self, node: Node) -> None:
        self._add_type(node, TypeUseKind.REFERENCE)
        self.generic_visit(node)

    def visit_dynamic_type(self, node: Node) -> None:
        self._add_type(node, TypeUseKind.DYN, _compact(self._text(node.child_by_field_name("trait"))))
        self.generic_visit(node)

    def visit_pointer_type(self, node: Node) -> None:
        self._add_type(node, TypeUseKind.RAW_POINTER)
        self.generic_visit(node)

    def visit_array_type(self, node: Node) -> None:
        if node.child_by_field_name("length") is None:
            self._add_type(node, TypeUseKind.SLICE)
        self.generic_visit(node)

    def visit_generic_type(self, node: Node) -> None:
        base = node.child_by_field_name("type")
        if base is not None and base.type == "scoped_type_identifier":
            base = base.child_by_field_name("name")
        self._add_type(node, TypeUseKind.NAMED, self._text(base))
        self.generic_visit(node)

    def visit_type_identifier(self, node: Node) -> None:
        parent = node.parent
        if parent is None or parent.type not in _TYPE_DECLARATION_PARENTS:
            self._add_type(node, TypeUseKind.NAMED, self._text(node))


def _mask_source(source: bytes, ranges: list[tuple[int, int]]) -> str:
    """Decode the source with every masked range blanked, keeping line breaks."""
    pieces: list[str] = []
    cursor = 0
    for start, end in sorted(ranges):
        start = max(start, cursor)
        if end <= start:
            continue
        pieces.append(source[cursor:start].decode("utf-8", errors="replace"))
        chunk = source[start:end].decode("utf-8", errors="replace")
        pieces.append(re.sub(r"[^\n]", " ", chunk))
        cursor = end
    pieces.append(source[cursor:].decode("utf-8", errors="replace"))
    return "".join(pieces)


def _depth_timeline(block_ranges: list[tuple[int, int]], line_count: int) -> list[int]:
    """Number of multi-line blocks strictly enclosing each line."""
    diff = [0] * (line_count + 2)
    for start_row, end_row in block_ranges:
        if end_row - start_row < 2:
            continue
        diff[start_row + 1] += 1
        diff[min(end_row, line_count + 1)] -= 1
    depths: list[int] = []
    running = 0
    for row in range(line_count):
        running += diff[row]
        depths.append(running)
    return depths


def _finish_function(raw: dict[str, Any], depths: list[int]) -> FunctionSpan:
    body_rows = raw.pop("body_rows")
    max_nesting = 0
    deepest_line = raw["start_line"]
    body_lines = 0
    if body_rows is not None:
        start_row, end_row = body_rows
        body_lines = max(end_row - start_row - 1, 1)
        base = depths[start_row] if start_row < len(depths) else 0
        for row in range(start_row + 1, min(end_row, len(depths))):
            level = depths[row] - base - 1
            if level > max_nesting:
                max_nesting, deepest_line = level, row + 1
    return FunctionSpan(body_lines=body_lines, max_nesting=max_nesting, deepest_line=deepest_line, **raw)


def _commented_code_blocks(
    lines: list[str], code_lines: list[str], min_block: int
) -> list[CommentedCodeBlock]:
    blocks: list[CommentedCodeBlock] = []
    run_start: int | None = None
    for row, line in enumerate(lines):
        stripped = line.strip()
        is_plain_comment = (
            stripped.startswith("//")
            and not stripped.startswith(("///", "//!"))
            and row < len(code_lines)
            and not code_lines[row].strip()
        )
        if is_plain_comment and looks_like_code(stripped[2:]):
            if run_start is None:
                run_start = row
            continue
        if run_start is not None and row - run_start >= min_block:
            blocks.append(CommentedCodeBlock(start_line=run_start + 1, end_line=row))
        run_start = None
    if run_start is not None and len(lines) - run_start >= min_block:
        blocks.append(CommentedCodeBlock(start_line=run_start + 1, end_line=len(lines)))
    return blocks


def _describe_errors(root: Node) -> list[str]:
    errors: list[str] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            kind = "missing token" if node.is_missing else "syntax error"
            errors.append(f"{kind} at line {node.start_point[0] + 1}")
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    return errors


def build_source_model(text: str, path: str, config: AnalysisConfig | None = None) -> SourceModel:
    """
    Build the read-only Source Model for one file.

    Args:
        text: Decoded file contents.
        path: File path reported on every fact and issue.
        config: Thresholds; only `min_commented_block` is used here.

    Returns:
        SourceModel. Syntax errors are recorded in `parse_errors` and never raised.
    """
    config = config or AnalysisConfig()
    lines = _split_lines(text)
    # tree-sitter parsers are not thread-safe; one per call.
    tree, source = RustParser().parse(text)

    parse_errors: list[str] = []
    if tree.root_node.has_error:
        parse_errors.extend(_describe_errors(tree.root_node))

    visitor = _RustVisitor(source)
    try:
        visitor.visit(tree.root_node)
    except RecursionError:
        parse_errors.append("syntax tree too deep; structural facts are incomplete")
    visitor.collect_patterns(tree.root_node)

    code_lines = _split_lines(_mask_source(source, visitor.masked_ranges))
    code_lines += [""] * (len(lines) - len(code_lines))
    depths = _depth_timeline(visitor.block_ranges, len(lines))

    return SourceModel(
        source=SourceFile(path=path, lines=lines),
        code_lines=code_lines[: len(lines)],
        identifiers=visitor.identifiers,
        functions=[_finish_function(raw, depths) for raw in visitor.raw_functions],
        depths=depths,
        imports=visitor.imports,
        comments=visitor.comments,
        commented_code=_commented_code_blocks(lines, code_lines, config.min_commented_block),
        method_calls=visitor.method_calls,
        path_calls=visitor.path_calls,
        macros=visitor.macros,
        closures=visitor.closures,
        matches=visitor.matches,
        for_loops=visitor.for_loops,
        int_literals=visitor.int_literals,
        type_uses=visitor.type_uses,
        lifetimes=visitor.lifetimes,
        unsafe_sites=visitor.unsafe_sites,
        extern_blocks=visitor.extern_blocks,
        traits=visitor.traits,
        generics=visitor.generics,
        modules=visitor.modules,
        patterns=visitor.patterns,
        async_sites=visitor.async_sites,
        attributes=visitor.attributes,
        test_ranges=visitor.test_ranges,
        parse_errors=parse_errors,
    )
