"""
Source Model Data Models — Structured facts extracted from one Rust file.

These models are the output of the source model builder and the only
input the rules read.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

_FROZEN = {"frozen": True}


class SourceFile(BaseModel):
    """Raw file contents split into a 1-indexed line table."""

    path: str
    lines: list[str] = Field(default_factory=list)

    model_config = _FROZEN

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, number: int) -> str:
        """Text of a 1-based line, or '' when out of range."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""


class IdentifierKind(str, Enum):
    LET = "let"
    PARAMETER = "parameter"
    FIELD = "field"
    FUNCTION = "function"
    LOOP = "loop"
    CLOSURE = "closure"
    CONST = "const"


class Identifier(BaseModel):
    """A binding or declaration site."""

    name: str
    line: int
    column: int
    kind: IdentifierKind
    scope_lines: int = Field(
        default=0, description="Lines spanned by the owning loop/closure/function body"
    )
    in_test: bool = False

    model_config = _FROZEN


class FunctionSpan(BaseModel):
    """A function or method with a body."""

    name: str
    start_line: int
    end_line: int
    body_lines: int = 0
    parameter_count: int = 0
    is_async: bool = False
    is_unsafe: bool = False
    is_test: bool = False
    abi: str | None = Field(default=None, description="ABI string of `extern \"C\" fn`")
    returns: str = Field(default="", description="Return type text")
    generic_params: list[str] = Field(default_factory=list)
    control_flow_count: int = 0
    max_nesting: int = Field(default=0, description="Deepest control nesting in the body")
    deepest_line: int = 0
    side_effect_groups: int = Field(
        default=0, description="Blank-line separated statement groups with side effects"
    )

    model_config = _FROZEN

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


class ImportStmt(BaseModel):
    """A `use` declaration."""

    path: str = Field(..., description="Use tree text with layout whitespace removed, e.g. 'std::io::{Read,Write}'")
    line: int
    end_line: int = 0
    column: int = 1
    symbols: list[str] = Field(default_factory=list, description="Names brought into scope")

    model_config = _FROZEN


class CommentKind(str, Enum):
    LINE = "line"
    BLOCK = "block"
    DOC = "doc"


class CommentSpan(BaseModel):
    start_line: int
    end_line: int
    kind: CommentKind
    text: str

    model_config = _FROZEN


class CommentedCodeBlock(BaseModel):
    """Consecutive `//` lines that read like code."""

    start_line: int
    end_line: int

    model_config = _FROZEN

    @property
    def size(self) -> int:
        return self.end_line - self.start_line + 1


class MethodCall(BaseModel):
    """`receiver.name(args)`; also recovered from inside macro arguments."""

    name: str
    receiver: str
    line: int
    column: int
    args: str = ""
    chained_next: str = Field(default="", description="Method called on this call's result")
    borrowed: bool = Field(default=False, description="Call result is immediately borrowed with &")
    in_macro: bool = False
    in_test: bool = False

    model_config = _FROZEN


class PathCall(BaseModel):
    """`Type::function(args)` call, e.g. `Vec::new()`."""

    path: str
    line: int
    column: int
    in_test: bool = False

    model_config = _FROZEN


class MacroCall(BaseModel):
    name: str
    line: int
    column: int
    in_test: bool = False

    model_config = _FROZEN


class Closure(BaseModel):
    line: int
    column: int
    param_count: int
    depth: int = Field(..., description="1 for a closure not nested in another closure")
    body_lines: int

    model_config = _FROZEN


class MatchExpr(BaseModel):
    line: int
    column: int
    arm_patterns: list[str] = Field(default_factory=list)
    arm_values: list[str] = Field(default_factory=list)

    model_config = _FROZEN


class ForLoop(BaseModel):
    line: int
    column: int
    pattern: str
    iterable: str
    body_lines: int
    statements: list[str] = Field(default_factory=list, description="Top-level body statements")

    model_config = _FROZEN


class IntLiteral(BaseModel):
    value: int
    text: str
    line: int
    column: int
    in_const: bool = Field(default=False, description="Inside const/static/attribute/discriminant")

    model_config = _FROZEN


class TypeUseKind(str, Enum):
    REFERENCE = "reference"
    DYN = "dyn"
    SLICE = "slice"
    RAW_POINTER = "raw_pointer"
    NAMED = "named"


class TypeUse(BaseModel):
    kind: TypeUseKind
    name: str = Field(default="", description="Outer type name for named types, e.g. 'String'")
    line: int
    column: int
    in_parameter: bool = False

    model_config = _FROZEN


class Lifetime(BaseModel):
    name: str
    line: int
    column: int

    model_config = _FROZEN


class UnsafeSite(BaseModel):
    kind: str = Field(..., description="'block', 'fn', 'impl' or 'trait'")
    line: int
    column: int

    model_config = _FROZEN


class ExternBlock(BaseModel):
    line: int
    abi: str = ""
    fn_count: int = 0

    model_config = _FROZEN


class TraitDef(BaseModel):
    name: str
    line: int
    item_count: int
    generic_count: int

    model_config = _FROZEN


class GenericList(BaseModel):
    owner: str
    line: int
    type_params: list[str] = Field(default_factory=list)
    lifetime_params: list[str] = Field(default_factory=list)
    const_params: list[str] = Field(default_factory=list)

    model_config = _FROZEN

    @property
    def count(self) -> int:
        return len(self.type_params) + len(self.lifetime_params) + len(self.const_params)


class DestructuringPattern(BaseModel):
    kind: str = Field(..., description="'tuple' or 'slice'")
    line: int
    column: int

    model_config = _FROZEN


class ModuleDecl(BaseModel):
    name: str
    line: int
    depth: int
    inline: bool = True

    model_config = _FROZEN


class AsyncSite(BaseModel):
    kind: str = Field(..., description="'async_fn', 'async_block' or 'await'")
    line: int
    column: int

    model_config = _FROZEN


class Attribute(BaseModel):
    text: str = Field(..., description="Attribute source with whitespace removed, e.g. '#[repr(C)]'")
    line: int

    model_config = _FROZEN


class SourceModel(BaseModel):
    """Complete read-only structural view of one parsed file."""

    source: SourceFile
    code_lines: list[str] = Field(
        default_factory=list, description="Lines with string and comment content blanked"
    )
    identifiers: list[Identifier] = Field(default_factory=list)
    functions: list[FunctionSpan] = Field(default_factory=list)
    depths: list[int] = Field(default_factory=list, description="Block depth per line, index 0 = line 1")
    imports: list[ImportStmt] = Field(default_factory=list)
    comments: list[CommentSpan] = Field(default_factory=list)
    commented_code: list[CommentedCodeBlock] = Field(default_factory=list)
    method_calls: list[MethodCall] = Field(default_factory=list)
    path_calls: list[PathCall] = Field(default_factory=list)
    macros: list[MacroCall] = Field(default_factory=list)
    closures: list[Closure] = Field(default_factory=list)
    matches: list[MatchExpr] = Field(default_factory=list)
    for_loops: list[ForLoop] = Field(default_factory=list)
    int_literals: list[IntLiteral] = Field(default_factory=list)
    type_uses: list[TypeUse] = Field(default_factory=list)
    lifetimes: list[Lifetime] = Field(default_factory=list)
    unsafe_sites: list[UnsafeSite] = Field(default_factory=list)
    extern_blocks: list[ExternBlock] = Field(default_factory=list)
    traits: list[TraitDef] = Field(default_factory=list)
    generics: list[GenericList] = Field(default_factory=list)
    modules: list[ModuleDecl] = Field(default_factory=list)
    patterns: list[DestructuringPattern] = Field(
        default_factory=list, description="Tuple and slice patterns in source order"
    )
    async_sites: list[AsyncSite] = Field(default_factory=list)
    attributes: list[Attribute] = Field(default_factory=list)
    test_ranges: list[tuple[int, int]] = Field(
        default_factory=list, description="Line ranges of #[test] fns and #[cfg(test)] modules"
    )
    parse_errors: list[str] = Field(default_factory=list, description="Non-fatal parse warnings")

    model_config = _FROZEN

    @property
    def path(self) -> str:
        return self.source.path

    @property
    def line_count(self) -> int:
        return self.source.line_count

    def depth_at(self, line: int) -> int:
        if 1 <= line <= len(self.depths):
            return self.depths[line - 1]
        return 0

    def enclosing_function(self, line: int) -> FunctionSpan | None:
        """Innermost function whose span contains the line."""
        best: FunctionSpan | None = None
        for func in self.functions:
            if func.contains(line) and (best is None or func.start_line >= best.start_line):
                best = func
        return best

    def in_test(self, line: int) -> bool:
        return any(start <= line <= end for start, end in self.test_ranges)

    def code_text(self) -> str:
        return "\n".join(self.code_lines)
