"""
Tests for the Source Model builder — verify structural facts extracted from Rust.
"""

from hunter.core.source_model import looks_like_code, parse_int_literal
from hunter.models.source_models import CommentKind, IdentifierKind, TypeUseKind


def test_empty_file(model_of):
    model = model_of("")
    assert model.line_count == 0
    assert model.identifiers == []
    assert model.functions == []
    assert model.parse_errors == []


def test_line_table_and_function_span(model_of):
    model = model_of("fn main() {}\n")
    assert model.line_count == 1
    assert model.source.line(1) == "fn main() {}"
    assert model.source.line(2) == ""
    assert len(model.functions) == 1
    func = model.functions[0]
    assert func.name == "main"
    assert func.start_line == 1
    assert func.end_line == 1
    assert func.max_nesting == 0


def test_depths_and_nesting(model_of):
    code = (
        "fn outer() {\n"
        "    if true {\n"
        "        call();\n"
        "    }\n"
        "}\n"
    )
    model = model_of(code)
    assert model.depths == [0, 1, 2, 1, 0]
    assert model.depth_at(3) == 2
    assert model.depth_at(99) == 0
    func = model.functions[0]
    assert func.max_nesting == 1
    assert func.deepest_line == 3
    assert func.control_flow_count == 1


def test_function_modifiers(model_of):
    code = (
        "pub async fn load(a: i32, b: i32) -> i32 {\n"
        "    a + b\n"
        "}\n"
        "unsafe fn poke() {}\n"
    )
    model = model_of(code)
    load, poke = model.functions
    assert load.is_async and not load.is_unsafe
    assert load.parameter_count == 2
    assert load.returns == "i32"
    assert poke.is_unsafe
    assert [s.kind for s in model.async_sites] == ["async_fn"]
    assert [s.kind for s in model.unsafe_sites] == ["fn"]


def test_identifier_kinds(model_of):
    code = (
        "struct Point { x: i32 }\n"
        "const LIMIT: u32 = 3;\n"
        "fn walk(step: i32) {\n"
        "    let (first, mut second) = (1, 2);\n"
        "    for item in 0..step {}\n"
        "    let double = |value| value * 2;\n"
        "}\n"
    )
    model = model_of(code)
    kinds = {i.name: i.kind for i in model.identifiers}
    assert kinds["x"] == IdentifierKind.FIELD
    assert kinds["LIMIT"] == IdentifierKind.CONST
    assert kinds["walk"] == IdentifierKind.FUNCTION
    assert kinds["step"] == IdentifierKind.PARAMETER
    assert kinds["first"] == IdentifierKind.LET
    assert kinds["second"] == IdentifierKind.LET
    assert kinds["item"] == IdentifierKind.LOOP
    assert kinds["double"] == IdentifierKind.LET
    assert kinds["value"] == IdentifierKind.CLOSURE


def test_struct_pattern_bindings_skip_type_names(model_of):
    model = model_of("fn f(p: Point) {\n    let Point { x, y: other } = p;\n}\n")
    names = [i.name for i in model.identifiers if i.kind == IdentifierKind.LET]
    assert names == ["x", "other"]


def test_strings_and_comments_are_masked(model_of):
    code = 'fn f() {\n    let s = "call.unwrap()"; // trailing .unwrap()\n}\n'
    model = model_of(code)
    assert "unwrap" not in model.code_lines[1]
    assert model.code_lines[1].startswith("    let s =")
    assert len(model.code_lines[1]) == len(model.source.lines[1])
    assert len(model.comments) == 1
    assert model.comments[0].kind == CommentKind.LINE


def test_doc_comments(model_of):
    model = model_of("/// Documented.\nfn f() {}\n")
    assert model.comments[0].kind == CommentKind.DOC


def test_method_calls_inside_macros_are_recovered(model_of):
    code = 'fn f(x: Option<i32>) {\n    println!("{}", x.unwrap());\n}\n'
    model = model_of(code)
    unwraps = [c for c in model.method_calls if c.name == "unwrap"]
    assert len(unwraps) == 1
    assert unwraps[0].in_macro
    assert unwraps[0].receiver == "x"
    assert unwraps[0].line == 2
    assert [m.name for m in model.macros] == ["println"]


def test_method_call_chain(model_of):
    model = model_of("fn f(name: &String) -> usize {\n    name.clone().len()\n}\n")
    clone = next(c for c in model.method_calls if c.name == "clone")
    assert clone.receiver == "name"
    assert clone.chained_next == "len"


def test_path_calls(model_of):
    model = model_of("fn f() {\n    let v: Vec<i32> = Vec::new();\n    helper();\n}\n")
    assert [c.path for c in model.path_calls] == ["Vec::new", "helper"]


def test_test_ranges(model_of):
    code = (
        "fn real() {}\n"
        "\n"
        "#[cfg(test)]\n"
        "mod tests {\n"
        "    #[test]\n"
        "    fn checks() {\n"
        "        let n = 1;\n"
        "    }\n"
        "}\n"
    )
    model = model_of(code)
    assert model.in_test(7)
    assert not model.in_test(1)
    by_name = {i.name: i for i in model.identifiers}
    assert by_name["n"].in_test
    assert not by_name["real"].in_test
    checks = next(f for f in model.functions if f.name == "checks")
    assert checks.is_test


def test_integer_literals(model_of):
    code = "const MAX: u32 = 500;\nfn f() {\n    let a = 0xFF;\n    let b = -5;\n}\n"
    model = model_of(code)
    literals = {(lit.value, lit.in_const) for lit in model.int_literals}
    assert (500, True) in literals
    assert (255, False) in literals
    assert (-5, False) in literals


def test_parse_int_literal():
    assert parse_int_literal("42") == 42
    assert parse_int_literal("1_000u32") == 1000
    assert parse_int_literal("0xFF") == 255
    assert parse_int_literal("0b101") == 5
    assert parse_int_literal("0o17") == 15
    assert parse_int_literal("007") == 7
    assert parse_int_literal("abc") is None


def test_use_symbols(model_of):
    code = (
        "use std::collections::{HashMap, HashSet as Set};\n"
        "use std::io::{self, Write};\n"
        "use std::fmt;\n"
    )
    model = model_of(code)
    assert [imp.symbols for imp in model.imports] == [["HashMap", "Set"], ["io", "Write"], ["fmt"]]
    assert model.imports[0].path == "std::collections::{HashMap,HashSet as Set}"


def test_generic_parameters(model_of):
    model = model_of("fn pick<'a, T: Clone, const N: usize>(x: &'a T) {}\n")
    generics = model.generics[0]
    assert generics.owner == "pick"
    assert generics.type_params == ["T"]
    assert generics.lifetime_params == ["'a"]
    assert generics.const_params == ["N"]
    assert generics.count == 3


def test_parameter_types(model_of):
    model = model_of("fn f(a: String, b: &Vec<i32>, c: &mut Vec<i32>, d: Vec<String>) {}\n")
    in_params = [(t.name, t.line) for t in model.type_uses if t.kind == TypeUseKind.NAMED and t.in_parameter]
    names = [name for name, _ in in_params]
    assert names.count("String") == 1
    assert names.count("Vec") == 2


def test_commented_code_blocks(model_of):
    code = (
        "fn main() {\n"
        "    // let x = compute();\n"
        "    // let y = x + 1;\n"
        "    // println!(\"{}\", y);\n"
        "    // This explains the next call in prose\n"
        "    run();\n"
        "}\n"
    )
    model = model_of(code)
    assert len(model.commented_code) == 1
    block = model.commented_code[0]
    assert (block.start_line, block.end_line, block.size) == (2, 4, 3)


def test_looks_like_code():
    assert looks_like_code("let x = compute();")
    assert looks_like_code("}")
    assert looks_like_code('println!("{}", y);')
    assert not looks_like_code("if the input is empty we bail out")
    assert not looks_like_code("TODO: handle this (later)")
    assert not looks_like_code("")


def test_syntax_errors_are_recorded_not_raised(model_of):
    model = model_of("fn broken( {\n\nfn fine() {}\n")
    assert model.parse_errors
    assert any(f.name == "fine" for f in model.functions) or model.line_count == 3


def test_unsafe_and_ffi_facts(model_of):
    code = (
        'extern "C" {\n'
        "    fn abs(input: i32) -> i32;\n"
        "}\n"
        "fn f(p: *const u8) {\n"
        "    unsafe { abs(1); }\n"
        "}\n"
    )
    model = model_of(code)
    assert len(model.extern_blocks) == 1
    assert model.extern_blocks[0].abi == "C"
    assert model.extern_blocks[0].fn_count == 1
    assert [s.kind for s in model.unsafe_sites] == ["block"]
    assert any(t.kind == TypeUseKind.RAW_POINTER for t in model.type_uses)


def test_modules_depth(model_of):
    model = model_of("mod a {\n    mod b {\n    }\n}\nmod c;\n")
    assert [(m.name, m.depth, m.inline) for m in model.modules] == [
        ("a", 1, True),
        ("b", 2, True),
        ("c", 1, False),
    ]


def test_destructuring_patterns(model_of):
    code = (
        "fn split(pair: (u8, u8), items: &[u8]) {\n"
        "    let (a, b) = pair;\n"
        "    if let [first, ..] = items {}\n"
        "    for (i, x) in items.iter().enumerate() {}\n"
        "    match pair { (0, _) => {}, _ => {} }\n"
        "}\n"
    )
    model = model_of(code)
    assert [(p.kind, p.line, p.column) for p in model.patterns] == [
        ("tuple", 2, 9),
        ("slice", 3, 12),
        ("tuple", 4, 9),
        ("tuple", 5, 18),
    ]
