"""
Tests for the individual detection rules — one focused snippet per rule.
"""

import pytest

from hunter.config import AnalysisConfig
from hunter.core.rules import (
    abbreviation_abuse,
    async_abuse,
    box_abuse,
    channel_abuse,
    code_duplication,
    commented_code,
    complex_closure,
    dead_code,
    deep_nesting,
    dyn_trait_abuse,
    ffi_abuse,
    file_too_long,
    generic_abuse,
    god_function,
    hungarian_notation,
    import_chaos,
    iterator_abuse,
    lifetime_abuse,
    long_function,
    macro_abuse,
    magic_number,
    match_abuse,
    meaningless_naming,
    module_complexity,
    module_nesting,
    panic_abuse,
    pattern_matching_abuse,
    println_debugging,
    reference_abuse,
    single_letter_variable,
    slice_abuse,
    string_abuse,
    terrible_naming,
    todo_comment,
    trait_complexity,
    unnecessary_clone,
    unsafe_abuse,
    unwrap_abuse,
    vec_abuse,
)
from hunter.models.rule_models import Severity
from hunter.models.source_models import PathCall


def _summary(issues):
    return [(i.line, i.message_key, i.severity) for i in issues]


def _fn_with_body(name: str, lines: int) -> str:
    return f"fn {name}() {{\n" + "    call();\n" * lines + "}\n"


# --- Naming ---

def test_terrible_naming(model_of):
    model = model_of("fn data() {\n    let tmp = 1;\n}\n")
    issues = terrible_naming.check(model)
    assert _summary(issues) == [
        (1, "terrible-naming.function", Severity.SPICY),
        (2, "terrible-naming.binding", Severity.MILD),
    ]
    assert issues[1].data == {"name": "tmp"}
    assert issues[0].file == "sample.rs"


def test_single_letter_variable(model_of):
    code = (
        "fn compute(q: i32) -> i32 {\n"
        "    let n = q * 2;\n"
        "    for i in 0..n {\n"
        "        call(i);\n"
        "    }\n"
        "    n\n"
        "}\n"
    )
    issues = single_letter_variable.check(model_of(code))
    by_name = {i.data["name"]: i for i in issues}
    assert set(by_name) == {"q", "n"}
    assert by_name["q"].severity == Severity.SPICY
    assert by_name["q"].message_key == "single-letter-variable.parameter"
    assert by_name["n"].severity == Severity.MILD


def test_meaningless_naming(model_of):
    issues = meaningless_naming.check(model_of("fn foo() {\n    let sample = 2;\n}\n"))
    assert [(i.data["name"], i.severity) for i in issues] == [
        ("foo", Severity.SPICY),
        ("sample", Severity.MILD),
    ]


def test_hungarian_notation(model_of):
    code = "fn run() {\n    let strName = 1;\n    let g_count = 2;\n    let set_value = 3;\n}\n"
    issues = hungarian_notation.check(model_of(code))
    assert [(i.data["name"], i.data["prefix"]) for i in issues] == [("strName", "str"), ("g_count", "g")]


def test_abbreviation_abuse(model_of):
    code = "fn run() {\n    let cfg = 1;\n    let usr_name = 2;\n}\n"
    issues = abbreviation_abuse.check(model_of(code))
    assert [(i.data["name"], i.data["suggestion"]) for i in issues] == [
        ("cfg", "config"),
        ("usr_name", "user"),
    ]


def test_abbreviated_function_names_are_allowed(model_of):
    assert abbreviation_abuse.check(model_of("fn init() {}\n")) == []


# --- Complexity ---

NESTED_CODE = '''fn scan(values: &[i32]) {
    for value in values {
        if *value > 0 {
            if *value > 10 {
                if *value > 20 {
                    call(*value);
                }
            }
        }
    }
}
'''


def test_deep_nesting(model_of, config):
    issues = deep_nesting.check(model_of(NESTED_CODE), config)
    assert _summary(issues) == [(6, "deep-nesting.too-deep", Severity.MILD)]
    assert issues[0].data == {"function": "scan", "depth": 4, "threshold": 3}


def test_deep_nesting_severity_follows_threshold(model_of):
    strict = AnalysisConfig(nesting_threshold=1)
    issues = deep_nesting.check(model_of(NESTED_CODE), strict)
    assert issues[0].severity == Severity.SPICY


@pytest.mark.parametrize(
    "lines, expected",
    [(50, None), (60, Severity.MILD), (80, Severity.SPICY), (101, Severity.NUCLEAR)],
)
def test_long_function(model_of, config, lines, expected):
    issues = long_function.check(model_of(_fn_with_body("busy", lines)), config)
    if expected is None:
        assert issues == []
    else:
        assert [i.severity for i in issues] == [expected]
        assert issues[0].data["lines"] == lines


def test_god_function(model_of, config):
    params = ", ".join(f"{name}: i32" for name in "abcdefgh")
    blocks = "\n".join(f"    if {name} > 0 {{\n        call({name});\n    }}\n" for name in "abcdefgh")
    code = f"fn everything({params}) {{\n{blocks}}}\n"
    model = model_of(code)
    func = model.functions[0]
    assert func.parameter_count == 8
    assert func.control_flow_count == 8
    assert god_function.complexity_score(func, config.function_length_threshold) > 15

    issues = god_function.check(model, config)
    assert len(issues) == 1
    assert issues[0].message_key == "god-function.too-much"
    assert issues[0].data["function"] == "everything"


def test_small_functions_are_not_god_functions(model_of, config):
    assert god_function.check(model_of("fn tiny(a: i32) {\n    if a > 0 {}\n}\n"), config) == []


# --- Duplication ---

def test_code_duplication(model_of, config):
    body = (
        "    let trimmed = input.trim();\n"
        "    let upper = trimmed.to_uppercase();\n"
        "    let count = upper.len();\n"
        "    record(count);\n"
        "    store(upper);\n"
    )
    code = f"fn first(input: &str) {{\n{body}}}\n\nfn second(input: &str) {{\n{body}}}\n"
    issues = code_duplication.check(model_of(code), config)
    assert _summary(issues) == [(2, "code-duplication.block", Severity.MILD)]
    assert issues[0].data == {"block_size": 5, "instances": 2, "lines": [2, 10]}


def test_short_files_have_no_duplication(model_of, config):
    assert code_duplication.check(model_of("fn main() {}\n"), config) == []


# --- Rust basics ---

def test_unwrap_abuse(model_of):
    code = (
        "fn read(value: Option<i32>, other: Option<i32>) -> i32 {\n"
        "    if other.is_some() {\n"
        "        return other.unwrap();\n"
        "    }\n"
        '    let fallback = value.expect("value");\n'
        "    value.unwrap() + fallback\n"
        "}\n"
    )
    issues = unwrap_abuse.check(model_of(code))
    assert _summary(issues) == [
        (5, "unwrap-abuse.expect", Severity.SPICY),
        (6, "unwrap-abuse.unwrap", Severity.NUCLEAR),
    ]


def test_unwrap_in_tests_is_mild(model_of):
    code = (
        "#[cfg(test)]\n"
        "mod tests {\n"
        "    #[test]\n"
        "    fn works() {\n"
        "        Some(1).unwrap();\n"
        "    }\n"
        "}\n"
    )
    issues = unwrap_abuse.check(model_of(code))
    assert [i.severity for i in issues] == [Severity.MILD]


def test_unwrap_inside_macro_arguments(model_of):
    code = 'fn show(value: Option<i32>) {\n    println!("{}", value.unwrap());\n}\n'
    issues = unwrap_abuse.check(model_of(code))
    assert _summary(issues) == [(2, "unwrap-abuse.unwrap", Severity.NUCLEAR)]


def test_unnecessary_clone(model_of):
    code = (
        "fn sizes(name: &String, label: &String) -> usize {\n"
        "    let size = name.clone().len();\n"
        "    take(&label.clone());\n"
        "    size\n"
        "}\n"
    )
    issues = unnecessary_clone.check(model_of(code))
    assert _summary(issues) == [
        (2, "unnecessary-clone.borrow-only", Severity.SPICY),
        (3, "unnecessary-clone.reference", Severity.SPICY),
    ]


def test_string_abuse(model_of):
    code = "fn greet(name: String) {\n" + "    take(name.to_string());\n" * 6 + "}\n"
    issues = string_abuse.check(model_of(code))
    assert _summary(issues) == [
        (1, "string-abuse.parameter", Severity.MILD),
        (2, "string-abuse.conversions", Severity.SPICY),
    ]
    assert issues[1].data == {"count": 6, "limit": 5}


def test_vec_abuse(model_of):
    code = (
        "fn total(values: Vec<i32>, view: &Vec<i32>, out: &mut Vec<i32>) {\n"
        + "    take(Vec::new());\n" * 4
        + "}\n"
    )
    issues = vec_abuse.check(model_of(code))
    keys = [i.message_key for i in issues]
    assert keys.count("vec-abuse.parameter") == 2
    constructions = [i for i in issues if i.message_key == "vec-abuse.constructions"]
    assert len(constructions) == 1
    assert constructions[0].line == 2
    assert constructions[0].data["count"] == 4


def test_iterator_abuse(model_of):
    code = (
        "fn copy(values: &[i32]) -> Vec<i32> {\n"
        "    let mut out = Vec::new();\n"
        "    for value in values {\n"
        "        out.push(*value);\n"
        "    }\n"
        "    for index in 0..values.len() {\n"
        "        show(values[index]);\n"
        "    }\n"
        "    out\n"
        "}\n"
    )
    issues = iterator_abuse.check(model_of(code))
    assert _summary(issues) == [
        (3, "iterator-abuse.manual-collect", Severity.MILD),
        (6, "iterator-abuse.index-loop", Severity.MILD),
    ]


def test_match_abuse(model_of):
    code = (
        "fn show(value: Option<i32>) {\n"
        "    match value {\n"
        "        Some(inner) => report(inner),\n"
        "        None => {}\n"
        "    }\n"
        "}\n"
    )
    issues = match_abuse.check(model_of(code))
    assert _summary(issues) == [(2, "match-abuse.if-let", Severity.MILD)]


def test_match_with_real_arms_is_fine(model_of):
    code = (
        "fn show(value: Option<i32>) {\n"
        "    match value {\n"
        "        Some(inner) => report(inner),\n"
        "        None => report(0),\n"
        "    }\n"
        "}\n"
    )
    assert match_abuse.check(model_of(code)) == []


def test_panic_abuse(model_of):
    code = (
        "fn check(limit: i32) {\n"
        '    if limit > 1 { panic!("one"); }\n'
        '    if limit > 2 { panic!("two"); }\n'
        '    if limit > 3 { panic!("three"); }\n'
        "}\n"
    )
    issues = panic_abuse.check(model_of(code))
    assert [i.severity for i in issues].count(Severity.SPICY) == 3
    excessive = [i for i in issues if i.message_key == "panic-abuse.excessive"]
    assert len(excessive) == 1
    assert excessive[0].severity == Severity.NUCLEAR
    assert excessive[0].line == 2


# --- Advanced Rust ---

def test_complex_closure(model_of):
    code = (
        "fn run() {\n"
        "    let outer = |x: i32| {\n"
        "        let middle = |y: i32| {\n"
        "            let inner = |z: i32| z + 1;\n"
        "            inner(y)\n"
        "        };\n"
        "        middle(x)\n"
        "    };\n"
        "    let wide = |a, b, c, d, e, f| a + b + c + d + e + f;\n"
        "}\n"
    )
    issues = complex_closure.check(model_of(code))
    assert _summary(issues) == [
        (4, "complex-closure.nested", Severity.SPICY),
        (9, "complex-closure.too-many-params", Severity.MILD),
    ]


def test_lifetime_abuse(model_of):
    code = (
        "fn pick<'a, 'b, 'c, 'd>(a: &'a str, b: &'b str, c: &'c str, d: &'d str) -> &'static str {\n"
        '    "fixed"\n'
        "}\n"
    )
    issues = lifetime_abuse.check(model_of(code))
    too_many = [i for i in issues if i.message_key == "lifetime-abuse.too-many-params"]
    assert len(too_many) == 1
    assert too_many[0].data["lifetimes"] == ["'a", "'b", "'c", "'d"]
    assert all(i.data.get("name") != "'static" for i in issues)


def test_trait_complexity(model_of):
    methods = "".join(f"    fn method{n}(&self);\n" for n in range(11))
    issues = trait_complexity.check(model_of(f"trait Store {{\n{methods}}}\n"))
    assert _summary(issues) == [(1, "trait-complexity.too-many-items", Severity.SPICY)]
    assert issues[0].data == {"trait": "Store", "items": 11}


def test_generic_abuse(model_of):
    issues = generic_abuse.check(model_of("fn big<T, U, V, E, K, W>() {}\n"))
    assert [i.message_key for i in issues] == ["generic-abuse.too-many-params", "generic-abuse.cryptic-name"]
    assert issues[1].data["name"] == "W"


# --- Rust features ---

def test_unsafe_abuse_blocks(model_of):
    code = "fn poke() {\n" + "".join(f"    unsafe {{ step{n}(); }}\n" for n in range(4)) + "}\n"
    issues = unsafe_abuse.check(model_of(code))
    assert [i.severity for i in issues] == [Severity.SPICY] * 3 + [Severity.NUCLEAR]
    assert [i.data["index"] for i in issues] == [1, 2, 3, 4]


def test_dangerous_operations():
    assert unsafe_abuse.is_dangerous(PathCall(path="std::ptr::write", line=1, column=1))
    assert unsafe_abuse.is_dangerous(PathCall(path="mem::transmute", line=1, column=1))
    assert not unsafe_abuse.is_dangerous(PathCall(path="ptr::write_bytes", line=1, column=1))
    assert not unsafe_abuse.is_dangerous(PathCall(path="my_write", line=1, column=1))


def test_ffi_abuse(model_of):
    code = (
        'extern "C" { fn first(); }\n'
        'extern "C" { fn second(); }\n'
        'extern "C" { fn third(); }\n'
        "fn load() {\n"
        '    let lib = libloading::Library::new("plugin.so");\n'
        "}\n"
    )
    issues = ffi_abuse.check(model_of(code))
    assert _summary(issues) == [
        (3, "ffi-abuse.extern-blocks", Severity.SPICY),
        (5, "ffi-abuse.dynamic-loading", Severity.SPICY),
    ]


def test_async_abuse_blocking_call(model_of):
    code = (
        "async fn fetch() {\n"
        "    std::thread::sleep(pause());\n"
        "}\n"
        "fn wait() {\n"
        "    std::thread::sleep(pause());\n"
        "}\n"
    )
    issues = async_abuse.check(model_of(code))
    assert _summary(issues) == [(2, "async-abuse.blocking-call", Severity.SPICY)]
    assert issues[0].data == {"call": "std::thread::sleep", "function": "fetch"}


def test_macro_abuse(model_of):
    definitions = "".join(f"macro_rules! rule{n} {{ () => {{}}; }}\n" for n in range(4))
    calls = "fn run() {\n" + "    custom!();\n" * 11 + "}\n"
    issues = macro_abuse.check(model_of(definitions + calls))
    assert _summary(issues) == [
        (16, "macro-abuse.invocation", Severity.MILD),
        (4, "macro-abuse.definitions", Severity.SPICY),
    ]


def test_channel_abuse(model_of):
    code = "fn wire() {\n" + "    spawn(mpsc::channel());\n" * 6 + "}\n"
    issues = channel_abuse.check(model_of(code))
    assert _summary(issues) == [(7, "channel-abuse.excessive", Severity.SPICY)]


def test_dyn_trait_abuse(model_of):
    params = ", ".join(f"p{n}: Box<dyn Display>" for n in range(6))
    issues = dyn_trait_abuse.check(model_of(f"fn show({params}) {{}}\n"))
    assert len(issues) == 1
    assert issues[0].data == {"trait": "Display", "count": 6}


# --- Code structure ---

def test_magic_number(model_of):
    code = (
        "const LIMIT: u32 = 500;\n"
        "fn price(count: i64) -> i64 {\n"
        "    let base = 42;\n"
        "    let big = 100_000;\n"
        "    let neg = -5;\n"
        "    let one = 1;\n"
        "    base + big + neg + one + count\n"
        "}\n"
    )
    issues = magic_number.check(model_of(code))
    assert [(i.line, i.severity, i.data["value"]) for i in issues] == [
        (3, Severity.MILD, "42"),
        (4, Severity.SPICY, "100_000"),
        (5, Severity.MILD, "-5"),
    ]


def test_magic_numbers_in_tests_are_ignored(model_of):
    code = "#[cfg(test)]\nmod tests {\n    fn value() -> i32 {\n        42\n    }\n}\n"
    assert magic_number.check(model_of(code)) == []


def test_commented_code(model_of):
    code = (
        "fn main() {\n"
        "    // let x = compute();\n"
        "    // let y = x + 1;\n"
        "    // println!(\"{}\", y);\n"
        "    run();\n"
        "}\n"
    )
    issues = commented_code.check(model_of(code))
    assert _summary(issues) == [(2, "commented-code.block", Severity.MILD)]
    assert issues[0].data == {"lines": 3}


def test_dead_code(model_of):
    code = (
        "fn stop(flag: bool) -> i32 {\n"
        "    if flag {\n"
        "        return 1;\n"
        "        cleanup();\n"
        "    }\n"
        "    2\n"
        "}\n"
    )
    issues = dead_code.check(model_of(code))
    assert _summary(issues) == [(4, "dead-code.unreachable", Severity.MILD)]
    assert issues[0].data == {"after": "return", "exit_line": 3}


def test_return_at_block_end_is_not_dead_code(model_of):
    assert dead_code.check(model_of("fn done() -> i32 {\n    return 1;\n}\n")) == []


def test_println_debugging(model_of):
    code = (
        "fn run() {\n"
        '    println!("hi");\n'
        "    dbg!(1);\n"
        "}\n"
        "#[cfg(test)]\n"
        "mod tests {\n"
        '    fn helper() { println!("x"); }\n'
        "}\n"
    )
    issues = println_debugging.check(model_of(code))
    assert _summary(issues) == [
        (2, "println-debugging.println", Severity.MILD),
        (3, "println-debugging.dbg", Severity.SPICY),
    ]


@pytest.mark.parametrize("count, expected", [(5, None), (6, Severity.MILD), (11, Severity.SPICY)])
def test_todo_comment(model_of, count, expected):
    code = "fn run() {\n" + "".join(f"    // TODO: step {n}\n" for n in range(count)) + "}\n"
    issues = todo_comment.check(model_of(code))
    if expected is None:
        assert issues == []
    else:
        assert _summary(issues) == [(2, "todo-comment.backlog", expected)]
        assert issues[0].data == {"count": count}


def test_file_too_long(model_of):
    assert file_too_long.check(model_of("// filler\n" * 1000)) == []
    issues = file_too_long.check(model_of("// filler\n" * 1001))
    assert _summary(issues) == [(1, "file-too-long.too-long", Severity.MILD)]


def test_import_chaos(model_of):
    code = (
        "use std::io;\n"
        "use std::collections::HashMap;\n"
        "use std::collections::BTreeMap;\n"
        "use std::collections::HashMap;\n"
        "\n"
        "fn main() {\n"
        "    let map: HashMap<i32, i32> = HashMap::new();\n"
        "    io::stdout();\n"
        "}\n"
    )
    issues = import_chaos.check(model_of(code))
    assert [(i.line, i.message_key) for i in issues] == [
        (1, "import-chaos.unordered"),
        (4, "import-chaos.duplicate"),
        (3, "import-chaos.unused"),
    ]
    assert issues[2].data == {"symbol": "BTreeMap"}


def test_sorted_used_imports_are_clean(model_of):
    code = "use std::collections::HashMap;\nuse std::io::Read;\n\nfn main() {\n    HashMap::<i32, i32>::new();\n}\n"
    assert import_chaos.check(model_of(code)) == []


def test_module_nesting(model_of):
    code = (
        "mod a {\n"
        "    mod b {\n"
        "        mod c {\n"
        "            mod d {\n"
        "            }\n"
        "        }\n"
        "    }\n"
        "}\n"
    )
    issues = module_nesting.check(model_of(code))
    assert _summary(issues) == [(4, "module-nesting.too-deep", Severity.MILD)]
    assert issues[0].data == {"name": "d", "depth": 4}


def test_module_complexity_counts_declarations(model_of):
    code = (
        "mod a {\n"
        "    mod b {\n"
        "        mod c {\n"
        "            mod d {\n"
        "                mod e {\n"
        "                    mod f;\n"
        "                }\n"
        "            }\n"
        "        }\n"
        "    }\n"
        "}\n"
    )
    model = model_of(code)
    issues = module_complexity.check(model)
    assert _summary(issues) == [(6, "module-complexity.too-deep", Severity.SPICY)]
    assert issues[0].data == {"name": "f", "depth": 6}
    # the declaration is not an inline module, so nesting only sees d and e
    assert [i.line for i in module_nesting.check(model)] == [4, 5]


def test_pattern_matching_abuse_destructuring(model_of):
    body = "".join(f"    let (a{n}, b{n}) = (1, 2);\n" for n in range(15))
    code = "fn unpack() {\n" + body + "    let [x, y] = [1, 2];\n}\n"
    issues = pattern_matching_abuse.check(model_of(code))
    assert _summary(issues) == [(17, "pattern-matching-abuse.too-many-patterns", Severity.MILD)]
    assert issues[0].data == {"kind": "slice", "count": 16}


def test_pattern_matching_abuse_arms(model_of):
    def matcher(name, arms):
        lines = "".join(f"        {n} => {n + 1},\n" for n in range(arms - 1))
        return f"fn {name}(n: u8) -> u8 {{\n    match n {{\n{lines}        _ => 0,\n    }}\n}}\n"

    code = matcher("small", 10) + matcher("large", 11)
    issues = pattern_matching_abuse.check(model_of(code))
    assert _summary(issues) == [(16, "pattern-matching-abuse.too-many-arms", Severity.SPICY)]
    assert issues[0].data == {"arms": 11}


def test_reference_abuse(model_of):
    code = "".join(f"fn borrow{n}(x: &u8) {{}}\n" for n in range(21))
    issues = reference_abuse.check(model_of(code))
    assert _summary(issues) == [(21, "reference-abuse.excessive", Severity.MILD)]
    assert issues[0].data == {"count": 21}


def test_twenty_references_are_fine(model_of):
    code = "".join(f"fn borrow{n}(x: &u8) {{}}\n" for n in range(20))
    assert reference_abuse.check(model_of(code)) == []


def test_slice_abuse(model_of):
    code = "".join(f"fn view{n}(x: &[u8]) {{}}\n" for n in range(17))
    model = model_of(code)
    issues = slice_abuse.check(model)
    assert _summary(issues) == [
        (16, "slice-abuse.excessive", Severity.MILD),
        (17, "slice-abuse.excessive", Severity.MILD),
    ]
    assert reference_abuse.check(model) == []


def test_box_abuse(model_of):
    code = "fn boxes() {\n" + "".join(f"    let b{n}: Box<u8> = Box::new({n});\n" for n in range(5)) + "}\n"
    issues = box_abuse.check(model_of(code))
    assert _summary(issues) == [(2, "box-abuse.excessive", Severity.SPICY)]
    assert issues[0].data == {"count": 10}


def test_box_in_comments_and_strings_is_ignored(model_of):
    code = (
        "// Box::new Box::new Box::new\n"
        "fn boxes() {\n"
        + "".join(f"    let b{n}: Box<u8> = Box::new({n});\n" for n in range(4))
        + '    let s = "Box<u8> Box::new";\n'
        "}\n"
    )
    assert box_abuse.check(model_of(code)) == []
