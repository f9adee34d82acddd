"""
Test fixtures shared across all Hunter tests.
"""

import pytest

from hunter.config import AnalysisConfig
from hunter.core.source_model import build_source_model


@pytest.fixture
def config():
    """Default thresholds, independent of any HUNTER_* environment."""
    return AnalysisConfig(
        nesting_threshold=3,
        function_length_threshold=50,
        min_duplicate_block=5,
        min_commented_block=3,
        god_function_threshold=15,
        max_workers=4,
        max_file_size_bytes=2_000_000,
    )


@pytest.fixture
def model_of(config):
    """Build a SourceModel from a Rust snippet."""
    def _build(code: str, path: str = "sample.rs"):
        return build_source_model(code, path, config)
    return _build


@pytest.fixture
def clean_rust_code():
    """Idiomatic Rust with nothing for any rule to report."""
    return '''use std::collections::HashMap;

/// Counts how often each word appears.
pub fn word_count(text: &str) -> HashMap<&str, usize> {
    let mut counts = HashMap::new();
    text.split_whitespace()
        .for_each(|word| *counts.entry(word).or_insert(0) += 1);
    counts
}

pub fn longest_word(text: &str) -> Option<&str> {
    text.split_whitespace().max_by_key(|word| word.len())
}
'''


@pytest.fixture
def garbage_rust_code():
    """Rust with a known spread of anti-patterns."""
    return '''use std::io;
use std::collections::HashMap;

fn data(foo: String, v: Vec<i32>) -> i32 {
    let tmp = foo.clone().len();
    let q = v.get(0).unwrap();
    if tmp > 42 {
        println!("debug {}", tmp);
        panic!("too big");
    }
    // let old = compute();
    // let older = old + 1;
    // println!("{}", older);
    *q
}
'''


@pytest.fixture
def sample_files(garbage_rust_code, clean_rust_code):
    """Sample file inputs for API testing."""
    return [
        {"path": "src/garbage.rs", "content": garbage_rust_code},
        {"path": "src/clean.rs", "content": clean_rust_code},
    ]
