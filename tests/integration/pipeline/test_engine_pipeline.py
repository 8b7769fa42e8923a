from __future__ import annotations

"""
Integration tests for the engine operations.

Runs filter_files, process_files, recalculate_counts and merge_to_markdown
together on small in-memory batches, using a deterministic tokenizer.
"""

import random
from unittest.mock import patch

import pytest

from contexter import (
    FileContent,
    FileMetadata,
    filter_files,
    merge_to_markdown,
    process_files,
    recalculate_counts,
)
from contexter.core.analysis.tree_renderer import render_tree
from contexter.core.pipeline import engine
from contexter.domain.errors import InputDecodeError, PathCollisionError, TokenizerError

MIB = 1024 * 1024


# -----------------------------------------------------------------------------
# End-to-end tree processing
# -----------------------------------------------------------------------------

def test_process_files_reference_batch(word_tokenizer) -> None:
    """Three small files: sizes, tokens, ordering and totals."""
    files = [
        {"path": "src/a.js", "content": "x"},
        {"path": "src/b.js", "content": "yy"},
        {"path": "README", "content": "hi"},
    ]
    result = process_files(files, {}, tokenizer=word_tokenizer)

    assert [r.path for r in result.roots] == ["src", "README"]
    src, readme = result.roots
    assert (src.is_dir, src.size, src.token_count) == (True, 3, 2)
    assert [c.name for c in src.children] == ["a.js", "b.js"]
    assert (readme.is_dir, readme.size, readme.token_count) == (False, 2, 1)

    assert result.total_files == 3
    assert result.total_tokens == 3
    assert result.total_size == 5
    assert result.elapsed_ms >= 0


def test_directory_aggregates_equal_leaf_sums(word_tokenizer) -> None:
    files = [FileContent(f"p/{d}/{i}.txt", "w " * i) for d in ("a", "b/c") for i in range(1, 4)]
    result = process_files(files, tokenizer=word_tokenizer)

    def check(node):
        if not node.is_dir:
            return node.size, node.token_count
        sums = [check(child) for child in node.children]
        assert node.size == sum(s for s, _ in sums)
        assert node.token_count == sum(t for _, t in sums)
        return node.size, node.token_count

    for root in result.roots:
        check(root)
    assert result.total_size == sum(r.size for r in result.roots)
    assert result.total_tokens == 12


def test_deterministic_order_with_pruning_disabled(word_tokenizer) -> None:
    files = [
        FileContent("Zebra.txt", "z"),
        FileContent("apple/", ""),
        FileContent("Apple.txt", "a"),
    ]
    result = process_files(files, {"hide_empty_folders": False}, tokenizer=word_tokenizer)
    assert [(r.name, r.is_dir) for r in result.roots] == [
        ("apple", True), ("Apple.txt", False), ("Zebra.txt", False),
    ]


def test_tree_shape_does_not_depend_on_input_order(word_tokenizer) -> None:
    files = [
        FileContent("proj/src/", ""),
        FileContent("proj/src/Main.py", "a b"),
        FileContent("proj/src/helpers.py", "c"),
        FileContent("proj/src/Lib/zeta.py", "d e f"),
        FileContent("proj/docs/", ""),
        FileContent("proj/Docs.md", "g"),
        FileContent("proj/beta.txt", "h"),
        FileContent("proj/Alpha.txt", "i j"),
        FileContent("proj/assets/", ""),
        FileContent("README", "k"),
    ]
    options = {"hide_empty_folders": False}
    expected = [r.to_dict() for r in process_files(files, options, tokenizer=word_tokenizer).roots]

    rng = random.Random(1234)
    for _ in range(5):
        batch = list(files)
        rng.shuffle(batch)
        result = process_files(batch, options, tokenizer=word_tokenizer)
        assert [r.to_dict() for r in result.roots] == expected

    proj = expected[0]
    assert [c["name"] for c in proj["children"]] == [
        "assets", "docs", "src", "Alpha.txt", "beta.txt", "Docs.md",
    ]


def test_deeply_nested_path_is_processed(word_tokenizer) -> None:
    """Nesting deeper than the interpreter's recursion limit."""
    depth = 1200
    path = "a/" * depth + "f.txt"
    result = process_files([FileContent(path, "x y")], tokenizer=word_tokenizer)

    assert (result.total_files, result.total_size, result.total_tokens) == (1, 3, 2)
    root = result.roots[0]
    assert (root.path, root.size, root.token_count) == ("a", 3, 2)

    tree = result.to_dict()["file_tree"]
    roots = recalculate_counts(tree, {"show_token_count": False})
    assert roots[0].size == 3
    assert roots[0].token_count is None

    lines = render_tree(roots)
    assert len(lines) == depth + 1
    assert lines[-1].strip().startswith("└── f.txt")


def test_empty_folder_pruning_follows_filtering(word_tokenizer) -> None:
    """A folder whose only file was ignored disappears unless pruning is off."""
    metadata = [
        FileMetadata("proj/", 0),
        FileMetadata("proj/logs/", 0),
        FileMetadata("proj/logs/debug.log", 10),
        FileMetadata("proj/a.txt", 1),
    ]
    kept = filter_files(metadata, "*.log").paths
    assert kept == ["proj/logs/", "proj/a.txt"]

    contents = [FileContent(p, "" if p.endswith("/") else "x") for p in kept]

    hidden = process_files(contents, {"hide_empty_folders": True}, tokenizer=word_tokenizer)
    assert [c.path for c in hidden.roots[0].children] == ["proj/a.txt"]

    shown = process_files(contents, {"hide_empty_folders": False}, tokenizer=word_tokenizer)
    logs = shown.roots[0].children[0]
    assert (logs.path, logs.is_dir, logs.children, logs.size) == ("proj/logs", True, [], 0)


def test_token_counting_disabled_never_touches_tokenizer() -> None:
    with patch.object(engine, "get_tokenizer", side_effect=TokenizerError("offline")) as getter:
        result = process_files([FileContent("d/a.txt", "abc")], {"show_token_count": False})

    getter.assert_not_called()
    assert result.total_tokens == 0
    assert result.roots[0].token_count is None
    assert result.roots[0].children[0].token_count is None
    assert result.total_size == 3


def test_tokenizer_failure_is_fatal() -> None:
    with patch.object(engine, "get_tokenizer", side_effect=TokenizerError("offline")):
        with pytest.raises(TokenizerError):
            process_files([FileContent("a.txt", "abc")])


def test_collision_policy_is_honoured(word_tokenizer) -> None:
    files = [FileContent("a.txt", "one two"), FileContent("./a.txt", "three")]

    result = process_files(files, tokenizer=word_tokenizer)
    assert result.total_files == 1
    assert result.total_tokens == 1

    with pytest.raises(PathCollisionError):
        process_files(files, {"collision_policy": "error"}, tokenizer=word_tokenizer)


@pytest.mark.parametrize("bad", [
    "not a list",
    None,
    [{"path": "a.txt"}],
    [{"path": 3, "content": "x"}],
    ["a.txt"],
])
def test_process_files_rejects_malformed_batches(bad, word_tokenizer) -> None:
    with pytest.raises(InputDecodeError):
        process_files(bad, tokenizer=word_tokenizer)


# -----------------------------------------------------------------------------
# Metadata filtering
# -----------------------------------------------------------------------------

def test_filter_files_size_limit_regardless_of_other_options() -> None:
    metadata = [{"path": "proj/huge.txt", "size": 3 * MIB}, {"path": "proj/ok.txt", "size": 1}]
    result = filter_files(metadata, "", {"max_file_size": 2 * MIB, "text_only": False, "include_patterns": ["huge"]})
    assert result.paths == []

    result = filter_files(metadata, "", {"max_file_size": 2 * MIB})
    assert result.paths == ["proj/ok.txt"]
    assert result.to_dict()["processingTimeMs"] >= 0


def test_filter_files_gitignore_directory_rule() -> None:
    metadata = [FileMetadata("proj/build/a.txt", 1), FileMetadata("proj/buildx/a.txt", 1)]
    assert filter_files(metadata, "build/").paths == ["proj/buildx/a.txt"]


def test_filter_files_negation() -> None:
    metadata = [FileMetadata("proj/debug.log", 1), FileMetadata("proj/important.log", 1)]
    assert filter_files(metadata, "*.log\n!important.log").paths == ["proj/important.log"]


def test_filter_files_whitelist_gitignore() -> None:
    metadata = [
        FileMetadata("p/src/", 0),
        FileMetadata("p/src/data.csv", 1),
        FileMetadata("p/src/a.py", 1),
    ]
    assert filter_files(metadata, "*\n!*/\n!*.py\n").paths == ["p/src/", "p/src/a.py"]


def test_filter_files_survives_malformed_patterns() -> None:
    metadata = [FileMetadata("proj/a.tmp", 1), FileMetadata("proj/b.txt", 1)]
    assert filter_files(metadata, "foo\\\n*.tmp").paths == ["proj/b.txt"]


@pytest.mark.parametrize("bad", [
    [{"path": "a", "size": -1}],
    [{"path": "a", "size": "10"}],
    [{"path": "a", "size": True}],
    [{"size": 1}],
    {"path": "a", "size": 1},
])
def test_filter_files_rejects_malformed_metadata(bad) -> None:
    with pytest.raises(InputDecodeError):
        filter_files(bad)


# -----------------------------------------------------------------------------
# Recalculation
# -----------------------------------------------------------------------------

def test_recalculate_is_idempotent_on_processed_tree(word_tokenizer) -> None:
    files = [FileContent("src/a.js", "x"), FileContent("src/lib/b.js", "y z"), FileContent("README", "hi")]
    result = process_files(files, tokenizer=word_tokenizer)
    before = [r.to_dict() for r in result.roots]

    roots = recalculate_counts(result.roots)
    assert [r.to_dict() for r in roots] == before

    from_wire = recalculate_counts(result.to_dict()["file_tree"])
    assert [r.to_dict() for r in from_wire] == before


def test_recalculate_toggles_token_fields(word_tokenizer) -> None:
    result = process_files([FileContent("src/a.js", "x y")], tokenizer=word_tokenizer)

    roots = recalculate_counts(result.roots, {"show_token_count": False})
    assert roots[0].token_count is None
    assert roots[0].children[0].token_count == 2
    assert "token_count" not in roots[0].to_dict()

    roots = recalculate_counts(roots, {"show_token_count": True})
    assert roots[0].token_count == 2


def test_recalculate_keeps_empty_directories(word_tokenizer) -> None:
    tree = [{"path": "p", "is_dir": True, "children": [{"path": "p/empty", "is_dir": True}]}]
    roots = recalculate_counts(tree)
    assert roots[0].children[0].path == "p/empty"
    assert roots[0].size == 0


def test_recalculate_rejects_malformed_tree() -> None:
    with pytest.raises(InputDecodeError):
        recalculate_counts([{"path": "a", "size": "big"}])


# -----------------------------------------------------------------------------
# Markdown
# -----------------------------------------------------------------------------

def test_merge_to_markdown_options() -> None:
    files = [{"path": "src/a.js", "content": "x"}]
    assert merge_to_markdown(files).startswith("#### File: `src/a.js`\n```javascript\n")
    assert merge_to_markdown(files, {"include_path_headers": False}) == "```javascript\nx\n```"
