from __future__ import annotations

"""
Unit tests for the ASCII tree renderer.
"""

from contexter.core.analysis.tree_renderer import render_tree
from contexter.domain.tree_models import TreeNode


def _tree():
    src = TreeNode(path="src", name="src", is_dir=True, size=1536, token_count=1234, children=[
        TreeNode(path="src/a.js", name="a.js", size=512, token_count=34),
        TreeNode(path="src/b.js", name="b.js", size=1024, token_count=1200),
    ])
    readme = TreeNode(path="README", name="README", size=2, token_count=1)
    return [src, readme]


def test_render_tree_with_annotations() -> None:
    assert render_tree(_tree()) == [
        "├── src/ (1.5 KB, 1,234 tokens)",
        "│   ├── a.js (512 B, 34 tokens)",
        "│   └── b.js (1.0 KB, 1,200 tokens)",
        "└── README (2 B, 1 tokens)",
    ]


def test_render_tree_plain() -> None:
    assert render_tree(_tree(), show_size=False, show_tokens=False) == [
        "├── src/",
        "│   ├── a.js",
        "│   └── b.js",
        "└── README",
    ]


def test_render_tree_skips_absent_counts() -> None:
    node = TreeNode(path="x", name="x", size=3, token_count=None)
    assert render_tree([node]) == ["└── x (3 B)"]


def test_render_empty() -> None:
    assert render_tree([]) == []
