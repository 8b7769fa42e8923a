from __future__ import annotations

"""
Integration tests for the local directory file source.

Verifies that scanning, filtering and reading a real directory produce
the same path conventions a browser folder picker would.
"""

from pathlib import Path

import pytest

from contexter import filter_files, process_files
from contexter.infra.fs import normalize_input_path, read_contents, read_text_file, root_name_of, scan_directory


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    (root / "src").mkdir(parents=True)
    (root / "logs").mkdir()
    (root / ".git").mkdir()
    (root / "src" / "a.js").write_text("const a = 1;\n", encoding="utf-8")
    (root / "src" / "blob.dat.txt").write_bytes(b"\x00\x01\x02binary")
    (root / "logs" / "debug.log").write_text("noise", encoding="utf-8")
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main", encoding="utf-8")
    (root / "README").write_text("hi", encoding="utf-8")
    return root


def test_scan_directory_reports_prefixed_paths(project: Path) -> None:
    entries = scan_directory(str(project))
    paths = [e.path for e in entries]

    assert paths[0] == "proj/"
    assert "proj/src/" in paths
    assert "proj/src/a.js" in paths
    assert "proj/README" in paths
    assert not any(".git" in p.split("/") for p in paths)

    sizes = {e.path: e.size for e in entries}
    assert sizes["proj/README"] == 2


def test_read_contents_skips_binary_content(project: Path) -> None:
    paths = ["proj/src/", "proj/src/a.js", "proj/src/blob.dat.txt", "proj/missing.txt"]
    contents = read_contents(str(project), paths, text_only=True)

    assert [c.path for c in contents] == ["proj/src/", "proj/src/a.js"]
    assert contents[0].content == ""
    assert contents[1].content == "const a = 1;\n"

    everything = read_contents(str(project), paths, text_only=False)
    assert [c.path for c in everything] == ["proj/src/", "proj/src/a.js", "proj/src/blob.dat.txt"]


def test_scan_filter_read_process(project: Path, word_tokenizer) -> None:
    metadata = scan_directory(str(project))
    kept = filter_files(metadata, "*.log").paths
    contents = read_contents(str(project), kept)
    result = process_files(contents, tokenizer=word_tokenizer)

    root = result.roots[0]
    assert root.path == "proj"
    assert [c.name for c in root.children] == ["src", "README"]
    assert result.total_files == 2
    assert result.total_size == len("const a = 1;\n") + 2


def test_path_helpers(tmp_path: Path) -> None:
    assert normalize_input_path("", str(tmp_path)) == str(tmp_path)
    assert root_name_of(str(tmp_path / "proj") + "/") == "proj"

    ignore_file = tmp_path / ".gitignore"
    ignore_file.write_bytes(b"*.log\n\xff\n")
    assert read_text_file(str(ignore_file)).startswith("*.log\n")
