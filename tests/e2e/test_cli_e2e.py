from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Invokes the package entry point in a separate process and checks exit
codes, stdout / stderr and written artifacts. Token counting is turned
off wherever a fresh tokenizer would otherwise be constructed, so the
suite runs without network access.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"


def run_cli(args: List[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process with 'src' on PYTHONPATH.

    Args:
        args: Command line arguments (excluding the interpreter and module).
        cwd: Optional working directory for the subprocess.

    Returns:
        subprocess.CompletedProcess: returncode, stdout and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, "-m", "contexter"] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create a small project:

    /input
      /src
        main.py
      /dist
        bundle.js
      README.md
      .gitignore
    """
    input_dir = tmp_path / "input"
    (input_dir / "src").mkdir(parents=True)
    (input_dir / "dist").mkdir()
    (input_dir / "src" / "main.py").write_text("def main(): pass", encoding="utf-8")
    (input_dir / "dist" / "bundle.js").write_text("var x;", encoding="utf-8")
    (input_dir / "README.md").write_text("# Dummy Project", encoding="utf-8")
    (input_dir / ".gitignore").write_text("dist/\n", encoding="utf-8")
    return input_dir


def test_cli_json_output(sample_project: Path) -> None:
    result = run_cli([
        "-i", str(sample_project),
        "--gitignore", str(sample_project / ".gitignore"),
        "--no-tokens",
        "--json",
    ])
    assert result.returncode == 0, result.stderr

    data = json.loads(result.stdout)
    root = data["file_tree"][0]
    assert root["path"] == "input"
    assert [c["name"] for c in root["children"]] == ["src", ".gitignore", "README.md"]
    assert data["total_files"] == 3
    assert data["total_tokens"] == 0


def test_cli_markdown_to_file(sample_project: Path, tmp_path: Path) -> None:
    out = tmp_path / "bundle.md"
    result = run_cli([
        "-i", str(sample_project),
        "--gitignore", str(sample_project / ".gitignore"),
        "--include", "src/",
        "--no-tokens",
        "--markdown", str(out),
    ])
    assert result.returncode == 0, result.stderr
    assert "main.py" in result.stdout

    document = out.read_text(encoding="utf-8")
    assert document == "#### File: `input/src/main.py`\n```python\ndef main(): pass\n```\n"


def test_cli_human_summary(sample_project: Path) -> None:
    result = run_cli(["-i", str(sample_project), "--no-tokens"])
    assert result.returncode == 0, result.stderr
    assert "└── input/" in result.stdout
    assert "Files: 4" in result.stdout
    assert "Tokens:" not in result.stdout


def test_cli_recalculate_tree(tmp_path: Path) -> None:
    tree_file = tmp_path / "tree.json"
    tree_file.write_text(json.dumps({"file_tree": [{
        "path": "src", "is_dir": True, "size": 999, "token_count": 999,
        "children": [
            {"path": "src/a.js", "is_dir": False, "size": 1, "token_count": 1},
            {"path": "src/b.js", "is_dir": False, "size": 2, "token_count": 3},
        ],
    }]}), encoding="utf-8")

    result = run_cli(["--from-tree", str(tree_file), "--json"])
    assert result.returncode == 0, result.stderr

    roots = json.loads(result.stdout)
    assert roots[0]["size"] == 3
    assert roots[0]["token_count"] == 4


def test_cli_dump_config() -> None:
    result = run_cli(["--dump-config", "--max-file-size", "0", "--collision", "first"])
    assert result.returncode == 0
    options = json.loads(result.stdout)
    assert options["max_file_size"] is None
    assert options["collision_policy"] == "first"


def test_cli_missing_input_dir(tmp_path: Path) -> None:
    result = run_cli(["-i", str(tmp_path / "nope"), "--no-tokens"])
    assert result.returncode == 2
    assert "does not exist" in result.stderr


def test_cli_malformed_tree_fails(tmp_path: Path) -> None:
    tree_file = tmp_path / "tree.json"
    tree_file.write_text(json.dumps([{"path": 5}]), encoding="utf-8")

    result = run_cli(["--from-tree", str(tree_file)])
    assert result.returncode == 1
    assert "ERROR:" in result.stderr


def test_cli_nested_gitignores_are_scoped(sample_project: Path) -> None:
    (sample_project / "src" / "scratch.tmp").write_text("tmp", encoding="utf-8")
    (sample_project / "notes.tmp").write_text("keep", encoding="utf-8")
    (sample_project / "src" / ".gitignore").write_text("*.tmp\n", encoding="utf-8")

    result = run_cli([
        "-i", str(sample_project),
        "--gitignore", str(sample_project / ".gitignore"),
        "--gitignore", str(sample_project / "src" / ".gitignore"),
        "--no-tokens",
        "--json",
    ])
    assert result.returncode == 0, result.stderr

    root = json.loads(result.stdout)["file_tree"][0]
    assert [c["name"] for c in root["children"]] == ["src", ".gitignore", "notes.tmp", "README.md"]
    src = root["children"][0]
    assert [c["name"] for c in src["children"]] == [".gitignore", "main.py"]


def test_cli_log_file_records_debug_trail(sample_project: Path, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    result = run_cli(["-i", str(sample_project), "--no-tokens", "--log-file", str(log_file)])
    assert result.returncode == 0, result.stderr

    trail = log_file.read_text(encoding="utf-8")
    assert "Scanned" in trail
    assert "Filtered" in trail
    assert "Filtered" not in result.stderr
