from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the policy constants used by the filtering and tree engine:
size limits, binary detection thresholds, extension classification
tables and the language tags used for markdown fences.
"""

from typing import Dict, FrozenSet

# -----------------------------------------------------------------------------
# LIMITS AND THRESHOLDS
# -----------------------------------------------------------------------------
DEFAULT_MAX_FILE_SIZE: int = 2 * 1024 * 1024
BINARY_CONTROL_RATIO: float = 0.10
TOKENIZER_ENCODING: str = "cl100k_base"

COLLISION_POLICIES: FrozenSet[str] = frozenset({"last", "first", "error"})

# Always excluded, regardless of user patterns
VCS_DIR_NAME: str = ".git"

# -----------------------------------------------------------------------------
# TEXT / BINARY CLASSIFICATION
# -----------------------------------------------------------------------------
TEXT_EXTENSIONS: FrozenSet[str] = frozenset({
    "js", "mjs", "cjs", "ts", "mts", "cts", "tsx", "jsx", "json", "jsonc",
    "md", "mdx", "rst", "txt", "rtf", "html", "htm", "css", "scss", "sass", "less",
    "py", "pyi", "rs", "go", "java", "kt", "kts", "scala", "groovy", "gradle",
    "c", "cpp", "cc", "cxx", "h", "hpp", "hxx", "cs", "fs", "swift", "m", "mm",
    "php", "rb", "pl", "pm", "lua", "r", "dart", "ex", "exs", "erl", "hs", "clj",
    "vue", "svelte", "astro", "graphql", "gql", "proto", "sql",
    "yml", "yaml", "xml", "toml", "ini", "cfg", "conf", "config", "properties", "env",
    "csv", "tsv", "svg", "lock", "mod", "sum",
    "dockerfile", "makefile", "sh", "bash", "zsh", "fish", "ps1", "bat", "cmd",
    "gitignore", "gitattributes", "editorconfig", "dockerignore",
})

BINARY_EXTENSIONS: FrozenSet[str] = frozenset({
    "png", "jpg", "jpeg", "gif", "bmp", "ico", "webp", "tif", "tiff", "psd", "heic",
    "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt",
    "zip", "gz", "tgz", "tar", "bz2", "xz", "7z", "rar", "jar", "war",
    "exe", "dll", "so", "dylib", "o", "a", "lib", "obj", "bin", "class", "pyc", "pyo",
    "wasm", "node", "iso", "dmg", "img",
    "mp3", "mp4", "wav", "ogg", "flac", "m4a", "avi", "mov", "mkv", "webm",
    "woff", "woff2", "ttf", "otf", "eot",
    "sqlite", "sqlite3", "db", "dat", "pkl", "npy", "npz", "parquet",
})

# Extensionless names that are always text (compared lowercase)
TEXT_FILENAMES: FrozenSet[str] = frozenset({
    "license", "readme", "makefile", "dockerfile",
    "changelog", "gemfile", "procfile", "rakefile", "jenkinsfile",
})

# -----------------------------------------------------------------------------
# MARKDOWN LANGUAGE TAGS
# -----------------------------------------------------------------------------
LANGUAGE_BY_EXTENSION: Dict[str, str] = {
    "js": "javascript", "mjs": "javascript", "cjs": "javascript",
    "ts": "typescript", "mts": "typescript", "cts": "typescript",
    "tsx": "tsx",
    "jsx": "jsx",
    "py": "python",
    "rs": "rust",
    "go": "go",
    "java": "java",
    "c": "c", "h": "c",
    "cpp": "cpp", "cxx": "cpp", "cc": "cpp", "hpp": "cpp", "hxx": "cpp",
    "cs": "csharp",
    "php": "php",
    "rb": "ruby",
    "swift": "swift",
    "kt": "kotlin", "kts": "kotlin",
    "html": "html", "htm": "html",
    "css": "css",
    "scss": "scss",
    "json": "json",
    "xml": "xml",
    "yaml": "yaml", "yml": "yaml",
    "toml": "toml",
    "sh": "bash", "bash": "bash", "zsh": "bash",
    "sql": "sql",
    "md": "markdown", "mdx": "markdown",
    "dockerfile": "dockerfile",
}
