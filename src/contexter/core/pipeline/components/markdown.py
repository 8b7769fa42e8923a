from __future__ import annotations

"""
Markdown Document Assembly.

Concatenates file contents into a single prompt-ready document: one
fenced code block per file, tagged with a language inferred from the
extension and optionally preceded by a path header.
"""

from typing import Iterable, List

from contexter.domain.constants import LANGUAGE_BY_EXTENSION
from contexter.domain.tree_models import FileContent


def detect_language(path: str) -> str:
    """
    Infer the fence language tag from a file path.

    Args:
        path: File path.

    Returns:
        str: Language tag, or '' if unknown.
    """
    file_name = path.replace("\\", "/").rsplit("/", 1)[-1].lower()
    if "." in file_name:
        return LANGUAGE_BY_EXTENSION.get(file_name.rsplit(".", 1)[-1], "")
    if file_name == "dockerfile":
        return "dockerfile"
    if file_name.endswith("makefile"):
        return "makefile"
    return ""


def merge_files_to_markdown(files: Iterable[FileContent], include_path_headers: bool = True) -> str:
    """
    Render files as consecutive fenced code blocks.

    Format per file:
        #### File: `<path>`
        ```<language>
        <trimmed content>
        ```

    Args:
        files: Files to render, in output order.
        include_path_headers: Emit the '#### File:' header line.

    Returns:
        str: The assembled document, trimmed; '' for no files.
    """
    parts: List[str] = []
    for item in files:
        block = ""
        if include_path_headers:
            block += f"#### File: `{item.path}`\n"
        block += f"```{detect_language(item.path)}\n"
        block += item.content.strip()
        block += "\n```\n\n"
        parts.append(block)

    return "".join(parts).strip()
