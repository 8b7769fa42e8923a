from __future__ import annotations

"""
Gitignore Pattern Matching Engine.

Compiles caller-supplied .gitignore text into an ordered rule list using
pathspec's git wildmatch translation and answers whether a root-relative
path is ignored. Rules are evaluated last-match-wins, so negations can
re-include earlier exclusions, and every implied ancestor directory of a
path is checked first: a file can never be re-included from inside an
excluded directory. The VCS metadata directory is always excluded.

Also provides helpers that rewrite the rules of nested .gitignore files
into root-relative form so several files can be merged into one text.
"""

import logging
import re
from typing import Dict, List, Mapping, Optional, Tuple

from pathspec.patterns import GitWildMatchPattern

from contexter.core.processing.paths import ancestor_paths, normalize_path
from contexter.domain.constants import VCS_DIR_NAME
from contexter.domain.errors import PatternError

logger = logging.getLogger(__name__)

_MULTI_SLASH_RX = re.compile(r"/{2,}")

# Group name pathspec gives the slash that ends a directory-rule match
_DIR_MARK = "ps_d"


# -----------------------------------------------------------------------------
# MATCHER
# -----------------------------------------------------------------------------

class IgnoreMatcher:
    """
    Compiled gitignore rule set.

    Attributes:
        patterns: The raw pattern lines that compiled successfully.
        errors: Pattern errors recovered during compilation.
    """

    def __init__(self, rules: List[Tuple[str, GitWildMatchPattern]], errors: List[PatternError]) -> None:
        self._rules = rules
        self.patterns: List[str] = [raw for raw, _ in rules]
        self.errors: List[PatternError] = errors

    @classmethod
    def from_text(cls, text: Optional[str]) -> "IgnoreMatcher":
        """
        Compile gitignore text, skipping blank lines and comments.

        Lines that fail to compile are logged and skipped; compilation
        itself never fails.

        Args:
            text: Raw .gitignore content (may be None or empty).

        Returns:
            IgnoreMatcher: The compiled matcher.
        """
        rules: List[Tuple[str, GitWildMatchPattern]] = []
        errors: List[PatternError] = []

        for line_no, raw_line in enumerate((text or "").splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            try:
                pattern = GitWildMatchPattern(line)
            except (ValueError, re.error) as e:
                err = PatternError(line_no, line, str(e))
                logger.warning(str(err))
                errors.append(err)
                continue

            if pattern.include is None or pattern.regex is None:
                continue
            rules.append((line, pattern))

        logger.debug(f"Compiled {len(rules)} gitignore rules ({len(errors)} skipped).")
        return cls(rules, errors)

    def is_ignored(self, path: str, is_dir: bool = False) -> bool:
        """
        Decide whether a root-relative path is ignored.

        Args:
            path: Path relative to the selected root folder.
            is_dir: True if the path names a directory.

        Returns:
            bool: True if the path (or any ancestor directory) is excluded.
        """
        rel = normalize_path(path)
        if not rel:
            return False

        if VCS_DIR_NAME in rel.split("/"):
            return True

        if not self._rules:
            return False

        for ancestor in ancestor_paths(rel):
            if self._evaluate(ancestor, True):
                return True
        return self._evaluate(rel, is_dir)

    def _evaluate(self, rel: str, is_dir: bool) -> bool:
        """
        Apply every rule in order; the last matching rule decides.

        A rule only counts when it matches the candidate itself, not one
        of its ancestors: pathspec regexes also match everything beneath a
        matched directory, but ancestors are evaluated separately by
        ``is_ignored``. Rules ending in '**' match descendants directly.
        """
        candidate = f"{rel}/" if is_dir else rel
        ignored = False
        for raw, pattern in self._rules:
            m = pattern.regex.match(candidate)
            if m is None:
                continue
            if not raw.endswith("**") and _DIR_MARK in m.re.groupindex:
                mark_end = m.end(_DIR_MARK)
                if mark_end != -1 and mark_end != len(candidate):
                    continue
            ignored = bool(pattern.include)
        return ignored

    def __len__(self) -> int:
        return len(self._rules)


# -----------------------------------------------------------------------------
# NESTED .GITIGNORE SCOPING
# -----------------------------------------------------------------------------

def scope_gitignore_content(base_dir: str, content: str) -> List[str]:
    """
    Rewrite the rules of a nested .gitignore into root-relative rules.

    Anchored or slash-containing rules are re-anchored under ``base_dir``;
    bare names match at any depth beneath it. Negations and the ``\\#`` /
    ``\\!`` escapes are preserved.

    Examples (base_dir='src'):
        '/build'      -> '/src/build'
        'foo/bar'     -> '/src/foo/bar'
        'secret.yaml' -> '/src/**/secret.yaml'
        '!keep.txt'   -> '!/src/**/keep.txt'

    Args:
        base_dir: Directory owning the .gitignore, relative to the root ('' for the root).
        content: Raw .gitignore text.

    Returns:
        List[str]: Rewritten rules in file order.
    """
    base = normalize_path(base_dir)
    out: List[str] = []

    for raw in content.splitlines():
        line = raw.rstrip()
        if not line or line.startswith("#"):
            continue

        if line.startswith("\\#") or line.startswith("\\!"):
            line = line[1:]
            negated = False
        elif line.startswith("!"):
            negated = True
            line = line[1:]
        else:
            negated = False

        if line.startswith("./"):
            line = line[2:]
        if not line:
            continue

        anchored = line.startswith("/")
        pattern = _MULTI_SLASH_RX.sub("/", line[1:] if anchored else line)

        if anchored or "/" in pattern.rstrip("/"):
            scoped = f"/{base}/{pattern}" if base else f"/{pattern}"
        else:
            scoped = f"/{base}/**/{pattern}" if base else f"/**/{pattern}"

        scoped = _MULTI_SLASH_RX.sub("/", scoped)
        out.append(f"!{scoped}" if negated else scoped)

    return out


def combine_gitignore_sources(sources: Mapping[str, str]) -> str:
    """
    Merge several .gitignore texts into a single root-relative rule text.

    Files are processed parents first so rules from deeper directories
    come later and override. Duplicate rules keep their first position.

    Args:
        sources: Mapping of .gitignore file path (root-relative) to its content.

    Returns:
        str: Newline-joined combined rules.
    """
    entries: List[Tuple[int, str, str]] = []
    for gitignore_path, content in sources.items():
        owner = normalize_path(gitignore_path)
        base_dir = owner.rsplit("/", 1)[0] if "/" in owner else ""
        depth = len(base_dir.split("/")) if base_dir else 0
        entries.append((depth, base_dir, content))

    entries.sort(key=lambda item: item[0])

    seen: Dict[str, None] = {}
    for _, base_dir, content in entries:
        for rule in scope_gitignore_content(base_dir, content):
            seen.setdefault(rule, None)

    return "\n".join(seen)
