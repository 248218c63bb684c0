"""Lightweight local-import graph.

References are found with regular expressions, not a parser, so matches in
comments or string literals are picked up too, and aliased or non-relative
imports are missed. Only literals starting with "." or "/" are considered.
Resolution is a substring/suffix guess against the known paths; the first
matching path wins.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from repogrok.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from repogrok.config import RepoFile

ReferenceGraph = dict[str, list[str]]

IMPORT_FROM_PATTERN = re.compile(r"""import\s+.*?from\s+['"]([^'"]+)['"]""")
REQUIRE_PATTERN = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")
BARE_FROM_PATTERN = re.compile(r"""from\s+['"]([^'"]+)['"]""")

GRAPH_REFERENCE_PATTERNS: tuple[re.Pattern[str], ...] = (IMPORT_FROM_PATTERN, REQUIRE_PATTERN)
RANKING_REFERENCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    IMPORT_FROM_PATTERN,
    REQUIRE_PATTERN,
    BARE_FROM_PATTERN,
)

UNRESOLVED_SUFFIX = " (unresolved)"
NO_DEPENDENCIES = "No local dependencies detected.\n"

_LEADING_DOT_SLASH = re.compile(r"^\./")
_EXTENSION = re.compile(r"\.[^.]+$")


def is_local_reference(ref: str) -> bool:
    return ref.startswith((".", "/"))


def extract_references(
    content: str,
    patterns: Sequence[re.Pattern[str]] = GRAPH_REFERENCE_PATTERNS,
) -> list[str]:
    """Extract local module references from source text.

    Each pattern's first group is the referenced literal. A literal matched by
    several patterns at the same offset is reported once.

    Args:
        content (str): the source text to scan
        patterns (Sequence[re.Pattern[str]]): reference patterns. Defaults to GRAPH_REFERENCE_PATTERNS.

    Returns:
        list[str]: local references in order of appearance in `content`
    """
    found: dict[int, str] = {}
    for pattern in patterns:
        for match in pattern.finditer(content):
            ref = match.group(1)
            if is_local_reference(ref):
                found.setdefault(match.start(1), ref)
    return [found[offset] for offset in sorted(found)]


def resolve_reference(ref: str, paths: Iterable[str]) -> str | None:
    """Guess which known path a reference points to.

    A path matches when it contains the reference without its leading "./",
    or when the path without extension ends with the reference without its
    leading "./" and without extension.

    Args:
        ref (str): the raw reference literal, e.g. "./utils.js" or "../lib/db"
        paths (Iterable[str]): candidate paths, in priority order

    Returns:
        str | None: the first matching path, or None
    """
    bare = _LEADING_DOT_SLASH.sub("", ref)
    stem = _EXTENSION.sub("", bare)
    for path in paths:
        if bare in path or _EXTENSION.sub("", path).endswith(stem):
            return path
    return None


def build_dependency_graph(
    files: Sequence[RepoFile],
    patterns: Sequence[re.Pattern[str]] = GRAPH_REFERENCE_PATTERNS,
) -> ReferenceGraph:
    """Map every file to the files it appears to import.

    Args:
        files (Sequence[RepoFile]): the file set; its order decides resolution ties
        patterns (Sequence[re.Pattern[str]]): reference patterns. Defaults to GRAPH_REFERENCE_PATTERNS.

    Returns:
        ReferenceGraph: one key per input path, even without references. Targets
            are resolved paths, or the raw reference suffixed with " (unresolved)".
    """
    paths = [f.path for f in files]
    graph: ReferenceGraph = {}
    unresolved = 0
    for file in files:
        targets: list[str] = []
        for ref in extract_references(file.content, patterns):
            resolved = resolve_reference(ref, paths)
            if resolved is None:
                unresolved += 1
                targets.append(ref + UNRESOLVED_SUFFIX)
            else:
                targets.append(resolved)
        graph[file.path] = targets

    logger.info(
        "dependency_graph_built",
        files=len(graph),
        edges=sum(len(t) for t in graph.values()),
        unresolved=unresolved,
    )
    return graph


def format_dependency_graph(graph: ReferenceGraph) -> str:
    """Render the files that have dependencies as a small text tree.

    Args:
        graph (ReferenceGraph): the graph to render

    Returns:
        str: one block per file with dependencies, or NO_DEPENDENCIES when there are none
    """
    entries = [(path, deps) for path, deps in graph.items() if deps]
    if not entries:
        return NO_DEPENDENCIES

    lines: list[str] = []
    for path, deps in entries:
        lines.append(path)
        for i, dep in enumerate(deps):
            connector = "  \\-- " if i == len(deps) - 1 else "  |-- "
            lines.append(connector + dep)
    return "\n".join(lines) + "\n"
