from __future__ import annotations

from typing import TYPE_CHECKING

from repogrok.config import ImportanceEntry
from repogrok.dependency_graph import RANKING_REFERENCE_PATTERNS, ReferenceGraph, build_dependency_graph

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repogrok.config import RepoFile

NO_IMPORT_RELATIONSHIPS = "No import relationships detected.\n"


def count_incoming_references(graph: ReferenceGraph) -> dict[str, int]:
    """Count resolved references per target path.

    Every key starts at zero. Each resolved target occurrence adds one, so a
    file imported twice by the same importer counts twice. Unresolved targets
    are not keys of the graph and are ignored.

    Args:
        graph (ReferenceGraph): the reference graph

    Returns:
        dict[str, int]: in-degree per path, in graph key order
    """
    counts = dict.fromkeys(graph, 0)
    for targets in graph.values():
        for target in targets:
            if target in counts:
                counts[target] += 1
    return counts


def rank_files_by_importance(
    files: Sequence[RepoFile],
    graph: ReferenceGraph | None = None,
) -> list[ImportanceEntry]:
    """Rank files by how often other files reference them.

    Args:
        files (Sequence[RepoFile]): the file set; used to build the graph when none is given
        graph (ReferenceGraph | None): a precomputed reference graph. When None, one is
            built with the ranking patterns, which also catch bare `from "..."` re-exports.

    Returns:
        list[ImportanceEntry]: one entry per path, most referenced first; ties keep file order
    """
    if graph is None:
        graph = build_dependency_graph(files, patterns=RANKING_REFERENCE_PATTERNS)
    counts = count_incoming_references(graph)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [ImportanceEntry(path=path, imported_by=count) for path, count in ranked]


def format_importance_ranking(ranking: Sequence[ImportanceEntry], top_n: int | None = None) -> str:
    """Render an importance ranking as an aligned table.

    Args:
        ranking (Sequence[ImportanceEntry]): the ranking, already sorted
        top_n (int | None): show the first `top_n` entries, zero counts included.
            When None, show every entry referenced at least once.

    Returns:
        str: the table, or NO_IMPORT_RELATIONSHIPS when there is nothing to show
    """
    items = list(ranking[:top_n]) if top_n else [r for r in ranking if r.imported_by > 0]
    if not items:
        return NO_IMPORT_RELATIONSHIPS

    width = max(max(len(i.path) for i in items), 4) + 2
    lines = [f"{'File':<{width}}Imported By", "-" * (width + 11)]
    lines.extend(f"{i.path:<{width}}{i.imported_by} file(s)" for i in items)
    return "\n".join(lines) + "\n"
