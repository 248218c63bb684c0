from __future__ import annotations

import pytest

from repogrok.config import RepoFile
from repogrok.dependency_graph import (
    NO_DEPENDENCIES,
    RANKING_REFERENCE_PATTERNS,
    build_dependency_graph,
    extract_references,
    format_dependency_graph,
    resolve_reference,
)


@pytest.mark.unit
def test_build_dependency_graph_resolves_local_imports(module_files: list[RepoFile]) -> None:
    graph = build_dependency_graph(module_files)

    assert graph == {
        "index.js": ["utils.js"],
        "utils.js": [],
        "app.js": ["utils.js", "index.js"],
    }


@pytest.mark.unit
def test_build_dependency_graph_handles_require_calls() -> None:
    files = [
        RepoFile(path="src/db.js", content="module.exports = {};\n"),
        RepoFile(path="src/app.js", content="const db = require('./db');\nconst fs = require(\"fs\");\n"),
    ]

    graph = build_dependency_graph(files)

    assert graph["src/app.js"] == ["src/db.js"]
    assert graph["src/db.js"] == []


@pytest.mark.unit
def test_build_dependency_graph_keeps_source_order_across_patterns() -> None:
    files = [
        RepoFile(path="a.js", content=""),
        RepoFile(path="b.js", content=""),
        RepoFile(path="main.js", content='const a = require("./a.js");\nimport b from "./b.js";\n'),
    ]

    graph = build_dependency_graph(files)

    assert graph["main.js"] == ["a.js", "b.js"]


@pytest.mark.unit
def test_build_dependency_graph_marks_unresolved_references() -> None:
    files = [RepoFile(path="main.js", content='import missing from "./missing.js";\n')]

    graph = build_dependency_graph(files)

    assert graph == {"main.js": ["./missing.js (unresolved)"]}


@pytest.mark.unit
def test_build_dependency_graph_ignores_package_imports() -> None:
    files = [
        RepoFile(
            path="main.js",
            content='import React from "react";\nconst path = require("path");\nimport x from "@scope/pkg";\n',
        ),
    ]

    assert build_dependency_graph(files) == {"main.js": []}


@pytest.mark.unit
def test_build_dependency_graph_empty_input() -> None:
    assert build_dependency_graph([]) == {}


@pytest.mark.unit
def test_resolve_reference_takes_first_containing_path() -> None:
    paths = ["lib/utils/index.js", "utils.js"]

    assert resolve_reference("./utils", paths) == "lib/utils/index.js"


@pytest.mark.unit
def test_resolve_reference_matches_suffix_without_extension() -> None:
    assert resolve_reference("./helpers.js", ["src/main.ts", "src/helpers.ts"]) == "src/helpers.ts"


@pytest.mark.unit
def test_resolve_reference_returns_none_without_match() -> None:
    assert resolve_reference("../shared/format.ts", ["src/shared/format.tsx"]) is None


@pytest.mark.unit
def test_extract_references_reports_overlapping_matches_once() -> None:
    content = 'import a from "./a";\nexport { b } from "./b";\n'

    assert extract_references(content) == ["./a"]
    assert extract_references(content, RANKING_REFERENCE_PATTERNS) == ["./a", "./b"]


@pytest.mark.unit
def test_extract_references_keeps_absolute_paths() -> None:
    assert extract_references('const cfg = require("/etc/app/config.js");') == ["/etc/app/config.js"]


@pytest.mark.unit
def test_format_dependency_graph_without_edges_reports_sentinel() -> None:
    graph = {"a.js": [], "b.js": []}

    assert format_dependency_graph(graph) == NO_DEPENDENCIES
    assert format_dependency_graph({}) == "No local dependencies detected.\n"


@pytest.mark.unit
def test_format_dependency_graph_draws_connectors(module_files: list[RepoFile]) -> None:
    graph = build_dependency_graph(module_files)

    assert format_dependency_graph(graph) == (
        "index.js\n  \\-- utils.js\napp.js\n  |-- utils.js\n  \\-- index.js\n"
    )
