from __future__ import annotations

import pytest

from repogrok.config import RepoFile
from repogrok.file_manipulation import (
    add_line_numbers,
    build_tree_lines,
    in_default_excludes,
    normalize_globs,
    process_files,
    remove_empty_lines,
    select_files,
    strip_comment_lines,
)


@pytest.mark.unit
def test_normalize_globs_strips_and_normalizes() -> None:
    globs = ["  src/**/*.py ", "\\tests\\*.py", ""]

    assert normalize_globs(globs) == ["src/**/*.py", "/tests/*.py"]


@pytest.mark.unit
def test_select_files_respects_includes_excludes() -> None:
    keep = RepoFile(path="src/main.py", content="print('ok')")
    drop = RepoFile(path="src/data.bin", content="")
    other = RepoFile(path="docs/index.md", content="# doc")

    selected = select_files([drop, other, keep], includes=["src/*"], excludes=["**/*.bin"])

    assert selected == [keep]


@pytest.mark.unit
def test_select_files_without_globs_sorts_case_insensitively() -> None:
    files = [RepoFile(path="src/b.py"), RepoFile(path="README.md"), RepoFile(path="src/A.py")]

    selected = select_files(files)

    assert [f.path for f in selected] == ["README.md", "src/A.py", "src/b.py"]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("node_modules/x.js", True),
        ("web/node_modules/react/index.js", True),
        ("package-lock.json", True),
        ("dist/app.min.js", True),
        ("assets/app.js.map", True),
        (".env", True),
        ("config/.env.production", True),
        ("src/__pycache__/mod.cpython-312.pyc", True),
        ("src/build_utils.py", False),
        ("src/distance.js", False),
        ("README.md", False),
    ],
)
def test_in_default_excludes(path: str, expected: bool) -> None:
    assert in_default_excludes(path) is expected


@pytest.mark.unit
def test_select_files_applies_default_excludes() -> None:
    files = [
        RepoFile(path="node_modules/x.js", content=""),
        RepoFile(path="package-lock.json", content="{}"),
        RepoFile(path="src/app.js", content=""),
    ]

    assert [f.path for f in select_files(files)] == ["src/app.js"]
    assert [f.path for f in select_files(files, use_default_excludes=False)] == [
        "node_modules/x.js",
        "package-lock.json",
        "src/app.js",
    ]


@pytest.mark.unit
def test_build_tree_lines_lists_dirs_before_files() -> None:
    lines = build_tree_lines("repo", ["src/app.py", "README.md", "src/util/io.py"])

    assert lines == [
        "repo",
        "├── src/",
        "│   ├── util/",
        "│   │   └── io.py",
        "│   └── app.py",
        "└── README.md",
    ]


@pytest.mark.unit
def test_strip_comment_lines_python_keeps_shebang_and_trailing_comments() -> None:
    source = "#!/usr/bin/env python\n# comment\nx = 1  # keep\n"

    assert strip_comment_lines(source, "tool.py") == "#!/usr/bin/env python\nx = 1  # keep\n"


@pytest.mark.unit
def test_strip_comment_lines_c_family_drops_blocks_and_line_comments() -> None:
    source = "/* header\n * more\n */\nconst a = 1; // trailing\n    // whole\nconst b = 2;\n"

    stripped = strip_comment_lines(source, "src/app.ts")

    assert stripped == "const a = 1; // trailing\nconst b = 2;\n"


@pytest.mark.unit
def test_strip_comment_lines_keeps_code_after_inline_block() -> None:
    source = "/* a */ x = 1;\n/* b */\ny = 2;\n"

    assert strip_comment_lines(source, "main.c") == "/* a */ x = 1;\ny = 2;\n"


@pytest.mark.unit
def test_strip_comment_lines_leaves_unknown_types_alone() -> None:
    source = "# Title\n// not a comment here\n"

    assert strip_comment_lines(source, "README.md") == source


@pytest.mark.unit
def test_remove_empty_lines_and_add_line_numbers() -> None:
    assert remove_empty_lines("a\n\n  \nb") == "a\nb"
    assert add_line_numbers("a\nb") == "   1 | a\n   2 | b"


@pytest.mark.unit
def test_process_files_applies_transforms_in_order() -> None:
    files = [RepoFile(path="x.py", content="# c\n\nx = 1")]

    processed = process_files(files, remove_comments=True, drop_empty_lines=True, show_line_numbers=True)

    assert processed == [RepoFile(path="x.py", content="   1 | x = 1")]
    assert files[0].content == "# c\n\nx = 1"


@pytest.mark.unit
def test_process_files_without_transforms_returns_same_records() -> None:
    files = [RepoFile(path="x.py", content="# c")]

    assert process_files(files) == files
