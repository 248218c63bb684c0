from __future__ import annotations

import fnmatch
import re
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from repogrok.config import DEFAULT_EXCLUDED_DIRS, DEFAULT_EXCLUDES, RepoFile
from repogrok.logging import logger

if TYPE_CHECKING:
    from collections.abc import Sequence

HASH_COMMENT_EXTENSIONS = frozenset(
    {".py", ".rb", ".sh", ".bash", ".zsh", ".fish", ".yaml", ".yml", ".toml", ".r", ".pl", ".ex", ".exs", ".tf"},
)
SLASH_COMMENT_EXTENSIONS = frozenset(
    {
        ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".java", ".c", ".h", ".cc", ".cpp", ".cxx", ".hpp",
        ".cs", ".go", ".rs", ".swift", ".kt", ".kts", ".scala", ".dart", ".php", ".vue", ".svelte",
    },
)  # fmt: skip

_BLOCK_COMMENT = re.compile(r"^[ \t]*/\*(?:(?!\*/).)*\*/[ \t]*(?:\n|$)", re.DOTALL | re.MULTILINE)


def normalize_globs(globs: Sequence[str]) -> list[str]:
    """Normalize a sequence of path glob patterns.

    Strips whitespace, drops empty entries and replaces backslashes with
    forward slashes.

    Args:
        globs (Sequence[str]): the glob patterns to normalize

    Returns:
        list[str]: the normalized glob patterns
    """
    out: list[str] = []
    for g in globs:
        g2 = (g or "").strip()
        if not g2:
            continue
        out.append(g2.replace("\\", "/"))
    return out


def match_any_glob(rel: str, globs: Sequence[str]) -> bool:
    return any(fnmatch.fnmatch(rel, g) for g in globs)


def in_default_excludes(rel: str) -> bool:
    """Tell whether a path falls under the built-in ignore rules.

    A path is ignored when one of its directories is in DEFAULT_EXCLUDED_DIRS
    or its base name matches one of DEFAULT_EXCLUDES.
    """
    *dirs, name = rel.split("/")
    return any(d in DEFAULT_EXCLUDED_DIRS for d in dirs) or match_any_glob(name, DEFAULT_EXCLUDES)


def select_files(
    files: Sequence[RepoFile],
    includes: Sequence[str] = (),
    excludes: Sequence[str] = (),
    *,
    use_default_excludes: bool = True,
) -> list[RepoFile]:
    """Apply include/exclude globs to in-memory files.

    - If `includes` is given, a file must match at least one include pattern.
    - A file matching any `excludes` pattern is removed.
    - Unless `use_default_excludes` is False, dependency, build and VCS
      directories, lockfiles, minified and binary assets and `.env` files are removed.

    Note that `fnmatch` lets `*` cross directory separators, so "src/*.py"
    also matches "src/pkg/mod.py".

    Args:
        files (Sequence[RepoFile]): the candidate files
        includes (Sequence[str]): glob patterns to keep, relative to the repository root
        excludes (Sequence[str]): glob patterns to drop, relative to the repository root
        use_default_excludes (bool): also apply the built-in ignore rules

    Returns:
        list[RepoFile]: the kept files, sorted by lower-cased path
    """
    inc = normalize_globs(includes)
    exc = normalize_globs(excludes)

    out: list[RepoFile] = []
    for f in files:
        if use_default_excludes and in_default_excludes(f.path):
            continue
        if inc and not match_any_glob(f.path, inc):
            continue
        if exc and match_any_glob(f.path, exc):
            continue
        out.append(f)
    logger.info("files_selected", candidates=len(files), kept=len(out))
    return sorted(out, key=lambda f: f.path.lower())


def build_tree_lines(root_name: str, rel_paths: Sequence[str]) -> list[str]:
    """Build a visual tree representation of file paths.

    Args:
        root_name (str): the name to use for the root of the tree
        rel_paths (Sequence[str]): file paths relative to the root, using POSIX separators (e.g. "src/main.py")

    Returns:
        list[str]: a list of strings representing the tree structure, suitable for printing
    """
    rels = sorted(
        {p.strip("/").replace("\\", "/") for p in rel_paths if p.strip()},
        key=str.lower,
    )
    tree: dict[str, Any] = {}
    for rp in rels:
        cur = tree
        parts = rp.split("/")
        for i, part in enumerate(parts):
            if i == len(parts) - 1:
                cur.setdefault("__files__", set()).add(part)
            else:
                cur = cur.setdefault(part, {})

    lines: list[str] = [root_name]

    def walk(node: dict[str, Any], prefix: str) -> None:
        dirs = sorted([k for k in node if k != "__files__"], key=str.lower)
        files = sorted(node.get("__files__", set()), key=str.lower)
        entries: list[tuple[str, str, Any]] = []
        entries.extend(("dir", d, node[d]) for d in dirs)
        entries.extend(("file", f, None) for f in files)
        for idx, (kind, name, child) in enumerate(entries):
            last = idx == len(entries) - 1
            branch = "└── " if last else "├── "
            lines.append(prefix + branch + name + ("/" if kind == "dir" else ""))
            if kind == "dir":
                ext = "    " if last else "│   "
                walk(child, prefix + ext)

    walk(tree, "")
    return lines


def strip_comment_lines(content: str, path: str) -> str:
    """Remove comments that occupy whole lines.

    Handles `#` comments for hash-comment languages, `//` comments and
    `/* ... */` blocks that start on their own line for C-family languages.
    Trailing comments after code are kept, as are files of other types.

    Args:
        content (str): the file contents
        path (str): the file path, used to pick the comment syntax

    Returns:
        str: the contents without whole-line comments
    """
    suffix = PurePosixPath(path).suffix.lower()
    if suffix in HASH_COMMENT_EXTENSIONS:
        marker = "#"
    elif suffix in SLASH_COMMENT_EXTENSIONS:
        marker = "//"
        content = _BLOCK_COMMENT.sub("", content)
    else:
        return content

    kept: list[str] = []
    for i, line in enumerate(content.split("\n")):
        stripped = line.lstrip()
        # shebang stays
        if i == 0 and stripped.startswith("#!"):
            kept.append(line)
            continue
        if stripped.startswith(marker):
            continue
        kept.append(line)
    return "\n".join(kept)


def remove_empty_lines(content: str) -> str:
    return "\n".join(line for line in content.split("\n") if line.strip())


def add_line_numbers(content: str) -> str:
    return "\n".join(f"{i:>4} | {line}" for i, line in enumerate(content.split("\n"), start=1))


def process_files(
    files: Sequence[RepoFile],
    *,
    remove_comments: bool = False,
    drop_empty_lines: bool = False,
    show_line_numbers: bool = False,
) -> list[RepoFile]:
    """Apply content transforms to files, in a fixed order.

    Comments go first, then empty lines, then line numbers are added.

    Args:
        files (Sequence[RepoFile]): the files to transform
        remove_comments (bool): drop whole-line comments
        drop_empty_lines (bool): drop blank lines
        show_line_numbers (bool): prefix each line with its 1-based number

    Returns:
        list[RepoFile]: new file records; inputs are left untouched
    """
    if not (remove_comments or drop_empty_lines or show_line_numbers):
        return list(files)

    out: list[RepoFile] = []
    for f in files:
        content = f.content
        if remove_comments:
            content = strip_comment_lines(content, f.path)
        if drop_empty_lines:
            content = remove_empty_lines(content)
        if show_line_numbers:
            content = add_line_numbers(content)
        out.append(RepoFile(path=f.path, content=content))
    return out
