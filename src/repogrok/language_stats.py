from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from repogrok.config import LANGUAGE_MAP, OTHER_LANGUAGE, LanguageStat

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from repogrok.config import RepoFile

NO_FILES_ANALYZED = "No files analyzed.\n"


@dataclass
class _Bucket:
    files: int = 0
    lines: int = 0
    characters: int = 0


def classify_language(path: str, language_map: Mapping[str, str] = LANGUAGE_MAP) -> str:
    """Classify a path by extension, falling back to its exact base name.

    The base name fallback covers conventional extensionless files such as
    `Dockerfile` or `Makefile`.

    Args:
        path (str): the relative file path
        language_map (Mapping[str, str]): lower-cased extension or base name to label

    Returns:
        str: the language label, or "Other"
    """
    name = PurePosixPath(path).name.lower()
    ext = name.rsplit(".", 1)[-1] if "." in name else ""
    return language_map.get(ext) or language_map.get(name) or OTHER_LANGUAGE


def count_lines(content: str) -> int:
    # newline-delimited segments: "" and "a" are one line, "a\n" is two
    return content.count("\n") + 1


def calculate_language_stats(
    files: Iterable[RepoFile],
    language_map: Mapping[str, str] = LANGUAGE_MAP,
) -> list[LanguageStat]:
    """Break down files, lines and characters by language.

    Args:
        files (Iterable[RepoFile]): the files to classify
        language_map (Mapping[str, str]): extension or base name to label. Defaults to LANGUAGE_MAP.

    Returns:
        list[LanguageStat]: one entry per language, most lines first. Percentages are
            shares of total lines to one decimal, "0.0" everywhere when there are no lines.
    """
    buckets: dict[str, _Bucket] = {}
    for file in files:
        bucket = buckets.setdefault(classify_language(file.path, language_map), _Bucket())
        bucket.files += 1
        bucket.lines += count_lines(file.content)
        bucket.characters += len(file.content)

    total_lines = sum(b.lines for b in buckets.values())
    ordered = sorted(buckets.items(), key=lambda item: item[1].lines, reverse=True)
    return [
        LanguageStat(
            language=language,
            files=bucket.files,
            lines=bucket.lines,
            characters=bucket.characters,
            percentage=f"{bucket.lines / total_lines * 100:.1f}" if total_lines > 0 else "0.0",
        )
        for language, bucket in ordered
    ]


def format_language_stats(stats: Sequence[LanguageStat]) -> str:
    """Render language statistics as an aligned table."""
    if not stats:
        return NO_FILES_ANALYZED

    width = max(max(len(s.language) for s in stats), 8) + 2
    lines = [
        f"{'Language':<{width}}{'Files':>6}{'Lines':>10}     %",
        "-" * (width + 6 + 10 + 6),
    ]
    lines.extend(f"{s.language:<{width}}{s.files:>6}{s.lines:>10}{s.percentage + '%':>6}" for s in stats)
    return "\n".join(lines) + "\n"
