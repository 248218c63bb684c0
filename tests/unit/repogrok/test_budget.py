from __future__ import annotations

import pytest

from repogrok.budget import optimize_for_budget, parse_budget, score_file
from repogrok.config import RepoFile, ScoringRules
from repogrok.exceptions import InvalidBudgetFormatError, RepogrokError


@pytest.mark.unit
@pytest.mark.parametrize(
    ("path", "size", "expected"),
    [
        ("package.json", 0, 130),
        ("Cargo.toml", 0, 130),
        ("README.md", 0, 110),
        ("config/settings.json", 0, 80),
        (".env.example", 0, 80),
        ("app.ts", 0, 120),
        ("src/server.tsx", 0, 140),
        ("src/utils.js", 2_500, 48),
        ("lib/big.js", 40_000, 20),
        ("tests/test_app.py", 0, 10),
        ("src/config.test.js", 0, 80),
        ("docs/guide.md", 31_000, 0),
    ],
)
def test_score_file_stacks_heuristics(path: str, size: int, expected: int) -> None:
    file = RepoFile(path=path, content="x" * size)

    assert score_file(file) == expected


@pytest.mark.unit
def test_score_file_entry_point_only_at_root_or_src() -> None:
    nested = RepoFile(path="src/pages/index.js", content="")
    root = RepoFile(path="index.js", content="")

    assert score_file(root) - score_file(nested) == 90 - 20  # noqa: PLR2004


@pytest.mark.unit
def test_score_file_uses_custom_rules() -> None:
    rules = ScoringRules(manifest_weight=500, size_bonus_max=0)

    assert score_file(RepoFile(path="package.json"), rules) == 500  # noqa: PLR2004


@pytest.mark.unit
def test_optimize_selects_manifest_and_entry_point(precedence_files: list[RepoFile]) -> None:
    result = optimize_for_budget(precedence_files, 20)

    assert {f.path for f in result.selected} == {"package.json", "src/index.js"}
    assert [f.path for f in result.selected] == ["src/index.js", "package.json"]
    assert result.used_tokens == 20  # noqa: PLR2004
    assert result.total_tokens == 30  # noqa: PLR2004
    assert result.dropped_files == 1


@pytest.mark.unit
def test_optimize_never_exceeds_budget(precedence_files: list[RepoFile]) -> None:
    extra = [*precedence_files, RepoFile(path="README.md", content="y" * 90)]

    for budget in range(0, 80, 3):
        result = optimize_for_budget(extra, budget)

        assert result.used_tokens <= budget
        assert result.dropped_files == len(extra) - len(result.selected)


@pytest.mark.unit
def test_optimize_without_budget_keeps_everything(precedence_files: list[RepoFile]) -> None:
    result = optimize_for_budget(precedence_files, None)

    assert len(result.selected) == len(precedence_files)
    assert result.dropped_files == 0
    assert result.used_tokens == result.total_tokens
    assert result.budget_tokens is None


@pytest.mark.unit
def test_optimize_zero_budget_selects_nothing(precedence_files: list[RepoFile]) -> None:
    result = optimize_for_budget(precedence_files, 0)

    assert result.selected == []
    assert result.used_tokens == 0
    assert result.dropped_files == len(precedence_files)


@pytest.mark.unit
def test_optimize_empty_input() -> None:
    result = optimize_for_budget([], 1_000)

    assert result.selected == []
    assert result.total_tokens == 0
    assert result.dropped_files == 0


@pytest.mark.unit
def test_optimize_rejects_negative_budget(precedence_files: list[RepoFile]) -> None:
    with pytest.raises(ValueError, match="budget_tokens"):
        optimize_for_budget(precedence_files, -1)


@pytest.mark.unit
def test_optimize_is_deterministic(precedence_files: list[RepoFile]) -> None:
    first = optimize_for_budget(precedence_files, 25)
    second = optimize_for_budget(precedence_files, 25)

    assert [f.path for f in first.selected] == [f.path for f in second.selected]


@pytest.mark.unit
def test_optimize_keeps_input_order_for_equal_scores() -> None:
    files = [
        RepoFile(path="src/b.js", content="b" * 8),
        RepoFile(path="src/a.js", content="a" * 8),
    ]

    result = optimize_for_budget(files, 100)

    assert [f.path for f in result.selected] == ["src/b.js", "src/a.js"]


@pytest.mark.unit
def test_optimize_does_not_backtrack() -> None:
    # scores: package.json 130 (50 tokens), README.md 110 (30 tokens), src/a.js 50 (15 tokens)
    files = [
        RepoFile(path="src/a.js", content="a" * 60),
        RepoFile(path="README.md", content="r" * 120),
        RepoFile(path="package.json", content="p" * 200),
    ]

    result = optimize_for_budget(files, 40)

    assert [f.path for f in result.selected] == ["README.md"]
    assert result.used_tokens == 30  # noqa: PLR2004


@pytest.mark.unit
def test_optimize_used_tokens_grow_with_budget(precedence_files: list[RepoFile]) -> None:
    used = [optimize_for_budget(precedence_files, budget).used_tokens for budget in range(0, 45)]

    assert used == sorted(used)


@pytest.mark.unit
def test_optimize_scored_files_carry_tokens_and_scores(precedence_files: list[RepoFile]) -> None:
    result = optimize_for_budget(precedence_files, None)

    by_path = {f.path: f for f in result.selected}
    assert by_path["package.json"].tokens == 10  # noqa: PLR2004
    assert by_path["package.json"].score == 130  # noqa: PLR2004
    assert by_path["test/big.test.js"].score == 10  # noqa: PLR2004


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("128k", 128_000),
        ("1m", 1_000_000),
        ("1.5k", 1_500),
        ("50000", 50_000),
        ("  256K ", 256_000),
        ("2.5M", 2_500_000),
        ("10 k", 10_000),
        ("0.29k", 290),
        ("99.9", 99),
        ("0", 0),
        (4096, 4096),
    ],
)
def test_parse_budget_accepts_numbers_and_shorthand(text: str | int, expected: int) -> None:
    assert parse_budget(text) == expected


@pytest.mark.unit
@pytest.mark.parametrize("text", ["abc", "", "-5", "1.5g", "k", "1,000", "1.k", "1e3", "١٢٨k"])
def test_parse_budget_rejects_invalid_format(text: str) -> None:
    with pytest.raises(InvalidBudgetFormatError) as exc_info:
        parse_budget(text)

    assert exc_info.value.value == text
    assert "Invalid budget format" in str(exc_info.value)
    assert '"128k"' in str(exc_info.value)
    assert isinstance(exc_info.value, RepogrokError)
