"""Importance scoring and greedy token-budget packing.

Selection is a greedy approximation of a knapsack: files are taken in score
order and a file that does not fit is skipped for good. The result is not the
fullest possible packing, but it is deterministic and puts the most important
files first.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import TYPE_CHECKING

from repogrok.config import DEFAULT_SCORING_RULES, BudgetResult, ScoredFile, ScoringRules
from repogrok.exceptions import InvalidBudgetFormatError
from repogrok.logging import logger
from repogrok.tokens import estimate_tokens

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repogrok.config import RepoFile

_BUDGET_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*(k|m)?$", re.ASCII)
_SUFFIX_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}


def score_file(file: RepoFile, rules: ScoringRules = DEFAULT_SCORING_RULES) -> int:
    """Compute the additive importance score of a file.

    Only the lower-cased path and the content length are considered.

    Args:
        file (RepoFile): the file to score
        rules (ScoringRules): heuristic weights. Defaults to DEFAULT_SCORING_RULES.

    Returns:
        int: the score, which may be negative
    """
    p = file.path.lower()
    score = 0

    if p in rules.manifest_files:
        score += rules.manifest_weight
    if any(marker in p for marker in rules.config_markers):
        score += rules.config_weight
    if any(marker in p for marker in rules.readme_markers):
        score += rules.readme_weight
    if rules.entry_point_pattern.search(p):
        score += rules.entry_point_weight
    if any(marker in p for marker in rules.test_markers):
        score += rules.test_weight

    score += max(0, rules.size_bonus_max - len(file.content) // rules.size_bonus_step)

    if p.startswith(rules.source_prefixes):
        score += rules.source_weight

    return score


def score_files(files: Sequence[RepoFile], rules: ScoringRules = DEFAULT_SCORING_RULES) -> list[ScoredFile]:
    return [
        ScoredFile(
            path=f.path,
            content=f.content,
            tokens=estimate_tokens(f.content),
            score=score_file(f, rules),
        )
        for f in files
    ]


def optimize_for_budget(
    files: Sequence[RepoFile],
    budget_tokens: int | None,
    rules: ScoringRules = DEFAULT_SCORING_RULES,
) -> BudgetResult:
    """Select the highest-scoring files that fit in a token budget.

    Files are stably sorted by descending score, then walked once: a file is
    kept iff it still fits in what is left of the budget.

    Args:
        files (Sequence[RepoFile]): the candidate files
        budget_tokens (int | None): the token ceiling; None keeps every file
        rules (ScoringRules): heuristic weights. Defaults to DEFAULT_SCORING_RULES.

    Raises:
        ValueError: if `budget_tokens` is negative

    Returns:
        BudgetResult: the selection in score order with token accounting
    """
    if budget_tokens is not None and budget_tokens < 0:
        msg = f"budget_tokens must be >= 0, got {budget_tokens}"
        raise ValueError(msg)

    scored = sorted(score_files(files, rules), key=lambda f: f.score, reverse=True)

    selected: list[ScoredFile] = []
    used_tokens = 0
    for file in scored:
        if budget_tokens is None or used_tokens + file.tokens <= budget_tokens:
            selected.append(file)
            used_tokens += file.tokens

    result = BudgetResult(
        selected=selected,
        used_tokens=used_tokens,
        total_tokens=sum(f.tokens for f in scored),
        dropped_files=len(scored) - len(selected),
        budget_tokens=budget_tokens,
    )
    logger.info(
        "budget_optimized",
        budget_tokens=budget_tokens,
        candidates=len(scored),
        selected=len(selected),
        used_tokens=result.used_tokens,
        total_tokens=result.total_tokens,
    )
    return result


def parse_budget(budget: str | int) -> int:
    """Parse a token budget such as "128k", "1.5K", "1m" or "50000".

    Args:
        budget (str | int): the budget; surrounding whitespace and case are ignored

    Raises:
        InvalidBudgetFormatError: if the value is not a number with an optional k/m suffix

    Returns:
        int: the budget in tokens, floored
    """
    text = str(budget).strip().lower()
    match = _BUDGET_RE.match(text)
    if match is None:
        raise InvalidBudgetFormatError(value=str(budget))
    number = Decimal(match.group(1))
    multiplier = _SUFFIX_MULTIPLIERS.get(match.group(2) or "", 1)
    return int(number * multiplier)
