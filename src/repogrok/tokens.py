"""Approximate token counting and model cost estimates.

Token counts use a flat four-characters-per-token ratio instead of a real
tokenizer, so counting is O(1) in the text length and needs no model files.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from repogrok.config import DEFAULT_COST_TABLE, ModelCost

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from repogrok.config import ModelPricing, RepoFile

CHARS_PER_TOKEN = 4

_WINDOW_MULTIPLIERS = {"K": 1_000, "M": 1_000_000}


@dataclass(frozen=True)
class TokenCount:
    total_tokens: int
    total_characters: int


@dataclass(frozen=True)
class FileTokenCount:
    path: str
    tokens: int


@dataclass(frozen=True)
class FileTokenCounts:
    total_tokens: int
    file_token_counts: list[FileTokenCount] = field(default_factory=list)


def estimate_tokens(text: str) -> int:
    """Estimate the language-model token count of `text`.

    Args:
        text (str): any string, possibly empty

    Returns:
        int: ceil(len(text) / 4); 0 for the empty string
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def count_tokens(text: str) -> TokenCount:
    return TokenCount(total_tokens=estimate_tokens(text), total_characters=len(text))


def count_file_tokens(files: Iterable[RepoFile]) -> FileTokenCounts:
    """Estimate tokens per file and in total.

    The total is the sum of per-file estimates, which can exceed the estimate
    of the concatenated text by up to one token per file.

    Args:
        files (Iterable[RepoFile]): the files to count

    Returns:
        FileTokenCounts: the total and one entry per file, in input order
    """
    counts = [FileTokenCount(path=f.path, tokens=estimate_tokens(f.content)) for f in files]
    return FileTokenCounts(total_tokens=sum(c.tokens for c in counts), file_token_counts=counts)


def parse_context_window(window: str) -> float:
    """Convert a context window label such as "200K" or "1M" to a token count.

    Args:
        window (str): the label; a bare number is taken as-is

    Returns:
        float: the number of tokens the window holds
    """
    label = window.strip().upper()
    for suffix, multiplier in _WINDOW_MULTIPLIERS.items():
        if label.endswith(suffix):
            return float(label[: -len(suffix)]) * multiplier
    return float(label)


def estimate_cost(
    token_count: int,
    cost_table: Mapping[str, ModelPricing] = DEFAULT_COST_TABLE,
) -> dict[str, ModelCost]:
    """Estimate the input cost of `token_count` tokens for every model of `cost_table`.

    Args:
        token_count (int): number of input tokens
        cost_table (Mapping[str, ModelPricing]): model name to pricing. Defaults to DEFAULT_COST_TABLE.

    Returns:
        dict[str, ModelCost]: per model, the cost formatted as "$0.0000", the context
            window label and whether the tokens fit in that window
    """
    costs: dict[str, ModelCost] = {}
    for model, pricing in cost_table.items():
        input_cost = token_count / 1_000_000 * pricing.input
        costs[model] = ModelCost(
            estimated_cost=f"${input_cost:.4f}",
            context_window=pricing.context_window,
            fits_in_context=token_count <= parse_context_window(pricing.context_window),
        )
    return costs


def format_cost_estimate(costs: Mapping[str, ModelCost]) -> str:
    """Render cost estimates as aligned plain-text lines for summary printers."""
    lines: list[str] = []
    for model, info in costs.items():
        fits = "fits" if info.fits_in_context else "exceeds context"
        lines.append(f"{model:<22} {info.estimated_cost:<10} ({info.context_window} context - {fits})")
    return "\n".join(lines) + ("\n" if lines else "")
