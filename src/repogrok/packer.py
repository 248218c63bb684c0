from __future__ import annotations

from contextlib import nullcontext
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from repogrok.budget import optimize_for_budget, parse_budget
from repogrok.config import BudgetResult, ImportanceEntry, LanguageStat, ModelCost, RepoFile
from repogrok.dependency_graph import ReferenceGraph, build_dependency_graph
from repogrok.file_manipulation import build_tree_lines, process_files, select_files
from repogrok.importance import rank_files_by_importance
from repogrok.language_stats import calculate_language_stats
from repogrok.logging import log_to_file, logger
from repogrok.prompts import get_prompt_template
from repogrok.settings import Settings
from repogrok.tokens import count_file_tokens, estimate_cost

if TYPE_CHECKING:
    from collections.abc import Sequence


class PackResult(BaseModel):
    """Everything a formatter or summary printer needs about one pack run.

    Attributes:
        files: Selected files, in score order, after content transforms.
        budget: Token accounting of the selection.
        dependency_graph: Local reference graph over every candidate file.
        importance: In-degree ranking over every candidate file, cut to `top_n` rows when set.
        language_stats: Per-language breakdown of the selected files.
        total_tokens: Estimated tokens of the selected files.
        total_characters: Characters of the selected files.
        cost_estimate: Input cost of `total_tokens` per model.
        directory_tree: Tree lines of the selected paths.
        instruction: Resolved prompt instruction, empty when none.
    """

    model_config = ConfigDict(frozen=True)

    files: list[RepoFile] = Field(default_factory=list)
    budget: BudgetResult = Field(default_factory=BudgetResult)
    dependency_graph: ReferenceGraph = Field(default_factory=dict)
    importance: list[ImportanceEntry] = Field(default_factory=list)
    language_stats: list[LanguageStat] = Field(default_factory=list)
    total_tokens: int = 0
    total_characters: int = 0
    cost_estimate: dict[str, ModelCost] = Field(default_factory=dict)
    directory_tree: list[str] = Field(default_factory=list)
    instruction: str = ""


def resolve_instruction(settings: Settings) -> str:
    if settings.prompt:
        return get_prompt_template(settings.prompt)
    return settings.instruction


def pack(files: Sequence[RepoFile], settings: Settings | None = None) -> PackResult:
    """Select, rank and describe a set of in-memory files.

    The budget string and the prompt name are validated before any file is
    scanned, so a bad value fails without paying the scan cost.
    When `settings.log_file` is set, the run's events are also written there.

    Args:
        files (Sequence[RepoFile]): decoded candidate files, already past secret redaction
        settings (Settings | None): run configuration. Defaults to `Settings()`.

    Raises:
        InvalidBudgetFormatError: if `settings.budget` cannot be parsed
        UnknownPromptTemplateError: if `settings.prompt` is not a known template

    Returns:
        PackResult: the selection and its derived views
    """
    settings = settings or Settings()
    run_log = log_to_file(settings.log_file, settings.log_level) if settings.log_file else nullcontext()
    with run_log:
        return _pack(files, settings)


def _pack(files: Sequence[RepoFile], settings: Settings) -> PackResult:
    budget_tokens = parse_budget(settings.budget) if settings.budget.strip() else None
    instruction = resolve_instruction(settings)

    candidates = select_files(
        files,
        settings.include,
        settings.exclude,
        use_default_excludes=settings.use_default_excludes,
    )
    processed = process_files(
        candidates,
        remove_comments=settings.remove_comments,
        drop_empty_lines=settings.remove_empty_lines,
        show_line_numbers=settings.show_line_numbers,
    )

    budget = optimize_for_budget(processed, budget_tokens, settings.scoring)
    selected = [RepoFile(path=f.path, content=f.content) for f in budget.selected]

    graph = build_dependency_graph(processed)
    importance = rank_files_by_importance(processed)
    if settings.top_n is not None:
        importance = importance[: settings.top_n]
    language_stats = calculate_language_stats(selected, settings.language_map)

    token_counts = count_file_tokens(selected)
    result = PackResult(
        files=selected,
        budget=budget,
        dependency_graph=graph,
        importance=importance,
        language_stats=language_stats,
        total_tokens=token_counts.total_tokens,
        total_characters=sum(len(f.content) for f in selected),
        cost_estimate=estimate_cost(token_counts.total_tokens, settings.cost_table),
        directory_tree=build_tree_lines(settings.root_name, [f.path for f in selected]),
        instruction=instruction,
    )
    logger.info(
        "pack_completed",
        candidates=len(processed),
        selected=len(selected),
        dropped=budget.dropped_files,
        total_tokens=result.total_tokens,
    )
    return result
