"""repogrok: pick, rank and describe repository files for LLM context."""

from repogrok.budget import optimize_for_budget, parse_budget, score_file
from repogrok.config import (
    BudgetResult,
    ImportanceEntry,
    LanguageStat,
    ModelCost,
    ModelPricing,
    RepoFile,
    ScoredFile,
    ScoringRules,
)
from repogrok.dependency_graph import build_dependency_graph, format_dependency_graph
from repogrok.exceptions import (
    ConfigFileError,
    InvalidBudgetFormatError,
    RepogrokError,
    UnknownPromptTemplateError,
)
from repogrok.importance import format_importance_ranking, rank_files_by_importance
from repogrok.language_stats import calculate_language_stats, format_language_stats
from repogrok.packer import PackResult, pack
from repogrok.settings import Settings, load_settings
from repogrok.tokens import estimate_cost, estimate_tokens

__version__ = "1.0.0"

__all__ = [
    "BudgetResult",
    "ConfigFileError",
    "ImportanceEntry",
    "InvalidBudgetFormatError",
    "LanguageStat",
    "ModelCost",
    "ModelPricing",
    "PackResult",
    "RepoFile",
    "RepogrokError",
    "ScoredFile",
    "ScoringRules",
    "Settings",
    "UnknownPromptTemplateError",
    "__version__",
    "build_dependency_graph",
    "calculate_language_stats",
    "estimate_cost",
    "estimate_tokens",
    "format_dependency_graph",
    "format_importance_ranking",
    "format_language_stats",
    "load_settings",
    "optimize_for_budget",
    "pack",
    "parse_budget",
    "rank_files_by_importance",
    "score_file",
]
