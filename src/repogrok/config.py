from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

MANIFEST_FILES: frozenset[str] = frozenset(
    {
        "package.json",
        "cargo.toml",
        "pyproject.toml",
        "go.mod",
        "gemfile",
        "requirements.txt",
        "pom.xml",
        "build.gradle",
    },
)

# Directory names skipped at any depth.
DEFAULT_EXCLUDED_DIRS: frozenset[str] = frozenset(
    {
        ".git", ".svn", ".hg", "node_modules", "dist", "build", "out", ".next", ".nuxt",
        "coverage", ".nyc_output", "__pycache__", ".idea", ".vscode",
    },
)  # fmt: skip

# Base-name globs for generated, binary and secret-bearing files.
DEFAULT_EXCLUDES: tuple[str, ...] = (
    "*.min.js", "*.min.css", "*.map",
    "*.lock", "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
    ".env", ".env.*",
    "*.png", "*.jpg", "*.jpeg", "*.gif", "*.ico", "*.svg", "*.webp",
    "*.woff", "*.woff2", "*.ttf", "*.eot",
    "*.mp3", "*.mp4", "*.avi", "*.mov",
    "*.zip", "*.tar", "*.gz", "*.rar",
    "*.pdf", "*.doc", "*.docx", "*.xls", "*.xlsx",
    "*.exe", "*.dll", "*.so", "*.dylib",
    "*.pyc", "*.pyo",
    ".DS_Store", "Thumbs.db", "*.swp", "*.swo",
    "repogrok-output.*",
)  # fmt: skip

LANGUAGE_MAP: Mapping[str, str] = MappingProxyType(
    {
        "js": "JavaScript",
        "jsx": "JavaScript (JSX)",
        "ts": "TypeScript",
        "tsx": "TypeScript (TSX)",
        "mjs": "JavaScript (ESM)",
        "cjs": "JavaScript (CJS)",
        "py": "Python",
        "rb": "Ruby",
        "go": "Go",
        "rs": "Rust",
        "java": "Java",
        "c": "C",
        "cpp": "C++",
        "cc": "C++",
        "cxx": "C++",
        "h": "C/C++ Header",
        "hpp": "C++ Header",
        "cs": "C#",
        "swift": "Swift",
        "kt": "Kotlin",
        "kts": "Kotlin Script",
        "php": "PHP",
        "r": "R",
        "scala": "Scala",
        "dart": "Dart",
        "lua": "Lua",
        "zig": "Zig",
        "nim": "Nim",
        "ex": "Elixir",
        "exs": "Elixir",
        "erl": "Erlang",
        "hs": "Haskell",
        "ml": "OCaml",
        "clj": "Clojure",
        "vue": "Vue",
        "svelte": "Svelte",
        "astro": "Astro",
        "html": "HTML",
        "htm": "HTML",
        "css": "CSS",
        "scss": "SCSS",
        "less": "LESS",
        "sass": "Sass",
        "json": "JSON",
        "yaml": "YAML",
        "yml": "YAML",
        "toml": "TOML",
        "xml": "XML",
        "md": "Markdown",
        "mdx": "MDX",
        "txt": "Text",
        "sh": "Shell",
        "bash": "Bash",
        "zsh": "Zsh",
        "fish": "Fish",
        "ps1": "PowerShell",
        "bat": "Batch",
        "sql": "SQL",
        "graphql": "GraphQL",
        "gql": "GraphQL",
        "proto": "Protocol Buffers",
        "dockerfile": "Dockerfile",
        "makefile": "Makefile",
        "cmake": "CMake",
        "tf": "Terraform",
        "hcl": "HCL",
    },
)

OTHER_LANGUAGE = "Other"

_CONTEXT_WINDOW_RE = re.compile(r"^\d+(?:\.\d+)?\s*[km]?$", re.ASCII | re.IGNORECASE)


class RepoFile(BaseModel):
    """A decoded text file handed to the core.

    Attributes:
        path: Path relative to the repository root, with POSIX separators. Unique key.
        content: Full decoded text, after any upstream transforms.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="File path relative to repository root")
    content: str = Field(default="", description="Decoded file contents")


class ScoredFile(RepoFile):
    """A file with its estimated token cost and heuristic importance score."""

    tokens: int = Field(..., ge=0, description="Estimated token count")
    score: int = Field(..., description="Additive importance score (may be negative)")


class BudgetResult(BaseModel):
    """Outcome of greedy budget packing.

    Attributes:
        selected: Chosen files, highest score first.
        used_tokens: Sum of `tokens` over `selected`.
        total_tokens: Sum of `tokens` over every candidate.
        dropped_files: Number of candidates left out.
        budget_tokens: The budget that was applied; None when unconstrained.
    """

    model_config = ConfigDict(frozen=True)

    selected: list[ScoredFile] = Field(default_factory=list)
    used_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    dropped_files: int = Field(default=0, ge=0)
    budget_tokens: int | None = Field(default=None)


class ImportanceEntry(BaseModel):
    """How many resolved references point at a file."""

    model_config = ConfigDict(frozen=True)

    path: str
    imported_by: int = Field(default=0, ge=0)


class LanguageStat(BaseModel):
    """Size statistics of one language bucket."""

    model_config = ConfigDict(frozen=True)

    language: str
    files: int = Field(..., ge=1)
    lines: int = Field(..., ge=0)
    characters: int = Field(..., ge=0)
    percentage: str = Field(..., description="Share of total lines, one decimal place")


class ModelPricing(BaseModel):
    """Static price sheet entry for one language model."""

    model_config = ConfigDict(frozen=True)

    input: float = Field(..., ge=0, description="USD per million input tokens")
    output: float = Field(..., ge=0, description="USD per million output tokens")
    context_window: str = Field(..., description='Context window size, e.g. "200K" or "1M"')

    @field_validator("context_window", mode="before")
    @classmethod
    def _check_window_label(cls, value: object) -> str:
        text = str(value)
        if not _CONTEXT_WINDOW_RE.match(text.strip()):
            msg = f'context window must be a number with an optional K/M suffix, like "128K"; got "{value}"'
            raise ValueError(msg)
        return text


class ModelCost(BaseModel):
    """Estimated input cost of a token count for one model."""

    model_config = ConfigDict(frozen=True)

    estimated_cost: str
    context_window: str
    fits_in_context: bool


DEFAULT_COST_TABLE: Mapping[str, ModelPricing] = MappingProxyType(
    {
        "claude-sonnet-4": ModelPricing(input=3.00, output=15.00, context_window="200K"),
        "claude-haiku-4": ModelPricing(input=0.80, output=4.00, context_window="200K"),
        "gpt-4o": ModelPricing(input=2.50, output=10.00, context_window="128K"),
        "gpt-4o-mini": ModelPricing(input=0.15, output=0.60, context_window="128K"),
        "gemini-2.0-flash": ModelPricing(input=0.10, output=0.40, context_window="1M"),
        "deepseek-v3": ModelPricing(input=0.27, output=1.10, context_window="64K"),
    },
)


class ScoringRules(BaseModel):
    """Weights of the additive importance heuristics.

    All matching rules stack. Markers are matched against the lower-cased path.
    """

    model_config = ConfigDict(frozen=True)

    manifest_files: frozenset[str] = Field(default=MANIFEST_FILES, description="Exact manifest paths")
    manifest_weight: int = 100
    config_markers: tuple[str, ...] = ("config", ".env.example")
    config_weight: int = 50
    readme_markers: tuple[str, ...] = ("readme",)
    readme_weight: int = 80
    entry_point_pattern: re.Pattern[str] = Field(
        default=re.compile(r"^(src/)?(index|main|app|server)\.[jt]sx?$"),
        description="Entry point path pattern",
    )
    entry_point_weight: int = 90
    test_markers: tuple[str, ...] = ("test", "spec", "__test")
    test_weight: int = -20
    size_bonus_max: int = Field(default=30, ge=0, description="Bonus for an empty file")
    size_bonus_step: int = Field(default=1000, gt=0, description="Characters per bonus point lost")
    source_prefixes: tuple[str, ...] = ("src/", "lib/")
    source_weight: int = 20


DEFAULT_SCORING_RULES = ScoringRules()
