from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, Field, field_validator

from repogrok.config import DEFAULT_COST_TABLE, LANGUAGE_MAP, ModelPricing, ScoringRules
from repogrok.exceptions import ConfigFileError
from repogrok.logging import logger

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "REPOGROK_"
CONFIG_FILE_NAMES = ("repogrok.yaml", "repogrok.yml", "repogrok.config.json")

_ENV_LIST_FIELDS = frozenset({"include", "exclude"})
_ENV_SCALAR_FIELDS = frozenset(
    {
        "budget",
        "remove_comments",
        "remove_empty_lines",
        "show_line_numbers",
        "use_default_excludes",
        "prompt",
        "instruction",
        "top_n",
        "root_name",
        "log_file",
        "log_level",
    },
)


class Settings(BaseModel):
    """Configuration settings for a pack run."""

    budget: str = Field(default="", description='Token budget such as "128k"; empty for no limit.')
    include: list[str] = Field(default_factory=list, description="Include globs.")
    exclude: list[str] = Field(default_factory=list, description="Exclude globs.")
    use_default_excludes: bool = Field(default=True, description="Skip dependency, build and binary files.")

    remove_comments: bool = Field(default=False, description="Strip whole-line comments.")
    remove_empty_lines: bool = Field(default=False, description="Drop blank lines.")
    show_line_numbers: bool = Field(default=False, description="Prefix lines with numbers.")

    prompt: str = Field(default="", description="Prompt template name.")
    instruction: str = Field(default="", description="Free-form instruction when no prompt is set.")
    top_n: int | None = Field(default=None, ge=1, description="Rows of the importance ranking to report.")
    root_name: str = Field(default=".", description="Root label of the directory tree.")

    log_file: str = Field(default="", description="Per-run log file; empty to use the process logging setup.")
    log_level: str = Field(default="INFO", description="Minimum level written to `log_file`.")

    scoring: ScoringRules = Field(default_factory=ScoringRules, description="Importance heuristics.")
    cost_table: dict[str, ModelPricing] = Field(
        default_factory=lambda: dict(DEFAULT_COST_TABLE),
        description="Model pricing used for cost estimates.",
    )
    language_map: dict[str, str] = Field(
        default_factory=lambda: dict(LANGUAGE_MAP),
        description="Extension or base name to language label.",
    )

    @field_validator("budget", mode="before")
    @classmethod
    def _budget_as_text(cls, value: Any) -> str:  # noqa: ANN401
        return "" if value is None else str(value)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge `override` into a copy of `base`.

    Nested mappings are merged key by key; any other value in `override`
    (lists included) replaces the one in `base`.

    Args:
        base (Mapping[str, Any]): the lower-priority values
        override (Mapping[str, Any]): the higher-priority values

    Returns:
        dict[str, Any]: the merged mapping; inputs are not modified
    """
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def find_config_file(directory: Path) -> Path | None:
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON configuration file.

    Args:
        path (Path): the file to read

    Raises:
        ConfigFileError: if the file cannot be read, is not valid YAML/JSON,
            or does not hold a mapping at its top level

    Returns:
        dict[str, Any]: the parsed mapping; empty for an empty file
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigFileError(path=path, reason=str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigFileError(path=path, reason=f"not valid YAML/JSON ({e})") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(path=path, reason=f"expected a mapping, got {type(data).__name__}")
    return data


def read_environment() -> dict[str, str]:
    """Collect variables from the nearest `.env` file, overridden by the process environment."""
    env_file = find_dotenv(usecwd=True)
    values: dict[str, str] = {}
    if env_file:
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    values.update(os.environ)
    return values


def env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Translate `REPOGROK_*` variables into settings values.

    List settings take comma-separated values. Unknown variables are ignored.

    Args:
        env (Mapping[str, str]): environment variables

    Returns:
        dict[str, Any]: settings keys to raw values, left for pydantic to coerce
    """
    out: dict[str, Any] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        if name in _ENV_LIST_FIELDS:
            out[name] = [part.strip() for part in value.split(",") if part.strip()]
        elif name in _ENV_SCALAR_FIELDS:
            out[name] = value
    return out


def load_settings(
    config_path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    *,
    env: Mapping[str, str] | None = None,
    search_dir: Path | None = None,
) -> Settings:
    """Build settings from defaults, a config file, the environment and overrides.

    Later layers win: defaults, then the config file, then `REPOGROK_*`
    variables, then `overrides`. Entries of `cost_table` and `language_map`
    extend the defaults instead of replacing the whole table.

    Args:
        config_path (str | Path | None): explicit config file. When None, the first of
            CONFIG_FILE_NAMES found in `search_dir` is used, if any.
        overrides (Mapping[str, Any] | None): highest-priority values, e.g. from a caller's flags
        env (Mapping[str, str] | None): environment to read. Defaults to `.env` plus `os.environ`.
        search_dir (Path | None): directory searched for a config file. Defaults to the cwd.

    Raises:
        ConfigFileError: if an explicit config file is missing or a config file is malformed

    Returns:
        Settings: the validated settings
    """
    merged: dict[str, Any] = {
        "cost_table": {name: pricing.model_dump() for name, pricing in DEFAULT_COST_TABLE.items()},
        "language_map": dict(LANGUAGE_MAP),
    }

    path: Path | None
    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigFileError(path=path, reason="file not found")
    else:
        path = find_config_file(search_dir or Path.cwd())
    if path is not None:
        merged = deep_merge(merged, read_config_file(path))
        logger.info("config_file_loaded", path=str(path))

    merged = deep_merge(merged, env_overrides(read_environment() if env is None else env))
    if overrides:
        merged = deep_merge(merged, dict(overrides))
    return Settings.model_validate(merged)
