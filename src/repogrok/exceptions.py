from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RepogrokError(Exception):
    """Base exception for errors in the repogrok package."""


@dataclass(frozen=True)
class InvalidBudgetFormatError(RepogrokError):
    """Raised when a budget string is neither a number nor a k/m shorthand."""

    value: str
    message: str = 'Use a number like 128000, or shorthand like "128k" or "1m".'

    def __str__(self) -> str:
        return f'Invalid budget format: "{self.value}". {self.message}'


@dataclass(frozen=True)
class UnknownPromptTemplateError(RepogrokError):
    """Raised when a prompt template name is not registered."""

    name: str
    available: tuple[str, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        return f'Unknown prompt template: "{self.name}". Available: {", ".join(self.available)}'


@dataclass(frozen=True)
class ConfigFileError(RepogrokError):
    """Raised when a configuration file cannot be parsed or has the wrong shape."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Invalid configuration file {self.path}: {self.reason}"
