"""
Configuration models and fixed lookup tables for code-bundler.

The language vocabulary, extension map, and excluded directory list are built once at
import time and never change.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .errors import InvalidConfigError

ALL_LANGUAGES = "all"

# Default bundle name, created in the current directory
DEFAULT_OUTPUT_NAME = "bundle_output.txt"

# Language detection by extension (one extension per language)
EXTENSION_TO_LANGUAGE: Mapping[str, str] = MappingProxyType(
    {
        ".cs": "csharp",
        ".java": "java",
        ".py": "python",
        ".js": "javascript",
        ".ts": "typescript",
        ".php": "php",
        ".cpp": "cpp",
        ".go": "go",
        ".rb": "ruby",
        ".html": "html",
        ".css": "css",
    }
)

SUPPORTED_LANGUAGES: frozenset[str] = frozenset(EXTENSION_TO_LANGUAGE.values())

# Directory-name fragments; a file whose directory contains any of these is skipped
EXCLUDED_DIRECTORIES: tuple[str, ...] = ("bin", "debug", "node_modules", "properties")

_TOKEN_SEPARATOR = re.compile(r"[,\s]+")


class SortMode(str, Enum):
    """Ordering applied to the selected files."""

    NAME = "name"
    TYPE = "type"


@dataclass(frozen=True)
class BundleConfig:
    """Validated settings for one bundling run.

    Attributes:
        languages: Lowercase language identifiers, possibly including `all`.
        sort_mode: Ordering of the selected files.
        remove_empty_lines: Drop blank and whitespace-only lines from each file.
        include_path_note: Add the full source path to each file header.
        author: Author name written before every file header, if non-blank.
        output_path: Bundle destination; None means `bundle_output.txt` in the cwd.
    """

    languages: frozenset[str]
    sort_mode: SortMode = SortMode.NAME
    remove_empty_lines: bool = False
    include_path_note: bool = False
    author: str | None = None
    output_path: Path | None = None

    @property
    def includes_all(self) -> bool:
        return ALL_LANGUAGES in self.languages

    @property
    def has_author(self) -> bool:
        return bool(self.author and self.author.strip())


@dataclass
class SelectionStats:
    """Statistics from one selection pass.

    Attributes:
        files_scanned: Candidate paths examined.
        files_included: Paths kept after filtering.
        files_skipped_directory: Paths rejected by the excluded-directory rule.
        files_skipped_extension: Paths rejected for an unknown or unrequested extension.
        languages_detected: Counts of recognized languages among included files.
    """

    files_scanned: int = 0
    files_included: int = 0
    files_skipped_directory: int = 0
    files_skipped_extension: int = 0
    languages_detected: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary; language counts are sorted for stable output."""
        return {
            "files_included": self.files_included,
            "files_scanned": self.files_scanned,
            "files_skipped": {
                "directory": self.files_skipped_directory,
                "extension": self.files_skipped_extension,
            },
            "languages_detected": dict(
                sorted(self.languages_detected.items(), key=lambda x: (-x[1], x[0]))
            ),
        }


@dataclass(frozen=True)
class BundleSummary:
    """Result of a successful bundling run."""

    output_path: Path
    files_written: int
    lines_written: int = 0


def get_language(extension: str) -> str | None:
    """Get the language identifier for a file extension.

    Args:
        extension: Extension including the leading dot, any case.

    Returns:
        The language identifier, or None if the extension is not recognized.
    """
    return EXTENSION_TO_LANGUAGE.get(extension.lower())


def get_extension(path: Path) -> str:
    """Return the extension of a file name, from its last dot.

    Unlike `Path.suffix`, a dot-file such as `.gitignore` is its own extension. A name
    ending in a dot has none.
    """
    name = path.name
    index = name.rfind(".")
    if index == -1 or index == len(name) - 1:
        return ""
    return name[index:]


def split_language_tokens(values: Iterable[str]) -> list[str]:
    """Split raw language values on commas and whitespace, lowercasing each token."""
    tokens: list[str] = []
    for value in values:
        tokens.extend(t.lower() for t in _TOKEN_SEPARATOR.split(str(value)) if t)
    return tokens


def parse_languages(values: Iterable[str]) -> frozenset[str]:
    """Validate language input and return it as a language set.

    Args:
        values: Raw values, each holding one or more tokens.

    Returns:
        Frozen set of lowercase identifiers.

    Raises:
        InvalidConfigError: If no language is given or any token is outside the vocabulary.
    """
    tokens = split_language_tokens(values)
    if not tokens:
        raise InvalidConfigError("At least one language must be specified.")

    invalid = sorted({t for t in tokens if t != ALL_LANGUAGES and t not in SUPPORTED_LANGUAGES})
    if invalid:
        supported = ", ".join([*sorted(SUPPORTED_LANGUAGES), ALL_LANGUAGES])
        raise InvalidConfigError(
            f"Invalid language input: {', '.join(invalid)}. Supported values: {supported}."
        )
    return frozenset(tokens)


def parse_sort_mode(value: str | SortMode | None) -> SortMode:
    """Validate a sort option; blank means the default name ordering.

    Raises:
        InvalidConfigError: If the value is neither 'name' nor 'type'.
    """
    if isinstance(value, SortMode):
        return value
    if value is None or not value.strip():
        return SortMode.NAME
    try:
        return SortMode(value.strip().lower())
    except ValueError:
        raise InvalidConfigError(
            f"Invalid sort option '{value}'. Use 'name' or 'type'."
        ) from None


def validate_output_path(value: str | Path | None) -> Path | None:
    """Check the shape of an output path: non-blank and carrying a file extension.

    Raises:
        InvalidConfigError: If the path is blank or has no extension.
    """
    if value is None:
        return None
    text = str(value)
    if not text.strip() or not get_extension(Path(text)):
        raise InvalidConfigError(f"Invalid output file path: '{text}'")
    return Path(text)


def build_config(
    languages: Iterable[str],
    sort: str | SortMode | None = None,
    remove_empty_lines: bool = False,
    note: bool = False,
    author: str | None = None,
    output: str | Path | None = None,
) -> BundleConfig:
    """Validate raw settings and freeze them into a `BundleConfig`.

    Raises:
        InvalidConfigError: If any setting fails validation.
    """
    return BundleConfig(
        languages=parse_languages(languages),
        sort_mode=parse_sort_mode(sort),
        remove_empty_lines=remove_empty_lines,
        include_path_note=note,
        author=author if author and author.strip() else None,
        output_path=validate_output_path(output),
    )
