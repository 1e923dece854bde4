"""
Configuration file loader for code-bundler.

Supports loading per-directory defaults from:
- fib.toml / .fib.toml
- fib.yml / .fib.yml / fib.yaml / .fib.yaml

CLI flags override config file values.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import BundleConfig, build_config
from .errors import ConfigFileError

# Optional runtime modules (loaded via importlib); typed as Any to avoid stub issues.
tomllib: Any | None
yaml: Any | None

# Optional imports for config file parsing
try:
    import tomllib as _tomllib  # Python 3.11+
except ImportError:
    try:
        _tomllib = importlib.import_module("tomli")
    except ImportError:
        _tomllib = None
tomllib = _tomllib

try:
    yaml = importlib.import_module("yaml")
except ImportError:
    yaml = None


# Config file search order (first found wins)
CONFIG_FILE_NAMES = [
    "fib.toml",
    ".fib.toml",
    "fib.yml",
    ".fib.yml",
    "fib.yaml",
    ".fib.yaml",
]

# Section name for nested config
CONFIG_SECTION = "fib"


@dataclass
class ProjectConfig:
    """
    Directory-level defaults loaded from a config file.

    All fields are optional - CLI flags will override any values set here.
    """

    languages: list[str] | None = None
    output: Path | None = None
    note: bool | None = None
    sort: str | None = None
    remove_empty_lines: bool | None = None
    author: str | None = None

    # Source file path (for debugging)
    _config_file: Path | None = field(default=None, repr=False)

    @property
    def config_file(self) -> Path | None:
        return self._config_file

    def to_dict(self) -> dict[str, Any]:
        """Convert set values to a dictionary with sorted keys."""
        result: dict[str, Any] = {}

        if self.languages is not None:
            result["language"] = list(self.languages)
        if self.output is not None:
            result["output"] = str(self.output)
        if self.note is not None:
            result["note"] = self.note
        if self.sort is not None:
            result["sort"] = self.sort
        if self.remove_empty_lines is not None:
            result["remove_empty_lines"] = self.remove_empty_lines
        if self.author is not None:
            result["author"] = self.author
        if self._config_file is not None:
            result["_loaded_from"] = str(self._config_file)

        return dict(sorted(result.items()))


def find_config_file(directory: Path) -> Path | None:
    """
    Find a configuration file in a directory.

    Args:
        directory: Directory to search

    Returns:
        Path to the config file, or None if not found
    """
    for name in CONFIG_FILE_NAMES:
        config_path = directory / name
        if config_path.exists() and config_path.is_file():
            return config_path
    return None


def _unwrap_section(data: dict[str, Any]) -> dict[str, Any]:
    # Support both flat and nested [fib] section
    if CONFIG_SECTION in data and isinstance(data[CONFIG_SECTION], dict):
        return dict(data[CONFIG_SECTION])
    return data


def _parse_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML config file into a dict.

    Raises:
        ImportError: If TOML parsing support is unavailable.
    """
    if tomllib is None:
        raise ImportError(
            "TOML support requires 'tomli' package (Python < 3.11) or Python 3.11+. "
            "Install with: pip install tomli"
        )

    with open(path, "rb") as f:
        data: dict[str, Any] = tomllib.load(f)

    return _unwrap_section(data)


def _parse_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML config file into a dict.

    Raises:
        ImportError: If PyYAML is not installed.
    """
    if yaml is None:
        raise ImportError(
            "YAML support requires 'pyyaml' package. Install with: pip install pyyaml"
        )

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f)

    if not isinstance(raw_data, dict):
        return {}

    return _unwrap_section(dict(raw_data))


def _normalize_languages(languages: Any) -> list[str] | None:
    """Normalize language input (string or list) to a list of raw values."""
    if languages is None:
        return None

    if isinstance(languages, str):
        languages = [languages]

    if not isinstance(languages, (list, tuple, set)):
        return None

    result = [str(lang).strip() for lang in languages if str(lang).strip()]
    return result if result else None


def _read_bool(data: dict[str, Any], key: str, config_path: Path) -> bool:
    """Return a boolean setting, rejecting strings such as "false" that only look like one."""
    value = data[key]
    if not isinstance(value, bool):
        raise ConfigFileError(
            f"Invalid value for '{key}' in {config_path}: expected true or false, got {value!r}"
        )
    return value


def load_config(directory: Path, config_path: Path | None = None) -> ProjectConfig:
    """
    Load defaults from a config file.

    Args:
        directory: Directory searched for a config file
        config_path: Explicit path to config file (optional)

    Returns:
        ProjectConfig with loaded values (unset values remain None).

    Raises:
        ConfigFileError: If the config file exists but cannot be parsed.
    """
    if config_path is None:
        config_path = find_config_file(directory)

    if config_path is None or not config_path.exists():
        return ProjectConfig()

    suffix = config_path.suffix.lower()
    try:
        if suffix == ".toml":
            data = _parse_toml(config_path)
        elif suffix in (".yml", ".yaml"):
            data = _parse_yaml(config_path)
        else:
            raise ConfigFileError(f"Unsupported config file type: {config_path}")
    except ConfigFileError:
        raise
    except Exception as e:
        raise ConfigFileError(f"Failed to parse config file {config_path}: {e}") from e

    config = ProjectConfig(_config_file=config_path)

    config.languages = _normalize_languages(data.get("language") or data.get("languages"))

    if "output" in data:
        config.output = Path(str(data["output"]))
    if "note" in data:
        config.note = _read_bool(data, "note", config_path)
    if "sort" in data:
        config.sort = str(data["sort"]).lower()
    if "remove_empty_lines" in data:
        config.remove_empty_lines = _read_bool(data, "remove_empty_lines", config_path)
    if "author" in data:
        config.author = str(data["author"])

    return config


def merge_cli_with_config(
    config: ProjectConfig,
    *,
    # CLI arguments (None means not specified on CLI)
    languages: list[str] | None = None,
    output: Path | None = None,
    note: bool = False,
    sort: str | None = None,
    remove_empty_lines: bool = False,
    author: str | None = None,
) -> BundleConfig:
    """Merge CLI arguments with config file values (CLI wins) and validate the result.

    Boolean flags can only switch a setting on from the CLI; a config file value of
    True is kept when the flag is absent.

    Args:
        config: Config loaded from file (may have unset values).
        languages: Raw `--language` values (optional).
        output: `--output` path (optional).
        note: `--note` flag.
        sort: `--sort` value (optional).
        remove_empty_lines: `--remove-empty-lines` flag.
        author: `--author` value (optional).

    Returns:
        The validated BundleConfig.

    Raises:
        InvalidConfigError: If the merged values fail validation.
    """
    return build_config(
        languages=languages if languages else (config.languages or []),
        sort=sort if sort is not None else config.sort,
        remove_empty_lines=remove_empty_lines or bool(config.remove_empty_lines),
        note=note or bool(config.note),
        author=author if author is not None else config.author,
        output=output if output is not None else config.output,
    )
