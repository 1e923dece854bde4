"""
Bundle writer for code-bundler.

Reads the selected files in order, filters and annotates their lines, and writes them
into a single output file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_OUTPUT_NAME, BundleConfig, BundleSummary
from .errors import BundleError, OverwriteDeclinedError, translate_os_error
from .utils import is_blank, read_text_lines


def resolve_output_path(config: BundleConfig, cwd: Optional[Path] = None) -> Path:
    """Resolve where the bundle is written.

    Args:
        config: Bundle configuration.
        cwd: Base directory for relative paths and the default name (defaults to the cwd).

    Returns:
        Absolute output path.
    """
    base = cwd if cwd is not None else Path.cwd()
    target = config.output_path if config.output_path is not None else Path(DEFAULT_OUTPUT_NAME)
    if not target.is_absolute():
        target = base / target
    return target.resolve()


def output_exists(path: Path) -> bool:
    """Return True if something already exists at the output path."""
    return path.exists()


def prepare_output(
    config: BundleConfig,
    confirm: Callable[[Path], bool],
    cwd: Optional[Path] = None,
) -> Path:
    """Resolve the output path and obtain overwrite consent if it exists.

    Args:
        config: Bundle configuration.
        confirm: Called with the path when it already exists; returns the decision.
        cwd: Base directory (defaults to the cwd).

    Returns:
        The resolved output path, safe to truncate.

    Raises:
        OverwriteDeclinedError: If the file exists and `confirm` returns False.
    """
    path = resolve_output_path(config, cwd)
    if output_exists(path) and not confirm(path):
        raise OverwriteDeclinedError(path)
    return path


def remove_empty_lines(lines: Iterable[str]) -> list[str]:
    """Drop empty and whitespace-only lines, keeping the order of the rest."""
    return [line for line in lines if not is_blank(line)]


def render_header(file_path: Path, config: BundleConfig) -> list[str]:
    """Build the header lines written before a file's content.

    The author block is repeated for every file, not written once per bundle.
    """
    header = []
    if config.has_author:
        header.append(f"// Author: {config.author}")
        header.append("")
    if config.include_path_note:
        header.append(f"// File: {file_path.name} - Path: {file_path}")
    else:
        header.append(f"// File: {file_path.name}")
    return header


def render_file(file_path: Path, config: BundleConfig) -> tuple[str, int]:
    """Read one file and render its bundle section.

    Returns:
        Tuple of (section text using LF endings, number of content lines).
    """
    lines = read_text_lines(file_path)
    if config.remove_empty_lines:
        lines = remove_empty_lines(lines)

    section = render_header(file_path, config)
    section.append("\n".join(lines))
    section.append("")
    return "\n".join(section) + "\n", len(lines)


def bundle_files(
    paths: Iterable[Path],
    config: BundleConfig,
    output_path: Optional[Path] = None,
    console: Optional[Console] = None,
) -> BundleSummary:
    """Write the given files, in order, into one bundle.

    The output is opened for truncating write; callers are responsible for any
    overwrite confirmation. On failure the output keeps whatever was already written.

    Args:
        paths: Files to bundle, already ordered.
        config: Bundle configuration.
        output_path: Destination; resolved from `config` when omitted.
        console: Console for per-file trace lines.

    Returns:
        BundleSummary with the output path and counts.

    Raises:
        DirectoryNotFoundError: If a source or the output directory is missing.
        AccessDeniedError: If a source cannot be read or the output cannot be written.
        UnexpectedBundleError: For any other failure.
    """
    if output_path is None:
        output_path = resolve_output_path(config)

    files_written = 0
    lines_written = 0
    current = output_path

    try:
        # Text mode translates "\n" to the platform line separator
        with open(output_path, "w", encoding="utf-8") as writer:
            for file_path in paths:
                current = Path(file_path)
                section, line_count = render_file(current, config)
                writer.write(section)
                files_written += 1
                lines_written += line_count
                if console is not None:
                    console.print(f"[dim]Added {escape(current.name)} ({line_count} lines)[/dim]")
    except BundleError:
        raise
    except Exception as e:
        raise translate_os_error(e, current) from e

    return BundleSummary(
        output_path=output_path,
        files_written=files_written,
        lines_written=lines_written,
    )
